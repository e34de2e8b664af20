"""Candidate generation interfaces."""

from __future__ import annotations

import json
import random
import string
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Sequence, Tuple

from ..core.constants import CANDIDATES_MAX, CANDIDATES_MIN, REASON_MAX_LENGTH
from ..core.exceptions import SchemaMismatchError
from ..core.models import CandidateResponse, ClueCandidates, RawCandidate
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


class CandidateGenerator(Protocol):
    """Protocol implemented by all candidate providers.

    Implementations return one item per clue, in request order, and raise
    ``UpstreamUnavailableError`` for transport failures and
    ``SchemaMismatchError`` for a present but unusable response.
    """

    def generate(
        self,
        word_length: int,
        clues: Sequence[str],
        excluded_words: Optional[Iterable[str]] = None,
    ) -> CandidateResponse:
        ...


class TextClient(Protocol):
    def generate_text(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: float = 0.7,
    ) -> str:
        ...


class LLMCandidateGenerator:
    """Asks a text-completion model for 3-6 candidates per clue as strict JSON."""

    SYSTEM_PROMPT = (
        "You are a careful word-clue solver. Return ONLY strict JSON that follows the "
        "provided JSON schema. Do not add prose or markdown. All candidate words MUST be "
        "UPPERCASE ASCII A-Z only and have the exact requested length. Provide "
        f"{CANDIDATES_MIN}-{CANDIDATES_MAX} candidates per clue. No duplicates within a clue. "
        f"Keep each \"reason\" under {REASON_MAX_LENGTH} characters and specific to the clue. "
        "Prefer common words over obscure terms."
    )

    USER_PROMPT = (
        "WORD_LENGTH = {word_length}\n"
        "CLUES = {clues}\n\n"
        "Generate candidate words following these rules:\n"
        "- All words must be UPPERCASE ASCII A-Z only\n"
        "- Each word must be exactly {word_length} characters long\n"
        "- Provide {minimum}-{maximum} candidates per clue\n"
        "- No duplicates within a clue's candidates\n"
        "- Keep reasons under {reason_max} characters and specific to the clue\n"
        "- Prefer common, contemporary vocabulary\n"
        "{exclusion_line}\n"
        "Return ONLY JSON matching this exact schema:\n"
        "{schema}\n\n"
        "Populate \"wordLength\" with {word_length} and \"items\" with one object per clue, "
        "in the same order, each holding the original clue text and its candidates."
    )

    EXCLUSION_LINE = (
        "- Do NOT output any of these previously rejected words; produce new ones instead: {words}\n"
    )

    def __init__(self, client: TextClient, temperature: float = 0.7) -> None:
        self._client = client
        self.temperature = temperature

    def generate(
        self,
        word_length: int,
        clues: Sequence[str],
        excluded_words: Optional[Iterable[str]] = None,
    ) -> CandidateResponse:
        prompt = self._render_prompt(word_length, clues, excluded_words)
        text = self._client.generate_text(
            prompt, system_prompt=self.SYSTEM_PROMPT, temperature=self.temperature
        )
        LOGGER.debug("Raw candidate response: %s", text)
        return parse_candidate_response(text, word_length)

    @classmethod
    def _render_prompt(
        cls,
        word_length: int,
        clues: Sequence[str],
        excluded_words: Optional[Iterable[str]] = None,
    ) -> str:
        excluded = sorted(set(excluded_words or ()))
        exclusion_line = cls.EXCLUSION_LINE.format(words=", ".join(excluded)) if excluded else ""
        return cls.USER_PROMPT.format(
            word_length=word_length,
            clues=json.dumps(list(clues), ensure_ascii=False),
            minimum=CANDIDATES_MIN,
            maximum=CANDIDATES_MAX,
            reason_max=REASON_MAX_LENGTH,
            exclusion_line=exclusion_line,
            schema=json.dumps(response_schema(word_length), indent=2),
        )


def response_schema(word_length: int) -> Dict[str, Any]:
    """JSON schema the model is asked to follow."""

    candidate = {
        "type": "object",
        "properties": {
            "word": {"type": "string", "pattern": f"^[A-Z]{{{word_length}}}$"},
            "reason": {"type": "string", "maxLength": REASON_MAX_LENGTH},
        },
        "required": ["word", "reason"],
        "additionalProperties": False,
    }
    item = {
        "type": "object",
        "properties": {
            "clue": {"type": "string"},
            "candidates": {
                "type": "array",
                "minItems": CANDIDATES_MIN,
                "maxItems": CANDIDATES_MAX,
                "items": candidate,
            },
        },
        "required": ["clue", "candidates"],
        "additionalProperties": False,
    }
    return {
        "type": "object",
        "properties": {
            "wordLength": {"type": "integer"},
            "items": {"type": "array", "items": item},
        },
        "required": ["wordLength", "items"],
        "additionalProperties": False,
    }


def parse_candidate_response(text: str, word_length: int) -> CandidateResponse:
    """Parse model output into a :class:`CandidateResponse`.

    Markdown fences and prose around the JSON are tolerated. A bare list of
    items is accepted and assumed to use ``word_length``.
    """

    if not text or not text.strip():
        raise SchemaMismatchError("Empty candidate response")
    stripped = _strip_fences(text)
    try:
        data = json.loads(stripped)
    except json.JSONDecodeError:
        data = _extract_json(stripped)

    if isinstance(data, list):
        data = {"wordLength": word_length, "items": data}
    if not isinstance(data, dict) or not isinstance(data.get("items"), list):
        raise SchemaMismatchError("Candidate response is missing an 'items' array")

    try:
        response_length = int(data.get("wordLength", word_length))
    except (TypeError, ValueError) as exc:
        raise SchemaMismatchError(f"Invalid wordLength: {data.get('wordLength')!r}") from exc

    items: List[ClueCandidates] = []
    for entry in data["items"]:
        if not isinstance(entry, dict):
            raise SchemaMismatchError(f"Candidate item is not an object: {entry!r}")
        raw: List[RawCandidate] = []
        for candidate in entry.get("candidates") or []:
            if not isinstance(candidate, dict):
                continue
            word = candidate.get("word")
            reason = candidate.get("reason", candidate.get("reasoning", ""))
            if isinstance(word, str):
                raw.append(RawCandidate(word=word, justification=reason if isinstance(reason, str) else ""))
        items.append(ClueCandidates(clue=str(entry.get("clue", "")), candidates=raw))
    return CandidateResponse(word_length=response_length, items=items)


def _strip_fences(text: str) -> str:
    stripped = text.strip()
    if stripped.startswith("```"):
        lines = stripped.splitlines()
        inner = "\n".join(lines[1:-1] if lines[-1].strip().startswith("```") else lines[1:])
        stripped = inner.strip()
    return stripped


def _extract_json(text: str) -> Any:
    for opener, closer in (("{", "}"), ("[", "]")):
        start = text.find(opener)
        end = text.rfind(closer)
        if start >= 0 and end > start:
            try:
                return json.loads(text[start:end + 1])
            except json.JSONDecodeError:
                continue
    raise SchemaMismatchError("Candidate response is not valid JSON")


class StaticCandidateGenerator:
    """Serves a fixed set of candidates keyed by clue (case-insensitive).

    Useful offline and in tests; exclusion hints are ignored, so every round
    returns the same candidates.
    """

    def __init__(
        self,
        candidates: Mapping[str, Sequence[Tuple[str, str]]],
        word_length: Optional[int] = None,
    ) -> None:
        self._candidates: Dict[str, List[RawCandidate]] = {
            clue.casefold(): [RawCandidate(word=word, justification=reason) for word, reason in entries]
            for clue, entries in candidates.items()
        }
        self.word_length = word_length
        self.calls = 0

    def generate(
        self,
        word_length: int,
        clues: Sequence[str],
        excluded_words: Optional[Iterable[str]] = None,
    ) -> CandidateResponse:
        self.calls += 1
        items = [
            ClueCandidates(clue=clue, candidates=list(self._candidates.get(clue.casefold(), [])))
            for clue in clues
        ]
        return CandidateResponse(word_length=self.word_length or word_length, items=items)

    @classmethod
    def from_file(cls, path: Path | str) -> "StaticCandidateGenerator":
        """Load ``{"clue": [{"word": ..., "reason": ...}, ...]}`` from JSON."""

        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise SchemaMismatchError(f"Candidates file {path} is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise SchemaMismatchError(f"Candidates file {path} must hold a JSON object")

        candidates: Dict[str, List[Tuple[str, str]]] = {}
        for clue, entries in data.items():
            if not isinstance(entries, list):
                raise SchemaMismatchError(f"Candidates for clue '{clue}' must be a list")
            pairs = []
            for entry in entries:
                if not isinstance(entry, dict) or not isinstance(entry.get("word"), str):
                    raise SchemaMismatchError(
                        f"Candidate entry for clue '{clue}' needs a \"word\" string: {entry!r}"
                    )
                pairs.append((entry["word"], str(entry.get("reason", ""))))
            candidates[clue] = pairs
        return cls(candidates)


class RandomCandidateGenerator:
    """Produces synthetic filler words from an injected random source."""

    def __init__(self, rng: Optional[random.Random] = None, per_clue: int = 2) -> None:
        self.rng = rng or random.Random()
        self.per_clue = per_clue

    def random_word(self, length: int) -> str:
        return "".join(self.rng.choice(string.ascii_uppercase) for _ in range(length))

    def generate(
        self,
        word_length: int,
        clues: Sequence[str],
        excluded_words: Optional[Iterable[str]] = None,
    ) -> CandidateResponse:
        items = [
            ClueCandidates(
                clue=clue,
                candidates=[
                    RawCandidate(self.random_word(word_length), "Fallback synthetic candidate")
                    for _ in range(self.per_clue)
                ],
            )
            for clue in clues
        ]
        LOGGER.info("Random generator produced %d synthetic candidates", self.per_clue * len(clues))
        return CandidateResponse(word_length=word_length, items=items)
