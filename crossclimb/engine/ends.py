"""Solve a single ladder end given its clue and neighbouring rung."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Set

from ..core.constants import ENDS_MAX_ATTEMPTS
from ..core.exceptions import LadderError, MalformedInputError, NoEndCandidateError
from ..core.models import Candidate
from ..io.candidates import CandidateGenerator
from ..utils.logger import get_logger
from .adjacency import is_adjacent
from .candidate_validator import CandidateValidator


LOGGER = get_logger(__name__)

_CLUE_TOKEN = re.compile(r"[A-Za-z]+")


@dataclass
class EndsResult:
    clue: str
    answer: str
    reasoning: str
    neighbor_word: str
    hamming_distance: int = 1

    def to_jsonable(self):
        return {
            "clue": self.clue,
            "answer": self.answer,
            "reasoning": self.reasoning,
            "neighborWord": self.neighbor_word,
            "hammingDistance": self.hamming_distance,
        }


class EndsSolver:
    """Finds an answer for ``clue`` that differs from ``neighbor_word`` by one letter.

    Every round excludes words already tried and words that appear literally
    in the clue; the first adjacent candidate wins.
    """

    def __init__(
        self,
        generator: CandidateGenerator,
        max_attempts: int = ENDS_MAX_ATTEMPTS,
    ) -> None:
        self.generator = generator
        self.max_attempts = max_attempts
        self._cleaner = CandidateValidator()

    def solve(self, word_length: int, clue: str, neighbor_word: str) -> EndsResult:
        if word_length <= 0:
            raise MalformedInputError("wordLength must be > 0")
        if not neighbor_word or not neighbor_word.strip():
            raise MalformedInputError("neighborWord must be provided")
        neighbor = neighbor_word.strip().upper()
        if len(neighbor) != word_length:
            raise MalformedInputError("neighborWord length must match wordLength")
        if not clue or not clue.strip():
            raise MalformedInputError("clue must be provided")

        clue_words = {token.upper() for token in _CLUE_TOKEN.findall(clue)}
        tried: Set[str] = set()

        for attempt in range(1, self.max_attempts + 1):
            candidates = self._fresh_candidates(word_length, clue, tried, clue_words)
            tried.update(candidate.word for candidate in candidates)
            LOGGER.info(
                "Ends attempt %d/%d: %d new candidates (%d tried so far)",
                attempt, self.max_attempts, len(candidates), len(tried),
            )
            for candidate in candidates:
                if is_adjacent(candidate.word, neighbor):
                    LOGGER.info("Chosen end '%s' on attempt %d", candidate.word, attempt)
                    return EndsResult(
                        clue=clue,
                        answer=candidate.word,
                        reasoning=candidate.justification,
                        neighbor_word=neighbor,
                    )
            LOGGER.warning("Ends attempt %d produced no neighbour of %s", attempt, neighbor)

        raise NoEndCandidateError(neighbor, self.max_attempts, tried)

    def _fresh_candidates(
        self,
        word_length: int,
        clue: str,
        tried: Set[str],
        clue_words: Set[str],
    ) -> List[Candidate]:
        excluded: Optional[Set[str]] = set(tried) if tried else None
        try:
            response = self.generator.generate(word_length, [clue], excluded_words=excluded)
        except LadderError as exc:
            if exc.retryable:
                raise
            LOGGER.warning("Ends candidate round failed: %s", exc)
            return []
        raw = response.items[0].candidates if response.items else []
        cleaned = self._cleaner.clean_candidates(raw, word_length)
        return [
            candidate
            for candidate in cleaned
            if candidate.word not in tried and candidate.word not in clue_words
        ]
