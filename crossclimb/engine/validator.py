"""Deterministic validation of solve requests and produced ladders."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from ..core.constants import MAX_CLUE_LENGTH
from ..core.exceptions import InvalidChainError, MalformedInputError
from ..core.models import Chain
from ..utils.logger import get_logger
from .adjacency import hamming
from .candidate_validator import word_pattern


LOGGER = get_logger(__name__)


@dataclass
class ValidationResult:
    ok: bool
    messages: List[str]


class LadderValidator:
    """Runs deterministic validation over requests and final chains."""

    def __init__(self, max_clue_length: int = MAX_CLUE_LENGTH) -> None:
        self.max_clue_length = max_clue_length

    def validate_request(self, word_length: int, clues: Sequence[str]) -> None:
        if not isinstance(word_length, int) or isinstance(word_length, bool) or word_length <= 0:
            raise MalformedInputError("wordLength must be > 0")
        if not clues:
            raise MalformedInputError("At least one clue is required")
        for clue in clues:
            if not isinstance(clue, str) or not clue.strip():
                raise MalformedInputError("Each clue must be a non-empty string")
            if len(clue) > self.max_clue_length:
                raise MalformedInputError(
                    f"Each clue must have length <= {self.max_clue_length} characters"
                )

    def validate_chain(self, chain: Chain, clues: Sequence[str], word_length: int) -> ValidationResult:
        messages: List[str] = []
        try:
            self._check_counts(chain, clues)
            self._check_words(chain, word_length)
            self._check_adjacency(chain)
            self._check_unique(chain)
            self._check_pairs(chain, clues)
        except InvalidChainError as exc:
            messages.append(str(exc))
            LOGGER.warning("Ladder validation failed: %s", exc)
            return ValidationResult(ok=False, messages=messages)
        return ValidationResult(ok=True, messages=[])

    @staticmethod
    def _check_counts(chain: Chain, clues: Sequence[str]) -> None:
        if len(chain) != len(clues):
            raise InvalidChainError(
                f"Ladder length {len(chain)} must equal number of clues {len(clues)}"
            )

    @staticmethod
    def _check_words(chain: Chain, word_length: int) -> None:
        pattern = word_pattern(word_length)
        for word in chain.ladder:
            if not pattern.fullmatch(word):
                raise InvalidChainError(f"Invalid ladder word '{word}'")

    @staticmethod
    def _check_adjacency(chain: Chain) -> None:
        ladder = chain.ladder
        for first, second in zip(ladder, ladder[1:]):
            if hamming(first, second) != 1:
                raise InvalidChainError(
                    f"Adjacent words '{first}' and '{second}' must differ by exactly 1 letter"
                )

    @staticmethod
    def _check_unique(chain: Chain) -> None:
        ladder = chain.ladder
        if len(set(ladder)) != len(ladder):
            raise InvalidChainError("Duplicate words in ladder")

    @staticmethod
    def _check_pairs(chain: Chain, clues: Sequence[str]) -> None:
        remaining = [clue.casefold() for clue in clues]
        for link in chain.links:
            key = link.clue.casefold()
            if key not in remaining:
                raise InvalidChainError(f"Pair clue '{link.clue}' doesn't match an unused input clue")
            remaining.remove(key)
            if not link.justification.strip():
                raise InvalidChainError(f"Pair for '{link.word}' must include reasoning")
