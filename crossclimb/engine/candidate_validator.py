"""Normalization and filtering of raw generator candidates."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Sequence

from ..core.constants import (CANDIDATES_MAX, CANDIDATES_MIN, DEFAULT_MIN_VIABLE_CANDIDATES,
                              REASON_MAX_LENGTH)
from ..core.exceptions import SchemaMismatchError
from ..core.models import Candidate, CandidateResponse, RawCandidate, Slot, Violation
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


@dataclass
class ValidatedCandidates:
    slots: List[Slot]
    violations: List[Violation] = field(default_factory=list)

    @property
    def candidate_counts(self) -> List[int]:
        return [len(slot.candidates) for slot in self.slots]


class CandidateValidator:
    """Turns an untrusted :class:`CandidateResponse` into per-slot candidates.

    Only word-level rules are enforced here: exact length, letters A-Z, a
    non-empty justification and uniqueness within a slot. Cross-slot
    uniqueness belongs to the chain. Thin slots are reported as violations,
    never rejected.
    """

    def __init__(self, min_viable: int = DEFAULT_MIN_VIABLE_CANDIDATES) -> None:
        self.min_viable = min_viable

    def validate(
        self,
        response: CandidateResponse,
        word_length: int,
        clues: Sequence[str],
    ) -> ValidatedCandidates:
        if response.word_length != word_length:
            raise SchemaMismatchError(
                f"wordLength mismatch: expected {word_length}, got {response.word_length}"
            )
        if len(response.items) != len(clues):
            raise SchemaMismatchError(
                f"Items count mismatch: expected {len(clues)}, got {len(response.items)}"
            )

        violations = self._check_schema(response)
        slots: List[Slot] = []
        for index, (clue, item) in enumerate(zip(clues, response.items)):
            candidates = self.clean_candidates(item.candidates, word_length)
            if len(candidates) < self.min_viable:
                violations.append(
                    Violation(
                        clue_index=index,
                        reason=(
                            f"Only {len(candidates)} valid candidates after filtering "
                            f"(minimum {self.min_viable})"
                        ),
                    )
                )
            slots.append(Slot(index=index, clue=clue, word_length=word_length, candidates=candidates))

        for violation in violations:
            LOGGER.debug("Candidate violation [%s]: %s", violation.clue_index, violation.reason)
        return ValidatedCandidates(slots=slots, violations=violations)

    def clean_candidates(self, raw: Sequence[RawCandidate], word_length: int) -> List[Candidate]:
        """Normalize, filter and de-duplicate one slot's candidates."""

        pattern = word_pattern(word_length)
        seen: set[str] = set()
        cleaned: List[Candidate] = []
        for entry in raw:
            word = (entry.word or "").strip().upper()
            justification = (entry.justification or "").strip()
            if not pattern.match(word) or not justification:
                LOGGER.debug("Rejected candidate %r (length=%d)", entry.word, word_length)
                continue
            if word in seen:
                continue
            seen.add(word)
            cleaned.append(Candidate(word=word, justification=justification))
        return cleaned

    @staticmethod
    def _check_schema(response: CandidateResponse) -> List[Violation]:
        violations: List[Violation] = []
        for index, item in enumerate(response.items):
            count = len(item.candidates)
            if count < CANDIDATES_MIN:
                violations.append(
                    Violation(index, f"Too few candidates: {count} (minimum {CANDIDATES_MIN})")
                )
            elif count > CANDIDATES_MAX:
                violations.append(
                    Violation(index, f"Too many candidates: {count} (maximum {CANDIDATES_MAX})")
                )
            for raw in item.candidates:
                if len(raw.justification or "") > REASON_MAX_LENGTH:
                    violations.append(
                        Violation(
                            index,
                            f"Reason too long: {len(raw.justification)} chars "
                            f"(max {REASON_MAX_LENGTH})",
                        )
                    )
        return violations


def word_pattern(word_length: int) -> "re.Pattern[str]":
    return re.compile(rf"^[A-Z]{{{word_length}}}$")


def is_valid_word(word: str, word_length: int) -> bool:
    return bool(word_pattern(word_length).match(word.strip().upper()))
