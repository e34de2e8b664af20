"""Custom exception hierarchy for ladder solving."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence

from .constants import ErrorCode

if TYPE_CHECKING:
    from .models import Attempt, Chain


class LadderError(Exception):
    """Base exception for solver failures."""

    code: ErrorCode = ErrorCode.INVALID_CHAIN
    retryable: bool = False

    def to_jsonable(self) -> Dict[str, Any]:
        return {
            "status": "error",
            "code": self.code.value,
            "message": str(self),
            "retryable": self.retryable,
        }


class MalformedInputError(LadderError):
    """Raised when the solve request itself is invalid."""

    code = ErrorCode.MALFORMED_INPUT


class LengthMismatchError(LadderError, ValueError):
    """Raised when two words of different lengths are compared."""

    code = ErrorCode.LENGTH_MISMATCH


class LadderSearchError(LadderError):
    """Raised when a search over the candidates cannot produce a ladder."""

    code = ErrorCode.SEARCH_FAILED


class CandidateExhaustedError(LadderSearchError):
    """Raised when a slot has no usable candidates."""

    code = ErrorCode.CANDIDATE_EXHAUSTED

    def __init__(self, slot_index: int, clue: str = "") -> None:
        self.slot_index = slot_index
        self.clue = clue
        super().__init__(f"No valid candidates for clue at index {slot_index}: '{clue}'")


class NoValidAssignmentError(LadderSearchError):
    """Raised when no choice of one candidate per slot forms a ladder."""

    code = ErrorCode.NO_VALID_ASSIGNMENT

    def __init__(self, candidate_counts: Sequence[int]) -> None:
        self.candidate_counts = list(candidate_counts)
        super().__init__(
            "Could not construct a ladder where each adjacent pair differs by exactly "
            f"one letter (candidates per clue: {self.candidate_counts})"
        )


class NoValidOrderingError(LadderSearchError):
    """Raised when the chosen words cannot be arranged into a ladder."""

    code = ErrorCode.NO_VALID_ORDERING


class SearchBudgetExceededError(LadderSearchError):
    """Raised when a search visits more nodes than allowed."""

    code = ErrorCode.SEARCH_BUDGET_EXCEEDED

    def __init__(self, budget: float, message: Optional[str] = None) -> None:
        self.budget = budget
        super().__init__(message or f"Search exceeded its budget of {budget} visited nodes")


class SchemaMismatchError(LadderError):
    """Raised when a generator response does not match the request shape."""

    code = ErrorCode.SCHEMA_MISMATCH


class UpstreamUnavailableError(LadderError):
    """Raised when the candidate generator cannot be reached."""

    code = ErrorCode.UPSTREAM_UNAVAILABLE
    retryable = True

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class InvalidChainError(LadderError):
    """Raised when a produced chain fails structural validation."""

    code = ErrorCode.INVALID_CHAIN


class AttemptsExhaustedError(LadderError):
    """Raised when every orchestrator attempt failed.

    ``last_chain`` holds the last chain produced (possibly invalid) and
    ``attempts`` the per-attempt diagnostics.
    """

    code = ErrorCode.ATTEMPTS_EXHAUSTED

    def __init__(self, attempts: List["Attempt"], last_chain: Optional["Chain"] = None) -> None:
        self.attempts = attempts
        self.last_chain = last_chain
        super().__init__(f"Failed to build a valid ladder after {len(attempts)} attempts")

    def to_jsonable(self) -> Dict[str, Any]:
        payload = super().to_jsonable()
        payload["attempts"] = [
            {
                "number": attempt.number,
                "outcome": attempt.outcome.value,
                "code": attempt.error_code.value if attempt.error_code else None,
                "reason": attempt.reason,
            }
            for attempt in self.attempts
        ]
        return payload


class NoEndCandidateError(LadderError):
    """Raised when no end word adjacent to the neighbour could be found."""

    code = ErrorCode.NO_END_CANDIDATE

    def __init__(self, neighbor_word: str, attempts: int, previously_tried: Sequence[str]) -> None:
        self.neighbor_word = neighbor_word
        self.attempts = attempts
        self.previously_tried = sorted(previously_tried)
        super().__init__(
            f"No candidate with Hamming distance 1 to '{neighbor_word}' after {attempts} attempts"
        )
