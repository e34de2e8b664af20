"""Shared constants and enumerations for the ladder solver."""

from __future__ import annotations

from enum import Enum


DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_MIN_VIABLE_CANDIDATES = 3
DEFAULT_MAX_SEARCH_NODES = 200_000
MAX_CLUE_LENGTH = 140

CANDIDATES_MIN = 3
CANDIDATES_MAX = 6
REASON_MAX_LENGTH = 80

ENDS_MAX_ATTEMPTS = 15


class ErrorCode(str, Enum):
    """Stable error codes surfaced to callers."""

    MALFORMED_INPUT = "MALFORMED_INPUT"
    LENGTH_MISMATCH = "LENGTH_MISMATCH"
    CANDIDATE_EXHAUSTED = "CANDIDATE_EXHAUSTED"
    NO_VALID_ASSIGNMENT = "NO_VALID_ASSIGNMENT"
    NO_VALID_ORDERING = "NO_VALID_ORDERING"
    SEARCH_BUDGET_EXCEEDED = "SEARCH_BUDGET_EXCEEDED"
    SEARCH_FAILED = "SEARCH_FAILED"
    SCHEMA_MISMATCH = "SCHEMA_MISMATCH"
    UPSTREAM_UNAVAILABLE = "UPSTREAM_UNAVAILABLE"
    INVALID_CHAIN = "INVALID_CHAIN"
    ATTEMPTS_EXHAUSTED = "ATTEMPTS_EXHAUSTED"
    NO_END_CANDIDATE = "NO_END_CANDIDATE"


class SolverStrategy(str, Enum):
    """Ladder construction strategies."""

    SLOT_ORDER = "slot_order"
    REORDER = "reorder"
    CPSAT = "cpsat"


class AttemptOutcome(str, Enum):
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"


class OrchestratorState(str, Enum):
    """States of a single solve request."""

    ATTEMPTING = "ATTEMPTING"
    SUCCEEDED = "SUCCEEDED"
    EXHAUSTED = "EXHAUSTED"
