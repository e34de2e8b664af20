"""Data models supporting the ladder solver."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .constants import AttemptOutcome, ErrorCode


@dataclass(frozen=True)
class RawCandidate:
    """Untrusted word proposal straight from a candidate generator."""

    word: str
    justification: str = ""


@dataclass
class ClueCandidates:
    clue: str
    candidates: List[RawCandidate] = field(default_factory=list)


@dataclass
class CandidateResponse:
    """Generator output: one entry per requested clue, in request order."""

    word_length: int
    items: List[ClueCandidates] = field(default_factory=list)

    def all_words(self) -> List[str]:
        return [raw.word for item in self.items for raw in item.candidates]


@dataclass(frozen=True)
class Candidate:
    """A validated word proposal for a slot."""

    word: str
    justification: str


@dataclass
class Slot:
    """One clue position requiring exactly one word in the final ladder."""

    index: int
    clue: str
    word_length: int
    candidates: List[Candidate] = field(default_factory=list)


@dataclass(frozen=True)
class Violation:
    """Diagnostic produced while validating one clue's candidates."""

    clue_index: int
    reason: str


@dataclass(frozen=True)
class ChainLink:
    word: str
    slot_index: int
    clue: str
    justification: str


@dataclass
class Chain:
    """Ordered ladder of words, one per slot."""

    links: List[ChainLink] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.links)

    @property
    def ladder(self) -> List[str]:
        return [link.word for link in self.links]

    @property
    def pairs(self) -> List[Dict[str, str]]:
        return [
            {"word": link.word, "clue": link.clue, "reasoning": link.justification}
            for link in self.links
        ]

    def to_jsonable(self) -> Dict[str, Any]:
        return {"ladder": self.ladder, "pairs": self.pairs}


@dataclass
class Attempt:
    """Record of one candidate-generation plus search round."""

    number: int
    outcome: AttemptOutcome
    chain: Optional[Chain] = None
    reason: str = ""
    error_code: Optional[ErrorCode] = None
    solver: Optional[str] = None
    candidate_counts: List[int] = field(default_factory=list)
    violations: List[Violation] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.outcome == AttemptOutcome.SUCCESS
