"""Retry orchestration for ladder solving.

Each attempt runs three phases:
  1. Candidate generation for every clue (external generator).
  2. Candidate validation, then ladder construction by the configured solvers.
  3. Structural validation of the chain; failures feed the next attempt.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Set, Tuple

from ..core.constants import (DEFAULT_MAX_ATTEMPTS, DEFAULT_MAX_SEARCH_NODES,
                              DEFAULT_MIN_VIABLE_CANDIDATES, MAX_CLUE_LENGTH, AttemptOutcome,
                              ErrorCode, OrchestratorState, SolverStrategy)
from ..core.exceptions import (AttemptsExhaustedError, InvalidChainError, LadderError,
                               LadderSearchError, UpstreamUnavailableError)
from ..core.models import Attempt, CandidateResponse, Chain, ChainLink, Slot
from ..io.candidates import CandidateGenerator, RandomCandidateGenerator
from ..utils.logger import get_logger
from .candidate_validator import CandidateValidator, ValidatedCandidates
from .solvers import LadderSolver, build_solvers
from .validator import LadderValidator


LOGGER = get_logger(__name__)


@dataclass
class LadderConfig:
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    min_viable_candidates: int = DEFAULT_MIN_VIABLE_CANDIDATES
    max_search_nodes: int = DEFAULT_MAX_SEARCH_NODES
    strategies: Tuple[SolverStrategy, ...] = (SolverStrategy.SLOT_ORDER,)
    max_clue_length: int = MAX_CLUE_LENGTH
    seed: Optional[int] = None

    @classmethod
    def algorithmic(cls, **overrides) -> "LadderConfig":
        """Single candidate round searched exhaustively by every strategy."""

        overrides.setdefault("max_attempts", 1)
        overrides.setdefault(
            "strategies",
            (SolverStrategy.SLOT_ORDER, SolverStrategy.REORDER),
        )
        return cls(**overrides)


@dataclass
class SolveResult:
    chain: Chain
    attempts: List[Attempt] = field(default_factory=list)
    state: OrchestratorState = OrchestratorState.SUCCEEDED

    def to_jsonable(self):
        return self.chain.to_jsonable()


class RetryOrchestrator:
    """High-level orchestrator: candidates, search and validation with retries."""

    def __init__(
        self,
        generator: CandidateGenerator,
        config: Optional[LadderConfig] = None,
        solvers: Optional[Sequence[LadderSolver]] = None,
    ) -> None:
        self.config = config or LadderConfig()
        if self.config.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.generator = generator
        self.solvers: List[LadderSolver] = list(
            solvers or build_solvers(self.config.strategies, self.config.max_search_nodes)
        )
        self.candidate_validator = CandidateValidator(self.config.min_viable_candidates)
        self.validator = LadderValidator(self.config.max_clue_length)
        self.filler = RandomCandidateGenerator(random.Random(self.config.seed))
        self.state = OrchestratorState.ATTEMPTING

    # ------------------------------------------------------------------
    # Public entrypoint
    # ------------------------------------------------------------------
    def solve(self, word_length: int, clues: Sequence[str]) -> SolveResult:
        self.validator.validate_request(word_length, clues)
        clues = list(clues)
        rejected: Set[str] = set()
        attempts: List[Attempt] = []
        last_chain: Optional[Chain] = None
        self.state = OrchestratorState.ATTEMPTING

        for number in range(1, self.config.max_attempts + 1):
            LOGGER.info("Ladder attempt %s/%s", number, self.config.max_attempts)
            attempt = self._run_attempt(number, word_length, clues, rejected)
            attempts.append(attempt)
            if attempt.chain is not None:
                last_chain = attempt.chain
            if attempt.succeeded:
                LOGGER.info(
                    "Ladder solved on attempt %s: %s", number, " -> ".join(attempt.chain.ladder)
                )
                self.state = OrchestratorState.SUCCEEDED
                return SolveResult(chain=attempt.chain, attempts=attempts)

            LOGGER.warning("Attempt %s failed: %s", number, attempt.reason)

        self.state = OrchestratorState.EXHAUSTED
        if attempts and all(a.error_code == ErrorCode.UPSTREAM_UNAVAILABLE for a in attempts):
            raise UpstreamUnavailableError(
                f"Candidate generator unavailable for all {len(attempts)} attempts"
            )
        raise AttemptsExhaustedError(attempts, last_chain)

    # ------------------------------------------------------------------
    # Single attempt
    # ------------------------------------------------------------------
    def _run_attempt(
        self,
        number: int,
        word_length: int,
        clues: List[str],
        rejected: Set[str],
    ) -> Attempt:
        hint = set(rejected) if number > 1 and rejected else None
        try:
            response = self.generator.generate(word_length, clues, excluded_words=hint)
        except LadderError as exc:
            # unreachable upstream or an unparseable response; nothing to reject
            return self._failure(number, exc)

        try:
            validated = self.candidate_validator.validate(response, word_length, clues)
        except LadderError as exc:
            self._reject(rejected, response)
            return self._failure(number, exc)

        chain, error, solver_name = self._search(validated.slots)
        if chain is None:
            self._reject(rejected, response)
            fallback = self._fallback_chain(validated.slots, word_length)
            return self._failure(number, error, validated, chain=fallback, solver=solver_name)

        result = self.validator.validate_chain(chain, clues, word_length)
        if not result.ok:
            self._reject(rejected, response)
            return self._failure(
                number, InvalidChainError("; ".join(result.messages)), validated,
                chain=chain, solver=solver_name,
            )

        return Attempt(
            number=number,
            outcome=AttemptOutcome.SUCCESS,
            chain=chain,
            reason=f"Solved by {solver_name}",
            solver=solver_name,
            candidate_counts=validated.candidate_counts,
            violations=validated.violations,
        )

    def _search(self, slots: List[Slot]) -> Tuple[Optional[Chain], Optional[LadderError], Optional[str]]:
        """Run solvers in order; later solvers act as fallbacks."""

        error: Optional[LadderError] = None
        name: Optional[str] = None
        for solver in self.solvers:
            name = solver.name
            try:
                return solver.solve(slots), None, name
            except LadderSearchError as exc:
                LOGGER.info("Solver %s failed: %s", name, exc)
                error = exc
        return None, error, name

    def _fallback_chain(self, slots: Sequence[Slot], word_length: int) -> Chain:
        """Top candidate per slot, in slot order; kept for diagnostics only."""

        links: List[ChainLink] = []
        for slot in slots:
            if slot.candidates:
                top = slot.candidates[0]
                links.append(ChainLink(top.word, slot.index, slot.clue, top.justification))
            else:
                links.append(
                    ChainLink(
                        self.filler.random_word(word_length),
                        slot.index,
                        slot.clue,
                        "Fallback word due to no candidates",
                    )
                )
        return Chain(links=links)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _reject(rejected: Set[str], response: CandidateResponse) -> None:
        rejected.update(word.strip().upper() for word in response.all_words() if word)

    @staticmethod
    def _failure(
        number: int,
        error: Optional[LadderError],
        validated: Optional[ValidatedCandidates] = None,
        chain: Optional[Chain] = None,
        solver: Optional[str] = None,
    ) -> Attempt:
        return Attempt(
            number=number,
            outcome=AttemptOutcome.FAILURE,
            chain=chain,
            reason=str(error) if error else "No solver configured",
            error_code=error.code if error else None,
            solver=solver,
            candidate_counts=validated.candidate_counts if validated else [],
            violations=validated.violations if validated else [],
        )
