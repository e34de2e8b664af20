"""Interchangeable ladder construction strategies."""

from __future__ import annotations

from itertools import product
from typing import List, Protocol, Sequence

from ..core.constants import DEFAULT_MAX_SEARCH_NODES, SolverStrategy
from ..core.exceptions import (CandidateExhaustedError, NoValidOrderingError,
                               SearchBudgetExceededError)
from ..core.models import Candidate, Chain, ChainLink, Slot
from ..utils.logger import get_logger
from .adjacency import is_adjacent
from .chain_orderer import ChainOrderer
from .cpsat_solver import CpSatLadderSolver
from .slot_search import SlotAssignmentSearch


LOGGER = get_logger(__name__)


class LadderSolver(Protocol):
    """Protocol implemented by all ladder construction strategies."""

    name: str

    def solve(self, slots: Sequence[Slot]) -> Chain:
        """Return a chain using one candidate per slot or raise ``LadderSearchError``."""


class SlotOrderSolver:
    """Keeps slots in input order and requires each word to neighbour the previous one."""

    name = SolverStrategy.SLOT_ORDER.value

    def __init__(self, max_nodes: int = DEFAULT_MAX_SEARCH_NODES) -> None:
        self.max_nodes = max_nodes

    def solve(self, slots: Sequence[Slot]) -> Chain:
        return SlotAssignmentSearch(max_nodes=self.max_nodes).search(slots)


class ReorderSolver:
    """Decouples "which word" from "what order".

    Assignments are enumerated in input order (the first one is simply the
    top candidate of every slot) and each one with distinct words is handed
    to :class:`ChainOrderer`. Candidates with no single-letter neighbour in
    any other slot cannot sit anywhere in a ladder and are pruned up front.
    """

    name = SolverStrategy.REORDER.value

    def __init__(self, max_nodes: int = DEFAULT_MAX_SEARCH_NODES) -> None:
        self.max_nodes = max_nodes

    def solve(self, slots: Sequence[Slot]) -> Chain:
        for slot in slots:
            if not slot.candidates:
                raise CandidateExhaustedError(slot.index, slot.clue)
        if not slots:
            return Chain()

        pools = self._prune(slots)
        for slot, pool in zip(slots, pools):
            if not pool:
                raise NoValidOrderingError(
                    f"No candidate for clue at index {slot.index} neighbours any other clue's candidates"
                )

        orderer = ChainOrderer(max_nodes=self.max_nodes)
        visited = 0
        for combination in product(*pools):
            visited += 1
            if visited > self.max_nodes:
                raise SearchBudgetExceededError(self.max_nodes)
            words = [candidate.word for candidate in combination]
            if len(set(words)) != len(words):
                continue
            links = [
                ChainLink(
                    word=candidate.word,
                    slot_index=slot.index,
                    clue=slot.clue,
                    justification=candidate.justification,
                )
                for slot, candidate in zip(slots, combination)
            ]
            try:
                chain = orderer.order_links(links)
            except NoValidOrderingError:
                continue
            LOGGER.debug("Reorder solver succeeded after %d assignments", visited)
            return chain

        raise NoValidOrderingError(
            f"None of {visited} candidate assignments can be ordered into a ladder"
        )

    @staticmethod
    def _prune(slots: Sequence[Slot]) -> List[List[Candidate]]:
        if len(slots) == 1:
            return [list(slots[0].candidates)]
        pools: List[List[Candidate]] = []
        for slot in slots:
            others = [
                other.word
                for peer in slots
                if peer.index != slot.index
                for other in peer.candidates
            ]
            pools.append(
                [c for c in slot.candidates if any(is_adjacent(c.word, word) for word in others)]
            )
        return pools


def build_solvers(
    strategies: Sequence[SolverStrategy | str],
    max_nodes: int = DEFAULT_MAX_SEARCH_NODES,
) -> List[LadderSolver]:
    """Instantiate solvers for ``strategies`` in the given order."""

    solvers: List[LadderSolver] = []
    for strategy in strategies:
        strategy = SolverStrategy(strategy)
        if strategy == SolverStrategy.SLOT_ORDER:
            solvers.append(SlotOrderSolver(max_nodes=max_nodes))
        elif strategy == SolverStrategy.REORDER:
            solvers.append(ReorderSolver(max_nodes=max_nodes))
        else:
            solvers.append(CpSatLadderSolver())
    return solvers
