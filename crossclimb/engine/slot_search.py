"""Slot-order backtracking search.

Chooses one candidate per slot so that the slots, taken in input order,
already form a ladder. The search is an explicit stack-based DFS: each frame
owns the ordered candidate indices it still has to try, so the explored state
and the failure memo are plain values rather than call-stack state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Set, Tuple

from ..core.constants import DEFAULT_MAX_SEARCH_NODES
from ..core.exceptions import (CandidateExhaustedError, NoValidAssignmentError,
                               SearchBudgetExceededError)
from ..core.models import Chain, ChainLink, Slot
from ..utils.logger import get_logger
from .adjacency import is_adjacent


LOGGER = get_logger(__name__)

FailedState = Tuple[int, str]


@dataclass
class _Frame:
    slot_index: int
    prev_word: str
    order: List[int]
    cursor: int = 0
    # Set when a candidate was skipped because an earlier slot already used it;
    # such failures depend on the whole path and must not enter the memo.
    path_dependent: bool = False

    @property
    def key(self) -> FailedState:
        return (self.slot_index, self.prev_word.upper())


class SlotAssignmentSearch:
    """Depth-first search over slots 0..N-1 with dead-state pruning."""

    def __init__(self, max_nodes: int = DEFAULT_MAX_SEARCH_NODES) -> None:
        self.max_nodes = max_nodes
        self.failed_states: Set[FailedState] = set()
        self.nodes_visited = 0

    def search(self, slots: Sequence[Slot]) -> Chain:
        self.failed_states = set()
        self.nodes_visited = 0

        for slot in slots:
            if not slot.candidates:
                raise CandidateExhaustedError(slot.index, slot.clue)
        if not slots:
            return Chain()
        if len(slots) == 1:
            return self._build_chain(slots, [0])

        path = self._run(slots)
        if path is None:
            counts = [len(slot.candidates) for slot in slots]
            LOGGER.info(
                "Slot search exhausted after %d nodes (%d dead states)",
                self.nodes_visited,
                len(self.failed_states),
            )
            raise NoValidAssignmentError(counts)

        LOGGER.debug("Slot search succeeded after %d nodes", self.nodes_visited)
        return self._build_chain(slots, path)

    def _run(self, slots: Sequence[Slot]) -> List[int] | None:
        n = len(slots)
        stack: List[_Frame] = [_Frame(0, "", list(range(len(slots[0].candidates))))]
        path: List[int] = []

        while stack:
            self.nodes_visited += 1
            if self.nodes_visited > self.max_nodes:
                raise SearchBudgetExceededError(self.max_nodes)

            frame = stack[-1]
            if len(path) > frame.slot_index:
                path.pop()

            if frame.cursor >= len(frame.order):
                stack.pop()
                if not frame.path_dependent:
                    self.failed_states.add(frame.key)
                if stack and frame.path_dependent:
                    stack[-1].path_dependent = True
                continue

            choice = frame.order[frame.cursor]
            frame.cursor += 1
            path.append(choice)

            next_index = frame.slot_index + 1
            if next_index == n:
                return path

            word = slots[frame.slot_index].candidates[choice].word
            if (next_index, word.upper()) in self.failed_states:
                continue

            used = {slots[i].candidates[c].word for i, c in enumerate(path)}
            order, skipped = self._order_candidates(slots[next_index], word, used)
            stack.append(_Frame(next_index, word, order, path_dependent=skipped))

        return None

    @staticmethod
    def _order_candidates(slot: Slot, prev_word: str, used: Set[str]) -> Tuple[List[int], bool]:
        """Return indices of candidates adjacent to ``prev_word`` in input order.

        Non-adjacent candidates can never continue a slot-order ladder, so that
        partition is dropped. The flag reports whether an adjacent candidate
        was skipped only because the path already uses it.
        """

        adjacent: List[int] = []
        skipped = False
        for index, candidate in enumerate(slot.candidates):
            if not is_adjacent(prev_word, candidate.word):
                continue
            if candidate.word in used:
                skipped = True
                continue
            adjacent.append(index)
        return adjacent, skipped

    @staticmethod
    def _build_chain(slots: Sequence[Slot], path: Sequence[int]) -> Chain:
        links = []
        for slot, choice in zip(slots, path):
            candidate = slot.candidates[choice]
            links.append(
                ChainLink(
                    word=candidate.word,
                    slot_index=slot.index,
                    clue=slot.clue,
                    justification=candidate.justification,
                )
            )
        return Chain(links=links)
