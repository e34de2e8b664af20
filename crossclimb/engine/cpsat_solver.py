"""CP-SAT ladder construction using OR-Tools.

Word choice and ladder order are decided together: one boolean per slot
candidate, and a circuit over the slots plus a depot node whose two arcs mark
the ladder ends, so any feasible circuit is a Hamiltonian path.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Sequence, Tuple

from ortools.sat.python import cp_model

from ..core.constants import SolverStrategy
from ..core.exceptions import (CandidateExhaustedError, LadderSearchError, NoValidAssignmentError,
                               SearchBudgetExceededError)
from ..core.models import Chain, ChainLink, Slot
from ..utils.logger import get_logger
from .adjacency import is_adjacent

LOGGER = get_logger(__name__)

DEPOT = 0


class CpSatLadderSolver:
    name = SolverStrategy.CPSAT.value

    def __init__(self, timeout: float = 10.0, num_workers: int = 1, random_seed: int = 0) -> None:
        self.timeout = timeout
        self.num_workers = num_workers
        self.random_seed = random_seed

    def solve(self, slots: Sequence[Slot]) -> Chain:
        for slot in slots:
            if not slot.candidates:
                raise CandidateExhaustedError(slot.index, slot.clue)
        if not slots:
            return Chain()
        if len(slots) == 1:
            return Chain(links=[_link(slots[0], 0)])

        model = cp_model.CpModel()
        n = len(slots)

        # ------------------------------------------------------------------
        # Step 1: one candidate per slot, no word used twice
        # ------------------------------------------------------------------
        choice: List[List[cp_model.IntVar]] = []
        by_word: Dict[str, List[cp_model.IntVar]] = defaultdict(list)
        for i, slot in enumerate(slots):
            row = [model.new_bool_var(f"x_{i}_{k}") for k in range(len(slot.candidates))]
            model.add_exactly_one(row)
            choice.append(row)
            for k, candidate in enumerate(slot.candidates):
                by_word[candidate.word].append(row[k])
        for literals in by_word.values():
            if len(literals) > 1:
                model.add_at_most_one(literals)

        # ------------------------------------------------------------------
        # Step 2: ladder order as a circuit through the depot
        # ------------------------------------------------------------------
        arcs: List[Tuple[int, int, cp_model.IntVar]] = []
        arc_vars: Dict[Tuple[int, int], cp_model.IntVar] = {}
        for i in range(n):
            arcs.append((DEPOT, i + 1, model.new_bool_var(f"start_{i}")))
            arcs.append((i + 1, DEPOT, model.new_bool_var(f"end_{i}")))

        for i in range(n):
            for j in range(n):
                if i == j:
                    continue
                supports = {
                    k: [
                        choice[j][m]
                        for m, other in enumerate(slots[j].candidates)
                        if is_adjacent(candidate.word, other.word)
                    ]
                    for k, candidate in enumerate(slots[i].candidates)
                }
                if not any(supports.values()):
                    continue
                arc = model.new_bool_var(f"a_{i}_{j}")
                arc_vars[(i, j)] = arc
                arcs.append((i + 1, j + 1, arc))
                # arc i->j with candidate k chosen requires an adjacent choice in j
                for k, neighbours in supports.items():
                    model.add_bool_or(neighbours + [~arc, ~choice[i][k]])

        model.add_circuit(arcs)

        # ------------------------------------------------------------------
        # Step 3: solve
        # ------------------------------------------------------------------
        solver = cp_model.CpSolver()
        solver.parameters.max_time_in_seconds = self.timeout
        solver.parameters.num_workers = self.num_workers
        solver.parameters.random_seed = self.random_seed

        LOGGER.info("CP-SAT: %d slots, %d arcs, solving (timeout=%0.1fs)...", n, len(arc_vars), self.timeout)
        status = solver.solve(model)

        if status == cp_model.INFEASIBLE:
            raise NoValidAssignmentError([len(slot.candidates) for slot in slots])
        if status == cp_model.UNKNOWN:
            raise SearchBudgetExceededError(
                self.timeout, f"CP-SAT found no ladder within {self.timeout:0.1f}s"
            )
        if status not in (cp_model.OPTIMAL, cp_model.FEASIBLE):
            raise LadderSearchError(
                f"CP-SAT stopped without a ladder (status={solver.status_name(status)})"
            )
        LOGGER.info("CP-SAT: ladder found in %.2fs", solver.wall_time)

        # ------------------------------------------------------------------
        # Step 4: extract the path
        # ------------------------------------------------------------------
        chosen = [
            next(k for k, var in enumerate(row) if solver.value(var))
            for row in choice
        ]
        current = next(i for i in range(n) if solver.value(arcs[2 * i][2]))
        order = [current]
        while len(order) < n:
            current = next(
                j for (i, j), var in arc_vars.items() if i == current and solver.value(var)
            )
            order.append(current)
        return Chain(links=[_link(slots[i], chosen[i]) for i in order])


def _link(slot: Slot, choice: int) -> ChainLink:
    candidate = slot.candidates[choice]
    return ChainLink(
        word=candidate.word,
        slot_index=slot.index,
        clue=slot.clue,
        justification=candidate.justification,
    )
