import random
import unittest
from itertools import permutations, product
from unittest.mock import patch

from ortools.sat.python import cp_model

from crossclimb.core.constants import ErrorCode, SolverStrategy
from crossclimb.core.exceptions import (CandidateExhaustedError, LadderSearchError,
                                        NoValidAssignmentError, NoValidOrderingError,
                                        SearchBudgetExceededError)
from crossclimb.core.models import Candidate, Slot
from crossclimb.engine.adjacency import is_adjacent
from crossclimb.engine.cpsat_solver import CpSatLadderSolver
from crossclimb.engine.solvers import ReorderSolver, SlotOrderSolver, build_solvers


def make_slots(*columns):
    return [
        Slot(
            index=i,
            clue=f"clue {i}",
            word_length=4,
            candidates=[Candidate(word, f"reason for {word}") for word in words],
        )
        for i, words in enumerate(columns)
    ]


class LadderAssertions(unittest.TestCase):
    def assertLadder(self, chain, slots) -> None:
        ladder = chain.ladder
        self.assertEqual(len(ladder), len(slots))
        self.assertEqual(len(set(ladder)), len(ladder))
        for first, second in zip(ladder, ladder[1:]):
            self.assertTrue(is_adjacent(first, second), f"{first} -> {second}")
        self.assertEqual(sorted(link.slot_index for link in chain.links), list(range(len(slots))))
        for link in chain.links:
            words = [c.word for c in slots[link.slot_index].candidates]
            self.assertIn(link.word, words)


class SlotOrderSolverTests(LadderAssertions):
    def test_keeps_slot_order(self) -> None:
        slots = make_slots(["COLD"], ["CORD"], ["CARD"])
        chain = SlotOrderSolver().solve(slots)
        self.assertLadder(chain, slots)
        self.assertEqual([link.slot_index for link in chain.links], [0, 1, 2])

    def test_unordered_slots_fail(self) -> None:
        with self.assertRaises(NoValidAssignmentError):
            SlotOrderSolver().solve(make_slots(["CARD"], ["COLD"], ["CORD"]))


class ReorderSolverTests(LadderAssertions):
    def test_reorders_when_slot_order_fails(self) -> None:
        slots = make_slots(["CARD"], ["COLD"], ["CORD"])
        chain = ReorderSolver().solve(slots)
        self.assertLadder(chain, slots)
        self.assertEqual(chain.ladder, ["CARD", "CORD", "COLD"])

    def test_shared_word_goes_to_one_slot(self) -> None:
        slots = make_slots(["CORD", "COLD"], ["CORD"], ["CARD"])
        chain = ReorderSolver().solve(slots)
        self.assertLadder(chain, slots)
        self.assertEqual(chain.ladder, ["COLD", "CORD", "CARD"])

    def test_isolated_slot_raises(self) -> None:
        with self.assertRaises(NoValidOrderingError):
            ReorderSolver().solve(make_slots(["ABCD"], ["WXYZ"]))

    def test_no_hamiltonian_path_raises(self) -> None:
        with self.assertRaises(NoValidOrderingError):
            ReorderSolver().solve(make_slots(["CORD"], ["COLD"], ["CARD"], ["WORD"]))

    def test_empty_slot_raises(self) -> None:
        with self.assertRaises(CandidateExhaustedError):
            ReorderSolver().solve(make_slots(["CORD"], []))


class CpSatLadderSolverTests(LadderAssertions):
    def test_finds_ladder_in_any_order(self) -> None:
        slots = make_slots(["CARD", "ZZZZ"], ["COLD", "QQQQ"], ["CORD", "WARM"])
        chain = CpSatLadderSolver().solve(slots)
        self.assertLadder(chain, slots)
        self.assertEqual(set(chain.ladder), {"CARD", "COLD", "CORD"})

    def test_words_are_not_reused(self) -> None:
        slots = make_slots(["COLD"], ["CORD"], ["COLD", "CARD"])
        chain = CpSatLadderSolver().solve(slots)
        self.assertLadder(chain, slots)
        self.assertEqual(set(chain.ladder), {"COLD", "CORD", "CARD"})

    def test_infeasible_raises(self) -> None:
        with self.assertRaises(NoValidAssignmentError):
            CpSatLadderSolver().solve(make_slots(["ABCD"], ["WXYZ"]))

    def test_single_slot(self) -> None:
        chain = CpSatLadderSolver().solve(make_slots(["SOLO", "DUET"]))
        self.assertEqual(chain.ladder, ["SOLO"])

    def test_timeout_reports_budget_exceeded(self) -> None:
        with patch.object(cp_model, "CpSolver") as solver_cls:
            solver_cls.return_value.solve.return_value = cp_model.UNKNOWN
            with self.assertRaises(SearchBudgetExceededError) as ctx:
                CpSatLadderSolver(timeout=0.5).solve(make_slots(["COLD"], ["CORD"]))
        self.assertEqual(ctx.exception.code, ErrorCode.SEARCH_BUDGET_EXCEEDED)
        self.assertEqual(ctx.exception.budget, 0.5)

    def test_other_stops_report_search_failure(self) -> None:
        with patch.object(cp_model, "CpSolver") as solver_cls:
            solver_cls.return_value.solve.return_value = cp_model.MODEL_INVALID
            solver_cls.return_value.status_name.return_value = "MODEL_INVALID"
            with self.assertRaises(LadderSearchError) as ctx:
                CpSatLadderSolver().solve(make_slots(["COLD"], ["CORD"]))
        self.assertEqual(ctx.exception.code, ErrorCode.SEARCH_FAILED)


class LadderExistenceTests(LadderAssertions):
    """Seeded small instances checked against brute force."""

    ALPHABET = "AB"

    def random_slots(self, rng):
        words = ["".join(letters) for letters in product(self.ALPHABET, repeat=3)]
        columns = [rng.sample(words, rng.randint(1, 3)) for _ in range(rng.randint(2, 4))]
        return make_slots(*columns)

    @staticmethod
    def is_ladder(words) -> bool:
        return len(set(words)) == len(words) and all(
            is_adjacent(a, b) for a, b in zip(words, words[1:])
        )

    def brute_force(self, slots):
        in_order = any_order = False
        for combination in product(*[[c.word for c in slot.candidates] for slot in slots]):
            if self.is_ladder(combination):
                in_order = any_order = True
                break
            if not any_order and any(self.is_ladder(p) for p in permutations(combination)):
                any_order = True
        return in_order, any_order

    def test_solvers_agree_with_exhaustive_search(self) -> None:
        rng = random.Random(20240611)
        solvable = 0
        for _ in range(60):
            slots = self.random_slots(rng)
            in_order, any_order = self.brute_force(slots)
            solvable += any_order
            cases = [
                (SlotOrderSolver(), in_order, True),
                (ReorderSolver(), any_order, False),
                (CpSatLadderSolver(), any_order, False),
            ]
            for solver, exists, keeps_order in cases:
                with self.subTest(solver=solver.name, slots=[[c.word for c in s.candidates] for s in slots]):
                    if exists:
                        chain = solver.solve(slots)
                        self.assertLadder(chain, slots)
                        if keeps_order:
                            self.assertEqual([link.slot_index for link in chain.links], list(range(len(slots))))
                    else:
                        with self.assertRaises(LadderSearchError):
                            solver.solve(slots)
        self.assertGreater(solvable, 0)


class BuildSolversTests(unittest.TestCase):
    def test_builds_in_requested_order(self) -> None:
        solvers = build_solvers(["reorder", SolverStrategy.SLOT_ORDER, SolverStrategy.CPSAT])
        self.assertEqual([s.name for s in solvers], ["reorder", "slot_order", "cpsat"])

    def test_unknown_strategy_raises(self) -> None:
        with self.assertRaises(ValueError):
            build_solvers(["greedy"])


if __name__ == "__main__":
    unittest.main()
