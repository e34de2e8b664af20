import unittest
from unittest.mock import MagicMock

from crossclimb.core.exceptions import (MalformedInputError, NoEndCandidateError,
                                        UpstreamUnavailableError)
from crossclimb.core.models import CandidateResponse, ClueCandidates, RawCandidate
from crossclimb.engine.ends import EndsSolver


def single(clue, *entries):
    return CandidateResponse(
        word_length=4,
        items=[ClueCandidates(clue, [RawCandidate(w, r) for w, r in entries])],
    )


class EndsSolverTests(unittest.TestCase):
    def test_picks_first_neighbour(self) -> None:
        generator = MagicMock()
        generator.generate.return_value = single(
            "Frosty", ("WARM", "opposite"), ("COLD", "low temp"), ("CARD", "note")
        )
        result = EndsSolver(generator).solve(4, "Frosty", "cord")
        self.assertEqual(result.answer, "COLD")
        self.assertEqual(result.reasoning, "low temp")
        self.assertEqual(result.neighbor_word, "CORD")
        self.assertEqual(result.to_jsonable()["hammingDistance"], 1)

    def test_skips_clue_words_and_retries_with_exclusions(self) -> None:
        clue = "Hot or cold?"
        generator = MagicMock()
        generator.generate.side_effect = [
            single(clue, ("COLD", "in the clue"), ("WARM", "not adjacent")),
            single(clue, ("WARM", "again"), ("CARD", "one letter off")),
        ]
        result = EndsSolver(generator).solve(4, clue, "CORD")
        self.assertEqual(result.answer, "CARD")
        first, second = generator.generate.call_args_list
        self.assertIsNone(first.kwargs["excluded_words"])
        self.assertEqual(second.kwargs["excluded_words"], {"WARM"})

    def test_gives_up_after_max_attempts(self) -> None:
        generator = MagicMock()
        generator.generate.return_value = single("Frosty", ("WARM", "nope"), ("HEAT", "nope"))
        with self.assertRaises(NoEndCandidateError) as ctx:
            EndsSolver(generator, max_attempts=3).solve(4, "Frosty", "CORD")
        self.assertEqual(generator.generate.call_count, 3)
        self.assertEqual(ctx.exception.previously_tried, ["HEAT", "WARM"])
        self.assertEqual(ctx.exception.to_jsonable()["code"], "NO_END_CANDIDATE")

    def test_empty_response_counts_as_empty_round(self) -> None:
        generator = MagicMock()
        generator.generate.side_effect = [
            CandidateResponse(word_length=4, items=[]),
            single("Frosty", ("COLD", "low temp")),
        ]
        self.assertEqual(EndsSolver(generator).solve(4, "Frosty", "CORD").answer, "COLD")

    def test_upstream_errors_propagate(self) -> None:
        generator = MagicMock()
        generator.generate.side_effect = UpstreamUnavailableError("down")
        with self.assertRaises(UpstreamUnavailableError):
            EndsSolver(generator).solve(4, "Frosty", "CORD")

    def test_malformed_input(self) -> None:
        solver = EndsSolver(MagicMock())
        with self.assertRaises(MalformedInputError):
            solver.solve(4, "Frosty", "CORDS")
        with self.assertRaises(MalformedInputError):
            solver.solve(4, " ", "CORD")
        with self.assertRaises(MalformedInputError):
            solver.solve(0, "Frosty", "")


if __name__ == "__main__":
    unittest.main()
