import unittest

from crossclimb.core.exceptions import SchemaMismatchError
from crossclimb.core.models import CandidateResponse, ClueCandidates, RawCandidate
from crossclimb.engine.candidate_validator import CandidateValidator, is_valid_word


def _response(word_length, items):
    return CandidateResponse(
        word_length=word_length,
        items=[
            ClueCandidates(clue=clue, candidates=[RawCandidate(w, r) for w, r in entries])
            for clue, entries in items
        ],
    )


class CleanCandidatesTests(unittest.TestCase):
    def setUp(self) -> None:
        self.validator = CandidateValidator()

    def test_normalizes_and_filters(self) -> None:
        raw = [
            RawCandidate(" parch ", "dry"),
            RawCandidate("PORCHES", "too long"),
            RawCandidate("P0RCH", "digit"),
            RawCandidate("PERCH", ""),
            RawCandidate("LARCH", "tree"),
        ]
        cleaned = self.validator.clean_candidates(raw, 5)
        self.assertEqual([c.word for c in cleaned], ["PARCH", "LARCH"])

    def test_deduplicates_keeping_first(self) -> None:
        raw = [RawCandidate("PARCH", "first"), RawCandidate("parch", "second")]
        cleaned = self.validator.clean_candidates(raw, 5)
        self.assertEqual(len(cleaned), 1)
        self.assertEqual(cleaned[0].justification, "first")

    def test_is_valid_word(self) -> None:
        self.assertTrue(is_valid_word("cold", 4))
        self.assertFalse(is_valid_word("co-d", 4))


class ValidateTests(unittest.TestCase):
    def setUp(self) -> None:
        self.validator = CandidateValidator(min_viable=3)

    def test_builds_slots_in_clue_order(self) -> None:
        response = _response(
            4,
            [
                ("Chilly", [("COLD", "low temp"), ("COOL", "mild chill"), ("ICED", "frozen")]),
                ("String", [("CORD", "rope"), ("LINE", "thread"), ("TWINE", "five letters")]),
            ],
        )
        result = self.validator.validate(response, 4, ["Chilly", "String"])
        self.assertEqual([slot.index for slot in result.slots], [0, 1])
        self.assertEqual(result.slots[1].clue, "String")
        self.assertEqual(result.candidate_counts, [3, 2])
        self.assertTrue(any(v.clue_index == 1 and "Only 2" in v.reason for v in result.violations))

    def test_word_length_mismatch_raises(self) -> None:
        response = _response(5, [("Chilly", [("COLDS", "x")])])
        with self.assertRaises(SchemaMismatchError):
            self.validator.validate(response, 4, ["Chilly"])

    def test_item_count_mismatch_raises(self) -> None:
        response = _response(4, [("Chilly", [("COLD", "x")])])
        with self.assertRaises(SchemaMismatchError):
            self.validator.validate(response, 4, ["Chilly", "String"])

    def test_schema_violations_are_reported_not_raised(self) -> None:
        long_reason = "x" * 81
        response = _response(
            4,
            [("Chilly", [("COLD", long_reason), ("COOL", "a"), ("ICED", "b"), ("RIME", "c"),
                         ("SNOW", "d"), ("HAIL", "e"), ("SLEET", "f")])],
        )
        result = self.validator.validate(response, 4, ["Chilly"])
        reasons = [v.reason for v in result.violations]
        self.assertTrue(any(r.startswith("Too many candidates") for r in reasons))
        self.assertTrue(any(r.startswith("Reason too long") for r in reasons))
        self.assertEqual(result.candidate_counts, [6])

    def test_violations_point_at_real_clues(self) -> None:
        response = _response(4, [("Chilly", []), ("String", [("CORD", "x" * 90)])])
        result = self.validator.validate(response, 4, ["Chilly", "String"])
        self.assertTrue(result.violations)
        self.assertEqual({v.clue_index for v in result.violations}, {0, 1})

    def test_empty_slot_is_kept(self) -> None:
        response = _response(4, [("Chilly", [])])
        result = self.validator.validate(response, 4, ["Chilly"])
        self.assertEqual(result.slots[0].candidates, [])
        self.assertTrue(any(v.reason.startswith("Too few") for v in result.violations))


if __name__ == "__main__":
    unittest.main()
