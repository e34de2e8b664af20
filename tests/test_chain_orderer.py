import unittest

from crossclimb.core.exceptions import NoValidOrderingError, SearchBudgetExceededError
from crossclimb.core.models import ChainLink
from crossclimb.engine.adjacency import is_adjacent
from crossclimb.engine.chain_orderer import ChainOrderer


class ChainOrdererTests(unittest.TestCase):
    def test_orders_words_into_ladder(self) -> None:
        order = ChainOrderer().order(["CORD", "COLD", "CARD"])
        self.assertEqual(order, [1, 0, 2])

    def test_every_step_is_adjacent(self) -> None:
        words = ["CORD", "WARM", "COLD", "WORD", "WORM"]
        order = ChainOrderer().order(words)
        self.assertEqual(sorted(order), list(range(len(words))))
        ladder = [words[i] for i in order]
        for first, second in zip(ladder, ladder[1:]):
            self.assertTrue(is_adjacent(first, second))

    def test_trivial_inputs(self) -> None:
        self.assertEqual(ChainOrderer().order([]), [])
        self.assertEqual(ChainOrderer().order(["SOLO"]), [0])

    def test_duplicates_raise(self) -> None:
        with self.assertRaises(NoValidOrderingError):
            ChainOrderer().order(["COLD", "cold"])

    def test_isolated_word_raises(self) -> None:
        with self.assertRaises(NoValidOrderingError) as ctx:
            ChainOrderer().order(["COLD", "CORD", "ZZZZ"])
        self.assertIn("ZZZZ", str(ctx.exception))

    def test_star_graph_has_no_ladder(self) -> None:
        with self.assertRaises(NoValidOrderingError):
            ChainOrderer().order(["CORD", "COLD", "CARD", "WORD"])

    def test_budget_is_enforced(self) -> None:
        with self.assertRaises(SearchBudgetExceededError):
            ChainOrderer(max_nodes=1).order(["CORD", "COLD", "CARD", "WORD"])

    def test_order_links_keeps_slot_metadata(self) -> None:
        links = [
            ChainLink("CARD", 0, "Greeting", "paper note"),
            ChainLink("COLD", 1, "Chilly", "low temp"),
            ChainLink("CORD", 2, "String", "rope"),
        ]
        chain = ChainOrderer().order_links(links)
        self.assertEqual(chain.ladder, ["CARD", "CORD", "COLD"])
        self.assertEqual([link.slot_index for link in chain.links], [0, 2, 1])
        self.assertEqual(chain.links[1].clue, "String")


if __name__ == "__main__":
    unittest.main()
