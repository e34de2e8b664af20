"""Arrange an already-chosen set of words into a ladder."""

from __future__ import annotations

from typing import Iterator, List, Sequence

from ..core.constants import DEFAULT_MAX_SEARCH_NODES
from ..core.exceptions import NoValidOrderingError, SearchBudgetExceededError
from ..core.models import Chain, ChainLink
from ..utils.logger import get_logger
from .adjacency import is_adjacent


LOGGER = get_logger(__name__)


class ChainOrderer:
    """Finds a Hamiltonian path through the adjacency graph of N words.

    Start vertices are tried by ascending degree (likely chain endpoints
    first) and each step prefers the lowest-degree unvisited neighbour, which
    makes dead ends surface early. Ties keep input order, so the result is
    deterministic.
    """

    def __init__(self, max_nodes: int = DEFAULT_MAX_SEARCH_NODES) -> None:
        self.max_nodes = max_nodes
        self.nodes_visited = 0

    def order(self, words: Sequence[str]) -> List[int]:
        """Return indices of ``words`` in ladder order."""

        self.nodes_visited = 0
        n = len(words)
        if n == 0:
            return []
        if n == 1:
            return [0]

        normalized = [word.upper() for word in words]
        if len(set(normalized)) != n:
            raise NoValidOrderingError("Chosen words contain duplicates")

        neighbours: List[List[int]] = [[] for _ in range(n)]
        for i in range(n):
            for j in range(i + 1, n):
                if is_adjacent(normalized[i], normalized[j]):
                    neighbours[i].append(j)
                    neighbours[j].append(i)
        degree = [len(adj) for adj in neighbours]
        if 0 in degree:
            isolated = normalized[degree.index(0)]
            raise NoValidOrderingError(f"Word '{isolated}' has no single-letter neighbour")

        for adj in neighbours:
            adj.sort(key=lambda v: (degree[v], v))
        starts = sorted(range(n), key=lambda v: (degree[v], v))

        for start in starts:
            path = self._walk(start, neighbours, n)
            if path is not None:
                return path

        raise NoValidOrderingError("Could not reorder words into a single-letter-change ladder")

    def _walk(self, start: int, neighbours: List[List[int]], n: int) -> List[int] | None:
        visited = [False] * n
        visited[start] = True
        path = [start]
        pending: List[Iterator[int]] = [iter(neighbours[start])]

        while pending:
            self.nodes_visited += 1
            if self.nodes_visited > self.max_nodes:
                raise SearchBudgetExceededError(self.max_nodes)

            nxt = next((v for v in pending[-1] if not visited[v]), None)
            if nxt is None:
                pending.pop()
                visited[path.pop()] = False
                continue

            visited[nxt] = True
            path.append(nxt)
            if len(path) == n:
                return path
            pending.append(iter(neighbours[nxt]))
        return None

    def order_links(self, links: Sequence[ChainLink]) -> Chain:
        """Reorder ``links`` into a ladder, keeping each word's slot and justification."""

        order = self.order([link.word for link in links])
        LOGGER.debug("Reordered %d words in %d steps", len(order), self.nodes_visited)
        return Chain(links=[links[index] for index in order])
