"""Dijkstra shortest-path search over a weighted directed graph."""

import heapq
import itertools
import logging
from collections.abc import Hashable, Iterator
from dataclasses import dataclass, field
from typing import Any

from .graph import GraphStore, Node

logger = logging.getLogger(__name__)


class PathNotFoundError(LookupError):
    """No path exists between two nodes, or one of them is not in the graph."""

    def __init__(self, start: Hashable, end: Hashable):
        super().__init__(f"No path exists from {start!r} to {end!r}")
        self.start = start
        self.end = end


@dataclass
class SearchNode:
    """
    One candidate path found while searching.

    ``node`` is the last node of the path, ``cost`` its total weight and
    ``predecessor`` the SearchNode for the path minus its last edge (None
    for the start node). ``edge_weight`` is the weight of that last edge,
    0.0 for the start node. Following predecessors always leads back to
    the start node.
    """

    node: Node
    cost: float
    predecessor: "SearchNode | None" = None
    edge_weight: float = 0.0

    def walk_back(self) -> Iterator["SearchNode"]:
        """Yield this SearchNode and its predecessors, ending at the start."""
        current = self
        while current is not None:
            yield current
            current = current.predecessor


@dataclass
class SegmentInfo:
    """Information about a path segment."""

    from_node: Any
    to_node: Any
    weight: float


@dataclass
class PathResult:
    """Result of pathfinding."""

    path: list[Any]
    total_cost: float
    found: bool
    num_edges: int = 0
    segments: list[SegmentInfo] = field(default_factory=list)


def reconstruct_path(end: SearchNode) -> list[Any]:
    """Return node payloads along the path ending at ``end``, from start to end."""
    path = [search_node.node.data for search_node in end.walk_back()]
    path.reverse()
    return path


class DijkstraPathFinder:
    """
    Find shortest paths in a graph using Dijkstra's algorithm.

    Any object implementing ``GraphStore`` can be searched. Edge weights
    must be non-negative. Each query runs a fresh search; nothing is cached
    between calls.
    """

    def __init__(self, graph: GraphStore):
        """
        Initialize pathfinder with a graph.

        Args:
            graph: Graph to search, e.g. a WeightedGraph
        """
        self.graph = graph

    def compute_shortest_path(self, start: Hashable, end: Hashable) -> SearchNode:
        """
        Search for the cheapest path from ``start`` to ``end``.

        Stale frontier entries (for nodes already finalized through a
        cheaper path) are skipped when popped. Entries of equal cost are
        expanded in the order they were pushed.

        Args:
            start: Payload of the start node
            end: Payload of the destination node

        Returns:
            SearchNode for ``end`` whose cost is the shortest path cost and
            whose predecessors trace the path back to ``start``

        Raises:
            PathNotFoundError: If ``end`` cannot be reached from ``start`` or
                either node is not in the graph
        """
        start_node = self.graph.get_node(start)
        end_node = self.graph.get_node(end)
        if start_node is None or end_node is None:
            raise PathNotFoundError(start, end)

        counter = itertools.count()
        frontier = [(0.0, next(counter), SearchNode(start_node, 0.0))]
        visited: set[Node] = set()

        while frontier:
            cost, _, current = heapq.heappop(frontier)

            if current.node is end_node:
                logger.debug(
                    "Reached %r at cost %s after finalizing %d nodes",
                    end,
                    cost,
                    len(visited),
                )
                return current

            if current.node in visited:
                continue

            visited.add(current.node)
            for edge in self.graph.edges_leaving(current.node):
                weight = float(edge.weight)
                successor = SearchNode(edge.successor, cost + weight, current, weight)
                heapq.heappush(frontier, (successor.cost, next(counter), successor))

        logger.debug("Frontier exhausted after finalizing %d nodes", len(visited))
        raise PathNotFoundError(start, end)

    def shortest_path_cost(self, start: Hashable, end: Hashable) -> float:
        """
        Return the total weight of the shortest path from ``start`` to ``end``.

        Raises:
            PathNotFoundError: If there is no such path
        """
        return self.compute_shortest_path(start, end).cost

    def shortest_path_data(self, start: Hashable, end: Hashable) -> list[Any]:
        """
        Return the node payloads along the shortest path, start and end included.

        Unlike ``shortest_path_cost`` this does not raise when there is no
        path: it returns an empty list.
        """
        try:
            end_node = self.compute_shortest_path(start, end)
        except PathNotFoundError as e:
            logger.info("%s", e)
            return []
        return reconstruct_path(end_node)

    def find_path(self, start: Hashable, end: Hashable) -> PathResult:
        """
        Find the shortest path between two nodes.

        Args:
            start: Payload of the start node
            end: Payload of the destination node

        Returns:
            PathResult with path, cost, segments and success flag
        """
        return self.find_path_with_waypoints(start, end, [])

    def find_path_with_waypoints(
        self, start: Hashable, end: Hashable, waypoints: list[Hashable]
    ) -> PathResult:
        """
        Find the shortest path passing through ``waypoints`` in order.

        Each leg between consecutive stops is searched on its own, so a node
        may appear more than once in the returned path.

        Returns:
            PathResult for the whole route; not found if any leg has no path
        """
        stops = [start, *waypoints, end]
        try:
            legs = [self.compute_shortest_path(a, b) for a, b in zip(stops, stops[1:])]
        except PathNotFoundError as e:
            logger.debug("%s", e)
            return PathResult(path=[], total_cost=float("inf"), found=False)

        chain: list[SearchNode] = []
        for leg_end in legs:
            leg = list(leg_end.walk_back())
            leg.reverse()
            # a leg starts on the node the previous leg ended on
            chain.extend(leg[1:] if chain else leg)

        segments = [
            SegmentInfo(
                from_node=prev.node.data,
                to_node=curr.node.data,
                weight=curr.edge_weight,
            )
            for prev, curr in zip(chain, chain[1:])
        ]

        return PathResult(
            path=[search_node.node.data for search_node in chain],
            total_cost=sum(leg_end.cost for leg_end in legs),
            found=True,
            num_edges=len(chain) - 1,
            segments=segments,
        )
