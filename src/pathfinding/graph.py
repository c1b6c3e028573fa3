"""Directed weighted graph store backed by NetworkX."""

import csv
import logging
import math
from collections.abc import Hashable, Iterable, Iterator
from dataclasses import dataclass, field
from numbers import Real
from pathlib import Path
from typing import Any, Protocol

import networkx as nx

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Node:
    """
    A graph node holding an arbitrary payload.

    Nodes compare by identity: two nodes with equal payloads are still
    different nodes. The store keeps one Node per payload.
    """

    data: Any

    def __repr__(self) -> str:
        return f"Node({self.data!r})"


@dataclass(frozen=True)
class Edge:
    """Directed weighted connection between two nodes."""

    predecessor: Node
    successor: Node
    weight: float = field(compare=False)


class GraphStore(Protocol):
    """Read-only view of a graph, as consumed by the path finder."""

    def get_node(self, data: Hashable) -> Node | None:
        ...

    def edges_leaving(self, node: Node) -> Iterable[Edge]:
        ...


def _check_weight(weight: Any) -> float:
    # bool is a Real subclass but never a meaningful edge weight
    if isinstance(weight, bool) or not isinstance(weight, Real):
        raise ValueError(f"Edge weight must be a real number, got {weight!r}")
    weight = float(weight)
    if math.isnan(weight) or weight < 0:
        raise ValueError(f"Edge weight must be non-negative, got {weight!r}")
    return weight


class WeightedGraph:
    """
    Directed graph with non-negative edge weights.

    Nodes are keyed by their payload in an underlying ``nx.DiGraph``; each
    NetworkX node carries its ``Node`` object under the ``node`` attribute
    and each edge its weight under ``weight``.
    """

    SOURCE_COLUMN = "source"
    TARGET_COLUMN = "target"
    WEIGHT_COLUMN = "weight"

    def __init__(self):
        """Initialize empty graph."""
        self.graph = nx.DiGraph()

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------

    def insert_node(self, data: Hashable) -> bool:
        """
        Add a node holding ``data``.

        Returns:
            True if the node was added, False if it already existed
        """
        if data in self.graph:
            return False
        self.graph.add_node(data, node=Node(data))
        return True

    def remove_node(self, data: Hashable) -> bool:
        """Remove a node and every edge touching it."""
        if data not in self.graph:
            return False
        self.graph.remove_node(data)
        return True

    def contains_node(self, data: Hashable) -> bool:
        """Check if a node with this payload exists."""
        return data in self.graph

    def get_node(self, data: Hashable) -> Node | None:
        """Resolve a payload to its node, or None if absent."""
        if data not in self.graph:
            return None
        return self.graph.nodes[data]["node"]

    def get_nodes(self) -> list[Any]:
        """Get list of all node payloads, in insertion order."""
        return list(self.graph.nodes())

    def get_node_count(self) -> int:
        return self.graph.number_of_nodes()

    # ------------------------------------------------------------------
    # Edges
    # ------------------------------------------------------------------

    def insert_edge(self, pred: Hashable, succ: Hashable, weight: float) -> bool:
        """
        Add a directed edge, or update its weight if it already exists.

        Args:
            pred: Payload of the source node
            succ: Payload of the target node
            weight: Non-negative edge weight

        Returns:
            True if the edge was stored, False if either node is missing

        Raises:
            ValueError: If the weight is negative or not a number
        """
        weight = _check_weight(weight)
        if pred not in self.graph or succ not in self.graph:
            return False
        self.graph.add_edge(pred, succ, weight=weight)
        return True

    def remove_edge(self, pred: Hashable, succ: Hashable) -> bool:
        """Remove a directed edge; False if it does not exist."""
        if not self.graph.has_edge(pred, succ):
            return False
        self.graph.remove_edge(pred, succ)
        return True

    def contains_edge(self, pred: Hashable, succ: Hashable) -> bool:
        return self.graph.has_edge(pred, succ)

    def get_edge(self, pred: Hashable, succ: Hashable) -> float:
        """
        Get the weight of the edge from ``pred`` to ``succ``.

        Raises:
            KeyError: If there is no such edge
        """
        if not self.graph.has_edge(pred, succ):
            raise KeyError(f"No edge from {pred!r} to {succ!r}")
        return self.graph[pred][succ]["weight"]

    def get_edge_count(self) -> int:
        return self.graph.number_of_edges()

    def edges_leaving(self, node: Node) -> Iterator[Edge]:
        """Yield the outgoing edges of ``node``."""
        nodes = self.graph.nodes
        for succ, attrs in self.graph.adj[node.data].items():
            yield Edge(node, nodes[succ]["node"], attrs["weight"])

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_edges(self, filepath: str | Path) -> tuple[int, int]:
        """
        Load edges from CSV, creating endpoint nodes as needed.

        Expected columns: source, target, weight

        Rows with a missing column, a non-numeric weight or a negative
        weight are skipped. A row repeating an earlier edge updates its
        weight and is not counted as added.

        Returns:
            (edges added, rows skipped)
        """
        filepath = Path(filepath)
        edges_added = 0
        edges_skipped = 0

        with open(filepath, encoding="utf-8") as f:
            reader = csv.DictReader(f)
            for line_no, row in enumerate(reader, start=2):
                try:
                    source = row[self.SOURCE_COLUMN].strip()
                    target = row[self.TARGET_COLUMN].strip()
                    weight = _check_weight(float(row[self.WEIGHT_COLUMN]))
                except (ValueError, KeyError, AttributeError, TypeError):
                    logger.warning("Skipping malformed edge row %d in %s", line_no, filepath)
                    edges_skipped += 1
                    continue

                if not source or not target:
                    logger.warning("Skipping edge row %d in %s: empty endpoint", line_no, filepath)
                    edges_skipped += 1
                    continue

                self.insert_node(source)
                self.insert_node(target)
                if self.contains_edge(source, target):
                    logger.debug("Row %d in %s updates edge %s -> %s", line_no, filepath, source, target)
                else:
                    edges_added += 1
                self.insert_edge(source, target, weight)

        logger.info(
            "Loaded %d edges from %s (%d skipped, %d nodes)",
            edges_added,
            filepath,
            edges_skipped,
            len(self),
        )
        return edges_added, edges_skipped

    def __contains__(self, data: Hashable) -> bool:
        return data in self.graph

    def __len__(self) -> int:
        """Return number of nodes."""
        return len(self.graph)
