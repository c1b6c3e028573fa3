"""Pathfinding module for shortest paths in weighted directed graphs."""

from .dijkstra import (
    DijkstraPathFinder,
    PathNotFoundError,
    PathResult,
    SearchNode,
    SegmentInfo,
    reconstruct_path,
)
from .graph import Edge, GraphStore, Node, WeightedGraph

__all__ = [
    "WeightedGraph",
    "GraphStore",
    "Node",
    "Edge",
    "DijkstraPathFinder",
    "PathNotFoundError",
    "PathResult",
    "SearchNode",
    "SegmentInfo",
    "reconstruct_path",
]
