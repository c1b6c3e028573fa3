"""
Shortest path resolver - Main entry point.

Usage:
    cat queries.csv | python -m src.main edges.csv
    python -m src.main edges.csv queries.csv
    python -m src.main --help
"""

import argparse
import csv
import logging
import sys
from pathlib import Path

from src.pathfinding import DijkstraPathFinder, PathNotFoundError, WeightedGraph

# Default data paths
DATA_DIR = Path(__file__).parent.parent / "data"
EDGES_FILE = DATA_DIR / "edges.csv"


def format_cost(cost: float) -> str:
    """Format a path cost, dropping the fractional part when it is zero."""
    if cost.is_integer():
        return str(int(cost))
    return f"{cost:g}"


def process_query(
    query_id: str,
    start: str,
    end: str,
    pathfinder: DijkstraPathFinder,
    cost_only: bool = False,
) -> list[str]:
    """
    Resolve a single query into an output row.

    Args:
        query_id: ID of the query
        start: Start node name
        end: Destination node name
        pathfinder: DijkstraPathFinder over the loaded graph
        cost_only: Only output the path cost

    Returns:
        Output row: id and cost, plus the route unless cost_only
    """
    try:
        cost = pathfinder.shortest_path_cost(start, end)
    except PathNotFoundError:
        return [query_id, "NO_PATH"]

    if cost_only:
        return [query_id, format_cost(cost)]

    route = "→".join(str(node) for node in pathfinder.shortest_path_data(start, end))
    return [query_id, format_cost(cost), route]


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Shortest path resolver - Dijkstra queries over a weighted directed graph"
    )
    parser.add_argument(
        "edges",
        nargs="?",
        type=Path,
        default=EDGES_FILE,
        help=f"Edges CSV with source,target,weight columns (default: {EDGES_FILE})",
    )
    parser.add_argument(
        "queries",
        nargs="?",
        help="Queries CSV with query_id,start,end rows (default: stdin)",
    )
    parser.add_argument(
        "--cost-only",
        action="store_true",
        help="Only output path costs, not the routes",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging on stderr",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if not args.edges.exists():
        print(f"Error: Edges file not found: {args.edges}", file=sys.stderr)
        return 1

    graph = WeightedGraph()
    graph.load_edges(args.edges)
    pathfinder = DijkstraPathFinder(graph)

    # Read input
    if args.queries:
        input_file = open(args.queries, encoding="utf-8")
    else:
        input_file = sys.stdin

    try:
        reader = csv.reader(input_file)
        writer = csv.writer(sys.stdout, lineterminator="\n")
        for row in reader:
            if len(row) < 3:
                continue

            query_id, start, end = (cell.strip() for cell in row[:3])

            # Skip header
            if query_id.lower() == "query_id":
                continue

            writer.writerow(
                process_query(query_id, start, end, pathfinder, cost_only=args.cost_only)
            )
    finally:
        if args.queries:
            input_file.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
