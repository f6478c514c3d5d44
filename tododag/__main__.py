"""
Todo Dependency Graph
=====================

Report earliest starts and critical paths for a set of todos.
"""

import argparse
import json
import logging
import sys

from .domain.todo import TodoError
from .examples.simple_project import create_sample_graph, print_report
from .services.dependency_graph import TodoGraph

logger = logging.getLogger(__name__)


def load_graph(path):
    """Build a TodoGraph from a JSON file holding a list of todo records."""
    with open(path, encoding="utf-8") as f:
        records = json.load(f)
    if not isinstance(records, list):
        raise TodoError("Expected a JSON list of todo records")

    graph = TodoGraph()
    graph.initialize(records)
    return graph


def main(argv=None):
    parser = argparse.ArgumentParser(description="Todo dependency scheduling")
    parser.add_argument(
        "--example", action="store_true", help="Run the example project"
    )
    parser.add_argument(
        "--file", type=str, help="JSON file with a list of todo records"
    )
    parser.add_argument(
        "--from",
        dest="root",
        type=int,
        default=None,
        help="Todo ID to compute the critical path from (default: every root)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.file:
        try:
            graph = load_graph(args.file)
        except (OSError, ValueError, TodoError) as e:
            logger.error(f"Cannot load {args.file}: {e}")
            return 2
    elif args.example:
        print("Running example project...")
        graph = create_sample_graph()
    else:
        parser.print_help()
        return 1

    if args.verbose:
        graph.describe()
    print_report(graph, args.root)
    return 0


if __name__ == "__main__":
    sys.exit(main())
