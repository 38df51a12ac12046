#!/usr/bin/env python3
"""
Entity Graph - Command Line Entry Point

Builds the entity-relationship graph of a JSON document and writes the
serialized graph (metadata, nodes, edges) as JSON.
"""

import argparse
import sys
from pathlib import Path

from entity_graph.config import settings
from entity_graph.errors import GraphBuildError
from entity_graph.graph.builder import BuildOptions, build_graph_from_text
from entity_graph.graph.identity import IDENTITY_SCHEMES
from entity_graph.utils.logger import app_logger, setup_logging


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Entity Graph - build a graph from a JSON document")
    parser.add_argument("input", help="JSON file to read, or - for stdin")
    parser.add_argument("--separate-arrays", action="store_true", default=None,
                        help="Insert a proxy node between an array field and each item")
    parser.add_argument("--link", action="append", dest="linked_field_names", metavar="FIELD",
                        help="Cross-link nodes of this field that share a value (repeatable)")
    parser.add_argument("--identity-scheme", choices=sorted(IDENTITY_SCHEMES),
                        help="How ids are synthesized for objects without one")
    parser.add_argument("--output", "-o", help="Write the graph here instead of stdout")
    parser.add_argument("--indent", type=int, default=2, help="JSON indent of the output")
    parser.add_argument("--log-level", default=settings.log_level, help="Log level")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main entry point for the command line."""
    args = parse_args(argv)
    setup_logging(args.log_level, settings.log_file)
    logger = app_logger.bind(component="cli")

    try:
        if args.input == "-":
            text = sys.stdin.read()
        else:
            text = Path(args.input).read_text(encoding="utf-8")
    except OSError as e:
        logger.error(f"Cannot read {args.input}: {e}")
        return 1

    try:
        options = BuildOptions.from_settings(
            separate_array_nodes=args.separate_arrays,
            linked_field_names=args.linked_field_names,
            identity_scheme=args.identity_scheme,
        )
        graph = build_graph_from_text(text, options=options)
    except GraphBuildError as e:
        logger.error(f"Error building graph: {e}")
        return 1

    output = graph.to_json(indent=args.indent)
    if args.output:
        Path(args.output).write_text(output + "\n", encoding="utf-8")
        logger.info(f"Wrote {len(graph.nodes)} nodes and {len(graph.edges)} edges to {args.output}")
    else:
        sys.stdout.write(output + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
