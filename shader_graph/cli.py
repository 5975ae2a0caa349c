"""
shader-graph: compile node graph JSON files to GLSL
====================================================

Usage
-----
    shader-graph compile <graph.json> [options]
    shader-graph nodes

Options (compile)
-----------------
    -o, --out  <file>   Write the fragment program here instead of stdout
    --preview  <id>     Compile only this node and its inputs
    --variables         Print the node output variable map as JSON to stderr
    --strict            Exit with status 1 if the compile produced diagnostics
    -v, --verbose       Debug logging

Examples
--------
    shader-graph compile graphs/rings.json -o rings.frag
    shader-graph compile graphs/rings.json --preview n4 --strict
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from .compiler import compile_graph
from .errors import GraphFormatError
from .ir.serialization import load_graph
from .logger import setup_logger
from .nodes.registry import nodes_by_category


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="shader-graph",
        description="Compile shader node graphs to GLSL fragment programs.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    sub = p.add_subparsers(dest="command", required=True)

    c = sub.add_parser("compile", help="Compile a graph JSON file.")
    c.add_argument("graph_json", metavar="graph.json", help="Path to the graph JSON file.")
    c.add_argument("-o", "--out", metavar="FILE", help="Output file (default: stdout).")
    c.add_argument("--preview", metavar="NODE_ID", help="Compile only this node and its inputs.")
    c.add_argument("--variables", action="store_true",
                   help="Print the node output variable map to stderr.")
    c.add_argument("--strict", action="store_true",
                   help="Exit with status 1 when the compile reports diagnostics.")

    sub.add_parser("nodes", help="List registered node kinds by category.")
    return p


def _cmd_compile(args) -> int:
    try:
        graph = load_graph(args.graph_json)
    except GraphFormatError as exc:
        print(f"[error] {exc}", file=sys.stderr)
        return 1

    result = compile_graph(graph, preview_node_id=args.preview)
    for message in result.diagnostics:
        print(f"[diagnostic] {message}", file=sys.stderr)
    if args.variables:
        variables = {nid: dict(outputs) for nid, outputs in result.node_output_variables.items()}
        print(json.dumps(variables, indent=2, sort_keys=True), file=sys.stderr)

    if args.out:
        Path(args.out).write_text(result.program_text, encoding="utf-8")
        print(f"[shader-graph] wrote {args.out} ({result.fingerprint})", file=sys.stderr)
    else:
        sys.stdout.write(result.program_text)

    if args.strict and result.diagnostics:
        return 1
    return 0


def _cmd_nodes(args) -> int:
    for category, definitions in sorted(nodes_by_category().items()):
        print(category)
        for definition in sorted(definitions, key=lambda d: d.kind):
            print(f"  {definition.kind:<22} {definition.label}")
    return 0


def main(argv=None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    setup_logger(logging.DEBUG if args.verbose else logging.ERROR)
    if args.command == "compile":
        return _cmd_compile(args)
    return _cmd_nodes(args)


if __name__ == "__main__":
    sys.exit(main())
