import argparse
import json
import sys
import time

from .autocomplete import ALL_NAMESPACES
from .exceptions import LvsError
from .graph.analyzer import DEFAULT_DOCUMENT, GraphAnalyzer
from .graph.loader import load_graph
from .log_config import configure_logging
from .sockets.classes import NodeStatus
from .sockets.node_kinds import default_registry
from .utils import ReportArtifactEncoder, TerminalColors

STATUS_COLORS = {
    NodeStatus.OK: TerminalColors.GREEN,
    NodeStatus.DEGRADED: TerminalColors.YELLOW,
    NodeStatus.INVALID: TerminalColors.RED,
}


def _format_socket(socket) -> str:
    type_text = str(socket.type)
    if socket.refined_type is not None:
        type_text += f" ({socket.refined_type})"
    return f"{socket.id}: {type_text}"


def _print_report(report):
    print(f"\n{TerminalColors.CYAN}--- Nodes ---{TerminalColors.RESET}")
    for node in report.nodes:
        color = STATUS_COLORS[node.sockets.status]
        scope = node.scope_id or "global"
        print(f"{node.node_id} [{node.kind}] in {scope}: {color}{node.sockets.status}{TerminalColors.RESET}")
        print(f"    inputs:  {', '.join(_format_socket(s) for s in node.sockets.inputs) or '-'}")
        print(f"    outputs: {', '.join(_format_socket(s) for s in node.sockets.outputs) or '-'}")
        for diagnostic in node.sockets.diagnostics:
            print(f"    {diagnostic.severity}: {diagnostic.message}")

    print(f"\n{TerminalColors.CYAN}--- Scopes ---{TerminalColors.RESET}")
    for scope in report.scopes:
        members = ", ".join(sorted(scope.member_names)) or "-"
        print(f"{scope.id} ({scope.scope_type}) parent={scope.parent_scope_id or 'global'} members: {members}")

    if report.invalid_edges:
        print(f"\n{TerminalColors.RED}--- Invalid Connections ---{TerminalColors.RESET}")
        for issue in report.invalid_edges:
            print(f"{issue.edge_id} ({issue.source} -> {issue.target}): {issue.message}")


def _inspect(args) -> int:
    graph = load_graph(args.graph)
    with GraphAnalyzer(graph, document=args.document) as analyzer:
        report = analyzer.analyze()
        payload = {"report": report}

        if args.node:
            variables, functions = analyzer.visible_symbols(args.node)
            payload["visible"] = {"variables": variables, "functions": functions}
            if args.complete is not None:
                payload["completions"] = analyzer.complete(args.node, args.complete, namespace=ALL_NAMESPACES)

        if args.json:
            print(json.dumps(payload, indent=2, cls=ReportArtifactEncoder))
            return 0

        print(f"--- Inspecting {args.graph} ---")
        _print_report(report)

        if args.node:
            print(f"\n{TerminalColors.CYAN}--- Visible from {args.node} ---{TerminalColors.RESET}")
            for variable in payload["visible"]["variables"]:
                print(f"{variable.name}: {variable.type} ({variable.scope_id or 'global'})")
            for function in payload["visible"]["functions"]:
                print(f"{function.signature} ({function.scope_id or 'global'})")
            if "completions" in payload:
                names = ", ".join(s.name for s in payload["completions"]) or "-"
                print(f"\nCompletions for '{args.complete}': {names}")
    return 0


def _kinds(args) -> int:
    registry = default_registry()
    if args.json:
        print(json.dumps(registry.categories(), indent=2))
        return 0
    for category, kinds in registry.categories().items():
        print(f"{TerminalColors.CYAN}{category}{TerminalColors.RESET}: {', '.join(kinds)}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lvs", description="Inspect scopes, symbols and sockets of a Luau visual-script graph.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Emit debug logs to stderr.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    inspect_parser = subparsers.add_parser("inspect", help="Analyze a saved editor graph.")
    inspect_parser.add_argument("graph", help="Path to the graph JSON file ({nodes, edges}).")
    inspect_parser.add_argument("--document", default=DEFAULT_DOCUMENT, help="Document id to register the graph under.")
    inspect_parser.add_argument("--node", help="Show the symbols visible from this node.")
    inspect_parser.add_argument("--complete", metavar="PARTIAL", help="With --node, list completions for a partial identifier.")
    inspect_parser.add_argument("--json", action="store_true", help="Print the report as JSON.")
    inspect_parser.set_defaults(handler=_inspect)

    kinds_parser = subparsers.add_parser("kinds", help="List the registered node kinds by category.")
    kinds_parser.add_argument("--json", action="store_true", help="Print the kinds as JSON.")
    kinds_parser.set_defaults(handler=_kinds)
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if getattr(args, "complete", None) is not None and not args.node:
        parser.error("--complete requires --node.")

    configure_logging("DEBUG" if args.verbose else "WARNING")
    start_time = time.perf_counter()

    try:
        exit_code = args.handler(args)
    except LvsError as e:
        print(f"{TerminalColors.RED}--- ERROR ---\n{e}{TerminalColors.RESET}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"{TerminalColors.RED}--- UNEXPECTED ERROR ---{TerminalColors.RESET}", file=sys.stderr)
        print("This may be a bug in lvs. Please report it.", file=sys.stderr)
        print(f"{type(e).__name__}: {e}", file=sys.stderr)
        sys.exit(1)

    if args.verbose:
        duration = time.perf_counter() - start_time
        print(f"{TerminalColors.CYAN}--- Total Execution Time: {duration:.4f} seconds ---{TerminalColors.RESET}", file=sys.stderr)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
