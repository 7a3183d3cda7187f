from __future__ import annotations

import argparse
import json
from pathlib import Path

from permgate.config import load_catalog, load_registry, registry_from_catalog
from permgate.core.dispatcher import ResponseDispatcher
from permgate.core.errors import PermgateError
from permgate.core.launcher import Launcher
from permgate.core.runtime_context import RuntimeContext
from permgate.host.in_memory import InMemoryHost
from permgate.observers import ToastObserver
from permgate.trace.replay import Replay


def _format_cli_error(e: Exception) -> str:
    """
    Print-friendly error formatting for CLI commands.
    - Always includes code/message (via __str__) when it's a PermgateError
    - Includes structured `data` payload when present
    """
    if isinstance(e, PermgateError) and isinstance(e.data, dict) and e.data:
        return str(e) + "\n" + json.dumps(e.data, ensure_ascii=False, indent=2)
    return str(e)


def cmd_list_capabilities(args: argparse.Namespace) -> int:
    registry = load_registry(args.config_path)
    cap_defs = registry.list_capabilities()
    if args.json:
        print(json.dumps(cap_defs, ensure_ascii=False, indent=2))
    else:
        for c in cap_defs:
            print("{capability_id} - {platform_name} (gated since {gated_since})".format(**c))
    return 0


def cmd_check_config(args: argparse.Namespace) -> int:
    registry = registry_from_catalog(load_catalog(args.config_path))
    print(f"OK ({len(registry)} capabilities)")
    return 0


def cmd_simulate(args: argparse.Namespace) -> int:
    registry = load_registry(args.config_path)
    dispatcher = ResponseDispatcher()
    host = InMemoryHost(granted=args.granted, dispatcher=dispatcher)
    launcher = Launcher(host, registry, dispatcher)

    ctx = RuntimeContext(
        run_id=args.run_id,
        platform_version=args.platform_version,
        notify_not_required=args.notify_not_required,
        trace_path=Path(args.trace),
    )
    gate, summary = launcher.start(ctx, args.capability, observer=ToastObserver(registry))

    if args.answer != "none":
        for token in host.unanswered_tokens():
            host.answer(token, args.answer == "grant")

    summary["final_states"] = {c: gate.state_of(c).value for c in args.capability}
    summary["pending_tokens"] = gate.pending_tokens()
    print(json.dumps(summary, ensure_ascii=False, indent=2))
    return 0


def cmd_show_trace(args: argparse.Namespace) -> int:
    replay = Replay(Path(args.trace))
    events = replay.history(args.capability) if args.capability else list(replay.iter_events())

    if args.event_type:
        events = [e for e in events if e.get("event_type") == args.event_type]

    if args.tail is not None and args.tail >= 0:
        events = events[-args.tail :] if args.tail else []

    for e in events:
        if args.pretty:
            print(json.dumps(e, ensure_ascii=False, indent=2))
        else:
            print(json.dumps(e, ensure_ascii=False))
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="permgate", description="Runtime permission gate CLI")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_list = sub.add_parser("list-capabilities", help="List capabilities in the catalog")
    p_list.add_argument("--config-path", help="Capability catalog YAML (default: XDG config, else built-in)")
    p_list.add_argument("--json", action="store_true", help="Output JSON")
    p_list.set_defaults(func=cmd_list_capabilities)

    p_check = sub.add_parser("check-config", help="Validate a capability catalog YAML")
    p_check.add_argument("--config-path", required=True, help="Capability catalog YAML")
    p_check.set_defaults(func=cmd_check_config)

    p_sim = sub.add_parser("simulate", help="Run a startup permission check against an in-memory host")
    p_sim.add_argument("--capability", action="append", required=True, help="Capability ID to ensure (repeatable)")
    p_sim.add_argument("--platform-version", type=int, required=True, help="Platform version of the simulated host")
    p_sim.add_argument("--granted", action="append", default=[], help="Capability already granted by the host (repeatable)")
    p_sim.add_argument(
        "--answer",
        default="none",
        choices=["grant", "deny", "none"],
        help="How the simulated user answers every request (default: none, leaves requests pending)",
    )
    p_sim.add_argument("--notify-not-required", action="store_true", help="Notify the observer for implicitly available capabilities")
    p_sim.add_argument("--config-path", help="Capability catalog YAML (default: XDG config, else built-in)")
    p_sim.add_argument("--trace", default="trace.jsonl", help="Trace output path (jsonl)")
    p_sim.add_argument("--run-id", default="run_cli", help="Run ID for trace correlation")
    p_sim.set_defaults(func=cmd_simulate)

    p_show_trace = sub.add_parser("show-trace", help="Show trace events from a JSONL file")
    p_show_trace.add_argument("--trace", required=True, help="Trace path (jsonl)")
    p_show_trace.add_argument("--event-type", help="Filter by event_type")
    p_show_trace.add_argument("--capability", help="Only events for this capability ID")
    p_show_trace.add_argument("--tail", type=int, help="Show only last N events")
    p_show_trace.add_argument("--pretty", action="store_true", help="Pretty-print each event as JSON")
    p_show_trace.set_defaults(func=cmd_show_trace)

    ns = parser.parse_args(argv)
    try:
        return int(ns.func(ns))
    except Exception as e:  # noqa: BLE001
        print(_format_cli_error(e))
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
