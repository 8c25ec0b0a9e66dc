#!/usr/bin/env python3
"""
Session Replay Bridge CLI

Drives the method channel without a host application. Every command builds
one dispatcher (SDK -> adapter -> dispatcher) and routes calls through it,
exactly as the HTTP server does.

Commands:

1) methods
   - Print the method names the channel answers.

2) invoke METHOD [--arguments JSON]
   - Dispatch a single call and print the result envelope.

3) run-script PATH
   - Load a JSON list of {"method": ..., "arguments": ...} objects and
     dispatch them in order through the same dispatcher, so a script like
     initializeSessionReplay -> startRecording -> captureScreenshot shares
     one session handle.

4) calls [--day YYYY-MM-DD]
   - Print the JSONL call log written by earlier commands.

The HTTP server is started separately, e.g.:

    uvicorn runtime.api.server:app --reload
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

# Ensure project root is on sys.path when running as a script
ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from configs.settings import LOG_LEVELS, settings
from exceptions.exceptions import ScriptFormatError
from runtime.bridge import build_dispatcher
from runtime.dispatcher.method_dispatcher import MethodDispatcher
from runtime.models.channel_models import ChannelResponse, ResultKind
from runtime.store.call_log_store import CallLogStore


def _build(call_log: CallLogStore) -> MethodDispatcher:
    return build_dispatcher(settings, call_log=call_log)


def _print_response(response: ChannelResponse) -> None:
    print(json.dumps(response.model_dump(mode="json"), indent=2, ensure_ascii=False))


def _load_script(path: str) -> List[Dict[str, Any]]:
    """Read and validate a call script file."""
    script_path = Path(path)
    if not script_path.is_file():
        raise FileNotFoundError(f"Call script not found: {path}")

    try:
        with script_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as exc:
        raise ScriptFormatError(path, f"Invalid JSON: {exc}") from exc

    if not isinstance(data, list):
        raise ScriptFormatError(path)
    for index, entry in enumerate(data):
        if not isinstance(entry, dict) or not isinstance(entry.get("method"), str):
            raise ScriptFormatError(
                path, f"Entry {index} must be an object with a string 'method'."
            )
    return data


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def cmd_methods(dispatcher: MethodDispatcher) -> int:
    print(f"[Replay-Bridge] Channel: {settings.channel_name}")
    for name in dispatcher.methods:
        print(f"[Replay-Bridge]   {name}")
    return 0


def cmd_invoke(dispatcher: MethodDispatcher, method: str, arguments: Optional[str]) -> int:
    """
    Dispatch one call. Returns 1 when the channel answers with an error or
    not-implemented, 0 otherwise.
    """
    payload = None
    if arguments is not None:
        try:
            payload = json.loads(arguments)
        except json.JSONDecodeError as exc:
            print(f"[Replay-Bridge] ✗ --arguments is not valid JSON: {exc}", file=sys.stderr)
            return 2

    result = dispatcher.invoke(method, payload)
    _print_response(ChannelResponse.from_result(method, result))
    return 0 if result.kind == ResultKind.SUCCESS else 1


def cmd_run_script(dispatcher: MethodDispatcher, path: str) -> int:
    calls = _load_script(path)
    print(f"[Replay-Bridge] Running {len(calls)} call(s) from {path}")

    failures = 0
    for entry in calls:
        method = entry["method"]
        result = dispatcher.invoke(method, entry.get("arguments"))
        status = result.outcome.status.value if result.outcome else "-"
        if result.is_success:
            print(f"[Replay-Bridge] ✓ {method} → {result.value!r} ({status})")
        else:
            failures += 1
            detail = result.error.code if result.error else result.kind.value
            print(f"[Replay-Bridge] ✗ {method} → {detail}")

    session = dispatcher.session
    print(
        "[Replay-Bridge] Session: "
        f"initialized={session.initialized} "
        f"recording={session.recording_requested} "
        f"screenshots={session.screenshots_requested}"
    )
    return 1 if failures else 0


def cmd_calls(call_log: CallLogStore, day: Optional[str]) -> int:
    """Print one line per logged call for the given day."""
    events = call_log.read_events(day)
    if not events:
        print(f"[Replay-Bridge] No calls logged in {call_log.log_dir}")
        return 0
    for event in events:
        status = event.get("outcome_status") or event.get("error_code") or "-"
        print(
            f"[Replay-Bridge] {event['timestamp']} {event['method']} "
            f"{event['kind']} ({status})"
        )
    return 0


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Session Replay Bridge CLI")
    parser.add_argument(
        "--data-dir",
        default=str(settings.runtime_data_dir),
        help=(
            "Runtime data directory for the call log "
            "(default: REPLAY_BRIDGE_RUNTIME_DATA_DIR or 'runtime/data')"
        ),
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        type=str.upper,
        choices=LOG_LEVELS,
        help="Logging level (default: REPLAY_BRIDGE_LOG_LEVEL or INFO)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # methods
    subparsers.add_parser("methods", help="List the channel's method names")

    # invoke
    p_invoke = subparsers.add_parser("invoke", help="Dispatch a single method call")
    p_invoke.add_argument("method", help="Channel method name, e.g. startRecording")
    p_invoke.add_argument(
        "--arguments",
        default=None,
        help='JSON argument payload, e.g. \'{"userId": "abc123"}\'',
    )

    # run-script
    p_script = subparsers.add_parser(
        "run-script",
        help="Dispatch a JSON list of calls through one dispatcher",
    )
    p_script.add_argument("path", help="Path to the JSON call script")

    # calls
    p_calls = subparsers.add_parser(
        "calls",
        help="Print the call log for a day",
    )
    p_calls.add_argument(
        "--day",
        default=None,
        help="Day to print as YYYY-MM-DD (default: today, UTC)",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level)
    call_log = CallLogStore(data_dir=args.data_dir)
    dispatcher = _build(call_log)
    command: str = args.command

    if command == "methods":
        return cmd_methods(dispatcher)
    elif command == "invoke":
        return cmd_invoke(dispatcher, method=args.method, arguments=args.arguments)
    elif command == "run-script":
        return cmd_run_script(dispatcher, path=args.path)
    elif command == "calls":
        return cmd_calls(call_log, day=args.day)
    else:
        parser.error(f"Unknown command: {command}")
    return 2


if __name__ == "__main__":
    sys.exit(main())
