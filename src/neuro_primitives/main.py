"""Application entrypoint — start the API server or run one-off commands."""

from __future__ import annotations

import argparse
import json
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import NoReturn

import structlog
import uvicorn
from pydantic import ValidationError

from neuro_primitives.config import get_settings
from neuro_primitives.estimation.pipeline import PrimitiveEstimator
from neuro_primitives.logger import setup_logging
from neuro_primitives.models import EventData
from neuro_primitives.profiles import get_all_profiles
from neuro_primitives.reporting import render_report

logger = structlog.get_logger(__name__)

EXIT_BAD_INPUT = 2


def _fail(message: str) -> NoReturn:
    print(f"error: {message}", file=sys.stderr)
    sys.exit(EXIT_BAD_INPUT)


def _load_events(path: Path) -> EventData:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        _fail(f"cannot read {path}: {exc.strerror or exc}")
    try:
        return EventData.model_validate_json(raw)
    except ValidationError as exc:
        _fail(f"invalid event file {path}: {exc.error_count()} validation error(s)\n{exc}")


def _parse_timestamp(value: str | None) -> datetime:
    if value is None:
        return datetime.now(UTC)
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        _fail(f"invalid --at timestamp {value!r}; expected ISO 8601")


def _cmd_estimate(args: argparse.Namespace) -> None:
    event_data = _load_events(Path(args.events))
    when = _parse_timestamp(args.at)
    result = PrimitiveEstimator().estimate_at_time(event_data.events, when)
    logger.info("cli.estimate", user=event_data.user_id, events=len(event_data.events))

    if args.json:
        print(json.dumps(result.model_dump(mode="json"), indent=2))
    else:
        print(render_report(result))


def _cmd_profiles(_: argparse.Namespace) -> None:
    for profile in get_all_profiles():
        print(f"{profile.id:<16} {profile.name:<18} {profile.description}")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="neuro-primitives",
        description="Estimate neurobiological primitives from life-event logs.",
    )
    sub = parser.add_subparsers(dest="command")

    # ── serve ─────────────────────────────────────────────────
    serve_parser = sub.add_parser("serve", help="Start the API server.")
    serve_parser.add_argument("--host", default=None)
    serve_parser.add_argument("--port", type=int, default=None)
    serve_parser.add_argument("--reload", action="store_true")

    # ── estimate ──────────────────────────────────────────────
    estimate_parser = sub.add_parser("estimate", help="Estimate primitives for an event file.")
    estimate_parser.add_argument("--events", default="mock_data.json", help="EventData JSON file.")
    estimate_parser.add_argument("--at", default=None, help="ISO 8601 estimation time (default: now, UTC).")
    estimate_parser.add_argument("--json", action="store_true", help="Print the raw result as JSON.")

    # ── profiles ──────────────────────────────────────────────
    sub.add_parser("profiles", help="List the demo profiles.")

    args = parser.parse_args(argv)
    settings = get_settings()
    setup_logging(settings.log_level)

    if args.command == "serve":
        uvicorn.run(
            "neuro_primitives.api.server:app",
            host=args.host or settings.api_host,
            port=args.port or settings.api_port,
            reload=args.reload,
        )
    elif args.command == "estimate":
        _cmd_estimate(args)
    elif args.command == "profiles":
        _cmd_profiles(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
