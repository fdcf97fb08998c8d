"""CLI entry point: run once, run on an interval, or check bot credentials."""
from __future__ import annotations

import argparse
import sys
import time

from jobalert.config import ConfigError, load_settings
from jobalert.log import get_logger, set_level
from jobalert.tables import StoreError

log = get_logger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="jobalert",
        description="Poll job boards and send matching postings to Telegram",
    )
    subparsers = parser.add_subparsers(dest="command")

    run_parser = subparsers.add_parser("run", help="Run one scan (default)")
    loop_parser = subparsers.add_parser("loop", help="Run a scan every N minutes")
    loop_parser.add_argument(
        "--interval-minutes",
        type=int,
        default=30,
        help="Minutes between runs (default: 30)",
    )
    subparsers.add_parser("check", help="Verify Telegram bot credentials")

    for p in (run_parser, loop_parser):
        p.add_argument(
            "--window",
            choices=["1", "7", "30"],
            help="First-run lookback in days (default: TIME_WINDOW or 30)",
        )
    for p in (parser, *subparsers.choices.values()):
        p.add_argument(
            "--verbose", "-v",
            action="store_true",
            default=argparse.SUPPRESS,
            help="Enable verbose (DEBUG) logging",
        )

    args = parser.parse_args(argv)
    if args.command is None:
        args.command = "run"
    if not hasattr(args, "window"):
        args.window = None
    if not hasattr(args, "verbose"):
        args.verbose = False
    return args


def run_once(window: str | None) -> int:
    from jobalert.agent import run

    try:
        stats = run(load_settings(window))
    except (ConfigError, StoreError) as e:
        log.error("Run aborted: %s", e)
        return 1
    log.info("  Jobs fetched: %d", stats.fetched)
    log.info("  Matched: %d", stats.matched)
    log.info("  Alerts sent: %d", stats.sent)
    return 0


def loop(window: str | None, interval_minutes: int) -> int:
    log.info("Scheduler: run every %d minute(s)", interval_minutes)
    while True:
        code = run_once(window)
        if code:
            return code
        log.info("Next run in %d minute(s)", interval_minutes)
        time.sleep(interval_minutes * 60)


def check() -> int:
    from jobalert.telegram import TelegramNotifier

    settings = load_settings()
    missing = [m for m in settings.missing() if m.startswith("TELEGRAM")]
    if missing:
        print(f"Error: {', '.join(missing)} not set", file=sys.stderr)
        return 1
    ok, msg = TelegramNotifier(settings.bot_token, settings.chat_id).check()
    print(msg, file=sys.stdout if ok else sys.stderr)
    return 0 if ok else 1


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    if args.verbose:
        set_level("DEBUG")

    if args.command == "check":
        sys.exit(check())
    elif args.command == "loop":
        sys.exit(loop(args.window, args.interval_minutes))
    else:
        sys.exit(run_once(args.window))


if __name__ == "__main__":
    main()
