"""
Command-line entry point.

Usage:
    mailtender authorize
    mailtender [--dry-run] [-v] scan
    mailtender scan [--dry-run] [-v] [--log-file PATH | --no-log-file] [--json-logs]
    mailtender watch [--interval MINUTES]
"""

import argparse
import sys
from pathlib import Path

from mailtender.config import Settings, settings as default_settings
from mailtender.core.exceptions import AuthorizationError
from mailtender.core.logging import configure_logging, get_logger
from mailtender.processors.scan import ScanProcessor
from mailtender.services.capture import CaptureClient

log = get_logger(__name__)


def add_common_arguments(parser: argparse.ArgumentParser, suppress: bool = False) -> None:
    """Global flags, accepted before or after the command."""
    flag_default = argparse.SUPPRESS if suppress else False
    parser.add_argument(
        "--dry-run",
        action="store_true",
        default=flag_default,
        help="Classify and log only; no capture calls, no label changes",
    )
    parser.add_argument("-v", "--verbose", action="store_true", default=flag_default, help="Debug logging")
    parser.add_argument(
        "--log-file",
        default=argparse.SUPPRESS if suppress else None,
        help="Append logs to this file",
    )
    parser.add_argument("--no-log-file", action="store_true", default=flag_default, help="Log to stdout only")
    parser.add_argument("--json-logs", action="store_true", default=flag_default, help="Emit JSON log lines")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mailtender",
        description="File known mailbox notifications as scheduled tasks",
    )
    add_common_arguments(parser)

    # Subcommand copies must not overwrite flags given before the command
    common = argparse.ArgumentParser(add_help=False)
    add_common_arguments(common, suppress=True)

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("authorize", parents=[common], help="Authorize access to the mailbox")
    subparsers.add_parser("scan", parents=[common], help="Run one scan of the inbox and context labels")
    watch = subparsers.add_parser("watch", parents=[common], help="Scan periodically until interrupted")
    watch.add_argument("--interval", type=int, help="Minutes between scans")
    return parser


def setup_logging(args: argparse.Namespace, settings: Settings) -> None:
    if args.no_log_file:
        log_file = None
    elif args.log_file:
        log_file = Path(args.log_file).expanduser()
    else:
        log_file = settings.log_path
    configure_logging(
        log_level="DEBUG" if args.verbose else settings.log_level,
        json_output=args.json_logs or settings.log_json,
        log_file=log_file,
    )


def build_processor(settings: Settings, dry_run: bool) -> ScanProcessor:
    """Authorize non-interactively and wire the Gmail mailbox to the capture sink."""
    from mailtender.services.auth import authorize
    from mailtender.services.gmail import GmailMailbox

    credentials = authorize(interactive=False, settings=settings)
    return ScanProcessor(
        GmailMailbox(credentials=credentials),
        CaptureClient(settings=settings),
        settings=settings,
        dry_run=dry_run,
    )


def cmd_authorize(args: argparse.Namespace, settings: Settings) -> int:
    from mailtender.services.auth import authorize

    authorize(interactive=True, settings=settings)
    log.info("authorized", token_path=str(settings.token_file))
    return 0


def cmd_scan(args: argparse.Namespace, settings: Settings) -> int:
    processor = build_processor(settings, dry_run=args.dry_run or settings.dry_run)
    processor.process()
    return 0


def cmd_watch(args: argparse.Namespace, settings: Settings) -> int:
    from mailtender.scheduler import run_scheduler

    dry_run = args.dry_run or settings.dry_run
    # Fail fast on missing credentials before the first scheduled run
    build_processor(settings, dry_run)
    run_scheduler(
        lambda: build_processor(settings, dry_run),
        args.interval or settings.scan_interval_minutes,
    )
    return 0


COMMANDS = {
    "authorize": cmd_authorize,
    "scan": cmd_scan,
    "watch": cmd_watch,
}


def main(argv: list[str] | None = None, settings: Settings | None = None) -> int:
    settings = settings or default_settings
    args = build_parser().parse_args(argv)
    setup_logging(args, settings)
    log.info("starting", command=args.command, dry_run=args.dry_run or settings.dry_run)

    try:
        return COMMANDS[args.command](args, settings)
    except AuthorizationError as e:
        log.error("authorization_failed", error=str(e))
        return 1
    finally:
        log.info("done", command=args.command)


if __name__ == "__main__":
    sys.exit(main())
