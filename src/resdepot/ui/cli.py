from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from resdepot.app import recover_read_write_manifest, run_check
from resdepot.config import ConfigurationError, configure_logging, get_storage_config
from resdepot.domain.checking import RecoveryOutcome

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from resdepot.app import CheckReport

log = logging.getLogger(__name__)


def _add_location_arguments(parser: argparse.ArgumentParser, *, read_only: bool = True) -> None:
    if read_only:
        parser.add_argument(
            "--read-only",
            type=str,
            help="Read-only storage root (defaults to RESDEPOT_READ_ONLY_PATH)",
        )
    parser.add_argument(
        "--read-write",
        type=str,
        help="Read-write storage root (defaults to RESDEPOT_READ_WRITE_PATH)",
    )


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile local resources with a manifest")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    check = subparsers.add_parser("check", help="Check resources against the target manifest")
    _add_location_arguments(check)
    check.add_argument(
        "--remote-root",
        type=str,
        help="Directory or URL holding the target version list (defaults to the read-write root)",
    )
    check.add_argument(
        "--variant",
        type=str,
        help="Content variant to select (resources without a variant always apply)",
    )
    check.add_argument(
        "--timeout",
        type=float,
        help="Seconds to wait for the three manifests before giving up",
    )

    recover = subparsers.add_parser(
        "recover",
        help="Restore the read-write manifest from a leftover backup",
    )
    _add_location_arguments(recover, read_only=False)

    return parser.parse_args(list(argv))


def _print_report(report: CheckReport) -> None:
    summary = report.summary
    log.info(
        "Resources: resolved=%s, updates=%s (%s bytes, %s compressed), removed=%s",
        len(report.snapshot.resolved),
        summary.update_count,
        summary.update_total_length,
        summary.update_total_compressed_length,
        summary.removed_count,
    )
    for update in sorted(report.updates, key=lambda item: item.name.sort_key()):
        log.info(
            "  needs update: %s (length=%s, compressed=%s)",
            update.name.full_name,
            update.length,
            update.compressed_length,
        )
    for failure in report.failures:
        log.warning("  %s", failure.describe())


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        storage = get_storage_config(
            read_only_path=getattr(parsed_args, "read_only", None),
            read_write_path=parsed_args.read_write,
            remote_root=getattr(parsed_args, "remote_root", None),
            require_read_only=parsed_args.command == "check",
        )
        timeout: float | None = getattr(parsed_args, "timeout", None)
        if timeout is not None and timeout <= 0:
            raise ConfigurationError("Timeout must be positive")  # noqa: TRY301
    except ConfigurationError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "check":
            report = run_check(
                parsed_args.variant,
                storage=storage,
                timeout=timeout,
            )
            _print_report(report)
        elif parsed_args.command == "recover":
            result = recover_read_write_manifest(storage=storage)
            if result.outcome is RecoveryOutcome.FAILED and result.failure is not None:
                log.warning(result.failure.describe())
            log.info("Recovery finished: %s", result.outcome)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except Exception:
        log.exception("Fatal error during resource check")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
