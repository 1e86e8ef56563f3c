from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from arrsync.adapters.guide import FilesystemGuide
from arrsync.app import delete_custom_formats, list_custom_formats, sync_services
from arrsync.common.logging import configure_logging
from arrsync.config import ConfigFilterCriteria, ConfigurationError
from arrsync.domain.records import ServiceType

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Synchronise guide data into Radarr/Sonarr")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        help="Also write full debug output to this file",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    sync = subparsers.add_parser("sync", help="Sync custom formats, scores and release profiles")
    sync.add_argument(
        "--config",
        type=Path,
        action="append",
        default=[],
        help="Configuration file to use instead of the default locations (repeatable)",
    )
    sync.add_argument(
        "--instance",
        type=str,
        action="append",
        default=[],
        help="Only process the named instance (repeatable)",
    )
    sync.add_argument(
        "--service",
        type=ServiceType,
        choices=list(ServiceType),
        help="Only process instances of this service type",
    )
    sync.add_argument(
        "--preview",
        action="store_true",
        help="Log what would change without touching any instance",
    )
    sync.add_argument(
        "--guide-dir",
        type=Path,
        help="Local checkout of the guide repository (defaults to the data directory)",
    )

    listing = subparsers.add_parser(
        "list-custom-formats",
        help="List custom formats available in the guide",
    )
    listing.add_argument("service", type=ServiceType, choices=list(ServiceType))
    listing.add_argument(
        "--guide-dir",
        type=Path,
        help="Local checkout of the guide repository (defaults to the data directory)",
    )

    delete = subparsers.add_parser(
        "delete-custom-formats",
        help="Delete custom formats from an instance",
    )
    delete.add_argument("instance", type=str, help="Configured instance name")
    delete.add_argument("names", nargs="*", help="Names of the custom formats to delete")
    delete.add_argument(
        "--all",
        dest="delete_all",
        action="store_true",
        help="Delete every custom format on the instance",
    )
    delete.add_argument(
        "--force",
        action="store_true",
        help="Required together with --all",
    )
    delete.add_argument(
        "--preview",
        action="store_true",
        help="Log what would be deleted without deleting anything",
    )

    return parser.parse_args(list(argv))


def _validate_args(args: argparse.Namespace) -> None:
    if args.command != "delete-custom-formats":
        return
    if args.delete_all and args.names:
        raise ValueError("Pass either custom format names or --all, not both")
    if args.delete_all and not args.force and not args.preview:
        raise ValueError("--all deletes every custom format; confirm with --force")
    if not args.delete_all and not args.names:
        raise ValueError("Pass at least one custom format name, or --all")


def _guide(guide_dir: Path | None) -> FilesystemGuide | None:
    return FilesystemGuide(guide_dir.expanduser()) if guide_dir is not None else None


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        _validate_args(parsed_args)
    except ValueError:
        configure_logging()
        log.exception("CLI validation error")
        sys.exit(2)

    configure_logging(
        level=logging.DEBUG if parsed_args.verbose else logging.INFO,
        log_file=parsed_args.log_file,
    )

    try:
        if parsed_args.command == "sync":
            report = sync_services(
                criteria=ConfigFilterCriteria(
                    manual_config_files=tuple(parsed_args.config),
                    instances=tuple(parsed_args.instance),
                    service=parsed_args.service,
                ),
                preview=parsed_args.preview,
                guide=_guide(parsed_args.guide_dir),
            )
            if report.failed:
                log.error(
                    "Failed instances: %s",
                    ", ".join(outcome.instance_name for outcome in report.failed),
                )
                sys.exit(int(report.exit_status))
        elif parsed_args.command == "list-custom-formats":
            for custom_format in list_custom_formats(
                parsed_args.service,
                guide=_guide(parsed_args.guide_dir),
            ):
                print(f"{custom_format.trash_id}  # {custom_format.name}")  # noqa: T201
        elif parsed_args.command == "delete-custom-formats":
            result = delete_custom_formats(
                parsed_args.instance,
                parsed_args.names,
                delete_all=parsed_args.delete_all,
                preview=parsed_args.preview,
            )
            log.info("Deleted %s custom format(s)", result.deleted)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except ConfigurationError:
        log.exception("Configuration error")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during sync")
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
