# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from recordsync.app import ImportServiceFactory
from recordsync.config import configure_logging
from recordsync.domain.reconciliation.events import ImportEvents

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from types import FrameType

    from recordsync.domain.model import ChangeSet, RecordSet

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Synchronise records into a local store")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run = subparsers.add_parser("run", help="Run the import of a preset")
    run.add_argument("preset", help="Name of the preset to import")
    run.add_argument(
        "--force-updates",
        action="store_true",
        help="Update every known record regardless of its version",
    )
    run.add_argument(
        "--from-fixture",
        action="store_true",
        help="Read records from the preset's fixture file instead of its source",
    )
    run.add_argument(
        "--source-options",
        type=str,
        help="JSON object merged over the configured source options",
    )
    run.add_argument(
        "--target-options",
        type=str,
        help="JSON object merged over the configured target options",
    )
    run.add_argument(
        "--quiet",
        action="store_true",
        help="Only report errors",
    )

    prune = subparsers.add_parser("prune", help="Remove all records of a preset's target")
    prune.add_argument("preset", help="Name of the preset to prune")
    prune.add_argument("--yes", action="store_true", help="Do not ask for confirmation")

    subparsers.add_parser("presets", help="List configured presets")

    preset = subparsers.add_parser("preset", help="Show the configuration of a preset")
    preset.add_argument("preset", help="Name of the preset to show")

    setup = subparsers.add_parser("setup", help="Check that a preset's source and target are ready")
    setup.add_argument("preset", help="Name of the preset to check")

    args = parser.parse_args(list(argv))
    if args.command == "run":
        if args.from_fixture and args.source_options is not None:
            raise ValueError("--source-options cannot be combined with --from-fixture")
        args.source_options = _parse_json_object(args.source_options, "--source-options")
        args.target_options = _parse_json_object(args.target_options, "--target-options")
    return args


def _parse_json_object(value: str | None, option: str) -> dict[str, object] | None:
    if value is None:
        return None
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError as exc:
        raise ValueError(f"{option} is not valid JSON: {exc}") from exc
    if not isinstance(parsed, dict):
        raise ValueError(f"{option} must be a JSON object")
    return parsed


def _progress_events() -> ImportEvents:
    events = ImportEvents()

    def on_load_finished(records: RecordSet) -> None:
        log.info("Loaded %d records", len(records))

    def on_changes(change_set: ChangeSet) -> None:
        summary = change_set.summary()
        log.info(
            "Changes: %d to add, %d to update, %d to remove",
            summary["added"],
            summary["updated"],
            summary["removed"],
        )

    def on_update_started(records: RecordSet, forced: bool) -> None:
        log.info("Updating %d records%s", len(records), " (forced)" if forced else "")

    events.load_started.subscribe(lambda: log.info("Loading records"))
    events.load_finished.subscribe(on_load_finished)
    events.changes_computed.subscribe(on_changes)
    events.add_started.subscribe(lambda records: log.info("Adding %d records", len(records)))
    events.update_started.subscribe(on_update_started)
    events.remove_started.subscribe(lambda ids: log.info("Removing %d records", len(ids)))
    return events


def _error_events(events: ImportEvents | None = None) -> ImportEvents:
    events = events or ImportEvents()
    events.error.subscribe(lambda message: log.error("%s", message))
    return events


def _run(
    args: argparse.Namespace,
    factory_builder: Callable[..., ImportServiceFactory],
) -> int:
    events = _error_events(None if args.quiet else _progress_events())
    factory = factory_builder(events=events)
    if args.from_fixture:
        service = factory.create_with_fixture(args.preset, args.target_options)
    else:
        service = factory.create(args.preset, args.source_options, args.target_options)
    result = service.import_data(force_updates=args.force_updates)
    if not args.quiet:
        log.info(
            "Import finished: added=%d, updated=%d, removed=%d, errors=%d",
            result.added,
            result.updated,
            result.removed,
            len(result.errors),
        )
    return 0


def _prune(args: argparse.Namespace, factory: ImportServiceFactory) -> int:
    if not args.yes:
        answer = input(f'Remove all records of preset "{args.preset}"? [y/N] ')
        if answer.strip().lower() not in {"y", "yes"}:
            print("Aborted")
            return 0
    removed = factory.create(args.preset).remove_all_data()
    print(f"Removed {removed} records")
    return 0


def _show_presets(factory: ImportServiceFactory) -> int:
    for name in factory.preset_names():
        description = factory.preset_configuration(name).description
        print(f"{name}: {description}" if description else name)
    return 0


def _show_preset(args: argparse.Namespace, factory: ImportServiceFactory) -> int:
    factory.preset_configuration(args.preset)
    print(json.dumps(factory.presets.raw(args.preset), indent=2, default=str))
    return 0


def _setup(args: argparse.Namespace, factory: ImportServiceFactory) -> int:
    readiness = factory.create(args.preset).setup()
    for message in readiness.messages():
        print(f"[{message.severity}] {message.text}")
    return 1 if readiness.has_errors() or readiness.has_warnings() else 0


def main(
    argv: Sequence[str] | None = None,
    *,
    factory_builder: Callable[..., ImportServiceFactory] = ImportServiceFactory,
) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "run":
            exit_code = _run(parsed_args, factory_builder)
        elif parsed_args.command == "prune":
            exit_code = _prune(parsed_args, factory_builder())
        elif parsed_args.command == "presets":
            exit_code = _show_presets(factory_builder())
        elif parsed_args.command == "preset":
            exit_code = _show_preset(parsed_args, factory_builder())
        elif parsed_args.command == "setup":
            exit_code = _setup(parsed_args, factory_builder())
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)

    if exit_code:
        sys.exit(exit_code)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def cli() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    cli()
