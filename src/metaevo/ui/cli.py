from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from metaevo.adapters.document import render_report
from metaevo.app import (
    co_evolve,
    evolve_database,
    evolve_document,
    export_metamodel,
    import_metamodel,
)
from metaevo.config import (
    ConfigurationError,
    configure_logging,
    get_evolution_config,
    get_log_level,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from metaevo.app import EvolutionOutcome

log = logging.getLogger(__name__)


def _existing_file(value: str) -> Path:
    path = Path(value)
    if not path.is_file():
        raise ValueError(f"File not found: {value}")
    return path


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Evolve metamodels from model-level changes")
    subparsers = parser.add_subparsers(dest="command", required=True)

    evolve = subparsers.add_parser("evolve", help="Evolve a JSON metamodel file")
    evolve.add_argument("metamodel", type=str, help="Path to the metamodel JSON document")
    evolve.add_argument("changes", type=str, help="Path to the change batch JSON document")
    evolve.add_argument(
        "--output",
        type=str,
        help="Where to write the evolved metamodel (defaults to overwriting the input)",
    )
    _add_batch_options(evolve)

    import_ = subparsers.add_parser("import", help="Store a JSON metamodel in the database")
    import_.add_argument("metamodel", type=str, help="Path to the metamodel JSON document")
    import_.add_argument(
        "--replace",
        action="store_true",
        help="Overwrite a metamodel already stored in the database",
    )
    _add_database_option(import_)

    evolve_db = subparsers.add_parser("evolve-db", help="Evolve the metamodel in the database")
    evolve_db.add_argument("changes", type=str, help="Path to the change batch JSON document")
    _add_batch_options(evolve_db)
    _add_database_option(evolve_db)

    export = subparsers.add_parser("export", help="Write the stored metamodel to JSON")
    export.add_argument("output", type=str, help="Destination path for the JSON document")
    _add_database_option(export)

    co_evolve_cmd = subparsers.add_parser(
        "co-evolve",
        help="Migrate a model to the evolved metamodel (not supported)",
    )
    co_evolve_cmd.add_argument("model", type=str, help="Path to the model document")
    co_evolve_cmd.add_argument("output", type=str, help="Destination path for the migrated model")

    return parser.parse_args(list(argv))


def _add_batch_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--resolutions",
        type=str,
        help="JSON document resolving ambiguous changes by operationId or changeIndex",
    )
    parser.add_argument(
        "--report",
        type=str,
        help="Write the evolution report to this path instead of stdout",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Interpret and resolve only; do not apply",
    )


def _add_database_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--database-uri",
        type=str,
        help="SQLAlchemy database URI (defaults to DATABASE_URI or the data directory)",
    )


def _validate_paths(args: argparse.Namespace) -> None:
    if args.command == "evolve":
        _existing_file(args.metamodel)
        _existing_file(args.changes)
    elif args.command == "evolve-db":
        _existing_file(args.changes)
    elif args.command == "import":
        _existing_file(args.metamodel)
    if getattr(args, "resolutions", None):
        _existing_file(args.resolutions)


def _optional_path(value: str | None) -> Path | None:
    return Path(value) if value else None


def _emit_report(outcome: EvolutionOutcome, report_path: str | None) -> None:
    rendered = render_report(outcome.report)
    if report_path:
        Path(report_path).write_text(rendered + "\n", encoding="utf-8")
        log.info("Wrote evolution report to %s", report_path)
    else:
        sys.stdout.write(rendered + "\n")


def _finish_batch(outcome: EvolutionOutcome, args: argparse.Namespace) -> None:
    _emit_report(outcome, args.report)
    if args.dry_run:
        log.info(
            "Dry run: %d pending, %d ambiguous",
            outcome.report.pending_count,
            outcome.report.ambiguous_count,
        )
        return
    if not outcome.success:
        log.error(
            "Evolution incomplete: %d applied, %d failed, %d ambiguous",
            outcome.report.applied_count,
            outcome.report.failed_count,
            outcome.report.ambiguous_count,
        )
        sys.exit(1)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        configure_logging(level=get_log_level(), force=True)
        parsed_args = _parse_args(args_list)
        _validate_paths(parsed_args)
        config = get_evolution_config()
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "evolve":
            outcome = evolve_document(
                metamodel_path=Path(parsed_args.metamodel),
                changes_path=Path(parsed_args.changes),
                resolutions_path=_optional_path(parsed_args.resolutions),
                output_path=_optional_path(parsed_args.output),
                config=config,
                dry_run=parsed_args.dry_run,
            )
        elif parsed_args.command == "evolve-db":
            outcome = evolve_database(
                changes_path=Path(parsed_args.changes),
                resolutions_path=_optional_path(parsed_args.resolutions),
                config=config,
                dry_run=parsed_args.dry_run,
                database_uri=parsed_args.database_uri,
            )
        elif parsed_args.command == "import":
            package = import_metamodel(
                Path(parsed_args.metamodel),
                replace=parsed_args.replace,
                database_uri=parsed_args.database_uri,
            )
            log.info("Imported metamodel %s (%d classes)", package.name, len(package.classes))
            return
        elif parsed_args.command == "export":
            export_metamodel(Path(parsed_args.output), database_uri=parsed_args.database_uri)
            return
        elif parsed_args.command == "co-evolve":
            result = co_evolve(Path(parsed_args.model), Path(parsed_args.output))
            log.error(result.message)
            sys.exit(1)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error during evolution")
        sys.exit(1)

    _finish_batch(outcome, parsed_args)


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
