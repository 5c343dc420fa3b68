import argparse
import logging
import sys
from importlib.metadata import version
from pathlib import Path

from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from .config import OutputFormat, ProjectSource, RunConfig
from .errors import InventoryError
from .logger import logger, setup_logger
from .modes import inventory
from .progress import NullProgress, ProgressObserver, RichProgress
from .walkers.org import get_project_lister


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cloudsql-inventory",
        description="Cloud SQL Inventory: database versions across GCP projects",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Table of every Cloud SQL instance in every project gcloud can see
  cloudsql-inventory

  # Only the first 10 projects, written to cloudsql_version_<Month><Year>.csv
  cloudsql-inventory -output csv -limit 10

  # Discover projects through the Resource Manager API, 8 projects at a time
  cloudsql-inventory --project-source api --concurrency 8
""",
    )
    try:
        ver = version("cloudsql-inventory")
    except Exception:
        ver = "unknown"
    parser.add_argument(
        "--version", action="version", version=f"cloudsql-inventory v{ver}"
    )

    parser.add_argument(
        "-output",
        "--output",
        default=OutputFormat.TABLE.value,
        choices=[f.value for f in OutputFormat],
        help="Output format: 'table' or 'csv' (default: table)",
    )
    parser.add_argument(
        "-limit",
        "--limit",
        type=int,
        default=-1,
        help="Limit the number of projects to process (negative means no limit)",
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        default=1,
        help="Number of projects to scan in parallel (default: 1)",
    )
    parser.add_argument(
        "--pause",
        type=float,
        default=0.0,
        help="Seconds to pause before each project (default: 0)",
    )
    parser.add_argument(
        "--project-source",
        default=ProjectSource.GCLOUD.value,
        choices=[s.value for s in ProjectSource],
        help="Discover projects with the gcloud CLI or the Resource Manager API",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("."),
        help="Directory for the CSV report (default: current directory)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log per-project details"
    )
    return parser


def parse_config(argv: list[str] | None = None) -> RunConfig:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        setup_logger(level=logging.INFO)

    try:
        return RunConfig(
            output=OutputFormat(args.output),
            limit=args.limit,
            concurrency=args.concurrency,
            pause=args.pause,
            project_source=ProjectSource(args.project_source),
            output_dir=args.output_dir,
        )
    except ValidationError as e:
        parser.error(str(e))


def main(argv: list[str] | None = None) -> None:
    config = parse_config(argv)

    log_console = Console(stderr=True)
    out_console = Console()

    progress: ProgressObserver = (
        RichProgress(log_console) if log_console.is_terminal else NullProgress()
    )

    try:
        inventory.run_inventory(
            config,
            get_project_lister(config.project_source),
            log_console,
            out_console,
            progress=progress,
        )
    except InventoryError as e:
        logger.error(escape(str(e)))
        sys.exit(1)


def cli() -> None:
    try:
        main()
    except KeyboardInterrupt:
        console = Console(stderr=True)
        console.print("\n[bold red]Operation cancelled by user.[/bold red]")
        sys.exit(130)


if __name__ == "__main__":
    cli()
