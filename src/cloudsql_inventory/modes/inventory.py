import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape

from ..aggregator import ResultSet
from ..clients import get_sql_client, get_thread_sql_client
from ..config import OutputFormat, RunConfig
from ..logger import logger
from ..progress import NullProgress, ProgressObserver
from ..reporter import csv_filename, render_table, write_csv
from ..schemas.sql import ProjectResult
from ..walkers import sql
from ..walkers.org import ProjectLister


def _label(project_id: str) -> str:
    return f"Processing project: {project_id}"


def collect_sequential(
    project_ids: list[str],
    service: Any,
    progress: ProgressObserver,
    pause: float = 0.0,
) -> tuple[ResultSet, list[ProjectResult]]:
    """One project at a time, all of its pages before the next."""
    result_set = ResultSet()
    results = []
    for pid in project_ids:
        progress.describe(_label(pid))
        if pause:
            time.sleep(pause)

        result = sql.list_instances(service, pid)
        result_set.append(result.records)
        results.append(result)

        progress.advance(_label(pid))
    return result_set, results


def collect_parallel(
    project_ids: list[str],
    service_factory: Callable[[], Any],
    progress: ProgressObserver,
    concurrency: int,
    pause: float = 0.0,
) -> tuple[ResultSet, list[ProjectResult]]:
    """
    Bounded worker pool, one task per project.
    Results land in slots indexed by project position and are flattened in
    that order, so the output matches a sequential run.
    """
    slots: list[ProjectResult | None] = [None] * len(project_ids)

    def _task(pid: str) -> ProjectResult:
        progress.describe(_label(pid))
        if pause:
            time.sleep(pause)
        return sql.list_instances(service_factory(), pid)

    executor = ThreadPoolExecutor(max_workers=concurrency)
    try:
        futures = {
            executor.submit(_task, pid): idx for idx, pid in enumerate(project_ids)
        }

        for future in as_completed(futures):
            idx = futures[future]
            pid = project_ids[idx]
            try:
                slots[idx] = future.result()
            except Exception as e:
                # Building this worker's client failed
                logger.warning(
                    f"Failed to list SQL instances for {pid}: {escape(str(e))}"
                )
                slots[idx] = ProjectResult(project_id=pid, error=str(e))
            progress.advance(_label(pid))
    except KeyboardInterrupt:
        # Drop queued projects; only the ones already running finish
        executor.shutdown(wait=False, cancel_futures=True)
        raise
    executor.shutdown(wait=True)

    results = [s for s in slots if s is not None]
    return ResultSet.from_slots(slots), results


def collect(
    project_ids: list[str],
    progress: ProgressObserver,
    concurrency: int = 1,
    pause: float = 0.0,
    service: Any = None,
    service_factory: Callable[[], Any] | None = None,
) -> tuple[ResultSet, list[ProjectResult]]:
    progress.start(len(project_ids))
    try:
        if concurrency > 1 and len(project_ids) > 1:
            return collect_parallel(
                project_ids,
                service_factory or get_thread_sql_client,
                progress,
                concurrency,
                pause,
            )
        if service is None and project_ids:
            service = service_factory() if service_factory else get_sql_client()
        return collect_sequential(project_ids, service, progress, pause)
    finally:
        progress.finish()


def report(
    result_set: ResultSet,
    config: RunConfig,
    log_console: Console,
    out_console: Console,
    now: datetime | None = None,
) -> Path | None:
    if config.output is OutputFormat.CSV:
        path = config.output_dir / csv_filename(now)
        write_csv(result_set.records, path)
        log_console.print(f"Results written to [bold]{path}[/bold]")
        return path

    render_table(result_set.records, out_console)
    return None


def run_inventory(
    config: RunConfig,
    list_projects: ProjectLister,
    log_console: Console,
    out_console: Console,
    progress: ProgressObserver | None = None,
    service: Any = None,
    service_factory: Callable[[], Any] | None = None,
) -> ResultSet:
    """
    Discovers projects, lists Cloud SQL instances in each and renders the report.

    Fatal problems (project discovery, credentials, client, output file) raise
    InventoryError. A project whose listing fails is logged and skipped.
    """
    project_ids = config.apply_limit(list_projects())
    log_console.print(f"Scanning [bold]{len(project_ids)}[/bold] project(s)...")

    # Credentials and the client are resolved even when no project is selected,
    # so missing credentials are always fatal
    if service is None and service_factory is None:
        if config.concurrency > 1:
            service_factory = get_thread_sql_client
            service_factory()
        else:
            service = get_sql_client()

    result_set, results = collect(
        project_ids,
        progress or NullProgress(),
        concurrency=config.concurrency,
        pause=config.pause,
        service=service,
        service_factory=service_factory,
    )

    failed = [r.project_id for r in results if not r.ok]
    if failed:
        logger.warning(
            f"{len(failed)} of {len(project_ids)} project(s) could not be listed"
        )

    report(result_set, config, log_console, out_console)
    return result_set
