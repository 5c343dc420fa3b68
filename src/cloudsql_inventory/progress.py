from typing import Protocol

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)


class ProgressObserver(Protocol):
    def start(self, total: int) -> None: ...

    def describe(self, label: str) -> None: ...

    def advance(self, label: str) -> None: ...

    def finish(self) -> None: ...


class NullProgress:
    """Does nothing. Used in tests and non-interactive runs."""

    def start(self, total: int) -> None:
        pass

    def describe(self, label: str) -> None:
        pass

    def advance(self, label: str) -> None:
        pass

    def finish(self) -> None:
        pass


class RichProgress:
    """Progress bar on the stderr console, one step per project."""

    def __init__(self, console: Console) -> None:
        self.progress = Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=console,
            transient=False,
        )
        self.task_id: TaskID | None = None

    def start(self, total: int) -> None:
        self.progress.start()
        self.task_id = self.progress.add_task("Processing...", total=total)

    def describe(self, label: str) -> None:
        if self.task_id is not None:
            self.progress.update(self.task_id, description=label)

    def advance(self, label: str) -> None:
        if self.task_id is not None:
            self.progress.update(self.task_id, advance=1, description=label)

    def finish(self) -> None:
        self.progress.stop()
