"""
Rich progress display driven by import events.
"""

from contextlib import contextmanager

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)

from store_app_importer.core.events import ImportEvent, LoggingEventSink

TERMINAL_EVENTS = {"import.completed", "import.failed"}


class ProgressEventSink(LoggingEventSink):
    """Logs every event and advances the progress bar when an import finishes."""

    def __init__(self, progress: Progress, task_id):
        super().__init__()
        self.progress = progress
        self.task_id = task_id

    def emit(self, event: ImportEvent) -> None:
        super().emit(event)
        if event.kind in TERMINAL_EVENTS:
            self.progress.advance(self.task_id)
        else:
            self.progress.update(
                self.task_id,
                description=f"[green]Importing... ({event.package_identifier}: {event.kind})[/green]",
            )

    @classmethod
    @contextmanager
    def open(cls, console: Console, total: int):
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeElapsedColumn(),
            console=console,
        ) as progress:
            task_id = progress.add_task("[green]Importing...[/green]", total=total)
            yield cls(progress, task_id)
