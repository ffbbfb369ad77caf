"""
Progress display for running commands.

The command runner only knows how long a tool is expected to take, so the
value it reports is an elapsed-time guess, not real completion. Displays
just render whatever percentage they are given.
"""

import math
from typing import Optional, Protocol

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TaskID,
    TaskProgressColumn,
    TextColumn,
    TimeRemainingColumn,
)

from secproto.console import console as default_console

# Synthetic progress never claims completion until the process has exited
MAX_SYNTHETIC_PROGRESS = 99


def synthetic_progress(elapsed_ms: float, estimated_duration_ms: float) -> int:
    """
    Estimate progress from elapsed time.

    Args:
        elapsed_ms: Time since the command started
        estimated_duration_ms: Expected run time of the command

    Returns:
        Percentage in the range 0-99
    """
    if estimated_duration_ms <= 0:
        return MAX_SYNTHETIC_PROGRESS
    progress = math.floor(elapsed_ms / estimated_duration_ms * 100)
    return max(0, min(progress, MAX_SYNTHETIC_PROGRESS))


class ProgressDisplay(Protocol):
    """Anything that can show a 0-100 progress value."""

    def start(self) -> None: ...

    def update(self, percentage: int) -> None: ...

    def stop(self) -> None: ...


class RichProgressBar:
    """Single progress bar rendered with Rich."""

    def __init__(self, description: str, console: Optional[Console] = None):
        self.description = description
        self._progress = Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TextColumn("| ETA:"),
            TimeRemainingColumn(),
            TextColumn("|"),
            MofNCompleteColumn(),
            console=console or default_console,
        )
        self._task_id: Optional[TaskID] = None

    def start(self) -> None:
        self._progress.start()
        self._task_id = self._progress.add_task(self.description, total=100)

    def update(self, percentage: int) -> None:
        if self._task_id is not None:
            self._progress.update(self._task_id, completed=percentage)

    def stop(self) -> None:
        self._progress.stop()


def rich_progress_factory(console: Optional[Console] = None):
    """Build a factory creating one Rich progress bar per command."""

    def factory(command: str) -> ProgressDisplay:
        parts = command.split()
        return RichProgressBar(parts[0] if parts else command, console)

    return factory
