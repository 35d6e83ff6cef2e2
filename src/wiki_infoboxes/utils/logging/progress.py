# ABOUTME: Rich spinner that follows an update run's milestones
# ABOUTME: Each milestone replaces the spinner text and stays printed above it as a log line

from typing import Any

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn


class SimpleProgressTracker:
    """Progress callback for InfoboxUpdateService.

    Milestones are the coarse steps of a template run: existing snapshot size,
    pages found and fetched, snapshots written or left as they were.
    """

    def __init__(self, progress: Progress, task_id: Any):
        self.progress = progress
        self.task_id = task_id
        self.milestones: list[str] = []

    def update(self, message: str) -> None:
        self.milestones.append(message)
        self.progress.update(self.task_id, description=message)
        self.progress.console.print(f"  {message}")


def create_smart_progress(
    console: Console, initial_description: str = "🧪 Harvesting infoboxes..."
) -> tuple[Progress, Any, SimpleProgressTracker]:
    """Build a transient spinner and the tracker that drives it.

    Enter the returned Progress as a context manager for the duration of the
    run and pass ``tracker.update`` as the service's progress callback.
    """
    progress = Progress(
        SpinnerColumn(style="magenta"),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    )
    task_id = progress.add_task(initial_description, total=None)
    return progress, task_id, SimpleProgressTracker(progress, task_id)
