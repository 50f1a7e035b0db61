# ABOUTME: Progress tracking for icon downloads using Rich's built-in capabilities
# ABOUTME: Wraps a Rich Progress bar with a tracker that tallies download outcomes

from typing import Any

from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn


class DownloadProgressTracker:
    """Advances a Rich progress task and keeps running outcome counts."""

    def __init__(self, progress: Progress, task_id: Any):
        self.progress = progress
        self.task_id = task_id
        self.counts: dict[str, int] = {"downloaded": 0, "failed": 0, "skipped": 0}

    def __enter__(self):
        self.progress.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.progress.stop()

    def set_total(self, total: int) -> None:
        self.progress.update(self.task_id, total=total)

    def advance(self, status: str, label: str | None = None) -> None:
        """Record one finished asset and refresh the description."""
        self.counts[status] = self.counts.get(status, 0) + 1
        summary = ", ".join(f"{key}: {value}" for key, value in self.counts.items())
        description = f"🖼️  {label} ({summary})" if label else f"🖼️  {summary}"
        self.progress.update(self.task_id, advance=1, description=description)


def create_download_progress(
    console: Console, initial_description: str = "🖼️  Fetching icons..."
) -> tuple[Progress, Any, DownloadProgressTracker]:
    """Create a progress bar for the icon download stage.

    Args:
        console: Rich console instance
        initial_description: Initial progress description

    Returns:
        Tuple of (progress, task_id, tracker)
    """
    progress = Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )

    task_id = progress.add_task(initial_description, total=None)
    tracker = DownloadProgressTracker(progress, task_id)

    return progress, task_id, tracker
