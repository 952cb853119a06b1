"""
Progress manager for import events.

Percentages below the slide-creation band belong to the fetch layer (sign-in,
document download, image prefetch), which reports them before the pipeline
starts; the pipeline owns the band from ``progress_start`` upward.
"""

from enum import Enum
from typing import Optional

from slidegraph.config.import_config import ImportConfig, get_config
from slidegraph.models.events import ImportEvent


class ImportPhase(Enum):
    FETCH = "fetch"
    SLIDE_CREATION = "slide_creation"
    COMPLETE = "complete"


class ImportProgress:
    """
    Tracks progress for one import and builds the events the UI expects.

    Percent rises monotonically: each slide reports
    ``start + index / total * span`` before it is built.
    """

    def __init__(self, total_slides: int, config: Optional[ImportConfig] = None):
        config = config or get_config()
        self.total_slides = total_slides
        self.start = config.progress_start
        self.span = config.progress_span
        self.phase = ImportPhase.FETCH
        self.percent = self.start
        self.completed_slides = 0

    def slide_started(self, index: int) -> ImportEvent:
        """Progress event for slide ``index`` (0-based)."""
        self.phase = ImportPhase.SLIDE_CREATION
        if self.total_slides > 0:
            self.percent = self.start + (index / self.total_slides) * self.span
        return ImportEvent.progress(
            self.percent,
            f"Creating slide {index + 1} of {self.total_slides}..."
        )

    def slide_finished(self, index: int) -> None:
        self.completed_slides = index + 1

    def complete(self) -> ImportEvent:
        self.phase = ImportPhase.COMPLETE
        return ImportEvent.complete(self.total_slides)

    def cancelled(self) -> ImportEvent:
        return ImportEvent.cancelled(self.completed_slides)

    @staticmethod
    def error(message: str) -> ImportEvent:
        return ImportEvent.error(message)
