"""
Import orchestrator: turns a presentation into one frame per slide.

Slides are built strictly in document order and laid out in a row. The
import is best-effort: nodes created before a failure or a cancellation stay
where they are, and the caller always receives exactly one terminal event
(complete, error or cancelled).
"""

from typing import List, Optional

from slidegraph.application.event_bus import EventBus
from slidegraph.config.import_config import ImportConfig, get_config
from slidegraph.core.cancellation import CancellationToken
from slidegraph.core.interfaces import FrameNode, SceneHost
from slidegraph.exceptions import (
    EmptyPresentationError,
    ImportCancelledError,
    SlideImportError,
)
from slidegraph.models.events import ImportEvent, ImportResult
from slidegraph.models.presentation import Presentation
from slidegraph.models.scene import WHITE
from slidegraph.progress_manager import ImportProgress
from slidegraph.services.font_resolver import FontResolver
from slidegraph.services.geometry import GeometryTransform
from slidegraph.services.image_data import ImageDataMap
from slidegraph.services.scene_builder import SceneBuilder
from slidegraph.setup_logging import get_logger

logger = get_logger(__name__)


class ImportOrchestrator:
    """Runs one import pass against a host."""

    def __init__(
        self,
        host: SceneHost,
        event_bus: Optional[EventBus] = None,
        config: Optional[ImportConfig] = None,
        cancel_token: Optional[CancellationToken] = None
    ):
        self.host = host
        self.event_bus = event_bus or EventBus()
        self.config = config or get_config()
        self.cancel_token = cancel_token or CancellationToken()
        self.fonts = FontResolver(host, memoize=self.config.text.memoize_fonts)

    async def run(self, presentation: Presentation, image_data: Optional[ImageDataMap] = None) -> ImportResult:
        """Import every slide; returns what was created and what failed."""
        result = ImportResult()
        progress = ImportProgress(len(presentation.slides), self.config)

        try:
            await self._import(presentation, image_data or {}, result, progress)
        except ImportCancelledError:
            result.cancelled = True
            logger.info(f"Import cancelled after {result.slide_count} slide(s)")
            await self._emit(progress.cancelled())
        except Exception as e:
            result.error = self._error_message(e)
            if isinstance(e, EmptyPresentationError):
                logger.warning(result.error)
            else:
                logger.error(f"Import failed: {e}", exc_info=True)
            await self._emit(progress.error(result.error))
        finally:
            self.fonts.reset()

        return result

    async def _import(
        self,
        presentation: Presentation,
        image_data: ImageDataMap,
        result: ImportResult,
        progress: ImportProgress
    ) -> None:
        slides = presentation.slides
        total_slides = len(slides)
        if total_slides == 0:
            raise EmptyPresentationError()

        transform = GeometryTransform.for_presentation(presentation, self.config)
        builder = SceneBuilder(
            self.host,
            transform,
            fonts=self.fonts,
            config=self.config,
            cancel_token=self.cancel_token
        )
        logger.info(
            f"Importing {presentation.title!r}: {total_slides} slide(s), "
            f"canvas {transform.canvas_width:g}x{transform.canvas_height:g}, scale {transform.scale:.4f}"
        )

        frames: List[FrameNode] = []
        for index, slide in enumerate(slides):
            self.cancel_token.raise_if_cancelled()
            await self._emit(progress.slide_started(index))
            self.cancel_token.raise_if_cancelled()

            frame = self._create_slide_frame(index, transform)
            # On the page before its contents, so a cancelled slide is not orphaned
            self.host.append_to_page(frame)
            frames.append(frame)
            result.frames.append(frame)

            report = await builder.build(frame, slide.elements, image_data, slide_index=index)
            result.slides.append(report)
            result.slide_count = index + 1
            progress.slide_finished(index)

        self.host.focus(frames)
        logger.info(
            f"Import complete: {total_slides} slide(s), {len(result.failures)} element failure(s)"
        )
        await self._emit(progress.complete())

    def _create_slide_frame(self, index: int, transform: GeometryTransform) -> FrameNode:
        frame = self.host.create_frame()
        frame.name = f"Slide {index + 1}"
        frame.resize(transform.canvas_width, transform.canvas_height)
        frame.x = index * (transform.canvas_width + self.config.canvas.slide_spacing)
        frame.y = 0
        frame.fills = [WHITE]
        return frame

    async def _emit(self, event: ImportEvent) -> None:
        await self.event_bus.emit(event)

    @staticmethod
    def _error_message(error: Exception) -> str:
        if isinstance(error, SlideImportError):
            return error.message
        return str(error) or "Failed to import slides"
