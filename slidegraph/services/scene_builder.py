"""
Scene builder: dispatches slide elements to their materializers.

Elements are materialized strictly in document order, which is the paint
order in the target container. Groups are flattened: their children land in
the same container, offset by the group origin. A failing element is
recorded and skipped; the rest of the slide is still built.
"""

from typing import List, Optional, Sequence, Tuple

from slidegraph.config.import_config import ImportConfig, get_config
from slidegraph.core.cancellation import CancellationToken
from slidegraph.core.interfaces import FrameNode, SceneHost, SceneNode
from slidegraph.exceptions import GroupDepthError, UnsupportedElementError, is_element_local
from slidegraph.models.events import ElementFailure, SlideReport
from slidegraph.models.presentation import (
    ElementBase,
    GroupElement,
    ImageElement,
    LineElement,
    ShapeElement,
    TableElement,
)
from slidegraph.services.font_resolver import FontResolver
from slidegraph.services.geometry import GeometryTransform
from slidegraph.services.image_data import ImageDataMap
from slidegraph.services.materializers import (
    ImageMaterializer,
    LineMaterializer,
    ShapeMaterializer,
    TableMaterializer,
)
from slidegraph.services.text_styler import TextRunStyler
from slidegraph.setup_logging import get_logger

logger = get_logger(__name__)

Offset = Tuple[float, float]


class SceneBuilder:
    """Materializes the elements of one presentation into host containers."""

    def __init__(
        self,
        host: SceneHost,
        transform: GeometryTransform,
        fonts: Optional[FontResolver] = None,
        config: Optional[ImportConfig] = None,
        cancel_token: Optional[CancellationToken] = None
    ):
        self.host = host
        self.transform = transform
        self.config = config or get_config()
        self.fonts = fonts or FontResolver(host, memoize=self.config.text.memoize_fonts)
        self.cancel_token = cancel_token or CancellationToken()

        shared = {"config": self.config, "cancel_token": self.cancel_token}
        self.text_styler = TextRunStyler(host, self.fonts, **shared)
        self.shapes = ShapeMaterializer(host, self.fonts, self.text_styler, **shared)
        self.images = ImageMaterializer(host, self.fonts, **shared)
        self.lines = LineMaterializer(host, self.fonts, **shared)
        self.tables = TableMaterializer(host, self.fonts, **shared)

    @property
    def scale(self) -> float:
        return self.transform.scale

    async def build(
        self,
        container: FrameNode,
        elements: Sequence[ElementBase],
        image_data: ImageDataMap,
        slide_index: int = 0
    ) -> SlideReport:
        """Materialize a slide's elements into ``container``.

        Never raises for element-local problems; those are collected in the
        returned report. Cancellation and a missing last-resort font propagate.
        """
        failures: List[ElementFailure] = []
        nodes = await self._build_sequence(container, elements, image_data, (0.0, 0.0), 0, "", failures)
        if failures:
            logger.warning(f"Slide {slide_index + 1}: {len(failures)} element(s) could not be created")
        return SlideReport(
            index=slide_index,
            element_count=len(elements),
            node_count=len(nodes),
            failures=failures
        )

    async def materialize(
        self,
        container: FrameNode,
        element: ElementBase,
        image_data: ImageDataMap,
        offset: Offset = (0.0, 0.0),
        depth: int = 0,
        path: str = "0",
        failures: Optional[List[ElementFailure]] = None
    ) -> List[SceneNode]:
        """Materialize one element, dispatching on its kind."""
        if isinstance(element, GroupElement):
            return await self._materialize_group(
                container, element, image_data, offset, depth, path,
                failures if failures is not None else []
            )

        box = self.transform.to_target_space(element, *offset)

        if isinstance(element, ShapeElement):
            return await self.shapes.materialize(container, element, box, self.scale)
        elif isinstance(element, ImageElement):
            return await self.images.materialize(container, element, box, image_data)
        elif isinstance(element, LineElement):
            return await self.lines.materialize(container, element, box)
        elif isinstance(element, TableElement):
            return await self.tables.materialize(container, element, box, self.scale)

        kind = getattr(element, "type", type(element).__name__)
        raise UnsupportedElementError(kind, f"No materializer for element type {kind!r}")

    async def _build_sequence(
        self,
        container: FrameNode,
        elements: Sequence[ElementBase],
        image_data: ImageDataMap,
        offset: Offset,
        depth: int,
        prefix: str,
        failures: List[ElementFailure]
    ) -> List[SceneNode]:
        created: List[SceneNode] = []
        for index, element in enumerate(elements):
            self.cancel_token.raise_if_cancelled()
            path = f"{prefix}{index}"
            try:
                created.extend(
                    await self.materialize(container, element, image_data, offset, depth, path, failures)
                )
            except Exception as e:
                if not is_element_local(e):
                    raise
                kind = getattr(element, "type", type(element).__name__)
                logger.warning(f"Failed to create element {path} ({kind}): {e}")
                failures.append(ElementFailure(path=path, kind=kind, message=str(e)))
        return created

    async def _materialize_group(
        self,
        container: FrameNode,
        group: GroupElement,
        image_data: ImageDataMap,
        offset: Offset,
        depth: int,
        path: str,
        failures: List[ElementFailure]
    ) -> List[SceneNode]:
        if not group.children:
            return []

        child_depth = depth + 1
        if child_depth > self.config.max_group_depth:
            raise GroupDepthError(child_depth, self.config.max_group_depth)

        # Offsets stay in document units; the transform scales each child once
        child_offset = (offset[0] + group.x, offset[1] + group.y)
        return await self._build_sequence(
            container, group.children, image_data, child_offset, child_depth, f"{path}.", failures
        )
