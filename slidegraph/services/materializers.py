"""
Leaf materializers: one per element kind.

Each takes a single element plus its transformed box and creates host nodes
in the given container, returning the nodes it appended there.
"""

import math
from typing import List, Optional

from slidegraph.config.import_config import ImportConfig, get_config
from slidegraph.core.cancellation import CancellationToken
from slidegraph.core.interfaces import FrameNode, SceneHost, SceneNode
from slidegraph.models.presentation import (
    ImageElement,
    LineElement,
    ShapeElement,
    ShapeKind,
    TableElement,
)
from slidegraph.models.scene import (
    WHITE,
    ImagePaint,
    SolidPaint,
    TextAutoResize,
    gray,
)
from slidegraph.services.font_resolver import FontResolver
from slidegraph.services.geometry import TargetBox, target_rotation
from slidegraph.services.image_data import ImageDataMap, decode_payload
from slidegraph.services.text_styler import TextRunStyler
from slidegraph.setup_logging import get_logger

logger = get_logger(__name__)

# Corner radius of ROUND_RECTANGLE, as a fraction of the shorter side
ROUND_RECTANGLE_RADIUS = 0.1


class Materializer:
    """Shared collaborators of the leaf materializers."""

    def __init__(
        self,
        host: SceneHost,
        fonts: FontResolver,
        config: Optional[ImportConfig] = None,
        cancel_token: Optional[CancellationToken] = None
    ):
        self.host = host
        self.fonts = fonts
        self.config = config or get_config()
        self.cancel_token = cancel_token or CancellationToken()


class ShapeMaterializer(Materializer):

    def __init__(self, host: SceneHost, fonts: FontResolver, text_styler: TextRunStyler, **kwargs):
        super().__init__(host, fonts, **kwargs)
        self.text_styler = text_styler

    async def materialize(
        self,
        parent: FrameNode,
        element: ShapeElement,
        box: TargetBox,
        scale: float = 1.0
    ) -> List[SceneNode]:
        kind = element.shape_kind
        if kind is ShapeKind.ELLIPSE:
            node = self.host.create_ellipse()
            node.resize(box.width, box.height)
        else:
            # Everything that is not an ellipse is drawn as a rectangle
            node = self.host.create_rectangle()
            node.resize(box.width, box.height)
            if kind is ShapeKind.ROUND_RECTANGLE:
                node.corner_radius = min(box.width, box.height) * ROUND_RECTANGLE_RADIUS

        node.x = box.x
        node.y = box.y

        # An empty list, not the host default fill
        node.fills = [SolidPaint(element.fill_color)] if element.fill_color else []

        if element.stroke_color and element.stroke_weight:
            node.strokes = [SolidPaint(element.stroke_color)]
            node.stroke_weight = element.stroke_weight

        if box.rotation:
            node.rotation = box.rotation

        parent.append_child(node)
        nodes: List[SceneNode] = [node]

        if element.has_text:
            text_node = await self.text_styler.style(parent, element, box, scale)
            if text_node is not None:
                nodes.append(text_node)

        return nodes


class ImageMaterializer(Materializer):

    async def materialize(
        self,
        parent: FrameNode,
        element: ImageElement,
        box: TargetBox,
        image_data: ImageDataMap
    ) -> List[SceneNode]:
        image_url = element.image_url
        if not image_url:
            logger.debug("Image element without an image key; nothing to create")
            return []

        payload = image_data.get(image_url)
        if not payload:
            logger.warning(f"No image data for {image_url[:80]}; using placeholder")
            return [self._placeholder(parent, box, "Image (failed to load)")]

        try:
            decoded = decode_payload(payload)
            image_hash = self.host.create_image(decoded.data)
        except Exception as e:
            logger.error(f"Failed to create image: {e}")
            return [self._placeholder(parent, box, "Image (error)")]

        rect = self.host.create_rectangle()
        rect.x = box.x
        rect.y = box.y
        rect.resize(box.width, box.height)
        rect.fills = [ImagePaint(image_hash, scale_mode="FILL")]
        rect.name = "Image"

        if box.rotation:
            rect.rotation = box.rotation

        parent.append_child(rect)
        return [rect]

    def _placeholder(self, parent: FrameNode, box: TargetBox, name: str) -> SceneNode:
        placeholder = self.host.create_rectangle()
        placeholder.x = box.x
        placeholder.y = box.y
        placeholder.resize(box.width, box.height)
        placeholder.fills = [gray(self.config.placeholder_gray)]
        placeholder.name = name
        parent.append_child(placeholder)
        return placeholder


class LineMaterializer(Materializer):

    async def materialize(self, parent: FrameNode, element: LineElement, box: TargetBox) -> List[SceneNode]:
        line = self.host.create_line()
        line.x = box.x
        line.y = box.y

        # Lines have a length and no height; the box diagonal becomes the angle
        line.resize(math.hypot(box.width, box.height), 0)
        if box.width != 0 or box.height != 0:
            line.rotation = target_rotation(math.degrees(math.atan2(box.height, box.width)))

        if element.stroke_color:
            line.strokes = [SolidPaint(element.stroke_color)]
        line.stroke_weight = element.stroke_weight or 1
        line.fills = []

        parent.append_child(line)
        return [line]


class TableMaterializer(Materializer):

    async def materialize(
        self,
        parent: FrameNode,
        element: TableElement,
        box: TargetBox,
        scale: float = 1.0
    ) -> List[SceneNode]:
        row_count, col_count = element.grid_shape
        if row_count == 0 or col_count == 0:
            return []

        if (element.row_count, element.column_count) not in ((None, None), (row_count, col_count)):
            logger.debug(
                f"Table declares {element.row_count}x{element.column_count} "
                f"but has a {row_count}x{col_count} grid; using the grid"
            )

        font = await self.fonts.resolve(self.config.text.table_font_family, 400)
        self.cancel_token.raise_if_cancelled()

        table_frame = self.host.create_frame()
        table_frame.name = "Table"
        table_frame.x = box.x
        table_frame.y = box.y
        table_frame.resize(box.width, box.height)
        table_frame.fills = []

        # Cells tile the box; their own size never drops below the host minimum
        pitch_x = box.width / col_count
        pitch_y = box.height / row_count
        cell_width = max(1.0, pitch_x)
        cell_height = max(1.0, pitch_y)
        # Cell text keeps a fixed size; only the padding follows the geometry
        font_size = self.config.text.table_font_size
        padding = self.config.text.text_padding * scale

        for row in range(row_count):
            for col in range(col_count):
                cell = self.host.create_rectangle()
                cell.x = col * pitch_x
                cell.y = row * pitch_y
                cell.resize(cell_width, cell_height)
                cell.fills = [WHITE]
                cell.strokes = [gray(self.config.cell_stroke_gray)]
                cell.stroke_weight = max(1, scale)
                table_frame.append_child(cell)

                cell_text = element.cell(row, col)
                if cell_text.strip():
                    text_node = self.host.create_text()
                    text_node.font_name = font
                    text_node.characters = cell_text
                    text_node.font_size = font_size
                    text_node.x = col * pitch_x + padding
                    text_node.y = row * pitch_y + padding
                    text_node.resize(
                        max(1.0, cell_width - padding * 2),
                        max(1.0, cell_height - padding * 2)
                    )
                    text_node.text_auto_resize = TextAutoResize.TRUNCATE
                    table_frame.append_child(text_node)

        parent.append_child(table_frame)
        return [table_frame]
