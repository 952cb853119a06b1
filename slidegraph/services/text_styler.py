"""
Text attached to shapes.

The runs of a shape are concatenated into one text node; each run then
styles its own character range. A failure while styling one range is logged
and the remaining ranges are still styled.
"""

import math
from typing import Callable, Optional

from slidegraph.config.import_config import ImportConfig, get_config
from slidegraph.core.cancellation import CancellationToken
from slidegraph.core.interfaces import FrameNode, SceneHost, TextNode
from slidegraph.exceptions import FontUnavailableError, ImportCancelledError
from slidegraph.models.presentation import ShapeElement, TextRun
from slidegraph.models.scene import (
    SolidPaint,
    TextAlignHorizontal,
    TextAlignVertical,
    TextAutoResize,
    TextDecoration,
)
from slidegraph.services.font_resolver import FontResolver
from slidegraph.services.geometry import TargetBox
from slidegraph.setup_logging import get_logger

logger = get_logger(__name__)

HORIZONTAL_ALIGNMENT = {
    "START": TextAlignHorizontal.LEFT,
    "CENTER": TextAlignHorizontal.CENTER,
    "END": TextAlignHorizontal.RIGHT,
    "JUSTIFIED": TextAlignHorizontal.JUSTIFIED,
}


def scaled_font_size(size: Optional[float], scale: float, default: float = 14) -> int:
    """Font size scaled with the geometry, rounded half up and floored at 1."""
    scaled = (size or default) * scale
    return max(1, int(math.floor(scaled + 0.5)))


class TextRunStyler:
    """Creates the text node for a shape's :class:`TextContent`."""

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

    async def style(
        self,
        parent: FrameNode,
        shape: ShapeElement,
        box: TargetBox,
        scale: float = 1.0
    ) -> Optional[TextNode]:
        content = shape.text
        if not content or not content.runs:
            return None

        full_text = content.full_text
        if not full_text.strip():
            return None

        # The host needs a default font before characters or ranges can be set
        first_run = content.runs[0]
        default_font = await self.fonts.resolve(first_run.font_family, first_run.font_weight, first_run.italic)
        self.cancel_token.raise_if_cancelled()

        text_node = self.host.create_text()
        text_node.font_name = default_font
        text_node.characters = full_text
        text_node.font_size = scaled_font_size(first_run.font_size, scale, self.config.text.default_font_size)

        for run, start, end in content.run_ranges():
            await self._style_range(text_node, run, start, end, scale)

        padding = self.config.text.text_padding * scale
        text_node.resize(max(1.0, box.width - padding * 2), max(1.0, box.height - padding * 2))
        text_node.x = box.x + padding
        text_node.y = box.y + padding

        text_node.text_align_horizontal = HORIZONTAL_ALIGNMENT.get(content.alignment, TextAlignHorizontal.LEFT)
        text_node.text_align_vertical = TextAlignVertical.CENTER
        text_node.text_auto_resize = TextAutoResize.NONE

        if box.rotation:
            text_node.rotation = box.rotation

        parent.append_child(text_node)
        return text_node

    async def _style_range(self, text_node: TextNode, run: TextRun, start: int, end: int, scale: float) -> None:
        try:
            font = await self.fonts.resolve(run.font_family, run.font_weight, run.italic)
            self.cancel_token.raise_if_cancelled()
            text_node.set_range_font_name(start, end, font)
        except (FontUnavailableError, ImportCancelledError):
            raise
        except Exception as e:
            logger.error(f"Failed to apply text font to [{start}, {end}): {e}")

        self._apply(
            "font size", start, end,
            lambda: text_node.set_range_font_size(
                start, end, scaled_font_size(run.font_size, scale, self.config.text.default_font_size)
            )
        )

        if run.color:
            self._apply(
                "text color", start, end,
                lambda: text_node.set_range_fills(start, end, [SolidPaint(run.color)])
            )

        if run.underline:
            self._apply(
                "underline", start, end,
                lambda: text_node.set_range_text_decoration(start, end, TextDecoration.UNDERLINE)
            )

        # Applied after underline, so a run with both ends up struck through
        if run.strikethrough:
            self._apply(
                "strikethrough", start, end,
                lambda: text_node.set_range_text_decoration(start, end, TextDecoration.STRIKETHROUGH)
            )

    @staticmethod
    def _apply(label: str, start: int, end: int, action: Callable[[], None]) -> None:
        try:
            action()
        except Exception as e:
            logger.error(f"Failed to apply text {label} to [{start}, {end}): {e}")
