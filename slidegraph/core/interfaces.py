"""
Narrow interface to the host scene graph.

The pipeline only creates nodes, sizes and positions them, sets paints,
appends them to containers and asks the host to load fonts. Anything that
implements these classes (a real graphics application bridge, or the
in-memory host used by the tests and the CLI) can receive an import.
"""

from abc import ABC, abstractmethod
from typing import List, Sequence

from slidegraph.models.scene import (
    Paint,
    ResolvedFont,
    TextAlignHorizontal,
    TextAlignVertical,
    TextAutoResize,
    TextDecoration,
)


# ============= Nodes =============

class SceneNode(ABC):
    """Anything placed in the scene. Rotation is in degrees, target convention."""

    name: str
    x: float
    y: float
    rotation: float

    @property
    @abstractmethod
    def width(self) -> float:
        pass

    @property
    @abstractmethod
    def height(self) -> float:
        pass

    @abstractmethod
    def resize(self, width: float, height: float) -> None:
        pass


class GeometryNode(SceneNode):
    """A node with fill and stroke paints."""

    fills: List[Paint]
    strokes: List[Paint]
    stroke_weight: float


class RectangleNode(GeometryNode):
    corner_radius: float


class EllipseNode(GeometryNode):
    pass


class LineNode(GeometryNode):
    pass


class FrameNode(GeometryNode):
    """Container; child order is paint order."""

    @property
    @abstractmethod
    def children(self) -> Sequence[SceneNode]:
        pass

    @abstractmethod
    def append_child(self, node: SceneNode) -> None:
        pass


class TextNode(GeometryNode):
    """Text node supporting styling of character ranges ``[start, end)``."""

    characters: str
    font_name: ResolvedFont
    font_size: float
    text_align_horizontal: TextAlignHorizontal
    text_align_vertical: TextAlignVertical
    text_auto_resize: TextAutoResize

    @abstractmethod
    def set_range_font_name(self, start: int, end: int, font: ResolvedFont) -> None:
        pass

    @abstractmethod
    def set_range_font_size(self, start: int, end: int, size: float) -> None:
        pass

    @abstractmethod
    def set_range_fills(self, start: int, end: int, fills: List[Paint]) -> None:
        pass

    @abstractmethod
    def set_range_text_decoration(self, start: int, end: int, decoration: TextDecoration) -> None:
        pass


# ============= Host =============

class SceneHost(ABC):
    """The host graphics application as seen by the import pipeline."""

    @abstractmethod
    def create_frame(self) -> FrameNode:
        pass

    @abstractmethod
    def create_rectangle(self) -> RectangleNode:
        pass

    @abstractmethod
    def create_ellipse(self) -> EllipseNode:
        pass

    @abstractmethod
    def create_line(self) -> LineNode:
        pass

    @abstractmethod
    def create_text(self) -> TextNode:
        pass

    @abstractmethod
    def create_image(self, data: bytes) -> str:
        """Register image bytes and return the hash used by image paints."""
        pass

    @abstractmethod
    async def load_font(self, font: ResolvedFont) -> None:
        """Make a font usable; raises :class:`FontLoadError` when unavailable."""
        pass

    @abstractmethod
    def append_to_page(self, node: SceneNode) -> None:
        pass

    def focus(self, nodes: Sequence[SceneNode]) -> None:
        """Select the given nodes and bring them into view."""
        pass

    def close(self) -> None:
        """Release the host session."""
        pass
