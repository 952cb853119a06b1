"""
In-memory scene host.

Records the node tree the pipeline creates, enforces the same preconditions a
real graphics host does (fonts must be loaded before text uses them, sizes
must be positive, a closed session rejects mutations) and serializes the
page to plain dicts.
"""

import asyncio
import hashlib
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Tuple

from slidegraph.core.interfaces import (
    EllipseNode,
    FrameNode,
    LineNode,
    RectangleNode,
    SceneHost,
    SceneNode,
    TextNode,
)
from slidegraph.exceptions import FontLoadError
from slidegraph.models.scene import (
    Paint,
    ResolvedFont,
    TextAlignHorizontal,
    TextAlignVertical,
    TextAutoResize,
    TextDecoration,
    WHITE,
    gray,
    solid,
)

MIN_SIZE = 0.01

DEFAULT_AVAILABLE_FONTS: Tuple[Tuple[str, str], ...] = (
    ("Inter", "Regular"), ("Inter", "Bold"), ("Inter", "Italic"), ("Inter", "Bold Italic"),
    ("Roboto", "Regular"), ("Roboto", "Bold"), ("Roboto", "Italic"), ("Roboto", "Bold Italic"),
    ("Roboto Mono", "Regular"), ("Roboto Mono", "Bold"),
    ("Arial", "Regular"), ("Arial", "Bold"), ("Arial", "Italic"), ("Arial", "Bold Italic"),
    ("Georgia", "Regular"), ("Georgia", "Bold"), ("Georgia", "Italic"),
)


class HostClosedError(RuntimeError):
    pass


class _MemoryNode:
    node_type = "NODE"
    default_name = "Node"

    def __init__(self, host: 'InMemorySceneHost'):
        self._host = host
        self.name = self.default_name
        self.x = 0.0
        self.y = 0.0
        self.rotation = 0.0
        self._width = 100.0
        self._height = 100.0
        self.fills: List[Paint] = []
        self.strokes: List[Paint] = []
        self.stroke_weight = 1.0
        self.parent: Optional['MemoryFrame'] = None

    @property
    def width(self) -> float:
        return self._width

    @property
    def height(self) -> float:
        return self._height

    def resize(self, width: float, height: float) -> None:
        self._host.check_open()
        if width < MIN_SIZE or height < MIN_SIZE:
            raise ValueError(f"Cannot resize {self.node_type} to {width}x{height}")
        self._width = width
        self._height = height

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "type": self.node_type,
            "name": self.name,
            "x": self.x,
            "y": self.y,
            "width": self._width,
            "height": self._height,
            "fills": [paint.to_dict() for paint in self.fills],
        }
        if self.rotation:
            data["rotation"] = self.rotation
        if self.strokes:
            data["strokes"] = [paint.to_dict() for paint in self.strokes]
            data["strokeWeight"] = self.stroke_weight
        return data


class MemoryRectangle(_MemoryNode, RectangleNode):
    node_type = "RECTANGLE"
    default_name = "Rectangle"

    def __init__(self, host: 'InMemorySceneHost'):
        super().__init__(host)
        # Hosts give new shapes a visible default fill
        self.fills = [gray(0.85)]
        self.corner_radius = 0.0

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        if self.corner_radius:
            data["cornerRadius"] = self.corner_radius
        return data


class MemoryEllipse(_MemoryNode, EllipseNode):
    node_type = "ELLIPSE"
    default_name = "Ellipse"

    def __init__(self, host: 'InMemorySceneHost'):
        super().__init__(host)
        self.fills = [gray(0.85)]


class MemoryLine(_MemoryNode, LineNode):
    node_type = "LINE"
    default_name = "Line"

    def __init__(self, host: 'InMemorySceneHost'):
        super().__init__(host)
        self._height = 0.0
        self.strokes = [solid(0, 0, 0)]

    def resize(self, width: float, height: float) -> None:
        self._host.check_open()
        if width < MIN_SIZE or height != 0:
            raise ValueError(f"Lines need a positive length and zero height, got {width}x{height}")
        self._width = width
        self._height = 0.0


class MemoryFrame(_MemoryNode, FrameNode):
    node_type = "FRAME"
    default_name = "Frame"

    def __init__(self, host: 'InMemorySceneHost'):
        super().__init__(host)
        self.fills = [WHITE]
        self._children: List[SceneNode] = []

    @property
    def children(self) -> Sequence[SceneNode]:
        return tuple(self._children)

    def append_child(self, node: SceneNode) -> None:
        self._host.check_open()
        previous = getattr(node, "parent", None)
        if previous is not None:
            previous._children.remove(node)
        self._children.append(node)
        node.parent = self

    def find_all(self, node_type: Optional[str] = None) -> List[SceneNode]:
        """All descendants, depth first, optionally filtered by node type."""
        found: List[SceneNode] = []
        for child in self._children:
            if node_type is None or child.node_type == node_type:
                found.append(child)
            if isinstance(child, MemoryFrame):
                found.extend(child.find_all(node_type))
        return found

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["children"] = [child.to_dict() for child in self._children]
        return data


class MemoryText(_MemoryNode, TextNode):
    node_type = "TEXT"
    default_name = "Text"

    def __init__(self, host: 'InMemorySceneHost'):
        super().__init__(host)
        self.fills = [solid(0, 0, 0)]
        self._characters = ""
        self._font_name: Optional[ResolvedFont] = None
        self.font_size = 12.0
        self.text_align_horizontal = TextAlignHorizontal.LEFT
        self.text_align_vertical = TextAlignVertical.TOP
        self.text_auto_resize = TextAutoResize.WIDTH_AND_HEIGHT
        self.range_styles: List[Tuple[str, int, int, Any]] = []

    @property
    def font_name(self) -> Optional[ResolvedFont]:
        return self._font_name

    @font_name.setter
    def font_name(self, font: ResolvedFont) -> None:
        self._host.require_font(font)
        self._font_name = font

    @property
    def characters(self) -> str:
        return self._characters

    @characters.setter
    def characters(self, value: str) -> None:
        if self._font_name is None:
            raise ValueError("Set font_name before characters")
        self._host.require_font(self._font_name)
        self._characters = value

    def _check_range(self, start: int, end: int) -> None:
        self._host.check_open()
        if not 0 <= start < end <= len(self._characters):
            raise ValueError(f"Invalid range [{start}, {end}) for {len(self._characters)} characters")

    def set_range_font_name(self, start: int, end: int, font: ResolvedFont) -> None:
        self._check_range(start, end)
        self._host.require_font(font)
        self.range_styles.append(("fontName", start, end, font))

    def set_range_font_size(self, start: int, end: int, size: float) -> None:
        self._check_range(start, end)
        if size < 1:
            raise ValueError(f"Font size must be at least 1, got {size}")
        self.range_styles.append(("fontSize", start, end, size))

    def set_range_fills(self, start: int, end: int, fills: List[Paint]) -> None:
        self._check_range(start, end)
        self.range_styles.append(("fills", start, end, list(fills)))

    def set_range_text_decoration(self, start: int, end: int, decoration: TextDecoration) -> None:
        self._check_range(start, end)
        self.range_styles.append(("textDecoration", start, end, decoration))

    def styles_for(self, prop: str) -> List[Tuple[int, int, Any]]:
        return [(start, end, value) for name, start, end, value in self.range_styles if name == prop]

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()

        def _value(value: Any) -> Any:
            if isinstance(value, ResolvedFont):
                return value.as_font_name()
            if isinstance(value, list):
                return [paint.to_dict() for paint in value]
            if isinstance(value, TextDecoration):
                return value.value
            return value

        data.update({
            "characters": self._characters,
            "fontName": self._font_name.as_font_name() if self._font_name else None,
            "fontSize": self.font_size,
            "textAlignHorizontal": self.text_align_horizontal.value,
            "textAlignVertical": self.text_align_vertical.value,
            "textAutoResize": self.text_auto_resize.value,
            "ranges": [
                {"property": name, "start": start, "end": end, "value": _value(value)}
                for name, start, end, value in self.range_styles
            ],
        })
        return data


class InMemorySceneHost(SceneHost):
    """A host that keeps everything in memory."""

    def __init__(
        self,
        available_fonts: Optional[Iterable[Tuple[str, str]]] = None,
        font_load_delay: float = 0.0
    ):
        fonts = DEFAULT_AVAILABLE_FONTS if available_fonts is None else available_fonts
        self.available_fonts: Set[ResolvedFont] = {ResolvedFont(family, style) for family, style in fonts}
        self.font_load_delay = font_load_delay
        self.loaded_fonts: Set[ResolvedFont] = set()
        self.font_requests: List[ResolvedFont] = []
        self.images: Dict[str, bytes] = {}
        self.page: List[SceneNode] = []
        self.selection: List[SceneNode] = []
        self.created: List[SceneNode] = []
        self.closed = False

    def check_open(self) -> None:
        if self.closed:
            raise HostClosedError("Host session is closed")

    def require_font(self, font: ResolvedFont) -> None:
        if font not in self.loaded_fonts:
            raise ValueError(f"Font {font} has not been loaded")

    def _create(self, node_class):
        self.check_open()
        node = node_class(self)
        self.created.append(node)
        return node

    def create_frame(self) -> MemoryFrame:
        return self._create(MemoryFrame)

    def create_rectangle(self) -> MemoryRectangle:
        return self._create(MemoryRectangle)

    def create_ellipse(self) -> MemoryEllipse:
        return self._create(MemoryEllipse)

    def create_line(self) -> MemoryLine:
        return self._create(MemoryLine)

    def create_text(self) -> MemoryText:
        return self._create(MemoryText)

    def create_image(self, data: bytes) -> str:
        self.check_open()
        if not data:
            raise ValueError("Image data is empty")
        image_hash = hashlib.sha1(data).hexdigest()
        self.images[image_hash] = bytes(data)
        return image_hash

    async def load_font(self, font: ResolvedFont) -> None:
        self.font_requests.append(font)
        await asyncio.sleep(self.font_load_delay)
        if font not in self.available_fonts:
            raise FontLoadError(font.family, font.style)
        self.loaded_fonts.add(font)

    def append_to_page(self, node: SceneNode) -> None:
        self.check_open()
        previous = getattr(node, "parent", None)
        if previous is not None:
            previous._children.remove(node)
            node.parent = None
        if node not in self.page:
            self.page.append(node)

    def focus(self, nodes: Sequence[SceneNode]) -> None:
        self.check_open()
        self.selection = list(nodes)

    def close(self) -> None:
        self.closed = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "page": [node.to_dict() for node in self.page],
            "selection": [node.name for node in self.selection],
            "images": sorted(self.images),
        }
