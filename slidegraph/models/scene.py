"""
Value types on the target side of the conversion: fonts, paints and the
enumerations the host scene graph understands.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Union

from slidegraph.models.presentation import ColorRGB


@dataclass(frozen=True)
class ResolvedFont:
    """A (family, style) pair the host has loaded successfully."""
    family: str
    style: str

    def as_font_name(self) -> Dict[str, str]:
        return {"family": self.family, "style": self.style}

    def __str__(self) -> str:
        return f"{self.family} {self.style}"


@dataclass(frozen=True)
class SolidPaint:
    color: ColorRGB
    type: str = "SOLID"

    def to_dict(self) -> Dict[str, object]:
        return {"type": self.type, "color": self.color.as_dict()}


@dataclass(frozen=True)
class ImagePaint:
    image_hash: str
    # FILL crops to cover the box instead of letterboxing
    scale_mode: str = "FILL"
    type: str = "IMAGE"

    def to_dict(self) -> Dict[str, object]:
        return {"type": self.type, "imageHash": self.image_hash, "scaleMode": self.scale_mode}


Paint = Union[SolidPaint, ImagePaint]


def solid(r: float, g: float, b: float) -> SolidPaint:
    return SolidPaint(ColorRGB(r=r, g=g, b=b))


def gray(level: float) -> SolidPaint:
    return solid(level, level, level)


WHITE = solid(1.0, 1.0, 1.0)


class TextAlignHorizontal(str, Enum):
    LEFT = "LEFT"
    CENTER = "CENTER"
    RIGHT = "RIGHT"
    JUSTIFIED = "JUSTIFIED"


class TextAlignVertical(str, Enum):
    TOP = "TOP"
    CENTER = "CENTER"
    BOTTOM = "BOTTOM"


class TextAutoResize(str, Enum):
    NONE = "NONE"
    WIDTH_AND_HEIGHT = "WIDTH_AND_HEIGHT"
    HEIGHT = "HEIGHT"
    TRUNCATE = "TRUNCATE"


class TextDecoration(str, Enum):
    NONE = "NONE"
    UNDERLINE = "UNDERLINE"
    STRIKETHROUGH = "STRIKETHROUGH"
