"""
Input data model: a fully resolved presentation as delivered by the
document-fetch layer.

Field names follow the camelCase JSON produced upstream (``fontFamily``,
``scaleX``, ``imageUrl``...) through aliases; snake_case names are accepted as
well. Every entity is a read-only snapshot.
"""

import math
from enum import Enum
from functools import lru_cache
from typing import Annotated, Any, Iterator, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel

from slidegraph.setup_logging import get_logger

logger = get_logger(__name__)

MODEL_CONFIG = {
    "alias_generator": to_camel,
    "populate_by_name": True,
    "frozen": True,
}

ELEMENT_TYPES = ("shape", "image", "line", "table", "group")


class ColorRGB(BaseModel):
    """RGB color with components in [0, 1]."""
    model_config = MODEL_CONFIG

    r: float = 0.0
    g: float = 0.0
    b: float = 0.0

    @field_validator("r", "g", "b", mode="before")
    @classmethod
    def clamp_component(cls, value: Any) -> float:
        if value is None:
            return 0.0
        return min(1.0, max(0.0, float(value)))

    def as_dict(self) -> dict:
        return {"r": self.r, "g": self.g, "b": self.b}


class TextRun(BaseModel):
    """A styled fragment of a shape's text."""
    model_config = MODEL_CONFIG

    text: str = ""
    font_family: str = "Arial"
    font_size: Optional[float] = None
    font_weight: float = 400
    italic: bool = False
    color: Optional[ColorRGB] = None
    underline: bool = False
    strikethrough: bool = False

    @model_validator(mode="before")
    @classmethod
    def italic_from_font_style(cls, data: Any) -> Any:
        # Upstream payloads carry ``fontStyle: "italic"`` instead of a flag
        if isinstance(data, dict) and "italic" not in data and data.get("fontStyle") == "italic":
            data = {**data, "italic": True}
        return data

    @field_validator("text", mode="before")
    @classmethod
    def none_text(cls, value: Any) -> str:
        return "" if value is None else value

    @field_validator("font_family", mode="before")
    @classmethod
    def none_family(cls, value: Any) -> str:
        return value or "Arial"

    @field_validator("font_weight", mode="before")
    @classmethod
    def none_weight(cls, value: Any) -> float:
        return 400 if value is None else value

    @field_validator("underline", "strikethrough", "italic", mode="before")
    @classmethod
    def none_flag(cls, value: Any) -> bool:
        return bool(value)

    @property
    def is_bold(self) -> bool:
        return self.font_weight >= 700


class TextContent(BaseModel):
    """Ordered text runs plus paragraph alignment."""
    model_config = MODEL_CONFIG

    runs: List[TextRun] = Field(default_factory=list)
    alignment: Literal["START", "CENTER", "END", "JUSTIFIED"] = "START"

    @field_validator("alignment", mode="before")
    @classmethod
    def normalize_alignment(cls, value: Any) -> str:
        value = str(value or "START").upper()
        return value if value in ("START", "CENTER", "END", "JUSTIFIED") else "START"

    @property
    def full_text(self) -> str:
        return "".join(run.text for run in self.runs)

    def run_ranges(self) -> Iterator[Tuple[TextRun, int, int]]:
        """Yield ``(run, start, end)`` character ranges into :attr:`full_text`.

        Zero-length runs are skipped; the yielded ranges partition the
        full text in run order.
        """
        offset = 0
        for run in self.runs:
            length = len(run.text)
            if length == 0:
                continue
            yield run, offset, offset + length
            offset += length


class ShapeKind(str, Enum):
    RECTANGLE = "RECTANGLE"
    ELLIPSE = "ELLIPSE"
    ROUND_RECTANGLE = "ROUND_RECTANGLE"


class ElementBase(BaseModel):
    """Geometry shared by every slide element (document convention)."""
    model_config = MODEL_CONFIG

    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    scale_x: float = 1.0
    scale_y: float = 1.0
    # Degrees, clockwise-positive
    rotation: float = 0.0

    @field_validator("x", "y", "width", "height", "rotation", mode="before")
    @classmethod
    def none_is_zero(cls, value: Any) -> float:
        return 0.0 if value is None else value

    @field_validator("x", "y", "width", "height", "rotation")
    @classmethod
    def finite_or_zero(cls, value: float) -> float:
        return value if math.isfinite(value) else 0.0

    @field_validator("scale_x", "scale_y", mode="before")
    @classmethod
    def none_is_unit(cls, value: Any) -> float:
        return 1.0 if value is None else value

    @field_validator("scale_x", "scale_y")
    @classmethod
    def finite_or_unit(cls, value: float) -> float:
        return value if math.isfinite(value) else 1.0


class ShapeElement(ElementBase):
    type: Literal["shape"] = "shape"
    shape_type: str = ShapeKind.RECTANGLE.value
    fill_color: Optional[ColorRGB] = None
    stroke_color: Optional[ColorRGB] = None
    stroke_weight: Optional[float] = None
    text: Optional[TextContent] = None

    @field_validator("shape_type", mode="before")
    @classmethod
    def default_shape_type(cls, value: Any) -> str:
        return value or ShapeKind.RECTANGLE.value

    @property
    def shape_kind(self) -> ShapeKind:
        """Known primitive for this shape; anything unrecognized is a rectangle."""
        try:
            return ShapeKind(self.shape_type)
        except ValueError:
            return ShapeKind.RECTANGLE

    @property
    def has_text(self) -> bool:
        return bool(self.text and self.text.runs)


class ImageElement(ElementBase):
    type: Literal["image"] = "image"
    image_url: str = ""

    @field_validator("image_url", mode="before")
    @classmethod
    def none_url(cls, value: Any) -> str:
        return value or ""


class LineElement(ElementBase):
    type: Literal["line"] = "line"
    stroke_color: Optional[ColorRGB] = None
    stroke_weight: Optional[float] = None


class TableElement(ElementBase):
    type: Literal["table"] = "table"
    rows: List[List[str]] = Field(default_factory=list)
    # Advisory only; the grid itself is authoritative
    row_count: Optional[int] = None
    column_count: Optional[int] = None

    @field_validator("rows", mode="before")
    @classmethod
    def normalize_cells(cls, value: Any) -> Any:
        if value is None:
            return []
        return [["" if cell is None else str(cell) for cell in (row or [])] for row in value]

    @property
    def grid_shape(self) -> Tuple[int, int]:
        """``(rows, columns)`` taken from the grid; ragged rows pad with blanks."""
        row_total = len(self.rows)
        col_total = max((len(row) for row in self.rows), default=0)
        return row_total, col_total

    def cell(self, row: int, col: int) -> str:
        cells = self.rows[row]
        return cells[col] if col < len(cells) else ""


def _drop_unknown_elements(value: Any, owner: str) -> Any:
    """Validate element payloads one at a time.

    Kinds the pipeline cannot materialize and payloads that fail validation
    are logged and dropped; the remaining elements keep their order.
    """
    if not isinstance(value, list):
        return value
    kept = []
    for index, item in enumerate(value):
        kind = item.get("type") if isinstance(item, dict) else getattr(item, "type", None)
        if kind not in ELEMENT_TYPES:
            logger.warning(f"Skipping unsupported element type {kind!r} at index {index} in {owner}")
            continue
        try:
            kept.append(_element_adapter().validate_python(item))
        except ValidationError as e:
            logger.warning(
                f"Skipping invalid {kind} element at index {index} in {owner} ({e.error_count()} problem(s))"
            )
    return kept


class GroupElement(ElementBase):
    type: Literal["group"] = "group"
    children: List["SlideElement"] = Field(default_factory=list)

    @field_validator("children", mode="before")
    @classmethod
    def known_children(cls, value: Any) -> Any:
        return _drop_unknown_elements(value or [], "group")


SlideElement = Annotated[
    Union[ShapeElement, ImageElement, LineElement, TableElement, GroupElement],
    Field(discriminator="type"),
]

GroupElement.model_rebuild()


@lru_cache(maxsize=1)
def _element_adapter() -> TypeAdapter:
    return TypeAdapter(SlideElement)


class Slide(BaseModel):
    model_config = MODEL_CONFIG

    index: int = 0
    elements: List[SlideElement] = Field(default_factory=list)

    @field_validator("elements", mode="before")
    @classmethod
    def known_elements(cls, value: Any) -> Any:
        return _drop_unknown_elements(value or [], "slide")


class Dimension(BaseModel):
    model_config = MODEL_CONFIG

    magnitude: float = 0.0
    unit: Literal["EMU", "PT"] = "EMU"

    @field_validator("magnitude", mode="before")
    @classmethod
    def none_magnitude(cls, value: Any) -> float:
        return 0.0 if value is None else value

    @field_validator("unit", mode="before")
    @classmethod
    def normalize_unit(cls, value: Any) -> str:
        return str(value or "EMU").upper()


class PageSize(BaseModel):
    model_config = MODEL_CONFIG

    width: Dimension = Field(default_factory=Dimension)
    height: Dimension = Field(default_factory=Dimension)


class Presentation(BaseModel):
    """A fully parsed, already fetched slide deck."""
    model_config = MODEL_CONFIG

    title: str = "Untitled"
    page_size: PageSize = Field(default_factory=PageSize)
    slides: List[Slide] = Field(default_factory=list)
    # Unit of element geometry; the fetch layer normalizes to points
    element_unit: Literal["EMU", "PT"] = "PT"

    @field_validator("title", mode="before")
    @classmethod
    def none_title(cls, value: Any) -> str:
        return value or "Untitled"

    @field_validator("element_unit", mode="before")
    @classmethod
    def normalize_element_unit(cls, value: Any) -> str:
        return str(value or "PT").upper()
