"""
Geometry transform: document space to target space.

Document geometry is expressed in the presentation's element unit (points by
default, EMU when the fetch layer does not normalize). Target space is the
host's linear unit (points/pixels at 72 per inch). A single uniform
fit-to-canvas factor, computed once per presentation, maps the original page
onto the target canvas while preserving aspect ratio.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from slidegraph.config.import_config import ImportConfig, get_config
from slidegraph.models.presentation import ElementBase, PageSize, Presentation
from slidegraph.setup_logging import get_logger

logger = get_logger(__name__)

EMU_PER_INCH = 914400
POINTS_PER_INCH = 72

# 10in x 5.625in, the 16:9 default page of the source format
DEFAULT_PAGE_WIDTH_EMU = 9144000
DEFAULT_PAGE_HEIGHT_EMU = 5143500


def to_points(magnitude: Optional[float], unit: str = "EMU") -> float:
    """Convert a document length to target units."""
    if not magnitude:
        return 0.0
    if unit == "EMU":
        return magnitude / EMU_PER_INCH * POINTS_PER_INCH
    return float(magnitude)


def page_size_in_points(page_size: PageSize) -> Tuple[float, float]:
    """Page size in target units; missing or non-positive sides use the default page."""
    width, height = page_size.width, page_size.height
    if width.magnitude > 0:
        page_width = to_points(width.magnitude, width.unit)
    else:
        page_width = to_points(DEFAULT_PAGE_WIDTH_EMU, "EMU")
    if height.magnitude > 0:
        page_height = to_points(height.magnitude, height.unit)
    else:
        page_height = to_points(DEFAULT_PAGE_HEIGHT_EMU, "EMU")
    return page_width, page_height


def target_rotation(document_degrees: float) -> float:
    """Document rotation is clockwise-positive, target rotation clockwise-negative."""
    rotation = -document_degrees
    return rotation if rotation != 0 else 0.0


def document_rotation(target_degrees: float) -> float:
    """Inverse of :func:`target_rotation`."""
    rotation = -target_degrees
    return rotation if rotation != 0 else 0.0


@dataclass(frozen=True)
class TargetBox:
    """Transformed element geometry, ready to apply to a host node."""
    x: float
    y: float
    width: float
    height: float
    rotation: float


@dataclass(frozen=True)
class GeometryTransform:
    """Per-presentation mapping from document space to target space."""
    scale: float = 1.0
    canvas_width: float = 1920.0
    canvas_height: float = 1080.0
    element_unit: str = "PT"

    @classmethod
    def for_page(
        cls,
        page_size: PageSize,
        target_size: Optional[Tuple[float, float]] = None,
        element_unit: str = "PT"
    ) -> 'GeometryTransform':
        """Build a transform for a page.

        With a ``target_size`` the page is fitted uniformly into it; without
        one, scale is 1 and the canvas is the converted page size.
        """
        original_width, original_height = page_size_in_points(page_size)
        if target_size is None:
            return cls(
                scale=1.0,
                canvas_width=original_width,
                canvas_height=original_height,
                element_unit=element_unit
            )

        target_width, target_height = target_size
        scale = min(target_width / original_width, target_height / original_height)
        logger.debug(
            f"Original size: {original_width}x{original_height}, Scale: {scale}"
        )
        return cls(
            scale=scale,
            canvas_width=target_width,
            canvas_height=target_height,
            element_unit=element_unit
        )

    @classmethod
    def for_presentation(
        cls,
        presentation: Presentation,
        config: Optional[ImportConfig] = None
    ) -> 'GeometryTransform':
        config = config or get_config()
        target_size = None
        if config.canvas.fit_to_canvas:
            target_size = (config.canvas.target_width, config.canvas.target_height)
        return cls.for_page(presentation.page_size, target_size, presentation.element_unit)

    def length(self, value: float) -> float:
        """Document length to scaled target length."""
        return to_points(value, self.element_unit) * self.scale

    def to_target_space(
        self,
        element: ElementBase,
        offset_x: float = 0.0,
        offset_y: float = 0.0
    ) -> TargetBox:
        """Transform one element.

        ``offset_x``/``offset_y`` are document-space origins of enclosing
        groups, so the fit scale is applied exactly once however deep the
        element is nested.
        """
        # Authored scale multiplies in before the floor so degenerate scale
        # always lands on the same minimum
        width = max(1.0, to_points(element.width, self.element_unit) * abs(element.scale_x) * self.scale)
        height = max(1.0, to_points(element.height, self.element_unit) * abs(element.scale_y) * self.scale)
        return TargetBox(
            x=self.length(element.x + offset_x),
            y=self.length(element.y + offset_y),
            width=width,
            height=height,
            rotation=target_rotation(element.rotation)
        )


def to_target_space(
    element: ElementBase,
    page_size: PageSize,
    target_size: Optional[Tuple[float, float]] = None,
    element_unit: str = "PT"
) -> TargetBox:
    """One-off transform of a single element for the given page."""
    return GeometryTransform.for_page(page_size, target_size, element_unit).to_target_space(element)
