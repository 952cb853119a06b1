"""
Shared fixtures for the import pipeline tests.
"""

from io import BytesIO

import pytest
from PIL import Image

from slidegraph.config.import_config import CanvasConfig, ImportConfig, TextConfig
from slidegraph.services.image_data import encode_data_uri
from slidegraph.services.memory_host import InMemorySceneHost


@pytest.fixture
def host():
    return InMemorySceneHost()


@pytest.fixture
def config():
    # Explicit values so SLIDEGRAPH_* variables in the environment cannot leak in
    return ImportConfig(
        canvas=CanvasConfig(target_width=1920, target_height=1080, fit_to_canvas=True, slide_spacing=100),
        text=TextConfig(
            text_padding=4,
            default_font_size=14,
            table_font_family="Arial",
            table_font_size=10,
            memoize_fonts=True
        ),
        placeholder_gray=0.9,
        cell_stroke_gray=0.8,
        max_group_depth=32,
        progress_start=60,
        progress_span=35,
        log_level="INFO"
    )


@pytest.fixture
def png_bytes():
    buffer = BytesIO()
    Image.new("RGB", (4, 3), (200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def png_data_uri(png_bytes):
    return encode_data_uri(png_bytes, "image/png")


def page(width=1920, height=1080, unit="PT"):
    """Page size payload; 1920x1080 PT maps onto the default canvas at scale 1."""
    return {
        "width": {"magnitude": width, "unit": unit},
        "height": {"magnitude": height, "unit": unit},
    }


def deck(*slides, width=1920, height=1080, unit="PT", title="Test deck"):
    """Presentation payload with one slide per list of element payloads."""
    return {
        "title": title,
        "pageSize": page(width, height, unit),
        "slides": [{"index": i, "elements": list(elements)} for i, elements in enumerate(slides)],
    }
