"""
Tests for the document-to-target geometry transform.
"""

import pytest

from slidegraph.models.presentation import ElementBase, PageSize, Presentation, ShapeElement
from slidegraph.services.geometry import (
    DEFAULT_PAGE_HEIGHT_EMU,
    DEFAULT_PAGE_WIDTH_EMU,
    GeometryTransform,
    document_rotation,
    page_size_in_points,
    target_rotation,
    to_points,
    to_target_space,
)

from conftest import page


def test_emu_conversion():
    assert to_points(914400, "EMU") == pytest.approx(72)
    assert to_points(12.5, "PT") == 12.5
    assert to_points(None) == 0.0


def test_missing_page_size_uses_default_page():
    width, height = page_size_in_points(PageSize())
    assert width == pytest.approx(DEFAULT_PAGE_WIDTH_EMU / 914400 * 72)
    assert height == pytest.approx(DEFAULT_PAGE_HEIGHT_EMU / 914400 * 72)


def test_default_page_fits_canvas(config):
    transform = GeometryTransform.for_presentation(Presentation(), config)
    # 720x405 pt onto 1920x1080
    assert transform.scale == pytest.approx(1920 / 720)
    assert (transform.canvas_width, transform.canvas_height) == (1920, 1080)


def test_fit_scale_is_uniform_minimum():
    page_size = PageSize.model_validate(page(1000, 1000))
    transform = GeometryTransform.for_page(page_size, (1920, 1080))
    assert transform.scale == pytest.approx(1.08)


def test_no_target_keeps_original_size():
    page_size = PageSize.model_validate(page(960, 540))
    transform = GeometryTransform.for_page(page_size)
    assert transform.scale == 1.0
    assert (transform.canvas_width, transform.canvas_height) == (960, 540)


def test_element_is_scaled_and_rotation_negated():
    page_size = PageSize.model_validate(page(960, 540))
    element = ShapeElement(x=10, y=20, width=100, height=50, rotation=30)

    box = to_target_space(element, page_size, (1920, 1080))

    assert (box.x, box.y) == (20, 40)
    assert (box.width, box.height) == (200, 100)
    assert box.rotation == -30


def test_authored_scale_uses_each_axis():
    transform = GeometryTransform(scale=2.0)
    box = transform.to_target_space(ElementBase(width=100, height=100, scale_x=0.5, scale_y=-3))
    assert box.width == 100
    assert box.height == 600


@pytest.mark.parametrize("scale_x,scale_y", [(0, 0), (-0.0001, 1), (1, 0)])
def test_degenerate_sizes_are_floored_at_one(scale_x, scale_y):
    transform = GeometryTransform(scale=2.0)
    box = transform.to_target_space(ElementBase(width=100, height=100, scale_x=scale_x, scale_y=scale_y))
    assert box.width >= 1
    assert box.height >= 1


def test_zero_sized_element_is_floored_at_one():
    box = GeometryTransform(scale=0.5).to_target_space(ElementBase(width=0, height=0.1))
    assert (box.width, box.height) == (1, 1)


def test_emu_element_unit():
    transform = GeometryTransform(scale=1.0, element_unit="EMU")
    box = transform.to_target_space(ElementBase(x=914400, y=457200, width=914400, height=914400))
    assert (box.x, box.y) == (pytest.approx(72), pytest.approx(36))
    assert box.width == pytest.approx(72)


def test_group_offset_is_scaled_once():
    transform = GeometryTransform(scale=2.0)
    box = transform.to_target_space(ElementBase(x=10, y=10, width=5, height=5), 100, 50)
    assert (box.x, box.y) == (220, 120)


@pytest.mark.parametrize("degrees", [0, 15, -90, 180, 359.5])
def test_rotation_round_trip(degrees):
    assert document_rotation(target_rotation(degrees)) == degrees


def test_zero_rotation_is_not_negative_zero():
    assert str(target_rotation(0)) == "0.0"


def test_non_finite_position_lands_at_origin():
    box = GeometryTransform(scale=2.0).to_target_space(ElementBase(x=float("nan"), y=float("inf"), width=10, height=10))
    assert (box.x, box.y) == (0, 0)
    assert (box.width, box.height) == (20, 20)
