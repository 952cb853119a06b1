"""
Tests for the presentation data model.
"""

import pytest
from pydantic import ValidationError

from slidegraph.models.presentation import (
    ColorRGB,
    GroupElement,
    Presentation,
    ShapeElement,
    ShapeKind,
    TableElement,
    TextContent,
    TextRun,
)


def test_camel_case_payload():
    presentation = Presentation.model_validate({
        "title": "Deck",
        "pageSize": {"width": {"magnitude": 9144000, "unit": "EMU"}, "height": {"magnitude": 5143500, "unit": "emu"}},
        "slides": [{
            "index": 0,
            "elements": [{
                "type": "shape",
                "x": 1, "y": 2, "width": 3, "height": 4,
                "scaleX": 2, "scaleY": None, "rotation": None,
                "shapeType": "ELLIPSE",
                "fillColor": {"r": 0.5, "g": 0.5, "b": 0.5},
            }],
        }],
    })

    shape = presentation.slides[0].elements[0]
    assert isinstance(shape, ShapeElement)
    assert shape.scale_x == 2
    assert shape.scale_y == 1
    assert shape.rotation == 0
    assert shape.shape_kind is ShapeKind.ELLIPSE
    assert presentation.page_size.height.unit == "EMU"
    assert presentation.element_unit == "PT"


def test_defaults_for_missing_fields():
    presentation = Presentation.model_validate({})
    assert presentation.title == "Untitled"
    assert presentation.slides == []
    assert presentation.page_size.width.magnitude == 0


def test_color_components_are_clamped():
    color = ColorRGB(r=1.5, g=-0.2, b=None)
    assert color.as_dict() == {"r": 1.0, "g": 0.0, "b": 0.0}


def test_text_run_defaults_and_font_style():
    run = TextRun.model_validate({"text": None, "fontFamily": None, "fontWeight": None, "fontStyle": "italic"})
    assert run.text == ""
    assert run.font_family == "Arial"
    assert run.font_weight == 400
    assert run.italic
    assert not run.is_bold


def test_run_ranges_partition_the_text():
    content = TextContent.model_validate({"runs": [{"text": "ab"}, {"text": ""}, {"text": "cde"}]})

    ranges = [(start, end) for _, start, end in content.run_ranges()]

    assert content.full_text == "abcde"
    assert ranges == [(0, 2), (2, 5)]


def test_unknown_shape_type_maps_to_rectangle():
    assert ShapeElement(shape_type="CLOUD").shape_kind is ShapeKind.RECTANGLE
    assert ShapeElement(shape_type=None).shape_kind is ShapeKind.RECTANGLE


def test_table_grid_shape():
    table = TableElement.model_validate({"rows": [["a", None], ["b", "c", 3]], "rowCount": 9})
    assert table.grid_shape == (2, 3)
    assert table.cell(0, 2) == ""
    assert table.cell(1, 2) == "3"


def test_nested_groups_validate():
    group = GroupElement.model_validate({
        "children": [{"type": "group", "children": [{"type": "line"}]}, {"type": "table"}],
    })
    assert group.children[0].children[0].type == "line"


def test_elements_are_read_only():
    shape = ShapeElement()
    with pytest.raises(ValidationError):
        shape.x = 5


def test_invalid_element_is_dropped_and_siblings_kept():
    presentation = Presentation.model_validate({"slides": [{"elements": [
        {"type": "shape", "x": 1},
        {"type": "shape", "x": "left"},
        {"type": "shape", "fillColor": {"r": "red"}},
        {"type": "line", "x": 3},
    ]}]})

    elements = presentation.slides[0].elements
    assert [(element.type, element.x) for element in elements] == [("shape", 1), ("line", 3)]


def test_invalid_group_child_is_dropped():
    group = GroupElement.model_validate({
        "children": [{"type": "image", "width": "wide"}, {"type": "shape", "y": 4}],
    })
    assert [child.type for child in group.children] == ["shape"]


def test_malformed_deck_structure_is_still_rejected():
    with pytest.raises(ValidationError):
        Presentation.model_validate({"slides": [{"elements": "none"}, 5]})


def test_non_finite_geometry_is_neutralized():
    shape = ShapeElement(x=float("nan"), y=float("inf"), width=float("-inf"), scale_x=float("nan"))
    assert (shape.x, shape.y, shape.width) == (0.0, 0.0, 0.0)
    assert shape.scale_x == 1.0
