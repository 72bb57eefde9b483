import numpy as np
import pytest

from sketchpad.elements import ElementStore, FreehandElement, TextElement
from sketchpad.errors import UnrecognizedKind
from sketchpad.renderer import (
    draw_element,
    draw_scene,
    quadratic_segments,
    stroke_outline,
    svg_path_from_stroke,
)

from .conftest import RecordingRenderer


def test_draw_scene_dispatches_by_kind():
    renderer = RecordingRenderer()
    store = ElementStore(renderer)
    elements = [
        store.create("line", 0, 0, 1, 1),
        store.create("rectangle", 0, 0, 2, 3),
        FreehandElement("E0100", ((0, 0), (5, 0), (5, 5))),
        TextElement("E0101", 4, 6, 24, 30, text="hi"),
    ]
    assert draw_scene(renderer, elements, font_px=18) == 4
    assert renderer.calls == [
        ("draw", ("line", 0.0, 0.0, 1.0, 1.0)),
        ("draw", ("rect", 0.0, 0.0, 2.0, 3.0)),
        ("fill", 6),
        ("text", "hi", 4, 6, 18),
    ]


def test_draw_scene_skips_id():
    renderer = RecordingRenderer()
    elements = [TextElement("E0001", 0, 0, 0, 0, text="a"), TextElement("E0002", 0, 0, 0, 0, text="b")]
    assert draw_scene(renderer, elements, skip_id="E0001") == 1
    assert renderer.calls == [("text", "b", 0, 0, 24.0)]


def test_draw_element_rejects_unknown():
    with pytest.raises(UnrecognizedKind):
        draw_element(RecordingRenderer(), object())


def test_stroke_outline_shapes():
    assert stroke_outline([]).shape == (0, 2)
    dot = stroke_outline([(3, 4)], size=2.0)
    assert dot.shape == (8, 2)
    assert np.allclose(np.hypot(dot[:, 0] - 3, dot[:, 1] - 4), 1.0)


def test_stroke_outline_offsets_along_normal():
    outline = stroke_outline([(0, 0), (10, 0)], size=4.0)
    assert outline.shape == (4, 2)
    # left side forward, right side backward
    assert np.allclose(outline, [[0, 2], [10, 2], [10, -2], [0, -2]])


def test_svg_path_from_stroke():
    assert svg_path_from_stroke([]) == ""
    path = svg_path_from_stroke([(0, 0), (10, 0), (10, 10)])
    assert path == "M 0 0 Q 0 0 5 0 10 0 10 5 10 10 5 5 Z"


def test_svg_path_number_formatting():
    path = svg_path_from_stroke([(1.23456, -0.0001)])
    assert path == "M 1.235 0 Q 1.235 0 1.235 0 Z"


def test_quadratic_segments_pass_through_midpoints():
    segments = quadratic_segments([(0, 0), (10, 0), (10, 10)])
    assert segments == [
        ((0.0, 0.0), (5.0, 0.0)),
        ((10.0, 0.0), (10.0, 5.0)),
        ((10.0, 10.0), (5.0, 5.0)),
    ]
    assert quadratic_segments([]) == []


def test_qt_outline_path_follows_the_same_curve():
    pytest.importorskip("PySide6.QtWidgets")
    from sketchpad.widgets import outline_path

    outline = stroke_outline([(0, 0), (10, 0), (20, 5)], size=2.0)
    path = outline_path(outline)
    start = path.elementAt(0)
    assert (start.x, start.y) == pytest.approx(tuple(outline[0]))
    # moveTo plus a control and an end point for every quadratic segment
    assert path.elementCount() >= 1 + 2 * len(outline)
    assert outline_path([]).isEmpty()
