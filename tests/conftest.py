from __future__ import annotations

from typing import List, Sequence, Tuple

import pytest

from sketchpad import Editor, EditorConfig, InputPort, PointerEvent
from sketchpad.renderer import stroke_outline


class RecordingRenderer:
    """Renderer double: primitives are plain tuples, text is 10 units per character."""

    def __init__(self, char_width: float = 10.0) -> None:
        self.char_width = char_width
        self.calls: List[tuple] = []

    def build_line_primitive(self, x1, y1, x2, y2):
        return ("line", x1, y1, x2, y2)

    def build_rect_primitive(self, x, y, w, h):
        return ("rect", x, y, w, h)

    def draw_primitive(self, primitive):
        self.calls.append(("draw", primitive))

    def tessellate_freehand(self, points):
        return stroke_outline(points)

    def fill_outline(self, outline):
        self.calls.append(("fill", len(outline)))

    def draw_text(self, text, x, y, font_px):
        self.calls.append(("text", text, x, y, font_px))

    def measure_text_width(self, text):
        return len(text) * self.char_width


class FakeOverlay:
    def __init__(self) -> None:
        self.events: List[tuple] = []

    def place(self, left, top, font_px):
        self.events.append(("place", left, top, font_px))

    def focus_and_seed(self, text):
        self.events.append(("focus", text))

    def dismiss(self):
        self.events.append(("dismiss",))


@pytest.fixture
def renderer() -> RecordingRenderer:
    return RecordingRenderer()


@pytest.fixture
def port() -> InputPort:
    return InputPort()


@pytest.fixture
def overlay() -> FakeOverlay:
    return FakeOverlay()


@pytest.fixture
def editor(renderer, port, overlay) -> Editor:
    ed = Editor(renderer, EditorConfig(), input_port=port, overlay=overlay)
    yield ed
    ed.close()


@pytest.fixture
def drag():
    """Return a helper that presses at the first point, moves through the rest and releases at the last."""

    def _drag(editor: Editor, *points: Tuple[float, float], button=None) -> None:
        kwargs = {} if button is None else {"button": button}
        first = points[0]
        editor.pointer_down(PointerEvent(first[0], first[1], **kwargs))
        for x, y in points[1:]:
            editor.pointer_move(PointerEvent(x, y, **kwargs))
        last = points[-1]
        editor.pointer_up(PointerEvent(last[0], last[1], **kwargs))

    return _drag


def anchors(element) -> Sequence[float]:
    return (element.x1, element.y1, element.x2, element.y2)
