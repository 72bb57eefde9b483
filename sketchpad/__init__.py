"""Sketchpad: element model, hit-testing, interaction state machine and undo history
for a pannable, zoomable vector-shape editor.

The Qt front end lives in :mod:`sketchpad.widgets` and :mod:`sketchpad.app` and
is imported lazily so the core runs headless.
"""
from __future__ import annotations

from .config import EditorConfig
from .editor import Action, Editor, SelectionRecord, TextOverlay, Tool
from .elements import (
    Element,
    ElementKind,
    ElementStore,
    FreehandElement,
    LineElement,
    RectangleElement,
    TextElement,
)
from .errors import MissingMeasurement, MissingTextOption, SketchError, UnrecognizedKind
from .geometry import PositionTag, classify, cursor_for_position, hit_test, normalize, resize
from .history import CommitMode, History
from .input import Button, DeferredCalls, InputPort, KeyEvent, PointerEvent, PressedKeys, WheelEvent
from .renderer import (
    Renderer,
    draw_element,
    draw_scene,
    quadratic_segments,
    stroke_outline,
    svg_path_from_stroke,
)
from .viewport import Viewport

__version__ = "0.1.0"

__all__ = [
    "Action",
    "Button",
    "CommitMode",
    "DeferredCalls",
    "Editor",
    "EditorConfig",
    "Element",
    "ElementKind",
    "ElementStore",
    "FreehandElement",
    "History",
    "InputPort",
    "KeyEvent",
    "LineElement",
    "MissingMeasurement",
    "MissingTextOption",
    "PointerEvent",
    "PositionTag",
    "PressedKeys",
    "RectangleElement",
    "Renderer",
    "SelectionRecord",
    "SketchError",
    "TextElement",
    "TextOverlay",
    "Tool",
    "UnrecognizedKind",
    "Viewport",
    "WheelEvent",
    "classify",
    "cursor_for_position",
    "draw_element",
    "draw_scene",
    "hit_test",
    "normalize",
    "quadratic_segments",
    "resize",
    "stroke_outline",
    "svg_path_from_stroke",
]
