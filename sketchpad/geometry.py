"""Hit classification and anchor math for sketch elements.

Everything here is a pure function of its arguments. Points are world-space
``(x, y)`` tuples; tolerances are in world units.
"""
from __future__ import annotations

import math
from enum import Enum
from typing import Iterable, Optional, Sequence, Tuple, Union

import numpy as np

from .elements import (
    Anchors,
    Element,
    ElementKind,
    FreehandElement,
    LineElement,
    Point,
    RectangleElement,
    TextElement,
    coerce_kind,
)
from .errors import UnrecognizedKind

LINE_TOLERANCE = 5.0
HANDLE_SIZE = 20.0


class PositionTag(str, Enum):
    TOP_LEFT = "topLeft"
    TOP_RIGHT = "topRight"
    BOTTOM_LEFT = "bottomLeft"
    BOTTOM_RIGHT = "bottomRight"
    START = "start"
    END = "end"
    INSIDE = "inside"


def _distance(a: Point, b: Point) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def on_segment(a: Point, b: Point, p: Point, tolerance: float = LINE_TOLERANCE) -> bool:
    """True when going a -> p -> b is at most ``tolerance`` longer than a -> b."""
    offset = _distance(a, b) - (_distance(a, p) + _distance(b, p))
    return abs(offset) < tolerance


def near_point(anchor: Point, p: Point, handle: float = HANDLE_SIZE) -> bool:
    # Square grab area, x and y tested independently.
    return abs(anchor[0] - p[0]) < handle and abs(anchor[1] - p[1]) < handle


def on_polyline(points: Sequence[Point], p: Point, tolerance: float = LINE_TOLERANCE) -> bool:
    """Apply :func:`on_segment` to every consecutive pair of ``points`` at once."""
    pts = np.asarray(points, dtype=float).reshape(-1, 2)
    if pts.shape[0] < 2:
        return False
    a = pts[:-1]
    b = pts[1:]
    seg = np.hypot(b[:, 0] - a[:, 0], b[:, 1] - a[:, 1])
    to_a = np.hypot(p[0] - a[:, 0], p[1] - a[:, 1])
    to_b = np.hypot(p[0] - b[:, 0], p[1] - b[:, 1])
    return bool(np.any(np.abs(seg - (to_a + to_b)) < tolerance))


def _inside_box(x1: float, y1: float, x2: float, y2: float, p: Point) -> bool:
    return x1 <= p[0] <= x2 and y1 <= p[1] <= y2


def classify(
    point: Point,
    element: Element,
    tolerance: float = LINE_TOLERANCE,
    handle: float = HANDLE_SIZE,
) -> Optional[PositionTag]:
    """Return where ``point`` falls on ``element``, or ``None`` for a miss."""
    if isinstance(element, LineElement):
        start = (element.x1, element.y1)
        end = (element.x2, element.y2)
        if on_segment(start, end, point, tolerance):
            return PositionTag.INSIDE
        if near_point(start, point, handle):
            return PositionTag.START
        if near_point(end, point, handle):
            return PositionTag.END
        return None
    if isinstance(element, RectangleElement):
        x1, y1, x2, y2 = element.x1, element.y1, element.x2, element.y2
        if _inside_box(x1, y1, x2, y2, point):
            return PositionTag.INSIDE
        corners = (
            ((x1, y1), PositionTag.TOP_LEFT),
            ((x2, y1), PositionTag.TOP_RIGHT),
            ((x1, y2), PositionTag.BOTTOM_LEFT),
            ((x2, y2), PositionTag.BOTTOM_RIGHT),
        )
        for corner, tag in corners:
            if near_point(corner, point, handle):
                return tag
        return None
    if isinstance(element, FreehandElement):
        return PositionTag.INSIDE if on_polyline(element.points, point, tolerance) else None
    if isinstance(element, TextElement):
        if _inside_box(element.x1, element.y1, element.x2, element.y2, point):
            return PositionTag.INSIDE
        return None
    raise UnrecognizedKind(getattr(element, "kind", element))


def hit_test(
    point: Point,
    elements: Iterable[Element],
    tolerance: float = LINE_TOLERANCE,
    handle: float = HANDLE_SIZE,
    topmost_first: bool = False,
) -> Optional[Tuple[Element, PositionTag]]:
    """Return the first element that ``point`` hits together with its tag.

    Elements are scanned in store order, so an older element wins over a newer
    one drawn on top of it. ``topmost_first`` reverses the scan.
    """
    ordered = list(elements)
    if topmost_first:
        ordered.reverse()
    for element in ordered:
        tag = classify(point, element, tolerance, handle)
        if tag is not None:
            return element, tag
    return None


def requires_normalization(kind: Union[str, ElementKind]) -> bool:
    return coerce_kind(kind) in (ElementKind.LINE, ElementKind.RECTANGLE)


def normalize(kind: Union[str, ElementKind], x1: float, y1: float, x2: float, y2: float) -> Anchors:
    """Put anchors into canonical order for ``kind``.

    Rectangles become min corner / max corner. Lines are ordered left to
    right, top to bottom on a vertical line. Other kinds pass through.
    """
    kind = coerce_kind(kind)
    if kind is ElementKind.RECTANGLE:
        return (min(x1, x2), min(y1, y2), max(x1, x2), max(y1, y2))
    if kind is ElementKind.LINE:
        if x1 < x2 or (x1 == x2 and y1 <= y2):
            return (x1, y1, x2, y2)
        return (x2, y2, x1, y1)
    return (x1, y1, x2, y2)


def resize(position: Union[str, PositionTag, None], anchors: Anchors, point: Point) -> Anchors:
    """Move the anchor(s) named by ``position`` to ``point``."""
    x1, y1, x2, y2 = anchors
    px, py = point
    try:
        tag = PositionTag(position)
    except ValueError:
        return anchors
    if tag in (PositionTag.TOP_LEFT, PositionTag.START):
        return (px, py, x2, y2)
    if tag is PositionTag.TOP_RIGHT:
        return (x1, py, px, y2)
    if tag is PositionTag.BOTTOM_LEFT:
        return (px, y1, x2, py)
    if tag in (PositionTag.BOTTOM_RIGHT, PositionTag.END):
        return (x1, y1, px, py)
    return anchors


def cursor_for_position(position: Optional[Union[str, PositionTag]]) -> str:
    """Cursor hint for a hover classification."""
    if position in (PositionTag.TOP_LEFT, PositionTag.BOTTOM_RIGHT):
        return "nwse-resize"
    if position in (PositionTag.TOP_RIGHT, PositionTag.BOTTOM_LEFT):
        return "nesw-resize"
    if position in (PositionTag.START, PositionTag.END, PositionTag.INSIDE):
        return "move"
    return "default"


__all__ = [
    "HANDLE_SIZE",
    "LINE_TOLERANCE",
    "PositionTag",
    "classify",
    "cursor_for_position",
    "hit_test",
    "near_point",
    "normalize",
    "on_polyline",
    "on_segment",
    "requires_normalization",
    "resize",
]
