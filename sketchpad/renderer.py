"""Renderer port plus the drawing helpers shared by every backend.

The editor never paints anything itself. A backend (the Qt canvas in
:mod:`sketchpad.widgets`, or a recording fake in tests) implements
:class:`Renderer`; :func:`draw_scene` walks the current elements and calls into
it. Primitive handles returned by ``build_*_primitive`` are opaque to the core.
"""
from __future__ import annotations

from typing import Any, Iterable, List, Optional, Protocol, Sequence, Tuple

import numpy as np

from .elements import Element, FreehandElement, LineElement, RectangleElement, TextElement
from .errors import UnrecognizedKind

Point = Tuple[float, float]


class Renderer(Protocol):
    """Drawing backend consumed by the element store and the render pass."""

    def build_line_primitive(self, x1: float, y1: float, x2: float, y2: float) -> Any: ...

    def build_rect_primitive(self, x: float, y: float, w: float, h: float) -> Any: ...

    def draw_primitive(self, primitive: Any) -> None: ...

    def tessellate_freehand(self, points: Sequence[Point]) -> np.ndarray: ...

    def fill_outline(self, outline: np.ndarray) -> None: ...

    def draw_text(self, text: str, x: float, y: float, font_px: float) -> None: ...

    def measure_text_width(self, text: str) -> float: ...


def draw_element(renderer: Renderer, element: Element, font_px: float = 24.0) -> None:
    if isinstance(element, (LineElement, RectangleElement)):
        renderer.draw_primitive(element.primitive)
    elif isinstance(element, FreehandElement):
        outline = renderer.tessellate_freehand(element.points)
        renderer.fill_outline(outline)
    elif isinstance(element, TextElement):
        renderer.draw_text(element.text, element.x1, element.y1, font_px)
    else:
        raise UnrecognizedKind(getattr(element, "kind", element))


def draw_scene(
    renderer: Renderer,
    elements: Iterable[Element],
    skip_id: Optional[str] = None,
    font_px: float = 24.0,
) -> int:
    """Draw ``elements`` in store order and return how many were painted.

    ``skip_id`` hides the element currently open in the text overlay so the
    overlay and the canvas do not draw the same text twice.
    """
    painted = 0
    for element in elements:
        if skip_id is not None and element.id == skip_id:
            continue
        draw_element(renderer, element, font_px=font_px)
        painted += 1
    return painted


def stroke_outline(points: Sequence[Point], size: float = 2.0) -> np.ndarray:
    """Return a closed outline polygon around a sampled pencil stroke.

    The outline walks the left side of the stroke forward and the right side
    backward, offsetting each sample by half of ``size`` along its normal.
    """
    pts = np.asarray(list(points), dtype=float).reshape(-1, 2)
    radius = size / 2.0
    if pts.shape[0] == 0:
        return np.zeros((0, 2), dtype=float)
    if pts.shape[0] == 1:
        angle = np.linspace(0.0, 2.0 * np.pi, 8, endpoint=False)
        return np.column_stack((pts[0, 0] + radius * np.cos(angle), pts[0, 1] + radius * np.sin(angle)))
    tangent = np.gradient(pts, axis=0)
    length = np.hypot(tangent[:, 0], tangent[:, 1])
    length[length <= 1e-12] = 1.0
    normal = np.column_stack((-tangent[:, 1], tangent[:, 0])) / length[:, None]
    left = pts + normal * radius
    right = pts - normal * radius
    return np.vstack((left, right[::-1]))


def quadratic_segments(outline: Sequence[Sequence[float]]) -> List[Tuple[Point, Point]]:
    """Return ``(control, end)`` pairs that smooth a closed outline.

    Each outline vertex becomes a control point and the curve passes through
    the midpoint to the next vertex, wrapping around to the first. The path
    starts at the first vertex.
    """
    pts = [(float(p[0]), float(p[1])) for p in outline]
    segments = []
    for i, (x0, y0) in enumerate(pts):
        x1, y1 = pts[(i + 1) % len(pts)]
        segments.append(((x0, y0), ((x0 + x1) / 2.0, (y0 + y1) / 2.0)))
    return segments


def _num(value: float) -> str:
    text = f"{float(value):.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def svg_path_from_stroke(outline: Sequence[Sequence[float]]) -> str:
    """Smooth an outline into an SVG path using quadratic midpoints."""
    segments = quadratic_segments(outline)
    if not segments:
        return ""
    start = segments[0][0]
    parts = ["M", _num(start[0]), _num(start[1]), "Q"]
    for control, end in segments:
        parts.extend((_num(control[0]), _num(control[1]), _num(end[0]), _num(end[1])))
    parts.append("Z")
    return " ".join(parts)


__all__ = [
    "Renderer",
    "draw_element",
    "draw_scene",
    "quadratic_segments",
    "stroke_outline",
    "svg_path_from_stroke",
]
