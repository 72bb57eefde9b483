"""Pan/zoom mapping between screen pixels and world coordinates."""
from __future__ import annotations

from typing import Tuple

Point = Tuple[float, float]


class Viewport:
    """Cumulative pan offset and a clamped zoom scale.

    Zooming is centred on the canvas: the world is scaled about the canvas
    middle, and ``scale_offset`` is the shift that centring introduces. Pan is
    stored in world units so it stays put while the scale changes.
    """

    def __init__(
        self,
        width: float = 1280.0,
        height: float = 800.0,
        min_scale: float = 0.1,
        max_scale: float = 20.0,
    ) -> None:
        if min_scale >= max_scale:
            raise ValueError("min_scale must be smaller than max_scale")
        self._width = float(width)
        self._height = float(height)
        self._min_scale = float(min_scale)
        self._max_scale = float(max_scale)
        self.pan_x = 0.0
        self.pan_y = 0.0
        self._scale = 1.0

    @property
    def scale(self) -> float:
        return self._scale

    @property
    def size(self) -> Tuple[float, float]:
        return (self._width, self._height)

    @property
    def pan(self) -> Point:
        return (self.pan_x, self.pan_y)

    @property
    def scale_offset(self) -> Point:
        s = self._scale
        return ((self._width * s - self._width) / 2.0, (self._height * s - self._height) / 2.0)

    def resize(self, width: float, height: float) -> None:
        self._width = float(width)
        self._height = float(height)

    # ------------------------------------------------------------------
    # Mapping
    def to_world(self, point: Point) -> Point:
        s = self._scale
        ox, oy = self.scale_offset
        return (
            (point[0] - self.pan_x * s + ox) / s,
            (point[1] - self.pan_y * s + oy) / s,
        )

    def to_screen(self, point: Point) -> Point:
        s = self._scale
        ox, oy = self.scale_offset
        return (
            point[0] * s + self.pan_x * s - ox,
            point[1] * s + self.pan_y * s - oy,
        )

    # ------------------------------------------------------------------
    # Mutation
    def pan_by(self, dx: float, dy: float) -> None:
        self.pan_x += dx
        self.pan_y += dy

    def set_pan(self, x: float, y: float) -> None:
        self.pan_x = float(x)
        self.pan_y = float(y)

    def set_scale(self, scale: float) -> float:
        self._scale = max(self._min_scale, min(self._max_scale, float(scale)))
        return self._scale

    def zoom(self, delta: float) -> float:
        return self.set_scale(self._scale + delta)

    def reset(self) -> None:
        self.pan_x = 0.0
        self.pan_y = 0.0
        self._scale = 1.0


__all__ = ["Viewport"]
