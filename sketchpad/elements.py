"""Element model and the ordered store that owns it."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from .errors import MissingMeasurement, MissingTextOption, UnrecognizedKind

if TYPE_CHECKING:  # pragma: no cover
    from .renderer import Renderer

Point = Tuple[float, float]
Anchors = Tuple[float, float, float, float]

log = logging.getLogger("sketchpad.elements")


class ElementKind(str, Enum):
    LINE = "line"
    RECTANGLE = "rectangle"
    FREEHAND = "pencil"
    TEXT = "text"


def coerce_kind(value: Union[str, ElementKind]) -> ElementKind:
    if isinstance(value, ElementKind):
        return value
    try:
        return ElementKind(value)
    except (TypeError, ValueError):
        raise UnrecognizedKind(value) from None


@dataclass(frozen=True)
class LineElement:
    id: str
    x1: float
    y1: float
    x2: float
    y2: float
    primitive: Any = field(default=None, compare=False, repr=False)
    kind: ElementKind = field(default=ElementKind.LINE, init=False)


@dataclass(frozen=True)
class RectangleElement:
    id: str
    x1: float
    y1: float
    x2: float
    y2: float
    primitive: Any = field(default=None, compare=False, repr=False)
    kind: ElementKind = field(default=ElementKind.RECTANGLE, init=False)


@dataclass(frozen=True)
class FreehandElement:
    """Pencil stroke; its anchors are the bounding box of the samples."""

    id: str
    points: Tuple[Point, ...]
    kind: ElementKind = field(default=ElementKind.FREEHAND, init=False)

    def _bounds(self) -> Anchors:
        arr = np.asarray(self.points, dtype=float).reshape(-1, 2)
        if arr.shape[0] == 0:
            return (0.0, 0.0, 0.0, 0.0)
        lo = arr.min(axis=0)
        hi = arr.max(axis=0)
        return (float(lo[0]), float(lo[1]), float(hi[0]), float(hi[1]))

    @property
    def x1(self) -> float:
        return self._bounds()[0]

    @property
    def y1(self) -> float:
        return self._bounds()[1]

    @property
    def x2(self) -> float:
        return self._bounds()[2]

    @property
    def y2(self) -> float:
        return self._bounds()[3]


@dataclass(frozen=True)
class TextElement:
    id: str
    x1: float
    y1: float
    x2: float
    y2: float
    text: str = ""
    kind: ElementKind = field(default=ElementKind.TEXT, init=False)


Element = Union[LineElement, RectangleElement, FreehandElement, TextElement]
Snapshot = Tuple[Element, ...]


def anchors_of(element: Element) -> Anchors:
    return (element.x1, element.y1, element.x2, element.y2)


class ElementStore:
    """Ordered element sequence with stable ids and an id -> index lookup.

    Elements are frozen, so :meth:`snapshot` hands out a tuple that later
    edits can never reach. Ids are issued from a counter that only moves
    forward, which keeps them unique across undo/redo.
    """

    def __init__(self, renderer: Optional["Renderer"] = None, *, line_height: float = 24.0) -> None:
        self._renderer = renderer
        self._line_height = float(line_height)
        self._elements: List[Element] = []
        self._index: Dict[str, int] = {}
        self._counter: int = 1

    # ------------------------------------------------------------------
    # Construction
    def _next_id(self) -> str:
        identifier = f"E{self._counter:04d}"
        self._counter += 1
        return identifier

    def _line_primitive(self, x1: float, y1: float, x2: float, y2: float) -> Any:
        if self._renderer is None:
            return None
        return self._renderer.build_line_primitive(x1, y1, x2, y2)

    def _rect_primitive(self, x1: float, y1: float, x2: float, y2: float) -> Any:
        if self._renderer is None:
            return None
        return self._renderer.build_rect_primitive(x1, y1, x2 - x1, y2 - y1)

    def create(
        self,
        kind: Union[str, ElementKind],
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        element_id: Optional[str] = None,
    ) -> Element:
        """Build a new element. It is not added to the store."""
        kind = coerce_kind(kind)
        element_id = element_id or self._next_id()
        x1, y1, x2, y2 = float(x1), float(y1), float(x2), float(y2)
        if kind is ElementKind.LINE:
            return LineElement(element_id, x1, y1, x2, y2, primitive=self._line_primitive(x1, y1, x2, y2))
        if kind is ElementKind.RECTANGLE:
            return RectangleElement(element_id, x1, y1, x2, y2, primitive=self._rect_primitive(x1, y1, x2, y2))
        if kind is ElementKind.FREEHAND:
            return FreehandElement(element_id, ((x1, y1),))
        if kind is ElementKind.TEXT:
            return TextElement(element_id, x1, y1, x2, y2, text="")
        raise UnrecognizedKind(kind)

    def rebuild(
        self,
        element: Element,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        text: Optional[str] = None,
    ) -> Element:
        """Return ``element`` with new anchors, keeping its id.

        Text boxes are re-measured from ``text``; the passed far anchor is
        ignored for them.
        """
        if isinstance(element, (LineElement, RectangleElement)):
            return self.create(element.kind, x1, y1, x2, y2, element_id=element.id)
        if isinstance(element, FreehandElement):
            dx = float(x1) - element.x1
            dy = float(y1) - element.y1
            return replace(element, points=tuple((px + dx, py + dy) for px, py in element.points))
        if isinstance(element, TextElement):
            if text is None:
                raise MissingTextOption(f"No text provided for text element {element.id}")
            width = self.measure_text(text)
            x1, y1 = float(x1), float(y1)
            return TextElement(element.id, x1, y1, x1 + width, y1 + self._line_height, text=text)
        raise UnrecognizedKind(getattr(element, "kind", element))

    def measure_text(self, text: str) -> float:
        measure = getattr(self._renderer, "measure_text_width", None)
        if measure is None:
            raise MissingMeasurement("Text measurement requires a renderer with measure_text_width")
        return float(measure(text))

    # ------------------------------------------------------------------
    # Mutation
    def append(self, element: Element) -> int:
        if element.id in self._index:
            raise ValueError(f"Element id '{element.id}' already in store")
        self._elements.append(element)
        index = len(self._elements) - 1
        self._index[element.id] = index
        return index

    def replace_at(self, element_id: str, element: Element) -> None:
        index = self.index_of(element_id)
        if element.id != element_id:
            raise ValueError(f"Replacement id '{element.id}' does not match '{element_id}'")
        self._elements[index] = element

    def append_point(self, element_id: str, point: Point) -> FreehandElement:
        element = self.get(element_id)
        if not isinstance(element, FreehandElement):
            raise UnrecognizedKind(element.kind)
        updated = replace(element, points=element.points + ((float(point[0]), float(point[1])),))
        self.replace_at(element_id, updated)
        return updated

    # ------------------------------------------------------------------
    # Lookup
    def index_of(self, element_id: str) -> int:
        try:
            return self._index[element_id]
        except KeyError:
            raise KeyError(f"No element with id '{element_id}'") from None

    def get(self, element_id: str) -> Element:
        return self._elements[self.index_of(element_id)]

    def __contains__(self, element_id: object) -> bool:
        return element_id in self._index

    def __len__(self) -> int:
        return len(self._elements)

    def __iter__(self) -> Iterator[Element]:
        return iter(tuple(self._elements))

    # ------------------------------------------------------------------
    # Snapshots
    def snapshot(self) -> Snapshot:
        return tuple(self._elements)

    def load(self, snapshot: Sequence[Element]) -> None:
        self._elements = list(snapshot)
        self._index = {element.id: i for i, element in enumerate(self._elements)}
        self._reseed_counter()
        log.debug("Loaded %d elements", len(self._elements))

    def _reseed_counter(self) -> None:
        max_seen = 0
        for element in self._elements:
            if element.id.startswith("E"):
                try:
                    max_seen = max(max_seen, int(element.id[1:]))
                except ValueError:
                    continue
        self._counter = max(self._counter, max_seen + 1)


__all__ = [
    "Anchors",
    "Element",
    "ElementKind",
    "ElementStore",
    "FreehandElement",
    "LineElement",
    "Point",
    "RectangleElement",
    "Snapshot",
    "TextElement",
    "anchors_of",
    "coerce_kind",
]
