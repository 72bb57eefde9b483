"""Interaction state machine driving the element store and its history."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, List, Optional, Protocol, Tuple

import numpy as np

from .config import EditorConfig
from .elements import (
    Element,
    ElementKind,
    ElementStore,
    FreehandElement,
    LineElement,
    Point,
    RectangleElement,
    Snapshot,
    TextElement,
    anchors_of,
    coerce_kind,
)
from .errors import SketchError
from .geometry import (
    PositionTag,
    cursor_for_position,
    hit_test,
    normalize,
    requires_normalization,
    resize,
)
from .history import CommitMode, History
from .input import (
    Button,
    DeferredCalls,
    InputEvent,
    InputPort,
    KeyEvent,
    PointerEvent,
    PressedKeys,
    Subscription,
    WheelEvent,
)
from .renderer import Renderer, draw_scene
from .viewport import Viewport

log = logging.getLogger("sketchpad.editor")

Scheduler = Callable[[Callable[[], None]], None]


class Tool(str, Enum):
    PAN = "pan"
    SELECTION = "selection"
    RECTANGLE = "rectangle"
    LINE = "line"
    PENCIL = "pencil"
    TEXT = "text"

    @property
    def element_kind(self) -> ElementKind:
        """Kind created by this tool; pan and selection raise UnrecognizedKind."""
        return coerce_kind(self.value)


class Action(str, Enum):
    IDLE = "idle"
    DRAWING = "drawing"
    MOVING = "moving"
    RESIZING = "resizing"
    PANNING = "panning"
    EDITING_TEXT = "editingText"


@dataclass
class SelectionRecord:
    """Element grabbed on pointer-down plus where the pointer held it."""

    element: Element
    position: Optional[PositionTag] = None
    offset: Point = (0.0, 0.0)
    point_offsets: Optional[np.ndarray] = None
    pointer: Optional[Point] = None

    @property
    def element_id(self) -> str:
        return self.element.id


class TextOverlay(Protocol):
    """In-place text editor shown while a text element is being edited."""

    def place(self, left: float, top: float, font_px: float) -> None: ...

    def focus_and_seed(self, text: str) -> None: ...

    def dismiss(self) -> None: ...


class Editor:
    """Turns pointer, key and wheel input into element edits.

    Pointer coordinates arrive in screen space and are mapped through the
    viewport first. Every element change is written to the store and then
    committed to the history: ``append`` for discrete steps, ``overwrite``
    for the stream of updates inside one drag.
    """

    def __init__(
        self,
        renderer: Optional[Renderer] = None,
        config: Optional[EditorConfig] = None,
        *,
        input_port: Optional[InputPort] = None,
        overlay: Optional[TextOverlay] = None,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        self.config = config or EditorConfig()
        self._renderer = renderer
        self.store = ElementStore(renderer, line_height=self.config.text_line_height)
        self.history: History[Element] = History(limit=self.config.history_limit)
        self.viewport = Viewport(
            self.config.canvas_width,
            self.config.canvas_height,
            min_scale=self.config.min_scale,
            max_scale=self.config.max_scale,
        )
        self.pressed_keys = PressedKeys()
        self.cursor = "default"
        self._tool = Tool(self.config.default_tool)
        self._action = Action.IDLE
        self._selection: Optional[SelectionRecord] = None
        self._pan_start: Optional[Point] = None
        # Press/release pair that blurred the text overlay; it only ends the edit.
        self._swallow_press = False
        self._swallow_release = False
        self._overlay = overlay
        self.deferred: Optional[DeferredCalls] = None
        if scheduler is None:
            self.deferred = DeferredCalls()
            scheduler = self.deferred.call_soon
        self._schedule = scheduler
        self._subscriptions: List[Subscription] = []
        if input_port is not None:
            self.attach(input_port)

    # ------------------------------------------------------------------
    # Lifetime
    def attach(self, port: InputPort) -> None:
        self._subscriptions.append(port.subscribe(self.handle_input))
        log.info("Editor attached to input port")

    def close(self) -> None:
        for subscription in self._subscriptions:
            subscription.close()
        self._subscriptions.clear()
        self.pressed_keys.clear()
        log.info("Editor closed")

    def __enter__(self) -> "Editor":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ------------------------------------------------------------------
    # State exposed to the UI
    @property
    def tool(self) -> Tool:
        return self._tool

    @tool.setter
    def tool(self, value: str | Tool) -> None:
        try:
            tool = Tool(value)
        except ValueError:
            raise ValueError(f"Unknown tool '{value}'") from None
        self._tool = tool
        self.cursor = "default"
        log.debug("Tool -> %s", tool.value)

    @property
    def action(self) -> Action:
        return self._action

    @property
    def selection(self) -> Optional[SelectionRecord]:
        return self._selection

    @property
    def elements(self) -> Snapshot:
        return self.history.current()

    @property
    def editing_element_id(self) -> Optional[str]:
        if self._action is Action.EDITING_TEXT and self._selection is not None:
            return self._selection.element_id
        return None

    def _set_action(self, action: Action) -> None:
        if action is not self._action:
            log.debug("Action %s -> %s", self._action.value, action.value)
        self._action = action

    def _commit(self, mode: CommitMode) -> None:
        self.history.commit(self.store.snapshot(), mode)

    def _world(self, event: PointerEvent) -> Point:
        return self.viewport.to_world(event.position)

    # ------------------------------------------------------------------
    # Pointer input
    def pointer_down(self, event: PointerEvent) -> None:
        if self._action is Action.EDITING_TEXT:
            return
        if self._swallow_press:
            self._swallow_press = False
            self._swallow_release = True
            log.debug("Pointer down consumed by text overlay blur")
            return
        x, y = self._world(event)
        if self._tool is Tool.PAN or event.button == Button.MIDDLE or " " in self.pressed_keys:
            self._pan_start = (x, y)
            self._set_action(Action.PANNING)
            return

        if self._tool is Tool.SELECTION:
            hit = hit_test(
                (x, y),
                self.store,
                self.config.line_tolerance,
                self.config.handle_size,
                topmost_first=self.config.hit_test_topmost_first,
            )
            if hit is None:
                return
            element, position = hit
            if isinstance(element, FreehandElement):
                offsets = np.array([x, y], dtype=float) - np.asarray(element.points, dtype=float)
                self._selection = SelectionRecord(element, position, point_offsets=offsets, pointer=(x, y))
            else:
                self._selection = SelectionRecord(
                    element, position, offset=(x - element.x1, y - element.y1), pointer=(x, y)
                )
            # Open a fresh snapshot for the drag to overwrite.
            self._commit(CommitMode.APPEND)
            self._set_action(Action.MOVING if position is PositionTag.INSIDE else Action.RESIZING)
            return

        element = self.store.create(self._tool.element_kind, x, y, x, y)
        self.store.append(element)
        self._commit(CommitMode.APPEND)
        self._selection = SelectionRecord(element)
        if self._tool is Tool.TEXT:
            self._begin_text_edit()
        else:
            self._set_action(Action.DRAWING)

    def pointer_move(self, event: PointerEvent) -> None:
        x, y = self._world(event)
        if self._action is Action.PANNING:
            if self._pan_start is not None:
                sx, sy = self._pan_start
                self.viewport.pan_by(x - sx, y - sy)
            return

        if self._tool is Tool.SELECTION and self._action is Action.IDLE:
            hit = hit_test(
                (x, y),
                self.store,
                self.config.line_tolerance,
                self.config.handle_size,
                topmost_first=self.config.hit_test_topmost_first,
            )
            self.cursor = cursor_for_position(hit[1] if hit else None)
            return

        record = self._selection
        if record is None:
            return
        if self._action is Action.DRAWING:
            self._extend_drawing(record, x, y)
        elif self._action is Action.MOVING:
            self._move_selection(record, x, y)
        elif self._action is Action.RESIZING:
            x1, y1, x2, y2 = resize(record.position, anchors_of(record.element), (x, y))
            current = self.store.get(record.element_id)
            self.store.replace_at(record.element_id, self.store.rebuild(current, x1, y1, x2, y2))
            self._commit(CommitMode.OVERWRITE)

    def pointer_up(self, event: PointerEvent) -> None:
        if self._action is Action.EDITING_TEXT:
            return
        if self._swallow_release:
            self._swallow_release = False
            return
        x, y = self._world(event)
        record = self._selection
        if record is not None:
            if self._action is Action.MOVING and self._is_text_click(record, x, y):
                self._begin_text_edit()
                return
            if self._action in (Action.DRAWING, Action.RESIZING):
                current = self.store.get(record.element_id)
                if requires_normalization(current.kind):
                    x1, y1, x2, y2 = normalize(current.kind, *anchors_of(current))
                    self.store.replace_at(record.element_id, self.store.rebuild(current, x1, y1, x2, y2))
                    self._commit(CommitMode.OVERWRITE)
        elif self._action is Action.IDLE:
            log.debug("Pointer up without an active gesture")
        self._selection = None
        self._pan_start = None
        self._set_action(Action.IDLE)

    def _is_text_click(self, record: SelectionRecord, x: float, y: float) -> bool:
        if not isinstance(record.element, TextElement):
            return False
        if record.pointer is None:
            return False
        px, py = record.pointer
        return math.isclose(x, px, abs_tol=1e-9) and math.isclose(y, py, abs_tol=1e-9)

    def _extend_drawing(self, record: SelectionRecord, x: float, y: float) -> None:
        current = self.store.get(record.element_id)
        if isinstance(current, (LineElement, RectangleElement)):
            updated = self.store.create(current.kind, current.x1, current.y1, x, y, element_id=current.id)
            self.store.replace_at(current.id, updated)
        elif isinstance(current, FreehandElement):
            self.store.append_point(current.id, (x, y))
        elif isinstance(current, TextElement):
            return
        else:
            raise SketchError(f"Cannot draw element of kind {current.kind!r}")
        self._commit(CommitMode.OVERWRITE)

    def _move_selection(self, record: SelectionRecord, x: float, y: float) -> None:
        current = self.store.get(record.element_id)
        if isinstance(current, FreehandElement) and record.point_offsets is not None:
            moved = np.array([x, y], dtype=float) - record.point_offsets
            updated: Element = replace(current, points=tuple((px, py) for px, py in moved.tolist()))
        else:
            origin = record.element
            width = origin.x2 - origin.x1
            height = origin.y2 - origin.y1
            nx1 = x - record.offset[0]
            ny1 = y - record.offset[1]
            text = current.text if isinstance(current, TextElement) else None
            updated = self.store.rebuild(current, nx1, ny1, nx1 + width, ny1 + height, text=text)
        self.store.replace_at(current.id, updated)
        self._commit(CommitMode.OVERWRITE)

    # ------------------------------------------------------------------
    # Text editing
    def _begin_text_edit(self) -> None:
        self._set_action(Action.EDITING_TEXT)
        if self._overlay is None:
            return
        element = self.store.get(self._selection.element_id)
        left, top, font_px = self.text_overlay_geometry()
        self._overlay.place(left, top, font_px)
        overlay = self._overlay
        seed = getattr(element, "text", "")
        self._schedule(lambda: overlay.focus_and_seed(seed))

    def text_overlay_geometry(self) -> Tuple[float, float, float]:
        """Screen position and font size that line the overlay up with its element."""
        if self._selection is None:
            raise SketchError("No element is being edited")
        element = self.store.get(self._selection.element_id)
        left, top = self.viewport.to_screen((element.x1, element.y1 - 2.0))
        return (left, top, self.config.font_px * self.viewport.scale)

    def finish_text(self, text: str, from_pointer: bool = False) -> None:
        """Commit the overlay contents when it loses focus.

        ``from_pointer`` marks a blur caused by pressing on the canvas. The
        host delivers that press after the blur, and it is swallowed together
        with its release.
        """
        if self._action is not Action.EDITING_TEXT or self._selection is None:
            raise SketchError("finish_text called while no text element is being edited")
        current = self.store.get(self._selection.element_id)
        updated = self.store.rebuild(current, current.x1, current.y1, current.x2, current.y2, text=text)
        self.store.replace_at(current.id, updated)
        self._commit(CommitMode.APPEND)
        self._selection = None
        self._swallow_press = from_pointer
        self._swallow_release = False
        self._set_action(Action.IDLE)
        if self._overlay is not None:
            self._overlay.dismiss()

    # ------------------------------------------------------------------
    # Keyboard and wheel
    def handle_input(self, event: InputEvent) -> None:
        if isinstance(event, KeyEvent):
            self.key(event)
        elif isinstance(event, WheelEvent):
            self.wheel(event)
        else:
            log.warning("Ignoring unsupported input event %r", event)

    def key(self, event: KeyEvent) -> None:
        self.pressed_keys.update(event)
        if not event.pressed or self._action is Action.EDITING_TEXT:
            return
        if (event.ctrl or event.meta) and event.key.lower() == "z":
            if event.shift:
                self.redo()
            else:
                self.undo()

    def wheel(self, event: WheelEvent) -> None:
        if event.ctrl:
            self.zoom(-event.delta_y * self.config.wheel_zoom_step)
            return
        scale = self.viewport.scale
        self.viewport.pan_by(-event.delta_x / scale, -event.delta_y / scale)

    # ------------------------------------------------------------------
    # Commands
    def _gesture_active(self) -> bool:
        return self._action in (Action.DRAWING, Action.MOVING, Action.RESIZING, Action.EDITING_TEXT)

    def undo(self) -> bool:
        if self._gesture_active():
            log.debug("Undo ignored during %s", self._action.value)
            return False
        if not self.history.undo():
            return False
        self.store.load(self.history.current())
        return True

    def redo(self) -> bool:
        if self._gesture_active():
            log.debug("Redo ignored during %s", self._action.value)
            return False
        if not self.history.redo():
            return False
        self.store.load(self.history.current())
        return True

    def zoom(self, delta: float) -> float:
        return self.viewport.zoom(delta)

    def reset_zoom(self) -> None:
        self.viewport.set_scale(1.0)

    def draw(self, renderer: Optional[Renderer] = None) -> int:
        target = renderer or self._renderer
        if target is None:
            raise SketchError("No renderer available to draw with")
        return draw_scene(target, self.elements, skip_id=self.editing_element_id, font_px=self.config.font_px)


__all__ = ["Action", "Editor", "Scheduler", "SelectionRecord", "TextOverlay", "Tool"]
