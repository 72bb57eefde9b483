"""Input events and the port the editor subscribes to.

Pointer events are handed to the editor directly by whatever owns the
drawing surface. Keyboard and wheel input is window-wide, so it travels
through an :class:`InputPort` whose subscriptions the editor releases when it
is closed.
"""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Deque, List, Set, Union

log = logging.getLogger("sketchpad.input")


class Button(IntEnum):
    LEFT = 0
    MIDDLE = 1
    RIGHT = 2


@dataclass(frozen=True)
class PointerEvent:
    x: float
    y: float
    button: Button = Button.LEFT

    @property
    def position(self):
        return (self.x, self.y)


@dataclass(frozen=True)
class KeyEvent:
    key: str
    pressed: bool = True
    ctrl: bool = False
    meta: bool = False
    shift: bool = False


@dataclass(frozen=True)
class WheelEvent:
    delta_x: float
    delta_y: float
    ctrl: bool = False


InputEvent = Union[KeyEvent, WheelEvent]
Listener = Callable[[InputEvent], None]


class Subscription:
    """Handle returned by :meth:`InputPort.subscribe`."""

    def __init__(self, port: "InputPort", listener: Listener) -> None:
        self._port = port
        self._listener = listener
        self.active = True

    def close(self) -> None:
        if not self.active:
            return
        self._port._remove(self._listener)
        self.active = False
        log.debug("Released input listener %r", self._listener)


class InputPort:
    """Fan-out of keyboard and wheel events to subscribed listeners."""

    def __init__(self) -> None:
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Subscription:
        self._listeners.append(listener)
        return Subscription(self, listener)

    def _remove(self, listener: Listener) -> None:
        self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def emit(self, event: InputEvent) -> None:
        for listener in list(self._listeners):
            listener(event)


class PressedKeys:
    """Set of keys currently held down."""

    def __init__(self) -> None:
        self._keys: Set[str] = set()

    def update(self, event: KeyEvent) -> None:
        if event.pressed:
            self._keys.add(event.key)
        else:
            self._keys.discard(event.key)

    def clear(self) -> None:
        self._keys.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._keys

    def __len__(self) -> int:
        return len(self._keys)


class DeferredCalls:
    """Same-thread continuations run on the next turn of the owner's loop.

    Headless hosts call :meth:`run_pending` after each event; the Qt canvas
    uses ``QTimer.singleShot(0, ...)`` instead.
    """

    def __init__(self) -> None:
        self._pending: Deque[Callable[[], None]] = deque()

    def call_soon(self, callback: Callable[[], None]) -> None:
        self._pending.append(callback)

    def run_pending(self) -> int:
        ran = 0
        while self._pending:
            callback = self._pending.popleft()
            callback()
            ran += 1
        return ran

    def __len__(self) -> int:
        return len(self._pending)


__all__ = [
    "Button",
    "DeferredCalls",
    "InputEvent",
    "InputPort",
    "KeyEvent",
    "PointerEvent",
    "PressedKeys",
    "Subscription",
    "WheelEvent",
]
