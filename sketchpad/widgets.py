"""Qt widgets hosting the sketchpad editor."""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Sequence, Tuple

import numpy as np
from PySide6.QtCore import QLineF, QRectF, QSize, Qt, QTimer, Signal
from PySide6.QtGui import QColor, QFont, QFontMetricsF, QPainter, QPainterPath, QPen, QTextCursor
from PySide6.QtWidgets import QPlainTextEdit, QWidget

from .config import EditorConfig
from .editor import Action, Editor
from .input import Button, InputPort, KeyEvent, PointerEvent, WheelEvent
from .renderer import quadratic_segments, stroke_outline

Point = Tuple[float, float]

log = logging.getLogger("sketchpad.widgets")

_BUTTONS = {
    Qt.LeftButton: Button.LEFT,
    Qt.MiddleButton: Button.MIDDLE,
    Qt.RightButton: Button.RIGHT,
}

_CURSORS = {
    "nwse-resize": Qt.SizeFDiagCursor,
    "nesw-resize": Qt.SizeBDiagCursor,
    "move": Qt.SizeAllCursor,
    "default": Qt.ArrowCursor,
}


def _font(px: float) -> QFont:
    font = QFont("sans-serif")
    font.setPixelSize(max(1, int(round(px))))
    return font


def outline_path(outline: Sequence[Sequence[float]]) -> QPainterPath:
    """Closed painter path through the quadratic midpoints of a stroke outline."""
    path = QPainterPath()
    segments = quadratic_segments(outline)
    if not segments:
        return path
    sx, sy = segments[0][0]
    path.moveTo(sx, sy)
    for (cx, cy), (ex, ey) in segments:
        path.quadTo(cx, cy, ex, ey)
    path.closeSubpath()
    return path


class QtRenderer:
    """QPainter backend. Primitives are QLineF / QRectF in world units."""

    def __init__(self, font_px: float = 24.0) -> None:
        self._painter: Optional[QPainter] = None
        self._font_px = font_px
        self._pen = QPen(QColor(30, 30, 30), 2)

    def begin(self, painter: QPainter) -> None:
        self._painter = painter
        painter.setPen(self._pen)

    def end(self) -> None:
        self._painter = None

    def build_line_primitive(self, x1: float, y1: float, x2: float, y2: float) -> Any:
        return QLineF(x1, y1, x2, y2)

    def build_rect_primitive(self, x: float, y: float, w: float, h: float) -> Any:
        return QRectF(x, y, w, h)

    def draw_primitive(self, primitive: Any) -> None:
        if self._painter is None:
            return
        self._painter.setBrush(Qt.NoBrush)
        if isinstance(primitive, QLineF):
            self._painter.drawLine(primitive)
        elif isinstance(primitive, QRectF):
            self._painter.drawRect(primitive.normalized())

    def tessellate_freehand(self, points: Sequence[Point]) -> np.ndarray:
        return stroke_outline(points, size=2.0)

    def fill_outline(self, outline: np.ndarray) -> None:
        if self._painter is None or len(outline) == 0:
            return
        self._painter.setBrush(QColor(30, 30, 30))
        self._painter.drawPath(outline_path(outline))

    def draw_text(self, text: str, x: float, y: float, font_px: float) -> None:
        if self._painter is None or not text:
            return
        self._painter.setFont(_font(font_px))
        rect = QRectF(x, y, self.measure_text_width(text) + font_px, font_px * 2.0)
        self._painter.drawText(rect, Qt.AlignLeft | Qt.AlignTop, text)

    def measure_text_width(self, text: str) -> float:
        return float(QFontMetricsF(_font(self._font_px)).horizontalAdvance(text))


class TextOverlayEdit(QPlainTextEdit):
    """Borderless editor laid over the canvas while a text element is open."""

    def __init__(self, parent: QWidget, on_finished: Callable[[str, bool], None]):
        super().__init__(parent)
        self._on_finished = on_finished
        self.setFrameStyle(0)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.setLineWrapMode(QPlainTextEdit.NoWrap)
        self.setStyleSheet("background: transparent;")
        self.hide()

    def place(self, left: float, top: float, font_px: float) -> None:
        self.setFont(_font(font_px))
        self.setGeometry(int(round(left)), int(round(top)), 600, int(font_px * 2.0))
        self.show()
        self.raise_()

    def focus_and_seed(self, text: str) -> None:
        self.setPlainText(text)
        self.setFocus()
        self.moveCursor(QTextCursor.End)

    def dismiss(self) -> None:
        self.hide()
        self.clear()

    def focusOutEvent(self, event):  # pragma: no cover - GUI entry point
        super().focusOutEvent(event)
        if self.isVisible():
            by_mouse = event.reason() == Qt.MouseFocusReason
            self._on_finished(self.toPlainText(), by_mouse)


class Canvas(QWidget):
    """Drawing surface forwarding Qt input to the editor and painting its elements."""

    changed = Signal()

    def __init__(self, config: Optional[EditorConfig] = None):
        super().__init__()
        self.setObjectName("SketchCanvas")
        self.setMinimumSize(QSize(640, 480))
        self.setFocusPolicy(Qt.StrongFocus)
        self.setMouseTracking(True)

        config = config or EditorConfig()
        self.renderer = QtRenderer(font_px=config.font_px)
        self.input_port = InputPort()
        self.overlay = TextOverlayEdit(self, self._finish_text)
        self.editor = Editor(
            self.renderer,
            config,
            input_port=self.input_port,
            overlay=self.overlay,
            scheduler=self._call_soon,
        )
        self.resize(config.canvas_width, config.canvas_height)

    def _call_soon(self, callback: Callable[[], None]) -> None:
        QTimer.singleShot(0, callback)

    def _finish_text(self, text: str, by_mouse: bool = False) -> None:
        if self.editor.action is not Action.EDITING_TEXT:
            return
        # Qt moves focus before delivering the press that caused it.
        self.editor.finish_text(text, from_pointer=by_mouse and self.underMouse())
        log.debug("Text overlay committed %d characters", len(text))
        self.setFocus()
        self._refresh()

    def _refresh(self) -> None:
        if self.editor.action is Action.PANNING:
            self.setCursor(Qt.ClosedHandCursor)
        else:
            self.setCursor(_CURSORS.get(self.editor.cursor, Qt.ArrowCursor))
        self.changed.emit()
        self.update()

    def set_tool(self, name: str) -> None:
        self.editor.tool = name
        self._refresh()

    def undo(self) -> None:
        if self.editor.undo():
            self._refresh()

    def redo(self) -> None:
        if self.editor.redo():
            self._refresh()

    def zoom(self, delta: float) -> None:
        self.editor.zoom(delta)
        self._refresh()

    def reset_zoom(self) -> None:
        self.editor.reset_zoom()
        self._refresh()

    # ------------------------------------------------------------------
    # Event forwarding
    @staticmethod
    def _pointer(event) -> PointerEvent:
        pos = event.position()
        return PointerEvent(pos.x(), pos.y(), _BUTTONS.get(event.button(), Button.LEFT))

    @staticmethod
    def _key_name(event) -> str:
        key = event.key()
        if key == Qt.Key_Space:
            return " "
        if Qt.Key_A <= key <= Qt.Key_Z:
            return chr(key).lower()
        return event.text()

    def _key_event(self, event, pressed: bool) -> KeyEvent:
        modifiers = event.modifiers()
        return KeyEvent(
            self._key_name(event),
            pressed=pressed,
            ctrl=bool(modifiers & Qt.ControlModifier),
            meta=bool(modifiers & Qt.MetaModifier),
            shift=bool(modifiers & Qt.ShiftModifier),
        )

    def mousePressEvent(self, event):  # pragma: no cover - GUI entry point
        self.editor.pointer_down(self._pointer(event))
        self._refresh()

    def mouseMoveEvent(self, event):  # pragma: no cover - GUI entry point
        self.editor.pointer_move(self._pointer(event))
        self._refresh()

    def mouseReleaseEvent(self, event):  # pragma: no cover - GUI entry point
        self.editor.pointer_up(self._pointer(event))
        self._refresh()

    def keyPressEvent(self, event):  # pragma: no cover - GUI entry point
        self.input_port.emit(self._key_event(event, pressed=True))
        self._refresh()

    def keyReleaseEvent(self, event):  # pragma: no cover - GUI entry point
        if event.isAutoRepeat():
            return
        self.input_port.emit(self._key_event(event, pressed=False))

    def wheelEvent(self, event):  # pragma: no cover - GUI entry point
        delta = event.angleDelta()
        ctrl = bool(event.modifiers() & Qt.ControlModifier)
        self.input_port.emit(WheelEvent(-float(delta.x()), -float(delta.y()), ctrl=ctrl))
        event.accept()
        self._refresh()

    def resizeEvent(self, event):  # pragma: no cover - GUI layout handling
        super().resizeEvent(event)
        self.editor.viewport.resize(self.width(), self.height())

    def closeEvent(self, event):  # pragma: no cover - GUI entry point
        self.editor.close()
        super().closeEvent(event)

    # ------------------------------------------------------------------
    # Painting
    def paintEvent(self, event):  # pragma: no cover - GUI entry point
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing, True)
        painter.fillRect(self.rect(), QColor(250, 250, 250))
        viewport = self.editor.viewport
        ox, oy = viewport.scale_offset
        painter.translate(-ox, -oy)
        painter.scale(viewport.scale, viewport.scale)
        painter.translate(viewport.pan_x, viewport.pan_y)
        self.renderer.begin(painter)
        try:
            self.editor.draw()
        finally:
            self.renderer.end()
            painter.end()


__all__ = ["Canvas", "QtRenderer", "TextOverlayEdit", "outline_path"]
