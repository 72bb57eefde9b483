"""Application bootstrap for the sketchpad editor."""
from __future__ import annotations

import logging
import sys
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QActionGroup, QKeySequence
from PySide6.QtWidgets import QApplication, QLabel, QMainWindow, QStatusBar, QToolBar

from .config import EditorConfig
from .editor import Tool
from .widgets import Canvas

log = logging.getLogger("sketchpad.app")

_TOOL_LABELS = (
    (Tool.PAN, "Pan", "Pan: drag to move the canvas (or hold Space / middle button)."),
    (Tool.SELECTION, "Selection", "Selection: drag shapes to move them, grab corners or endpoints to resize."),
    (Tool.RECTANGLE, "Rectangle", "Rectangle: drag to draw."),
    (Tool.LINE, "Line", "Line: drag to draw."),
    (Tool.PENCIL, "Pencil", "Pencil: draw freehand strokes."),
    (Tool.TEXT, "Text", "Text: click to place, type, click elsewhere to commit."),
)


class Main(QMainWindow):
    """Top-level window: canvas, tool bar and status bar."""

    def __init__(self, config: Optional[EditorConfig] = None):
        super().__init__()
        self.setWindowTitle("Sketchpad")

        self.canvas = Canvas(config)
        self.setCentralWidget(self.canvas)
        self._tool_actions: dict[Tool, QAction] = {}

        self._setup_status_bar()
        self._make_toolbar()
        self._make_menu()

        self.canvas.changed.connect(self._sync_status)
        self.resize(self.canvas.width(), self.canvas.height())
        self._sync_status()

    def _setup_status_bar(self) -> None:
        bar = QStatusBar()
        bar.setSizeGripEnabled(False)
        self.setStatusBar(bar)
        self._mode_label = QLabel("")
        self._zoom_label = QLabel("")
        bar.addPermanentWidget(self._mode_label)
        bar.addPermanentWidget(self._zoom_label)

    def _make_toolbar(self) -> None:
        toolbar = QToolBar("Tools")
        toolbar.setMovable(False)
        self.addToolBar(Qt.TopToolBarArea, toolbar)

        group = QActionGroup(self)
        group.setExclusive(True)
        for index, (tool, text, tip) in enumerate(_TOOL_LABELS, start=1):
            action = QAction(f"{text} ({index})", self)
            action.setCheckable(True)
            action.setActionGroup(group)
            action.setShortcut(QKeySequence(str(index)))
            action.setToolTip(tip)
            action.setStatusTip(tip)
            action.triggered.connect(lambda checked, t=tool: self._activate_tool(t, checked))
            toolbar.addAction(action)
            self._tool_actions[tool] = action
        self._tool_actions[self.canvas.editor.tool].setChecked(True)

        toolbar.addSeparator()
        undo_action = toolbar.addAction("Undo")
        undo_action.setToolTip("Undo the last edit (Ctrl+Z).")
        undo_action.triggered.connect(self.canvas.undo)
        redo_action = toolbar.addAction("Redo")
        redo_action.setToolTip("Redo the last undone edit (Ctrl+Shift+Z).")
        redo_action.triggered.connect(self.canvas.redo)

    def _make_menu(self) -> None:
        view_menu = self.menuBar().addMenu("&View")
        step = 0.1
        zoom_in_action = view_menu.addAction("Zoom In")
        zoom_in_action.setShortcut(QKeySequence.ZoomIn)
        zoom_in_action.triggered.connect(lambda: self.canvas.zoom(step))
        zoom_out_action = view_menu.addAction("Zoom Out")
        zoom_out_action.setShortcut(QKeySequence.ZoomOut)
        zoom_out_action.triggered.connect(lambda: self.canvas.zoom(-step))
        zoom_reset_action = view_menu.addAction("Reset Zoom")
        zoom_reset_action.setShortcut("Ctrl+0")
        zoom_reset_action.triggered.connect(self.canvas.reset_zoom)

    def _activate_tool(self, tool: Tool, checked: bool) -> None:
        if not checked:
            return
        self.canvas.set_tool(tool.value)
        self.canvas.setFocus()

    def _sync_status(self) -> None:
        editor = self.canvas.editor
        self._mode_label.setText(f"Tool: {editor.tool.value} | {editor.action.value}")
        self._zoom_label.setText(f"{editor.viewport.scale * 100:.0f}%")


def run(config: Optional[EditorConfig] = None) -> int:
    app = QApplication.instance() or QApplication(sys.argv)
    window = Main(config)
    window.show()
    log.info("Sketchpad window shown")
    return app.exec()


__all__ = ["Main", "run"]
