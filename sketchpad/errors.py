"""Exceptions raised when a caller breaks the editor's input contract."""
from __future__ import annotations


class SketchError(Exception):
    """Base class for sketchpad contract violations."""


class UnrecognizedKind(SketchError, ValueError):
    """An element kind or tool outside the closed set reached the store."""

    def __init__(self, kind: object):
        super().__init__(f"Type not recognized: {kind!r}")
        self.kind = kind


class MissingTextOption(SketchError):
    """A text element was rebuilt without its payload."""


class MissingMeasurement(SketchError):
    """A text box was requested but no renderer can measure text."""
