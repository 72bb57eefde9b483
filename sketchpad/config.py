"""Pydantic configuration for the sketchpad editor."""
from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator

ToolLiteral = Literal["pan", "selection", "rectangle", "line", "pencil", "text"]


class EditorConfig(BaseModel):
    line_tolerance: float = Field(
        5.0, gt=0.0, description="Maximum detour (world units) for a point to count as on a segment."
    )
    handle_size: float = Field(
        20.0, gt=0.0, description="Half-width of the square grab area around corners and endpoints."
    )
    text_line_height: float = Field(24.0, gt=0.0, description="Height of a text element's box.")
    font_px: float = Field(24.0, gt=0.0, description="Font size used to draw and measure text at scale 1.")
    min_scale: float = Field(0.1, gt=0.0, description="Lower zoom bound.")
    max_scale: float = Field(20.0, gt=0.0, description="Upper zoom bound.")
    wheel_zoom_step: float = Field(
        0.001, gt=0.0, description="Scale change per wheel delta unit while Ctrl is held."
    )
    default_tool: ToolLiteral = Field("rectangle", description="Tool active when the editor starts.")
    hit_test_topmost_first: bool = Field(
        False, description="Scan elements newest-first when hit-testing instead of in insertion order."
    )
    history_limit: Optional[int] = Field(
        None, ge=2, description="Maximum number of snapshots kept; unlimited when unset."
    )
    canvas_width: int = Field(1280, gt=0, description="Initial canvas width in pixels.")
    canvas_height: int = Field(800, gt=0, description="Initial canvas height in pixels.")

    @model_validator(mode="after")
    def _check_scale_range(self) -> "EditorConfig":
        if self.min_scale >= self.max_scale:
            raise ValueError("min_scale must be smaller than max_scale")
        return self

    @classmethod
    def from_file(cls, path: str | Path) -> "EditorConfig":
        """Load a config from a JSON file; missing keys keep their defaults."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file '{path}' not found")
        return cls.model_validate_json(path.read_text(encoding="utf-8"))


__all__ = ["EditorConfig", "ToolLiteral"]
