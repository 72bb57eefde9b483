import json

import pytest
from pydantic import ValidationError

from sketchpad.config import EditorConfig


def test_defaults():
    config = EditorConfig()
    assert config.line_tolerance == 5.0
    assert config.handle_size == 20.0
    assert (config.min_scale, config.max_scale) == (0.1, 20.0)
    assert config.default_tool == "rectangle"
    assert config.history_limit is None
    assert config.hit_test_topmost_first is False


def test_scale_range_must_be_ordered():
    with pytest.raises(ValidationError):
        EditorConfig(min_scale=5, max_scale=2)


@pytest.mark.parametrize(
    "overrides",
    [{"history_limit": 1}, {"line_tolerance": 0}, {"default_tool": "eraser"}],
)
def test_invalid_values(overrides):
    with pytest.raises(ValidationError):
        EditorConfig(**overrides)


def test_from_file_keeps_missing_defaults(tmp_path):
    path = tmp_path / "editor.json"
    path.write_text(json.dumps({"default_tool": "pencil", "history_limit": 50}), encoding="utf-8")
    config = EditorConfig.from_file(path)
    assert config.default_tool == "pencil"
    assert config.history_limit == 50
    assert config.handle_size == 20.0


def test_from_file_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        EditorConfig.from_file(tmp_path / "absent.json")
