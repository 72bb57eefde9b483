import json

import pytest

from sketchpad.cli import _build_parser, main


def test_show_config_prints_defaults(capsys):
    assert main(["show-config"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["default_tool"] == "rectangle"
    assert data["handle_size"] == 20.0


def test_tool_flag_overrides_config_file(tmp_path, capsys):
    path = tmp_path / "editor.json"
    path.write_text(json.dumps({"default_tool": "line", "font_px": 18}), encoding="utf-8")
    main(["show-config", "--config", str(path), "--tool", "text"])
    data = json.loads(capsys.readouterr().out)
    assert data["default_tool"] == "text"
    assert data["font_px"] == 18.0


def test_missing_config_is_a_usage_error(tmp_path):
    with pytest.raises(SystemExit) as info:
        main(["show-config", "--config", str(tmp_path / "absent.json")])
    assert info.value.code == 2


def test_invalid_config_is_a_usage_error(tmp_path):
    path = tmp_path / "editor.json"
    path.write_text(json.dumps({"min_scale": 3, "max_scale": 1}), encoding="utf-8")
    with pytest.raises(SystemExit):
        main(["show-config", "--config", str(path)])


def test_parser_rejects_unknown_tool():
    with pytest.raises(SystemExit):
        _build_parser().parse_args(["run", "--tool", "eraser"])


def test_command_is_required():
    with pytest.raises(SystemExit):
        _build_parser().parse_args([])
