"""Command line interface for the sketchpad editor."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Iterable

from pydantic import ValidationError

from .config import EditorConfig
from .editor import Tool

log = logging.getLogger("sketchpad.cli")


def _load_config(args: argparse.Namespace) -> EditorConfig:
    config = EditorConfig.from_file(Path(args.config)) if args.config else EditorConfig()
    if args.tool:
        config = config.model_copy(update={"default_tool": args.tool})
    return config


def _cmd_run(args: argparse.Namespace) -> None:  # pragma: no cover - GUI entry point
    from .app import run

    config = _load_config(args)
    log.info("Starting sketchpad with tool '%s'", config.default_tool)
    code = run(config)
    if code:
        raise SystemExit(code)


def _cmd_show_config(args: argparse.Namespace) -> None:
    print(_load_config(args).model_dump_json(indent=2))


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sketchpad",
        description="Sketchpad vector-shape editor",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    def add_common(p: argparse.ArgumentParser) -> None:
        p.add_argument("--config", help="Path to a JSON editor config")
        p.add_argument("--tool", choices=[t.value for t in Tool], help="Tool active at start-up")

    runner = sub.add_parser("run", help="Open the editor window")
    add_common(runner)
    runner.set_defaults(func=_cmd_run)

    shower = sub.add_parser("show-config", help="Print the effective editor config as JSON")
    add_common(shower)
    shower.set_defaults(func=_cmd_show_config)

    return parser


def main(argv: Iterable[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        args.func(args)
    except (FileNotFoundError, ValidationError) as exc:
        parser.error(str(exc))
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
