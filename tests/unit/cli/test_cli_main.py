"""Tests for the iconmatrix CLI."""

from __future__ import annotations

import json
import sys
from unittest.mock import patch

import pytest

from iconmatrix.cli.main import build_arg_parser, main, run_command, run_requests_async
from iconmatrix.core.canvas import MemoryCanvas, NodeKind
from iconmatrix.core.config.loader import LOG_LEVEL_ENV
from iconmatrix.core.config.models import AppConfig
from iconmatrix.core.generation.models import AssemblyMode


def _message(png_bytes, name="chevron", themes=("light", "dark"), states=("default",)):
    return {
        "type": "create-icon",
        "category": "arrows",
        "name": name,
        "themes": list(themes),
        "states": list(states),
        "variants": [
            {"theme": theme, "state": state, "bytes": list(png_bytes)}
            for theme in themes
            for state in states
        ],
        "position": {"x": 0, "y": 0},
        "hasProblems": False,
        "iconWidth": 24,
        "iconHeight": 24,
    }


@pytest.fixture(autouse=True)
def _isolate_logging(restore_root_logger, monkeypatch):
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)


class TestArgParser:
    """Test CLI argument parsing."""

    def test_run_arguments(self):
        args = build_arg_parser().parse_args(
            ["run", "--requests", "r.json", "--document", "d.json", "--out", "o.json"]
        )
        assert args.cmd == "run"
        assert args.requests == "r.json"
        assert args.document == "d.json"
        assert args.out == "o.json"
        assert args.config is None
        assert args.log_level is None

    def test_requests_required(self):
        with pytest.raises(SystemExit):
            build_arg_parser().parse_args(["run"])

    def test_subcommand_required(self):
        with pytest.raises(SystemExit):
            build_arg_parser().parse_args([])


class TestRunCommand:
    """Test the run subcommand."""

    def test_generates_and_writes_scene(self, tmp_path, png_bytes, capsys):
        requests = tmp_path / "requests.json"
        requests.write_text(json.dumps([_message(png_bytes), _message(png_bytes)]))
        out = tmp_path / "out" / "scene.json"
        args = build_arg_parser().parse_args(
            ["run", "--requests", str(requests), "--out", str(out)]
        )

        assert run_command(args) == 0

        scene = json.loads(out.read_text())
        sets = [child for child in scene["children"] if child["kind"] == "COMPONENT_SET"]
        assert [s["name"] for s in sets] == ["Icon / Arrows / Chevron24"]

        output = capsys.readouterr().out
        assert "Created component set" in output
        assert "Skipped (already exists)" in output

    def test_existing_document_skips(self, tmp_path, png_bytes, capsys):
        requests = tmp_path / "requests.json"
        requests.write_text(json.dumps(_message(png_bytes)))
        document = tmp_path / "document.json"
        document.write_text(json.dumps(["Icon / Arrows / Chevron24"]))
        args = build_arg_parser().parse_args(
            ["run", "--requests", str(requests), "--document", str(document)]
        )

        assert run_command(args) == 0
        output = capsys.readouterr().out
        assert "Found 1 existing components on page" in output
        assert "Skipped (already exists): Icon / Arrows / Chevron24" in output

    def test_zero_yield_exit_code(self, tmp_path, png_bytes):
        message = _message(png_bytes)
        message["variants"] = []
        requests = tmp_path / "requests.json"
        requests.write_text(json.dumps(message))
        args = build_arg_parser().parse_args(["run", "--requests", str(requests)])

        assert run_command(args) == 1

    def test_missing_requests_file(self, tmp_path, capsys):
        args = build_arg_parser().parse_args(
            ["run", "--requests", str(tmp_path / "absent.json")]
        )
        assert run_command(args) == 1
        assert "ERROR" in capsys.readouterr().out

    def test_malformed_requests_file(self, tmp_path):
        requests = tmp_path / "requests.json"
        requests.write_text(json.dumps([1, 2]))
        args = build_arg_parser().parse_args(["run", "--requests", str(requests)])
        assert run_command(args) == 1

    def test_malformed_document_file(self, tmp_path, png_bytes):
        requests = tmp_path / "requests.json"
        requests.write_text(json.dumps(_message(png_bytes)))
        document = tmp_path / "document.json"
        document.write_text(json.dumps({"names": []}))
        args = build_arg_parser().parse_args(
            ["run", "--requests", str(requests), "--document", str(document)]
        )
        assert run_command(args) == 1

    def test_config_file_applied(self, tmp_path, png_bytes):
        requests = tmp_path / "requests.json"
        requests.write_text(json.dumps(_message(png_bytes)))
        config = tmp_path / "iconmatrix.yaml"
        config.write_text("layout:\n  gap: 4\nlogging:\n  level: ERROR\n")
        out = tmp_path / "scene.json"
        args = build_arg_parser().parse_args(
            ["run", "--requests", str(requests), "--config", str(config), "--out", str(out)]
        )

        assert run_command(args) == 0
        children = json.loads(out.read_text())["children"]
        (group,) = [c for c in children if c["kind"] == "COMPONENT_SET"]
        assert group["grid_layout"]["column_gap"] == 4

    def test_invalid_log_level(self, tmp_path, png_bytes):
        requests = tmp_path / "requests.json"
        requests.write_text(json.dumps(_message(png_bytes)))
        args = build_arg_parser().parse_args(
            ["run", "--requests", str(requests), "--log-level", "chatty"]
        )
        assert run_command(args) == 1


@pytest.mark.asyncio
async def test_run_requests_async_returns_results(png_bytes):
    canvas = MemoryCanvas()
    canvas.add_existing("Icon / Arrows / Solo24", NodeKind.COMPONENT)
    requests = [
        _message(png_bytes),
        {"type": "ping"},
        _message(png_bytes, name="solo", themes=("light",)),
        _message(png_bytes, name="other", themes=("light",)),
    ]

    results = await run_requests_async(requests, canvas, AppConfig())

    assert [r.mode for r in results] == [
        AssemblyMode.GROUPED,
        AssemblyMode.SKIPPED,
        AssemblyMode.SINGLE,
    ]


def test_main_exits_with_command_status(tmp_path, png_bytes):
    requests = tmp_path / "requests.json"
    requests.write_text(json.dumps(_message(png_bytes)))
    argv = ["iconmatrix", "run", "--requests", str(requests)]

    with patch.object(sys, "argv", argv), pytest.raises(SystemExit) as exc_info:
        main()

    assert exc_info.value.code == 0
