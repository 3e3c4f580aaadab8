"""Tests for the snake-rooms CLI."""

from __future__ import annotations

from unittest.mock import patch

from snake_rooms.cli import _build_parser, _resolve_config, main
from snake_rooms.server.config import ServerConfig


class TestParser:
    def test_no_command_prints_help(self, capsys):
        assert main([]) == 1
        assert "serve" in capsys.readouterr().out

    def test_serve_flags(self):
        args = _build_parser().parse_args(
            ["serve", "--port", "9000", "--tick-ms", "50", "--max-players", "6"],
        )
        assert args.port == 9000
        assert args.tick_ms == 50
        assert args.max_players == 6


class TestResolveConfig:
    def test_flags_override_file(self, tmp_path, monkeypatch):
        for var in ("SNAKE_WS_PORT", "SNAKE_TICK_MS", "SNAKE_ROWS", "SNAKE_COLS"):
            monkeypatch.delenv(var, raising=False)
        path = tmp_path / "cfg.json"
        ServerConfig(rows=30, cols=30, tick_ms=200).save(path)
        args = _build_parser().parse_args(
            ["serve", "--config", str(path), "--tick-ms", "90"],
        )
        cfg = _resolve_config(args)
        assert (cfg.rows, cfg.cols) == (30, 30)
        assert cfg.tick_ms == 90

    def test_env_applies(self, monkeypatch):
        monkeypatch.setenv("SNAKE_WS_PORT", "7777")
        cfg = _resolve_config(_build_parser().parse_args(["serve"]))
        assert cfg.port == 7777


class TestServe:
    def test_runs_uvicorn(self, monkeypatch):
        monkeypatch.delenv("SNAKE_WS_PORT", raising=False)
        with patch("uvicorn.run") as run:
            assert main(["serve", "--port", "9100"]) == 0
        run.assert_called_once()
        assert run.call_args.kwargs["port"] == 9100

    def test_invalid_config_exits_2(self):
        with patch("uvicorn.run") as run:
            assert main(["serve", "--max-players", "9"]) == 2
        run.assert_not_called()

    def test_config_file_typo_exits_2(self, tmp_path):
        path = tmp_path / "cfg.json"
        path.write_text('{"tickms": 50}')
        with patch("uvicorn.run") as run:
            assert main(["serve", "--config", str(path)]) == 2
        run.assert_not_called()
