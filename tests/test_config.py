"""Tests for TOML config file loading."""

from __future__ import annotations

import argparse
from pathlib import Path

import pytest

from soma.cli import build_parser, load_config, resolve_options


class TestLoadConfig:
    def test_missing_config_returns_empty(self, tmp_path: Path) -> None:
        assert load_config(None, tmp_path) == {}

    def test_explicit_path(self, tmp_path: Path) -> None:
        cfg = tmp_path / "custom.toml"
        cfg.write_text("[tokens]\npositions = true\n")
        result = load_config(cfg, tmp_path)
        assert result["tokens"] == {"positions": True}

    def test_auto_discover_soma_toml(self, tmp_path: Path) -> None:
        cfg = tmp_path / "soma.toml"
        cfg.write_text("[tokens]\nstrict = true\n")
        result = load_config(None, tmp_path)
        assert result["tokens"] == {"strict": True}


class TestConfigMerge:
    def test_defaults(self, tmp_path: Path) -> None:
        ns = build_parser().parse_args(["tokens", "x"])
        opts = resolve_options(ns, tmp_path)
        assert opts.expression == "x"
        assert opts.positions is False
        assert opts.strict is False
        assert opts.debug is False

    def test_config_values(self, tmp_path: Path) -> None:
        (tmp_path / "soma.toml").write_text("[tokens]\npositions = true\nstrict = true\n")
        ns = build_parser().parse_args(["tokens", "x"])
        opts = resolve_options(ns, tmp_path)
        assert opts.positions is True
        assert opts.strict is True

    def test_cli_overrides_config(self, tmp_path: Path) -> None:
        (tmp_path / "soma.toml").write_text("[tokens]\npositions = false\n")
        ns = build_parser().parse_args(["tokens", "x", "--positions"])
        opts = resolve_options(ns, tmp_path)
        assert opts.positions is True

    def test_explicit_config_flag(self, tmp_path: Path) -> None:
        cfg = tmp_path / "other.toml"
        cfg.write_text("[tokens]\nstrict = true\n")
        ns = build_parser().parse_args(["tokens", "x", "--config", str(cfg)])
        opts = resolve_options(ns, tmp_path / "elsewhere")
        assert opts.strict is True

    def test_unrelated_sections_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "soma.toml").write_text('[other]\nkey = "value"\n')
        ns = build_parser().parse_args(["tokens", "x"])
        opts = resolve_options(ns, tmp_path)
        assert opts.positions is False

    def test_non_bool_rejected(self, tmp_path: Path) -> None:
        (tmp_path / "soma.toml").write_text("[tokens]\npositions = 1\n")
        ns = build_parser().parse_args(["tokens", "x"])
        with pytest.raises(argparse.ArgumentTypeError, match="positions"):
            resolve_options(ns, tmp_path)

    def test_tokens_not_a_table(self, tmp_path: Path) -> None:
        (tmp_path / "soma.toml").write_text("tokens = 3\n")
        ns = build_parser().parse_args(["tokens", "x"])
        with pytest.raises(argparse.ArgumentTypeError):
            resolve_options(ns, tmp_path)
