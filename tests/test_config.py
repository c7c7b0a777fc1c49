"""Tests for gridcalc.yaml loading."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from gridcalc.config import DEFAULT_CONFIG, load_config, write_default_config


class TestLoadConfig:
    def test_defaults_without_file(self, tmp_path: Path) -> None:
        assert load_config(tmp_path) == DEFAULT_CONFIG

    def test_overrides(self, tmp_path: Path) -> None:
        (tmp_path / "gridcalc.yaml").write_text("rows: 20\ncsv_separator: ';'\n")
        cfg = load_config(tmp_path)
        assert cfg["rows"] == 20
        assert cfg["cols"] == DEFAULT_CONFIG["cols"]
        assert cfg["csv_separator"] == ";"

    def test_grid_block(self, tmp_path: Path) -> None:
        (tmp_path / "gridcalc.yaml").write_text("grid:\n  rows: 5\n  cols: 26\n")
        cfg = load_config(tmp_path)
        assert (cfg["rows"], cfg["cols"]) == (5, 26)
        assert "grid" not in cfg

    def test_flat_keys_win_over_grid_block(self, tmp_path: Path) -> None:
        (tmp_path / "gridcalc.yaml").write_text("rows: 7\ngrid:\n  rows: 5\n")
        assert load_config(tmp_path)["rows"] == 7

    def test_empty_file(self, tmp_path: Path) -> None:
        (tmp_path / "gridcalc.yaml").write_text("")
        assert load_config(tmp_path) == DEFAULT_CONFIG

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        (tmp_path / "gridcalc.yaml").write_text("- 1\n- 2\n")
        with pytest.raises(ValueError):
            load_config(tmp_path)


class TestWriteDefaultConfig:
    def test_writes_once(self, tmp_path: Path) -> None:
        path = write_default_config(tmp_path / "p")
        assert yaml.safe_load(path.read_text()) == DEFAULT_CONFIG
        path.write_text("rows: 3\n")
        write_default_config(tmp_path / "p")
        assert path.read_text() == "rows: 3\n"
