"""Project-level configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

CONFIG_FILENAME = "gridcalc.yaml"

DEFAULT_CONFIG: dict[str, Any] = {
    "rows": 10,
    "cols": 10,
    "csv_separator": ",",
    "logging_enabled": True,
    "logging_fsync": False,
}


def load_config(project_dir: Path) -> dict[str, Any]:
    """Load configuration from ``gridcalc.yaml``, with defaults.

    Args:
        project_dir: Directory holding the config file.  A missing file
            yields the defaults.

    Returns:
        Merged configuration dict.

    Raises:
        ValueError: If the file does not hold a YAML mapping.
    """
    config = dict(DEFAULT_CONFIG)
    config_path = project_dir / CONFIG_FILENAME
    if config_path.exists():
        user_config = yaml.safe_load(config_path.read_text()) or {}
        if not isinstance(user_config, dict):
            raise ValueError(f"{config_path}: expected a mapping at top level")
        # Nested ``grid:`` block is accepted as an alias for rows/cols.
        grid = user_config.pop("grid", None)
        if isinstance(grid, dict):
            for key in ("rows", "cols"):
                if key in grid:
                    user_config.setdefault(key, grid[key])
        config.update(user_config)
    return config


def write_default_config(project_dir: Path) -> Path:
    """Write ``gridcalc.yaml`` with default values if it does not exist."""
    config_path = project_dir / CONFIG_FILENAME
    if not config_path.exists():
        project_dir.mkdir(parents=True, exist_ok=True)
        config_path.write_text(yaml.safe_dump(DEFAULT_CONFIG, sort_keys=False))
    return config_path
