"""Project-level configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from gridcalc.formulas.refs import MAX_COLUMNS

CONFIG_FILENAME = "gridcalc.yaml"

DEFAULT_CONFIG = {
    "rows": 20,
    "cols": 10,
    "logging_fsync": False,
    "logging_tail_bytes": 2_097_152,  # 2 MB
}


def load_project_config(project_dir: Path) -> dict[str, Any]:
    """Load project configuration from ``gridcalc.yaml``, with defaults.

    Args:
        project_dir: Root of the gridcalc project.

    Returns:
        Merged configuration dict.

    Raises:
        ValueError: If the grid dimensions are invalid.
    """
    config = dict(DEFAULT_CONFIG)
    config_path = project_dir / CONFIG_FILENAME
    if config_path.exists():
        user_config = yaml.safe_load(config_path.read_text()) or {}
        if not isinstance(user_config, dict):
            raise ValueError(f"{CONFIG_FILENAME} must contain a mapping")
        config.update(user_config)

    rows, cols = config["rows"], config["cols"]
    if not isinstance(rows, int) or rows < 1:
        raise ValueError(f"rows must be a positive integer, got {rows!r}")
    if not isinstance(cols, int) or not 1 <= cols <= MAX_COLUMNS:
        raise ValueError(f"cols must be between 1 and {MAX_COLUMNS}, got {cols!r}")
    return config
