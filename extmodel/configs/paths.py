"""
extmodel Data Paths

Manages the data directory holding config.yaml, the log file and
registry snapshots.
"""

import os
from pathlib import Path

DEFAULT_DATA_PATH = Path.home() / ".extmodel"


def get_data_path() -> Path:
    """Get the extmodel data directory path.

    Honors EXTMODEL_DATA_PATH, falling back to ~/.extmodel.

    Returns:
        Path to the data directory
    """
    data_path = os.environ.get("EXTMODEL_DATA_PATH")
    if data_path:
        return Path(data_path).expanduser()
    return DEFAULT_DATA_PATH


def ensure_data_dir() -> Path:
    """Ensure the data directory exists.

    Returns:
        Path to data directory
    """
    data_path = get_data_path()
    data_path.mkdir(parents=True, exist_ok=True)
    return data_path


def get_snapshot_path(project: str) -> Path:
    """Get the registry snapshot path for a project."""
    safe_name = "".join(c if c.isalnum() or c in "-_." else "_" for c in project)
    return get_data_path() / "snapshots" / f"{safe_name}.json"
