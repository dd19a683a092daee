# dim_scorekeeper/paths.py
from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Central location for generated output (saved game, CSV score sheets, charts).
# DIM_RESULTS_DIR in the environment or a .env file overrides it.
RESULTS_DIR = Path(
    os.getenv("DIM_RESULTS_DIR") or Path(__file__).resolve().parent / "results"
)

DEFAULT_LOG_LEVEL = os.getenv("DIM_LOG_LEVEL", "WARNING")


def ensure_results_dir() -> Path:
    """Create the results directory if it does not exist and return it."""
    RESULTS_DIR.mkdir(parents=True, exist_ok=True)
    return RESULTS_DIR


def resolve_results_path(path_like: str | Path) -> Path:
    """
    Resolve a user-specified path into the results directory.

    Absolute paths are returned unchanged. Relative paths are anchored inside
    RESULTS_DIR so exports consistently land in the results folder.
    """
    path = Path(path_like)
    if path.is_absolute():
        return path
    ensure_results_dir()
    return RESULTS_DIR / path
