"""
Configuration & Path Management
===============================
This module serves as the central registry for file paths and global constants.

Why is this file needed?
------------------------
1. Abstraction: It prevents hardcoded paths and magic numbers (timer intervals,
   tessellation constants) scattered throughout the code.
2. Deployment: It handles the logic required by PyInstaller (sys._MEIPASS) to
   find assets (preset tables) when the app is frozen into an .exe.

Exports:
    ASSETS_PATH (str): Absolute path to the assets directory.
    PRESETS_PATH (str): Absolute path to the preset table.
"""
import json
import logging
import sys
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def get_resource_path(relative_path: str) -> str:
    """
    Get absolute path to resource, works for dev and for PyInstaller.
    """
    if hasattr(sys, '_MEIPASS'):
        # PyInstaller temp folder
        base_path: str = getattr(sys, '_MEIPASS')
        return os.path.join(base_path, relative_path)

    # Development mode: resolve relative to this file
    # config.py is in src/trefoil/
    current_file_path: Path = Path(__file__)
    project_root: Path = current_file_path.parent.parent.parent
    return os.path.join(str(project_root), relative_path)


# Global Constants
ASSETS_PATH: str = get_resource_path("assets")
PRESETS_PATH: str = os.path.join(ASSETS_PATH, "presets.json")

# Geometry
CROSS_SECTION_POINTS: int = 12

# Timing
DEBOUNCE_MS: int = 50
FRAME_INTERVAL_MS: int = 16
TWEEN_DURATION_S: float = 1.2

# Fallback renderer
FALLBACK_RESOLUTION: int = 300
PERSPECTIVE_K: float = 0.1
BACKGROUND_COLOR: str = "#0f1420"

# Viewport backend selection
BACKEND_ENV_VAR: str = "TREFOIL_BACKEND"
BACKENDS: tuple[str, ...] = ("auto", "vtk", "fallback")


def resolve_backend(requested: str | None = None) -> str:
    """
    Return the requested viewport backend, the TREFOIL_BACKEND environment
    variable, or "auto" - whichever is set first. Unknown values become "auto".
    """
    value = (requested or os.environ.get(BACKEND_ENV_VAR) or "auto").strip().lower()
    if value not in BACKENDS:
        logger.warning(f"Unknown backend '{value}', expected one of {BACKENDS}. Using 'auto'.")
        return "auto"
    return value


def load_presets(path: str = PRESETS_PATH) -> dict[str, dict[str, Any]]:
    """
    Load the named parameter presets.

    Returns:
        Mapping preset name -> parameter mapping. Empty if the file is missing
        or malformed (a warning is logged).
    """
    if not os.path.exists(path):
        logger.warning(f"Preset table not found at {path}")
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Could not read preset table {path}: {e}")
        return {}

    if not isinstance(data, dict):
        logger.warning(f"Preset table {path} must contain a JSON object.")
        return {}
    return {str(name): values for name, values in data.items() if isinstance(values, dict)}
