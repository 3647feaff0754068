"""Path utilities for locating application directories."""
from __future__ import annotations

import sys
import tempfile
from pathlib import Path


APP_DIRNAME = "drova-launcher"


def get_application_directory() -> Path:
    """
    Get the directory where the application is located.

    When running as a frozen executable (PyInstaller), this returns the
    directory containing the executable, otherwise the project root.
    """
    if getattr(sys, "frozen", False):
        return Path(sys.executable).parent
    return Path(__file__).parent.parent


def get_image_cache_directory() -> Path:
    """Per-user temporary directory holding cached card images."""
    return Path(tempfile.gettempdir()) / APP_DIRNAME / "images"
