from __future__ import annotations

import importlib.metadata
import subprocess
from pathlib import Path
from typing import Optional

from .constants import EditorConstants


def _run_git(args: list[str], cwd: Path) -> Optional[str]:
    try:
        out = subprocess.check_output(["git", *args], cwd=str(cwd), stderr=subprocess.DEVNULL)
        return out.decode().strip() or None
    except (subprocess.CalledProcessError, FileNotFoundError, OSError):
        return None


def get_version() -> str:
    """Installed distribution version, falling back to the built-in one."""
    try:
        return importlib.metadata.version("kilo-editor")
    except importlib.metadata.PackageNotFoundError:
        return EditorConstants.KILO_VERSION


def get_version_string() -> str:
    version = get_version()
    # Short commit hash when running from a git checkout
    commit = _run_git(["rev-parse", "--short", "HEAD"], cwd=Path(__file__).resolve().parent)
    if commit:
        return f"kilo {version} ({commit})"
    return f"kilo {version}"
