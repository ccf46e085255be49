"""Version reporting for ``gottem --version``."""

from __future__ import annotations

import importlib.metadata
import os
import subprocess
from pathlib import Path
from typing import Optional

from .constants import EditorConstants


def _run_git(args: list[str], cwd: Optional[str] = None) -> Optional[str]:
    try:
        out = subprocess.check_output(["git", *args], cwd=cwd or os.getcwd(),
                                      stderr=subprocess.DEVNULL)
        return out.decode().strip() or None
    except (subprocess.CalledProcessError, FileNotFoundError, OSError):
        return None


def get_version() -> str:
    """Installed distribution version, or 'unknown' when running from a checkout."""
    try:
        return importlib.metadata.version(EditorConstants.APP_NAME)
    except importlib.metadata.PackageNotFoundError:
        return "unknown"


def get_commit() -> Optional[str]:
    """Short commit hash when the package lives inside a git work tree."""
    here = Path(__file__).resolve().parent
    commit = _run_git(["rev-parse", "HEAD"], cwd=str(here))
    return commit[:7] if commit else None


def get_version_string() -> str:
    commit = get_commit()
    version = f"{EditorConstants.APP_NAME} {get_version()}"
    return f"{version} ({commit})" if commit else version
