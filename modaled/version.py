from __future__ import annotations

import importlib.metadata
import os
import subprocess
from pathlib import Path
from typing import NamedTuple, Optional

NAME = "modaled"


class BuildInfo(NamedTuple):
    commit: Optional[str]
    date: Optional[str]


def _run_git(args: list[str], cwd: Optional[str] = None) -> Optional[str]:
    try:
        out = subprocess.check_output(["git", *args], cwd=cwd or os.getcwd(),
                                      stderr=subprocess.DEVNULL)
        return out.decode().strip() or None
    except (subprocess.CalledProcessError, FileNotFoundError, OSError):
        return None


def _from_git_repo() -> Optional[BuildInfo]:
    here = Path(__file__).resolve().parent
    root = _run_git(["rev-parse", "--show-toplevel"], cwd=str(here))
    if not root:
        return None
    commit = _run_git(["rev-parse", "HEAD"], cwd=root)
    date = _run_git(["show", "-s", "--format=%cI", "HEAD"], cwd=root)
    return BuildInfo(commit=commit, date=date)


def _from_embedded_file() -> Optional[BuildInfo]:
    # Generated at build time by hatch build hook
    try:
        from . import _build_info  # type: ignore
    except ImportError:
        return None
    commit = getattr(_build_info, "COMMIT", None)
    date = getattr(_build_info, "DATE", None)
    if commit or date:
        return BuildInfo(commit=commit, date=date)
    return None


def get_build_info() -> BuildInfo:
    # Priority: embedded file -> live git repo -> unknowns
    for getter in (_from_embedded_file, _from_git_repo):
        info = getter()
        if info and (info.commit or info.date):
            return info
    return BuildInfo(commit=None, date=None)


def get_package_version() -> str:
    """Installed distribution version, else the one recorded at build time, else 'dev'."""
    try:
        return importlib.metadata.version(NAME)
    except importlib.metadata.PackageNotFoundError:
        pass
    try:
        from . import _build_info  # type: ignore
    except ImportError:
        return "dev"
    return getattr(_build_info, "VERSION", None) or "dev"


def get_version_string() -> str:
    info = get_build_info()
    # Use short (7-character) git hashes when available
    commit = info.commit[:7] if info.commit else "unknown"
    date = info.date or "unknown"
    return f"{NAME} {get_package_version()} ({commit} {date})"
