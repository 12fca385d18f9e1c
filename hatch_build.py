"""Hatchling build hook that records which commit a modaled build came from."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Any

from hatchling.builders.hooks.plugin.interface import BuildHookInterface

BUILD_INFO_PATH = "modaled/_build_info.py"

TEMPLATE = """\
# Written by hatch_build.py; do not edit.
VERSION = {version!r}
COMMIT = {commit!r}
DATE = {date!r}
"""


def head_commit(root: Path) -> tuple[str | None, str | None]:
    """(sha, ISO commit date) of HEAD, or (None, None) outside a git checkout."""
    try:
        out = subprocess.check_output(
            ["git", "log", "-1", "--format=%H%n%cI"],
            cwd=str(root), stderr=subprocess.DEVNULL, text=True,
        )
    except (subprocess.CalledProcessError, OSError):
        return None, None
    fields = out.split("\n")
    if len(fields) < 2 or not fields[0]:
        return None, None
    return fields[0], fields[1] or None


class CustomBuildHook(BuildHookInterface):

    def initialize(self, version: str, build_data: dict[str, Any]) -> None:
        root = Path(self.root)
        commit, date = head_commit(root)
        content = TEMPLATE.format(version=self.metadata.version, commit=commit, date=date)
        target = root / BUILD_INFO_PATH
        # Editable installs rebuild often; leave the file alone when nothing changed
        if not target.exists() or target.read_text(encoding="utf-8") != content:
            target.write_text(content, encoding="utf-8")
        build_data.setdefault("artifacts", []).append(BUILD_INFO_PATH)
