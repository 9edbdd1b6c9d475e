#
# src/tddguard/capture/root.py
#
"""
Locates the project root that anchors the persisted result file.
"""
from pathlib import Path

import structlog

from tddguard.telemetry import StructLogger

log: StructLogger = structlog.get_logger("capture.root")

RESULT_SUBPATH = Path(".claude", "tdd-guard", "data")
RESULT_FILENAME = "test.json"

# Checked in this order at every directory level.
VCS_MARKERS = (".git",)
MANIFEST_MARKERS = ("pyproject.toml", "setup.cfg", "setup.py", "*.sln")
GUARD_MARKERS = (".claude",)


def _has_marker(directory: Path, marker: str) -> bool:
    if "*" in marker:
        return any(directory.glob(marker))
    return (directory / marker).exists()


def find_marker(directory: Path) -> str | None:
    """Returns the first root marker present in ``directory``, if any."""
    for marker in (*VCS_MARKERS, *MANIFEST_MARKERS, *GUARD_MARKERS):
        if _has_marker(directory, marker):
            return marker
    return None


def resolve_project_root(override: str | Path | None, start_dir: str | Path) -> Path:
    """
    Resolves the project root.

    An absolute ``override`` is used as-is, without checking that it exists.
    Otherwise the nearest ancestor of ``start_dir`` (inclusive) holding a root
    marker wins. When no ancestor has one, ``start_dir`` itself is returned.
    """
    if override:
        override_path = Path(override)
        if override_path.is_absolute():
            log.debug("Using project root override", project_root=str(override_path))
            return override_path
        log.warning("Ignoring relative project root override", override=str(override))

    start = Path(start_dir).resolve()
    for directory in (start, *start.parents):
        marker = find_marker(directory)
        if marker:
            log.debug("Found project root", project_root=str(directory), marker=marker)
            return directory

    log.warning(
        "No project root marker found, falling back to start directory",
        start_dir=str(start),
    )
    return start


def result_path(root: str | Path) -> Path:
    """Returns ``<root>/.claude/tdd-guard/data/test.json``."""
    return Path(root) / RESULT_SUBPATH / RESULT_FILENAME

# 🔼⚙️
