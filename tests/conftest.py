# tests/conftest.py

import json
from pathlib import Path

import pytest

from tddguard.capture.root import result_path

pytest_plugins = ["pytester"]


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keeps the developer's own tddguard settings out of the tests."""
    for name in ("TDD_GUARD_PROJECT_ROOT", "TDDGUARD_TOOL", "TDDGUARD_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    (root / ".git").mkdir()
    return root


@pytest.fixture
def read_json():
    """Reads the persisted result file of a root as raw JSON."""
    def _read(root: Path) -> dict:
        return json.loads(result_path(root).read_text(encoding="utf-8"))
    return _read
