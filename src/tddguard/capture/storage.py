#
# src/tddguard/capture/storage.py
#
"""
Persists a CapturedTestRun as ``test.json`` under the project root.

Writing is a best-effort sink: failures are logged and never raised back into
the test run that produced the result.
"""
import json
import os
import tempfile
from pathlib import Path

import structlog

from tddguard.capture.models import CapturedTestRun, to_dict
from tddguard.capture.root import result_path
from tddguard.telemetry import StructLogger

log: StructLogger = structlog.get_logger("capture.storage")


def dumps_result(run: CapturedTestRun) -> str:
    return json.dumps(to_dict(run), indent=2, ensure_ascii=False)


def write_result(root: str | Path, run: CapturedTestRun) -> Path | None:
    """
    Replaces the result file with ``run``.

    The document goes to a temporary file in the same directory first and is
    then renamed over the target, so readers see either the old or the new
    file, never a partial one.

    Returns:
        The path written, or None if writing failed.
    """
    target = result_path(root)
    write_log = log.bind(path=str(target))
    tmp_name: str | None = None
    try:
        document = dumps_result(run)
        target.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=target.parent,
            prefix=f".{target.name}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            tmp_name = handle.name
            handle.write(document)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, target)
        tmp_name = None
    except (OSError, TypeError, ValueError) as e:
        write_log.error("Failed to save test results", error=str(e), emoji_key="fail")
        return None
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                write_log.debug("Could not remove temporary result file", tmp_path=tmp_name)

    write_log.info(
        "Test results saved",
        modules=len(run.test_modules),
        reason=run.reason.value if run.reason else None,
        emoji_key="write",
    )
    return target


def read_result(root: str | Path) -> CapturedTestRun | None:
    """Loads the persisted run, or returns None when no result file exists."""
    path = result_path(root)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return None
    return CapturedTestRun.from_dict(data)


def result_stamp(root: str | Path) -> tuple[int, int, int] | None:
    """Identity of the current result file (inode, mtime, size), or None if absent.

    Every write renames a new file into place, so a changed stamp means the
    file was rewritten.
    """
    try:
        stat = result_path(root).stat()
    except OSError:
        return None
    return (stat.st_ino, stat.st_mtime_ns, stat.st_size)

# 🔼⚙️
