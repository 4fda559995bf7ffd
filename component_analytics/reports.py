"""Report persistence: atomic writes of text and JSON report files."""

from __future__ import annotations

import json
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def _json_default(obj):
    if isinstance(obj, (set, frozenset)):
        return sorted(obj)
    if isinstance(obj, Path):
        return str(obj)
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    if hasattr(obj, "isoformat"):
        return obj.isoformat()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable: {obj!r}")


def dumps(data) -> str:
    return json.dumps(data, indent=2, default=_json_default) + "\n"


def write_report(path: Path, content: str) -> Path:
    """Write `content` to `path` atomically, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(dir=str(path.parent), suffix=".tmp")
    try:
        try:
            os.write(fd, content.encode("utf-8"))
            os.fsync(fd)
        finally:
            os.close(fd)
        os.replace(tmp_path, str(path))
    except OSError:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        path.write_text(content, encoding="utf-8")
    return path


def save_json(path: Path, data) -> Path:
    return write_report(path, dumps(data))


def load_json(path: Path) -> dict | None:
    """Load a JSON report, or None if it is missing or corrupt."""
    if not path.exists():
        return None
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError, OSError):
        return None


def write_outputs(out_dir: Path, outputs: dict[str, str]) -> list[Path]:
    """Write a {relative path: content} mapping under `out_dir`, in sorted order."""
    return [write_report(out_dir / rel, outputs[rel]) for rel in sorted(outputs)]
