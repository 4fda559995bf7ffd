"""File discovery for codebases: glob include/exclude and lenient reading."""

from __future__ import annotations

import os
import re
from fnmatch import fnmatchcase
from pathlib import Path

_BRACE_RE = re.compile(r"\{([^{}]*)\}")


def expand_braces(pattern: str) -> list[str]:
    """Expand `{a,b}` groups: `**/*.{tsx,jsx}` -> [`**/*.tsx`, `**/*.jsx`]."""
    m = _BRACE_RE.search(pattern)
    if not m:
        return [pattern]
    head, tail = pattern[:m.start()], pattern[m.end():]
    expanded = []
    for option in m.group(1).split(","):
        expanded.extend(expand_braces(head + option + tail))
    return expanded


def _variants(pattern: str) -> list[str]:
    """A glob plus its forms with `**/` matching zero directories."""
    if "**/" in pattern:
        return [pattern, pattern.replace("**/", "")]
    return [pattern]


def glob_match(rel_path: str, pattern: str) -> bool:
    """Match a POSIX relative path against a glob with `**` and `{a,b}` support."""
    for expanded in expand_braces(pattern):
        if any(fnmatchcase(rel_path, v) for v in _variants(expanded)):
            return True
    return False


def is_ignored(rel_path: str, ignore: list[str]) -> bool:
    return any(glob_match(rel_path, pat) for pat in ignore)


def is_ignored_dir(rel_dir: str, ignore: list[str]) -> bool:
    """Whether every path under `rel_dir` is ignored, so the walk can skip it.

    Only globs ending in `*` can rule out a whole directory: if such a glob
    matches `dir/`, it matches anything below it too.
    """
    as_dir = rel_dir + "/"
    return any(
        glob_match(as_dir, expanded)
        for pat in ignore
        for expanded in expand_braces(pat)
        if expanded.endswith("*")
    )


def find_files(root: Path, pattern: str, ignore: list[str] | None = None) -> list[Path]:
    """All files under `root` matching `pattern` and no `ignore` glob, sorted.

    Ignored directories (`node_modules/`, `dist/`, ...) are pruned, not walked.
    """
    ignore = ignore or []
    found = []
    for dirpath, dirnames, filenames in os.walk(root):
        rel_dir = Path(dirpath).relative_to(root).as_posix()
        prefix = "" if rel_dir == "." else rel_dir + "/"
        dirnames[:] = [d for d in dirnames if not is_ignored_dir(prefix + d, ignore)]
        for name in filenames:
            rel = prefix + name
            if glob_match(rel, pattern) and not is_ignored(rel, ignore):
                found.append(Path(dirpath) / name)
    return sorted(found)


def read_safe(path: Path) -> str | None:
    """Read a file as UTF-8, or None if it cannot be read."""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None
