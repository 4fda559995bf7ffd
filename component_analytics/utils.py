"""Console output for the CLI and counting helpers shared by the analyzers.

Progress and warnings go to stderr; tables and the results box go to stdout
so `scan --json` and `components --json` stay pipeable.
"""

import io
import os
import re
import sys

# Force UTF-8 output on Windows so table rules and the results box render
if sys.platform == "win32" and hasattr(sys.stdout, "buffer"):
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding="utf-8", errors="replace")
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding="utf-8", errors="replace")

COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
}

NO_COLOR = os.environ.get("NO_COLOR") is not None

_NUMERIC_CELL_RE = re.compile(r"-?\d+(?:[./]\d+)?%?")


def c(text: str, color: str) -> str:
    if NO_COLOR or not sys.stdout.isatty():
        return str(text)
    return f"{COLORS.get(color, '')}{text}{COLORS['reset']}"


def log(msg: str):
    print(c(msg, "dim"), file=sys.stderr)


def warn(msg: str):
    print(c(msg, "yellow"), file=sys.stderr)


def _emit(unicode_line: str, ascii_line: str, color: str | None = None):
    """Print box-drawing text, or its ASCII form when the stream can't encode it."""
    try:
        print(c(unicode_line, color) if color else unicode_line)
    except UnicodeEncodeError:
        print(c(ascii_line, color) if color else ascii_line)


def _is_numeric_column(rows: list[list[str]], i: int) -> bool:
    return all(_NUMERIC_CELL_RE.fullmatch(str(r[i])) for r in rows)


def print_table(headers: list[str], rows: list[list[str]], widths: list[int] | None = None):
    """Column-aligned table. Columns holding only counts, ratios or percentages are right-aligned."""
    if not rows:
        return
    if not widths:
        widths = [max(len(str(h)), *(len(str(r[i])) for r in rows)) for i, h in enumerate(headers)]
    numeric = [_is_numeric_column(rows, i) for i in range(len(headers))]

    def fmt(values) -> str:
        return "  ".join(
            str(v).rjust(w) if right else str(v).ljust(w)
            for v, w, right in zip(values, widths, numeric)
        )

    print(c(fmt(headers), "bold"))
    rule_width = sum(widths) + 2 * (len(widths) - 1)
    _emit("─" * rule_width, "-" * rule_width, "dim")
    for row in rows:
        print(fmt(row))


def print_box(lines: list[str], width: int = 45):
    """Print the results box, widened to fit the longest line (output paths can be long)."""
    width = max(width, *(len(line) + 2 for line in lines)) if lines else width
    _emit("┌" + "─" * width + "┐", "+" + "-" * width + "+")
    for line in lines:
        padded = line.ljust(width - 2)
        _emit(f"│ {padded} │", f"| {padded} |")
    _emit("└" + "─" * width + "┘", "+" + "-" * width + "+")


def sort_by_count(counts: dict[str, int]) -> list[tuple[str, int]]:
    """Entries sorted by count descending; ties keep insertion order."""
    return sorted(counts.items(), key=lambda kv: -kv[1])


def pct(numerator: float, denominator: float, decimals: int = 1) -> str:
    """Percentage as a fixed-precision string, "0.0" when the denominator is 0."""
    if denominator == 0:
        return f"{0:.{decimals}f}"
    return f"{numerator / denominator * 100:.{decimals}f}"


def merge_counts(target: dict[str, int], source: dict[str, int]) -> dict[str, int]:
    """Add every count in `source` into `target` in place."""
    for key, count in source.items():
        target[key] = target.get(key, 0) + count
    return target


def format_size(chars: int) -> str:
    if chars >= 1_000_000:
        return f"{chars / 1_000_000:.2f} MB"
    if chars >= 1_000:
        return f"{chars / 1_000:.1f} KB"
    return f"{chars} chars"
