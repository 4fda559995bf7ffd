"""Line-ownership analyzer: how many source lines belong to the tracked library.

A line is owned when it is part of a tracked import statement (the whole
statement, for multi-line `{ }` blocks) or of a tracked opening tag, from
the `<` through the closing `>`. Each line counts once per file even when an
import and a tag, or two tags, share it.

Percentages are taken against lines in UI files only (files with any JSX),
so utility modules and hooks don't dilute the ratio.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..config import TrackedConfig
from ..formatters.csv_report import line_ownership_csv
from ..formatters.markdown import line_ownership_markdown
from ..jsx_scanner import FileScan, LineIndex, has_jsx, iter_tracked_import_spans
from ..reports import dumps, now_iso
from ..utils import merge_counts, pct, sort_by_count
from .base import BaseAnalyzer

TOP_COMPONENTS = 20


@dataclass
class FileLineMetrics:
    total_lines: int = 0
    tracked_lines: int = 0
    import_lines: int = 0
    tag_lines: int = 0
    tag_count: int = 0
    renders_ui: bool = False
    lines_by_component: dict[str, int] = field(default_factory=dict)


def count_lines(content: str) -> int:
    return 0 if content == "" else content.count("\n") + 1


def measure_line_ownership(content: str, scan: FileScan, tracked: TrackedConfig) -> FileLineMetrics:
    index = LineIndex(content)

    import_lines: set[int] = set()
    for start, end in iter_tracked_import_spans(content, tracked):
        import_lines.update(index.lines_between(start, end))

    tag_lines: set[int] = set()
    by_component: dict[str, set[int]] = {}
    for instance in scan.instances:
        span = index.lines_between(instance.tag_start, instance.tag_end)
        tag_lines.update(span)
        by_component.setdefault(instance.component, set()).update(span)

    return FileLineMetrics(
        total_lines=count_lines(content),
        tracked_lines=len(import_lines | tag_lines),
        import_lines=len(import_lines),
        tag_lines=len(tag_lines),
        tag_count=len(scan.instances),
        renders_ui=has_jsx(content),
        lines_by_component={comp: len(lines) for comp, lines in by_component.items()},
    )


@dataclass
class LineOwnershipTotals:
    file_count: int = 0
    ui_file_count: int = 0
    files_with_tracked_ui: int = 0
    total_lines: int = 0
    ui_file_lines: int = 0
    tracked_lines: int = 0
    import_lines: int = 0
    tag_lines: int = 0
    tag_count: int = 0
    lines_by_component: dict[str, int] = field(default_factory=dict)

    def add(self, m: FileLineMetrics):
        self.file_count += 1
        self.total_lines += m.total_lines
        self.tracked_lines += m.tracked_lines
        self.import_lines += m.import_lines
        self.tag_lines += m.tag_lines
        self.tag_count += m.tag_count
        if m.renders_ui:
            self.ui_file_count += 1
            self.ui_file_lines += m.total_lines
        if m.tracked_lines > 0:
            self.files_with_tracked_ui += 1
        merge_counts(self.lines_by_component, m.lines_by_component)

    @property
    def ownership_percent(self) -> float:
        return float(pct(self.tracked_lines, self.ui_file_lines))

    @property
    def avg_lines_per_tag(self) -> float:
        return round(self.tag_lines / self.tag_count, 2) if self.tag_count else 0.0

    def to_dict(self) -> dict:
        return {
            "file_count": self.file_count,
            "ui_file_count": self.ui_file_count,
            "files_with_tracked_ui": self.files_with_tracked_ui,
            "total_lines": self.total_lines,
            "ui_file_lines": self.ui_file_lines,
            "tracked_lines": self.tracked_lines,
            "import_lines": self.import_lines,
            "tag_lines": self.tag_lines,
            "line_ownership_percent": self.ownership_percent,
            "tag_count": self.tag_count,
            "avg_lines_per_tag": self.avg_lines_per_tag,
            "top_components": [
                {
                    "component": comp,
                    "lines": count,
                    "percent_of_tracked_lines": float(pct(count, self.tracked_lines)),
                    "percent_of_ui_code": float(pct(count, self.ui_file_lines)),
                }
                for comp, count in sort_by_count(self.lines_by_component)[:TOP_COMPONENTS]
            ],
        }


class LineOwnershipAnalyzer(BaseAnalyzer):
    """Counts source lines owned by tracked imports and tags."""

    name = "line-ownership"
    description = "Share of UI source lines taken by tracked imports and tags"

    def __init__(self, tracked: TrackedConfig):
        super().__init__(tracked)
        self.by_codebase: dict[str, LineOwnershipTotals] = {}
        self.overall = LineOwnershipTotals()

    def analyze_file(self, scan: FileScan, content: str) -> FileLineMetrics:
        return measure_line_ownership(content, scan, self.tracked)

    def merge(self, result: FileLineMetrics, codebase: str, rel_path: str):
        self.by_codebase.setdefault(codebase, LineOwnershipTotals()).add(result)
        self.overall.add(result)

    def summary(self) -> dict:
        return {
            "generated_at": now_iso(),
            "codebases": {name: totals.to_dict() for name, totals in self.by_codebase.items()},
            "all": self.overall.to_dict(),
        }

    def build_outputs(self, codebases: list[str]) -> dict[str, str]:
        summary = self.summary()
        return {
            "line-ownership/report.json": dumps(summary),
            "line-ownership/report.csv": line_ownership_csv(summary),
            "line-ownership/report.md": line_ownership_markdown(summary, self.tracked.name),
        }
