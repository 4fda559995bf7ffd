"""Prop-surface analyzer: characters spent on tracked-component attributes.

For every tracked opening tag, the characters between the end of the
component name and the closing `>` are counted: `<Card padding={4}>` spends
12 (" padding={4}"). The total is compared against the size of UI files.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..config import TrackedConfig
from ..formatters.csv_report import prop_surface_csv
from ..formatters.markdown import prop_surface_markdown
from ..jsx_scanner import FileScan, has_jsx
from ..reports import dumps, now_iso
from ..utils import merge_counts, pct, sort_by_count
from .base import BaseAnalyzer

TOP_COMPONENTS = 20


@dataclass
class FilePropSurface:
    total_chars: int = 0
    prop_chars: int = 0
    tag_count: int = 0
    renders_ui: bool = False
    chars_by_component: dict[str, int] = field(default_factory=dict)


def measure_prop_surface(content: str, scan: FileScan) -> FilePropSurface:
    result = FilePropSurface(
        total_chars=len(content),
        tag_count=len(scan.instances),
        renders_ui=has_jsx(content),
    )
    for instance in scan.instances:
        chars = instance.tag_end - instance.body_start
        result.prop_chars += chars
        result.chars_by_component[instance.component] = result.chars_by_component.get(instance.component, 0) + chars
    return result


@dataclass
class PropSurfaceTotals:
    file_count: int = 0
    ui_file_count: int = 0
    files_with_tracked_ui: int = 0
    total_chars: int = 0
    ui_file_chars: int = 0
    prop_chars: int = 0
    tag_count: int = 0
    chars_by_component: dict[str, int] = field(default_factory=dict)

    def add(self, f: FilePropSurface):
        self.file_count += 1
        self.total_chars += f.total_chars
        self.prop_chars += f.prop_chars
        self.tag_count += f.tag_count
        if f.renders_ui:
            self.ui_file_count += 1
            self.ui_file_chars += f.total_chars
        if f.tag_count > 0:
            self.files_with_tracked_ui += 1
        merge_counts(self.chars_by_component, f.chars_by_component)

    @property
    def surface_percent(self) -> float:
        return float(pct(self.prop_chars, self.ui_file_chars))

    @property
    def avg_chars_per_tag(self) -> float:
        return round(self.prop_chars / self.tag_count, 1) if self.tag_count else 0.0

    def to_dict(self) -> dict:
        return {
            "file_count": self.file_count,
            "ui_file_count": self.ui_file_count,
            "files_with_tracked_ui": self.files_with_tracked_ui,
            "total_chars": self.total_chars,
            "ui_file_chars": self.ui_file_chars,
            "prop_chars": self.prop_chars,
            "prop_surface_percent": self.surface_percent,
            "tag_count": self.tag_count,
            "avg_prop_chars_per_tag": self.avg_chars_per_tag,
            "top_components": [
                {
                    "component": comp,
                    "prop_chars": chars,
                    "percent_of_props": float(pct(chars, self.prop_chars)),
                    "percent_of_ui_code": float(pct(chars, self.ui_file_chars)),
                }
                for comp, chars in sort_by_count(self.chars_by_component)[:TOP_COMPONENTS]
            ],
        }


class PropSurfaceAnalyzer(BaseAnalyzer):
    """Measures attribute characters on tracked tags against UI file size."""

    name = "prop-surface"
    description = "Characters of UI code spent on tracked-component props"

    def __init__(self, tracked: TrackedConfig):
        super().__init__(tracked)
        self.by_codebase: dict[str, PropSurfaceTotals] = {}
        self.overall = PropSurfaceTotals()

    def analyze_file(self, scan: FileScan, content: str) -> FilePropSurface:
        return measure_prop_surface(content, scan)

    def merge(self, result: FilePropSurface, codebase: str, rel_path: str):
        self.by_codebase.setdefault(codebase, PropSurfaceTotals()).add(result)
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
            "prop-surface/report.json": dumps(summary),
            "prop-surface/report.csv": prop_surface_csv(summary),
            "prop-surface/report.md": prop_surface_markdown(summary, self.tracked.name),
        }
