"""Per-component usage: imports, instances, prop value distributions, defaults.

Every configured component gets a report, even when it is never used, so the
summary doubles as an inventory. Default-prop detection runs once over the
fully aggregated distributions, after the last codebase has been merged.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..defaults import (
    DefaultDetector,
    DetectedDefault,
    defaults_summary,
    detect_all_defaults,
    detect_prop_default,
)
from ..formatters.csv_report import components_csv
from ..formatters.markdown import components_markdown
from ..formatters.text import defaults_text
from ..jsx_scanner import ComponentInstance, FileScan
from ..reports import dumps, now_iso
from ..utils import sort_by_count
from ..values import normalize_raw
from .base import BaseAnalyzer

APPLIED_CONFIDENCE = ("high", "medium")
SUMMARY_TOP_PROPS = 10
SUMMARY_TOP_VALUES = 3


@dataclass
class PropBucket:
    """Usage of one prop on one component."""
    values: dict[str, int] = field(default_factory=dict)
    total_usages: int = 0
    default_value: str | None = None
    default_usages: int = 0

    def to_dict(self) -> dict:
        d = {
            "total_usages": self.total_usages,
            "values": dict(sort_by_count(self.values)),
        }
        if self.default_value is not None:
            d["default_value"] = self.default_value
            d["default_usages"] = self.default_usages
        return d


@dataclass
class ComponentReport:
    component: str
    total_imports: int = 0
    total_instances: int = 0
    props: dict[str, PropBucket] = field(default_factory=dict)
    codebase_imports: dict[str, int] = field(default_factory=dict)
    codebase_instances: dict[str, int] = field(default_factory=dict)
    references: list[dict] = field(default_factory=list)
    total_default_usages: int = 0

    def record_import(self, codebase: str):
        self.total_imports += 1
        self.codebase_imports[codebase] = self.codebase_imports.get(codebase, 0) + 1

    def record_instance(self, instance: ComponentInstance, codebase: str, rel_path: str):
        self.total_instances += 1
        self.codebase_instances[codebase] = self.codebase_instances.get(codebase, 0) + 1
        self.references.append({"file": rel_path, "line": instance.line, "codebase": codebase})
        for prop in instance.props:
            self.record_prop(prop.name, prop.value)

    def record_prop(self, name: str, raw_value: str) -> str:
        """Count one raw value under its normalized bucket. Returns the bucket key."""
        bucket = self.props.get(name)
        if bucket is None:
            bucket = self.props[name] = PropBucket()
        key = normalize_raw(raw_value)
        bucket.values[key] = bucket.values.get(key, 0) + 1
        bucket.total_usages += 1
        return key

    @property
    def unique_props(self) -> int:
        return len(self.props)

    @property
    def total_prop_usages(self) -> int:
        return sum(b.total_usages for b in self.props.values())

    @property
    def avg_props_per_instance(self) -> float:
        if self.total_instances == 0:
            return 0.0
        return round(self.total_prop_usages / self.total_instances, 2)

    def props_by_usage(self) -> list[tuple[str, PropBucket]]:
        return sorted(self.props.items(), key=lambda kv: -kv[1].total_usages)

    def to_dict(self) -> dict:
        """Detail report for one component."""
        return {
            "component": self.component,
            "total_imports": self.total_imports,
            "total_instances": self.total_instances,
            "codebase_imports": self.codebase_imports,
            "codebase_instances": self.codebase_instances,
            "unique_props": self.unique_props,
            "avg_props_per_instance": self.avg_props_per_instance,
            "total_default_usages": self.total_default_usages,
            "props": {name: bucket.to_dict() for name, bucket in self.props_by_usage()},
            "references": self.references,
        }

    def summary_entry(self) -> dict:
        top_props = []
        for name, bucket in self.props_by_usage()[:SUMMARY_TOP_PROPS]:
            top_props.append({
                "name": name,
                "usages": bucket.total_usages,
                "default_value": bucket.default_value,
                "default_usages": bucket.default_usages,
                "top_values": [
                    {"value": v, "count": n}
                    for v, n in sort_by_count(bucket.values)[:SUMMARY_TOP_VALUES]
                ],
            })
        return {
            "component": self.component,
            "total_imports": self.total_imports,
            "total_instances": self.total_instances,
            "codebase_imports": self.codebase_imports,
            "codebase_instances": self.codebase_instances,
            "unique_props": self.unique_props,
            "avg_props_per_instance": self.avg_props_per_instance,
            "total_default_usages": self.total_default_usages,
            "top_props": top_props,
        }


def merge_file_result(
    reports: dict[str, ComponentReport],
    scan: FileScan,
    codebase: str,
    rel_path: str,
):
    """Fold one file into the reports.

    Each original component counts as one import per file, however many
    local aliases it has.
    """
    for component in scan.imported_components:
        report = reports.get(component)
        if report is None:
            report = reports[component] = ComponentReport(component)
        report.record_import(codebase)

    for instance in scan.instances:
        report = reports.get(instance.component)
        if report is None:
            continue
        report.record_instance(instance, codebase, rel_path)


def prop_distributions(reports: dict[str, ComponentReport]) -> dict[str, dict[str, dict]]:
    """{component: {prop: {"values": .., "total_usages": ..}}} for default detection."""
    return {
        name: {
            prop: {"values": bucket.values, "total_usages": bucket.total_usages}
            for prop, bucket in report.props.items()
        }
        for name, report in reports.items()
    }


def apply_detected_defaults(
    reports: dict[str, ComponentReport],
    detector: DefaultDetector = detect_prop_default,
) -> list[DetectedDefault]:
    """Detect defaults across all reports and record the confident ones.

    Returns every detection, low confidence included. Only high and medium
    results update `default_value` / `default_usages` on the prop buckets.
    """
    detected = detect_all_defaults(prop_distributions(reports), detector)
    for d in detected:
        if d.confidence not in APPLIED_CONFIDENCE:
            continue
        report = reports[d.component]
        bucket = report.props[d.prop]
        bucket.default_value = d.value
        bucket.default_usages = bucket.values.get(d.value, 0)
        report.total_default_usages += bucket.default_usages
    return detected


def sort_reports(reports: dict[str, ComponentReport]) -> list[ComponentReport]:
    """Most instances first; ties keep configuration order."""
    return sorted(reports.values(), key=lambda r: -r.total_instances)


def components_summary(reports: dict[str, ComponentReport], codebases: list[str]) -> dict:
    ranked = sort_reports(reports)
    return {
        "generated_at": now_iso(),
        "codebases": list(codebases),
        "total_components": len(ranked),
        "total_imports": sum(r.total_imports for r in ranked),
        "total_instances": sum(r.total_instances for r in ranked),
        "total_default_usages": sum(r.total_default_usages for r in ranked),
        "components": [r.summary_entry() for r in ranked],
    }


class PerComponentAnalyzer(BaseAnalyzer):
    """Aggregates every tracked instance into one report per component."""

    name = "components"
    description = "Imports, instances, prop values and default-value usage per component"

    def __init__(self, tracked, detector: DefaultDetector = detect_prop_default):
        super().__init__(tracked)
        self.detector = detector
        self.reports = {name: ComponentReport(name) for name in tracked.components}
        self.detected: list[DetectedDefault] = []
        self.finalized = False

    def analyze_file(self, scan: FileScan, content: str) -> FileScan:
        return scan

    def merge(self, result: FileScan, codebase: str, rel_path: str):
        if self.finalized:
            raise RuntimeError("Cannot merge into per-component reports after defaults were applied")
        merge_file_result(self.reports, result, codebase, rel_path)

    def finalize(self):
        if self.finalized:
            return
        self.detected = apply_detected_defaults(self.reports, self.detector)
        self.finalized = True

    def build_outputs(self, codebases: list[str]) -> dict[str, str]:
        self.finalize()
        outputs = {}
        for name, report in self.reports.items():
            if report.total_instances == 0 and report.total_imports == 0:
                continue
            outputs[f"components/detail/{name}.json"] = dumps(report.to_dict())

        summary = components_summary(self.reports, codebases)
        outputs["components/summary.json"] = dumps(summary)
        outputs["components/summary.csv"] = components_csv(summary)
        outputs["components/summary.md"] = components_markdown(summary, self.tracked.name)

        outputs["components/detected-prop-defaults.json"] = dumps(
            defaults_summary(self.detected, generated_at=summary["generated_at"])
        )
        outputs["components/detected-prop-defaults.txt"] = defaults_text(self.detected)
        return outputs
