"""Prop-combination analyzer: which value tuples occur together on a component.

Each configured combo names a component and two or more props, e.g.
`{"component": "Button", "props": ["tone", "mode"]}`. For every instance of
that component the normalized values of those props form one tuple, with
`(unset)` for props not given, and identical tuples are counted:

    <Button tone="critical" mode="ghost" />   ->  ("critical", "ghost")
    <Button mode="ghost" />                   ->  ((unset), "ghost")

Instances that set none of the props count toward the component's total but
not toward any combination.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..config import PropCombo, TrackedConfig
from ..formatters.csv_report import prop_combos_csv
from ..formatters.markdown import prop_combos_markdown
from ..jsx_scanner import ComponentInstance, FileScan
from ..reports import dumps, now_iso
from ..utils import pct, sort_by_count
from ..values import normalize_raw
from .base import BaseAnalyzer

UNSET = "(unset)"
SAMPLE_INSTANCES = 500


@dataclass
class ComboMatch:
    combo: int  # index into the configured combos
    line: int
    values: tuple[str, ...]


@dataclass
class FileCombos:
    instance_counts: list[int] = field(default_factory=list)
    matches: list[ComboMatch] = field(default_factory=list)


def combo_values(instance: ComponentInstance, props: list[str]) -> tuple[str, ...]:
    """Normalized values of `props` on one instance; a repeated prop keeps its last value."""
    normalized = {p.name: normalize_raw(p.value) for p in instance.props}
    return tuple(normalized.get(name, UNSET) for name in props)


def find_combos(scan: FileScan, combos: list[PropCombo]) -> FileCombos:
    result = FileCombos(instance_counts=[0] * len(combos))
    for index, combo in enumerate(combos):
        for instance in scan.instances:
            if instance.component != combo.component:
                continue
            result.instance_counts[index] += 1
            values = combo_values(instance, combo.props)
            if all(v == UNSET for v in values):
                continue
            result.matches.append(ComboMatch(combo=index, line=instance.line, values=values))
    return result


@dataclass
class ComboTally:
    combo: PropCombo
    total_instances: int = 0
    matched_instances: int = 0
    counts: dict[tuple[str, ...], int] = field(default_factory=dict)
    by_codebase: dict[str, dict[tuple[str, ...], int]] = field(default_factory=dict)
    instances: list[dict] = field(default_factory=list)

    @property
    def report_base(self) -> str:
        name = self.combo.component
        return f"prop-combos/{name}/{name}-{'-'.join(self.combo.props)}-combo"

    def add(self, match: ComboMatch, codebase: str, rel_path: str):
        self.matched_instances += 1
        self.counts[match.values] = self.counts.get(match.values, 0) + 1
        per_codebase = self.by_codebase.setdefault(codebase, {})
        per_codebase[match.values] = per_codebase.get(match.values, 0) + 1
        if len(self.instances) < SAMPLE_INSTANCES:
            self.instances.append({
                "codebase": codebase,
                "file": rel_path,
                "line": match.line,
                "props": dict(zip(self.combo.props, match.values)),
            })

    def _values(self, key: tuple[str, ...]) -> dict[str, str]:
        return dict(zip(self.combo.props, key))

    def summary(self, codebases: list[str], library: str) -> dict:
        ranked = sort_by_count(self.counts)
        return {
            "generated_at": now_iso(),
            "library": library,
            "component": self.combo.component,
            "props": list(self.combo.props),
            "total_instances": self.total_instances,
            "matched_instances": self.matched_instances,
            "unique_combinations": len(ranked),
            "combinations": [
                {
                    "values": self._values(key),
                    "count": count,
                    "percent_of_matched": float(pct(count, self.matched_instances)),
                }
                for key, count in ranked
            ],
            "by_codebase": {
                cb: {
                    "total": sum(self.by_codebase.get(cb, {}).values()),
                    "combinations": [
                        {"values": self._values(key), "count": count}
                        for key, count in sort_by_count(self.by_codebase.get(cb, {}))
                    ],
                }
                for cb in codebases
            },
            "sample_instances": self.instances,
        }


class PropCombosAnalyzer(BaseAnalyzer):
    """Cross-tabulates configured prop values per component."""

    name = "prop-combos"
    description = "Value combinations of selected props on selected components"

    def __init__(self, tracked: TrackedConfig, combos: list[PropCombo] | None = None):
        super().__init__(tracked)
        self.combos = list(combos or [])
        self.tallies = [ComboTally(combo) for combo in self.combos]

    def analyze_file(self, scan: FileScan, content: str) -> FileCombos:
        return find_combos(scan, self.combos)

    def merge(self, result: FileCombos, codebase: str, rel_path: str):
        for tally, count in zip(self.tallies, result.instance_counts):
            tally.total_instances += count
        for match in result.matches:
            self.tallies[match.combo].add(match, codebase, rel_path)

    def build_outputs(self, codebases: list[str]) -> dict[str, str]:
        outputs = {}
        for tally in self.tallies:
            summary = tally.summary(codebases, self.tracked.name)
            base = tally.report_base
            outputs[f"{base}.json"] = dumps(summary)
            outputs[f"{base}.csv"] = prop_combos_csv(summary)
            outputs[f"{base}.md"] = prop_combos_markdown(summary)
        return outputs
