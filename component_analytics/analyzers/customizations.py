"""Customization analyzer: inline `style` props and `styled()` wrappers.

Two ways of overriding a tracked component's look are counted:

- `<Card style={{padding: 4}}>`: the `style` prop on any tracked tag
- `styled(Card)` in template-literal (`styled(Card)\\`...\\``) or
  function-call (`styled(Card)(rootStyle)`) form

Tags are matched by configured component name, not by import, so wrappers
and re-exports of the same name are counted too.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from ..config import TrackedConfig
from ..formatters.csv_report import customizations_csv
from ..formatters.markdown import customizations_markdown
from ..jsx_scanner import FileScan, LineIndex, find_tag_spans, parse_props
from ..reports import dumps, now_iso
from ..utils import merge_counts, sort_by_count
from .base import BaseAnalyzer

_STYLE_OBJECT_KEY_RE = re.compile(
    r"""(?:^|[{,;]\s*)([a-zA-Z_$][\w$]*)\s*:|(?:^|[{,;]\s*)['"]([^'"]+)['"]\s*:"""
)
_CSS_DECLARATION_RE = re.compile(r"(?:^|\n|;)\s*([a-z-]+)\s*:", re.MULTILINE)

_ASSIGNMENT = r"(?:(?:export\s+)?(?:const|let|var)\s+(\w+)\s*=\s*)?"
_GENERICS_AND_ATTRS = r"(?:<[^>]*>)?(?:\.attrs\([^)]*\))?(?:<[^>]*>)?"

TOP_PROPERTIES = 20


@dataclass
class InlineStyle:
    component: str
    style_content: str
    properties: list[str]
    line: int = 1


@dataclass
class StyledUsage:
    component: str
    styled_content: str
    variable_name: str | None
    properties: list[str] = field(default_factory=list)
    line: int = 1


def parse_style_properties(style: str) -> list[str]:
    """Keys of a JS style object: `{ color: 'red', '--gap': 2 }` -> [color, --gap]."""
    return [m.group(1) or m.group(2) for m in _STYLE_OBJECT_KEY_RE.finditer(style)]


def parse_styled_properties(template: str) -> list[str]:
    """CSS property names declared in a styled-components template."""
    return [
        prop for prop in _CSS_DECLARATION_RE.findall(template)
        if not prop.startswith("-") and len(prop) > 1
    ]


def extract_paren_body(content: str, start: int) -> str:
    """Trimmed text between an already-consumed `(` and its balancing `)`."""
    depth = 1
    i = start
    while i < len(content) and depth > 0:
        if content[i] == "(":
            depth += 1
        elif content[i] == ")":
            depth -= 1
        i += 1
    end = i - 1 if depth == 0 else i
    return content[start:end].strip()


class StyledMatcher:
    """Finds `styled(Component)` wrappers of the configured components."""

    def __init__(self, component_alternation: str):
        self.template_re = None
        self.call_re = None
        if not component_alternation:
            return
        head = _ASSIGNMENT + rf"styled\(({component_alternation})\)" + _GENERICS_AND_ATTRS
        self.template_re = re.compile(head + r"`([^`]*)`")
        self.call_re = re.compile(head + r"\(")

    def find(self, content: str) -> list[StyledUsage]:
        """Template-literal wrappers first, then function-call wrappers not already seen.

        A function-call match with the same (component, assigned variable) as
        a template match is the same wrapper and is not counted again.
        """
        if self.template_re is None:
            return []

        lines = LineIndex(content)

        def usage(m: re.Match, styled_content: str) -> StyledUsage:
            return StyledUsage(
                component=m.group(2),
                styled_content=styled_content,
                variable_name=m.group(1),
                properties=parse_styled_properties(styled_content),
                line=lines.line_at(m.start()),
            )

        usages = [usage(m, m.group(3).strip()) for m in self.template_re.finditer(content)]
        seen = {(u.component, u.variable_name) for u in usages}
        for m in self.call_re.finditer(content):
            key = (m.group(2), m.group(1))
            if key in seen:
                continue
            usages.append(usage(m, extract_paren_body(content, m.end())))
        return usages


@dataclass
class FileCustomizations:
    inline_styles: list[InlineStyle] = field(default_factory=list)
    styled_usages: list[StyledUsage] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.inline_styles) + len(self.styled_usages)


def find_inline_styles(content: str, tracked: TrackedConfig) -> list[InlineStyle]:
    """`style` props on every tag of a configured component."""
    spans = find_tag_spans(content, tracked.tag_pattern)
    if not spans:
        return []

    lines = LineIndex(content)
    found = []
    for span in spans:
        for prop in parse_props(content[span.body_start:span.tag_end]):
            if prop.name != "style":
                continue
            found.append(InlineStyle(
                component=span.component,
                style_content=prop.value,
                properties=parse_style_properties(prop.value),
                line=lines.line_at(span.tag_start),
            ))
    return found


def _component_bucket(by_component: dict[str, dict], component: str) -> dict:
    bucket = by_component.get(component)
    if bucket is None:
        bucket = by_component[component] = {"count": 0, "properties": {}}
    return bucket


@dataclass
class CustomizationTotals:
    """Running customization counts for one codebase (or all of them)."""
    total_files: int = 0
    files_with_customizations: int = 0
    inline_style_count: int = 0
    styled_count: int = 0
    inline_by_component: dict[str, dict] = field(default_factory=dict)
    styled_by_component: dict[str, dict] = field(default_factory=dict)
    inline_properties: dict[str, int] = field(default_factory=dict)
    styled_properties: dict[str, int] = field(default_factory=dict)

    @property
    def total_customizations(self) -> int:
        return self.inline_style_count + self.styled_count

    def add(self, result: FileCustomizations):
        self.total_files += 1
        if result.total:
            self.files_with_customizations += 1
        self.inline_style_count += len(result.inline_styles)
        self.styled_count += len(result.styled_usages)

        for style in result.inline_styles:
            self._record(self.inline_by_component, self.inline_properties, style.component, style.properties)
        for usage in result.styled_usages:
            self._record(self.styled_by_component, self.styled_properties, usage.component, usage.properties)

    @staticmethod
    def _record(by_component: dict, global_props: dict, component: str, properties: list[str]):
        bucket = _component_bucket(by_component, component)
        bucket["count"] += 1
        for prop in properties:
            bucket["properties"][prop] = bucket["properties"].get(prop, 0) + 1
            global_props[prop] = global_props.get(prop, 0) + 1

    def to_dict(self) -> dict:
        def counts(by_component: dict) -> dict:
            return dict(sort_by_count({k: v["count"] for k, v in by_component.items()}))

        def top(props: dict) -> list[dict]:
            return [{"property": p, "count": n} for p, n in sort_by_count(props)[:TOP_PROPERTIES]]

        return {
            "total_files": self.total_files,
            "files_with_customizations": self.files_with_customizations,
            "inline_style_count": self.inline_style_count,
            "styled_count": self.styled_count,
            "total_customizations": self.total_customizations,
            "inline_styles_by_component": counts(self.inline_by_component),
            "styled_by_component": counts(self.styled_by_component),
            "top_inline_properties": top(self.inline_properties),
            "top_styled_properties": top(self.styled_properties),
        }


def customization_rows(by_codebase: dict[str, CustomizationTotals]) -> list[dict]:
    """One row per component and customization type, most customized first."""
    components = sorted({
        comp
        for totals in by_codebase.values()
        for comp in (*totals.inline_by_component, *totals.styled_by_component)
    })

    rows = []
    for comp in components:
        for kind, attr in (("inline style", "inline_by_component"), ("styled()", "styled_by_component")):
            counts = {}
            properties: dict[str, int] = {}
            for codebase, totals in by_codebase.items():
                bucket = getattr(totals, attr).get(comp)
                counts[codebase] = bucket["count"] if bucket else 0
                if bucket:
                    merge_counts(properties, bucket["properties"])
            total = sum(counts.values())
            if total == 0:
                continue
            rows.append({
                "component": comp,
                "type": kind,
                "counts": counts,
                "total": total,
                "top_properties": [p for p, _ in sort_by_count(properties)[:5]],
            })
    rows.sort(key=lambda r: -r["total"])
    return rows


class CustomizationsAnalyzer(BaseAnalyzer):
    """Counts inline styles and styled() wrappers of tracked components."""

    name = "customizations"
    description = "Inline style props and styled() wrappers of tracked components"

    def __init__(self, tracked: TrackedConfig):
        super().__init__(tracked)
        self.styled = StyledMatcher(tracked.component_alternation)
        self.by_codebase: dict[str, CustomizationTotals] = {}
        self.overall = CustomizationTotals()

    def analyze_file(self, scan: FileScan, content: str) -> FileCustomizations:
        return FileCustomizations(
            inline_styles=find_inline_styles(content, self.tracked),
            styled_usages=self.styled.find(content),
        )

    def merge(self, result: FileCustomizations, codebase: str, rel_path: str):
        self.by_codebase.setdefault(codebase, CustomizationTotals()).add(result)
        self.overall.add(result)

    def summary(self) -> dict:
        return {
            "generated_at": now_iso(),
            "codebases": {name: totals.to_dict() for name, totals in self.by_codebase.items()},
            "all": self.overall.to_dict(),
            "rows": customization_rows(self.by_codebase),
        }

    def build_outputs(self, codebases: list[str]) -> dict[str, str]:
        summary = self.summary()
        return {
            "customizations/report.json": dumps(summary),
            "customizations/report.csv": customizations_csv(summary),
            "customizations/report.md": customizations_markdown(summary, self.tracked.name),
        }
