"""Markdown formatter: human-readable reports for each analyzer."""

from __future__ import annotations

from ..utils import format_size

DETAIL_COMPONENTS = 20


def _cell(value) -> str:
    return str(value).replace("|", "\\|").replace("\n", " ")


def _code(value) -> str:
    return f"`{_cell(value)}`"


def components_markdown(summary: dict, library: str = "UI Library") -> str:
    """Ranked component table, then prop tables for the most used components."""
    components = summary.get("components", [])

    lines = [
        f"# Per-Component Usage: {library}",
        "",
        f"**Generated**: {summary.get('generated_at', 'unknown')}",
        f"**Components**: {summary.get('total_components', 0)}",
        f"**Imports**: {summary.get('total_imports', 0)}",
        f"**JSX instances**: {summary.get('total_instances', 0)}",
        f"**Default value usages**: {summary.get('total_default_usages', 0)} "
        "(props explicitly set to their default)",
        "",
        "## Ranking",
        "",
        "| Rank | Component | Imports | Instances | Props | Avg Props/Instance | Defaults |",
        "|------|-----------|---------|-----------|-------|--------------------|----------|",
    ]
    for rank, comp in enumerate(components, 1):
        lines.append(
            f"| {rank} | {comp['component']} | {comp['total_imports']} | {comp['total_instances']} "
            f"| {comp['unique_props']} | {comp['avg_props_per_instance']:.2f} | {comp['total_default_usages']} |"
        )
    lines.append("")

    for comp in components[:DETAIL_COMPONENTS]:
        lines.append(f"## {comp['component']}")
        lines.append("")
        lines.append(
            f"- **Imports**: {comp['total_imports']}  "
            f"**Instances**: {comp['total_instances']}  "
            f"**Unique props**: {comp['unique_props']}"
        )
        lines.append("")

        if not comp["top_props"]:
            lines.append("_No props used._")
            lines.append("")
            continue

        lines.append("| Prop | Usages | Defaults | % of instances | Top values |")
        lines.append("|------|--------|----------|----------------|------------|")
        instances = comp["total_instances"]
        for prop in comp["top_props"]:
            share = f"{prop['usages'] / instances * 100:.1f}%" if instances else "0.0%"
            values = ", ".join(f"{_code(v['value'])} ({v['count']})" for v in prop["top_values"])
            lines.append(
                f"| {_cell(prop['name'])} | {prop['usages']} | {prop['default_usages']} | {share} | {values} |"
            )
        lines.append("")

    return "\n".join(lines)


def _top_table(heading: str, by_component: dict[str, int], limit: int = 20) -> list[str]:
    if not by_component:
        return []
    lines = [f"### {heading}", "", "| Component | Count |", "|-----------|-------|"]
    for comp, count in list(by_component.items())[:limit]:
        lines.append(f"| {comp} | {count} |")
    lines.append("")
    return lines


def _property_table(heading: str, properties: list[dict]) -> list[str]:
    if not properties:
        return []
    lines = [f"### {heading}", "", "| Property | Count |", "|----------|-------|"]
    for p in properties:
        lines.append(f"| {_code(p['property'])} | {p['count']} |")
    lines.append("")
    return lines


def customizations_markdown(summary: dict, library: str = "UI Library") -> str:
    lines = [
        f"# {library} Customizations",
        "",
        f"**Generated**: {summary.get('generated_at', 'unknown')}",
        "",
        "Inline `style` props and `styled()` wrappers applied to tracked components.",
        "",
    ]

    sections = list(summary.get("codebases", {}).items())
    sections.append(("All codebases", summary["all"]))
    for name, data in sections:
        lines.append(f"## {name}")
        lines.append("")
        lines.append(f"- **Files analyzed**: {data['total_files']}")
        lines.append(f"- **Files with customizations**: {data['files_with_customizations']}")
        lines.append(f"- **Inline styles**: {data['inline_style_count']}")
        lines.append(f"- **styled() wrappers**: {data['styled_count']}")
        lines.append("")
        lines.extend(_top_table("Inline styles by component", data["inline_styles_by_component"]))
        lines.extend(_top_table("styled() by component", data["styled_by_component"]))
        lines.extend(_property_table("Top inline style properties", data["top_inline_properties"]))
        lines.extend(_property_table("Top styled() properties", data["top_styled_properties"]))

    return "\n".join(lines)


def line_ownership_markdown(summary: dict, library: str = "UI Library") -> str:
    lines = [
        f"# {library} Line Ownership",
        "",
        f"**Generated**: {summary.get('generated_at', 'unknown')}",
        "",
        "Lines owned by tracked imports and opening tags, as a share of lines in",
        "files that render JSX.",
        "",
        "| Codebase | UI Files | UI File Lines | Tracked Lines | Imports | Tags | Ownership | Avg Lines/Tag |",
        "|----------|----------|---------------|---------------|---------|------|-----------|---------------|",
    ]
    rows = list(summary.get("codebases", {}).items())
    rows.append(("**Total**", summary["all"]))
    for name, d in rows:
        lines.append(
            f"| {name} | {d['ui_file_count']} | {d['ui_file_lines']} | {d['tracked_lines']} "
            f"| {d['import_lines']} | {d['tag_lines']} | {d['line_ownership_percent']:.1f}% "
            f"| {d['avg_lines_per_tag']:.2f} |"
        )
    lines.append("")

    top = summary["all"]["top_components"]
    if top:
        lines.append("## Lines by component")
        lines.append("")
        lines.append("| Component | Lines | % of Tracked Lines | % of UI Code |")
        lines.append("|-----------|-------|--------------------|--------------|")
        for comp in top:
            lines.append(
                f"| {comp['component']} | {comp['lines']} | {comp['percent_of_tracked_lines']:.1f}% "
                f"| {comp['percent_of_ui_code']:.1f}% |"
            )
        lines.append("")

    return "\n".join(lines)


def prop_surface_markdown(summary: dict, library: str = "UI Library") -> str:
    lines = [
        f"# {library} Prop Surface",
        "",
        f"**Generated**: {summary.get('generated_at', 'unknown')}",
        "",
        "Characters between a tracked component's name and its closing `>`, as",
        "a share of characters in files that render JSX.",
        "",
        "| Codebase | UI Files | UI Code | Prop Chars | Surface | Tags | Avg Chars/Tag |",
        "|----------|----------|---------|------------|---------|------|---------------|",
    ]
    rows = list(summary.get("codebases", {}).items())
    rows.append(("**Total**", summary["all"]))
    for name, d in rows:
        lines.append(
            f"| {name} | {d['ui_file_count']} | {format_size(d['ui_file_chars'])} "
            f"| {format_size(d['prop_chars'])} | {d['prop_surface_percent']:.1f}% "
            f"| {d['tag_count']} | {d['avg_prop_chars_per_tag']:.1f} |"
        )
    lines.append("")

    top = summary["all"]["top_components"]
    if top:
        lines.append("## Prop characters by component")
        lines.append("")
        lines.append("| Component | Prop Chars | % of Props | % of UI Code |")
        lines.append("|-----------|------------|------------|--------------|")
        for comp in top:
            lines.append(
                f"| {comp['component']} | {comp['prop_chars']} | {comp['percent_of_props']:.1f}% "
                f"| {comp['percent_of_ui_code']:.1f}% |"
            )
        lines.append("")

    return "\n".join(lines)


def prop_combos_markdown(summary: dict, by_codebase_limit: int = 30) -> str:
    component = summary["component"]
    props = summary["props"]
    label = " × ".join(props)
    combinations = summary.get("combinations", [])

    lines = [
        f"# {component} Prop Combinations: {label}",
        "",
        f"**Generated**: {summary.get('generated_at', 'unknown')}",
        "",
        f"Cross-tabulation of `{label}` value combinations on `<{component}>`.",
        "Only instances where at least one of the listed props is set are included.",
        "",
        f"- **Total `<{component}>` instances**: {summary['total_instances']}",
        f"- **Instances with at least one combo prop**: {summary['matched_instances']}",
        f"- **Unique combinations**: {summary['unique_combinations']}",
        "",
    ]
    if not combinations:
        lines.append("_No instances found with these props set._")
        lines.append("")
        return "\n".join(lines)

    lines.append("## Combinations")
    lines.append("")
    lines.append("| Rank | " + " | ".join(_code(p) for p in props) + " | Count | % of Matched |")
    lines.append("|------|" + "|".join("---" for _ in props) + "|-------|--------------|")
    for rank, combo in enumerate(combinations, 1):
        cells = " | ".join(_code(combo["values"][p]) for p in props)
        lines.append(f"| {rank} | {cells} | {combo['count']} | {combo['percent_of_matched']:.1f}% |")
    lines.append("")

    codebases = list(summary.get("by_codebase", {}))
    if len(codebases) > 1:
        lookup = {
            cb: {tuple(c["values"][p] for p in props): c["count"]
                 for c in summary["by_codebase"][cb]["combinations"]}
            for cb in codebases
        }
        lines.append("## By codebase")
        lines.append("")
        lines.append("| Combination | " + " | ".join(codebases) + " | Total |")
        lines.append("|-------------|" + "|".join("---" for _ in codebases) + "|-------|")
        for combo in combinations[:by_codebase_limit]:
            key = tuple(combo["values"][p] for p in props)
            counts = " | ".join(str(lookup[cb].get(key, 0)) for cb in codebases)
            lines.append(f"| {_cell(' × '.join(key))} | {counts} | {combo['count']} |")
        if len(combinations) > by_codebase_limit:
            lines.append("")
            lines.append(f"_... and {len(combinations) - by_codebase_limit} more combinations_")
        lines.append("")

    return "\n".join(lines)
