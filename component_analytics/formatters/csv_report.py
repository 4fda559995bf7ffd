"""CSV formatter: spreadsheet-friendly versions of the analyzer summaries."""

from __future__ import annotations

import csv
import io


def _render(rows: list[list]) -> str:
    buf = io.StringIO()
    w = csv.writer(buf, lineterminator="\n")
    w.writerows(rows)
    return buf.getvalue()


def components_csv(summary: dict) -> str:
    """One row per component, most instances first."""
    codebases = summary.get("codebases", [])
    header = [
        "Component",
        "Total Imports",
        "Total Instances",
        "Default Value Usages",
        *(f"{cb} Imports" for cb in codebases),
        *(f"{cb} Instances" for cb in codebases),
        "Unique Props",
        "Avg Props/Instance",
        "Top 5 Props",
    ]
    rows = [header]
    for comp in summary.get("components", []):
        top5 = "; ".join(f"{p['name']}({p['usages']})" for p in comp["top_props"][:5])
        rows.append([
            comp["component"],
            comp["total_imports"],
            comp["total_instances"],
            comp["total_default_usages"],
            *(comp["codebase_imports"].get(cb, 0) for cb in codebases),
            *(comp["codebase_instances"].get(cb, 0) for cb in codebases),
            comp["unique_props"],
            f"{comp['avg_props_per_instance']:.2f}",
            top5,
        ])
    return _render(rows)


def customizations_csv(summary: dict) -> str:
    codebases = list(summary.get("codebases", {}))
    rows = [["Component", "Type", *(f"{cb} Count" for cb in codebases), "Total", "Top Properties"]]
    for row in summary.get("rows", []):
        rows.append([
            row["component"],
            row["type"],
            *(row["counts"].get(cb, 0) for cb in codebases),
            row["total"],
            "; ".join(row["top_properties"]),
        ])
    return _render(rows)


def line_ownership_csv(summary: dict) -> str:
    """Codebase totals, a blank row, then the per-component breakdown."""
    rows = [[
        "Codebase", "Total Files", "UI Files", "Files with Tracked UI",
        "Total Lines", "UI File Lines", "Tracked Lines", "Import Lines",
        "JSX Tag Lines", "Line Ownership % (UI)", "Tags", "Avg Lines per Tag",
    ]]

    def totals_row(label: str, d: dict) -> list:
        return [
            label, d["file_count"], d["ui_file_count"], d["files_with_tracked_ui"],
            d["total_lines"], d["ui_file_lines"], d["tracked_lines"], d["import_lines"],
            d["tag_lines"], f"{d['line_ownership_percent']:.1f}%", d["tag_count"],
            f"{d['avg_lines_per_tag']:.2f}",
        ]

    for name, data in summary.get("codebases", {}).items():
        rows.append(totals_row(name, data))
    rows.append(totals_row("TOTAL", summary["all"]))
    rows.append([])

    rows.append(["Component", "Codebase", "Lines", "% of Tracked Lines", "% of UI Code"])
    for name, data in summary.get("codebases", {}).items():
        for comp in data["top_components"]:
            rows.append([
                comp["component"], name, comp["lines"],
                f"{comp['percent_of_tracked_lines']:.1f}%", f"{comp['percent_of_ui_code']:.1f}%",
            ])
    return _render(rows)


def prop_surface_csv(summary: dict) -> str:
    rows = [[
        "Codebase", "Total Files", "UI Files", "Files with Tracked UI",
        "Total Chars", "UI File Chars", "Prop Chars", "Prop Surface % (UI)",
        "Tags", "Avg Prop Chars per Tag",
    ]]

    def totals_row(label: str, d: dict) -> list:
        return [
            label, d["file_count"], d["ui_file_count"], d["files_with_tracked_ui"],
            d["total_chars"], d["ui_file_chars"], d["prop_chars"],
            f"{d['prop_surface_percent']:.1f}%", d["tag_count"], f"{d['avg_prop_chars_per_tag']:.1f}",
        ]

    for name, data in summary.get("codebases", {}).items():
        rows.append(totals_row(name, data))
    rows.append(totals_row("TOTAL", summary["all"]))
    rows.append([])

    rows.append(["Component", "Codebase", "Prop Chars", "% of Props", "% of UI Code"])
    for name, data in summary.get("codebases", {}).items():
        for comp in data["top_components"]:
            rows.append([
                comp["component"], name, comp["prop_chars"],
                f"{comp['percent_of_props']:.1f}%", f"{comp['percent_of_ui_code']:.1f}%",
            ])
    return _render(rows)


def prop_combos_csv(summary: dict) -> str:
    """One row per value combination, with a count column per codebase."""
    props = summary["props"]
    codebases = list(summary.get("by_codebase", {}))
    lookup = {
        cb: {tuple(c["values"][p] for p in props): c["count"] for c in summary["by_codebase"][cb]["combinations"]}
        for cb in codebases
    }

    rows = [["Component", *props, *codebases, "Total"]]
    for combo in summary.get("combinations", []):
        key = tuple(combo["values"][p] for p in props)
        rows.append([
            summary["component"],
            *key,
            *(lookup[cb].get(key, 0) for cb in codebases),
            combo["count"],
        ])
    return _render(rows)
