"""Tests for output formatters."""

from component_analytics.defaults import DetectedDefault
from component_analytics.formatters import (
    components_csv,
    components_markdown,
    customizations_csv,
    customizations_markdown,
    defaults_text,
    line_ownership_csv,
    line_ownership_markdown,
    prop_surface_csv,
    prop_surface_markdown,
)


def _components_summary() -> dict:
    """A summary shaped like the per-component analyzer's output."""
    return {
        "generated_at": "2026-01-01T00:00:00+00:00",
        "codebases": ["studio", "admin"],
        "total_components": 2,
        "total_imports": 5,
        "total_instances": 7,
        "total_default_usages": 1,
        "components": [
            {
                "component": "Button",
                "total_imports": 3,
                "total_instances": 6,
                "codebase_imports": {"studio": 2, "admin": 1},
                "codebase_instances": {"studio": 5, "admin": 1},
                "unique_props": 2,
                "avg_props_per_instance": 1.5,
                "total_default_usages": 1,
                "top_props": [
                    {
                        "name": "mode",
                        "usages": 6,
                        "default_value": '"default"',
                        "default_usages": 1,
                        "top_values": [{"value": '"ghost"', "count": 5}, {"value": '"default"', "count": 1}],
                    },
                    {
                        "name": "onClick",
                        "usages": 3,
                        "default_value": None,
                        "default_usages": 0,
                        "top_values": [{"value": "<handler>", "count": 3}],
                    },
                ],
            },
            {
                "component": "Card",
                "total_imports": 2,
                "total_instances": 1,
                "codebase_imports": {"studio": 2},
                "codebase_instances": {"studio": 1},
                "unique_props": 0,
                "avg_props_per_instance": 0.0,
                "total_default_usages": 0,
                "top_props": [],
            },
        ],
    }


def _totals(**overrides) -> dict:
    d = {
        "file_count": 3, "ui_file_count": 2, "files_with_tracked_ui": 2,
        "total_lines": 100, "ui_file_lines": 80, "tracked_lines": 20,
        "import_lines": 4, "tag_lines": 16, "line_ownership_percent": 25.0,
        "tag_count": 8, "avg_lines_per_tag": 2.0,
        "total_chars": 4000, "ui_file_chars": 2048, "prop_chars": 512,
        "prop_surface_percent": 25.0, "avg_prop_chars_per_tag": 64.0,
        "top_components": [],
    }
    d.update(overrides)
    return d


# ── Components ───────────────────────────────────────────────


def test_components_csv():
    lines = components_csv(_components_summary()).splitlines()
    assert lines[0] == (
        "Component,Total Imports,Total Instances,Default Value Usages,"
        "studio Imports,admin Imports,studio Instances,admin Instances,"
        "Unique Props,Avg Props/Instance,Top 5 Props"
    )
    assert lines[1] == "Button,3,6,1,2,1,5,1,2,1.50,mode(6); onClick(3)"
    # Missing codebases count as zero
    assert lines[2] == "Card,2,1,0,2,0,1,0,0,0.00,"


def test_components_markdown():
    md = components_markdown(_components_summary(), "Sanity UI")
    assert md.startswith("# Per-Component Usage: Sanity UI")
    assert "**JSX instances**: 7" in md
    assert "| 1 | Button | 3 | 6 | 2 | 1.50 | 1 |" in md
    assert "## Button" in md
    assert '| mode | 6 | 1 | 100.0% | `"ghost"` (5), `"default"` (1) |' in md
    assert "_No props used._" in md


# ── Defaults ─────────────────────────────────────────────────


def test_defaults_text_groups_and_snippet():
    results = [
        DetectedDefault("Button", "mode", '"default"', "high", "Known default", 1, 6),
        DetectedDefault("Flex", "direction", '"row"', "medium", "Majority", 6, 10),
        DetectedDefault("Card", "radius", '"none"', "low", "Statistical", 3, 43),
    ]
    text = defaults_text(results)
    assert "Total detected:      3" in text
    assert "HIGH CONFIDENCE (1)" in text
    assert "LOW CONFIDENCE (1)" in text
    assert "1 / 6" in text

    snippet = text.split("CONFIG-READY SNIPPET")[1]
    assert '"Button": {"mode": "\\"default\\""},' in snippet
    assert '"Flex": {"direction": "\\"row\\""}' in snippet
    assert "Card" not in snippet


def test_defaults_text_empty():
    text = defaults_text([])
    assert "Total detected:      0" in text
    assert "CONFIDENCE (" not in text
    assert '"propDefaults": {\n  }' in text


# ── Customizations ───────────────────────────────────────────


def test_customizations_formatters():
    data = {
        "total_files": 4, "files_with_customizations": 1,
        "inline_style_count": 1, "styled_count": 1, "total_customizations": 2,
        "inline_styles_by_component": {"Card": 1}, "styled_by_component": {"Box": 1},
        "top_inline_properties": [{"property": "color", "count": 1}],
        "top_styled_properties": [],
    }
    summary = {
        "generated_at": "2026-01-01T00:00:00+00:00",
        "codebases": {"studio": data},
        "all": data,
        "rows": [
            {"component": "Card", "type": "inline style", "counts": {"studio": 1}, "total": 1,
             "top_properties": ["color", "margin"]},
        ],
    }
    assert customizations_csv(summary).splitlines() == [
        "Component,Type,studio Count,Total,Top Properties",
        "Card,inline style,1,1,color; margin",
    ]

    md = customizations_markdown(summary, "Sanity UI")
    assert md.startswith("# Sanity UI Customizations")
    assert "## studio" in md
    assert "## All codebases" in md
    assert "| `color` | 1 |" in md
    assert "Top styled() properties" not in md


# ── Line ownership / prop surface ────────────────────────────


def test_line_ownership_formatters():
    top = [{"component": "Card", "lines": 12, "percent_of_tracked_lines": 60.0, "percent_of_ui_code": 15.0}]
    summary = {
        "generated_at": "2026-01-01T00:00:00+00:00",
        "codebases": {"studio": _totals(top_components=top)},
        "all": _totals(top_components=top),
    }
    lines = line_ownership_csv(summary).splitlines()
    assert lines[1] == "studio,3,2,2,100,80,20,4,16,25.0%,8,2.00"
    assert lines[2].startswith("TOTAL,")
    assert lines[3] == ""
    assert lines[5] == "Card,studio,12,60.0%,15.0%"

    md = line_ownership_markdown(summary, "Sanity UI")
    assert "| studio | 2 | 80 | 20 | 4 | 16 | 25.0% | 2.00 |" in md
    assert "| Card | 12 | 60.0% | 15.0% |" in md


def test_prop_surface_formatters():
    summary = {
        "generated_at": "2026-01-01T00:00:00+00:00",
        "codebases": {"studio": _totals()},
        "all": _totals(),
    }
    lines = prop_surface_csv(summary).splitlines()
    assert lines[0].startswith("Codebase,Total Files,UI Files")
    assert lines[1] == "studio,3,2,2,4000,2048,512,25.0%,8,64.0"

    md = prop_surface_markdown(summary, "Sanity UI")
    assert md.startswith("# Sanity UI Prop Surface")
    assert "| studio | 2 |" in md
    assert "Prop characters by component" not in md
