"""Plain-text formatter for detected prop defaults."""

from __future__ import annotations

import json

from ..defaults import CONFIDENCE_ORDER, DetectedDefault

RULE = "═" * 90
THIN_RULE = "─" * 90
SNIPPET_CONFIDENCE = ("high", "medium")


def defaults_text(results: list[DetectedDefault]) -> str:
    """Detections grouped by confidence, then a config-ready snippet."""
    lines = [
        RULE,
        "  DETECTED PROP DEFAULTS",
        RULE,
        "",
        "  Props that are explicitly set to what is likely the component's",
        "  built-in default, i.e. redundant usage.",
        "",
    ]

    groups = {level: [r for r in results if r.confidence == level] for level in CONFIDENCE_ORDER}
    lines.append(f"  Total detected:      {len(results)}")
    for level, group in groups.items():
        lines.append(f"    {(level.capitalize() + ' confidence:').ljust(19)}{len(group)}")
    lines.append("")

    for level, group in groups.items():
        if not group:
            continue
        lines.append(THIN_RULE)
        lines.append(f"  {level.upper()} CONFIDENCE ({len(group)})")
        lines.append(THIN_RULE)
        lines.append("")
        lines.append(
            "  " + "Component".ljust(26) + "Prop".ljust(20) + "Default Value".ljust(16)
            + "Explicit Uses".rjust(14) + "  Reason"
        )
        lines.append("  " + "-" * 86)
        for r in group:
            lines.append(
                "  " + r.component.ljust(26) + r.prop.ljust(20) + r.value.ljust(16)
                + f"{r.count} / {r.total}".rjust(14) + "  " + r.reason
            )
        lines.append("")

    snippet: dict[str, dict[str, str]] = {}
    for r in results:
        if r.confidence in SNIPPET_CONFIDENCE:
            snippet.setdefault(r.component, {})[r.prop] = r.value

    lines.append(RULE)
    lines.append("  CONFIG-READY SNIPPET (high + medium confidence only)")
    lines.append(RULE)
    lines.append("")
    lines.append('  "propDefaults": {')
    entries = sorted(snippet.items())
    for i, (comp, props) in enumerate(entries):
        comma = "," if i < len(entries) - 1 else ""
        lines.append(f"    {json.dumps(comp)}: {json.dumps(props)}{comma}")
    lines.append("  }")
    lines.append("")
    return "\n".join(lines)
