"""Default-prop detection: guesses which explicitly set values are redundant.

Runs over fully aggregated `{normalized value: count}` distributions, never
per file. Strategies, in order:

1. `as` prop set to the element a component renders by default (high)
2. A value known to be a default for that prop name (high / medium)
3. The least-used value, under 15% of usages, that looks default-ish (low)
4. Any value literally named "default" (high)

This is a heuristic. Callers that need a different policy can pass their own
detector with the same signature as `detect_prop_default`.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Callable

from .utils import sort_by_count

CONFIDENCE_ORDER = {"high": 0, "medium": 1, "low": 2}

# Values in normalized form: '"default"' for strings, '2' for numbers
KNOWN_DEFAULT_VALUES: dict[str, tuple[str, ...]] = {
    "mode": ('"default"',),
    "tone": ('"default"',),
    "as": ('"div"', '"span"', '"button"', '"a"', '"label"', '"h2"', '"code"'),
    "type": ('"button"', '"text"'),
    "direction": ('"row"',),
    "align": ('"stretch"',),
    "justify": ('"flex-start"',),
    "wrap": ('"nowrap"',),
    "weight": ('"regular"',),
    "placement": ('"top"', '"bottom"'),
    "position": ('"fixed"', '"relative"'),
    "size": ('"2"', '"0"', "0", "2"),
    "animated": ("true",),
    "overflow": ('"visible"',),
    "display": ('"block"', '"flex"'),
}

KNOWN_AS_DEFAULTS: dict[str, str] = {
    "Box": '"div"',
    "Flex": '"div"',
    "Grid": '"div"',
    "Stack": '"div"',
    "Inline": '"div"',
    "Container": '"div"',
    "Card": '"div"',
    "Button": '"button"',
    "Tab": '"button"',
    "MenuItem": '"button"',
    "Text": '"span"',
    "Badge": '"span"',
    "Label": '"label"',
    "Heading": '"h2"',
    "Code": '"code"',
}

_LITERAL_DEFAULTS = {'"default"', '"regular"'}

_DEFAULT_LOOKING = {
    '"default"', '"regular"', '"normal"', '"none"', '"inherit"',
    "true", "false", "0",
}

_STATISTICAL_RATIO = 0.15
_MINORITY_RATIO = 0.5


@dataclass
class DetectedDefault:
    component: str
    prop: str
    value: str
    confidence: str  # high, medium, low
    reason: str
    count: int
    total: int

    def to_dict(self) -> dict:
        return asdict(self)


DefaultDetector = Callable[[str, str, dict, int], "DetectedDefault | None"]


def should_skip_prop(prop_name: str) -> bool:
    """Event handlers, React internals and data-/aria- attributes have no default."""
    if prop_name.startswith("on") and len(prop_name) > 2 and prop_name[2].isupper():
        return True
    if prop_name in ("key", "ref", "children"):
        return True
    return prop_name.startswith("data-") or prop_name.startswith("aria-")


def detect_prop_default(
    component: str,
    prop_name: str,
    values: dict[str, int],
    total_usages: int,
) -> DetectedDefault | None:
    """Infer the default value of one prop from its usage distribution."""
    if not values or total_usages == 0:
        return None

    ranked = sort_by_count(values)

    def found(value: str, confidence: str, reason: str, count: int | None = None) -> DetectedDefault:
        return DetectedDefault(
            component=component,
            prop=prop_name,
            value=value,
            confidence=confidence,
            reason=reason,
            count=values[value] if count is None else count,
            total=total_usages,
        )

    # Strategy 1: known `as` element per component
    expected = KNOWN_AS_DEFAULTS.get(component) if prop_name == "as" else None
    if expected and expected in values:
        element = expected.replace('"', "")
        return found(expected, "high", f"Known default: {component} renders as <{element}> by default")

    # Strategy 2: known default value for this prop name
    for candidate in KNOWN_DEFAULT_VALUES.get(prop_name, ()):
        if candidate not in values:
            continue
        count = values[candidate]
        is_minority = len(ranked) > 1 and count <= ranked[0][1] * _MINORITY_RATIO
        confidence = "high" if candidate in _LITERAL_DEFAULTS or is_minority else "medium"
        reason = f"Known default pattern: {prop_name}={candidate}"
        if is_minority:
            reason += f" ({count} of {total_usages} usages, minority value)"
        return found(candidate, confidence, reason)

    # Strategy 3: rare value that looks like a default
    if len(ranked) >= 2:
        least_value, least_count = ranked[-1]
        ratio = least_count / total_usages
        if ratio < _STATISTICAL_RATIO and least_value in _DEFAULT_LOOKING:
            return found(
                least_value,
                "low",
                f"Statistical: {least_value} is the least-used value "
                f"({least_count}/{total_usages} = {ratio * 100:.1f}%) and looks like a default",
            )

    # Strategy 4: a value literally called "default"
    literal = '"default"'
    if literal in values and prop_name != "data-testid":
        return found(literal, "high", f"Value is literally {literal} ({values[literal]} of {total_usages} usages)")

    return None


def sort_detected(results: list[DetectedDefault]) -> list[DetectedDefault]:
    """High confidence first, then by component and prop name."""
    return sorted(results, key=lambda r: (CONFIDENCE_ORDER.get(r.confidence, 3), r.component, r.prop))


def detect_all_defaults(
    components: dict[str, dict[str, dict]],
    detector: DefaultDetector = detect_prop_default,
) -> list[DetectedDefault]:
    """Run detection over `{component: {prop: {"values": .., "total_usages": ..}}}`."""
    results = []
    for component, props in components.items():
        for prop_name, data in props.items():
            if should_skip_prop(prop_name):
                continue
            detected = detector(component, prop_name, data.get("values", {}), data.get("total_usages", 0))
            if detected:
                results.append(detected)
    return sort_detected(results)


def defaults_summary(results: list[DetectedDefault], generated_at: str | None = None) -> dict:
    """JSON-ready report: counts per confidence plus {component: {prop: detail}}."""
    by_component: dict[str, dict[str, dict]] = {}
    for r in results:
        detail = r.to_dict()
        del detail["component"], detail["prop"]
        by_component.setdefault(r.component, {})[r.prop] = detail

    return {
        "generated_at": generated_at,
        "total_detected": len(results),
        "by_confidence": {
            level: sum(1 for r in results if r.confidence == level)
            for level in CONFIDENCE_ORDER
        },
        "components": by_component,
    }
