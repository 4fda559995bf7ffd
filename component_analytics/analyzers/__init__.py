"""Usage analyzers over scanned TSX/JSX files."""

from __future__ import annotations

from .per_component import PerComponentAnalyzer
from .customizations import CustomizationsAnalyzer
from .line_ownership import LineOwnershipAnalyzer
from .prop_surface import PropSurfaceAnalyzer
from .prop_combos import PropCombosAnalyzer

ALL_ANALYZERS = [
    PerComponentAnalyzer,
    CustomizationsAnalyzer,
    LineOwnershipAnalyzer,
    PropSurfaceAnalyzer,
    PropCombosAnalyzer,
]


def analyzer_names() -> list[str]:
    return [cls.name for cls in ALL_ANALYZERS]


def get_analyzers(tracked, names: list[str] | None = None, prop_combos: list | None = None) -> list:
    """Instantiate the named analyzers (all of them when `names` is empty).

    `prop_combos` is only used by the prop-combos analyzer.
    """
    by_name = {cls.name: cls for cls in ALL_ANALYZERS}
    if names:
        unknown = [n for n in names if n not in by_name]
        if unknown:
            raise ValueError(f"Unknown analyzer(s): {', '.join(unknown)}. Choose from: {', '.join(by_name)}")
        selected = [by_name[n] for n in dict.fromkeys(names)]
    else:
        selected = list(ALL_ANALYZERS)

    def build(cls):
        if cls is PropCombosAnalyzer:
            return cls(tracked, prop_combos)
        return cls(tracked)

    return [build(cls) for cls in selected]
