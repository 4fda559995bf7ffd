"""Output formatters for component-analytics."""

from .csv_report import (
    components_csv,
    customizations_csv,
    line_ownership_csv,
    prop_combos_csv,
    prop_surface_csv,
)
from .markdown import (
    components_markdown,
    customizations_markdown,
    line_ownership_markdown,
    prop_combos_markdown,
    prop_surface_markdown,
)
from .text import defaults_text
