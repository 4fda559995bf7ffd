"""Project configuration (component-analytics.json).

Example:

    {
      "codebases": [{"name": "studio", "path": "./codebases/studio"}],
      "uiLibraries": [{
        "name": "Sanity UI",
        "importSources": ["@sanity/ui"],
        "excludeSources": ["@sanity/ui/theme"],
        "components": ["Box", "Button", "Card"]
      }],
      "files": {"pattern": "**/*.{tsx,jsx}", "ignore": ["**/node_modules/**"]},
      "propCombos": [{"component": "Button", "props": ["tone", "mode"]}],
      "outputDir": "./reports"
    }

Paths are resolved relative to the config file. When no config file is found
the built-in defaults below are used.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path

from .jsx_scanner import compile_tag_pattern

CONFIG_FILENAME = "component-analytics.json"

DEFAULT_FILE_PATTERN = "**/*.{tsx,jsx}"

DEFAULT_IGNORE = [
    "**/node_modules/**",
    "**/dist/**",
    "**/build/**",
    "**/*.test.*",
    "**/*.spec.*",
    "**/__tests__/**",
    "**/*.stories.*",
]

DEFAULT_COMPONENTS = [
    # Layout
    "Box", "Container", "Flex", "Grid", "Inline", "Stack",
    # Interactive
    "Button", "Card", "Dialog", "Menu", "MenuButton", "MenuDivider",
    "MenuGroup", "MenuItem", "Popover", "Tab", "TabList", "TabPanel", "Tooltip",
    # Form
    "Autocomplete", "Checkbox", "Label", "Radio", "Select", "Switch",
    "TextArea", "TextInput",
    # Typography
    "Badge", "Code", "Heading", "KBD", "Text",
    # Feedback
    "Spinner", "Toast",
    # Data display
    "Avatar", "AvatarCounter", "AvatarStack", "Skeleton", "TextSkeleton",
    "Tree", "TreeItem",
    # Utility / providers
    "BoundaryElementProvider", "ErrorBoundary", "Layer", "LayerProvider",
    "Portal", "PortalProvider", "ThemeColorProvider", "ThemeProvider",
    "TooltipDelayGroupProvider",
]

DEFAULT_LIBRARY = {
    "name": "Sanity UI",
    "importSources": ["@sanity/ui"],
    "excludeSources": ["@sanity/ui/theme"],
    "components": DEFAULT_COMPONENTS,
}


class ConfigError(ValueError):
    """Raised when the configuration file is unreadable or malformed."""


@dataclass
class UILibrary:
    name: str
    import_sources: list[str] = field(default_factory=list)
    exclude_sources: list[str] = field(default_factory=list)
    components: list[str] = field(default_factory=list)


@dataclass
class TrackedConfig:
    """Which import sources and component names count as tracked.

    The tag pattern over every configured component is compiled once here
    and handed to the scanners that need it.
    """
    import_sources: tuple[str, ...] = ()
    exclude_sources: tuple[str, ...] = ()
    components: tuple[str, ...] = ()
    name: str = "UI Library"
    component_alternation: str = field(init=False, repr=False)
    tag_pattern: re.Pattern | None = field(init=False, repr=False)

    def __post_init__(self):
        self.import_sources = tuple(self.import_sources)
        self.exclude_sources = tuple(self.exclude_sources)
        self.components = tuple(dict.fromkeys(self.components))
        self._component_set = frozenset(self.components)
        self.component_alternation = "|".join(
            re.escape(c) for c in sorted(self.components, key=lambda c: (-len(c), c))
        )
        self.tag_pattern = compile_tag_pattern(self.components)

    @classmethod
    def from_libraries(cls, libraries: list[UILibrary]) -> "TrackedConfig":
        """Merge every library into one tracked set (order-preserving, deduplicated)."""
        def merged(attr: str) -> tuple[str, ...]:
            return tuple(dict.fromkeys(v for lib in libraries for v in getattr(lib, attr)))

        return cls(
            import_sources=merged("import_sources"),
            exclude_sources=merged("exclude_sources"),
            components=merged("components"),
            name=", ".join(lib.name for lib in libraries) or "UI Library",
        )

    def is_tracked_source(self, source: str) -> bool:
        """Substring match on an import path, minus the excluded subpaths."""
        if not any(s in source for s in self.import_sources):
            return False
        return not any(s in source for s in self.exclude_sources)

    def is_tracked_component(self, name: str) -> bool:
        return name in self._component_set


@dataclass
class PropCombo:
    """Props whose values are cross-tabulated on one component."""
    component: str
    props: list[str]

    @property
    def label(self) -> str:
        return " × ".join(self.props)


@dataclass
class Codebase:
    name: str
    path: Path

    def exists(self) -> bool:
        return self.path.is_dir()


@dataclass
class AnalyticsConfig:
    codebases: list[Codebase]
    libraries: list[UILibrary]
    tracked: TrackedConfig
    file_pattern: str = DEFAULT_FILE_PATTERN
    ignore: list[str] = field(default_factory=lambda: list(DEFAULT_IGNORE))
    output_dir: Path = Path("reports")
    prop_combos: list[PropCombo] = field(default_factory=list)
    source_path: Path | None = None

    @property
    def codebase_names(self) -> list[str]:
        return [cb.name for cb in self.codebases]


def find_config_path(start: Path | None = None, max_depth: int = 5) -> Path | None:
    """Walk up from `start` (default: cwd) looking for the config file."""
    d = (start or Path.cwd()).resolve()
    for _ in range(max_depth):
        candidate = d / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        if d.parent == d:
            break
        d = d.parent
    return None


def _str_list(data: dict, key: str, where: str) -> list[str]:
    value = data.get(key, [])
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"{where}.{key} must be a list of strings")
    return value


def _parse_library(data, index: int) -> UILibrary:
    where = f"uiLibraries[{index}]"
    if not isinstance(data, dict):
        raise ConfigError(f"{where} must be an object")
    return UILibrary(
        name=str(data.get("name") or "UI Library"),
        import_sources=_str_list(data, "importSources", where),
        exclude_sources=_str_list(data, "excludeSources", where),
        components=_str_list(data, "components", where),
    )


def _parse_codebase(data, index: int, base_dir: Path) -> Codebase:
    where = f"codebases[{index}]"
    if not isinstance(data, dict) or "name" not in data or "path" not in data:
        raise ConfigError(f"{where} must be an object with 'name' and 'path'")
    return Codebase(name=str(data["name"]), path=(base_dir / data["path"]).resolve())


def _parse_combo(data, index: int) -> PropCombo:
    where = f"propCombos[{index}]"
    if not isinstance(data, dict) or not isinstance(data.get("component"), str):
        raise ConfigError(f"{where} must be an object with a 'component' name")
    props = _str_list(data, "props", where)
    if len(props) < 2:
        raise ConfigError(f"{where}.props must name at least two props")
    return PropCombo(component=data["component"], props=props)


def parse_config(data: dict, base_dir: Path, source_path: Path | None = None) -> AnalyticsConfig:
    """Build an AnalyticsConfig from the raw JSON structure."""
    if not isinstance(data, dict):
        raise ConfigError("Config root must be a JSON object")

    raw_libraries = data.get("uiLibraries") or [DEFAULT_LIBRARY]
    if not isinstance(raw_libraries, list):
        raise ConfigError("uiLibraries must be a list")
    libraries = [_parse_library(lib, i) for i, lib in enumerate(raw_libraries)]

    raw_codebases = data.get("codebases", [])
    if not isinstance(raw_codebases, list):
        raise ConfigError("codebases must be a list")
    codebases = [_parse_codebase(cb, i, base_dir) for i, cb in enumerate(raw_codebases)]

    files = data.get("files", {})
    if not isinstance(files, dict):
        raise ConfigError("files must be an object")
    pattern = files.get("pattern", DEFAULT_FILE_PATTERN)
    if not isinstance(pattern, str):
        raise ConfigError("files.pattern must be a string")
    ignore = _str_list(files, "ignore", "files") if "ignore" in files else list(DEFAULT_IGNORE)

    raw_combos = data.get("propCombos", [])
    if not isinstance(raw_combos, list):
        raise ConfigError("propCombos must be a list")
    prop_combos = [_parse_combo(combo, i) for i, combo in enumerate(raw_combos)]

    return AnalyticsConfig(
        codebases=codebases,
        libraries=libraries,
        tracked=TrackedConfig.from_libraries(libraries),
        file_pattern=pattern,
        ignore=ignore,
        output_dir=(base_dir / data.get("outputDir", "reports")).resolve(),
        prop_combos=prop_combos,
        source_path=source_path,
    )


def load_config(path: str | Path | None = None) -> AnalyticsConfig:
    """Load the config file, or fall back to defaults if none exists.

    An explicit `path` that does not exist raises FileNotFoundError.
    """
    if path is not None:
        p = Path(path)
        if not p.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
    else:
        p = find_config_path()
        if p is None:
            return parse_config({}, Path.cwd())

    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ConfigError(f"Could not parse {p}: {e}") from e

    return parse_config(data, p.resolve().parent, source_path=p)
