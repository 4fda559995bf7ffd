"""Tests for configuration loading, file discovery and report persistence."""

import json
from pathlib import Path

import pytest

from component_analytics.config import (
    CONFIG_FILENAME,
    DEFAULT_COMPONENTS,
    ConfigError,
    PropCombo,
    TrackedConfig,
    UILibrary,
    find_config_path,
    load_config,
    parse_config,
)
from component_analytics import files
from component_analytics.files import (
    expand_braces,
    find_files,
    glob_match,
    is_ignored,
    is_ignored_dir,
    read_safe,
)
from component_analytics.reports import load_json, save_json, write_outputs, write_report


# ── Config ───────────────────────────────────────────────────


def test_defaults_without_config(tmp_path):
    config = parse_config({}, tmp_path)
    assert config.codebases == []
    assert config.tracked.components == tuple(DEFAULT_COMPONENTS)
    assert config.tracked.is_tracked_source("@sanity/ui")
    assert not config.tracked.is_tracked_source("@sanity/ui/theme")
    assert config.output_dir == (tmp_path / "reports").resolve()


def test_tracked_config_merges_libraries():
    tracked = TrackedConfig.from_libraries([
        UILibrary("A", import_sources=["@a/ui"], components=["Button", "Card"]),
        UILibrary("B", import_sources=["@b/ui"], exclude_sources=["@b/ui/icons"], components=["Card", "Icon"]),
    ])
    assert tracked.components == ("Button", "Card", "Icon")
    assert tracked.name == "A, B"
    assert tracked.is_tracked_source("@b/ui/button")
    assert not tracked.is_tracked_source("@b/ui/icons")
    assert tracked.is_tracked_component("Icon")
    assert not tracked.is_tracked_component("Box")
    assert tracked.tag_pattern.search("<Icon />").group(1) == "Icon"


def test_empty_component_list_has_no_tag_pattern():
    assert TrackedConfig(import_sources=("@a/ui",)).tag_pattern is None


def test_load_config_resolves_paths(tmp_path):
    (tmp_path / "apps" / "studio").mkdir(parents=True)
    path = tmp_path / CONFIG_FILENAME
    path.write_text(json.dumps({
        "codebases": [{"name": "studio", "path": "./apps/studio"}],
        "uiLibraries": [{"name": "Acme", "importSources": ["@acme/ui"], "components": ["Button"]}],
        "files": {"pattern": "**/*.tsx", "ignore": ["**/legacy/**"]},
        "outputDir": "./out",
    }))

    config = load_config(path)
    assert config.codebase_names == ["studio"]
    assert config.codebases[0].path == (tmp_path / "apps" / "studio").resolve()
    assert config.codebases[0].exists()
    assert config.tracked.name == "Acme"
    assert config.file_pattern == "**/*.tsx"
    assert config.ignore == ["**/legacy/**"]
    assert config.output_dir == (tmp_path / "out").resolve()
    assert config.source_path == path


def test_find_config_walks_up(tmp_path, monkeypatch):
    (tmp_path / CONFIG_FILENAME).write_text("{}")
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    assert find_config_path(nested) == (tmp_path / CONFIG_FILENAME).resolve()

    monkeypatch.chdir(nested)
    assert load_config().source_path == (tmp_path / CONFIG_FILENAME).resolve()


def test_missing_explicit_config(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.json")


def test_invalid_config(tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text("{not json")
    with pytest.raises(ConfigError):
        load_config(bad)

    with pytest.raises(ConfigError):
        parse_config({"codebases": "studio"}, tmp_path)
    with pytest.raises(ConfigError):
        parse_config({"codebases": [{"name": "x"}]}, tmp_path)
    with pytest.raises(ConfigError):
        parse_config({"uiLibraries": [{"components": "Button"}]}, tmp_path)
    with pytest.raises(ConfigError):
        parse_config([], tmp_path)


def test_prop_combos_config(tmp_path):
    config = parse_config({"propCombos": [{"component": "Button", "props": ["tone", "mode"]}]}, tmp_path)
    assert config.prop_combos == [PropCombo("Button", ["tone", "mode"])]
    assert config.prop_combos[0].label == "tone × mode"
    assert parse_config({}, tmp_path).prop_combos == []


def test_invalid_prop_combos(tmp_path):
    for combos in (
        {"component": "Button"},
        [{"component": "Button", "props": ["tone"]}],
        [{"component": "Button", "props": "tone,mode"}],
        [{"props": ["tone", "mode"]}],
        ["Button"],
    ):
        with pytest.raises(ConfigError):
            parse_config({"propCombos": combos}, tmp_path)


# ── Files ────────────────────────────────────────────────────


def test_expand_braces():
    assert expand_braces("**/*.{tsx,jsx}") == ["**/*.tsx", "**/*.jsx"]
    assert expand_braces("src/*.ts") == ["src/*.ts"]


def test_glob_match_double_star_matches_zero_dirs():
    assert glob_match("a.tsx", "**/*.{tsx,jsx}")
    assert glob_match("src/deep/a.jsx", "**/*.{tsx,jsx}")
    assert not glob_match("src/a.ts", "**/*.{tsx,jsx}")


def test_is_ignored():
    ignore = ["**/node_modules/**", "**/*.test.*", "**/__tests__/**"]
    assert is_ignored("node_modules/pkg/a.tsx", ignore)
    assert is_ignored("src/node_modules/pkg/a.tsx", ignore)
    assert is_ignored("src/Button.test.tsx", ignore)
    assert is_ignored("src/__tests__/a.tsx", ignore)
    assert not is_ignored("src/Button.tsx", ignore)


def test_find_files_sorted_and_filtered(tmp_path):
    for rel in ("b/Card.tsx", "a/Button.jsx", "a/Button.test.tsx", "node_modules/x/X.tsx", "util.ts"):
        p = tmp_path / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text("")

    found = find_files(tmp_path, "**/*.{tsx,jsx}", ["**/node_modules/**", "**/*.test.*"])
    assert [p.relative_to(tmp_path).as_posix() for p in found] == ["a/Button.jsx", "b/Card.tsx"]


def test_is_ignored_dir():
    ignore = ["**/node_modules/**", "**/dist/**", "**/*.test.*", "**/{build,out}/**"]
    assert is_ignored_dir("node_modules", ignore)
    assert is_ignored_dir("packages/ui/dist", ignore)
    assert is_ignored_dir("out", ignore)
    assert not is_ignored_dir("src", ignore)
    assert not is_ignored_dir("src/distance", ignore)
    # Globs not ending in `*` never prune a directory
    assert not is_ignored_dir("legacy", ["**/legacy"])


def test_find_files_does_not_walk_ignored_dirs(tmp_path, monkeypatch):
    for rel in ("src/Card.tsx", "node_modules/pkg/deep/X.tsx", "src/dist/Y.tsx"):
        p = tmp_path / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text("")

    visited = []
    real_walk = files.os.walk

    def recording_walk(top, *args, **kwargs):
        for entry in real_walk(top, *args, **kwargs):
            visited.append(Path(entry[0]).relative_to(tmp_path).as_posix())
            yield entry

    monkeypatch.setattr(files.os, "walk", recording_walk)
    found = find_files(tmp_path, "**/*.tsx", ["**/node_modules/**", "**/dist/**"])

    assert [p.relative_to(tmp_path).as_posix() for p in found] == ["src/Card.tsx"]
    assert sorted(visited) == [".", "src"]


def test_read_safe(tmp_path):
    good = tmp_path / "a.tsx"
    good.write_text("<Card />", encoding="utf-8")
    bad = tmp_path / "b.tsx"
    bad.write_bytes(b"\xff\xfe\x00bad")
    assert read_safe(good) == "<Card />"
    assert read_safe(bad) is None
    assert read_safe(tmp_path / "missing.tsx") is None


# ── Reports ──────────────────────────────────────────────────


def test_write_report_creates_parents(tmp_path):
    path = write_report(tmp_path / "x" / "y" / "r.md", "# hi\n")
    assert path.read_text(encoding="utf-8") == "# hi\n"
    assert not list((tmp_path / "x" / "y").glob("*.tmp"))


def test_save_and_load_json(tmp_path):
    path = tmp_path / "r.json"
    save_json(path, {"tags": {"b", "a"}, "where": Path("src")})
    assert load_json(path) == {"tags": ["a", "b"], "where": "src"}
    assert load_json(tmp_path / "missing.json") is None

    (tmp_path / "corrupt.json").write_text("{")
    assert load_json(tmp_path / "corrupt.json") is None


def test_write_outputs(tmp_path):
    written = write_outputs(tmp_path, {"b/two.csv": "2\n", "a/one.md": "1\n"})
    assert [p.relative_to(tmp_path).as_posix() for p in written] == ["a/one.md", "b/two.csv"]
    assert (tmp_path / "b" / "two.csv").read_text() == "2\n"
