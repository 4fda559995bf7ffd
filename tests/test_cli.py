"""End-to-end tests for the command line interface."""

import json

import pytest

from component_analytics.cli import main

HEADER = """import { Card, Button as UIButton, Text } from '@sanity/ui'
import styled from 'styled-components'

const Root = styled(Card)`
  padding: 4px;
`

export function Header({ onSave }) {
  return (
    <Card padding={4} tone="default" style={{ margin: 0 }}>
      <Text size={1}>Title</Text>
      <UIButton mode="default" onClick={onSave} text="Save" />
      <UIButton mode="ghost" text={label} />
    </Card>
  )
}
"""

LIST = """import { Card, Text } from '@sanity/ui'

export const List = ({ items }) => (
  <Card radius={2}>
    {items.map((item) => <Text key={item.id} muted>{item.title}</Text>)}
  </Card>
)
"""


def _project(tmp_path):
    """A config file plus one codebase with a few components."""
    files = {
        "app/src/Header.tsx": HEADER,
        "app/src/List.jsx": LIST,
        "app/src/Header.test.tsx": HEADER,
        "app/src/rem.ts": "export const rem = (n) => n / 16\n",
    }
    for rel, content in files.items():
        path = tmp_path / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")

    config = tmp_path / "component-analytics.json"
    config.write_text(json.dumps({
        "codebases": [{"name": "app", "path": "./app"}],
        "uiLibraries": [{
            "name": "Sanity UI",
            "importSources": ["@sanity/ui"],
            "components": ["Box", "Button", "Card", "Text"],
        }],
        "propCombos": [{"component": "Button", "props": ["mode", "tone"]}],
        "outputDir": "./reports",
    }))
    return config


def _analyze(config, out, jobs=1):
    main(["analyze", "--config", str(config), "--jobs", str(jobs), "--output", str(out)])


def test_classify(capsys):
    main(["classify", "'primary'", "handleClick", "theme.space"])
    out = capsys.readouterr().out
    assert '"primary"' in out
    assert "<handler>" in out
    assert "<variable:theme.space>" in out
    assert "<variable>" in out
    assert "category" in out


def test_scan_json(tmp_path, capsys):
    config = _project(tmp_path)
    main(["scan", str(tmp_path / "app/src/Header.tsx"), "--config", str(config), "--json"])
    data = json.loads(capsys.readouterr().out)
    assert data["import_map"] == {"Card": "Card", "UIButton": "Button", "Text": "Text"}
    assert [(i["component"], i["line"]) for i in data["instances"]] == [
        ("Card", 10),
        ("Text", 11),
        ("Button", 12),
        ("Button", 13),
    ]


def test_analyze_writes_reports(tmp_path):
    config = _project(tmp_path)
    _analyze(config, tmp_path / "reports")
    reports = tmp_path / "reports"

    for rel in (
        "components/summary.json",
        "components/summary.csv",
        "components/summary.md",
        "components/detected-prop-defaults.json",
        "components/detected-prop-defaults.txt",
        "customizations/report.json",
        "line-ownership/report.csv",
        "prop-surface/report.md",
        "prop-combos/Button/Button-mode-tone-combo.json",
    ):
        assert (reports / rel).is_file(), rel

    details = sorted(p.name for p in (reports / "components" / "detail").glob("*.json"))
    assert details == ["Button.json", "Card.json", "Text.json"]

    card = json.loads((reports / "components/detail/Card.json").read_text())
    assert card["total_imports"] == 2
    assert card["total_instances"] == 2
    assert card["codebase_instances"] == {"app": 2}
    assert {r["file"] for r in card["references"]} == {"src/Header.tsx", "src/List.jsx"}

    customizations = json.loads((reports / "customizations/report.json").read_text())
    assert customizations["all"]["inline_style_count"] == 1
    assert customizations["all"]["styled_count"] == 1

    combos = json.loads((reports / "prop-combos/Button/Button-mode-tone-combo.json").read_text())
    assert combos["total_instances"] == 2
    assert [c["values"] for c in combos["combinations"]] == [
        {"mode": '"default"', "tone": "(unset)"},
        {"mode": '"ghost"', "tone": "(unset)"},
    ]


def test_analyze_is_deterministic_across_jobs(tmp_path):
    config = _project(tmp_path)
    _analyze(config, tmp_path / "serial", jobs=1)
    _analyze(config, tmp_path / "parallel", jobs=4)

    compared = 0
    for path in sorted((tmp_path / "serial").rglob("*")):
        if not path.is_file():
            continue
        if path.suffix not in (".csv", ".txt") and "detail" not in path.parts:
            continue
        twin = tmp_path / "parallel" / path.relative_to(tmp_path / "serial")
        assert path.read_text() == twin.read_text(), path.name
        compared += 1
    assert compared >= 8


def test_analyze_ad_hoc_paths(tmp_path):
    config = _project(tmp_path)
    out = tmp_path / "adhoc"
    main(["analyze", str(tmp_path / "app"), "--config", str(config), "--output", str(out),
          "--only", "prop-surface"])
    assert sorted(p.relative_to(out).as_posix() for p in out.rglob("*.*")) == [
        "prop-surface/report.csv",
        "prop-surface/report.json",
        "prop-surface/report.md",
    ]


def test_defaults_after_analyze(tmp_path, capsys):
    config = _project(tmp_path)
    reports = tmp_path / "reports"
    _analyze(config, reports)
    (reports / "components" / "detected-prop-defaults.json").unlink()

    main(["defaults", "--config", str(config), "--output", str(reports)])
    data = json.loads((reports / "components" / "detected-prop-defaults.json").read_text())
    assert data["components"]["Button"]["mode"]["value"] == '"default"'
    assert data["components"]["Card"]["tone"]["confidence"] == "high"
    assert "Button" in capsys.readouterr().out


def test_defaults_without_reports_exits(tmp_path, capsys):
    config = _project(tmp_path)
    with pytest.raises(SystemExit) as exc:
        main(["defaults", "--config", str(config), "--output", str(tmp_path / "empty")])
    assert exc.value.code == 1
    assert "No per-component reports" in capsys.readouterr().err


def test_analyze_without_codebases_exits(tmp_path, capsys):
    config = tmp_path / "component-analytics.json"
    config.write_text("{}")
    with pytest.raises(SystemExit) as exc:
        main(["analyze", "--config", str(config)])
    assert exc.value.code == 1
    assert "No codebases" in capsys.readouterr().err


def test_missing_config_exits(tmp_path):
    with pytest.raises(SystemExit) as exc:
        main(["components", "--config", str(tmp_path / "missing.json")])
    assert exc.value.code == 1


def test_components_json(tmp_path, capsys):
    config = _project(tmp_path)
    main(["components", "--config", str(config), "--json"])
    data = json.loads(capsys.readouterr().out)
    assert data["libraries"] == [{
        "name": "Sanity UI",
        "import_sources": ["@sanity/ui"],
        "exclude_sources": [],
        "components": ["Box", "Button", "Card", "Text"],
    }]
    assert data["prop_combos"] == [{"component": "Button", "props": ["mode", "tone"]}]
