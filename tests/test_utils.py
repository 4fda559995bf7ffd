"""Tests for console output and counting helpers."""

from component_analytics.utils import merge_counts, pct, print_box, print_table, sort_by_count


def test_print_table_right_aligns_numeric_columns(capsys):
    print_table(["Component", "Instances", "Share"], [["Button", "12", "40.0%"], ["Card", "3", "10.0%"]])
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "Component  Instances  Share"
    assert lines[1] == "─" * 27
    assert lines[2] == f"{'Button':<9}  {'12':>9}  40.0%"
    assert lines[3] == f"{'Card':<9}  {'3':>9}  10.0%"


def test_print_table_mixed_column_stays_left_aligned(capsys):
    print_table(["Prop", "Value"], [["size", "2"], ["tone", '"primary"']])
    lines = capsys.readouterr().out.splitlines()
    assert lines[2] == f"{'size':<4}  {'2':<9}"


def test_print_table_without_rows(capsys):
    print_table(["Component"], [])
    assert capsys.readouterr().out == ""


def test_print_box_widens_for_long_lines(capsys):
    print_box(["Done"], width=10)
    assert capsys.readouterr().out.splitlines() == [
        "┌" + "─" * 10 + "┐",
        "│ Done     │",
        "└" + "─" * 10 + "┘",
    ]

    path = "reports/components/summary.json"
    print_box([path], width=10)
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "┌" + "─" * (len(path) + 2) + "┐"
    assert lines[1] == f"│ {path} │"


def test_counting_helpers():
    assert sort_by_count({"a": 1, "b": 3, "c": 1}) == [("b", 3), ("a", 1), ("c", 1)]
    assert pct(1, 3) == "33.3"
    assert pct(5, 0) == "0.0"
    assert merge_counts({"a": 1}, {"a": 2, "b": 1}) == {"a": 3, "b": 1}
