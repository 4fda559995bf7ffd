"""CLI entry point for component-analytics."""

import argparse
import json
import sys
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from pathlib import Path

from .utils import c, log, print_box, print_table, warn


def create_parser() -> argparse.ArgumentParser:
    from .analyzers import analyzer_names

    parser = argparse.ArgumentParser(
        prog="component-analytics",
        description="component-analytics: UI-library usage reports for TSX/JSX codebases",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
  component-analytics analyze
  component-analytics analyze ./apps/studio ./apps/admin --jobs 8
  component-analytics analyze --only components prop-surface --output ./reports
  component-analytics analyze --only prop-combos
  component-analytics scan src/components/Header.tsx
  component-analytics classify '"primary"' '{4}' 'handleClick' 'isOpen ? 1 : 2'
  component-analytics defaults
  component-analytics components
""",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    # analyze: run analyzers over every codebase
    p_analyze = sub.add_parser("analyze", help="Scan codebases and write usage reports")
    p_analyze.add_argument("paths", nargs="*", help="Codebase directories (default: codebases from config)")
    p_analyze.add_argument("--config", type=str, default=None, help="Config file path")
    p_analyze.add_argument("--only", nargs="+", choices=analyzer_names(), default=None,
                           help="Run only these analyzers")
    p_analyze.add_argument("--jobs", "-j", type=int, default=1, help="Files scanned in parallel (default: 1)")
    p_analyze.add_argument("--output", type=str, default=None, help="Output directory (default: config outputDir)")
    p_analyze.add_argument("--verbose", "-v", action="store_true", help="Log every file")

    # scan: inspect one file
    p_scan = sub.add_parser("scan", help="Show tracked imports and JSX instances in one file")
    p_scan.add_argument("file", type=str, help="Path to a .tsx/.jsx file")
    p_scan.add_argument("--config", type=str, default=None)
    p_scan.add_argument("--json", action="store_true")

    # classify: run the value classifier
    p_classify = sub.add_parser("classify", help="Classify and normalize raw prop values")
    p_classify.add_argument("values", nargs="+", help="Raw values as the attribute parser produces them")

    # defaults: re-run default detection over existing reports
    p_defaults = sub.add_parser("defaults", help="Detect default-valued props from per-component reports")
    p_defaults.add_argument("--config", type=str, default=None)
    p_defaults.add_argument("--output", type=str, default=None, help="Report directory (default: config outputDir)")

    # components: list tracked components
    p_components = sub.add_parser("components", help="List the tracked components and import sources")
    p_components.add_argument("--config", type=str, default=None)
    p_components.add_argument("--json", action="store_true")

    return parser


def _load_config(args):
    from .config import load_config
    return load_config(getattr(args, "config", None))


def _output_dir(args, config) -> Path:
    out = getattr(args, "output", None)
    return Path(out).resolve() if out else config.output_dir


def _scan_one(path: Path, tracked, analyzers: list):
    """Worker: read and scan one file, then run every analyzer's per-file pass."""
    from .files import read_safe
    from .jsx_scanner import scan_file

    content = read_safe(path)
    if content is None:
        return None
    scan = scan_file(content, tracked)
    return [a.analyze_file(scan, content) for a in analyzers]


def run_analyzers(config, analyzers: list, jobs: int = 1, verbose: bool = False) -> dict[str, int]:
    """Scan every codebase and fold each file into the analyzers, in file order.

    Returns {codebase: files scanned}. Missing codebases are skipped.
    """
    from .files import find_files

    scanned: dict[str, int] = {}
    with ThreadPoolExecutor(max_workers=max(1, jobs)) as pool:
        for cb in config.codebases:
            if not cb.exists():
                warn(f"  Skipping {cb.name}: {cb.path} not found")
                continue

            files = find_files(cb.path, config.file_pattern, config.ignore)
            log(f"  {cb.name}: {len(files)} files")

            results = pool.map(partial(_scan_one, tracked=config.tracked, analyzers=analyzers), files)
            count = 0
            for path, per_analyzer in zip(files, results):
                rel = path.relative_to(cb.path).as_posix()
                if per_analyzer is None:
                    warn(f"    Could not read {rel}, skipped")
                    continue
                if verbose:
                    log(f"    {rel}")
                for analyzer, result in zip(analyzers, per_analyzer):
                    analyzer.merge(result, cb.name, rel)
                count += 1
            scanned[cb.name] = count

    for analyzer in analyzers:
        analyzer.finalize()
    return scanned


def cmd_analyze(args):
    """Run the analyzers over every codebase and write their reports."""
    from .analyzers import get_analyzers
    from .config import Codebase, ConfigError
    from .reports import write_outputs

    print(c("\ncomponent-analytics analyze\n", "bold"))

    config = _load_config(args)
    if args.paths:
        config.codebases = [Codebase(name=Path(p).resolve().name, path=Path(p).resolve()) for p in args.paths]
    if not config.codebases:
        raise ConfigError("No codebases to analyze: pass directories or add `codebases` to the config file")

    analyzers = get_analyzers(config.tracked, args.only, config.prop_combos)
    if args.only and "prop-combos" in args.only and not config.prop_combos:
        warn("  No propCombos configured: prop-combos writes no reports")
    print(c(f"  Library:    {config.tracked.name}", "dim"))
    print(c(f"  Components: {len(config.tracked.components)}", "dim"))
    print(c(f"  Analyzers:  {', '.join(a.name for a in analyzers)}", "dim"))
    combos = config.prop_combos if any(a.name == "prop-combos" for a in analyzers) else []
    for combo in combos:
        print(c(f"  Combo:      {combo.component} [{combo.label}]", "dim"))
    print()

    scanned = run_analyzers(config, analyzers, jobs=args.jobs, verbose=args.verbose)
    if not scanned:
        raise FileNotFoundError("None of the configured codebase directories exist")

    codebases = list(scanned)
    outputs: dict[str, str] = {}
    for analyzer in analyzers:
        outputs.update(analyzer.build_outputs(codebases))

    out_dir = _output_dir(args, config)
    written = write_outputs(out_dir, outputs)

    print()
    print_table(["Codebase", "Files"], [[name, str(n)] for name, n in scanned.items()])
    print()
    print_box([
        "component-analytics results",
        "",
        f"Codebases:  {len(scanned)}",
        f"Files:      {sum(scanned.values())}",
        f"Reports:    {len(written)}",
        f"Output:     {out_dir.name}/",
    ])
    print(c(f"\n  Reports written to {out_dir}", "green"))


def cmd_scan(args):
    """Show what the scanner extracts from a single file."""
    from .jsx_scanner import scan_file
    from .values import normalize_raw

    config = _load_config(args)
    content = Path(args.file).read_text(encoding="utf-8", errors="replace")
    scan = scan_file(content, config.tracked)

    if args.json:
        print(json.dumps({
            "file": args.file,
            "import_map": scan.import_map,
            "instances": [i.to_dict() for i in scan.instances],
        }, indent=2))
        return

    print(c(f"\n{args.file}\n", "bold"))
    if not scan.import_map:
        print(c(f"  No imports from {config.tracked.name}.", "dim"))
        return

    print(c("  Imports", "bold"))
    for local, original in scan.import_map.items():
        alias = f" as {local}" if local != original else ""
        print(f"    {original}{alias}")
    print()

    if not scan.instances:
        print(c("  Imported but never rendered.", "yellow"))
        return

    rows = []
    for inst in scan.instances:
        props = ", ".join(f"{p.name}={normalize_raw(p.value)}" for p in inst.props)
        rows.append([str(inst.line), inst.component, props or "-"])
    print_table(["Line", "Component", "Props (normalized)"], rows)


def cmd_classify(args):
    """Print the classified and normalized form of each raw value."""
    from .values import classify_value, is_category, normalize_raw

    rows = []
    for raw in args.values:
        classified = classify_value(raw)
        kind = "category" if is_category(classified) else "literal"
        rows.append([raw, classified, normalize_raw(raw), kind])
    print_table(["Raw", "Classified", "Normalized", "Kind"], rows)


def cmd_defaults(args):
    """Re-run default detection over per-component detail reports on disk."""
    from .defaults import defaults_summary, detect_all_defaults
    from .formatters.text import defaults_text
    from .reports import dumps, load_json, now_iso, write_report

    config = _load_config(args)
    out_dir = _output_dir(args, config)
    detail_dir = out_dir / "components" / "detail"
    detail_files = sorted(detail_dir.glob("*.json")) if detail_dir.is_dir() else []
    if not detail_files:
        raise FileNotFoundError(f"No per-component reports in {detail_dir}; run `component-analytics analyze` first")

    components = {}
    for path in detail_files:
        data = load_json(path)
        if not data or "props" not in data:
            warn(f"  Skipping unreadable report: {path.name}")
            continue
        components[data.get("component", path.stem)] = data["props"]

    detected = detect_all_defaults(components)
    write_report(out_dir / "components" / "detected-prop-defaults.json",
                 dumps(defaults_summary(detected, generated_at=now_iso())))
    write_report(out_dir / "components" / "detected-prop-defaults.txt", defaults_text(detected))

    if not detected:
        print(c("  No default-valued props detected.", "dim"))
        return
    print_table(
        ["Component", "Prop", "Default", "Uses", "Confidence"],
        [[d.component, d.prop, d.value, f"{d.count}/{d.total}", d.confidence] for d in detected],
    )
    print(c(f"\n  {len(detected)} detections written to {out_dir / 'components'}", "green"))


def cmd_components(args):
    """List the configured libraries and their tracked components."""
    config = _load_config(args)

    if args.json:
        print(json.dumps({
            "libraries": [
                {
                    "name": lib.name,
                    "import_sources": lib.import_sources,
                    "exclude_sources": lib.exclude_sources,
                    "components": lib.components,
                }
                for lib in config.libraries
            ],
            "prop_combos": [{"component": pc.component, "props": pc.props} for pc in config.prop_combos],
        }, indent=2))
        return

    source = config.source_path or "built-in defaults"
    print(c(f"\nConfig: {source}\n", "dim"))
    for lib in config.libraries:
        print(c(f"  {lib.name}", "bold"))
        print(c(f"    Sources:  {', '.join(lib.import_sources) or '-'}", "dim"))
        if lib.exclude_sources:
            print(c(f"    Excludes: {', '.join(lib.exclude_sources)}", "dim"))
        print(f"    {len(lib.components)} components: {', '.join(lib.components)}")
        print()

    if config.prop_combos:
        print(c("  Prop combos", "bold"))
        for pc in config.prop_combos:
            print(f"    {pc.component}: {pc.label}")
        print()


def main(argv: list[str] | None = None):
    from .config import ConfigError

    parser = create_parser()
    args = parser.parse_args(argv)

    commands = {
        "analyze": cmd_analyze,
        "scan": cmd_scan,
        "classify": cmd_classify,
        "defaults": cmd_defaults,
        "components": cmd_components,
    }

    try:
        commands[args.command](args)
    except KeyboardInterrupt:
        print("\nInterrupted.")
        sys.exit(1)
    except (FileNotFoundError, ConfigError) as e:
        print(c(f"  Error: {e}", "red"), file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
