"""Lexical scanner for tracked UI-library usage in TSX/JSX source.

This is not a parser. Imports are found with a regex, JSX opening tags are
delimited by counting brace depth, and attribute lists are tokenized by a
small hand-written state machine. The approximations are accepted:

- A `{` or `}` inside a string or template literal that sits inside an
  attribute value shifts the depth counter and can end a tag early or late.
- `<Name` is matched anywhere in the text, including comments and strings.
- Imports that do not match the expected shape are ignored entirely.
- A combined `import React, { Card } from "..."` resolves no names, yet its
  statement still counts as tracked import lines for line ownership.

Every analyzer consumes the structured records produced here:

    import_map = resolve_tracked_imports(content, tracked)
    instances = scan_tracked_instances(content, import_map)
"""

from __future__ import annotations

import re
from bisect import bisect_right
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, Mapping

if TYPE_CHECKING:
    from .config import TrackedConfig


_IMPORT_RE = re.compile(r"""import\s+(?:\{([^}]+)\}|(\w+))\s+from\s+['"]([^'"]+)['"]""")

# Full statement extent, including `Default, { Named }` forms and a trailing `;`
_IMPORT_STATEMENT_RE = re.compile(
    r"""import\s+(?:\{[^}]*\}|\w+)(?:\s*,\s*(?:\{[^}]*\}|\w+))?\s+from\s+['"]([^'"]+)['"](?:\s*;)?""",
    re.DOTALL,
)

_ALIAS_SPLIT_RE = re.compile(r"\s+as\s+")
_PROP_NAME_RE = re.compile(r"[a-zA-Z_$][a-zA-Z0-9_$-]*")
_BARE_VALUE_RE = re.compile(r"[^\s/>]*")
_JSX_RE = re.compile(r"<[a-zA-Z][a-zA-Z0-9]*[\s/>]")


# ── Data model ──────────────────────────────────────────────────────────────


@dataclass
class ImportStatement:
    """One `import ... from '...'` statement."""
    named_imports: str | None
    default_import: str | None
    source: str
    source_offset: int = 0


@dataclass
class NamedImportBinding:
    """A single `Original` or `Original as Local` entry inside `{ }`."""
    original: str
    local: str


@dataclass
class TagSpan:
    """Boundaries of one JSX opening tag.

    `tag_start` is the `<`, `body_start` the first character after the
    component name, and `tag_end` the un-nested `>` that closes the tag.
    """
    component: str
    local_name: str
    tag_start: int
    body_start: int
    tag_end: int

    @property
    def char_count(self) -> int:
        """Characters between the component name and the closing `>`."""
        return self.tag_end - self.body_start


@dataclass
class ParsedProp:
    name: str
    value: str


@dataclass
class ComponentInstance:
    """A tracked component's opening tag with its parsed props."""
    component: str
    props: list[ParsedProp] = field(default_factory=list)
    line: int = 1
    tag_start: int = 0
    body_start: int = 0
    tag_end: int = 0

    def to_dict(self) -> dict:
        return {
            "component": self.component,
            "line": self.line,
            "props": [{"name": p.name, "value": p.value} for p in self.props],
        }


@dataclass
class FileScan:
    """Everything the core extracts from one file."""
    import_map: dict[str, str] = field(default_factory=dict)
    instances: list[ComponentInstance] = field(default_factory=list)

    @property
    def imported_components(self) -> list[str]:
        """Original names imported in this file, in import order (aliases collapse)."""
        return list(dict.fromkeys(self.import_map.values()))


# ── Line / offset mapping ───────────────────────────────────────────────────


def line_number_at(content: str, offset: int) -> int:
    """1-based line number of a 0-based character offset.

    Counts newlines strictly before `offset`. Offsets <= 0 and empty content
    map to line 1; offsets past the end map to the last line.
    """
    if offset <= 0 or not content:
        return 1
    return content.count("\n", 0, offset) + 1


class LineIndex:
    """Precomputed line starts for many offset lookups in the same file."""

    def __init__(self, content: str):
        self.starts = [0]
        pos = content.find("\n")
        while pos != -1:
            self.starts.append(pos + 1)
            pos = content.find("\n", pos + 1)

    def line_at(self, offset: int) -> int:
        if offset <= 0:
            return 1
        return bisect_right(self.starts, offset)

    def lines_between(self, start: int, end: int) -> range:
        """Every line touched by the inclusive offset range [start, end]."""
        return range(self.line_at(start), self.line_at(end) + 1)


# ── Imports ─────────────────────────────────────────────────────────────────


def extract_imports(content: str) -> list[ImportStatement]:
    """Find every `import {..} from '..'` / `import X from '..'` statement."""
    return [
        ImportStatement(
            named_imports=m.group(1),
            default_import=m.group(2),
            source=m.group(3),
            source_offset=m.start(),
        )
        for m in _IMPORT_RE.finditer(content)
    ]


def parse_named_imports(named_imports: str | None) -> list[NamedImportBinding]:
    """Split the text inside `{ }` into bindings, keeping PascalCase names only.

    Hooks (`useToast`), utilities (`rem`) and `type Foo` entries start with a
    lowercase letter and are dropped.
    """
    if not named_imports:
        return []

    bindings = []
    for raw in named_imports.split(","):
        entry = raw.strip()
        if not entry:
            continue
        parts = _ALIAS_SPLIT_RE.split(entry)
        original = parts[0].strip()
        local = (parts[1] if len(parts) > 1 else parts[0]).strip()
        if original and original[0].isascii() and original[0].isupper():
            bindings.append(NamedImportBinding(original=original, local=local))
    return bindings


def resolve_tracked_imports(content: str, tracked: TrackedConfig) -> dict[str, str]:
    """Map local JSX names to original tracked component names for one file."""
    import_map: dict[str, str] = {}
    for stmt in extract_imports(content):
        if not tracked.is_tracked_source(stmt.source):
            continue
        for binding in parse_named_imports(stmt.named_imports):
            if tracked.is_tracked_component(binding.original):
                import_map[binding.local] = binding.original
    return import_map


def iter_tracked_import_spans(content: str, tracked: TrackedConfig):
    """Yield (start, end) offsets of each whole tracked import statement.

    `end` is the offset of the statement's last character, so multi-line
    named-import blocks are covered from `import` through the closing quote
    (and `;` when present).
    """
    for m in _IMPORT_STATEMENT_RE.finditer(content):
        if tracked.is_tracked_source(m.group(1)):
            yield m.start(), m.end() - 1


# ── Tags ────────────────────────────────────────────────────────────────────


def compile_tag_pattern(names: Iterable[str]) -> re.Pattern | None:
    """Build `<(A|B|...)\\b` for a set of JSX names, or None if empty."""
    unique = sorted(set(names), key=lambda n: (-len(n), n))
    if not unique:
        return None
    alternation = "|".join(re.escape(n) for n in unique)
    return re.compile(rf"<({alternation})\b")


def find_tag_end(content: str, start: int) -> int:
    """Index of the `>` closing the opening tag whose attributes begin at `start`.

    Brace depth must be back at zero for a `>` to count, so arrow functions
    and comparisons inside `{...}` are skipped. Returns -1 if the file ends
    first.
    """
    depth = 0
    for i in range(start, len(content)):
        ch = content[i]
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
        elif ch == ">" and depth == 0:
            return i
    return -1


def find_tag_spans(
    content: str,
    tag_pattern: re.Pattern | None,
    name_map: Mapping[str, str] | None = None,
) -> list[TagSpan]:
    """Locate every opening tag matched by `tag_pattern`.

    `name_map` resolves the matched local name to its original component;
    names missing from it are reported as-is. Unterminated tags are skipped.
    """
    if tag_pattern is None:
        return []

    spans = []
    for m in tag_pattern.finditer(content):
        local = m.group(1)
        body_start = m.end()
        tag_end = find_tag_end(content, body_start)
        if tag_end == -1:
            continue
        component = name_map.get(local, local) if name_map else local
        spans.append(TagSpan(
            component=component,
            local_name=local,
            tag_start=m.start(),
            body_start=body_start,
            tag_end=tag_end,
        ))
    return spans


def has_jsx(content: str) -> bool:
    """Whether the file renders anything: a component or an HTML/SVG tag."""
    return _JSX_RE.search(content) is not None


# ── Attributes ──────────────────────────────────────────────────────────────


def _closing_brace(text: str, start: int) -> int:
    """Index of the `}` balancing an already-consumed `{`, or len(text)."""
    depth = 1
    i = start
    while i < len(text):
        if text[i] == "{":
            depth += 1
        elif text[i] == "}":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return len(text)


def _skip_space(text: str, i: int) -> int:
    while i < len(text) and text[i].isspace():
        i += 1
    return i


def parse_props(tag_body: str) -> list[ParsedProp]:
    """Tokenize the attribute text of an opening tag into ordered props.

    - `name="x"` / `name='x'` -> `'x'` (always re-wrapped in single quotes)
    - `name={expr}`           -> `expr`, trimmed
    - `name`                  -> `true`
    - `{...spread}`           -> dropped
    """
    props: list[ParsedProp] = []
    n = len(tag_body)
    i = 0

    while i < n:
        i = _skip_space(tag_body, i)
        if i >= n:
            break

        ch = tag_body[i]
        if ch == "/":
            break
        if ch == "{":
            i = _closing_brace(tag_body, i + 1) + 1
            continue

        m = _PROP_NAME_RE.match(tag_body, i)
        if not m:
            i += 1
            continue
        name = m.group(0)
        i = _skip_space(tag_body, m.end())

        if i >= n or tag_body[i] != "=":
            props.append(ParsedProp(name, "true"))
            continue

        i = _skip_space(tag_body, i + 1)
        if i >= n:
            props.append(ParsedProp(name, "true"))
            break

        ch = tag_body[i]
        if ch in "\"'":
            close = tag_body.find(ch, i + 1)
            if close == -1:
                close = n
            value = f"'{tag_body[i + 1:close]}'"
            i = close + 1
        elif ch == "{":
            close = _closing_brace(tag_body, i + 1)
            value = tag_body[i + 1:close].strip()
            i = close + 1
        else:
            bare = _BARE_VALUE_RE.match(tag_body, i)
            value = bare.group(0)
            i = bare.end()

        props.append(ParsedProp(name, value))

    return props


# ── Per-file entry points ───────────────────────────────────────────────────


def scan_tracked_instances(content: str, import_map: Mapping[str, str]) -> list[ComponentInstance]:
    """Every opening tag of an imported tracked component, with props and line."""
    spans = find_tag_spans(content, compile_tag_pattern(import_map), import_map)
    if not spans:
        return []

    lines = LineIndex(content)
    return [
        ComponentInstance(
            component=span.component,
            props=parse_props(content[span.body_start:span.tag_end]),
            line=lines.line_at(span.tag_start),
            tag_start=span.tag_start,
            body_start=span.body_start,
            tag_end=span.tag_end,
        )
        for span in spans
    ]


def scan_file(content: str, tracked: TrackedConfig) -> FileScan:
    """Resolve tracked imports, then scan for their JSX instances."""
    import_map = resolve_tracked_imports(content, tracked)
    if not import_map:
        return FileScan(import_map=import_map)
    return FileScan(
        import_map=import_map,
        instances=scan_tracked_instances(content, import_map),
    )
