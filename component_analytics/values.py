"""Prop value classification and normalization.

`classify_value` maps the raw text of an attribute value to a literal or a
category tag; `normalize_value` collapses that into the key used when
counting values across instances. `normalize_raw` does both and keeps
quoted values as string literals (`'2'` counts as `"2"`, not `2`):

    raw                     classified           normalized
    'primary'               primary              "primary"
    4                       4                    4
    '2'                     2                    "2"  (via normalize_raw)
    () => go()              <function>           <function>
    handleClick             <handler>            <handler>
    isOpen ? 1 : 2          <ternary>            <ternary>
    theme.space             <variable:theme.space>  <variable>
"""

from __future__ import annotations

import re

ARRAY = "<array>"
OBJECT = "<object>"
FUNCTION = "<function>"
HANDLER = "<handler>"
TERNARY = "<ternary>"
TEMPLATE = "<template>"
VARIABLE = "<variable>"
EXPRESSION = "<expression>"

VARIABLE_PREFIX = "<variable:"

CATEGORY_TAGS = frozenset({
    ARRAY, OBJECT, FUNCTION, HANDLER, TERNARY, TEMPLATE, VARIABLE, EXPRESSION,
})

# Plain string literals longer than this are not kept as distinct keys
MAX_LITERAL_LENGTH = 30

_NUMBER_RE = re.compile(r"-?[0-9]+(\.[0-9]+)?")
_QUOTED_RE = re.compile(r"""['"].*['"]""")
_ARRAY_RE = re.compile(r"\[.*\]")
_OBJECT_RE = re.compile(r"\{.*\}")
_FUNCTION_KEYWORD_RE = re.compile(r"function\b")
_HANDLER_NAME_RE = re.compile(r"(?:handle|on)[A-Z]")
_IDENTIFIER_RE = re.compile(r"[a-zA-Z_$][a-zA-Z0-9_$.]*")


def classify_value(raw: str) -> str:
    """Classify a raw prop value. Checks run in order; the first match wins."""
    if raw == "true" or raw == "false":
        return raw
    if _NUMBER_RE.fullmatch(raw):
        return raw
    if _QUOTED_RE.fullmatch(raw):
        return raw[1:-1]
    if _ARRAY_RE.fullmatch(raw):
        return ARRAY
    if _OBJECT_RE.fullmatch(raw):
        return OBJECT
    # `handleClick` is a handler, `() => handleClick()` is a function
    if "=>" in raw or _FUNCTION_KEYWORD_RE.match(raw):
        return FUNCTION
    if _HANDLER_NAME_RE.match(raw):
        return HANDLER
    if "?" in raw and ":" in raw:
        return TERNARY
    if raw.startswith("`"):
        return TEMPLATE
    if _IDENTIFIER_RE.fullmatch(raw):
        return f"{VARIABLE_PREFIX}{raw}>"
    return EXPRESSION


def is_category(classified: str) -> bool:
    """True for category tags, False for literal strings, numbers and booleans."""
    if classified in CATEGORY_TAGS:
        return True
    return classified.startswith(VARIABLE_PREFIX) and classified.endswith(">")


def normalize_value(classified: str) -> str:
    """Collapse a classified value into its aggregation key."""
    if classified == "true" or classified == "false":
        return classified
    if _NUMBER_RE.fullmatch(classified):
        return classified
    if classified.startswith(VARIABLE_PREFIX) and classified.endswith(">"):
        return VARIABLE
    if classified in CATEGORY_TAGS:
        return classified
    if len(classified) <= MAX_LITERAL_LENGTH:
        return f'"{classified}"'
    return EXPRESSION


def normalize_raw(raw: str) -> str:
    """Classify and normalize a raw attribute value in one step.

    A quoted value stays a string literal even when its text reads as a
    number, boolean or tag: `size="2"` counts as `"2"`, `size={2}` as `2`.
    """
    if _QUOTED_RE.fullmatch(raw):
        inner = raw[1:-1]
        return f'"{inner}"' if len(inner) <= MAX_LITERAL_LENGTH else EXPRESSION
    return normalize_value(classify_value(raw))
