"""
JTE Builtin Catalog
===================

The concrete builtins exposed to expressions, each declared through
`define_builtin` with its argument signature.
"""

import decimal
import functools
import json
import logging
import math
import re
import sys
from collections import ChainMap
from collections.abc import Mapping
from types import MappingProxyType

from ..builtin_exceptions import InvalidKindError
from ..dsl.from_now import from_now
from ..type_utils import KIND_PREDICATES, TYPEOF_ORDER, kind_name
from ..utils import define_builtin

logger = logging.getLogger(__name__)

ALL_KINDS = "string|number|boolean|array|object|null|function"

_DECIMAL_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
_RADIX_RE = re.compile(r"^0([xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)$")
_INFINITY_RE = re.compile(r"^([+-]?)Infinity$")
_EXPONENT_RE = re.compile(r"e([+-])0*(\d)")

# Magnitude from which numbers render in exponent form.
_EXACT_LIMIT = 10 ** 21


# --- Text rendering ---

def render_number(n) -> str:
    if isinstance(n, int):
        if abs(n) < _EXACT_LIMIT:
            return str(n)
        try:
            n = float(n)
        except OverflowError:
            return "Infinity" if n > 0 else "-Infinity"
    if math.isnan(n):
        return "NaN"
    if math.isinf(n):
        return "Infinity" if n > 0 else "-Infinity"
    if n.is_integer() and abs(n) < _EXACT_LIMIT:
        return str(int(n))

    text = repr(n)
    if "e" in text and 1e-6 <= abs(n) < _EXACT_LIMIT:
        # positional notation between 1e-6 and 1e21, as JSON-e prints it
        return format(decimal.Decimal(text), "f")
    return _EXPONENT_RE.sub(r"e\1\2", text)


def render_text(value) -> str:
    """Canonical text of a string, number, boolean or null."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return render_number(value)
    return str(value)


def _render_join_item(value) -> str:
    # null renders empty and nested arrays flatten with commas when joined
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ",".join(_render_join_item(v) for v in value)
    if isinstance(value, Mapping):
        return json.dumps(value, separators=(",", ":"), default=str)
    return render_text(value)


# --- Math ---

def _extremum(pick, *args):
    if any(isinstance(a, float) and math.isnan(a) for a in args):
        return math.nan
    return pick(args)


def _sqrt(x):
    # negative and NaN input yield NaN rather than raising
    if not x >= 0:
        return math.nan
    try:
        return math.sqrt(x)
    except OverflowError:
        # int too large for a float
        return math.inf


def _round_with(rounder, x):
    if isinstance(x, float) and not math.isfinite(x):
        return x
    return rounder(x)


# --- Strings ---

def to_number(text: str):
    """
    Parses numeric text the way JSON-e's `number` does.

    Surrounding whitespace is ignored and an empty string is 0. Decimal,
    exponent, ``0x``/``0o``/``0b`` and ``Infinity`` forms are accepted;
    anything else yields NaN instead of raising.
    """
    stripped = text.strip()
    if not stripped:
        return 0

    match = _INFINITY_RE.match(stripped)
    if match:
        return -math.inf if match.group(1) == "-" else math.inf

    if _RADIX_RE.match(stripped):
        return int(stripped, 0)

    match = _DECIMAL_RE.match(stripped)
    if match:
        if "." in stripped or match.group(2):
            return float(stripped)
        try:
            value = int(stripped)
        except ValueError:
            # past the interpreter's int digit limit; float() saturates to inf
            return float(stripped)
        return value if abs(value) <= sys.float_info.max else float(stripped)

    logger.debug(f"Could not parse {text!r} as a number; returning NaN")
    return math.nan


def _split(subject, delimiter=None, *_ignored):
    if not isinstance(subject, str):
        subject = render_number(subject)
    if delimiter is None:
        return [subject]
    if not isinstance(delimiter, str):
        delimiter = render_number(delimiter)
    if delimiter == "":
        return list(subject)
    return subject.split(delimiter)


def _join(items, separator):
    if not isinstance(separator, str):
        separator = render_number(separator)
    return separator.join(_render_join_item(item) for item in items)


# --- Miscellaneous ---

def _context_now(context):
    if isinstance(context, Mapping):
        return context.get("now")
    return getattr(context, "now", None)


def own_names(context):
    """Bindings that belong to `context` itself, excluding inherited ones."""
    if isinstance(context, ChainMap):
        return context.maps[0] if context.maps else {}
    if isinstance(context, Mapping):
        return context
    return vars(context) if hasattr(context, "__dict__") else {}


def _from_now(context, offset, reference=None, *_ignored):
    return from_now(offset, reference or _context_now(context))


def _typeof(value):
    for kind in TYPEOF_ORDER:
        if KIND_PREDICATES[kind](value):
            return kind.value
    raise InvalidKindError(
        f"expected argument {value!r} to be a valid JSON-e type, found {kind_name(value)}",
        builtin="typeof",
    )


def _defined(context, name):
    return name in own_names(context)


@functools.lru_cache(maxsize=None)
def build_builtins() -> Mapping:
    """
    Declares every builtin and returns them as a read-only mapping.

    The mapping is built once per process; callers merge it into their own
    context rather than mutating it.
    """
    builtins = {}

    # Math functions
    for name, pick in (("max", max), ("min", min)):
        define_builtin(name, builtins, min_args=1, variadic="number",
                       invoke=functools.partial(_extremum, pick))

    define_builtin("sqrt", builtins, argument_tests=["number"], invoke=_sqrt)
    define_builtin("ceil", builtins, argument_tests=["number"],
                   invoke=functools.partial(_round_with, math.ceil))
    define_builtin("floor", builtins, argument_tests=["number"],
                   invoke=functools.partial(_round_with, math.floor))
    define_builtin("abs", builtins, argument_tests=["number"], invoke=abs)

    # String manipulation
    define_builtin("lowercase", builtins, argument_tests=["string"], invoke=str.lower)
    define_builtin("uppercase", builtins, argument_tests=["string"], invoke=str.upper)
    define_builtin("str", builtins, argument_tests=["string|number|boolean|null"], invoke=render_text)
    define_builtin("number", builtins, argument_tests=["string"], invoke=to_number)
    define_builtin("len", builtins, argument_tests=["string|array"], invoke=len)
    define_builtin("strip", builtins, argument_tests=["string"], invoke=str.strip)
    define_builtin("rstrip", builtins, argument_tests=["string"], invoke=str.rstrip)
    define_builtin("lstrip", builtins, argument_tests=["string"], invoke=str.lstrip)
    define_builtin("split", builtins, min_args=1, variadic="string|number", invoke=_split)
    define_builtin("join", builtins, argument_tests=["array", "string|number"], invoke=_join)

    # Miscellaneous
    define_builtin("fromNow", builtins, min_args=1, variadic="string",
                   needs_context=True, invoke=_from_now)
    define_builtin("typeof", builtins, argument_tests=[ALL_KINDS], invoke=_typeof)
    define_builtin("defined", builtins, argument_tests=["string"],
                   needs_context=True, invoke=_defined)

    logger.debug(f"Built {len(builtins)} builtins: {sorted(builtins)}")
    return MappingProxyType(builtins)
