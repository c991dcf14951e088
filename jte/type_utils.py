"""
JTE Type Utilities
==================

Classification of values into the seven JTE value kinds, and the
`|`-separated type signatures builtins use to constrain their arguments.

The kinds partition the JSON value universe: every value produced by
decoding JSON (plus callables placed in an evaluation context) matches
exactly one predicate. Values outside that universe match none.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Mapping
from typing import Any, Callable, Dict, FrozenSet, NamedTuple, Optional

from .builtin_exceptions import SignatureError

logger = logging.getLogger(__name__)


class ValueKind(str, enum.Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"
    NULL = "null"
    FUNCTION = "function"

    def __str__(self) -> str:
        return self.value


def is_string(value: Any) -> bool:
    return isinstance(value, str)


def is_number(value: Any) -> bool:
    # bool is a subclass of int in Python, but a distinct kind here
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_bool(value: Any) -> bool:
    return isinstance(value, bool)


def is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def is_object(value: Any) -> bool:
    return isinstance(value, Mapping)


def is_null(value: Any) -> bool:
    return value is None


def is_function(value: Any) -> bool:
    return callable(value) and not (
        is_string(value) or is_number(value) or is_bool(value)
        or is_array(value) or is_object(value)
    )


KIND_PREDICATES: Dict[ValueKind, Callable[[Any], bool]] = {
    ValueKind.STRING: is_string,
    ValueKind.NUMBER: is_number,
    ValueKind.BOOLEAN: is_bool,
    ValueKind.ARRAY: is_array,
    ValueKind.OBJECT: is_object,
    ValueKind.NULL: is_null,
    ValueKind.FUNCTION: is_function,
}

# Order used by `typeof`; null comes last.
TYPEOF_ORDER = (
    ValueKind.STRING,
    ValueKind.NUMBER,
    ValueKind.BOOLEAN,
    ValueKind.ARRAY,
    ValueKind.OBJECT,
    ValueKind.FUNCTION,
    ValueKind.NULL,
)


def classify(value: Any) -> Optional[ValueKind]:
    """
    Returns the kind of `value`, or None if it lies outside the JTE value
    universe (a `set`, a `bytes` object, ...).
    """
    for kind in TYPEOF_ORDER:
        if KIND_PREDICATES[kind](value):
            return kind
    return None


def kind_name(value: Any) -> str:
    """Kind name for diagnostics; falls back to the Python type name."""
    kind = classify(value)
    return kind.value if kind is not None else type(value).__name__


class TypeSignature(NamedTuple):
    """
    The set of kinds acceptable at one argument position.

    `text` keeps the declaration (e.g. ``"string|number"``) so error
    messages can quote it back.
    """
    text: str
    kinds: FrozenSet[ValueKind]

    def matches(self, value: Any) -> bool:
        return any(KIND_PREDICATES[kind](value) for kind in self.kinds)

    def __str__(self) -> str:
        return self.text


def parse_signature(text: str) -> TypeSignature:
    """
    Parses a `|`-separated list of kind names into a TypeSignature.

    :raises SignatureError: if the text is empty or names an unknown kind.
    """
    if isinstance(text, TypeSignature):
        return text
    if not isinstance(text, str) or not text.strip():
        raise SignatureError("Type signature must be a non-empty string.", signature=text)

    kinds = set()
    for part in text.split("|"):
        name = part.strip()
        try:
            kinds.add(ValueKind(name))
        except ValueError:
            raise SignatureError(f"Unknown value kind '{name}'.", signature=text) from None

    normalized = "|".join(part.strip() for part in text.split("|"))
    logger.debug(f"Parsed type signature {normalized!r} into {sorted(k.value for k in kinds)}")
    return TypeSignature(normalized, frozenset(kinds))
