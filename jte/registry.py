"""
JTE Builtin Registry
====================

Merges the builtin catalog into a caller-supplied evaluation context and
provides lookup helpers for evaluators and the command line.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from rapidfuzz import fuzz, process

from .builtin_exceptions import UnknownBuiltinError
from .builtins import build_builtins, own_names
from .utils import BUILTIN_MARKER

logger = logging.getLogger(__name__)

SUGGESTION_CUTOFF = 60
SUGGESTION_LIMIT = 3


def build_context(context: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """
    Returns a new mapping holding every builtin plus the caller's bindings.

    This is a shallow merge of the own keys of `context` (only the first
    map of a `ChainMap`): a key present there wins over the builtin of the
    same name. Neither the builtin registry nor `context` is modified.

    :param context: The caller's bindings (variables, ``now``, functions).
    :return: A fresh dict suitable for handing to an evaluator.
    """
    merged = dict(build_builtins())
    if context:
        # only own bindings; the parents of a ChainMap are inherited
        own = own_names(context)
        shadowed = [key for key in own if key in merged]
        if shadowed:
            logger.debug(f"Context bindings shadow builtins: {shadowed}")
        merged.update(own)
    return merged


def is_builtin(value: Any) -> bool:
    """True if `value` was produced by `define_builtin`."""
    return getattr(value, BUILTIN_MARKER, False) is True


def suggest_builtins(name: str) -> List[str]:
    matches = process.extract(
        name,
        list(build_builtins()),
        scorer=fuzz.ratio,
        limit=SUGGESTION_LIMIT,
        score_cutoff=SUGGESTION_CUTOFF,
    )
    return [choice for choice, _score, _index in matches]


def get_builtin(name: str):
    """
    Looks up a builtin by name.

    :raises UnknownBuiltinError: with close-match suggestions if there is no
        builtin called `name`.
    """
    builtins = build_builtins()
    if name in builtins:
        return builtins[name]

    suggestions = suggest_builtins(name)
    logger.debug(f"Unknown builtin '{name}', suggestions: {suggestions}")
    raise UnknownBuiltinError(f"unknown builtin '{name}'", suggestions=suggestions)


def describe_builtins() -> List[Dict[str, Any]]:
    out = []
    for name, fn in sorted(build_builtins().items()):
        spec = fn.builtin_spec
        out.append({
            "name": name,
            "signature": spec.describe(),
            "arguments": [sig.text for sig in spec.argument_tests],
            "variadic": spec.variadic.text if spec.variadic is not None else None,
            "min_args": spec.min_args,
            "needs_context": spec.needs_context,
        })
    return out
