"""
JTE Builtin Exceptions
======================

This module contains the exception classes raised when declaring or
invoking JTE builtins.
"""

from __future__ import annotations
from typing import Any, List, Optional


class SignatureError(ValueError):
    """Raised when a builtin is declared with a malformed type signature."""

    def __init__(self, message: str, *, signature: Any = None):
        super().__init__(message)
        self.signature = signature


class BuiltinInvocationError(Exception):
    """Base class for every failure raised by a builtin call.

    Attributes
    ----------
    builtin : str | None
        Name of the builtin that rejected the call.
    """

    def __init__(self, message: str, *, builtin: Optional[str] = None):
        super().__init__(message)
        self.builtin = builtin

    def __str__(self) -> str:
        base = super().__str__()
        if self.builtin is not None:
            return f"builtin: {self.builtin}: {base}"
        return base


class ArityError(BuiltinInvocationError, TypeError):
    """Too few arguments for a fixed or variadic signature."""

    def __init__(self, message: str, *, builtin: Optional[str] = None,
                 expected: Optional[int] = None, found: Optional[int] = None):
        super().__init__(message, builtin=builtin)
        self.expected = expected
        self.found = found


class ArgumentTypeError(BuiltinInvocationError, TypeError):
    """An argument's kind does not satisfy the signature for its position.

    Attributes
    ----------
    position : int
        1-based position of the offending argument.
    expected : str
        The signature text, e.g. ``"string|array"``.
    found : str
        The kind of the value actually passed.
    """

    def __init__(self, message: str, *, builtin: Optional[str] = None,
                 position: Optional[int] = None, expected: Optional[str] = None,
                 found: Optional[str] = None):
        super().__init__(message, builtin=builtin)
        self.position = position
        self.expected = expected
        self.found = found


class InvalidKindError(BuiltinInvocationError, TypeError):
    """A value could not be classified as any JTE kind."""


class UnknownBuiltinError(BuiltinInvocationError, KeyError):
    """No builtin is registered under the requested name."""

    def __init__(self, message: str, *, builtin: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message, builtin=builtin)
        self.suggestions = suggestions or []

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        base = Exception.__str__(self)
        if self.suggestions:
            base += f" (did you mean: {', '.join(self.suggestions)}?)"
        return base


class RelativeTimeError(BuiltinInvocationError, ValueError):
    """A relative-time offset or reference timestamp could not be parsed."""
