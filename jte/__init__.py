from .builtin_exceptions import (
    ArgumentTypeError,
    ArityError,
    BuiltinInvocationError,
    InvalidKindError,
    RelativeTimeError,
    SignatureError,
    UnknownBuiltinError,
)
from .builtins import build_builtins
from .dsl.from_now import from_now
from .registry import build_context, describe_builtins, get_builtin, is_builtin
from .type_utils import TypeSignature, ValueKind, classify, parse_signature
from .utils import BuiltinSpec, define_builtin

__version__ = "0.1.0"

__all__ = [
    "ArgumentTypeError",
    "ArityError",
    "BuiltinInvocationError",
    "BuiltinSpec",
    "InvalidKindError",
    "RelativeTimeError",
    "SignatureError",
    "TypeSignature",
    "UnknownBuiltinError",
    "ValueKind",
    "build_builtins",
    "build_context",
    "classify",
    "define_builtin",
    "describe_builtins",
    "from_now",
    "get_builtin",
    "is_builtin",
    "parse_signature",
]
