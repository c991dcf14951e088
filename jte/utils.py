import logging
from typing import Any, Callable, MutableMapping, NamedTuple, Optional, Sequence, Tuple, Union

from .builtin_exceptions import ArityError, ArgumentTypeError
from .type_utils import TypeSignature, kind_name, parse_signature

logger = logging.getLogger(__name__)

BUILTIN_MARKER = "jte_builtin"


class BuiltinSpec(NamedTuple):
    name: str
    argument_tests: Tuple[TypeSignature, ...]
    min_args: Optional[int]
    variadic: Optional[TypeSignature]
    needs_context: bool
    invoke: Callable

    def describe(self) -> str:
        """Human readable call signature, e.g. ``join(array, string|number)``."""
        if self.variadic is not None:
            params = f"...{self.variadic}"
            if self.min_args:
                params += f" (at least {self.min_args})"
        else:
            params = ", ".join(str(sig) for sig in self.argument_tests)
        return f"{self.name}({params})"


def define_builtin(
    name: str,
    target: MutableMapping[str, Any],
    *,
    argument_tests: Sequence[Union[str, TypeSignature]] = (),
    min_args: Optional[int] = None,
    variadic: Optional[Union[str, TypeSignature]] = None,
    needs_context: bool = False,
    invoke: Callable,
) -> Callable:
    """
    Wraps a native Python function as a JTE builtin and installs it in
    `target` under `name`.

    Signatures are parsed once, here, into `TypeSignature` objects. The
    returned callable is always invoked as ``f(context, *args)`` and, on
    every call:

    1. Fixed arity floor: if the builtin is not variadic and fewer arguments
       than `argument_tests` are passed, an `ArityError` is raised.
    2. Minimum count: if `min_args` is set and fewer arguments are passed,
       an `ArityError` is raised.
    3. Kind checks: every argument present is checked against the signature
       for its position (the `variadic` signature for all positions when
       variadic). The first mismatch raises `ArgumentTypeError` carrying the
       1-based position, the expected signature and the kind found.
       Arguments past the end of a fixed signature are passed through
       unchecked and are not forwarded to `invoke`.
    4. Dispatch: `invoke(context, *args)` when `needs_context` is true,
       otherwise `invoke(*args)`. The shape is chosen once, at definition.

    Errors raised by `invoke` itself are propagated untouched.

    :param name: The builtin name as seen from expressions.
    :param target: Mapping the wrapped callable is stored into.
    :param argument_tests: One signature per fixed positional argument.
    :param min_args: Lower bound on the argument count (mainly for variadics).
    :param variadic: Signature shared by every argument; overrides `argument_tests`.
    :param needs_context: Pass the evaluation context as first argument to `invoke`.
    :param invoke: The native implementation.
    :return: The wrapped callable, also stored as ``target[name]``.
    """
    spec = BuiltinSpec(
        name=name,
        argument_tests=tuple(parse_signature(test) for test in argument_tests),
        min_args=min_args,
        variadic=parse_signature(variadic) if variadic is not None else None,
        needs_context=needs_context,
        invoke=invoke,
    )

    def check(args: Tuple[Any, ...]) -> None:
        if spec.variadic is None and len(args) < len(spec.argument_tests):
            raise ArityError(
                f"expected {len(spec.argument_tests)} arguments, found {len(args)}: too few arguments",
                builtin=name, expected=len(spec.argument_tests), found=len(args),
            )

        if spec.min_args and len(args) < spec.min_args:
            raise ArityError(
                f"expected at least {spec.min_args} arguments, found {len(args)}",
                builtin=name, expected=spec.min_args, found=len(args),
            )

        for i, arg in enumerate(args):
            if spec.variadic is not None:
                signature = spec.variadic
            elif i < len(spec.argument_tests):
                signature = spec.argument_tests[i]
            else:
                break
            if not signature.matches(arg):
                found = kind_name(arg)
                raise ArgumentTypeError(
                    f"expected argument {i + 1} to be {signature}, found {found}",
                    builtin=name, position=i + 1, expected=signature.text, found=found,
                )

    # Surplus arguments to a fixed signature are accepted but not forwarded.
    forwarded = None if spec.variadic is not None else len(spec.argument_tests)

    if needs_context:
        def builtin(context, *args):
            logger.debug(f"Invoking builtin '{name}' with args: {args}")
            check(args)
            return invoke(context, *args[:forwarded])
    else:
        def builtin(context, *args):
            logger.debug(f"Invoking builtin '{name}' with args: {args}")
            check(args)
            return invoke(*args[:forwarded])

    builtin.__name__ = name
    builtin.__qualname__ = name
    builtin.__doc__ = spec.describe()
    setattr(builtin, BUILTIN_MARKER, True)
    builtin.builtin_spec = spec

    target[name] = builtin
    logger.debug(f"Defined builtin {spec.describe()}")
    return builtin
