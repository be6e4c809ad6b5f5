"""Walk variable aliases back to the function they were derived from."""

import logging
from dataclasses import dataclass

from ts_type_assist.models import (
    Declaration,
    FunctionDeclaration,
    PropertySignature,
    VariableDeclaration,
)
from ts_type_assist.resolver.call_sites import CallSite, parse_usage_expression
from ts_type_assist.resolver.functions import (
    PLACEHOLDER_TYPE,
    FunctionExpression,
    FunctionValue,
    NonFunctionReturnType,
    StandardFunction,
    parse_function_type,
)
from ts_type_assist.resolver.results import ResolvedFunctionValue
from ts_type_assist.settings import MAX_ALIAS_DEPTH
from ts_type_assist.text_scanner import is_function_type

logger = logging.getLogger(__name__)


class AliasResolutionError(Exception):
    """An alias chain that does not lead to a function value."""

    def __init__(self, message: str, reason: str = "unresolved"):
        super().__init__(message)
        self.reason = reason  # "unresolved", "not_a_function", "cycle", "depth"


@dataclass(frozen=True)
class AliasWalk:
    """The terminal function value and every call made on the way to it."""

    call_sites: tuple[CallSite, ...]
    resolved: ResolvedFunctionValue
    declaration: Declaration


def walk_aliases(declaration: Declaration, index, max_depth: int = MAX_ALIAS_DEPTH) -> AliasWalk:
    """Follow aliases from ``declaration`` back to the original function.

    Read bottom to top::

        function special<A, B>(a: A, b: B): (a: A) => (b: B) => A { ... }

        const a1 = special<string, number>("hi", 2);
        const a2 = a1("test");
        a2(500);

    Starting at ``a2``, each variable's own calls are put in front of the
    ones already collected, giving ``("hi", 2), ("test")``. The caller adds
    the usage site's ``(500)`` last, which reconstructs
    ``special<string, number>("hi", 2)("test")(500)``.

    Args:
        declaration: The declaration the usage site refers to
        index: Resolves the references found in initializers
        max_depth: Number of aliases to follow before giving up

    Returns:
        AliasWalk with the root-to-leaf call sites and the function value

    Raises:
        AliasResolutionError: If the chain dangles, loops, is too deep, or
            ends somewhere that is not a function
    """
    call_sites: list[CallSite] = []
    visited = set()
    current = declaration

    for _ in range(max_depth + 1):
        if current in visited:
            raise AliasResolutionError(f"Alias cycle through {current.name}", reason="cycle")
        visited.add(current)

        found = _function_value(current)
        if found is not None:
            value, generic_names = found
            logger.info(f"Resolved {current.name} to {type(value).__name__} after {len(visited) - 1} aliases")
            return AliasWalk(
                call_sites=tuple(call_sites),
                resolved=ResolvedFunctionValue.of(value, generic_names),
                declaration=current,
            )

        # A non-function annotation such as ``Pair`` still leads back through its initializer
        if not isinstance(current, VariableDeclaration):
            raise AliasResolutionError(f"{current.name} has no function value", reason="not_a_function")

        usage = parse_usage_expression(current.initializer or "")
        if usage is None:
            raise AliasResolutionError(
                f"Initializer of {current.name} is not a reference", reason="not_a_function"
            )

        # Calls closer to the root come first
        call_sites[:0] = usage.call_sites
        logger.debug(f"{current.name} = {usage.reference}{''.join(map(str, usage.call_sites))}")

        resolved = index.resolve(usage.reference)
        if resolved is None:
            raise AliasResolutionError(f"Cannot resolve {usage.reference}", reason="unresolved")
        current = resolved

    raise AliasResolutionError(f"More than {max_depth} aliases to follow", reason="depth")


def _function_value(declaration: Declaration) -> tuple[FunctionValue, tuple[str, ...]] | None:
    """The function value declared directly at ``declaration``, if any.

    Returns:
        Tuple of (function value, declared generic names), or None when the
        declaration is an alias that must be followed further
    """
    match declaration:
        case VariableDeclaration(type_text=type_text) if is_function_type(type_text):
            # The annotation is authoritative over an inline initializer
            value = parse_function_type(type_text)
            return (value, ()) if value is not None else None

        case VariableDeclaration(initializer=initializer) if initializer:
            expression = FunctionExpression.from_source(initializer)
            if expression is None:
                return None
            return expression, expression.declared_generic_names

        case FunctionDeclaration(parameter_text=params, return_type_text=return_type):
            return _declared_function(params, return_type, declaration.generic_names)

        case PropertySignature(parameter_text=params, type_text=type_text) if declaration.is_method:
            return _declared_function(params, type_text, declaration.generic_names)

        case PropertySignature(type_text=type_text) if is_function_type(type_text):
            value = parse_function_type(type_text)
            return (value, ()) if value is not None else None

    return None


def _declared_function(
    parameter_text: str, return_type: str | None, generic_names: tuple[str, ...]
) -> tuple[FunctionValue, tuple[str, ...]]:
    """A declared parameter list and return type as a function value.

    A curried return type keeps every layer; anything else is the terminal
    type of the declaration.
    """
    if is_function_type(return_type):
        value = StandardFunction.from_parts(parameter_text, return_type, generic_names)
        if value is not None:
            return value, generic_names
    return NonFunctionReturnType(return_type or PLACEHOLDER_TYPE), generic_names
