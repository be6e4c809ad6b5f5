"""Evaluate the remaining type of a function after its calls are applied."""

import logging
import re

from ts_type_assist.resolver.functions import get_all_return_types
from ts_type_assist.resolver.results import (
    GenericBinding,
    OriginalCallChain,
    ResolvedFunctionValue,
)

logger = logging.getLogger(__name__)


def substitute_generics(text: str, binding: GenericBinding) -> str:
    """Replace each bound type parameter in ``text`` with its concrete type.

    Names only match as whole identifiers, so ``T`` leaves ``Type1`` alone.
    All names are replaced in one pass; a binding of ``T -> A, A -> number``
    turns ``(t: T, a: A)`` into ``(t: A, a: number)``.
    """
    replacements = binding.as_dict()
    if not replacements:
        return text

    names = sorted(replacements, key=len, reverse=True)
    pattern = re.compile(
        r"(?<![\w$])(" + "|".join(re.escape(name) for name in names) + r")(?![\w$])"
    )
    return pattern.sub(lambda match: replacements[match.group(1)], text)


class FunctionTypeEvaluator:
    """Type of a function value after the calls in a chain are applied.

    ``n`` call sites select entry ``n`` of the value's return types, so for
    ``function special<A, B>(a: A): (b: B) => A`` called as
    ``special<string, number>("x")`` the result is ``(b: number) => string``.
    Calls beyond the last layer still give the terminal type.
    """

    strategy = "function_type"

    def __init__(self, chain: OriginalCallChain, resolved: ResolvedFunctionValue):
        self.chain = chain
        self.resolved = resolved

    def evaluate(self) -> str:
        return_types = get_all_return_types(self.resolved.value)
        calls = len(self.chain.call_sites)
        index = min(calls, len(return_types) - 1)
        if calls > index:
            logger.debug(f"{calls} calls applied to {len(return_types) - 1} layers, using terminal type")

        binding = GenericBinding.bind(
            self.resolved.declared_generic_names,
            self.chain.actual_generic_arguments,
        )
        return substitute_generics(return_types[index], binding)


class FullTypeFunctionEvaluator:
    """Full signature of a function value that is referenced but never called.

    Without a call there are no generic arguments, so nothing is substituted.
    """

    strategy = "full_type"

    def __init__(self, resolved: ResolvedFunctionValue):
        self.resolved = resolved

    def evaluate(self) -> str:
        return get_all_return_types(self.resolved.value)[0]


def select_evaluator(
    chain: OriginalCallChain | None,
    resolved: ResolvedFunctionValue | None,
) -> FunctionTypeEvaluator | FullTypeFunctionEvaluator | None:
    """Pick the evaluator for whatever parts of the resolution are present.

    Returns:
        An evaluator, or None when there is no usable function value
    """
    if resolved is None or not get_all_return_types(resolved.value):
        return None
    if chain is not None:
        return FunctionTypeEvaluator(chain, resolved)
    return FullTypeFunctionEvaluator(resolved)
