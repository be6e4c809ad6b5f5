"""Resolve the type of a usage expression against a source snapshot."""

import logging

from ts_type_assist.models import FunctionDeclaration, PropertySignature, VariableDeclaration
from ts_type_assist.resolver.alias_walker import AliasResolutionError, AliasWalk, walk_aliases
from ts_type_assist.resolver.call_sites import UsageExpression, parse_usage_expression
from ts_type_assist.resolver.evaluators import select_evaluator
from ts_type_assist.resolver.functions import NonFunctionReturnType
from ts_type_assist.resolver.leaf_resolver import resolve_leaf_type
from ts_type_assist.resolver.results import OriginalCallChain, TypeResolution
from ts_type_assist.settings import TypeAssistSettings
from ts_type_assist.text_scanner import is_function_type

logger = logging.getLogger(__name__)


def resolve_expression_type(
    expression: str,
    index,
    settings: TypeAssistSettings | None = None,
) -> TypeResolution | None:
    """Infer the type to annotate ``expression`` with.

    Args:
        expression: A reference optionally followed by calls, e.g. ``add(1)(2)``
        index: The SourceIndex the reference is resolved in
        settings: Resolution preferences

    Returns:
        TypeResolution, or None when no suggestion can be made at all
    """
    settings = settings or TypeAssistSettings()

    usage = parse_usage_expression(expression)
    if usage is None:
        logger.info(f"Not a reference or call chain: {expression}")
        return None

    declaration = index.resolve(usage.reference)
    if declaration is None:
        logger.info(f"Reference {usage.reference} does not resolve, no suggestion")
        return None

    if not usage.call_sites and _has_value_annotation(declaration):
        # An uncalled variable is exactly what its annotation says
        return _leaf_resolution(usage, declaration)

    try:
        walk = walk_aliases(declaration, index, max_depth=settings.max_alias_depth)
    except AliasResolutionError as e:
        logger.info(f"No function value for {usage.reference} ({e.reason}): {e}")
        return _leaf_resolution(usage, declaration)

    chain = OriginalCallChain.of([*walk.call_sites, *usage.call_sites])
    call_count = len(chain.call_sites) if chain else 0

    evaluator = select_evaluator(chain, walk.resolved)
    if evaluator is None:
        logger.info(f"Empty signature for {usage.reference}, using its declared type")
        return _leaf_resolution(usage, declaration)

    uncalled = None if chain else _uncalled_signature(walk)
    if uncalled is not None:
        type_text, strategy = uncalled, "function_signature"
    else:
        type_text, strategy = evaluator.evaluate(), evaluator.strategy

    logger.info(f"Resolved {usage.reference} with {call_count} calls to {type_text}")
    return TypeResolution(
        reference=usage.reference,
        type_text=type_text,
        strategy=strategy,
        call_count=call_count,
    )


def _uncalled_signature(walk: AliasWalk) -> str | None:
    """``(params) => R`` for an uncalled function whose return is not curried."""
    if not isinstance(walk.resolved.value, NonFunctionReturnType):
        return None
    declaration = walk.declaration
    if isinstance(declaration, (FunctionDeclaration, PropertySignature)) and declaration.parameter_text:
        return f"{declaration.parameter_text} => {walk.resolved.value.type_text}"
    return None


def _has_value_annotation(declaration) -> bool:
    return (
        isinstance(declaration, VariableDeclaration)
        and bool(declaration.type_text)
        and not is_function_type(declaration.type_text)
    )


def _leaf_resolution(usage: UsageExpression, declaration) -> TypeResolution:
    """Declared type of an uncalled reference.

    Calling something that leads to no function value leaves nothing to
    annotate with, so a called expression is always untyped here.
    """
    if usage.call_sites:
        logger.info(f"{usage.reference} is called but has no function value, leaving it untyped")
        type_text = None
    else:
        type_text = resolve_leaf_type(declaration)
    return TypeResolution(
        reference=usage.reference,
        type_text=type_text,
        strategy="leaf" if type_text is not None else "untyped",
        call_count=len(usage.call_sites),
    )
