"""Type resolution for curried, generic, partially applied functions."""

from ts_type_assist.resolver.alias_walker import (
    AliasResolutionError,
    AliasWalk,
    walk_aliases,
)
from ts_type_assist.resolver.call_sites import (
    CallSite,
    UsageExpression,
    parse_usage_expression,
)
from ts_type_assist.resolver.evaluators import (
    FullTypeFunctionEvaluator,
    FunctionTypeEvaluator,
    select_evaluator,
    substitute_generics,
)
from ts_type_assist.resolver.functions import (
    FunctionExpression,
    NonFunctionReturnType,
    StandardFunction,
    get_all_return_types,
    parse_function_type,
)
from ts_type_assist.resolver.leaf_resolver import resolve_leaf_type
from ts_type_assist.resolver.results import (
    GenericBinding,
    OriginalCallChain,
    ResolvedFunctionValue,
    TypeResolution,
)
from ts_type_assist.resolver.type_resolver import resolve_expression_type

__all__ = [
    # Function values
    "StandardFunction",
    "FunctionExpression",
    "NonFunctionReturnType",
    "get_all_return_types",
    "parse_function_type",
    # Call sites
    "CallSite",
    "UsageExpression",
    "parse_usage_expression",
    # Results
    "OriginalCallChain",
    "ResolvedFunctionValue",
    "GenericBinding",
    "TypeResolution",
    # Alias walking
    "AliasResolutionError",
    "AliasWalk",
    "walk_aliases",
    # Evaluation
    "FunctionTypeEvaluator",
    "FullTypeFunctionEvaluator",
    "select_evaluator",
    "substitute_generics",
    "resolve_leaf_type",
    "resolve_expression_type",
]
