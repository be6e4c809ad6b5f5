"""Declared types of references that are not functions."""

import logging

from ts_type_assist.models import Declaration, PropertySignature, VariableDeclaration
from ts_type_assist.resolver.functions import PLACEHOLDER_TYPE

logger = logging.getLogger(__name__)


def resolve_leaf_type(declaration: Declaration) -> str | None:
    """Return the type a non-function declaration was declared with.

    Properties without a type annotation get the placeholder type. Variables
    without one give None, which means an untyped assignment.
    """
    match declaration:
        case PropertySignature(type_text=type_text):
            return type_text or PLACEHOLDER_TYPE
        case VariableDeclaration(type_text=type_text):
            return type_text
    logger.debug(f"No declared type for {declaration!r}")
    return None
