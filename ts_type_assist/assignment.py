"""Turn resolved types into variable statements."""

import logging
import re

from ts_type_assist.models import VariableDeclaration
from ts_type_assist.resolver.results import TypeResolution
from ts_type_assist.resolver.type_resolver import resolve_expression_type
from ts_type_assist.settings import TypeAssistSettings

logger = logging.getLogger(__name__)


def terminate_statement(statement: str, settings: TypeAssistSettings) -> str:
    """Add or strip the trailing semicolon of a statement."""
    statement = statement.rstrip()
    if settings.end_with_semicolon:
        return statement if statement.endswith(";") else f"{statement};"
    return statement.removesuffix(";").rstrip()


def is_usable_type(type_text: str | None, settings: TypeAssistSettings) -> bool:
    """Whether a type is worth writing down as an annotation."""
    return bool(type_text) and type_text.strip() not in settings.invalid_return_types


def build_assignment(
    expression: str,
    resolution: TypeResolution | None,
    settings: TypeAssistSettings | None = None,
) -> str:
    """Assign an expression to a new variable.

    ``add(1)`` resolved to ``(b: number) => number`` becomes
    ``const val: (b: number) => number = add(1);``. Without a usable type the
    variable is declared untyped: ``const val = add(1);``.
    """
    settings = settings or TypeAssistSettings()
    expression = expression.strip().removesuffix(";").rstrip()
    keyword = settings.declaration_keyword.value
    name = settings.placeholder_name

    type_text = resolution.type_text if resolution else None
    if is_usable_type(type_text, settings):
        statement = f"{keyword} {name}: {type_text} = {expression}"
    else:
        logger.debug(f"No usable type for {expression}, declaring it untyped")
        statement = f"{keyword} {name} = {expression}"
    return terminate_statement(statement, settings)


def add_type_to_variable(
    declaration: VariableDeclaration,
    index,
    settings: TypeAssistSettings | None = None,
) -> str | None:
    """Rewrite a variable statement with the type of its initializer.

    ``const a1 = special<string, number>("hi", 2);`` becomes
    ``const a1: (a: string) => (b: number) => string = special<...>("hi", 2);``.

    Returns:
        The rewritten statement, or None when the variable is already typed,
        has no initializer, or the initializer has no usable type
    """
    settings = settings or TypeAssistSettings()
    if declaration.type_text:
        logger.info(f"{declaration.name} already has a type")
        return None
    if not declaration.initializer:
        logger.info(f"{declaration.name} has no initializer to resolve")
        return None

    resolution = resolve_expression_type(declaration.initializer, index, settings)
    type_text = resolution.type_text if resolution else None
    if not is_usable_type(type_text, settings):
        logger.info(f"No usable type for {declaration.name}")
        return None

    pattern = re.compile(rf"(?<![\w$]){re.escape(declaration.name)}(?![\w$])")
    statement = pattern.sub(lambda m: f"{m.group(0)}: {type_text}", declaration.text, count=1)
    return terminate_statement(statement, settings)
