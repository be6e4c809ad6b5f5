"""Formatting and resolution preferences passed explicitly to the caller."""

from dataclasses import dataclass, field
from enum import Enum


class DeclarationKeyword(Enum):
    """Keyword used to declare the synthesized variable."""

    CONST = "const"
    LET = "let"
    VAR = "var"


# Aliases followed before a reference chain is given up on
MAX_ALIAS_DEPTH = 32

# Types that are not worth writing down as an annotation
INVALID_RETURN_TYPES = frozenset({"any", "void", "undefined", "null", "never"})


@dataclass(frozen=True)
class TypeAssistSettings:
    """Preferences for one resolution request."""

    declaration_keyword: DeclarationKeyword = DeclarationKeyword.CONST
    end_with_semicolon: bool = True
    placeholder_name: str = "val"
    max_alias_depth: int = MAX_ALIAS_DEPTH
    invalid_return_types: frozenset[str] = field(default=INVALID_RETURN_TYPES)
