"""Parse the call applications written at a usage expression."""

import logging
import re
from dataclasses import dataclass

from ts_type_assist.text_scanner import find_closing, skip_whitespace, split_top_level

logger = logging.getLogger(__name__)

# Regex to match the referenced name: name or obj.member.member
REFERENCE_PATTERN = re.compile(r"[A-Za-z_$][\w$]*(?:\s*\.\s*[A-Za-z_$][\w$]*)*")


@dataclass(frozen=True)
class CallSite:
    """One application of a function, such as ``<string>("a", 1)``."""

    argument_text: str  # verbatim parenthesised arguments, "()" when empty
    actual_generic_arguments: tuple[str, ...] = ()

    def __str__(self) -> str:
        return self.argument_text


@dataclass(frozen=True)
class UsageExpression:
    """A reference followed by the calls applied to it, in source order."""

    reference: str
    call_sites: tuple[CallSite, ...]


def parse_usage_expression(expression: str) -> UsageExpression | None:
    """Split a usage expression into its reference and call sites.

    ``print<string, number>("4", 5)("sss")`` gives the reference ``print``
    and the call sites ``("4", 5)`` (with generic arguments
    ``[string, number]``) and ``("sss")``, first applied first.

    Args:
        expression: The expression text, optionally ending with ``;``

    Returns:
        UsageExpression, or None if the expression is not a reference
        followed only by call applications
    """
    text = expression.strip().rstrip(";").rstrip()
    match = REFERENCE_PATTERN.match(text)
    if not match:
        logger.debug(f"No reference at start of expression: {text}")
        return None

    reference = re.sub(r"\s+", "", match.group(0))
    call_sites = []
    pos = match.end()

    while True:
        pos = skip_whitespace(text, pos)
        if pos >= len(text):
            break

        generic_arguments: tuple[str, ...] = ()
        if text[pos] == "<":
            close = find_closing(text, pos)
            if close == -1:
                return None
            generic_arguments = tuple(split_top_level(text[pos + 1 : close]))
            pos = skip_whitespace(text, close + 1)

        if pos >= len(text) or text[pos] != "(":
            logger.debug(f"Expression is not a plain call chain: {text}")
            return None

        close = find_closing(text, pos)
        if close == -1:
            logger.debug(f"Unbalanced call arguments in: {text}")
            return None
        call_sites.append(CallSite(text[pos : close + 1], generic_arguments))
        pos = close + 1

    logger.debug(f"Usage of {reference} with {len(call_sites)} call sites")
    return UsageExpression(reference, tuple(call_sites))


def extract_actual_generic_arguments(call_sites) -> tuple[str, ...]:
    """Generic arguments of the first call site that declares any.

    Later call sites declaring different arguments are ignored with a warning.
    """
    first: tuple[str, ...] = ()
    for call_site in call_sites:
        arguments = call_site.actual_generic_arguments
        if not arguments:
            continue
        if not first:
            first = arguments
        elif arguments != first:
            logger.warning(
                f"Ignoring generic arguments <{', '.join(arguments)}>, "
                f"using <{', '.join(first)}> from the first call"
            )
    return first
