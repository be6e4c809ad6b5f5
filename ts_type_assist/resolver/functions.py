"""Function values: curried signatures split into their arrow layers.

A function value is one of three variants:

* ``StandardFunction`` - a declared parameter list plus a (possibly curried)
  return type, e.g. ``function f<T>(a: T): (b: T) => string``.
* ``FunctionExpression`` - an inline arrow chain such as
  ``(a: number) => (b: number): number => a + b``.
* ``NonFunctionReturnType`` - plain type text with nothing left to call.

Every variant exposes a signature whose top-level arrows separate the curried
layers. Applying ``k`` calls to the value leaves the suffix that starts at
segment ``k``::

    (t: T, a: A) => (c: A) => (d: T) => string
    (c: A) => (d: T) => string
    (d: T) => string
    string
"""

import logging
import re
from dataclasses import dataclass

from ts_type_assist.text_scanner import (
    ARROW,
    QUOTES,
    find_closing,
    parse_type_parameter_names,
    read_identifier,
    read_type_annotation,
    skip_string,
    skip_whitespace,
    split_arrow_segments,
)

logger = logging.getLogger(__name__)

# Stands in for a type that is not declared anywhere
PLACEHOLDER_TYPE = "any"

ARROW_SEPARATOR = f" {ARROW} "

FUNCTION_KEYWORD_PATTERN = re.compile(r"function\b\s*\*?\s*(?:[A-Za-z_$][\w$]*)?\s*")

ASYNC_PATTERN = re.compile(r"async\b\s*")


@dataclass(frozen=True)
class StandardFunction:
    """A declared parameter list with its curried return type."""

    parameter_text: str
    curried_return_text: str
    declared_generic_names: tuple[str, ...] = ()

    @classmethod
    def from_parts(
        cls,
        parameter_text: str | None,
        return_text: str | None,
        declared_generic_names: tuple[str, ...] = (),
    ) -> "StandardFunction | None":
        if not parameter_text or not parameter_text.strip():
            return None
        if not return_text or not return_text.strip():
            return None
        return cls(parameter_text.strip(), return_text.strip(), tuple(declared_generic_names))


@dataclass(frozen=True)
class FunctionExpression:
    """An inline arrow chain, kept as the source text it was written as."""

    raw_arrow_chain_text: str
    declared_generic_names: tuple[str, ...] = ()

    @classmethod
    def from_source(
        cls, text: str | None, declared_generic_names: tuple[str, ...] = ()
    ) -> "FunctionExpression | None":
        """Build from source such as ``(a) => (b): number => a + b``.

        Returns None when the text is not a function expression. Type
        parameters on the first layer are used when none are given.
        """
        if not text:
            return None
        chain = parse_arrow_chain(text)
        if chain is None:
            return None
        _, _, generic_names = chain
        return cls(text.strip(), tuple(declared_generic_names) or generic_names)


@dataclass(frozen=True)
class NonFunctionReturnType:
    """Type text with no further layers to apply."""

    type_text: str


FunctionValue = StandardFunction | FunctionExpression | NonFunctionReturnType


def signature(value: FunctionValue) -> str:
    """The full arrow-separated signature of a function value."""
    match value:
        case StandardFunction(parameter_text=params, curried_return_text=returns):
            return f"{params}{ARROW_SEPARATOR}{returns}"
        case FunctionExpression(raw_arrow_chain_text=raw):
            chain = parse_arrow_chain(raw)
            if chain is None:
                return ""
            layers, terminal, _ = chain
            return ARROW_SEPARATOR.join([*layers, terminal])
        case NonFunctionReturnType(type_text=type_text):
            return type_text.strip()
    raise TypeError(f"Not a function value: {value!r}")


def declared_generic_names(value: FunctionValue) -> tuple[str, ...]:
    match value:
        case StandardFunction() | FunctionExpression():
            return value.declared_generic_names
        case NonFunctionReturnType():
            return ()
    raise TypeError(f"Not a function value: {value!r}")


def get_all_return_types(value: FunctionValue) -> list[str]:
    """Every type left after applying 0, 1, ... N-1 calls.

    A malformed or empty signature gives an empty list.
    """
    match value:
        case NonFunctionReturnType(type_text=type_text):
            segments = [type_text.strip()] if type_text.strip() else []
        case _:
            segments = split_arrow_segments(signature(value))

    return [ARROW_SEPARATOR.join(segments[i:]) for i in range(len(segments))]


def parse_function_type(
    text: str | None, declared_generic_names: tuple[str, ...] = ()
) -> FunctionValue | None:
    """Build a function value from type text.

    ``(a: A) => (b: B) => C`` becomes a StandardFunction whose parameter list
    is the first layer; text without a top-level arrow becomes a
    NonFunctionReturnType.
    """
    segments = split_arrow_segments(text or "")
    if not segments:
        return None
    if len(segments) == 1:
        return NonFunctionReturnType(segments[0])
    return StandardFunction.from_parts(
        segments[0], ARROW_SEPARATOR.join(segments[1:]), declared_generic_names
    )


def parse_arrow_chain(text: str) -> tuple[list[str], str, tuple[str, ...]] | None:
    """Split an arrow-function expression into its curried layers.

    ``<T>(a: T) => (b: number): T => a`` gives
    ``(["(a: T)", "(b: number)"], "T", ("T",))``. The innermost layer's
    return annotation becomes the terminal type, or the placeholder type when
    it has none. The value expression after the last layer is dropped.

    Returns:
        Tuple of (layer parameter lists, terminal type, generic names), or
        None if the text does not start with a function expression
    """
    layers = []
    terminal = None
    generic_names: tuple[str, ...] = ()
    pos = 0

    while True:
        layer = _read_layer(text, pos)
        if layer is None:
            break
        params, return_type, generics, pos, is_block_function = layer
        if not layers:
            generic_names = generics
        layers.append(params)
        terminal = return_type
        if is_block_function:
            break

    if not layers:
        return None
    return layers, terminal or PLACEHOLDER_TYPE, generic_names


def _read_layer(text: str, pos: int):
    """Read one ``(params): R =>`` layer starting at ``pos``.

    Returns:
        Tuple of (params, return type, generic names, body start, is block
        function), or None when no layer starts here
    """
    pos = skip_whitespace(text, pos)
    match = ASYNC_PATTERN.match(text, pos)
    if match:
        pos = match.end()

    match = FUNCTION_KEYWORD_PATTERN.match(text, pos)
    if match:
        return _read_function_keyword_layer(text, match.end())

    generics: tuple[str, ...] = ()
    if text.startswith("<", pos):
        close = find_closing(text, pos)
        if close == -1:
            return None
        generics = tuple(parse_type_parameter_names(text[pos : close + 1]))
        pos = skip_whitespace(text, close + 1)

    if text.startswith("(", pos):
        close = find_closing(text, pos)
        if close == -1:
            return None
        params = text[pos : close + 1]
        pos = close + 1
    else:
        name, end = read_identifier(text, pos)
        if name is None:
            return None
        params = f"({name})"
        pos = end

    pos = skip_whitespace(text, pos)
    return_type = None
    if text.startswith(":", pos):
        annotation = _read_until_arrow(text, pos + 1)
        if annotation is None:
            return None
        return_type, pos = annotation

    if not text.startswith(ARROW, pos):
        return None
    return params, return_type, generics, pos + len(ARROW), False


def _read_function_keyword_layer(text: str, pos: int):
    """Read ``function <T>(params): R { ... }`` as a single layer."""
    generics: tuple[str, ...] = ()
    if text.startswith("<", pos):
        close = find_closing(text, pos)
        if close == -1:
            return None
        generics = tuple(parse_type_parameter_names(text[pos : close + 1]))
        pos = skip_whitespace(text, close + 1)

    if not text.startswith("(", pos):
        return None
    close = find_closing(text, pos)
    if close == -1:
        return None
    params = text[pos : close + 1]
    pos = skip_whitespace(text, close + 1)

    return_type = None
    if text.startswith(":", pos):
        return_type, pos = read_type_annotation(text, pos + 1, stops="{")
        pos = skip_whitespace(text, pos)

    if not text.startswith("{", pos):
        return None
    return params, return_type or None, generics, pos, True


def _read_until_arrow(text: str, pos: int) -> tuple[str, int] | None:
    """Read a layer's return annotation up to its top-level arrow."""
    start = pos
    i = pos
    while i < len(text):
        char = text[i]
        if char in QUOTES:
            i = skip_string(text, i)
            continue
        if text.startswith(ARROW, i):
            return text[start:i].strip(), i
        if char in "([{<":
            close = find_closing(text, i)
            if close == -1:
                return None
            i = close + 1
            continue
        i += 1
    return None
