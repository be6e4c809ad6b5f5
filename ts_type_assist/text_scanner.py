"""Bracket and string aware scanning helpers for TypeScript source text."""

import logging
import re

logger = logging.getLogger(__name__)

IDENTIFIER_PATTERN = re.compile(r"[A-Za-z_$][\w$]*")

ARROW = "=>"

QUOTES = "\"'`"

CLOSERS = {"(": ")", "[": "]", "{": "}", "<": ">"}

# A line ending with one of these cannot end a statement
CONTINUATION_ENDINGS = (
    "=>",
    "=",
    ",",
    "(",
    "[",
    "{",
    "|",
    "&",
    "+",
    "-",
    "*",
    "/",
    ".",
    ":",
    "?",
    "<",
)

# A line starting with one of these continues the previous one
CONTINUATION_STARTS = (".", "?.", "|", "&", "=>", "?", ":", "+", "*", "/", "=")


def skip_string(text: str, start: int) -> int:
    """Return the index just past the string literal opening at ``start``."""
    quote = text[start]
    i = start + 1
    while i < len(text):
        char = text[i]
        if char == "\\":
            i += 2
            continue
        if char == quote:
            return i + 1
        i += 1
    return len(text)


def strip_comments(source: str) -> str:
    """Remove // and /* */ comments while keeping strings and line numbers."""
    result = []
    i = 0
    length = len(source)

    while i < length:
        char = source[i]
        if char in QUOTES:
            end = skip_string(source, i)
            result.append(source[i:end])
            i = end
        elif source.startswith("//", i):
            end = source.find("\n", i)
            i = length if end == -1 else end
        elif source.startswith("/*", i):
            end = source.find("*/", i + 2)
            end = length if end == -1 else end + 2
            # Keep the line count so declaration lines stay accurate
            result.append("\n" * source.count("\n", i, end))
            i = end
        else:
            result.append(char)
            i += 1

    return "".join(result)


def find_closing(text: str, open_index: int) -> int:
    """Find the bracket closing the one at ``open_index``.

    Angle brackets are only tracked when the opener itself is ``<`` so that
    comparisons inside parenthesised expressions do not unbalance the scan.

    Returns:
        Index of the closing bracket, or -1 if it is missing or mismatched
    """
    opener = text[open_index]
    track_angles = opener == "<"
    stack = [CLOSERS[opener]]
    i = open_index + 1

    while i < len(text):
        char = text[i]
        if char in QUOTES:
            i = skip_string(text, i)
            continue
        if text.startswith(ARROW, i):
            i += 2
            continue
        if char in "([{" or (track_angles and char == "<"):
            stack.append(CLOSERS[char])
        elif char in ")]}" or (track_angles and char == ">"):
            if char != stack[-1]:
                return -1
            stack.pop()
            if not stack:
                return i
        i += 1

    return -1


def split_top_level(text: str, separator: str = ",", track_angles: bool = True) -> list[str]:
    """Split on ``separator`` wherever it is not nested in brackets or strings.

    Empty parts are dropped and every part is stripped.
    """
    parts = []
    current = []
    depth = 0
    i = 0

    while i < len(text):
        char = text[i]
        if char in QUOTES:
            end = skip_string(text, i)
            current.append(text[i:end])
            i = end
            continue
        if depth == 0 and text.startswith(separator, i):
            part = "".join(current).strip()
            if part:
                parts.append(part)
            current = []
            i += len(separator)
            continue
        if text.startswith(ARROW, i):
            current.append(ARROW)
            i += 2
            continue
        if char in "([{" or (track_angles and char == "<"):
            depth += 1
        elif char in ")]}" or (track_angles and char == ">"):
            depth = max(depth - 1, 0)
        current.append(char)
        i += 1

    part = "".join(current).strip()
    if part:
        parts.append(part)
    return parts


def split_arrow_segments(text: str) -> list[str]:
    """Split a function type on its top-level arrows.

    ``(t: T) => (c: (x: A) => B) => string`` gives
    ``["(t: T)", "(c: (x: A) => B)", "string"]``.
    """
    if not text or not text.strip():
        return []
    return split_top_level(text, separator=ARROW)


def is_function_type(text: str | None) -> bool:
    """True when the type text has at least one top-level arrow."""
    return bool(text) and len(split_arrow_segments(text)) > 1


def skip_whitespace(text: str, pos: int) -> int:
    while pos < len(text) and text[pos].isspace():
        pos += 1
    return pos


def read_identifier(text: str, pos: int) -> tuple[str | None, int]:
    """Read an identifier at ``pos``, returning ``(name, end)``."""
    match = IDENTIFIER_PATTERN.match(text, pos)
    if not match:
        return None, pos
    return match.group(0), match.end()


def parse_type_parameter_names(text: str | None) -> list[str]:
    """Extract the names from a type parameter list.

    ``<T, A extends Base = Default>`` gives ``["T", "A"]``.
    """
    if not text:
        return []
    inner = text.strip()
    if inner.startswith("<") and inner.endswith(">"):
        inner = inner[1:-1]

    names = []
    for param in split_top_level(inner):
        param = re.sub(r"^(?:const|in|out)\s+", "", param)
        match = IDENTIFIER_PATTERN.match(param)
        if match:
            names.append(match.group(0))
    return names


def is_continued(previous: str, following: str) -> bool:
    """Whether a line break between two chunks of code continues a construct."""
    previous = previous.rstrip()
    following = following.lstrip()
    if not previous:
        return True
    if previous.endswith(CONTINUATION_ENDINGS):
        return True
    return following.startswith(CONTINUATION_STARTS)


def _expects_type(previous: str) -> bool:
    """Whether an opening brace after ``previous`` starts an object type."""
    previous = previous.rstrip()
    return not previous or previous.endswith(("|", "&", "=>", ",", "<", "(", ":", "[", "?"))


def read_type_annotation(text: str, pos: int, stops: str) -> tuple[str, int]:
    """Read a type annotation starting at ``pos``.

    The annotation ends at a top-level character in ``stops``, or at a line
    break that does not continue the type. A ``{`` in ``stops`` only ends the
    annotation when it cannot start an object type literal. A ``=`` stop never
    matches the arrow token.

    Returns:
        Tuple of (stripped type text, index of the terminating character)
    """
    start = pos
    i = pos

    while i < len(text):
        char = text[i]
        if char in QUOTES:
            i = skip_string(text, i)
            continue
        if text.startswith(ARROW, i):
            i += 2
            continue
        if char == "{" and "{" in stops and not _expects_type(text[start:i]):
            break
        if char in "([{<":
            end = find_closing(text, i)
            if end == -1:
                logger.debug(f"Unbalanced '{char}' in type at offset {i}")
                return text[start:].strip(), len(text)
            i = end + 1
            continue
        if char in stops:
            break
        if char == "\n":
            line_end = text.find("\n", i + 1)
            following = text[i + 1 :] if line_end == -1 else text[i + 1 : line_end]
            if not is_continued(text[start:i], following):
                break
        i += 1

    return text[start:i].strip(), i


def find_statement_end(text: str, pos: int) -> int:
    """Return the index just past the statement starting at ``pos``.

    A statement ends at a top-level ``;`` (included) or at a line break that
    does not continue it (excluded).
    """
    depth = 0
    i = pos

    while i < len(text):
        char = text[i]
        if char in QUOTES:
            i = skip_string(text, i)
            continue
        if char in "([{":
            depth += 1
        elif char in ")]}":
            depth = max(depth - 1, 0)
        elif depth == 0 and char == ";":
            return i + 1
        elif depth == 0 and char == "\n":
            line_end = text.find("\n", i + 1)
            following = text[i + 1 :] if line_end == -1 else text[i + 1 : line_end]
            if not is_continued(text[pos:i], following):
                return i
        i += 1

    return len(text)


def line_of(text: str, index: int) -> int:
    """1-based line number of ``index`` in ``text``."""
    return text.count("\n", 0, index) + 1
