"""Read TypeScript source into an index of resolvable declarations."""

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from ts_type_assist.models import (
    Declaration,
    ExpressionStatement,
    FunctionDeclaration,
    PropertySignature,
    Statement,
    TypeDeclaration,
    VariableDeclaration,
)
from ts_type_assist.text_scanner import (
    ARROW,
    IDENTIFIER_PATTERN,
    QUOTES,
    find_closing,
    find_statement_end,
    is_continued,
    line_of,
    parse_type_parameter_names,
    read_identifier,
    read_type_annotation,
    skip_string,
    skip_whitespace,
    strip_comments,
)

logger = logging.getLogger(__name__)

# Regex to match the keyword that opens a declaration, after its modifiers
STATEMENT_PATTERN = re.compile(
    r"(?:export\s+(?:default\s+)?)?"  # export modifiers
    r"(?:declare\s+)?"  # ambient declarations
    r"(?:async\s+)?"  # async functions
    r"(?:abstract\s+)?"  # abstract classes
    r"(function|const|let|var|interface|type|class|enum|namespace|module|import)\b"
)

# Regex to match a member name: readonly name?: ...
MEMBER_PATTERN = re.compile(
    r"(?:(?:readonly|public|private|protected|static)\s+)*"  # modifiers
    r"([A-Za-z_$][\w$]*|'[^']*'|\"[^\"]*\")"  # member name
    r"\s*(\?)?\s*"  # optional marker
)


@dataclass(frozen=True)
class SourceIndex:
    """Top-level declarations of one TypeScript source snapshot.

    Built once by ``parse_source``; the mappings are read-only views.
    """

    declarations: Mapping[str, FunctionDeclaration | VariableDeclaration] = field(
        default_factory=lambda: MappingProxyType({})
    )
    types: Mapping[str, TypeDeclaration] = field(default_factory=lambda: MappingProxyType({}))
    statements: tuple[Statement, ...] = ()

    def resolve(self, reference: str) -> Declaration | None:
        """Resolve ``name`` or ``obj.member.member`` to its declaration.

        Members are looked up through the interface or object type alias
        named by the object's type annotation.

        Returns:
            The declaration, or None if the reference dangles
        """
        parts = [p.strip() for p in reference.split(".")]
        head = self.declarations.get(parts[0])
        if len(parts) == 1:
            if head is None:
                logger.info(f"Unresolved reference: {reference}")
            return head

        if head is None or not isinstance(head, VariableDeclaration):
            logger.info(f"Cannot resolve members of {parts[0]} in {reference}")
            return None

        owner = _type_name(head.type_text)
        member = None
        for name in parts[1:]:
            type_declaration = self.types.get(owner) if owner else None
            if type_declaration is None:
                logger.info(f"No type declaration for {owner!r} in {reference}")
                return None
            member = type_declaration.member(name)
            if member is None:
                logger.info(f"{owner} has no member {name!r}")
                return None
            owner = _type_name(member.type_text)
        return member

    def statement_at(self, line: int) -> Statement | None:
        """Find the top-level statement spanning ``line``."""
        return next(
            (s for s in self.statements if s.start_line <= line <= s.end_line),
            None,
        )


def _type_name(type_text: str | None) -> str | None:
    """Leading type name of an annotation: ``Person<string>`` gives ``Person``."""
    if not type_text:
        return None
    match = IDENTIFIER_PATTERN.match(type_text.strip())
    return match.group(0) if match else None


def parse_source_file(path: Path) -> SourceIndex:
    """Parse a TypeScript file into a SourceIndex.

    Args:
        path: Path to the .ts file

    Returns:
        The indexed source snapshot
    """
    logger.info(f"Parsing TypeScript source from {path}")
    return parse_source(path.read_text())


def parse_source(source: str) -> SourceIndex:
    """Parse TypeScript source text into a SourceIndex.

    Only top-level statements are indexed; function and class bodies are
    skipped. Statements that cannot be understood are kept as expression
    statements.

    Args:
        source: TypeScript source code

    Returns:
        The indexed source snapshot
    """
    text = strip_comments(source)
    declarations = {}
    types = {}
    statements = []
    pos = skip_whitespace(text, 0)

    while pos < len(text):
        if text[pos] == ";":
            pos = skip_whitespace(text, pos + 1)
            continue

        node, end = _parse_statement(text, pos)
        end = max(end, pos + 1)
        if node is not None:
            statements.append(Statement(node, line_of(text, pos), line_of(text, end - 1)))
            _index_node(node, declarations, types)
        pos = skip_whitespace(text, end)

    index = SourceIndex(
        declarations=MappingProxyType(declarations),
        types=MappingProxyType(types),
        statements=tuple(statements),
    )
    logger.info(
        f"Indexed {len(index.declarations)} declarations, "
        f"{len(index.types)} types, {len(index.statements)} statements"
    )
    return index


def _index_node(node, declarations: dict, types: dict) -> None:
    if isinstance(node, TypeDeclaration):
        if node.name in types:
            # Interface merging: later members extend the earlier ones
            merged = types[node.name].properties + node.properties
            node = TypeDeclaration(node.name, merged, types[node.name].line)
        types[node.name] = node
    elif isinstance(node, (FunctionDeclaration, VariableDeclaration)):
        if node.name in declarations:
            # Overloads: keep the first signature
            logger.debug(f"Ignoring redeclaration of {node.name} at line {node.line}")
            return
        declarations[node.name] = node


def _parse_statement(text: str, pos: int):
    """Parse one statement, returning ``(node or None, end)``."""
    match = STATEMENT_PATTERN.match(text, pos)
    if match:
        keyword = match.group(1)
        line = line_of(text, pos)
        if keyword == "function":
            result = _parse_function(text, match.end(), line)
        elif keyword in ("const", "let", "var"):
            result = _parse_variable(text, match.end(), pos, keyword, line)
        elif keyword == "interface":
            result = _parse_interface(text, match.end(), line)
        elif keyword == "type":
            result = _parse_type_alias(text, match.end(), line)
        elif keyword == "import":
            result = None, find_statement_end(text, match.end())
        else:
            result = _skip_block(text, match.end())

        if result is not None:
            return result
        logger.debug(f"Could not parse '{keyword}' statement at line {line}")

    end = find_statement_end(text, pos)
    statement = text[pos:end].strip().rstrip(";").rstrip()
    if not statement:
        return None, end
    return ExpressionStatement(text=statement, line=line_of(text, pos)), end


def _read_generics(text: str, pos: int) -> tuple[tuple[str, ...], int] | None:
    """Read an optional ``<...>`` type parameter list at ``pos``."""
    if pos >= len(text) or text[pos] != "<":
        return (), pos
    close = find_closing(text, pos)
    if close == -1:
        return None
    names = tuple(parse_type_parameter_names(text[pos : close + 1]))
    return names, skip_whitespace(text, close + 1)


def _parse_function(text: str, pos: int, line: int):
    pos = skip_whitespace(text, pos)
    if text.startswith("*", pos):
        pos = skip_whitespace(text, pos + 1)

    name, pos = read_identifier(text, pos)
    if name is None:
        return None
    generics = _read_generics(text, skip_whitespace(text, pos))
    if generics is None:
        return None
    generic_names, pos = generics

    if pos >= len(text) or text[pos] != "(":
        return None
    close = find_closing(text, pos)
    if close == -1:
        return None
    parameter_text = text[pos : close + 1]
    pos = close + 1

    return_type = None
    after_params = skip_whitespace(text, pos)
    if text.startswith(":", after_params):
        return_type, pos = read_type_annotation(text, after_params + 1, stops="{;")

    body = skip_whitespace(text, pos)
    has_body = False
    if body < len(text) and text[body] == "{":
        close = find_closing(text, body)
        end = len(text) if close == -1 else close + 1
        has_body = True
    elif body < len(text) and text[body] == ";":
        end = body + 1
    else:
        end = pos

    declaration = FunctionDeclaration(
        name=name,
        generic_names=generic_names,
        parameter_text=parameter_text,
        return_type_text=return_type or None,
        has_body=has_body,
        line=line,
    )
    logger.debug(f"Parsed function: {name}{parameter_text} -> {return_type}")
    return declaration, end


def _parse_variable(text: str, pos: int, start: int, keyword: str, line: int):
    pos = skip_whitespace(text, pos)
    name, pos = read_identifier(text, pos)
    if name is None:
        # Destructuring patterns are not indexed
        return None, find_statement_end(text, start)
    if text.startswith("!", pos):
        pos += 1

    declaration_end = pos
    cursor = skip_whitespace(text, pos)
    type_text = None
    if text.startswith(":", cursor):
        type_text, declaration_end = read_type_annotation(text, cursor + 1, stops="=;,")
        cursor = skip_whitespace(text, declaration_end)

    initializer = None
    if text.startswith("=", cursor) and not text.startswith(("==", ARROW), cursor):
        end = find_statement_end(text, cursor + 1)
        initializer = text[cursor + 1 : end].strip().rstrip(";").rstrip() or None
    elif text.startswith(";", cursor):
        end = cursor + 1
    elif text.startswith(",", cursor):
        end = find_statement_end(text, cursor)
    else:
        end = declaration_end

    declaration = VariableDeclaration(
        name=name,
        keyword=keyword,
        type_text=type_text or None,
        initializer=initializer,
        line=line,
        text=text[start:end].strip(),
    )
    logger.debug(f"Parsed variable: {name}: {type_text} = {initializer}")
    return declaration, end


def _parse_interface(text: str, pos: int, line: int):
    pos = skip_whitespace(text, pos)
    name, pos = read_identifier(text, pos)
    if name is None:
        return None
    generics = _read_generics(text, skip_whitespace(text, pos))
    if generics is None:
        return None
    _, pos = generics

    brace = text.find("{", pos)
    if brace == -1:
        return None
    close = find_closing(text, brace)
    if close == -1:
        return None

    properties = _parse_members(text, brace + 1, close, owner=name)
    return TypeDeclaration(name, tuple(properties), line), close + 1


def _parse_type_alias(text: str, pos: int, line: int):
    pos = skip_whitespace(text, pos)
    name, pos = read_identifier(text, pos)
    if name is None:
        return None
    generics = _read_generics(text, skip_whitespace(text, pos))
    if generics is None:
        return None
    _, pos = generics
    if not text.startswith("=", pos):
        return None

    value = skip_whitespace(text, pos + 1)
    if value < len(text) and text[value] == "{":
        close = find_closing(text, value)
        if close == -1:
            return None
        end = find_statement_end(text, close + 1)
        if text[close + 1 : end].strip().rstrip(";"):
            # Intersections and the like are not plain object types
            return None, end
        properties = _parse_members(text, value + 1, close, owner=name)
        return TypeDeclaration(name, tuple(properties), line), end

    return None, find_statement_end(text, value)


def _skip_block(text: str, pos: int):
    """Skip a class, enum or namespace body."""
    if pos >= len(text) or not text[pos].isspace():
        # e.g. module.exports = ...
        return None
    brace = text.find("{", pos)
    semicolon = text.find(";", pos)
    if brace == -1 or (semicolon != -1 and semicolon < brace):
        return None
    close = find_closing(text, brace)
    if close == -1:
        return None
    return None, close + 1


def _split_members(text: str, start: int, end: int) -> list[tuple[str, int]]:
    """Split a type body into ``(member text, offset)`` pairs."""
    chunks = []
    depth = 0
    chunk_start = start
    i = start

    while i < end:
        char = text[i]
        if char in QUOTES:
            i = skip_string(text, i)
            continue
        if text.startswith(ARROW, i):
            i += 2
            continue
        if char in "([{<":
            depth += 1
        elif char in ")]}>":
            depth = max(depth - 1, 0)
        elif depth == 0 and char in ";,":
            chunks.append((text[chunk_start:i], chunk_start))
            chunk_start = i + 1
        elif depth == 0 and char == "\n":
            following = text[i + 1 : end].split("\n", 1)[0]
            if not is_continued(text[chunk_start:i], following):
                chunks.append((text[chunk_start:i], chunk_start))
                chunk_start = i + 1
        i += 1
    chunks.append((text[chunk_start:end], chunk_start))

    members = []
    for chunk, offset in chunks:
        stripped = chunk.strip()
        if stripped:
            members.append((stripped, offset + len(chunk) - len(chunk.lstrip())))
    return members


def _parse_members(text: str, start: int, end: int, owner: str) -> list[PropertySignature]:
    properties = []
    for chunk, offset in _split_members(text, start, end):
        member = _parse_member(chunk, owner, line_of(text, offset))
        if member is None:
            logger.debug(f"Skipping member of {owner}: {chunk}")
            continue
        properties.append(member)
    return properties


def _parse_member(chunk: str, owner: str, line: int) -> PropertySignature | None:
    match = MEMBER_PATTERN.match(chunk)
    if not match:
        return None
    name = match.group(1).strip("'\"")
    optional = match.group(2) is not None

    generics = _read_generics(chunk, match.end())
    if generics is None:
        return None
    generic_names, pos = generics

    if chunk.startswith("(", pos):
        close = find_closing(chunk, pos)
        if close == -1:
            return None
        rest = chunk[close + 1 :].strip()
        return_type = rest[1:].strip() if rest.startswith(":") else None
        return PropertySignature(
            name=name,
            owner=owner,
            type_text=return_type or None,
            optional=optional,
            line=line,
            parameter_text=chunk[pos : close + 1],
            generic_names=generic_names,
        )

    rest = chunk[pos:].strip()
    type_text = rest[1:].strip() if rest.startswith(":") else None
    return PropertySignature(
        name=name,
        owner=owner,
        type_text=type_text or None,
        optional=optional,
        line=line,
    )
