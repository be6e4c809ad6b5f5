"""Declarations read from a TypeScript source snapshot."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class FunctionDeclaration:
    """A ``function`` declaration, with or without a body."""

    name: str
    generic_names: tuple[str, ...]
    parameter_text: str  # e.g. "(a: A, b: B)"
    return_type_text: str | None
    has_body: bool
    line: int


@dataclass(frozen=True)
class VariableDeclaration:
    """A ``const``/``let``/``var`` declaration with a single declarator."""

    name: str
    keyword: str
    type_text: str | None
    initializer: str | None
    line: int
    text: str = field(default="", compare=False)  # full statement text


@dataclass(frozen=True)
class PropertySignature:
    """A member of an interface or object type alias.

    Method signatures such as ``get<T>(key: T): (x: T) => T`` carry their
    parameter list and generics; ``type_text`` then holds the return type.
    """

    name: str
    owner: str
    type_text: str | None
    optional: bool
    line: int
    parameter_text: str | None = None
    generic_names: tuple[str, ...] = ()

    @property
    def is_method(self) -> bool:
        return self.parameter_text is not None


@dataclass(frozen=True)
class TypeDeclaration:
    """An interface or ``type X = { ... }`` alias with its members."""

    name: str
    properties: tuple[PropertySignature, ...]
    line: int

    def member(self, name: str) -> PropertySignature | None:
        return next((p for p in self.properties if p.name == name), None)


@dataclass(frozen=True)
class ExpressionStatement:
    """A top-level statement that is not a declaration."""

    text: str
    line: int


Declaration = FunctionDeclaration | VariableDeclaration | PropertySignature


@dataclass(frozen=True)
class Statement:
    """Any top-level statement with the lines it spans."""

    node: FunctionDeclaration | VariableDeclaration | TypeDeclaration | ExpressionStatement
    start_line: int
    end_line: int
