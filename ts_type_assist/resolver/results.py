"""Data models for type resolution results."""

import json
from dataclasses import asdict, dataclass

from ts_type_assist.resolver.call_sites import CallSite, extract_actual_generic_arguments
from ts_type_assist.resolver.functions import FunctionValue, declared_generic_names


@dataclass(frozen=True)
class OriginalCallChain:
    """Every call applied to a function, as if written inline.

    ``const a = f(5); const b = a("x"); b(true)`` is the chain
    ``[(5), ("x"), (true)]``, the same as ``f(5)("x")(true)``.
    """

    call_sites: tuple[CallSite, ...]

    @classmethod
    def of(cls, call_sites) -> "OriginalCallChain | None":
        """Build a chain, or None when nothing was called."""
        call_sites = tuple(call_sites)
        return cls(call_sites) if call_sites else None

    @property
    def actual_generic_arguments(self) -> tuple[str, ...]:
        return extract_actual_generic_arguments(self.call_sites)

    def __str__(self) -> str:
        return "".join(str(c) for c in self.call_sites)


@dataclass(frozen=True)
class ResolvedFunctionValue:
    """The terminal function value with its declaration's type parameters."""

    declared_generic_names: tuple[str, ...]
    value: FunctionValue

    @classmethod
    def of(cls, value: FunctionValue, generic_names=None) -> "ResolvedFunctionValue":
        if generic_names is None:
            generic_names = declared_generic_names(value)
        return cls(tuple(generic_names), value)


@dataclass(frozen=True)
class GenericBinding:
    """Positional pairs of type parameter name and concrete type.

    The shorter of the two lists decides how many names are bound.
    """

    pairs: tuple[tuple[str, str], ...]

    @classmethod
    def bind(cls, names, arguments) -> "GenericBinding":
        return cls(tuple(zip(names, arguments)))

    def as_dict(self) -> dict[str, str]:
        bound: dict[str, str] = {}
        for name, argument in self.pairs:
            bound.setdefault(name, argument)
        return bound


@dataclass
class TypeResolution:
    """The type inferred for one usage expression."""

    reference: str
    type_text: str | None  # None means an untyped assignment
    strategy: str  # "function_type", "full_type", "function_signature", "leaf", "untyped"
    call_count: int = 0

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)
