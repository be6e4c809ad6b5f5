"""Tests for reading TypeScript source into a SourceIndex."""

import dataclasses
from pathlib import Path

import pytest

from ts_type_assist.models import (
    ExpressionStatement,
    FunctionDeclaration,
    PropertySignature,
    VariableDeclaration,
)
from ts_type_assist.source_index import parse_source, parse_source_file


@pytest.fixture
def fixtures_path():
    """Path to test fixtures."""
    return Path(__file__).parent / "fixtures" / "typescript"


class TestParseSourceFile:
    """Tests for parse_source_file function."""

    def test_indexes_generic_curried_function(self, fixtures_path):
        """Parses a function with type parameters and a curried return."""
        index = parse_source_file(fixtures_path / "curried.ts")

        special = index.declarations["special"]
        assert isinstance(special, FunctionDeclaration)
        assert special.generic_names == ("A", "B")
        assert special.parameter_text == "(a: A, b: B)"
        assert special.return_type_text == "(a: A) => (b: B) => A"
        assert special.has_body
        assert special.line == 19

    def test_indexes_arrow_function_variable(self, fixtures_path):
        index = parse_source_file(fixtures_path / "curried.ts")

        add = index.declarations["add"]
        assert isinstance(add, VariableDeclaration)
        assert add.keyword == "const"
        assert add.type_text is None
        assert add.initializer == "(a: number) => (b: number): number => a + b"

    def test_indexes_interface_members(self, fixtures_path):
        """Parses fields, optional fields, and method signatures."""
        index = parse_source_file(fixtures_path / "curried.ts")

        person = index.types["Person"]
        assert [p.name for p in person.properties] == [
            "name",
            "age",
            "nickname",
            "greet",
            "pair",
            "onChange",
        ]
        assert person.member("nickname").optional
        pair = person.member("pair")
        assert pair.is_method
        assert pair.parameter_text == "(value: T)"
        assert pair.type_text == "(other: T) => [T, T]"
        assert pair.generic_names == ("T",)

    def test_indexes_object_type_alias(self, fixtures_path):
        index = parse_source_file(fixtures_path / "curried.ts")

        point = index.types["Point"]
        assert [(p.name, p.type_text) for p in point.properties] == [
            ("x", "number"),
            ("y", "number"),
        ]

    def test_keeps_expression_statements_with_their_lines(self, fixtures_path):
        index = parse_source_file(fixtures_path / "curried.ts")

        statement = index.statement_at(41)
        assert isinstance(statement.node, ExpressionStatement)
        assert statement.node.text == "a2(500)"

    def test_multi_line_statement_spans_its_lines(self, fixtures_path):
        index = parse_source_file(fixtures_path / "curried.ts")

        statement = index.statement_at(16)
        assert statement.node.name == "print"
        assert (statement.start_line, statement.end_line) == (15, 17)

    def test_blank_line_has_no_statement(self, fixtures_path):
        index = parse_source_file(fixtures_path / "curried.ts")

        assert index.statement_at(42) is None


class TestParseSource:
    """Tests for parse_source edge cases."""

    def test_statements_without_semicolons(self):
        index = parse_source("const x = add(1)\nconst y = x(2)\ny(3)\n")

        assert index.declarations["x"].initializer == "add(1)"
        assert index.declarations["y"].initializer == "x(2)"
        assert index.statement_at(3).node.text == "y(3)"

    def test_multi_line_arrow_initializer(self):
        index = parse_source("const f = (a: number) =>\n  (b: number) => a + b\nf(1)\n")

        assert index.declarations["f"].initializer == "(a: number) =>\n  (b: number) => a + b"

    def test_overloads_keep_first_signature(self):
        source = (
            "function pick(a: string): string;\n"
            "function pick(a: number): number;\n"
            "function pick(a: any): any { return a; }\n"
        )
        index = parse_source(source)

        pick = index.declarations["pick"]
        assert pick.return_type_text == "string"
        assert not pick.has_body

    def test_interfaces_with_same_name_are_merged(self):
        index = parse_source("interface A { x: number }\ninterface A { y: string }\n")

        assert [p.name for p in index.types["A"].properties] == ["x", "y"]

    def test_function_bodies_are_not_indexed(self):
        index = parse_source("function outer() {\n  const inner = 1;\n}\n")

        assert "inner" not in index.declarations

    def test_class_bodies_are_skipped(self):
        index = parse_source("class Box {\n  value = 1;\n}\nconst b = 2;\n")

        assert "value" not in index.declarations
        assert index.declarations["b"].initializer == "2"

    def test_module_exports_is_an_expression(self):
        index = parse_source("module.exports = { a: 1 };\n")

        assert index.statement_at(1).node.text == "module.exports = { a: 1 }"

    def test_index_is_read_only(self):
        """The parsed snapshot cannot be changed after it is built."""
        index = parse_source("const a = 1;\ninterface P { x: number }\n")

        with pytest.raises(TypeError):
            index.declarations["b"] = index.declarations["a"]
        with pytest.raises(TypeError):
            index.types["Q"] = index.types["P"]
        with pytest.raises(dataclasses.FrozenInstanceError):
            index.statements = ()
        assert not hasattr(index, "add")

    def test_export_modifiers_are_accepted(self):
        index = parse_source("export const k = 1;\nexport default function f(): void {}\n")

        assert index.declarations["k"].text == "export const k = 1;"
        assert "f" in index.declarations


class TestResolve:
    """Tests for SourceIndex.resolve."""

    def given_source(self, source):
        self.index = parse_source(source)

    def when_resolving(self, reference):
        self.declaration = self.index.resolve(reference)

    def then_resolves_to_property(self, name, type_text):
        assert isinstance(self.declaration, PropertySignature)
        assert self.declaration.name == name
        assert self.declaration.type_text == type_text

    def then_nothing_is_resolved(self):
        assert self.declaration is None

    def test_member_through_interface_annotation(self):
        """obj.member resolves through the interface named by obj's type."""
        self.given_source("interface P { age: number }\nconst p: P = { age: 1 };\n")
        self.when_resolving("p.age")
        self.then_resolves_to_property("age", "number")

    def test_nested_member(self):
        self.given_source(
            "interface Inner { v: string }\n"
            "interface Outer { inner: Inner }\n"
            "const o: Outer = x;\n"
        )
        self.when_resolving("o.inner.v")
        self.then_resolves_to_property("v", "string")

    def test_dangling_name(self):
        self.given_source("const a = 1;\n")
        self.when_resolving("nowhere")
        self.then_nothing_is_resolved()

    def test_unknown_member(self):
        self.given_source("interface P { age: number }\nconst p: P = x;\n")
        self.when_resolving("p.height")
        self.then_nothing_is_resolved()

    def test_member_of_untyped_variable(self):
        self.given_source("const p = { age: 1 };\n")
        self.when_resolving("p.age")
        self.then_nothing_is_resolved()
