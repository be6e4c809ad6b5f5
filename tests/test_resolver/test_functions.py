"""Tests for function values and their return types."""

import pytest

from ts_type_assist.resolver.functions import (
    FunctionExpression,
    NonFunctionReturnType,
    StandardFunction,
    get_all_return_types,
    parse_arrow_chain,
    parse_function_type,
    signature,
)
from ts_type_assist.text_scanner import split_arrow_segments


class TestGetAllReturnTypes:
    def test_standard_function_yields_every_suffix(self):
        value = StandardFunction("(a: number)", "(b: number) => string")

        assert get_all_return_types(value) == [
            "(a: number) => (b: number) => string",
            "(b: number) => string",
            "string",
        ]

    @pytest.mark.parametrize(
        "text",
        [
            "(t: T, a: A) => (c: A) => (d: T) => string",
            "(cb: (x: number) => void) => Promise<(y: string) => void>",
            "(a: { f: (x: A) => B }) => (b: B) => [A, B]",
        ],
    )
    def test_one_entry_per_segment(self, text):
        """Entry 0 is the full signature and every entry ends in the terminal type."""
        value = parse_function_type(text)
        segments = split_arrow_segments(text)

        return_types = get_all_return_types(value)

        assert len(return_types) == len(segments)
        assert return_types[0] == signature(value)
        assert all(r.endswith(segments[-1]) for r in return_types)

    def test_non_function_type_is_its_own_terminal(self):
        assert get_all_return_types(NonFunctionReturnType("number")) == ["number"]

    def test_empty_type_has_no_return_types(self):
        assert get_all_return_types(NonFunctionReturnType("  ")) == []


class TestStandardFunction:
    def test_from_parts_requires_both_parts(self):
        assert StandardFunction.from_parts("", "string") is None
        assert StandardFunction.from_parts("(a: A)", None) is None

    def test_from_parts_strips_text(self):
        value = StandardFunction.from_parts(" (a: A) ", " (b: B) => A ", ("A", "B"))

        assert value == StandardFunction("(a: A)", "(b: B) => A", ("A", "B"))


class TestParseFunctionType:
    def test_first_layer_becomes_parameter_list(self):
        value = parse_function_type("(a: A) => (b: B) => C", ("A",))

        assert value == StandardFunction("(a: A)", "(b: B) => C", ("A",))

    def test_plain_type_is_non_function(self):
        assert parse_function_type("string") == NonFunctionReturnType("string")

    def test_empty_text_is_nothing(self):
        assert parse_function_type("") is None


class TestFunctionExpression:
    def given_source(self, text):
        self.expression = FunctionExpression.from_source(text)

    def then_signature_is(self, expected):
        assert self.expression is not None
        assert signature(self.expression) == expected

    def test_return_annotation_becomes_terminal_type(self):
        """``(b): R => body`` is written as ``(b) => R``."""
        self.given_source("(a: number) => (b: number): number => a + b")
        self.then_signature_is("(a: number) => (b: number) => number")

    def test_missing_return_annotation_is_placeholder(self):
        self.given_source("(a) => (b) => a + b")
        self.then_signature_is("(a) => (b) => any")

    def test_bare_identifier_parameters(self):
        self.given_source("x => y => x")
        self.then_signature_is("(x) => (y) => any")

    def test_type_parameters_on_first_layer(self):
        self.given_source("<T>(a: T) => (b: number): T => a")
        self.then_signature_is("(a: T) => (b: number) => T")
        assert self.expression.declared_generic_names == ("T",)

    def test_function_keyword_with_block_body(self):
        self.given_source("function (a: number): string { return `${a}`; }")
        self.then_signature_is("(a: number) => string")

    def test_async_arrow(self):
        self.given_source("async (a: number): Promise<number> => a")
        self.then_signature_is("(a: number) => Promise<number>")

    def test_block_body_after_last_layer(self):
        self.given_source("(a: string) => (b: string): string => { return a + b; }")
        self.then_signature_is("(a: string) => (b: string) => string")

    def test_call_is_not_a_function_expression(self):
        self.given_source("special<string, number>('hi', 2)")
        assert self.expression is None

    def test_plain_reference_is_not_a_function_expression(self):
        self.given_source("other")
        assert self.expression is None


class TestParseArrowChain:
    def test_returns_layers_terminal_and_generics(self):
        assert parse_arrow_chain("<T>(a: T) => (b: number): T => a") == (
            ["(a: T)", "(b: number)"],
            "T",
            ("T",),
        )
