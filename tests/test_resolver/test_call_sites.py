"""Tests for usage expression parsing."""

import logging

from ts_type_assist.resolver.call_sites import (
    CallSite,
    extract_actual_generic_arguments,
    parse_usage_expression,
)


class TestParseUsageExpression:
    """Tests for parse_usage_expression function."""

    def test_splits_reference_and_call_sites(self):
        """Generic arguments stay with the call site that declares them."""
        usage = parse_usage_expression('print<string, number>("4", 5)("sss");')

        assert usage.reference == "print"
        assert usage.call_sites == (
            CallSite('("4", 5)', ("string", "number")),
            CallSite('("sss")'),
        )

    def test_bare_reference_has_no_call_sites(self):
        usage = parse_usage_expression("add")

        assert usage.reference == "add"
        assert usage.call_sites == ()

    def test_member_reference_is_normalized(self):
        usage = parse_usage_expression("person . age")

        assert usage.reference == "person.age"

    def test_empty_argument_list(self):
        usage = parse_usage_expression("make()")

        assert [str(c) for c in usage.call_sites] == ["()"]

    def test_function_type_generic_argument(self):
        usage = parse_usage_expression("wrap<(x: number) => void>(g)")

        assert usage.call_sites[0].actual_generic_arguments == ("(x: number) => void",)

    def test_nested_calls_in_arguments(self):
        usage = parse_usage_expression("add(f(1), [2, 3])(g(4))")

        assert [str(c) for c in usage.call_sites] == ["(f(1), [2, 3])", "(g(4))"]

    def test_member_access_after_call_is_rejected(self):
        assert parse_usage_expression("make(1).value") is None

    def test_non_reference_is_rejected(self):
        assert parse_usage_expression("(1)") is None
        assert parse_usage_expression("3") is None

    def test_unbalanced_call_is_rejected(self):
        assert parse_usage_expression("f(1") is None


class TestExtractActualGenericArguments:
    def test_first_declaring_call_site_wins(self, caplog):
        call_sites = [
            CallSite("(1)"),
            CallSite("(2)", ("string",)),
            CallSite("(3)", ("number",)),
        ]

        with caplog.at_level(logging.WARNING):
            arguments = extract_actual_generic_arguments(call_sites)

        assert arguments == ("string",)
        assert "Ignoring generic arguments <number>" in caplog.text

    def test_repeated_identical_arguments_do_not_warn(self, caplog):
        call_sites = [CallSite("(1)", ("string",)), CallSite("(2)", ("string",))]

        with caplog.at_level(logging.WARNING):
            arguments = extract_actual_generic_arguments(call_sites)

        assert arguments == ("string",)
        assert caplog.text == ""

    def test_no_generic_arguments(self):
        assert extract_actual_generic_arguments([CallSite("(1)")]) == ()
