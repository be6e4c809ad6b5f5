"""Tests for resolving the declared type of non-function references."""

from ts_type_assist.models import FunctionDeclaration, PropertySignature, VariableDeclaration
from ts_type_assist.resolver.leaf_resolver import resolve_leaf_type


class TestResolveLeafType:
    def test_property_gives_its_type(self):
        age = PropertySignature(name="age", owner="Person", type_text="number", optional=False, line=3)

        assert resolve_leaf_type(age) == "number"

    def test_untyped_property_gives_placeholder(self):
        data = PropertySignature(name="data", owner="Box", type_text=None, optional=False, line=1)

        assert resolve_leaf_type(data) == "any"

    def test_variable_gives_its_annotation(self):
        label = VariableDeclaration(name="label", keyword="const", type_text="string", initializer='"x"', line=1)

        assert resolve_leaf_type(label) == "string"

    def test_untyped_variable_gives_nothing(self):
        count = VariableDeclaration(name="count", keyword="const", type_text=None, initializer="3", line=1)

        assert resolve_leaf_type(count) is None

    def test_function_declaration_gives_nothing(self):
        f = FunctionDeclaration(
            name="f", generic_names=(), parameter_text="()", return_type_text="void", has_body=True, line=1
        )

        assert resolve_leaf_type(f) is None
