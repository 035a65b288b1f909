"""Tests for the directive interpreter."""

import pytest

from wsdl_automation.config import ParseOptions
from wsdl_automation.model.entities import Field, Operation, Parameter, TypeDefinition
from wsdl_automation.parser.extractor import Directive, DirectiveBlock
from wsdl_automation.parser.interpreter import (
    Accumulator,
    DirectiveInterpreter,
    ParseSession,
    parse_source,
)


# =============================================================================
# Accumulator Tests
# =============================================================================

class TestAccumulator:
    """Tests for the immutable block state."""

    def test_configure_merges(self):
        """pw_set values accumulate."""
        acc = Accumulator().configure("nillable", "false").configure("minoccurs", "0")

        assert acc.cfg == {"nillable": "false", "minoccurs": "0"}

    def test_append_clears_config(self):
        """Appending an element consumes the pending configuration."""
        acc = Accumulator().configure("nillable", "false").append(Parameter.create("a"))

        assert acc.cfg == {}
        assert [e.name for e in acc.elements] == ["a"]

    def test_steps_do_not_mutate(self):
        """Every step returns a new accumulator."""
        first = Accumulator()
        second = first.configure("k", "v")

        assert first.cfg == {}
        assert second is not first


# =============================================================================
# Operation Block Tests
# =============================================================================

class TestOperationBlocks:
    """Tests for blocks that document a function."""

    def test_params_and_return(self, php_block):
        """Parameters keep declaration order; the return part is named 'return'."""
        session = parse_source(
            php_block("@param int $a;", "@param string $b;", "@return boolean", function="Check")
        )

        (operation,) = session.operations
        assert isinstance(operation, Operation)
        assert operation.name == "Check"
        assert [(p.name, p.type_name) for p in operation.parameters] == [("a", "int"), ("b", "string")]
        assert operation.returns.name == "return"
        assert operation.returns.type_name == "boolean"

    def test_function_without_directives(self, php_block):
        """A documented function with no directives is still an operation."""
        session = parse_source(php_block("Does nothing", function="Noop"))

        assert [o.name for o in session.operations] == ["Noop"]
        assert session.operations[0].parameters == ()
        assert session.operations[0].returns is None

    def test_return_name_template(self, php_block):
        """The return part name follows the configured template."""
        options = ParseOptions(return_name_template="%method%Result")

        session = parse_source(php_block("@return int", function="Sum"), options)

        assert session.operations[0].returns.name == "SumResult"

    def test_element_lowered_to_parameter(self, php_block):
        """A pw_element in an operation block becomes a parameter."""
        session = parse_source(php_block("@pw_element int $count;", function="Count"))

        (param,) = session.operations[0].parameters
        assert type(param) is Parameter
        assert param.name == "count"

    def test_trailing_set_marks_operation_global(self, php_block):
        """Configuration left after the last element applies to the operation."""
        session = parse_source(
            php_block("@param string $a;", "@pw_set global=true", function="Shared")
        )

        operation = session.operations[0]
        assert operation.is_global is True
        assert "global" not in operation.parameters[0].config

    def test_global_default_from_options(self, php_block):
        """The global default is taken from the parse options."""
        session = parse_source(php_block(function="Any"), ParseOptions(global_default=True))

        assert session.operations[0].is_global is True

    def test_description_only_when_enabled(self, php_block):
        """Free text becomes the operation description when descriptions are on."""
        source = php_block("Say hello", "@param string $name; Who", function="Hello")

        plain = parse_source(source)
        described = parse_source(source, include_desc=True)

        assert plain.operations[0].description is None
        assert described.operations[0].description == "Say hello"
        assert described.operations[0].parameters[0].description == "Who"

    def test_param_outside_function_rejected(self, php_block):
        """@param without a function is a diagnostic, not an entity."""
        session = parse_source(php_block("@param string $a;"))

        assert session.operations == []
        (diagnostic,) = session.diagnostics
        assert diagnostic.keyword == "param"


# =============================================================================
# Type Block Tests
# =============================================================================

class TestTypeBlocks:
    """Tests for blocks that declare a complex type."""

    def test_struct_with_elements(self, php_block):
        """Elements before pw_complex become the type's fields."""
        session = parse_source(
            php_block("@pw_element string $name;", "@pw_element int $age;", "@pw_complex Person")
        )

        (definition,) = session.types
        assert definition.name == "Person"
        assert definition.is_array is False
        assert [(f.name, f.type_name) for f in definition.fields] == [("name", "string"), ("age", "int")]

    def test_set_applies_to_next_element_only(self, php_block):
        """pw_set configuration is consumed by the next element."""
        session = parse_source(
            php_block(
                "@pw_set NILLABLE=false",
                "@pw_element string $a;",
                "@pw_element string $b;",
                "@pw_complex Pair",
            )
        )

        a, b = session.types[0].fields
        assert a.nillable is False
        assert b.nillable is True

    def test_params_elevated_to_fields(self, php_block):
        """@param lines in a type block inside a function comment become fields."""
        session = parse_source(
            php_block("@param int $x;", "@pw_complex Point", function="point")
        )

        assert session.operations == []
        (field,) = session.types[0].fields
        assert type(field) is Field
        assert field.nillable is False

    def test_array_suffix_inference(self, php_block):
        """A name ending in 'Array' declares an array of the prefix."""
        session = parse_source(php_block("@pw_complex PersonArray"))

        definition = session.types[0]
        assert definition.is_array is True
        assert definition.element_type == "Person"

    def test_array_suffix_inference_disabled(self, php_block):
        """The suffix switch turns inference off."""
        session = parse_source(
            php_block("@pw_complex PersonArray"),
            ParseOptions(disable_array_suffix=True),
        )

        assert session.types[0].is_array is False

    def test_bare_array_name_is_not_an_array(self, php_block):
        """A type named exactly 'Array' has no element type to infer."""
        session = parse_source(php_block("@pw_complex Array"))

        assert session.types[0].is_array is False

    def test_bracket_notation(self, php_block):
        """'Name[] elementType' declares an array explicitly."""
        session = parse_source(php_block("@pw_complex Names[] string"))

        definition = session.types[0]
        assert definition.name == "Names"
        assert definition.is_array is True
        assert definition.element_type == "string"

    def test_bracket_notation_requires_element_type(self, php_block):
        """'Name[]' alone is rejected."""
        session = parse_source(php_block("@pw_complex Names[]"))

        assert session.types == []
        assert session.diagnostics[0].keyword == "pw_complex"

    def test_isarray_config_wins(self, php_block):
        """An explicit isarray value overrides the suffix inference."""
        session = parse_source(php_block("@pw_set isarray=false", "@pw_complex ThingArray"))

        assert session.types[0].is_array is False

    def test_isarray_without_element_type_rejected(self, php_block):
        """Forcing an array without an element type is a diagnostic."""
        session = parse_source(php_block("@pw_set isarray=true", "@pw_complex Thing"))

        assert session.types == []
        assert session.diagnostics[0].keyword == "pw_complex"

    def test_duplicate_type_rejected(self, php_block):
        """The second declaration of a name is dropped with a diagnostic."""
        source = php_block("@pw_element int $a;", "@pw_complex Dup") + php_block("@pw_complex Dup")

        session = parse_source(source)

        assert len(session.types) == 1
        assert len(session.types[0].fields) == 1
        assert session.diagnostics[0].keyword == "pw_complex"
        assert "Dup" in session.diagnostics[0].message

    def test_duplicate_of_known_type_rejected(self, php_block):
        """Names registered before the parse count as duplicates."""
        session = parse_source(php_block("@pw_complex Seed"), known_types={"Seed"})

        assert session.types == []
        assert len(session.diagnostics) == 1

    def test_unbounded_max_occurs(self, php_block):
        """maxoccurs accepts 'unbounded'."""
        session = parse_source(
            php_block("@pw_set maxoccurs=unbounded", "@pw_set minoccurs=0", "@pw_element string $tag;", "@pw_complex Tags")
        )

        field = session.types[0].fields[0]
        assert (field.min_occurs, field.max_occurs) == (0, "unbounded")

    def test_invalid_occurs_rejected(self, php_block):
        """A non-numeric occurrence bound rejects the block."""
        session = parse_source(
            php_block("@pw_set minoccurs=some", "@pw_element string $tag;", "@pw_complex Tags")
        )

        assert session.types == []
        assert session.diagnostics[0].keyword == "pw_element"


# =============================================================================
# Block-Level Behavior Tests
# =============================================================================

class TestBlockBehavior:
    """Tests for ignore handling, service names and error isolation."""

    def test_ignore_discards_earlier_state(self, php_block):
        """@ignore drops the whole block, including earlier directives."""
        session = parse_source(
            php_block("@param int $a;", "@return int", "@ignore", function="hidden")
        )

        assert session.operations == []
        assert session.diagnostics == []

    def test_pw_ignore_alias(self, php_block):
        """pw_ignore behaves like ignore."""
        session = parse_source(php_block("@pw_ignore", "@pw_complex Hidden"))

        assert session.types == []

    def test_service_name_and_description(self, php_block):
        """@service sets the name; the description needs descriptions enabled."""
        source = php_block("@service Demo A demo service")

        assert parse_source(source).service_name == "Demo"
        assert parse_source(source).description is None
        assert parse_source(source, include_desc=True).description == "A demo service"

    def test_empty_service_rejected(self, php_block):
        """@service without a name is a diagnostic."""
        session = parse_source(php_block("@service"))

        assert session.service_name == ""
        assert session.diagnostics[0].keyword == "service"

    @pytest.mark.parametrize("argument", ["novalue", "=value"])
    def test_invalid_set_rejected(self, php_block, argument):
        """pw_set needs a key=value pair."""
        session = parse_source(php_block(f"@pw_set {argument}", "@pw_complex Thing"))

        assert session.types == []
        assert session.diagnostics[0].keyword == "pw_set"

    def test_element_without_name_rejected(self, php_block):
        """pw_element needs a type and a name."""
        session = parse_source(php_block("@pw_element string", "@pw_complex Thing"))

        assert session.diagnostics[0].keyword == "pw_element"

    def test_unknown_keywords_are_ignored(self, php_block):
        """Keywords outside the grammar are no-ops."""
        session = parse_source(php_block("@author someone", "@since 1.0", "@return int", function="f"))

        assert session.diagnostics == []
        assert session.operations[0].returns.type_name == "int"

    def test_bad_block_does_not_affect_others(self, php_block):
        """Errors stay inside their block."""
        source = (
            php_block("@param string", function="broken")
            + php_block("@param string $ok;", function="fine")
        )

        session = parse_source(source)

        assert [o.name for o in session.operations] == ["fine"]
        assert session.diagnostics[0].method == "broken"

    def test_empty_return_name_is_rejected(self, php_block):
        """A return template that yields no name rejects the block."""
        options = ParseOptions(return_name_template="")

        session = parse_source(php_block("@return int", function="Size"), options)

        assert session.operations == []
        assert session.diagnostics[0].keyword == "return"
        assert session.diagnostics[0].message == "An entity name must not be empty"

    def test_diagnostic_text(self, php_block):
        """Diagnostics render origin, line, method and keyword."""
        session = parse_source(php_block("@param string", function="broken"), origin="svc.php")

        assert str(session.diagnostics[0]).startswith("svc.php:1 (broken) @param:")


# =============================================================================
# DirectiveInterpreter Tests
# =============================================================================

class TestDirectiveInterpreter:
    """Tests for direct interpreter use."""

    def test_interpret_records_entity(self):
        """interpret() returns the entity and records it in the session."""
        block = DirectiveBlock(
            comment="",
            directives=(Directive("pw_element", "int $a;"), Directive("pw_complex", "Box")),
        )
        session = ParseSession()

        entity = DirectiveInterpreter().interpret(block, session)

        assert isinstance(entity, TypeDefinition)
        assert session.types == [entity]

    def test_block_without_method_or_type_yields_nothing(self):
        """A comment with no type and no function emits nothing."""
        block = DirectiveBlock(comment="", directives=(Directive("pw_set", "a=b"),))

        assert DirectiveInterpreter().interpret(block, ParseSession()) is None

    def test_directives_after_pw_complex_are_not_read(self):
        """pw_complex stops the block."""
        block = DirectiveBlock(
            comment="",
            method="f",
            directives=(Directive("pw_complex", "Early"), Directive("param", "broken")),
        )
        session = ParseSession()

        DirectiveInterpreter().interpret(block, session)

        assert [t.name for t in session.types] == ["Early"]
        assert session.operations == []
        assert session.diagnostics == []
