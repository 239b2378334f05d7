"""Tests for helper argument resolution and context binding."""
import pytest

from functions.models import FunctionDescriptor, ParameterDescriptor, ParameterType
from templates.arguments import ExecutionContext, bind_arguments, resolve_arguments
from templates.errors import (
    ArityMismatchError, MissingRequiredParameterError, TypeMismatchError,
)


# ══════════════════════════════════════════════════════
#  NAMED ARGUMENTS
# ══════════════════════════════════════════════════════

class TestNamedArguments:

    def test_binds_all_parameters(self, add_descriptor):
        binding = resolve_arguments(add_descriptor, {"a": "3", "b": 4}, "_")
        assert binding == {"a": "3", "b": 4}

    def test_qualified_key_wins_over_bare_key(self, add_descriptor):
        binding = resolve_arguments(add_descriptor, {"a": 1, "add_a": 10, "b": 2}, "_")
        assert binding == {"a": 10, "b": 2}

    def test_qualified_key_uses_delimiter(self, add_descriptor):
        binding = resolve_arguments(add_descriptor, {"add-a": 10, "a": 1, "b": 2}, "-")
        assert binding["a"] == 10

    def test_other_functions_qualified_keys_ignored(self, add_descriptor):
        binding = resolve_arguments(add_descriptor, {"subtract_a": 99, "a": 1, "b": 2}, "_")
        assert binding == {"a": 1, "b": 2}

    @pytest.mark.parametrize("missing", ["query", "site"])
    def test_missing_required_parameter(self, search_descriptor, missing):
        args = {"query": "python", "site": "docs.python.org"}
        del args[missing]
        with pytest.raises(MissingRequiredParameterError) as exc:
            resolve_arguments(search_descriptor, args, "_")
        assert exc.value.parameter_name == missing
        assert exc.value.function_name == "search"
        assert missing in str(exc.value)

    def test_optional_parameters_omitted_not_defaulted(self, search_descriptor):
        binding = resolve_arguments(search_descriptor, {"query": "q", "site": "s"}, "_")
        assert binding == {"query": "q", "site": "s"}
        assert "limit" not in binding

    def test_optional_parameter_bound_when_given(self, search_descriptor):
        binding = resolve_arguments(search_descriptor, {"query": "q", "site": "s", "limit": "5"}, "_")
        assert binding["limit"] == "5"

    def test_type_mismatch(self, search_descriptor):
        with pytest.raises(TypeMismatchError) as exc:
            resolve_arguments(search_descriptor, {"query": "q", "site": "s", "safe": "yes"}, "_")
        err = exc.value
        assert err.parameter_name == "safe"
        assert err.expected_type == "boolean"
        assert err.received_type == "str"
        assert "search" in str(err)

    def test_extra_keys_ignored(self, add_descriptor):
        binding = resolve_arguments(add_descriptor, {"a": 1, "b": 2, "c": 3}, "_")
        assert binding == {"a": 1, "b": 2}


# ══════════════════════════════════════════════════════
#  POSITIONAL ARGUMENTS
# ══════════════════════════════════════════════════════

class TestPositionalArguments:

    def test_binds_in_order(self, search_descriptor):
        binding = resolve_arguments(search_descriptor, ("q", "s", 10), "_")
        assert binding == {"query": "q", "site": "s", "limit": 10}

    def test_fewer_than_required(self, search_descriptor):
        with pytest.raises(ArityMismatchError) as exc:
            resolve_arguments(search_descriptor, ("q",), "_")
        assert exc.value.received == 1
        assert exc.value.required == 2
        assert exc.value.declared == 4

    def test_more_than_declared(self, add_descriptor):
        with pytest.raises(ArityMismatchError):
            resolve_arguments(add_descriptor, (1, 2, 3), "_")

    def test_stops_at_first_mismatch(self, search_descriptor):
        with pytest.raises(TypeMismatchError) as exc:
            resolve_arguments(search_descriptor, ("q", 5, "not-a-number"), "_")
        assert exc.value.parameter_name == "site"

    def test_numeric_text_accepted(self, add_descriptor):
        assert resolve_arguments(add_descriptor, ["1", 2.0], "_") == {"a": "1", "b": 2.0}


# ══════════════════════════════════════════════════════
#  EMPTY ARGUMENTS
# ══════════════════════════════════════════════════════

class TestEmptyArguments:

    def test_required_parameter_missing(self):
        greet = FunctionDescriptor(
            plugin_name="people", name="greet",
            parameters=(ParameterDescriptor(name="name", required=True,
                                            declared_type=ParameterType.STRING),),
        )
        with pytest.raises(MissingRequiredParameterError) as exc:
            resolve_arguments(greet, (), "_")
        assert exc.value.function_name == "greet"
        assert exc.value.parameter_name == "name"
        assert "name" in str(exc.value)

    def test_no_required_parameters(self):
        ping = FunctionDescriptor(
            plugin_name="system", name="ping",
            parameters=(ParameterDescriptor(name="verbose", declared_type=ParameterType.BOOLEAN),),
        )
        assert resolve_arguments(ping, (), "_") == {}
        assert resolve_arguments(ping, {}, "_") == {}


# ══════════════════════════════════════════════════════
#  CONTEXT BINDING
# ══════════════════════════════════════════════════════

class TestBindArguments:

    def test_success_writes_exactly_the_binding(self, search_descriptor):
        context = ExecutionContext()
        bind_arguments(search_descriptor, context, {"query": "q", "site": "s", "limit": 3}, "_")
        assert context == {"query": "q", "site": "s", "limit": 3}

    def test_overwrites_existing_values(self, add_descriptor):
        context = ExecutionContext(a=100, unrelated="keep")
        bind_arguments(add_descriptor, context, (1, 2), "_")
        assert context == {"a": 1, "b": 2, "unrelated": "keep"}

    def test_failure_leaves_context_unchanged(self, search_descriptor):
        context = ExecutionContext(query="before")
        snapshot = dict(context)
        with pytest.raises(TypeMismatchError):
            # query and site are valid, safe is not: nothing may be written
            bind_arguments(search_descriptor, context,
                           {"query": "after", "site": "s", "safe": "nope"}, "_")
        assert context == snapshot

    def test_missing_value_not_sourced_from_context(self, add_descriptor):
        context = ExecutionContext(b=2)
        with pytest.raises(MissingRequiredParameterError):
            bind_arguments(add_descriptor, context, {"a": 1}, "_")
        assert context == {"b": 2}
