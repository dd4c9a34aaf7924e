import pytest

from gqlvalidator.ast import Position
from gqlvalidator.errors import GraphQLError, error_at, error_path, format_path

MESSAGE = 'Field "myAction" argument "myEnum" of type "Locale!" is required, but it was not provided.'


def test_error_at_formats_source_and_line():
    err = error_at(Position(4, 2, "SomeOperation"), MESSAGE)
    assert str(err) == "SomeOperation:4: " + MESSAGE
    assert err.locations == [(4, 2)]
    assert err.file == "SomeOperation"


def test_error_at_without_position_uses_input():
    err = error_at(None, MESSAGE)
    assert str(err) == "input: " + MESSAGE
    assert err.locations == []


def test_error_path():
    err = error_path(["variable", "id"], "must be defined")
    assert str(err) == "input: variable.id must be defined"
    assert err.path == ["variable", "id"]


def test_format_path_with_index():
    assert format_path(["variable", "var", 0, "name"]) == "variable.var[0].name"
    assert format_path(["variable", "var", 0]) == "variable.var[0]"


def test_format_path_empty():
    assert format_path([]) == ""


def test_format_path_leading_index():
    assert format_path([0, "a"]) == "[0].a"


def test_error_keeps_fields():
    err = GraphQLError("boom", rule="SomeRule", path=["x"])
    assert err.message == "boom"
    assert err.rule == "SomeRule"
    assert err.path == ["x"]
    assert str(err).endswith("x boom")


def test_error_path_result_is_an_exception():
    err = error_path(["variable", "id"], "cannot be null")
    with pytest.raises(GraphQLError, match="variable.id cannot be null"):
        raise err
    assert err.message == "cannot be null"