import pytest

from gqlvalidator import validator as validator_module
from gqlvalidator.ast import (
    Definition,
    DefinitionKind,
    Field,
    FieldDefinition,
    OperationDefinition,
    Position,
    QueryDocument,
    SchemaDocument,
    named_type,
)
from gqlvalidator.schema import validate_schema_document
from gqlvalidator.validator import Rule, add_rule, registered_rules, validate


@pytest.fixture
def schema():
    query = Definition(
        kind=DefinitionKind.OBJECT,
        name="Query",
        fields=[FieldDefinition(name="name", type=named_type("String"))],
    )
    string = Definition(kind=DefinitionKind.SCALAR, name="String", built_in=True)
    return validate_schema_document(SchemaDocument(definitions=[string, query]))


@pytest.fixture
def empty_registry(monkeypatch):
    monkeypatch.setattr(validator_module, "_RULES", [])


def _document(*names, position=None):
    return QueryDocument(
        operations=[
            OperationDefinition(selection_set=[Field(name=n, position=position) for n in names])
        ]
    )


def _flag_fields(events, add_error):
    events.on_field(lambda walker, field: add_error(f"saw {field.name}", field.position))


def test_errors_carry_rule_name_and_location(schema):
    document = _document("name", position=Position(3, 5, "doc.graphql"))
    errors = validate(schema, document, [Rule("FlagFields", _flag_fields)])

    assert len(errors) == 1
    assert errors[0].rule == "FlagFields"
    assert errors[0].message == "saw name"
    assert errors[0].locations == [(3, 5)]
    assert str(errors[0]) == "doc.graphql:3: saw name"


def test_no_rules_means_no_errors(schema):
    assert validate(schema, _document("name"), []) == []


def test_errors_follow_rule_order(schema):
    def first(events, add_error):
        events.on_field(lambda walker, field: add_error("first"))

    def second(events, add_error):
        events.on_field(lambda walker, field: add_error("second"))

    errors = validate(schema, _document("name"), [Rule("A", first), Rule("B", second)])
    assert [(e.rule, e.message) for e in errors] == [("A", "first"), ("B", "second")]


def test_rule_state_is_fresh_on_each_run(schema):
    def once_per_name(events, add_error):
        seen = set()

        def check(walker, field):
            if field.name in seen:
                add_error(f"again {field.name}")
            seen.add(field.name)

        events.on_field(check)

    rules = [Rule("Once", once_per_name)]
    first = validate(schema, _document("name"), rules)
    second = validate(schema, _document("name"), rules)
    assert first == []
    assert second == []
    repeated = validate(schema, _document("name", "name"), rules)
    assert [e.message for e in repeated] == ["again name"]


def test_registered_rules_are_used_by_default(schema, empty_registry):
    add_rule("FlagFields", _flag_fields)
    assert [rule.name for rule in registered_rules()] == ["FlagFields"]
    errors = validate(schema, _document("name"))
    assert [e.rule for e in errors] == ["FlagFields"]


def test_registered_rules_returns_a_copy(empty_registry):
    add_rule("FlagFields", _flag_fields)
    copy = registered_rules()
    copy.clear()
    assert len(registered_rules()) == 1