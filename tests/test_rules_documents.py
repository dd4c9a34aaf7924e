from gqlvalidator.ast import (
    Argument,
    ArgumentDefinition,
    Definition,
    DefinitionKind,
    Directive,
    DirectiveDefinition,
    DirectiveLocation,
    Field,
    FieldDefinition,
    FragmentDefinition,
    FragmentSpread,
    InlineFragment,
    OperationDefinition,
    Position,
    QueryDocument,
    SchemaDocument,
    Value,
    ValueKind,
    VariableDefinition,
    named_type,
    non_null_named_type,
)
from gqlvalidator.rules.documents import (
    known_directives,
    known_fragment_names,
    known_type_names,
    lone_anonymous_operation,
    no_fragment_cycles,
    no_undefined_variables,
    no_unused_fragments,
    no_unused_variables,
)
from gqlvalidator.schema import validate_schema_document
from gqlvalidator.validator import Rule, validate


def make_schema():
    scalars = [
        Definition(kind=DefinitionKind.SCALAR, name=name, built_in=True)
        for name in ("String", "ID", "Boolean", "Int")
    ]
    pet = Definition(
        kind=DefinitionKind.INTERFACE,
        name="Pet",
        fields=[FieldDefinition("name", named_type("String"))],
    )
    dog = Definition(
        kind=DefinitionKind.OBJECT,
        name="Dog",
        interfaces=["Pet"],
        fields=[FieldDefinition("name", named_type("String"))],
    )
    query = Definition(
        kind=DefinitionKind.OBJECT,
        name="Query",
        fields=[
            FieldDefinition("name", named_type("String")),
            FieldDefinition(
                "dog",
                named_type("Dog"),
                arguments=[ArgumentDefinition("id", named_type("ID"))],
            ),
        ],
    )
    directives = [
        DirectiveDefinition(
            "include",
            arguments=[ArgumentDefinition("if", non_null_named_type("Boolean"))],
            locations=[
                DirectiveLocation.FIELD,
                DirectiveLocation.FRAGMENT_SPREAD,
                DirectiveLocation.INLINE_FRAGMENT,
            ],
        ),
        DirectiveDefinition("onlyQuery", locations=[DirectiveLocation.QUERY]),
    ]
    return validate_schema_document(
        SchemaDocument(definitions=[*scalars, pet, dog, query], directives=directives)
    )


def run(rule, operations=(), fragments=()):
    document = QueryDocument(operations=list(operations), fragments=list(fragments))
    return validate(make_schema(), document, [Rule("Test", rule)])


def messages(errors):
    return [error.message for error in errors]


def test_unknown_directive():
    op = OperationDefinition(
        selection_set=[Field("name", directives=[Directive("foo", position=Position(1, 8))])]
    )
    errors = run(known_directives, [op])
    assert messages(errors) == ['Unknown directive "@foo".']
    assert errors[0].rule == "Test"
    assert errors[0].locations == [(1, 8)]


def test_directive_in_wrong_location():
    op = OperationDefinition(
        directives=[Directive("include", position=Position(1, 7))],
        selection_set=[Field("name")],
    )
    assert messages(run(known_directives, [op])) == [
        'Directive "@include" may not be used on QUERY.'
    ]


def test_misplaced_directive_reported_once_per_position():
    fragment = FragmentDefinition(
        "F",
        type_condition="Query",
        selection_set=[
            Field("name", directives=[Directive("onlyQuery", position=Position(3, 9))])
        ],
    )
    op = OperationDefinition(selection_set=[FragmentSpread("F")])
    assert messages(run(known_directives, [op], [fragment])) == [
        'Directive "@onlyQuery" may not be used on FIELD.'
    ]


def test_known_directive_in_place_is_accepted():
    directive = Directive(
        "include", arguments=[Argument("if", Value(kind=ValueKind.BOOLEAN, raw="true"))]
    )
    op = OperationDefinition(selection_set=[Field("name", directives=[directive])])
    assert run(known_directives, [op]) == []


def test_unknown_fragment():
    op = OperationDefinition(selection_set=[FragmentSpread("Missing")])
    assert messages(run(known_fragment_names, [op])) == ['Unknown fragment "Missing".']


def test_unknown_variable_type():
    var = VariableDefinition("v", named_type("Unknown"))
    op = OperationDefinition(name="Q", variable_definitions=[var], selection_set=[Field("name")])
    assert messages(run(known_type_names, [op])) == ['Unknown type "Unknown".']


def test_unknown_inline_fragment_type():
    op = OperationDefinition(
        selection_set=[InlineFragment(type_condition="Dgo", selection_set=[Field("name")])]
    )
    assert messages(run(known_type_names, [op])) == ['Unknown type "Dgo".']


def test_unknown_fragment_type_suggests_similar():
    fragment = FragmentDefinition("F", type_condition="Dgo", selection_set=[Field("name")])
    errors = run(known_type_names, [], [fragment])
    assert len(errors) == 1
    assert errors[0].message.startswith('Unknown type "Dgo".')
    assert '"Dog"' in errors[0].message


def test_known_types_are_accepted():
    var = VariableDefinition("v", named_type("ID"))
    fragment = FragmentDefinition("F", type_condition="Dog", selection_set=[Field("name")])
    op = OperationDefinition(variable_definitions=[var], selection_set=[Field("name")])
    assert run(known_type_names, [op], [fragment]) == []


def test_anonymous_operation_must_be_alone():
    anonymous = OperationDefinition(selection_set=[Field("name")])
    named = OperationDefinition(name="Other", selection_set=[Field("name")])
    assert messages(run(lone_anonymous_operation, [anonymous, named])) == [
        "This anonymous operation must be the only defined operation."
    ]
    assert run(lone_anonymous_operation, [anonymous]) == []


def test_fragment_spreading_itself():
    fragment = FragmentDefinition("A", type_condition="Query", selection_set=[FragmentSpread("A")])
    assert messages(run(no_fragment_cycles, [], [fragment])) == [
        'Cannot spread fragment "A" within itself.'
    ]


def test_fragment_cycle_through_others():
    fragments = [
        FragmentDefinition("A", type_condition="Query", selection_set=[FragmentSpread("B")]),
        FragmentDefinition("B", type_condition="Query", selection_set=[FragmentSpread("C")]),
        FragmentDefinition("C", type_condition="Query", selection_set=[FragmentSpread("A")]),
    ]
    assert messages(run(no_fragment_cycles, [], fragments)) == [
        'Cannot spread fragment "A" within itself via "B", "C".'
    ]


def test_fragments_without_cycle():
    fragments = [
        FragmentDefinition("A", type_condition="Query", selection_set=[FragmentSpread("B")]),
        FragmentDefinition("B", type_condition="Query", selection_set=[Field("name")]),
    ]
    assert run(no_fragment_cycles, [], fragments) == []


def _dog_with_variable(name="x"):
    return Field(
        "dog",
        arguments=[Argument("id", Value(kind=ValueKind.VARIABLE, raw=name))],
        selection_set=[Field("name")],
    )


def test_undefined_variable_in_named_operation():
    op = OperationDefinition(name="Foo", selection_set=[_dog_with_variable()])
    assert messages(run(no_undefined_variables, [op])) == [
        'Variable "$x" is not defined by operation "Foo".'
    ]


def test_undefined_variable_in_anonymous_operation():
    op = OperationDefinition(selection_set=[_dog_with_variable()])
    assert messages(run(no_undefined_variables, [op])) == ['Variable "$x" is not defined.']


def test_defined_variable_is_accepted():
    op = OperationDefinition(
        variable_definitions=[VariableDefinition("x", named_type("ID"))],
        selection_set=[_dog_with_variable()],
    )
    assert run(no_undefined_variables, [op]) == []


def test_unused_fragment():
    fragment = FragmentDefinition("F", type_condition="Query", selection_set=[Field("name")])
    op = OperationDefinition(selection_set=[Field("name")])
    assert messages(run(no_unused_fragments, [op], [fragment])) == [
        'Fragment "F" is never used.'
    ]


def test_used_fragment_is_accepted():
    fragment = FragmentDefinition("F", type_condition="Query", selection_set=[Field("name")])
    op = OperationDefinition(selection_set=[FragmentSpread("F")])
    assert run(no_unused_fragments, [op], [fragment]) == []


def test_unused_variables():
    named = OperationDefinition(
        name="Foo",
        variable_definitions=[VariableDefinition("a", named_type("ID"))],
        selection_set=[Field("name")],
    )
    assert messages(run(no_unused_variables, [named])) == [
        'Variable "$a" is never used in operation "Foo".'
    ]
    anonymous = OperationDefinition(
        variable_definitions=[VariableDefinition("a", named_type("ID"))],
        selection_set=[Field("name")],
    )
    assert messages(run(no_unused_variables, [anonymous])) == ['Variable "$a" is never used.']


def test_variable_used_in_fragment_counts():
    fragment = FragmentDefinition(
        "F", type_condition="Query", selection_set=[_dog_with_variable("a")]
    )
    op = OperationDefinition(
        name="Foo",
        variable_definitions=[VariableDefinition("a", named_type("ID"))],
        selection_set=[FragmentSpread("F")],
    )
    assert run(no_unused_variables, [op], [fragment]) == []