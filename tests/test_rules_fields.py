import pytest

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
    named_type,
    non_null_named_type,
)
from gqlvalidator.rules.fields import (
    fields_on_correct_type,
    fragments_on_composite_types,
    known_argument_names,
)
from gqlvalidator.schema import validate_schema_document
from gqlvalidator.validator import Rule, validate


def _obj(name, *fields, interfaces=()):
    return Definition(
        kind=DefinitionKind.OBJECT, name=name, fields=list(fields), interfaces=list(interfaces)
    )


def _f(name, type_name, *args):
    return FieldDefinition(name=name, type=named_type(type_name), arguments=list(args))


@pytest.fixture
def schema():
    scalars = [
        Definition(kind=DefinitionKind.SCALAR, name=n, built_in=True)
        for n in ("String", "Int", "Boolean")
    ]
    pet = Definition(kind=DefinitionKind.INTERFACE, name="Pet", fields=[_f("name", "String")])
    dog = _obj(
        "Dog",
        _f("name", "String"),
        _f("barkVolume", "Int"),
        _f("nickname", "String"),
        interfaces=["Pet"],
    )
    cat = _obj("Cat", _f("name", "String"), _f("meowVolume", "Int"), interfaces=["Pet"])
    cat_or_dog = Definition(kind=DefinitionKind.UNION, name="CatOrDog", types=["Cat", "Dog"])
    query = _obj(
        "Query",
        _f("pet", "Pet"),
        _f("dog", "Dog", ArgumentDefinition(name="name", type=named_type("String"))),
        _f("catOrDog", "CatOrDog"),
    )
    skip = DirectiveDefinition(
        name="skip",
        arguments=[ArgumentDefinition(name="if", type=non_null_named_type("Boolean"))],
        locations=[DirectiveLocation.FIELD, DirectiveLocation.INLINE_FRAGMENT],
    )
    return validate_schema_document(
        SchemaDocument(
            definitions=[*scalars, pet, dog, cat, cat_or_dog, query], directives=[skip]
        )
    )


def _run(schema, rule, *selections, fragments=()):
    document = QueryDocument(
        operations=[OperationDefinition(selection_set=list(selections))],
        fragments=list(fragments),
    )
    return validate(schema, document, [Rule(rule.__name__, rule)])


def test_known_field_is_valid(schema):
    assert _run(schema, fields_on_correct_type, Field("dog", selection_set=[Field("name")])) == []


def test_unknown_field_suggests_similar_field(schema):
    position = Position(2, 3, "q")
    errors = _run(
        schema,
        fields_on_correct_type,
        Field("dog", selection_set=[Field("nam", position=position)]),
    )
    assert [e.message for e in errors] == ['Cannot query field "nam" on type "Dog". Did you mean "name"?']
    assert errors[0].locations == [(2, 3)]
    assert errors[0].rule == "fields_on_correct_type"


def test_interface_field_suggests_inline_fragment(schema):
    errors = _run(schema, fields_on_correct_type, Field("pet", selection_set=[Field("barkVolume")]))
    assert [e.message for e in errors] == [
        'Cannot query field "barkVolume" on type "Pet". '
        'Did you mean to use an inline fragment on "Dog"?'
    ]


def test_union_suggestions_put_shared_interface_first(schema):
    errors = _run(schema, fields_on_correct_type, Field("catOrDog", selection_set=[Field("name")]))
    assert [e.message for e in errors] == [
        'Cannot query field "name" on type "CatOrDog". '
        'Did you mean to use an inline fragment on "Pet", "Cat" or "Dog"?'
    ]


def test_unknown_field_without_suggestion(schema):
    errors = _run(schema, fields_on_correct_type, Field("dog", selection_set=[Field("xyzzyxyz")]))
    assert len(errors) == 1
    assert errors[0].message.startswith('Cannot query field "xyzzyxyz" on type "Dog".')
    assert "Did you mean" not in errors[0].message


def test_fields_under_unknown_field_are_not_reported(schema):
    errors = _run(schema, fields_on_correct_type, Field("nothing", selection_set=[Field("a")]))
    assert len(errors) == 1
    assert 'Cannot query field "nothing" on type "Query".' in errors[0].message


def test_typename_on_union_is_valid(schema):
    errors = _run(
        schema, fields_on_correct_type, Field("catOrDog", selection_set=[Field("__typename")])
    )
    assert errors == []


def test_inline_fragment_on_scalar(schema):
    fragment = InlineFragment(type_condition="String", selection_set=[Field("x")])
    errors = _run(schema, fragments_on_composite_types, Field("dog", selection_set=[fragment]))
    assert [e.message for e in errors] == [
        'Fragment cannot condition on non composite type "String".'
    ]


def test_inline_fragment_on_composite_or_unknown_type(schema):
    fragments = [
        InlineFragment(type_condition="Dog", selection_set=[Field("name")]),
        InlineFragment(type_condition="Nope", selection_set=[Field("name")]),
        InlineFragment(selection_set=[Field("name")]),
    ]
    errors = _run(schema, fragments_on_composite_types, Field("pet", selection_set=fragments))
    assert errors == []


def test_fragment_definition_on_scalar(schema):
    fragment = FragmentDefinition(name="F", type_condition="Int", selection_set=[Field("x")])
    errors = _run(
        schema, fragments_on_composite_types, FragmentSpread(name="F"), fragments=[fragment]
    )
    assert [e.message for e in errors] == [
        'Fragment "F" cannot condition on non composite type "Int".'
    ]


def test_unknown_field_argument(schema):
    arg = Argument(name="nam", value=Value(kind=ValueKind.STRING, raw="x"))
    errors = _run(
        schema,
        known_argument_names,
        Field("dog", arguments=[arg], selection_set=[Field("name")]),
    )
    assert len(errors) == 1
    assert errors[0].message.startswith('Unknown argument "nam" on field "Query.dog".')
    assert errors[0].message.endswith(' Did you mean "name"?')


def test_unknown_directive_argument(schema):
    arg = Argument(name="iff", value=Value(kind=ValueKind.BOOLEAN, raw="true"))
    directive = Directive(name="skip", arguments=[arg], position=Position(1, 9, "q"))
    errors = _run(
        schema,
        known_argument_names,
        Field("dog", directives=[directive], selection_set=[Field("name")]),
    )
    assert len(errors) == 1
    assert errors[0].message.startswith('Unknown argument "iff" on directive "@skip".')
    assert ' Did you mean "if"?' in errors[0].message
    assert errors[0].locations == [(1, 9)]


def test_known_and_undefined_targets_have_no_argument_errors(schema):
    good = Argument(name="name", value=Value(kind=ValueKind.STRING, raw="x"))
    on_unknown_directive = Directive(
        name="unknown", arguments=[Argument(name="a", value=Value(kind=ValueKind.INT, raw="1"))]
    )
    on_unknown_field = Field(
        "nothing", arguments=[Argument(name="b", value=Value(kind=ValueKind.INT, raw="1"))]
    )
    errors = _run(
        schema,
        known_argument_names,
        Field(
            "dog",
            arguments=[good],
            directives=[on_unknown_directive],
            selection_set=[Field("name")],
        ),
        on_unknown_field,
    )
    assert errors == []