# gqlvalidator

Validation for GraphQL documents that have already been parsed into syntax
trees. The package builds a checked `Schema` from a schema document, runs the
standard query validation rules against an operation document, and coerces the
variable values a client sends with a request.

It works on the node classes in `gqlvalidator.ast` (`SchemaDocument`,
`Definition`, `QueryDocument`, `OperationDefinition`, `Field`, `Value` and so
on), which are plain dataclasses you construct yourself.

## What it does not do

There is no parser: the package does not read GraphQL text. Documents must be
built as `gqlvalidator.ast` nodes by your own code or another tool. Nor does it
execute queries or resolve introspection; it only checks documents and
variable values. There is no command-line tool.

## Installation

```
pip install gqlvalidator
```

To run the test suite:

```
pip install "gqlvalidator[test]"
pytest
```

## Building a schema

`gqlvalidator.schema.validate_schema_document(document)` takes a
`SchemaDocument` and returns a `Schema`. Type extensions are merged into their
base types (an extension of an undeclared type creates it), possible types and
implemented interfaces are recorded, and root operation types are taken from
the `schema` definition and its extensions or, when there is no `schema`
definition, from types named `Query`, `Mutation` and `Subscription`. The query
type gains the `__schema` and `__type` introspection fields.

Anything wrong with the schema — a redeclared type or directive, several
`schema` definitions, an undefined type or directive, a directive used where
it is not allowed, an interface that is not implemented correctly, a reserved
`__` name — raises `gqlvalidator.errors.GraphQLError` located at the offending
node.

```python
from gqlvalidator.schema import validate_schema_document

schema = validate_schema_document(schema_document)
print(schema.query.name)
print([t.name for t in schema.get_possible_types(schema.types["Character"])])
print([t.name for t in schema.get_implements(schema.types["Droid"])])
```

`gqlvalidator.schema.is_covariant(schema, required, actual)` tells whether a
field type may stand in for an interface's field type.

## Validating a query

`gqlvalidator.standard.validate_query(schema, document)` runs every standard
rule against a `QueryDocument` and returns the list of `GraphQLError`s found;
an empty list means the document is valid. Each error's `rule` attribute names
the rule that reported it.

```python
from gqlvalidator.standard import validate_query

for error in validate_query(schema, query_document):
    print(error)  # e.g. 'query.graphql:4: Field "myAction" argument ...'
```

The standard rules, returned in order by
`gqlvalidator.standard.standard_rules()`, are: FieldsOnCorrectType,
FragmentsOnCompositeTypes, KnownArgumentNames, KnownDirectives,
KnownFragmentNames, KnownTypeNames, LoneAnonymousOperation, NoFragmentCycles,
NoUndefinedVariables, NoUnusedFragments, NoUnusedVariables,
OverlappingFieldsCanBeMerged, PossibleFragmentSpreads,
ProvidedRequiredArguments, ScalarLeafs, SingleFieldSubscriptions,
UniqueArgumentNames, UniqueDirectivesPerLocation, UniqueFragmentNames,
UniqueInputFieldNames, UniqueOperationNames, UniqueVariableNames,
ValuesOfCorrectType, VariablesAreInputTypes and VariablesInAllowedPosition.
The functions behind them live in the `gqlvalidator.rules` modules
(`fields`, `documents`, `selections`, `overlapping`, `uniqueness`, `values`).

`gqlvalidator.validator.validate(schema, document, rules)` runs any list of
`Rule`s of your choosing. Called without `rules`, it runs the rules registered
with `add_rule` — none by default; the standard rules are not registered
globally.

## Writing a rule

A rule is a function `rule(events, add_error)`. It registers handlers on the
`gqlvalidator.walk.Events` it is given — `on_operation`, `on_field`,
`on_fragment`, `on_inline_fragment`, `on_fragment_spread`, `on_directive`,
`on_directive_list`, `on_value`, `on_variable` — and reports problems with
`add_error(message, position)`. Each handler is called with the `Walker` and
the node being visited; by then the walker has attached schema definitions to
the node (for example `field.definition` and `field.object_definition`).

```python
from gqlvalidator.validator import Rule, validate

def no_secret_field(events, add_error):
    def check(walker, field):
        if field.name == "secret":
            add_error('Field "secret" is not allowed.', field.position)
    events.on_field(check)

errors = validate(schema, query_document, [Rule("NoSecretField", no_secret_field)])
```

Register a rule globally with `gqlvalidator.validator.add_rule(name, rule)`;
`gqlvalidator.validator.registered_rules()` lists what has been registered.

For a plain traversal without rules, build an `Events`, add handlers and call
`gqlvalidator.walk.walk(schema, document, events)`.

## Coercing variables

`gqlvalidator.vars.variable_values(schema, operation, variables)` checks the
values supplied for an operation's variables against their declared types and
returns the coerced mapping. Defaults are filled in, single values are wrapped
into lists where a list is expected, enum values are matched without regard to
case, and input objects are checked for missing, null and unknown fields. A
problem raises `GraphQLError` whose text carries the path, such as
`input: variable.var[0].name must be defined`.

```python
from gqlvalidator.vars import variable_values

coerced = variable_values(schema, operation, {"id": 1})
```

## Errors

`gqlvalidator.errors.GraphQLError` has `message`, `locations`, `path`, `rule`
and `file`. `error_at(position, message)` and `error_path(path, message)`
build one; `format_path(path)` renders a path as `name.name[0].name`.

## Suggestions

`gqlvalidator.suggestions.suggestion_list(text, options)` returns the options
close enough to `text` to be worth suggesting, nearest first:

```python
from gqlvalidator.suggestions import suggestion_list

suggestion_list("nmae", ["name", "id"])  # ["name"]
```

`lexical_distance`, `quoted_or_list`, `or_list` and `did_you_mean` in the same
module build the "Did you mean ...?" parts of error messages.