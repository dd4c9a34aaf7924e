"""Assembly and validation of a schema from its parsed definitions."""

from __future__ import annotations

import json
from typing import Iterable, Optional

from .ast import (
    ArgumentDefinition,
    Definition,
    DefinitionKind,
    Directive,
    DirectiveDefinition,
    DirectiveLocation,
    FieldDefinition,
    Operation,
    Position,
    Schema,
    SchemaDefinition,
    SchemaDocument,
    Type,
    for_name,
    named_type,
    non_null_named_type,
)
from .errors import GraphQLError, error_at

_OUTPUT_FIELD_KINDS = (
    DefinitionKind.SCALAR,
    DefinitionKind.OBJECT,
    DefinitionKind.INTERFACE,
    DefinitionKind.UNION,
    DefinitionKind.ENUM,
)
_INPUT_FIELD_KINDS = (
    DefinitionKind.SCALAR,
    DefinitionKind.ENUM,
    DefinitionKind.INPUT_OBJECT,
)


def validate_schema_document(document: SchemaDocument) -> Schema:
    """Build a Schema from a parsed schema document; raises GraphQLError."""
    schema = Schema()

    for definition in document.definitions:
        if definition.name in schema.types:
            raise error_at(definition.position, f"Cannot redeclare type {definition.name}.")
        schema.types[definition.name] = definition

    definitions = list(document.definitions)

    for ext in document.extensions:
        definition = schema.types.get(ext.name)
        if definition is None:
            definition = Definition(kind=ext.kind, name=ext.name, position=ext.position)
            schema.types[ext.name] = definition
            definitions.append(definition)

        if definition.kind != ext.kind:
            raise error_at(
                ext.position,
                f"Cannot extend type {ext.name} because the base type is a "
                f"{definition.kind}, not {ext.kind}.",
            )

        definition.directives.extend(ext.directives)
        definition.interfaces.extend(ext.interfaces)
        definition.fields.extend(ext.fields)
        definition.types.extend(ext.types)
        definition.enum_values.extend(ext.enum_values)

    for definition in definitions:
        if definition.kind is DefinitionKind.UNION:
            for member in definition.types:
                schema.add_possible_type(definition.name, schema.types.get(member))
                schema.add_implements(member, definition)
        elif definition.kind in (DefinitionKind.INPUT_OBJECT, DefinitionKind.OBJECT):
            for interface in definition.interfaces:
                schema.add_possible_type(interface, definition)
                schema.add_implements(definition.name, schema.types.get(interface))
            schema.add_possible_type(definition.name, definition)
        elif definition.kind is DefinitionKind.INTERFACE:
            for interface in definition.interfaces:
                schema.add_possible_type(interface, definition)
                schema.add_implements(definition.name, schema.types.get(interface))

    for directive in document.directives:
        if directive.name in schema.directives:
            raise error_at(directive.position, f"Cannot redeclare directive {directive.name}.")
        schema.directives[directive.name] = directive

    if len(document.schema) > 1:
        raise error_at(
            document.schema[1].position,
            "Cannot have multiple schema entry points, consider schema extensions instead.",
        )

    if len(document.schema) == 1:
        schema.description = document.schema[0].description
        _assign_roots(schema, document.schema[0])

    for ext in document.schema_extension:
        _assign_roots(schema, ext)

    _validate_type_definitions(schema)
    _validate_directive_definitions(schema)

    # Root types are inferred by name only when no schema definition is given.
    if not document.schema:
        if schema.query is None:
            schema.query = schema.types.get("Query")
        if schema.mutation is None:
            schema.mutation = schema.types.get("Mutation")
        if schema.subscription is None:
            schema.subscription = schema.types.get("Subscription")

    if schema.query is not None:
        schema.query.fields.extend(
            [
                FieldDefinition(name="__schema", type=non_null_named_type("__Schema")),
                FieldDefinition(
                    name="__type",
                    type=named_type("__Type"),
                    arguments=[
                        ArgumentDefinition(name="name", type=non_null_named_type("String"))
                    ],
                ),
            ]
        )

    return schema


def _assign_roots(schema: Schema, definition: SchemaDefinition) -> None:
    for entrypoint in definition.operation_types:
        root = schema.types.get(entrypoint.type)
        if root is None:
            raise error_at(
                entrypoint.position,
                f"Schema root {entrypoint.operation} refers to a type "
                f"{entrypoint.type} that does not exist.",
            )
        if entrypoint.operation is Operation.QUERY:
            schema.query = root
        elif entrypoint.operation is Operation.MUTATION:
            schema.mutation = root
        elif entrypoint.operation is Operation.SUBSCRIPTION:
            schema.subscription = root


def _validate_type_definitions(schema: Schema) -> None:
    for name in sorted(schema.types):
        _validate_definition(schema, schema.types[name])


def _validate_directive_definitions(schema: Schema) -> None:
    for name in sorted(schema.directives):
        directive = schema.directives[name]
        _validate_name(directive.position, directive.name)
        _validate_args(schema, directive.arguments, directive)


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def _kind_list(kinds: Iterable[DefinitionKind]) -> str:
    return ", ".join(str(kind) for kind in kinds)


def _validate_definition(schema: Schema, definition: Definition) -> None:
    for field_def in definition.fields:
        _validate_name(field_def.position, field_def.name)
        _validate_type_ref(schema, field_def.type)
        _validate_args(schema, field_def.arguments, None)
        location = (
            DirectiveLocation.INPUT_FIELD_DEFINITION
            if definition.kind is DefinitionKind.INPUT_OBJECT
            else DirectiveLocation.FIELD_DEFINITION
        )
        _validate_directives(schema, field_def.directives, location, None)

    for member in definition.types:
        member_def = schema.types.get(member)
        if member_def is None:
            raise error_at(definition.position, f"Undefined type {_quote(member)}.")
        if member_def.kind is not DefinitionKind.OBJECT:
            raise error_at(
                definition.position,
                f"{definition.kind} type {_quote(member)} must be "
                f"{_kind_list([DefinitionKind.OBJECT])}.",
            )

    for interface in definition.interfaces:
        _validate_implements(schema, definition, interface)

    kind = definition.kind
    if kind in (DefinitionKind.OBJECT, DefinitionKind.INTERFACE):
        if not definition.fields:
            raise error_at(definition.position, f"{kind} must define one or more fields.")
        _check_field_kinds(schema, definition, _OUTPUT_FIELD_KINDS)
    elif kind is DefinitionKind.ENUM:
        if not definition.enum_values:
            raise error_at(
                definition.position, f"{kind} must define one or more unique enum values."
            )
    elif kind is DefinitionKind.INPUT_OBJECT:
        if not definition.fields:
            raise error_at(definition.position, f"{kind} must define one or more input fields.")
        _check_field_kinds(schema, definition, _INPUT_FIELD_KINDS)

    seen: set[str] = set()
    for field_def in definition.fields:
        if field_def.name in seen:
            raise error_at(
                field_def.position,
                f"Field {definition.name}.{field_def.name} can only be defined once.",
            )
        seen.add(field_def.name)

    if not definition.built_in:
        _validate_name(definition.position, definition.name)

    _validate_directives(
        schema, definition.directives, DirectiveLocation(definition.kind.value), None
    )


def _check_field_kinds(
    schema: Schema, definition: Definition, allowed: tuple[DefinitionKind, ...]
) -> None:
    for field_def in definition.fields:
        field_type = schema.types.get(field_def.type.name())
        if field_type is not None and field_type.kind not in allowed:
            raise error_at(
                field_def.position,
                f"{definition.kind} field must be one of {_kind_list(allowed)}.",
            )


def _validate_type_ref(schema: Schema, type_: Type) -> None:
    if schema.types.get(type_.name()) is None:
        raise error_at(type_.position, f"Undefined type {type_.name()}.")


def _validate_args(
    schema: Schema,
    args: Iterable[ArgumentDefinition],
    current: Optional[DirectiveDefinition],
) -> None:
    for arg in args:
        _validate_name(arg.position, arg.name)
        _validate_type_ref(schema, arg.type)
        arg_type = schema.types[arg.type.name()]
        if not arg_type.is_input_type():
            raise error_at(
                arg.position,
                f"cannot use {arg.type} as argument {arg.name} because "
                f"{arg_type.kind} is not a valid input type",
            )
        _validate_directives(
            schema, arg.directives, DirectiveLocation.ARGUMENT_DEFINITION, current
        )


def _validate_directives(
    schema: Schema,
    directives: Iterable[Directive],
    location: DirectiveLocation,
    current: Optional[DirectiveDefinition],
) -> None:
    for directive in directives:
        _validate_name(directive.position, directive.name)
        if current is not None and directive.name == current.name:
            raise error_at(
                directive.position, f"Directive {current.name} cannot refer to itself."
            )
        definition = schema.directives.get(directive.name)
        if definition is None:
            raise error_at(directive.position, f"Undefined directive {directive.name}.")
        if location not in definition.locations:
            raise error_at(
                directive.position,
                f"Directive {directive.name} is not applicable on {location}.",
            )
        directive.definition = definition


def _validate_implements(schema: Schema, definition: Definition, interface_name: str) -> None:
    interface = schema.types.get(interface_name)
    if interface is None:
        raise error_at(definition.position, f"Undefined type {_quote(interface_name)}.")
    if interface.kind is not DefinitionKind.INTERFACE:
        raise error_at(
            definition.position,
            f"{_quote(interface_name)} is a non interface type {interface.kind}.",
        )
    prefix = f"For {definition.name} to implement {interface.name}"
    for required in interface.fields:
        found = for_name(definition.fields, required.name)
        if found is None:
            raise error_at(
                definition.position, f"{prefix} it must have a field called {required.name}."
            )
        if not is_covariant(schema, required.type, found.type):
            raise error_at(
                found.position,
                f"{prefix} the field {required.name} must have type {required.type}.",
            )
        for required_arg in required.arguments:
            found_arg = for_name(found.arguments, required_arg.name)
            if found_arg is None:
                raise error_at(
                    found.position,
                    f"{prefix} the field {required.name} must have the same arguments "
                    f"but it is missing {required_arg.name}.",
                )
            if not required_arg.type.is_compatible(found_arg.type):
                raise error_at(
                    found_arg.position,
                    f"{prefix} the field {required.name} must have the same arguments "
                    f"but {required_arg.name} has the wrong type.",
                )
        for extra in found.arguments:
            if (
                for_name(required.arguments, extra.name) is None
                and extra.type.non_null
                and extra.default_value is None
            ):
                raise error_at(
                    extra.position,
                    f"{prefix} any additional arguments on {found.name} must be optional "
                    f"or have a default value but {extra.name} is required.",
                )
    _validate_implements_ancestors(schema, definition, interface_name)


def _validate_implements_ancestors(
    schema: Schema, definition: Definition, interface_name: str
) -> None:
    interface = schema.types.get(interface_name)
    if interface is None:
        raise error_at(definition.position, f"Undefined type {_quote(interface_name)}.")
    for transitive in interface.interfaces:
        if transitive in definition.interfaces:
            continue
        if transitive == definition.name:
            raise error_at(
                definition.position,
                f"Type {definition.name} cannot implement {interface_name} because it "
                f"would create a circular reference.",
            )
        raise error_at(
            definition.position,
            f"Type {definition.name} must implement {transitive} because it is "
            f"implemented by {interface_name}.",
        )


def is_covariant(schema: Schema, required: Type, actual: Type) -> bool:
    """Whether ``actual`` may stand in for ``required`` in an implementing field."""
    if required.non_null and not actual.non_null:
        return False

    if required.named_type:
        if required.named_type == actual.named_type:
            return True
        return any(
            possible is not None and possible.name == actual.named_type
            for possible in schema.possible_types.get(required.named_type, [])
        )

    if required.elem is None or actual.elem is None:
        return False

    return is_covariant(schema, required.elem, actual.elem)


def _validate_name(position: Optional[Position], name: str) -> None:
    if name.startswith("__"):
        raise error_at(
            position,
            f'Name "{name}" must not begin with "__", which is reserved by GraphQL introspection.',
        )


__all__ = ["validate_schema_document", "is_covariant", "GraphQLError"]