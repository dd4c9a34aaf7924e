"""Rules about literal values and the variables that stand for them."""

from __future__ import annotations

import dataclasses
import re

from ..ast import DefinitionKind, OperationDefinition, Value, ValueKind, for_name
from ..errors import GraphQLError
from ..suggestions import did_you_mean
from ..validator import AddError
from ..walk import Events, Walker

_BUILT_IN_SCALARS = ("Int", "Float", "String", "Boolean", "ID")
_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1


def _out_of_int32(raw: str) -> bool:
    if not _INTEGER.fullmatch(raw):
        return False
    return not _INT32_MIN <= int(raw) <= _INT32_MAX


def _unexpected_type_message(value: Value) -> str:
    expected = str(value.expected_type)
    if expected in ("Int", "Int!"):
        if _out_of_int32(value.raw):
            return f"Int cannot represent non 32-bit signed integer value: {value}"
        return f"Int cannot represent non-integer value: {value}"
    if expected in ("String", "String!", "[String]"):
        return f"String cannot represent a non string value: {value}"
    if expected in ("Boolean", "Boolean!"):
        return f"Boolean cannot represent a non boolean value: {value}"
    if expected in ("Float", "Float!"):
        return f"Float cannot represent non numeric value: {value}"
    if expected in ("ID", "ID!"):
        return f"ID cannot represent a non-string and non-integer value: {value}"
    if value.definition is not None and value.definition.kind is DefinitionKind.ENUM:
        return f'Enum "{expected}" cannot represent non-enum value: {value}.'
    return f'Expected value of type "{expected}", found {value}.'


def values_of_correct_type(events: Events, add_error: AddError) -> None:
    """Report literals that do not fit the type expected where they stand."""

    def unexpected(value: Value) -> None:
        add_error(_unexpected_type_message(value), value.position)

    def check(walker: Walker, value: Value) -> None:
        definition = value.definition
        expected = value.expected_type
        if definition is None or expected is None:
            return

        # Custom scalars validate their own values.
        if definition.kind is DefinitionKind.SCALAR and not definition.one_of(
            *_BUILT_IN_SCALARS
        ):
            return

        kind = value.kind
        if kind is ValueKind.VARIABLE:
            return

        possible_enums = (
            [enum_value.name for enum_value in definition.enum_values]
            if definition.kind is DefinitionKind.ENUM
            else []
        )

        try:
            value.value({})
        except (ValueError, GraphQLError):
            unexpected(value)

        if kind is ValueKind.NULL:
            if expected.non_null:
                add_error(
                    f'Expected value of type "{expected}", found {value}.', value.position
                )
        elif kind is ValueKind.LIST:
            if expected.elem is None:
                unexpected(value)
        elif kind is ValueKind.INT:
            if not definition.one_of("Int", "Float", "ID"):
                unexpected(value)
        elif kind is ValueKind.FLOAT:
            if not definition.one_of("Float"):
                unexpected(value)
        elif kind in (ValueKind.STRING, ValueKind.BLOCK):
            if definition.kind is DefinitionKind.ENUM:
                add_error(
                    f'Enum "{expected}" cannot represent non-enum value: {value}.'
                    + did_you_mean("Did you mean the enum value", value.raw, possible_enums),
                    value.position,
                )
            elif not definition.one_of("String", "ID"):
                unexpected(value)
        elif kind is ValueKind.ENUM:
            if definition.kind is not DefinitionKind.ENUM:
                add_error(
                    _unexpected_type_message(value)
                    + did_you_mean(
                        "Did you mean the enum value", value.raw, possible_enums, quoted=False
                    ),
                    value.position,
                )
            elif for_name(definition.enum_values, value.raw) is None:
                add_error(
                    f'Value "{value}" does not exist in "{expected}" enum.'
                    + did_you_mean("Did you mean the enum value", value.raw, possible_enums),
                    value.position,
                )
        elif kind is ValueKind.BOOLEAN:
            if not definition.one_of("Boolean"):
                unexpected(value)
        elif kind is ValueKind.OBJECT:
            _check_object(value, add_error)
        else:
            raise TypeError(f"unhandled value kind {kind}")

    events.on_value(check)


def _check_object(value: Value, add_error: AddError) -> None:
    definition = value.definition
    for field_def in definition.fields:
        if (
            field_def.type.non_null
            and for_name(value.children, field_def.name) is None
            and field_def.default_value is None
        ):
            add_error(
                f'Field "{definition.name}.{field_def.name}" of required type '
                f'"{field_def.type}" was not provided.',
                value.position,
            )

    defined = [field_def.name for field_def in definition.fields]
    for child in value.children:
        if child.name in defined:
            continue
        add_error(
            f'Field "{child.name}" is not defined by type "{definition.name}".'
            + did_you_mean("Did you mean", child.name, defined),
            child.position,
        )


def variables_are_input_types(events: Events, add_error: AddError) -> None:
    """Report variables declared with an output type."""

    def check(walker: Walker, operation: OperationDefinition) -> None:
        for var_def in operation.variable_definitions:
            if var_def.definition is None:
                continue
            if not var_def.definition.is_input_type():
                add_error(
                    f'Variable "${var_def.variable}" cannot be non-input type "{var_def.type}".',
                    var_def.position,
                )

    events.on_operation(check)


def variables_in_allowed_position(events: Events, add_error: AddError) -> None:
    """Report variables whose declared type does not fit where they are used."""

    def check(walker: Walker, value: Value) -> None:
        if (
            value.kind is not ValueKind.VARIABLE
            or value.expected_type is None
            or value.variable_definition is None
            or walker.current_operation is None
        ):
            return

        expected = value.expected_type
        default = value.variable_definition.default_value
        # A non-null default lets a nullable variable fill a non-null position.
        if default is not None and default.kind is not ValueKind.NULL and expected.non_null:
            expected = dataclasses.replace(expected, non_null=False)

        if not value.variable_definition.type.is_compatible(expected):
            add_error(
                f'Variable "{value}" of type "{value.variable_definition.type}" used in '
                f'position expecting type "{value.expected_type}".',
                value.position,
            )

    events.on_value(check)