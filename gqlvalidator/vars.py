"""Coercion and validation of operation variable values."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from .ast import DefinitionKind, OperationDefinition, Schema, Type, for_name
from .errors import PathElement, error_path

Path = tuple[PathElement, ...]

_SCALAR_KINDS = {
    "Int": {"str", "int"},
    "Float": {"str", "float", "int"},
    "String": {"str"},
    "Boolean": {"bool"},
    "ID": {"int", "str"},
}


def variable_values(
    schema: Schema,
    operation: OperationDefinition,
    variables: Optional[Mapping[str, Any]] = None,
) -> dict[str, Any]:
    """Coerce the supplied variables for ``operation``; raises GraphQLError."""
    variables = variables or {}
    coerced: dict[str, Any] = {}

    for var_def in operation.variable_definitions:
        path: Path = ("variable", var_def.variable)
        definition = var_def.definition or schema.types.get(var_def.type.name())
        if definition is None or not definition.is_input_type():
            raise error_path(path, "must an input type")

        if var_def.variable in variables:
            value = variables[var_def.variable]
        elif var_def.default_value is not None:
            try:
                value = var_def.default_value.value(None)
            except ValueError as exc:
                raise error_path(path, str(exc)) from exc
        elif var_def.type.non_null:
            raise error_path(path, "must be defined")
        else:
            continue

        if value is None:
            if var_def.type.non_null:
                raise error_path(path, "cannot be null")
            coerced[var_def.variable] = None
        else:
            coerced[var_def.variable] = _coerce(schema, var_def.type, value, path)
    return coerced


def _kind(value: Any) -> str:
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, int):
        return "int"
    if isinstance(value, float):
        return "float"
    if isinstance(value, str):
        return "str"
    return type(value).__name__


def _coerce(schema: Schema, type_: Type, value: Any, path: Path) -> Any:
    if type_.elem is not None:
        if value is None:
            if type_.non_null:
                raise error_path(path, "cannot be null")
            return None
        items = list(value) if isinstance(value, (list, tuple)) else [value]
        result = []
        for index, item in enumerate(items):
            item_path = (*path, index)
            if item is None and type_.elem.non_null:
                raise error_path(item_path, "cannot be null")
            result.append(_coerce(schema, type_.elem, item, item_path))
        return result

    definition = schema.types.get(type_.named_type)
    if definition is None:
        raise LookupError(f"missing def for {type_.named_type}")

    if value is None:
        if not type_.non_null:
            return None
        raise error_path(path, "cannot be null")

    kind = _kind(value)
    if definition.kind is DefinitionKind.ENUM:
        if kind not in ("int", "str"):
            raise error_path(path, "enums must be ints or strings")
        text = str(value).casefold()
        if not any(text == enum.name.casefold() for enum in definition.enum_values):
            raise error_path(path, f"{value} is not a valid {definition.name}")
        return value

    if definition.kind is DefinitionKind.SCALAR:
        allowed = _SCALAR_KINDS.get(type_.named_type)
        if allowed is None or kind in allowed:
            return value
        raise error_path(path, f"cannot use {kind} as {type_.named_type}")

    if definition.kind is DefinitionKind.INPUT_OBJECT:
        if not isinstance(value, Mapping):
            raise error_path(path, f"must be a {definition.name}")
        for name in value:
            if name == "__typename":
                continue
            if for_name(definition.fields, name) is None:
                raise error_path((*path, name), "unknown field")

        result = dict(value)
        for field_def in definition.fields:
            field_path = (*path, field_def.name)
            if field_def.name not in value:
                if field_def.type.non_null:
                    if field_def.default_value is not None:
                        try:
                            field_def.default_value.value(None)
                        except ValueError:
                            pass
                        else:
                            continue
                    raise error_path(field_path, "must be defined")
                continue
            field_value = value[field_def.name]
            if field_value is None:
                if field_def.type.non_null:
                    raise error_path(field_path, "cannot be null")
                continue
            result[field_def.name] = _coerce(schema, field_def.type, field_value, field_path)
        return result

    raise ValueError(f"unsupported type {definition.kind}")