"""Syntax tree and schema model for GraphQL documents."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Optional, TypeVar, Union


class _StrEnum(str, Enum):
    def __str__(self) -> str:
        return self.value

    def __format__(self, spec: str) -> str:
        return format(self.value, spec)


@dataclass(frozen=True)
class Position:
    """A location in a named source text."""

    line: int = 0
    column: int = 0
    source: str = ""


class DefinitionKind(_StrEnum):
    SCALAR = "SCALAR"
    OBJECT = "OBJECT"
    INTERFACE = "INTERFACE"
    UNION = "UNION"
    ENUM = "ENUM"
    INPUT_OBJECT = "INPUT_OBJECT"


class Operation(_StrEnum):
    QUERY = "query"
    MUTATION = "mutation"
    SUBSCRIPTION = "subscription"


class DirectiveLocation(_StrEnum):
    QUERY = "QUERY"
    MUTATION = "MUTATION"
    SUBSCRIPTION = "SUBSCRIPTION"
    FIELD = "FIELD"
    FRAGMENT_DEFINITION = "FRAGMENT_DEFINITION"
    FRAGMENT_SPREAD = "FRAGMENT_SPREAD"
    INLINE_FRAGMENT = "INLINE_FRAGMENT"
    VARIABLE_DEFINITION = "VARIABLE_DEFINITION"
    SCHEMA = "SCHEMA"
    SCALAR = "SCALAR"
    OBJECT = "OBJECT"
    FIELD_DEFINITION = "FIELD_DEFINITION"
    ARGUMENT_DEFINITION = "ARGUMENT_DEFINITION"
    INTERFACE = "INTERFACE"
    UNION = "UNION"
    ENUM = "ENUM"
    ENUM_VALUE = "ENUM_VALUE"
    INPUT_OBJECT = "INPUT_OBJECT"
    INPUT_FIELD_DEFINITION = "INPUT_FIELD_DEFINITION"


class ValueKind(_StrEnum):
    VARIABLE = "Variable"
    INT = "IntValue"
    FLOAT = "FloatValue"
    STRING = "StringValue"
    BLOCK = "BlockValue"
    BOOLEAN = "BooleanValue"
    NULL = "NullValue"
    ENUM = "EnumValue"
    LIST = "ListValue"
    OBJECT = "ObjectValue"


@dataclass
class Type:
    """A type reference: a named type or a list, possibly non-null."""

    named_type: str = ""
    elem: Optional[Type] = None
    non_null: bool = False
    position: Optional[Position] = field(default=None, compare=False)

    def name(self) -> str:
        """The innermost named type."""
        if self.named_type:
            return self.named_type
        return self.elem.name() if self.elem is not None else ""

    def is_compatible(self, other: Type) -> bool:
        """Whether a value of this type may be used where ``other`` is expected."""
        if self.named_type != other.named_type:
            return False
        if self.elem is not None:
            if other.elem is None or not self.elem.is_compatible(other.elem):
                return False
        if other.non_null:
            return self.non_null
        return True

    def __str__(self) -> str:
        bang = "!" if self.non_null else ""
        if self.named_type:
            return self.named_type + bang
        return f"[{self.elem}]{bang}"


def named_type(name: str, position: Optional[Position] = None) -> Type:
    return Type(named_type=name, position=position)


def non_null_named_type(name: str, position: Optional[Position] = None) -> Type:
    return Type(named_type=name, non_null=True, position=position)


def list_type(elem: Type, position: Optional[Position] = None) -> Type:
    return Type(elem=elem, position=position)


_INT_RE = re.compile(r"[+-]?[0-9]+")
_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE = {"0", "f", "F", "FALSE", "false", "False"}
_INT64_MIN, _INT64_MAX = -(2**63), 2**63 - 1


@dataclass(eq=False)
class Value:
    """A literal or variable in a document."""

    kind: ValueKind = ValueKind.VARIABLE
    raw: str = ""
    children: list[ChildValue] = field(default_factory=list)
    position: Optional[Position] = None
    definition: Optional[Definition] = None
    variable_definition: Optional[VariableDefinition] = None
    expected_type: Optional[Type] = None

    def value(self, variables: Optional[dict[str, Any]] = None) -> Any:
        """The Python value, resolving variables; raises ValueError on bad literals."""
        variables = variables or {}
        kind = self.kind
        if kind is ValueKind.VARIABLE:
            if self.raw in variables:
                return variables[self.raw]
            var_def = self.variable_definition
            if var_def is not None and var_def.default_value is not None:
                return var_def.default_value.value(variables)
            return None
        if kind is ValueKind.INT:
            if not _INT_RE.fullmatch(self.raw):
                raise ValueError(f"invalid integer literal {self.raw!r}")
            number = int(self.raw)
            if not _INT64_MIN <= number <= _INT64_MAX:
                raise ValueError(f"integer literal {self.raw!r} out of range")
            return number
        if kind is ValueKind.FLOAT:
            if "_" in self.raw:
                raise ValueError(f"invalid float literal {self.raw!r}")
            return float(self.raw)
        if kind in (ValueKind.STRING, ValueKind.BLOCK, ValueKind.ENUM):
            return self.raw
        if kind is ValueKind.BOOLEAN:
            if self.raw in _TRUE:
                return True
            if self.raw in _FALSE:
                return False
            raise ValueError(f"invalid boolean literal {self.raw!r}")
        if kind is ValueKind.NULL:
            return None
        if kind is ValueKind.LIST:
            return [child.value.value(variables) for child in self.children]
        return {child.name: child.value.value(variables) for child in self.children}

    def __str__(self) -> str:
        kind = self.kind
        if kind is ValueKind.VARIABLE:
            return "$" + self.raw
        if kind in (ValueKind.STRING, ValueKind.BLOCK):
            return json.dumps(self.raw, ensure_ascii=False)
        if kind is ValueKind.LIST:
            return "[" + ", ".join(str(c.value) for c in self.children) + "]"
        if kind is ValueKind.OBJECT:
            return "{" + ", ".join(f"{c.name}: {c.value}" for c in self.children) + "}"
        return self.raw


@dataclass(eq=False)
class ChildValue:
    name: str
    value: Value
    position: Optional[Position] = None


@dataclass(eq=False)
class Argument:
    name: str
    value: Value
    position: Optional[Position] = None


@dataclass(eq=False)
class ArgumentDefinition:
    name: str
    type: Type
    default_value: Optional[Value] = None
    directives: list[Directive] = field(default_factory=list)
    description: str = ""
    position: Optional[Position] = None


@dataclass(eq=False)
class FieldDefinition:
    name: str
    type: Type
    arguments: list[ArgumentDefinition] = field(default_factory=list)
    default_value: Optional[Value] = None
    directives: list[Directive] = field(default_factory=list)
    description: str = ""
    position: Optional[Position] = None


@dataclass(eq=False)
class EnumValueDefinition:
    name: str
    description: str = ""
    directives: list[Directive] = field(default_factory=list)
    position: Optional[Position] = None


@dataclass(eq=False)
class Directive:
    name: str
    arguments: list[Argument] = field(default_factory=list)
    position: Optional[Position] = None
    parent_definition: Optional[Definition] = None
    definition: Optional[DirectiveDefinition] = None
    location: Optional[DirectiveLocation] = None


@dataclass(eq=False)
class DirectiveDefinition:
    name: str
    arguments: list[ArgumentDefinition] = field(default_factory=list)
    locations: list[DirectiveLocation] = field(default_factory=list)
    is_repeatable: bool = False
    description: str = ""
    position: Optional[Position] = None


@dataclass(eq=False)
class Definition:
    """A type definition or extension."""

    kind: DefinitionKind
    name: str
    description: str = ""
    interfaces: list[str] = field(default_factory=list)
    fields: list[FieldDefinition] = field(default_factory=list)
    types: list[str] = field(default_factory=list)
    enum_values: list[EnumValueDefinition] = field(default_factory=list)
    directives: list[Directive] = field(default_factory=list)
    position: Optional[Position] = None
    built_in: bool = False

    def is_input_type(self) -> bool:
        return self.kind in (DefinitionKind.SCALAR, DefinitionKind.ENUM, DefinitionKind.INPUT_OBJECT)

    def is_composite_type(self) -> bool:
        return self.kind in (DefinitionKind.OBJECT, DefinitionKind.INTERFACE, DefinitionKind.UNION)

    def is_leaf_type(self) -> bool:
        return self.kind in (DefinitionKind.ENUM, DefinitionKind.SCALAR)

    def is_abstract_type(self) -> bool:
        return self.kind in (DefinitionKind.INTERFACE, DefinitionKind.UNION)

    def one_of(self, *args: str) -> bool:
        return self.name in args


@dataclass(eq=False)
class Field:
    name: str
    alias: str = ""
    arguments: list[Argument] = field(default_factory=list)
    directives: list[Directive] = field(default_factory=list)
    selection_set: list[Selection] = field(default_factory=list)
    position: Optional[Position] = None
    definition: Optional[FieldDefinition] = None
    object_definition: Optional[Definition] = None


@dataclass(eq=False)
class InlineFragment:
    type_condition: str = ""
    directives: list[Directive] = field(default_factory=list)
    selection_set: list[Selection] = field(default_factory=list)
    position: Optional[Position] = None
    object_definition: Optional[Definition] = None


@dataclass(eq=False)
class FragmentSpread:
    name: str
    directives: list[Directive] = field(default_factory=list)
    position: Optional[Position] = None
    object_definition: Optional[Definition] = None
    definition: Optional[FragmentDefinition] = None


@dataclass(eq=False)
class FragmentDefinition:
    name: str
    type_condition: str = ""
    variable_definitions: list[VariableDefinition] = field(default_factory=list)
    directives: list[Directive] = field(default_factory=list)
    selection_set: list[Selection] = field(default_factory=list)
    position: Optional[Position] = None
    definition: Optional[Definition] = None


@dataclass(eq=False)
class VariableDefinition:
    variable: str
    type: Type
    default_value: Optional[Value] = None
    directives: list[Directive] = field(default_factory=list)
    position: Optional[Position] = None
    definition: Optional[Definition] = None
    used: bool = False

    @property
    def name(self) -> str:
        return self.variable


@dataclass(eq=False)
class OperationDefinition:
    operation: Operation = Operation.QUERY
    name: str = ""
    variable_definitions: list[VariableDefinition] = field(default_factory=list)
    directives: list[Directive] = field(default_factory=list)
    selection_set: list[Selection] = field(default_factory=list)
    position: Optional[Position] = None


@dataclass(eq=False)
class QueryDocument:
    operations: list[OperationDefinition] = field(default_factory=list)
    fragments: list[FragmentDefinition] = field(default_factory=list)
    position: Optional[Position] = None


@dataclass(eq=False)
class OperationTypeDefinition:
    operation: Operation
    type: str
    position: Optional[Position] = None


@dataclass(eq=False)
class SchemaDefinition:
    description: str = ""
    directives: list[Directive] = field(default_factory=list)
    operation_types: list[OperationTypeDefinition] = field(default_factory=list)
    position: Optional[Position] = None


@dataclass(eq=False)
class SchemaDocument:
    schema: list[SchemaDefinition] = field(default_factory=list)
    schema_extension: list[SchemaDefinition] = field(default_factory=list)
    directives: list[DirectiveDefinition] = field(default_factory=list)
    definitions: list[Definition] = field(default_factory=list)
    extensions: list[Definition] = field(default_factory=list)
    position: Optional[Position] = None


@dataclass(eq=False)
class Schema:
    """A validated schema with its root types and type relations."""

    query: Optional[Definition] = None
    mutation: Optional[Definition] = None
    subscription: Optional[Definition] = None
    types: dict[str, Definition] = field(default_factory=dict)
    directives: dict[str, DirectiveDefinition] = field(default_factory=dict)
    possible_types: dict[str, list[Definition]] = field(default_factory=dict)
    implements: dict[str, list[Definition]] = field(default_factory=dict)
    description: str = ""

    def add_possible_type(self, name: str, definition: Optional[Definition]) -> None:
        self.possible_types.setdefault(name, []).append(definition)

    def add_implements(self, name: str, definition: Optional[Definition]) -> None:
        self.implements.setdefault(name, []).append(definition)

    def get_possible_types(self, definition: Definition) -> list[Definition]:
        return self.possible_types.get(definition.name, [])

    def get_implements(self, definition: Definition) -> list[Definition]:
        return self.implements.get(definition.name, [])


Selection = Union[Field, InlineFragment, FragmentSpread]

_Named = TypeVar("_Named")


def for_name(items: Iterable[_Named], name: str) -> Optional[_Named]:
    """The first item whose ``name`` matches, or None."""
    return next((item for item in items if item.name == name), None)