"""Traversal of a query document that annotates nodes and notifies observers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional

from .ast import (
    Argument,
    ArgumentDefinition,
    Definition,
    Directive,
    DirectiveLocation,
    Field,
    FieldDefinition,
    FragmentDefinition,
    FragmentSpread,
    InlineFragment,
    Operation,
    OperationDefinition,
    QueryDocument,
    Schema,
    Selection,
    Value,
    ValueKind,
    for_name,
    named_type,
)

Handler = Callable[["Walker", Any], None]


class Events:
    """Observers to notify as a document is walked, in registration order."""

    def __init__(self) -> None:
        self._operation: list[Handler] = []
        self._field: list[Handler] = []
        self._fragment: list[Handler] = []
        self._inline_fragment: list[Handler] = []
        self._fragment_spread: list[Handler] = []
        self._directive: list[Handler] = []
        self._directive_list: list[Handler] = []
        self._value: list[Handler] = []
        self._variable: list[Handler] = []

    def on_operation(self, handler: Handler) -> None:
        self._operation.append(handler)

    def on_field(self, handler: Handler) -> None:
        self._field.append(handler)

    def on_fragment(self, handler: Handler) -> None:
        self._fragment.append(handler)

    def on_inline_fragment(self, handler: Handler) -> None:
        self._inline_fragment.append(handler)

    def on_fragment_spread(self, handler: Handler) -> None:
        self._fragment_spread.append(handler)

    def on_directive(self, handler: Handler) -> None:
        self._directive.append(handler)

    def on_directive_list(self, handler: Handler) -> None:
        self._directive_list.append(handler)

    def on_value(self, handler: Handler) -> None:
        self._value.append(handler)

    def on_variable(self, handler: Handler) -> None:
        self._variable.append(handler)


_ROOTS = {
    Operation.QUERY: ("query", DirectiveLocation.QUERY),
    "": ("query", DirectiveLocation.QUERY),
    None: ("query", DirectiveLocation.QUERY),
    Operation.MUTATION: ("mutation", DirectiveLocation.MUTATION),
    Operation.SUBSCRIPTION: ("subscription", DirectiveLocation.SUBSCRIPTION),
}


def _notify(handlers: Iterable[Handler], walker: Walker, node: Any) -> None:
    for handler in handlers:
        handler(walker, node)


@dataclass
class Walker:
    """Walks operations, then fragments, linking nodes to their schema definitions."""

    schema: Schema
    document: QueryDocument
    events: Events = field(default_factory=Events)
    current_operation: Optional[OperationDefinition] = None
    _visited_spreads: set[str] = field(default_factory=set, init=False, repr=False)

    def walk(self) -> None:
        for operation in self.document.operations:
            self._visited_spreads = set()
            self._walk_operation(operation)
        for fragment in self.document.fragments:
            self._visited_spreads = set()
            self._walk_fragment(fragment)

    def _walk_operation(self, operation: OperationDefinition) -> None:
        self.current_operation = operation
        for var_def in operation.variable_definitions:
            var_def.definition = self.schema.types.get(var_def.type.name())
            _notify(self.events._variable, self, var_def)
            if var_def.default_value is not None:
                var_def.default_value.expected_type = var_def.type
                var_def.default_value.definition = self.schema.types.get(var_def.type.name())

        root: Optional[Definition] = None
        location: Optional[DirectiveLocation] = None
        if operation.operation in _ROOTS:
            attribute, location = _ROOTS[operation.operation]
            root = getattr(self.schema, attribute)

        for var_def in operation.variable_definitions:
            if var_def.default_value is not None:
                self._walk_value(var_def.default_value)
            self._walk_directives(
                var_def.definition, var_def.directives, DirectiveLocation.VARIABLE_DEFINITION
            )

        self._walk_directives(root, operation.directives, location)
        self._walk_selection_set(root, operation.selection_set)

        _notify(self.events._operation, self, operation)
        self.current_operation = None

    def _walk_fragment(self, fragment: FragmentDefinition) -> None:
        definition = self.schema.types.get(fragment.type_condition)
        fragment.definition = definition
        self._walk_directives(
            definition, fragment.directives, DirectiveLocation.FRAGMENT_DEFINITION
        )
        self._walk_selection_set(definition, fragment.selection_set)
        _notify(self.events._fragment, self, fragment)

    def _walk_directives(
        self,
        parent: Optional[Definition],
        directives: list[Directive],
        location: Optional[DirectiveLocation],
    ) -> None:
        for directive in directives:
            definition = self.schema.directives.get(directive.name)
            directive.definition = definition
            directive.parent_definition = parent
            directive.location = location
            for arg in directive.arguments:
                arg_def = (
                    for_name(definition.arguments, arg.name) if definition is not None else None
                )
                self._walk_argument(arg_def, arg)
            _notify(self.events._directive, self, directive)
        _notify(self.events._directive_list, self, directives)

    def _walk_value(self, value: Value) -> None:
        if value.kind is ValueKind.VARIABLE and self.current_operation is not None:
            value.variable_definition = for_name(
                self.current_operation.variable_definitions, value.raw
            )
            if value.variable_definition is not None:
                value.variable_definition.used = True

        if value.kind is ValueKind.OBJECT:
            for child in value.children:
                if value.definition is not None:
                    field_def = for_name(value.definition.fields, child.name)
                    if field_def is not None:
                        child.value.expected_type = field_def.type
                        child.value.definition = self.schema.types.get(field_def.type.name())
                self._walk_value(child.value)

        if value.kind is ValueKind.LIST:
            for child in value.children:
                if value.expected_type is not None and value.expected_type.elem is not None:
                    child.value.expected_type = value.expected_type.elem
                    child.value.definition = value.definition
                self._walk_value(child.value)

        _notify(self.events._value, self, value)

    def _walk_argument(self, arg_def: Optional[ArgumentDefinition], arg: Argument) -> None:
        if arg_def is not None:
            arg.value.expected_type = arg_def.type
            arg.value.definition = self.schema.types.get(arg_def.type.name())
        self._walk_value(arg.value)

    def _walk_selection_set(
        self, parent: Optional[Definition], selections: list[Selection]
    ) -> None:
        for selection in selections:
            self._walk_selection(parent, selection)

    def _walk_selection(self, parent: Optional[Definition], selection: Selection) -> None:
        if isinstance(selection, Field):
            self._walk_field(parent, selection)
        elif isinstance(selection, InlineFragment):
            self._walk_inline_fragment(parent, selection)
        elif isinstance(selection, FragmentSpread):
            self._walk_fragment_spread(parent, selection)
        else:
            raise TypeError(f"unsupported {type(selection).__name__}")

    def _walk_field(self, parent: Optional[Definition], node: Field) -> None:
        definition: Optional[FieldDefinition] = None
        if node.name == "__typename":
            definition = FieldDefinition(name="__typename", type=named_type("String"))
        elif parent is not None:
            definition = for_name(parent.fields, node.name)

        node.definition = definition
        node.object_definition = parent

        next_parent = (
            self.schema.types.get(definition.type.name()) if definition is not None else None
        )

        for arg in node.arguments:
            arg_def = for_name(definition.arguments, arg.name) if definition is not None else None
            self._walk_argument(arg_def, arg)

        self._walk_directives(next_parent, node.directives, DirectiveLocation.FIELD)
        self._walk_selection_set(next_parent, node.selection_set)
        _notify(self.events._field, self, node)

    def _walk_inline_fragment(self, parent: Optional[Definition], node: InlineFragment) -> None:
        node.object_definition = parent
        next_parent = parent
        if node.type_condition:
            next_parent = self.schema.types.get(node.type_condition)
        self._walk_directives(next_parent, node.directives, DirectiveLocation.INLINE_FRAGMENT)
        self._walk_selection_set(next_parent, node.selection_set)
        _notify(self.events._inline_fragment, self, node)

    def _walk_fragment_spread(self, parent: Optional[Definition], node: FragmentSpread) -> None:
        definition = for_name(self.document.fragments, node.name)
        node.definition = definition
        node.object_definition = parent

        next_parent = (
            self.schema.types.get(definition.type_condition) if definition is not None else None
        )
        self._walk_directives(next_parent, node.directives, DirectiveLocation.FRAGMENT_SPREAD)

        # Each fragment is expanded once per walk root, which also stops cycles.
        if definition is not None and definition.name not in self._visited_spreads:
            self._visited_spreads.add(definition.name)
            self._walk_selection_set(next_parent, definition.selection_set)

        _notify(self.events._fragment_spread, self, node)


def walk(schema: Schema, document: QueryDocument, events: Events) -> None:
    """Walk ``document`` against ``schema``, notifying ``events``."""
    Walker(schema=schema, document=document, events=events).walk()