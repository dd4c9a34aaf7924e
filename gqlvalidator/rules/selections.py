"""Rules about fragment spreads, required arguments, leaf fields and subscriptions."""

from __future__ import annotations

import json
from typing import Callable, NamedTuple, Optional

from ..ast import (
    Definition,
    DefinitionKind,
    Directive,
    Field,
    FragmentSpread,
    InlineFragment,
    Operation,
    OperationDefinition,
    Position,
    Selection,
)
from ..validator import AddError
from ..walk import Events, Walker


def _spread_is_possible(
    walker: Walker, parent: Optional[Definition], fragment_type_name: str
) -> bool:
    """False only when no object of ``parent`` can be of the fragment's type."""
    if parent is None:
        return True

    if parent.kind is DefinitionKind.OBJECT:
        parent_types = [parent]
    elif parent.kind in (DefinitionKind.INTERFACE, DefinitionKind.UNION):
        parent_types = walker.schema.get_possible_types(parent)
    else:
        return True

    fragment_type = walker.schema.types.get(fragment_type_name)
    if fragment_type is None or not fragment_type.is_composite_type():
        return True

    parent_names = {p.name for p in parent_types if p is not None}
    return any(
        possible is not None and possible.name in parent_names
        for possible in walker.schema.get_possible_types(fragment_type)
    )


def possible_fragment_spreads(events: Events, add_error: AddError) -> None:
    """Report fragments whose type can never overlap the enclosing type."""

    def check_inline(walker: Walker, fragment: InlineFragment) -> None:
        parent = fragment.object_definition
        if _spread_is_possible(walker, parent, fragment.type_condition):
            return
        add_error(
            f'Fragment cannot be spread here as objects of type "{parent.name}" '
            f'can never be of type "{fragment.type_condition}".',
            fragment.position,
        )

    def check_spread(walker: Walker, spread: FragmentSpread) -> None:
        if spread.definition is None:
            return
        parent = spread.object_definition
        condition = spread.definition.type_condition
        if _spread_is_possible(walker, parent, condition):
            return
        add_error(
            f'Fragment "{spread.name}" cannot be spread here as objects of type '
            f'"{parent.name}" can never be of type "{condition}".',
            spread.position,
        )

    events.on_inline_fragment(check_inline)
    events.on_fragment_spread(check_spread)


def provided_required_arguments(events: Events, add_error: AddError) -> None:
    """Report required arguments without default that were not supplied."""

    def missing(definitions, supplied) -> list:
        names = {arg.name for arg in supplied}
        return [
            arg_def
            for arg_def in definitions
            if arg_def.type.non_null
            and arg_def.default_value is None
            and arg_def.name not in names
        ]

    def check_field(walker: Walker, field: Field) -> None:
        if field.definition is None:
            return
        for arg_def in missing(field.definition.arguments, field.arguments):
            add_error(
                f'Field "{field.name}" argument "{arg_def.name}" of type "{arg_def.type}" '
                f"is required, but it was not provided.",
                field.position,
            )

    def check_directive(walker: Walker, directive: Directive) -> None:
        if directive.definition is None:
            return
        for arg_def in missing(directive.definition.arguments, directive.arguments):
            add_error(
                f'Directive "@{directive.definition.name}" argument "{arg_def.name}" '
                f'of type "{arg_def.type}" is required, but it was not provided.',
                directive.position,
            )

    events.on_field(check_field)
    events.on_directive(check_directive)


def scalar_leafs(events: Events, add_error: AddError) -> None:
    """Report selections on leaf types and missing selections on composite types."""

    def check(walker: Walker, field: Field) -> None:
        if field.definition is None:
            return
        field_type = walker.schema.types.get(field.definition.type.name())
        if field_type is None:
            return

        if field_type.is_leaf_type() and field.selection_set:
            add_error(
                f'Field "{field.name}" must not have a selection since type '
                f'"{field_type.name}" has no subfields.',
                field.position,
            )

        if not field_type.is_leaf_type() and not field.selection_set:
            add_error(
                f'Field "{field.name}" of type "{field.definition.type}" must have a '
                f'selection of subfields. Did you mean "{field.name} {{ ... }}"?',
                field.position,
            )

    events.on_field(check)


class _TopField(NamedTuple):
    name: str
    position: Optional[Position]


def _top_fields(selections: list[Selection]) -> list[_TopField]:
    """Top-level fields of a selection set through fragments, first of each name."""
    fields: list[_TopField] = []
    expanded: set[str] = set()

    def collect(current: list[Selection]) -> None:
        for selection in current:
            if isinstance(selection, Field):
                fields.append(_TopField(selection.name, selection.position))
            elif isinstance(selection, InlineFragment):
                collect(selection.selection_set)
            elif isinstance(selection, FragmentSpread):
                if selection.definition is None:
                    return
                name = selection.definition.name
                if name not in expanded:
                    expanded.add(name)
                    collect(selection.definition.selection_set)

    collect(selections)

    seen: set[str] = set()
    unique: list[_TopField] = []
    for top in fields:
        if top.name not in seen:
            unique.append(top)
        seen.add(top.name)
    return unique


def single_field_subscriptions(events: Events, add_error: AddError) -> None:
    """Report subscriptions with several or introspection top-level fields."""

    def check(walker: Walker, operation: OperationDefinition) -> None:
        if walker.schema.subscription is None or operation.operation is not Operation.SUBSCRIPTION:
            return

        fields = _top_fields(operation.selection_set)
        label = (
            "Subscription " + json.dumps(operation.name, ensure_ascii=False)
            if operation.name
            else "Anonymous Subscription"
        )

        if len(fields) > 1:
            add_error(f"{label} must select only one top level field.", fields[1].position)

        for top in fields:
            if top.name.startswith("__"):
                add_error(
                    f"{label} must not select an introspection top level field.",
                    top.position,
                )

    events.on_operation(check)


_Check = Callable[[Walker, object], None]