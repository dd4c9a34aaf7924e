"""Rules about directives, fragments, type names, operations and variables."""

from __future__ import annotations

from typing import Optional

from ..ast import (
    Directive,
    Field,
    FragmentDefinition,
    FragmentSpread,
    InlineFragment,
    OperationDefinition,
    Selection,
    Value,
    ValueKind,
    VariableDefinition,
    for_name,
)
from ..suggestions import did_you_mean
from ..validator import AddError
from ..walk import Events, Walker


def known_directives(events: Events, add_error: AddError) -> None:
    """Report undefined directives and directives used where they are not allowed."""
    seen: set[tuple[str, int, int]] = set()

    def check(walker: Walker, directive: Directive) -> None:
        if directive.definition is None:
            add_error(f'Unknown directive "@{directive.name}".', directive.position)
            return

        if directive.location in directive.definition.locations:
            return

        position = directive.position
        key = (
            directive.name,
            position.line if position is not None else 0,
            position.column if position is not None else 0,
        )
        if key in seen:
            return
        seen.add(key)
        add_error(
            f'Directive "@{directive.name}" may not be used on {directive.location}.',
            position,
        )

    events.on_directive(check)


def known_fragment_names(events: Events, add_error: AddError) -> None:
    """Report spreads of fragments the document does not define."""

    def check(walker: Walker, spread: FragmentSpread) -> None:
        if spread.definition is None:
            add_error(f'Unknown fragment "{spread.name}".', spread.position)

    events.on_fragment_spread(check)


def known_type_names(events: Events, add_error: AddError) -> None:
    """Report variable types and type conditions that the schema does not define."""

    def check_variable(walker: Walker, variable: VariableDefinition) -> None:
        type_name = variable.type.name()
        if type_name in walker.schema.types:
            return
        add_error(f'Unknown type "{type_name}".', variable.position)

    def check_inline(walker: Walker, fragment: InlineFragment) -> None:
        type_name = fragment.type_condition
        if not type_name or type_name in walker.schema.types:
            return
        add_error(f'Unknown type "{type_name}".', fragment.position)

    def check_fragment(walker: Walker, fragment: FragmentDefinition) -> None:
        type_name = fragment.type_condition
        if walker.schema.types.get(type_name) is not None:
            return
        possible = [definition.name for definition in walker.schema.types.values()]
        add_error(
            f'Unknown type "{type_name}".' + did_you_mean("Did you mean", type_name, possible),
            fragment.position,
        )

    events.on_variable(check_variable)
    events.on_inline_fragment(check_inline)
    events.on_fragment(check_fragment)


def lone_anonymous_operation(events: Events, add_error: AddError) -> None:
    """Report an anonymous operation that shares its document with others."""

    def check(walker: Walker, operation: OperationDefinition) -> None:
        if not operation.name and len(walker.document.operations) > 1:
            add_error(
                "This anonymous operation must be the only defined operation.",
                operation.position,
            )

    events.on_operation(check)


def _fragment_spreads(selections: list[Selection]) -> list[FragmentSpread]:
    """Every spread in a selection set, nested fields and inline fragments included."""
    spreads: list[FragmentSpread] = []
    to_visit = [selections]
    while to_visit:
        for selection in to_visit.pop():
            if isinstance(selection, FragmentSpread):
                spreads.append(selection)
            elif isinstance(selection, (Field, InlineFragment)):
                to_visit.append(selection.selection_set)
    return spreads


def no_fragment_cycles(events: Events, add_error: AddError) -> None:
    """Report fragments that spread themselves, directly or through others."""
    visited: set[str] = set()

    def check(walker: Walker, fragment: FragmentDefinition) -> None:
        spread_path: list[FragmentSpread] = []
        index_by_name: dict[str, int] = {}

        def recurse(current: FragmentDefinition) -> None:
            if current.name in visited:
                return
            visited.add(current.name)

            spreads = _fragment_spreads(current.selection_set)
            if not spreads:
                return
            index_by_name[current.name] = len(spread_path)

            for spread in spreads:
                cycle_index: Optional[int] = index_by_name.get(spread.name)
                spread_path.append(spread)
                if cycle_index is None:
                    target = for_name(walker.document.fragments, spread.name)
                    if target is not None:
                        recurse(target)
                else:
                    names = [f'"{s.name}"' for s in spread_path[cycle_index:-1]]
                    via = f" via {', '.join(names)}" if names else ""
                    add_error(
                        f'Cannot spread fragment "{spread.name}" within itself{via}.',
                        spread.position,
                    )
                spread_path.pop()

            del index_by_name[current.name]

        recurse(fragment)

    events.on_fragment(check)


def no_undefined_variables(events: Events, add_error: AddError) -> None:
    """Report variables used but not declared by the enclosing operation."""

    def check(walker: Walker, value: Value) -> None:
        operation = walker.current_operation
        if (
            operation is None
            or value.kind is not ValueKind.VARIABLE
            or value.variable_definition is not None
        ):
            return
        if operation.name:
            add_error(
                f'Variable "{value}" is not defined by operation "{operation.name}".',
                value.position,
            )
        else:
            add_error(f'Variable "{value}" is not defined.', value.position)

    events.on_value(check)


def no_unused_fragments(events: Events, add_error: AddError) -> None:
    """Report fragments that no operation spreads."""
    in_fragment_definition = False
    used: set[str] = set()

    def on_spread(walker: Walker, spread: FragmentSpread) -> None:
        if not in_fragment_definition:
            used.add(spread.name)

    def on_fragment(walker: Walker, fragment: FragmentDefinition) -> None:
        nonlocal in_fragment_definition
        in_fragment_definition = True
        if fragment.name not in used:
            add_error(f'Fragment "{fragment.name}" is never used.', fragment.position)

    events.on_fragment_spread(on_spread)
    events.on_fragment(on_fragment)


def no_unused_variables(events: Events, add_error: AddError) -> None:
    """Report declared variables that the operation never uses."""

    def check(walker: Walker, operation: OperationDefinition) -> None:
        for var_def in operation.variable_definitions:
            if var_def.used:
                continue
            if operation.name:
                add_error(
                    f'Variable "${var_def.variable}" is never used in operation '
                    f'"{operation.name}".',
                    var_def.position,
                )
            else:
                add_error(
                    f'Variable "${var_def.variable}" is never used.', var_def.position
                )

    events.on_operation(check)