"""Rules that names within one scope are not repeated."""

from __future__ import annotations

from collections import Counter
from typing import Iterable

from ..ast import (
    Argument,
    Directive,
    Field,
    FragmentDefinition,
    OperationDefinition,
    Value,
    ValueKind,
)
from ..validator import AddError
from ..walk import Events, Walker


def _check_unique_args(args: Iterable[Argument], add_error: AddError) -> None:
    counts: Counter[str] = Counter()
    for arg in args:
        # Reported once per name, at its second occurrence.
        if counts[arg.name] == 1:
            add_error(f'There can be only one argument named "{arg.name}".', arg.position)
        counts[arg.name] += 1


def unique_argument_names(events: Events, add_error: AddError) -> None:
    """Report arguments given twice to one field or directive."""

    def check_field(walker: Walker, field: Field) -> None:
        _check_unique_args(field.arguments, add_error)

    def check_directive(walker: Walker, directive: Directive) -> None:
        _check_unique_args(directive.arguments, add_error)

    events.on_field(check_field)
    events.on_directive(check_directive)


def unique_directives_per_location(events: Events, add_error: AddError) -> None:
    """Report directives used more than once at the same location."""

    def check(walker: Walker, directives: list[Directive]) -> None:
        seen: set[str] = set()
        for directive in directives:
            if directive.name != "repeatable" and directive.name in seen:
                add_error(
                    f'The directive "@{directive.name}" can only be used once at this location.',
                    directive.position,
                )
            seen.add(directive.name)

    events.on_directive_list(check)


def unique_fragment_names(events: Events, add_error: AddError) -> None:
    """Report fragments that share a name."""
    seen: set[str] = set()

    def check(walker: Walker, fragment: FragmentDefinition) -> None:
        if fragment.name in seen:
            add_error(
                f'There can be only one fragment named "{fragment.name}".', fragment.position
            )
        seen.add(fragment.name)

    events.on_fragment(check)


def unique_input_field_names(events: Events, add_error: AddError) -> None:
    """Report input object literals that repeat a field."""

    def check(walker: Walker, value: Value) -> None:
        if value.kind is not ValueKind.OBJECT:
            return
        seen: set[str] = set()
        for child in value.children:
            if child.name in seen:
                add_error(
                    f'There can be only one input field named "{child.name}".', child.position
                )
            seen.add(child.name)

    events.on_value(check)


def unique_operation_names(events: Events, add_error: AddError) -> None:
    """Report operations that share a name."""
    seen: set[str] = set()

    def check(walker: Walker, operation: OperationDefinition) -> None:
        if operation.name in seen:
            add_error(
                f'There can be only one operation named "{operation.name}".',
                operation.position,
            )
        seen.add(operation.name)

    events.on_operation(check)


def unique_variable_names(events: Events, add_error: AddError) -> None:
    """Report variables declared twice by one operation."""

    def check(walker: Walker, operation: OperationDefinition) -> None:
        counts: Counter[str] = Counter()
        for var_def in operation.variable_definitions:
            if counts[var_def.variable] == 1:
                add_error(
                    f'There can be only one variable named "${var_def.variable}".',
                    var_def.position,
                )
            counts[var_def.variable] += 1

    events.on_operation(check)