"""Rules about fields, fragment type conditions and argument names."""

from __future__ import annotations

from collections import Counter

from ..ast import Definition, DefinitionKind, Directive, Field, FragmentDefinition, InlineFragment, for_name
from ..suggestions import did_you_mean, quoted_or_list, suggestion_list
from ..validator import AddError
from ..walk import Events, Walker


def fields_on_correct_type(events: Events, add_error: AddError) -> None:
    """Report fields that the enclosing type does not define."""

    def check(walker: Walker, field: Field) -> None:
        parent = field.object_definition
        if parent is None or field.definition is not None:
            return

        message = f'Cannot query field "{field.name}" on type "{parent.name}".'
        type_names = _suggested_type_names(walker, parent, field.name)
        if type_names:
            message += (
                " Did you mean to use an inline fragment on " + quoted_or_list(*type_names) + "?"
            )
        else:
            field_names = _suggested_field_names(parent, field.name)
            if field_names:
                message += " Did you mean " + quoted_or_list(*field_names) + "?"

        add_error(message, field.position)

    events.on_field(check)


def _suggested_type_names(walker: Walker, parent: Definition, name: str) -> list[str]:
    """Types below an abstract parent that define ``name``, interfaces used most first."""
    if not parent.is_abstract_type():
        return []

    object_types: list[str] = []
    interface_types: list[str] = []
    usage: Counter[str] = Counter()

    for possible in walker.schema.get_possible_types(parent):
        if possible is None or for_name(possible.fields, name) is None:
            continue
        object_types.append(possible.name)
        for interface_name in possible.interfaces:
            interface = walker.schema.types.get(interface_name)
            if interface is not None and for_name(interface.fields, name) is not None:
                if usage[interface_name] == 0:
                    interface_types.append(interface_name)
                usage[interface_name] += 1

    return sorted(interface_types + object_types, key=lambda t: (-usage[t], t))


def _suggested_field_names(parent: Definition, name: str) -> list[str]:
    if parent.kind not in (DefinitionKind.OBJECT, DefinitionKind.INTERFACE):
        return []
    return suggestion_list(name, [f.name for f in parent.fields])


def fragments_on_composite_types(events: Events, add_error: AddError) -> None:
    """Report fragments conditioned on scalar, enum or input types."""

    def check_inline(walker: Walker, fragment: InlineFragment) -> None:
        fragment_type = walker.schema.types.get(fragment.type_condition)
        if fragment_type is None or fragment_type.is_composite_type():
            return
        add_error(
            f'Fragment cannot condition on non composite type "{fragment.type_condition}".',
            fragment.position,
        )

    def check_fragment(walker: Walker, fragment: FragmentDefinition) -> None:
        if (
            fragment.definition is None
            or not fragment.type_condition
            or fragment.definition.is_composite_type()
        ):
            return
        add_error(
            f'Fragment "{fragment.name}" cannot condition on non composite type '
            f'"{fragment.type_condition}".',
            fragment.position,
        )

    events.on_inline_fragment(check_inline)
    events.on_fragment(check_fragment)


def known_argument_names(events: Events, add_error: AddError) -> None:
    """Report arguments not defined by their field or directive."""

    def check_field(walker: Walker, field: Field) -> None:
        if field.definition is None or field.object_definition is None:
            return
        defined = [a.name for a in field.definition.arguments]
        for arg in field.arguments:
            if arg.name in defined:
                continue
            add_error(
                f'Unknown argument "{arg.name}" on field '
                f'"{field.object_definition.name}.{field.name}".'
                + did_you_mean("Did you mean", arg.name, defined),
                field.position,
            )

    def check_directive(walker: Walker, directive: Directive) -> None:
        if directive.definition is None:
            return
        defined = [a.name for a in directive.definition.arguments]
        for arg in directive.arguments:
            if arg.name in defined:
                continue
            add_error(
                f'Unknown argument "{arg.name}" on directive "@{directive.name}".'
                + did_you_mean("Did you mean", arg.name, defined),
                directive.position,
            )

    events.on_field(check_field)
    events.on_directive(check_directive)