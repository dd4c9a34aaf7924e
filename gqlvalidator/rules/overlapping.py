"""Rule that fields sharing a response name can be merged into one result."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..ast import (
    Argument,
    DefinitionKind,
    Field,
    FragmentSpread,
    InlineFragment,
    Position,
    Schema,
    Selection,
    Type,
    Value,
)
from ..validator import AddError
from ..walk import Events, Walker

_FieldsMap = dict[str, list[Field]]


@dataclass(eq=False)
class ConflictMessage:
    """Why two fields with one response name cannot be merged."""

    response_name: str
    message: str = ""
    names: list[str] = field(default_factory=list)
    sub_messages: list[ConflictMessage] = field(default_factory=list)
    position: Optional[Position] = None

    def __str__(self) -> str:
        if not self.sub_messages:
            return self.message
        return " and ".join(
            f'subfields "{sub.response_name}" conflict because {sub}'
            for sub in self.sub_messages
        )


class _PairSet:
    """Fragment name pairs already compared, with their exclusivity."""

    def __init__(self) -> None:
        self._data: dict[str, dict[str, bool]] = {}

    def add(self, a: str, b: str, mutually_exclusive: bool) -> None:
        self._data.setdefault(a, {})[b] = mutually_exclusive
        self._data.setdefault(b, {})[a] = mutually_exclusive

    def has(self, a: str, b: str, mutually_exclusive: bool) -> bool:
        result = self._data.get(a, {}).get(b)
        if result is None:
            return False
        # A non-exclusive comparison covers an exclusive one, not the reverse.
        if not mutually_exclusive:
            return not result
        return True


def _response_name(node: Field) -> str:
    return node.alias or node.name


def _fields_and_spreads(
    selections: list[Selection],
) -> tuple[_FieldsMap, list[FragmentSpread]]:
    """Fields by response name (through inline fragments) and the spreads found."""
    fields: _FieldsMap = {}
    spreads: list[FragmentSpread] = []

    def collect(current: list[Selection]) -> None:
        for selection in current:
            if isinstance(selection, Field):
                fields.setdefault(_response_name(selection), []).append(selection)
            elif isinstance(selection, InlineFragment):
                collect(selection.selection_set)
            elif isinstance(selection, FragmentSpread):
                spreads.append(selection)

    collect(selections)
    return fields, spreads


def _same_fields_map(a: _FieldsMap, b: _FieldsMap) -> bool:
    if list(a) != list(b):
        return False
    return all(
        len(a[key]) == len(b[key]) and all(x is y for x, y in zip(a[key], b[key]))
        for key in a
    )


def _same_value(value1: Value, value2: Value) -> bool:
    return value1.kind == value2.kind and value1.raw == value2.raw


def same_arguments(
    args1: Optional[list[Argument]], args2: Optional[list[Argument]]
) -> bool:
    """Whether both argument lists hold the same names and literal values."""
    args1 = args1 or []
    args2 = args2 or []
    if len(args1) != len(args2):
        return False
    return all(
        any(a.name == b.name and _same_value(a.value, b.value) for b in args2)
        for a in args1
    )


def _types_conflict(schema: Schema, type1: Type, type2: Type) -> bool:
    if type1.elem is not None:
        if type2.elem is not None:
            return _types_conflict(schema, type1.elem, type2.elem)
        return True
    if type2.elem is not None:
        return True
    if type1.non_null != type2.non_null:
        return True

    def1 = schema.types.get(type1.named_type)
    def2 = schema.types.get(type2.named_type)
    if def1 is None or def2 is None:
        return False
    leaf = (DefinitionKind.SCALAR, DefinitionKind.ENUM)
    if def1.kind in leaf and def2.kind in leaf:
        return def1.name != def2.name
    return False


class _Manager:
    """Conflict search state shared by one validation run."""

    def __init__(self) -> None:
        self.walker: Optional[Walker] = None
        self.compared_fragment_pairs = _PairSet()
        self.compared_fragments: set[str] = set()

    def find_conflicts_within(self, selections: list[Selection]) -> list[ConflictMessage]:
        if not selections:
            return []

        fields, spreads = _fields_and_spreads(selections)
        conflicts: list[ConflictMessage] = []

        self._collect_within(conflicts, fields)

        self.compared_fragments = set()
        for index, spread_a in enumerate(spreads):
            self._collect_between_fields_and_fragment(conflicts, False, fields, spread_a)
            for spread_b in spreads[index + 1:]:
                self._collect_between_fragments(conflicts, False, spread_a, spread_b)

        return conflicts

    def _collect_between_fields_and_fragment(
        self,
        conflicts: list[ConflictMessage],
        mutually_exclusive: bool,
        fields: _FieldsMap,
        spread: FragmentSpread,
    ) -> None:
        if spread.name in self.compared_fragments:
            return
        self.compared_fragments.add(spread.name)

        if spread.definition is None:
            return

        fields_b, nested_spreads = _fields_and_spreads(spread.definition.selection_set)

        # A fragment's fields are never compared with themselves.
        if _same_fields_map(fields, fields_b):
            return

        self._collect_between(conflicts, mutually_exclusive, fields, fields_b)

        for nested in nested_spreads:
            if nested.name == spread.name:
                continue
            self._collect_between_fields_and_fragment(
                conflicts, mutually_exclusive, fields, nested
            )

    def _collect_between_fragments(
        self,
        conflicts: list[ConflictMessage],
        mutually_exclusive: bool,
        spread_a: FragmentSpread,
        spread_b: FragmentSpread,
    ) -> None:
        def check(a: FragmentSpread, b: FragmentSpread) -> None:
            if a.name == b.name:
                return
            if self.compared_fragment_pairs.has(a.name, b.name, mutually_exclusive):
                return
            self.compared_fragment_pairs.add(a.name, b.name, mutually_exclusive)

            if a.definition is None or b.definition is None:
                return

            fields_a, spreads_a = _fields_and_spreads(a.definition.selection_set)
            fields_b, spreads_b = _fields_and_spreads(b.definition.selection_set)

            self._collect_between(conflicts, mutually_exclusive, fields_a, fields_b)

            for nested in spreads_b:
                check(a, nested)
            for nested in spreads_a:
                check(nested, b)

        check(spread_a, spread_b)

    def _conflicts_between_sub_selections(
        self,
        mutually_exclusive: bool,
        selections_a: list[Selection],
        selections_b: list[Selection],
    ) -> list[ConflictMessage]:
        conflicts: list[ConflictMessage] = []

        fields_a, spreads_a = _fields_and_spreads(selections_a)
        fields_b, spreads_b = _fields_and_spreads(selections_b)

        self._collect_between(conflicts, mutually_exclusive, fields_a, fields_b)

        for spread in spreads_b:
            self.compared_fragments = set()
            self._collect_between_fields_and_fragment(
                conflicts, mutually_exclusive, fields_a, spread
            )

        for spread in spreads_a:
            self.compared_fragments = set()
            self._collect_between_fields_and_fragment(
                conflicts, mutually_exclusive, fields_b, spread
            )

        for spread_a in spreads_a:
            for spread_b in spreads_b:
                self._collect_between_fragments(
                    conflicts, mutually_exclusive, spread_a, spread_b
                )

        return conflicts

    def _collect_within(self, conflicts: list[ConflictMessage], fields: _FieldsMap) -> None:
        for same_name in fields.values():
            for index, field_a in enumerate(same_name):
                for field_b in same_name[index + 1:]:
                    conflict = self._find_conflict(False, field_a, field_b)
                    if conflict is not None:
                        conflicts.append(conflict)

    def _collect_between(
        self,
        conflicts: list[ConflictMessage],
        parents_exclusive: bool,
        fields_a: _FieldsMap,
        fields_b: _FieldsMap,
    ) -> None:
        for response_name, group_a in fields_a.items():
            group_b = fields_b.get(response_name)
            if group_b is None:
                continue
            for field_a in group_a:
                for field_b in group_b:
                    conflict = self._find_conflict(parents_exclusive, field_a, field_b)
                    if conflict is not None:
                        conflicts.append(conflict)

    def _find_conflict(
        self, parents_exclusive: bool, field_a: Field, field_b: Field
    ) -> Optional[ConflictMessage]:
        parent_a = field_a.object_definition
        parent_b = field_b.object_definition
        if parent_a is None or parent_b is None:
            return None

        mutually_exclusive = parents_exclusive or (
            parent_a.name != parent_b.name
            and parent_a.kind is DefinitionKind.OBJECT
            and parent_b.kind is DefinitionKind.OBJECT
            and field_a.definition is not None
            and field_b.definition is not None
        )

        response_name = _response_name(field_a)

        if not mutually_exclusive:
            if field_a.name != field_b.name:
                return ConflictMessage(
                    response_name=response_name,
                    message=f'"{field_a.name}" and "{field_b.name}" are different fields',
                    position=field_b.position,
                )
            if not same_arguments(field_a.arguments, field_b.arguments):
                return ConflictMessage(
                    response_name=response_name,
                    message="they have differing arguments",
                    position=field_b.position,
                )

        if (
            field_a.definition is not None
            and field_b.definition is not None
            and self.walker is not None
            and _types_conflict(
                self.walker.schema, field_a.definition.type, field_b.definition.type
            )
        ):
            return ConflictMessage(
                response_name=response_name,
                message=(
                    f'they return conflicting types "{field_a.definition.type}" '
                    f'and "{field_b.definition.type}"'
                ),
                position=field_b.position,
            )

        sub_conflicts = self._conflicts_between_sub_selections(
            mutually_exclusive, field_a.selection_set, field_b.selection_set
        )
        if not sub_conflicts:
            return None
        return ConflictMessage(
            response_name=response_name,
            sub_messages=sub_conflicts,
            position=field_b.position,
        )


def overlapping_fields_can_be_merged(events: Events, add_error: AddError) -> None:
    """Report fields with one response name that would yield differing values."""
    manager = _Manager()

    def report(walker: Walker, selections: list[Selection]) -> None:
        manager.walker = walker
        for conflict in manager.find_conflicts_within(selections):
            add_error(
                f'Fields "{conflict.response_name}" conflict because {conflict}. '
                "Use different aliases on the fields to fetch both if this was intentional.",
                conflict.position,
            )

    def on_field(walker: Walker, node: Field) -> None:
        # Fragments are checked on their own; checking them again here would duplicate errors.
        if walker.current_operation is None:
            return
        report(walker, node.selection_set)

    events.on_operation(lambda walker, operation: report(walker, operation.selection_set))
    events.on_field(on_field)
    events.on_inline_fragment(lambda walker, fragment: report(walker, fragment.selection_set))
    events.on_fragment(lambda walker, fragment: report(walker, fragment.selection_set))