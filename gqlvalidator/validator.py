"""Rule registry and document validation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from .ast import Position, QueryDocument, Schema
from .errors import GraphQLError, error_at
from .walk import Events, walk

AddError = Callable[..., None]
RuleFunc = Callable[[Events, AddError], None]


@dataclass(frozen=True)
class Rule:
    """A named validation rule that registers observers on each run."""

    name: str
    func: RuleFunc


_RULES: list[Rule] = []


def add_rule(name: str, rule: RuleFunc) -> None:
    """Register a rule; it is set up afresh each time validate runs."""
    _RULES.append(Rule(name=name, func=rule))


def registered_rules() -> list[Rule]:
    """The rules registered so far, in registration order."""
    return list(_RULES)


def _collector(name: str, errors: list[GraphQLError]) -> AddError:
    def add_error(message: str, position: Optional[Position] = None) -> None:
        error = error_at(position, message)
        error.rule = name
        errors.append(error)

    return add_error


def validate(
    schema: Schema,
    document: QueryDocument,
    rules: Optional[Iterable[Rule]] = None,
) -> list[GraphQLError]:
    """Run ``rules`` (default: the registered ones) over ``document``."""
    errors: list[GraphQLError] = []
    events = Events()
    for rule in registered_rules() if rules is None else rules:
        rule.func(events, _collector(rule.name, errors))
    walk(schema, document, events)
    return errors