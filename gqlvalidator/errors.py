"""Errors reported by schema and document validation."""

from __future__ import annotations

from typing import Iterable, Optional, Union

from .ast import Position

PathElement = Union[str, int]


class GraphQLError(Exception):
    """An error with optional source location, response path and rule name."""

    def __init__(
        self,
        message: str,
        *,
        locations: Iterable[tuple[int, int]] = (),
        path: Iterable[PathElement] = (),
        rule: str = "",
        file: str = "",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.locations = list(locations)
        self.path = list(path)
        self.rule = rule
        self.file = file

    def __str__(self) -> str:
        text = self.file or "input"
        if self.locations:
            text += f":{self.locations[0][0]}"
        text += ": "
        path = format_path(self.path)
        if path:
            text += path + " "
        return text + self.message

    def __repr__(self) -> str:
        return f"GraphQLError({str(self)!r})"


def error_at(position: Optional[Position], message: str) -> GraphQLError:
    """An error located at a position in a source."""
    if position is None:
        return GraphQLError(message)
    return GraphQLError(
        message,
        locations=[(position.line, position.column)],
        file=position.source,
    )


def error_path(path: Iterable[PathElement], message: str) -> GraphQLError:
    """An error located at a path inside a value."""
    return GraphQLError(message, path=path)


def format_path(path: Iterable[PathElement]) -> str:
    """Render a path as ``name.name[0].name``."""
    parts = []
    for i, element in enumerate(path):
        if isinstance(element, int):
            parts.append(f"[{element}]")
        else:
            parts.append(("." if i else "") + element)
    return "".join(parts)