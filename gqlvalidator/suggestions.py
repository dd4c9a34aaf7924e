"""Typo suggestions and human-readable option lists."""

from __future__ import annotations

import math
from typing import Iterable

MAX_LISTED = 5


def suggestion_list(text: str, options: Iterable[str]) -> list[str]:
    """Options close enough to ``text``, most similar first."""
    threshold = max(1, int(math.floor(len(text.encode("utf-8")) * 0.4) + 1))
    scored = []
    for option in options:
        distance = lexical_distance(text, option)
        if distance <= threshold:
            scored.append((distance, option))
    scored.sort(key=lambda pair: pair[0])
    return [option for _, option in scored]


def lexical_distance(a: str, b: str) -> int:
    """Edit distance where any change of case alone counts as one edit."""
    if a == b:
        return 0
    a, b = a.lower(), b.lower()
    if a == b:
        return 1
    return _levenshtein(a, b)


def _levenshtein(a: str, b: str) -> int:
    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, 1):
        current = [i]
        for j, char_b in enumerate(b, 1):
            current.append(
                min(
                    previous[j] + 1,
                    current[j - 1] + 1,
                    previous[j - 1] + (char_a != char_b),
                )
            )
        previous = current
    return previous[-1]


def quoted_or_list(*args: str) -> str:
    """Quote each item and join them as an "or" list."""
    return or_list(*(f'"{item}"' for item in args))


def or_list(*args: str) -> str:
    """Join at most five items as ``a, b or c``."""
    items = list(args)[:MAX_LISTED]
    if len(items) <= 1:
        return "".join(items)
    return ", ".join(items[:-1]) + " or " + items[-1]


def did_you_mean(prefix: str, typed: str, options: Iterable[str], quoted: bool = True) -> str:
    """A suffix such as ``' Did you mean "x"?'``, or an empty string."""
    suggested = suggestion_list(typed, options)
    if not suggested:
        return ""
    listed = quoted_or_list(*suggested) if quoted else or_list(*suggested)
    return f" {prefix} {listed}?"