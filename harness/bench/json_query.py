"""Minimal path expressions for pulling values out of JSON documents.

Grammar::

    query   := ["$"] [name] segment*
    segment := "." name | "[" ["-"] digits "]"
    name    := [A-Za-z_][A-Za-z0-9_-]*

Examples: ``id``, ``$.data.items[0].id``, ``[0].title``, ``users.validUser``.
Nothing is evaluated; a query is compiled into a tuple of keys and indexes.
"""

import re
from typing import Any, Tuple, Union

from harness.bench.errors import QueryError

Step = Union[str, int]

_SEGMENT_RE = re.compile(r"\.(?P<name>[A-Za-z_][A-Za-z0-9_-]*)|\[(?P<index>-?\d+)\]")
_HEAD_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_-]*")


def compile_query(query: str) -> Tuple[Step, ...]:
    text = (query or "").strip()
    if not text:
        raise QueryError("Empty query")

    pos = 0
    if text.startswith("$"):
        pos = 1
    steps = []

    head = _HEAD_RE.match(text, pos)
    if head and pos == 0:
        steps.append(head.group(0))
        pos = head.end()

    while pos < len(text):
        m = _SEGMENT_RE.match(text, pos)
        if not m:
            raise QueryError(f"Malformed query {query!r} at position {pos}")
        if m.group("name") is not None:
            steps.append(m.group("name"))
        else:
            steps.append(int(m.group("index")))
        pos = m.end()

    return tuple(steps)


def resolve(data: Any, query: str) -> Any:
    current = data
    for step in compile_query(query):
        if isinstance(step, int):
            if not isinstance(current, list):
                raise QueryError(f"{query!r}: cannot index {type(current).__name__} with [{step}]")
            try:
                current = current[step]
            except IndexError:
                raise QueryError(f"{query!r}: index [{step}] out of range") from None
        else:
            if not isinstance(current, dict) or step not in current:
                raise QueryError(f"{query!r}: key {step!r} not found")
            current = current[step]
    return current
