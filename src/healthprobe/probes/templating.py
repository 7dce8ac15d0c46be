from __future__ import annotations

import string
from typing import Any, Mapping

_FORMATTER = string.Formatter()


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


def placeholders(template: str) -> set[str]:
    """Context keys referenced as {key} in a template string."""
    names: set[str] = set()
    for _, field_name, _, _ in _FORMATTER.parse(template):
        if field_name:
            names.add(field_name)
    return names


def placeholders_in(value: Any) -> set[str]:
    if isinstance(value, str):
        return placeholders(value)
    if isinstance(value, Mapping):
        names: set[str] = set()
        for v in value.values():
            names |= placeholders_in(v)
        return names
    if isinstance(value, (list, tuple)):
        names = set()
        for v in value:
            names |= placeholders_in(v)
        return names
    return set()


def render(template: str, values: Mapping[str, Any]) -> str:
    return template.format_map(values)


def render_value(value: Any, values: Mapping[str, Any]) -> Any:
    """Fill placeholders in every string inside a JSON-like structure."""
    if isinstance(value, str):
        return render(value, values)
    if isinstance(value, Mapping):
        return {k: render_value(v, values) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [render_value(v, values) for v in value]
    return value


def lookup(body: Any, dotted: str) -> Any:
    """Resolve "data.name" inside decoded JSON; MISSING when any hop is absent."""
    current = body
    for part in dotted.split("."):
        if isinstance(current, Mapping) and part in current:
            current = current[part]
        elif isinstance(current, list) and part.isdigit() and int(part) < len(current):
            current = current[int(part)]
        else:
            return MISSING
    return current
