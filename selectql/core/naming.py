from __future__ import annotations

import re
from typing import Any, Iterable, Mapping

__all__ = [
    'from_camel',
    'to_camel',
    'lookup',
]

_camel_to_snake_pattern = re.compile(r'(?<!^)(?=[A-Z])')


def from_camel(name: str) -> str:
    """Convert lower/upper camelCase to snake_case."""
    if not name:
        return name
    return _camel_to_snake_pattern.sub('_', str(name)).lower()


def to_camel(name: str) -> str:
    """Convert snake_case to lowerCamelCase."""
    if not name:
        return name
    parts = str(name).split('_')
    if not parts:
        return name
    return parts[0] + ''.join(p.capitalize() for p in parts[1:])


def lookup(data: Mapping[str, Any], name: str, default: Any = None) -> Any:
    """Read ``name`` from a request mapping, accepting its camelCase spelling too."""
    keys: Iterable[str] = dict.fromkeys((name, to_camel(name), from_camel(name)))
    for key in keys:
        if key in data:
            return data[key]
    return default
