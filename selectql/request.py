"""Request parameters for an options lookup.

Optional inputs never fail the request: malformed JSON or a bad ``paginate``
value is logged and replaced by its default.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from .core.naming import lookup
from .core.utils import ensure_list

logger = logging.getLogger(__name__)


@dataclass
class OptionsRequest:
    """Parsed ``value``/``params``/``pivotParams``/``query``/``paginate`` inputs."""

    value: List[Any] = field(default_factory=list)
    params: Dict[str, Any] = field(default_factory=dict)
    pivot_params: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    query: Optional[str] = None
    paginate: Optional[int] = None

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "OptionsRequest":
        data = data or {}
        return cls(
            value=ensure_list(lookup(data, 'value')),
            params=_parse_object(lookup(data, 'params'), 'params'),
            pivot_params=_parse_pivot_params(lookup(data, 'pivot_params')),
            query=_parse_query(lookup(data, 'query')),
            paginate=_parse_paginate(lookup(data, 'paginate')),
        )

    @classmethod
    def coerce(cls, request: Any) -> "OptionsRequest":
        if isinstance(request, cls):
            return request
        return cls.from_mapping(request)


def _parse_object(raw: Any, name: str) -> Dict[str, Any]:
    """Parse a JSON object parameter - can be dict or JSON string."""
    if raw is None:
        return {}
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode('utf-8')
    if isinstance(raw, str):
        if not raw.strip():
            return {}
        try:
            raw = json.loads(raw.strip())
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring malformed {name} '{raw}': {e}")
            return {}
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        logger.warning(f"Ignoring {name}: expected a JSON object, got {type(raw).__name__}")
        return {}
    return dict(raw)


def _parse_pivot_params(raw: Any) -> Dict[str, Dict[str, Any]]:
    parsed = _parse_object(raw, 'pivotParams')
    pivot_params: Dict[str, Dict[str, Any]] = {}
    for relation, constraints in parsed.items():
        if constraints is None:
            constraints = {}
        if not isinstance(constraints, Mapping):
            logger.warning(f"Ignoring pivotParams['{relation}']: expected an object of attribute constraints")
            continue
        pivot_params[relation] = dict(constraints)
    return pivot_params


def _parse_query(raw: Any) -> Optional[str]:
    if raw is None:
        return None
    text = str(raw).strip()
    return text or None


def _parse_paginate(raw: Any) -> Optional[int]:
    if raw is None or raw == '':
        return None
    try:
        limit = int(raw)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring paginate '{raw}': not an integer")
        return None
    if limit < 0:
        logger.warning(f"Ignoring paginate {limit}: must be non-negative")
        return None
    return limit
