"""SelectQL public API.

Exposes:
- Options: the options resolver (filters, selected snapshot, search, order, limit, merge)
- OptionsRequest: parsed request parameters
- Search, SearchMode, ComparisonOperator: the free-text search collaborator
- SelectSettings, get_settings, set_settings, reset_settings
- InvalidFieldError
- Lazy: options_field (Strawberry GraphQL field factory)
"""
from __future__ import annotations

from .core.filters import InvalidFieldError
from .options import LIMIT, Options
from .request import OptionsRequest
from .search import ComparisonOperator, Search, SearchMode
from .settings import SelectSettings, get_settings, reset_settings, set_settings


def __getattr__(name: str):  # PEP 562 lazy exports
    if name == 'options_field':
        from .field import options_field as _options_field
        return _options_field
    raise AttributeError(name)


__all__ = [
    'Options', 'OptionsRequest', 'LIMIT',
    'Search', 'SearchMode', 'ComparisonOperator',
    'SelectSettings', 'get_settings', 'set_settings', 'reset_settings',
    'InvalidFieldError',
    'options_field',
]
