"""Process-wide configuration for SelectQL.

Values are read from environment variables the first time they are needed:

- ``SELECTQL_COMPARISON_OPERATOR``: ``LIKE`` (default) or ``ILIKE``
- ``SELECTQL_SEARCH_MODE``: default search mode (``full`` unless set)
"""
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Any, Optional

from .search import ComparisonOperator, SearchMode

__all__ = ['SelectSettings', 'get_settings', 'set_settings', 'reset_settings']


@dataclass(frozen=True)
class SelectSettings:
    comparison_operator: str = ComparisonOperator.LIKE.value
    search_mode: str = SearchMode.FULL.value

    def __post_init__(self):
        # raises ValueError on unknown names
        ComparisonOperator.parse(self.comparison_operator)
        SearchMode.parse(self.search_mode)

    @classmethod
    def from_env(cls, environ: Optional[Any] = None) -> "SelectSettings":
        env = os.environ if environ is None else environ
        return cls(
            comparison_operator=env.get('SELECTQL_COMPARISON_OPERATOR') or ComparisonOperator.LIKE.value,
            search_mode=env.get('SELECTQL_SEARCH_MODE') or SearchMode.FULL.value,
        )

    def with_overrides(self, **overrides: Any) -> "SelectSettings":
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


_ACTIVE_SETTINGS: Optional[SelectSettings] = None


def get_settings() -> SelectSettings:
    global _ACTIVE_SETTINGS
    if _ACTIVE_SETTINGS is None:
        _ACTIVE_SETTINGS = SelectSettings.from_env()
    return _ACTIVE_SETTINGS


def set_settings(settings: SelectSettings) -> None:
    global _ACTIVE_SETTINGS
    _ACTIVE_SETTINGS = settings


def reset_settings() -> None:
    """Forget the active settings; the environment is read again on next access."""
    global _ACTIVE_SETTINGS
    _ACTIVE_SETTINGS = None
