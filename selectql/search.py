"""Free-text search over model attributes and relation attributes.

The search term is split into arguments (whitespace separated, or the whole
term for exact matches). Every argument must match: each one adds a WHERE
group in which any configured attribute may match. ``doesnt_contain`` flips
this so that no attribute may contain any argument.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Any, List, Optional, Sequence

from sqlalchemy import and_, or_
from sqlalchemy.sql import Select

from .core.filters import OPERATOR_REGISTRY, entity_of, relation_criterion, resolve_column
from .core.naming import from_camel
from .core.utils import split_nested

logger = logging.getLogger(__name__)

__all__ = ['SearchMode', 'ComparisonOperator', 'Search', 'escape_like']


class SearchMode(str, Enum):
    FULL = 'full'
    STARTS_WITH = 'starts_with'
    ENDS_WITH = 'ends_with'
    EXACT_MATCH = 'exact_match'
    DOESNT_CONTAIN = 'doesnt_contain'

    @classmethod
    def parse(cls, raw: Any) -> "SearchMode":
        """Accept a member, its value, or the camelCase spelling (``startsWith``)."""
        if isinstance(raw, cls):
            return raw
        key = from_camel(str(getattr(raw, 'value', raw) or '').strip())
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Invalid search mode '{raw}'. Use one of: {[m.value for m in cls]}") from None

    def wildcards(self, argument: str) -> str:
        if self is SearchMode.STARTS_WITH:
            return f"{argument}%"
        if self is SearchMode.ENDS_WITH:
            return f"%{argument}"
        if self is SearchMode.EXACT_MATCH:
            return argument
        return f"%{argument}%"


class ComparisonOperator(str, Enum):
    LIKE = 'LIKE'
    ILIKE = 'ILIKE'

    @classmethod
    def parse(cls, raw: Any) -> "ComparisonOperator":
        if isinstance(raw, cls):
            return raw
        key = str(getattr(raw, 'value', raw) or '').strip().upper()
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Invalid comparison operator '{raw}'. Use one of: {[m.value for m in cls]}") from None

    def operator_name(self, negate: bool = False) -> str:
        name = self.value.lower()
        return f"not_{name}" if negate else name


def escape_like(argument: str) -> str:
    """Escape LIKE wildcards so user input is matched literally (escape char ``\\``)."""
    return argument.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')


class Search:
    def __init__(self, stmt: Select, attributes: Sequence[str], search: Optional[str]):
        self._stmt = stmt
        self._attributes: List[str] = list(attributes or [])
        self._search = search or ''
        self._relations: List[str] = []
        self._search_mode = SearchMode.FULL
        self._comparison_operator = ComparisonOperator.LIKE

    def relations(self, relations: Optional[Sequence[str]]) -> "Search":
        """Nested attributes (``relation.attribute``) searched through EXISTS."""
        self._relations = list(relations or [])
        return self

    def search_mode(self, search_mode: Any) -> "Search":
        self._search_mode = SearchMode.parse(search_mode)
        return self

    def comparison_operator(self, comparison_operator: Any) -> "Search":
        self._comparison_operator = ComparisonOperator.parse(comparison_operator)
        return self

    def handle(self) -> Select:
        """Return the statement narrowed by the search term."""
        stmt = self._stmt
        arguments = self._arguments()
        if not arguments:
            return stmt
        model_cls = entity_of(stmt)
        for argument in arguments:
            clause = self._match_argument(model_cls, argument)
            if clause is not None:
                stmt = stmt.where(clause)
        logger.debug(
            f"Search on {model_cls.__name__}: {len(arguments)} argument(s), "
            f"mode={self._search_mode.value}, operator={self._comparison_operator.value}"
        )
        return stmt

    def _arguments(self) -> List[str]:
        if self._search_mode is SearchMode.EXACT_MATCH:
            term = self._search.strip()
            return [term] if term else []
        return [arg for arg in self._search.split() if arg]

    def _negated(self) -> bool:
        return self._search_mode is SearchMode.DOESNT_CONTAIN

    def _match_argument(self, model_cls, argument: str):
        pattern = self._search_mode.wildcards(escape_like(argument))
        matches = [self._match_attribute(resolve_column(model_cls, attribute), pattern) for attribute in self._attributes]
        matches.extend(self._match_nested(model_cls, attribute, pattern) for attribute in self._relations)
        if not matches:
            return None
        if self._negated():
            return and_(*matches)
        return or_(*matches)

    def _match_attribute(self, col, pattern: str):
        op_fn = OPERATOR_REGISTRY[self._comparison_operator.operator_name(self._negated())]
        return op_fn(col, pattern)

    def _match_nested(self, model_cls, attribute: str, pattern: str):
        relation, column = split_nested(attribute)
        op_fn = OPERATOR_REGISTRY[self._comparison_operator.operator_name()]
        exists = relation_criterion(model_cls, relation, lambda target: op_fn(resolve_column(target, column), pattern))
        # no related record may contain the argument
        return ~exists if self._negated() else exists
