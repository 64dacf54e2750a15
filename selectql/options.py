"""Options resolver: the result set behind a searchable select control.

Pipeline for one request::

    params -> pivot params -> selected snapshot -> search -> order -> limit -> merge

The selected snapshot is taken after the column and relation filters but
before search and limit, so pre-selected records survive a search term or a
small page while still honoring explicit filters.
"""
from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from sqlalchemy import select
from sqlalchemy.sql import Select

from .core.filters import OPERATOR_REGISTRY, column_filter, entity_of, pivot_filter, resolve_column
from .core.serialization import record_to_dict
from .core.utils import coerce_where_value, is_nested
from .request import OptionsRequest
from .search import ComparisonOperator, Search, SearchMode
from .settings import get_settings

logger = logging.getLogger(__name__)

LIMIT = 100

Record = Dict[str, Any]


class Options:
    """Resolve select options for one mapped entity.

    Args:
        query: A mapped class or a ``select()`` over one mapped entity. The
            statement may already carry criteria and loader options.
        track_by: Unique key attribute used to track selections and drop duplicates.
        attributes: Displayable attributes. The first one orders the result
            unless it is nested (``relation.attribute``).

    Example:
        options = Options(Product, 'id', ['name', 'category.name']).search_mode('starts_with')
        rows = await options.resolve(session, {'value': [3], 'query': 'lap', 'paginate': 20})
    """

    def __init__(self, query: Any, track_by: str, attributes: Sequence[str]):
        self._query: Select = query if isinstance(query, Select) else select(query)
        self._model = entity_of(self._query)
        self._track_by = track_by
        self._track_col = resolve_column(self._model, track_by)
        self._attributes: List[str] = list(attributes or [])
        self._search_mode: Optional[SearchMode] = None
        self._comparison_operator: Optional[ComparisonOperator] = None
        self._resource: Optional[Callable[[List[Record]], Any]] = None
        self._appends: Optional[List[str]] = None

    def search_mode(self, search_mode: Union[SearchMode, str, None]) -> "Options":
        self._search_mode = SearchMode.parse(search_mode) if search_mode is not None else None
        return self

    def comparison_operator(self, comparison_operator: Union[ComparisonOperator, str, None]) -> "Options":
        self._comparison_operator = (
            ComparisonOperator.parse(comparison_operator) if comparison_operator is not None else None
        )
        return self

    def resource(self, resource: Optional[Callable[[List[Record]], Any]]) -> "Options":
        """Transform applied to the result list by :meth:`to_response`."""
        self._resource = resource
        return self

    def appends(self, appends: Optional[Sequence[str]]) -> "Options":
        self._appends = list(appends) if appends else None
        return self

    @property
    def order_by(self) -> Optional[str]:
        attribute = self._attributes[0] if self._attributes else None
        return None if attribute is None or is_nested(attribute) else attribute

    async def to_response(self, session, request: Any = None) -> Any:
        data = await self.resolve(session, request)
        return self._resource(data) if self._resource is not None else data

    async def resolve(self, session, request: Any = None) -> List[Record]:
        """Run the options pipeline against ``session`` (``AsyncSession`` or ``Session``)."""
        req = OptionsRequest.coerce(request)
        value = coerce_where_value(self._track_col, list(req.value))
        order_by = self.order_by

        stmt = self._apply_params(self._query, req.params)
        stmt = self._apply_pivot_params(stmt, req.pivot_params)
        selected = await self._selected(session, stmt, value)
        stmt = self._search(stmt, req.query)
        stmt = self._order(stmt, order_by)
        stmt = self._limit(stmt, req.paginate)
        return await self._get(session, stmt, value, selected, order_by)

    def _apply_params(self, stmt: Select, params: Dict[str, Any]) -> Select:
        for column, value in params.items():
            stmt = stmt.where(column_filter(self._model, column, value))
        return stmt

    def _apply_pivot_params(self, stmt: Select, pivot_params: Dict[str, Dict[str, Any]]) -> Select:
        for relation, constraints in pivot_params.items():
            stmt = stmt.where(pivot_filter(self._model, relation, constraints))
        return stmt

    async def _selected(self, session, stmt: Select, value: List[Any]) -> List[Any]:
        if not value:
            return []
        selected = await _fetch(session, stmt.where(OPERATOR_REGISTRY['in'](self._track_col, value)))
        logger.debug(f"{self._model.__name__} options: {len(selected)} of {len(value)} selected value(s) found")
        return selected

    def _search(self, stmt: Select, search: Optional[str]) -> Select:
        if not search:
            return stmt
        settings = get_settings()
        return (
            Search(stmt, self._plain_attributes(), search)
            .relations(self._nested_attributes())
            .search_mode(self._search_mode or settings.search_mode)
            .comparison_operator(self._comparison_operator or settings.comparison_operator)
            .handle()
        )

    def _plain_attributes(self) -> List[str]:
        return [attribute for attribute in self._attributes if not is_nested(attribute)]

    def _nested_attributes(self) -> List[str]:
        return [attribute for attribute in self._attributes if is_nested(attribute)]

    def _order(self, stmt: Select, order_by: Optional[str]) -> Select:
        if order_by is None:
            return stmt
        return stmt.order_by(resolve_column(self._model, order_by).asc())

    def _limit(self, stmt: Select, paginate: Optional[int]) -> Select:
        return stmt.limit(paginate if paginate is not None else LIMIT)

    async def _get(self, session, stmt: Select, value: List[Any], selected: List[Any], order_by: Optional[str]) -> List[Record]:
        if value:
            stmt = stmt.where(OPERATOR_REGISTRY['not_in'](self._track_col, value))
        rows = await _fetch(session, stmt)

        merged: List[Any] = []
        seen = set()
        for row in [*rows, *selected]:
            key = getattr(row, self._track_by)
            if key in seen:
                continue
            seen.add(key)
            merged.append(row)
        if order_by is not None:
            merged.sort(key=lambda row: _sort_key(getattr(row, order_by)))
        logger.debug(
            f"{self._model.__name__} options: fetched {len(rows)} row(s), "
            f"{len(merged)} after merging {len(selected)} selected"
        )
        return [record_to_dict(row, self._appends) for row in merged]


async def _fetch(session, stmt: Select) -> List[Any]:
    result = session.execute(stmt)
    if inspect.isawaitable(result):
        result = await result
    return list(result.unique().scalars().all())


def _sort_key(value: Any):
    # NULLs sort first
    return (value is not None, value)
