"""Strawberry GraphQL field exposing an options resolver.

Example::

    @strawberry.type
    class Query:
        product_options = options_field(Product, 'id', ['name', 'category.name'])

    # query { productOptions(value: [3], params: "{\\"active\\": true}", query: "lap", paginate: 20) }

The session is read from the GraphQL context (``db_session``, ``db``,
``session`` or ``async_session``).
"""
import logging
from typing import Any, Callable, List, Optional, Sequence

import strawberry
from strawberry.scalars import JSON
from strawberry.types import Info

from .core.serialization import jsonable
from .core.utils import get_db_session
from .options import Options
from .request import OptionsRequest

logger = logging.getLogger(__name__)

__all__ = ['options_field']


def options_field(
    source: Any,
    track_by: str,
    attributes: Sequence[str],
    *,
    search_mode: Optional[str] = None,
    comparison_operator: Optional[str] = None,
    appends: Optional[Sequence[str]] = None,
    resource: Optional[Callable[[List[dict]], Any]] = None,
    description: Optional[str] = None,
):
    """Build a query field returning JSON option records.

    Args:
        source: Mapped class or ``select()`` the options are drawn from.
        track_by: Unique key attribute.
        attributes: Displayable attributes; see :class:`selectql.options.Options`.
        search_mode: Search mode for the ``query`` argument (settings default otherwise).
        comparison_operator: ``LIKE`` or ``ILIKE`` (settings default otherwise).
        appends: Extra computed attributes added to every record.
        resource: Transform applied to the JSON-safe record list.
        description: GraphQL field description.
    """
    attributes = list(attributes)
    appends = list(appends) if appends else None

    async def resolve_options(
        info: Info,
        value: Optional[JSON] = None,
        params: Optional[JSON] = None,
        pivot_params: Optional[JSON] = None,
        query: Optional[str] = None,
        paginate: Optional[int] = None,
    ) -> JSON:
        session = get_db_session(info)
        if session is None:
            raise ValueError("No database session in GraphQL context (expected 'db_session')")
        request = OptionsRequest.from_mapping({
            'value': value,
            'params': params,
            'pivot_params': pivot_params,
            'query': query,
            'paginate': paginate,
        })
        options = (
            Options(source, track_by, attributes)
            .search_mode(search_mode)
            .comparison_operator(comparison_operator)
            .appends(appends)
        )
        records = jsonable(await options.resolve(session, request))
        return resource(records) if resource is not None else records

    return strawberry.field(resolver=resolve_options, description=description)
