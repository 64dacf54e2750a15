from __future__ import annotations
from typing import Any, Callable, Dict, Mapping, Optional
from sqlalchemy import and_
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.sql import Select
from .utils import coerce_where_value, ensure_list

# Global operator registry
OPERATOR_REGISTRY: Dict[str, Callable[[Any, Any], Any]] = {
    'is_null': lambda col, v: col.is_(None),
    'in': lambda col, v: col.in_(ensure_list(v)),
    'not_in': lambda col, v: ~col.in_(ensure_list(v)),
    'like': lambda col, v: col.like(v, escape='\\'),
    'not_like': lambda col, v: ~col.like(v, escape='\\'),
    'ilike': lambda col, v: col.ilike(v, escape='\\'),
    'not_ilike': lambda col, v: ~col.ilike(v, escape='\\'),
}


class InvalidFieldError(ValueError):
    """Raised when a column, attribute or relation name does not exist on the model."""
    pass


def entity_of(stmt: Select):
    """Return the mapped class selected by ``stmt`` (first column description)."""
    descriptions = stmt.column_descriptions
    entity = descriptions[0].get('entity') if descriptions else None
    if entity is None:
        raise InvalidFieldError("Query must select a mapped entity")
    return entity


def resolve_column(model_cls, name: str):
    """Map an attribute name to its queryable attribute (column, column_property or hybrid)."""
    mapper = sa_inspect(model_cls)
    if name in mapper.relationships or name not in mapper.all_orm_descriptors:
        raise InvalidFieldError(f"Unknown column: {name} for {model_cls.__name__}")
    return getattr(model_cls, name)


def resolve_relation(model_cls, name: str):
    rel = sa_inspect(model_cls).relationships.get(name)
    if rel is None:
        raise InvalidFieldError(f"Unknown relation: {name} for {model_cls.__name__}")
    return rel


def relation_criterion(model_cls, path: str, build: Callable[[Any], Optional[Any]]):
    """Build an EXISTS criterion along a dotted relation path.

    ``build`` receives the class at the end of the path and returns the inner
    criterion (or None for bare existence). Collections use ``any()``, scalar
    relations use ``has()``; each hop nests one EXISTS.
    """
    head, _, rest = path.partition('.')
    rel = resolve_relation(model_cls, head)
    target = rel.mapper.class_
    inner = relation_criterion(target, rest, build) if rest else build(target)
    attr = getattr(model_cls, head)
    return attr.any(inner) if rel.uselist else attr.has(inner)


def column_filter(model_cls, column: str, value: Any):
    """``None`` filters IS NULL; anything else filters IN, a scalar being a one-element set."""
    col = resolve_column(model_cls, column)
    if value is None:
        return OPERATOR_REGISTRY['is_null'](col, None)
    return OPERATOR_REGISTRY['in'](col, coerce_where_value(col, ensure_list(value)))


def pivot_filter(model_cls, relation: str, constraints: Mapping[str, Any]):
    def build(target):
        exprs = []
        for attribute, value in constraints.items():
            col = resolve_column(target, attribute)
            exprs.append(OPERATOR_REGISTRY['in'](col, coerce_where_value(col, ensure_list(value))))
        if not exprs:
            return None
        return and_(*exprs)
    return relation_criterion(model_cls, relation, build)
