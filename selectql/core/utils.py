from __future__ import annotations
from datetime import datetime
from typing import Any, List
from sqlalchemy.sql.sqltypes import Boolean, DateTime, Float, Integer, Numeric

NESTED_SEPARATOR = '.'


def is_nested(attribute: Any) -> bool:
    return NESTED_SEPARATOR in str(attribute or '')


def split_nested(attribute: str) -> tuple[str, str]:
    """Split ``'category.parent.name'`` into ``('category.parent', 'name')``."""
    relation, _, column = str(attribute).rpartition(NESTED_SEPARATOR)
    return relation, column


def ensure_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return [value]


def coerce_where_value(col, val):
    if isinstance(val, (list, tuple)):
        return [coerce_where_value(col, v) for v in val]
    ctype = getattr(col, 'type', None)
    if ctype is None or val is None:
        return val
    if isinstance(ctype, DateTime):
        if isinstance(val, str):
            s = val.replace('Z', '+00:00') if 'Z' in val else val
            try:
                dv = datetime.fromisoformat(s)
            except ValueError:
                return val
            if getattr(ctype, 'timezone', False) is False and dv.tzinfo is not None:
                dv = dv.replace(tzinfo=None)
            return dv
        return val
    if isinstance(ctype, Integer):
        try:
            return int(val) if isinstance(val, str) else val
        except ValueError:
            return val
    if isinstance(ctype, (Numeric, Float)):
        try:
            return float(val) if isinstance(val, str) else val
        except ValueError:
            return val
    if isinstance(ctype, Boolean):
        if isinstance(val, str):
            lv = val.strip().lower()
            if lv in ('true', 't', '1', 'yes', 'y'):
                return True
            if lv in ('false', 'f', '0', 'no', 'n'):
                return False
        return bool(val)
    return val


# --- Context helpers ---
def get_db_session(info_or_ctx: Any) -> Any | None:
    """Best-effort extraction of a Session/AsyncSession from a GraphQL context.

    Accepts either a Strawberry ``Info`` or a plain context object/dict. Tries
    common keys/attributes in order: ``db_session``, ``db``, ``session``,
    ``async_session``.

    Returns:
        The session object if found; otherwise ``None``.
    """
    if info_or_ctx is None:
        return None
    ctx = getattr(info_or_ctx, 'context', info_or_ctx)
    if ctx is None:
        return None
    candidates = ('db_session', 'db', 'session', 'async_session')
    get = getattr(ctx, 'get', None)
    for k in candidates:
        v = get(k, None) if callable(get) else getattr(ctx, k, None)
        if v is not None:
            return v
    return None
