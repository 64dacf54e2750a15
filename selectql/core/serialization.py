from __future__ import annotations
import base64
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, Sequence
from uuid import UUID
from sqlalchemy import inspect as sa_inspect


def record_to_dict(instance: Any, appends: Optional[Sequence[str]] = None) -> Dict[str, Any]:
    """Mapping of every mapped column attribute, plus the appended attributes.

    An appended attribute that is callable (a plain method) is called without
    arguments. Appends must not trigger lazy loads on an AsyncSession; eager
    load any relation they read in the base query.
    """
    mapper = sa_inspect(instance).mapper
    data = {attr.key: getattr(instance, attr.key) for attr in mapper.column_attrs}
    for name in appends or ():
        val = getattr(instance, name)
        data[name] = val() if callable(val) else val
    return data


def jsonable(value: Any) -> Any:
    """Convert record values into JSON-compatible Python values."""
    if isinstance(value, dict):
        return {str(k): jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [jsonable(v) for v in value]
    if isinstance(value, Enum):
        return jsonable(value.value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return base64.b64encode(bytes(value)).decode('ascii')
    return value
