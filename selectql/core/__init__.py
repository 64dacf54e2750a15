from .filters import InvalidFieldError, OPERATOR_REGISTRY
from .utils import coerce_where_value, ensure_list, is_nested

__all__ = [
    'InvalidFieldError',
    'OPERATOR_REGISTRY',
    'coerce_where_value',
    'ensure_list',
    'is_nested',
]
