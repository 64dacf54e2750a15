import uuid
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

import pytest
from sqlalchemy import literal_column, select

from selectql.core.filters import InvalidFieldError, entity_of, relation_criterion, resolve_column, resolve_relation
from selectql.core.naming import from_camel, lookup, to_camel
from selectql.core.serialization import jsonable
from selectql.core.utils import coerce_where_value, ensure_list, get_db_session, is_nested, split_nested
from tests.models import Category, Product


class Color(Enum):
    RED = 'red'


def test_is_nested_and_split():
    assert is_nested('category.name')
    assert not is_nested('name')
    assert not is_nested(None)
    assert split_nested('category.parent.name') == ('category.parent', 'name')


def test_ensure_list():
    assert ensure_list(None) == []
    assert ensure_list('a') == ['a']
    assert ensure_list(['a', 'b']) == ['a', 'b']
    assert sorted(ensure_list({2, 1})) == [1, 2]


def test_coerce_where_value_by_column_type():
    assert coerce_where_value(Product.id, '7') == 7
    assert coerce_where_value(Product.id, ['1', 2, 'x']) == [1, 2, 'x']
    assert coerce_where_value(Product.active, 'no') is False
    assert coerce_where_value(Product.active, 1) is True
    assert coerce_where_value(Product.created_at, '2024-01-01T12:00:00Z') == datetime(2024, 1, 1, 12, 0, 0)
    assert coerce_where_value(Product.name, 5) == 5
    assert coerce_where_value(Product.id, None) is None


def test_resolve_column_and_relation():
    assert resolve_column(Product, 'name') is Product.name
    with pytest.raises(InvalidFieldError, match="Unknown column: missing for Product"):
        resolve_column(Product, 'missing')
    assert resolve_relation(Product, 'tags').mapper.class_.__name__ == 'Tag'
    with pytest.raises(InvalidFieldError, match="Unknown relation: name for Product"):
        resolve_relation(Product, 'name')


def test_entity_of():
    assert entity_of(select(Product)) is Product
    assert entity_of(select(Product).where(Product.id > 1)) is Product
    with pytest.raises(InvalidFieldError):
        entity_of(select(literal_column('1')))


def test_relation_criterion_walks_the_path():
    seen = []

    def build(target):
        seen.append(target)
        return None

    relation_criterion(Product, 'category.parent', build)
    assert seen == [Category]


def test_naming_helpers():
    assert from_camel('pivotParams') == 'pivot_params'
    assert to_camel('pivot_params') == 'pivotParams'
    assert lookup({'pivotParams': 1}, 'pivot_params') == 1
    assert lookup({'pivot_params': 2}, 'pivot_params') == 2
    assert lookup({}, 'pivot_params', 'd') == 'd'


def test_jsonable():
    uid = uuid.uuid4()
    assert jsonable({
        'when': datetime(2024, 1, 2, 3, 4, 5),
        'day': date(2024, 1, 2),
        'price': Decimal('1.50'),
        'uid': uid,
        'color': Color.RED,
        'blob': b'\x00\x01',
        'items': (1, 'a'),
    }) == {
        'when': '2024-01-02T03:04:05',
        'day': '2024-01-02',
        'price': 1.5,
        'uid': str(uid),
        'color': 'red',
        'blob': 'AAE=',
        'items': [1, 'a'],
    }


def test_get_db_session_lookup_order():
    class Info:
        context = {'db': 'db', 'session': 'session'}

    class Ctx:
        async_session = 'async'

    assert get_db_session(Info()) == 'db'
    assert get_db_session({'db_session': 's'}) == 's'
    assert get_db_session(Ctx()) == 'async'
    assert get_db_session({}) is None
    assert get_db_session(None) is None
