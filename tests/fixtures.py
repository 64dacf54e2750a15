"""Database fixtures for SelectQL tests (shared)."""

import pytest
from datetime import datetime
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Category, Product, Supplier, Tag


async def create_catalog(session: AsyncSession):
    """Create and commit the sample catalog used across tests.

    Active products by name: Air Fryer, Blender, Cable 100%, Desk Lamp,
    Laptop Pro, Monitor 27, Tablet_Mini. Coffee Maker is inactive and
    Keyboard is discontinued.
    """
    electronics = Category(name="Electronics")
    computers = Category(name="Computers", parent=electronics)
    kitchen = Category(name="Kitchen")
    acme = Supplier(name="Acme")
    globex = Supplier(name="Globex")
    sale = Tag(name="sale")
    new = Tag(name="new")
    eco = Tag(name="eco")
    created = datetime(2024, 1, 1, 12, 0, 0)
    products = [
        Product(name="Laptop Pro", status="active", category=computers, supplier=acme, tags=[new], created_at=created),
        Product(name="Desk Lamp", status="active", category=None, supplier=globex, tags=[eco], created_at=created),
        Product(name="Coffee Maker", status="inactive", active=False, category=kitchen, supplier=acme, tags=[sale], created_at=created),
        Product(name="Blender", status="active", category=kitchen, supplier=globex, tags=[sale, eco], created_at=created),
        Product(name="Monitor 27", status="active", category=computers, supplier=acme, tags=[], created_at=created),
        Product(name="Keyboard", status="discontinued", active=False, category=computers, supplier=globex, tags=[sale], created_at=created),
        Product(name="Air Fryer", status="active", category=kitchen, supplier=acme, tags=[new], created_at=created),
        Product(name="Tablet_Mini", status="active", category=electronics, supplier=globex, tags=[], created_at=created),
        Product(name="Cable 100%", status="active", category=electronics, supplier=None, tags=[], created_at=created),
    ]
    # products are inserted in list order, so primary keys follow it
    session.add_all([electronics, computers, kitchen, acme, globex, sale, new, eco, *products])
    await session.commit()
    return {
        'categories': {'electronics': electronics, 'computers': computers, 'kitchen': kitchen},
        'suppliers': {'acme': acme, 'globex': globex},
        'tags': {'sale': sale, 'new': new, 'eco': eco},
        'products': {p.name: p for p in products},
    }


@pytest.fixture(scope="function")
async def catalog(db_session: AsyncSession):
    return await create_catalog(db_session)
