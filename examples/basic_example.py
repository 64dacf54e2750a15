"""
Basic example of using SelectQL with Strawberry GraphQL and SQLAlchemy.

This example demonstrates:
- Resolving select options directly with ``Options``
- Keeping a pre-selected record while searching and paginating
- Exposing the same options as a GraphQL field
"""

import asyncio
import strawberry
from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase, relationship

from selectql import Options, options_field


class Base(DeclarativeBase):
    pass


class Country(Base):
    __tablename__ = 'countries'

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)

    cities = relationship("City", back_populates="country")


class City(Base):
    __tablename__ = 'cities'

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    country_id = Column(Integer, ForeignKey('countries.id'), nullable=False)

    country = relationship("Country", back_populates="cities")


@strawberry.type
class Query:
    city_options = options_field(City, 'id', ['name', 'country.name'], search_mode='starts_with')


schema = strawberry.Schema(query=Query)


async def main():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        romania = Country(name="Romania")
        spain = Country(name="Spain")
        session.add_all([
            City(name="Bucharest", country=romania),
            City(name="Brasov", country=romania),
            City(name="Barcelona", country=spain),
            City(name="Madrid", country=spain),
        ])
        await session.commit()

        # Madrid stays in the list even though the search term excludes it
        options = Options(City, 'id', ['name', 'country.name']).search_mode('starts_with')
        rows = await options.resolve(session, {'value': [4], 'query': 'Br', 'paginate': 10})
        print([row['name'] for row in rows])

        result = await schema.execute(
            '{ cityOptions(query: "Spa", pivotParams: {country: {name: "Spain"}}) }',
            context_value={'db_session': session},
        )
        print(result.data)

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
