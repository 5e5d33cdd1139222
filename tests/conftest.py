import os

import pytest
import pytest_asyncio
import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine


@pytest.fixture(scope='function')
def engine(tmp_path) -> sa.engine.Engine:
    # Engine
    engine = sa.engine.create_engine(os.getenv('DATABASE_URL') or f'sqlite:///{tmp_path / "test_keypage.sqlite"}')
    yield engine
    engine.dispose()


@pytest.fixture(scope='function')
def connection(engine: sa.engine.Engine) -> sa.engine.Connection:
    with engine.connect() as conn:
        yield conn


@pytest_asyncio.fixture(scope='function')
async def async_engine(engine: sa.engine.Engine) -> AsyncEngine:
    # Same database, async driver
    url = engine.url.set(drivername=ASYNC_DRIVERS[engine.url.get_backend_name()])
    async_engine = create_async_engine(url)
    yield async_engine
    await async_engine.dispose()


# Async drivers for the databases we test against
ASYNC_DRIVERS = {
    'sqlite': 'sqlite+aiosqlite',
    'postgresql': 'postgresql+asyncpg',
}
