"""Tests for database configuration."""

import pytest

from sqlalchemy import text

from product_board.database import Database, get_database_url


@pytest.fixture
async def database(tmp_path):
    """Database with tables, in a directory that does not exist yet."""
    database = Database(str(tmp_path / "nested" / "test.db"))
    await database.create_tables()
    yield database
    await database.dispose()


def test_database_url_from_env(tmp_path, monkeypatch):
    """Test DATABASE_PATH is honoured and its directory created."""
    db_path = tmp_path / "env" / "board.db"
    monkeypatch.setenv("DATABASE_PATH", str(db_path))

    assert get_database_url() == f"sqlite+aiosqlite:///{db_path}"
    assert db_path.parent.exists()


@pytest.mark.asyncio
async def test_create_tables(database, tmp_path):
    """Test that create_tables creates the products table."""
    async with database.transaction() as session:
        result = await session.execute(
            text("SELECT name FROM sqlite_master WHERE type='table' AND name='products'")
        )
        assert result.scalar() == "products"

    assert (tmp_path / "nested" / "test.db").exists()


@pytest.mark.asyncio
async def test_transaction_commits(database):
    async with database.transaction() as session:
        await session.execute(text(
            "INSERT INTO products (id, title, product_url, price, status) "
            "VALUES ('x', 'X', 'https://x', '1', 'PENDING')"
        ))

    async with database.transaction() as session:
        result = await session.execute(text("SELECT title FROM products WHERE id = 'x'"))
        assert result.scalar() == "X"


@pytest.mark.asyncio
async def test_transaction_rolls_back_on_error(database):
    """Test that a failing block leaves nothing behind."""
    with pytest.raises(RuntimeError):
        async with database.transaction() as session:
            await session.execute(text(
                "INSERT INTO products (id, title, product_url, price, status) "
                "VALUES ('x', 'X', 'https://x', '1', 'PENDING')"
            ))
            raise RuntimeError("boom")

    async with database.transaction() as session:
        result = await session.execute(text("SELECT COUNT(*) FROM products"))
        assert result.scalar() == 0

