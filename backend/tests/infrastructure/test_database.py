"""Database Session Manager — tests for probe and error mapping.

Tests cover:
    - probe bootstraps the schema and answers SELECT 1
    - probe on an unreachable database raises StorageUnavailableError
    - unique violations become StorageConflictError
    - SqlRegistryStore maps conflicts to DuplicateEmailError
"""

from sqlalchemy import text

import pytest

from eventix.core.errors import StorageConflictError, StorageUnavailableError
from eventix.infrastructure.database import DatabaseSessionManager
from eventix.models import UserRow


async def test_probe_creates_tables(sql_manager):
    async with sql_manager.session() as db:
        result = await db.execute(text("SELECT COUNT(*) FROM tickets"))
        assert result.scalar_one() == 0


async def test_probe_unreachable_database_raises_storage_unavailable(tmp_path):
    missing = tmp_path / "no-such-dir" / "registry.db"
    manager = DatabaseSessionManager(f"sqlite+aiosqlite:///{missing}")
    with pytest.raises(StorageUnavailableError):
        await manager.probe(create_schema=True)
    await manager.dispose()


async def test_unique_violation_maps_to_conflict(sql_manager):
    async with sql_manager.session() as db:
        db.add(UserRow(name="A", email="a@example.com", password_hash="h"))
        await db.commit()
    with pytest.raises(StorageConflictError):
        async with sql_manager.session() as db:
            db.add(UserRow(name="B", email="a@example.com", password_hash="h"))
            await db.commit()


async def test_session_usable_after_conflict(sql_manager):
    with pytest.raises(StorageConflictError):
        async with sql_manager.session() as db:
            db.add(UserRow(name="A", email="a@example.com", password_hash="h"))
            db.add(UserRow(name="B", email="a@example.com", password_hash="h"))
            await db.commit()
    async with sql_manager.session() as db:
        result = await db.execute(text("SELECT COUNT(*) FROM users"))
        assert result.scalar_one() == 0
