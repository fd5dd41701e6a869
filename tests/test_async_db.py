import os
import sys
import pytest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from db import (
    AsyncBaseRepository,
    AsyncWorkoutSessionRepository,
    WorkoutSessionRepository,
)


class NumberRepository(AsyncBaseRepository):
    async def init_db(self) -> None:
        async with self._async_connection() as conn:
            await conn.execute("CREATE TABLE IF NOT EXISTS numbers (val INTEGER)")
            await conn.commit()

    async def add(self, val: int) -> int:
        return await self.execute("INSERT INTO numbers (val) VALUES (?)", (val,))

    async def all(self):
        rows = await self.fetch_all("SELECT val FROM numbers")
        return [r[0] for r in rows]


@pytest.mark.asyncio
async def test_async_repository(tmp_path):
    repo = NumberRepository(str(tmp_path / "test.db"))
    await repo.init_db()
    await repo.add(5)
    assert await repo.all() == [5]


@pytest.mark.asyncio
async def test_async_session_repo(tmp_path):
    db_file = str(tmp_path / "sessions.db")
    sessions = WorkoutSessionRepository(db_file)
    first = sessions.create("月曜日", "2024-01-01T09:00:00", 600, 80, [])
    second = sessions.create("水曜日", "2024-01-03T09:00:00", 900, 120, [])
    repo = AsyncWorkoutSessionRepository(db_file)
    rows = await repo.fetch_all_sessions()
    assert [r[0] for r in rows] == [second, first]
    rows = await repo.fetch_all_sessions(descending=False)
    assert [r[0] for r in rows] == [first, second]
    rows = await repo.fetch_all_sessions("2024-01-02", "2024-01-31")
    assert rows == [(second, "current_user", "水曜日", "2024-01-03T09:00:00", 900, 120)]
