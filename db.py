import sqlite3
import aiosqlite
import datetime
import json
import csv
import io
from contextlib import contextmanager, asynccontextmanager
from typing import List, Tuple, Optional, Iterable

from config import YamlConfig, APP_VERSION
from settings_schema import validate_settings


class Database:
    """Provides SQLite connection management and schema initialization."""

    _TABLE_DEFINITIONS = {
        "settings": (
            """CREATE TABLE settings (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                );""",
            ["key", "value"],
        ),
        "generated_plans": (
            """CREATE TABLE generated_plans (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    created_at TEXT NOT NULL,
                    summary TEXT NOT NULL,
                    daily_calories INTEGER NOT NULL DEFAULT 0,
                    motivational_message TEXT NOT NULL DEFAULT '',
                    json TEXT NOT NULL
                );""",
            [
                "id",
                "created_at",
                "summary",
                "daily_calories",
                "motivational_message",
                "json",
            ],
        ),
        "workout_progress": (
            """CREATE TABLE workout_progress (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    plan_id INTEGER NOT NULL,
                    day_identifier TEXT NOT NULL,
                    completed_at TEXT,
                    is_completed INTEGER NOT NULL DEFAULT 0,
                    difficulty_feedback TEXT,
                    elapsed_seconds INTEGER,
                    estimated_calories INTEGER,
                    UNIQUE(plan_id, day_identifier),
                    FOREIGN KEY(plan_id) REFERENCES generated_plans(id) ON DELETE CASCADE
                );""",
            [
                "id",
                "plan_id",
                "day_identifier",
                "completed_at",
                "is_completed",
                "difficulty_feedback",
                "elapsed_seconds",
                "estimated_calories",
            ],
        ),
        "workout_sessions": (
            """CREATE TABLE workout_sessions (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    session_date TEXT NOT NULL,
                    duration_seconds INTEGER NOT NULL DEFAULT 0,
                    calories_kcal INTEGER NOT NULL DEFAULT 0
                );""",
            [
                "id",
                "user_id",
                "name",
                "session_date",
                "duration_seconds",
                "calories_kcal",
            ],
        ),
        "logged_exercises": (
            """CREATE TABLE logged_exercises (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    session_id INTEGER NOT NULL,
                    exercise_name TEXT NOT NULL,
                    position INTEGER NOT NULL DEFAULT 0,
                    FOREIGN KEY(session_id) REFERENCES workout_sessions(id) ON DELETE CASCADE
                );""",
            ["id", "session_id", "exercise_name", "position"],
        ),
        "logged_sets": (
            """CREATE TABLE logged_sets (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    exercise_id INTEGER NOT NULL,
                    set_index INTEGER NOT NULL,
                    weight_kg REAL NOT NULL DEFAULT 0,
                    reps INTEGER NOT NULL DEFAULT 0,
                    is_completed INTEGER NOT NULL DEFAULT 1,
                    FOREIGN KEY(exercise_id) REFERENCES logged_exercises(id) ON DELETE CASCADE
                );""",
            ["id", "exercise_id", "set_index", "weight_kg", "reps", "is_completed"],
        ),
        "custom_workouts": (
            """CREATE TABLE custom_workouts (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    body_part TEXT NOT NULL DEFAULT 'カスタム',
                    tags TEXT NOT NULL DEFAULT '[]',
                    created_at TEXT NOT NULL,
                    duration_min REAL NOT NULL DEFAULT 0,
                    calories_kcal INTEGER NOT NULL DEFAULT 0
                );""",
            [
                "id",
                "user_id",
                "name",
                "body_part",
                "tags",
                "created_at",
                "duration_min",
                "calories_kcal",
            ],
        ),
        "favorite_exercises": (
            """CREATE TABLE favorite_exercises (
                    name TEXT PRIMARY KEY
                );""",
            ["name"],
        ),
        "body_weight_logs": (
            """CREATE TABLE body_weight_logs (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    date TEXT NOT NULL,
                    weight REAL NOT NULL
                );""",
            ["id", "date", "weight"],
        ),
        "custom_mets": (
            """CREATE TABLE custom_mets (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    keys TEXT NOT NULL,
                    mets REAL NOT NULL
                );""",
            ["id", "keys", "mets"],
        ),
    }

    def __init__(self, db_path: str = "sync.db") -> None:
        self._db_path = db_path
        self._ensure_schema()
        self._init_settings()

    @contextmanager
    def _connection(self):
        connection = sqlite3.connect(self._db_path)
        connection.execute("PRAGMA foreign_keys=on;")
        try:
            yield connection
            connection.commit()
        finally:
            connection.close()

    def _ensure_schema(self) -> None:
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute("PRAGMA foreign_keys=off;")
            for table, (sql, columns) in self._TABLE_DEFINITIONS.items():
                self._ensure_table(conn, table, sql, columns)
            cursor.execute("PRAGMA foreign_keys=on;")

    def _ensure_table(
        self, conn: sqlite3.Connection, table: str, sql: str, columns: List[str]
    ) -> None:
        cur = conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?;", (table,)
        )
        if cur.fetchone() is None:
            conn.execute(sql)
            return

        cur = conn.execute(f"PRAGMA table_info({table});")
        existing_cols = [row[1] for row in cur.fetchall()]
        if existing_cols == columns:
            return

        conn.execute(f"DROP TABLE IF EXISTS {table}_old;")
        conn.execute(f"ALTER TABLE {table} RENAME TO {table}_old;")
        conn.execute(sql)

        common = [c for c in existing_cols if c in columns]
        if common:
            cols = ", ".join(common)
            missing = [c for c in columns if c not in existing_cols]
            if missing:
                def default_val(col: str) -> str:
                    if col in ("position", "is_completed", "duration_seconds", "calories_kcal"):
                        return "0"
                    if col == "user_id":
                        return "'current_user'"
                    if col == "body_part":
                        return "'カスタム'"
                    if col == "tags":
                        return "'[]'"
                    return "NULL"

                defaults = ", ".join(default_val(c) for c in missing)
                conn.execute(
                    f"INSERT INTO {table} ({cols}, {', '.join(missing)}) SELECT {cols}, {defaults} FROM {table}_old;"
                )
            else:
                conn.execute(
                    f"INSERT INTO {table} ({cols}) SELECT {cols} FROM {table}_old;"
                )
        conn.execute(f"DROP TABLE {table}_old;")

    def _init_settings(self) -> None:
        defaults = {
            "body_weight": "60.0",
            "weight_unit": "kg",
            "goal_type": "maintain",
            "default_resistance_mets": "3.8",
            "default_aerobic_mets": "6.0",
            "rest_seconds": "30",
            "language": "ja",
            "user_id": "current_user",
            "app_version": APP_VERSION,
        }
        with self._connection() as conn:
            for key, value in defaults.items():
                conn.execute(
                    "INSERT OR IGNORE INTO settings (key, value) VALUES (?, ?);",
                    (key, value),
                )

    def vacuum(self) -> None:
        """Run SQLite VACUUM to reduce database size."""
        with self._connection() as conn:
            conn.execute("VACUUM;")


class BaseRepository(Database):
    """Base repository providing helper methods."""

    def execute(self, query: str, params: Tuple = ()) -> int:
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return cursor.lastrowid

    def fetch_all(self, query: str, params: Tuple = ()) -> List[Tuple]:
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return cursor.fetchall()

    def _delete_all(self, table: str) -> None:
        self.execute(f"DELETE FROM {table};")


class AsyncDatabase(Database):
    """Provides asynchronous connection management."""

    @asynccontextmanager
    async def _async_connection(self):
        conn = await aiosqlite.connect(self._db_path)
        try:
            yield conn
            await conn.commit()
        finally:
            await conn.close()


class AsyncBaseRepository(AsyncDatabase):
    """Asynchronous variant of BaseRepository using aiosqlite."""

    async def execute(self, query: str, params: Tuple = ()) -> int:
        async with self._async_connection() as conn:
            cursor = await conn.execute(query, params)
            await conn.commit()
            return cursor.lastrowid

    async def fetch_all(self, query: str, params: Tuple = ()) -> List[Tuple]:
        async with self._async_connection() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return rows


def _session_query(
    start_date: Optional[str], end_date: Optional[str], descending: bool
) -> tuple[str, tuple]:
    query = (
        "SELECT id, user_id, name, session_date, duration_seconds, calories_kcal "
        "FROM workout_sessions"
    )
    params: list[str] = []
    where_clauses: list[str] = []
    if start_date:
        where_clauses.append("session_date >= ?")
        params.append(start_date)
    if end_date:
        where_clauses.append("session_date <= ?")
        params.append(end_date)
    if where_clauses:
        query += " WHERE " + " AND ".join(where_clauses)
    order = "DESC" if descending else "ASC"
    query += f" ORDER BY session_date {order}, id {order};"
    return query, tuple(params)


_UPSERT_PROGRESS = (
    "INSERT INTO workout_progress (plan_id, day_identifier, completed_at, is_completed, "
    "difficulty_feedback, elapsed_seconds, estimated_calories) VALUES (?, ?, ?, ?, ?, ?, ?) "
    "ON CONFLICT(plan_id, day_identifier) DO UPDATE SET completed_at=excluded.completed_at, "
    "is_completed=excluded.is_completed, difficulty_feedback=excluded.difficulty_feedback, "
    "elapsed_seconds=excluded.elapsed_seconds, estimated_calories=excluded.estimated_calories;"
)


def _progress_params(
    plan_id: int,
    day_identifier: str,
    is_completed: bool,
    completed_at: str,
    elapsed_seconds: int | None = None,
    estimated_calories: int | None = None,
    difficulty_feedback: str | None = None,
) -> tuple:
    return (
        plan_id,
        day_identifier,
        completed_at,
        int(bool(is_completed)),
        difficulty_feedback,
        elapsed_seconds,
        estimated_calories,
    )


class WorkoutSessionRepository(BaseRepository):
    """Repository for completed workout sessions and their logged sets."""

    def create(
        self,
        name: str,
        session_date: str,
        duration_seconds: int,
        calories_kcal: int,
        exercises: Iterable[tuple[str, Iterable[tuple[int, float, int, bool]]]],
        user_id: str = "current_user",
        progress: dict | None = None,
    ) -> int:
        """Insert a session with nested exercises and sets in one transaction.

        ``exercises`` holds ``(name, [(set_index, weight_kg, reps, is_completed), ...])``.
        ``progress`` takes the keyword arguments of
        :meth:`WorkoutProgressRepository.upsert`; the row is written in the
        same transaction, so a failed upsert leaves no session behind.
        """
        with self._connection() as conn:
            cur = conn.execute(
                "INSERT INTO workout_sessions (user_id, name, session_date, duration_seconds, calories_kcal) "
                "VALUES (?, ?, ?, ?, ?);",
                (user_id, name, session_date, int(duration_seconds), int(calories_kcal)),
            )
            session_id = cur.lastrowid
            for position, (ex_name, sets) in enumerate(exercises):
                ex_cur = conn.execute(
                    "INSERT INTO logged_exercises (session_id, exercise_name, position) VALUES (?, ?, ?);",
                    (session_id, ex_name, position),
                )
                for set_index, weight_kg, reps, done in sets:
                    conn.execute(
                        "INSERT INTO logged_sets (exercise_id, set_index, weight_kg, reps, is_completed) "
                        "VALUES (?, ?, ?, ?, ?);",
                        (ex_cur.lastrowid, int(set_index), float(weight_kg), int(reps), int(bool(done))),
                    )
            if progress is not None:
                conn.execute(_UPSERT_PROGRESS, _progress_params(**progress))
            return session_id

    def fetch_all_sessions(
        self,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        descending: bool = True,
    ) -> List[Tuple[int, str, str, str, int, int]]:
        query, params = _session_query(start_date, end_date, descending)
        return self.fetch_all(query, params)

    def fetch_detail(self, session_id: int) -> dict:
        rows = self.fetch_all(
            "SELECT id, user_id, name, session_date, duration_seconds, calories_kcal "
            "FROM workout_sessions WHERE id = ?;",
            (session_id,),
        )
        if not rows:
            raise ValueError("session not found")
        sid, user_id, name, date, duration, calories = rows[0]
        ex_rows = self.fetch_all(
            "SELECT id, exercise_name FROM logged_exercises WHERE session_id = ? ORDER BY position, id;",
            (session_id,),
        )
        exercises = []
        for ex_id, ex_name in ex_rows:
            set_rows = self.fetch_all(
                "SELECT set_index, weight_kg, reps, is_completed FROM logged_sets "
                "WHERE exercise_id = ? ORDER BY set_index, id;",
                (ex_id,),
            )
            exercises.append(
                {
                    "name": ex_name,
                    "sets": [
                        {
                            "set_index": int(s),
                            "weight_kg": float(w),
                            "reps": int(r),
                            "is_completed": bool(c),
                        }
                        for s, w, r, c in set_rows
                    ],
                }
            )
        return {
            "id": sid,
            "user_id": user_id,
            "name": name,
            "session_date": date,
            "duration_seconds": int(duration),
            "calories_kcal": int(calories),
            "exercises": exercises,
        }

    def exercise_names(self) -> list[str]:
        rows = self.fetch_all(
            "SELECT DISTINCT exercise_name FROM logged_exercises ORDER BY exercise_name;"
        )
        return [r[0] for r in rows]

    def daily_calories(self, start_date: str, end_date: str) -> dict[str, int]:
        """Return summed calories per ``YYYY-MM-DD`` within the inclusive range."""
        rows = self.fetch_all(
            "SELECT substr(session_date, 1, 10) AS day, SUM(calories_kcal) FROM workout_sessions "
            "WHERE substr(session_date, 1, 10) >= ? AND substr(session_date, 1, 10) <= ? "
            "GROUP BY day ORDER BY day;",
            (start_date, end_date),
        )
        return {r[0]: int(r[1]) for r in rows}

    def export_session_json(self, session_id: int) -> str:
        """Return a session with its exercises and sets as a JSON string."""
        return json.dumps(self.fetch_detail(session_id), ensure_ascii=False)

    def export_session_csv(self, session_id: int) -> str:
        detail = self.fetch_detail(session_id)
        output = io.StringIO()
        writer = csv.writer(output)
        writer.writerow(["Exercise", "Set", "Weight", "Reps", "Completed"])
        for ex in detail["exercises"]:
            for s in ex["sets"]:
                writer.writerow(
                    [
                        ex["name"],
                        s["set_index"],
                        s["weight_kg"],
                        s["reps"],
                        int(s["is_completed"]),
                    ]
                )
        return output.getvalue()

    def delete(self, session_id: int) -> None:
        rows = self.fetch_all("SELECT id FROM workout_sessions WHERE id = ?;", (session_id,))
        if not rows:
            raise ValueError("session not found")
        self.execute("DELETE FROM workout_sessions WHERE id = ?;", (session_id,))

    def delete_all(self) -> None:
        self._delete_all("workout_sessions")


class AsyncWorkoutSessionRepository(AsyncBaseRepository):
    """Async read access to workout sessions."""

    async def fetch_all_sessions(
        self,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        descending: bool = True,
    ) -> List[Tuple[int, str, str, str, int, int]]:
        query, params = _session_query(start_date, end_date, descending)
        return await self.fetch_all(query, params)


class GeneratedPlanRepository(BaseRepository):
    """Repository for generated training plans stored as JSON."""

    def create(
        self,
        summary: str,
        plan: dict | list,
        daily_calories: int = 0,
        motivational_message: str = "",
        created_at: str | None = None,
    ) -> int:
        created = created_at or datetime.datetime.now().isoformat(timespec="seconds")
        return self.execute(
            "INSERT INTO generated_plans (created_at, summary, daily_calories, motivational_message, json) "
            "VALUES (?, ?, ?, ?, ?);",
            (created, summary, int(daily_calories), motivational_message, json.dumps(plan, ensure_ascii=False)),
        )

    def _row_to_dict(self, row: tuple) -> dict:
        pid, created, summary, kcal, message, payload = row
        return {
            "id": int(pid),
            "created_at": created,
            "summary": summary,
            "daily_calories": int(kcal),
            "motivational_message": message,
            "plan": json.loads(payload),
        }

    def fetch_detail(self, plan_id: int) -> dict:
        rows = self.fetch_all(
            "SELECT id, created_at, summary, daily_calories, motivational_message, json "
            "FROM generated_plans WHERE id = ?;",
            (plan_id,),
        )
        if not rows:
            raise ValueError("plan not found")
        return self._row_to_dict(rows[0])

    def fetch_latest(self) -> dict | None:
        rows = self.fetch_all(
            "SELECT id, created_at, summary, daily_calories, motivational_message, json "
            "FROM generated_plans ORDER BY created_at DESC, id DESC LIMIT 1;"
        )
        return self._row_to_dict(rows[0]) if rows else None

    def fetch_all_plans(self) -> list[tuple[int, str, str]]:
        rows = self.fetch_all(
            "SELECT id, created_at, summary FROM generated_plans ORDER BY created_at DESC, id DESC;"
        )
        return [(int(r[0]), r[1], r[2]) for r in rows]

    def delete(self, plan_id: int) -> None:
        self.execute("DELETE FROM generated_plans WHERE id = ?;", (plan_id,))


class WorkoutProgressRepository(BaseRepository):
    """Per-day completion state of a generated plan."""

    def upsert(
        self,
        plan_id: int,
        day_identifier: str,
        is_completed: bool,
        completed_at: str,
        elapsed_seconds: int | None = None,
        estimated_calories: int | None = None,
        difficulty_feedback: str | None = None,
    ) -> None:
        self.execute(
            _UPSERT_PROGRESS,
            _progress_params(
                plan_id,
                day_identifier,
                is_completed,
                completed_at,
                elapsed_seconds,
                estimated_calories,
                difficulty_feedback,
            ),
        )

    def fetch(self, plan_id: int, day_identifier: str) -> dict | None:
        rows = self.fetch_all(
            "SELECT day_identifier, completed_at, is_completed, difficulty_feedback, elapsed_seconds, "
            "estimated_calories FROM workout_progress WHERE plan_id = ? AND day_identifier = ?;",
            (plan_id, day_identifier),
        )
        if not rows:
            return None
        return self._to_dict(rows[0])

    def fetch_for_plan(self, plan_id: int) -> list[dict]:
        rows = self.fetch_all(
            "SELECT day_identifier, completed_at, is_completed, difficulty_feedback, elapsed_seconds, "
            "estimated_calories FROM workout_progress WHERE plan_id = ? ORDER BY id;",
            (plan_id,),
        )
        return [self._to_dict(r) for r in rows]

    @staticmethod
    def _to_dict(row: tuple) -> dict:
        day, completed_at, done, feedback, elapsed, kcal = row
        return {
            "day_identifier": day,
            "completed_at": completed_at,
            "is_completed": bool(done),
            "difficulty_feedback": feedback,
            "elapsed_seconds": elapsed,
            "estimated_calories": kcal,
        }


class CustomWorkoutRepository(BaseRepository):
    """Repository for user-defined workouts."""

    def add(
        self,
        name: str,
        body_part: str = "カスタム",
        tags: Iterable[str] = (),
        duration_min: float = 0.0,
        calories_kcal: int = 0,
        user_id: str = "current_user",
        created_at: str | None = None,
    ) -> int:
        if not name.strip():
            raise ValueError("name must not be empty")
        created = created_at or datetime.datetime.now().isoformat(timespec="seconds")
        return self.execute(
            "INSERT INTO custom_workouts (user_id, name, body_part, tags, created_at, duration_min, calories_kcal) "
            "VALUES (?, ?, ?, ?, ?, ?, ?);",
            (
                user_id,
                name.strip(),
                body_part,
                json.dumps(list(tags), ensure_ascii=False),
                created,
                float(duration_min),
                int(calories_kcal),
            ),
        )

    def fetch_all_workouts(self) -> list[dict]:
        rows = self.fetch_all(
            "SELECT id, user_id, name, body_part, tags, created_at, duration_min, calories_kcal "
            "FROM custom_workouts ORDER BY created_at DESC, id DESC;"
        )
        return [self._to_dict(r) for r in rows]

    def fetch_detail(self, workout_id: int) -> dict:
        rows = self.fetch_all(
            "SELECT id, user_id, name, body_part, tags, created_at, duration_min, calories_kcal "
            "FROM custom_workouts WHERE id = ?;",
            (workout_id,),
        )
        if not rows:
            raise ValueError("custom workout not found")
        return self._to_dict(rows[0])

    def delete(self, workout_id: int) -> None:
        self.execute("DELETE FROM custom_workouts WHERE id = ?;", (workout_id,))

    @staticmethod
    def _to_dict(row: tuple) -> dict:
        wid, user_id, name, body_part, tags, created, minutes, kcal = row
        return {
            "id": int(wid),
            "user_id": user_id,
            "name": name,
            "body_part": body_part,
            "tags": json.loads(tags or "[]"),
            "created_at": created,
            "duration_min": float(minutes),
            "calories_kcal": int(kcal),
        }


class FavoriteExerciseRepository(BaseRepository):
    """Repository for managing favorite exercises."""

    def add(self, name: str) -> None:
        self.execute(
            "INSERT OR IGNORE INTO favorite_exercises (name) VALUES (?);",
            (name,),
        )

    def remove(self, name: str) -> None:
        self.execute(
            "DELETE FROM favorite_exercises WHERE name = ?;",
            (name,),
        )

    def contains(self, name: str) -> bool:
        rows = super().fetch_all(
            "SELECT 1 FROM favorite_exercises WHERE name = ?;", (name,)
        )
        return bool(rows)

    def fetch_all(self) -> list[str]:
        rows = super().fetch_all("SELECT name FROM favorite_exercises ORDER BY name;")
        return [r[0] for r in rows]


class BodyWeightRepository(BaseRepository):
    """Repository for body weight logs."""

    def log(self, date: str, weight: float) -> int:
        if weight <= 0:
            raise ValueError("weight must be positive")
        return self.execute(
            "INSERT INTO body_weight_logs (date, weight) VALUES (?, ?);",
            (date, weight),
        )

    def fetch_history(
        self, start_date: Optional[str] = None, end_date: Optional[str] = None
    ) -> list[tuple[int, str, float]]:
        query = "SELECT id, date, weight FROM body_weight_logs WHERE 1=1"
        params: list[str] = []
        if start_date:
            query += " AND date >= ?"
            params.append(start_date)
        if end_date:
            query += " AND date <= ?"
            params.append(end_date)
        query += " ORDER BY date;"
        rows = self.fetch_all(query, tuple(params))
        return [(int(r[0]), r[1], float(r[2])) for r in rows]

    def fetch_latest_weight(self) -> float | None:
        """Return the most recent logged body weight if available."""
        row = self.fetch_all(
            "SELECT weight FROM body_weight_logs ORDER BY date DESC, id DESC LIMIT 1;"
        )
        if row:
            return float(row[0][0])
        return None


class CustomMETRepository(BaseRepository):
    """Persisted user MET entries, kept in registration order."""

    def add(self, keys: list[str], mets: float) -> int:
        return self.execute(
            "INSERT INTO custom_mets (keys, mets) VALUES (?, ?);",
            (json.dumps(list(keys), ensure_ascii=False), float(mets)),
        )

    def fetch_all_entries(self) -> list[tuple[list[str], float]]:
        rows = self.fetch_all("SELECT keys, mets FROM custom_mets ORDER BY id;")
        return [(json.loads(k), float(m)) for k, m in rows]

    def delete_all(self) -> None:
        self._delete_all("custom_mets")


class SettingsRepository(BaseRepository):
    """Repository for general application settings synchronized with YAML."""

    BOOL_KEYS: set[str] = set()

    def __init__(self, db_path: str = "sync.db", yaml_path: str = "settings.yaml") -> None:
        super().__init__(db_path)
        self._yaml = YamlConfig(yaml_path)
        self._sync_from_yaml()
        self._sync_to_yaml()

    def _raw_all_settings(self) -> dict:
        rows = self.fetch_all("SELECT key, value FROM settings ORDER BY key;")
        result: dict[str, float | str | bool] = {}
        for k, v in rows:
            if k in self.BOOL_KEYS:
                result[k] = v in {"1", "1.0", "true", "True"}
                continue
            if k == "app_version":
                result[k] = v
                continue
            try:
                result[k] = float(v)
            except ValueError:
                result[k] = v
        return result

    def _sync_from_yaml(self) -> None:
        data = self._yaml.load()
        if not data:
            return
        validate_settings(data)
        with self._connection() as conn:
            for key, value in data.items():
                val = str(value)
                if key in self.BOOL_KEYS:
                    val = "1" if val in {"1", "1.0", "true", "True"} else "0"
                conn.execute(
                    "INSERT INTO settings (key, value) VALUES (?, ?) "
                    "ON CONFLICT(key) DO UPDATE SET value=excluded.value;",
                    (key, val),
                )

    def _sync_to_yaml(self) -> None:
        self._yaml.save(self._raw_all_settings())

    def all_settings(self) -> dict:
        self._sync_from_yaml()
        return self._raw_all_settings()

    def get_text(self, key: str, default: str) -> str:
        self._sync_from_yaml()
        rows = self.fetch_all("SELECT value FROM settings WHERE key = ?;", (key,))
        return rows[0][0] if rows else default

    def set_text(self, key: str, value: str) -> None:
        self.execute(
            "INSERT INTO settings (key, value) VALUES (?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value=excluded.value;",
            (key, value),
        )
        self._sync_to_yaml()

    def get_float(self, key: str, default: float) -> float:
        try:
            return float(self.get_text(key, str(default)))
        except ValueError:
            return default

    def set_float(self, key: str, value: float) -> None:
        self.set_text(key, str(float(value)))

    def get_int(self, key: str, default: int) -> int:
        try:
            return int(float(self.get_text(key, str(default))))
        except ValueError:
            return default

    def set_int(self, key: str, value: int) -> None:
        self.set_text(key, str(value))

    def get_bool(self, key: str, default: bool) -> bool:
        return self.get_text(key, "1" if default else "0") in {
            "1",
            "true",
            "True",
            "1.0",
        }

    def set_bool(self, key: str, value: bool) -> None:
        self.set_text(key, "1" if value else "0")

    def get_json(self, key: str):
        """Return the decoded JSON value of ``key`` or None when absent."""
        raw = self.get_text(key, "")
        if not raw:
            return None
        return json.loads(raw)

    def set_json(self, key: str, value) -> None:
        self.set_text(key, json.dumps(value, ensure_ascii=False, sort_keys=True))
