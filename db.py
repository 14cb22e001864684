import datetime
import json
import logging
import sqlite3
from contextlib import contextmanager
from typing import Callable, List, Optional, Tuple

from algorithms import SetNormalizer

logger = logging.getLogger(__name__)

WORKOUT_DATA_KEY = "workoutData"
CUSTOM_WORKOUTS_KEY = "customWorkouts"
CUSTOM_EXERCISES_KEY = "customExercises"


class Database:
    """Provides SQLite connection management and schema initialization."""

    _TABLE_DEFINITIONS = {
        "documents": (
            """CREATE TABLE documents (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT
                );""",
            ["key", "value", "updated_at"],
        ),
    }

    def __init__(self, db_path: str = "workout.db") -> None:
        self._db_path = db_path
        self._ensure_schema()

    @contextmanager
    def _connection(self):
        connection = sqlite3.connect(self._db_path)
        try:
            yield connection
            connection.commit()
        finally:
            connection.close()

    def _ensure_schema(self) -> None:
        with self._connection() as conn:
            for table, (sql, columns) in self._TABLE_DEFINITIONS.items():
                self._ensure_table(conn, table, sql, columns)

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
            conn.execute(
                f"INSERT INTO {table} ({cols}) SELECT {cols} FROM {table}_old;"
            )
        conn.execute(f"DROP TABLE {table}_old;")


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


class SQLiteDocumentStore(BaseRepository):
    """Key-value store of raw JSON documents kept in the ``documents`` table."""

    def get(self, key: str) -> Optional[str]:
        rows = self.fetch_all("SELECT value FROM documents WHERE key = ?;", (key,))
        return rows[0][0] if rows else None

    def set(self, key: str, raw: str) -> None:
        self.execute(
            "INSERT INTO documents (key, value, updated_at) VALUES (?, ?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at;",
            (key, raw, datetime.datetime.now().isoformat(timespec="seconds")),
        )

    def delete(self, key: str) -> None:
        self.execute("DELETE FROM documents WHERE key = ?;", (key,))

    def keys(self) -> List[str]:
        return [r[0] for r in self.fetch_all("SELECT key FROM documents ORDER BY key;")]


class MemoryDocumentStore:
    """In-memory drop-in for :class:`SQLiteDocumentStore`."""

    def __init__(self, initial: Optional[dict] = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, raw: str) -> None:
        self._data[key] = raw

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> List[str]:
        return sorted(self._data)


class JsonDocumentRepository:
    """Load and save one JSON document of a document store.

    Reads never raise: a missing, unparseable or wrongly typed document
    yields a fresh default value.
    """

    KEY: str = ""
    DOCUMENT_TYPE: type = dict
    DEFAULT: Callable = dict

    def __init__(self, store) -> None:
        self.store = store

    def load_raw_text(self) -> Optional[str]:
        return self.store.get(self.KEY)

    def exists(self) -> bool:
        return self.load_raw_text() is not None

    @staticmethod
    def is_valid_document(data) -> bool:
        """Shape check beyond the top-level type; subclasses narrow it."""
        return True

    def load(self):
        raw = self.load_raw_text()
        if raw is None:
            return self.DEFAULT()
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Stored document %s is not valid JSON; using default", self.KEY)
            return self.DEFAULT()
        if not isinstance(data, self.DOCUMENT_TYPE):
            logger.warning(
                "Stored document %s has unexpected type %s; using default",
                self.KEY,
                type(data).__name__,
            )
            return self.DEFAULT()
        if not self.is_valid_document(data):
            logger.warning("Stored document %s has an unexpected shape; using default", self.KEY)
            return self.DEFAULT()
        return data

    def save(self, data) -> None:
        self.store.set(self.KEY, json.dumps(data))


class WorkoutDataRepository(JsonDocumentRepository):
    """Repository for the exercise-keyed ledger of day entries."""

    KEY = WORKOUT_DATA_KEY
    DOCUMENT_TYPE = dict
    DEFAULT = dict

    @staticmethod
    def is_valid_document(data) -> bool:
        """True when every exercise maps to a list of day entries.

        A day entry needs a string ``date`` and a ``sets`` list whose items
        are legacy strings or mappings with a string ``value``.
        """
        if not isinstance(data, dict):
            return False
        for entries in data.values():
            if not isinstance(entries, list):
                return False
            for entry in entries:
                if not isinstance(entry, dict):
                    return False
                if not isinstance(entry.get("date"), str):
                    return False
                sets = entry.get("sets")
                if not isinstance(sets, list):
                    return False
                if not all(SetNormalizer.is_set_shape(s) for s in sets):
                    return False
        return True

    def load_normalized(self) -> dict:
        """Return the ledger with every set in canonical record form.

        The stored document itself is left untouched.
        """
        return SetNormalizer.normalize_ledger(self.load())


class CustomWorkoutRepository(JsonDocumentRepository):
    """Repository for saved custom workout templates."""

    KEY = CUSTOM_WORKOUTS_KEY
    DOCUMENT_TYPE = list
    DEFAULT = list

    @staticmethod
    def is_valid_document(data) -> bool:
        for workout in data:
            if not isinstance(workout, dict):
                return False
            if not isinstance(workout.get("name"), str) or not isinstance(workout.get("date"), str):
                return False
            exercises = workout.get("exercises", [])
            if not isinstance(exercises, list):
                return False
            for exercise in exercises:
                if not isinstance(exercise, dict) or not isinstance(exercise.get("exerciseName"), str):
                    return False
                sets = exercise.get("sets", [])
                if not isinstance(sets, list):
                    return False
                if not all(SetNormalizer.is_set_shape(s) for s in sets):
                    return False
                if not isinstance(exercise.get("volume", 0), (int, float)):
                    return False
        return True

    def append(self, workout: dict) -> None:
        workouts = self.load()
        workouts.append(workout)
        self.save(workouts)


class CustomExerciseRepository(JsonDocumentRepository):
    """Repository for user-defined exercise names."""

    KEY = CUSTOM_EXERCISES_KEY
    DOCUMENT_TYPE = list
    DEFAULT = list

    @staticmethod
    def is_valid_document(data) -> bool:
        return all(isinstance(name, str) for name in data)

    def add(self, name: str) -> bool:
        names = self.load()
        if name in names:
            return False
        names.append(name)
        self.save(names)
        return True
