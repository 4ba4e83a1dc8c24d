"""
SQLite persistence for profiles, equipment, the exercise catalog, generated
sessions and accessory rotation history.
"""

import json
import os
import re
import sqlite3
from contextlib import contextmanager


def normalize_exercise_name(name):
    """Return a stable key for exercise deduplication (trimmed, lowercased)."""
    return re.sub(r"\s+", " ", (name or "").strip()).lower()


class WorkoutStore:
    """Small SQLite wrapper used as the pipeline's persistent store."""

    def __init__(self, db_path):
        self.db_path = db_path
        parent = os.path.dirname(db_path)
        if parent:
            os.makedirs(parent, exist_ok=True)

        self.conn = sqlite3.connect(db_path)
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA foreign_keys = ON")

    def close(self):
        self.conn.close()

    @contextmanager
    def transaction(self):
        """Context manager for atomic write operations."""
        try:
            yield
            self.conn.commit()
        except Exception:
            self.conn.rollback()
            raise

    def init_schema(self):
        """Create core schema if it does not already exist."""
        self.conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS profiles (
                user_id TEXT PRIMARY KEY,
                current_weight REAL,
                goal_weight REAL,
                training_goal TEXT,
                fitness_level TEXT,
                preferred_workout_duration INTEGER,
                updated_at TEXT NOT NULL DEFAULT (datetime('now'))
            );

            CREATE TABLE IF NOT EXISTS equipment (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL UNIQUE
            );

            CREATE TABLE IF NOT EXISTS user_equipment (
                user_id TEXT NOT NULL,
                equipment_id INTEGER NOT NULL,
                is_available INTEGER NOT NULL DEFAULT 1,
                FOREIGN KEY(equipment_id) REFERENCES equipment(id) ON DELETE CASCADE,
                UNIQUE(user_id, equipment_id)
            );

            CREATE TABLE IF NOT EXISTS exercises (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                normalized_name TEXT NOT NULL UNIQUE,
                category TEXT,
                exercise_phase TEXT,
                rest_seconds_default INTEGER,
                set_duration_seconds INTEGER,
                equipment_required TEXT NOT NULL DEFAULT '[]',
                created_at TEXT NOT NULL DEFAULT (datetime('now')),
                updated_at TEXT NOT NULL DEFAULT (datetime('now'))
            );

            CREATE TABLE IF NOT EXISTS workout_sessions (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id TEXT NOT NULL,
                split TEXT,
                minutes INTEGER,
                intent TEXT,
                coach_message TEXT,
                workout_json TEXT NOT NULL,
                plan_json TEXT,
                created_at TEXT NOT NULL DEFAULT (datetime('now'))
            );

            CREATE TABLE IF NOT EXISTS rotation_history (
                rotation_key TEXT PRIMARY KEY,
                names_json TEXT NOT NULL DEFAULT '[]',
                updated_at TEXT NOT NULL DEFAULT (datetime('now'))
            );

            CREATE INDEX IF NOT EXISTS idx_user_equipment_user ON user_equipment(user_id);
            CREATE INDEX IF NOT EXISTS idx_exercises_phase ON exercises(exercise_phase);
            CREATE INDEX IF NOT EXISTS idx_workout_sessions_user ON workout_sessions(user_id);
            """
        )
        self.conn.commit()

    # -- profiles -----------------------------------------------------------

    def upsert_profile(
        self,
        user_id,
        current_weight=None,
        goal_weight=None,
        training_goal=None,
        fitness_level=None,
        preferred_workout_duration=None,
    ):
        if not user_id:
            raise ValueError("User id cannot be empty")
        self.conn.execute(
            """
            INSERT INTO profiles (
                user_id,
                current_weight,
                goal_weight,
                training_goal,
                fitness_level,
                preferred_workout_duration,
                updated_at
            )
            VALUES (?, ?, ?, ?, ?, ?, datetime('now'))
            ON CONFLICT(user_id) DO UPDATE SET
                current_weight = excluded.current_weight,
                goal_weight = excluded.goal_weight,
                training_goal = excluded.training_goal,
                fitness_level = excluded.fitness_level,
                preferred_workout_duration = excluded.preferred_workout_duration,
                updated_at = datetime('now')
            """,
            (
                user_id,
                current_weight,
                goal_weight,
                training_goal,
                fitness_level,
                preferred_workout_duration,
            ),
        )
        self.conn.commit()

    def get_profile(self, user_id):
        """Return the profile as a dict, or {} when the user has none on file."""
        row = self.conn.execute(
            "SELECT * FROM profiles WHERE user_id = ?",
            (user_id,),
        ).fetchone()
        return dict(row) if row else {}

    # -- equipment ----------------------------------------------------------

    def add_user_equipment(self, user_id, equipment_name, is_available=True):
        name = (equipment_name or "").strip()
        if not name:
            raise ValueError("Equipment name cannot be empty")
        self.conn.execute("INSERT OR IGNORE INTO equipment (name) VALUES (?)", (name,))
        row = self.conn.execute("SELECT id FROM equipment WHERE name = ?", (name,)).fetchone()
        self.conn.execute(
            """
            INSERT INTO user_equipment (user_id, equipment_id, is_available)
            VALUES (?, ?, ?)
            ON CONFLICT(user_id, equipment_id) DO UPDATE SET
                is_available = excluded.is_available
            """,
            (user_id, int(row["id"]), 1 if is_available else 0),
        )
        self.conn.commit()

    def get_equipment_names(self, user_id):
        rows = self.conn.execute(
            """
            SELECT e.name
            FROM user_equipment ue
            JOIN equipment e ON e.id = ue.equipment_id
            WHERE ue.user_id = ? AND ue.is_available = 1
            ORDER BY e.name
            """,
            (user_id,),
        ).fetchall()
        return [row["name"] for row in rows]

    # -- exercise catalog ---------------------------------------------------

    def upsert_exercise(
        self,
        exercise_name,
        category=None,
        exercise_phase=None,
        rest_seconds_default=None,
        set_duration_seconds=None,
        equipment_required=None,
    ):
        """Insert or update a catalog exercise and return its id."""
        normalized = normalize_exercise_name(exercise_name)
        if not normalized:
            raise ValueError("Exercise name cannot be empty")

        self.conn.execute(
            """
            INSERT INTO exercises (
                name,
                normalized_name,
                category,
                exercise_phase,
                rest_seconds_default,
                set_duration_seconds,
                equipment_required,
                updated_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, datetime('now'))
            ON CONFLICT(normalized_name) DO UPDATE SET
                name = excluded.name,
                category = excluded.category,
                exercise_phase = excluded.exercise_phase,
                rest_seconds_default = excluded.rest_seconds_default,
                set_duration_seconds = excluded.set_duration_seconds,
                equipment_required = excluded.equipment_required,
                updated_at = datetime('now')
            """,
            (
                exercise_name.strip(),
                normalized,
                category,
                exercise_phase,
                rest_seconds_default,
                set_duration_seconds,
                json.dumps(list(equipment_required or [])),
            ),
        )
        self.conn.commit()

        row = self.conn.execute(
            "SELECT id FROM exercises WHERE normalized_name = ?",
            (normalized,),
        ).fetchone()
        return int(row["id"])

    def get_exercise_catalog(self, exclude_categories=None, phases=None):
        """Return catalog rows as dicts, optionally filtered by category/phase."""
        query = "SELECT * FROM exercises"
        clauses = []
        params = []
        if exclude_categories:
            marks = ", ".join("?" for _ in exclude_categories)
            clauses.append(f"COALESCE(category, '') NOT IN ({marks})")
            params.extend(exclude_categories)
        if phases:
            marks = ", ".join("?" for _ in phases)
            clauses.append(f"exercise_phase IN ({marks})")
            params.extend(phases)
        if clauses:
            query += " WHERE " + " AND ".join(clauses)
        query += " ORDER BY id"

        catalog = []
        for row in self.conn.execute(query, params).fetchall():
            item = dict(row)
            item["equipment_required"] = json.loads(item.get("equipment_required") or "[]")
            catalog.append(item)
        return catalog

    def get_core_lift_names(self):
        rows = self.conn.execute(
            "SELECT name FROM exercises WHERE exercise_phase = 'core_lift' ORDER BY id"
        ).fetchall()
        return [row["name"] for row in rows]

    # -- sessions -----------------------------------------------------------

    def save_session(self, user_id, workout, plan=None, split=None, minutes=None, intent=None, coach_message=None):
        """Store a generated session with its normalized shape; returns the row id."""
        with self.transaction():
            cursor = self.conn.execute(
                """
                INSERT INTO workout_sessions (
                    user_id,
                    split,
                    minutes,
                    intent,
                    coach_message,
                    workout_json,
                    plan_json
                )
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    user_id,
                    split,
                    minutes,
                    intent,
                    coach_message,
                    json.dumps(workout),
                    json.dumps(plan) if plan is not None else None,
                ),
            )
        return int(cursor.lastrowid)

    def get_recent_sessions(self, user_id, limit=5):
        rows = self.conn.execute(
            """
            SELECT id, split, minutes, intent, coach_message, workout_json, created_at
            FROM workout_sessions
            WHERE user_id = ?
            ORDER BY id DESC
            LIMIT ?
            """,
            (user_id, limit),
        ).fetchall()
        sessions = []
        for row in rows:
            session = dict(row)
            session["workout"] = json.loads(session.pop("workout_json"))
            sessions.append(session)
        return sessions

    # -- rotation history ---------------------------------------------------

    def get_rotation_history(self, key):
        row = self.conn.execute(
            "SELECT names_json FROM rotation_history WHERE rotation_key = ?",
            (key,),
        ).fetchone()
        return json.loads(row["names_json"]) if row else []

    def set_rotation_history(self, key, names):
        """Overwrite (never merge) the last-used accessory names for a key."""
        self.conn.execute(
            """
            INSERT INTO rotation_history (rotation_key, names_json, updated_at)
            VALUES (?, ?, datetime('now'))
            ON CONFLICT(rotation_key) DO UPDATE SET
                names_json = excluded.names_json,
                updated_at = datetime('now')
            """,
            (key, json.dumps(list(names))),
        )
        self.conn.commit()

    def count_summary(self):
        """Return high-level row counts for quick sanity checks."""
        counts = {}
        for table in ["profiles", "equipment", "exercises", "workout_sessions", "rotation_history"]:
            counts[table] = int(
                self.conn.execute(f"SELECT COUNT(*) AS c FROM {table}").fetchone()["c"]
            )
        return counts
