import sqlite3
from pathlib import Path

from careergenie.core.config import get_settings

DEFAULT_DB_PATH = Path(__file__).resolve().parent.parent.parent / "careergenie.db"


def get_db_path() -> Path:
    configured = get_settings().db_path
    return Path(configured) if configured else DEFAULT_DB_PATH


def init_db() -> None:
    with sqlite3.connect(get_db_path()) as conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS generations (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                feature TEXT NOT NULL,
                provider TEXT NOT NULL,
                model TEXT,
                source TEXT NOT NULL,
                prompt_length INTEGER NOT NULL,
                latency_ms REAL NOT NULL,
                timestamp TEXT NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS chat_history (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id TEXT NOT NULL,
                message TEXT NOT NULL,
                reply TEXT NOT NULL,
                provider TEXT NOT NULL,
                timestamp TEXT NOT NULL
            )
            """
        )
        conn.execute("CREATE INDEX IF NOT EXISTS idx_chat_user ON chat_history (user_id, id)")
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS interviews (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id TEXT NOT NULL,
                role TEXT NOT NULL,
                questions_generated INTEGER NOT NULL,
                answers_evaluated INTEGER NOT NULL DEFAULT 0,
                total_score REAL NOT NULL DEFAULT 0,
                timestamp TEXT NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS resume_analyses (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id TEXT NOT NULL,
                score REAL NOT NULL,
                summary TEXT NOT NULL,
                provider TEXT NOT NULL,
                timestamp TEXT NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS career_history (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id TEXT NOT NULL,
                careers TEXT NOT NULL,
                timestamp TEXT NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS profiles (
                user_id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                skills TEXT,
                college TEXT,
                cgpa TEXT,
                phone TEXT,
                linkedin TEXT,
                github TEXT,
                profile_complete INTEGER NOT NULL DEFAULT 0,
                updated_at TEXT NOT NULL
            )
            """
        )
        for table in ("interviews", "resume_analyses", "career_history"):
            conn.execute(f"CREATE INDEX IF NOT EXISTS idx_{table}_user ON {table} (user_id, id)")
        conn.commit()
