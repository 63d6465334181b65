import datetime
import json
import sqlite3
from contextlib import contextmanager
from typing import Any

from careergenie.db.models import get_db_path


@contextmanager
def get_db_connection():
    conn = sqlite3.connect(get_db_path())
    try:
        yield conn
        conn.commit()
    finally:
        conn.close()


def _now() -> str:
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


def insert_generation_log(
    feature: str,
    provider: str,
    model: str | None,
    source: str,
    prompt_length: int,
    latency_ms: float,
) -> None:
    with get_db_connection() as conn:
        conn.execute(
            """INSERT INTO generations (
                feature, provider, model, source, prompt_length, latency_ms, timestamp
            ) VALUES (?, ?, ?, ?, ?, ?, ?)""",
            (feature, provider, model, source, prompt_length, latency_ms, _now()),
        )


def insert_chat_message(user_id: str, message: str, reply: str, provider: str) -> None:
    with get_db_connection() as conn:
        conn.execute(
            "INSERT INTO chat_history (user_id, message, reply, provider, timestamp) VALUES (?, ?, ?, ?, ?)",
            (user_id, message, reply, provider, _now()),
        )


def get_chat_history(user_id: str, limit: int = 20) -> list[dict[str, Any]]:
    """Most recent exchanges first."""
    with get_db_connection() as conn:
        conn.row_factory = sqlite3.Row
        cursor = conn.execute(
            "SELECT * FROM chat_history WHERE user_id = ? ORDER BY id DESC LIMIT ?",
            (user_id, limit),
        )
        return [dict(row) for row in cursor.fetchall()]


def get_last_logs(limit: int = 20) -> list[dict[str, Any]]:
    with get_db_connection() as conn:
        conn.row_factory = sqlite3.Row
        cursor = conn.execute(
            "SELECT * FROM generations ORDER BY id DESC LIMIT ?",
            (limit,),
        )
        return [dict(row) for row in cursor.fetchall()]


def _fetch_all(sql: str, params: tuple) -> list[dict[str, Any]]:
    with get_db_connection() as conn:
        conn.row_factory = sqlite3.Row
        return [dict(row) for row in conn.execute(sql, params).fetchall()]


def insert_interview(user_id: str, role: str, questions_generated: int) -> None:
    with get_db_connection() as conn:
        conn.execute(
            "INSERT INTO interviews (user_id, role, questions_generated, timestamp) VALUES (?, ?, ?, ?)",
            (user_id, role, questions_generated, _now()),
        )


def record_interview_score(user_id: str, score: float) -> bool:
    """Add an evaluated answer's score to the user's latest interview."""
    with get_db_connection() as conn:
        cursor = conn.execute(
            """UPDATE interviews
               SET answers_evaluated = answers_evaluated + 1, total_score = total_score + ?
               WHERE id = (SELECT MAX(id) FROM interviews WHERE user_id = ?)""",
            (score, user_id),
        )
        return cursor.rowcount > 0


def get_interviews(user_id: str, limit: int = -1) -> list[dict[str, Any]]:
    return _fetch_all(
        "SELECT * FROM interviews WHERE user_id = ? ORDER BY id DESC LIMIT ?",
        (user_id, limit),
    )


def insert_resume_analysis(user_id: str, score: float, summary: str, provider: str) -> None:
    with get_db_connection() as conn:
        conn.execute(
            "INSERT INTO resume_analyses (user_id, score, summary, provider, timestamp) VALUES (?, ?, ?, ?, ?)",
            (user_id, score, summary, provider, _now()),
        )


def get_resume_analyses(user_id: str, limit: int = -1) -> list[dict[str, Any]]:
    return _fetch_all(
        "SELECT * FROM resume_analyses WHERE user_id = ? ORDER BY id DESC LIMIT ?",
        (user_id, limit),
    )


def insert_career_history(user_id: str, careers: list[str]) -> None:
    with get_db_connection() as conn:
        conn.execute(
            "INSERT INTO career_history (user_id, careers, timestamp) VALUES (?, ?, ?)",
            (user_id, json.dumps(careers), _now()),
        )


def get_career_history(user_id: str, limit: int = -1) -> list[dict[str, Any]]:
    rows = _fetch_all(
        "SELECT * FROM career_history WHERE user_id = ? ORDER BY id DESC LIMIT ?",
        (user_id, limit),
    )
    for row in rows:
        row["careers"] = json.loads(row["careers"])
    return rows


PROFILE_FIELDS = ("name", "skills", "college", "cgpa", "phone", "linkedin", "github")


def get_profile(user_id: str) -> dict[str, Any] | None:
    rows = _fetch_all("SELECT * FROM profiles WHERE user_id = ?", (user_id,))
    if not rows:
        return None
    profile = rows[0]
    profile["profile_complete"] = bool(profile["profile_complete"])
    return profile


def upsert_profile(user_id: str, updates: dict[str, Any]) -> dict[str, Any]:
    """Merge non-empty ``updates`` into the stored profile; blank values keep the old ones."""
    profile = get_profile(user_id) or {field: None for field in PROFILE_FIELDS}
    for field in PROFILE_FIELDS:
        value = updates.get(field)
        if value:
            profile[field] = value
    complete = bool(profile.get("profile_complete")) or bool(profile["skills"] and profile["college"])
    with get_db_connection() as conn:
        conn.execute(
            """INSERT OR REPLACE INTO profiles (
                user_id, name, skills, college, cgpa, phone, linkedin, github, profile_complete, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (user_id, *(profile[field] for field in PROFILE_FIELDS), int(complete), _now()),
        )
    return get_profile(user_id)
