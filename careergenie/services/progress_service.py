# =============================================================================
# careergenie/services/progress_service.py — Per-user progress, badges, activity
# =============================================================================
# Everything here is derived from the interviews, resume_analyses and
# career_history rows written by career_service. A storage failure degrades to
# the empty/default view instead of an error.
# =============================================================================

import sqlite3
from typing import Any

from careergenie.db.session import get_career_history, get_interviews, get_resume_analyses
from careergenie.utils.logger import logger

ACTIVITY_LIMIT = 10

# (name, icon, description, predicate over (interviews, resumes, careers, avg_score))
BADGE_RULES = [
    ("First Interview", "🎤", "Completed your first mock interview", lambda i, r, c, s: i >= 1),
    ("Interview Pro", "⭐", "Completed 5 mock interviews", lambda i, r, c, s: i >= 5),
    ("Interview Master", "👑", "Completed 10 mock interviews", lambda i, r, c, s: i >= 10),
    ("Resume Analyst", "📄", "Analyzed your first resume", lambda i, r, c, s: r >= 1),
    ("Resume Expert", "💼", "Analyzed 3 or more resumes", lambda i, r, c, s: r >= 3),
    ("High Achiever", "🏆", "Average interview score above 80%", lambda i, r, c, s: s >= 80),
    ("Excellence", "🌟", "Average interview score above 90%", lambda i, r, c, s: s >= 90),
    ("Career Explorer", "🗺️", "Explored career paths", lambda i, r, c, s: c >= 1),
    ("Path Finder", "🧭", "Explored 5+ career paths", lambda i, r, c, s: c >= 5),
]
WELCOME_BADGE = {"name": "Welcome to CareerGenie", "icon": "🎉", "description": "Start your journey today!"}
DEFAULT_BADGE = {"name": "Getting Started", "icon": "🚀", "description": "Begin your career journey with CareerGenie!"}


def interview_average(row: dict[str, Any]) -> float | None:
    if not row["answers_evaluated"]:
        return None
    return row["total_score"] / row["answers_evaluated"]


def average_interview_score(interviews: list[dict[str, Any]]) -> int:
    """Mean over interviews that have at least one evaluated answer."""
    scores = [s for s in (interview_average(row) for row in interviews) if s is not None]
    if not scores:
        return 0
    return round(sum(scores) / len(scores))


def build_badges(interviews: int, resumes: int, careers: int, avg_score: int) -> list[dict[str, str]]:
    badges = [
        {"name": name, "icon": icon, "description": description}
        for name, icon, description, earned in BADGE_RULES
        if earned(interviews, resumes, careers, avg_score)
    ]
    if interviews == 0 and resumes == 0 and careers == 0:
        badges.append(dict(WELCOME_BADGE))
    return badges


def default_progress() -> dict[str, Any]:
    return {
        "interviews_completed": 0,
        "resumes_analyzed": 0,
        "careers_explored": 0,
        "avg_interview_score": 0,
        "badges": [dict(DEFAULT_BADGE)],
        "total_activities": 0,
    }


def get_progress(user_id: str) -> dict[str, Any]:
    try:
        interviews = get_interviews(user_id)
        resumes = len(get_resume_analyses(user_id))
        careers = len(get_career_history(user_id))
    except sqlite3.Error as e:
        logger.warning("progress_load_failed", extra={"user_id": user_id, "error": str(e)})
        return default_progress()

    avg_score = average_interview_score(interviews)
    return {
        "interviews_completed": len(interviews),
        "resumes_analyzed": resumes,
        "careers_explored": careers,
        "avg_interview_score": avg_score,
        "badges": build_badges(len(interviews), resumes, careers, avg_score),
        "total_activities": len(interviews) + resumes + careers,
    }


def get_stats(user_id: str) -> dict[str, int]:
    progress = get_progress(user_id)
    return {
        "resume_count": progress["resumes_analyzed"],
        "interview_count": progress["interviews_completed"],
        "career_matches": progress["careers_explored"],
        "badge_count": len(progress["badges"]),
    }


def get_activity(user_id: str, limit: int = ACTIVITY_LIMIT) -> list[dict[str, Any]]:
    """Newest first, across interviews, resume analyses and career explorations."""
    try:
        interviews = get_interviews(user_id, limit)
        resumes = get_resume_analyses(user_id, limit)
        careers = get_career_history(user_id, limit)
    except sqlite3.Error as e:
        logger.warning("activity_load_failed", extra={"user_id": user_id, "error": str(e)})
        return []

    activities = []
    for row in interviews:
        score = interview_average(row)
        activities.append(
            {
                "type": "interview",
                "title": f"Completed {row['role']} Interview",
                "score": None if score is None else round(score),
                "date": row["timestamp"],
            }
        )
    for row in resumes:
        activities.append(
            {"type": "resume", "title": "Analyzed Resume", "score": row["score"], "date": row["timestamp"]}
        )
    for row in careers:
        activities.append(
            {
                "type": "career",
                "title": "Explored " + ", ".join(row["careers"]) if row["careers"] else "Explored careers",
                "score": None,
                "date": row["timestamp"],
            }
        )
    activities.sort(key=lambda a: a["date"], reverse=True)
    return activities[:limit]
