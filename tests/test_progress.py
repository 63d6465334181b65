import asyncio
import json
import sqlite3

from careergenie.db.session import (
    get_career_history,
    get_interviews,
    get_profile,
    get_resume_analyses,
    record_interview_score,
    upsert_profile,
)
from careergenie.llms.errors import AllProvidersFailedError
from careergenie.services import career_service, progress_service

from conftest import StubGateway

EXHAUSTED = AllProvidersFailedError(["gemini: HTTP 500"])
STRONG_EVALUATION = json.dumps(
    {"communication": 9, "technical": 9, "clarity": 9, "confidence": 9, "correctness": 9, "feedback": "Great"}
)


def test_new_user_gets_welcome_badge():
    progress = progress_service.get_progress("nobody")
    assert progress["total_activities"] == 0
    assert progress["avg_interview_score"] == 0
    assert [b["name"] for b in progress["badges"]] == ["Welcome to CareerGenie"]


def test_interview_session_and_scores_are_saved():
    asyncio.run(career_service.generate_interview_questions(StubGateway(EXHAUSTED), "QA Engineer", 4, user_id="u1"))
    asyncio.run(career_service.evaluate_answer(StubGateway(STRONG_EVALUATION), "Q?", "A.", user_id="u1"))
    asyncio.run(career_service.evaluate_answer(StubGateway(STRONG_EVALUATION), "Q2?", "A2.", user_id="u1"))

    [interview] = get_interviews("u1")
    assert interview["role"] == "QA Engineer"
    assert interview["questions_generated"] == 4
    assert interview["answers_evaluated"] == 2
    assert interview["total_score"] == 180

    progress = progress_service.get_progress("u1")
    assert progress["interviews_completed"] == 1
    assert progress["avg_interview_score"] == 90
    assert {"First Interview", "High Achiever", "Excellence"} <= {b["name"] for b in progress["badges"]}


def test_evaluation_without_interview_is_not_stored():
    assert record_interview_score("u2", 80) is False
    asyncio.run(career_service.evaluate_answer(StubGateway(STRONG_EVALUATION), "Q?", "A.", user_id="u2"))
    assert get_interviews("u2") == []


def test_nothing_is_stored_without_user_id():
    asyncio.run(career_service.generate_interview_questions(StubGateway(EXHAUSTED), "QA Engineer", 2))
    asyncio.run(career_service.analyze_resume(StubGateway('{"score": 60}'), "resume"))
    assert progress_service.get_stats("")["interview_count"] == 0


def test_resume_analysis_saved_only_when_ai_answered():
    asyncio.run(career_service.analyze_resume(StubGateway('{"score": 64, "feedback": "Tighten it"}'), "cv", user_id="u3"))
    asyncio.run(career_service.analyze_resume(StubGateway(EXHAUSTED), "cv", user_id="u3"))

    [row] = get_resume_analyses("u3")
    assert (row["score"], row["summary"], row["provider"]) == (64, "Tighten it", "gemini")


def test_recommendations_are_recorded_as_career_history():
    items = json.dumps([{"title": "Data Engineer"}, {"title": "ML Engineer"}])
    asyncio.run(career_service.recommend_careers(StubGateway(items), "python", user_id="u4"))

    assert get_career_history("u4")[0]["careers"] == ["Data Engineer", "ML Engineer"]
    stats = progress_service.get_stats("u4")
    assert stats["career_matches"] == 1
    assert stats["badge_count"] == 1


def test_activity_is_newest_first_across_record_types():
    asyncio.run(career_service.generate_interview_questions(StubGateway(EXHAUSTED), "Backend Developer", 2, user_id="u5"))
    asyncio.run(career_service.analyze_resume(StubGateway('{"score": 75}'), "cv", user_id="u5"))
    asyncio.run(career_service.recommend_careers(StubGateway(EXHAUSTED), user_id="u5"))

    activities = progress_service.get_activity("u5")
    assert {a["type"] for a in activities} == {"interview", "resume", "career"}
    dates = [a["date"] for a in activities]
    assert dates == sorted(dates, reverse=True)
    interview = next(a for a in activities if a["type"] == "interview")
    assert interview["title"] == "Completed Backend Developer Interview"
    assert interview["score"] is None


def test_storage_failure_falls_back_to_default_progress(monkeypatch):
    def broken(*args, **kwargs):
        raise sqlite3.OperationalError("database is locked")

    monkeypatch.setattr(progress_service, "get_interviews", broken)
    progress = progress_service.get_progress("u6")
    assert progress == progress_service.default_progress()
    assert progress_service.get_activity("u6") == []


def test_profile_update_merges_fields():
    assert get_profile("u7") is None

    first = upsert_profile("u7", {"name": "Ada", "skills": "Python"})
    assert first["name"] == "Ada"
    assert first["profile_complete"] is False

    second = upsert_profile("u7", {"name": "Ada L.", "skills": None, "college": "UCL"})
    assert second["skills"] == "Python"
    assert second["college"] == "UCL"
    assert second["profile_complete"] is True
