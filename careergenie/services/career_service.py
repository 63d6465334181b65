# =============================================================================
# careergenie/services/career_service.py — Prompt building + lenient parsing
# =============================================================================
# Each feature asks the gateway first and falls back to canned content when
# every provider failed or the reply could not be parsed into the expected
# shape. The returned dict always carries "source" ("ai" | "fallback") and
# "provider". When a user_id is given the outcome is also stored for that
# user; a storage failure is logged and never changes the reply.
# =============================================================================

import sqlite3
from typing import Any, Callable

from careergenie.db.session import (
    insert_career_history,
    insert_chat_message,
    insert_interview,
    insert_resume_analysis,
    record_interview_score,
)
from careergenie.llms.errors import AllProvidersFailedError
from careergenie.llms.router import GenerationGateway
from careergenie.services import fallbacks
from careergenie.services.llm_service import generate, record_generation
from careergenie.utils.json_repair import JSONRepairError, parse_lenient_json
from careergenie.utils.logger import logger

FALLBACK_PROVIDER = "fallback"
EVALUATION_METRICS = ("communication", "technical", "clarity", "confidence", "correctness")
DEFAULT_METRIC_SCORE = 7
MAX_RECOMMENDATIONS = 5

CHAT_SYSTEM_INSTRUCTION = (
    "You are the CareerGenie AI. Your purpose is to provide helpful, actionable advice on careers, "
    "resumes, interview preparation, and skill development. Be encouraging and concise."
)


class InvalidAIResponse(ValueError):
    pass


def _pick(item: dict, *keys: str, default: Any = None) -> Any:
    for key in keys:
        value = item.get(key)
        if value not in (None, ""):
            return value
    return default


async def _ask_json(gateway: GenerationGateway, prompt: str, options: dict, feature: str) -> tuple[Any, str]:
    result, _ = await generate(gateway, prompt, options, feature=feature)
    return parse_lenient_json(result.text), result.provider


def _use_fallback(feature: str, prompt: str, error: Exception) -> None:
    logger.warning("ai_fallback_used", extra={"feature": feature, "error": str(error).replace("\n", " | ")})
    record_generation(feature, FALLBACK_PROVIDER, None, "fallback", prompt, 0.0)


def _persist(user_id: str | None, save: Callable[..., Any], *args: Any) -> None:
    if not user_id:
        return
    try:
        save(user_id, *args)
    except sqlite3.Error as e:
        logger.warning(
            "user_record_save_failed",
            extra={"user_id": user_id, "record": save.__name__, "error": str(e)},
        )


# -- interview ----------------------------------------------------------------

def interview_questions_prompt(role: str, count: int) -> str:
    return f"""You are an expert technical interviewer. Generate {count} realistic interview questions for: "{role}".

Return ONLY a valid JSON array (no markdown, no code blocks):
[
  {{
    "question": "What is your experience with React hooks?",
    "type": "technical",
    "difficulty": "medium",
    "sampleAnswer": "React hooks like useState and useEffect allow functional components to manage state..."
  }}
]

Requirements:
- Generate exactly {count} questions
- Mix: technical (60%), behavioral (30%), scenario (10%)
- Difficulty: easy (30%), medium (50%), hard (20%)
- Questions must be specific to "{role}"
- Sample answers should be 2-3 sentences

Return ONLY the JSON array."""


def normalize_questions(raw: Any, count: int) -> list[dict[str, str]]:
    if not isinstance(raw, list) or not raw:
        raise InvalidAIResponse("Invalid questions format")
    questions = []
    for item in raw[:count]:
        if not isinstance(item, dict):
            continue
        questions.append(
            {
                "question": str(_pick(item, "question", default="Invalid question")),
                "type": str(_pick(item, "type", default="technical")),
                "difficulty": str(_pick(item, "difficulty", default="medium")),
                "sample_answer": str(_pick(item, "sampleAnswer", "sample_answer", default="No sample answer.")),
            }
        )
    if not questions:
        raise InvalidAIResponse("Invalid questions format")
    return questions


async def generate_interview_questions(
    gateway: GenerationGateway,
    role: str,
    count: int = 10,
    user_id: str | None = None,
) -> dict:
    prompt = interview_questions_prompt(role, count)
    try:
        raw, provider = await _ask_json(
            gateway, prompt, {"temperature": 0.8, "max_tokens": 2000}, "interview_questions"
        )
        questions = normalize_questions(raw, count)
        source = "ai"
    except (AllProvidersFailedError, JSONRepairError, InvalidAIResponse) as e:
        _use_fallback("interview_questions", prompt, e)
        questions, provider, source = fallbacks.fallback_questions(role, count), FALLBACK_PROVIDER, "fallback"
    _persist(user_id, insert_interview, role, len(questions))
    return {"role": role, "count": len(questions), "questions": questions, "source": source, "provider": provider}


def evaluation_prompt(question: str, answer: str, role: str | None) -> str:
    return f"""You are an expert interviewer evaluating a candidate's answer.

Role: {role or 'General'}
Question: {question}
Answer: {answer}

Return ONLY valid JSON (no markdown):
{{
  "communication": 8,
  "technical": 7,
  "clarity": 8,
  "confidence": 7,
  "correctness": 8,
  "feedback": "Your answer demonstrates solid understanding...",
  "suggestions": ["Include specific metrics", "Mention relevant tools"],
  "strengths": ["Clear explanation", "Good examples"]
}}

Score each metric 0-10. Be realistic (most good answers: 6-8).
Provide specific, actionable feedback."""


def normalize_evaluation(raw: Any) -> dict:
    if not isinstance(raw, dict):
        raise InvalidAIResponse("Invalid evaluation format")
    evaluation = dict(raw)
    for metric in EVALUATION_METRICS:
        value = evaluation.get(metric)
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
            evaluation[metric] = DEFAULT_METRIC_SCORE
    evaluation.setdefault("feedback", "")
    for key in ("suggestions", "strengths"):
        if not isinstance(evaluation.get(key), list):
            evaluation[key] = []
    return evaluation


def evaluation_score(evaluation: dict) -> int:
    """Mean of the five metrics on a 0-100 scale."""
    total = sum(min(10, evaluation.get(metric, 0)) for metric in EVALUATION_METRICS)
    return round(total * 10 / len(EVALUATION_METRICS))


async def evaluate_answer(
    gateway: GenerationGateway,
    question: str,
    answer: str,
    role: str | None = None,
    user_id: str | None = None,
) -> dict:
    prompt = evaluation_prompt(question, answer, role)
    try:
        raw, provider = await _ask_json(
            gateway, prompt, {"temperature": 0.6, "max_tokens": 1024}, "interview_evaluation"
        )
        evaluation = normalize_evaluation(raw)
        source = "ai"
    except (AllProvidersFailedError, JSONRepairError, InvalidAIResponse) as e:
        _use_fallback("interview_evaluation", prompt, e)
        evaluation, provider, source = fallbacks.fallback_evaluation(answer), FALLBACK_PROVIDER, "fallback"
    _persist(user_id, record_interview_score, evaluation_score(evaluation))
    return {"evaluation": evaluation, "source": source, "provider": provider}


# -- career -------------------------------------------------------------------

def recommendation_prompt(skills: str, degree: str, interests: str) -> str:
    return f"""You are an expert career counselor. Analyze this profile:

Skills: {skills}
Degree: {degree}
Interests: {interests}

Provide exactly 5 career recommendations in this JSON format (return ONLY valid JSON, no markdown):

[
  {{
    "title": "Job Title",
    "matchScore": 85,
    "whyItFits": "2-3 sentences why this fits",
    "requiredSkills": ["skill1", "skill2", "skill3", "skill4", "skill5"],
    "skillRoadmap": "Step 1: ...\\nStep 2: ...\\nStep 3: ...\\nStep 4: ...\\nStep 5: ...",
    "salaryRange": "$XX,000 - $YY,000 per year",
    "futureScope": "Career outlook",
    "tools": ["tool1", "tool2", "tool3", "tool4"]
  }}
]

Make realistic recommendations with accurate salaries. Return ONLY the JSON array."""


def normalize_recommendations(raw: Any) -> list[dict]:
    if not isinstance(raw, list) or not raw:
        raise InvalidAIResponse("Invalid recommendations format")
    recommendations = []
    for item in raw[:MAX_RECOMMENDATIONS]:
        if not isinstance(item, dict):
            continue
        recommendations.append(
            {
                "title": _pick(item, "title", default="Untitled role"),
                "match_score": _pick(item, "matchScore", "match_score", default=0),
                "why_it_fits": _pick(item, "whyItFits", "why_it_fits", default=""),
                "required_skills": _pick(item, "requiredSkills", "required_skills", default=[]),
                "skill_roadmap": _pick(item, "skillRoadmap", "skill_roadmap", default=""),
                "salary_range": _pick(item, "salaryRange", "salary_range", default=""),
                "future_scope": _pick(item, "futureScope", "future_scope", default=""),
                "tools": _pick(item, "tools", default=[]),
            }
        )
    if not recommendations:
        raise InvalidAIResponse("Invalid recommendations format")
    return recommendations


async def recommend_careers(
    gateway: GenerationGateway,
    skills: str = "",
    degree: str = "",
    interests: str = "",
    user_id: str | None = None,
) -> dict:
    prompt = recommendation_prompt(skills, degree, interests)
    try:
        raw, provider = await _ask_json(
            gateway, prompt, {"temperature": 0.7, "max_tokens": 2000}, "career_recommendations"
        )
        recommendations = normalize_recommendations(raw)
        source = "ai"
    except (AllProvidersFailedError, JSONRepairError, InvalidAIResponse) as e:
        _use_fallback("career_recommendations", prompt, e)
        recommendations = [dict(r) for r in fallbacks.FALLBACK_RECOMMENDATIONS]
        provider, source = FALLBACK_PROVIDER, "fallback"
    _persist(user_id, insert_career_history, [str(r["title"]) for r in recommendations])
    return {"recommendations": recommendations, "source": source, "provider": provider}


# -- resume -------------------------------------------------------------------

def resume_analysis_prompt(resume_text: str) -> str:
    return f"""You are a top-tier resume analyst. Analyze this resume and provide a comprehensive evaluation.

Resume Text:
---
{resume_text}
---

Return ONLY valid JSON (no markdown):
{{
  "score": 85,
  "feedback": "Overall summary in 3-5 sentences",
  "areas_for_improvement": ["Actionable item 1", "Actionable item 2", "Actionable item 3"],
  "strengths": ["Key strength 1", "Key strength 2", "Key strength 3"],
  "keywords_found": ["keyword1", "keyword2", "keyword3", "keyword4", "keyword5"]
}}

Provide realistic scores (0-100) and specific, actionable feedback."""


def normalize_resume_analysis(raw: Any) -> dict:
    if not isinstance(raw, dict):
        raise InvalidAIResponse("Invalid analysis format")
    score = raw.get("score")
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        score = 0
    return {
        "score": max(0, min(100, score)),
        "feedback": str(raw.get("feedback") or "N/A"),
        "areas_for_improvement": list(raw.get("areas_for_improvement") or []),
        "strengths": list(raw.get("strengths") or []),
        "keywords_found": list(raw.get("keywords_found") or []),
    }


async def analyze_resume(gateway: GenerationGateway, resume_text: str, user_id: str | None = None) -> dict:
    prompt = resume_analysis_prompt(resume_text)
    try:
        raw, provider = await _ask_json(
            gateway, prompt, {"temperature": 0.6, "max_tokens": 1500}, "resume_analysis"
        )
        analysis = normalize_resume_analysis(raw)
        source = "ai"
        _persist(user_id, insert_resume_analysis, analysis["score"], analysis["feedback"], provider)
    except (AllProvidersFailedError, JSONRepairError, InvalidAIResponse) as e:
        _use_fallback("resume_analysis", prompt, e)
        analysis = dict(fallbacks.FALLBACK_RESUME_ANALYSIS)
        provider, source = FALLBACK_PROVIDER, "fallback"
    return {"analysis": analysis, "source": source, "provider": provider}


# -- chat ---------------------------------------------------------------------

def chat_prompt(message: str, profile: dict | None = None) -> str:
    snippet = ""
    if profile:
        snippet = (
            "User Profile:\n"
            f"- Name: {profile.get('name') or 'Not provided'}\n"
            f"- Skills: {profile.get('skills') or 'Not provided'}\n"
            f"- Degree: {profile.get('degree') or 'Not provided'}\n"
            f"- College: {profile.get('college') or 'Not provided'}\n\n"
            "Keep this profile in mind when providing advice."
        )
    return f"{CHAT_SYSTEM_INSTRUCTION}\n\n{snippet}\n\nUser Question: {message}"


async def chat_reply(
    gateway: GenerationGateway,
    message: str,
    profile: dict | None = None,
    user_id: str | None = None,
) -> dict:
    prompt = chat_prompt(message, profile)
    try:
        result, _ = await generate(gateway, prompt, {"temperature": 0.7, "max_tokens": 1024}, feature="chat")
        reply, provider, source = result.text, result.provider, "ai"
    except AllProvidersFailedError as e:
        _use_fallback("chat", prompt, e)
        reply, provider, source = fallbacks.CHAT_APOLOGY, FALLBACK_PROVIDER, "fallback"
    if source == "ai":
        _persist(user_id, insert_chat_message, message, reply, provider)
    return {"reply": reply, "source": source, "provider": provider}
