import datetime
import sqlite3
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request

from careergenie.core.providers import ProviderName
from careergenie.core.security import is_configured
from careergenie.db.models import init_db
from careergenie.db.session import (
    get_chat_history,
    get_db_connection,
    get_last_logs,
    get_profile,
    insert_career_history,
    upsert_profile,
)
from careergenie.llms.errors import AllProvidersFailedError
from careergenie.llms.registry import ClientRegistry, get_default_registry
from careergenie.llms.router import GenerationGateway, available_providers, create_gateway
from careergenie.schemas.request import (
    CareerExploredRequest,
    CareerRecommendRequest,
    ChatMessageRequest,
    EvaluateAnswerRequest,
    GenerateRequest,
    InterviewQuestionsRequest,
    ProfileUpdateRequest,
    ResumeAnalyzeRequest,
)
from careergenie.schemas.response import ChatMessageResponse, GenerateResponse, InterviewQuestionsResponse
from careergenie.security.rate_guard import MAX_PROMPT_LENGTH, RateLimiter, RateLimitExceeded
from careergenie.services import career_service, progress_service
from careergenie.services.fallbacks import AVAILABLE_ROLES
from careergenie.services.llm_service import generate
from careergenie.utils.logger import logger

STARTED_AT = time.monotonic()
rate_limiter = RateLimiter()


def check_db_connected() -> bool:
    try:
        with get_db_connection() as conn:
            conn.execute("SELECT 1")
        return True
    except sqlite3.Error:
        return False


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    registry = get_default_registry()
    app.state.registry = registry
    providers = [p.value for p in available_providers(registry)]
    if providers:
        logger.info("careergenie_started", extra={"providers": ",".join(providers)})
    else:
        logger.warning("no_providers_configured", extra={"hint": "set GEMINI_API_KEY or GROQ_API_KEY"})
    yield
    logger.info("careergenie_stopped")


app = FastAPI(title="CareerGenie", lifespan=lifespan)


def get_registry(request: Request) -> ClientRegistry:
    return getattr(request.app.state, "registry", None) or get_default_registry()


def get_gateway(registry: ClientRegistry = Depends(get_registry)) -> GenerationGateway:
    return create_gateway(registry.settings.chain, registry)


def _client_ip(request: Request) -> str:
    # Peer address only. Behind a proxy, run uvicorn with --proxy-headers and
    # --forwarded-allow-ips so request.client reflects the trusted hop.
    return request.client.host if request.client else "unknown"


def _require(value: str | None, message: str) -> str:
    if not value or not value.strip():
        raise HTTPException(status_code=400, detail=message)
    return value.strip()


@app.get("/")
async def root():
    return {
        "message": "CareerGenie API",
        "docs": "/docs",
        "health": "/health",
        "generate": "POST /generate",
        "interview": ["GET /api/interview/roles", "POST /api/interview/questions", "POST /api/interview/evaluate"],
        "career": "POST /api/career/recommend",
        "resume": "POST /api/resume/analyze",
        "chat": ["POST /api/chat/message", "GET /api/chat/history/{user_id}"],
        "progress": ["GET /api/progress/{user_id}", "POST /api/progress/{user_id}/career-explored"],
        "profile": [
            "GET /api/profile/{user_id}",
            "PUT /api/profile/{user_id}",
            "GET /api/profile/{user_id}/stats",
            "GET /api/profile/{user_id}/activity",
        ],
    }


@app.get("/health")
async def get_health(registry: ClientRegistry = Depends(get_registry)):
    db_ok = check_db_connected()
    providers = [p.value for p in available_providers(registry)]
    if not db_ok:
        status = "unhealthy"
    elif providers:
        status = "ok"
    else:
        status = "degraded"
    return {
        "status": status,
        "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
        "uptime": int(time.monotonic() - STARTED_AT),
        "database": "connected" if db_ok else "failed",
        "ai": {"providers": providers, "configured": bool(providers)},
    }


@app.get("/api/ai/status")
async def get_ai_status(registry: ClientRegistry = Depends(get_registry)):
    settings = registry.settings
    return {
        "success": True,
        "providers": [p.value for p in available_providers(registry)],
        "chain": settings.chain,
        "details": {p.value: is_configured(p, settings) for p in ProviderName},
    }


@app.post("/generate", response_model=GenerateResponse)
async def post_generate(
    request: Request,
    body: GenerateRequest,
    registry: ClientRegistry = Depends(get_registry),
) -> GenerateResponse:
    if len(body.prompt) > MAX_PROMPT_LENGTH:
        raise HTTPException(status_code=413, detail="Prompt exceeds maximum length")
    try:
        await rate_limiter.check(_client_ip(request))
    except RateLimitExceeded:
        raise HTTPException(status_code=429, detail="Rate limit exceeded")
    try:
        gateway = create_gateway(body.providers or registry.settings.chain, registry, model=body.model)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    try:
        result, latency_ms = await generate(
            gateway,
            body.prompt,
            {"temperature": body.temperature, "max_tokens": body.max_tokens},
        )
    except AllProvidersFailedError as e:
        raise HTTPException(status_code=503, detail={"error": "All providers failed", "errors": e.errors})
    return GenerateResponse(
        text=result.text,
        provider=result.provider,
        model=result.model,
        latency_ms=round(latency_ms, 2),
    )


@app.get("/api/interview/roles")
async def get_interview_roles():
    return {"success": True, "roles": AVAILABLE_ROLES}


@app.post("/api/interview/questions", response_model=InterviewQuestionsResponse)
async def post_interview_questions(
    body: InterviewQuestionsRequest,
    gateway: GenerationGateway = Depends(get_gateway),
):
    role = _require(body.role, "Role is required")
    result = await career_service.generate_interview_questions(gateway, role, body.count, body.user_id)
    return {"success": True, **result}


@app.post("/api/interview/evaluate")
async def post_interview_evaluate(
    body: EvaluateAnswerRequest,
    gateway: GenerationGateway = Depends(get_gateway),
):
    if not body.question.strip() or not body.answer.strip():
        raise HTTPException(status_code=400, detail="Question and answer are required")
    result = await career_service.evaluate_answer(
        gateway, body.question, body.answer, body.role, body.user_id
    )
    return {"success": True, **result}


@app.post("/api/career/recommend")
async def post_career_recommend(
    body: CareerRecommendRequest,
    gateway: GenerationGateway = Depends(get_gateway),
):
    result = await career_service.recommend_careers(
        gateway, body.skills, body.degree, body.interests, body.user_id
    )
    return {"success": True, **result}


@app.post("/api/resume/analyze")
async def post_resume_analyze(
    body: ResumeAnalyzeRequest,
    gateway: GenerationGateway = Depends(get_gateway),
):
    resume_text = _require(body.resume_text, "Resume text is required")
    if len(resume_text) > MAX_PROMPT_LENGTH:
        raise HTTPException(status_code=413, detail="Resume text exceeds maximum length")
    result = await career_service.analyze_resume(gateway, resume_text, body.user_id)
    return {"success": True, **result}


@app.post("/api/chat/message", response_model=ChatMessageResponse)
async def post_chat_message(
    body: ChatMessageRequest,
    gateway: GenerationGateway = Depends(get_gateway),
):
    message = _require(body.message, "Message is required")
    profile = body.profile.model_dump() if body.profile else None
    result = await career_service.chat_reply(gateway, message, profile, body.user_id)
    return {"success": True, **result}


# Per-user routes are keyed by an opaque user_id and are unauthenticated;
# sessions and login are handled by whatever fronts this service.
@app.get("/api/chat/history/{user_id}")
async def get_chat_history_route(user_id: str):
    return {"success": True, "history": get_chat_history(user_id, 20)}


@app.get("/api/progress/{user_id}")
async def get_progress_route(user_id: str):
    return {"success": True, "progress": progress_service.get_progress(user_id)}


@app.post("/api/progress/{user_id}/career-explored")
async def post_career_explored(user_id: str, body: CareerExploredRequest):
    insert_career_history(user_id, body.careers)
    return {"success": True}


@app.get("/api/profile/{user_id}")
async def get_profile_route(user_id: str):
    profile = get_profile(user_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="User not found")
    return {"success": True, "profile": profile}


@app.put("/api/profile/{user_id}")
async def put_profile_route(user_id: str, body: ProfileUpdateRequest):
    _require(body.name, "Name is required")
    profile = upsert_profile(user_id, body.model_dump())
    return {"success": True, "message": "Profile updated successfully", "profile": profile}


@app.get("/api/profile/{user_id}/stats")
async def get_profile_stats(user_id: str):
    return {"success": True, "stats": progress_service.get_stats(user_id)}


@app.get("/api/profile/{user_id}/activity")
async def get_profile_activity(user_id: str):
    return {"success": True, "activities": progress_service.get_activity(user_id)}


@app.get("/admin/logs")
async def get_admin_logs() -> list:
    return get_last_logs(20)
