from pydantic import BaseModel


class GenerateResponse(BaseModel):
    text: str
    provider: str
    model: str
    latency_ms: float


class InterviewQuestion(BaseModel):
    question: str
    type: str
    difficulty: str
    sample_answer: str


class InterviewQuestionsResponse(BaseModel):
    success: bool = True
    role: str
    count: int
    questions: list[InterviewQuestion]
    source: str
    provider: str


class ChatMessageResponse(BaseModel):
    success: bool = True
    reply: str
    source: str
    provider: str
