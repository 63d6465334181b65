from typing import Optional

from pydantic import BaseModel, Field

from careergenie.core.providers import ProviderName


class GenerateRequest(BaseModel):
    prompt: str = Field(..., min_length=1)
    providers: list[ProviderName] = Field(default_factory=list)  # empty = PROVIDER_CHAIN
    model: str = ""  # alias; unknown = provider default
    temperature: float = Field(0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(1024, ge=1, le=32768)


class InterviewQuestionsRequest(BaseModel):
    role: str = ""
    count: int = Field(10, ge=1, le=50)
    user_id: Optional[str] = None


class EvaluateAnswerRequest(BaseModel):
    question: str = ""
    answer: str = ""
    role: Optional[str] = None
    user_id: Optional[str] = None


class CareerRecommendRequest(BaseModel):
    skills: str = ""
    degree: str = ""
    interests: str = ""
    user_id: Optional[str] = None


class ResumeAnalyzeRequest(BaseModel):
    resume_text: str = ""
    user_id: Optional[str] = None


class ChatProfile(BaseModel):
    name: Optional[str] = None
    skills: Optional[str] = None
    degree: Optional[str] = None
    college: Optional[str] = None


class ChatMessageRequest(BaseModel):
    message: str = ""
    user_id: Optional[str] = None
    profile: Optional[ChatProfile] = None


class CareerExploredRequest(BaseModel):
    careers: list[str] = Field(..., min_length=1)


class ProfileUpdateRequest(BaseModel):
    name: str = ""
    skills: Optional[str] = None
    college: Optional[str] = None
    cgpa: Optional[str] = None
    phone: Optional[str] = None
    linkedin: Optional[str] = None
    github: Optional[str] = None
