from __future__ import annotations

from pydantic import BaseModel, Field

from ats_engine.schemas.analysis import JobCategory


class ResumeTextRequest(BaseModel):
    text: str = ""


class JobDescriptionAnalysisRequest(BaseModel):
    text: str = ""
    job_description: str = ""


class RoleAnalysisRequest(BaseModel):
    text: str = ""
    role: str = ""


class ResumeAIRequest(BaseModel):
    text: str = ""
    job_description: str | None = None


class ExtractKeywordsRequest(BaseModel):
    job_description: str = ""
    resume_text: str | None = None


class AIHealthResponse(BaseModel):
    configured: bool
    available: bool
    status: str


class ExtractTextResponse(BaseModel):
    filename: str
    text: str
    chars: int = Field(ge=0)


class KeywordListResponse(BaseModel):
    id: str
    keywords: list[str] = Field(default_factory=list)


class CategoryListResponse(BaseModel):
    categories: list[JobCategory] = Field(default_factory=list)
    total: int = Field(default=0, ge=0)
