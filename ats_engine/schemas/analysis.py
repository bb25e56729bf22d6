from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Grade = Literal["A+", "A", "B", "C", "D", "F"]
Priority = Literal["high", "medium", "low"]
Severity = Literal["high", "medium", "low"]
AnalysisType = Literal["generic", "job-description", "role-based", "job-role"]
KeywordSubgroup = Literal["primary", "technical", "process", "tools"]


class KeywordSubgroups(BaseModel):
    model_config = ConfigDict(frozen=True)

    primary: list[str] = Field(default_factory=list)
    technical: list[str] = Field(default_factory=list)
    process: list[str] = Field(default_factory=list)
    tools: list[str] = Field(default_factory=list)


class KeywordSet(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    display_name: str
    description: str = ""
    subgroups: KeywordSubgroups = Field(default_factory=KeywordSubgroups)

    def all_keywords(self) -> list[str]:
        return [
            *self.subgroups.primary,
            *self.subgroups.technical,
            *self.subgroups.process,
            *self.subgroups.tools,
        ]


class RoleOption(BaseModel):
    key: str
    display_name: str
    description: str = ""


class JobCategory(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    icon: str = ""
    color_hint: str = ""
    popularity_score: int = Field(default=0, ge=0, le=100)
    tags: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(min_length=1)


class ATSScore(BaseModel):
    overall: int = Field(ge=0, le=100)
    keyword_match: int = Field(ge=0, le=100)
    formatting: int = Field(ge=0, le=100)
    readability: int = Field(ge=0, le=100)
    grade: Grade
    description: str


class Suggestion(BaseModel):
    type: str
    title: str
    description: str
    priority: Priority
    keywords: list[str] = Field(default_factory=list)


class Issue(BaseModel):
    type: str
    description: str
    severity: Severity
    location: str = ""


class RoleConfidenceScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: str = "Unknown"
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    reasoning: str = ""


class JobRoleAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    primary_role: str = "Unknown"
    secondary_roles: list[str] = Field(default_factory=list)
    industry: str = "Unknown"
    seniority_level: str = "Unknown"
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    role_confidence_scores: list[RoleConfidenceScore] = Field(default_factory=list)
    recommended_categories: list[str] = Field(default_factory=list)
    reasoning: str = ""


class JobRoleAnalysisResult(BaseModel):
    success: bool
    analysis: JobRoleAnalysis | None = None
    error_message: str | None = None
    used_fallback: bool = False


class ExtractionResult(BaseModel):
    success: bool
    suggested_keywords: list[str] = Field(default_factory=list)
    required_skills: list[str] = Field(default_factory=list)
    technical_skills: list[str] = Field(default_factory=list)
    soft_skills: list[str] = Field(default_factory=list)
    experience_requirements: list[str] = Field(default_factory=list)
    industries: list[str] = Field(default_factory=list)
    job_titles: list[str] = Field(default_factory=list)
    certifications: list[str] = Field(default_factory=list)
    job_level: str | None = None
    job_type: str | None = None
    relevance_score: int | None = None
    keyword_frequency: dict[str, int] = Field(default_factory=dict)
    error_message: str | None = None
    used_fallback: bool = False


class AnalysisResult(BaseModel):
    score: ATSScore
    found_keywords: list[str] = Field(default_factory=list)
    missing_keywords: list[str] = Field(default_factory=list)
    suggestions: list[Suggestion] = Field(default_factory=list)
    issues: list[Issue] = Field(default_factory=list)
    analyzed_at: datetime
    analysis_type: AnalysisType = "generic"
    selected_role: str | None = None
    role_display_name: str | None = None
    job_role_analysis: JobRoleAnalysis | None = None
    recommended_categories: list[JobCategory] = Field(default_factory=list)


class ResumeImprovements(BaseModel):
    missing_keywords: list[str] = Field(default_factory=list)
    skills_to_add: list[str] = Field(default_factory=list)
    recommended_certifications: list[str] = Field(default_factory=list)
    experience_gaps: list[str] = Field(default_factory=list)


class ResumeImprovementReport(BaseModel):
    ats_analysis: AnalysisResult
    ai_suggestions: ExtractionResult | None = None
    ai_error: str | None = None
    improvements: ResumeImprovements = Field(default_factory=ResumeImprovements)
    generated_at: datetime


class SmartCategoryAnalysis(BaseModel):
    job_role_analysis: JobRoleAnalysis | None = None
    categories: list[JobCategory] = Field(default_factory=list)
    ai_error: str | None = None
