"""
Pydantic Schemas - Response Validation

All API response schemas in one file for simplicity.
JSON field names are camelCase (resumeId, topJobTerms, ...) to match the
dashboard; Python code keeps snake_case.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional, List
from datetime import datetime


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================
# RANKING SCHEMAS
# ============================================================

class BreakdownResponse(CamelModel):
    skill_coverage: float = 0.0
    text_similarity: float = 0.0
    format_score: float = 0.0
    impact_score: float = 0.0
    cert_bonus: float = 0.0
    tool_bonus: float = 0.0
    presence_score: float = 0.0
    matched_skills_count: int = 0
    required_skills_total: int = 0
    core_score: float = 0.0

class RankedCandidateResponse(CamelModel):
    resume_id: int
    application_id: int
    candidate_id: Optional[int] = None
    created_at: Optional[datetime] = None
    score: float
    score_pct: int
    breakdown: BreakdownResponse
    matched_skills: List[str] = []
    deduplicated: bool = False
    duplicate_application_ids: List[int] = []

class RankResponse(CamelModel):
    ok: bool = True
    job_id: int
    deduped: bool = False
    resume_id: Optional[int] = None
    ranked: List[RankedCandidateResponse]
    top_job_terms: List[str] = []


# ============================================================
# RESUME SCHEMAS
# ============================================================

class ResumeIngestResponse(CamelModel):
    ok: bool = True
    resume_id: int
    application_id: int
    filename: Optional[str] = None
    format_score: float
    skills: List[str] = []
    word_count: int = 0
    parser_version: str

class BackfillResponse(CamelModel):
    ok: bool = True
    job_id: int
    total: int
    ok_count: int
    failed_count: int


# ============================================================
# TAXONOMY SCHEMAS
# ============================================================

class TaxonomySkillResponse(CamelModel):
    slug: str
    aliases: List[str] = []
    kind: str
    weight: float

class TaxonomyResponse(CamelModel):
    skills: List[TaxonomySkillResponse]
    total: int


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(CamelModel):
    message: str
    success: bool = True

class ErrorResponse(BaseModel):
    detail: str
