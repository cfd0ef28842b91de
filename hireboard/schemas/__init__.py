"""
Schemas module - Response schemas for API endpoints.

Difference from models:
- Models: Internal data structures (dataclasses in hireboard.models)
- Schemas: API contract (what client receives)
"""
from hireboard.schemas.schemas import (
    BreakdownResponse,
    RankedCandidateResponse,
    RankResponse,
    ResumeIngestResponse,
    BackfillResponse,
    TaxonomySkillResponse,
    TaxonomyResponse,
    MessageResponse,
    ErrorResponse,
)

__all__ = [
    "BreakdownResponse",
    "RankedCandidateResponse",
    "RankResponse",
    "ResumeIngestResponse",
    "BackfillResponse",
    "TaxonomySkillResponse",
    "TaxonomyResponse",
    "MessageResponse",
    "ErrorResponse",
]
