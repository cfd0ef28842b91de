"""
Models module - internal data structures for the ATS ranking engine.

Difference from schemas:
- Models: Internal data structures (dataclasses)
- Schemas: API contract (what client sends/receives)
"""
from hireboard.models.ats import (
    SKILL_KINDS,
    CanonicalSkill,
    SkillMention,
    JobRecord,
    ApplicationRecord,
    ResumeRecord,
    JobRequirementProfile,
    ResumeFeatureVector,
    CandidateScore,
    RankedCandidate,
    RankingResult,
)

__all__ = [
    "SKILL_KINDS",
    "CanonicalSkill",
    "SkillMention",
    "JobRecord",
    "ApplicationRecord",
    "ResumeRecord",
    "JobRequirementProfile",
    "ResumeFeatureVector",
    "CandidateScore",
    "RankedCandidate",
    "RankingResult",
]
