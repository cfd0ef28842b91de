"""
ATS domain models - internal data transfer objects for the ranking engine.

Records (JobRecord, ApplicationRecord, ResumeRecord) mirror rows owned by the
persistence layer. Everything else is derived per ranking request and
discarded afterwards.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, FrozenSet, List, Optional, Tuple


SKILL_KINDS = ("skill", "tool", "platform", "cert", "soft")


# ============================================================
# TAXONOMY
# ============================================================

@dataclass(frozen=True)
class CanonicalSkill:
    slug: str
    aliases: Tuple[str, ...] = ()
    kind: str = "skill"
    weight: float = 1.0

    def __post_init__(self):
        object.__setattr__(self, "slug", " ".join(str(self.slug).lower().split()))
        object.__setattr__(self, "aliases", tuple(str(a) for a in self.aliases if a))
        kind = (self.kind or "skill").lower()
        object.__setattr__(self, "kind", kind if kind in SKILL_KINDS else "skill")
        try:
            weight = float(self.weight)
        except (TypeError, ValueError):
            weight = 1.0
        object.__setattr__(self, "weight", weight if weight >= 0 else 1.0)


@dataclass(frozen=True)
class SkillMention:
    slug: str
    alias: str
    confidence: float = 1.0
    kind: str = "skill"
    weight: float = 1.0
    count: int = 1


# ============================================================
# PERSISTENCE RECORDS
# ============================================================

@dataclass
class JobRecord:
    job_id: int
    title: str = ""
    description: str = ""
    org_id: Optional[int] = None
    required_skills: List[str] = field(default_factory=list)
    preferred_skills: List[str] = field(default_factory=list)


@dataclass
class ApplicationRecord:
    application_id: int
    job_id: int
    candidate_id: Optional[int] = None
    stage: str = "applied"
    created_at: Optional[datetime] = None


@dataclass
class ResumeRecord:
    resume_id: int
    application_id: int
    raw_text: str = ""
    created_at: Optional[datetime] = None
    format_score: Optional[float] = None
    raw_mongo_id: Optional[str] = None


# ============================================================
# DERIVED (per request)
# ============================================================

@dataclass(frozen=True)
class JobRequirementProfile:
    required_skills: FrozenSet[str]
    skill_weights: Dict[str, float]
    raw_description_text: str = ""
    explicit_skills: FrozenSet[str] = frozenset()
    description_skills: FrozenSet[str] = frozenset()
    taxonomy: Any = None

    @property
    def total_weight(self) -> float:
        return sum(self.skill_weights.get(s, 1.0) for s in sorted(self.required_skills))


@dataclass(frozen=True)
class ResumeFeatureVector:
    mentioned_skill_ids: FrozenSet[str] = frozenset()
    matched_skill_ids: FrozenSet[str] = frozenset()
    skill_coverage_ratio: float = 0.0
    text_similarity: float = 0.0
    format_score: float = 0.0
    impact_score: float = 0.0
    cert_bonus: float = 0.0
    tool_bonus: float = 0.0
    presence_score: float = 0.0
    word_count: int = 0

    @classmethod
    def empty(cls, skill_coverage_ratio: float = 0.0) -> "ResumeFeatureVector":
        return cls(skill_coverage_ratio=skill_coverage_ratio)


@dataclass(frozen=True)
class CandidateScore:
    score: float
    core_score: float
    breakdown: Dict[str, Any]


@dataclass
class RankedCandidate:
    resume_id: int
    application_id: int
    candidate_id: Optional[int]
    created_at: Optional[datetime]
    score: float
    breakdown: Dict[str, Any]
    matched_skills: List[str] = field(default_factory=list)
    duplicate_application_ids: List[int] = field(default_factory=list)

    @property
    def is_deduplicated(self) -> bool:
        return bool(self.duplicate_application_ids)


@dataclass
class RankingResult:
    job_id: int
    ranked: List[RankedCandidate]
    deduped: bool = False
    resume_id: Optional[int] = None
    top_job_terms: List[str] = field(default_factory=list)
    ok: bool = True
