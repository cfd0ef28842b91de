"""
Scoring Function

Combines a ResumeFeatureVector with a JobRequirementProfile into one bounded
score plus a breakdown the dashboard can show.

FORMULA:
    core  = 0.45 × skill coverage
          + 0.20 × text similarity
          + 0.10 × format score
          + 0.10 × presence score
          + 0.15 × impact score
    score = clamp(core + 0.05 × cert bonus + 0.05 × tool bonus, 0, 1)

The five core weights must sum to 1.0 so core stays in [0, 1]; bonuses can
push a candidate up to the clamp but never past it.

Pure function: no I/O, no randomness. Malformed sub-scores (None, NaN,
strings) count as 0 instead of raising.
"""

import math
from dataclasses import dataclass
from typing import Any

from hireboard.models.ats import CandidateScore, JobRequirementProfile, ResumeFeatureVector


@dataclass(frozen=True)
class ScoringWeights:
    skill_coverage: float = 0.45
    text_similarity: float = 0.20
    format: float = 0.10
    presence: float = 0.10
    impact: float = 0.15
    cert_bonus: float = 0.05
    tool_bonus: float = 0.05
    neutral_skill_coverage: float = 0.5

    def __post_init__(self):
        weights = (
            self.skill_coverage, self.text_similarity, self.format,
            self.presence, self.impact, self.cert_bonus, self.tool_bonus,
        )
        if any(w < 0 for w in weights):
            raise ValueError("Scoring weights must be non-negative")
        if not math.isclose(self.core_total, 1.0, abs_tol=1e-6):
            raise ValueError(f"Core scoring weights must sum to 1.0 (got {self.core_total:.4f})")
        if not 0.0 <= self.neutral_skill_coverage <= 1.0:
            raise ValueError("Neutral skill coverage must be within [0, 1]")

    @property
    def core_total(self) -> float:
        return self.skill_coverage + self.text_similarity + self.format + self.presence + self.impact

    @classmethod
    def from_settings(cls, settings) -> "ScoringWeights":
        return cls(
            skill_coverage=settings.ats_weight_skill_coverage,
            text_similarity=settings.ats_weight_text_similarity,
            format=settings.ats_weight_format,
            presence=settings.ats_weight_presence,
            impact=settings.ats_weight_impact,
            cert_bonus=settings.ats_cert_bonus_weight,
            tool_bonus=settings.ats_tool_bonus_weight,
            neutral_skill_coverage=settings.ats_neutral_skill_coverage,
        )


def bounded(value: Any) -> float:
    """Coerce to a float in [0, 1]; anything unusable becomes 0."""
    if isinstance(value, bool):
        return float(value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return max(0.0, min(1.0, number))


def _as_set(value: Any) -> frozenset:
    if not value:
        return frozenset()
    try:
        return frozenset(value)
    except TypeError:
        return frozenset()


def score_features(
    features: ResumeFeatureVector,
    profile: JobRequirementProfile,
    weights: ScoringWeights = ScoringWeights()
) -> CandidateScore:
    required = _as_set(profile.required_skills)
    matched = _as_set(getattr(features, "matched_skill_ids", None)) & required

    if required:
        coverage = bounded(getattr(features, "skill_coverage_ratio", 0.0))
    else:
        coverage = weights.neutral_skill_coverage

    text_similarity = bounded(getattr(features, "text_similarity", 0.0))
    format_score = bounded(getattr(features, "format_score", 0.0))
    presence = bounded(getattr(features, "presence_score", 0.0))
    impact = bounded(getattr(features, "impact_score", 0.0))
    cert_bonus = bounded(getattr(features, "cert_bonus", 0.0))
    tool_bonus = bounded(getattr(features, "tool_bonus", 0.0))

    core = (
        weights.skill_coverage * coverage
        + weights.text_similarity * text_similarity
        + weights.format * format_score
        + weights.presence * presence
        + weights.impact * impact
    )
    core = max(0.0, min(1.0, core))
    score = max(0.0, min(1.0, core + weights.cert_bonus * cert_bonus + weights.tool_bonus * tool_bonus))

    breakdown = {
        "skillCoverage": coverage,
        "textSimilarity": text_similarity,
        "formatScore": format_score,
        "impactScore": impact,
        "certBonus": cert_bonus,
        "toolBonus": tool_bonus,
        "presenceScore": presence,
        "matchedSkillsCount": len(matched),
        "requiredSkillsTotal": len(required),
        "coreScore": core,
    }
    return CandidateScore(score=score, core_score=core, breakdown=breakdown)
