"""
Job Requirement Profile Builder

Derives the target skill set for a job from:
1. Its explicit skill list (mandatory + preferred rows in job_required_skills)
2. Skills mentioned in its free-text description

Explicit requirements weigh more than incidental description phrasing:

    skill_weights[slug] = taxonomy weight × source factor
    explicit (1.0) > preferred (0.75) > description only (0.5)

Built fresh on every ranking request, never persisted.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List

from hireboard.models.ats import CanonicalSkill, JobRecord, JobRequirementProfile
from hireboard.services.taxonomy_service import SkillTaxonomy, normalize_alias

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProfileFactors:
    explicit: float = 1.0
    preferred: float = 0.75
    description: float = 0.5

    @classmethod
    def from_settings(cls, settings) -> "ProfileFactors":
        return cls(
            explicit=settings.ats_explicit_skill_weight,
            preferred=settings.ats_preferred_skill_weight,
            description=settings.ats_description_skill_weight,
        )


def _canonicalize(entries: List[str], taxonomy: SkillTaxonomy, adhoc: Dict[str, CanonicalSkill]) -> List[str]:
    """Resolve each list entry to a slug; unknown entries become ad-hoc skills."""
    slugs = []
    for entry in entries or []:
        slug = taxonomy.resolve(entry)
        if slug is None:
            slug = normalize_alias(entry)
            if not slug:
                continue
            if slug not in adhoc:
                logger.info("Job skill '%s' is not in the taxonomy; matching it literally", entry)
                adhoc[slug] = CanonicalSkill(slug=slug)
        slugs.append(slug)
    return slugs


def build_job_profile(
    job: JobRecord,
    taxonomy: SkillTaxonomy,
    factors: ProfileFactors = ProfileFactors()
) -> JobRequirementProfile:
    """
    Build a JobRequirementProfile.

    A job with no explicit skills and no skills in its description gets an
    empty required set; skill coverage then falls back to the neutral default.
    """
    adhoc: Dict[str, CanonicalSkill] = {}
    mandatory = _canonicalize(job.required_skills, taxonomy, adhoc)
    preferred = _canonicalize(job.preferred_skills, taxonomy, adhoc)
    profile_taxonomy = taxonomy.with_extra(adhoc.values())

    description = job.description or ""
    described = profile_taxonomy.find_mentions(description)

    # lowest factor first so stronger sources overwrite weaker ones
    sources = {}
    for slug in described:
        sources[slug] = factors.description
    for slug in preferred:
        sources[slug] = factors.preferred
    for slug in mandatory:
        sources[slug] = factors.explicit

    skill_weights = {}
    for slug in sorted(sources):
        skill = profile_taxonomy.skill(slug)
        base = skill.weight if skill is not None else 1.0
        skill_weights[slug] = base * sources[slug]

    explicit = frozenset(mandatory) | frozenset(preferred)
    return JobRequirementProfile(
        required_skills=frozenset(sources),
        skill_weights=skill_weights,
        raw_description_text=description,
        explicit_skills=explicit,
        description_skills=frozenset(described) - explicit,
        taxonomy=profile_taxonomy,
    )
