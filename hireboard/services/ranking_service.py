"""
Ranking Aggregator

PURPOSE:
Rank every active application of a job by how well its resume fits.

HOW IT WORKS:
1. Load the job (404 if missing or owned by another organization)
2. Take the current skill taxonomy snapshot
3. Build the job requirement profile
4. Load active applications and the latest resume of each
5. Collapse applications backed by the same resume text (optional)
6. Extract features + score each resume (optionally on a thread pool)
7. Sort: score desc, then earliest application, then application id

Nothing is written back: a ranking call can always be retried safely.
"""

import hashlib
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Tuple

from hireboard.core.config import get_settings
from hireboard.models.ats import (
    ApplicationRecord,
    JobRequirementProfile,
    RankedCandidate,
    RankingResult,
    ResumeFeatureVector,
    ResumeRecord,
)
from hireboard.services.ats_errors import JobNotFoundError, ScoringError
from hireboard.services.feature_service import extract_features, top_terms
from hireboard.services.job_profile_service import ProfileFactors, build_job_profile
from hireboard.services.scoring_service import ScoringWeights, score_features

logger = logging.getLogger(__name__)


# Applications in these stages are never ranked
TERMINAL_STAGES = frozenset(["withdrawn", "rejected", "hired"])

TOP_JOB_TERMS = 12


def content_fingerprint(text: str) -> str:
    """Identity of a resume's content: whitespace and case do not matter."""
    normalized = " ".join(str(text or "").lower().split())
    return hashlib.sha1(normalized.encode("utf-8", "ignore")).hexdigest()


def _application_order(app: ApplicationRecord):
    # earliest first, undated applications last
    return (app.created_at is None, app.created_at or 0, app.application_id)


def ranking_sort_key(candidate: RankedCandidate):
    return (
        -candidate.score,
        candidate.created_at is None,
        candidate.created_at or 0,
        candidate.application_id,
    )


class RankingService:
    """
    Ranks applications for a job.

    Collaborators:
        repository      - fetch_job, fetch_active_applications, fetch_latest_resumes
        taxonomy_store  - get() -> SkillTaxonomy
    """

    def __init__(self, repository, taxonomy_store, weights: ScoringWeights = None, settings=None):
        self.settings = settings or get_settings()
        self.repository = repository
        self.taxonomy_store = taxonomy_store
        self.weights = weights or ScoringWeights.from_settings(self.settings)
        self.factors = ProfileFactors.from_settings(self.settings)

    # ---------- per resume ----------

    def _features(self, resume: ResumeRecord, profile: JobRequirementProfile) -> ResumeFeatureVector:
        try:
            return extract_features(resume.raw_text, profile, self.weights.neutral_skill_coverage)
        except Exception:
            # one unreadable resume must not abort the whole ranking
            logger.exception("Feature extraction failed for resume %s; scoring it as empty", resume.resume_id)
            coverage = 0.0 if profile.required_skills else self.weights.neutral_skill_coverage
            return ResumeFeatureVector.empty(skill_coverage_ratio=coverage)

    def _rank_one(
        self,
        entry: Tuple[ApplicationRecord, ResumeRecord, List[int]],
        profile: JobRequirementProfile
    ) -> RankedCandidate:
        app, resume, duplicates = entry
        features = self._features(resume, profile)

        try:
            result = score_features(features, profile, self.weights)
        except Exception as e:
            logger.exception("Scoring failed for resume %s", resume.resume_id)
            raise ScoringError(f"Scoring failed for resume {resume.resume_id}: {e}") from e

        return RankedCandidate(
            resume_id=resume.resume_id,
            application_id=app.application_id,
            candidate_id=app.candidate_id,
            created_at=app.created_at,
            score=result.score,
            breakdown=result.breakdown,
            matched_skills=sorted(features.matched_skill_ids),
            duplicate_application_ids=duplicates,
        )

    # ---------- de-duplication ----------

    def _collapse_duplicates(
        self,
        pairs: List[Tuple[ApplicationRecord, ResumeRecord]]
    ) -> List[Tuple[ApplicationRecord, ResumeRecord, List[int]]]:
        """
        Keep the earliest application per distinct resume text.
        Blank resumes are never collapsed.
        """
        groups: Dict[str, list] = {}
        entries = []
        for app, resume in sorted(pairs, key=lambda p: _application_order(p[0])):
            if not str(resume.raw_text or "").strip():
                entries.append((app, resume, []))
                continue
            key = content_fingerprint(resume.raw_text)
            if key in groups:
                groups[key][2].append(app.application_id)
                continue
            entry = (app, resume, [])
            groups[key] = entry
            entries.append(entry)
        return entries

    # ---------- main entry point ----------

    def rank_job(
        self,
        job_id: int,
        *,
        org_id: Optional[int] = None,
        resume_id: Optional[int] = None,
        candidate_id: Optional[int] = None,
        dedupe: bool = True,
        limit: Optional[int] = None
    ) -> RankingResult:
        job = self.repository.fetch_job(job_id)
        if job is None or (org_id is not None and job.org_id != org_id):
            raise JobNotFoundError(job_id)

        taxonomy = self.taxonomy_store.get()
        profile = build_job_profile(job, taxonomy, self.factors)
        job_terms = top_terms(profile.raw_description_text, TOP_JOB_TERMS)

        applications = [
            app for app in self.repository.fetch_active_applications(job_id, candidate_id=candidate_id)
            if (app.stage or "").lower() not in TERMINAL_STAGES
        ]
        if not applications:
            return RankingResult(job_id=job_id, ranked=[], resume_id=resume_id, top_job_terms=job_terms)

        resumes = self.repository.fetch_latest_resumes(
            [app.application_id for app in applications],
            resume_id=resume_id
        )
        # applications without a resume are left out, not scored as zero
        pairs = [(app, resumes[app.application_id]) for app in applications if app.application_id in resumes]

        if dedupe:
            entries = self._collapse_duplicates(pairs)
        else:
            entries = [(app, resume, []) for app, resume in pairs]
        deduped = any(dups for _, _, dups in entries)

        workers = max(1, int(self.settings.ats_max_workers or 1))
        if workers > 1 and len(entries) > 1:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                ranked = list(pool.map(lambda e: self._rank_one(e, profile), entries))
        else:
            ranked = [self._rank_one(e, profile) for e in entries]

        ranked.sort(key=ranking_sort_key)

        if limit is None:
            limit = self.settings.ats_rank_limit
        if limit and limit > 0:
            ranked = ranked[:limit]

        logger.info(
            "Ranked %d resumes for job %s (%d applications, deduped=%s)",
            len(ranked), job_id, len(applications), deduped
        )
        return RankingResult(
            job_id=job_id,
            ranked=ranked,
            deduped=deduped,
            resume_id=resume_id,
            top_job_terms=job_terms,
        )


# ============================================================
# CONVENIENCE FUNCTIONS
# ============================================================

_ranking_service: Optional[RankingService] = None


def get_ranking_service() -> RankingService:
    """Process-wide ranking service backed by PostgreSQL/MongoDB."""
    global _ranking_service
    if _ranking_service is None:
        from hireboard.services.ats_repository import get_ats_repository, get_taxonomy_store
        _ranking_service = RankingService(get_ats_repository(), get_taxonomy_store())
    return _ranking_service
