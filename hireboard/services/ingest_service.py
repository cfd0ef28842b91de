"""
Resume Ingest & Backfill Service

INGEST (one upload):
1. Check the application exists (and belongs to the caller's organization)
2. Parse the text against the current skill taxonomy
3. Compute the ATS format score
4. Store raw text + parser output (MongoDB) and the resumes row (PostgreSQL)

BACKFILL (one job):
Re-parse every stored resume of a job against the current taxonomy, e.g.
after new skills or aliases were added. A resume that fails is logged and
counted; it never aborts the batch.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from hireboard.services.ats_errors import ApplicationNotFoundError, JobNotFoundError
from hireboard.services.resume_parser import ats_format_score, parse_resume

logger = logging.getLogger(__name__)


@dataclass
class IngestResult:
    resume_id: int
    application_id: int
    format_score: float
    skills: List[str] = field(default_factory=list)
    word_count: int = 0
    parser_version: str = ""


@dataclass
class BackfillSummary:
    job_id: int
    total: int = 0
    ok_count: int = 0
    failed_count: int = 0


class ResumeIngestService:
    """
    Writes resumes through the ATS repository.

    Usage:
        service = get_ingest_service()
        result = service.ingest_resume(42, text, "jane_doe.pdf")
    """

    def __init__(self, repository, taxonomy_store):
        self.repository = repository
        self.taxonomy_store = taxonomy_store

    def _check_job(self, job_id: int, org_id: Optional[int]):
        job = self.repository.fetch_job(job_id)
        if job is None or (org_id is not None and job.org_id != org_id):
            return None
        return job

    def ingest_resume(
        self,
        application_id: int,
        raw_text: str,
        filename: str = None,
        org_id: Optional[int] = None
    ) -> IngestResult:
        application = self.repository.fetch_application(application_id)
        if application is None or self._check_job(application.job_id, org_id) is None:
            raise ApplicationNotFoundError(application_id)

        taxonomy = self.taxonomy_store.get()
        parsed = parse_resume(raw_text, taxonomy)
        format_score = ats_format_score(parsed)

        resume_id = self.repository.store_resume(
            application_id, raw_text, filename, parsed.to_dict(), format_score
        )
        logger.info(
            "Ingested resume %s for application %s (%d skills, format %.2f)",
            resume_id, application_id, len(parsed.skills), format_score
        )
        return IngestResult(
            resume_id=resume_id,
            application_id=application_id,
            format_score=format_score,
            skills=parsed.skill_slugs,
            word_count=parsed.word_count,
            parser_version=parsed.version,
        )

    def backfill_job(self, job_id: int, org_id: Optional[int] = None) -> BackfillSummary:
        if self._check_job(job_id, org_id) is None:
            raise JobNotFoundError(job_id)

        taxonomy = self.taxonomy_store.get()
        resumes = self.repository.list_resumes_for_job(job_id)
        summary = BackfillSummary(job_id=job_id, total=len(resumes))

        for resume in resumes:
            try:
                parsed = parse_resume(resume.raw_text, taxonomy)
                self.repository.update_parsed_resume(resume, parsed.to_dict(), ats_format_score(parsed))
                summary.ok_count += 1
            except Exception:
                logger.exception("Backfill failed for resume %s", resume.resume_id)
                summary.failed_count += 1

        logger.info(
            "Backfill for job %s: %d ok, %d failed of %d",
            job_id, summary.ok_count, summary.failed_count, summary.total
        )
        return summary


# ============================================================
# CONVENIENCE FUNCTIONS
# ============================================================

_ingest_service: Optional[ResumeIngestService] = None


def get_ingest_service() -> ResumeIngestService:
    global _ingest_service
    if _ingest_service is None:
        from hireboard.services.ats_repository import get_ats_repository, get_taxonomy_store
        _ingest_service = ResumeIngestService(get_ats_repository(), get_taxonomy_store())
    return _ingest_service
