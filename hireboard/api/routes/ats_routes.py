"""
ATS Routes (employers only)

GET  /ats/jobs/{job_id}/rank                       - Rank applicants for a job
POST /ats/jobs/{job_id}/backfill                   - Re-parse a job's resumes
POST /ats/applications/{application_id}/resume     - Upload + ingest a resume
GET  /ats/taxonomy                                 - Current skill taxonomy
POST /ats/taxonomy/refresh                         - Reload taxonomy now
"""

from fastapi import APIRouter, HTTPException, Depends, Query, Path, UploadFile, File
from typing import Optional

from hireboard.core.auth import get_current_employer
from hireboard.models.ats import RankingResult
from hireboard.services.ats_errors import (
    ApplicationNotFoundError, JobNotFoundError, ScoringError, TaxonomyUnavailableError
)
from hireboard.services.ats_repository import get_taxonomy_store
from hireboard.services.ingest_service import get_ingest_service
from hireboard.services.ranking_service import get_ranking_service
from hireboard.utils.file_upload import extract_text_from_file
from hireboard.schemas.schemas import (
    BreakdownResponse, RankedCandidateResponse, RankResponse, ResumeIngestResponse,
    BackfillResponse, TaxonomySkillResponse, TaxonomyResponse, MessageResponse, ErrorResponse
)

router = APIRouter(
    prefix="/ats",
    tags=["ATS"],
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}
)

TAXONOMY_RETRY_AFTER_SECONDS = 30


def _taxonomy_unavailable(e: TaxonomyUnavailableError) -> HTTPException:
    return HTTPException(
        status_code=503,
        detail="Skill taxonomy unavailable, try again shortly",
        headers={"Retry-After": str(TAXONOMY_RETRY_AFTER_SECONDS)}
    )


def _rank_response(result: RankingResult) -> RankResponse:
    return RankResponse(
        ok=result.ok,
        job_id=result.job_id,
        deduped=result.deduped,
        resume_id=result.resume_id,
        top_job_terms=result.top_job_terms,
        ranked=[
            RankedCandidateResponse(
                resume_id=c.resume_id,
                application_id=c.application_id,
                candidate_id=c.candidate_id,
                created_at=c.created_at,
                score=c.score,
                score_pct=round(c.score * 100),
                breakdown=BreakdownResponse.model_validate(c.breakdown),
                matched_skills=c.matched_skills,
                deduplicated=c.is_deduplicated,
                duplicate_application_ids=c.duplicate_application_ids
            ) for c in result.ranked
        ]
    )


# ============================================================
# RANKING
# ============================================================

@router.get("/jobs/{job_id}/rank", response_model=RankResponse)
def rank_job(
    job_id: int = Path(..., ge=1),
    resume_id: Optional[int] = Query(None, ge=1, description="Score a single resume"),
    candidate_id: Optional[int] = Query(None, ge=1, description="Only this candidate's applications"),
    dedupe: bool = Query(True, description="Collapse applications sharing identical resume text"),
    limit: Optional[int] = Query(None, ge=0, le=500, description="0 = return everyone"),
    employer: dict = Depends(get_current_employer),
    service=Depends(get_ranking_service)
):
    """
    Rank every active application of a job by resume fit.

    Sorted by score (desc), then earliest application. Applications without
    a resume are left out. Safe to retry: nothing is written.
    """
    try:
        result = service.rank_job(
            job_id,
            org_id=employer["org_id"],
            resume_id=resume_id,
            candidate_id=candidate_id,
            dedupe=dedupe,
            limit=limit
        )
    except JobNotFoundError:
        raise HTTPException(status_code=404, detail="Job not found")
    except TaxonomyUnavailableError as e:
        raise _taxonomy_unavailable(e)
    except ScoringError:
        raise HTTPException(status_code=500, detail="Ranking failed")

    return _rank_response(result)


@router.post("/jobs/{job_id}/backfill", response_model=BackfillResponse)
def backfill_job(
    job_id: int = Path(..., ge=1),
    employer: dict = Depends(get_current_employer),
    service=Depends(get_ingest_service)
):
    """Re-parse all stored resumes of a job against the current taxonomy."""
    try:
        summary = service.backfill_job(job_id, org_id=employer["org_id"])
    except JobNotFoundError:
        raise HTTPException(status_code=404, detail="Job not found")
    except TaxonomyUnavailableError as e:
        raise _taxonomy_unavailable(e)

    return BackfillResponse(
        job_id=summary.job_id,
        total=summary.total,
        ok_count=summary.ok_count,
        failed_count=summary.failed_count
    )


# ============================================================
# RESUME UPLOAD
# ============================================================

@router.post("/applications/{application_id}/resume", response_model=ResumeIngestResponse, status_code=201)
async def upload_resume(
    application_id: int = Path(..., ge=1),
    file: UploadFile = File(..., description="Resume file (PDF, DOCX, or TXT)"),
    employer: dict = Depends(get_current_employer),
    service=Depends(get_ingest_service)
):
    """
    Upload a resume for an application.

    The text is extracted, parsed against the skill taxonomy and stored;
    the next ranking call picks it up as the application's latest resume.
    """
    text, filename = await extract_text_from_file(file)

    try:
        result = service.ingest_resume(application_id, text, filename, org_id=employer["org_id"])
    except ApplicationNotFoundError:
        raise HTTPException(status_code=404, detail="Application not found")
    except TaxonomyUnavailableError as e:
        raise _taxonomy_unavailable(e)

    return ResumeIngestResponse(
        resume_id=result.resume_id,
        application_id=result.application_id,
        filename=filename,
        format_score=result.format_score,
        skills=result.skills,
        word_count=result.word_count,
        parser_version=result.parser_version
    )


# ============================================================
# TAXONOMY
# ============================================================

@router.get("/taxonomy", response_model=TaxonomyResponse)
def get_taxonomy(
    employer: dict = Depends(get_current_employer),
    store=Depends(get_taxonomy_store)
):
    """Current skill taxonomy snapshot."""
    try:
        taxonomy = store.get()
    except TaxonomyUnavailableError as e:
        raise _taxonomy_unavailable(e)

    skills = [
        TaxonomySkillResponse(slug=s.slug, aliases=list(s.aliases), kind=s.kind, weight=s.weight)
        for s in taxonomy.skills
    ]
    return TaxonomyResponse(skills=skills, total=len(skills))


@router.post("/taxonomy/refresh", response_model=MessageResponse)
def refresh_taxonomy(
    employer: dict = Depends(get_current_employer),
    store=Depends(get_taxonomy_store)
):
    """Reload the taxonomy from the database without waiting for the TTL."""
    try:
        taxonomy = store.refresh(raise_on_failure=True)
    except TaxonomyUnavailableError as e:
        raise _taxonomy_unavailable(e)

    return MessageResponse(message=f"Taxonomy reloaded ({len(taxonomy)} skills)")
