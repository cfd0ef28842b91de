"""
ATS Repository - persistence collaborator for the ranking engine.

PostgreSQL (raw SQL via SQLAlchemy text()):
    jobs, job_required_skills + skills, applications, resumes, skills_taxonomy
MongoDB (pymongo, via mongo_service):
    raw_resumes (resume text), parsed_resumes (parser output)

The ranking engine only ever reads through this class; ingest/backfill are
the only writers.
"""

import logging
from typing import Dict, Iterable, List, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from hireboard.core.config import get_settings
from hireboard.db.postgres import get_db_session, execute_raw_sql
from hireboard.models.ats import ApplicationRecord, CanonicalSkill, JobRecord, ResumeRecord
from hireboard.services.ats_errors import TaxonomyUnavailableError
from hireboard.services.mongo_service import RawResumeService, ParsedResumeService
from hireboard.services.ranking_service import TERMINAL_STAGES
from hireboard.services.taxonomy_service import TaxonomyStore

logger = logging.getLogger(__name__)


def _application(row: dict) -> ApplicationRecord:
    return ApplicationRecord(
        application_id=row["application_id"],
        job_id=row["job_id"],
        candidate_id=row["student_id"],
        stage=row["status"] or "applied",
        created_at=row["applied_at"],
    )


class ATSRepository:
    """
    Reads jobs/applications/resumes for ranking and writes resumes on ingest.
    """

    def __init__(self, raw_resumes: RawResumeService = None, parsed_resumes: ParsedResumeService = None):
        self.raw_resumes = raw_resumes or RawResumeService()
        self.parsed_resumes = parsed_resumes or ParsedResumeService()

    # ============================================================
    # JOBS & APPLICATIONS
    # ============================================================

    def fetch_job(self, job_id: int) -> Optional[JobRecord]:
        """Job row plus its mandatory and preferred skill names."""
        rows = execute_raw_sql(
            "SELECT job_id, company_id, title, description FROM jobs WHERE job_id = :id",
            {"id": job_id}
        )
        if not rows:
            return None
        job = rows[0]

        skills = execute_raw_sql("""
            SELECT sk.skill_name, jrs.is_mandatory
            FROM job_required_skills jrs
            JOIN skills sk ON jrs.skill_id = sk.skill_id
            WHERE jrs.job_id = :id
            ORDER BY sk.skill_name
        """, {"id": job_id})

        return JobRecord(
            job_id=job["job_id"],
            org_id=job["company_id"],
            title=job["title"] or "",
            description=job["description"] or "",
            required_skills=[s["skill_name"] for s in skills if s["is_mandatory"]],
            preferred_skills=[s["skill_name"] for s in skills if not s["is_mandatory"]],
        )

    def fetch_active_applications(self, job_id: int, candidate_id: int = None) -> List[ApplicationRecord]:
        """Applications for a job that are not withdrawn, rejected or hired."""
        sql = """
            SELECT application_id, job_id, student_id, status, applied_at
            FROM applications
            WHERE job_id = :job_id
              AND (status IS NULL OR LOWER(status) <> ALL(:terminal))
        """
        params = {"job_id": job_id, "terminal": sorted(TERMINAL_STAGES)}
        if candidate_id is not None:
            sql += " AND student_id = :student_id"
            params["student_id"] = candidate_id
        sql += " ORDER BY applied_at, application_id"
        return [_application(r) for r in execute_raw_sql(sql, params)]

    def fetch_application(self, application_id: int) -> Optional[ApplicationRecord]:
        rows = execute_raw_sql("""
            SELECT application_id, job_id, student_id, status, applied_at
            FROM applications
            WHERE application_id = :id
        """, {"id": application_id})
        return _application(rows[0]) if rows else None

    # ============================================================
    # RESUMES
    # ============================================================

    def _with_text(self, rows: List[dict]) -> List[ResumeRecord]:
        texts = self.raw_resumes.get_texts(r["raw_mongo_id"] for r in rows)
        records = []
        for r in rows:
            if r["raw_mongo_id"] not in texts:
                logger.warning("Resume %s has no raw document in MongoDB; skipping", r["resume_id"])
                continue
            records.append(ResumeRecord(
                resume_id=r["resume_id"],
                application_id=r["application_id"],
                raw_text=texts[r["raw_mongo_id"]],
                created_at=r["created_at"],
                format_score=r["format_score"],
                raw_mongo_id=r["raw_mongo_id"],
            ))
        return records

    def fetch_latest_resumes(self, application_ids: Iterable[int], resume_id: int = None) -> Dict[int, ResumeRecord]:
        """Latest resume per application: {application_id: ResumeRecord}."""
        ids = list(application_ids)
        if not ids:
            return {}
        sql = """
            SELECT DISTINCT ON (application_id)
                   resume_id, application_id, raw_mongo_id, format_score, created_at
            FROM resumes
            WHERE application_id = ANY(:ids)
        """
        params = {"ids": ids}
        if resume_id is not None:
            sql += " AND resume_id = :resume_id"
            params["resume_id"] = resume_id
        sql += " ORDER BY application_id, created_at DESC, resume_id DESC"

        records = self._with_text(execute_raw_sql(sql, params))
        return {r.application_id: r for r in records}

    def list_resumes_for_job(self, job_id: int) -> List[ResumeRecord]:
        """Every stored resume of every application of a job (for backfill)."""
        rows = execute_raw_sql("""
            SELECT r.resume_id, r.application_id, r.raw_mongo_id, r.format_score, r.created_at
            FROM resumes r
            JOIN applications a ON r.application_id = a.application_id
            WHERE a.job_id = :job_id
            ORDER BY r.resume_id
        """, {"job_id": job_id})
        return self._with_text(rows)

    def store_resume(
        self,
        application_id: int,
        raw_text: str,
        filename: str,
        parsed: dict,
        format_score: float
    ) -> int:
        """Store raw + parsed documents in MongoDB and the resumes row in PostgreSQL."""
        raw_id = self.raw_resumes.insert(application_id, raw_text, filename)

        try:
            with get_db_session() as db:
                result = db.execute(
                    text("""
                        INSERT INTO resumes (application_id, raw_mongo_id, filename, format_score, parser_version)
                        VALUES (:application_id, :raw_id, :filename, :format_score, :version)
                        RETURNING resume_id
                    """),
                    {
                        "application_id": application_id, "raw_id": raw_id, "filename": filename,
                        "format_score": format_score, "version": parsed.get("version")
                    }
                )
                resume_id = result.fetchone()[0]
        except Exception:
            # no resumes row points at the raw document, drop it
            logger.warning("Resume row insert failed for application %s; removing raw resume %s", application_id, raw_id)
            self.raw_resumes.delete(raw_id)
            raise

        self.parsed_resumes.upsert(raw_id, application_id, parsed, format_score)
        self.raw_resumes.mark_as_parsed(raw_id)
        return resume_id

    def update_parsed_resume(self, resume: ResumeRecord, parsed: dict, format_score: float) -> None:
        """Overwrite parser output for an existing resume (backfill)."""
        with get_db_session() as db:
            db.execute(
                text("""
                    UPDATE resumes
                    SET format_score = :format_score, parser_version = :version, updated_at = NOW()
                    WHERE resume_id = :resume_id
                """),
                {"format_score": format_score, "version": parsed.get("version"), "resume_id": resume.resume_id}
            )
        self.parsed_resumes.upsert(resume.raw_mongo_id, resume.application_id, parsed, format_score)
        self.raw_resumes.mark_as_parsed(resume.raw_mongo_id)

    # ============================================================
    # TAXONOMY
    # ============================================================

    def fetch_taxonomy(self) -> List[CanonicalSkill]:
        """All canonical skills; database failures become TaxonomyUnavailableError."""
        try:
            rows = execute_raw_sql(
                "SELECT slug, aliases, locale_aliases, kind, weight FROM skills_taxonomy ORDER BY slug"
            )
        except SQLAlchemyError as e:
            raise TaxonomyUnavailableError(f"Skill taxonomy could not be loaded: {e}") from e

        return [
            CanonicalSkill(
                slug=r["slug"],
                aliases=tuple(r["aliases"] or ()) + tuple(r["locale_aliases"] or ()),
                kind=r["kind"] or "skill",
                weight=r["weight"] if r["weight"] is not None else 1.0,
            )
            for r in rows
        ]

    def upsert_taxonomy(self, skills: Iterable[CanonicalSkill]) -> int:
        """Insert or update canonical skills. Returns the number written."""
        count = 0
        with get_db_session() as db:
            for skill in skills:
                db.execute(
                    text("""
                        INSERT INTO skills_taxonomy (slug, aliases, kind, weight)
                        VALUES (:slug, :aliases, :kind, :weight)
                        ON CONFLICT (slug) DO UPDATE
                        SET aliases = EXCLUDED.aliases, kind = EXCLUDED.kind, weight = EXCLUDED.weight
                    """),
                    {"slug": skill.slug, "aliases": list(skill.aliases), "kind": skill.kind, "weight": skill.weight}
                )
                count += 1
        return count


# ============================================================
# CONVENIENCE FUNCTIONS
# ============================================================

_repository: Optional[ATSRepository] = None
_taxonomy_store: Optional[TaxonomyStore] = None


def get_ats_repository() -> ATSRepository:
    global _repository
    if _repository is None:
        _repository = ATSRepository()
    return _repository


def get_taxonomy_store() -> TaxonomyStore:
    """Process-wide taxonomy snapshot, reloaded from skills_taxonomy."""
    global _taxonomy_store
    if _taxonomy_store is None:
        settings = get_settings()
        _taxonomy_store = TaxonomyStore(
            get_ats_repository().fetch_taxonomy,
            ttl_seconds=settings.ats_taxonomy_ttl_seconds
        )
    return _taxonomy_store
