"""
Shared test fixtures for the ATS test scripts.

Everything here is in-memory: no PostgreSQL or MongoDB needed.
"""
import sys
sys.path.insert(0, '.')

from datetime import datetime, timedelta

from hireboard.core.config import Settings
from hireboard.models.ats import ApplicationRecord, CanonicalSkill, JobRecord, ResumeRecord
from hireboard.services.ats_errors import TaxonomyUnavailableError
from hireboard.services.ranking_service import RankingService
from hireboard.services.taxonomy_service import SkillTaxonomy, TaxonomyStore


# ============================================================
# TAXONOMY
# ============================================================

SKILLS = [
    CanonicalSkill("python", ("Python3",), "skill"),
    CanonicalSkill("sql", ("PostgreSQL", "Postgres", "MySQL"), "skill"),
    CanonicalSkill("java", (), "skill"),
    CanonicalSkill("javascript", ("JS",), "skill"),
    CanonicalSkill("fastapi", (), "skill"),
    CanonicalSkill("machine learning", ("ML",), "skill"),
    CanonicalSkill("docker", (), "tool"),
    CanonicalSkill("git", ("GitHub",), "tool"),
    CanonicalSkill("aws", ("Amazon Web Services",), "platform"),
    CanonicalSkill("aws certified", ("AWS Certified Developer",), "cert"),
    CanonicalSkill("leadership", (), "soft", 0.5),
]


def make_taxonomy() -> SkillTaxonomy:
    return SkillTaxonomy(SKILLS)


def make_store(skills=None) -> TaxonomyStore:
    skills = SKILLS if skills is None else skills
    return TaxonomyStore(lambda: list(skills), ttl_seconds=300)


def failing_loader():
    raise TaxonomyUnavailableError("skills_taxonomy unreachable")


# ============================================================
# RESUMES
# ============================================================

RESUME_STRONG = """Jane Doe
jane.doe@example.com | +92 300 1234567 | linkedin.com/in/janedoe | github.com/janedoe

Summary
Backend engineer building data-heavy Python services.

Experience
Software Engineer, Acme Corp (Jan 2021 - Present)
- Built REST APIs in Python and FastAPI serving 2M requests per day
- Reduced PostgreSQL query latency by 40% through indexing
- Automated deployments with Docker, saving $12,000 per year

Education
BS Computer Science, FAST NUCES, 2016 - 2020, GPA 3.6

Skills
Python, PostgreSQL, Docker, Git
"""

RESUME_NO_MATCH = """John Smith
john.smith@example.com

Experience
Store Manager, City Mart (2018 - 2022)
- Managed a team of 12 cashiers
- Handled inventory and vendor relations

Education
BA English Literature, 2014 - 2018
"""

RESUME_JS = """Alex Lee
alex@example.com

Experience
Frontend developer. I use JavaScript daily to build dashboards
and internal tools for the operations team.
"""

JOB_DESCRIPTION = (
    "We are hiring a backend engineer to build Python APIs on PostgreSQL. "
    "You will design services, tune queries and ship reliable backend features."
)


# ============================================================
# IN-MEMORY REPOSITORY
# ============================================================

BASE_TIME = datetime(2024, 3, 1, 9, 0, 0)


def at(minutes: int) -> datetime:
    return BASE_TIME + timedelta(minutes=minutes)


class InMemoryRepository:
    """Stands in for ATSRepository (same method names and return types)."""

    def __init__(self, jobs=None, applications=None, resumes=None, skills=None):
        self.jobs = {j.job_id: j for j in (jobs or [])}
        self.applications = list(applications or [])
        self.resumes = list(resumes or [])
        self.skills = list(SKILLS if skills is None else skills)
        self.updated = []

    def fetch_job(self, job_id):
        return self.jobs.get(job_id)

    def fetch_active_applications(self, job_id, candidate_id=None):
        return [
            a for a in self.applications
            if a.job_id == job_id and (candidate_id is None or a.candidate_id == candidate_id)
        ]

    def fetch_application(self, application_id):
        for a in self.applications:
            if a.application_id == application_id:
                return a
        return None

    def fetch_latest_resumes(self, application_ids, resume_id=None):
        latest = {}
        for r in sorted(self.resumes, key=lambda r: (r.created_at, r.resume_id)):
            if r.application_id not in application_ids:
                continue
            if resume_id is not None and r.resume_id != resume_id:
                continue
            latest[r.application_id] = r
        return latest

    def list_resumes_for_job(self, job_id):
        app_ids = {a.application_id for a in self.applications if a.job_id == job_id}
        return [r for r in self.resumes if r.application_id in app_ids]

    def store_resume(self, application_id, raw_text, filename, parsed, format_score):
        resume_id = max([r.resume_id for r in self.resumes] or [0]) + 1
        self.resumes.append(ResumeRecord(
            resume_id=resume_id, application_id=application_id, raw_text=raw_text,
            created_at=at(1000 + resume_id), format_score=format_score
        ))
        return resume_id

    def update_parsed_resume(self, resume, parsed, format_score):
        self.updated.append((resume.resume_id, format_score))

    def fetch_taxonomy(self):
        return list(self.skills)


def python_sql_job(job_id=1, org_id=10, description=JOB_DESCRIPTION):
    return JobRecord(
        job_id=job_id, org_id=org_id, title="Backend Engineer",
        description=description, required_skills=["Python", "SQL"]
    )


def application(application_id, minutes, job_id=1, candidate_id=None, stage="applied"):
    return ApplicationRecord(
        application_id=application_id, job_id=job_id,
        candidate_id=candidate_id if candidate_id is not None else 100 + application_id,
        stage=stage, created_at=at(minutes)
    )


def resume(resume_id, application_id, text, minutes=0):
    return ResumeRecord(resume_id=resume_id, application_id=application_id, raw_text=text, created_at=at(minutes))


def make_service(repository, store=None, **settings) -> RankingService:
    return RankingService(repository, store or make_store(), settings=Settings(**settings))
