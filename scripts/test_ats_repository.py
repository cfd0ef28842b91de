#!/usr/bin/env python3
"""
ATS Repository Test Script

Runs ATSRepository against recorded SQL and in-memory resume collections.

Tests:
1. Active applications (NULL status, terminal stages)
2. Resume storage (raw document removed when the resumes row fails)
3. Taxonomy rows (locale aliases merged into aliases)

No database needed.
Run: python scripts/test_ats_repository.py
"""
import sys
sys.path.insert(0, '.')

from contextlib import contextmanager
from datetime import datetime
from unittest.mock import patch

from sqlalchemy.exc import SQLAlchemyError

from hireboard.services.ats_errors import TaxonomyUnavailableError
from hireboard.services.ats_repository import ATSRepository
from hireboard.services.taxonomy_service import SkillTaxonomy

RAW_ID = "665f1c2e9b1e8a0012345678"
URDU_PYTHON = "پائتھون"
URDU_AND = "اور"


class SQLRecorder:
    """Stands in for execute_raw_sql: records each call, returns fixed rows."""

    def __init__(self, rows):
        self.rows = rows
        self.calls = []

    def __call__(self, sql, params=None):
        self.calls.append((sql, params))
        return [dict(r) for r in self.rows]


class FakeRawResumes:
    def __init__(self):
        self.deleted = []
        self.parsed = []

    def insert(self, application_id, resume_text, filename=None):
        return RAW_ID

    def mark_as_parsed(self, mongo_id):
        self.parsed.append(mongo_id)
        return True

    def delete(self, mongo_id):
        self.deleted.append(mongo_id)
        return True


class FakeParsedResumes:
    def __init__(self):
        self.upserts = []

    def upsert(self, raw_resume_id, application_id, parsed_data, format_score):
        self.upserts.append(raw_resume_id)


class FakeResult:
    def __init__(self, row):
        self.row = row

    def fetchone(self):
        return self.row


def make_repository():
    return ATSRepository(raw_resumes=FakeRawResumes(), parsed_resumes=FakeParsedResumes())


def session_returning(resume_id):
    @contextmanager
    def session():
        class Session:
            def execute(self, statement, params=None):
                return FakeResult((resume_id,))
        yield Session()
    return session


@contextmanager
def failing_session():
    class Session:
        def execute(self, statement, params=None):
            raise SQLAlchemyError('insert or update on table "resumes" violates foreign key constraint')
    yield Session()


# ============================================================
# APPLICATIONS
# ============================================================

def test_active_applications_with_null_status():
    """Rows with no status are active and read back as 'applied'."""
    print("\n[1] Testing active applications...")
    recorder = SQLRecorder([
        {"application_id": 1, "job_id": 7, "student_id": 100, "status": None,
         "applied_at": datetime(2024, 3, 1, 9, 0)},
        {"application_id": 2, "job_id": 7, "student_id": 101, "status": "Interview",
         "applied_at": datetime(2024, 3, 1, 9, 5)},
    ])

    with patch("hireboard.services.ats_repository.execute_raw_sql", recorder):
        applications = make_repository().fetch_active_applications(7)

    assert [a.application_id for a in applications] == [1, 2]
    assert applications[0].stage == "applied"
    assert applications[1].candidate_id == 101

    sql, params = recorder.calls[0]
    # NULL status must not drop out of the terminal-stage filter
    assert "status IS NULL" in sql
    assert "<> ALL(:terminal)" in sql
    assert params == {"job_id": 7, "terminal": ["hired", "rejected", "withdrawn"]}
    print("    ✅ NULL status kept as 'applied'")


def test_active_applications_for_candidate():
    recorder = SQLRecorder([])
    with patch("hireboard.services.ats_repository.execute_raw_sql", recorder):
        assert make_repository().fetch_active_applications(7, candidate_id=100) == []

    sql, params = recorder.calls[0]
    assert "AND student_id = :student_id" in sql
    assert sql.rstrip().endswith("ORDER BY applied_at, application_id")
    assert params["student_id"] == 100
    print("    ✅ Candidate filter applied")


# ============================================================
# RESUMES
# ============================================================

def test_store_resume():
    print("\n[2] Testing resume storage...")
    repo = make_repository()

    with patch("hireboard.services.ats_repository.get_db_session", session_returning(42)):
        resume_id = repo.store_resume(5, "Python developer", "cv.txt", {"version": "v1"}, 0.8)

    assert resume_id == 42
    assert repo.parsed_resumes.upserts == [RAW_ID]
    assert repo.raw_resumes.parsed == [RAW_ID]
    assert repo.raw_resumes.deleted == []
    print("    ✅ Raw, parsed and resumes row stored")


def test_store_resume_removes_orphan_raw_document():
    """A failed resumes insert leaves no raw document behind."""
    repo = make_repository()

    with patch("hireboard.services.ats_repository.get_db_session", failing_session):
        try:
            repo.store_resume(5, "Python developer", "cv.txt", {"version": "v1"}, 0.8)
            raise AssertionError("Expected SQLAlchemyError")
        except SQLAlchemyError:
            pass

    assert repo.raw_resumes.deleted == [RAW_ID]
    assert repo.raw_resumes.parsed == []
    assert repo.parsed_resumes.upserts == []
    print("    ✅ Raw resume removed after failed insert")


# ============================================================
# TAXONOMY
# ============================================================

def test_fetch_taxonomy_merges_locale_aliases():
    print("\n[3] Testing taxonomy rows...")
    recorder = SQLRecorder([
        {"slug": "python", "aliases": ["py"], "locale_aliases": [URDU_PYTHON], "kind": "skill", "weight": 1.0},
        {"slug": "sql", "aliases": ["PostgreSQL"], "locale_aliases": None, "kind": None, "weight": None},
    ])

    with patch("hireboard.services.ats_repository.execute_raw_sql", recorder):
        skills = make_repository().fetch_taxonomy()

    assert "locale_aliases" in recorder.calls[0][0]
    python, sql = skills
    assert python.aliases == ("py", URDU_PYTHON)
    assert sql.aliases == ("PostgreSQL",)
    assert sql.kind == "skill"
    assert sql.weight == 1.0

    mentions = SkillTaxonomy(skills).find_mentions(f"{URDU_PYTHON} {URDU_AND} SQL")
    assert set(mentions) == {"python", "sql"}
    print("    ✅ Locale aliases matched in resume text")


def test_fetch_taxonomy_database_down():
    def unreachable(sql, params=None):
        raise SQLAlchemyError("could not connect to server")

    with patch("hireboard.services.ats_repository.execute_raw_sql", unreachable):
        try:
            make_repository().fetch_taxonomy()
            raise AssertionError("Expected TaxonomyUnavailableError")
        except TaxonomyUnavailableError as e:
            assert e.retryable
    print("    ✅ Database failure -> TaxonomyUnavailableError")


def main():
    print("=" * 60)
    print("ATS REPOSITORY TEST")
    print("=" * 60)

    test_active_applications_with_null_status()
    test_active_applications_for_candidate()
    test_store_resume()
    test_store_resume_removes_orphan_raw_document()
    test_fetch_taxonomy_merges_locale_aliases()
    test_fetch_taxonomy_database_down()

    print("\n" + "=" * 60)
    print("✅ ALL REPOSITORY TESTS PASSED!")
    print("=" * 60)


if __name__ == "__main__":
    main()
