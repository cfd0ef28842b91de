#!/usr/bin/env python3
"""
Scoring Test Script

Tests:
1. Job requirement profiles (explicit > preferred > description weights)
2. Feature extraction (skill coverage, text similarity, bonuses)
3. Scoring weights validation
4. Score properties: deterministic, bounded, monotonic, malformed input
5. Empty / near-empty resumes and the neutral coverage default

No database needed.
Run: python scripts/test_scoring.py
"""
import sys
sys.path.insert(0, '.')

import math
from dataclasses import replace
from types import SimpleNamespace

from hireboard.core.config import Settings
from hireboard.models.ats import JobRecord, JobRequirementProfile, ResumeFeatureVector
from hireboard.services.feature_service import (
    cosine_similarity,
    extract_features,
    impact_score,
    presence_score,
    top_terms,
)
from hireboard.services.job_profile_service import ProfileFactors, build_job_profile
from hireboard.services.resume_parser import parse_resume
from hireboard.services.scoring_service import ScoringWeights, bounded, score_features

from sample_data import (
    JOB_DESCRIPTION,
    RESUME_NO_MATCH,
    RESUME_STRONG,
    make_taxonomy,
    python_sql_job,
)

BREAKDOWN_KEYS = {
    "skillCoverage", "textSimilarity", "formatScore", "impactScore", "certBonus",
    "toolBonus", "presenceScore", "matchedSkillsCount", "requiredSkillsTotal", "coreScore",
}


def python_sql_profile() -> JobRequirementProfile:
    return build_job_profile(python_sql_job(), make_taxonomy())


# ============================================================
# JOB PROFILE
# ============================================================

def test_job_profile_weights():
    print("\n[1] Testing job requirement profile...")
    job = JobRecord(
        job_id=1,
        description="Experience with Docker and AWS is a plus. Python everywhere.",
        required_skills=["Python"],
        preferred_skills=["PostgreSQL"],
    )
    profile = build_job_profile(job, make_taxonomy())

    print(f"    Weights: {profile.skill_weights}")
    assert profile.required_skills == {"python", "sql", "docker", "aws"}
    # explicit wins over the description mention of Python
    assert profile.skill_weights["python"] == 1.0
    assert profile.skill_weights["sql"] == 0.75
    assert profile.skill_weights["docker"] == 0.5
    assert profile.skill_weights["aws"] == 0.5
    assert profile.explicit_skills == {"python", "sql"}
    assert profile.description_skills == {"docker", "aws"}
    print("    ✅ explicit > preferred > description")


def test_job_profile_taxonomy_weight_and_factors():
    job = JobRecord(job_id=1, required_skills=["Leadership"], preferred_skills=["Python"])
    profile = build_job_profile(job, make_taxonomy(), ProfileFactors(explicit=1.0, preferred=0.5))
    assert profile.skill_weights["leadership"] == 0.5
    assert profile.skill_weights["python"] == 0.5
    assert math.isclose(profile.total_weight, 1.0)

    assert ProfileFactors.from_settings(Settings()) == ProfileFactors()


def test_job_profile_adhoc_skills():
    """Job skills missing from the taxonomy are still matched literally."""
    print("\n[2] Testing ad-hoc job skills...")
    job = JobRecord(job_id=1, required_skills=["Python", "Kubernetes Operators", "  "])
    profile = build_job_profile(job, make_taxonomy())
    assert profile.required_skills == {"python", "kubernetes operators"}

    features = extract_features(
        "Wrote Kubernetes operators in Python for five platform teams", profile
    )
    assert features.matched_skill_ids == {"python", "kubernetes operators"}
    assert features.skill_coverage_ratio == 1.0
    print("    ✅ Ad-hoc skills matched")


def test_empty_job_profile():
    profile = build_job_profile(JobRecord(job_id=1), make_taxonomy())
    assert profile.required_skills == frozenset()
    assert profile.skill_weights == {}
    assert profile.total_weight == 0


# ============================================================
# FEATURES
# ============================================================

def test_full_skill_coverage():
    """Python + PostgreSQL (aliased to sql) cover a {python, sql} job."""
    print("\n[3] Testing full skill coverage...")
    profile = python_sql_profile()
    features = extract_features(RESUME_STRONG, profile)
    result = score_features(features, profile)

    print(f"    Score: {result.score:.3f}  Breakdown: {result.breakdown}")
    assert result.breakdown["matchedSkillsCount"] == 2
    assert result.breakdown["requiredSkillsTotal"] == 2
    assert result.breakdown["skillCoverage"] == 1.0
    assert set(result.breakdown) == BREAKDOWN_KEYS
    print("    ✅ Coverage = 1.0")


def test_no_skill_coverage():
    """No required skills mentioned: coverage 0, score low but not zero."""
    print("\n[4] Testing zero skill coverage...")
    profile = python_sql_profile()
    weak = score_features(extract_features(RESUME_NO_MATCH, profile), profile)
    strong = score_features(extract_features(RESUME_STRONG, profile), profile)

    print(f"    weak={weak.score:.3f} strong={strong.score:.3f}")
    assert weak.breakdown["skillCoverage"] == 0.0
    assert weak.breakdown["matchedSkillsCount"] == 0
    assert 0.0 < weak.score < strong.score
    print("    ✅ Coverage = 0.0, score still positive")


def test_text_similarity():
    profile = python_sql_profile()
    strong = extract_features(RESUME_STRONG, profile)
    weak = extract_features(RESUME_NO_MATCH, profile)
    assert 0.0 < strong.text_similarity <= 1.0
    assert weak.text_similarity < strong.text_similarity


def test_bonuses():
    print("\n[5] Testing cert/tool bonuses...")
    text = "Python developer holding AWS Certified Developer credential, uses Docker and Git daily"
    profile = python_sql_profile()
    features = extract_features(text, profile)

    print(f"    cert={features.cert_bonus} tool={features.tool_bonus}")
    assert features.cert_bonus == 0.25
    assert features.tool_bonus == 0.25

    # required tools earn coverage, not a bonus
    docker_job = build_job_profile(JobRecord(job_id=2, required_skills=["Docker"]), make_taxonomy())
    assert extract_features(text, docker_job).tool_bonus == 0.125
    print("    ✅ Bonuses only for skills beyond the required set")


def test_impact_and_presence():
    taxonomy = make_taxonomy()
    strong = parse_resume(RESUME_STRONG, taxonomy)
    weak = parse_resume(RESUME_NO_MATCH, taxonomy)

    assert 0.0 < impact_score(weak) < impact_score(strong) <= 1.0
    assert presence_score(strong) == 1.0
    assert math.isclose(presence_score(weak), 3 / 7)


def test_near_empty_resume():
    """Blank or near-empty text scores exactly 0 when skills are required."""
    print("\n[6] Testing empty resumes...")
    profile = python_sql_profile()
    for text in ("", "   \n ", None, "Python SQL"):
        features = extract_features(text, profile)
        assert features == ResumeFeatureVector.empty()
        assert score_features(features, profile).score == 0.0
    print("    ✅ Empty resume floor = 0.0")


def test_neutral_coverage():
    """A job with no skills gives every candidate the neutral coverage."""
    print("\n[7] Testing neutral coverage...")
    profile = build_job_profile(JobRecord(job_id=1), make_taxonomy())

    for text in (RESUME_STRONG, RESUME_NO_MATCH, ""):
        features = extract_features(text, profile)
        result = score_features(features, profile)
        assert features.skill_coverage_ratio == 0.5
        assert result.breakdown["skillCoverage"] == 0.5
        assert result.breakdown["requiredSkillsTotal"] == 0

    custom = ScoringWeights(neutral_skill_coverage=0.0)
    assert score_features(extract_features("", profile), profile, custom).score == 0.0
    print("    ✅ Neutral default applied")


def test_top_terms():
    terms = top_terms(JOB_DESCRIPTION)
    assert terms[:3] == ["backend", "hiring", "engineer"]
    assert "python" in terms
    assert len(top_terms(JOB_DESCRIPTION, limit=2)) == 2
    assert top_terms("") == []


def test_cosine_similarity():
    assert cosine_similarity([1, 0], [1, 0]) == 1.0
    assert cosine_similarity([1, 0], [0, 1]) == 0.0
    assert cosine_similarity([0, 0], [1, 1]) == 0.0
    try:
        cosine_similarity([1, 0], [1])
        raise AssertionError("Expected ValueError")
    except ValueError:
        pass


# ============================================================
# SCORING FUNCTION
# ============================================================

def test_weights_validation():
    print("\n[8] Testing scoring weights...")
    assert math.isclose(ScoringWeights().core_total, 1.0)
    assert ScoringWeights.from_settings(Settings()) == ScoringWeights()

    for bad in (
        dict(skill_coverage=0.5),
        dict(cert_bonus=-0.1),
        dict(neutral_skill_coverage=1.5),
    ):
        try:
            ScoringWeights(**bad)
            raise AssertionError(f"Expected ValueError for {bad}")
        except ValueError:
            pass
    print("    ✅ Invalid weights rejected")


def test_bounded():
    assert bounded(None) == 0.0
    assert bounded("abc") == 0.0
    assert bounded(float("nan")) == 0.0
    assert bounded(float("inf")) == 0.0
    assert bounded(-1) == 0.0
    assert bounded(2) == 1.0
    assert bounded(0.25) == 0.25
    assert bounded(True) == 1.0


def test_malformed_features():
    """NaN / None / strings count as 0, out-of-range values are clamped."""
    profile = python_sql_profile()
    features = SimpleNamespace(
        matched_skill_ids=None,
        skill_coverage_ratio=float("nan"),
        text_similarity="high",
        format_score=None,
        presence_score=2.0,
        impact_score=-3,
        cert_bonus=float("inf"),
        tool_bonus=0.5,
    )
    result = score_features(features, profile)
    assert math.isclose(result.score, 0.10 + 0.05 * 0.5)
    assert result.breakdown["matchedSkillsCount"] == 0


def test_score_properties():
    print("\n[9] Testing determinism / bounds / monotonicity...")
    profile = python_sql_profile()

    first = score_features(extract_features(RESUME_STRONG, profile), profile)
    second = score_features(extract_features(RESUME_STRONG, profile), profile)
    assert first == second

    perfect = ResumeFeatureVector(
        matched_skill_ids=frozenset(["python", "sql"]),
        skill_coverage_ratio=1.0, text_similarity=1.0, format_score=1.0,
        impact_score=1.0, cert_bonus=1.0, tool_bonus=1.0, presence_score=1.0,
    )
    top = score_features(perfect, profile)
    assert top.score == 1.0
    assert math.isclose(top.core_score, 1.0)

    base = ResumeFeatureVector(
        skill_coverage_ratio=0.5, text_similarity=0.3, format_score=0.6,
        impact_score=0.2, presence_score=0.4, cert_bonus=0.0, tool_bonus=0.0,
    )
    base_score = score_features(base, profile).score
    assert 0.0 <= base_score <= 1.0
    for name in ("skill_coverage_ratio", "text_similarity", "format_score",
                 "impact_score", "presence_score", "cert_bonus", "tool_bonus"):
        better = replace(base, **{name: getattr(base, name) + 0.3})
        assert score_features(better, profile).score > base_score, name
    print("    ✅ Score is deterministic, bounded and monotonic")


def main():
    print("=" * 60)
    print("SCORING TEST")
    print("=" * 60)

    test_job_profile_weights()
    test_job_profile_taxonomy_weight_and_factors()
    test_job_profile_adhoc_skills()
    test_empty_job_profile()
    test_full_skill_coverage()
    test_no_skill_coverage()
    test_text_similarity()
    test_bonuses()
    test_impact_and_presence()
    test_near_empty_resume()
    test_neutral_coverage()
    test_top_terms()
    test_cosine_similarity()
    test_weights_validation()
    test_bounded()
    test_malformed_features()
    test_score_properties()

    print("\n" + "=" * 60)
    print("✅ ALL SCORING TESTS PASSED!")
    print("=" * 60)


if __name__ == "__main__":
    main()
