"""
Resume Feature Extractor

PURPOSE:
Turn one resume's raw text into a ResumeFeatureVector for a given job profile.

HOW IT WORKS:
1. Parse the resume (sections, skill mentions, impact/contact signals)
2. Intersect mentioned skills with the job's required skills (coverage)
3. Compare resume vs job description term vectors (cosine similarity)
4. Fold parser signals into bounded format / impact / presence scores
5. Reward certifications and tools beyond the required set (bonuses)

Everything is lexical and deterministic. No embeddings, no API calls:
the same text against the same profile always yields the same vector.
"""

import re
from collections import Counter
from typing import Dict, List

import numpy as np

from hireboard.models.ats import JobRequirementProfile, ResumeFeatureVector
from hireboard.services.resume_parser import ParsedResume, ats_format_score, parse_resume
from hireboard.services.taxonomy_service import SkillTaxonomy


# Fewer words than this is treated as an empty resume
MIN_RESUME_WORDS = 5

STOP_WORDS = frozenset([
    "the", "and", "for", "with", "that", "this", "are", "you", "our", "your",
    "will", "have", "has", "from", "into", "more", "than", "such", "about",
    "able", "skills", "skill", "experience", "preferred", "required", "to",
    "of", "a", "in", "on", "by", "as", "be", "is", "or", "an", "at", "it",
    "we", "they", "their", "them", "who", "what", "how", "must", "can",
])

# Repetition factor per resume section for the term vector
SECTION_WEIGHTS = {
    "experience": 3,
    "projects": 2,
    "skills": 2,
    "summary": 1,
}
DEFAULT_SECTION_WEIGHT = 1

TOKEN_SPLIT_RE = re.compile(r"\W+")


# ============================================================
# TEXT SIMILARITY
# ============================================================

def tokenize(text: str) -> List[str]:
    """Lowercase word tokens, stop words and single characters removed."""
    return [
        tok for tok in TOKEN_SPLIT_RE.split(str(text or "").lower())
        if len(tok) > 1 and tok not in STOP_WORDS
    ]


def section_weighted_terms(sections: Dict[str, str]) -> Counter:
    """Term frequencies where experience counts 3x, skills/projects 2x."""
    counts = Counter()
    for name in sorted(sections):
        factor = SECTION_WEIGHTS.get(name, DEFAULT_SECTION_WEIGHT)
        for tok in tokenize(sections[name]):
            counts[tok] += factor
    return counts


def cosine_similarity(vec1: List[float], vec2: List[float]) -> float:
    """
    Compute cosine similarity between two vectors.

    Returns:
        Float between -1 and 1 (term-count vectors only ever give 0..1)
    """
    if len(vec1) != len(vec2):
        raise ValueError("Vectors must have same dimension")

    a = np.array(vec1, dtype=float)
    b = np.array(vec2, dtype=float)

    magnitude_a = np.linalg.norm(a)
    magnitude_b = np.linalg.norm(b)
    if magnitude_a == 0 or magnitude_b == 0:
        return 0.0

    return float(np.dot(a, b) / (magnitude_a * magnitude_b))


def term_similarity(resume_terms: Counter, job_terms: Counter) -> float:
    if not resume_terms or not job_terms:
        return 0.0
    vocabulary = sorted(set(resume_terms) | set(job_terms))
    similarity = cosine_similarity(
        [resume_terms.get(t, 0) for t in vocabulary],
        [job_terms.get(t, 0) for t in vocabulary],
    )
    return max(0.0, min(1.0, similarity))


def top_terms(text: str, limit: int = 12) -> List[str]:
    """Most frequent description terms, ties in order of first appearance."""
    tokens = tokenize(text)
    counts = Counter(tokens)
    first_seen = {}
    for i, tok in enumerate(tokens):
        first_seen.setdefault(tok, i)
    ranked = sorted(counts, key=lambda t: (-counts[t], first_seen[t]))
    return ranked[:limit]


# ============================================================
# SUB-SCORES
# ============================================================

def impact_score(parsed: ParsedResume) -> float:
    """Quantified achievement lines count triple; verbs are capped at 12."""
    raw = (
        3 * parsed.quantified_lines
        + parsed.percents
        + parsed.currency
        + min(parsed.verbs, 12)
    )
    return min(1.0, raw / 20)


def presence_score(parsed: ParsedResume) -> float:
    fields = [
        bool(parsed.contact.get("email")),
        bool(parsed.contact.get("phone")),
        parsed.has_linkedin,
        parsed.has_portfolio,
        parsed.has_section("experience"),
        parsed.has_section("education"),
        parsed.has_section("skills"),
    ]
    return sum(fields) / len(fields)


def kind_bonuses(parsed: ParsedResume, required: frozenset):
    """
    Bonuses for certifications and tools the job did not ask for.

    cert: 0.5 × weight, tool/platform: 0.25 × weight, each normalized min(1, Σ/2).
    """
    cert = 0.0
    tool = 0.0
    for mention in sorted(parsed.skills, key=lambda m: m.slug):
        if mention.slug in required:
            continue
        if mention.kind == "cert":
            cert += 0.5 * mention.weight
        elif mention.kind in ("tool", "platform"):
            tool += 0.25 * mention.weight
    return min(1.0, cert / 2), min(1.0, tool / 2)


def skill_coverage(matched: frozenset, profile: JobRequirementProfile, neutral: float) -> float:
    if not profile.required_skills:
        return neutral
    total = profile.total_weight
    if total <= 0:
        return len(matched) / len(profile.required_skills)
    matched_weight = sum(profile.skill_weights.get(s, 1.0) for s in sorted(matched))
    return max(0.0, min(1.0, matched_weight / total))


# ============================================================
# EXTRACTOR
# ============================================================

def extract_features(
    raw_text: str,
    profile: JobRequirementProfile,
    neutral_coverage: float = 0.5
) -> ResumeFeatureVector:
    """
    Build the feature vector for one resume against one job profile.

    Empty or near-empty text gives the all-zero vector (coverage is still
    neutral when the job requires nothing).
    """
    empty_coverage = 0.0 if profile.required_skills else neutral_coverage

    text = str(raw_text or "")
    if len(text.split()) < MIN_RESUME_WORDS:
        return ResumeFeatureVector.empty(skill_coverage_ratio=empty_coverage)

    parsed = parse_resume(text, profile.taxonomy or SkillTaxonomy([]))

    mentioned = frozenset(parsed.skill_slugs)
    matched = mentioned & profile.required_skills

    job_terms = Counter(tokenize(profile.raw_description_text))
    cert_bonus, tool_bonus = kind_bonuses(parsed, profile.required_skills)

    return ResumeFeatureVector(
        mentioned_skill_ids=mentioned,
        matched_skill_ids=matched,
        skill_coverage_ratio=skill_coverage(matched, profile, neutral_coverage),
        text_similarity=term_similarity(section_weighted_terms(parsed.sections), job_terms),
        format_score=ats_format_score(parsed),
        impact_score=impact_score(parsed),
        cert_bonus=cert_bonus,
        tool_bonus=tool_bonus,
        presence_score=presence_score(parsed),
        word_count=parsed.word_count,
    )
