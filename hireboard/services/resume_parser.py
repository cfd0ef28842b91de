"""
Resume Parser Service

PURPOSE:
Turn raw resume text into explainable, structured signals. No AI involved:
everything here is regex and counting, so the same text always parses to
the same result.

WHAT IT EXTRACTS:
- Contact info (email, phone, links) and LinkedIn/portfolio presence
- Sections, split on a wide vocabulary of headers ("Work Experience",
  "Technical Skills", "Certifications & Trainings", ...)
- Skill mentions, via the skill taxonomy
- Structure quality: bullet ratio, standard header coverage, keyword stuffing
- Impact signals: numbers, percents, currency amounts, action verbs and
  quantified achievement lines ("Reduced latency by 40%")
- Timeline (date tokens, earliest/latest year), GPA on a 4.0 scale, degrees
- Language hint (en / ur / mixed) and word count

ats_format_score() folds the structure signals into one 0..1 number.
"""

import re
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from hireboard.models.ats import SkillMention
from hireboard.services.taxonomy_service import SkillTaxonomy


PARSER_VERSION = "resume-parser/1.2"


# ============================================================
# SECTION HEADERS
# Header phrase -> canonical section key
# ============================================================

SECTION_HEADERS = {
    "experience": "experience",
    "work": "experience",
    "work experience": "experience",
    "work history": "experience",
    "professional experience": "experience",
    "relevant experience": "experience",
    "employment": "experience",
    "employment history": "experience",
    "internships": "experience",
    "internship": "experience",

    "education": "education",
    "academics": "education",
    "academic background": "education",
    "academic qualifications": "education",
    "qualifications": "education",

    "projects": "projects",
    "project": "projects",
    "personal projects": "projects",
    "course projects": "projects",
    "academic projects": "projects",

    "skills": "skills",
    "skill": "skills",
    "technical skills": "skills",
    "key skills": "skills",
    "core competencies": "skills",
    "tools & technologies": "skills",
    "technologies": "skills",

    "certifications": "certifications",
    "certification": "certifications",
    "licenses": "certifications",
    "license": "certifications",
    "licenses & certifications": "certifications",
    "certifications & trainings": "certifications",
    "training": "certifications",
    "trainings": "certifications",

    "summary": "summary",
    "professional summary": "summary",
    "profile": "summary",
    "objective": "summary",
    "career objective": "summary",
    "about me": "summary",

    "publications": "publications",
    "publication": "publications",
    "patents": "patents",
    "awards": "awards",
    "honors": "awards",
    "honors & awards": "awards",
    "achievements": "achievements",
    "volunteering": "volunteering",
    "volunteer experience": "volunteering",
    "leadership": "leadership",
    "activities": "activities",
    "extracurricular": "activities",
    "extracurricular activities": "activities",
    "interests": "interests",
    "research": "research",
    "teaching": "teaching",
    "presentations": "presentations",
}

STANDARD_SECTIONS = ("experience", "education", "skills", "projects", "certifications", "summary")

# "Skills: Python, SQL" -> header "skills" with inline content
HEADER_SPLIT_RE = re.compile(r"\s*[:—–|]\s*")


# ============================================================
# REGEX
# ============================================================

EMAIL_RE = re.compile(r"[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}", re.IGNORECASE)
PHONE_RE = re.compile(r"\+?\d[\d \-()]{7,}\d")
URL_RE = re.compile(
    r"(?:https?://|www\.)[^\s)>,]+|\b(?:linkedin\.com|github\.com)/[^\s)>,]+",
    re.IGNORECASE
)
LINKEDIN_RE = re.compile(r"linkedin\.com", re.IGNORECASE)
PORTFOLIO_RE = re.compile(
    r"behance|dribbble|portfolio|github\.com|github\.io|gitlab\.com|notion\.site|about\.me",
    re.IGNORECASE
)

BULLET_RE = re.compile(r"^\s*(?:[•●■▪➢\-*–]|\d+[.)])\s+")

IMPACT_VERBS = (
    "led", "managed", "owned", "improved", "increased", "reduced", "optimized",
    "generated", "designed", "created", "executed", "implemented", "launched",
    "delivered", "grew", "achieved", "automated", "refactored", "migrated",
    "shipped", "accelerated", "streamlined", "scaled", "hardened", "built",
    "cut", "saved", "boosted",
)
VERB_RE = re.compile(r"\b(?:" + "|".join(IMPACT_VERBS) + r")\b", re.IGNORECASE)
NUMBER_RE = re.compile(r"\b\d+(?:\.\d+)?%?")
PERCENT_RE = re.compile(r"\b\d+(?:\.\d+)?\s?%")
CURRENCY_RE = re.compile(r"(?:\$|\bRs\.?|\bPKR|\bUSD)\s?\d[\d,]*", re.IGNORECASE)
# A figure is any number that is not a bare calendar year
FIGURE_RE = re.compile(r"(?<![\d.])(?!(?:19|20)\d{2}\b)\d+(?:[.,]\d+)?")

MONTH_RE = re.compile(
    r"\b(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?"
    r"|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)\b",
    re.IGNORECASE
)
YEAR_RE = re.compile(r"\b(?:19|20)\d{2}\b")
GPA_100_RE = re.compile(r"\bC?GPA[:\s]*(\d{1,3}(?:\.\d{1,2})?)\s*/\s*100\b", re.IGNORECASE)
GPA_RE = re.compile(r"\bC?GPA[:\s]*([0-4](?:\.\d{1,2})?)(?![\d])", re.IGNORECASE)
DEGREE_RE = re.compile(
    r"\b(BS|BSc|B\.Sc|BE|BA|BBA|BCom|B\.Tech|BTech|MS|MSc|M\.Sc|MEng|MBA|MCom|M\.Tech|MTech|MPhil|PhD|Ph\.D)\b"
)
URDU_RE = re.compile("[\u0600-\u06ff]")
LATIN_RE = re.compile(r"[A-Za-z]")


# ============================================================
# PARSED RESUME
# ============================================================

@dataclass
class ParsedResume:
    contact: Dict[str, Any] = field(default_factory=dict)
    has_linkedin: bool = False
    has_portfolio: bool = False
    sections: Dict[str, str] = field(default_factory=dict)
    skills: List[SkillMention] = field(default_factory=list)

    bullets_ratio: float = 0.0
    standard_header_ratio: float = 0.0
    keyword_stuffing_ratio: float = 0.0

    numbers: int = 0
    percents: int = 0
    currency: int = 0
    verbs: int = 0
    quantified_lines: int = 0

    date_spans: int = 0
    earliest_year: Optional[int] = None
    latest_year: Optional[int] = None
    gpa: Optional[float] = None
    degrees: List[str] = field(default_factory=list)

    lang_hint: str = "en"
    word_count: int = 0
    version: str = PARSER_VERSION

    @property
    def skill_slugs(self) -> List[str]:
        return [s.slug for s in self.skills]

    def has_section(self, name: str) -> bool:
        return bool(self.sections.get(name, "").strip())

    def to_dict(self) -> dict:
        """Plain dict for MongoDB storage."""
        return asdict(self)


# ============================================================
# HELPERS
# ============================================================

def normalize_text(text: str) -> str:
    """Normalize spaces but keep newlines for sectioning."""
    text = str(text or "").replace("\r", "").replace("\u00a0", " ")
    return re.sub(r"[ \t]+", " ", text)


def _unique(items: List[str]) -> List[str]:
    seen = set()
    out = []
    for item in items:
        key = item.lower()
        if key not in seen:
            seen.add(key)
            out.append(item)
    return out


def _normalize_phone(raw: Optional[str]) -> Optional[str]:
    if not raw:
        return None
    phone = re.sub(r"[^\d+]", "", raw)
    # date ranges like "2019 - 2021" also match PHONE_RE
    return phone if len(phone.lstrip("+")) >= 10 else None


def _normalize_gpa(text: str) -> Optional[float]:
    """GPA on a 4.0 scale, converting percentage-style values."""
    match = GPA_100_RE.search(text)
    if match:
        value = float(match.group(1))
        if 0 <= value <= 100:
            return round(value / 25, 2)
    match = GPA_RE.search(text)
    if match:
        value = float(match.group(1))
        if 0 <= value <= 4.0:
            return value
    return None


def _language_hint(text: str) -> str:
    if not URDU_RE.search(text):
        return "en"
    return "mixed" if LATIN_RE.search(text) else "ur"


def _match_header(line: str):
    """Return (section_key, inline_text) if the line is a section header."""
    head, *rest = HEADER_SPLIT_RE.split(line.strip(), maxsplit=1)
    key = " ".join(head.lower().strip(" #*•-").split())
    section = SECTION_HEADERS.get(key)
    if section is None:
        return None
    return section, rest[0] if rest else ""


def split_sections(text: str) -> Dict[str, str]:
    """
    Walk the text line by line, opening a new section at every header line.
    Text before the first header goes to "body".
    """
    sections: Dict[str, List[str]] = {"body": []}
    current = "body"
    for line in text.split("\n"):
        header = _match_header(line) if line.strip() else None
        if header:
            current, inline = header
            sections.setdefault(current, [])
            if inline:
                sections[current].append(inline)
            continue
        sections[current].append(line)
    return {name: "\n".join(lines).strip() for name, lines in sections.items()}


def count_quantified_lines(text: str) -> int:
    """Lines carrying both an action verb and a figure ("Cut costs by 20%")."""
    count = 0
    for line in text.split("\n"):
        if VERB_RE.search(line) and (
            FIGURE_RE.search(line) or PERCENT_RE.search(line) or CURRENCY_RE.search(line)
        ):
            count += 1
    return count


# ============================================================
# PARSER
# ============================================================

def parse_resume(raw_text: str, taxonomy: SkillTaxonomy) -> ParsedResume:
    """
    Parse raw resume text against a skill taxonomy.

    Never raises for text input: empty text yields an empty ParsedResume.
    """
    text = normalize_text(raw_text)
    if not text.strip():
        return ParsedResume()

    lines = [line for line in text.split("\n") if line.strip()]

    # ---------- contact & presence ----------
    email_match = EMAIL_RE.search(text)
    phone_match = PHONE_RE.search(text)
    links = _unique([m.group(0).rstrip(".") for m in URL_RE.finditer(text)])[:30]
    contact = {
        "email": email_match.group(0) if email_match else None,
        "phone": _normalize_phone(phone_match.group(0) if phone_match else None),
        "links": links,
    }
    has_linkedin = any(LINKEDIN_RE.search(link) for link in links)
    has_portfolio = any(PORTFOLIO_RE.search(link) for link in links)

    # ---------- sections & structure ----------
    sections = split_sections(text)
    bullet_lines = sum(1 for line in lines if BULLET_RE.match(line))
    bullets_ratio = min(1.0, bullet_lines / len(lines)) if lines else 0.0
    found = sum(1 for name in STANDARD_SECTIONS if sections.get(name))
    standard_header_ratio = found / len(STANDARD_SECTIONS)

    # ---------- skills ----------
    mentions = taxonomy.find_mentions(text)
    skills = [mentions[slug] for slug in sorted(mentions)]
    # linear ramp once one skill is repeated more than 5 times
    most_repeated = max((m.count for m in skills), default=0)
    keyword_stuffing_ratio = min(1.0, max(0.0, (most_repeated - 5) / 15))

    # ---------- timeline & education ----------
    years = sorted(int(y) for y in YEAR_RE.findall(text))
    degrees = _unique([d.replace(".", "").upper() for d in DEGREE_RE.findall(text)])

    return ParsedResume(
        contact=contact,
        has_linkedin=has_linkedin,
        has_portfolio=has_portfolio,
        sections=sections,
        skills=skills,
        bullets_ratio=bullets_ratio,
        standard_header_ratio=standard_header_ratio,
        keyword_stuffing_ratio=keyword_stuffing_ratio,
        numbers=len(NUMBER_RE.findall(text)),
        percents=len(PERCENT_RE.findall(text)),
        currency=len(CURRENCY_RE.findall(text)),
        verbs=len(VERB_RE.findall(text)),
        quantified_lines=count_quantified_lines(text),
        date_spans=len(MONTH_RE.findall(text)) + len(years),
        earliest_year=years[0] if years else None,
        latest_year=years[-1] if years else None,
        gpa=_normalize_gpa(text),
        degrees=degrees,
        lang_hint=_language_hint(text),
        word_count=len(text.split()),
    )


def ats_format_score(parsed: ParsedResume) -> float:
    """
    Explainable 0..1 formatting score.

    Blend:
        0.18 contact (email or phone)
        0.18 standard header coverage
        0.18 bullets in the 10%-70% band (0.5 credit outside it)
        0.36 anti-stuffing (1 - 0.5 * stuffing ratio)
        0.10 timeline evidence
    """
    if parsed.word_count == 0:
        return 0.0

    contact = 1.0 if (parsed.contact.get("email") or parsed.contact.get("phone")) else 0.0
    bullets = 1.0 if 0.10 <= parsed.bullets_ratio <= 0.70 else 0.5
    stuffing = 1.0 - 0.5 * parsed.keyword_stuffing_ratio
    if parsed.date_spans > 3:
        timeline = 1.0
    elif parsed.date_spans > 0:
        timeline = 0.8
    else:
        timeline = 0.6

    score = (
        0.18 * contact
        + 0.18 * parsed.standard_header_ratio
        + 0.18 * bullets
        + 0.36 * stuffing
        + 0.10 * timeline
    )
    return max(0.0, min(1.0, score))
