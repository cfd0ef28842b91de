"""
Skill Taxonomy Service

PURPOSE:
Map free-text skill mentions ("PostgreSQL", "ML", "React.js") onto canonical
skill slugs ("sql", "machine learning", "react").

HOW IT WORKS:
1. Every canonical skill is aliased by its slug plus its alias list
2. All aliases are compiled into ONE regex, longest alias first
3. Matches must sit on word boundaries, so "java" never fires inside
   "javascript" and "c" never fires inside "c++" (symbolic aliases may carry
   a version number: "C++17")
4. A snapshot of the taxonomy is cached per process (TaxonomyStore) and
   reloaded from PostgreSQL when it goes stale

The taxonomy is read-only at request time.
"""

import logging
import re
import threading
import time
from typing import Callable, Dict, Iterable, List, Optional

from hireboard.models.ats import CanonicalSkill, SkillMention
from hireboard.services.ats_errors import TaxonomyUnavailableError

logger = logging.getLogger(__name__)


def normalize_alias(alias: str) -> str:
    """Lowercase and collapse whitespace."""
    return " ".join(str(alias or "").lower().split())


def _alias_to_regex(alias: str) -> str:
    # multi-word aliases tolerate any run of whitespace ("machine   learning")
    body = r"\s+".join(re.escape(part) for part in alias.split())
    # symbolic endings may carry a version number ("C++17", "C#10")
    tail = r"(?!\w)" if re.search(r"\w$", alias) else r"(?![A-Za-z_])"
    return body + tail


# ============================================================
# SKILL TAXONOMY (immutable lookup table)
# ============================================================

class SkillTaxonomy:
    """
    Alias index over a set of canonical skills.

    Usage:
        taxonomy = SkillTaxonomy(skills)
        taxonomy.find_mentions("Built APIs in Python and PostgreSQL")
        # {"python": SkillMention(...), "sql": SkillMention(...)}
    """

    def __init__(self, skills: Iterable[CanonicalSkill]):
        by_slug: Dict[str, CanonicalSkill] = {}
        for skill in skills:
            if not skill.slug:
                continue
            if skill.slug in by_slug:
                logger.warning("Duplicate taxonomy slug '%s' ignored", skill.slug)
                continue
            by_slug[skill.slug] = skill

        self._skills: Dict[str, CanonicalSkill] = dict(sorted(by_slug.items()))
        self._alias_to_slug: Dict[str, str] = {}

        for slug, skill in self._skills.items():
            for alias in (slug,) + skill.aliases:
                key = normalize_alias(alias)
                if not key:
                    continue
                owner = self._alias_to_slug.get(key)
                if owner is None:
                    self._alias_to_slug[key] = slug
                elif owner != slug:
                    logger.warning(
                        "Alias '%s' claimed by '%s' and '%s'; keeping '%s'",
                        key, owner, slug, owner
                    )

        self._pattern = self._compile()

    def _compile(self) -> Optional["re.Pattern"]:
        if not self._alias_to_slug:
            return None
        # Longest alias first so overlapping aliases resolve to the longer one
        ordered = sorted(self._alias_to_slug, key=lambda a: (-len(a), a))
        body = "|".join(_alias_to_regex(a) for a in ordered)
        return re.compile(rf"(?<!\w)(?:{body})", re.IGNORECASE)

    # ---------- lookups ----------

    @property
    def skills(self) -> List[CanonicalSkill]:
        return list(self._skills.values())

    def skill(self, slug: str) -> Optional[CanonicalSkill]:
        return self._skills.get(slug)

    def __contains__(self, slug: str) -> bool:
        return slug in self._skills

    def __len__(self) -> int:
        return len(self._skills)

    def find_mentions(self, text: str) -> Dict[str, SkillMention]:
        """
        Return every canonical skill mentioned in text.

        Empty text or unknown tokens simply produce no mentions.
        """
        if not text or self._pattern is None:
            return {}

        hits: Dict[str, List[str]] = {}
        for match in self._pattern.finditer(text):
            alias = normalize_alias(match.group(0))
            slug = self._alias_to_slug.get(alias)
            if slug is None:
                continue
            hits.setdefault(slug, []).append(alias)

        mentions = {}
        for slug in sorted(hits):
            skill = self._skills[slug]
            mentions[slug] = SkillMention(
                slug=slug,
                alias=hits[slug][0],
                confidence=1.0,
                kind=skill.kind,
                weight=skill.weight,
                count=len(hits[slug]),
            )
        return mentions

    def resolve(self, term: str) -> Optional[str]:
        """
        Canonicalize a single skill entry (e.g. one item of a job's skill list).

        Whole-term alias match wins; otherwise the longest alias mentioned
        inside the term.
        """
        key = normalize_alias(term)
        if not key:
            return None
        if key in self._alias_to_slug:
            return self._alias_to_slug[key]
        if self._pattern is None:
            return None

        best = None
        for match in self._pattern.finditer(term):
            alias = normalize_alias(match.group(0))
            if best is None or len(alias) > len(best):
                best = alias
        return self._alias_to_slug.get(best) if best else None

    def with_extra(self, extra: Iterable[CanonicalSkill]) -> "SkillTaxonomy":
        """New taxonomy with additional ad-hoc skills (existing slugs win)."""
        extra = [s for s in extra if s.slug not in self._skills]
        if not extra:
            return self
        return SkillTaxonomy(list(self._skills.values()) + extra)


# ============================================================
# TAXONOMY STORE (per-process snapshot)
# ============================================================

class TaxonomyStore:
    """
    Caches a SkillTaxonomy snapshot and reloads it after ttl_seconds.

    A failed reload keeps serving the previous snapshot. With no snapshot at
    all the ranking call cannot proceed and TaxonomyUnavailableError is raised.
    """

    def __init__(
        self,
        loader: Callable[[], Iterable[CanonicalSkill]],
        ttl_seconds: int = 300
    ):
        self.loader = loader
        self.ttl_seconds = ttl_seconds
        self._snapshot: Optional[SkillTaxonomy] = None
        self._loaded_at: float = 0.0
        self._lock = threading.Lock()

    def _is_fresh(self) -> bool:
        if self._snapshot is None:
            return False
        return (time.monotonic() - self._loaded_at) < self.ttl_seconds

    def get(self) -> SkillTaxonomy:
        if self._is_fresh():
            return self._snapshot
        return self.refresh()

    def refresh(self, raise_on_failure: bool = False) -> SkillTaxonomy:
        """
        Reload from the loader.

        A failed reload keeps serving the previous snapshot unless
        raise_on_failure is set (explicit reloads must report the failure).
        """
        with self._lock:
            try:
                skills = list(self.loader())
            except TaxonomyUnavailableError:
                if self._snapshot is None or raise_on_failure:
                    raise
                logger.warning("Taxonomy reload failed; serving stale snapshot (%d skills)", len(self._snapshot))
                return self._snapshot

            self._snapshot = SkillTaxonomy(skills)
            self._loaded_at = time.monotonic()
            logger.info("Loaded skill taxonomy with %d skills", len(self._snapshot))
            return self._snapshot
