#!/usr/bin/env python3
"""
Seed the skills_taxonomy table with the default canonical skills.

Safe to re-run: existing slugs are updated in place.
Run: python scripts/seed_taxonomy.py
"""
import sys
sys.path.insert(0, '.')

from hireboard.services.ats_repository import ATSRepository
from hireboard.services.default_taxonomy import DEFAULT_SKILLS


def main():
    print("=" * 50)
    print("SEED SKILL TAXONOMY")
    print("=" * 50)

    count = ATSRepository().upsert_taxonomy(DEFAULT_SKILLS)
    print(f"\n✅ Upserted {count} skills into skills_taxonomy")

    by_kind = {}
    for skill in DEFAULT_SKILLS:
        by_kind[skill.kind] = by_kind.get(skill.kind, 0) + 1
    for kind, n in sorted(by_kind.items()):
        print(f"    {kind}: {n}")


if __name__ == "__main__":
    main()
