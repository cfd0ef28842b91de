#!/usr/bin/env python3
"""
Connection Check Script

Run this to verify both databases are reachable and the resume collections
accept a write/read round trip.
Usage: python scripts/check_connections.py
"""
import sys
sys.path.insert(0, '.')

from bson import ObjectId

from hireboard.db.postgres import test_postgres_connection, execute_raw_sql
from hireboard.db.mongodb import test_mongo_connection, init_mongo_indexes
from hireboard.services.mongo_service import get_mongo_services
from hireboard.core.config import get_settings


def check_taxonomy_table():
    rows = execute_raw_sql("SELECT COUNT(*) AS n FROM skills_taxonomy")
    count = rows[0]["n"]
    if count:
        print(f"    ✅ skills_taxonomy: {count} skills")
    else:
        print("    ⚠️  skills_taxonomy is empty (run scripts/seed_taxonomy.py)")


def check_resume_collections():
    services = get_mongo_services()
    raw_id = services["raw_resumes"].insert(
        application_id=0,
        resume_text="Connection check resume: Python, SQL",
        filename="connection_check.txt"
    )
    services["parsed_resumes"].upsert(
        raw_id, 0, {"skills": [{"slug": "python"}, {"slug": "sql"}], "version": "check"}, 0.0
    )
    print(f"    ✅ raw_resumes insert: {raw_id}")
    print(f"    ✅ parsed_resumes skills: {services['parsed_resumes'].get_skills(raw_id)}")

    # clean up
    services["raw_resumes"].collection.delete_one({"_id": ObjectId(raw_id)})
    services["parsed_resumes"].collection.delete_one({"raw_resume_id": raw_id})


def main():
    settings = get_settings()
    print("=" * 50)
    print("HIREBOARD ATS - CONNECTION CHECK")
    print("=" * 50)

    # PostgreSQL
    print("\n[1] Checking PostgreSQL...")
    print(f"    URL: postgresql://{settings.postgres_user}:****@{settings.postgres_host}:{settings.postgres_port}/{settings.postgres_db}")
    if test_postgres_connection():
        print("    ✅ PostgreSQL: CONNECTED")
        check_taxonomy_table()
    else:
        print("    ❌ PostgreSQL: FAILED")

    # MongoDB
    print("\n[2] Checking MongoDB...")
    print(f"    URI: {settings.mongodb_uri}")
    print(f"    Database: {settings.mongodb_db}")
    if test_mongo_connection():
        print("    ✅ MongoDB: CONNECTED")
        init_mongo_indexes()
        check_resume_collections()
    else:
        print("    ❌ MongoDB: FAILED")

    print("\n" + "=" * 50)
    print("Connection check complete!")
    print("=" * 50)


if __name__ == "__main__":
    main()
