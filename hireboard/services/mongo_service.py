"""
MongoDB Service - CRUD operations for resume documents.

Collections in this database:
1. raw_resumes     - Extracted resume text, one document per upload
2. parsed_resumes  - Parser output for a raw resume (sections, skills, signals)

The PostgreSQL `resumes` row keeps the raw_resumes ObjectId (raw_mongo_id),
so ranking can join the two stores.

WHY MongoDB for these?
- Resume text varies wildly in length and structure
- Parser output is nested and changes shape when the parser version bumps
- No joins needed - documents are self-contained
"""

from datetime import datetime, timezone
from typing import Dict, Iterable, Optional

from bson import ObjectId
from pymongo.collection import Collection

from hireboard.db.mongodb import get_collection, COLLECTIONS


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ============================================================
# HELPER: Convert ObjectId to string for JSON serialization
# ============================================================

def serialize_doc(doc: dict) -> dict:
    """Convert MongoDB document to JSON-serializable dict."""
    if doc is None:
        return None
    if "_id" in doc:
        doc["_id"] = str(doc["_id"])
    return doc


def _object_ids(ids: Iterable[str]) -> list:
    return [ObjectId(i) for i in ids if i and ObjectId.is_valid(i)]


# ============================================================
# RAW RESUMES COLLECTION
# Stores extracted resume text before parsing
# ============================================================

class RawResumeService:
    """
    Handles raw resume document storage.
    These are the texts extracted from uploaded PDF/DOCX/TXT files.
    """

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["raw_resumes"])

    def insert(self, application_id: int, resume_text: str, filename: str = None) -> str:
        """
        Insert a raw resume document.

        Returns:
            MongoDB ObjectId as string (stored in resumes.raw_mongo_id)
        """
        doc = {
            "application_id": application_id,
            "resume_text": resume_text,
            "filename": filename,
            "uploaded_at": _now(),
            "is_parsed": False
        }
        result = self.collection.insert_one(doc)
        return str(result.inserted_id)

    def get_texts(self, mongo_ids: Iterable[str]) -> Dict[str, str]:
        """Fetch resume text for many documents at once: {mongo_id: text}."""
        ids = _object_ids(mongo_ids)
        if not ids:
            return {}
        cursor = self.collection.find({"_id": {"$in": ids}}, {"resume_text": 1})
        return {str(doc["_id"]): doc.get("resume_text") or "" for doc in cursor}

    def mark_as_parsed(self, mongo_id: str) -> bool:
        """Mark resume as parsed."""
        result = self.collection.update_one(
            {"_id": ObjectId(mongo_id)},
            {"$set": {"is_parsed": True, "parsed_at": _now()}}
        )
        return result.modified_count > 0

    def delete(self, mongo_id: str) -> bool:
        """Remove a raw resume (ingest rolled back before the resumes row existed)."""
        result = self.collection.delete_one({"_id": ObjectId(mongo_id)})
        return result.deleted_count > 0


# ============================================================
# PARSED RESUMES COLLECTION
# Stores parser output, one document per raw resume
# ============================================================

class ParsedResumeService:
    """
    Handles parsed resume storage.
    Re-parsing (backfill) overwrites the document and bumps its version.
    """

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["parsed_resumes"])

    def upsert(self, raw_resume_id: str, application_id: int, parsed_data: dict, format_score: float) -> None:
        """
        Store parser output for a raw resume.

        Example parsed_data (abridged):
        {
            "contact": {"email": "jane@example.com", "phone": "+923001234567", "links": [...]},
            "sections": {"experience": "...", "education": "..."},
            "skills": [{"slug": "python", "alias": "python", "kind": "skill", ...}],
            "bullets_ratio": 0.4,
            "version": "resume-parser/1.2"
        }
        """
        self.collection.update_one(
            {"raw_resume_id": raw_resume_id},
            {
                "$set": {
                    "application_id": application_id,
                    "parsed_data": parsed_data,
                    "format_score": format_score,
                    "parser_version": parsed_data.get("version"),
                    "parsed_at": _now()
                },
                "$inc": {"version": 1}
            },
            upsert=True
        )

    def get_by_raw_id(self, raw_resume_id: str) -> Optional[dict]:
        """Fetch parsed output for a raw resume."""
        doc = self.collection.find_one({"raw_resume_id": raw_resume_id})
        return serialize_doc(doc)

    def get_skills(self, raw_resume_id: str) -> list:
        """Just the skill slugs from a parsed resume."""
        doc = self.get_by_raw_id(raw_resume_id)
        if doc and "parsed_data" in doc:
            return [s.get("slug") for s in doc["parsed_data"].get("skills", [])]
        return []


# ============================================================
# CONVENIENCE FUNCTION: Get all services
# ============================================================

def get_mongo_services() -> dict:
    """
    Get all MongoDB service instances.

    Usage:
        services = get_mongo_services()
        services['raw_resumes'].insert(...)
    """
    return {
        "raw_resumes": RawResumeService(),
        "parsed_resumes": ParsedResumeService(),
    }
