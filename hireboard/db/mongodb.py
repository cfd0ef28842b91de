"""
MongoDB Connection Utility

MongoDB stores:
- Raw resume documents (text extracted from PDF/DOCX/TXT uploads)
- Parsed resume outputs (sections, skill mentions, quality signals)

WHY MongoDB for these?
- Schema-flexible: parser output changes shape between versions
- Document-oriented: natural fit for resumes
- No joins needed: each document is self-contained
"""
import logging

from pymongo import MongoClient
from pymongo.database import Database
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from hireboard.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(settings.mongodb_uri, serverSelectionTimeoutMS=5000)
    return _client


def get_mongo_db() -> Database:
    """Get the document database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[settings.mongodb_db]
    return _db


def get_collection(name: str) -> Collection:
    """
    Get a specific collection.
    Collections we use:
    - raw_resumes: Extracted resume text
    - parsed_resumes: Parser output per raw resume
    """
    db = get_mongo_db()
    return db[name]


def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        client = get_mongo_client()
        # ping command checks connection
        client.admin.command('ping')
        return True
    except PyMongoError as e:
        logger.error("MongoDB connection failed: %s", e)
        return False


# Collection name constants (avoid typos)
COLLECTIONS = {
    "raw_resumes": "raw_resumes",
    "parsed_resumes": "parsed_resumes",
}


def init_mongo_indexes():
    """
    Create indexes for better query performance.
    Call this once during app startup.
    """
    db = get_mongo_db()

    db[COLLECTIONS["raw_resumes"]].create_index("application_id")
    db[COLLECTIONS["parsed_resumes"]].create_index("application_id")

    # One parsed document per raw resume (backfill upserts into it)
    db[COLLECTIONS["parsed_resumes"]].create_index("raw_resume_id", unique=True)

    logger.info("MongoDB indexes created successfully")
