"""
HireBoard ATS - Main Application

FastAPI backend with:
- PostgreSQL for structured data (jobs, applications, resumes, taxonomy)
- MongoDB for documents (raw + parsed resumes)
- Deterministic resume ranking (skill taxonomy + lexical heuristics)
- JWT verification for employer routes

Run: uvicorn hireboard.main:app --reload
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pymongo.errors import PyMongoError

from hireboard.api.routes import api_router
from hireboard.db.mongodb import init_mongo_indexes
from hireboard.core.config import get_settings

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="HireBoard ATS",
    description="""
    Applicant ranking engine for employer dashboards.

    ## Features
    - **Ranking**: Score and sort every applicant of a job by resume fit
    - **Breakdown**: Skill coverage, text similarity, format, impact, presence
    - **Ingest**: Upload resumes (PDF/DOCX/TXT), parsed against the skill taxonomy
    - **Backfill**: Re-parse a job's resumes after taxonomy changes

    ## Databases
    - PostgreSQL: Structured data (jobs, applications, resumes, skills_taxonomy)
    - MongoDB: Documents (raw_resumes, parsed_resumes)
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware (allow all for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api")


# Startup event
@app.on_event("startup")
async def startup_event():
    """Initialize MongoDB indexes on startup."""
    try:
        init_mongo_indexes()
    except PyMongoError as e:
        logger.warning("MongoDB index initialization failed: %s", e)


@app.get("/", tags=["Health"])
async def root():
    return {"status": "healthy", "app": "HireBoard ATS"}


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    from hireboard.db.postgres import test_postgres_connection
    from hireboard.db.mongodb import test_mongo_connection

    return {
        "status": "healthy",
        "postgres": "connected" if test_postgres_connection() else "disconnected",
        "mongodb": "connected" if test_mongo_connection() else "disconnected"
    }
