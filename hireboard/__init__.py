"""
HireBoard ATS
Applicant ranking engine for a campus recruiting platform.

Architecture:
- PostgreSQL: Structured data (jobs, applications, resume rows, skill taxonomy)
- MongoDB: Documents (raw resume text, parsed resume output)
- Ranking: deterministic, lexical scoring (no AI calls)
"""

__version__ = "1.0.0"
