"""
ATS error types.

Routes map these onto HTTP status codes:
- JobNotFoundError / ApplicationNotFoundError -> 404
- TaxonomyUnavailableError -> 503 (retryable)
- ScoringError -> 500 (contract violation, always logged)
"""


class ATSError(Exception):
    """Base class for ranking engine errors."""

    retryable = False


class JobNotFoundError(ATSError):
    def __init__(self, job_id: int):
        self.job_id = job_id
        super().__init__(f"Job not found ({job_id})")


class ApplicationNotFoundError(ATSError):
    def __init__(self, application_id: int):
        self.application_id = application_id
        super().__init__(f"Application not found ({application_id})")


class TaxonomyUnavailableError(ATSError):
    """The skill taxonomy could not be loaded and no snapshot is cached."""

    retryable = True


class ScoringError(ATSError):
    """Raised when the scoring function fails on an already-extracted feature vector."""
