from typing import Any, Dict, Optional

class AppException(Exception):
    def __init__(
        self,
        message: str,
        status_code: int = 400,
        error_code: str = "BUSINESS_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details
        super().__init__(self.message)

# --- Input validation (422) ---

class ValidationError(AppException):
    def __init__(self, message: str, error_code: str = "VALIDATION_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=422,
            error_code=error_code,
            details=details
        )

class InvalidPillarScoreError(ValidationError):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code="INVALID_PILLAR_SCORE", details=details)

class InvalidLevelError(ValidationError):
    def __init__(self, message: str):
        super().__init__(message, error_code="INVALID_LEVEL")

class InvalidWeightedScoreError(ValidationError):
    def __init__(self, message: str):
        super().__init__(message, error_code="INVALID_WEIGHTED_SCORE")

class NarrativeTooLongError(ValidationError):
    def __init__(self, word_count: int, max_words: int):
        super().__init__(
            f"Narrative has {word_count} words; the limit is {max_words}",
            error_code="NARRATIVE_TOO_LONG",
            details={"word_count": word_count, "max_words": max_words}
        )

class InvalidDeadlinesError(ValidationError):
    def __init__(self, message: str):
        super().__init__(message, error_code="INVALID_DEADLINES")

class DeadlinePassedError(AppException):
    def __init__(self, phase: str):
        super().__init__(
            message=f"The {phase} deadline has passed",
            status_code=422,
            error_code="DEADLINE_PASSED",
            details={"phase": phase}
        )

# --- Permission (403) ---

class AccessDeniedError(AppException):
    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(
            message=message,
            status_code=403,
            error_code="PERMISSION_DENIED"
        )

# --- Lookup (404) ---

class NotFoundError(AppException):
    def __init__(self, message: str, error_code: str = "NOT_FOUND"):
        super().__init__(
            message=message,
            status_code=404,
            error_code=error_code
        )

class NoPeerFeedbackError(NotFoundError):
    def __init__(self, message: str = "No peer feedback available"):
        super().__init__(message, error_code="NO_PEER_FEEDBACK")

# --- Domain rule violations (409) ---

class AlreadySubmittedError(AppException):
    """Mutation attempted on a submitted or calibrated review."""
    def __init__(self, message: str = "Review has already been submitted"):
        super().__init__(
            message=message,
            status_code=409,
            error_code="ALREADY_SUBMITTED"
        )

class DuplicateFeedbackError(AppException):
    def __init__(self, message: str = "Peer feedback already submitted for this reviewee"):
        super().__init__(
            message=message,
            status_code=409,
            error_code="DUPLICATE_FEEDBACK"
        )

class DuplicateNominationError(AppException):
    def __init__(self, message: str = "Peer has already been nominated in this cycle"):
        super().__init__(
            message=message,
            status_code=409,
            error_code="DUPLICATE_NOMINATION"
        )

class InvalidStateError(AppException):
    def __init__(self, message: str):
        super().__init__(
            message=message,
            status_code=409,
            error_code="INVALID_STATE"
        )

class FinalScoreLockedError(AppException):
    def __init__(self, message: str = "Final score is locked"):
        super().__init__(
            message=message,
            status_code=409,
            error_code="FINAL_SCORE_LOCKED"
        )

# --- Defects (500) ---

class ConfigurationError(AppException):
    """Broken static configuration (e.g. missing weight table). Not a user error."""
    def __init__(self, message: str):
        super().__init__(
            message=message,
            status_code=500,
            error_code="CONFIGURATION_ERROR"
        )
