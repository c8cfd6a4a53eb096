"""
Custom exception classes

Service-layer errors are plain exceptions; the route layer translates them
into the HTTPException subclasses below.
"""
from fastapi import HTTPException


# ============================================================================
# Service-layer errors
# ============================================================================

class DuplicateEmailError(ValueError):
    """Raised when registering an email that already has an account"""


class UploadRejectedError(ValueError):
    """Raised when an upload fails the type allow-list or the size ceiling"""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class ExtractionError(ValueError):
    """Raised when no text can be pulled out of an uploaded document"""


class AIGatewayError(RuntimeError):
    """Raised when the model call fails or its reply does not match the expected shape"""


class AITimeoutError(AIGatewayError):
    """Raised when the model does not answer within the configured timeout"""


# ============================================================================
# HTTP errors
# ============================================================================

class NotAuthenticatedError(HTTPException):
    """Raised when the request carries no valid session"""
    def __init__(self):
        super().__init__(
            status_code=401,
            detail="Authentication required"
        )


class CaseNotFoundError(HTTPException):
    """Raised when case doesn't exist or belongs to someone else"""
    def __init__(self, case_id: str):
        super().__init__(
            status_code=404,
            detail=f"Case {case_id} not found"
        )


class DocumentNotFoundError(HTTPException):
    """Raised when document doesn't exist or belongs to someone else"""
    def __init__(self, document_id: str):
        super().__init__(
            status_code=404,
            detail=f"Document {document_id} not found"
        )


class MedicalRecordNotFoundError(HTTPException):
    """Raised when medical record doesn't exist or belongs to someone else"""
    def __init__(self, record_id: str):
        super().__init__(
            status_code=404,
            detail=f"Medical record {record_id} not found"
        )


class AIServiceError(HTTPException):
    """Raised when the AI gateway fails; the cause stays in the server log"""
    def __init__(self, action: str):
        super().__init__(
            status_code=500,
            detail=f"Failed to {action}"
        )


class AITimeoutHTTPError(HTTPException):
    """Raised when the AI gateway times out"""
    def __init__(self):
        super().__init__(
            status_code=504,
            detail="The AI service took too long to respond. Please try again."
        )
