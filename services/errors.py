class ResumeServiceError(Exception):
    """Base class for errors surfaced to API callers"""

    status_code = 500
    error = "Request failed"

    def __init__(self, message: str, detail: str = None):
        super().__init__(message)
        self.message = message
        self.detail = detail or message


class InvalidRequest(ResumeServiceError):
    """Required input is missing; raised before any external call"""
    status_code = 400
    error = "Invalid request"


class AIUnavailable(ResumeServiceError):
    """The generative-AI call failed or returned no usable text"""
    status_code = 503
    error = "AI service unavailable"


class MalformedAIResponse(ResumeServiceError):
    """The AI call succeeded but its payload has the wrong shape"""
    status_code = 502
    error = "Malformed AI response"

    def __init__(self, message: str, raw_text: str = "", detail: str = None):
        super().__init__(message, detail)
        self.raw_text = raw_text


class PDFExtractionError(ResumeServiceError):
    status_code = 400
    error = "Failed to process PDF file"

    def __init__(self, message: str, detail: str = None, suggestion: str = None):
        super().__init__(message, detail)
        self.suggestion = suggestion


class ResumeNotFound(ResumeServiceError):
    status_code = 404
    error = "Resume not found"
