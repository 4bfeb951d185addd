"""Error taxonomy shared by every request handler.

Handlers raise these; ``shiptrack.main`` turns them into the JSON envelope
``{"success": false, "message": ...}`` with the matching status code.
"""
from typing import Optional


class TrackingError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, error: Optional[str] = None):
        self.message = message or self.default_message
        self.error = error
        super().__init__(self.message)

    def to_body(self) -> dict:
        body = {"success": False, "message": self.message}
        if self.error:
            body["error"] = self.error
        return body


class Unauthorized(TrackingError):
    status_code = 401
    default_message = "Unauthorized"


class Forbidden(TrackingError):
    status_code = 403
    default_message = "Admin access required"


class NotFound(TrackingError):
    status_code = 404
    default_message = "Not found"


class ValidationError(TrackingError):
    status_code = 400
    default_message = "Invalid request"


class Conflict(ValidationError):
    status_code = 409
    default_message = "Already exists"


class UpstreamError(TrackingError):
    status_code = 500
    default_message = "Upstream service failure"
