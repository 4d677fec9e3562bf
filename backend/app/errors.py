"""Domain errors raised by the service layer.

Each error carries the HTTP status it maps to; ``app.main`` renders them as
``{"error": message}``. Services never raise ``HTTPException`` directly so
they stay usable outside a request.
"""
from __future__ import annotations


class AppError(Exception):
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(AppError):
    status_code = 400


class DuplicateFeedback(AppError):
    status_code = 400

    def __init__(self, message: str = "You have already submitted feedback for this teacher"):
        super().__init__(message)


class AlreadyAnswered(AppError):
    status_code = 400

    def __init__(self, message: str = "This doubt has already been answered"):
        super().__init__(message)


class NotAuthenticated(AppError):
    status_code = 401


class PermissionDenied(AppError):
    status_code = 403


class NotFound(AppError):
    status_code = 404
