"""
Application errors

Every error carries the HTTP status and the short message that end up in the
error envelope (see app.core.response).
"""

from fastapi import status


class AppError(Exception):
    """Base application error"""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "internal error"

    def __init__(self, message: str = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class BadRequestError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "bad request"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "not found"


class APIKeyNotFoundError(NotFoundError):
    message = "API key not found"
