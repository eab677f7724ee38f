"""Error types for coachbook.

Rule components report problems as validation results; services turn
backend failures into these errors and then into displayable messages.
"""

from typing import Any

from fastapi import HTTPException, status


class CoachbookError(Exception):
    """Base exception for all coachbook errors."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class ValidationError(CoachbookError):
    """Input that the rule engine rejects."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(CoachbookError):
    """A trainer, client, package or slot does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class FetchError(CoachbookError):
    """Reading clients or packages from the store failed."""

    status_code = status.HTTP_502_BAD_GATEWAY


class BookingError(CoachbookError):
    """A booking could not be made."""

    status_code = status.HTTP_409_CONFLICT
