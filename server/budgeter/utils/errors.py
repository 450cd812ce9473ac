"""
Error types for the budget pipeline and consistent message extraction.

Two failure kinds reach callers: ``InputValidationError`` when a
request is rejected before any analysis starts, and
``PageFetchError`` when retrieving the page itself fails. Failures
fetching individual resource sizes never surface as errors.
"""

from __future__ import annotations

from typing import Literal

ValidationCode = Literal["INVALID_URL", "NOT_HTTPS", "PRIVATE_HOST", "NON_HTML"]
FetchCode = Literal["TIMEOUT", "FETCH_ERROR"]


class BudgetError(Exception):
    """Base class for errors reported back to the caller."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def to_dict(self) -> dict[str, str]:
        """Return the JSON error body sent to clients."""
        return {"error": self.code, "message": self.message}


class InputValidationError(BudgetError):
    """The requested URL or its response is not something we analyse."""

    def __init__(self, code: ValidationCode, message: str) -> None:
        super().__init__(code, message)


class PageFetchError(BudgetError):
    """The top-level page could not be retrieved."""

    def __init__(self, code: FetchCode, message: str) -> None:
        super().__init__(code, message)


def get_error_message(error: BaseException | object) -> str:
    """
    Safely extract an error message from an unknown error type.
    """
    if isinstance(error, BaseException):
        return str(error) or type(error).__name__
    return "Unknown error"
