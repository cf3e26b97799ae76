from __future__ import annotations

"""Error taxonomy shared by all tools.

Every failure inside a tool invocation is raised as a `ToolFailure` subclass
and converted to a `ToolError` at the tool boundary. Nothing escapes as an
exception to the hosting agent.

Error payload example:
    {"message": "Location \"Atlantis\" not found", "details": null}
"""

from typing import Any

from pydantic import BaseModel


class ToolFailure(Exception):
    """Base class for failures that carry a user-facing message."""

    kind = "unknown"

    def __init__(self, message: str | None = None, details: Any = None) -> None:
        super().__init__(message or "")
        self.message = message
        self.details = details


class ValidationError(ToolFailure):
    """Missing or invalid tool arguments."""

    kind = "validation"


class NotFoundError(ToolFailure):
    """The provider returned no match for the requested entity."""

    kind = "not_found"


class UnsupportedCurrencyError(ToolFailure):
    """Source or target currency is absent from the rate source."""

    kind = "unsupported_currency"


class ExternalServiceError(ToolFailure):
    """Network failure, timeout, non-2xx status or malformed provider payload."""

    kind = "external_service"


class UnknownError(ToolFailure):
    kind = "unknown"


class ToolError(BaseModel):
    """Stable error schema returned to the agent."""

    message: str
    details: Any = None

    @classmethod
    def from_exception(cls, exc: BaseException, fallback_message: str) -> "ToolError":
        """Map any exception to the error envelope.

        `ToolFailure` keeps its own message and provider details.
        Anything else is treated as an `UnknownError` without details.
        """
        if not isinstance(exc, ToolFailure):
            exc = UnknownError(str(exc) or None)
        return cls(message=exc.message or fallback_message, details=exc.details)
