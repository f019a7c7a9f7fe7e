"""Custom exception hierarchy for the financial reporting engine.

All errors raised by the engine derive from ``BizDirException`` so callers
(an HTTP layer, a worker) can catch one type and render ``to_dict()``.

Error codes follow pattern: [CATEGORY][NUMBER]
- PER: Period errors (100-199)
- UPS: Upstream collaborator errors (200-299)
- STA: Degenerate state / arithmetic errors (300-399)
"""

from __future__ import annotations

from typing import Any


class BizDirException(Exception):
    """Base exception for all engine errors."""

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        """Initialize exception with message and metadata.

        Args:
            message: Human readable error message
            code: Unique error code (e.g., "PER100")
            status_code: HTTP status code a caller should map this to
            details: Optional additional context
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response format."""
        return {
            "error": {
                "message": self.message,
                "code": self.code,
                "details": self.details,
            }
        }


# ============================================================================
# PERIOD ERRORS (PER100-199)
# ============================================================================

class PeriodError(BizDirException):
    """Base class for reporting period errors."""
    pass


class InvalidPeriodError(PeriodError):
    """Period end precedes its start, or a quarter is outside 1..4."""

    def __init__(
        self,
        start_year: int,
        start_quarter: int,
        end_year: int,
        end_quarter: int,
        reason: str | None = None,
    ):
        message = reason or "Period end must not precede period start"
        super().__init__(
            message=message,
            code="PER100",
            status_code=400,
            details={
                "start_year": start_year,
                "start_quarter": start_quarter,
                "end_year": end_year,
                "end_quarter": end_quarter,
            },
        )


# ============================================================================
# UPSTREAM ERRORS (UPS200-299)
# ============================================================================

class UpstreamError(BizDirException):
    """Base class for failures of read collaborators."""
    pass


class UpstreamFailureError(UpstreamError):
    """A collaborator call failed; wraps the original cause.

    ``entity`` names the lookup that failed ("company_list",
    "financial_report", "activity_field_cost", "max_activity_field_cost"),
    ``entity_id`` identifies the owner or company it was made for.
    """

    def __init__(self, entity: str, entity_id: Any = None, cause: BaseException | None = None):
        message = f"Failed to fetch {entity}"
        if entity_id is not None:
            message = f"{message} for {entity_id}"
        reason = str(cause) if cause is not None else None
        if reason:
            message = f"{message}: {reason}"
        super().__init__(
            message=message,
            code="UPS200",
            status_code=502,
            details={
                "entity": entity,
                "entity_id": str(entity_id) if entity_id is not None else None,
                "reason": reason,
            },
        )
        self.entity = entity
        self.entity_id = entity_id
        self.cause = cause


# ============================================================================
# STATE ERRORS (STA300-399)
# ============================================================================

class StateError(BizDirException):
    """Base class for degenerate computation states."""
    pass


class InvalidStateError(StateError):
    """Computation cannot produce a meaningful number (e.g., division by zero revenue)."""

    def __init__(self, reason: str, **context: Any):
        super().__init__(
            message=f"Invalid state: {reason}",
            code="STA300",
            status_code=500,
            details={"reason": reason, **context},
        )
