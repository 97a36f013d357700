"""Domain errors raised by the insights engine and its storage collaborator.

Each error carries the HTTP status it maps to and a ``detail`` that is safe to
show to the caller. ``main.py`` renders every ``InsightsError`` through a
single exception handler.
"""

from __future__ import annotations

from typing import Any, Sequence


class InsightsError(Exception):
    status_code: int = 500
    detail: str = "Internal server error"

    def __init__(self, detail: str | None = None) -> None:
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)

    def extra(self) -> dict[str, Any]:
        return {}


class InvalidPeriod(InsightsError):
    status_code = 400

    def __init__(self, period: str | None, supported: Sequence[str]) -> None:
        self.period = period
        self.supported = list(supported)
        super().__init__(f"Invalid period: {period!r}")

    def extra(self) -> dict[str, Any]:
        return {"supported": self.supported}


class InvalidBudget(InsightsError):
    status_code = 400
    detail = "Valid monthly budget is required"


class InvalidDateRange(InsightsError):
    status_code = 400
    detail = "Invalid date range"


class UserNotFound(InsightsError):
    status_code = 404

    def __init__(self, user_id: int) -> None:
        self.user_id = user_id
        super().__init__("User not found")


class StorageFailure(InsightsError):
    """Transaction store read failed. The cause is logged, never returned."""

    status_code = 500

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"Failed to {operation}")


class InvalidChartType(InsightsError):
    status_code = 400

    def __init__(self, chart_type: str | None, supported: Sequence[str]) -> None:
        self.chart_type = chart_type
        self.supported = list(supported)
        super().__init__(f"Invalid chart_type: {chart_type!r}")

    def extra(self) -> dict[str, Any]:
        return {"supported": self.supported}
