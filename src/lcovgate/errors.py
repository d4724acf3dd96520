"""Centralised exception hierarchy for lcovgate."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lcovgate.enforce import Violation


class LcovGateError(Exception):
    """Base class for all custom lcovgate exceptions."""


class CoverageReportError(LcovGateError):
    """Base class for errors related to LCOV report handling."""


class CoverageReportNotFoundError(CoverageReportError):
    """LCOV report could not be located on disk."""


class InvalidCoverageReportError(CoverageReportError):
    """LCOV report was found but does not contain a valid tracefile."""


class IgnoreConfigError(LcovGateError):
    """Ignore-list configuration is missing or malformed."""


class CoverageThresholdViolation(LcovGateError):  # noqa: N818
    """A checked file has less than full coverage in some category."""

    def __init__(self, violation: Violation) -> None:
        super().__init__(violation.message())
        self.violation = violation


__all__ = [
    "CoverageReportError",
    "CoverageReportNotFoundError",
    "CoverageThresholdViolation",
    "IgnoreConfigError",
    "InvalidCoverageReportError",
    "LcovGateError",
]
