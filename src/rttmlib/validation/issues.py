"""Validation issue types shared by the syntax and consistency stages."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from ..core.data_classes import RTTMRecord


class ValidationSeverity(Enum):
    """Validation issue severity levels.

    Attributes:
        ERROR: The file is invalid and must not be scored
        WARNING: Suspicious content that does not fail validation
        INFO: Informational notes
    """

    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"


@dataclass
class ValidationIssue:
    """A validation issue found in an RTTM file.

    Attributes:
        message (str): Human-readable description of the issue.
        location (Optional[str]): Location tag of the offending record,
            e.g. "line 12".
        severity (ValidationSeverity): Severity level of the issue.
        error_code (Optional[str]): Machine-readable issue category,
            e.g. "OVERLAP" or "MISSING_IP".

    Example:
        ```python
        issue = ValidationIssue(
            message="SU at 1.20 contains no words",
            location="line 7",
            error_code="NO_CONTENT",
        )
        print(issue)  # "line 7: SU at 1.20 contains no words"
        ```
    """

    message: str
    location: Optional[str] = None
    severity: ValidationSeverity = ValidationSeverity.ERROR
    error_code: Optional[str] = None

    @classmethod
    def for_record(
        cls,
        record: RTTMRecord,
        message: str,
        error_code: Optional[str] = None,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "ValidationIssue":
        return cls(
            message=message,
            location=record.location or None,
            severity=severity,
            error_code=error_code,
        )

    @property
    def is_error(self) -> bool:
        return self.severity is ValidationSeverity.ERROR

    def to_dict(self) -> Dict[str, Any]:
        """Convert validation issue to structured dictionary format."""
        return {
            "message": self.message,
            "location": self.location,
            "severity": self.severity.value,
            "error_code": self.error_code,
        }

    def __str__(self) -> str:
        if self.location:
            return f"{self.location}: {self.message}"
        return self.message


def has_errors(issues: List[ValidationIssue]) -> bool:
    """True if any issue has ERROR severity."""
    return any(issue.is_error for issue in issues)
