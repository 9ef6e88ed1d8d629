"""Data validation utilities for the comparison catalogs.

Provides reusable building blocks for:
- Collecting validation issues with a severity
- Summarizing results for reports and CI exit codes
- Type and range checks on raw catalog values
"""

import math
from typing import Any, Dict, List, Optional


class ValidationIssue:
    """Represents a single validation issue found during checks."""

    def __init__(self, check_name: str, severity: str, detail: str,
                 record_id: Optional[str] = None, field: Optional[str] = None):
        """Initialize a validation issue.

        Args:
            check_name: Name of the check that found this issue
            severity: Issue severity ('error', 'warning', 'info')
            detail: Human-readable description of the issue
            record_id: Id of the catalog record that triggered the issue
            field: Record field the issue refers to
        """
        self.check_name = check_name
        self.severity = severity
        self.detail = detail
        self.record_id = record_id
        self.field = field

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "check": self.check_name,
            "severity": self.severity,
            "detail": self.detail,
            "record_id": self.record_id,
            "field": self.field,
        }

    def __repr__(self) -> str:
        return (f"ValidationIssue(check={self.check_name}, severity={self.severity}, "
                f"record_id={self.record_id})")


class ValidationResult:
    """Collects and reports on validation check results."""

    def __init__(self, total_records: int = 0):
        self.issues: List[ValidationIssue] = []
        self.total_records = total_records

    def add_issue(self, check_name: str, severity: str, detail: str,
                  record_id: Optional[str] = None,
                  field: Optional[str] = None) -> None:
        """Add a validation issue."""
        self.issues.append(
            ValidationIssue(check_name, severity, detail, record_id, field)
        )

    def get_issues_by_severity(self, severity: str) -> List[ValidationIssue]:
        """Get all issues of a specific severity ('error', 'warning', 'info')."""
        return [i for i in self.issues if i.severity == severity]

    def error_count(self) -> int:
        return len(self.get_issues_by_severity("error"))

    def warning_count(self) -> int:
        return len(self.get_issues_by_severity("warning"))

    def invalid_record_ids(self) -> set[str]:
        """Ids of records carrying at least one error."""
        return {
            i.record_id for i in self.issues
            if i.severity == "error" and i.record_id is not None
        }

    def valid_records(self) -> int:
        """Number of records without errors."""
        return self.total_records - len(self.invalid_record_ids())

    def is_valid(self) -> bool:
        """Check if validation passed (no errors)."""
        return self.error_count() == 0

    def summary_text(self) -> str:
        """Generate human-readable validation summary."""
        lines = [
            "Validation Summary:",
            f"  Records: {self.total_records} ({self.valid_records()} valid)",
            f"  Issues: {len(self.issues)}",
            f"    - Errors: {self.error_count()}",
            f"    - Warnings: {self.warning_count()}",
        ]
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "is_valid": self.is_valid(),
            "total_records": self.total_records,
            "valid_records": self.valid_records(),
            "errors": [i.to_dict() for i in self.get_issues_by_severity("error")],
            "warnings": [i.to_dict() for i in self.get_issues_by_severity("warning")],
        }


def is_valid_fiscal_year(year: Any) -> bool:
    """Check if year is a plausible fiscal year (2000-2100)."""
    return isinstance(year, int) and not isinstance(year, bool) and 2000 <= year <= 2100


def is_valid_amount(value: Any) -> bool:
    """Check if value is a finite, non-negative dollar amount."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value >= 0


def is_valid_unit_cost(value: Any) -> bool:
    """Check if value is a usable cost per unit (finite and strictly positive)."""
    return is_valid_amount(value) and value > 0
