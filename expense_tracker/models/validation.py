"""
Validation Models

Shapes returned by the form validator. Issues are reported, never fixed.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'mismatch')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """Outcome of validating one form submission."""

    form: str = Field(
        ...,
        description="Which form was validated"
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    @property
    def first_error(self) -> Optional[str]:
        """Message to show the user; forms display one error at a time."""
        for issue in self.issues:
            if issue.severity == "error":
                return issue.message
        return None
