"""
Validation result models.

Validation NEVER silently fixes input. Every problem found at the capture
boundary is reported as a ValidationIssue so the caller can show it.
"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from src.models.ledger import EntryKind


class EntryDraft(BaseModel):
    """
    What the capture form submits, before validation.

    Everything except the kind is optional because a half-filled form is
    still something we report on rather than reject outright.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    kind: EntryKind
    entry_date: Optional[date] = None
    category: Optional[str] = None
    amount: Optional[int] = None
    person_id: Optional[int] = None
    note: Optional[str] = Field(default=None, max_length=500)


class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'unknown_reference')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """
    Result of the two-stage entry validation.

    Stage 1: Schema validation (amount, date, category present and well formed)
    Stage 2: Semantic validation (vocabulary and roster checks)
    """

    validated_at: datetime = Field(
        default_factory=datetime.now
    )

    schema_valid: bool = Field(
        ...,
        description="Did schema validation pass?"
    )
    semantic_valid: bool = Field(
        ...,
        description="Did semantic validation pass?"
    )

    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )

    @property
    def is_valid(self) -> bool:
        return self.schema_valid and self.semantic_valid and not self.has_errors

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def error_messages(self) -> list[str]:
        return [issue.message for issue in self.issues if issue.severity == "error"]
