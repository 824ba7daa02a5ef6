"""
Two-Stage Entry Validation

DESIGN DECISION: Validation happens at the capture boundary, in two stages:

STAGE 1 - SCHEMA VALIDATION:
- Amount present and strictly positive
- Date present
- Category present

STAGE 2 - SEMANTIC VALIDATION:
- Income category is one of the fixed income categories
- Expense category is in the ledger's expense vocabulary
- Income names a person who is on the roster
- An expense person, if given, is on the roster
- Future dates are flagged (they stay out of today's balance split)

The engine assumes all of this already happened. It still copes with a
bad record, but it never reports one.

IMPORTANT: Validation NEVER silently fixes issues.
It reports them so the form can show them.
"""

from datetime import date
from typing import Callable, Optional

from src.models.ledger import (
    EntryKind,
    IncomeCategory,
    LedgerSnapshot,
    Position,
)
from src.models.validation import EntryDraft, ValidationIssue, ValidationResult
from src.services.storage import DuplicateError, EntityStoreInterface


_INCOME_CATEGORY_NAMES = {category.value for category in IncomeCategory}


class EntryValidator:
    """
    Validates captured entries through a two-stage pipeline.

    Stage 1: Schema validation (needs nothing but the draft)
    Stage 2: Semantic validation (needs the store's roster and vocabulary)
    """

    def __init__(
        self,
        store: EntityStoreInterface,
        today: Optional[Callable[[], date]] = None,
    ):
        """
        Initialize validator.

        Args:
            store: Entity store used for roster and vocabulary checks
            today: Clock used for the future-date warning
        """
        self._store = store
        self._today = today or date.today

    def _validate_schema(
        self,
        draft: EntryDraft,
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 1: Schema validation.

        Returns: (is_valid, list_of_issues)
        """
        issues = []

        if draft.amount is None:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Amount is required",
                severity="error",
            ))
        elif draft.amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be greater than zero",
                severity="error",
                suggested_fix="Enter the amount without a sign",
            ))

        if draft.entry_date is None:
            issues.append(ValidationIssue(
                field="entry_date",
                issue_type="missing",
                message="Date is required",
                severity="error",
            ))

        if not draft.category:
            issues.append(ValidationIssue(
                field="category",
                issue_type="missing",
                message="Category is required",
                severity="error",
            ))

        is_valid = not any(issue.severity == "error" for issue in issues)

        return is_valid, issues

    def _validate_semantic(
        self,
        draft: EntryDraft,
        snapshot: LedgerSnapshot,
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 2: Semantic validation.

        Returns: (is_valid, list_of_issues)
        """
        issues = []
        names = snapshot.person_names()

        if draft.kind == EntryKind.INCOME:
            if draft.category not in _INCOME_CATEGORY_NAMES:
                issues.append(ValidationIssue(
                    field="category",
                    issue_type="unknown_category",
                    message=f"'{draft.category}' is not an income category",
                    severity="error",
                ))
            if draft.person_id is None:
                issues.append(ValidationIssue(
                    field="person_id",
                    issue_type="missing",
                    message="Income must name the person who gave it",
                    severity="error",
                    suggested_fix="Add the person to the roster first if needed",
                ))
            elif draft.person_id not in names:
                issues.append(ValidationIssue(
                    field="person_id",
                    issue_type="unknown_reference",
                    message=f"Person {draft.person_id} is not on the roster",
                    severity="error",
                ))
        else:
            if draft.category not in snapshot.expense_categories:
                issues.append(ValidationIssue(
                    field="category",
                    issue_type="unknown_category",
                    message=f"'{draft.category}' is not an expense category",
                    severity="error",
                    suggested_fix="Add the category before using it",
                ))
            if draft.person_id is not None and draft.person_id not in names:
                issues.append(ValidationIssue(
                    field="person_id",
                    issue_type="unknown_reference",
                    message=f"Person {draft.person_id} is not on the roster",
                    severity="error",
                ))

        if draft.entry_date > self._today():
            issues.append(ValidationIssue(
                field="entry_date",
                issue_type="future_date",
                message=f"Date ({draft.entry_date}) is in the future",
                severity="warning",
                suggested_fix="Future entries are left out of today's balance",
            ))

        is_valid = not any(issue.severity == "error" for issue in issues)

        return is_valid, issues

    def validate(self, draft: EntryDraft) -> ValidationResult:
        """
        Run full two-stage validation pipeline.

        Stage 2 only runs if stage 1 passes.
        """
        all_issues = []

        schema_valid, schema_issues = self._validate_schema(draft)
        all_issues.extend(schema_issues)

        semantic_valid = False
        if schema_valid:
            semantic_valid, semantic_issues = self._validate_semantic(draft, self._store.snapshot())
            all_issues.extend(semantic_issues)

        return ValidationResult(
            schema_valid=schema_valid,
            semantic_valid=semantic_valid,
            issues=all_issues,
        )

    def validate_person(self, name: str, position: str) -> ValidationResult:
        """Check a new or edited roster entry."""
        issues = []

        if not name or not name.strip():
            issues.append(ValidationIssue(
                field="name",
                issue_type="missing",
                message="Name is required",
                severity="error",
            ))

        try:
            Position(position)
        except ValueError:
            issues.append(ValidationIssue(
                field="position",
                issue_type="invalid_value",
                message=f"'{position}' is not a known position",
                severity="error",
            ))

        is_valid = not issues
        return ValidationResult(
            schema_valid=is_valid,
            semantic_valid=is_valid,
            issues=issues,
        )

    def normalize_expense_category(self, category: str) -> str:
        """
        Trim a proposed expense category and check it is new.

        Raises:
            ValueError: If the name is empty
            DuplicateError: If the exact name already exists
        """
        name = (category or "").strip()
        if not name:
            raise ValueError("Expense category name is required")
        if name in self._store.snapshot().expense_categories:
            raise DuplicateError(f"Expense category already exists: {name}")
        return name

    def get_user_friendly_summary(
        self,
        result: ValidationResult,
    ) -> str:
        """Generate a short summary of validation results for the form."""
        if result.is_valid and not result.issues:
            return "All checks passed."

        lines = []

        errors = [issue for issue in result.issues if issue.severity == "error"]
        if errors:
            lines.append("Please fix the following:")
            for issue in errors:
                lines.append(f"   • {issue.message}")
                if issue.suggested_fix:
                    lines.append(f"     ({issue.suggested_fix})")

        warnings = [issue for issue in result.issues if issue.severity == "warning"]
        if warnings:
            if lines:
                lines.append("")
            lines.append("Please verify the following:")
            for issue in warnings:
                lines.append(f"   • {issue.message}")

        return "\n".join(lines)
