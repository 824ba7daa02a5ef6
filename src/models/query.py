"""
Structured ledger queries.

A LedgerQuery describes one search from the lookup view. It is executed
DETERMINISTICALLY against a snapshot of the entity store by
LedgerQueryExecutor; nothing is estimated or cached.
"""

from datetime import date, datetime
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, model_validator

from src.models.ledger import Entry, EntryKind


class LedgerQuery(BaseModel):
    """
    A search over the ledger.

    query_type:
        person   - income given by one person within the date range
        category - entries of one kind and exact category within the range
        today    - income and expense totals for `today` (range ignored)
    """

    query_id: UUID = Field(
        default_factory=uuid4
    )
    created_at: datetime = Field(
        default_factory=datetime.now
    )

    query_type: str = Field(
        ...,
        pattern="^(person|category|today)$",
        description="Type of query to execute"
    )

    person_id: Optional[int] = None
    kind: Optional[EntryKind] = None
    category: Optional[str] = None

    date_from: Optional[date] = None
    date_to: Optional[date] = None

    @model_validator(mode='after')
    def validate_filters(self) -> 'LedgerQuery':
        """Each query type needs its own filters."""
        if self.query_type == "person" and self.person_id is None:
            raise ValueError("A person query needs a person_id")
        if self.query_type == "category" and (self.kind is None or not self.category):
            raise ValueError("A category query needs both kind and category")
        return self


class LedgerQueryResult(BaseModel):
    """Result of executing a LedgerQuery."""

    query_id: UUID
    executed_at: datetime = Field(
        default_factory=datetime.now
    )

    success: bool
    error_message: Optional[str] = None

    matches: list[Entry] = Field(default_factory=list)
    total: int = 0
    result_count: int = Field(default=0, ge=0)

    # Only set for `today` queries
    total_income: Optional[int] = None
    total_expense: Optional[int] = None

    query_description: str = Field(
        ...,
        description="Human-readable description of what was queried"
    )

    @property
    def data_found(self) -> bool:
        return self.result_count > 0
