"""Errors raised by the aggregation engine."""


class LedgerComputationError(Exception):
    """Base exception for a failed aggregation."""
    pass


class MalformedDateError(LedgerComputationError):
    """An entry carries a date that cannot be ordered."""

    def __init__(self, entry_id: int, value: object):
        self.entry_id = entry_id
        self.value = value
        super().__init__(f"Entry {entry_id} has an unorderable date: {value!r}")
