"""Split of the cumulative balance at the start of today."""

from datetime import date
from typing import Iterable

from src.engine.ordering import entry_day
from src.models.ledger import Entry, TodaySplit


def compute_today_split(entries: Iterable[Entry], today: date) -> TodaySplit:
    """
    Split the balance into what was there before today and today's change.

    Entries dated after `today` fall into neither bucket; they only show up
    in the running balance of the display feed.
    """
    previous_balance = 0
    todays_change = 0

    for entry in entries:
        day = entry_day(entry)
        if day < today:
            previous_balance += entry.signed_amount
        elif day == today:
            todays_change += entry.signed_amount

    return TodaySplit(
        previous_balance=previous_balance,
        todays_change=todays_change,
    )
