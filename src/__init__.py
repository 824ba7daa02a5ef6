"""
Offering Ledger - Source Package

A single-ledger bookkeeping tool for a congregation: dated income and
expense entries attributed to people and categories, with a running
balance, today's balance split and weekly/yearly summaries derived from
them on every change.

DESIGN PRINCIPLES:
1. The aggregation engine is pure: (entries, roster, today) in, results out
2. Validate at the capture boundary, not in the engine
3. Fail early, fail visibly
4. Sensitive flows sit behind the access gate
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Offering Ledger Team"
