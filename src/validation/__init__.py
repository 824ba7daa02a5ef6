"""Capture-boundary validation package."""

from src.validation.validator import EntryValidator

__all__ = ["EntryValidator"]
