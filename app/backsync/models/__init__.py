"""Data models for backsync.

This module exports the core data structures used throughout the application.
"""

from backsync.models.difference import ChangeType, Difference, NodeKind
from backsync.models.entry import Entry, EntryKind
from backsync.models.result import ApplyOperation, ApplyResult

__all__ = [
    "ApplyOperation",
    "ApplyResult",
    "ChangeType",
    "Difference",
    "Entry",
    "EntryKind",
    "NodeKind",
]
