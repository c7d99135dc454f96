"""Adapters for external record sources.

This module provides adapters for reading dashboard records:
- SupabaseAdapter: Read meetings, agenda items and actions from Supabase
- RecordSource: Protocol for read adapters
- RecordSourceError: Raised when a collection cannot be fetched
"""

from src.adapters.base import RecordSource, RecordSourceError
from src.adapters.supabase_adapter import SupabaseAdapter

__all__ = [
    "RecordSource",
    "RecordSourceError",
    "SupabaseAdapter",
]
