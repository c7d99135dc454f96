"""Base types for record source adapters.

This module defines the RecordSource protocol and RecordSourceError
used by adapters that read dashboard records from external systems.
"""

from typing import Protocol, runtime_checkable

from src.models import ActionItem, AgendaItem, Meeting, Territory


class RecordSourceError(Exception):
    """Raised when the record source cannot return a collection.

    Carries the table that was being read and, when the failure came
    from an HTTP response, its status code.
    """

    def __init__(self, message: str, table: str, status_code: int | None = None):
        super().__init__(message)
        self.table = table
        self.status_code = status_code


@runtime_checkable
class RecordSource(Protocol):
    """Protocol for adapters that read dashboard record collections.

    Adapters implement this protocol for structural subtyping -
    they don't need to inherit, just implement the methods.
    Every fetch returns a complete snapshot or raises RecordSourceError.
    """

    async def fetch_territories(self) -> list[Territory]: ...

    async def fetch_meetings(self) -> list[Meeting]: ...

    async def fetch_agenda_items(self) -> list[AgendaItem]: ...

    async def fetch_action_items(self) -> list[ActionItem]: ...

    async def health_check(self) -> bool:
        """Check if adapter is properly configured and can connect.

        Returns:
            True if adapter is healthy, False otherwise
        """
        ...
