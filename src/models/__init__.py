"""Data models for the governance dashboard.

This module exports all record models consumed by the dashboard engine:
- BaseRecord: Base class with id and frozen config
- TerritoryRecord: Base class for territory-scoped records
- Territory: Named grouping used as the rollup dimension
- Meeting: Governance meeting ("Reunião")
- AgendaItem: Topic discussed at a meeting ("Pauta")
- ActionItem: Tracked task with a tri-state status ("Apontamento")
"""

from src.models.action_item import STATUS_ORDER, ActionItem, ActionItemStatus
from src.models.agenda_item import AgendaItem, ChildStatus
from src.models.base import BaseRecord, TerritoryRecord
from src.models.meeting import Meeting
from src.models.territory import Territory

__all__ = [
    # Base
    "BaseRecord",
    "TerritoryRecord",
    # Records
    "Territory",
    "Meeting",
    "AgendaItem",
    "ChildStatus",
    "ActionItem",
    "ActionItemStatus",
    "STATUS_ORDER",
]
