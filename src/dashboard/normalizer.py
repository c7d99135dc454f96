"""Record normalizer for joined upstream rows.

Converts the nested rows returned by the record source (meetings joined
to their territory, agenda items and actions) into flat dashboard
records with human-readable territory names.
"""

from collections.abc import Callable, Iterable
from typing import TypeVar

import structlog
from pydantic import ValidationError

from src.config import settings
from src.models import ActionItem, ActionItemStatus, AgendaItem, Meeting, Territory

logger = structlog.get_logger()

RecordT = TypeVar("RecordT")


def _territory_name(row: dict | None) -> str:
    """Territory name from a joined ``territorios`` object."""
    name = (row or {}).get("nome")
    if not name or not str(name).strip():
        return settings.missing_territory_label
    return str(name)


def _meeting_of(row: dict) -> dict:
    return row.get("reunioes") or {}


def normalize_territory(row: dict) -> Territory:
    """Normalize a ``territorios`` row."""
    return Territory(id=row["id_territorio"], name=row.get("nome") or "")


def normalize_meeting(row: dict) -> Meeting:
    """Normalize a ``reunioes`` row joined to territory, agenda items and actions.

    Agenda and action counts are computed here, once, from the joined
    children; downstream code treats them as precomputed.
    """
    agenda_rows = row.get("pautas") or []
    action_count = sum(len(p.get("acoes") or []) for p in agenda_rows)

    return Meeting(
        id=row["id_reuniao"],
        territory=_territory_name(row.get("territorios")),
        date=row.get("data") or "",
        time=row.get("hora") or "",
        secretary=row.get("secretario_nome") or settings.missing_secretary_label,
        agenda_item_count=len(agenda_rows),
        action_item_count=action_count,
    )


def normalize_agenda_item(row: dict) -> AgendaItem:
    """Normalize a ``pautas`` row joined to its meeting and actions.

    Child counts are tallied from the joined action statuses. Actions
    with an unknown status are left out of every count.
    """
    counts = dict.fromkeys(ActionItemStatus, 0)
    for action in row.get("acoes") or []:
        try:
            counts[ActionItemStatus.parse(action.get("status"))] += 1
        except ValueError:
            logger.warning(
                "skipping action with unknown status",
                agenda_item_id=row.get("id_pauta"),
                status=action.get("status"),
            )

    meeting = _meeting_of(row)
    return AgendaItem(
        id=row["id_pauta"],
        territory=_territory_name(meeting.get("territorios")),
        meeting_date=meeting.get("data") or "",
        description=row.get("descricao") or "",
        pending_actions=counts[ActionItemStatus.PENDING],
        in_progress_actions=counts[ActionItemStatus.IN_PROGRESS],
        completed_actions=counts[ActionItemStatus.COMPLETED],
    )


def normalize_action_item(row: dict) -> ActionItem:
    """Normalize an ``acoes`` row joined to its agenda item and meeting.

    An unknown status keeps the row with ``status=None``; it is left out
    of status breakdowns but still listed and counted in totals.
    """
    agenda = row.get("pautas") or {}
    meeting = _meeting_of(agenda)
    raw_status = row.get("status")
    try:
        status = ActionItemStatus.parse(raw_status)
    except ValueError:
        logger.warning(
            "unknown action status",
            action_item_id=row.get("id_acao"),
            status=raw_status,
        )
        status = None

    return ActionItem(
        id=row["id_acao"],
        territory=_territory_name(meeting.get("territorios")),
        meeting_date=meeting.get("data") or "",
        agenda_description=agenda.get("descricao") or "",
        problem=row.get("problema") or "",
        responsible=row.get("responsaveis") or "",
        status=status,
        raw_status=str(raw_status or ""),
    )


def normalize_rows(
    rows: Iterable[dict],
    normalizer: Callable[[dict], RecordT],
) -> list[RecordT]:
    """Normalize a batch of rows, skipping the malformed ones.

    A row that fails normalization is logged and dropped; it never
    aborts the rest of the batch.

    Args:
        rows: Raw rows from the record source
        normalizer: One of the normalize_* functions

    Returns:
        Records for every row that normalized cleanly
    """
    records: list[RecordT] = []
    skipped = 0
    for row in rows:
        try:
            records.append(normalizer(row))
        except (KeyError, ValueError, ValidationError) as e:
            skipped += 1
            logger.warning(
                "skipping malformed row",
                normalizer=normalizer.__name__,
                error=str(e),
            )

    if skipped:
        logger.info(
            "normalized rows",
            normalizer=normalizer.__name__,
            kept=len(records),
            skipped=skipped,
        )
    return records
