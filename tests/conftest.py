"""Pytest configuration and fixtures."""

from collections.abc import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient

from src.adapters.base import RecordSourceError
from src.dashboard.views import DashboardService
from src.main import app
from src.models import ActionItem, ActionItemStatus, AgendaItem, Meeting, Territory


class FakeRecordSource:
    """In-memory RecordSource that counts fetches."""

    def __init__(
        self,
        meetings: list[Meeting] | None = None,
        agenda_items: list[AgendaItem] | None = None,
        action_items: list[ActionItem] | None = None,
        *,
        fail: bool = False,
    ):
        self.meetings = meetings or []
        self.agenda_items = agenda_items or []
        self.action_items = action_items or []
        self.fail = fail
        self.fetch_counts = {"meetings": 0, "agenda_items": 0, "action_items": 0}

    async def fetch_territories(self) -> list[Territory]:
        names = sorted({m.territory for m in self.meetings})
        return [Territory(id=str(i), name=name) for i, name in enumerate(names)]

    async def fetch_meetings(self) -> list[Meeting]:
        return self._fetch("meetings", "reunioes")

    async def fetch_agenda_items(self) -> list[AgendaItem]:
        return self._fetch("agenda_items", "pautas")

    async def fetch_action_items(self) -> list[ActionItem]:
        return self._fetch("action_items", "acoes")

    async def health_check(self) -> bool:
        return not self.fail

    def _fetch(self, kind: str, table: str) -> list:
        if self.fail:
            raise RecordSourceError("connection refused", table=table)
        self.fetch_counts[kind] += 1
        return list(getattr(self, kind))


@pytest.fixture
def action_items() -> list[ActionItem]:
    """North/South action items used across engine tests."""
    return [
        ActionItem(
            id="1",
            territory="North",
            meeting_date="2024-01-10",
            agenda_description="Saneamento básico",
            problem="Falta de coleta de lixo",
            responsible="Maria Silva",
            status=ActionItemStatus.PENDING,
        ),
        ActionItem(
            id="2",
            territory="North",
            meeting_date="2024-01-15",
            agenda_description="Educação",
            problem="Escola sem merenda",
            responsible="João Souza",
            status=ActionItemStatus.COMPLETED,
        ),
        ActionItem(
            id="3",
            territory="South",
            meeting_date="2024-02-01",
            agenda_description="Saúde",
            problem="Posto fechado aos sábados",
            responsible="Ana Lima; Maria Costa",
            status=ActionItemStatus.COMPLETED,
        ),
    ]


@pytest.fixture
def meetings() -> list[Meeting]:
    """Meetings across three territories."""
    return [
        Meeting(
            id="10",
            territory="North",
            date="2024-01-10",
            time="19:00",
            secretary="Carla Mendes",
            agenda_item_count=3,
            action_item_count=5,
        ),
        Meeting(
            id="11",
            territory="South",
            date="2024-01-20",
            secretary="Pedro Alves",
            agenda_item_count=1,
            action_item_count=0,
        ),
        Meeting(
            id="12",
            territory="North",
            date="2024-02-05",
            time="18:30",
            secretary="Carla Mendes",
            agenda_item_count=2,
            action_item_count=2,
        ),
        Meeting(
            id="13",
            territory="East",
            date="2024-03-01",
            secretary="Não informado",
        ),
    ]


@pytest.fixture
def agenda_items() -> list[AgendaItem]:
    """Agenda items with mixed child counts."""
    return [
        AgendaItem(
            id="100",
            territory="North",
            meeting_date="2024-01-10",
            description="Iluminação pública",
            pending_actions=2,
            in_progress_actions=0,
            completed_actions=1,
        ),
        AgendaItem(
            id="101",
            territory="South",
            meeting_date="2024-01-20",
            description="Transporte escolar",
            pending_actions=0,
            in_progress_actions=1,
            completed_actions=0,
        ),
        AgendaItem(
            id="102",
            territory="North",
            meeting_date="2024-02-05",
            description="Pavimentação",
        ),
    ]


@pytest.fixture
def fake_source(meetings, agenda_items, action_items) -> FakeRecordSource:
    """Record source serving the fixture collections."""
    return FakeRecordSource(meetings, agenda_items, action_items)


@pytest.fixture
async def client(fake_source: FakeRecordSource) -> AsyncIterator[AsyncClient]:
    """Create async test client for FastAPI app with a fake record source."""
    app.state.record_source = fake_source
    app.state.dashboard_service = DashboardService(fake_source)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    # Clean up app state
    del app.state.record_source
    del app.state.dashboard_service
