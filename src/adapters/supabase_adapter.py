"""Adapter for reading dashboard records from Supabase.

Uses the PostgREST endpoint exposed by Supabase (``/rest/v1/<table>``)
over httpx. Embedded resources in the ``select`` parameter join each
row to its territory, meeting, agenda items and actions, and the
normalizer flattens them into dashboard records.
"""

import httpx
import structlog
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from src.adapters.base import RecordSourceError
from src.config import settings
from src.dashboard.normalizer import (
    normalize_action_item,
    normalize_agenda_item,
    normalize_meeting,
    normalize_rows,
    normalize_territory,
)
from src.models import ActionItem, AgendaItem, Meeting, Territory

logger = structlog.get_logger()


class SupabaseAdapter:
    """Read-only adapter for the governance meetings database.

    Follows the established adapter pattern with lazy client initialization.
    """

    TERRITORIES_SELECT = "id_territorio,nome"
    MEETINGS_SELECT = (
        "id_reuniao,data,hora,secretario_nome,"
        "territorios!inner(nome),pautas(id_pauta,acoes(id_acao))"
    )
    AGENDA_ITEMS_SELECT = (
        "id_pauta,descricao,"
        "reunioes!inner(data,territorios!inner(nome)),acoes(status)"
    )
    ACTION_ITEMS_SELECT = (
        "id_acao,problema,responsaveis,status,"
        "pautas!inner(descricao,reunioes!inner(data,territorios!inner(nome)))"
    )

    def __init__(
        self,
        url: str | None = None,
        api_key: str | None = None,
        *,
        timeout: float | None = None,
        retry_attempts: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize with project URL and API key.

        Args:
            url: Supabase project URL. Falls back to settings.supabase_url.
            api_key: Supabase anon or service key.
                     Falls back to settings.supabase_key.
            timeout: Request timeout in seconds
            retry_attempts: Attempts per fetch on transport errors
            transport: Optional httpx transport (used by tests)
        """
        self._url = (url or settings.supabase_url or "").rstrip("/")
        self._api_key = api_key or settings.supabase_key
        self._timeout = timeout or settings.request_timeout_seconds
        self._retry_attempts = retry_attempts or settings.fetch_retry_attempts
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the PostgREST client.

        Raises:
            ValueError: If URL or API key is not configured
        """
        if self._client is None:
            if not self._url or not self._api_key:
                raise ValueError(
                    "No Supabase credentials. Set SUPABASE_URL and SUPABASE_KEY "
                    "env vars or pass url/api_key to constructor."
                )
            self._client = httpx.AsyncClient(
                base_url=f"{self._url}/rest/v1",
                headers={
                    "apikey": self._api_key,
                    "Authorization": f"Bearer {self._api_key}",
                    "Accept": "application/json",
                },
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def fetch_rows(
        self,
        table: str,
        select: str,
        order: str | None = None,
    ) -> list[dict]:
        """Fetch every row of a table with embedded joins.

        Transport errors are retried with exponential backoff; HTTP
        error statuses are not.

        Args:
            table: Table name (e.g. "reunioes")
            select: PostgREST select expression
            order: Optional PostgREST order expression (e.g. "data.desc")

        Returns:
            List of row dicts

        Raises:
            RecordSourceError: If the request fails or returns a non-list body
        """
        params = {"select": select}
        if order:
            params["order"] = order

        try:
            client = self._get_client()
        except ValueError as e:
            raise RecordSourceError(str(e), table=table) from e

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self._retry_attempts),
                wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
                retry=retry_if_exception_type(httpx.TransportError),
                before_sleep=before_sleep_log(logger, log_level=20),  # INFO level
                reraise=True,
            ):
                with attempt:
                    response = await client.get(f"/{table}", params=params)
                    response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "record source returned error",
                table=table,
                status_code=e.response.status_code,
            )
            raise RecordSourceError(
                f"Failed to fetch {table}: HTTP {e.response.status_code}",
                table=table,
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.warning("record source unreachable", table=table, error=str(e))
            raise RecordSourceError(f"Failed to fetch {table}: {e}", table=table) from e

        try:
            rows = response.json()
        except ValueError as e:
            logger.warning("record source returned invalid JSON", table=table)
            raise RecordSourceError(
                f"Invalid JSON response body for {table}", table=table
            ) from e

        if not isinstance(rows, list):
            raise RecordSourceError(
                f"Unexpected response body for {table}", table=table
            )

        logger.debug("fetched rows", table=table, count=len(rows))
        return rows

    async def fetch_territories(self) -> list[Territory]:
        """Fetch all territories ordered by name."""
        rows = await self.fetch_rows(
            "territorios", self.TERRITORIES_SELECT, order="nome.asc"
        )
        return normalize_rows(rows, normalize_territory)

    async def fetch_meetings(self) -> list[Meeting]:
        """Fetch all meetings, most recent first."""
        rows = await self.fetch_rows(
            "reunioes", self.MEETINGS_SELECT, order="data.desc"
        )
        return normalize_rows(rows, normalize_meeting)

    async def fetch_agenda_items(self) -> list[AgendaItem]:
        """Fetch all agenda items with their action status tallies."""
        rows = await self.fetch_rows("pautas", self.AGENDA_ITEMS_SELECT)
        return normalize_rows(rows, normalize_agenda_item)

    async def fetch_action_items(self) -> list[ActionItem]:
        """Fetch all action items."""
        rows = await self.fetch_rows("acoes", self.ACTION_ITEMS_SELECT)
        return normalize_rows(rows, normalize_action_item)

    async def health_check(self) -> bool:
        """Check that the record source answers a minimal query."""
        try:
            client = self._get_client()
            response = await client.get(
                "/territorios", params={"select": "id_territorio", "limit": "1"}
            )
            return response.status_code == 200
        except (ValueError, httpx.HTTPError) as e:
            logger.warning("record source health check failed", error=str(e))
            return False
