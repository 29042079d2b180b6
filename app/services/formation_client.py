"""
Client async per l'API formazioni.
Usato dall'editor lato client per caricare squadra, rosa e formazione e per
salvare le posizioni occupate. Gli errori HTTP e di rete vengono propagati
(httpx.HTTPStatusError / httpx.RequestError): li gestisce l'editor.
"""

import logging
from typing import Any

import httpx

from app.core.config import get_formation_api_url

logger = logging.getLogger(__name__)


class FormationApiClient:
    """Client async per /api/teams/{id}/... L'utente viaggia nell'header X-User-Id."""

    def __init__(
        self,
        user_id: int,
        base_url: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._user_id = user_id
        self._base_url = base_url or get_formation_api_url()
        self._timeout = timeout
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        return {"X-User-Id": str(self._user_id)}

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            headers=self._headers(),
            transport=self._transport,
        )

    async def get_team(self, team_id: int) -> dict[str, Any]:
        """Campi di ruolo: created_by, captain_id, authorized_members, team_size."""
        async with self._client() as client:
            r = await client.get(f"/api/teams/{team_id}")
            r.raise_for_status()
            return r.json()

    async def get_roster(self, team_id: int) -> list[dict[str, Any]]:
        async with self._client() as client:
            r = await client.get(f"/api/teams/{team_id}/players")
            r.raise_for_status()
            data = r.json()
        players = data.get("players", [])
        logger.info("get_roster team_id=%s -> %s giocatori", team_id, len(players))
        return players

    async def get_formation(self, team_id: int) -> dict[str, Any] | None:
        """
        Formazione salvata: {formation: {name, team_size}, occupied_positions: [...]}.
        None se il server risponde 404 (nessuna formazione: si usa il default).
        """
        async with self._client() as client:
            r = await client.get(f"/api/teams/{team_id}/formation")
            if r.status_code == 404:
                return None
            r.raise_for_status()
            return r.json()

    async def save_formation(self, team_id: int, payload: dict[str, Any]) -> dict[str, Any]:
        async with self._client() as client:
            r = await client.post(f"/api/teams/{team_id}/formation", json=payload)
            r.raise_for_status()
            data = r.json()
        logger.info(
            "save_formation team_id=%s formation=%s -> %s posizioni",
            team_id, payload.get("formation_name"), data.get("saved"),
        )
        return data
