"""
Editor formazione lato client: carica squadra, rosa e formazione salvata,
espone lo stato di assegnazione e il controller di interazione, salva lo
snapshot delle posizioni occupate.

Lo stato vive in memoria tra caricamento e salvataggio. Un salvataggio
trasmette uno snapshot e non blocca ulteriori modifiche: vince l'ultimo.
"""

import asyncio
import contextlib
import logging
from typing import Any

import httpx

from app.core.config import get_touch_drop_threshold
from app.formation.assignment import AssignmentState
from app.formation.authorization import TeamAccess, can_mutate
from app.formation.errors import SaveFailed
from app.formation.interaction import (
    LoggingNotifier,
    Notifier,
    PointerInteractionController,
    TouchInteractionController,
    build_controller,
)
from app.formation.layout import PlayerRef, layout_for
from app.services.formation_client import FormationApiClient

logger = logging.getLogger(__name__)


def _team_access(data: dict[str, Any]) -> TeamAccess:
    return TeamAccess(
        id=data["id"],
        created_by=data.get("created_by"),
        captain_id=data.get("captain_id"),
        authorized_members=list(data.get("authorized_members") or []),
        team_size=data.get("team_size") or 11,
        name=data.get("name") or "",
    )


def _player_ref(data: dict[str, Any]) -> PlayerRef:
    return PlayerRef(
        id=data["id"],
        user_id=data["user_id"],
        full_name=data.get("full_name") or "",
        username=data.get("username") or "",
    )


class FormationEditor:
    def __init__(
        self,
        team_id: int,
        user_id: int,
        client: FormationApiClient,
        notifier: Notifier | None = None,
        touch: bool = False,
        swap_on_occupied_drop: bool = False,
        drop_threshold: float | None = None,
    ):
        self.team_id = team_id
        self.user_id = user_id
        self.client = client
        self.notifier = notifier or LoggingNotifier()
        self.touch = touch
        self.swap_on_occupied_drop = swap_on_occupied_drop
        self.drop_threshold = drop_threshold if drop_threshold is not None else get_touch_drop_threshold()

        self.team: TeamAccess | None = None
        self.roster: list[PlayerRef] = []
        self.team_size = 11
        self.state: AssignmentState | None = None
        self.controller: PointerInteractionController | TouchInteractionController | None = None
        self._save_task: asyncio.Task | None = None

    async def load(self) -> AssignmentState:
        """Carica tutto in parallelo e costruisce lo stato unendo le posizioni salvate per id."""
        team_data, roster_data, formation_data = await asyncio.gather(
            self.client.get_team(self.team_id),
            self.client.get_roster(self.team_id),
            self.client.get_formation(self.team_id),
        )
        self.team = _team_access(team_data)
        self.roster = [_player_ref(p) for p in roster_data]

        notation = None
        saved: list[tuple[str, PlayerRef]] = []
        self.team_size = self.team.team_size
        if formation_data:
            formation = formation_data.get("formation") or {}
            notation = formation.get("name")
            self.team_size = formation.get("team_size") or self.team_size
            saved = [
                (entry["position_id"], _player_ref(entry["player"]))
                for entry in formation_data.get("occupied_positions", [])
            ]

        notation, layout = layout_for(notation, self.team_size)
        self.state = AssignmentState.from_saved(notation, layout, saved)
        self.controller = build_controller(
            self.state,
            lambda: self.team,
            self.user_id,
            self.notifier,
            touch=self.touch,
            swap_on_occupied_drop=self.swap_on_occupied_drop,
            drop_threshold=self.drop_threshold,
        )
        logger.info(
            "Editor team_id=%s caricato: %s, %s posizioni occupate",
            self.team_id, notation, len(self.state.occupied()),
        )
        return self.state

    async def refresh_team(self) -> TeamAccess:
        """Ricarica i campi di ruolo: capitano e membri autorizzati possono cambiare."""
        self.team = _team_access(await self.client.get_team(self.team_id))
        return self.team

    def _require_state(self) -> AssignmentState:
        if self.state is None:
            raise RuntimeError("FormationEditor.load() non ancora eseguito")
        return self.state

    def benched(self) -> list[PlayerRef]:
        """Giocatori della rosa senza posizione in campo."""
        state = self._require_state()
        on_field = {p.player.id for p in state.occupied()}
        return [p for p in self.roster if p.id not in on_field]

    def snapshot(self) -> dict[str, Any]:
        """Payload di salvataggio: solo le posizioni occupate."""
        state = self._require_state()
        return {
            "formation_name": state.notation,
            "team_size": self.team_size,
            "occupied_positions": [
                {"id": p.id, "player_id": p.player.id, "name": p.name, "x": p.x, "y": p.y}
                for p in state.occupied()
            ],
        }

    async def save(self) -> dict[str, Any] | None:
        """
        Salva lo snapshot corrente. None se l'utente non ha i permessi (notificato).
        Solleva SaveFailed in caso di errore; lo stato locale resta invariato.
        """
        if not can_mutate(self.team, self.user_id):
            logger.warning("Salvataggio negato user_id=%s team_id=%s", self.user_id, self.team_id)
            self.notifier.notify("error", "Permesso negato", "Non hai i permessi per salvare la formazione")
            return None

        payload = self.snapshot()
        try:
            result = await self.client.save_formation(self.team_id, payload)
        except httpx.HTTPStatusError as e:
            logger.exception("Salvataggio formazione team_id=%s HTTP %s", self.team_id, e.response.status_code)
            detail = _error_detail(e.response)
            raise SaveFailed(f"Formazione non salvata: {detail}", status_code=e.response.status_code) from e
        except httpx.RequestError as e:
            logger.exception("Salvataggio formazione team_id=%s errore di rete: %s", self.team_id, e)
            raise SaveFailed(f"Formazione non salvata: errore di rete ({e})") from e

        self.notifier.notify("success", "Salvato", "Formazione e posizioni salvate")
        return result

    def schedule_save(self) -> asyncio.Task:
        """Salvataggio fire-and-forget; un errore viene notificato, senza retry."""
        self._save_task = asyncio.create_task(self._save_and_report())
        return self._save_task

    async def _save_and_report(self) -> None:
        try:
            await self.save()
        except SaveFailed as e:
            self.notifier.notify("error", "Errore", e.message)

    async def close(self) -> None:
        """Chiusura della vista: un salvataggio in corso viene abbandonato."""
        task, self._save_task = self._save_task, None
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task


def _error_detail(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(data, dict):
        return str(data.get("detail") or data.get("error") or data)[:200]
    return str(data)[:200]
