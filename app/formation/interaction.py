"""
Controller di interazione: traduce i gesti dell'utente in mutazioni dello stato.

Tre protocolli di input condividono la stessa superficie di mutazione:
  - seleziona-poi-posiziona (click su giocatore, poi click su posizione)
  - drag & drop con puntatore (il target è noto)
  - drag & drop touch (il target è la posizione più vicina al rilascio)

Ogni mutazione è preceduta dal controllo permessi sullo snapshot corrente
della squadra. Permesso negato e notazioni malformate vengono risolti qui e
segnalati tramite il notifier iniettato; non risalgono oltre il controller.
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, Protocol

from app.formation.assignment import AssignmentState
from app.formation.authorization import TeamRoles, can_mutate
from app.formation.catalog import default_notation
from app.formation.errors import AuthorizationDenied, MalformedNotation
from app.formation.layout import PlayerRef, Position

logger = logging.getLogger(__name__)

DEFAULT_DROP_THRESHOLD = 20.0


class Notifier(Protocol):
    def notify(self, kind: str, title: str, message: str) -> None:
        ...


class LoggingNotifier:
    """Notifier di default senza UI: scrive sul log."""

    def notify(self, kind: str, title: str, message: str) -> None:
        level = logging.WARNING if kind == "error" else logging.INFO
        logger.log(level, "[%s] %s: %s", kind, title, message)


@dataclass(frozen=True)
class DragState:
    player: PlayerRef
    # None se il giocatore è trascinato dalla lista rosa
    from_position_id: str | None = None


def nearest_position(
    positions: list[Position], x: float, y: float, max_distance: float = DEFAULT_DROP_THRESHOLD
) -> Position | None:
    """Posizione più vicina al punto (x, y) entro max_distance; a parità vince la prima generata."""
    best: Position | None = None
    best_distance = math.inf
    for position in positions:
        distance = math.hypot(position.x - x, position.y - y)
        if distance < best_distance:
            best, best_distance = position, distance
    if best is None or best_distance > max_distance:
        return None
    return best


class InteractionController:
    def __init__(
        self,
        state: AssignmentState,
        team_snapshot: Callable[[], TeamRoles | None],
        user_id: int | None,
        notifier: Notifier | None = None,
        swap_on_occupied_drop: bool = False,
    ):
        self.state = state
        self.user_id = user_id
        self.notifier = notifier or LoggingNotifier()
        self.swap_on_occupied_drop = swap_on_occupied_drop
        self._team_snapshot = team_snapshot
        self._pending: PlayerRef | None = None
        self._drag: DragState | None = None

    @property
    def pending_player(self) -> PlayerRef | None:
        return self._pending

    @property
    def drag(self) -> DragState | None:
        return self._drag

    def _authorize(self, action: str) -> None:
        team = self._team_snapshot()
        if not can_mutate(team, self.user_id):
            raise AuthorizationDenied(action, self.user_id, getattr(team, "id", None))

    def _guarded(self, action: str, denied_message: str) -> bool:
        try:
            self._authorize(action)
        except AuthorizationDenied as e:
            logger.warning("Mutazione rifiutata: %s", e)
            self.notifier.notify("error", "Permesso negato", denied_message)
            return False
        return True

    # --- seleziona-poi-posiziona ---

    def select_player(self, player: PlayerRef) -> bool:
        if not self._guarded("select_player", "Non hai i permessi per selezionare giocatori"):
            return False
        self._pending = player
        return True

    def clear_selection(self) -> None:
        self._pending = None

    def activate_position(self, position_id: str) -> bool:
        """
        Click su una posizione: se occupata la svuota, se vuota e c'è un giocatore
        selezionato ve lo posiziona. Restituisce True se lo stato è cambiato.
        """
        if not self._guarded("activate_position", "Non hai i permessi per modificare le posizioni"):
            return False
        if self.state.player_at(position_id) is not None:
            self.state.remove_player(position_id)
            return True
        if self._pending is None:
            return False
        self.state.place_player(self._pending, position_id)
        self._pending = None
        return True

    # --- operazioni dirette ---

    def swap(self, position_id_a: str, position_id_b: str) -> bool:
        if not self._guarded("swap", "Non hai i permessi per modificare le posizioni"):
            return False
        self.state.swap(position_id_a, position_id_b)
        return True

    def change_formation(self, notation: str) -> list[PlayerRef]:
        """Cambia formazione mantenendo i giocatori sugli id comuni; ritorna i giocatori in panchina."""
        if not self._guarded("change_formation", "Non hai i permessi per cambiare formazione"):
            return []
        team_size = getattr(self._team_snapshot(), "team_size", 11)
        try:
            return self.state.change_formation(notation, team_size)
        except MalformedNotation as e:
            fallback = default_notation(team_size)
            logger.warning("%s; ripiego su %s", e, fallback)
            self.notifier.notify("warning", "Formazione non valida", f"Formazione {notation!r} non valida, uso {fallback}")
            return self.state.change_formation(fallback)

    # --- drag & drop ---

    def start_drag(self, player: PlayerRef, from_position_id: str | None = None) -> None:
        self._drag = DragState(player=player, from_position_id=from_position_id)

    def cancel_drag(self) -> None:
        self._drag = None

    def _complete_drop(self, target_id: str) -> bool:
        drag, self._drag = self._drag, None
        if drag is None:
            return False
        if not self._guarded("drop", "Non hai i permessi per spostare i giocatori"):
            return False
        if drag.from_position_id == target_id:
            return False
        if (
            self.swap_on_occupied_drop
            and drag.from_position_id is not None
            and self.state.player_at(drag.from_position_id) == drag.player
            and self.state.player_at(target_id) is not None
        ):
            self.state.swap(drag.from_position_id, target_id)
        else:
            # L'eventuale occupante del target finisce in panchina.
            self.state.place_player(drag.player, target_id)
        return True


class PointerInteractionController(InteractionController):
    """Mouse: l'evento di drop conosce già la posizione di destinazione."""

    def drop(self, target_position_id: str) -> bool:
        return self._complete_drop(target_position_id)


class TouchInteractionController(InteractionController):
    """Touch: nessun evento di drop, il target è la posizione più vicina al rilascio."""

    def __init__(self, *args, drop_threshold: float = DEFAULT_DROP_THRESHOLD, **kwargs):
        super().__init__(*args, **kwargs)
        self.drop_threshold = drop_threshold

    def touch_end(self, x: float, y: float) -> bool:
        if self._drag is None:
            return False
        target = nearest_position(self.state.positions, x, y, self.drop_threshold)
        if target is None:
            logger.debug("Rilascio touch a (%.1f, %.1f) lontano da ogni posizione, drag annullato", x, y)
            self.cancel_drag()
            return False
        return self._complete_drop(target.id)


def build_controller(
    state: AssignmentState,
    team_snapshot: Callable[[], TeamRoles | None],
    user_id: int | None,
    notifier: Notifier | None = None,
    touch: bool = False,
    swap_on_occupied_drop: bool = False,
    drop_threshold: float = DEFAULT_DROP_THRESHOLD,
) -> PointerInteractionController | TouchInteractionController:
    """Sceglie la variante una sola volta, in base alla capacità del dispositivo."""
    if touch:
        return TouchInteractionController(
            state,
            team_snapshot,
            user_id,
            notifier,
            swap_on_occupied_drop=swap_on_occupied_drop,
            drop_threshold=drop_threshold,
        )
    return PointerInteractionController(
        state, team_snapshot, user_id, notifier, swap_on_occupied_drop=swap_on_occupied_drop
    )


def probe_touch(max_touch_points: int = 0, has_touch_events: bool = False) -> bool:
    return has_touch_events or max_touch_points > 0
