"""
Stato di assegnazione giocatori -> posizioni.

Invariante: ogni giocatore occupa al massimo una posizione. È mantenuta
dall'algoritmo di mutazione (il giocatore viene tolto dalla posizione
precedente), mai rifiutando l'operazione.
"""

import logging
from dataclasses import replace
from typing import Iterable

from app.formation.layout import PlayerRef, Position, generate_layout, merge_players

logger = logging.getLogger(__name__)


class AssignmentState:
    def __init__(self, notation: str, positions: list[Position]):
        self.notation = notation
        self._positions: list[Position] = []
        self._index: dict[str, int] = {}
        self._load(positions)

    @classmethod
    def from_layout(cls, notation: str) -> "AssignmentState":
        return cls(notation, generate_layout(notation))

    @classmethod
    def from_saved(
        cls,
        notation: str,
        layout: list[Position],
        saved: Iterable[tuple[str, PlayerRef]] = (),
    ) -> "AssignmentState":
        """
        Unisce le posizioni occupate salvate su un layout appena generato.
        Le posizioni salvate sono indicizzate per id; id sconosciuti vengono scartati.
        """
        return cls(notation, merge_players(layout, dict(saved)))

    def _load(self, positions: list[Position]) -> None:
        self._positions = [replace(p) for p in positions]
        self._index = {p.id: i for i, p in enumerate(self._positions)}
        # Dati salvati incoerenti: lo stesso giocatore su più posizioni, vince la prima.
        seen: set[int] = set()
        for position in self._positions:
            if position.player is None:
                continue
            if position.player.id in seen:
                logger.warning("Giocatore %s già in campo, libero %s", position.player.id, position.id)
                position.player = None
            else:
                seen.add(position.player.id)

    @property
    def positions(self) -> list[Position]:
        return [replace(p) for p in self._positions]

    def position(self, position_id: str) -> Position:
        return replace(self._positions[self._require(position_id)])

    def _require(self, position_id: str) -> int:
        try:
            return self._index[position_id]
        except KeyError:
            raise KeyError(f"Posizione sconosciuta: {position_id!r}") from None

    def player_at(self, position_id: str) -> PlayerRef | None:
        return self._positions[self._require(position_id)].player

    def position_of(self, player_id: int) -> str | None:
        for position in self._positions:
            if position.player is not None and position.player.id == player_id:
                return position.id
        return None

    def occupied(self) -> list[Position]:
        return [replace(p) for p in self._positions if p.player is not None]

    def place_player(self, player: PlayerRef, position_id: str) -> None:
        """Mette il giocatore sulla posizione, liberando l'occupante e la sua posizione precedente."""
        target = self._require(position_id)
        for position in self._positions:
            if position.player is not None and position.player.id == player.id:
                position.player = None
        self._positions[target].player = player

    def remove_player(self, position_id: str) -> None:
        self._positions[self._require(position_id)].player = None

    def swap(self, position_id_a: str, position_id_b: str) -> None:
        """Scambia gli occupanti; se B è vuota equivale a spostare A in B."""
        a = self._positions[self._require(position_id_a)]
        b = self._positions[self._require(position_id_b)]
        a.player, b.player = b.player, a.player

    def change_formation(self, notation: str, team_size: int | None = None) -> list[PlayerRef]:
        """
        Rigenera il layout e riporta i giocatori sulle posizioni con lo stesso id.
        Restituisce i giocatori rimasti senza posizione (in panchina).
        Solleva MalformedNotation senza modificare lo stato, anche quando la
        notazione supera team_size.
        """
        new_layout = generate_layout(notation, team_size)
        carried = {p.id: p.player for p in self._positions if p.player is not None}
        new_ids = {p.id for p in new_layout}
        benched = [player for position_id, player in carried.items() if position_id not in new_ids]

        self.notation = notation
        self._load(merge_players(new_layout, carried))
        if benched:
            logger.info("Cambio formazione %s: %s giocatori in panchina", notation, len(benched))
        return benched
