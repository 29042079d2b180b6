"""
Generatore del layout in campo a partire dalla notazione formazione.

Funzione pura: stessa notazione => stessi id, stesso ordine, stesse coordinate.
Coordinate in percentuale (0-100) su un campo normalizzato, porta in basso.
Gli id sono stabili per ruolo+indice, così un cambio di formazione può
riportare i giocatori sulle posizioni con lo stesso id.
"""

import logging
from dataclasses import dataclass, replace
from typing import Generic, TypeVar

from app.formation.catalog import default_notation
from app.formation.errors import MalformedNotation

logger = logging.getLogger(__name__)

T = TypeVar("T")
E = TypeVar("E", bound=Exception)

GOALKEEPER_XY = (50, 92)
DEFENCE_Y = 75
MIDFIELD_Y = 50
STRIKER_XY = (50, 25)

# Ventaglio del centrocampo: x decrescente da destra a sinistra, calibrato a mano.
MIDFIELD_FANS: dict[int, tuple[int, ...]] = {
    1: (50,),
    2: (70, 30),
    3: (80, 50, 20),
    4: (85, 60, 40, 15),
    5: (90, 70, 50, 30, 10),
    6: (90, 75, 60, 40, 25, 10),
    7: (95, 80, 65, 50, 35, 20, 5),
}


@dataclass(frozen=True)
class PlayerRef:
    """Proiezione leggera di un giocatore della rosa; usata solo per identità e display."""

    id: int
    user_id: int
    full_name: str
    username: str


@dataclass
class Position:
    id: str
    name: str
    x: float
    y: float
    player: PlayerRef | None = None

    @property
    def is_occupied(self) -> bool:
        return self.player is not None


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err(Generic[E]):
    error: E


def normalize_notation(notation: str) -> str:
    """Le notazioni legacy includevano il portiere ("1-3-3-1"): lo rimuove."""
    notation = notation.strip()
    parts = notation.split("-")
    if len(parts) == 4 and parts[0] == "1":
        return "-".join(parts[1:])
    return notation


def parse_notation(notation: str) -> Ok[tuple[int, ...]] | Err[MalformedNotation]:
    parts = notation.split("-")
    if len(parts) not in (2, 3):
        return Err(MalformedNotation(notation, f"attese 2 o 3 parti, trovate {len(parts)}"))
    counts = []
    for part in parts:
        # isdigit() accetta cifre Unicode ("²") che int() rifiuta.
        if not (part.isascii() and part.isdigit()):
            return Err(MalformedNotation(notation, f"parte non numerica {part!r}"))
        count = int(part)
        if count == 0:
            return Err(MalformedNotation(notation, "le linee devono avere almeno un giocatore"))
        counts.append(count)
    return Ok(tuple(counts))


def _defenders(count: int) -> list[Position]:
    if count == 2:
        return [
            Position("rb", "Terzino destro", 80, DEFENCE_Y),
            Position("lb", "Terzino sinistro", 20, DEFENCE_Y),
        ]
    if count == 3:
        return [
            Position("rb", "Terzino destro", 80, DEFENCE_Y),
            Position("cb", "Difensore centrale", 50, DEFENCE_Y),
            Position("lb", "Terzino sinistro", 20, DEFENCE_Y),
        ]
    # Linee difensive diverse da 2 o 3 non hanno posizioni.
    return []


def _midfielders(count: int) -> list[Position]:
    fan = MIDFIELD_FANS.get(count, ())
    if len(fan) == 1:
        return [Position("cm", "Centrocampista", fan[0], MIDFIELD_Y)]
    return [
        Position(f"cm{index}", "Centrocampista", x, MIDFIELD_Y)
        for index, x in enumerate(fan, start=1)
    ]


def _forwards(count: int) -> list[Position]:
    if count == 1:
        return [Position("st", "Attaccante", *STRIKER_XY)]
    return []


def try_generate_layout(
    notation: str, team_size: int | None = None
) -> Ok[list[Position]] | Err[MalformedNotation]:
    """Con team_size, rifiuta le notazioni che non entrano nella squadra (portiere incluso)."""
    parsed = parse_notation(notation)
    if isinstance(parsed, Err):
        return parsed

    counts = parsed.value
    if team_size is not None and sum(counts) + 1 > team_size:
        return Err(MalformedNotation(notation, f"{sum(counts) + 1} giocatori per una squadra da {team_size}"))
    defenders, midfielders = counts[0], counts[1]
    forwards = counts[2] if len(counts) == 3 else 0

    positions = [Position("gk", "Portiere", *GOALKEEPER_XY)]
    positions.extend(_defenders(defenders))
    positions.extend(_midfielders(midfielders))
    positions.extend(_forwards(forwards))
    return Ok(positions)


def generate_layout(notation: str, team_size: int | None = None) -> list[Position]:
    """Layout per la notazione. Solleva MalformedNotation se non interpretabile o troppo grande."""
    result = try_generate_layout(notation, team_size)
    if isinstance(result, Err):
        raise result.error
    return result.value


def layout_for(notation: str | None, team_size: int) -> tuple[str, list[Position]]:
    """
    Layout con fallback: notazione assente, malformata o troppo grande => default del catalogo
    per la dimensione squadra. Restituisce (notazione effettiva, posizioni).
    """
    if notation:
        notation = normalize_notation(notation)
        result = try_generate_layout(notation, team_size)
        if isinstance(result, Ok):
            return notation, result.value
        logger.warning("%s; uso il default per team_size=%s", result.error, team_size)

    fallback = default_notation(team_size)
    return fallback, generate_layout(fallback)


def merge_players(layout: list[Position], players_by_position: dict[str, PlayerRef]) -> list[Position]:
    """Applica i giocatori al layout per id posizione; id assenti dal layout vengono ignorati."""
    return [replace(position, player=players_by_position.get(position.id)) for position in layout]
