"""
Catalogo formazioni per numero di giocatori in campo (6-11).
Il portiere è implicito e non compare mai nella notazione.
"""

from dataclasses import dataclass

MIN_TEAM_SIZE = 6
MAX_TEAM_SIZE = 11


@dataclass(frozen=True)
class FormationOption:
    notation: str
    description: str


def _option(notation: str) -> FormationOption:
    parts = [int(p) for p in notation.split("-")]
    labels = [("Difensore", "Difensori"), ("Centrocampista", "Centrocampisti"), ("Attaccante", "Attaccanti")]
    description = ", ".join(
        f"{count} {singular if count == 1 else plural}"
        for count, (singular, plural) in zip(parts, labels)
    )
    return FormationOption(notation=notation, description=description)


FORMATIONS_BY_SIZE: dict[int, tuple[FormationOption, ...]] = {
    6: (_option("3-1-1"), _option("2-2-1"), _option("3-2")),
    7: (_option("3-2-1"), _option("2-3-1"), _option("3-3")),
    8: (_option("3-3-1"), _option("2-4-1"), _option("3-4")),
    9: (_option("3-4-1"), _option("2-5-1"), _option("3-5")),
    10: (_option("3-5-1"), _option("2-6-1"), _option("3-6")),
    11: (_option("3-6-1"), _option("2-7-1"), _option("3-7")),
}

FALLBACK_FORMATION = _option("3-3-1")


def list_formations(team_size: int) -> list[FormationOption]:
    """Formazioni valide per la dimensione squadra. Fuori da 6-11: solo il default sicuro."""
    return list(FORMATIONS_BY_SIZE.get(team_size, (FALLBACK_FORMATION,)))


def default_notation(team_size: int) -> str:
    return list_formations(team_size)[0].notation


def is_valid_team_size(team_size: int) -> bool:
    return MIN_TEAM_SIZE <= team_size <= MAX_TEAM_SIZE
