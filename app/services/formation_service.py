"""
Servizio formazioni lato server: caricamento e salvataggio della formazione
di una squadra, rosa assegnabile, dimensione squadra e ruoli.

Salvataggio: upsert idempotente di TeamFormation per team_id e sostituzione
completa delle posizioni occupate. Una lista vuota svuota tutte le posizioni.
"""

import logging
from dataclasses import dataclass, field

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.formation.catalog import default_notation, is_valid_team_size
from app.formation.layout import (
    Err,
    PlayerRef,
    Position,
    layout_for,
    merge_players,
    normalize_notation,
    try_generate_layout,
)
from app.models import FormationPosition, Player, Team, TeamFormation
from app.schemas.formations import OccupiedPositionIn

logger = logging.getLogger(__name__)


@dataclass
class FormationState:
    notation: str
    team_size: int
    positions: list[Position]
    saved: list[tuple[str, PlayerRef]] = field(default_factory=list)


def _player_ref(player: Player) -> PlayerRef:
    return PlayerRef(
        id=player.id,
        user_id=player.user_id,
        full_name=player.user.full_name if player.user else "",
        username=player.user.username if player.user else "",
    )


def get_team(team_id: int, db: Session) -> Team | None:
    return db.get(Team, team_id)


def get_roster(team_id: int, db: Session) -> list[PlayerRef]:
    """Giocatori attivi della squadra, in ordine di iscrizione."""
    players = (
        db.query(Player)
        .filter(Player.team_id == team_id, Player.is_active.is_(True))
        .order_by(Player.id)
        .all()
    )
    return [_player_ref(p) for p in players]


def load_formation(team: Team, db: Session) -> FormationState:
    """
    Formazione salvata unita al layout generato per id posizione.
    Senza formazione salvata: default del catalogo per la dimensione squadra.
    """
    formation = db.query(TeamFormation).filter(TeamFormation.team_id == team.id).first()
    team_size = (formation.team_size if formation else None) or team.team_size or 11
    saved_name = formation.formation_name if formation else None

    notation, layout = layout_for(saved_name, team_size)
    if saved_name and notation != saved_name:
        logger.info("team_id=%s formazione salvata %r letta come %r", team.id, saved_name, notation)

    rows = (
        db.query(FormationPosition)
        .filter(FormationPosition.team_id == team.id)
        .order_by(FormationPosition.id)
        .all()
    )
    saved = [(row.position_id, _player_ref(row.player)) for row in rows if row.player is not None]
    positions = merge_players(layout, dict(saved))
    return FormationState(notation=notation, team_size=team_size, positions=positions, saved=saved)


def save_formation(
    team: Team,
    formation_name: str,
    team_size: int,
    occupied: list[OccupiedPositionIn],
    db: Session,
) -> tuple[str, int]:
    """
    Salva notazione e posizioni occupate. Restituisce (notazione, posizioni salvate).
    Solleva MalformedNotation per notazioni non interpretabili o che non entrano
    in team_size, ValueError per dimensione squadra fuori range o giocatori non in rosa.
    """
    if not is_valid_team_size(team_size):
        raise ValueError(f"team_size deve essere tra 6 e 11, ricevuto {team_size}")

    notation = normalize_notation(formation_name)
    result = try_generate_layout(notation, team_size)
    if isinstance(result, Err):
        raise result.error
    layout_ids = {p.id for p in result.value}

    roster_ids = {
        pid for (pid,) in db.query(Player.id).filter(Player.team_id == team.id, Player.is_active.is_(True))
    }

    rows: list[FormationPosition] = []
    seen_players: set[int] = set()
    for entry in occupied:
        if entry.player_id is None:
            continue
        if entry.id not in layout_ids:
            logger.warning("team_id=%s posizione %r assente da %s, scartata", team.id, entry.id, notation)
            continue
        if entry.player_id not in roster_ids:
            raise ValueError(f"Giocatore {entry.player_id} non in rosa")
        if entry.player_id in seen_players:
            logger.warning("team_id=%s giocatore %s su più posizioni, tengo la prima", team.id, entry.player_id)
            continue
        seen_players.add(entry.player_id)
        rows.append(
            FormationPosition(
                team_id=team.id,
                position_id=entry.id,
                player_id=entry.player_id,
                position_name=entry.name,
                x_coordinate=entry.x,
                y_coordinate=entry.y,
            )
        )

    try:
        _upsert_formation(team.id, notation, team_size, db)
        db.query(FormationPosition).filter(FormationPosition.team_id == team.id).delete()
        db.add_all(rows)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info("team_id=%s formazione %s salvata, %s posizioni occupate", team.id, notation, len(rows))
    return notation, len(rows)


def _upsert_formation(team_id: int, notation: str, team_size: int, db: Session) -> TeamFormation:
    formation = db.query(TeamFormation).filter(TeamFormation.team_id == team_id).first()
    if formation is None:
        formation = TeamFormation(team_id=team_id, formation_name=notation, team_size=team_size)
        db.add(formation)
    else:
        formation.formation_name = notation
        formation.team_size = team_size
    return formation


def update_team_size(team: Team, team_size: int, db: Session) -> str:
    """Aggiorna la dimensione e riporta la formazione al default del catalogo. Ritorna la notazione."""
    if not is_valid_team_size(team_size):
        raise ValueError(f"team_size deve essere tra 6 e 11, ricevuto {team_size}")

    notation = default_notation(team_size)
    try:
        team.team_size = team_size
        _upsert_formation(team.id, notation, team_size, db)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    logger.info("team_id=%s team_size=%s formazione default %s", team.id, team_size, notation)
    return notation


def set_authorized_member(team: Team, user_id: int, action: str, acting_user_id: int, db: Session) -> list[int]:
    """Solo il proprietario gestisce i membri autorizzati; non può autorizzare sé stesso."""
    if user_id == acting_user_id:
        raise ValueError("Non puoi autorizzare te stesso")

    members = list(team.authorized_members or [])
    if action == "add":
        if user_id not in members:
            members.append(user_id)
    elif action == "remove":
        members = [m for m in members if m != user_id]
    else:
        raise ValueError(f"Azione non valida: {action!r}")

    try:
        # Riassegno la lista: le mutazioni in-place su JSON non vengono tracciate.
        team.authorized_members = members
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    return members


def set_captain(team: Team, captain_id: int, db: Session) -> int:
    in_roster = (
        db.query(Player.id)
        .filter(Player.team_id == team.id, Player.user_id == captain_id, Player.is_active.is_(True))
        .first()
    )
    if in_roster is None:
        raise ValueError(f"L'utente {captain_id} non fa parte della rosa")

    try:
        team.captain_id = captain_id
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    return captain_id

