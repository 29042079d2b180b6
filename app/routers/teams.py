"""
API Teams: dati di ruolo della squadra, rosa assegnabile, dimensione squadra,
gestione capitano e membri autorizzati.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.auth import get_current_user_id
from app.core.database import get_db
from app.formation.authorization import can_mutate, role_for
from app.schemas.formations import (
    AuthorizedMemberRequest,
    CaptainRequest,
    FormationInfo,
    PlayerRefOut,
    RosterResponse,
    TeamAccessResponse,
    TeamRolesResponse,
    TeamSizeRequest,
    TeamSizeResponse,
)
from app.services.formation_service import (
    get_roster,
    get_team,
    set_authorized_member,
    set_captain,
    update_team_size,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/teams", tags=["teams"])


def _db_error(team_id: int, e: SQLAlchemyError) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={
            "error": "Errore database durante salvataggio",
            "detail": str(e)[:300],
            "team_id": team_id,
        },
    )


@router.post("/authorized", response_model=TeamRolesResponse)
def authorized_member(
    body: AuthorizedMemberRequest,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Aggiunge o rimuove un membro autorizzato. Solo il proprietario della squadra."""
    team = get_team(body.team_id, db)
    if team is None:
        raise HTTPException(status_code=404, detail="Squadra non trovata")
    if team.created_by != user_id:
        raise HTTPException(status_code=403, detail="Non hai i permessi per questa operazione")

    try:
        members = set_authorized_member(team, body.user_id, body.action, user_id, db)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SQLAlchemyError as e:
        logger.exception("Errore DB membri autorizzati team_id=%s: %s", body.team_id, e)
        return _db_error(body.team_id, e)

    message = "Membro autorizzato aggiunto" if body.action == "add" else "Membro autorizzato rimosso"
    return TeamRolesResponse(
        team_id=team.id, captain_id=team.captain_id, authorized_members=members, message=message,
    )


@router.post("/captain", response_model=TeamRolesResponse)
def captain(
    body: CaptainRequest,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Nomina il capitano tra i giocatori attivi della rosa. Solo il proprietario."""
    team = get_team(body.team_id, db)
    if team is None:
        raise HTTPException(status_code=404, detail="Squadra non trovata")
    if team.created_by != user_id:
        raise HTTPException(status_code=403, detail="Non hai i permessi per questa operazione")

    try:
        set_captain(team, body.captain_id, db)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SQLAlchemyError as e:
        logger.exception("Errore DB nomina capitano team_id=%s: %s", body.team_id, e)
        return _db_error(body.team_id, e)

    return TeamRolesResponse(
        team_id=team.id,
        captain_id=team.captain_id,
        authorized_members=list(team.authorized_members or []),
        message="Capitano aggiornato",
    )


@router.get("/{team_id}", response_model=TeamAccessResponse)
def team_access(
    team_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Campi di ruolo della squadra e ruolo dell'utente corrente. 404 se non trovata."""
    team = get_team(team_id, db)
    if team is None:
        raise HTTPException(status_code=404, detail="Squadra non trovata")

    roster = get_roster(team_id, db)
    role = role_for(team, user_id, (p.user_id for p in roster))
    return TeamAccessResponse(
        id=team.id,
        name=team.name,
        created_by=team.created_by,
        captain_id=team.captain_id,
        team_size=team.team_size or 11,
        authorized_members=list(team.authorized_members or []),
        role=role.value if role else None,
        can_edit=can_mutate(team, user_id),
    )


@router.get("/{team_id}/players", response_model=RosterResponse)
def team_players(
    team_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Rosa assegnabile: giocatori attivi. Array vuoto se la squadra non ha giocatori."""
    if get_team(team_id, db) is None:
        raise HTTPException(status_code=404, detail="Squadra non trovata")
    players = get_roster(team_id, db)
    return RosterResponse(team_id=team_id, players=[PlayerRefOut.model_validate(p) for p in players])


@router.put("/{team_id}/team-size", response_model=TeamSizeResponse)
def team_size(
    team_id: int,
    body: TeamSizeRequest,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """
    Cambia la dimensione squadra (6-11) e riporta la formazione al default del catalogo.
    Solo owner, capitano o membri autorizzati.
    """
    team = get_team(team_id, db)
    if team is None:
        raise HTTPException(status_code=404, detail="Squadra non trovata")
    if not can_mutate(team, user_id):
        raise HTTPException(status_code=403, detail="Non hai i permessi per questa operazione")

    try:
        notation = update_team_size(team, body.team_size, db)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SQLAlchemyError as e:
        logger.exception("Errore DB team-size team_id=%s: %s", team_id, e)
        return _db_error(team_id, e)

    return TeamSizeResponse(
        team_id=team_id,
        team_size=body.team_size,
        formation=FormationInfo(name=notation, team_size=body.team_size),
    )
