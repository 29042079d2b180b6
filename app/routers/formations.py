"""
API Formazioni: catalogo per dimensione squadra, lettura e salvataggio
della formazione di una squadra (solo posizioni occupate).
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.auth import get_current_user_id
from app.core.database import get_db
from app.formation.authorization import can_mutate
from app.formation.catalog import list_formations
from app.formation.errors import MalformedNotation
from app.schemas.formations import (
    FormationCatalogResponse,
    FormationInfo,
    FormationOptionOut,
    FormationResponse,
    OccupiedPositionOut,
    PlayerRefOut,
    PositionOut,
    SaveFormationRequest,
    SaveFormationResponse,
)
from app.services.formation_service import get_team, load_formation, save_formation

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["formations"])


@router.get("/formations", response_model=FormationCatalogResponse)
def formation_catalog(team_size: int = 11):
    """Formazioni disponibili per la dimensione squadra. Fuori da 6-11 restituisce il default."""
    options = [FormationOptionOut(notation=o.notation, description=o.description) for o in list_formations(team_size)]
    return FormationCatalogResponse(team_size=team_size, formations=options)


@router.get("/teams/{team_id}/formation", response_model=FormationResponse)
def get_team_formation(
    team_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """
    Formazione della squadra: layout generato dalla notazione salvata con i
    giocatori uniti per id posizione. Nessuna formazione salvata => default catalogo.
    """
    team = get_team(team_id, db)
    if team is None:
        raise HTTPException(status_code=404, detail="Squadra non trovata")

    state = load_formation(team, db)
    return FormationResponse(
        formation=FormationInfo(name=state.notation, team_size=state.team_size),
        positions=[
            PositionOut(
                id=p.id, name=p.name, x=p.x, y=p.y,
                player=PlayerRefOut.model_validate(p.player) if p.player else None,
            )
            for p in state.positions
        ],
        occupied_positions=[
            OccupiedPositionOut(position_id=position_id, player=PlayerRefOut.model_validate(player))
            for position_id, player in state.saved
        ],
    )


@router.post("/teams/{team_id}/formation", response_model=SaveFormationResponse)
def post_team_formation(
    team_id: int,
    body: SaveFormationRequest,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """
    Salva notazione e posizioni occupate. Solo owner, capitano o membri autorizzati.
    Lista vuota: svuota tutte le posizioni della squadra. Ultimo salvataggio vince.
    """
    team = get_team(team_id, db)
    if team is None:
        raise HTTPException(status_code=404, detail="Squadra non trovata")
    if not can_mutate(team, user_id):
        logger.warning("Salvataggio formazione negato user_id=%s team_id=%s", user_id, team_id)
        raise HTTPException(status_code=403, detail="Non hai i permessi per questa operazione")

    try:
        notation, saved = save_formation(
            team, body.formation_name, body.team_size, body.occupied_positions, db,
        )
    except MalformedNotation as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SQLAlchemyError as e:
        logger.exception("Errore DB salvataggio formazione team_id=%s: %s", team_id, e)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Errore database durante salvataggio",
                "detail": str(e)[:300],
                "team_id": team_id,
            },
        )

    return SaveFormationResponse(
        success=True,
        formation=FormationInfo(name=notation, team_size=body.team_size),
        saved=saved,
        message="Formazione e posizioni salvate",
    )
