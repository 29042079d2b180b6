"""Pydantic schemas per API formazioni, rosa e ruoli squadra."""

from pydantic import BaseModel, Field


# --- Rosa ---


class PlayerRefOut(BaseModel):
    id: int
    user_id: int
    full_name: str
    username: str

    class Config:
        from_attributes = True


class RosterResponse(BaseModel):
    team_id: int
    players: list[PlayerRefOut]


# --- Catalogo ---


class FormationOptionOut(BaseModel):
    notation: str
    description: str

    class Config:
        from_attributes = True


class FormationCatalogResponse(BaseModel):
    team_size: int
    formations: list[FormationOptionOut]


# --- Formazione squadra ---


class FormationInfo(BaseModel):
    name: str
    team_size: int


class PositionOut(BaseModel):
    """Posizione generata; player valorizzato solo se occupata."""
    id: str
    name: str
    x: float
    y: float
    player: PlayerRefOut | None = None

    class Config:
        from_attributes = True


class OccupiedPositionOut(BaseModel):
    position_id: str
    player: PlayerRefOut


class FormationResponse(BaseModel):
    formation: FormationInfo
    positions: list[PositionOut]
    occupied_positions: list[OccupiedPositionOut]


class OccupiedPositionIn(BaseModel):
    id: str
    player_id: int | None = None  # entry senza giocatore: scartata al salvataggio
    name: str = ""
    x: float
    y: float


class SaveFormationRequest(BaseModel):
    formation_name: str
    team_size: int
    occupied_positions: list[OccupiedPositionIn] = Field(default_factory=list)


class SaveFormationResponse(BaseModel):
    success: bool
    formation: FormationInfo
    saved: int
    message: str = ""


# --- Squadra e ruoli ---


class TeamAccessResponse(BaseModel):
    id: int
    name: str
    created_by: int | None = None
    captain_id: int | None = None
    team_size: int
    authorized_members: list[int] = Field(default_factory=list)
    role: str | None = None  # "owner" | "captain" | "authorized_member" | "member"
    can_edit: bool = False


class TeamSizeRequest(BaseModel):
    team_size: int


class TeamSizeResponse(BaseModel):
    team_id: int
    team_size: int
    formation: FormationInfo


class AuthorizedMemberRequest(BaseModel):
    team_id: int
    user_id: int
    action: str  # "add" | "remove"


class CaptainRequest(BaseModel):
    team_id: int
    captain_id: int


class TeamRolesResponse(BaseModel):
    team_id: int
    captain_id: int | None = None
    authorized_members: list[int] = Field(default_factory=list)
    message: str = ""
