"""
Chi può modificare la formazione di una squadra.
Nessuna cache: ruoli e capitano possono cambiare tra una richiesta e l'altra,
quindi si valuta sempre sullo snapshot corrente della squadra.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Protocol


class Role(str, Enum):
    OWNER = "owner"
    CAPTAIN = "captain"
    AUTHORIZED_MEMBER = "authorized_member"
    MEMBER = "member"


class TeamRoles(Protocol):
    created_by: int | None
    captain_id: int | None
    authorized_members: list[int] | None


@dataclass
class TeamAccess:
    """Snapshot dei campi di ruolo della squadra (lato client)."""

    id: int
    created_by: int | None
    captain_id: int | None = None
    authorized_members: list[int] = field(default_factory=list)
    team_size: int = 11
    name: str = ""


def can_mutate(team: TeamRoles | None, user_id: int | None) -> bool:
    if team is None or user_id is None:
        return False
    if user_id == team.created_by or user_id == team.captain_id:
        return True
    return user_id in (team.authorized_members or [])


def role_for(team: TeamRoles, user_id: int | None, roster_user_ids: Iterable[int] = ()) -> Role | None:
    """Ruolo dell'utente nella squadra; None se non ne fa parte."""
    if user_id is None:
        return None
    if user_id == team.created_by:
        return Role.OWNER
    if user_id == team.captain_id:
        return Role.CAPTAIN
    if user_id in (team.authorized_members or []):
        return Role.AUTHORIZED_MEMBER
    if user_id in set(roster_user_ids):
        return Role.MEMBER
    return None
