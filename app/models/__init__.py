from app.models.formation import FormationPosition, TeamFormation
from app.models.player import Player
from app.models.team import Team
from app.models.user import User

__all__ = [
    "User",
    "Team",
    "Player",
    "TeamFormation",
    "FormationPosition",
]
