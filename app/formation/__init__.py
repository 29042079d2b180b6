from app.formation.assignment import AssignmentState
from app.formation.authorization import Role, TeamAccess, can_mutate, role_for
from app.formation.catalog import FormationOption, default_notation, list_formations
from app.formation.errors import AuthorizationDenied, FormationError, MalformedNotation, SaveFailed
from app.formation.interaction import (
    InteractionController,
    PointerInteractionController,
    TouchInteractionController,
    build_controller,
    nearest_position,
)
from app.formation.layout import PlayerRef, Position, generate_layout, layout_for

__all__ = [
    "AssignmentState",
    "Role",
    "TeamAccess",
    "can_mutate",
    "role_for",
    "FormationOption",
    "default_notation",
    "list_formations",
    "AuthorizationDenied",
    "FormationError",
    "MalformedNotation",
    "SaveFailed",
    "InteractionController",
    "PointerInteractionController",
    "TouchInteractionController",
    "build_controller",
    "nearest_position",
    "PlayerRef",
    "Position",
    "generate_layout",
    "layout_for",
]
