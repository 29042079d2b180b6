"""Errori del motore formazioni."""


class FormationError(Exception):
    """Base per tutti gli errori del motore formazioni."""


class AuthorizationDenied(FormationError):
    """L'utente corrente non può modificare la formazione della squadra."""

    def __init__(self, action: str, user_id: int | None = None, team_id: int | None = None):
        self.action = action
        self.user_id = user_id
        self.team_id = team_id
        super().__init__(f"user_id={user_id} non autorizzato a '{action}' su team_id={team_id}")


class MalformedNotation(FormationError):
    """Notazione non valida: numero di parti diverso da 2 o 3, o parte non numerica."""

    def __init__(self, notation: str, reason: str):
        self.notation = notation
        self.reason = reason
        super().__init__(f"Notazione formazione non valida {notation!r}: {reason}")


class SaveFailed(FormationError):
    """Salvataggio fallito verso il gateway. Lo stato locale resta invariato; ritentabile."""

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)
