"""
Identità dell'utente corrente.
Il token viene verificato a monte (servizio auth esterno) che inoltra l'id
utente nell'header X-User-Id.
"""

from fastapi import Header, HTTPException


def get_current_user_id(x_user_id: str | None = Header(default=None)) -> int:
    """Dependency: id utente autenticato. 401 se assente o non numerico."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Autenticazione richiesta")
    try:
        return int(x_user_id)
    except ValueError:
        raise HTTPException(status_code=401, detail="Header X-User-Id non valido")
