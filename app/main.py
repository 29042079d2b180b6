"""Team Formation API: formation layouts and player-to-position assignment."""

import logging

from fastapi import FastAPI

from app.core.config import get_log_level
from app.core.database import init_db
from app.routers import formations_router, health_router, teams_router

app = FastAPI(
    title="Team Formation API",
    description="Recreational league team formations: catalog, layouts, saved player positions.",
    version="0.1.0",
)

app.include_router(health_router)
app.include_router(formations_router)
app.include_router(teams_router)


@app.on_event("startup")
def on_startup():
    """Configura il logging e crea le tabelle all'avvio."""
    logging.basicConfig(level=get_log_level(), format="%(levelname)s [%(name)s] %(message)s")
    init_db()
