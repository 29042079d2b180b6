from app.routers.formations import router as formations_router
from app.routers.health import router as health_router
from app.routers.teams import router as teams_router

__all__ = ["health_router", "formations_router", "teams_router"]
