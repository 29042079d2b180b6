from app.core.config import (
    get_database_url,
    get_formation_api_url,
    get_log_level,
    get_touch_drop_threshold,
)

# app.core.database crea l'engine all'import (richiede DATABASE_URL): va importato esplicitamente.

__all__ = [
    "get_database_url",
    "get_formation_api_url",
    "get_log_level",
    "get_touch_drop_threshold",
]
