from deckshopper.api.collection import router as collection_router
from deckshopper.api.compare import router as compare_router
from deckshopper.api.decks import router as decks_router
from deckshopper.api.health import router as health_router
from deckshopper.api.sessions import router as sessions_router

__all__ = [
    "collection_router",
    "compare_router",
    "decks_router",
    "health_router",
    "sessions_router",
]
