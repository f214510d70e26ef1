"""
app/api/routers package marker.
"""

from app.api.routers.connector_router import router as connector_router
from app.api.routers.insight_router import router as insight_router
from app.api.routers.licensing_router import router as licensing_router

__all__ = [
    "connector_router",
    "insight_router",
    "licensing_router",
]
