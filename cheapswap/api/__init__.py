from cheapswap.api.health import router as health_router
from cheapswap.api.substitutes import router as substitutes_router

__all__ = [
    "health_router",
    "substitutes_router",
]
