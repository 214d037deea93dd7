from scorebook.api.matches import router as matches_router
from scorebook.api.scoring import router as scoring_router

__all__ = ["matches_router", "scoring_router"]
