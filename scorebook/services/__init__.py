from scorebook.services.scoring import ScoringService

__all__ = ["ScoringService"]
