from scorebook.models.user import User, UserRole
from scorebook.models.match import Match

__all__ = [
    "User",
    "UserRole",
    "Match",
]
