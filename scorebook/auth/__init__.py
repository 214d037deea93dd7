"""
Bearer-token authentication and scorer checks
"""
from scorebook.auth.utils import get_current_user, create_access_token, ensure_scorer, require_admin

__all__ = [
    "get_current_user",
    "create_access_token",
    "ensure_scorer",
    "require_admin",
]
