# =============================================================================
# core/services/ - Business Logic Layer
# =============================================================================
# Services sit between the API routes and the persistence gateway:
# - user_service.py: User CRUD, payload parsing, error mapping
# =============================================================================

from .user_service import UserService, parse_user_payload

__all__ = ["UserService", "parse_user_payload"]
