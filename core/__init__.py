# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the business logic behind the API:
# - models/: Pydantic schemas (User, lifecycle states, payloads)
# - services/: User CRUD on top of lib.user_store
#
# Routes in app/ stay thin and call into services here.
# =============================================================================
