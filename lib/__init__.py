# =============================================================================
# lib/ - Store Access
# =============================================================================
# - database.py: SQLAlchemy table mapping, engine and session factory
# - user_store.py: Persistence gateway for users
# =============================================================================
