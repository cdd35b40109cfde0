# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the User Directory API:
# - test_models.py: Pydantic model and lifecycle tests
# - test_user_store.py: Persistence gateway tests against SQLite
# - test_user_service.py: Service tests with a mocked store
# - test_users_api.py: End-to-end tests for the /users endpoints
# - test_health.py: Ping, health and root endpoints
# - test_config.py: Settings loading
# - test_exceptions.py: Error bodies and exception handlers
#
# Run tests with: pytest
# =============================================================================
