#!/usr/bin/env python3
# =============================================================================
# scripts/start_server.py - API Server Entry Point
# =============================================================================
# Starts the User Directory API under uvicorn.
#
# Usage:
#   # Start server (host/port from API_HOST / API_PORT)
#   python scripts/start_server.py
#
#   # Or use uvicorn directly
#   uvicorn app.main:app --reload --port 8080
#
# The users table is created in DATABASE_URL on first start.
# =============================================================================

import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import uvicorn

from app.config import settings


def main():
    """Start the API server."""
    print("=" * 60)
    print("User Directory API")
    print("=" * 60)
    print()
    print(f"Database: {settings.DATABASE_URL}")
    print(f"Docs:     http://localhost:{settings.API_PORT}/swagger")
    print("Press Ctrl+C to stop")
    print()

    uvicorn.run(
        "app.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
