"""
FastAPI service for MulaBoard.

Provides:
- POST /feedback - Anonymous feedback submission
- POST /feedback/check-eligibility - Eligibility pre-check
- GET /feedback/public - Public feedback wall
- GET /users/{user_id}/feedback - Received feedback, summary and badges
- /admin/* - Moderation and attempt statistics
- GET /health - Service health check
"""

from mulaboard.api.app import create_app

__all__ = ["create_app"]
