"""Sales activity tracker backend.

Multi-tenant JSON API: organizations, users with roles, shared goals and
weekly activity counters.
"""

from .app_factory import create_app

__all__ = ["create_app"]
