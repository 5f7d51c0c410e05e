"""
pkg_jwt_auth.config

Settings for local JWT verification:

- JwtAuthSettings: key material + issuer / audience / leeway checks.
- settings_from_env: builds settings from JWT_AUTH_* environment variables.
"""

from __future__ import annotations

from .env import settings_from_env
from .settings import JwtAuthSettings

__all__ = [
    "JwtAuthSettings",
    "settings_from_env",
]
