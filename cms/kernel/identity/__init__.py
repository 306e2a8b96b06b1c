"""
Identity Core - token verification and actor resolution.
"""

from cms.kernel.identity.jwt import (
    JWTManager,
    AccessTokenPayload,
    create_access_token,
    verify_access_token,
)
from cms.kernel.identity.identity_service import Actor, IdentityService

__all__ = [
    "JWTManager",
    "AccessTokenPayload",
    "create_access_token",
    "verify_access_token",
    "Actor",
    "IdentityService",
]
