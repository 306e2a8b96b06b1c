"""
Identity resolution: bearer token -> Actor.

The role is read from the user record and parsed into UserRole exactly once,
here. Everything downstream receives the resulting Actor by value and never
looks at the token or session again.
"""

import uuid
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cms.kernel.errors import ForbiddenError, StorageError
from cms.kernel.identity.jwt import JWTManager, get_jwt_manager
from cms.kernel.models.user import User, UserRole
from cms.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Actor:
    """The resolved, authenticated caller."""

    actor_id: uuid.UUID
    role: UserRole


class IdentityService:
    """Resolves the acting user for a request."""

    def __init__(self, session: AsyncSession, jwt_manager: Optional[JWTManager] = None):
        self.session = session
        self.jwt_manager = jwt_manager or get_jwt_manager()

    async def get_user_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        try:
            result = await self.session.execute(select(User).where(User.id == user_id))
        except SQLAlchemyError as exc:
            raise StorageError(f"user lookup failed: {exc}") from exc
        return result.scalar_one_or_none()

    async def resolve_actor(self, token: Optional[str]) -> Optional[Actor]:
        """
        Resolve a bearer token to an Actor.

        Returns:
            The Actor, or None when the caller is anonymous (missing, invalid
            or expired token, or unknown user).

        Raises:
            ForbiddenError: the account exists but is disabled
            StorageError: the user lookup failed
        """
        if not token:
            return None

        payload = self.jwt_manager.verify_access_token(token)
        if not payload:
            return None

        try:
            user_id = uuid.UUID(payload.sub)
        except ValueError:
            return None

        user = await self.get_user_by_id(user_id)
        if not user:
            return None

        if not user.is_active:
            raise ForbiddenError("user account is disabled", user_id=str(user.id))

        role = UserRole.parse(user.role)
        if role.value != payload.role:
            # The stored role wins; the claim may predate a role change
            logger.debug(
                "Token role differs from stored role",
                extra={"token_role": payload.role, "stored_role": role.value},
            )
        return Actor(actor_id=user.id, role=role)
