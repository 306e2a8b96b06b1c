"""
Permission service for role-based access control.
"""

from cms.kernel.errors import ForbiddenError
from cms.kernel.identity.identity_service import Actor
from cms.kernel.permissions.permission_table import DEFAULT_PERMISSION_TABLE, PermissionTable
from cms.logging_config import get_logger

logger = get_logger(__name__)


class PermissionService:
    """
    Checks actor capabilities against a permission table.

    The table is supplied by the caller; the service holds no state of its own.
    """

    def __init__(self, table: PermissionTable = DEFAULT_PERMISSION_TABLE):
        self.table = table

    def has(self, actor: Actor, action: str) -> bool:
        return self.table.allows(actor.role, action)

    def require(self, actor: Actor, action: str) -> None:
        """
        Raise ForbiddenError unless the actor's role holds ``action``.

        Raises:
            ForbiddenError: role lacks the capability (reason is logged only)
        """
        if not self.has(actor, action):
            logger.info(
                "Permission denied",
                extra={"action": action, "role": actor.role.value},
            )
            raise ForbiddenError(
                f"role {actor.role.value} lacks {action}",
                action=action,
                role=actor.role.value,
            )


def check_permission(table: PermissionTable, actor: Actor, action: str) -> bool:
    """Check if actor holds ``action`` under ``table``."""
    return PermissionService(table).has(actor, action)
