"""
Permission Core - static role/permission table and checks.
"""

from cms.kernel.permissions.permission_table import (
    PermissionTable,
    DEFAULT_PERMISSION_TABLE,
)
from cms.kernel.permissions.permission_service import (
    PermissionService,
    check_permission,
)

__all__ = [
    "PermissionTable",
    "DEFAULT_PERMISSION_TABLE",
    "PermissionService",
    "check_permission",
]
