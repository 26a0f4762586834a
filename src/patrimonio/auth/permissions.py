"""
Permissões e papéis de usuário.
"""

from enum import Enum


class Permission(str, Enum):
    """Permissões verificadas pela aplicação."""
    ASSETS_READ = "assets:read"
    ASSETS_CREATE = "assets:create"
    ASSETS_UPDATE = "assets:update"
    ASSETS_DELETE = "assets:delete"
    MOVEMENTS_READ = "movements:read"
    MOVEMENTS_CREATE = "movements:create"
    REPORTS_READ = "reports:read"
    REPORTS_EXPORT = "reports:export"
    ADMIN_USERS = "admin:users"
    ADMIN_SETTINGS = "admin:settings"


class Role(str, Enum):
    """Papéis de usuário."""
    VIEWER = "viewer"
    OPERATOR = "operator"
    MANAGER = "manager"
    ADMIN = "admin"


_VIEWER = frozenset({
    Permission.ASSETS_READ,
    Permission.MOVEMENTS_READ,
    Permission.REPORTS_READ,
})

_OPERATOR = _VIEWER | {
    Permission.ASSETS_CREATE,
    Permission.ASSETS_UPDATE,
    Permission.MOVEMENTS_CREATE,
    Permission.REPORTS_EXPORT,
}

_MANAGER = _OPERATOR | {Permission.ASSETS_DELETE}

_ADMIN = _MANAGER | {Permission.ADMIN_USERS, Permission.ADMIN_SETTINGS}

ROLE_PERMISSIONS: dict[Role, frozenset[Permission]] = {
    Role.VIEWER: _VIEWER,
    Role.OPERATOR: _OPERATOR,
    Role.MANAGER: _MANAGER,
    Role.ADMIN: _ADMIN,
}


def permissions_for(role: Role | str) -> frozenset[Permission]:
    """Conjunto de permissões de um papel."""
    return ROLE_PERMISSIONS[Role(role)]
