# ecampaign/authentication/rbac.py

from enum import Enum
import logging

from ecampaign.database.models import User
from ecampaign.errors import ForbiddenError, ValidationError
from ecampaign.security.input_validator import InputValidator

# Role-Based Access Control for voters, politicians and admins.
# The caller's identity is the user_id/admin_id supplied with the request.

logger = logging.getLogger(__name__)


class UserRole(Enum):
    VOTER = "voter"
    POLITICIAN = "politician"
    ADMIN = "admin"


class Permission(Enum):
    APPLY_POLITICIAN = "apply_politician"
    COMMENT = "comment"
    RATE = "rate"
    POST_GROUND_UPDATE = "post_ground_update"
    POST_MANIFESTO = "post_manifesto"
    MANAGE_PROFILE = "manage_profile"
    MANAGE_APPLICATIONS = "manage_applications"
    MANAGE_USERS = "manage_users"


_COMMUNITY = [
    Permission.COMMENT,
    Permission.RATE,
    Permission.POST_GROUND_UPDATE,
]

# Role -> Permissions mapping
ROLE_PERMISSIONS = {
    UserRole.VOTER: _COMMUNITY + [
        Permission.APPLY_POLITICIAN,
    ],
    UserRole.POLITICIAN: _COMMUNITY + [
        Permission.POST_MANIFESTO,
        Permission.MANAGE_PROFILE,
    ],
    UserRole.ADMIN: _COMMUNITY + [
        Permission.MANAGE_APPLICATIONS,
        Permission.MANAGE_USERS,
    ],
}


class RBACService:
    def __init__(self, gateway, validator=None):
        self.gateway = gateway
        self.validator = validator or InputValidator()

    def has_permission(self, user_role, permission):
        if isinstance(user_role, str):
            try:
                user_role = UserRole(user_role.lower().strip())
            except ValueError:
                return False
        if isinstance(permission, str):
            permission = Permission(permission)
        return permission in ROLE_PERMISSIONS.get(user_role, [])

    def require_permission(self, user_id, permission, message="Access denied"):
        """Load the caller and fail closed unless their role grants `permission`."""
        try:
            user_id = self.validator.validate_id(user_id, "user_id")
        except ValidationError:
            user_id = None
        user = self.gateway.find_one(User, id=user_id) if user_id else None
        if user is None or not self.has_permission(user.role, permission):
            perm_str = permission.value if isinstance(permission, Enum) else str(permission)
            logger.warning("Permission %s denied for user %s", perm_str, user_id)
            raise ForbiddenError(message)
        return user

    def require_admin(self, admin_id):
        return self.require_permission(admin_id, Permission.MANAGE_APPLICATIONS, "Admin only")
