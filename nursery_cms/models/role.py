from enum import Enum
from typing import Optional, Tuple


class Role(Enum):
    SUPER_ADMIN = "super_admin"
    NURSERY_ADMIN = "nursery_admin"
    STAFF = "staff"
    REGULAR = "regular"

    @classmethod
    def parse(cls, value) -> Optional["Role"]:
        """Map a stored or submitted role string onto a Role.

        Older clients still send ``admin`` and ``editor``; they are aliases for
        ``nursery_admin`` and ``staff``. Unknown values return None.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        value = value.strip().lower()
        value = ROLE_ALIASES.get(value, value)
        try:
            return cls(value)
        except ValueError:
            return None


ROLE_ALIASES = {
    'admin': Role.NURSERY_ADMIN.value,
    'editor': Role.STAFF.value,
}


class Permission(Enum):
    MANAGE_NURSERIES = "manage_nurseries"      # create / delete nurseries
    UPDATE_NURSERY = "update_nursery"          # edit the assigned nursery's details
    VIEW_ALL_NURSERIES = "view_all_nurseries"  # cross-nursery listings
    MANAGE_USERS = "manage_users"
    MANAGE_CONTENT = "manage_content"          # create / edit events, newsletters, images
    DELETE_CONTENT = "delete_content"
    PUBLISH_GALLERY = "publish_gallery"
    MANAGE_CATEGORIES = "manage_categories"
    VIEW_ACTIVITY_LOGS = "view_activity_logs"
    VIEW_CONTACT_SUBMISSIONS = "view_contact_submissions"


PERMISSIONS = {
    Role.SUPER_ADMIN: frozenset(Permission),
    Role.NURSERY_ADMIN: frozenset({
        Permission.UPDATE_NURSERY,
        Permission.MANAGE_USERS,
        Permission.MANAGE_CONTENT,
        Permission.DELETE_CONTENT,
        Permission.PUBLISH_GALLERY,
        Permission.MANAGE_CATEGORIES,
        Permission.VIEW_ACTIVITY_LOGS,
        Permission.VIEW_CONTACT_SUBMISSIONS,
    }),
    Role.STAFF: frozenset({
        Permission.MANAGE_CONTENT,
    }),
    Role.REGULAR: frozenset(),
}


def has_permission(role, permission: Permission) -> bool:
    role = Role.parse(role)
    if role is None:
        return False
    return permission in PERMISSIONS[role]


def roles_with(permission: Permission) -> Tuple[Role, ...]:
    return tuple(role for role in Role if permission in PERMISSIONS[role])
