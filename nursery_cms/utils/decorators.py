"""
Route guards.

Requests pass through them in order: authenticated, then role checked, then
nursery ownership checked. Guards only read the session and the user record.
"""

from functools import wraps

from flask import abort, session
from flask_login import current_user, logout_user

from nursery_cms.models.role import Role, has_permission


def authenticate_user(f):
    """401 unless the session carries a user id that still resolves to an active user."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if session.get('user_id') is None:
            abort(401, description='Authentication required')
        if not current_user.is_authenticated:
            # The account was deactivated or removed after login
            logout_user()
            session.clear()
            abort(401, description='Authentication required')
        return f(*args, **kwargs)
    return decorated_function


def require_role(*roles):
    allowed = frozenset(Role.parse(role) for role in roles)

    def decorator(f):
        @wraps(f)
        @authenticate_user
        def decorated_function(*args, **kwargs):
            if current_user.role_enum not in allowed:
                abort(403, description='Insufficient permissions')
            return f(*args, **kwargs)
        return decorated_function
    return decorator


def require_permission(permission):
    def decorator(f):
        @wraps(f)
        @authenticate_user
        def decorated_function(*args, **kwargs):
            if not has_permission(current_user.role, permission):
                abort(403, description='Insufficient permissions')
            return f(*args, **kwargs)
        return decorated_function
    return decorator


super_admin_only = require_role(Role.SUPER_ADMIN)
nursery_admin_only = require_role(Role.SUPER_ADMIN, Role.NURSERY_ADMIN)


def ensure_nursery_access(nursery_id):
    if not current_user.can_access_nursery(nursery_id):
        abort(403, description='You do not have access to this nursery')


def nursery_access_check(param_name='nursery_id'):
    """Super admins pass; everyone else must belong to the nursery in the URL."""
    def decorator(f):
        @wraps(f)
        @authenticate_user
        def decorated_function(*args, **kwargs):
            ensure_nursery_access(kwargs.get(param_name))
            return f(*args, **kwargs)
        return decorated_function
    return decorator
