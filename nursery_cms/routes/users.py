from flask import Blueprint, abort, current_app, request
from flask_login import current_user
from werkzeug.security import generate_password_hash

from nursery_cms.models import ActionType, Permission, Role
from nursery_cms.routes.common import json_body, require_existing_nursery
from nursery_cms.services.activity_service import log_activity
from nursery_cms.storage import get_storage
from nursery_cms.utils.decorators import ensure_nursery_access, require_permission, super_admin_only
from nursery_cms.utils.errors import ValidationError
from nursery_cms.utils.responses import found_or_404, success
from nursery_cms.utils.validators import parse_int_arg, validate_user

bp = Blueprint('users', __name__, url_prefix='/api/admin/users')


def _ensure_manageable(user):
    """
    Super admins manage everyone except other super admins.
    Nursery admins manage the staff of their own nursery.
    """
    if current_user.is_super_admin:
        if user.is_super_admin and user.id != current_user.id:
            abort(403, description='Super admin accounts cannot be changed by other users')
        return
    if user.role_enum is not Role.STAFF:
        abort(403, description='Nursery admins can only manage staff accounts')
    ensure_nursery_access(user.nursery_id)


def _check_unique(data, user_id=None):
    storage = get_storage()
    errors = {}
    if 'username' in data:
        existing = storage.get_user_by_username(data['username'])
        if existing is not None and existing.id != user_id:
            errors['username'] = 'Username is already taken'
    if 'email' in data:
        existing = storage.get_user_by_email(data['email'])
        if existing is not None and existing.id != user_id:
            errors['email'] = 'Email is already registered'
    if errors:
        raise ValidationError(errors)


def _resolve_assignment(role, nursery_id):
    """Return the nursery id the account ends up with for ``role``."""
    if role == Role.SUPER_ADMIN.value:
        return None
    return require_existing_nursery(nursery_id).id


def _hash_password(data):
    if 'password' in data:
        data['password_hash'] = generate_password_hash(data.pop('password'))
        # A new password lifts any lockout
        data['login_attempts'] = 0
        data['locked_until'] = None


@bp.route('', methods=['GET'])
@require_permission(Permission.MANAGE_USERS)
def list_users():
    if current_user.is_super_admin:
        nursery_id = parse_int_arg(request.args, 'nurseryId', minimum=1)
    else:
        nursery_id = current_user.nursery_id
    users = get_storage().list_users(nursery_id=nursery_id)
    return success(users=[u.to_dict() for u in users])


@bp.route('/<int:user_id>', methods=['GET'])
@require_permission(Permission.MANAGE_USERS)
def get_user(user_id):
    user = found_or_404(get_storage().get_user(user_id), 'User')
    if not current_user.is_super_admin and user.id != current_user.id:
        ensure_nursery_access(user.nursery_id)
    return success(user=user.to_dict())


@bp.route('', methods=['POST'])
@require_permission(Permission.MANAGE_USERS)
def create_user():
    data = validate_user(json_body())

    if not current_user.is_super_admin:
        if data['role'] != Role.STAFF.value:
            abort(403, description='Nursery admins can only create staff accounts')
        data.setdefault('nursery_id', current_user.nursery_id)
        ensure_nursery_access(data['nursery_id'])

    data['nursery_id'] = _resolve_assignment(data['role'], data.get('nursery_id'))
    _check_unique(data)
    _hash_password(data)
    data['is_active'] = True

    user = get_storage().create_user(data)
    current_app.logger.info(f"User {user.username} ({user.role}) created by {current_user.username}")
    log_activity(ActionType.CREATE_USER, f'Created {user.role} account {user.username}',
                 resource_type='user', resource_id=user.id, nursery_id=user.nursery_id)
    return success(201, user=user.to_dict())


@bp.route('/<int:user_id>', methods=['PUT', 'PATCH'])
@require_permission(Permission.MANAGE_USERS)
def update_user(user_id):
    storage = get_storage()
    user = found_or_404(storage.get_user(user_id), 'User')
    _ensure_manageable(user)
    data = validate_user(json_body(), partial=True)

    role = data.get('role', user.role_enum.value if user.role_enum else user.role)
    if not current_user.is_super_admin:
        if role != Role.STAFF.value:
            abort(403, description='Nursery admins can only manage staff accounts')
        if 'nursery_id' in data:
            ensure_nursery_access(data['nursery_id'])
    if user.id == current_user.id and role != current_user.role_enum.value:
        raise ValidationError({'role': 'You cannot change your own role'})

    if 'role' in data or 'nursery_id' in data:
        data['nursery_id'] = _resolve_assignment(role, data.get('nursery_id', user.nursery_id))
    _check_unique(data, user.id)
    _hash_password(data)

    user = storage.update_user(user.id, data)
    log_activity(ActionType.UPDATE_USER, f'Updated account {user.username}',
                 resource_type='user', resource_id=user.id, nursery_id=user.nursery_id)
    return success(user=user.to_dict())


def _set_active(user_id, active):
    storage = get_storage()
    user = found_or_404(storage.get_user(user_id), 'User')
    if user.id == current_user.id:
        raise ValidationError({'isActive': 'You cannot change the status of your own account'})
    _ensure_manageable(user)
    if active and user.nursery_id is None and not user.is_super_admin:
        raise ValidationError({'nurseryId': 'Assign the account to a nursery before reactivating it'})

    changes = {'is_active': active}
    if active:
        changes.update(login_attempts=0, locked_until=None)
    user = storage.update_user(user.id, changes)
    action = ActionType.REACTIVATE_USER if active else ActionType.DEACTIVATE_USER
    verb = 'Reactivated' if active else 'Deactivated'
    current_app.logger.info(f"{verb} account {user.username}")
    log_activity(action, f'{verb} account {user.username}',
                 resource_type='user', resource_id=user.id, nursery_id=user.nursery_id)
    return success(user=user.to_dict())


@bp.route('/<int:user_id>/deactivate', methods=['POST'])
@super_admin_only
def deactivate_user(user_id):
    return _set_active(user_id, False)


@bp.route('/<int:user_id>/reactivate', methods=['POST'])
@super_admin_only
def reactivate_user(user_id):
    return _set_active(user_id, True)


@bp.route('/<int:user_id>', methods=['DELETE'])
@require_permission(Permission.MANAGE_USERS)
def delete_user(user_id):
    storage = get_storage()
    user = found_or_404(storage.get_user(user_id), 'User')
    if user.id == current_user.id:
        raise ValidationError({'id': 'You cannot delete your own account'})
    _ensure_manageable(user)

    username, nursery_id = user.username, user.nursery_id
    storage.delete_user(user_id)
    current_app.logger.warning(f"Account {username} deleted by {current_user.username}")
    log_activity(ActionType.DELETE_USER, f'Deleted account {username}',
                 resource_type='user', resource_id=user_id, nursery_id=nursery_id)
    return success(message='User deleted')
