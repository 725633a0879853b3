from datetime import datetime, timedelta

from flask import Blueprint, abort, current_app, request, session
from flask_login import current_user, login_user, logout_user
from werkzeug.security import check_password_hash, generate_password_hash

from nursery_cms.models import ActionType
from nursery_cms.routes.common import json_body
from nursery_cms.services.activity_service import log_activity
from nursery_cms.storage import get_storage
from nursery_cms.utils.decorators import authenticate_user
from nursery_cms.utils.errors import ValidationError
from nursery_cms.utils.responses import success

bp = Blueprint('auth', __name__, url_prefix='/api/admin')

INVALID_CREDENTIALS = 'Invalid username or password'

# Checked when no account matches, so unknown usernames cost a hash like known ones
_DUMMY_HASH = generate_password_hash('nursery-cms-no-such-user')


def _reject(identifier, user, reason):
    current_app.logger.warning(f"Failed login attempt for '{identifier}' from {request.remote_addr}: {reason}")
    log_activity(ActionType.LOGIN_FAILED, f'Failed login attempt for {identifier}',
                 resource_type='user', resource_id=user.id if user else None,
                 nursery_id=user.nursery_id if user else None, user=user, username=identifier)
    # One message for every failure so callers cannot probe for accounts
    abort(401, description=INVALID_CREDENTIALS)


def _record_failure(user):
    attempts = (user.login_attempts or 0) + 1
    changes = {'login_attempts': attempts}
    if attempts >= current_app.config['MAX_LOGIN_ATTEMPTS']:
        minutes = current_app.config['LOGIN_LOCKOUT_MINUTES']
        changes.update(login_attempts=0, locked_until=datetime.utcnow() + timedelta(minutes=minutes))
        current_app.logger.warning(f"Account {user.username} locked for {minutes} minutes")
        log_activity(ActionType.ACCOUNT_LOCKED,
                     f'Account locked after {attempts} failed login attempts: {user.username}',
                     resource_type='user', resource_id=user.id, nursery_id=user.nursery_id, user=user)
    get_storage().update_user(user.id, changes)


@bp.route('/login', methods=['POST'])
def login():
    data = json_body()
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValidationError({'body': 'Request body must be a JSON object'})
    identifier = data.get('username') or data.get('email')
    password = data.get('password')

    errors = {}
    if not isinstance(identifier, str) or not identifier.strip():
        errors['username'] = 'Username or email is required'
    if not isinstance(password, str) or not password:
        errors['password'] = 'Password is required'
    if errors:
        raise ValidationError(errors)

    identifier = identifier.strip()
    storage = get_storage()
    user = storage.get_user_by_username(identifier) or storage.get_user_by_email(identifier)

    if user is None:
        check_password_hash(_DUMMY_HASH, password)
        _reject(identifier, None, 'unknown account')

    password_ok = user.check_password(password)
    if user.is_account_locked():
        _reject(identifier, user, f'account locked for {user.get_lock_time_remaining()} more minutes')
    if not password_ok:
        _record_failure(user)
        _reject(identifier, user, 'wrong password')
    if not user.is_active:
        _reject(identifier, user, 'account deactivated')

    if user.login_attempts or user.locked_until:
        user = storage.update_user(user.id, {'login_attempts': 0, 'locked_until': None})

    session.clear()
    login_user(user)
    session['user_id'] = user.id
    session['role'] = user.role
    session['nursery_id'] = user.nursery_id

    current_app.logger.info(f"User {user.username} logged in")
    log_activity(ActionType.LOGIN, f'User logged in: {user.username}',
                 resource_type='user', resource_id=user.id, nursery_id=user.nursery_id, user=user)
    return success(user=user.to_dict(), message='Login successful')


@bp.route('/logout', methods=['POST'])
def logout():
    if current_user.is_authenticated:
        log_activity(ActionType.LOGOUT, f'User logged out: {current_user.username}',
                     resource_type='user', resource_id=current_user.id, nursery_id=current_user.nursery_id)
        current_app.logger.info(f"User {current_user.username} logged out")
    logout_user()
    session.clear()
    return success(message='Logged out successfully')


@bp.route('/me', methods=['GET'])
@authenticate_user
def me():
    nursery = None
    if current_user.nursery_id is not None:
        nursery = get_storage().get_nursery(current_user.nursery_id)
    return success(user=current_user.to_dict(), nursery=nursery.to_dict() if nursery else None)
