from flask import Blueprint, current_app
from flask_login import current_user

from nursery_cms.models import ActionType, Permission
from nursery_cms.routes.common import json_body, nursery_or_404
from nursery_cms.services.activity_service import log_activity
from nursery_cms.storage import get_storage
from nursery_cms.utils.decorators import (
    authenticate_user, nursery_access_check, nursery_admin_only, require_permission,
    super_admin_only,
)
from nursery_cms.utils.errors import ValidationError
from nursery_cms.utils.responses import success
from nursery_cms.utils.validators import validate_nursery

bp = Blueprint('nurseries', __name__, url_prefix='/api/admin/nurseries')


def _check_location_free(location, nursery_id=None):
    existing = get_storage().get_nursery_by_location(location)
    if existing is not None and existing.id != nursery_id:
        raise ValidationError({'location': 'A nursery with this location already exists'})


@bp.route('', methods=['GET'])
@authenticate_user
def list_nurseries():
    storage = get_storage()
    if current_user.can(Permission.VIEW_ALL_NURSERIES):
        nurseries = storage.list_nurseries()
    else:
        own = storage.get_nursery(current_user.nursery_id) if current_user.nursery_id else None
        nurseries = [own] if own else []
    return success(nurseries=[n.to_dict() for n in nurseries])


@bp.route('', methods=['POST'])
@super_admin_only
def create_nursery():
    data = validate_nursery(json_body())
    _check_location_free(data['location'])

    nursery = get_storage().create_nursery(data)
    current_app.logger.info(f"Nursery {nursery.location} created by {current_user.username}")
    log_activity(ActionType.CREATE_NURSERY, f'Created nursery {nursery.name}',
                 resource_type='nursery', resource_id=nursery.id, nursery_id=nursery.id)
    return success(201, nursery=nursery.to_dict())


@bp.route('/<int:nursery_id>', methods=['GET'])
@nursery_admin_only
@nursery_access_check('nursery_id')
def get_nursery(nursery_id):
    nursery = nursery_or_404(nursery_id)
    return success(nursery=nursery.to_dict())


@bp.route('/<int:nursery_id>', methods=['PUT', 'PATCH'])
@require_permission(Permission.UPDATE_NURSERY)
@nursery_access_check('nursery_id')
def update_nursery(nursery_id):
    nursery_or_404(nursery_id)
    data = validate_nursery(json_body(), partial=True)
    if 'location' in data:
        _check_location_free(data['location'], nursery_id)

    nursery = get_storage().update_nursery(nursery_id, data)
    log_activity(ActionType.UPDATE_NURSERY, f'Updated nursery {nursery.name}',
                 resource_type='nursery', resource_id=nursery.id, nursery_id=nursery.id)
    return success(nursery=nursery.to_dict())


@bp.route('/<int:nursery_id>', methods=['DELETE'])
@super_admin_only
def delete_nursery(nursery_id):
    nursery = nursery_or_404(nursery_id)
    name = nursery.name

    get_storage().delete_nursery(nursery_id)
    current_app.logger.warning(f"Nursery {name} deleted by {current_user.username}")
    log_activity(ActionType.DELETE_NURSERY, f'Deleted nursery {name} and its content',
                 resource_type='nursery', resource_id=nursery_id)
    return success(message=f'Nursery {name} deleted')
