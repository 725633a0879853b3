from datetime import date

from flask import Blueprint, current_app, request
from flask_login import current_user

from nursery_cms.models import ActionType, Permission
from nursery_cms.routes.common import json_body, nursery_or_404, owned_or_404, require_existing_nursery
from nursery_cms.services.activity_service import log_activity
from nursery_cms.storage import get_storage
from nursery_cms.utils.decorators import (
    ensure_nursery_access, nursery_access_check, require_permission, super_admin_only,
)
from nursery_cms.utils.errors import ValidationError
from nursery_cms.utils.responses import success
from nursery_cms.utils.validators import (
    check_event_window, parse_bool_arg, parse_int_arg, validate_event,
)

bp = Blueprint('events', __name__, url_prefix='/api/admin')


def _from_date():
    return date.today() if parse_bool_arg(request.args, 'upcoming') else None


def _create(nursery_id, data):
    nursery = require_existing_nursery(nursery_id)
    ensure_nursery_access(nursery.id)

    data['nursery_id'] = nursery.id
    data['created_by'] = current_user.id
    event = get_storage().create_event(data)

    current_app.logger.info(f"Event {event.id} created for nursery {nursery.location}")
    log_activity(ActionType.CREATE_EVENT, f"Created event '{event.title}'",
                 resource_type='event', resource_id=event.id, nursery_id=nursery.id)
    return success(201, event=event.to_dict())


def _update(event, data):
    if 'nursery_id' in data and data['nursery_id'] != event.nursery_id:
        # Moving an event needs access to the destination too
        ensure_nursery_access(require_existing_nursery(data['nursery_id']).id)
    elif 'nursery_id' in data:
        del data['nursery_id']

    errors = check_event_window(
        data.get('date', event.date), data.get('end_date', event.end_date),
        data.get('start_time', event.start_time), data.get('end_time', event.end_time),
    )
    if errors:
        raise ValidationError(errors)

    event = get_storage().update_event(event.id, data)
    log_activity(ActionType.UPDATE_EVENT, f"Updated event '{event.title}'",
                 resource_type='event', resource_id=event.id, nursery_id=event.nursery_id)
    return success(event=event.to_dict())


def _delete(event):
    event_id, title, nursery_id = event.id, event.title, event.nursery_id
    get_storage().delete_event(event_id)
    log_activity(ActionType.DELETE_EVENT, f"Deleted event '{title}'",
                 resource_type='event', resource_id=event_id, nursery_id=nursery_id)
    return success(message='Event deleted')


# Nursery-scoped routes

@bp.route('/nurseries/<int:nursery_id>/events', methods=['GET'])
@require_permission(Permission.MANAGE_CONTENT)
@nursery_access_check('nursery_id')
def list_nursery_events(nursery_id):
    nursery_or_404(nursery_id)
    events = get_storage().list_events(nursery_id=nursery_id, from_date=_from_date())
    return success(events=[e.to_dict() for e in events])


@bp.route('/nurseries/<int:nursery_id>/events', methods=['POST'])
@require_permission(Permission.MANAGE_CONTENT)
@nursery_access_check('nursery_id')
def create_nursery_event(nursery_id):
    data = validate_event(json_body())
    return _create(nursery_id, data)


@bp.route('/nurseries/<int:nursery_id>/events/<int:event_id>', methods=['GET'])
@require_permission(Permission.MANAGE_CONTENT)
@nursery_access_check('nursery_id')
def get_nursery_event(nursery_id, event_id):
    event = owned_or_404(get_storage().get_event(event_id), 'Event', nursery_id)
    return success(event=event.to_dict())


@bp.route('/nurseries/<int:nursery_id>/events/<int:event_id>', methods=['PUT', 'PATCH'])
@require_permission(Permission.MANAGE_CONTENT)
@nursery_access_check('nursery_id')
def update_nursery_event(nursery_id, event_id):
    event = owned_or_404(get_storage().get_event(event_id), 'Event', nursery_id)
    return _update(event, validate_event(json_body(), partial=True))


@bp.route('/nurseries/<int:nursery_id>/events/<int:event_id>', methods=['DELETE'])
@require_permission(Permission.DELETE_CONTENT)
@nursery_access_check('nursery_id')
def delete_nursery_event(nursery_id, event_id):
    event = owned_or_404(get_storage().get_event(event_id), 'Event', nursery_id)
    return _delete(event)


# Flat routes; ownership is checked against the stored event

@bp.route('/events', methods=['GET'])
@super_admin_only
def list_events():
    nursery_id = parse_int_arg(request.args, 'nurseryId', minimum=1)
    events = get_storage().list_events(nursery_id=nursery_id, from_date=_from_date())
    return success(events=[e.to_dict() for e in events])


@bp.route('/events', methods=['POST'])
@require_permission(Permission.MANAGE_CONTENT)
def create_event():
    data = validate_event(json_body())
    return _create(data.pop('nursery_id', None), data)


@bp.route('/events/<int:event_id>', methods=['GET'])
@require_permission(Permission.MANAGE_CONTENT)
def get_event(event_id):
    event = owned_or_404(get_storage().get_event(event_id), 'Event')
    ensure_nursery_access(event.nursery_id)
    return success(event=event.to_dict())


@bp.route('/events/<int:event_id>', methods=['PUT', 'PATCH'])
@require_permission(Permission.MANAGE_CONTENT)
def update_event(event_id):
    event = owned_or_404(get_storage().get_event(event_id), 'Event')
    ensure_nursery_access(event.nursery_id)
    return _update(event, validate_event(json_body(), partial=True))


@bp.route('/events/<int:event_id>', methods=['DELETE'])
@require_permission(Permission.DELETE_CONTENT)
def delete_event(event_id):
    event = owned_or_404(get_storage().get_event(event_id), 'Event')
    ensure_nursery_access(event.nursery_id)
    return _delete(event)
