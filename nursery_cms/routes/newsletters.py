from flask import Blueprint, abort, current_app, request
from flask_login import current_user

from nursery_cms.models import ActionType, Permission
from nursery_cms.routes.common import json_body, nursery_or_404, owned_or_404, require_existing_nursery
from nursery_cms.services.activity_service import log_activity
from nursery_cms.storage import NewsletterFilter, get_storage
from nursery_cms.utils.decorators import (
    ensure_nursery_access, nursery_access_check, require_permission, super_admin_only,
)
from nursery_cms.utils.responses import success
from nursery_cms.utils.validators import (
    parse_bool_arg, parse_int_arg, parse_pagination, validate_newsletter,
)

bp = Blueprint('newsletters', __name__, url_prefix='/api/admin')


def _filters(nursery_id=None, include_broadcast=False):
    limit, offset = parse_pagination(request.args)
    return NewsletterFilter(
        nursery_id=nursery_id,
        include_broadcast=include_broadcast,
        tag=request.args.get('tag') or None,
        search=request.args.get('search') or None,
        limit=limit,
        offset=offset,
    )


def _ensure_target(nursery_id):
    """Broadcasts belong to super admins; nursery newsletters to that nursery's team."""
    if nursery_id is None:
        if not current_user.is_super_admin:
            abort(403, description='Only super admins can manage newsletters for all nurseries')
        return None
    nursery = require_existing_nursery(nursery_id)
    ensure_nursery_access(nursery.id)
    return nursery


def _create(nursery_id, data):
    _ensure_target(nursery_id)
    data['nursery_id'] = nursery_id
    data['published_by'] = current_user.id

    newsletter = get_storage().create_newsletter(data)
    audience = f'nursery {nursery_id}' if nursery_id else 'all nurseries'
    current_app.logger.info(f"Newsletter {newsletter.id} published for {audience}")
    log_activity(ActionType.CREATE_NEWSLETTER, f"Published newsletter '{newsletter.title}' for {audience}",
                 resource_type='newsletter', resource_id=newsletter.id, nursery_id=nursery_id)
    return success(201, newsletter=newsletter.to_dict())


def _update(newsletter, data):
    if 'nursery_id' in data and data['nursery_id'] != newsletter.nursery_id:
        _ensure_target(data['nursery_id'])
    else:
        data.pop('nursery_id', None)

    newsletter = get_storage().update_newsletter(newsletter.id, data)
    log_activity(ActionType.UPDATE_NEWSLETTER, f"Updated newsletter '{newsletter.title}'",
                 resource_type='newsletter', resource_id=newsletter.id, nursery_id=newsletter.nursery_id)
    return success(newsletter=newsletter.to_dict())


def _delete(newsletter):
    newsletter_id, title, nursery_id = newsletter.id, newsletter.title, newsletter.nursery_id
    get_storage().delete_newsletter(newsletter_id)
    log_activity(ActionType.DELETE_NEWSLETTER, f"Deleted newsletter '{title}'",
                 resource_type='newsletter', resource_id=newsletter_id, nursery_id=nursery_id)
    return success(message='Newsletter deleted')


def _load(newsletter_id, writing=False):
    newsletter = owned_or_404(get_storage().get_newsletter(newsletter_id), 'Newsletter')
    if newsletter.is_broadcast:
        # Any editor can read a broadcast; only super admins change it
        if writing and not current_user.is_super_admin:
            abort(403, description='Only super admins can manage newsletters for all nurseries')
    else:
        ensure_nursery_access(newsletter.nursery_id)
    return newsletter


# Nursery-scoped routes

@bp.route('/nurseries/<int:nursery_id>/newsletters', methods=['GET'])
@require_permission(Permission.MANAGE_CONTENT)
@nursery_access_check('nursery_id')
def list_nursery_newsletters(nursery_id):
    nursery_or_404(nursery_id)
    include_broadcast = bool(parse_bool_arg(request.args, 'includeBroadcast'))
    newsletters = get_storage().list_newsletters(_filters(nursery_id, include_broadcast))
    return success(newsletters=[n.to_dict() for n in newsletters])


@bp.route('/nurseries/<int:nursery_id>/newsletters', methods=['POST'])
@require_permission(Permission.MANAGE_CONTENT)
@nursery_access_check('nursery_id')
def create_nursery_newsletter(nursery_id):
    data = validate_newsletter(json_body())
    data.pop('nursery_id', None)
    return _create(nursery_id, data)


@bp.route('/nurseries/<int:nursery_id>/newsletters/<int:newsletter_id>', methods=['GET'])
@require_permission(Permission.MANAGE_CONTENT)
@nursery_access_check('nursery_id')
def get_nursery_newsletter(nursery_id, newsletter_id):
    newsletter = owned_or_404(get_storage().get_newsletter(newsletter_id), 'Newsletter', nursery_id)
    return success(newsletter=newsletter.to_dict())


@bp.route('/nurseries/<int:nursery_id>/newsletters/<int:newsletter_id>', methods=['PUT', 'PATCH'])
@require_permission(Permission.MANAGE_CONTENT)
@nursery_access_check('nursery_id')
def update_nursery_newsletter(nursery_id, newsletter_id):
    newsletter = owned_or_404(get_storage().get_newsletter(newsletter_id), 'Newsletter', nursery_id)
    return _update(newsletter, validate_newsletter(json_body(), partial=True))


@bp.route('/nurseries/<int:nursery_id>/newsletters/<int:newsletter_id>', methods=['DELETE'])
@require_permission(Permission.DELETE_CONTENT)
@nursery_access_check('nursery_id')
def delete_nursery_newsletter(nursery_id, newsletter_id):
    newsletter = owned_or_404(get_storage().get_newsletter(newsletter_id), 'Newsletter', nursery_id)
    return _delete(newsletter)


# Flat routes, including broadcasts (no nursery)

@bp.route('/newsletters', methods=['GET'])
@super_admin_only
def list_newsletters():
    nursery_id = parse_int_arg(request.args, 'nurseryId', minimum=1)
    include_broadcast = bool(parse_bool_arg(request.args, 'includeBroadcast'))
    newsletters = get_storage().list_newsletters(_filters(nursery_id, include_broadcast))
    return success(newsletters=[n.to_dict() for n in newsletters])


@bp.route('/newsletters', methods=['POST'])
@require_permission(Permission.MANAGE_CONTENT)
def create_newsletter():
    data = validate_newsletter(json_body())
    return _create(data.pop('nursery_id', None), data)


@bp.route('/newsletters/<int:newsletter_id>', methods=['GET'])
@require_permission(Permission.MANAGE_CONTENT)
def get_newsletter(newsletter_id):
    return success(newsletter=_load(newsletter_id).to_dict())


@bp.route('/newsletters/<int:newsletter_id>', methods=['PUT', 'PATCH'])
@require_permission(Permission.MANAGE_CONTENT)
def update_newsletter(newsletter_id):
    newsletter = _load(newsletter_id, writing=True)
    return _update(newsletter, validate_newsletter(json_body(), partial=True))


@bp.route('/newsletters/<int:newsletter_id>', methods=['DELETE'])
@require_permission(Permission.DELETE_CONTENT)
def delete_newsletter(newsletter_id):
    return _delete(_load(newsletter_id, writing=True))
