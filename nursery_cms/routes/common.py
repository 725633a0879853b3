"""Helpers shared by the admin blueprints."""

from flask import abort, request

from nursery_cms.storage import get_storage
from nursery_cms.utils.decorators import ensure_nursery_access
from nursery_cms.utils.errors import ValidationError


def json_body():
    return request.get_json(silent=True)


def nursery_or_404(nursery_id):
    nursery = get_storage().get_nursery(nursery_id)
    if nursery is None:
        abort(404, description='Nursery not found')
    return nursery


def require_existing_nursery(nursery_id, field='nurseryId'):
    """Content must hang off a real nursery; a missing or unknown id is a 400."""
    if nursery_id is None:
        raise ValidationError({field: 'Nursery is required'})
    nursery = get_storage().get_nursery(nursery_id)
    if nursery is None:
        raise ValidationError({field: 'Nursery not found'})
    return nursery


def owned_or_404(obj, label, nursery_id=None):
    """Load guard for item routes.

    Missing records are a 404. Under a nursery URL, a record from another
    nursery is a 403 when the caller cannot reach that nursery and a 404 when
    they can (super admins, or shared rows).
    """
    if obj is None:
        abort(404, description=f'{label} not found')
    if nursery_id is not None and obj.nursery_id != nursery_id:
        if obj.nursery_id is not None:
            ensure_nursery_access(obj.nursery_id)
        abort(404, description=f'{label} not found')
    return obj
