from flask import Blueprint, request

from nursery_cms.models import Permission
from nursery_cms.routes.common import nursery_or_404
from nursery_cms.storage import ActivityFilter, get_storage
from nursery_cms.utils.decorators import nursery_access_check, require_permission, super_admin_only
from nursery_cms.utils.responses import success
from nursery_cms.utils.validators import parse_int_arg

bp = Blueprint('activity', __name__, url_prefix='/api/admin')

DEFAULT_LIMIT = 100
MAX_LIMIT = 500


def _limit():
    return parse_int_arg(request.args, 'limit', default=DEFAULT_LIMIT, minimum=1, maximum=MAX_LIMIT)


@bp.route('/activity-logs', methods=['GET'])
@super_admin_only
def list_activity_logs():
    filters = ActivityFilter(
        user_id=parse_int_arg(request.args, 'userId', minimum=1),
        nursery_id=parse_int_arg(request.args, 'nurseryId', minimum=1),
        action_type=request.args.get('action') or None,
        limit=_limit(),
    )
    logs = get_storage().list_activity_logs(filters)
    return success(logs=[log.to_dict() for log in logs])


@bp.route('/nurseries/<int:nursery_id>/activity-logs', methods=['GET'])
@require_permission(Permission.VIEW_ACTIVITY_LOGS)
@nursery_access_check('nursery_id')
def list_nursery_activity_logs(nursery_id):
    nursery_or_404(nursery_id)
    filters = ActivityFilter(
        nursery_id=nursery_id,
        action_type=request.args.get('action') or None,
        limit=_limit(),
    )
    logs = get_storage().list_activity_logs(filters)
    return success(logs=[log.to_dict() for log in logs])
