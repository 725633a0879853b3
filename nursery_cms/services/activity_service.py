from flask import current_app, has_request_context, request
from flask_login import current_user

from nursery_cms.models import ActionType
from nursery_cms.storage import get_storage


class ActivityService:
    """Writes the admin audit trail."""

    @staticmethod
    def log_activity(action_type, description, resource_type=None, resource_id=None,
                     nursery_id=None, user=None, username=None):
        """
        Record an activity log entry.

        ``user`` defaults to the logged-in user. ``username`` covers failed
        logins, where there is no user record to point at. Failures are logged
        and never interrupt the request that triggered them.
        """
        try:
            if user is None and current_user and current_user.is_authenticated:
                user = current_user

            storage = get_storage()
            nursery_name = None
            if nursery_id is not None:
                nursery = storage.get_nursery(nursery_id)
                nursery_name = nursery.name if nursery else None

            if isinstance(action_type, ActionType):
                action_type = action_type.value

            return storage.create_activity_log({
                'user_id': user.id if user else None,
                'username': user.username if user else (username or 'anonymous'),
                'user_role': user.role if user else 'anonymous',
                'nursery_id': nursery_id,
                'nursery_name': nursery_name,
                'action_type': action_type,
                'resource_type': resource_type,
                'resource_id': resource_id,
                'description': description[:255],
                'ip_address': request.remote_addr if has_request_context() else None,
            })
        except Exception as e:
            current_app.logger.error(f"Error logging activity: {str(e)}")
            return None


log_activity = ActivityService.log_activity
