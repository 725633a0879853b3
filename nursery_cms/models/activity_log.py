from nursery_cms import db
from datetime import datetime
from enum import Enum
from nursery_cms.utils.dates import isoformat


class ActionType(Enum):
    LOGIN = "login"
    LOGIN_FAILED = "login_failed"
    ACCOUNT_LOCKED = "account_locked"
    LOGOUT = "logout"
    CREATE_NURSERY = "create_nursery"
    UPDATE_NURSERY = "update_nursery"
    DELETE_NURSERY = "delete_nursery"
    CREATE_USER = "create_user"
    UPDATE_USER = "update_user"
    DELETE_USER = "delete_user"
    DEACTIVATE_USER = "deactivate_user"
    REACTIVATE_USER = "reactivate_user"
    CREATE_EVENT = "create_event"
    UPDATE_EVENT = "update_event"
    DELETE_EVENT = "delete_event"
    UPLOAD_GALLERY = "upload_gallery"
    UPDATE_GALLERY = "update_gallery"
    DELETE_GALLERY = "delete_gallery"
    CREATE_CATEGORY = "create_category"
    DELETE_CATEGORY = "delete_category"
    CREATE_NEWSLETTER = "create_newsletter"
    UPDATE_NEWSLETTER = "update_newsletter"
    DELETE_NEWSLETTER = "delete_newsletter"


class ActivityLog(db.Model):
    """Append-only audit trail of admin actions.

    Username, role and nursery name are copied at write time so the record
    still reads correctly after the user or nursery is changed or removed.
    """
    __tablename__ = 'activity_logs'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    username = db.Column(db.String(64), nullable=False)
    user_role = db.Column(db.String(20), nullable=False)
    nursery_id = db.Column(db.Integer)  # no FK: logs outlive the nursery
    nursery_name = db.Column(db.String(120))
    action_type = db.Column(db.String(50), nullable=False)
    resource_type = db.Column(db.String(50))
    resource_id = db.Column(db.Integer)
    description = db.Column(db.String(255), nullable=False)
    ip_address = db.Column(db.String(45))  # IPv6 addresses can be up to 45 characters
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'username': self.username,
            'userRole': self.user_role,
            'nurseryId': self.nursery_id,
            'nurseryName': self.nursery_name,
            'actionType': self.action_type,
            'resourceType': self.resource_type,
            'resourceId': self.resource_id,
            'description': self.description,
            'ipAddress': self.ip_address,
            'createdAt': isoformat(self.created_at),
        }
