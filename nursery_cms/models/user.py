from nursery_cms import db
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from datetime import datetime
from nursery_cms.models.role import Role, has_permission
from nursery_cms.utils.dates import isoformat


class User(UserMixin, db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    first_name = db.Column(db.String(64), nullable=False)
    last_name = db.Column(db.String(64), nullable=False)
    role = db.Column(db.String(20), nullable=False, default=Role.REGULAR.value)
    # NULL only for super admins, or for accounts whose nursery was deleted
    nursery_id = db.Column(db.Integer, db.ForeignKey('nurseries.id', ondelete='SET NULL'), nullable=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    login_attempts = db.Column(db.Integer, nullable=False, default=0)
    locked_until = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        if not self.password_hash or password is None:
            return False
        return check_password_hash(self.password_hash, password)

    def is_account_locked(self):
        if not self.locked_until:
            return False
        return datetime.utcnow() < self.locked_until

    def get_lock_time_remaining(self):
        """Whole minutes until the lock lifts, rounded up."""
        if not self.is_account_locked():
            return 0
        remaining = self.locked_until - datetime.utcnow()
        return int(remaining.total_seconds() // 60) + 1

    @property
    def role_enum(self):
        return Role.parse(self.role)

    @property
    def is_super_admin(self):
        return self.role_enum is Role.SUPER_ADMIN

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    def can(self, permission):
        return has_permission(self.role, permission)

    def can_access_nursery(self, nursery_id):
        if self.is_super_admin:
            return True
        return self.nursery_id is not None and nursery_id is not None and self.nursery_id == int(nursery_id)

    def to_dict(self):
        # The password hash never leaves the server
        return {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'firstName': self.first_name,
            'lastName': self.last_name,
            'role': self.role,
            'nurseryId': self.nursery_id,
            'isActive': self.is_active,
            'isLocked': self.is_account_locked(),
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }

    def __repr__(self):
        return f'<User {self.username} ({self.role})>'
