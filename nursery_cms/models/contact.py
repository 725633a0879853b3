from nursery_cms import db
from datetime import datetime
from nursery_cms.utils.dates import isoformat


class ContactSubmission(db.Model):
    __tablename__ = 'contact_submissions'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(120), nullable=False)
    phone = db.Column(db.String(32))
    nursery_location = db.Column(db.String(64), nullable=False, default='general')
    message = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'phone': self.phone,
            'nurseryLocation': self.nursery_location,
            'message': self.message,
            'createdAt': isoformat(self.created_at),
        }
