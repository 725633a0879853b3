from nursery_cms import db
from datetime import datetime
from nursery_cms.utils.dates import isoformat


class Event(db.Model):
    __tablename__ = 'events'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False)
    date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date)  # multi-day events only
    start_time = db.Column(db.String(5))  # HH:MM
    end_time = db.Column(db.String(5))
    location = db.Column(db.String(255), nullable=False)
    nursery_id = db.Column(db.Integer, db.ForeignKey('nurseries.id', ondelete='CASCADE'), nullable=False)
    created_by = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='SET NULL'))
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'date': isoformat(self.date),
            'endDate': isoformat(self.end_date),
            'startTime': self.start_time,
            'endTime': self.end_time,
            'location': self.location,
            'nurseryId': self.nursery_id,
            'createdBy': self.created_by,
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }

    def __repr__(self):
        return f'<Event {self.title} @ nursery {self.nursery_id}>'
