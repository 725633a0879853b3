from nursery_cms import db
from datetime import datetime
from nursery_cms.utils.dates import isoformat


class Newsletter(db.Model):
    __tablename__ = 'newsletters'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    content = db.Column(db.Text, nullable=False)
    file_url = db.Column(db.String(500))
    # NULL means the newsletter is broadcast to every nursery
    nursery_id = db.Column(db.Integer, db.ForeignKey('nurseries.id', ondelete='CASCADE'), nullable=True)
    published_by = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='SET NULL'))
    publish_date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    tags = db.Column(db.String(255))
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def is_broadcast(self):
        return self.nursery_id is None

    def to_dict(self):
        # 'description' and 'fileUrl' are the names the admin client uses
        return {
            'id': self.id,
            'title': self.title,
            'description': self.content,
            'fileUrl': self.file_url,
            'nurseryId': self.nursery_id,
            'publishedBy': self.published_by,
            'publishDate': isoformat(self.publish_date),
            'tags': self.tags or '',
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }

    def __repr__(self):
        return f'<Newsletter {self.title}>'
