from nursery_cms import db
from datetime import datetime
from nursery_cms.utils.dates import isoformat


class Nursery(db.Model):
    __tablename__ = 'nurseries'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    location = db.Column(db.String(64), unique=True, nullable=False)  # URL slug, lower-case
    address = db.Column(db.String(255), nullable=False)
    phone_number = db.Column(db.String(32), nullable=False)
    email = db.Column(db.String(120), nullable=False)
    description = db.Column(db.Text, nullable=False, default='')
    opening_hours = db.Column(db.String(120))
    hero_image = db.Column(db.String(500))
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Owned content goes with the nursery
    events = db.relationship('Event', backref='nursery', lazy=True, cascade='all, delete')
    newsletters = db.relationship('Newsletter', backref='nursery', lazy=True, cascade='all, delete')
    gallery_images = db.relationship('GalleryImage', backref='nursery', lazy=True, cascade='all, delete')
    gallery_categories = db.relationship('GalleryCategory', backref='nursery', lazy=True, cascade='all, delete')

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'location': self.location,
            'address': self.address,
            'phoneNumber': self.phone_number,
            'email': self.email,
            'description': self.description,
            'openingHours': self.opening_hours,
            'heroImage': self.hero_image,
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }

    def __repr__(self):
        return f'<Nursery {self.location}>'
