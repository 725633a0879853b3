from nursery_cms import db
from datetime import datetime
from enum import Enum
from nursery_cms.utils.dates import isoformat


class ImageStatus(Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class GalleryCategory(db.Model):
    __tablename__ = 'gallery_categories'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    slug = db.Column(db.String(100), nullable=False)
    description = db.Column(db.String(255))
    # NULL means the category is shared by every nursery
    nursery_id = db.Column(db.Integer, db.ForeignKey('nurseries.id', ondelete='CASCADE'), nullable=True)
    sort_order = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'slug': self.slug,
            'description': self.description,
            'nurseryId': self.nursery_id,
            'sortOrder': self.sort_order,
            'createdAt': isoformat(self.created_at),
        }

    def __repr__(self):
        return f'<GalleryCategory {self.slug}>'


class GalleryImage(db.Model):
    __tablename__ = 'gallery_images'

    id = db.Column(db.Integer, primary_key=True)
    image_url = db.Column(db.String(500), nullable=False)
    title = db.Column(db.String(200))
    caption = db.Column(db.Text)
    nursery_id = db.Column(db.Integer, db.ForeignKey('nurseries.id', ondelete='CASCADE'), nullable=False)
    category_id = db.Column(db.Integer, db.ForeignKey('gallery_categories.id', ondelete='SET NULL'), nullable=True)
    status = db.Column(db.String(20), nullable=False, default=ImageStatus.DRAFT.value)
    featured = db.Column(db.Boolean, nullable=False, default=False)
    sort_order = db.Column(db.Integer, nullable=False, default=0)
    uploaded_by = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='SET NULL'))
    approved_by = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='SET NULL'))
    approved_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'imageUrl': self.image_url,
            'title': self.title,
            'caption': self.caption,
            'nurseryId': self.nursery_id,
            'categoryId': self.category_id,
            'status': self.status,
            'featured': self.featured,
            'sortOrder': self.sort_order,
            'uploadedBy': self.uploaded_by,
            'approvedBy': self.approved_by,
            'approvedAt': isoformat(self.approved_at),
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }

    def __repr__(self):
        return f'<GalleryImage {self.id} ({self.status})>'
