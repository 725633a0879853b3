"""
Relational storage backed by Flask-SQLAlchemy.
"""

from datetime import datetime

from flask import current_app
from sqlalchemy import func, or_

from nursery_cms import db
from nursery_cms.models import (
    ActivityLog, ContactSubmission, Event, GalleryCategory, GalleryImage,
    Newsletter, Nursery, User,
)
from nursery_cms.storage.base import (
    ActivityFilter, GalleryFilter, NewsletterFilter, Storage,
)


def _like(value):
    return f"%{value}%"


def _page(query, offset, limit):
    if offset:
        query = query.offset(offset)
    if limit is not None:
        query = query.limit(limit)
    return query.all()


class DatabaseStorage(Storage):

    def prepare(self):
        # Create all database tables (if not already created)
        db.create_all()

    def _commit(self):
        try:
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f"Database commit failed: {str(e)}")
            raise

    def _insert(self, model, data):
        obj = model(**data)
        db.session.add(obj)
        self._commit()
        return obj

    def _update(self, model, obj_id, data):
        obj = db.session.get(model, obj_id)
        if obj is None:
            return None
        for key, value in data.items():
            setattr(obj, key, value)
        if hasattr(obj, 'updated_at'):
            obj.updated_at = datetime.utcnow()
        self._commit()
        return obj

    def _delete(self, model, obj_id):
        obj = db.session.get(model, obj_id)
        if obj is None:
            return False
        db.session.delete(obj)
        self._commit()
        return True

    # Users
    def get_user(self, user_id):
        return db.session.get(User, user_id)

    def get_user_by_username(self, username):
        if not username:
            return None
        return User.query.filter(func.lower(User.username) == username.lower()).first()

    def get_user_by_email(self, email):
        if not email:
            return None
        return User.query.filter(func.lower(User.email) == email.lower()).first()

    def list_users(self, nursery_id=None):
        query = User.query
        if nursery_id is not None:
            query = query.filter_by(nursery_id=nursery_id)
        return query.order_by(User.id).all()

    def create_user(self, data):
        return self._insert(User, data)

    def update_user(self, user_id, data):
        return self._update(User, user_id, data)

    def delete_user(self, user_id):
        return self._delete(User, user_id)

    # Nurseries
    def get_nursery(self, nursery_id):
        return db.session.get(Nursery, nursery_id)

    def get_nursery_by_location(self, location):
        if not location:
            return None
        return Nursery.query.filter(func.lower(Nursery.location) == location.lower()).first()

    def list_nurseries(self):
        return Nursery.query.order_by(Nursery.id).all()

    def create_nursery(self, data):
        return self._insert(Nursery, data)

    def update_nursery(self, nursery_id, data):
        return self._update(Nursery, nursery_id, data)

    def delete_nursery(self, nursery_id):
        nursery = db.session.get(Nursery, nursery_id)
        if nursery is None:
            return False
        User.query.filter_by(nursery_id=nursery_id).update(
            {'nursery_id': None, 'is_active': False, 'updated_at': datetime.utcnow()},
            synchronize_session=False,
        )
        # Events, newsletters, images and categories follow via the ORM cascade
        db.session.delete(nursery)
        self._commit()
        return True

    # Events
    def get_event(self, event_id):
        return db.session.get(Event, event_id)

    def list_events(self, nursery_id=None, from_date=None):
        query = Event.query
        if nursery_id is not None:
            query = query.filter(Event.nursery_id == nursery_id)
        if from_date is not None:
            query = query.filter(func.coalesce(Event.end_date, Event.date) >= from_date)
        return query.order_by(Event.date, func.coalesce(Event.start_time, ''), Event.id).all()

    def create_event(self, data):
        return self._insert(Event, data)

    def update_event(self, event_id, data):
        return self._update(Event, event_id, data)

    def delete_event(self, event_id):
        return self._delete(Event, event_id)

    # Newsletters
    def get_newsletter(self, newsletter_id):
        return db.session.get(Newsletter, newsletter_id)

    def list_newsletters(self, filters=None):
        filters = filters or NewsletterFilter()
        query = Newsletter.query
        if filters.nursery_id is not None:
            if filters.include_broadcast:
                query = query.filter(or_(Newsletter.nursery_id == filters.nursery_id,
                                         Newsletter.nursery_id.is_(None)))
            else:
                query = query.filter(Newsletter.nursery_id == filters.nursery_id)
        if filters.tag:
            query = query.filter(Newsletter.tags.ilike(_like(filters.tag)))
        if filters.search:
            like = _like(filters.search)
            query = query.filter(or_(Newsletter.title.ilike(like), Newsletter.content.ilike(like)))
        query = query.order_by(Newsletter.publish_date.desc(), Newsletter.id.desc())
        return _page(query, filters.offset, filters.limit)

    def create_newsletter(self, data):
        return self._insert(Newsletter, data)

    def update_newsletter(self, newsletter_id, data):
        return self._update(Newsletter, newsletter_id, data)

    def delete_newsletter(self, newsletter_id):
        return self._delete(Newsletter, newsletter_id)

    # Gallery
    def get_gallery_image(self, image_id):
        return db.session.get(GalleryImage, image_id)

    def list_gallery_images(self, filters=None):
        filters = filters or GalleryFilter()
        query = GalleryImage.query
        if filters.nursery_id is not None:
            query = query.filter(GalleryImage.nursery_id == filters.nursery_id)
        if filters.status:
            query = query.filter(GalleryImage.status == filters.status)
        if filters.category_id is not None:
            query = query.filter(GalleryImage.category_id == filters.category_id)
        if filters.featured is not None:
            query = query.filter(GalleryImage.featured == filters.featured)
        if filters.search:
            like = _like(filters.search)
            query = query.filter(or_(GalleryImage.title.ilike(like), GalleryImage.caption.ilike(like)))
        query = query.order_by(GalleryImage.sort_order, GalleryImage.created_at.desc(), GalleryImage.id.desc())
        return _page(query, filters.offset, filters.limit)

    def create_gallery_image(self, data):
        return self._insert(GalleryImage, data)

    def update_gallery_image(self, image_id, data):
        return self._update(GalleryImage, image_id, data)

    def delete_gallery_image(self, image_id):
        return self._delete(GalleryImage, image_id)

    def get_gallery_category(self, category_id):
        return db.session.get(GalleryCategory, category_id)

    def list_gallery_categories(self, nursery_id=None):
        query = GalleryCategory.query
        if nursery_id is not None:
            query = query.filter(or_(GalleryCategory.nursery_id.is_(None),
                                     GalleryCategory.nursery_id == nursery_id))
        else:
            query = query.filter(GalleryCategory.nursery_id.is_(None))
        return query.order_by(GalleryCategory.sort_order, func.lower(GalleryCategory.name), GalleryCategory.id).all()

    def create_gallery_category(self, data):
        return self._insert(GalleryCategory, data)

    def delete_gallery_category(self, category_id):
        category = db.session.get(GalleryCategory, category_id)
        if category is None:
            return False
        # Not every engine enforces ON DELETE SET NULL
        GalleryImage.query.filter_by(category_id=category_id).update(
            {'category_id': None}, synchronize_session=False,
        )
        db.session.delete(category)
        self._commit()
        return True

    # Activity logs
    def create_activity_log(self, data):
        return self._insert(ActivityLog, data)

    def list_activity_logs(self, filters=None):
        filters = filters or ActivityFilter()
        query = ActivityLog.query
        if filters.user_id is not None:
            query = query.filter(ActivityLog.user_id == filters.user_id)
        if filters.nursery_id is not None:
            query = query.filter(ActivityLog.nursery_id == filters.nursery_id)
        if filters.action_type:
            query = query.filter(ActivityLog.action_type.contains(filters.action_type))
        query = query.order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
        return _page(query, 0, filters.limit)

    # Contact submissions
    def create_contact_submission(self, data):
        return self._insert(ContactSubmission, data)

    def list_contact_submissions(self, nursery_location=None):
        query = ContactSubmission.query
        if nursery_location:
            query = query.filter_by(nursery_location=nursery_location)
        return query.order_by(ContactSubmission.created_at.desc(), ContactSubmission.id.desc()).all()
