"""
Map-backed storage for development and tests.

Rows are transient instances of the same SQLAlchemy model classes the
relational backend uses; they are never attached to a session.
"""

from datetime import datetime
from itertools import count

from nursery_cms.models import (
    ActivityLog, ContactSubmission, Event, GalleryCategory, GalleryImage,
    Newsletter, Nursery, User,
)
from nursery_cms.storage.base import (
    ActivityFilter, GalleryFilter, NewsletterFilter, Storage,
)


def _apply_column_defaults(obj):
    """Fill unset attributes from the column defaults, as a flush would."""
    for column in obj.__table__.columns:
        if column.default is None or getattr(obj, column.key, None) is not None:
            continue
        if column.default.is_scalar:
            setattr(obj, column.key, column.default.arg)
        elif column.default.is_callable:
            setattr(obj, column.key, column.default.arg(None))


def _contains(haystack, needle):
    return bool(haystack) and needle.lower() in haystack.lower()


def _page(rows, offset, limit):
    rows = rows[offset or 0:]
    if limit is not None:
        rows = rows[:limit]
    return rows


class MemStorage(Storage):

    def __init__(self):
        self._tables = {model: {} for model in (
            User, Nursery, Event, Newsletter, GalleryImage, GalleryCategory,
            ActivityLog, ContactSubmission,
        )}
        # next() on itertools.count is atomic under the GIL
        self._ids = {model: count(1) for model in self._tables}

    def _insert(self, model, data):
        obj = model(**data)
        obj.id = next(self._ids[model])
        _apply_column_defaults(obj)
        self._tables[model][obj.id] = obj
        return obj

    def _update(self, model, obj_id, data):
        obj = self._tables[model].get(obj_id)
        if obj is None:
            return None
        for key, value in data.items():
            setattr(obj, key, value)
        if hasattr(obj, 'updated_at'):
            obj.updated_at = datetime.utcnow()
        return obj

    def _delete(self, model, obj_id):
        return self._tables[model].pop(obj_id, None) is not None

    def _rows(self, model):
        return list(self._tables[model].values())

    # Users
    def get_user(self, user_id):
        return self._tables[User].get(user_id)

    def get_user_by_username(self, username):
        if not username:
            return None
        return next((u for u in self._rows(User) if u.username.lower() == username.lower()), None)

    def get_user_by_email(self, email):
        if not email:
            return None
        return next((u for u in self._rows(User) if u.email.lower() == email.lower()), None)

    def list_users(self, nursery_id=None):
        users = self._rows(User)
        if nursery_id is not None:
            users = [u for u in users if u.nursery_id == nursery_id]
        return sorted(users, key=lambda u: u.id)

    def create_user(self, data):
        return self._insert(User, data)

    def update_user(self, user_id, data):
        return self._update(User, user_id, data)

    def delete_user(self, user_id):
        return self._delete(User, user_id)

    # Nurseries
    def get_nursery(self, nursery_id):
        return self._tables[Nursery].get(nursery_id)

    def get_nursery_by_location(self, location):
        if not location:
            return None
        return next((n for n in self._rows(Nursery) if n.location.lower() == location.lower()), None)

    def list_nurseries(self):
        return sorted(self._rows(Nursery), key=lambda n: n.id)

    def create_nursery(self, data):
        return self._insert(Nursery, data)

    def update_nursery(self, nursery_id, data):
        return self._update(Nursery, nursery_id, data)

    def delete_nursery(self, nursery_id):
        if nursery_id not in self._tables[Nursery]:
            return False
        for model in (Event, Newsletter, GalleryImage, GalleryCategory):
            table = self._tables[model]
            for obj_id in [i for i, row in table.items() if row.nursery_id == nursery_id]:
                del table[obj_id]
        for user in self._rows(User):
            if user.nursery_id == nursery_id:
                self._update(User, user.id, {'nursery_id': None, 'is_active': False})
        return self._delete(Nursery, nursery_id)

    # Events
    def get_event(self, event_id):
        return self._tables[Event].get(event_id)

    def list_events(self, nursery_id=None, from_date=None):
        events = self._rows(Event)
        if nursery_id is not None:
            events = [e for e in events if e.nursery_id == nursery_id]
        if from_date is not None:
            events = [e for e in events if (e.end_date or e.date) >= from_date]
        return sorted(events, key=lambda e: (e.date, e.start_time or '', e.id))

    def create_event(self, data):
        return self._insert(Event, data)

    def update_event(self, event_id, data):
        return self._update(Event, event_id, data)

    def delete_event(self, event_id):
        return self._delete(Event, event_id)

    # Newsletters
    def get_newsletter(self, newsletter_id):
        return self._tables[Newsletter].get(newsletter_id)

    def list_newsletters(self, filters=None):
        filters = filters or NewsletterFilter()
        rows = self._rows(Newsletter)
        if filters.nursery_id is not None:
            rows = [n for n in rows if n.nursery_id == filters.nursery_id
                    or (filters.include_broadcast and n.nursery_id is None)]
        if filters.tag:
            rows = [n for n in rows if _contains(n.tags, filters.tag)]
        if filters.search:
            rows = [n for n in rows if _contains(n.title, filters.search) or _contains(n.content, filters.search)]
        rows.sort(key=lambda n: (n.publish_date, n.id), reverse=True)
        return _page(rows, filters.offset, filters.limit)

    def create_newsletter(self, data):
        return self._insert(Newsletter, data)

    def update_newsletter(self, newsletter_id, data):
        return self._update(Newsletter, newsletter_id, data)

    def delete_newsletter(self, newsletter_id):
        return self._delete(Newsletter, newsletter_id)

    # Gallery
    def get_gallery_image(self, image_id):
        return self._tables[GalleryImage].get(image_id)

    def list_gallery_images(self, filters=None):
        filters = filters or GalleryFilter()
        rows = self._rows(GalleryImage)
        if filters.nursery_id is not None:
            rows = [i for i in rows if i.nursery_id == filters.nursery_id]
        if filters.status:
            rows = [i for i in rows if i.status == filters.status]
        if filters.category_id is not None:
            rows = [i for i in rows if i.category_id == filters.category_id]
        if filters.featured is not None:
            rows = [i for i in rows if bool(i.featured) == filters.featured]
        if filters.search:
            rows = [i for i in rows if _contains(i.title, filters.search) or _contains(i.caption, filters.search)]
        # Newest first within the same sort order
        rows.sort(key=lambda i: (i.created_at, i.id), reverse=True)
        rows.sort(key=lambda i: i.sort_order)
        return _page(rows, filters.offset, filters.limit)

    def create_gallery_image(self, data):
        return self._insert(GalleryImage, data)

    def update_gallery_image(self, image_id, data):
        return self._update(GalleryImage, image_id, data)

    def delete_gallery_image(self, image_id):
        return self._delete(GalleryImage, image_id)

    def get_gallery_category(self, category_id):
        return self._tables[GalleryCategory].get(category_id)

    def list_gallery_categories(self, nursery_id=None):
        rows = [c for c in self._rows(GalleryCategory)
                if c.nursery_id is None or (nursery_id is not None and c.nursery_id == nursery_id)]
        return sorted(rows, key=lambda c: (c.sort_order, c.name.lower(), c.id))

    def create_gallery_category(self, data):
        return self._insert(GalleryCategory, data)

    def delete_gallery_category(self, category_id):
        if not self._delete(GalleryCategory, category_id):
            return False
        for image in self._rows(GalleryImage):
            if image.category_id == category_id:
                image.category_id = None
        return True

    # Activity logs
    def create_activity_log(self, data):
        return self._insert(ActivityLog, data)

    def list_activity_logs(self, filters=None):
        filters = filters or ActivityFilter()
        rows = self._rows(ActivityLog)
        if filters.user_id is not None:
            rows = [log for log in rows if log.user_id == filters.user_id]
        if filters.nursery_id is not None:
            rows = [log for log in rows if log.nursery_id == filters.nursery_id]
        if filters.action_type:
            rows = [log for log in rows if filters.action_type in log.action_type]
        rows.sort(key=lambda log: (log.created_at, log.id), reverse=True)
        return _page(rows, 0, filters.limit)

    # Contact submissions
    def create_contact_submission(self, data):
        return self._insert(ContactSubmission, data)

    def list_contact_submissions(self, nursery_location=None):
        rows = self._rows(ContactSubmission)
        if nursery_location:
            rows = [c for c in rows if c.nursery_location == nursery_location]
        return sorted(rows, key=lambda c: (c.created_at, c.id), reverse=True)
