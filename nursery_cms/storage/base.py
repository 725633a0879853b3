"""
Storage interface.

Route handlers talk to a ``Storage`` instance and never to the ORM session
directly, so the in-memory and relational backends are interchangeable.

Conventions shared by every backend:

- ``get_*`` returns the model instance or ``None``; missing rows are never an
  exception.
- ``create_*`` takes a dict of model attribute names and returns the stored
  instance with its id and timestamps assigned.
- ``update_*`` returns the updated instance, or ``None`` when the id is unknown.
- ``delete_*`` returns ``True`` when a row was removed.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Any


@dataclass
class GalleryFilter:
    nursery_id: Optional[int] = None
    status: Optional[str] = None
    category_id: Optional[int] = None
    featured: Optional[bool] = None
    search: Optional[str] = None
    limit: Optional[int] = None
    offset: int = 0


@dataclass
class NewsletterFilter:
    nursery_id: Optional[int] = None
    # With a nursery_id, also return newsletters sent to every nursery
    include_broadcast: bool = False
    tag: Optional[str] = None
    search: Optional[str] = None
    limit: Optional[int] = None
    offset: int = 0


@dataclass
class ActivityFilter:
    user_id: Optional[int] = None
    nursery_id: Optional[int] = None
    action_type: Optional[str] = None
    limit: Optional[int] = 100


class Storage(ABC):

    def prepare(self) -> None:
        """Called once inside the application context before serving."""

    # Users
    @abstractmethod
    def get_user(self, user_id: int): ...

    @abstractmethod
    def get_user_by_username(self, username: str): ...

    @abstractmethod
    def get_user_by_email(self, email: str): ...

    @abstractmethod
    def list_users(self, nursery_id: Optional[int] = None) -> List[Any]: ...

    @abstractmethod
    def create_user(self, data: Dict[str, Any]): ...

    @abstractmethod
    def update_user(self, user_id: int, data: Dict[str, Any]): ...

    @abstractmethod
    def delete_user(self, user_id: int) -> bool: ...

    # Nurseries
    @abstractmethod
    def get_nursery(self, nursery_id: int): ...

    @abstractmethod
    def get_nursery_by_location(self, location: str): ...

    @abstractmethod
    def list_nurseries(self) -> List[Any]: ...

    @abstractmethod
    def create_nursery(self, data: Dict[str, Any]): ...

    @abstractmethod
    def update_nursery(self, nursery_id: int, data: Dict[str, Any]): ...

    @abstractmethod
    def delete_nursery(self, nursery_id: int) -> bool:
        """Remove the nursery with its events, newsletters, images and
        categories. Users assigned to it are unassigned and deactivated."""

    # Events
    @abstractmethod
    def get_event(self, event_id: int): ...

    @abstractmethod
    def list_events(self, nursery_id: Optional[int] = None, from_date: Optional[date] = None) -> List[Any]:
        """Events ordered by date, then start time."""

    @abstractmethod
    def create_event(self, data: Dict[str, Any]): ...

    @abstractmethod
    def update_event(self, event_id: int, data: Dict[str, Any]): ...

    @abstractmethod
    def delete_event(self, event_id: int) -> bool: ...

    # Newsletters
    @abstractmethod
    def get_newsletter(self, newsletter_id: int): ...

    @abstractmethod
    def list_newsletters(self, filters: Optional[NewsletterFilter] = None) -> List[Any]:
        """Newsletters ordered by publish date, newest first."""

    @abstractmethod
    def create_newsletter(self, data: Dict[str, Any]): ...

    @abstractmethod
    def update_newsletter(self, newsletter_id: int, data: Dict[str, Any]): ...

    @abstractmethod
    def delete_newsletter(self, newsletter_id: int) -> bool: ...

    # Gallery
    @abstractmethod
    def get_gallery_image(self, image_id: int): ...

    @abstractmethod
    def list_gallery_images(self, filters: Optional[GalleryFilter] = None) -> List[Any]:
        """Images ordered by sort order, then newest first."""

    @abstractmethod
    def create_gallery_image(self, data: Dict[str, Any]): ...

    @abstractmethod
    def update_gallery_image(self, image_id: int, data: Dict[str, Any]): ...

    @abstractmethod
    def delete_gallery_image(self, image_id: int) -> bool: ...

    @abstractmethod
    def get_gallery_category(self, category_id: int): ...

    @abstractmethod
    def list_gallery_categories(self, nursery_id: Optional[int] = None) -> List[Any]:
        """Shared categories plus, when given, the nursery's own."""

    @abstractmethod
    def create_gallery_category(self, data: Dict[str, Any]): ...

    @abstractmethod
    def delete_gallery_category(self, category_id: int) -> bool:
        """Images in the category are kept and become uncategorised."""

    # Activity logs (append-only)
    @abstractmethod
    def create_activity_log(self, data: Dict[str, Any]): ...

    @abstractmethod
    def list_activity_logs(self, filters: Optional[ActivityFilter] = None) -> List[Any]:
        """Newest first."""

    # Contact submissions
    @abstractmethod
    def create_contact_submission(self, data: Dict[str, Any]): ...

    @abstractmethod
    def list_contact_submissions(self, nursery_location: Optional[str] = None) -> List[Any]:
        """Newest first."""
