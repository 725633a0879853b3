"""
Models Package

Exports all models for easy importing.
"""

from nursery_cms.models.role import Role, Permission
from nursery_cms.models.nursery import Nursery
from nursery_cms.models.user import User
from nursery_cms.models.event import Event
from nursery_cms.models.newsletter import Newsletter
from nursery_cms.models.gallery import GalleryCategory, GalleryImage, ImageStatus
from nursery_cms.models.activity_log import ActivityLog, ActionType
from nursery_cms.models.contact import ContactSubmission

__all__ = [
    'Role', 'Permission', 'Nursery', 'User', 'Event', 'Newsletter',
    'GalleryCategory', 'GalleryImage', 'ImageStatus',
    'ActivityLog', 'ActionType', 'ContactSubmission',
]
