"""
Request payload validation.

Each ``validate_*`` function takes the decoded JSON body (camelCase keys) and
returns a dict keyed by model attribute names, ready for the storage layer.
Problems are collected per field and raised together as a ``ValidationError``.
With ``partial=True`` (updates) absent fields are skipped instead of required.
"""

import re
from datetime import datetime

from nursery_cms.models import ImageStatus, Role
from nursery_cms.utils.dates import parse_date, parse_datetime
from nursery_cms.utils.errors import ValidationError
from nursery_cms.utils.password_validator import PasswordValidator

EMAIL_RE = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')
TIME_RE = re.compile(r'^([01]\d|2[0-3]):[0-5]\d$')
SLUG_RE = re.compile(r'^[a-z0-9]+(?:-[a-z0-9]+)*$')
USERNAME_RE = re.compile(r'^[A-Za-z0-9_.-]{3,64}$')
PHONE_RE = re.compile(r'^[0-9+()\-\s]{6,32}$')
URL_PREFIXES = ('/uploads/', 'http://', 'https://')

MAX_LIMIT = 100

_MISSING = object()

password_validator = PasswordValidator()


def slugify(value):
    return re.sub(r'[^a-z0-9]+', '-', value.lower()).strip('-')


class PayloadValidator:
    """Collects cleaned values and field errors for one request body."""

    def __init__(self, data, partial=False):
        if data is not None and not isinstance(data, dict):
            raise ValidationError({'body': 'Request body must be a JSON object'})
        self.data = data or {}
        self.partial = partial
        self.errors = {}
        self.cleaned = {}

    def _take(self, key, label, required):
        if key not in self.data:
            if required and not self.partial:
                self.errors[key] = f'{label} is required'
            return _MISSING
        value = self.data[key]
        if value is None or (isinstance(value, str) and not value.strip()):
            if required:
                self.errors[key] = f'{label} is required'
                return _MISSING
            return None
        return value

    def string(self, key, attr, label, required=True, min_length=None, max_length=None,
               pattern=None, pattern_message=None, lower=False):
        value = self._take(key, label, required)
        if value is _MISSING:
            return
        if value is None:
            self.cleaned[attr] = None
            return
        if not isinstance(value, str):
            self.errors[key] = f'{label} must be a string'
            return
        value = value.strip()
        if lower:
            value = value.lower()
        if min_length and len(value) < min_length:
            self.errors[key] = f'{label} must be at least {min_length} characters'
        elif max_length and len(value) > max_length:
            self.errors[key] = f'{label} must be at most {max_length} characters'
        elif pattern is not None and not pattern.match(value):
            self.errors[key] = pattern_message or f'{label} is invalid'
        else:
            self.cleaned[attr] = value

    def email(self, key, attr, label='Email', required=True):
        self.string(key, attr, label, required=required, max_length=120, lower=True,
                    pattern=EMAIL_RE, pattern_message='Invalid email address')

    def reference(self, key, attr, label, required=True):
        self.string(key, attr, label, required=required, max_length=500)
        value = self.cleaned.get(attr)
        if value and not value.startswith(URL_PREFIXES):
            self.errors[key] = f'{label} must be an uploaded file path or an http(s) URL'
            del self.cleaned[attr]

    def integer(self, key, attr, label, required=True, minimum=None):
        value = self._take(key, label, required)
        if value is _MISSING:
            return
        if value is None:
            self.cleaned[attr] = None
            return
        if isinstance(value, bool):
            self.errors[key] = f'{label} must be an integer'
            return
        try:
            value = int(value)
        except (TypeError, ValueError):
            self.errors[key] = f'{label} must be an integer'
            return
        if minimum is not None and value < minimum:
            self.errors[key] = f'{label} must be at least {minimum}'
            return
        self.cleaned[attr] = value

    def boolean(self, key, attr, label):
        if key not in self.data or self.data[key] is None:
            return
        value = self.data[key]
        if isinstance(value, str) and value.lower() in ('true', 'false'):
            value = value.lower() == 'true'
        if not isinstance(value, bool):
            self.errors[key] = f'{label} must be true or false'
            return
        self.cleaned[attr] = value

    def date(self, key, attr, label, required=True):
        value = self._take(key, label, required)
        if value is _MISSING:
            return
        if value is None:
            self.cleaned[attr] = None
            return
        try:
            self.cleaned[attr] = parse_date(value)
        except (AttributeError, TypeError, ValueError):
            self.errors[key] = f'{label} must be a date (YYYY-MM-DD)'

    def datetime(self, key, attr, label, required=True):
        value = self._take(key, label, required)
        if value is _MISSING:
            return
        if value is None:
            self.cleaned[attr] = None
            return
        try:
            self.cleaned[attr] = parse_datetime(value)
        except (AttributeError, TypeError, ValueError):
            self.errors[key] = f'{label} must be an ISO 8601 date or timestamp'

    def time(self, key, attr, label):
        self.string(key, attr, label, required=False, pattern=TIME_RE,
                    pattern_message=f'{label} must use the HH:MM format')

    def choice(self, key, attr, label, choices, required=True):
        self.string(key, attr, label, required=required)
        value = self.cleaned.get(attr)
        if value is not None and value not in choices:
            self.errors[key] = f"{label} must be one of: {', '.join(choices)}"
            del self.cleaned[attr]

    def result(self):
        if self.errors:
            raise ValidationError(self.errors)
        return self.cleaned


def check_event_window(start, end, start_time=None, end_time=None):
    """Return field errors for an event whose window runs backwards."""
    errors = {}
    if start is not None and end is not None and end < start:
        errors['endDate'] = 'End date cannot be before the start date'
    same_day = end is None or end == start
    if same_day and start_time and end_time and end_time < start_time:
        errors['endTime'] = 'End time cannot be before the start time'
    return errors


def validate_event(data, partial=False):
    v = PayloadValidator(data, partial)
    v.string('title', 'title', 'Title', min_length=3, max_length=200)
    v.string('description', 'description', 'Description', min_length=10)
    v.date('date', 'date', 'Date')
    v.date('endDate', 'end_date', 'End date', required=False)
    v.time('startTime', 'start_time', 'Start time')
    v.time('endTime', 'end_time', 'End time')
    v.string('location', 'location', 'Location', max_length=255)
    v.integer('nurseryId', 'nursery_id', 'Nursery', required=False, minimum=1)
    cleaned = v.result()
    errors = check_event_window(cleaned.get('date'), cleaned.get('end_date'),
                                cleaned.get('start_time'), cleaned.get('end_time'))
    if errors:
        raise ValidationError(errors)
    return cleaned


def validate_newsletter(data, partial=False):
    v = PayloadValidator(data, partial)
    v.string('title', 'title', 'Title', min_length=3, max_length=200)
    # The admin client calls the body 'description'; 'content' is accepted too
    content_key = 'content' if 'content' in v.data and 'description' not in v.data else 'description'
    v.string(content_key, 'content', 'Description', min_length=5)
    v.reference('fileUrl', 'file_url', 'File', required=False)
    v.datetime('publishDate', 'publish_date', 'Publish date', required=False)
    v.string('tags', 'tags', 'Tags', required=False, max_length=255)
    v.integer('nurseryId', 'nursery_id', 'Nursery', required=False, minimum=1)
    cleaned = v.result()
    if 'publish_date' in cleaned and cleaned['publish_date'] is None:
        # publish_date is NOT NULL; clearing it means "now"
        cleaned['publish_date'] = datetime.utcnow()
    return cleaned


def validate_gallery_image(data, partial=False):
    v = PayloadValidator(data, partial)
    v.reference('imageUrl', 'image_url', 'Image')
    v.string('title', 'title', 'Title', required=False, max_length=200)
    v.string('caption', 'caption', 'Caption', required=False, max_length=2000)
    v.integer('categoryId', 'category_id', 'Category', required=False, minimum=1)
    v.choice('status', 'status', 'Status', [s.value for s in ImageStatus], required=False)
    v.boolean('featured', 'featured', 'Featured')
    v.integer('sortOrder', 'sort_order', 'Sort order', required=False)
    v.integer('nurseryId', 'nursery_id', 'Nursery', required=False, minimum=1)
    cleaned = v.result()
    for attr, default in (('status', ImageStatus.DRAFT.value), ('sort_order', 0)):
        if attr in cleaned and cleaned[attr] is None:
            cleaned[attr] = default
    return cleaned


def validate_category(data):
    v = PayloadValidator(data)
    v.string('name', 'name', 'Name', min_length=2, max_length=100)
    v.string('slug', 'slug', 'Slug', required=False, max_length=100, lower=True,
             pattern=SLUG_RE, pattern_message='Slug may only contain lower-case letters, digits and dashes')
    v.string('description', 'description', 'Description', required=False, max_length=255)
    v.integer('sortOrder', 'sort_order', 'Sort order', required=False)
    v.integer('nurseryId', 'nursery_id', 'Nursery', required=False, minimum=1)
    cleaned = v.result()
    if not cleaned.get('slug'):
        cleaned['slug'] = slugify(cleaned['name'])
        if not cleaned['slug']:
            raise ValidationError({'slug': 'Slug could not be derived from the name'})
    if cleaned.get('sort_order') is None:
        cleaned['sort_order'] = 0
    return cleaned


def validate_nursery(data, partial=False):
    v = PayloadValidator(data, partial)
    v.string('name', 'name', 'Name', min_length=2, max_length=120)
    v.string('location', 'location', 'Location', max_length=64, lower=True, pattern=SLUG_RE,
             pattern_message='Location may only contain lower-case letters, digits and dashes')
    v.string('address', 'address', 'Address', min_length=5, max_length=255)
    v.string('phoneNumber', 'phone_number', 'Phone number', pattern=PHONE_RE,
             pattern_message='Invalid phone number')
    v.email('email', 'email')
    v.string('description', 'description', 'Description', required=False)
    v.string('openingHours', 'opening_hours', 'Opening hours', required=False, max_length=120)
    v.reference('heroImage', 'hero_image', 'Hero image', required=False)
    cleaned = v.result()
    if 'description' in cleaned and cleaned['description'] is None:
        cleaned['description'] = ''
    return cleaned




def validate_user(data, partial=False):
    """Validate a user payload; the plaintext password is returned under 'password'."""
    v = PayloadValidator(data, partial)
    v.string('username', 'username', 'Username', pattern=USERNAME_RE,
             pattern_message='Username must be 3-64 letters, digits, dots, dashes or underscores')
    v.email('email', 'email')
    v.string('firstName', 'first_name', 'First name', max_length=64)
    v.string('lastName', 'last_name', 'Last name', max_length=64)
    v.integer('nurseryId', 'nursery_id', 'Nursery', required=False, minimum=1)

    if 'role' in v.data or not partial:
        role = Role.parse(v.data.get('role'))
        if role is None:
            v.errors['role'] = f"Role must be one of: {', '.join(r.value for r in Role)}"
        else:
            v.cleaned['role'] = role.value

    if 'password' in v.data or not partial:
        password = v.data.get('password')
        is_valid, issues = password_validator.validate_password(password)
        if not is_valid:
            v.errors['password'] = '; '.join(issues)
        else:
            v.cleaned['password'] = password

    return v.result()


def validate_contact(data, known_locations=()):
    v = PayloadValidator(data)
    v.string('name', 'name', 'Name', min_length=2, max_length=120)
    v.email('email', 'email')
    v.string('phone', 'phone', 'Phone', required=False, pattern=PHONE_RE,
             pattern_message='Invalid phone number')
    v.string('nurseryLocation', 'nursery_location', 'Nursery', required=False, lower=True)
    v.string('message', 'message', 'Message', min_length=10, max_length=5000)
    cleaned = v.result()
    location = cleaned.get('nursery_location') or 'general'
    if location != 'general' and location not in known_locations:
        raise ValidationError({'nurseryLocation': 'Please select a valid nursery'})
    cleaned['nursery_location'] = location
    return cleaned


def parse_int_arg(args, key, default=None, minimum=0, maximum=None):
    """Read an integer query-string argument, raising a field error when malformed."""
    raw = args.get(key)
    if raw is None or raw == '':
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValidationError({key: f'{key} must be an integer'})
    if value < minimum:
        raise ValidationError({key: f'{key} must be at least {minimum}'})
    if maximum is not None:
        value = min(value, maximum)
    return value


def parse_bool_arg(args, key):
    raw = args.get(key)
    if raw is None or raw == '':
        return None
    raw = raw.lower()
    if raw in ('true', '1', 'yes'):
        return True
    if raw in ('false', '0', 'no'):
        return False
    raise ValidationError({key: f'{key} must be true or false'})


def parse_pagination(args):
    return (parse_int_arg(args, 'limit', maximum=MAX_LIMIT),
            parse_int_arg(args, 'offset', default=0))
