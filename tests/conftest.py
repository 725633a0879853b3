import pytest
from werkzeug.security import generate_password_hash

from config import DatabaseTestConfig, TestConfig
from nursery_cms import create_app, db
from nursery_cms.models import Role
from nursery_cms.storage import get_storage

PASSWORD = 'Sunflower42'


def _seed(storage):
    password_hash = generate_password_hash(PASSWORD)
    hayes = storage.create_nursery({
        'name': 'Hayes Nursery',
        'location': 'hayes',
        'address': '192 Church Road, Hayes, UB3 2LT',
        'phone_number': '01895 272885',
        'email': 'hayes@cmcnursery.co.uk',
        'description': 'Creative arts nursery',
    })
    uxbridge = storage.create_nursery({
        'name': 'Uxbridge Nursery',
        'location': 'uxbridge',
        'address': '4 New Windsor Street, Uxbridge, UB8 2TU',
        'phone_number': '01895 272885',
        'email': 'uxbridge@cmcnursery.co.uk',
        'description': 'Sensory room and modern facilities',
    })

    def user(username, role, nursery):
        return storage.create_user({
            'username': username,
            'email': f'{username}@cmcnursery.co.uk',
            'password_hash': password_hash,
            'first_name': username.title(),
            'last_name': 'Tester',
            'role': role.value,
            'nursery_id': nursery.id if nursery else None,
        })

    return {
        'hayes': hayes.id,
        'uxbridge': uxbridge.id,
        'super': user('superadmin', Role.SUPER_ADMIN, None).id,
        'hayes_admin': user('hayesadmin', Role.NURSERY_ADMIN, hayes).id,
        'uxbridge_admin': user('uxbridgeadmin', Role.NURSERY_ADMIN, uxbridge).id,
        'hayes_staff': user('hayesstaff', Role.STAFF, hayes).id,
    }


@pytest.fixture(params=[TestConfig, DatabaseTestConfig], ids=['memory', 'database'])
def app(request):
    app = create_app(request.param)
    with app.app_context():
        app.seed_ids = _seed(get_storage())

    yield app

    if request.param is DatabaseTestConfig:
        with app.app_context():
            db.session.remove()
            db.drop_all()


@pytest.fixture()
def ids(app):
    return app.seed_ids


@pytest.fixture()
def storage(app):
    """Direct storage access for tests that make no HTTP requests.

    The app context stays pushed for the whole test, and test client requests
    reuse a pushed context (and its ``g``), so tests that also drive clients
    should use ``app_storage`` instead.
    """
    with app.app_context():
        yield get_storage()


@pytest.fixture()
def app_storage(app):
    """Run one storage call inside its own short-lived app context."""
    def call(method, *args, **kwargs):
        with app.app_context():
            return getattr(get_storage(), method)(*args, **kwargs)
    return call


def login(client, username, password=PASSWORD):
    return client.post('/api/admin/login', json={'username': username, 'password': password})


def _logged_in(app, username):
    client = app.test_client()
    response = login(client, username)
    assert response.status_code == 200, response.get_json()
    return client


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def super_client(app):
    return _logged_in(app, 'superadmin')


@pytest.fixture()
def hayes_admin(app):
    return _logged_in(app, 'hayesadmin')


@pytest.fixture()
def uxbridge_admin(app):
    return _logged_in(app, 'uxbridgeadmin')


@pytest.fixture()
def hayes_staff(app):
    return _logged_in(app, 'hayesstaff')


def event_payload(**overrides):
    payload = {
        'title': 'Summer Fair',
        'description': 'Games, face painting and a cake stall for families.',
        'date': '2030-06-14',
        'startTime': '10:00',
        'endTime': '14:00',
        'location': 'Garden',
    }
    payload.update(overrides)
    return payload


def newsletter_payload(**overrides):
    payload = {
        'title': 'June Newsletter',
        'description': 'News from the nursery this month.',
        'fileUrl': '/uploads/newsletters/june.pdf',
        'publishDate': '2030-06-01T09:00:00Z',
        'tags': 'summer,events',
    }
    payload.update(overrides)
    return payload


def image_payload(**overrides):
    payload = {
        'imageUrl': '/uploads/gallery/painting.jpg',
        'title': 'Painting morning',
        'caption': 'Finger painting in the arts studio',
    }
    payload.update(overrides)
    return payload
