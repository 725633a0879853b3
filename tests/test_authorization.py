import pytest

from conftest import event_payload
from nursery_cms.models import Permission, Role
from nursery_cms.models.role import has_permission, roles_with


@pytest.mark.parametrize('method, path', [
    ('get', '/api/admin/me'),
    ('get', '/api/admin/nurseries'),
    ('get', '/api/admin/nurseries/1/events'),
    ('post', '/api/admin/nurseries/1/events'),
    ('get', '/api/admin/nurseries/1/newsletters'),
    ('get', '/api/admin/nurseries/1/gallery'),
    ('put', '/api/admin/events/1'),
    ('delete', '/api/admin/gallery/1'),
    ('get', '/api/admin/users'),
    ('get', '/api/admin/activity-logs'),
    ('get', '/api/admin/contact-submissions'),
    ('get', '/api/admin/email/verify'),
])
def test_admin_routes_require_authentication(client, method, path):
    r = getattr(client, method)(path, json={})
    assert r.status_code == 401
    assert r.get_json()['success'] is False


def test_nursery_admin_cannot_reach_another_nursery(hayes_admin, ids):
    uxbridge = ids['uxbridge']
    assert hayes_admin.get(f'/api/admin/nurseries/{uxbridge}').status_code == 403
    assert hayes_admin.get(f'/api/admin/nurseries/{uxbridge}/events').status_code == 403
    assert hayes_admin.post(f'/api/admin/nurseries/{uxbridge}/events', json=event_payload()).status_code == 403
    assert hayes_admin.get(f'/api/admin/nurseries/{uxbridge}/gallery').status_code == 403
    assert hayes_admin.get(f'/api/admin/nurseries/{uxbridge}/activity-logs').status_code == 403


def test_flat_routes_check_ownership_of_stored_record(uxbridge_admin, hayes_admin, ids):
    r = uxbridge_admin.post(f"/api/admin/nurseries/{ids['uxbridge']}/events", json=event_payload())
    event_id = r.get_json()['event']['id']

    assert hayes_admin.get(f'/api/admin/events/{event_id}').status_code == 403
    assert hayes_admin.put(f'/api/admin/events/{event_id}', json={'title': 'Hijacked'}).status_code == 403
    assert hayes_admin.delete(f'/api/admin/events/{event_id}').status_code == 403
    assert uxbridge_admin.get(f'/api/admin/events/{event_id}').status_code == 200


def test_flat_create_checks_body_nursery(hayes_admin, ids):
    r = hayes_admin.post('/api/admin/events', json=event_payload(nurseryId=ids['uxbridge']))
    assert r.status_code == 403


def test_super_admin_bypasses_nursery_checks(super_client, ids):
    for nursery_id in (ids['hayes'], ids['uxbridge']):
        assert super_client.get(f'/api/admin/nurseries/{nursery_id}/events').status_code == 200


def test_super_admin_only_routes(hayes_admin):
    assert hayes_admin.get('/api/admin/events').status_code == 403
    assert hayes_admin.get('/api/admin/activity-logs').status_code == 403
    assert hayes_admin.post('/api/admin/nurseries', json={}).status_code == 403


def test_staff_limits(hayes_staff, ids):
    hayes = ids['hayes']
    r = hayes_staff.post(f'/api/admin/nurseries/{hayes}/events', json=event_payload())
    assert r.status_code == 201
    event_id = r.get_json()['event']['id']

    assert hayes_staff.delete(f'/api/admin/nurseries/{hayes}/events/{event_id}').status_code == 403
    assert hayes_staff.get('/api/admin/users').status_code == 403
    assert hayes_staff.get(f'/api/admin/nurseries/{hayes}').status_code == 403
    assert hayes_staff.put(f'/api/admin/nurseries/{hayes}', json={'name': 'Renamed'}).status_code == 403


def test_role_aliases():
    assert Role.parse('admin') is Role.NURSERY_ADMIN
    assert Role.parse('editor') is Role.STAFF
    assert Role.parse(' Super_Admin ') is Role.SUPER_ADMIN
    assert Role.parse('janitor') is None
    assert Role.parse(None) is None


def test_permission_matrix():
    assert has_permission('super_admin', Permission.MANAGE_NURSERIES)
    assert not has_permission('admin', Permission.MANAGE_NURSERIES)
    assert has_permission('admin', Permission.PUBLISH_GALLERY)
    assert has_permission('editor', Permission.MANAGE_CONTENT)
    assert not has_permission('editor', Permission.DELETE_CONTENT)
    assert not has_permission('regular', Permission.MANAGE_CONTENT)
    assert not has_permission('unknown', Permission.MANAGE_CONTENT)
    assert roles_with(Permission.MANAGE_USERS) == (Role.SUPER_ADMIN, Role.NURSERY_ADMIN)


def test_nested_item_from_another_nursery(super_client, hayes_admin, ids):
    hayes, uxbridge = ids['hayes'], ids['uxbridge']
    event = super_client.post(f'/api/admin/nurseries/{uxbridge}/events', json=event_payload()).get_json()['event']
    url = f"/api/admin/nurseries/{hayes}/events/{event['id']}"

    # Under the caller's own nursery URL a record from elsewhere is still forbidden
    assert hayes_admin.get(url).status_code == 403
    assert hayes_admin.put(url, json={'title': 'Hijacked'}).status_code == 403
    assert hayes_admin.delete(url).status_code == 403

    # Super admins can reach the record, so the mismatched URL is just not found
    assert super_client.get(url).status_code == 404
    assert super_client.get(f"/api/admin/nurseries/{uxbridge}/events/{event['id']}").status_code == 200
