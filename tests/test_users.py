from conftest import login


def user_payload(**overrides):
    payload = {
        'username': 'newstaff',
        'email': 'newstaff@cmcnursery.co.uk',
        'password': 'Bluebell77',
        'firstName': 'New',
        'lastName': 'Staff',
        'role': 'staff',
    }
    payload.update(overrides)
    return payload


def test_super_admin_creates_nursery_admin(super_client, client, ids):
    r = super_client.post('/api/admin/users', json=user_payload(role='admin', nurseryId=ids['uxbridge']))
    assert r.status_code == 201
    user = r.get_json()['user']
    assert user['role'] == 'nursery_admin'
    assert user['nurseryId'] == ids['uxbridge']
    assert user['isActive'] is True
    assert 'password' not in user

    assert login(client, 'newstaff', 'Bluebell77').status_code == 200


def test_editor_alias_and_super_admin_has_no_nursery(super_client, ids):
    r = super_client.post('/api/admin/users', json=user_payload(role='editor', nurseryId=ids['hayes']))
    assert r.get_json()['user']['role'] == 'staff'

    r = super_client.post('/api/admin/users', json=user_payload(
        username='boss', email='boss@cmcnursery.co.uk', role='super_admin', nurseryId=ids['hayes']))
    assert r.status_code == 201
    assert r.get_json()['user']['nurseryId'] is None


def test_create_user_validation(super_client, ids):
    r = super_client.post('/api/admin/users', json=user_payload(nurseryId=None))
    assert r.status_code == 400
    assert 'nurseryId' in r.get_json()['errors']

    r = super_client.post('/api/admin/users', json=user_payload(password='password', nurseryId=ids['hayes']))
    assert r.status_code == 400
    assert 'password' in r.get_json()['errors']

    r = super_client.post('/api/admin/users', json=user_payload(role='janitor', nurseryId=ids['hayes']))
    assert r.status_code == 400
    assert 'role' in r.get_json()['errors']

    r = super_client.post('/api/admin/users', json=user_payload(username='HayesAdmin', email='HAYESADMIN@cmcnursery.co.uk',
                                                                nurseryId=ids['hayes']))
    assert r.status_code == 400
    assert set(r.get_json()['errors']) == {'username', 'email'}


def test_nursery_admin_creates_staff_in_own_nursery(hayes_admin, ids):
    r = hayes_admin.post('/api/admin/users', json=user_payload())
    assert r.status_code == 201
    assert r.get_json()['user']['nurseryId'] == ids['hayes']

    r = hayes_admin.post('/api/admin/users', json=user_payload(
        username='other', email='other@cmcnursery.co.uk', nurseryId=ids['uxbridge']))
    assert r.status_code == 403

    r = hayes_admin.post('/api/admin/users', json=user_payload(
        username='manager', email='manager@cmcnursery.co.uk', role='nursery_admin'))
    assert r.status_code == 403


def test_nursery_admin_lists_own_staff(hayes_admin, super_client, ids):
    usernames = [u['username'] for u in hayes_admin.get('/api/admin/users').get_json()['users']]
    assert usernames == ['hayesadmin', 'hayesstaff']

    everyone = super_client.get('/api/admin/users').get_json()['users']
    assert len(everyone) == 4
    uxbridge = super_client.get(f"/api/admin/users?nurseryId={ids['uxbridge']}").get_json()['users']
    assert [u['username'] for u in uxbridge] == ['uxbridgeadmin']

    assert hayes_admin.get(f"/api/admin/users/{ids['uxbridge_admin']}").status_code == 403
    assert hayes_admin.get(f"/api/admin/users/{ids['hayes_staff']}").status_code == 200


def test_update_user(super_client, hayes_admin, client, ids):
    r = hayes_admin.put(f"/api/admin/users/{ids['hayes_staff']}", json={'firstName': 'Priya', 'password': 'Marigold88'})
    assert r.status_code == 200
    assert r.get_json()['user']['firstName'] == 'Priya'
    assert login(client, 'hayesstaff', 'Marigold88').status_code == 200

    # Nursery admins cannot promote staff or edit other admins
    assert hayes_admin.put(f"/api/admin/users/{ids['hayes_staff']}", json={'role': 'nursery_admin'}).status_code == 403
    assert hayes_admin.put(f"/api/admin/users/{ids['uxbridge_admin']}", json={'firstName': 'X'}).status_code == 403

    r = super_client.patch(f"/api/admin/users/{ids['hayes_staff']}", json={'role': 'admin'})
    assert r.status_code == 200
    assert r.get_json()['user']['role'] == 'nursery_admin'


def test_super_admins_are_protected(super_client, ids):
    other = super_client.post('/api/admin/users', json=user_payload(
        username='boss', email='boss@cmcnursery.co.uk', role='super_admin')).get_json()['user']

    assert super_client.put(f"/api/admin/users/{other['id']}", json={'firstName': 'X'}).status_code == 403
    assert super_client.delete(f"/api/admin/users/{other['id']}").status_code == 403
    assert super_client.post(f"/api/admin/users/{other['id']}/deactivate").status_code == 403
    assert super_client.delete(f"/api/admin/users/{ids['super']}").status_code == 400
    assert super_client.put(f"/api/admin/users/{ids['super']}", json={'role': 'staff'}).status_code == 400


def test_deactivate_and_reactivate(super_client, hayes_admin, client, ids):
    assert hayes_admin.post(f"/api/admin/users/{ids['hayes_staff']}/deactivate").status_code == 403

    r = super_client.post(f"/api/admin/users/{ids['hayes_staff']}/deactivate")
    assert r.get_json()['user']['isActive'] is False
    assert login(client, 'hayesstaff').status_code == 401

    r = super_client.post(f"/api/admin/users/{ids['hayes_staff']}/reactivate")
    assert r.get_json()['user']['isActive'] is True
    assert login(client, 'hayesstaff').status_code == 200


def test_delete_user(hayes_admin, super_client, ids):
    assert hayes_admin.delete(f"/api/admin/users/{ids['hayes_admin']}").status_code == 400
    assert hayes_admin.delete(f"/api/admin/users/{ids['uxbridge_admin']}").status_code == 403
    assert hayes_admin.delete(f"/api/admin/users/{ids['hayes_staff']}").status_code == 200
    assert super_client.get(f"/api/admin/users/{ids['hayes_staff']}").status_code == 404
