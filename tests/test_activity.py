from conftest import event_payload


def test_mutations_are_logged_newest_first(super_client, hayes_admin, ids):
    hayes = ids['hayes']
    event = hayes_admin.post(f'/api/admin/nurseries/{hayes}/events', json=event_payload()).get_json()['event']
    hayes_admin.put(f"/api/admin/events/{event['id']}", json={'title': 'Sports Day'})

    logs = super_client.get(f'/api/admin/activity-logs?userId={ids["hayes_admin"]}').get_json()['logs']
    assert [log['actionType'] for log in logs] == ['update_event', 'create_event', 'login']

    latest = logs[0]
    assert latest['username'] == 'hayesadmin'
    assert latest['userRole'] == 'nursery_admin'
    assert latest['nurseryId'] == hayes
    assert latest['nurseryName'] == 'Hayes Nursery'
    assert latest['resourceType'] == 'event'
    assert latest['resourceId'] == event['id']
    assert latest['ipAddress'] == '127.0.0.1'


def test_filters_and_limit(super_client, hayes_admin, uxbridge_admin, ids):
    hayes_admin.post(f"/api/admin/nurseries/{ids['hayes']}/events", json=event_payload())
    uxbridge_admin.post(f"/api/admin/nurseries/{ids['uxbridge']}/events", json=event_payload())

    created = super_client.get('/api/admin/activity-logs?action=create_event').get_json()['logs']
    assert {log['nurseryId'] for log in created} == {ids['hayes'], ids['uxbridge']}

    hayes_only = super_client.get(f"/api/admin/activity-logs?nurseryId={ids['hayes']}").get_json()['logs']
    assert all(log['nurseryId'] == ids['hayes'] for log in hayes_only)

    limited = super_client.get('/api/admin/activity-logs?limit=1').get_json()['logs']
    assert len(limited) == 1


def test_nursery_logs_are_scoped(hayes_admin, hayes_staff, ids):
    hayes_staff.post(f"/api/admin/nurseries/{ids['hayes']}/events", json=event_payload())

    logs = hayes_admin.get(f"/api/admin/nurseries/{ids['hayes']}/activity-logs").get_json()['logs']
    assert logs[0]['actionType'] == 'create_event'
    assert logs[0]['username'] == 'hayesstaff'
    assert all(log['nurseryId'] == ids['hayes'] for log in logs)

    assert hayes_admin.get(f"/api/admin/nurseries/{ids['uxbridge']}/activity-logs").status_code == 403
    assert hayes_staff.get(f"/api/admin/nurseries/{ids['hayes']}/activity-logs").status_code == 403
