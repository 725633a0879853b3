from nursery_cms import mail


def contact_payload(**overrides):
    payload = {
        'name': 'Amelia Parent',
        'email': 'amelia@example.com',
        'phone': '07700 900123',
        'nurseryLocation': 'hayes',
        'message': 'Do you have any places for a two year old in September?',
    }
    payload.update(overrides)
    return payload


def test_submission_is_stored_and_emailed(app, client):
    with mail.record_messages() as outbox:
        r = client.post('/api/contact', json=contact_payload())

    assert r.status_code == 201
    body = r.get_json()
    assert body['emailSent'] is True
    assert body['submission']['nurseryLocation'] == 'hayes'

    assert len(outbox) == 1
    message = outbox[0]
    assert message.recipients == [app.config['CONTACT_EMAIL_RECIPIENT']]
    assert message.reply_to == 'amelia@example.com'
    assert 'Hayes Nursery' in message.subject
    assert 'places for a two year old' in message.body


def test_html_body_escapes_user_input(client):
    with mail.record_messages() as outbox:
        client.post('/api/contact', json=contact_payload(name='<b>Bold</b>'))
    assert '<b>Bold</b>' not in outbox[0].html
    assert '&lt;b&gt;Bold&lt;/b&gt;' in outbox[0].html


def test_general_enquiry_is_default(client):
    r = client.post('/api/contact', json=contact_payload(nurseryLocation=None, phone=None))
    assert r.status_code == 201
    assert r.get_json()['submission']['nurseryLocation'] == 'general'


def test_validation(client):
    r = client.post('/api/contact', json={'name': 'A', 'email': 'not-an-email', 'message': 'Hi'})
    assert r.status_code == 400
    assert set(r.get_json()['errors']) == {'name', 'email', 'message'}

    r = client.post('/api/contact', json=contact_payload(nurseryLocation='atlantis'))
    assert r.status_code == 400
    assert 'nurseryLocation' in r.get_json()['errors']


def test_mail_failure_does_not_fail_request(app, client, super_client):
    app.config['MAIL_PASSWORD'] = None
    r = client.post('/api/contact', json=contact_payload())
    assert r.status_code == 201
    assert r.get_json()['emailSent'] is False

    submissions = super_client.get('/api/admin/contact-submissions').get_json()['submissions']
    assert len(submissions) == 1


def test_submissions_are_scoped_to_nursery(client, super_client, hayes_admin, hayes_staff):
    client.post('/api/contact', json=contact_payload())
    client.post('/api/contact', json=contact_payload(nurseryLocation='uxbridge'))
    client.post('/api/contact', json=contact_payload(nurseryLocation='general'))

    assert len(super_client.get('/api/admin/contact-submissions').get_json()['submissions']) == 3
    filtered = super_client.get('/api/admin/contact-submissions?nurseryLocation=uxbridge').get_json()['submissions']
    assert [s['nurseryLocation'] for s in filtered] == ['uxbridge']

    own = hayes_admin.get('/api/admin/contact-submissions').get_json()['submissions']
    assert [s['nurseryLocation'] for s in own] == ['hayes']

    assert hayes_staff.get('/api/admin/contact-submissions').status_code == 403


def test_email_verify(app, hayes_staff):
    r = hayes_staff.get('/api/admin/email/verify')
    assert r.status_code == 200
    assert r.get_json()['configured'] is True

    app.config['MAIL_USERNAME'] = None
    body = hayes_staff.get('/api/admin/email/verify').get_json()
    assert body['configured'] is False
