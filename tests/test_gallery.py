from conftest import image_payload


def _create(client, nursery_id, **overrides):
    r = client.post(f'/api/admin/nurseries/{nursery_id}/gallery', json=image_payload(**overrides))
    assert r.status_code == 201, r.get_json()
    return r.get_json()['image']


def test_staff_uploads_are_drafts(hayes_staff, ids):
    image = _create(hayes_staff, ids['hayes'])
    assert image['status'] == 'draft'
    assert image['uploadedBy'] == ids['hayes_staff']
    assert image['approvedBy'] is None


def test_staff_cannot_publish(hayes_staff, ids):
    hayes = ids['hayes']
    r = hayes_staff.post(f'/api/admin/nurseries/{hayes}/gallery', json=image_payload(status='published'))
    assert r.status_code == 403

    image = _create(hayes_staff, hayes)
    r = hayes_staff.patch(f"/api/admin/gallery/{image['id']}", json={'status': 'published'})
    assert r.status_code == 403

    # Editing a draft is fine
    r = hayes_staff.patch(f"/api/admin/gallery/{image['id']}", json={'caption': 'Messy fun'})
    assert r.status_code == 200
    assert r.get_json()['image']['caption'] == 'Messy fun'


def test_publishing_records_approver(hayes_staff, hayes_admin, ids):
    image = _create(hayes_staff, ids['hayes'])
    r = hayes_admin.patch(f"/api/admin/nurseries/{ids['hayes']}/gallery/{image['id']}",
                          json={'status': 'published'})
    assert r.status_code == 200
    published = r.get_json()['image']
    assert published['status'] == 'published'
    assert published['approvedBy'] == ids['hayes_admin']
    assert published['approvedAt'] is not None


def test_staff_cannot_change_published_images(hayes_staff, hayes_admin, client, ids):
    hayes = ids['hayes']
    image = _create(hayes_admin, hayes, status='published', title='Sports day')

    r = hayes_staff.put(f"/api/admin/gallery/{image['id']}", json={'status': 'draft', 'title': 'Changed'})
    assert r.status_code == 403
    r = hayes_staff.patch(f"/api/admin/nurseries/{hayes}/gallery/{image['id']}", json={'caption': 'Changed'})
    assert r.status_code == 403

    public = client.get('/api/nurseries/hayes/gallery').get_json()['images']
    assert [(i['title'], i['caption']) for i in public] == [('Sports day', image['caption'])]


def test_unpublishing_clears_approval(hayes_admin, client, ids):
    image = _create(hayes_admin, ids['hayes'], status='published')
    r = hayes_admin.patch(f"/api/admin/gallery/{image['id']}", json={'status': 'draft'})
    assert r.status_code == 200
    draft = r.get_json()['image']
    assert draft['approvedBy'] is None
    assert draft['approvedAt'] is None
    assert client.get('/api/nurseries/hayes/gallery').get_json()['images'] == []


def test_image_validation(hayes_admin, ids):
    r = hayes_admin.post(f"/api/admin/nurseries/{ids['hayes']}/gallery",
                         json={'imageUrl': 'C:/photos/a.jpg', 'status': 'hidden', 'featured': 'maybe'})
    assert r.status_code == 400
    assert set(r.get_json()['errors']) == {'imageUrl', 'status', 'featured'}


def test_public_gallery_shows_published_only(hayes_admin, client, ids):
    hayes = ids['hayes']
    _create(hayes_admin, hayes, title='Draft one')
    _create(hayes_admin, hayes, title='Live one', status='published')
    _create(hayes_admin, hayes, title='Old one', status='archived')

    images = client.get('/api/nurseries/hayes/gallery').get_json()['images']
    assert [i['title'] for i in images] == ['Live one']

    admin_images = hayes_admin.get(f'/api/admin/nurseries/{hayes}/gallery?status=draft').get_json()['images']
    assert [i['title'] for i in admin_images] == ['Draft one']


def test_gallery_sorting_and_paging(hayes_admin, client, ids):
    hayes = ids['hayes']
    _create(hayes_admin, hayes, title='A', sortOrder=1, status='published')
    _create(hayes_admin, hayes, title='B', sortOrder=0, status='published')
    _create(hayes_admin, hayes, title='C', sortOrder=0, status='published', featured=True)

    images = client.get('/api/nurseries/hayes/gallery').get_json()['images']
    assert [i['title'] for i in images] == ['C', 'B', 'A']

    featured = client.get('/api/nurseries/hayes/gallery?featured=true').get_json()['images']
    assert [i['title'] for i in featured] == ['C']

    page = client.get('/api/nurseries/hayes/gallery?limit=1&offset=1').get_json()['images']
    assert [i['title'] for i in page] == ['B']

    found = client.get('/api/nurseries/hayes/gallery?search=b').get_json()['images']
    assert [i['title'] for i in found] == ['B']


def test_categories(super_client, hayes_admin, uxbridge_admin, client, ids):
    r = hayes_admin.post('/api/admin/gallery/categories', json={'name': 'Outdoor Play'})
    assert r.status_code == 403

    r = super_client.post('/api/admin/gallery/categories', json={'name': 'Outdoor Play'})
    assert r.status_code == 201
    shared = r.get_json()['category']
    assert shared['slug'] == 'outdoor-play'
    assert shared['nurseryId'] is None

    r = hayes_admin.post('/api/admin/gallery/categories', json={'name': 'Arts Studio', 'nurseryId': ids['hayes']})
    assert r.status_code == 201
    hayes_category = r.get_json()['category']

    r = super_client.post('/api/admin/gallery/categories', json={'name': 'Outdoor play'})
    assert r.status_code == 400

    names = [c['name'] for c in client.get(f"/api/gallery/categories?nurseryId={ids['hayes']}").get_json()['categories']]
    assert sorted(names) == ['Arts Studio', 'Outdoor Play']
    names = [c['name'] for c in client.get('/api/gallery/categories').get_json()['categories']]
    assert names == ['Outdoor Play']

    # Another nursery's category cannot be used
    r = uxbridge_admin.post(f"/api/admin/nurseries/{ids['uxbridge']}/gallery",
                            json=image_payload(categoryId=hayes_category['id']))
    assert r.status_code == 400
    assert 'categoryId' in r.get_json()['errors']

    assert uxbridge_admin.delete(f"/api/admin/gallery/categories/{hayes_category['id']}").status_code == 403


def test_deleting_category_uncategorises_images(hayes_admin, client, ids):
    hayes = ids['hayes']
    category = hayes_admin.post('/api/admin/gallery/categories',
                                json={'name': 'Trips', 'nurseryId': hayes}).get_json()['category']
    image = _create(hayes_admin, hayes, categoryId=category['id'], status='published')

    in_category = client.get(f"/api/nurseries/hayes/gallery?category={category['id']}").get_json()['images']
    assert [i['id'] for i in in_category] == [image['id']]

    assert hayes_admin.delete(f"/api/admin/gallery/categories/{category['id']}").status_code == 200
    fetched = hayes_admin.get(f"/api/admin/gallery/{image['id']}").get_json()['image']
    assert fetched['categoryId'] is None


def test_delete_image(hayes_admin, hayes_staff, ids):
    image = _create(hayes_staff, ids['hayes'])
    assert hayes_staff.delete(f"/api/admin/gallery/{image['id']}").status_code == 403
    assert hayes_admin.delete(f"/api/admin/gallery/{image['id']}").status_code == 200
    assert hayes_admin.get(f"/api/admin/gallery/{image['id']}").status_code == 404


def test_super_admin_gallery_listing(super_client, hayes_admin, uxbridge_admin, ids):
    _create(hayes_admin, ids['hayes'])
    _create(uxbridge_admin, ids['uxbridge'])

    assert len(super_client.get('/api/admin/gallery').get_json()['images']) == 2
    only_uxbridge = super_client.get(f"/api/admin/gallery?nurseryId={ids['uxbridge']}").get_json()['images']
    assert [i['nurseryId'] for i in only_uxbridge] == [ids['uxbridge']]
    assert hayes_admin.get('/api/admin/gallery').status_code == 403
