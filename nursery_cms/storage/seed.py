from flask import current_app
from werkzeug.security import generate_password_hash

from nursery_cms.models import Role

DEFAULT_NURSERIES = [
    {
        'name': 'Hayes Nursery',
        'location': 'hayes',
        'address': '192 Church Road, Hayes, UB3 2LT',
        'phone_number': '01895 272885',
        'email': 'hayes@cmcnursery.co.uk',
        'opening_hours': 'Monday to Friday, 8:00am - 6:00pm',
        'description': (
            'Our Hayes nursery provides a warm, welcoming environment with an emphasis on '
            'creative expression and arts, with a creative arts studio, a music space and a '
            'secure outdoor play area.'
        ),
        'hero_image': 'https://images.unsplash.com/photo-1567448400815-a6fa3ac9c0ff',
    },
    {
        'name': 'Uxbridge Nursery',
        'location': 'uxbridge',
        'address': '4 New Windsor Street, Uxbridge, UB8 2TU',
        'phone_number': '01895 272885',
        'email': 'uxbridge@cmcnursery.co.uk',
        'opening_hours': 'Monday to Friday, 8:00am - 6:00pm',
        'description': (
            'Our Uxbridge nursery is a cozy, innovative environment with modern learning '
            'facilities and a dedicated sensory room for children aged 2-5.'
        ),
        'hero_image': 'https://images.unsplash.com/photo-1544487660-b86394cba400',
    },
    {
        'name': 'Hounslow Nursery',
        'location': 'hounslow',
        'address': '488, 490 Great West Rd, Hounslow TW5 0TA',
        'phone_number': '01895 272885',
        'email': 'hounslow@cmcnursery.co.uk',
        'opening_hours': 'Monday to Friday, 8:00am - 6:00pm',
        'description': (
            'Our Hounslow nursery is a nature-focused environment with extensive outdoor play '
            'areas and forest school activities for children aged 1-5.'
        ),
        'hero_image': 'https://images.unsplash.com/photo-1543248939-4296e1fea89b',
    },
]


def seed_defaults(storage, admin_password):
    """Create the default nurseries and admin accounts if they are missing.

    Returns the number of rows created. Safe to run repeatedly.
    """
    created = 0
    password_hash = generate_password_hash(admin_password)

    for data in DEFAULT_NURSERIES:
        if storage.get_nursery_by_location(data['location']) is None:
            storage.create_nursery(dict(data))
            created += 1

    accounts = [{
        'username': 'superadmin',
        'email': 'admin@cmcnursery.co.uk',
        'first_name': 'Super',
        'last_name': 'Admin',
        'role': Role.SUPER_ADMIN.value,
        'nursery_id': None,
    }]
    for data in DEFAULT_NURSERIES:
        nursery = storage.get_nursery_by_location(data['location'])
        accounts.append({
            'username': f"{data['location']}admin",
            'email': f"{data['location']}.manager@cmcnursery.co.uk",
            'first_name': data['location'].title(),
            'last_name': 'Manager',
            'role': Role.NURSERY_ADMIN.value,
            'nursery_id': nursery.id,
        })

    for account in accounts:
        if storage.get_user_by_username(account['username']) is None:
            storage.create_user(dict(account, password_hash=password_hash, is_active=True))
            created += 1

    if created:
        current_app.logger.info(f"Seeded {created} default records")
    return created
