from datetime import datetime

from flask import Blueprint, abort, current_app, request
from flask_login import current_user

from nursery_cms.models import ActionType, ImageStatus, Permission
from nursery_cms.routes.common import json_body, nursery_or_404, owned_or_404, require_existing_nursery
from nursery_cms.services.activity_service import log_activity
from nursery_cms.storage import GalleryFilter, get_storage
from nursery_cms.utils.decorators import (
    ensure_nursery_access, nursery_access_check, require_permission, super_admin_only,
)
from nursery_cms.utils.errors import ValidationError
from nursery_cms.utils.responses import success
from nursery_cms.utils.validators import (
    parse_bool_arg, parse_int_arg, parse_pagination, validate_category, validate_gallery_image,
)

bp = Blueprint('gallery', __name__, url_prefix='/api/admin')


def _filters(nursery_id=None):
    limit, offset = parse_pagination(request.args)
    status = request.args.get('status') or None
    if status is not None and status not in [s.value for s in ImageStatus]:
        raise ValidationError({'status': f"status must be one of: {', '.join(s.value for s in ImageStatus)}"})
    return GalleryFilter(
        nursery_id=nursery_id,
        status=status,
        category_id=parse_int_arg(request.args, 'categoryId', minimum=1),
        featured=parse_bool_arg(request.args, 'featured'),
        search=request.args.get('search') or None,
        limit=limit,
        offset=offset,
    )


def _check_category(category_id, nursery_id):
    if category_id is None:
        return
    category = get_storage().get_gallery_category(category_id)
    if category is None or category.nursery_id not in (None, nursery_id):
        raise ValidationError({'categoryId': 'Category not found for this nursery'})


def _apply_status(data, current_status=None):
    """Only publishers may move an image out of draft; publishing records the approver."""
    status = data.get('status')
    if status is None or status == current_status:
        return
    if status != ImageStatus.DRAFT.value and not current_user.can(Permission.PUBLISH_GALLERY):
        abort(403, description='You do not have permission to publish gallery images')
    if status == ImageStatus.PUBLISHED.value:
        data['approved_by'] = current_user.id
        data['approved_at'] = datetime.utcnow()
    elif current_status == ImageStatus.PUBLISHED.value:
        data['approved_by'] = None
        data['approved_at'] = None


def _ensure_editable(image):
    # Anything past draft is live or was reviewed; editors only touch drafts
    if image.status != ImageStatus.DRAFT.value and not current_user.can(Permission.PUBLISH_GALLERY):
        abort(403, description='Only publishers can change images that have left draft')


def _create(nursery_id, data):
    nursery = require_existing_nursery(nursery_id)
    ensure_nursery_access(nursery.id)
    _check_category(data.get('category_id'), nursery.id)

    data.setdefault('status', ImageStatus.DRAFT.value)
    _apply_status(data)
    data['nursery_id'] = nursery.id
    data['uploaded_by'] = current_user.id

    image = get_storage().create_gallery_image(data)
    current_app.logger.info(f"Gallery image {image.id} added to nursery {nursery.location} as {image.status}")
    log_activity(ActionType.UPLOAD_GALLERY, f"Added gallery image '{image.title or image.image_url}'",
                 resource_type='gallery_image', resource_id=image.id, nursery_id=nursery.id)
    return success(201, image=image.to_dict())


def _update(image, data):
    _ensure_editable(image)
    if 'nursery_id' in data and data['nursery_id'] != image.nursery_id:
        ensure_nursery_access(require_existing_nursery(data['nursery_id']).id)
    else:
        data.pop('nursery_id', None)

    _check_category(data.get('category_id'), data.get('nursery_id', image.nursery_id))
    if 'nursery_id' in data and 'category_id' not in data and image.category_id is not None:
        # A nursery-scoped category does not follow the image to another nursery
        category = get_storage().get_gallery_category(image.category_id)
        if category is not None and category.nursery_id is not None:
            data['category_id'] = None
    _apply_status(data, image.status)

    image = get_storage().update_gallery_image(image.id, data)
    log_activity(ActionType.UPDATE_GALLERY, f"Updated gallery image '{image.title or image.image_url}'",
                 resource_type='gallery_image', resource_id=image.id, nursery_id=image.nursery_id)
    return success(image=image.to_dict())


def _delete(image):
    image_id, label, nursery_id = image.id, image.title or image.image_url, image.nursery_id
    get_storage().delete_gallery_image(image_id)
    log_activity(ActionType.DELETE_GALLERY, f"Deleted gallery image '{label}'",
                 resource_type='gallery_image', resource_id=image_id, nursery_id=nursery_id)
    return success(message='Image deleted')


def _load(image_id):
    image = owned_or_404(get_storage().get_gallery_image(image_id), 'Image')
    ensure_nursery_access(image.nursery_id)
    return image


# Nursery-scoped routes

@bp.route('/nurseries/<int:nursery_id>/gallery', methods=['GET'])
@require_permission(Permission.MANAGE_CONTENT)
@nursery_access_check('nursery_id')
def list_nursery_images(nursery_id):
    nursery_or_404(nursery_id)
    images = get_storage().list_gallery_images(_filters(nursery_id))
    return success(images=[i.to_dict() for i in images])


@bp.route('/nurseries/<int:nursery_id>/gallery', methods=['POST'])
@require_permission(Permission.MANAGE_CONTENT)
@nursery_access_check('nursery_id')
def create_nursery_image(nursery_id):
    data = validate_gallery_image(json_body())
    data.pop('nursery_id', None)
    return _create(nursery_id, data)


@bp.route('/nurseries/<int:nursery_id>/gallery/<int:image_id>', methods=['GET'])
@require_permission(Permission.MANAGE_CONTENT)
@nursery_access_check('nursery_id')
def get_nursery_image(nursery_id, image_id):
    image = owned_or_404(get_storage().get_gallery_image(image_id), 'Image', nursery_id)
    return success(image=image.to_dict())


@bp.route('/nurseries/<int:nursery_id>/gallery/<int:image_id>', methods=['PUT', 'PATCH'])
@require_permission(Permission.MANAGE_CONTENT)
@nursery_access_check('nursery_id')
def update_nursery_image(nursery_id, image_id):
    image = owned_or_404(get_storage().get_gallery_image(image_id), 'Image', nursery_id)
    return _update(image, validate_gallery_image(json_body(), partial=True))


@bp.route('/nurseries/<int:nursery_id>/gallery/<int:image_id>', methods=['DELETE'])
@require_permission(Permission.DELETE_CONTENT)
@nursery_access_check('nursery_id')
def delete_nursery_image(nursery_id, image_id):
    image = owned_or_404(get_storage().get_gallery_image(image_id), 'Image', nursery_id)
    return _delete(image)


# Flat routes

@bp.route('/gallery', methods=['GET'])
@super_admin_only
def list_images():
    nursery_id = parse_int_arg(request.args, 'nurseryId', minimum=1)
    images = get_storage().list_gallery_images(_filters(nursery_id))
    return success(images=[i.to_dict() for i in images])


@bp.route('/gallery', methods=['POST'])
@require_permission(Permission.MANAGE_CONTENT)
def create_image():
    data = validate_gallery_image(json_body())
    return _create(data.pop('nursery_id', None), data)


@bp.route('/gallery/<int:image_id>', methods=['GET'])
@require_permission(Permission.MANAGE_CONTENT)
def get_image(image_id):
    return success(image=_load(image_id).to_dict())


@bp.route('/gallery/<int:image_id>', methods=['PUT', 'PATCH'])
@require_permission(Permission.MANAGE_CONTENT)
def update_image(image_id):
    image = _load(image_id)
    return _update(image, validate_gallery_image(json_body(), partial=True))


@bp.route('/gallery/<int:image_id>', methods=['DELETE'])
@require_permission(Permission.DELETE_CONTENT)
def delete_image(image_id):
    return _delete(_load(image_id))


# Categories

@bp.route('/gallery/categories', methods=['GET'])
@require_permission(Permission.MANAGE_CONTENT)
def list_categories():
    nursery_id = parse_int_arg(request.args, 'nurseryId', minimum=1)
    if nursery_id is None and not current_user.is_super_admin:
        nursery_id = current_user.nursery_id
    if nursery_id is not None:
        ensure_nursery_access(nursery_id)
    categories = get_storage().list_gallery_categories(nursery_id)
    return success(categories=[c.to_dict() for c in categories])


@bp.route('/gallery/categories', methods=['POST'])
@require_permission(Permission.MANAGE_CATEGORIES)
def create_category():
    data = validate_category(json_body())
    nursery_id = data.get('nursery_id')
    if nursery_id is None:
        if not current_user.is_super_admin:
            abort(403, description='Only super admins can create categories shared by all nurseries')
    else:
        ensure_nursery_access(require_existing_nursery(nursery_id).id)

    storage = get_storage()
    if any(c.slug == data['slug'] and c.nursery_id == nursery_id
           for c in storage.list_gallery_categories(nursery_id)):
        raise ValidationError({'slug': 'A category with this slug already exists'})

    category = storage.create_gallery_category(data)
    log_activity(ActionType.CREATE_CATEGORY, f"Created gallery category '{category.name}'",
                 resource_type='gallery_category', resource_id=category.id, nursery_id=nursery_id)
    return success(201, category=category.to_dict())


@bp.route('/gallery/categories/<int:category_id>', methods=['DELETE'])
@require_permission(Permission.MANAGE_CATEGORIES)
def delete_category(category_id):
    storage = get_storage()
    category = owned_or_404(storage.get_gallery_category(category_id), 'Category')
    if category.nursery_id is None:
        if not current_user.is_super_admin:
            abort(403, description='Only super admins can delete categories shared by all nurseries')
    else:
        ensure_nursery_access(category.nursery_id)

    name, nursery_id = category.name, category.nursery_id
    storage.delete_gallery_category(category_id)
    log_activity(ActionType.DELETE_CATEGORY, f"Deleted gallery category '{name}'",
                 resource_type='gallery_category', resource_id=category_id, nursery_id=nursery_id)
    return success(message='Category deleted')
