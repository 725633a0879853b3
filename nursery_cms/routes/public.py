"""
Public read-only API used by the nursery web pages.

Nurseries are addressed by their location slug. Only published gallery images
are visible here.
"""

from datetime import date

from flask import Blueprint, abort, request

from nursery_cms.models import ImageStatus
from nursery_cms.storage import GalleryFilter, NewsletterFilter, get_storage
from nursery_cms.utils.responses import success
from nursery_cms.utils.validators import parse_bool_arg, parse_int_arg, parse_pagination

bp = Blueprint('public', __name__, url_prefix='/api')


def _nursery_by_location(location):
    nursery = get_storage().get_nursery_by_location(location)
    if nursery is None:
        abort(404, description='Nursery not found')
    return nursery


@bp.route('/nurseries', methods=['GET'])
def list_nurseries():
    nurseries = get_storage().list_nurseries()
    return success(nurseries=[n.to_dict() for n in nurseries])


@bp.route('/nurseries/<location>', methods=['GET'])
def get_nursery(location):
    return success(nursery=_nursery_by_location(location).to_dict())


@bp.route('/nurseries/<location>/events', methods=['GET'])
def nursery_events(location):
    nursery = _nursery_by_location(location)
    from_date = date.today() if parse_bool_arg(request.args, 'upcoming') else None
    events = get_storage().list_events(nursery_id=nursery.id, from_date=from_date)
    return success(events=[e.to_dict() for e in events])


@bp.route('/nurseries/<location>/newsletters', methods=['GET'])
def nursery_newsletters(location):
    nursery = _nursery_by_location(location)
    limit, offset = parse_pagination(request.args)
    newsletters = get_storage().list_newsletters(NewsletterFilter(
        nursery_id=nursery.id,
        include_broadcast=True,
        tag=request.args.get('tag') or None,
        search=request.args.get('search') or None,
        limit=limit,
        offset=offset,
    ))
    return success(newsletters=[n.to_dict() for n in newsletters])


@bp.route('/nurseries/<location>/gallery', methods=['GET'])
def nursery_gallery(location):
    nursery = _nursery_by_location(location)
    limit, offset = parse_pagination(request.args)
    images = get_storage().list_gallery_images(GalleryFilter(
        nursery_id=nursery.id,
        status=ImageStatus.PUBLISHED.value,
        category_id=parse_int_arg(request.args, 'category', minimum=1),
        featured=parse_bool_arg(request.args, 'featured'),
        search=request.args.get('search') or None,
        limit=limit,
        offset=offset,
    ))
    return success(images=[i.to_dict() for i in images])


@bp.route('/gallery/categories', methods=['GET'])
def gallery_categories():
    nursery_id = parse_int_arg(request.args, 'nurseryId', minimum=1)
    categories = get_storage().list_gallery_categories(nursery_id)
    return success(categories=[c.to_dict() for c in categories])
