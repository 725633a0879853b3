from flask import Blueprint, current_app, request
from flask_login import current_user

from nursery_cms.models import Permission
from nursery_cms.routes.common import json_body
from nursery_cms.services.email_service import EmailService
from nursery_cms.storage import get_storage
from nursery_cms.utils.decorators import authenticate_user, require_permission
from nursery_cms.utils.responses import success
from nursery_cms.utils.validators import validate_contact

bp = Blueprint('contact', __name__, url_prefix='/api')


@bp.route('/contact', methods=['POST'])
def submit_contact():
    storage = get_storage()
    nurseries = {n.location: n for n in storage.list_nurseries()}
    data = validate_contact(json_body(), known_locations=nurseries)

    submission = storage.create_contact_submission(data)
    current_app.logger.info(f"Contact submission {submission.id} received for {submission.nursery_location}")

    nursery = nurseries.get(submission.nursery_location)
    # The submission is already stored; a mail failure is reported, not raised
    email_sent = EmailService.send_contact_email(submission, nursery.name if nursery else None)
    if not email_sent:
        current_app.logger.warning(f"Contact submission {submission.id} stored but not emailed")

    return success(
        201,
        message='Thank you for your message. We will get back to you soon.',
        submission=submission.to_dict(),
        emailSent=email_sent,
    )


@bp.route('/admin/contact-submissions', methods=['GET'])
@require_permission(Permission.VIEW_CONTACT_SUBMISSIONS)
def list_contact_submissions():
    storage = get_storage()
    if current_user.is_super_admin:
        location = request.args.get('nurseryLocation') or None
    else:
        nursery = storage.get_nursery(current_user.nursery_id) if current_user.nursery_id else None
        if nursery is None:
            return success(submissions=[])
        location = nursery.location
    submissions = storage.list_contact_submissions(nursery_location=location)
    return success(submissions=[s.to_dict() for s in submissions])


@bp.route('/admin/email/verify', methods=['GET'])
@authenticate_user
def verify_email_config():
    ok, message = EmailService.verify_config()
    return success(configured=ok, message=message)
