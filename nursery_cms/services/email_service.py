from flask import current_app
from flask_mail import Message
from markupsafe import escape

from nursery_cms import mail


class EmailService:
    """Service for handling email notifications"""

    @staticmethod
    def is_configured():
        return bool(current_app.config.get('MAIL_USERNAME') and current_app.config.get('MAIL_PASSWORD'))

    @staticmethod
    def send_email(subject, recipients, text_body, html_body=None, reply_to=None):
        """
        Send an email.

        Returns True on success, False on failure. Delivery problems are
        logged rather than raised so callers can report them to the client.
        """
        if not recipients:
            current_app.logger.error("No recipients specified for email")
            return False

        if not EmailService.is_configured():
            current_app.logger.warning(
                f"Mail is not configured; email '{subject}' to {', '.join(recipients)} was not sent"
            )
            return False

        try:
            msg = Message(
                subject=subject,
                recipients=list(recipients),
                body=text_body,
                html=html_body,
                reply_to=reply_to,
            )
            mail.send(msg)
            current_app.logger.info(f"Email sent successfully to {', '.join(recipients)}")
            return True
        except Exception as e:
            current_app.logger.error(f"Failed to send email to {', '.join(recipients)}: {str(e)}")
            return False

    @staticmethod
    def send_contact_email(submission, nursery_name=None):
        """Forward a contact form submission to the office inbox."""
        recipient = current_app.config.get('CONTACT_EMAIL_RECIPIENT')
        nursery_label = nursery_name or 'General enquiry'
        subject = f"New contact form submission - {nursery_label}"

        text_body = f"""New contact form submission

Name: {submission.name}
Email: {submission.email}
Phone: {submission.phone or 'Not provided'}
Nursery: {nursery_label}

Message:
{submission.message}
"""

        safe = {key: escape(value or '') for key, value in (
            ('name', submission.name), ('email', submission.email),
            ('phone', submission.phone or 'Not provided'), ('message', submission.message),
        )}
        html_body = f"""
        <html>
        <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
            <h2 style="color: #2c3e50;">New contact form submission</h2>
            <table style="border-collapse: collapse;">
                <tr><td style="padding: 4px 12px 4px 0;"><strong>Name:</strong></td><td>{safe['name']}</td></tr>
                <tr><td style="padding: 4px 12px 4px 0;"><strong>Email:</strong></td><td>{safe['email']}</td></tr>
                <tr><td style="padding: 4px 12px 4px 0;"><strong>Phone:</strong></td><td>{safe['phone']}</td></tr>
                <tr><td style="padding: 4px 12px 4px 0;"><strong>Nursery:</strong></td><td>{escape(nursery_label)}</td></tr>
            </table>
            <h3>Message</h3>
            <p style="white-space: pre-wrap;">{safe['message']}</p>
        </body>
        </html>
        """

        return EmailService.send_email(
            subject=subject,
            recipients=[recipient] if recipient else [],
            text_body=text_body,
            html_body=html_body,
            reply_to=submission.email,
        )

    @staticmethod
    def verify_config():
        """Open an SMTP connection with the current settings; returns (ok, message)."""
        if not EmailService.is_configured():
            return False, 'MAIL_USERNAME and MAIL_PASSWORD must be set'
        try:
            with mail.connect():
                pass
            return True, f"Connected to {current_app.config.get('MAIL_SERVER')}:{current_app.config.get('MAIL_PORT')}"
        except Exception as e:
            current_app.logger.error(f"Email configuration check failed: {str(e)}")
            return False, f'Could not connect to the mail server: {str(e)}'
