#!/usr/bin/env python3
"""
Email Configuration Checker for the Nursery CMS

Verifies the settings used to forward contact form submissions and tries to
open an SMTP connection with them.
"""

import os

from dotenv import load_dotenv


def check_email_config():
    """Check if email configuration is properly set up"""
    print("📧 Nursery CMS Email Configuration Checker")
    print("=" * 50)

    load_dotenv()

    required_vars = ['MAIL_SERVER', 'MAIL_PORT', 'MAIL_USERNAME', 'MAIL_PASSWORD', 'CONTACT_EMAIL_RECIPIENT']
    missing_vars = []

    for var in required_vars:
        value = os.environ.get(var)
        if not value:
            missing_vars.append(var)
        elif var == 'MAIL_PASSWORD':
            print(f"✅ {var}: {'*' * len(value)}")
        else:
            print(f"✅ {var}: {value}")

    if missing_vars:
        print(f"\n❌ Missing required environment variables: {', '.join(missing_vars)}")
        return False

    # Connecting does not need the database; use the in-memory store
    os.environ['STORAGE_BACKEND'] = 'memory'
    os.environ['SEED_DEMO_DATA'] = 'false'

    from nursery_cms import create_app
    from nursery_cms.services.email_service import EmailService

    app = create_app()
    with app.app_context():
        ok, message = EmailService.verify_config()

    if not ok:
        print(f"\n❌ {message}")
        return False

    print(f"\n✅ {message}")
    print("\n📝 Next steps:")
    print("1. Submit the contact form (POST /api/contact)")
    print(f"2. Check the {os.environ['CONTACT_EMAIL_RECIPIENT']} inbox (and Spam folder) for the email")
    return True


if __name__ == "__main__":
    check_email_config()
