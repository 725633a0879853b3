#!/usr/bin/env python3
"""
Nursery CMS Deployment Script
Creates the database tables and the default nurseries and admin accounts.
"""

import os
import sys


def print_step(step_name):
    """Print a formatted step header"""
    print("\n" + "=" * 60)
    print(f"STEP: {step_name}")
    print("=" * 60)


def print_success(message):
    print(f"✅ {message}")


def print_error(message):
    print(f"❌ {message}")


def print_info(message):
    print(f"ℹ️  {message}")


def check_python_version():
    """Check if Python version is compatible"""
    print_step("Checking Python Version")

    version = sys.version_info
    if version < (3, 9):
        print_error(f"Python 3.9+ required. Current version: {version.major}.{version.minor}")
        return False

    print_success(f"Python version {version.major}.{version.minor}.{version.micro} is compatible")
    return True


def check_database_connection():
    """Open a connection with the configured SQLALCHEMY_DATABASE_URI"""
    print_step("Checking Database Connection")

    try:
        from sqlalchemy import text
        from nursery_cms import create_app, db

        app = create_app()
        with app.app_context():
            db.session.execute(text('SELECT 1'))
            print_success(f"Connected to {db.engine.url.render_as_string(hide_password=True)}")
        return True
    except Exception as e:
        print_error(f"Database connection failed: {e}")
        print_info("Check DATABASE_URL or the MYSQL_* variables in your .env file")
        return False


def setup_database():
    """Create tables and seed default records"""
    print_step("Setting Up Database")

    try:
        from config import Config
        from nursery_cms import create_app
        from nursery_cms.storage import get_storage
        from nursery_cms.storage.seed import seed_defaults

        # create_app() creates any missing tables through the storage backend
        app = create_app()
        with app.app_context():
            print_success("Database tables created")
            created = seed_defaults(get_storage(), Config.DEFAULT_ADMIN_PASSWORD)
            if created:
                print_success(f"Created {created} default nurseries and accounts")
            else:
                print_info("Default nurseries and accounts already exist")
        return True
    except Exception as e:
        print_error(f"Database setup failed: {e}")
        return False


def print_deployment_summary():
    print_step("Deployment Complete")
    print("🔑 Default accounts:")
    print("  Super Admin: superadmin")
    print("  Nursery Admins: hayesadmin, uxbridgeadmin, hounslowadmin")
    print("  Password: the DEFAULT_ADMIN_PASSWORD setting; change it after first login")
    print("\n🚀 Start the API with: python app.py")


def main():
    """Main deployment function"""
    print("🚀 Nursery CMS Deployment")
    print("=" * 60)

    # Seeding is done explicitly below, not on every app start
    os.environ['SEED_DEMO_DATA'] = 'false'
    os.environ.setdefault('STORAGE_BACKEND', 'database')

    steps = [
        ("Python Version Check", check_python_version),
        ("Database Connection", check_database_connection),
        ("Database Setup", setup_database),
    ]

    for step_name, step_function in steps:
        if not step_function():
            print_error(f"Step '{step_name}' failed!")
            return False

    print_deployment_summary()
    return True


if __name__ == "__main__":
    try:
        sys.exit(0 if main() else 1)
    except KeyboardInterrupt:
        print_error("\nDeployment interrupted by user")
        sys.exit(1)
