import os
from dotenv import load_dotenv

load_dotenv()


def _default_db_uri() -> str:
    # PyMySQL keeps the driver pure-python on every platform
    user = os.environ.get('MYSQL_USER', 'root')
    password = os.environ.get('MYSQL_PASSWORD', 'root')
    host = os.environ.get('MYSQL_HOST', '127.0.0.1')
    port = os.environ.get('MYSQL_PORT', '3306')
    db = os.environ.get('MYSQL_DB', 'nursery_cms')
    return f"mysql+pymysql://{user}:{password}@{host}:{port}/{db}"


def _env_flag(name: str, default: str = 'false') -> bool:
    return os.environ.get(name, default).lower() in ('1', 'true', 'yes', 'on')


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'change-me-nursery-cms'
    # Use DATABASE_URL if present; else build a sensible default using PyMySQL
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or _default_db_uri()
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # 'database' for the relational store, 'memory' for the map-backed development store
    STORAGE_BACKEND = os.environ.get('STORAGE_BACKEND', 'database')
    SEED_DEMO_DATA = _env_flag('SEED_DEMO_DATA')
    DEFAULT_ADMIN_PASSWORD = os.environ.get('DEFAULT_ADMIN_PASSWORD', 'Nursery2024!')

    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    SESSION_COOKIE_SECURE = _env_flag('SESSION_COOKIE_SECURE')

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Failed logins before an account is locked, and for how long
    MAX_LOGIN_ATTEMPTS = int(os.environ.get('MAX_LOGIN_ATTEMPTS', 5))
    LOGIN_LOCKOUT_MINUTES = int(os.environ.get('LOGIN_LOCKOUT_MINUTES', 15))

    # Mail settings used by the contact form notifications
    MAIL_SERVER = os.environ.get('MAIL_SERVER', 'smtp.gmail.com')
    MAIL_PORT = int(os.environ.get('MAIL_PORT', 587))
    MAIL_USE_TLS = os.environ.get('MAIL_USE_TLS', 'true').lower() == 'true'
    MAIL_USERNAME = os.environ.get('MAIL_USERNAME')
    MAIL_PASSWORD = os.environ.get('MAIL_PASSWORD')
    MAIL_DEFAULT_SENDER = os.environ.get('MAIL_DEFAULT_SENDER', 'CMC Nursery Website <noreply@cmcnursery.co.uk>')
    CONTACT_EMAIL_RECIPIENT = os.environ.get('CONTACT_EMAIL_RECIPIENT', 'IT@kingsborough.org.uk')


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret-key'
    STORAGE_BACKEND = 'memory'
    SEED_DEMO_DATA = False
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    MAIL_SUPPRESS_SEND = True
    MAIL_USERNAME = 'tests@cmcnursery.co.uk'
    MAIL_PASSWORD = 'not-a-real-password'


class DatabaseTestConfig(TestConfig):
    STORAGE_BACKEND = 'database'
