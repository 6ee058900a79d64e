import os
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name, default):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """
    Base configuration for Postbox.
    Every setting can be overridden via environment variables (or a .env file).
    """
    # Flask settings
    SECRET_KEY = os.getenv('FLASK_SECRET_KEY', 'dev-secret-key-change-in-production')

    # Get DB_DIR from environment, or use a default if not set
    DB_DIR = os.getenv('DB_DIR', os.path.join(os.getcwd(), 'databases'))

    # SQLite database file
    DATABASE_URL = os.getenv('DATABASE_URL', os.path.join(DB_DIR, 'postbox.db'))

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
    DB_LOGGING = _env_flag('DB_LOGGING', True)
    LOG_RETENTION_DAYS = int(os.getenv('LOG_RETENTION_DAYS', '30'))

    # Table names
    NEWSLETTERS_TABLE = "newsletters"
    SUBSCRIBERS_TABLE = "subscribers"
    NEWSLETTER_SUBSCRIBERS_TABLE = "newsletter_subscribers"
    LOGS_TABLE = "app_logs"

    BRAND_NAME = os.getenv('BRAND_NAME', 'Postbox')

    # Server
    HOST = os.getenv('HOST', '0.0.0.0')
    port = int(os.getenv('PORT', '3000'))

    @staticmethod
    def database_uri(path):
        """Build a SQLAlchemy URI from a database file path"""
        if path.startswith('sqlite:'):
            return path
        if path == ':memory:':
            return 'sqlite://'
        return 'sqlite:///' + os.path.abspath(path)

    @classmethod
    def as_app_config(cls):
        """Settings in the shape Flask's app.config expects"""
        return {
            'SECRET_KEY': cls.SECRET_KEY,
            'DB_DIR': cls.DB_DIR,
            'DATABASE_URL': cls.DATABASE_URL,
            'LOG_LEVEL': cls.LOG_LEVEL,
            'DB_LOGGING': cls.DB_LOGGING,
            'LOG_RETENTION_DAYS': cls.LOG_RETENTION_DAYS,
            'BRAND_NAME': cls.BRAND_NAME,
            'HOST': cls.HOST,
            'PORT': cls.port,
            'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        }
