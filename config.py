"""Configuration module for Flask application."""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _env_flag(name, default):
    return os.getenv(name, default).lower() in ('1', 'true', 'yes')


class Config:
    """Base configuration class."""

    # Flask
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = os.getenv('FLASK_DEBUG', '1') == '1'
    ENV = os.getenv('FLASK_ENV', 'development')
    TESTING = False

    # Session (the shopping cart lives in the signed session cookie)
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = os.getenv('SESSION_COOKIE_SAMESITE', 'Lax')
    PERMANENT_SESSION_LIFETIME = 86400  # 24 hours

    # Database
    DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///smartsales.db')
    SQLALCHEMY_DATABASE_URI = DATABASE_URL
    SQLALCHEMY_ECHO = _env_flag('SQLALCHEMY_ECHO', 'false')
    AUTO_CREATE_SCHEMA = _env_flag('AUTO_CREATE_SCHEMA', 'true')

    # Stores: 'database' (SQLAlchemy) or 'memory' (process-local, for demos/tests)
    STORE_BACKEND = os.getenv('STORE_BACKEND', 'database').lower()

    # Checkout: decrement stock inside the sale transaction instead of after commit
    ATOMIC_STOCK_DECREMENT = _env_flag('ATOMIC_STOCK_DECREMENT', 'true')

    # Reports
    LOW_STOCK_THRESHOLD = int(os.getenv('LOW_STOCK_THRESHOLD', '10'))
    RECENT_SALES_LIMIT = int(os.getenv('RECENT_SALES_LIMIT', '10'))

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
    LOG_FILE = os.getenv('LOG_FILE') or None


class TestConfig(Config):
    """Configuration used by the test suite."""

    TESTING = True
    DEBUG = False
    SECRET_KEY = 'test-secret-key'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ECHO = False
    AUTO_CREATE_SCHEMA = True
    STORE_BACKEND = 'database'
    ATOMIC_STOCK_DECREMENT = True
    LOG_LEVEL = 'DEBUG'
    LOG_FILE = None
