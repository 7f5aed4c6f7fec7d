"""
Configuration classes for Flask application.

Usage:
    from config import config
    app.config.from_object(config[config_name])
"""
import os


class Config:
    """Base configuration with defaults."""

    # Security
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production')

    # Database
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Session keys (seconds until a key stops being trusted)
    SESSION_TRUST_LIMIT_WEB = int(os.environ.get('SESSION_TRUST_LIMIT_WEB', 30 * 60))
    SESSION_TRUST_LIMIT_MOBILE = int(os.environ.get('SESSION_TRUST_LIMIT_MOBILE', 30 * 24 * 60 * 60))

    # Signup can be turned off for private deployments
    ENABLE_USER_SIGNUP = os.environ.get('ENABLE_USER_SIGNUP', 'True').lower() == 'true'

    # Rate limiting (Flask-Limiter config keys)
    RATELIMIT_DEFAULT = "1000 per day; 200 per hour"
    # Use Redis for persistent rate limiting if REDIS_URL is set, otherwise memory
    RATELIMIT_STORAGE_URI = os.environ.get('REDIS_URL', 'memory://')


class DevelopmentConfig(Config):
    """Development configuration."""

    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        'DATABASE_URL',
        'sqlite:///finance.db'
    )


class ProductionConfig(Config):
    """Production configuration."""

    DEBUG = False

    # Note: 4 slashes = sqlite:// + absolute path /data/finance.db
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        'DATABASE_URL',
        'sqlite:////data/finance.db'
    )


class TestingConfig(Config):
    """Testing configuration."""

    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'

    # Disable rate limiting for tests
    RATELIMIT_ENABLED = False


# Configuration dictionary for easy access
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig,
}


def get_config_name():
    """Get configuration name from environment."""
    flask_env = os.environ.get('FLASK_ENV', 'development')
    if flask_env == 'production':
        return 'production'
    elif os.environ.get('TESTING'):
        return 'testing'
    return 'development'
