# policy_engine/config.py
"""Configuration for the password policy engine
Flask configuration classes plus the immutable policy value handed to the engine
"""
import os
from dataclasses import dataclass
from datetime import timedelta
from typing import Mapping, Optional


@dataclass(frozen=True)
class PolicyConfig:
    """Password policy, read-only after construction"""
    min_length: int = 8
    special_characters: Optional[str] = None  # None: any non-alphanumeric character
    retention_limit: int = 3
    validity_months: int = 12

    def __post_init__(self):
        if self.min_length < 1:
            raise ValueError('min_length must be positive')
        if self.retention_limit < 1:
            raise ValueError('retention_limit must be positive')
        if self.validity_months < 1:
            raise ValueError('validity_months must be positive')
        if self.special_characters is not None and not self.special_characters:
            raise ValueError('special_characters must be None or non-empty')


def policy_from_config(settings: Mapping) -> PolicyConfig:
    """Build a PolicyConfig from a Flask config (or any mapping of the same keys)"""
    defaults = PolicyConfig()
    return PolicyConfig(
        min_length=int(settings.get('PASSWORD_MIN_LENGTH', defaults.min_length)),
        special_characters=settings.get('PASSWORD_SPECIAL_CHARACTERS', defaults.special_characters),
        retention_limit=int(settings.get('PASSWORD_HISTORY_COUNT', defaults.retention_limit)),
        validity_months=int(settings.get('PASSWORD_VALIDITY_MONTHS', defaults.validity_months)),
    )


class Config:
    """Base configuration with secure defaults"""
    SECRET_KEY = os.environ.get('SECRET_KEY') or os.urandom(32).hex()

    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    PERMANENT_SESSION_LIFETIME = timedelta(minutes=30)

    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///password_policy.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = False

    # Password policy
    PASSWORD_MIN_LENGTH = 8
    PASSWORD_SPECIAL_CHARACTERS = None
    PASSWORD_HISTORY_COUNT = 3
    PASSWORD_VALIDITY_MONTHS = 12

    # Fingerprinting: 'pbkdf2' or 'bcrypt'
    PASSWORD_HASHER = os.environ.get('PASSWORD_HASHER', 'pbkdf2')
    PBKDF2_ITERATIONS = 600000
    BCRYPT_ROUNDS = 12

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    TESTING = False
    SESSION_COOKIE_SECURE = False  # Allow HTTP in dev
    LOG_LEVEL = 'DEBUG'


class ProductionConfig(Config):
    """Production configuration with enhanced security"""
    DEBUG = False
    TESTING = False

    # Resolved lazily so importing this module never requires production secrets
    @property
    def SECRET_KEY(self):
        return os.environ['SECRET_KEY']

    @property
    def SQLALCHEMY_DATABASE_URI(self):
        return os.environ['DATABASE_URL']


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    DEBUG = True
    SESSION_COOKIE_SECURE = False

    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'

    # Faster hashing for tests
    PBKDF2_ITERATIONS = 1000
    BCRYPT_ROUNDS = 4


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
