import os
from dotenv import load_dotenv

load_dotenv(os.path.join(os.path.dirname(__file__), '.env'))

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-prod'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///studysync.db'
    LOG_LEVEL = os.environ.get('LOG_LEVEL') or 'INFO'

    # Auth
    JWT_EXPIRATION_HOURS = 24
    JWT_COOKIE_NAME = 'token'
    JWT_LEGACY_COOKIE_NAME = 'auth-token'

    # Business Rules Defaults
    ROOM_MODE_CAPACITY_THRESHOLD = 10  # capacity below this is booked as a whole room
    MAX_SEATS_PER_BOOKING = 3
    MAX_ACTIVE_RESERVATIONS = 5
    AVAILABILITY_FAIL_OPEN = True

class DevelopmentConfig(Config):
    DEBUG = True
    LOG_LEVEL = os.environ.get('LOG_LEVEL') or 'DEBUG'

class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'

class ProductionConfig(Config):
    DEBUG = False
    # In prod, rely on env vars strictly
    SESSION_COOKIE_SECURE = True
