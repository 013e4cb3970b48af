import os
from datetime import timedelta


class Config:
    # --- 1. BASIC CONFIG ---
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'parkwise-secret'
    BASE_DIR = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(BASE_DIR, 'instance', 'parkwise.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # --- 2. STORAGE ---
    # "sql" keeps everything in SQLALCHEMY_DATABASE_URI, "memory" is lost on restart
    STORE_BACKEND = os.environ.get('STORE_BACKEND', 'sql')
    SEED_DEMO_DATA = os.environ.get('SEED_DEMO_DATA', '0') == '1'

    # --- 3. SESSION COOKIE (JWT) ---
    JWT_SECRET_KEY = os.environ.get('JWT_SECRET_KEY') or 'parkwise-jwt-secret'
    JWT_TOKEN_LOCATION = ['cookies']
    JWT_COOKIE_SECURE = os.environ.get('JWT_COOKIE_SECURE', '0') == '1'
    JWT_COOKIE_CSRF_PROTECT = False
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=24)

    # --- 4. CREDENTIALS ---
    # "bcrypt" or "plaintext"
    PASSWORD_SCHEME = os.environ.get('PASSWORD_SCHEME', 'bcrypt')

    # --- 5. EMAIL ---
    MAIL_NOTIFICATIONS = os.environ.get('MAIL_NOTIFICATIONS', '0') == '1'
    MAIL_SERVER = os.environ.get('MAIL_SERVER', 'smtp.gmail.com')
    MAIL_PORT = int(os.environ.get('MAIL_PORT', 587))
    MAIL_USE_TLS = True
    MAIL_USERNAME = os.environ.get('MAIL_USERNAME')
    MAIL_PASSWORD = os.environ.get('MAIL_PASSWORD')
    MAIL_DEFAULT_SENDER = ('ParkWise', os.environ.get('MAIL_USERNAME') or 'noreply@parkwise.local')

    # --- 6. LOGGING ---
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    STORE_BACKEND = 'sql'
    SEED_DEMO_DATA = False
    JWT_SECRET_KEY = 'test-jwt-secret-key-that-is-long-enough'
    BCRYPT_LOG_ROUNDS = 4
    MAIL_NOTIFICATIONS = False
    MAIL_SUPPRESS_SEND = True
    LOG_LEVEL = 'DEBUG'
