"""Configuration for the family tree service, read from the environment."""

import os

DATABASE_URL = os.environ.get('DATABASE_URL') or os.environ.get('NEON_DATABASE_URL')
"""SQLAlchemy URL of the store. When unset the database is unavailable."""

ECHO_SQL = os.environ.get('ECHO_SQL', '').lower() in ['1', 'true', 'yes']

JWT_SECRET = os.environ.get('JWT_SECRET')
"""Secret used to sign session tokens. No default on purpose."""

SESSION_DURATION_DAYS = int(os.environ.get('SESSION_DURATION_DAYS', '7'))

FIREBASE_PROJECT_ID = (os.environ.get('FIREBASE_PROJECT_ID')
                       or os.environ.get('NEXT_PUBLIC_FIREBASE_PROJECT_ID'))
"""Audience the Firebase ID tokens must be issued for."""

# More cors origins
CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '')

LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
