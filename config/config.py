from __future__ import annotations

"""Configuration settings for the VIKSIT KANPUR grievance portal.

This module loads configuration from environment variables and provides
default values for development.
"""

import os
from pathlib import Path

# Project root
PROJECT_ROOT = Path(__file__).resolve().parents[1]

# Backend Configuration
# Leave API_BASE_URL empty to run against the in-process demo backend.
API_BASE_URL = os.getenv('VIKSIT_API_BASE_URL', '').rstrip('/')
API_TIMEOUT_SECONDS = float(os.getenv('VIKSIT_API_TIMEOUT_SECONDS', '10'))
USE_DEMO_BACKEND = not API_BASE_URL

# Local storage (auth token persistence)
LOCAL_STORAGE_PATH = os.getenv('VIKSIT_LOCAL_STORAGE_PATH', str(PROJECT_ROOT / 'data' / 'local_storage.db'))
AUTH_TOKEN_KEY = 'auth_token'

# Environment
ENVIRONMENT = os.getenv('ENVIRONMENT', 'development')
DEBUG = os.getenv('DEBUG', 'True').lower() == 'true'
LOG_LEVEL = os.getenv('LOG_LEVEL', 'DEBUG' if DEBUG else 'INFO')

# Application Settings
APP_NAME = 'VIKSIT KANPUR'
DEFAULT_LANGUAGE = os.getenv('VIKSIT_LANGUAGE', 'hindi')
LANGUAGES = ['hindi', 'english']

# Session Configuration
SESSION_TIMEOUT_MINUTES = int(os.getenv('VIKSIT_SESSION_TIMEOUT_MINUTES', '30'))

# Geotag simulation (Kanpur city centre)
CITY_CENTER = (26.4499, 80.3319)
GEOTAG_JITTER_DEGREES = 0.05
DEVICE_INFO = 'VIKSIT KANPUR Mobile App'

# Toast delays (seconds)
AI_DETECTION_TOAST_DELAY = 1.5
WORKER_NOTIFIED_TOAST_DELAY = 1.0

# User Roles
ROLES = ['citizen', 'field-worker', 'department-head', 'district-magistrate']
STAFF_ROLES = ['field-worker', 'department-head', 'district-magistrate']

__all__ = [
    'PROJECT_ROOT',
    'API_BASE_URL',
    'API_TIMEOUT_SECONDS',
    'USE_DEMO_BACKEND',
    'LOCAL_STORAGE_PATH',
    'AUTH_TOKEN_KEY',
    'ENVIRONMENT',
    'DEBUG',
    'LOG_LEVEL',
    'APP_NAME',
    'DEFAULT_LANGUAGE',
    'LANGUAGES',
    'SESSION_TIMEOUT_MINUTES',
    'CITY_CENTER',
    'GEOTAG_JITTER_DEGREES',
    'DEVICE_INFO',
    'AI_DETECTION_TOAST_DELAY',
    'WORKER_NOTIFIED_TOAST_DELAY',
    'ROLES',
    'STAFF_ROLES',
]
