# Configuration file for RelayChat application

import json
import os

# Try to load configuration from `config.json` located next to this file.
# If the file is missing or a key is absent, fall back to the defaults below.
_BASE_DIR = os.path.dirname(os.path.abspath(__file__))
_JSON_PATH = os.path.join(_BASE_DIR, 'config.json')

# Defaults
_defaults = {
    'SECRET_KEY': 'relaychat_dev_key',
    'HOST': '0.0.0.0',
    'PORT': 5000,
    'LOG_LEVEL': 'INFO',
    'CORS_ALLOWED_ORIGINS': '*',
    'SOCKETIO_ASYNC_MODE': 'eventlet',
    'DEFAULT_ROOM': 'general',
    'DEFAULT_ROOMS': ['general', 'random', 'tech', 'gaming'],
    'HISTORY_LIMIT': 500,
    'JOIN_HISTORY': 50,
    'PAGE_SIZE': 50,
    'MAX_PAGE_SIZE': 100,
    'SEARCH_LIMIT': 50,
    'PREVIEW_LENGTH': 50,
    'MAX_NAME_LENGTH': 30,
    'ALLOWED_EXTENSIONS': [
        'png', 'jpg', 'jpeg', 'gif', 'webp',
        'mp3', 'ogg', 'flac', 'wav',
        'mp4', 'webm', 'mov',
        'txt', 'md', 'json', 'csv', 'pdf', 'zip', 'doc', 'docx'
    ],
    'IMAGE_EXTENSIONS': ['png', 'jpg', 'jpeg', 'gif', 'webp'],
}

_cfg = {}
try:
    with open(_JSON_PATH, 'r', encoding='utf-8') as f:
        _cfg = json.load(f) or {}
except FileNotFoundError:
    # No config.json present, use defaults
    _cfg = {}
except ValueError:
    # Unparseable config.json, fall back to defaults
    _cfg = {}


# Helper to get value from JSON or defaults
def _get(key):
    return _cfg.get(key, _defaults.get(key))


# Security
SECRET_KEY = _get('SECRET_KEY')

# Server
HOST = _get('HOST')
PORT = int(_get('PORT'))
LOG_LEVEL = str(_get('LOG_LEVEL')).upper()
CORS_ALLOWED_ORIGINS = _get('CORS_ALLOWED_ORIGINS')
SOCKETIO_ASYNC_MODE = _get('SOCKETIO_ASYNC_MODE')

# Rooms
DEFAULT_ROOM = _get('DEFAULT_ROOM')
DEFAULT_ROOMS = list(_get('DEFAULT_ROOMS') or [])

# History and fan-out limits
HISTORY_LIMIT = int(_get('HISTORY_LIMIT'))
JOIN_HISTORY = int(_get('JOIN_HISTORY'))
PAGE_SIZE = int(_get('PAGE_SIZE'))
MAX_PAGE_SIZE = int(_get('MAX_PAGE_SIZE'))
SEARCH_LIMIT = int(_get('SEARCH_LIMIT'))
PREVIEW_LENGTH = int(_get('PREVIEW_LENGTH'))
MAX_NAME_LENGTH = int(_get('MAX_NAME_LENGTH'))

# Attachment references (store as sets in runtime for quick membership checks)
ALLOWED_EXTENSIONS = set(_get('ALLOWED_EXTENSIONS') or [])
IMAGE_EXTENSIONS = set(_get('IMAGE_EXTENSIONS') or [])


def as_dict():
    # Flask config mapping built from the values above
    return {
        'SECRET_KEY': SECRET_KEY,
        'HOST': HOST,
        'PORT': PORT,
        'LOG_LEVEL': LOG_LEVEL,
        'CORS_ALLOWED_ORIGINS': CORS_ALLOWED_ORIGINS,
        'SOCKETIO_ASYNC_MODE': SOCKETIO_ASYNC_MODE,
        'DEFAULT_ROOM': DEFAULT_ROOM,
        'DEFAULT_ROOMS': list(DEFAULT_ROOMS),
        'HISTORY_LIMIT': HISTORY_LIMIT,
        'JOIN_HISTORY': JOIN_HISTORY,
        'PAGE_SIZE': PAGE_SIZE,
        'MAX_PAGE_SIZE': MAX_PAGE_SIZE,
        'SEARCH_LIMIT': SEARCH_LIMIT,
        'PREVIEW_LENGTH': PREVIEW_LENGTH,
        'MAX_NAME_LENGTH': MAX_NAME_LENGTH,
        'ALLOWED_EXTENSIONS': set(ALLOWED_EXTENSIONS),
        'IMAGE_EXTENSIONS': set(IMAGE_EXTENSIONS),
    }
