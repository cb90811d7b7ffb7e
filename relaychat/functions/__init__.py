# Functions package

from relaychat.functions.files import (
    allowed_file, is_image_file, normalize_attachment
)
from relaychat.functions.text import normalize_text, text_body, preview
from relaychat.functions.payloads import parse_body

__all__ = [
    'allowed_file', 'is_image_file', 'normalize_attachment',
    'normalize_text', 'text_body', 'preview',
    'parse_body'
]
