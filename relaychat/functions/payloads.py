# Inbound payload validation
# Missing or malformed fields raise ValidationError, nothing is silently ignored.

from relaychat.errors import ValidationError
from relaychat.functions.files import normalize_attachment
from relaychat.functions.text import text_body
from relaychat.models import TEXT
from relaychat.models.content import BODY_KINDS


def require_mapping(data):
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError('event payload must be an object')
    return data


def require_str(data, key):
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise ValidationError(f'{key!r} is required')
    return value


def optional_str(data, key):
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise ValidationError(f'{key!r} must be a string')
    return value


def require_bool(data, key):
    value = data.get(key)
    if not isinstance(value, bool):
        raise ValidationError(f'{key!r} must be true or false')
    return value


def _to_int(value, key):
    # Normalize ids to ints when possible (clients may send strings)
    if isinstance(value, bool):
        raise ValidationError(f'{key!r} must be an integer')
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f'{key!r} must be an integer') from None


def require_message_id(data, key='messageId'):
    if data.get(key) is None:
        raise ValidationError(f'{key!r} is required')
    return _to_int(data[key], key)


def optional_int(data, key):
    if data.get(key) is None:
        return None
    return _to_int(data[key], key)


def parse_body(raw, allowed_extensions, image_extensions):
    # Bare strings are shorthand for a text body
    if isinstance(raw, str):
        return text_body(raw)
    if not isinstance(raw, dict):
        raise ValidationError("'body' is required")
    kind = raw.get('kind', TEXT)
    if kind not in BODY_KINDS:
        raise ValidationError(f'unknown body kind {kind!r}')
    if kind == TEXT:
        return text_body(raw.get('payload'))
    return normalize_attachment(kind, raw, allowed_extensions, image_extensions)
