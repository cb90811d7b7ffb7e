# Attachment reference handling
# Only the reference (URL, filename, MIME type) is inspected, never file bytes.

from werkzeug.utils import secure_filename

from relaychat.errors import ValidationError
from relaychat.models import MessageBody, IMAGE


def file_extension(filename):
    return filename.rsplit('.', 1)[1].lower() if filename and '.' in filename else ''


def allowed_file(filename, allowed_extensions):
    # Check if file extension is allowed
    return file_extension(filename) in allowed_extensions


def is_image_file(filename, image_extensions):
    # Check if file is an image
    return file_extension(filename) in image_extensions


def normalize_attachment(kind, data, allowed_extensions, image_extensions):
    # Build an image/file body from an upload reference
    url = data.get('payload')
    if not isinstance(url, str) or not url.strip():
        raise ValidationError(f'{kind} body requires a payload URL')
    url = url.strip()

    raw_name = data.get('filename')
    if raw_name is None:
        raw_name = url.rsplit('/', 1)[-1].split('?', 1)[0]
    if not isinstance(raw_name, str):
        raise ValidationError('filename must be a string')
    filename = secure_filename(raw_name)
    if not filename:
        raise ValidationError('attachment filename is empty')
    if not allowed_file(filename, allowed_extensions):
        raise ValidationError(f'attachment type {file_extension(filename) or "unknown"!r} is not allowed')
    if kind == IMAGE and not is_image_file(filename, image_extensions):
        raise ValidationError(f'{filename!r} is not an image')

    mime_type = data.get('mimeType')
    if mime_type is not None and not isinstance(mime_type, str):
        raise ValidationError('mimeType must be a string')

    return MessageBody(kind=kind, payload=url, filename=filename, mime_type=mime_type)
