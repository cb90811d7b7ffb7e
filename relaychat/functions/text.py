# Text helpers: body normalization and notification previews

from relaychat.errors import ValidationError
from relaychat.models import MessageBody, TEXT


def normalize_text(content):
    # Strip whitespace but preserve internal line breaks
    if not isinstance(content, str):
        raise ValidationError('text payload must be a string')
    lines = content.strip().split('\n')
    # Remove empty lines at start and end
    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop()
    content = '\n'.join(line.rstrip() for line in lines)
    if not content:
        raise ValidationError('message must not be empty')
    return content


def text_body(content):
    return MessageBody(kind=TEXT, payload=normalize_text(content))


def preview(body, length=50):
    # First line of text, or the attachment's filename
    if body.is_text:
        snippet = body.payload.strip().split('\n')[0]
    else:
        snippet = body.filename or body.kind
    if len(snippet) > length:
        snippet = snippet[:length]
    return snippet
