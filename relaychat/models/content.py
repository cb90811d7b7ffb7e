# Content-related models: messages and their bodies

import itertools
from dataclasses import dataclass, field
from datetime import datetime

from relaychat.models.user import iso, utcnow

TEXT = 'text'
IMAGE = 'image'
FILE = 'file'
BODY_KINDS = (TEXT, IMAGE, FILE)

# Process-wide, so ids order by creation time across all rooms
_message_ids = itertools.count(1)


def next_message_id():
    return next(_message_ids)


@dataclass(frozen=True)
class MessageBody:
    # For image/file bodies `payload` is the attachment URL
    kind: str
    payload: str
    filename: str = None
    mime_type: str = None

    @property
    def is_text(self):
        return self.kind == TEXT

    def to_dict(self):
        data = {'kind': self.kind, 'payload': self.payload}
        if self.filename is not None:
            data['filename'] = self.filename
        if self.mime_type is not None:
            data['mimeType'] = self.mime_type
        return data


@dataclass
class Message:
    # Chat message, immutable except for read_by and reactions
    room_id: str
    author_id: str
    author_display_name: str
    body: MessageBody
    id: int = field(default_factory=next_message_id)
    created_at: datetime = field(default_factory=utcnow)
    read_by: set = field(default_factory=set)
    reactions: dict = field(default_factory=dict)

    def __post_init__(self):
        # Author has always read their own message
        self.read_by.add(self.author_id)

    def to_dict(self):
        return {
            'id': self.id,
            'roomId': self.room_id,
            'authorId': self.author_id,
            'authorDisplayName': self.author_display_name,
            'body': self.body.to_dict(),
            'createdAt': iso(self.created_at),
            'readBy': sorted(self.read_by),
            'reactions': {symbol: sorted(ids) for symbol, ids in self.reactions.items()},
        }
