# Identity model: a connected user's server-side representation

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone


def utcnow():
    return datetime.now(timezone.utc)


def iso(ts):
    # Same wire format for every timestamp we emit
    return ts.strftime('%Y-%m-%dT%H:%M:%SZ') if ts else None


@dataclass
class Identity:
    # One identity per live connection, destroyed on disconnect
    display_name: str
    connection: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    joined_at: datetime = field(default_factory=utcnow)
    status: str = 'online'

    def to_dict(self):
        return {
            'id': self.id,
            'displayName': self.display_name,
            'joinedAt': iso(self.joined_at),
            'status': self.status,
        }
