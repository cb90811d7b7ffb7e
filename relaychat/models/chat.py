# Chat-related models: rooms

from dataclasses import dataclass, field
from datetime import datetime

from relaychat.models.user import iso, utcnow

PUBLIC = 'public'
PRIVATE = 'private'
VISIBILITIES = (PUBLIC, PRIVATE)


@dataclass
class Room:
    # Broadcast scope, public (discoverable) or private (exactly two participants)
    id: str
    name: str
    visibility: str = PUBLIC
    created_by: str = None
    participants: frozenset = frozenset()
    created_at: datetime = field(default_factory=utcnow)

    @property
    def is_private(self):
        return self.visibility == PRIVATE

    def has_participant(self, display_name):
        return not self.is_private or display_name in self.participants

    def to_dict(self):
        data = {
            'id': self.id,
            'name': self.name,
            'visibility': self.visibility,
            'createdBy': self.created_by,
            'createdAt': iso(self.created_at),
        }
        if self.is_private:
            data['participants'] = sorted(self.participants)
        return data
