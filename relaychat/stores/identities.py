# Identity Registry: live connection -> identity, display-name uniqueness

import logging

from relaychat.errors import InvalidName, NameTaken
from relaychat.models import Identity

logger = logging.getLogger(__name__)


class IdentityRegistry:

    def __init__(self, max_name_length=30):
        self.max_name_length = max_name_length
        # Insertion ordered, so snapshot() returns join order
        self._by_connection = {}
        self._by_name = {}
        self._by_id = {}

    def __len__(self):
        return len(self._by_connection)

    def validate_name(self, display_name):
        # Names are matched exactly (case-sensitive) after trimming
        if not isinstance(display_name, str) or not display_name.strip():
            raise InvalidName('display name must not be empty')
        name = display_name.strip()
        if len(name) > self.max_name_length:
            raise InvalidName(f'display name must be at most {self.max_name_length} characters')
        return name

    def join(self, connection, display_name):
        name = self.validate_name(display_name)
        if name in self._by_name:
            raise NameTaken(f'{name!r} is already in use')
        identity = Identity(display_name=name, connection=connection)
        self._by_connection[connection] = identity
        self._by_name[name] = identity
        self._by_id[identity.id] = identity
        logger.debug("[REGISTRY] %s joined as %s", connection, name)
        return identity

    def leave(self, connection):
        # Idempotent: a second leave for the same connection returns None
        identity = self._by_connection.pop(connection, None)
        if identity is not None:
            self._by_name.pop(identity.display_name, None)
            self._by_id.pop(identity.id, None)
        return identity

    def lookup_by_connection(self, connection):
        return self._by_connection.get(connection)

    def lookup_by_display_name(self, name):
        return self._by_name.get(name)

    def lookup_by_id(self, identity_id):
        return self._by_id.get(identity_id)

    def connection_for(self, identity_id):
        identity = self._by_id.get(identity_id)
        return identity.connection if identity is not None else None

    def snapshot(self):
        return list(self._by_connection.values())
