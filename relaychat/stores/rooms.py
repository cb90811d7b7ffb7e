# Room Directory: room metadata and deterministic private-room ids

import uuid

from relaychat.errors import InvalidName, ValidationError
from relaychat.models import Room, PUBLIC, PRIVATE

PRIVATE_PREFIX = 'private'


def _escape(name):
    # Escape "~" and "-" so the "-" separator stays unambiguous
    return name.replace('~', '~~').replace('-', '~-')


def private_room_id(name_a, name_b):
    # Sorted so that (a, b) and (b, a) resolve to the same room
    first, second = sorted((name_a, name_b))
    return f'{PRIVATE_PREFIX}-{_escape(first)}-{_escape(second)}'


class RoomDirectory:

    def __init__(self):
        self._rooms = {}

    def __contains__(self, room_id):
        return room_id in self._rooms

    def get(self, room_id):
        return self._rooms.get(room_id)

    def list(self):
        return list(self._rooms.values())

    def list_public(self):
        return [room for room in self._rooms.values() if not room.is_private]

    def list_visible(self, display_name):
        # Public rooms plus the private rooms this name takes part in
        return [room for room in self._rooms.values() if room.has_participant(display_name)]

    def ensure_public_room(self, room_id, name=None):
        room = self._rooms.get(room_id)
        if room is None:
            room = Room(id=room_id, name=name or room_id, visibility=PUBLIC)
            self._rooms[room_id] = room
        return room

    def create_room(self, name, visibility, creator):
        if not isinstance(name, str) or not name.strip():
            raise InvalidName('room name must not be empty')
        visibility = visibility or PUBLIC
        if visibility == PRIVATE:
            raise ValidationError('private rooms are created by sending a private message')
        if visibility != PUBLIC:
            raise ValidationError(f'unknown visibility {visibility!r}')
        room_id = uuid.uuid4().hex
        while room_id in self._rooms:
            room_id = uuid.uuid4().hex
        room = Room(
            id=room_id,
            name=name.strip(),
            visibility=PUBLIC,
            created_by=creator.id if creator is not None else None,
        )
        self._rooms[room_id] = room
        return room

    def ensure_private_room(self, identity_a, identity_b):
        room_id = private_room_id(identity_a.display_name, identity_b.display_name)
        room = self._rooms.get(room_id)
        if room is None:
            room = Room(
                id=room_id,
                name=' & '.join(sorted((identity_a.display_name, identity_b.display_name))),
                visibility=PRIVATE,
                created_by=identity_a.id,
                participants=frozenset((identity_a.display_name, identity_b.display_name)),
            )
            self._rooms[room_id] = room
        elif room.participants != {identity_a.display_name, identity_b.display_name}:
            raise ValidationError(f'private room {room_id!r} belongs to another pair')
        return room
