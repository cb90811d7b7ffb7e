# Audience selectors and outbound events

from dataclasses import dataclass

CONNECTION = 'connection'
ROOM = 'room'
GLOBAL = 'global'


def room_channel(room_id):
    # Prefixed so a room id can never collide with a connection's own channel
    return f'room:{room_id}'


@dataclass(frozen=True)
class Audience:
    kind: str
    target: str = None
    # Room audiences may leave out one connection (usually the caller)
    skip: str = None

    @classmethod
    def connection(cls, connection):
        return cls(CONNECTION, connection)

    @classmethod
    def room(cls, room_id, skip=None):
        return cls(ROOM, room_id, skip)

    @classmethod
    def everyone(cls):
        return cls(GLOBAL)


@dataclass(frozen=True)
class Outbound:
    event: str
    data: dict
    audience: Audience
