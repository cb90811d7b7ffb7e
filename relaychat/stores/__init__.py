# Stores package: in-memory state owned by the broadcast coordinator

from relaychat.stores.identities import IdentityRegistry
from relaychat.stores.rooms import RoomDirectory, private_room_id
from relaychat.stores.messages import MessageLedger
from relaychat.stores.typing_state import TypingAggregator
from relaychat.stores import reactions

__all__ = [
    'IdentityRegistry',
    'RoomDirectory', 'private_room_id',
    'MessageLedger',
    'TypingAggregator',
    'reactions'
]
