# Models package
# Import all models here for convenience

from relaychat.models.user import Identity
from relaychat.models.chat import Room, PUBLIC, PRIVATE
from relaychat.models.content import Message, MessageBody, TEXT, IMAGE, FILE

__all__ = [
    'Identity',
    'Room', 'PUBLIC', 'PRIVATE',
    'Message', 'MessageBody', 'TEXT', 'IMAGE', 'FILE'
]
