# Chat error taxonomy
# Every error is recoverable and reported to the originating connection only.


class ChatError(Exception):
    # Base class, `kind` is the value sent in the outbound `error` event
    kind = 'ChatError'

    def __init__(self, detail=''):
        super().__init__(detail)
        self.detail = detail

    def to_dict(self):
        return {'kind': self.kind, 'detail': self.detail}


class NameTaken(ChatError):
    kind = 'NameTaken'


class NotJoined(ChatError):
    kind = 'NotJoined'


class RoomNotFound(ChatError):
    kind = 'RoomNotFound'


class UserNotFound(ChatError):
    kind = 'UserNotFound'


class InvalidName(ChatError):
    kind = 'InvalidName'


class MessageNotFound(ChatError):
    kind = 'MessageNotFound'


class ValidationError(ChatError):
    # Malformed payload, missing required field or unknown event
    kind = 'ValidationError'
