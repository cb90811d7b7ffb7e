# Socket.IO handlers package

from relaychat.sockets import events  # noqa
