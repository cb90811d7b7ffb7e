# Socket.IO event handlers
# Every inbound event is forwarded to the coordinator's single dispatch entry.

from flask import request

from relaychat.extensions import chat, socketio

INBOUND_EVENTS = (
    'join',
    'joinRoom',
    'leaveRoom',
    'createRoom',
    'sendMessage',
    'sendPrivateMessage',
    'typing',
    'addReaction',
    'removeReaction',
    'markRead',
    'loadMessages',
    'searchMessages',
    'getReactions',
)


@socketio.on('connect')
def on_connect(auth=None):
    chat.connect(request.sid)


@socketio.on('disconnect')
def on_disconnect(reason=None):
    chat.disconnect(request.sid)


def _forwarder(event):
    def handler(data=None):
        chat.dispatch(request.sid, event, data)
    handler.__name__ = f'on_{event}'
    return handler


for _event in INBOUND_EVENTS:
    socketio.on_event(_event, _forwarder(_event))
