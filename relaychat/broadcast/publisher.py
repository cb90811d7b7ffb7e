# Flask-SocketIO transport publisher

from relaychat.broadcast.audience import CONNECTION, ROOM, GLOBAL, room_channel


class SocketIOPublisher:
    # Delivers outbound events and maps room subscriptions onto Socket.IO rooms

    def __init__(self, socketio, namespace='/'):
        self.socketio = socketio
        self.namespace = namespace

    def publish(self, outbound):
        audience = outbound.audience
        if audience.kind == CONNECTION:
            self.socketio.emit(outbound.event, outbound.data, to=audience.target,
                               namespace=self.namespace)
        elif audience.kind == ROOM:
            self.socketio.emit(outbound.event, outbound.data, to=room_channel(audience.target),
                               skip_sid=audience.skip, namespace=self.namespace)
        elif audience.kind == GLOBAL:
            self.socketio.emit(outbound.event, outbound.data, namespace=self.namespace)
        else:
            raise ValueError(f'unknown audience {audience.kind!r}')

    def subscribe(self, connection, room_id):
        self.socketio.server.enter_room(connection, room_channel(room_id), namespace=self.namespace)

    def unsubscribe(self, connection, room_id):
        self.socketio.server.leave_room(connection, room_channel(room_id), namespace=self.namespace)
