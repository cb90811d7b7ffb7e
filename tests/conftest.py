# Shared fixtures

import pytest

from relaychat import create_app
from relaychat.broadcast import ChatCoordinator
from relaychat.extensions import socketio


class RecordingPublisher:
    # In-memory publisher: records what each connection would receive

    def __init__(self):
        self.coordinator = None
        self.sent = []
        self.subscriptions = []

    def publish(self, outbound):
        for connection in self.coordinator.recipients(outbound.audience):
            self.sent.append((connection, outbound.event, outbound.data))

    def subscribe(self, connection, room_id):
        self.subscriptions.append(('subscribe', connection, room_id))

    def unsubscribe(self, connection, room_id):
        self.subscriptions.append(('unsubscribe', connection, room_id))

    def received(self, connection, event=None):
        return [
            data for target, name, data in self.sent
            if target == connection and (event is None or name == event)
        ]

    def events(self, connection):
        return [name for target, name, _ in self.sent if target == connection]

    def clear(self):
        self.sent.clear()


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
def make_coordinator(publisher):
    def factory(**settings):
        settings.setdefault('default_rooms', ('general', 'random'))
        settings.setdefault('allowed_extensions', frozenset({'png', 'jpg', 'pdf', 'txt'}))
        settings.setdefault('image_extensions', frozenset({'png', 'jpg'}))
        coordinator = ChatCoordinator(publisher, **settings)
        publisher.coordinator = coordinator
        return coordinator
    return factory


@pytest.fixture
def coordinator(make_coordinator):
    return make_coordinator()


@pytest.fixture
def joined(coordinator, publisher):
    # Connect and join a named identity, returning its connection id.
    # Uses the coordinator the test built last.
    def join(name):
        coordinator = publisher.coordinator
        connection = f'sid-{name}'
        coordinator.connect(connection)
        coordinator.dispatch(connection, 'join', {'displayName': name})
        return connection
    return join


@pytest.fixture
def app():
    return create_app({
        'TESTING': True,
        'SOCKETIO_ASYNC_MODE': 'threading',
        'LOG_LEVEL': 'WARNING',
        'HISTORY_LIMIT': 100,
    })


@pytest.fixture
def socket_client(app):
    clients = []

    def connect():
        client = socketio.test_client(app)
        clients.append(client)
        return client

    yield connect
    for client in clients:
        if client.is_connected():
            client.disconnect()
