# Broadcast Coordinator
# Validates inbound events against the stores, applies the mutation, then
# publishes the resulting outbound events. One event is handled at a time.

import logging
import threading

from relaychat.broadcast.audience import Audience, Outbound, CONNECTION, ROOM, GLOBAL
from relaychat.errors import (
    ChatError, MessageNotFound, NotJoined, RoomNotFound, UserNotFound, ValidationError
)
from relaychat.functions import parse_body, preview
from relaychat.functions.payloads import (
    optional_int, optional_str, require_bool, require_mapping, require_message_id, require_str
)
from relaychat.models import Message
from relaychat.stores import (
    IdentityRegistry, MessageLedger, RoomDirectory, TypingAggregator, private_room_id, reactions
)

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS = {
    'default_room': 'general',
    'default_rooms': ('general',),
    'history_limit': 500,
    'join_history': 50,
    'page_size': 50,
    'max_page_size': 100,
    'search_limit': 50,
    'preview_length': 50,
    'max_name_length': 30,
    'allowed_extensions': frozenset(),
    'image_extensions': frozenset(),
}

# Flask config key for each setting
CONFIG_KEYS = {name: name.upper() for name in DEFAULT_SETTINGS}


class ChatCoordinator:
    """Session state machine and fan-out for every connection.

    The transport calls :meth:`connect`, :meth:`dispatch` and
    :meth:`disconnect`; results leave through ``publisher``, which must
    provide ``publish(outbound)``, ``subscribe(connection, room_id)`` and
    ``unsubscribe(connection, room_id)``.
    """

    def __init__(self, publisher=None, **settings):
        self._lock = threading.Lock()
        self._handlers = {
            'join': self._on_join,
            'joinRoom': self._on_join_room,
            'leaveRoom': self._on_leave_room,
            'createRoom': self._on_create_room,
            'sendMessage': self._on_send_message,
            'sendPrivateMessage': self._on_send_private_message,
            'typing': self._on_typing,
            'addReaction': self._on_add_reaction,
            'removeReaction': self._on_remove_reaction,
            'markRead': self._on_mark_read,
            'loadMessages': self._on_load_messages,
            'searchMessages': self._on_search_messages,
            'getReactions': self._on_get_reactions,
        }
        self.configure(publisher, **settings)

    def init_app(self, app, publisher):
        settings = {
            name: app.config[key] for name, key in CONFIG_KEYS.items() if key in app.config
        }
        self.configure(publisher, **settings)
        app.extensions['relaychat'] = self

    def configure(self, publisher=None, **settings):
        # (Re)build every store from scratch
        unknown = set(settings) - set(DEFAULT_SETTINGS)
        if unknown:
            raise TypeError(f'unknown settings: {", ".join(sorted(unknown))}')
        merged = dict(DEFAULT_SETTINGS, **settings)
        with self._lock:
            self.publisher = publisher
            self.settings = merged
            self.identities = IdentityRegistry(max_name_length=merged['max_name_length'])
            self.rooms = RoomDirectory()
            self.ledger = MessageLedger(
                history_limit=merged['history_limit'],
                search_limit=merged['search_limit'],
            )
            self.typing = TypingAggregator()
            self._connections = {}
            self._subscriptions = {}
            self._subscribers = {}
            for room_id in [merged['default_room'], *merged['default_rooms']]:
                self._ensure_public_room(room_id)

    @property
    def default_room(self):
        return self.settings['default_room']

    # --- transport entry points ---

    def connect(self, connection):
        with self._lock:
            self._connections[connection] = None
            self._subscriptions.setdefault(connection, set())
        logger.info("[SOCKET CONNECT] %s connected", connection)

    def dispatch(self, connection, event, data=None):
        with self._lock:
            outbox = []
            handler = self._handlers.get(event)
            try:
                if handler is None:
                    raise ValidationError(f'unknown event {event!r}')
                handler(connection, require_mapping(data), outbox)
            except ChatError as exc:
                logger.warning("[SOCKET %s] rejected for %s: %s %s", event, connection, exc.kind, exc.detail)
                # Anything collected before the failure is dropped
                outbox = [self._error(connection, event, exc)]
            self._flush(outbox)
            return outbox

    def disconnect(self, connection):
        with self._lock:
            outbox = []
            known = connection in self._connections
            self._connections.pop(connection, None)
            for room_id in sorted(self._subscriptions.get(connection, ())):
                self._unsubscribe(connection, room_id)
            self._subscriptions.pop(connection, None)

            identity = self.identities.leave(connection)
            if identity is not None:
                for room_id, members in self.typing.clear(identity.id):
                    outbox.append(self._typing_event(room_id, members))
                online = self._online_users()
                outbox.append(Outbound('userLeft', {
                    'identity': identity.to_dict(),
                    'onlineUsers': online,
                }, Audience.everyone()))
                outbox.append(Outbound('userList', {'onlineUsers': online}, Audience.everyone()))
                logger.info("[SOCKET DISCONNECT] %s (%s) left the chat", identity.display_name, connection)
            elif known:
                logger.info("[SOCKET DISCONNECT] %s disconnected before joining", connection)
            self._flush(outbox)
            return outbox

    def recipients(self, audience):
        # Connections an audience resolves to right now
        if audience.kind == CONNECTION:
            return [audience.target] if audience.target in self._connections else []
        if audience.kind == ROOM:
            return [c for c in self._subscribers.get(audience.target, ()) if c != audience.skip]
        if audience.kind == GLOBAL:
            return list(self._connections)
        raise ValueError(f'unknown audience {audience.kind!r}')

    # --- read-only views for the HTTP API ---

    def public_rooms(self):
        with self._lock:
            return [room.to_dict() for room in self.rooms.list_public()]

    def online_users(self):
        with self._lock:
            return self._online_users()

    def public_history(self, room_id):
        with self._lock:
            room = self.rooms.get(room_id)
            if room is None or room.is_private:
                raise RoomNotFound(f'room {room_id!r} does not exist')
            return [m.to_dict() for m in self.ledger.recent(room_id, self.settings['join_history'])]

    def subscriptions(self, connection):
        with self._lock:
            return set(self._subscriptions.get(connection, ()))

    # --- helpers ---

    def _flush(self, outbox):
        if self.publisher is None:
            return
        for outbound in outbox:
            logger.debug("[BROADCAST] %s -> %s %s", outbound.event, outbound.audience.kind,
                         outbound.audience.target or '')
            self.publisher.publish(outbound)

    def _error(self, connection, event, exc):
        data = exc.to_dict()
        data['event'] = event
        return Outbound('error', data, Audience.connection(connection))

    def _online_users(self):
        return [identity.to_dict() for identity in self.identities.snapshot()]

    def _ensure_public_room(self, room_id, name=None):
        room = self.rooms.ensure_public_room(room_id, name)
        self.ledger.register(room.id)
        return room

    def _subscribe(self, connection, room_id):
        rooms = self._subscriptions.setdefault(connection, set())
        if room_id in rooms:
            return False
        rooms.add(room_id)
        self._subscribers.setdefault(room_id, {})[connection] = None
        if self.publisher is not None:
            self.publisher.subscribe(connection, room_id)
        return True

    def _unsubscribe(self, connection, room_id):
        rooms = self._subscriptions.get(connection)
        if not rooms or room_id not in rooms:
            return False
        rooms.discard(room_id)
        subscribers = self._subscribers.get(room_id, {})
        subscribers.pop(connection, None)
        if not subscribers:
            self._subscribers.pop(room_id, None)
        if self.publisher is not None:
            self.publisher.unsubscribe(connection, room_id)
        return True

    def _is_subscribed(self, connection, room_id):
        return room_id in self._subscriptions.get(connection, ())

    def _require_identity(self, connection):
        identity = self.identities.lookup_by_connection(connection)
        if identity is None:
            raise NotJoined('join the chat first')
        return identity

    def _require_room(self, identity, room_id):
        room = self.rooms.get(room_id)
        # Private rooms are invisible to anyone but their two participants
        if room is None or not room.has_participant(identity.display_name):
            raise RoomNotFound(f'room {room_id!r} does not exist')
        return room

    def _require_message(self, identity, data):
        room = self._require_room(identity, require_str(data, 'roomId'))
        message_id = require_message_id(data)
        message = self.ledger.find(room.id, message_id)
        if message is None:
            raise MessageNotFound(f'message {message_id} not found in {room.id!r}')
        return room, message

    def _parse_body(self, data):
        return parse_body(
            data.get('body'),
            self.settings['allowed_extensions'],
            self.settings['image_extensions'],
        )

    def _typing_event(self, room_id, members):
        names = []
        for identity_id in sorted(members):
            identity = self.identities.lookup_by_id(identity_id)
            if identity is not None:
                names.append(identity.display_name)
        return Outbound('typing', {
            'roomId': room_id,
            'identityIds': sorted(members),
            'displayNames': names,
        }, Audience.room(room_id))

    def _stop_typing(self, identity, room_id, outbox):
        if identity.id in self.typing.members(room_id):
            members = self.typing.set_typing(room_id, identity.id, False)
            outbox.append(self._typing_event(room_id, members))

    def _history(self, room_id, connection, messages, has_more):
        return Outbound('messages', {
            'roomId': room_id,
            'messages': [m.to_dict() for m in messages],
            'hasMore': has_more,
        }, Audience.connection(connection))

    def _enter_room(self, connection, identity, room, outbox):
        if not self._is_subscribed(connection, room.id):
            outbox.append(Outbound('userJoined', {
                'identity': identity.to_dict(),
                'roomId': room.id,
            }, Audience.room(room.id, skip=connection)))
            self._subscribe(connection, room.id)
            logger.info("[SOCKET JOIN] %s joined room %s", identity.display_name, room.id)
        messages, has_more = self.ledger.page(room.id, None, self.settings['join_history'])
        outbox.append(self._history(room.id, connection, messages, has_more))

    def _store_message(self, connection, identity, room, body, outbox):
        message = self.ledger.append(room.id, Message(
            room_id=room.id,
            author_id=identity.id,
            author_display_name=identity.display_name,
            body=body,
        ))
        outbox.append(Outbound('messageSent', {
            'messageId': message.id,
            'roomId': room.id,
            'status': 'sent',
        }, Audience.connection(connection)))
        logger.debug("[MESSAGE] %s -> %s (%s)", identity.display_name, room.id, message.id)
        return message

    # --- inbound event handlers ---

    def _on_join(self, connection, data, outbox):
        if self.identities.lookup_by_connection(connection) is not None:
            raise ValidationError('this connection has already joined')
        identity = self.identities.join(connection, data.get('displayName'))
        self._connections.setdefault(connection, None)
        room_id = self.default_room
        self._subscribe(connection, room_id)

        online = self._online_users()
        outbox.append(Outbound('joined', {
            'identity': identity.to_dict(),
            'rooms': [room.to_dict() for room in self.rooms.list_visible(identity.display_name)],
            'onlineUsers': online,
            'roomId': room_id,
            'messages': [m.to_dict() for m in self.ledger.recent(room_id, self.settings['join_history'])],
        }, Audience.connection(connection)))
        outbox.append(Outbound('userJoined', {
            'identity': identity.to_dict(),
            'roomId': room_id,
            'onlineUsers': online,
        }, Audience.room(room_id, skip=connection)))
        outbox.append(Outbound('userList', {'onlineUsers': online}, Audience.everyone()))
        logger.info("[SOCKET JOIN] %s joined as %s", connection, identity.display_name)

    def _on_join_room(self, connection, data, outbox):
        identity = self._require_identity(connection)
        room = self._require_room(identity, require_str(data, 'roomId'))
        self._enter_room(connection, identity, room, outbox)

    def _on_leave_room(self, connection, data, outbox):
        identity = self._require_identity(connection)
        room = self._require_room(identity, require_str(data, 'roomId'))
        # Typing may be set without a subscription, so clear it either way
        self._stop_typing(identity, room.id, outbox)
        if not self._unsubscribe(connection, room.id):
            return
        outbox.append(Outbound('userLeft', {
            'identity': identity.to_dict(),
            'roomId': room.id,
        }, Audience.room(room.id)))
        logger.info("[SOCKET LEAVE] %s left room %s", identity.display_name, room.id)

    def _on_create_room(self, connection, data, outbox):
        identity = self._require_identity(connection)
        room = self.rooms.create_room(data.get('name'), optional_str(data, 'visibility'), identity)
        self.ledger.register(room.id)
        outbox.append(Outbound('roomCreated', {'room': room.to_dict()}, Audience.everyone()))
        logger.info("[ROOM] %s created room %s (%s)", identity.display_name, room.name, room.id)
        self._enter_room(connection, identity, room, outbox)

    def _on_send_message(self, connection, data, outbox):
        identity = self._require_identity(connection)
        room = self._require_room(identity, require_str(data, 'roomId'))
        body = self._parse_body(data)

        message = self._store_message(connection, identity, room, body, outbox)
        outbox.append(Outbound('newMessage', {'message': message.to_dict()}, Audience.room(room.id)))
        self._stop_typing(identity, room.id, outbox)

        # Non-subscribers only learn that something happened
        snippet = preview(body, self.settings['preview_length'])
        for other in self.identities.snapshot():
            if other.connection == connection or self._is_subscribed(other.connection, room.id):
                continue
            if not room.has_participant(other.display_name):
                continue
            outbox.append(Outbound('notification', {
                'kind': 'newMessage',
                'roomId': room.id,
                'messageId': message.id,
                'sender': identity.display_name,
                'preview': snippet,
            }, Audience.connection(other.connection)))

    def _on_send_private_message(self, connection, data, outbox):
        identity = self._require_identity(connection)
        recipient_name = require_str(data, 'recipientDisplayName')
        body = self._parse_body(data)
        recipient = self.identities.lookup_by_display_name(recipient_name)
        if recipient is None:
            raise UserNotFound(f'{recipient_name!r} is not online')
        if recipient.id == identity.id:
            raise ValidationError('cannot send a private message to yourself')

        is_new = private_room_id(identity.display_name, recipient.display_name) not in self.rooms
        room = self.rooms.ensure_private_room(identity, recipient)
        self.ledger.register(room.id)
        if is_new:
            for target in (connection, recipient.connection):
                outbox.append(Outbound('roomCreated', {'room': room.to_dict()}, Audience.connection(target)))

        message = self._store_message(connection, identity, room, body, outbox)
        self._subscribe(connection, room.id)
        self._subscribe(recipient.connection, room.id)
        payload = {'message': message.to_dict()}
        outbox.append(Outbound('newMessage', payload, Audience.connection(connection)))
        outbox.append(Outbound('newMessage', payload, Audience.connection(recipient.connection)))
        self._stop_typing(identity, room.id, outbox)
        outbox.append(Outbound('notification', {
            'kind': 'privateMessage',
            'roomId': room.id,
            'messageId': message.id,
            'sender': identity.display_name,
            'preview': preview(body, self.settings['preview_length']),
        }, Audience.connection(recipient.connection)))

    def _on_typing(self, connection, data, outbox):
        identity = self._require_identity(connection)
        room = self._require_room(identity, require_str(data, 'roomId'))
        is_typing = require_bool(data, 'isTyping')
        before = self.typing.members(room.id)
        after = self.typing.set_typing(room.id, identity.id, is_typing)
        if before != after:
            outbox.append(self._typing_event(room.id, after))

    def _on_add_reaction(self, connection, data, outbox):
        identity = self._require_identity(connection)
        room, message = self._require_message(identity, data)
        symbol = require_str(data, 'symbol')
        if reactions.add_reaction(message, symbol, identity.id):
            outbox.append(Outbound('reactionAdded', {
                'roomId': room.id,
                'messageId': message.id,
                'symbol': symbol,
                'identityId': identity.id,
            }, Audience.room(room.id)))

    def _on_remove_reaction(self, connection, data, outbox):
        identity = self._require_identity(connection)
        room, message = self._require_message(identity, data)
        symbol = require_str(data, 'symbol')
        if reactions.remove_reaction(message, symbol, identity.id):
            outbox.append(Outbound('reactionRemoved', {
                'roomId': room.id,
                'messageId': message.id,
                'symbol': symbol,
                'identityId': identity.id,
            }, Audience.room(room.id)))

    def _on_mark_read(self, connection, data, outbox):
        identity = self._require_identity(connection)
        room, message = self._require_message(identity, data)
        if reactions.mark_read(message, identity.id):
            outbox.append(Outbound('messageRead', {
                'roomId': room.id,
                'messageId': message.id,
                'identityId': identity.id,
            }, Audience.room(room.id)))

    def _on_load_messages(self, connection, data, outbox):
        identity = self._require_identity(connection)
        room = self._require_room(identity, require_str(data, 'roomId'))
        before_id = optional_int(data, 'beforeMessageId')
        limit = optional_int(data, 'limit')
        if limit is None:
            limit = self.settings['page_size']
        if limit < 1:
            raise ValidationError("'limit' must be positive")
        limit = min(limit, self.settings['max_page_size'])
        messages, has_more = self.ledger.page(room.id, before_id, limit)
        outbox.append(self._history(room.id, connection, messages, has_more))

    def _on_search_messages(self, connection, data, outbox):
        identity = self._require_identity(connection)
        room = self._require_room(identity, require_str(data, 'roomId'))
        query = optional_str(data, 'query')
        if query is None:
            raise ValidationError("'query' is required")
        outbox.append(Outbound('searchResults', {
            'roomId': room.id,
            'query': query,
            'messages': [m.to_dict() for m in self.ledger.search(room.id, query)],
        }, Audience.connection(connection)))

    def _on_get_reactions(self, connection, data, outbox):
        identity = self._require_identity(connection)
        room, message = self._require_message(identity, data)
        outbox.append(Outbound('messageReactions', {
            'roomId': room.id,
            'messageId': message.id,
            'reactions': reactions.reactions_snapshot(message),
        }, Audience.connection(connection)))
