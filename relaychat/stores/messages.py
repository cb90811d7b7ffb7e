# Message Ledger: per-room bounded history, pagination and search

from collections import deque

from relaychat.errors import RoomNotFound


class MessageLedger:

    def __init__(self, history_limit=500, search_limit=50):
        self.history_limit = history_limit
        self.search_limit = search_limit
        self._history = {}
        self._index = {}

    def register(self, room_id):
        # Rooms must be registered before anything can be appended to them
        if room_id not in self._history:
            self._history[room_id] = deque()
            self._index[room_id] = {}

    def _room(self, room_id):
        try:
            return self._history[room_id]
        except KeyError:
            raise RoomNotFound(f'room {room_id!r} does not exist') from None

    def __len__(self):
        return sum(len(history) for history in self._history.values())

    def count(self, room_id):
        return len(self._room(room_id))

    def append(self, room_id, message):
        history = self._room(room_id)
        index = self._index[room_id]
        history.append(message)
        index[message.id] = message
        # Pure FIFO: overflow always drops the oldest entry
        while len(history) > self.history_limit:
            evicted = history.popleft()
            index.pop(evicted.id, None)
        return message

    def find(self, room_id, message_id):
        return self._index.get(room_id, {}).get(message_id)

    def recent(self, room_id, count):
        history = self._room(room_id)
        if count <= 0:
            return []
        return list(history)[-count:]

    def page(self, room_id, before_id=None, limit=50):
        # Returns (messages, has_more); messages are oldest first
        history = list(self._room(room_id))
        if limit <= 0:
            return [], bool(history)
        if before_id is None:
            end = len(history)
        else:
            if before_id not in self._index[room_id]:
                # Anchor aged out of history (or never existed)
                return [], False
            end = next(i for i, message in enumerate(history) if message.id == before_id)
        start = max(0, end - limit)
        return history[start:end], start > 0

    def search(self, room_id, query):
        # Most recent matches, returned in insertion order
        history = self._room(room_id)
        if not query:
            return []
        needle = query.lower()
        matches = [
            message for message in history
            if message.body.is_text and needle in message.body.payload.lower()
        ]
        return matches[-self.search_limit:] if self.search_limit > 0 else []
