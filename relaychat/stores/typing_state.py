# Typing Aggregator: per-room set of identities currently typing
# No server-side expiry; the originator signals False, disconnect calls clear().


class TypingAggregator:

    def __init__(self):
        self._typing = {}

    def members(self, room_id):
        return frozenset(self._typing.get(room_id, ()))

    def set_typing(self, room_id, identity_id, is_typing):
        typing = self._typing.setdefault(room_id, set())
        if is_typing:
            typing.add(identity_id)
        else:
            typing.discard(identity_id)
        if not typing:
            del self._typing[room_id]
        return frozenset(typing)

    def clear(self, identity_id):
        # Returns [(room_id, remaining)] for every room whose set changed
        changed = []
        for room_id in [r for r, ids in self._typing.items() if identity_id in ids]:
            changed.append((room_id, self.set_typing(room_id, identity_id, False)))
        return changed
