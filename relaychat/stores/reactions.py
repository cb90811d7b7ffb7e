# Reaction & Receipt Ledger: idempotent per-message mutations
# Each function returns True only when the message state actually changed.


def add_reaction(message, symbol, identity_id):
    reactors = message.reactions.get(symbol)
    if reactors is not None and identity_id in reactors:
        return False
    message.reactions.setdefault(symbol, set()).add(identity_id)
    return True


def remove_reaction(message, symbol, identity_id):
    reactors = message.reactions.get(symbol)
    if reactors is None or identity_id not in reactors:
        return False
    reactors.discard(identity_id)
    if not reactors:
        # Never leave an empty reactor set behind
        del message.reactions[symbol]
    return True


def mark_read(message, identity_id):
    # read_by only ever grows
    if identity_id in message.read_by:
        return False
    message.read_by.add(identity_id)
    return True


def reactions_snapshot(message):
    return {symbol: sorted(ids) for symbol, ids in message.reactions.items()}
