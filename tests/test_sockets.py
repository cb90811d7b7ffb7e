# End-to-end through Flask-SocketIO's test client


def named(received, name):
    return [packet['args'][0] for packet in received if packet['name'] == name]


def join(socket_client, name):
    client = socket_client()
    client.emit('join', {'displayName': name})
    return client


def test_join_snapshot(socket_client):
    alice = join(socket_client, 'alice')

    received = alice.get_received()
    snapshot, = named(received, 'joined')
    assert snapshot['identity']['displayName'] == 'alice'
    assert snapshot['roomId'] == 'general'
    assert {'general', 'random', 'tech', 'gaming'} <= {room['id'] for room in snapshot['rooms']}
    assert named(received, 'userList')[0]['onlineUsers'][0]['displayName'] == 'alice'


def test_name_taken(socket_client):
    join(socket_client, 'alice')
    impostor = join(socket_client, 'alice')

    error, = named(impostor.get_received(), 'error')
    assert error['kind'] == 'NameTaken'


def test_room_history_and_read_receipt(socket_client):
    alice = join(socket_client, 'alice')
    alice.emit('createRoom', {'name': 'team'})
    team = named(alice.get_received(), 'roomCreated')[0]['room']['id']
    alice.emit('sendMessage', {'roomId': team, 'body': {'kind': 'text', 'payload': 'hello'}})
    alice_id = named(alice.get_received(), 'newMessage')[0]['message']['authorId']

    bob = join(socket_client, 'bob')
    bob.get_received()
    bob.emit('joinRoom', {'roomId': team})
    history, = named(bob.get_received(), 'messages')
    hello, = history['messages']
    assert hello['body']['payload'] == 'hello'
    assert hello['readBy'] == [alice_id]

    alice.get_received()
    bob.emit('markRead', {'roomId': team, 'messageId': hello['id']})

    read, = named(alice.get_received(), 'messageRead')
    assert read['messageId'] == hello['id']
    assert read['identityId'] != alice_id


def test_private_message(socket_client):
    alice = join(socket_client, 'alice')
    bob = join(socket_client, 'bob')
    carol = join(socket_client, 'carol')
    for client in (alice, bob, carol):
        client.get_received()

    alice.emit('sendPrivateMessage', {'recipientDisplayName': 'bob', 'body': 'hi'})

    to_alice, = named(alice.get_received(), 'newMessage')
    bob_received = bob.get_received()
    to_bob, = named(bob_received, 'newMessage')
    assert to_alice['message']['id'] == to_bob['message']['id']
    assert to_bob['message']['roomId'] == 'private-alice-bob'
    assert named(bob_received, 'notification')[0]['kind'] == 'privateMessage'
    assert named(carol.get_received(), 'newMessage') == []

    carol.emit('sendPrivateMessage', {'recipientDisplayName': 'dave', 'body': 'hi'})
    error, = named(carol.get_received(), 'error')
    assert error['kind'] == 'UserNotFound'


def test_room_messages_skip_non_members(socket_client):
    alice = join(socket_client, 'alice')
    bob = join(socket_client, 'bob')
    bob.emit('leaveRoom', {'roomId': 'general'})
    bob.get_received()

    alice.emit('sendMessage', {'roomId': 'general', 'body': 'psst'})

    received = bob.get_received()
    assert named(received, 'newMessage') == []
    assert named(received, 'notification')[0]['preview'] == 'psst'


def test_disconnect_announces_departure(socket_client):
    alice = join(socket_client, 'alice')
    bob = join(socket_client, 'bob')
    alice.get_received()

    bob.disconnect()

    received = alice.get_received()
    left, = named(received, 'userLeft')
    assert left['identity']['displayName'] == 'bob'
    assert [u['displayName'] for u in named(received, 'userList')[0]['onlineUsers']] == ['alice']


def test_errors_go_to_the_caller(socket_client):
    alice = join(socket_client, 'alice')
    alice.get_received()

    alice.emit('joinRoom', {'roomId': 'nowhere'})

    error, = named(alice.get_received(), 'error')
    assert error == {'kind': 'RoomNotFound', 'detail': "room 'nowhere' does not exist", 'event': 'joinRoom'}
