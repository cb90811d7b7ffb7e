def test_index(app):
    response = app.test_client().get('/')
    assert response.status_code == 200
    assert b'running' in response.data


def test_rooms(app):
    rooms = app.test_client().get('/api/rooms').get_json()
    assert [room['id'] for room in rooms] == ['general', 'random', 'tech', 'gaming']


def test_users_and_messages(app, socket_client):
    alice = socket_client()
    alice.emit('join', {'displayName': 'alice'})
    alice.emit('sendMessage', {'roomId': 'general', 'body': 'hello'})
    client = app.test_client()

    users = client.get('/api/users').get_json()
    messages = client.get('/api/messages/general').get_json()

    assert [user['displayName'] for user in users] == ['alice']
    assert [m['body']['payload'] for m in messages] == ['hello']


def test_private_room_history_is_not_exposed(app, socket_client):
    alice, bob = socket_client(), socket_client()
    alice.emit('join', {'displayName': 'alice'})
    bob.emit('join', {'displayName': 'bob'})
    alice.emit('sendPrivateMessage', {'recipientDisplayName': 'bob', 'body': 'secret'})
    client = app.test_client()

    response = client.get('/api/messages/private-alice-bob')

    assert response.status_code == 404
    assert response.get_json()['error']['kind'] == 'RoomNotFound'
    assert 'private-alice-bob' not in [room['id'] for room in client.get('/api/rooms').get_json()]


def test_unknown_room(app):
    assert app.test_client().get('/api/messages/nope').status_code == 404
