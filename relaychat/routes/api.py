# Read-only JSON API over the live chat state

from flask import Blueprint, jsonify

from relaychat.errors import RoomNotFound
from relaychat.extensions import chat

api_bp = Blueprint('api', __name__, url_prefix='/api')


@api_bp.route('/rooms')
def list_rooms():
    # Public rooms only, private rooms never leave the socket layer
    return jsonify(chat.public_rooms())


@api_bp.route('/users')
def list_users():
    return jsonify(chat.online_users())


@api_bp.route('/messages/<room_id>')
def room_messages(room_id):
    try:
        return jsonify(chat.public_history(room_id))
    except RoomNotFound as exc:
        return jsonify({'error': exc.to_dict()}), 404
