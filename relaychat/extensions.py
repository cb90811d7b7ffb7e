# Flask extensions initialization
# Helps avoid circular imports by initializing extensions without app context

from flask_socketio import SocketIO

from relaychat.broadcast import ChatCoordinator

socketio = SocketIO()
chat = ChatCoordinator()
