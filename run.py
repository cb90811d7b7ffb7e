# Entry point for the RelayChat application

import config

if config.SOCKETIO_ASYNC_MODE == 'eventlet':
    # Must run before anything imports socket or threading
    import eventlet
    eventlet.monkey_patch()

import logging  # noqa: E402

from relaychat import create_app  # noqa: E402
from relaychat.extensions import socketio  # noqa: E402

app = create_app()

if __name__ == '__main__':
    logger = logging.getLogger('relaychat.run')
    logger.info("[SERVER STARTUP] Starting RelayChat...")
    logger.info("[SERVER CONFIG] Socket.IO running on %s:%d", config.HOST, config.PORT)
    socketio.run(app, host=config.HOST, port=config.PORT, allow_unsafe_werkzeug=True, debug=False)
