# Flask application factory

import logging

from flask import Flask

import config as default_config
from relaychat.broadcast import SocketIOPublisher
from relaychat.extensions import chat, socketio

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'


def create_app(config=None):
    # Create and configure Flask application
    flask_app = Flask(__name__)

    # Load config: defaults first, then caller overrides (mapping or object)
    flask_app.config.from_mapping(default_config.as_dict())
    if isinstance(config, dict):
        flask_app.config.from_mapping(config)
    elif config is not None:
        flask_app.config.from_object(config)

    _configure_logging(flask_app)

    # Socket handlers must be registered before init_app builds the server
    import relaychat.sockets  # noqa

    # Initialize extensions
    socketio.init_app(
        flask_app,
        async_mode=flask_app.config['SOCKETIO_ASYNC_MODE'],
        cors_allowed_origins=flask_app.config['CORS_ALLOWED_ORIGINS'],
        ping_timeout=60,
        ping_interval=25,
        path='socket.io',
        engineio_logger=False,
        logger=False
    )
    chat.init_app(flask_app, SocketIOPublisher(socketio))

    # Register blueprints
    from relaychat.routes import main_bp, api_bp
    flask_app.register_blueprint(main_bp)
    flask_app.register_blueprint(api_bp)

    logging.getLogger(__name__).info(
        "[SERVER CONFIG] default room %r, rooms %s, history limit %d",
        flask_app.config['DEFAULT_ROOM'],
        ', '.join(flask_app.config['DEFAULT_ROOMS']),
        flask_app.config['HISTORY_LIMIT'],
    )
    return flask_app


def _configure_logging(flask_app):
    # One handler on the package logger, level from LOG_LEVEL
    level = logging.getLevelName(str(flask_app.config['LOG_LEVEL']).upper())
    if not isinstance(level, int):
        level = logging.INFO
    package_logger = logging.getLogger('relaychat')
    package_logger.setLevel(level)
    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        package_logger.addHandler(handler)
