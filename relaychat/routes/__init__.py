# Routes package

from relaychat.routes.main import main_bp
from relaychat.routes.api import api_bp

__all__ = ['main_bp', 'api_bp']
