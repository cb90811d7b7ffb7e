# Main routes

from flask import Blueprint

main_bp = Blueprint('main', __name__)


@main_bp.route('/')
def index():
    # Liveness check
    return 'RelayChat server is running'
