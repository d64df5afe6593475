import logging
from flask import Blueprint

from ..core.models import Locale

log = logging.getLogger(__name__)

# Create a Blueprint for main routes
main_bp = Blueprint('main', __name__)

@main_bp.route('/health')
def health_check():
    """Basic health check endpoint."""
    log.debug("Health check requested.")
    return {"status": "ok"}, 200

@main_bp.route('/locales')
def list_locales():
    """Lists the locale codes a log source may connect with."""
    return {"locales": [locale.value for locale in Locale]}, 200
