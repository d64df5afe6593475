import logging
from flask import Flask
from flask_socketio import SocketIO

from .config import settings
# Import components
from .utils.logging_config import setup_logging
from .game.managers.session_manager import SessionManager
from .game.services.tracker_service import TrackerService
from .web.routes import main_bp
from .web.sockets import TrackerNamespace

# Setup logging
setup_logging()
log = logging.getLogger(__name__)

# Initialize Flask app
app = Flask(__name__)
app.config['SECRET_KEY'] = settings.FLASK_SECRET_KEY
app.config['DEBUG'] = settings.FLASK_DEBUG

# Initialize Flask-SocketIO
socketio = SocketIO(app, cors_allowed_origins="*", async_mode=None) # Start with default sync mode

# --- Dependency Injection Setup ---
session_manager = SessionManager(default_locale=settings.DEFAULT_LOCALE)
tracker_service = TrackerService(session_manager=session_manager)

# --- Register Blueprints and SocketIO Namespaces ---
app.register_blueprint(main_bp)
log.info("Registered main blueprint.")

socketio.on_namespace(TrackerNamespace('/tracker', tracker_service))
log.info("Registered TrackerNamespace.")

# --- Application Runner ---

def run_app():
    """Runs the Flask-SocketIO development server."""
    log.info(f"Starting Flask-SocketIO server on {settings.HOST}:{settings.PORT} (Debug: {settings.FLASK_DEBUG})...")
    # Development server only, put a real WSGI server in front for production
    socketio.run(app, host=settings.HOST, port=settings.PORT, debug=settings.FLASK_DEBUG,
                 allow_unsafe_werkzeug=True)

if __name__ == '__main__':
    run_app()
