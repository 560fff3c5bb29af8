"""
Round server - hosts a single recurring round over Socket.IO.
Builds the Flask app, the round services and the Socket.IO/REST surface.
"""

from flask import Flask
from flask_socketio import SocketIO
import os
import logging
import atexit

from container import configure_container
from config_factory import load_config, ConfigurationFactory
from src.handlers.socket_handlers import register_socket_handlers
from src.routes.api import create_api_blueprint

app = Flask(__name__)
app_config = load_config()
app.config.update(ConfigurationFactory().get_flask_config())

logging.basicConfig(level=getattr(logging, app_config.log_level.upper(), logging.INFO))
logger = logging.getLogger(__name__)

# Production only accepts the comma-separated origins in SOCKETIO_CORS_ALLOWED_ORIGINS
if app_config.is_production:
    allowed_origins = [origin.strip()
                       for origin in os.environ.get('SOCKETIO_CORS_ALLOWED_ORIGINS', '').split(',')
                       if origin.strip()]
    socketio = SocketIO(app, cors_allowed_origins=allowed_origins, async_mode='eventlet')
else:
    socketio = SocketIO(app, cors_allowed_origins="*", async_mode='eventlet')

container = configure_container(socketio=socketio)
round_manager = container.get('RoundManager')
# Built eagerly so round events are broadcast before the first socket event arrives
container.get('BroadcastService')

app.register_blueprint(create_api_blueprint({'round_manager': round_manager}))
register_socket_handlers(socketio)


def cleanup_on_exit():
    logger.info("Shutting down round server...")
    round_manager.shutdown()


atexit.register(cleanup_on_exit)

if __name__ == '__main__':
    logger.info(f"Starting round server on {app_config.host}:{app_config.port}")
    try:
        socketio.run(app, host=app_config.host, port=app_config.port, debug=app_config.debug)
    except KeyboardInterrupt:
        logger.info("Received interrupt signal")
    finally:
        cleanup_on_exit()
