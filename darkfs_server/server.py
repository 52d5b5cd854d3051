import logging
from typing import Optional
from flask import Flask

from .config import ServerConfig
from .service import QueryService

logger = logging.getLogger(__name__)


def create_app(config: ServerConfig, service: Optional[QueryService] = None) -> Flask:
	"""Create and configure the Flask application for one served root."""
	app = Flask(__name__)

	# Configure app
	app.config["MAX_CONTENT_LENGTH"] = config.max_body_size
	app.config["DARKFS_CONFIG"] = config
	app.config["DARKFS_SERVICE"] = service if service is not None else QueryService(config)

	# Register blueprints
	from .routes.api import api_bp

	app.register_blueprint(api_bp)

	logger.info(f"darkfs listener initialized (root: {config.root})")

	return app


def run_server(config: ServerConfig):
	"""Run the listener until interrupted."""
	app = create_app(config)

	logger.info(f"Waiting for remote commands over darkened store ({config.root}) on http://{config.host}:{config.port}")

	app.run(
		host=config.host,
		port=config.port,
		debug=config.debug,
		threaded=True
	)
