"""
Crime Scene - A social-deduction party game where investigators race a forensic
expert's clues to name the murderer, the method and the evidence.
Main Flask application entry point focusing on app creation, dependency injection, and service wiring.
"""

from flask import Flask
import logging
import sys
import yaml

# Import core dependencies
from src.card_catalog import CatalogValidationError
from container import configure_container
from config_factory import load_config, ConfigurationFactory

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_app(config_dict=None, room_store=None) -> Flask:
    """
    Build the Flask application and wire its services.

    Args:
        config_dict: Configuration values; loaded from the environment when omitted
        room_store: Optional RoomStore shared with other processes

    Returns:
        Configured Flask app
    """
    config_factory = ConfigurationFactory()
    if config_dict is not None:
        config_factory.load_from_dict(config_dict)
    elif config_factory._config is None:
        config_factory.load_from_environment()

    flask_app = Flask(__name__)
    flask_app.config.update(config_factory.get_flask_config())

    # Configure service container with dependencies
    container = configure_container(config=config_factory.to_dict(), room_store=room_store)

    # The card catalog is critical for game play, fail fast on a bad file
    try:
        catalog = container.get('CardCatalog')
        logger.info(f"Loaded card catalog with {catalog.get_clue_count()} clue cards")
    except (FileNotFoundError, yaml.YAMLError, CatalogValidationError) as e:
        logger.critical(f"FATAL: Card catalog validation failed. Error: {e}")
        raise

    # Register REST endpoints
    from src.routes.api import create_api_blueprint
    api_services = {
        'game_manager': container.get('GameManager'),
        'validation_service': container.get('ValidationService'),
        'error_response_factory': container.get('ErrorResponseFactory'),
        'room_state_presenter': container.get('RoomStatePresenter'),
        'api_token': config_factory.get_config().api_token,
    }
    flask_app.register_blueprint(create_api_blueprint(api_services))

    return flask_app


# Load and apply configuration
app_config = load_config()

try:
    app = create_app()
except (FileNotFoundError, yaml.YAMLError, CatalogValidationError):
    logger.critical("Server shutting down.")
    sys.exit(1)


if __name__ == '__main__':
    logger.info(f"Starting Crime Scene server on {app_config.host}:{app_config.port}")
    try:
        app.run(host=app_config.host, port=app_config.port, debug=app_config.debug, threaded=True)
    except KeyboardInterrupt:
        logger.info("Received interrupt signal")
