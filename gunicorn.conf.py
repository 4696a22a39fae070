"""
Gunicorn configuration for Crime Scene application.
Threaded workers; rooms live in a per-process store, so keep a single worker
unless a shared RoomStore is configured.
"""

import sys
import logging
import yaml
from src.card_catalog import CardCatalog, CatalogValidationError


def on_starting(server):
    """
    Server hook that runs when the master process is starting.
    We use this to validate the card catalog before workers are forked.
    If validation fails, we exit, preventing the server from starting.
    """
    logger = logging.getLogger(__name__)
    logger.info("Validating card catalog before starting workers...")
    try:
        catalog = CardCatalog(app_config.cards_file)
        catalog.load_cards_from_yaml()
        logger.info(
            f"Successfully validated {len(catalog.get_methods())} methods, "
            f"{len(catalog.get_evidences())} evidences and {catalog.get_clue_count()} clues."
        )
    except (FileNotFoundError, yaml.YAMLError, CatalogValidationError) as e:
        logger.critical(f"FATAL: Card catalog validation failed. Server shutting down. Error: {e}")
        sys.exit(1)


from config_factory import load_config

# Load configuration (renamed to avoid conflicts with gunicorn's internal 'config')
app_config = load_config()

# Server socket
bind = f"{app_config.host}:{app_config.port}"
backlog = 2048

# Worker processes
workers = app_config.workers
worker_class = "gthread"
threads = app_config.threads
timeout = app_config.timeout
keepalive = app_config.keepalive

# Never recycle workers; a restarted worker would drop its in-memory rooms
max_requests = 0

# Logging
accesslog = "-"
errorlog = "-"
loglevel = app_config.log_level
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s"'

# Process naming
proc_name = "crimescene"

# Server mechanics
preload_app = False
daemon = False
pidfile = None
user = None
group = None
tmp_upload_dir = None

# SSL (for production)
keyfile = None
certfile = None
