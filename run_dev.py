#!/usr/bin/env python3
"""
Development server for Crime Scene.

Runs gunicorn with auto-reload and a solo-friendly configuration, so a single
browser tab can walk a room from the lobby to game over.
"""

import os
import subprocess
import sys

DEV_ENVIRONMENT = {
    'FLASK_ENV': 'development',
    'PORT': '8000',
    # One seated player is enough to start a game
    'MIN_PLAYERS_REQUIRED': '1',
}


def main():
    for key, value in DEV_ENVIRONMENT.items():
        os.environ.setdefault(key, value)

    from config_factory import ConfigError, load_config
    try:
        config = load_config()
    except ConfigError as e:
        print(f"Invalid configuration: {e}")
        sys.exit(1)

    cmd = [
        'gunicorn',
        '--config', 'gunicorn.conf.py',
        '--reload',
        '--log-level', 'debug' if config.debug else config.log_level,
        'wsgi:app'
    ]

    print(f"Starting Crime Scene on http://{config.host}:{config.port} "
          f"(min players {config.min_players_required}, cards {config.cards_file})")
    if config.api_token:
        print("API token required: send 'Authorization: Bearer <API_TOKEN>'")
    print("Press Ctrl+C to stop the server")

    try:
        subprocess.run(cmd, check=True)
    except KeyboardInterrupt:
        print("\nShutting down development server...")
    except subprocess.CalledProcessError as e:
        print(f"Gunicorn exited with status {e.returncode}")
        sys.exit(e.returncode)


if __name__ == '__main__':
    main()
