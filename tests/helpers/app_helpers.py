"""
Application helpers for tests.
Shared configuration used to build the Flask app and the service container.
"""

# Testing configuration; a minimum of one player lets solo rooms start
TEST_CONFIG = {
    'environment': 'testing',
    'flask_env': 'testing',
    'min_players_required': 1,
    'max_players_per_room': 12,
}
