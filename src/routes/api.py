"""
REST API endpoints for the Crime Scene application.

Every endpoint is a thin adapter: validate the JSON body, run one game
manager operation, serialize the result. Clients poll GET /api/room/<code>.
"""

import hmac
import logging
from flask import Blueprint, jsonify, request

from src.core.errors import ErrorCode, ValidationError
from src.error_handler import with_error_handling

logger = logging.getLogger(__name__)

# Global references to services - will be set by registration function
game_manager = None
validation_service = None
error_response_factory = None
room_state_presenter = None
api_token = None

# Failure values for endpoints whose success payload carries extra fields
JOIN_DEFAULTS = {'playerId': ''}
ACCUSE_DEFAULTS = {'correct': False, 'gameOver': False, 'winner': None}


def create_api_blueprint(services):
    """Create and configure the API Blueprint with service dependencies."""
    global game_manager, validation_service, error_response_factory, room_state_presenter, api_token

    # Store service references
    game_manager = services['game_manager']
    validation_service = services['validation_service']
    error_response_factory = services['error_response_factory']
    room_state_presenter = services['room_state_presenter']
    api_token = services.get('api_token')

    # Create the blueprint
    api = Blueprint('api', __name__, url_prefix='/api')

    @api.before_request
    def require_bearer_token():
        """Reject requests without the configured bearer token."""
        if not api_token or request.endpoint == 'api.health':
            return None

        header = request.headers.get('Authorization', '')
        scheme, _, token = header.partition(' ')
        if scheme.lower() == 'bearer' and hmac.compare_digest(token.strip(), api_token):
            return None

        logger.warning(f"Rejected request to {request.path}: missing or invalid bearer token")
        body = error_response_factory.create_error_response(ErrorCode.UNAUTHORIZED, "Invalid or missing bearer token")
        return jsonify(body), 401

    def read_body(*required_fields):
        return validation_service.validate_request_data(request.get_json(silent=True), list(required_fields))

    def action_response(result, defaults=None):
        body, status = error_response_factory.create_action_response(result, defaults)
        return jsonify(body), status

    @api.route('/health')
    def health():
        """Liveness check."""
        return jsonify({'status': 'ok'})

    @api.route('/cards')
    @with_error_handling
    def cards():
        """Serve the card catalog."""
        return jsonify(room_state_presenter.present_catalog())

    @api.route('/room/create', methods=['POST'])
    @with_error_handling
    def create_room():
        data = read_body('hostName')
        host_name = validation_service.validate_player_name(data['hostName'])

        result = game_manager.create_room(host_name)
        # Room creation has no success flag in its contract
        return jsonify(result.data)

    @api.route('/room/join', methods=['POST'])
    @with_error_handling
    def join_room():
        data = read_body('roomCode', 'playerName')
        room_code = validation_service.validate_room_code(data['roomCode'])
        player_name = validation_service.validate_player_name(data['playerName'])

        return action_response(game_manager.join_room(room_code, player_name), JOIN_DEFAULTS)

    @api.route('/room/<room_code>')
    @with_error_handling
    def get_room_state(room_code):
        """Polling endpoint; a 404 tells the client the room was torn down."""
        room_code = validation_service.validate_room_code(room_code)
        viewer_id = request.args.get('playerId')

        state = game_manager.get_state(room_code)
        if state is None:
            raise ValidationError(ErrorCode.ROOM_NOT_FOUND, f"Room {room_code} not found")

        return jsonify(room_state_presenter.present_game_state(state, viewer_id))

    @api.route('/game/start', methods=['POST'])
    @with_error_handling
    def start_game():
        data = read_body('roomCode')
        room_code = validation_service.validate_room_code(data['roomCode'])

        return action_response(game_manager.start_game(room_code))

    @api.route('/game/murderer-choice', methods=['POST'])
    @with_error_handling
    def murderer_choice():
        data = read_body('roomCode', 'playerId', 'methodId', 'evidenceId')
        room_code = validation_service.validate_room_code(data['roomCode'])

        result = game_manager.choose_murderer_cards(
            room_code,
            validation_service.validate_text_field(data['playerId'], 'playerId'),
            validation_service.validate_text_field(data['methodId'], 'methodId'),
            validation_service.validate_text_field(data['evidenceId'], 'evidenceId')
        )
        return action_response(result)

    @api.route('/game/forensic-clue/add', methods=['POST'])
    @with_error_handling
    def add_forensic_clue():
        data = read_body('roomCode', 'playerId', 'category', 'cardName')
        room_code = validation_service.validate_room_code(data['roomCode'])

        result = game_manager.add_clue(
            room_code,
            validation_service.validate_text_field(data['playerId'], 'playerId'),
            validation_service.validate_text_field(data['category'], 'category'),
            validation_service.validate_text_field(data['cardName'], 'cardName')
        )
        return action_response(result)

    @api.route('/game/turn/finish', methods=['POST'])
    @with_error_handling
    def finish_turn():
        data = read_body('roomCode', 'playerId')
        room_code = validation_service.validate_room_code(data['roomCode'])
        player_id = validation_service.validate_text_field(data['playerId'], 'playerId')

        return action_response(game_manager.finish_turn(room_code, player_id))

    @api.route('/game/guess', methods=['POST'])
    @with_error_handling
    def make_guess():
        data = read_body('roomCode', 'playerId', 'suspectId', 'methodId', 'evidenceId')
        room_code = validation_service.validate_room_code(data['roomCode'])

        result = game_manager.accuse(
            room_code,
            validation_service.validate_text_field(data['playerId'], 'playerId'),
            validation_service.validate_text_field(data['suspectId'], 'suspectId'),
            validation_service.validate_text_field(data['methodId'], 'methodId'),
            validation_service.validate_text_field(data['evidenceId'], 'evidenceId')
        )
        return action_response(result, ACCUSE_DEFAULTS)

    @api.route('/game/restart', methods=['POST'])
    @with_error_handling
    def restart_game():
        data = read_body('roomCode', 'hostId')
        room_code = validation_service.validate_room_code(data['roomCode'])
        host_id = validation_service.validate_text_field(data['hostId'], 'hostId')

        return action_response(game_manager.restart_game(room_code, host_id))

    @api.route('/room/close', methods=['POST'])
    @with_error_handling
    def close_room():
        data = read_body('roomCode', 'hostId')
        room_code = validation_service.validate_room_code(data['roomCode'])
        host_id = validation_service.validate_text_field(data['hostId'], 'hostId')

        return action_response(game_manager.close_room(room_code, host_id))

    return api
