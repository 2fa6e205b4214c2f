from flask import Blueprint, jsonify, current_app
from shellgame.models import GameSettings
from shellgame.socketio_events import live_session_count

game = Blueprint('game', __name__)


@game.route('/settings', methods=['GET'])
def get_settings():
    """Game shape and delays, so clients can pace their animations."""
    try:
        settings = GameSettings.from_config(current_app.config)
    except (TypeError, ValueError) as exc:
        current_app.logger.warning(f"[settings] invalid game config: {exc}")
        return jsonify({'error': 'Invalid game configuration'}), 500
    payload = settings.to_dict()
    payload['live_sessions'] = live_session_count()
    return jsonify(payload)
