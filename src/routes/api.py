"""
REST API endpoints for the round service.
"""

import logging
from flask import Blueprint, jsonify

logger = logging.getLogger(__name__)


def create_api_blueprint(services):
    """Create and configure the API Blueprint with service dependencies."""
    round_manager = services['round_manager']

    api = Blueprint('api', __name__)

    @api.route('/api/round')
    def round_status():
        """Report the current round state, roster and remaining time."""
        return jsonify(round_manager.get_round_info())

    @api.route('/health')
    def health():
        """Liveness check."""
        return jsonify({'status': 'ok', 'state': round_manager.get_state().value})

    return api
