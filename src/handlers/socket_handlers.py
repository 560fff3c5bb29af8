"""
Socket.IO event handlers for the round service.

This module provides the registration function and the connection/disconnection
handlers; round events are routed to RoundActionHandler.
"""

import logging
from flask import request
from flask_socketio import emit

from container import get_container
from .round_action_handler import RoundActionHandler

logger = logging.getLogger(__name__)

ROUND_EVENTS = (
    'join_round',
    'leave_round',
    'start_round',
    'end_round',
    'get_round_state',
)


def register_socket_handlers(socketio_instance):
    """Register all socket handlers with the SocketIO instance."""
    round_handler = RoundActionHandler()

    # Connection handlers have special behavior and are registered directly
    socketio_instance.on_event('connect', handle_connect)
    socketio_instance.on_event('disconnect', handle_disconnect)

    for event in ROUND_EVENTS:
        socketio_instance.on_event(event, getattr(round_handler, f'handle_{event}'))

    logger.info(f"Registered {len(ROUND_EVENTS) + 2} socket event handlers")
    return round_handler


def handle_connect(auth=None):
    """Handle client connection."""
    logger.info(f'Client connected: {request.sid}')  # type: ignore[attr-defined]
    emit('connected', {'status': 'Connected to round server'})


def handle_disconnect(reason=None):
    """Handle client disconnection by dropping the player from the roster."""
    container = get_container()
    session_service = container.get('SessionService')
    round_manager = container.get('RoundManager')
    broadcast_service = container.get('BroadcastService')

    logger.info(f'Client disconnected: {request.sid}')  # type: ignore[attr-defined]

    player_id = session_service.remove_session(request.sid)  # type: ignore[attr-defined]
    if player_id is not None:
        round_manager.remove_player(player_id)
        logger.info(f'Player {player_id} removed from roster on disconnect '
                    f'(state: {round_manager.get_state().value})')
        broadcast_service.broadcast_roster_update()
