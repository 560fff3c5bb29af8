"""
Round Action Handler

This module handles Socket.IO events that drive the round lifecycle:
joining and leaving the roster, starting and ending rounds, and
querying the current round state.
"""

import logging
from flask import request

from src.core.errors import ErrorCode, ValidationError
from src.core.round_states import RoundState
from src.error_handler import with_error_handling
from .base_handler import BaseHandler

logger = logging.getLogger(__name__)

MAX_PLAYER_ID_LENGTH = 64


class RoundActionHandler(BaseHandler):
    """Handler for round enrollment and lifecycle operations."""

    @with_error_handling
    def handle_join_round(self, data=None):
        """
        Handle a client enrolling in the upcoming round.

        Expected data format:
        {
            'player_id': 'unique player identifier'
        }
        """
        self.log_handler_start('handle_join_round', data)

        player_id = self.validate_player_id(data)
        self.check_can_join(player_id)

        self.session_service.create_session(request.sid, player_id)  # type: ignore[attr-defined]
        self.join_broadcast_room()
        self.round_manager.add_player(player_id)

        self.emit_success('joined_round', {
            'player_id': player_id,
            'players': self.round_manager.get_players(),
            'state': self.round_manager.get_state().value
        })
        self.broadcast_service.broadcast_roster_update()
        self.log_handler_success('handle_join_round', f'Player {player_id} joined')

    @with_error_handling
    def handle_leave_round(self, data=None):
        """Handle a client leaving the roster."""
        self.log_handler_start('handle_leave_round', data)

        player_id = self.require_player_id()

        self.round_manager.remove_player(player_id)
        self.session_service.remove_session(request.sid)  # type: ignore[attr-defined]
        self.leave_broadcast_room()

        self.emit_success('left_round', {'player_id': player_id})
        self.broadcast_service.broadcast_roster_update()
        self.log_handler_success('handle_leave_round', f'Player {player_id} left')

    @with_error_handling
    def handle_start_round(self, data=None):
        """
        Handle request to start a round with everyone currently enrolled.
        Only works while the round is waiting and enough players have joined.
        """
        self.log_handler_start('handle_start_round', data)

        self.require_player_id()

        result = self.round_manager.start(self.round_manager.get_players())
        self.check_result(result)

        self.emit_success('round_start_accepted', {
            'message': 'Round started successfully'
        })
        self.log_handler_success('handle_start_round')

    @with_error_handling
    def handle_end_round(self, data=None):
        """Handle request to end the running round early."""
        self.log_handler_start('handle_end_round', data)

        self.require_player_id()

        result = self.round_manager.end()
        self.check_result(result)

        self.emit_success('round_end_accepted', {
            'message': 'Round ended successfully'
        })
        self.log_handler_success('handle_end_round')

    @with_error_handling
    def handle_get_round_state(self, data=None):
        """Send the current round snapshot to the requesting client."""
        self.emit_success('round_state', self.round_manager.get_round_info())

    def validate_player_id(self, data) -> str:
        """
        Extract and validate the player identifier from a join payload.

        Raises:
            ValidationError: If the identifier is missing, blank or too long
        """
        data = self.validate_data_dict(data)

        player_id = data.get('player_id')
        if not isinstance(player_id, str) or not player_id.strip():
            raise ValidationError(ErrorCode.MISSING_PLAYER_ID, 'Player ID is required')

        player_id = player_id.strip()
        if len(player_id) > MAX_PLAYER_ID_LENGTH:
            raise ValidationError(
                ErrorCode.INVALID_DATA,
                f'Player ID must be {MAX_PLAYER_ID_LENGTH} characters or less'
            )

        return player_id

    def check_can_join(self, player_id: str) -> None:
        """
        Reject joins that would leave the roster out of step with the connections.

        A connection keeps the id it first joined with until it leaves, an id
        belongs to one connection at a time, and new ids are only enrolled
        while the round is waiting.

        Raises:
            ValidationError: ALREADY_JOINED, PLAYER_ID_TAKEN or ROUND_NOT_WAITING
        """
        current_player_id = self.get_current_player_id()
        if current_player_id is not None and current_player_id != player_id:
            raise ValidationError(
                ErrorCode.ALREADY_JOINED,
                f'Already joined as {current_player_id}; leave the round first'
            )

        owner = self.session_service.get_socket_id(player_id)
        if owner is not None and owner != request.sid:  # type: ignore[attr-defined]
            raise ValidationError(ErrorCode.PLAYER_ID_TAKEN, f'Player ID {player_id} is already in use')

        round_manager = self.round_manager
        if round_manager.get_state() is not RoundState.WAITING and player_id not in round_manager.get_players():
            raise ValidationError(ErrorCode.ROUND_NOT_WAITING, 'Round is not waiting')
