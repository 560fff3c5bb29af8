"""
Broadcast Service - Relays round lifecycle events over Socket.IO.

Subscribes to every listener channel of a RoundManager and emits the
matching event to the round's Socket.IO room:
- round_started / round_ended with the roster
- state_changed with the old and new state
- timer_ended when the countdown expires
"""

import logging
from typing import Any, Dict, List, Optional

from src.config.round_settings import get_round_settings
from src.core.round_states import RoundState

logger = logging.getLogger(__name__)


class BroadcastService:
    """Bridges RoundManager listeners to Socket.IO room broadcasts."""

    def __init__(self, socketio, round_manager, room: Optional[str] = None):
        """Initialize the broadcast service and subscribe to the round manager.
        
        Args:
            socketio: Flask-SocketIO instance for emitting messages
            round_manager: RoundManager whose events are relayed
            room: Socket.IO room to broadcast to (config default 'round')
        """
        self.socketio = socketio
        self.round_manager = round_manager
        self.room = room or get_round_settings().broadcast_room
        
        round_manager.on_round_start(self.broadcast_round_started)
        round_manager.on_round_end(self.broadcast_round_ended)
        round_manager.on_state_changed(self.broadcast_state_changed)
        round_manager.on_timer_end(self.broadcast_timer_ended)

    def emit_to_room(self, event: str, data: Dict[str, Any]):
        """Emit an event to every client in the round room."""
        try:
            self.socketio.emit(event, data, room=self.room)
            logger.debug(f'Emitted {event} to room {self.room}')
        except Exception as e:
            logger.error(f'Error emitting {event} to room {self.room}: {e}')

    def broadcast_round_started(self, players: List[Any]):
        self.emit_to_room('round_started', {
            'players': players,
            'round_duration': self.round_manager.round_duration
        })

    def broadcast_round_ended(self, players: List[Any]):
        self.emit_to_room('round_ended', {
            'players': players,
            'message': 'Round completed. Ready for next round.'
        })

    def broadcast_state_changed(self, old_state: RoundState, new_state: RoundState):
        self.emit_to_room('state_changed', {
            'old_state': old_state.value,
            'new_state': new_state.value
        })

    def broadcast_timer_ended(self):
        self.emit_to_room('timer_ended', {'message': 'Round time expired'})

    def broadcast_roster_update(self):
        """Broadcast the current roster after a join or leave."""
        self.emit_to_room('roster_updated', {
            'players': self.round_manager.get_players(),
            'state': self.round_manager.get_state().value
        })
