"""
Broadcast Service Unit Tests
Tests relaying of round lifecycle events to the Socket.IO round room.
"""

from unittest.mock import Mock, patch

from src.core.round_states import RoundState
from src.services.broadcast_service import BroadcastService
from tests.helpers.socket_mocks import MockSocketIOTestHelper, create_mock_socketio


class TestBroadcastService:
    """Test BroadcastService functionality"""

    def setup_method(self):
        """Setup test fixtures for each test"""
        self.mock_socketio = create_mock_socketio()
        self.socket_helper = MockSocketIOTestHelper(self.mock_socketio)

    def make_service(self, round_manager, room='round'):
        return BroadcastService(self.mock_socketio, round_manager, room=room)

    def test_subscribes_to_every_listener_channel(self):
        round_manager = Mock()
        service = self.make_service(round_manager)

        round_manager.on_round_start.assert_called_once_with(service.broadcast_round_started)
        round_manager.on_round_end.assert_called_once_with(service.broadcast_round_ended)
        round_manager.on_state_changed.assert_called_once_with(service.broadcast_state_changed)
        round_manager.on_timer_end.assert_called_once_with(service.broadcast_timer_ended)

    def test_room_defaults_to_configured_broadcast_room(self):
        service = BroadcastService(self.mock_socketio, Mock())

        assert service.room == 'round'

    def test_emit_to_room_success(self):
        service = self.make_service(Mock(), room='arena')

        service.emit_to_room('test_event', {'message': 'test'})

        self.mock_socketio.emit.assert_called_once_with('test_event', {'message': 'test'}, room='arena')

    @patch('src.services.broadcast_service.logger')
    def test_emit_to_room_handles_exception(self, mock_logger):
        """Test emit_to_room logs socketio exceptions instead of raising"""
        self.mock_socketio.emit.side_effect = Exception("Socket error")
        service = self.make_service(Mock())

        service.emit_to_room('test', {})

        self.mock_socketio.emit.assert_called_once()
        mock_logger.error.assert_called_once()

    def test_start_broadcasts_state_change_then_round_started(self, round_manager):
        self.make_service(round_manager)

        round_manager.start(["alice", "bob"])

        assert self.socket_helper.emitted_events() == ['state_changed', 'round_started']
        self.mock_socketio.emit.assert_any_call(
            'state_changed', {'old_state': 'Waiting', 'new_state': 'Running'}, room='round'
        )
        self.socket_helper.assert_emit_called_with(
            'round_started', {'players': ["alice", "bob"], 'round_duration': 60}, room='round'
        )

    def test_end_broadcasts_round_ended_between_state_changes(self, round_manager):
        self.make_service(round_manager)
        round_manager.start(["alice", "bob"])
        self.socket_helper.reset_mock()

        round_manager.end()

        assert self.socket_helper.emitted_events() == ['state_changed', 'round_ended', 'state_changed']
        calls = self.socket_helper.get_emit_calls()
        assert calls[0][0][1] == {'old_state': 'Running', 'new_state': 'Finished'}
        assert calls[1][0][1] == {
            'players': ["alice", "bob"],
            'message': 'Round completed. Ready for next round.'
        }
        assert calls[2][0][1] == {'old_state': 'Finished', 'new_state': 'Waiting'}

    def test_timer_expiry_broadcasts_timer_ended_before_round_ended(self, round_manager, scheduled_tasks):
        self.make_service(round_manager)
        round_manager.start(["alice", "bob"])
        self.socket_helper.reset_mock()

        func, args = scheduled_tasks[-1]
        func(*args)

        events = self.socket_helper.emitted_events()
        assert events[0] == 'timer_ended'
        assert events.index('timer_ended') < events.index('round_ended')
        self.socket_helper.assert_emit_called_with('timer_ended', room='round')

    def test_failed_start_broadcasts_nothing(self, round_manager):
        self.make_service(round_manager)

        round_manager.start(["alice"])

        self.mock_socketio.emit.assert_not_called()

    def test_broadcast_state_changed_uses_state_values(self):
        service = self.make_service(Mock())

        service.broadcast_state_changed(RoundState.RUNNING, RoundState.ERROR)

        self.mock_socketio.emit.assert_called_once_with(
            'state_changed', {'old_state': 'Running', 'new_state': 'Error'}, room='round'
        )

    def test_broadcast_roster_update(self, round_manager):
        service = self.make_service(round_manager)
        round_manager.add_player("alice")

        service.broadcast_roster_update()

        self.mock_socketio.emit.assert_called_once_with(
            'roster_updated', {'players': ["alice"], 'state': 'Waiting'}, room='round'
        )
