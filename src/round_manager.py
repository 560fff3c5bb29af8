"""
Round Manager for the round lifecycle service

Drives a single recurring round through Waiting, Running and Finished,
keeps the round roster, runs the countdown that ends a round automatically,
and notifies registered listeners of lifecycle events.
"""

import logging
import time
from typing import Any, Callable, Dict, List, Optional

import eventlet

from src.config.round_settings import get_round_settings
from src.core.errors import ErrorCode, RoundResult
from src.core.round_states import ALLOWED_TRANSITIONS, RoundState

logger = logging.getLogger(__name__)


class RoundManager:
    """
    Manages round state transitions, the round roster and the round countdown.

    All fallible operations return a RoundResult instead of raising. Listeners
    are called synchronously, in registration order, from inside the call that
    triggered the event; exceptions raised by a listener propagate to that caller.

    The countdown runs as a green thread that polls elapsed time every
    ``poll_interval`` seconds. It is bound to the round generation it was
    started for and stops on its own once that round is no longer running.
    """

    def __init__(
        self,
        round_duration: Optional[float] = None,
        poll_interval: Optional[float] = None,
        min_players: Optional[int] = None,
        spawn: Optional[Callable] = None,
        sleep: Optional[Callable[[float], Any]] = None,
        clock: Optional[Callable[[], float]] = None
    ):
        """
        Initialize a round manager in the Waiting state.

        Args:
            round_duration: Seconds before the countdown ends a round (config default 60)
            poll_interval: Seconds between countdown state checks (config default 0.5)
            min_players: Quorum required by start() (config default 2)
            spawn: Launches the countdown task, called as spawn(func, *args)
            sleep: Cooperative sleep used between countdown checks
            clock: Monotonic clock used to measure elapsed round time
        """
        settings = get_round_settings()
        self.round_duration = round_duration if round_duration is not None else settings.round_duration
        self.poll_interval = poll_interval if poll_interval is not None else settings.poll_interval
        self.min_players = min_players if min_players is not None else settings.min_players_required

        self._spawn = spawn or eventlet.spawn
        self._sleep = sleep or eventlet.sleep
        self._clock = clock or time.monotonic

        self._state = RoundState.WAITING
        self._players: List[Any] = []
        self._timer_active = False
        self._timer_thread = None
        self._generation = 0
        self._round_started_at: Optional[float] = None

        self._round_start_listeners: List[Callable] = []
        self._round_end_listeners: List[Callable] = []
        self._state_changed_listeners: List[Callable] = []
        self._timer_end_listeners: List[Callable] = []

    # State Machine

    def transition(self, new_state) -> RoundResult:
        """
        Move the machine to a new state.

        Args:
            new_state: Target RoundState or its string value

        Returns:
            RoundResult; on failure the machine is left in the Error state
        """
        current_state = self.get_state()
        allowed = ALLOWED_TRANSITIONS.get(current_state) if current_state is getattr(self, '_state', None) else None
        if allowed is None:
            self._set_state(RoundState.ERROR)
            logger.error(f"Round state is corrupted, forcing {RoundState.ERROR.value}")
            return RoundResult.fail(ErrorCode.INVALID_STATE, "Current state is not valid")

        target = self._coerce_state(new_state)
        if target not in allowed:
            self._set_state(RoundState.ERROR)
            logger.warning(f"Rejected transition {current_state.value} -> {new_state!r}, "
                           f"round forced into {RoundState.ERROR.value}")
            return RoundResult.fail(ErrorCode.INVALID_TRANSITION, "Transition is not allowed")

        self._set_state(target)
        logger.info(f"Round state changed: {current_state.value} -> {target.value}")
        self._notify(self._state_changed_listeners, current_state, target)
        return RoundResult.ok()

    def get_state(self) -> RoundState:
        """Get the current round state; Error for an uninitialized instance."""
        state = getattr(self, '_state', None)
        if not isinstance(state, RoundState):
            return RoundState.ERROR
        return state

    @staticmethod
    def _coerce_state(value) -> Optional[RoundState]:
        if isinstance(value, RoundState):
            return value
        try:
            return RoundState(value)
        except (ValueError, TypeError):
            return None

    def _set_state(self, new_state: RoundState) -> None:
        # Leaving Running retires the countdown bound to that round
        if getattr(self, '_state', None) is RoundState.RUNNING and new_state is not RoundState.RUNNING:
            self._generation += 1
        self._state = new_state

    # Round Enrollment

    def add_player(self, player_id: Any) -> None:
        """
        Enroll a player in the upcoming round.

        Ignored if the player is already enrolled or the round is not waiting.
        """
        if player_id in self._players:
            return

        if self._state is RoundState.WAITING:
            self._players.append(player_id)
            logger.debug(f"Player {player_id} enrolled ({len(self._players)} total)")

    def remove_player(self, player_id: Any) -> None:
        """Remove a player from the roster in any state; ignored if absent."""
        if player_id not in self._players:
            return

        self._players.remove(player_id)
        logger.debug(f"Player {player_id} removed from roster during {self._state.value}")

    def get_players(self) -> List[Any]:
        """Get a copy of the current roster."""
        players = getattr(self, '_players', None)
        if players is None:
            return []
        return list(players)

    # Round Lifecycle

    def start(self, players) -> RoundResult:
        """
        Start a round with the given roster and launch the countdown.

        Args:
            players: Candidate roster; replaces the current roster as given

        Returns:
            RoundResult describing why the round could not start, if it could not
        """
        if self._state is not RoundState.WAITING:
            return self._reject(ErrorCode.ROUND_NOT_WAITING, "Round is not waiting")

        if self._timer_active:
            return self._reject(ErrorCode.TIMER_ACTIVE, "Timer is already active")

        candidates = list(players or [])
        if len(candidates) < self.min_players:
            return self._reject(ErrorCode.NOT_ENOUGH_PLAYERS, "Not enough players")

        self._players.clear()
        self._players.extend(candidates)

        result = self.transition(RoundState.RUNNING)
        if not result:
            return result

        generation = self._generation
        started_at = self._clock()
        self._round_started_at = started_at
        logger.info(f"Round {generation} started with {len(self._players)} players")

        self._notify(self._round_start_listeners, self.get_players())

        self._timer_active = True
        self._timer_thread = self._spawn(self._run_timer, generation, started_at)
        return RoundResult.ok()

    def end(self) -> RoundResult:
        """
        End the running round, notify listeners and reset for the next round.

        Returns:
            RoundResult; on success the roster is empty and the state is Waiting
        """
        if self._state is not RoundState.RUNNING:
            return self._reject(ErrorCode.ROUND_NOT_RUNNING, "Round is not running")

        result = self.transition(RoundState.FINISHED)
        if not result:
            return result

        self._notify(self._round_end_listeners, self.get_players())

        return self._clean_round()

    def _clean_round(self) -> RoundResult:
        if self._state is not RoundState.FINISHED:
            return self._reject(ErrorCode.ROUND_NOT_FINISHED, "Round is not finished")

        self._players.clear()
        self._round_started_at = None

        return self.transition(RoundState.WAITING)

    def _reject(self, code: ErrorCode, message: str) -> RoundResult:
        logger.warning(f"Round operation rejected ({code.value}): {message}")
        return RoundResult.fail(code, message)

    # Countdown Timer

    @property
    def timer_active(self) -> bool:
        """True while a countdown task is in flight."""
        return self._timer_active

    @property
    def generation(self) -> int:
        """Round generation; advances every time the machine leaves Running."""
        return self._generation

    def _is_current_round(self, generation: int) -> bool:
        return self._state is RoundState.RUNNING and self._generation == generation

    def _run_timer(self, generation: int, started_at: float) -> None:
        try:
            self._countdown(generation, started_at)
        finally:
            self._timer_active = False
            self._timer_thread = None

    def _countdown(self, generation: int, started_at: float) -> None:
        # Elapsed time counts from start(), not from when this task first runs
        while self._is_current_round(generation):
            if self._clock() - started_at >= self.round_duration:
                break
            self._sleep(self.poll_interval)

        if not self._is_current_round(generation):
            logger.debug(f"Countdown for round {generation} stopped, round already over")
            return

        logger.info(f"Round {generation} time expired after {self.round_duration}s")
        self._notify(self._timer_end_listeners)

        # A timer-end listener may already have ended the round
        if not self._is_current_round(generation):
            return

        result = self.end()
        if not result:
            logger.error(f"Failed to end round {generation} after timeout: {result.message}")

    def get_time_remaining(self) -> int:
        """
        Get remaining time in seconds for the running round.

        Returns:
            Seconds remaining, or 0 if no round is running
        """
        if self._state is not RoundState.RUNNING or self._round_started_at is None:
            return 0

        remaining = self.round_duration - (self._clock() - self._round_started_at)
        return max(0, int(remaining))

    def get_round_info(self) -> Dict[str, Any]:
        """Snapshot of the round for status endpoints and socket replies."""
        return {
            "state": self.get_state().value,
            "players": self.get_players(),
            "timer_active": self._timer_active,
            "time_remaining": self.get_time_remaining(),
            "generation": self._generation,
        }

    def shutdown(self) -> None:
        """Kill an in-flight countdown task (used on process exit)."""
        timer_thread = self._timer_thread
        if timer_thread is not None and hasattr(timer_thread, 'kill'):
            timer_thread.kill()
        self._timer_thread = None
        self._timer_active = False
        logger.info("RoundManager shut down")

    # Listener Registration

    def on_round_start(self, callback: Callable[[List[Any]], Any]) -> None:
        """Register a callback receiving the roster when a round starts."""
        self._add_listener(self._round_start_listeners, callback)

    def on_round_end(self, callback: Callable[[List[Any]], Any]) -> None:
        """Register a callback receiving the roster when a round ends, before it is cleared."""
        self._add_listener(self._round_end_listeners, callback)

    def on_state_changed(self, callback: Callable[[RoundState, RoundState], Any]) -> None:
        """Register a callback receiving (old_state, new_state) on every transition."""
        self._add_listener(self._state_changed_listeners, callback)

    def on_timer_end(self, callback: Callable[[], Any]) -> None:
        """Register a callback invoked when the countdown expires."""
        self._add_listener(self._timer_end_listeners, callback)

    @staticmethod
    def _add_listener(listeners: List[Callable], callback) -> None:
        if not callable(callback):
            logger.debug(f"Ignoring non-callable listener: {callback!r}")
            return
        listeners.append(callback)

    @staticmethod
    def _notify(listeners: List[Callable], *args) -> None:
        for callback in list(listeners):
            callback(*args)
