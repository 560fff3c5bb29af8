"""
Round State Enumeration

Defines the lifecycle states of a round and the allowed transitions between them.
"""

from enum import Enum


class RoundState(Enum):
    """Round lifecycle state enumeration."""
    WAITING = "Waiting"
    RUNNING = "Running"
    FINISHED = "Finished"
    ERROR = "Error"


ALLOWED_TRANSITIONS = {
    RoundState.WAITING: {RoundState.RUNNING, RoundState.ERROR},
    RoundState.RUNNING: {RoundState.FINISHED, RoundState.ERROR},
    RoundState.FINISHED: {RoundState.WAITING, RoundState.ERROR},
    RoundState.ERROR: {RoundState.WAITING, RoundState.RUNNING, RoundState.FINISHED},
}
