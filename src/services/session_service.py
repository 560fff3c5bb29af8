"""
Session Service - Maps Socket.IO connections to the player ids they enrolled with.

Each connection speaks for at most one player id and each player id belongs to
at most one connection, so leaving or disconnecting always identifies exactly
which roster entry to drop.
"""

import logging
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class SessionService:
    """Two-way lookup between socket ids and player ids."""

    def __init__(self):
        self._player_by_socket: Dict[str, str] = {}
        self._socket_by_player: Dict[str, str] = {}

    def create_session(self, socket_id: str, player_id: str) -> None:
        """
        Bind a connection to a player id.

        Callers check ``get_player_id`` and ``get_socket_id`` first; binding a
        connection that already holds a different id replaces that binding.
        """
        previous = self._player_by_socket.get(socket_id)
        if previous is not None:
            self._socket_by_player.pop(previous, None)

        self._player_by_socket[socket_id] = player_id
        self._socket_by_player[player_id] = socket_id
        logger.debug(f"Socket {socket_id} bound to player {player_id}")

    def get_player_id(self, socket_id: str) -> Optional[str]:
        """Player id the connection joined with, if any."""
        return self._player_by_socket.get(socket_id)

    def get_socket_id(self, player_id: str) -> Optional[str]:
        """Connection currently holding the player id, if any."""
        return self._socket_by_player.get(player_id)

    def remove_session(self, socket_id: str) -> Optional[str]:
        """Unbind a connection and return the player id it held."""
        player_id = self._player_by_socket.pop(socket_id, None)
        if player_id is not None:
            self._socket_by_player.pop(player_id, None)
            logger.debug(f"Socket {socket_id} released player {player_id}")
        return player_id
