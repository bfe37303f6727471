"""Player id -> live WebSocket and player id -> room code."""

from typing import Dict, List, Optional, Tuple
import logging

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class ConnectionRegistry:
    """Resolves which sockets belong to a room for fan-out.

    Never consulted for game rules; the room store owns membership.
    """

    def __init__(self):
        self.connections: Dict[str, WebSocket] = {}
        self.player_rooms: Dict[str, str] = {}

    def __len__(self) -> int:
        return len(self.connections)

    def register(self, player_id: str, websocket: WebSocket, room_code: str):
        self.connections[player_id] = websocket
        self.player_rooms[player_id] = room_code
        logger.debug("Registered %s in room %s (%d live)", player_id, room_code, len(self.connections))

    def unregister(self, player_id: str):
        """Safe to call more than once (leave followed by socket close)."""
        self.connections.pop(player_id, None)
        self.player_rooms.pop(player_id, None)

    def get_connection(self, player_id: str) -> Optional[WebSocket]:
        return self.connections.get(player_id)

    def room_connections(self, room_code: str) -> List[Tuple[str, WebSocket]]:
        return [(pid, self.connections[pid])
                for pid, code in self.player_rooms.items()
                if code == room_code and pid in self.connections]

    def clear(self):
        self.connections.clear()
        self.player_rooms.clear()
