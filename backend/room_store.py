"""Authoritative in-memory room state and game progression rules.

Every mutation of a room goes through RoomStore. Operations are synchronous
and complete before returning, so under a single event loop no caller can
observe a half-applied transition.
"""

import logging
import random
from typing import Dict, NamedTuple, Optional

import config
import words
from errors import CapacityError, InvalidPhaseError, NotFoundError, NotYourTurnError
from models import Clue, Phase, Player, Room, Settings

logger = logging.getLogger(__name__)


class GameStart(NamedTuple):
    room: Room
    imposter: Player
    secret_word: str


def normalize_code(code: str) -> str:
    return (code or "").strip().upper()


class RoomStore:
    def __init__(self, rng: Optional[random.Random] = None):
        self.rooms: Dict[str, Room] = {}
        self.rng = rng or random.Random()

    def __len__(self) -> int:
        return len(self.rooms)

    def clear(self):
        self.rooms.clear()

    # --- Rooms ---

    def generate_room_code(self) -> str:
        for _ in range(config.MAX_ROOM_CODE_ATTEMPTS):
            code = "".join(self.rng.choices(config.ROOM_CODE_ALPHABET, k=config.ROOM_CODE_LENGTH))
            if code not in self.rooms:
                return code
        raise RuntimeError("Failed to generate unique room code")

    def create_room(self, settings: Optional[Settings] = None) -> Room:
        room = Room(code=self.generate_room_code(), settings=settings or Settings.defaults())
        self.rooms[room.code] = room
        logger.info("Room created: %s", room.code)
        return room

    def get_room(self, code: str) -> Optional[Room]:
        return self.rooms.get(normalize_code(code))

    def _require_room(self, code: str) -> Room:
        room = self.get_room(code)
        if room is None:
            raise NotFoundError("Room not found")
        return room

    def update_room(self, code: str, **changes) -> Optional[Room]:
        """Shallow-merge fields into a room. Returns None if the room is gone."""
        room = self.get_room(code)
        if room is None:
            return None
        for field, value in changes.items():
            setattr(room, field, value)
        return room

    def delete_room(self, code: str) -> bool:
        room = self.rooms.pop(normalize_code(code), None)
        if room is not None:
            logger.info("Room deleted: %s", room.code)
        return room is not None

    # --- Players ---

    def add_player(self, code: str, player: Player) -> Optional[Room]:
        """Append a player; the first player in becomes host.

        Capacity and the lobby-only join rule are the caller's responsibility.
        """
        room = self.get_room(code)
        if room is None:
            return None
        player.room_code = room.code
        player.is_host = not room.players
        room.players.append(player)
        logger.info("Player '%s' joined room %s", player.name, room.code)
        return room

    def remove_player(self, code: str, player_id: str) -> Optional[Room]:
        """Remove a player and keep exactly one host.

        Returns the updated room, or None when the room emptied and was deleted.
        Raises NotFoundError if the room or the player does not exist.
        """
        room = self._require_room(code)
        player = room.find_player(player_id)
        if player is None:
            raise NotFoundError("Player not found")

        room.players.remove(player)
        logger.info("Player '%s' left room %s", player.name, room.code)

        if not room.players:
            self.delete_room(room.code)
            return None
        if player.is_host:
            room.players[0].is_host = True
            logger.info("Host of room %s passed to '%s'", room.code, room.players[0].name)
        # The departing player may have been the last vote outstanding.
        if room.phase == Phase.VOTING and all(p.has_voted for p in room.players):
            room.phase = Phase.RESULTS
            logger.info("Room %s voting complete", room.code)
        return room

    # --- Game progression ---

    def start_game(self, code: str) -> GameStart:
        room = self._require_room(code)
        count = len(room.players)
        if count < config.MIN_PLAYERS or count > config.MAX_PLAYERS:
            raise CapacityError(
                f"Need {config.MIN_PLAYERS}-{config.MAX_PLAYERS} players to start"
            )

        imposter = self.rng.choice(room.players)
        secret_word = words.get_random_word(
            room.settings.category, room.settings.difficulty, rng=self.rng
        )

        room.phase = Phase.ROLE_REVEAL
        room.secret_word = secret_word
        room.imposter_id = imposter.id
        room.current_turn = 0
        room.current_round = 1
        room.clues = []
        for player in room.players:
            player.is_imposter = player.id == imposter.id
            player.has_voted = False
            player.voted_for = None

        logger.info("Game started in room %s with %d players", room.code, count)
        return GameStart(room, imposter, secret_word)

    def submit_clue(self, code: str, player_id: str, text: str) -> Room:
        room = self._require_room(code)
        if room.phase != Phase.GIVING_CLUES:
            raise InvalidPhaseError("Clues can only be given during the clue phase")

        owner = room.turn_owner()
        if owner is None or owner.id != player_id:
            raise NotYourTurnError("It's not your turn")

        room.clues.append(Clue(player_id=owner.id, player_name=owner.name, clue=text))
        room.current_turn += 1

        # Turns keep counting across rounds; the owner is always taken modulo player count.
        if room.current_turn >= len(room.players) * room.current_round:
            if room.current_round >= room.settings.clue_rounds:
                room.phase = Phase.VOTING
                logger.info("Room %s moved to voting", room.code)
            else:
                room.current_round += 1
        return room

    def submit_vote(self, code: str, player_id: str, voted_for_id: str) -> Room:
        room = self._require_room(code)
        if room.phase != Phase.VOTING:
            raise InvalidPhaseError("Voting has not started")

        voter = room.find_player(player_id)
        if voter is None:
            raise NotFoundError("Player not found")
        if room.find_player(voted_for_id) is None:
            raise NotFoundError("Voted player not found")

        voter.has_voted = True
        voter.voted_for = voted_for_id

        if all(p.has_voted for p in room.players):
            room.phase = Phase.RESULTS
            logger.info("Room %s voting complete", room.code)
        return room

    def next_round(self, code: str) -> Room:
        room = self._require_room(code)
        if room.phase != Phase.RESULTS:
            raise InvalidPhaseError("The game has not finished yet")

        room.phase = Phase.LOBBY
        room.secret_word = None
        room.imposter_id = None
        room.current_turn = None
        room.current_round = None
        room.clues = []
        for player in room.players:
            player.is_imposter = None
            player.has_voted = False
            player.voted_for = None
        return room
