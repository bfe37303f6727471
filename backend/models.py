"""Game state models shared by the room store and the socket layer."""

from enum import Enum
from typing import Dict, List, Optional
import time

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

import config


def now_ms() -> int:
    return int(time.time() * 1000)


class Phase(str, Enum):
    LOBBY = "LOBBY"
    ROLE_REVEAL = "ROLE_REVEAL"
    GIVING_CLUES = "GIVING_CLUES"
    VOTING = "VOTING"
    RESULTS = "RESULTS"


class Category(str, Enum):
    FOOD = "FOOD"
    ANIMALS = "ANIMALS"
    MOVIES_TV = "MOVIES_TV"
    SPORTS = "SPORTS"
    PLACES = "PLACES"
    JOBS = "JOBS"
    OBJECTS = "OBJECTS"
    VEHICLES = "VEHICLES"
    HOLIDAYS = "HOLIDAYS"
    SCHOOL = "SCHOOL"
    SILLY = "SILLY"
    FANTASY = "FANTASY"
    TECHNOLOGY = "TECHNOLOGY"
    NATURE = "NATURE"
    MUSIC = "MUSIC"


class Difficulty(str, Enum):
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"


# Phases during which the secret word and imposter must stay hidden.
SECRET_PHASES = (Phase.ROLE_REVEAL, Phase.GIVING_CLUES, Phase.VOTING)


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase on the wire."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )


class Settings(CamelModel):
    category: Category = Category.FOOD
    difficulty: Difficulty = Difficulty.MEDIUM
    clue_rounds: int = Field(3, ge=config.MIN_CLUE_ROUNDS, le=config.MAX_CLUE_ROUNDS)
    allow_phrases: bool = False

    @classmethod
    def defaults(cls) -> "Settings":
        return cls(**config.DEFAULT_SETTINGS)


class Player(CamelModel):
    id: str
    name: str = Field(min_length=1, max_length=config.MAX_NAME_LENGTH)
    room_code: str = ""
    is_host: bool = False
    color: str = ""
    is_imposter: Optional[bool] = None
    has_voted: bool = False
    voted_for: Optional[str] = None


class Clue(CamelModel):
    model_config = ConfigDict(frozen=True)

    player_id: str
    player_name: str
    clue: str = Field(min_length=1, max_length=config.MAX_CLUE_LENGTH)
    timestamp: int = Field(default_factory=now_ms)


class Room(CamelModel):
    code: str
    players: List[Player] = Field(default_factory=list)
    phase: Phase = Phase.LOBBY
    settings: Settings = Field(default_factory=Settings.defaults)
    secret_word: Optional[str] = None
    imposter_id: Optional[str] = None
    current_turn: Optional[int] = None
    current_round: Optional[int] = None
    clues: List[Clue] = Field(default_factory=list)
    created_at: int = Field(default_factory=now_ms)

    def find_player(self, player_id: str) -> Optional[Player]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def is_host(self, player_id: str) -> bool:
        player = self.find_player(player_id)
        return bool(player and player.is_host)

    def turn_owner(self) -> Optional[Player]:
        """Player whose clue is due, cycling through players in join order."""
        if self.phase != Phase.GIVING_CLUES or self.current_turn is None or not self.players:
            return None
        return self.players[self.current_turn % len(self.players)]

    def vote_tally(self) -> Dict[str, int]:
        """Votes per player still in the room; votes for departed players are dropped."""
        present = {p.id for p in self.players}
        tally: Dict[str, int] = {}
        for player in self.players:
            if player.has_voted and player.voted_for in present:
                tally[player.voted_for] = tally.get(player.voted_for, 0) + 1
        return tally

    def snapshot(self) -> dict:
        """Wire representation broadcast to every player in the room.

        The secret word and the imposter's identity are withheld until RESULTS;
        during play each player only learns their role through ROLE_ASSIGNED.
        """
        data = self.model_dump(mode="json", by_alias=True)
        if self.phase in SECRET_PHASES:
            data["secretWord"] = None
            data["imposterId"] = None
            for player in data["players"]:
                player["isImposter"] = None
        owner = self.turn_owner()
        data["currentPlayerId"] = owner.id if owner else None
        return data
