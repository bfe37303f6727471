"""WebSocket message envelopes: {"type": ..., "payload": {...}}."""

from enum import Enum
from typing import Any, Dict, Optional, Tuple, Type
import re

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

import config
from errors import MalformedError
from models import Category, Difficulty


class Intent(str, Enum):
    CREATE_ROOM = "CREATE_ROOM"
    JOIN_ROOM = "JOIN_ROOM"
    LEAVE_ROOM = "LEAVE_ROOM"
    UPDATE_SETTINGS = "UPDATE_SETTINGS"
    START_GAME = "START_GAME"
    SUBMIT_CLUE = "SUBMIT_CLUE"
    SUBMIT_VOTE = "SUBMIT_VOTE"
    NEXT_ROUND = "NEXT_ROUND"


class Event(str, Enum):
    ROOM_CREATED = "ROOM_CREATED"
    ROOM_JOINED = "ROOM_JOINED"
    ROOM_STATE = "ROOM_STATE"
    PLAYER_JOINED = "PLAYER_JOINED"
    PLAYER_LEFT = "PLAYER_LEFT"
    SETTINGS_UPDATED = "SETTINGS_UPDATED"
    GAME_STARTED = "GAME_STARTED"
    ROLE_ASSIGNED = "ROLE_ASSIGNED"
    TURN_CHANGED = "TURN_CHANGED"
    CLUE_SUBMITTED = "CLUE_SUBMITTED"
    VOTING_STARTED = "VOTING_STARTED"
    VOTE_SUBMITTED = "VOTE_SUBMITTED"
    GAME_ENDED = "GAME_ENDED"
    ERROR = "ERROR"


def _clean_text(v: Any) -> str:
    if not isinstance(v, str):
        raise ValueError("must be a string")
    v = re.sub(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]', '', v)
    v = re.sub(r'<[^>]+>', '', v)
    return v.strip()


class Payload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EmptyPayload(Payload):
    pass


class PlayerPayload(Payload):
    player_name: str
    color: str = ""

    @field_validator('player_name', mode='before')
    @classmethod
    def validate_player_name(cls, v: Any) -> str:
        v = _clean_text(v)
        if not v or len(v) > config.MAX_NAME_LENGTH:
            raise ValueError(f'Name must be 1-{config.MAX_NAME_LENGTH} characters')
        return v

    @field_validator('color', mode='before')
    @classmethod
    def validate_color(cls, v: Any) -> str:
        if v is None:
            return ""
        if not isinstance(v, str):
            raise ValueError('Color must be a string')
        return v.strip()[:config.MAX_COLOR_LENGTH]


class CreateRoomPayload(PlayerPayload):
    pass


class JoinRoomPayload(PlayerPayload):
    room_code: str

    @field_validator('room_code', mode='before')
    @classmethod
    def validate_room_code(cls, v: Any) -> str:
        if not isinstance(v, str):
            raise ValueError('Room code must be a string')
        v = v.strip().upper()
        if len(v) != config.ROOM_CODE_LENGTH:
            raise ValueError(f'Room code must be {config.ROOM_CODE_LENGTH} characters')
        return v


class SettingsPatch(Payload):
    """Partial settings; omitted fields keep their current value."""
    category: Optional[Category] = None
    difficulty: Optional[Difficulty] = None
    clue_rounds: Optional[int] = Field(None, ge=config.MIN_CLUE_ROUNDS, le=config.MAX_CLUE_ROUNDS)
    allow_phrases: Optional[bool] = None

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True, mode="json")


class UpdateSettingsPayload(Payload):
    settings: SettingsPatch


class SubmitCluePayload(Payload):
    clue: str

    @field_validator('clue', mode='before')
    @classmethod
    def validate_clue(cls, v: Any) -> str:
        v = _clean_text(v)
        if not v or len(v) > config.MAX_CLUE_LENGTH:
            raise ValueError(f'Clue must be 1-{config.MAX_CLUE_LENGTH} characters')
        return v


class SubmitVotePayload(Payload):
    voted_player_id: str = Field(min_length=1)


INTENT_PAYLOADS: Dict[Intent, Type[Payload]] = {
    Intent.CREATE_ROOM: CreateRoomPayload,
    Intent.JOIN_ROOM: JoinRoomPayload,
    Intent.LEAVE_ROOM: EmptyPayload,
    Intent.UPDATE_SETTINGS: UpdateSettingsPayload,
    Intent.START_GAME: EmptyPayload,
    Intent.SUBMIT_CLUE: SubmitCluePayload,
    Intent.SUBMIT_VOTE: SubmitVotePayload,
    Intent.NEXT_ROUND: EmptyPayload,
}


def _first_error(exc: ValidationError) -> str:
    err = exc.errors()[0]
    msg = err.get("msg", "invalid value")
    return msg[len("Value error, "):] if msg.startswith("Value error, ") else msg


def parse_intent(message: Any) -> Tuple[Optional[Intent], Optional[Payload]]:
    """Validate an envelope against the payload shape of its intent.

    Returns (None, None) for an unrecognized type so the caller can ignore it.
    Raises MalformedError when the envelope or payload has the wrong shape.
    """
    if not isinstance(message, dict) or not isinstance(message.get("type"), str):
        raise MalformedError("Invalid message format")
    try:
        intent = Intent(message["type"])
    except ValueError:
        return None, None

    raw = message.get("payload")
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise MalformedError(f"Invalid payload for {intent.value}")
    try:
        return intent, INTENT_PAYLOADS[intent].model_validate(raw)
    except ValidationError as exc:
        raise MalformedError(f"Invalid payload for {intent.value}: {_first_error(exc)}")


def event(event_type: Event, **payload) -> dict:
    return {"type": event_type.value, "payload": payload}
