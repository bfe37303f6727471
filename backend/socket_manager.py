"""WebSocket session handling for Imposter rooms."""

from fastapi import WebSocket, WebSocketDisconnect
from typing import Awaitable, Callable, Dict, List, Optional
import json
import time
import asyncio
import logging
import random
import uuid

import config
from connections import ConnectionRegistry
from errors import (
    AlreadyInRoomError, CapacityError, GameError, InvalidPhaseError,
    MalformedError, NotFoundError, RateLimitedError, UnauthorizedError,
)
from models import Phase, Player, Room, Settings
from protocol import (
    CreateRoomPayload, Event, Intent, JoinRoomPayload, Payload, PlayerPayload,
    SubmitCluePayload, SubmitVotePayload, UpdateSettingsPayload,
    event, parse_intent,
)
from room_store import RoomStore

logger = logging.getLogger(__name__)


class Session:
    """Per-connection state: unbound until CREATE_ROOM or JOIN_ROOM succeeds."""

    def __init__(self, websocket: WebSocket):
        self.websocket = websocket
        self.player_id: Optional[str] = None
        self.room_code: Optional[str] = None
        self.msg_timestamps: List[float] = []

    @property
    def bound(self) -> bool:
        return self.player_id is not None and self.room_code is not None

    def bind(self, player_id: str, room_code: str):
        self.player_id = player_id
        self.room_code = room_code

    def unbind(self):
        self.player_id = None
        self.room_code = None

    def rate_limited(self) -> bool:
        now = time.time()
        self.msg_timestamps[:] = [t for t in self.msg_timestamps if now - t < 1.0]
        if len(self.msg_timestamps) >= config.WS_RATE_LIMIT_PER_SEC:
            return True
        self.msg_timestamps.append(now)
        return False


class SocketManager:
    def __init__(self, store: RoomStore, registry: ConnectionRegistry,
                 reveal_delay: Optional[float] = None):
        self.store = store
        self.registry = registry
        self.reveal_delay = config.ROLE_REVEAL_SECONDS if reveal_delay is None else reveal_delay
        self.reveal_tasks: Dict[str, asyncio.Task] = {}
        self.handlers: Dict[Intent, Callable[[Session, Payload], Awaitable[None]]] = {
            Intent.CREATE_ROOM: self._handle_create_room,
            Intent.JOIN_ROOM: self._handle_join_room,
            Intent.LEAVE_ROOM: self._handle_leave_room,
            Intent.UPDATE_SETTINGS: self._handle_update_settings,
            Intent.START_GAME: self._handle_start_game,
            Intent.SUBMIT_CLUE: self._handle_submit_clue,
            Intent.SUBMIT_VOTE: self._handle_submit_vote,
            Intent.NEXT_ROUND: self._handle_next_round,
        }

    def reset(self):
        self.shutdown()
        self.store.clear()
        self.registry.clear()

    def shutdown(self):
        for task in self.reveal_tasks.values():
            task.cancel()
        self.reveal_tasks.clear()

    # --- Connection loop ---

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        session = Session(websocket)

        try:
            while True:
                frame = await websocket.receive()
                if frame["type"] == "websocket.disconnect":
                    raise WebSocketDisconnect(frame.get("code", 1000))

                data = frame.get("text")
                if data is None:
                    await self._send_error(websocket, MalformedError("Binary frames are not supported"))
                    continue

                if len(data.encode("utf-8")) > config.MAX_WS_MESSAGE_SIZE:
                    await self._send_error(websocket, MalformedError("Message too large"))
                    continue

                if session.rate_limited():
                    await self._send_error(websocket, RateLimitedError("Too many messages"))
                    continue

                try:
                    message = json.loads(data)
                except json.JSONDecodeError:
                    await self._send_error(websocket, MalformedError("Invalid message format"))
                    continue

                await self.handle_message(session, message)
        except WebSocketDisconnect:
            logger.info("Client %s disconnected", session.player_id or "(unbound)")
        except Exception:
            logger.exception("WebSocket error for client %s", session.player_id or "(unbound)")
        finally:
            await self._leave(session)

    async def handle_message(self, session: Session, message):
        try:
            intent, payload = parse_intent(message)
            if intent is None:
                logger.warning("Unknown message type: %s", message.get("type"))
                return
            await self.handlers[intent](session, payload)
        except GameError as e:
            await self._send_error(session.websocket, e)
        except Exception:
            logger.exception("Error handling message from %s", session.player_id or "(unbound)")
            await self._send(session.websocket, event(
                Event.ERROR, message="Internal server error", code="INTERNAL"))

    # --- Sending ---

    async def _send(self, websocket: WebSocket, message: dict) -> bool:
        try:
            await websocket.send_json(message)
            return True
        except Exception:
            # The socket's own receive loop notices the close and runs the leave path.
            logger.debug("Dropped %s to a closed socket", message.get("type"))
            return False

    async def _send_error(self, websocket: WebSocket, error: GameError):
        await self._send(websocket, event(Event.ERROR, **error.to_payload()))

    async def broadcast(self, room_code: str, message: dict):
        for _, websocket in self.registry.room_connections(room_code):
            await self._send(websocket, message)

    # --- Validation helpers ---

    def _require_membership(self, session: Session) -> Room:
        if not session.bound:
            raise NotFoundError("You are not in a room")
        room = self.store.get_room(session.room_code)
        if room is None or room.find_player(session.player_id) is None:
            raise NotFoundError("Room not found")
        return room

    def _require_host(self, session: Session, message: str) -> Room:
        room = self._require_membership(session)
        if not room.is_host(session.player_id):
            raise UnauthorizedError(message)
        return room

    def _new_player(self, payload: PlayerPayload) -> Player:
        return Player(
            id=str(uuid.uuid4()),
            name=payload.player_name,
            color=payload.color or random.choice(config.PLAYER_COLORS),
        )

    def _bind(self, session: Session, player_id: str, room_code: str):
        session.bind(player_id, room_code)
        self.registry.register(player_id, session.websocket, room_code)

    # --- Intent handlers ---

    async def _handle_create_room(self, session: Session, payload: CreateRoomPayload):
        if session.bound:
            raise AlreadyInRoomError("You are already in a room")
        if len(self.store) >= config.MAX_ROOMS:
            raise CapacityError("Too many active rooms. Try again later.")

        room = self.store.create_room(Settings.defaults())
        player = self._new_player(payload)
        room = self.store.add_player(room.code, player)
        self._bind(session, player.id, room.code)

        await self._send(session.websocket, event(
            Event.ROOM_CREATED, playerId=player.id, room=room.snapshot()))

    async def _handle_join_room(self, session: Session, payload: JoinRoomPayload):
        if session.bound:
            raise AlreadyInRoomError("You are already in a room")

        room = self.store.get_room(payload.room_code)
        if room is None:
            raise NotFoundError("Room not found")
        if room.phase != Phase.LOBBY:
            raise CapacityError("Game already in progress")
        if len(room.players) >= config.MAX_PLAYERS:
            raise CapacityError("Room is full")

        player = self._new_player(payload)
        room = self.store.add_player(room.code, player)
        self._bind(session, player.id, room.code)

        await self._send(session.websocket, event(
            Event.ROOM_JOINED, playerId=player.id, room=room.snapshot()))
        await self.broadcast(room.code, event(Event.PLAYER_JOINED, room=room.snapshot()))

    async def _handle_leave_room(self, session: Session, payload: Payload):
        await self._leave(session)

    async def _leave(self, session: Session):
        """Explicit leave and dropped connection share this path."""
        if not session.bound:
            return
        player_id, room_code = session.player_id, session.room_code
        session.unbind()
        self.registry.unregister(player_id)

        room = self.store.get_room(room_code)
        was_voting = room is not None and room.phase == Phase.VOTING
        try:
            room = self.store.remove_player(room_code, player_id)
        except NotFoundError:
            logger.info("Player %s was no longer in room %s", player_id, room_code)
            return

        if room is None:
            self._cancel_reveal(room_code)
            return
        await self.broadcast(room.code, event(Event.PLAYER_LEFT, room=room.snapshot()))
        if was_voting and room.phase == Phase.RESULTS:
            await self.broadcast(room.code, event(
                Event.GAME_ENDED, room=room.snapshot(), tally=room.vote_tally()))

    async def _handle_update_settings(self, session: Session, payload: UpdateSettingsPayload):
        room = self._require_host(session, "Only the host can change settings")
        if room.phase != Phase.LOBBY:
            raise InvalidPhaseError("Settings can only be changed in the lobby")

        merged = {**room.settings.model_dump(), **payload.settings.changes()}
        room = self.store.update_room(room.code, settings=Settings(**merged))
        await self.broadcast(room.code, event(Event.SETTINGS_UPDATED, room=room.snapshot()))

    async def _handle_start_game(self, session: Session, payload: Payload):
        room = self._require_host(session, "Only the host can start the game")
        if room.phase != Phase.LOBBY:
            raise InvalidPhaseError("Game already in progress")

        room, imposter, secret_word = self.store.start_game(room.code)

        for player in room.players:
            websocket = self.registry.get_connection(player.id)
            if websocket is None:
                continue
            role = {"isImposter": player.id == imposter.id}
            if player.id != imposter.id:
                role["secretWord"] = secret_word
            await self._send(websocket, event(Event.ROLE_ASSIGNED, **role))

        await self.broadcast(room.code, event(Event.GAME_STARTED, room=room.snapshot()))
        self._schedule_reveal(room.code)

    async def _handle_submit_clue(self, session: Session, payload: SubmitCluePayload):
        room = self._require_membership(session)
        room = self.store.submit_clue(room.code, session.player_id, payload.clue)

        if room.phase == Phase.VOTING:
            await self.broadcast(room.code, event(Event.VOTING_STARTED, room=room.snapshot()))
        else:
            await self.broadcast(room.code, event(Event.CLUE_SUBMITTED, room=room.snapshot()))

    async def _handle_submit_vote(self, session: Session, payload: SubmitVotePayload):
        room = self._require_membership(session)
        room = self.store.submit_vote(room.code, session.player_id, payload.voted_player_id)

        if room.phase == Phase.RESULTS:
            await self.broadcast(room.code, event(
                Event.GAME_ENDED, room=room.snapshot(), tally=room.vote_tally()))
        else:
            await self.broadcast(room.code, event(Event.VOTE_SUBMITTED, room=room.snapshot()))

    async def _handle_next_round(self, session: Session, payload: Payload):
        room = self._require_host(session, "Only the host can start the next round")
        room = self.store.next_round(room.code)
        await self.broadcast(room.code, event(Event.ROOM_STATE, room=room.snapshot()))

    # --- Role reveal timer ---

    def _schedule_reveal(self, room_code: str):
        self._cancel_reveal(room_code)
        self.reveal_tasks[room_code] = asyncio.create_task(self._reveal_timer(room_code))

    def _cancel_reveal(self, room_code: str):
        task = self.reveal_tasks.pop(room_code, None)
        if task:
            task.cancel()

    async def _reveal_timer(self, room_code: str):
        try:
            await asyncio.sleep(self.reveal_delay)
            await self.end_role_reveal(room_code)
        except asyncio.CancelledError:
            pass
        except Exception:
            logger.exception("Error ending role reveal in room %s", room_code)
        finally:
            if self.reveal_tasks.get(room_code) is asyncio.current_task():
                del self.reveal_tasks[room_code]

    async def end_role_reveal(self, room_code: str):
        # The room may have emptied while the timer was pending.
        room = self.store.get_room(room_code)
        if room is None or room.phase != Phase.ROLE_REVEAL:
            return
        room = self.store.update_room(room_code, phase=Phase.GIVING_CLUES)
        logger.info("Room %s started giving clues", room_code)
        await self.broadcast(room_code, event(Event.TURN_CHANGED, room=room.snapshot()))
