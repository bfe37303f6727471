"""Recoverable game errors. Each one maps to a targeted ERROR event."""


class GameError(Exception):
    code = "GAME_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict:
        return {"message": self.message, "code": self.code}


class NotFoundError(GameError):
    code = "NOT_FOUND"


class UnauthorizedError(GameError):
    code = "UNAUTHORIZED"


class InvalidPhaseError(GameError):
    code = "INVALID_PHASE"


class NotYourTurnError(GameError):
    code = "NOT_YOUR_TURN"


class CapacityError(GameError):
    code = "CAPACITY"


class RateLimitedError(CapacityError):
    """Too many frames from one connection; shares the CAPACITY code."""


class MalformedError(GameError):
    code = "MALFORMED"


class AlreadyInRoomError(GameError):
    code = "ALREADY_IN_ROOM"
