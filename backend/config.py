"""Centralized configuration: all env vars in one place."""
import os
import logging
from dotenv import load_dotenv

load_dotenv()

# --- Server ---
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "")

# --- WebSocket Security ---
WS_RATE_LIMIT_PER_SEC = 10
MAX_WS_MESSAGE_SIZE = 4096  # bytes

# --- Storage Limits ---
MAX_ROOMS = int(os.getenv("MAX_ROOMS", "200"))

# --- Room Codes ---
ROOM_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"  # no I, O, 0, 1
ROOM_CODE_LENGTH = 6
MAX_ROOM_CODE_ATTEMPTS = 100

# --- Game ---
MIN_PLAYERS = 4
MAX_PLAYERS = 10
MAX_NAME_LENGTH = 20
MAX_CLUE_LENGTH = 50
MAX_COLOR_LENGTH = 32
MIN_CLUE_ROUNDS = 2
MAX_CLUE_ROUNDS = 5
ROLE_REVEAL_SECONDS = float(os.getenv("ROLE_REVEAL_SECONDS", "6"))

DEFAULT_SETTINGS = {
    "category": "FOOD",
    "difficulty": "MEDIUM",
    "clue_rounds": 3,
    "allow_phrases": False,
}

# --- Players ---
PLAYER_COLORS = (
    "#FF6B6B", "#4ECDC4", "#FFE66D", "#95E1D3",
    "#F38181", "#AA96DA", "#FCBAD3", "#A8D8EA",
    "#FFAAA5", "#C7CEEA", "#B4F8C8", "#FBE7C6",
    "#A0E7E5", "#FFAEBC", "#B4DDDD", "#E4C1F9",
)

# --- Logging ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILE = os.getenv("LOG_FILE", "")


def setup_logging():
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if LOG_FILE:
        handlers.append(logging.FileHandler(LOG_FILE))
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=handlers,
    )
