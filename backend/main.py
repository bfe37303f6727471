"""Imposter backend server: rooms and real-time game state over WebSockets."""

from fastapi import FastAPI, WebSocket, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import uvicorn
import logging
import socket as socketlib

import config
config.setup_logging()

from connections import ConnectionRegistry
from models import Difficulty
from room_store import RoomStore
from socket_manager import SocketManager
import words

logger = logging.getLogger(__name__)

room_store = RoomStore()
connection_registry = ConnectionRegistry()
socket_manager = SocketManager(room_store, connection_registry)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting Imposter backend")
    yield
    socket_manager.shutdown()
    logger.info("Shutting down Imposter backend")


app = FastAPI(title="Imposter API", lifespan=lifespan)


def get_local_ip():
    try:
        s = socketlib.socket(socketlib.AF_INET, socketlib.SOCK_DGRAM)
        s.connect(("8.8.8.8", 80))
        ip = s.getsockname()[0]
        s.close()
        return ip
    except Exception:
        return "127.0.0.1"


@app.get("/system/info")
async def get_system_info():
    return {"ip": get_local_ip()}


# --- Endpoints ---

@app.get("/categories")
async def get_categories():
    return {
        "categories": words.get_categories(),
        "difficulties": [d.value for d in Difficulty],
    }


@app.get("/rooms/{room_code}")
async def get_room(room_code: str):
    room = room_store.get_room(room_code)
    if room is None:
        raise HTTPException(status_code=404, detail="Room not found")
    return room.snapshot()


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    await socket_manager.connect(websocket)


# --- CORS ---

if config.ALLOWED_ORIGINS.strip():
    origins = [o.strip() for o in config.ALLOWED_ORIGINS.split(",")]
else:
    local_ip = get_local_ip()
    origins = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        f"http://{local_ip}:5173",
    ]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=False,
    allow_methods=["GET"],
    allow_headers=["Content-Type"],
)


@app.get("/")
async def root():
    return {"message": "Imposter API is running"}


@app.get("/health")
async def health():
    return {"status": "ok", "game": "Imposter", "rooms": len(room_store),
            "connections": len(connection_registry)}


if __name__ == "__main__":
    uvicorn.run("main:app", host=config.HOST, port=config.PORT, reload=True)
