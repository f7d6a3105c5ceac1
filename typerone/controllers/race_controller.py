"""
Multiplayer race controller.

REST side of race state only; live gameplay belongs on a socket
channel.  Responses are placeholders.
"""

import time
from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Query, status

from typerone.core.responses import ok
from typerone.schemas import (
    CreateRaceRequest,
    FinishRaceRequest,
    QuickMatchRequest,
    ReadyStatusRequest,
)

router = APIRouter(prefix="/api/races", tags=["Races"])

RACE_TEXT = "The quick brown fox jumps over the lazy dog..."


def _now() -> datetime:
    return datetime.now(timezone.utc)


@router.post("/create", status_code=status.HTTP_201_CREATED)
async def create_race(body: CreateRaceRequest):
    return ok({
        "race": {
            "id": f"race_{int(time.time() * 1000)}",
            "mode": body.mode,
            "status": "waiting",
            "maxPlayers": body.max_players,
            "currentPlayers": 1,
            "difficulty": body.difficulty,
            "duration": body.duration,
            "hostId": "user_123",
            "createdAt": _now().isoformat(),
        },
    })


# Static paths are declared before /{race_id} so they are not captured by it.

@router.get("/lobby")
async def lobby():
    created = _now().isoformat()
    return ok({
        "races": [
            {
                "id": "race_1",
                "mode": "public",
                "difficulty": "medium",
                "currentPlayers": 3,
                "maxPlayers": 5,
                "status": "waiting",
                "host": {"username": "speedtyper"},
                "createdAt": created,
            },
            {
                "id": "race_2",
                "mode": "public",
                "difficulty": "hard",
                "currentPlayers": 2,
                "maxPlayers": 4,
                "status": "waiting",
                "host": {"username": "typingpro"},
                "createdAt": created,
            },
        ],
    })


@router.post("/quick-match")
async def quick_match(body: QuickMatchRequest):
    return ok({
        "race": {
            "id": f"race_quickmatch_{int(time.time() * 1000)}",
            "status": "waiting",
            "difficulty": body.difficulty,
            "currentPlayers": 3,
            "maxPlayers": 5,
        },
    })


@router.get("/history")
async def race_history(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
):
    return ok({
        "races": [
            {
                "id": "race_123",
                "placement": 1,
                "totalPlayers": 4,
                "wpm": 98,
                "accuracy": 96.8,
                "xpEarned": 200,
                "completedAt": _now().isoformat(),
            },
        ],
        "pagination": {"page": page, "limit": limit, "total": 89, "pages": 5},
    })


@router.get("/{race_id}")
async def get_race(race_id: str):
    now = _now()
    return ok({
        "race": {
            "id": race_id,
            "status": "active",
            "text": RACE_TEXT,
            "players": [
                {"id": "user_123", "username": "speedtyper", "progress": 85, "wpm": 94, "position": 1},
                {"id": "user_456", "username": "fastfingers", "progress": 72, "wpm": 89, "position": 2},
            ],
            "startedAt": (now - timedelta(seconds=30)).isoformat(),
        },
    })


@router.post("/{race_id}/join")
async def join_race(race_id: str):
    return ok({
        "race": {
            "id": race_id,
            "status": "waiting",
            "players": [
                {"id": "user_123", "username": "speedtyper", "ready": True},
                {"id": "user_456", "username": "fastfingers", "ready": False},
            ],
            "currentPlayers": 2,
            "maxPlayers": 5,
        },
    })


@router.post("/{race_id}/leave")
async def leave_race(race_id: str):
    return ok({"message": "Left race successfully"})


@router.post("/{race_id}/ready")
async def set_ready(race_id: str, body: ReadyStatusRequest):
    return ok({"message": "Ready status updated", "ready": body.ready, "allReady": False})


@router.post("/{race_id}/start")
async def start_race(race_id: str):
    return ok({
        "race": {
            "id": race_id,
            "status": "countdown",
            "text": RACE_TEXT,
            "startsAt": (_now() + timedelta(seconds=3)).isoformat(),
        },
    })


@router.post("/{race_id}/finish")
async def finish_race(race_id: str, body: FinishRaceRequest):
    return ok({
        "result": {
            "placement": 2,
            "wpm": 92,
            "accuracy": 97.3,
            "xpEarned": 150,
            "newAchievements": [],
        },
    })


@router.delete("/{race_id}")
async def cancel_race(race_id: str):
    return ok({"message": "Race cancelled successfully"})
