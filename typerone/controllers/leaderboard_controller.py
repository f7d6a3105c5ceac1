"""Leaderboard controller — placeholder rankings."""

from datetime import date, datetime, timedelta, timezone
from typing import Literal

from fastapi import APIRouter, Query

from typerone.core.responses import ok
from typerone.schemas import Difficulty

router = APIRouter(prefix="/api/leaderboards", tags=["Leaderboards"])

Period = Literal["all", "year", "month", "week", "day"]
Metric = Literal["highest_wpm", "average_wpm", "total_races", "accuracy"]


def _now() -> datetime:
    return datetime.now(timezone.utc)


@router.get("/global")
async def global_leaderboard(
    period: Period = "all",
    metric: Metric = "highest_wpm",
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=50, ge=1, le=100),
):
    return ok({
        "leaderboard": [
            {"rank": 1, "userId": "user_123", "username": "speedking", "wpm": 158, "accuracy": 99.2, "totalRaces": 1247},
            {"rank": 2, "userId": "user_456", "username": "typingmaster", "wpm": 156, "accuracy": 98.8, "totalRaces": 892},
            {"rank": 3, "userId": "user_789", "username": "fastfingers", "wpm": 154, "accuracy": 99.0, "totalRaces": 654},
        ],
        "currentUser": {"rank": 142, "wpm": 89},
        "pagination": {"page": page, "limit": limit, "total": 10247, "pages": 205},
        "period": period,
        "metric": metric,
    })


@router.get("/daily")
async def daily_leaderboard(day: date | None = Query(default=None, alias="date")):
    return ok({
        "leaderboard": [
            {"rank": 1, "username": "dailychamp", "wpm": 145, "accuracy": 98.5, "racesCompleted": 15},
        ],
        "date": (day or _now().date()).isoformat(),
        "totalParticipants": 3421,
    })


@router.get("/weekly")
async def weekly_leaderboard():
    start = _now()
    return ok({
        "leaderboard": [
            {"rank": 1, "username": "weeklypro", "avgWpm": 132, "totalRaces": 87, "totalXp": 12450},
        ],
        "weekStart": start.isoformat(),
        "weekEnd": (start + timedelta(days=7)).isoformat(),
    })


@router.get("/friends")
async def friends_leaderboard():
    return ok({
        "leaderboard": [
            {"rank": 1, "userId": "friend_1", "username": "mybestfriend", "wpm": 95, "accuracy": 97.2, "isFriend": True},
            {"rank": 2, "userId": "current_user", "username": "me", "wpm": 89, "accuracy": 96.5, "isCurrentUser": True},
        ],
    })


@router.get("/difficulty/{difficulty}")
async def difficulty_leaderboard(difficulty: Difficulty, period: Period = "all"):
    return ok({
        "leaderboard": [
            {"rank": 1, "username": "hardcoretyper", "wpm": 142, "accuracy": 98.9, "difficulty": difficulty},
        ],
        "difficulty": difficulty,
        "period": period,
    })


@router.get("/language/{language}")
async def language_leaderboard(language: str):
    return ok({
        "leaderboard": [
            {"rank": 1, "username": "polyglottyper", "wpm": 128, "accuracy": 99.1, "language": language},
        ],
        "language": language,
    })


@router.get("/nearby")
async def nearby_ranks(range_: int = Query(default=5, ge=1, le=50, alias="range")):
    return ok({
        "leaderboard": [
            {"rank": 138, "username": "player1", "wpm": 91},
            {"rank": 139, "username": "player2", "wpm": 90},
            {"rank": 140, "username": "you", "wpm": 89, "isCurrentUser": True},
            {"rank": 141, "username": "player3", "wpm": 89},
            {"rank": 142, "username": "player4", "wpm": 88},
        ][:range_],
        "currentUser": {"rank": 140, "wpm": 89},
    })


@router.get("/hall-of-fame")
async def hall_of_fame():
    return ok({
        "records": [
            {"category": "highest_wpm", "holder": "legendtyper", "value": 212, "achievedAt": "2024-08-15T00:00:00+00:00"},
            {"category": "most_races", "holder": "marathonman", "value": 50247, "achievedAt": _now().isoformat()},
            {"category": "longest_streak", "holder": "consistentpro", "value": 365, "achievedAt": "2024-12-31T00:00:00+00:00"},
        ],
    })


@router.get("/race/{race_id}")
async def race_standings(race_id: str):
    return ok({
        "race": {"id": race_id, "completedAt": _now().isoformat()},
        "standings": [
            {"placement": 1, "username": "winner", "wpm": 124, "accuracy": 98.7, "timeCompleted": 45.2},
            {"placement": 2, "username": "runnerup", "wpm": 118, "accuracy": 97.9, "timeCompleted": 48.7},
        ],
    })
