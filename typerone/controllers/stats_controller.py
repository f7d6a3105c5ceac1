"""Statistics controller — placeholder analytics."""

from datetime import datetime, timedelta, timezone
from typing import Literal

from fastapi import APIRouter

from typerone.core.responses import ok

router = APIRouter(prefix="/api/stats", tags=["Stats"])

StatsPeriod = Literal["7d", "30d", "90d", "1y", "all"]
ProgressPeriod = Literal["7d", "30d", "90d", "1y"]
ProgressMetric = Literal["wpm", "accuracy", "races", "tests"]


def _now() -> datetime:
    return datetime.now(timezone.utc)


@router.get("/overview")
async def overview():
    return ok({
        "stats": {
            "totalTests": 245,
            "totalRaces": 89,
            "totalTime": 14523,  # seconds
            "averageWpm": 85,
            "highestWpm": 142,
            "averageAccuracy": 96.5,
            "consistency": 92,
            "level": 10,
            "xp": 12450,
            "xpToNextLevel": 1550,
            "currentStreak": 7,
            "longestStreak": 24,
            "lastTestAt": _now().isoformat(),
        },
    })


@router.get("/wpm")
async def wpm_stats(period: StatsPeriod = "30d"):
    return ok({
        "wpm": {
            "current": 85,
            "highest": 142,
            "lowest": 45,
            "average": 85,
            "median": 84,
            "mode": 86,
            "improvement": 15,
            "trend": "increasing",
            "chartData": [
                {"date": "2024-10-01", "avgWpm": 70},
                {"date": "2024-10-08", "avgWpm": 75},
                {"date": "2024-10-15", "avgWpm": 80},
                {"date": "2024-10-22", "avgWpm": 83},
                {"date": "2024-10-29", "avgWpm": 85},
            ],
        },
        "period": period,
    })


@router.get("/accuracy")
async def accuracy_stats(period: StatsPeriod = "30d"):
    return ok({
        "accuracy": {
            "current": 96.5,
            "highest": 99.8,
            "lowest": 89.2,
            "average": 96.5,
            "trend": "stable",
            "problemKeys": [
                {"key": "q", "errorRate": 8.5},
                {"key": "z", "errorRate": 6.2},
                {"key": "p", "errorRate": 5.1},
            ],
            "chartData": [
                {"date": "2024-10-01", "accuracy": 95.2},
                {"date": "2024-10-08", "accuracy": 96.0},
                {"date": "2024-10-15", "accuracy": 96.8},
                {"date": "2024-10-22", "accuracy": 96.5},
                {"date": "2024-10-29", "accuracy": 96.5},
            ],
        },
        "period": period,
    })


@router.get("/progress")
async def progress(metric: ProgressMetric = "wpm", period: ProgressPeriod = "30d"):
    return ok({
        "progress": {
            "metric": metric,
            "period": period,
            "startValue": 70,
            "endValue": 85,
            "change": 15,
            "changePercent": 21.4,
            "milestones": [
                {"achievement": "Reached 80 WPM", "date": "2024-10-18"},
                {"achievement": "Completed 200 tests", "date": "2024-10-25"},
            ],
        },
    })


@router.get("/heatmap")
async def heatmap():
    return ok({
        "heatmap": {
            "byHour": [
                {"hour": 9, "tests": 12, "avgWpm": 82},
                {"hour": 14, "tests": 8, "avgWpm": 85},
                {"hour": 20, "tests": 15, "avgWpm": 88},
            ],
            "byDayOfWeek": [
                {"day": "Monday", "tests": 35, "avgWpm": 84},
                {"day": "Tuesday", "tests": 28, "avgWpm": 86},
                {"day": "Wednesday", "tests": 42, "avgWpm": 85},
            ],
            "peakPerformance": {"time": "20:00-22:00", "avgWpm": 92},
        },
    })


@router.get("/compare")
async def compare(username: str | None = None):
    return ok({
        "comparison": {
            "currentUser": {"username": "you", "avgWpm": 85, "accuracy": 96.5, "totalRaces": 89},
            "compareWith": {
                "username": username or "otherguy",
                "avgWpm": 92,
                "accuracy": 97.2,
                "totalRaces": 145,
            },
            "globalAverage": {"avgWpm": 65, "accuracy": 94.2},
        },
    })


@router.get("/records")
async def records():
    return ok({
        "records": {
            "highestWpm": {"value": 142, "testId": "test_123", "achievedAt": "2024-10-15T00:00:00+00:00"},
            "longestRace": {"value": 300, "raceId": "race_456", "achievedAt": "2024-09-20T00:00:00+00:00"},
            "perfectAccuracy": {"count": 12, "lastAchieved": "2024-10-28T00:00:00+00:00"},
            "winStreak": {"current": 3, "longest": 8},
        },
    })


@router.get("/keys")
async def key_stats():
    return ok({
        "keys": {
            "mostPressed": [
                {"key": "e", "count": 12456, "accuracy": 98.2},
                {"key": "t", "count": 9847, "accuracy": 97.8},
                {"key": "a", "count": 8923, "accuracy": 98.5},
            ],
            "mostErrors": [
                {"key": "q", "errorCount": 124, "accuracy": 91.5},
                {"key": "z", "errorCount": 98, "accuracy": 93.8},
                {"key": "p", "errorCount": 87, "accuracy": 94.9},
            ],
            # seconds per key
            "fastestKeys": [
                {"key": "a", "avgSpeed": 0.08},
                {"key": "s", "avgSpeed": 0.09},
            ],
        },
    })


@router.get("/streaks")
async def streaks():
    return ok({
        "streaks": {
            "currentStreak": 7,
            "longestStreak": 24,
            "streakHistory": [
                {"startDate": "2024-10-01", "endDate": "2024-10-24", "days": 24},
                {"startDate": "2024-10-25", "endDate": None, "days": 7},
            ],
            "lastActivity": _now().isoformat(),
        },
    })


@router.get("/export")
async def export(format: Literal["json", "csv"] = "json"):
    return ok({
        "message": "Export started",
        "format": format,
        "downloadUrl": f"https://example.com/exports/user_data_123.{format}",
        "expiresAt": (_now() + timedelta(hours=24)).isoformat(),
    })
