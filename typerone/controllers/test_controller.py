"""
Typing-test controller (solo mode).

Placeholder data until results are persisted; request shapes are
validated already so the frontend contract is fixed.
"""

import time
from datetime import datetime, timezone
from typing import Literal

from fastapi import APIRouter, Query, status

from typerone.core.responses import ok
from typerone.schemas import (
    AnalyzeTextRequest,
    Difficulty,
    SubmitDailyChallengeRequest,
    SubmitTestRequest,
)

router = APIRouter(prefix="/api/tests", tags=["Tests"])

SAMPLE_TEXT = (
    "The quick brown fox jumps over the lazy dog. Pack my box with five dozen liquor jugs."
)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _stamp() -> int:
    return int(time.time() * 1000)


@router.get("/new")
async def new_test(
    mode: Literal["time", "words", "custom"] = "time",
    difficulty: Difficulty = "medium",
    language: str = Query(default="en", min_length=2, max_length=5),
    duration: int = Query(default=60, gt=0),
):
    return ok({
        "test": {
            "id": f"test_{_stamp()}",
            "text": SAMPLE_TEXT,
            "mode": mode,
            "difficulty": difficulty,
            "duration": duration,
            "wordCount": len(SAMPLE_TEXT.split()),
            "language": language,
        },
    })


@router.post("/submit", status_code=status.HTTP_201_CREATED)
async def submit_test(body: SubmitTestRequest):
    return ok({
        "result": {
            "id": f"result_{_stamp()}",
            "testId": body.test_id,
            "wpm": 85,
            "rawWpm": 88,
            "accuracy": 96.5,
            "correctChars": 240,
            "incorrectChars": 9,
            "duration": body.duration,
            "consistency": 92,
            "personalBest": False,
            "createdAt": _now().isoformat(),
        },
    })


@router.get("/results/{result_id}")
async def get_result(result_id: str):
    return ok({
        "result": {
            "id": result_id,
            "wpm": 85,
            "accuracy": 96.5,
            "duration": 60,
            "mode": "time",
            "difficulty": "medium",
            "text": "The quick brown fox...",
            "chartData": {"wpm": [82, 85, 88, 87, 85], "errors": [0, 1, 2, 1, 0]},
            "completedAt": _now().isoformat(),
        },
    })


@router.get("/texts")
async def list_texts(difficulty: Difficulty | None = None):
    texts = [
        {
            "id": "text_1",
            "title": "Common English Words",
            "difficulty": "easy",
            "length": 200,
            "category": "practice",
            "language": "en",
        },
        {
            "id": "text_2",
            "title": "Programming Quotes",
            "difficulty": "medium",
            "length": 350,
            "category": "quotes",
            "language": "en",
        },
    ]
    if difficulty is not None:
        texts = [text for text in texts if text["difficulty"] == difficulty]
    return ok({"texts": texts})


@router.get("/daily")
async def daily_challenge():
    today = _now().date().isoformat()
    return ok({
        "challenge": {
            "id": f"daily_{today}",
            "date": today,
            "text": "Today is a beautiful day to practice typing skills and improve accuracy.",
            "difficulty": "medium",
            "participantCount": 1247,
            "topScore": {"username": "speedking", "wpm": 158, "accuracy": 99.2},
        },
    })


@router.post("/daily/submit", status_code=status.HTTP_201_CREATED)
async def submit_daily_challenge(body: SubmitDailyChallengeRequest):
    return ok({
        "result": {
            "challengeId": body.challenge_id,
            "wpm": 89,
            "accuracy": 97.1,
            "rank": 342,
            "totalParticipants": 1248,
        },
    })


@router.post("/analyze")
async def analyze_text(body: AnalyzeTextRequest):
    words = body.text.split()
    average = sum(len(word) for word in words) / len(words) if words else 0.0
    return ok({
        "analysis": {
            "wordCount": len(words),
            "charCount": len(body.text),
            "estimatedDifficulty": "medium",
            "commonWords": 45,
            "rareWords": 5,
            "averageWordLength": round(average, 1),
        },
    })
