"""Score API collaborator: submission payloads and the leaderboard client."""

from .models import LeaderboardEntry, ScoreSubmission
from .client import API_URL_ENV, ScoreClient

__all__ = [
    "LeaderboardEntry",
    "ScoreSubmission",
    "ScoreClient",
    "API_URL_ENV",
]
