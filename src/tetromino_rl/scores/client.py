from __future__ import annotations

import json
import logging
import os
import threading
import urllib.error
import urllib.request
from typing import Any, Callable, List, Optional

from .models import LeaderboardEntry, ScoreSubmission


logger = logging.getLogger(__name__)

API_URL_ENV = "TETROMINO_API_URL"


class ScoreClient:
    """Talks to the external score API.

    Nothing here raises into the game: network and decoding failures are
    logged and the call behaves as if it never happened.
    """

    def __init__(self, api_url: Optional[str] = None, timeout: float = 5.0,
                 opener: Callable[..., Any] = urllib.request.urlopen) -> None:
        url = api_url if api_url is not None else os.environ.get(API_URL_ENV, "")
        self.api_url = url.rstrip("/")
        self.timeout = float(timeout)
        self._open = opener
        self._pending: List[threading.Thread] = []

    @property
    def configured(self) -> bool:
        return bool(self.api_url)

    @property
    def in_flight(self) -> int:
        return sum(1 for t in self._pending if t.is_alive())

    def submit(self, submission: ScoreSubmission, silent: bool = False) -> Optional[threading.Thread]:
        """Post the score on a daemon thread and return without waiting."""
        if not self.configured:
            logger.error("score API URL is not configured (set %s)", API_URL_ENV)
            return None
        thread = threading.Thread(
            target=self._post_score, args=(submission, silent), name="score-submit", daemon=True
        )
        thread.start()
        self._pending.append(thread)
        return thread

    def close(self, timeout: float = 2.0) -> None:
        """Give outstanding submissions up to ``timeout`` seconds to finish."""
        for thread in self._pending:
            thread.join(timeout)
            if thread.is_alive():
                logger.warning("score submission still in flight at shutdown")
        self._pending = [t for t in self._pending if t.is_alive()]

    def _post_score(self, submission: ScoreSubmission, silent: bool) -> bool:
        body = json.dumps(submission.to_payload()).encode("utf-8")
        request = urllib.request.Request(
            f"{self.api_url}/score/create",
            data=body,
            headers={"Content-Type": "application/json"},
            method="POST",
        )
        try:
            with self._open(request, timeout=self.timeout) as response:
                status = getattr(response, "status", 200)
                if status >= 400:
                    if not silent:
                        logger.error("failed to submit score: HTTP %s", status)
                    return False
        except (urllib.error.URLError, OSError) as exc:
            if not silent:
                logger.error("error submitting score: %s", exc)
            return False
        logger.debug("submitted score %d for %r", submission.points, submission.nickname)
        return True

    def fetch_leaderboard(self) -> List[LeaderboardEntry]:
        if not self.configured:
            logger.error("score API URL is not configured (set %s)", API_URL_ENV)
            return []
        try:
            with self._open(f"{self.api_url}/score/list", timeout=self.timeout) as response:
                status = getattr(response, "status", 200)
                if status >= 400:
                    logger.error("failed to fetch leaderboard: HTTP %s", status)
                    return []
                payload = json.loads(response.read().decode("utf-8"))
        except (urllib.error.URLError, OSError, ValueError) as exc:
            logger.error("error fetching leaderboard: %s", exc)
            return []

        # The API wraps records as {status, message, code, result}
        records = payload.get("result", payload) if isinstance(payload, dict) else payload
        if not isinstance(records, list):
            return []
        entries: List[LeaderboardEntry] = []
        for record in records:
            if not isinstance(record, dict):
                continue
            try:
                entries.append(LeaderboardEntry.from_payload(record))
            except (TypeError, ValueError) as exc:
                logger.error("skipping malformed leaderboard record %r: %s", record, exc)
        return entries
