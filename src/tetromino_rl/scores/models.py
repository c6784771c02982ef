from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class ScoreSubmission:
    """Final result of a session, as sent to the score API.

    An empty nickname asks the server to assign one.
    """

    nickname: str
    points: int
    level: int
    lines: int
    combo: int

    def to_payload(self) -> Dict[str, Any]:
        return {
            "user_nickname": self.nickname,
            "score_point": int(self.points),
            "score_level": int(self.level),
            "score_line": int(self.lines),
            "score_combo": int(self.combo),
        }


@dataclass(frozen=True)
class LeaderboardEntry:
    nickname: str
    points: int
    level: int
    lines: int
    combo: int
    timestamp: str

    @classmethod
    def from_payload(cls, record: Dict[str, Any]) -> "LeaderboardEntry":
        return cls(
            nickname=record.get("user_nickname") or "",
            points=int(record.get("score_point") or 0),
            level=int(record.get("score_level") or 0),
            lines=int(record.get("score_line") or 0),
            combo=int(record.get("score_combo") or 0),
            timestamp=str(record.get("created_at") or ""),
        )

    @property
    def display_name(self) -> str:
        return self.nickname or "Anonymous"
