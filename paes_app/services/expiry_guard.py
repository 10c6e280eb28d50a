# paes_app/services/expiry_guard.py
"""
시간 제한 판정 (순수 함수).
- server_now 는 반드시 DB 시계에서 가져온 값을 넘긴다 (AttemptRepository.server_now)
- 백그라운드 타이머 없음: 요청이 들어올 때마다 판정한다
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


@dataclass(frozen=True)
class ExpiryStatus:
    server_now: datetime
    elapsed_seconds: int
    expired: bool


def _as_utc(value: datetime) -> datetime:
    # sqlite 는 tz 없는 값을 돌려준다 (UTC 기준 CURRENT_TIMESTAMP)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def elapsed_seconds(started_at: datetime, server_now: datetime) -> int:
    """TIMESTAMPDIFF(SECOND, started_at, now) 와 같은 정수 초. 음수는 0."""
    delta = _as_utc(server_now) - _as_utc(started_at)
    return max(0, int(delta.total_seconds()))


def evaluate(
    started_at: datetime,
    time_limit_seconds: Optional[int],
    submitted_at: Optional[datetime],
    server_now: datetime,
) -> ExpiryStatus:
    elapsed = elapsed_seconds(started_at, server_now)
    expired = (
        time_limit_seconds is not None
        and elapsed >= int(time_limit_seconds)
        and submitted_at is None
    )
    return ExpiryStatus(server_now=server_now, elapsed_seconds=elapsed, expired=expired)


def evaluate_attempt(attempt, server_now: datetime) -> ExpiryStatus:
    return evaluate(
        attempt.started_at,
        attempt.time_limit_seconds,
        attempt.submitted_at,
        server_now,
    )
