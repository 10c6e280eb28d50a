# paes_app/services/finisher.py
"""
모의고사 제출(채점 + 봉인)
- score 는 attempt_answers 의 정답 행 수로만 계산 (클라이언트 값 신뢰 안 함)
- 시간이 지난 attempt 도 제출은 허용
- 두 번째 제출은 AlreadySubmitted, 상태는 그대로
"""
import logging
import math
from typing import Optional

from paes_app.errors import NotFound, AlreadySubmitted
from paes_app.services import expiry_guard
from paes_app.services.attempt_repository import AttemptRepository

logger = logging.getLogger(__name__)


def accuracy_pct(score: int, total: int) -> float:
    """소수 첫째 자리 정답률(%). 문항이 없으면 0."""
    if total <= 0:
        return 0.0
    # 반올림은 half-up (round() 의 banker's rounding 아님)
    return math.floor(score * 1000 / total + 0.5) / 10


def clamp_duration(reported: Optional[int], elapsed_seconds: int) -> Optional[int]:
    # 클라이언트 보고값은 [0, 서버 기준 경과 시간] 으로 자른다
    if reported is None:
        return None
    return max(0, min(int(reported), elapsed_seconds))


class Finisher:
    def __init__(self, repo: AttemptRepository):
        self.repo = repo

    def seal_attempt(self, attempt_id: int, duration_seconds: Optional[int]) -> Optional[dict]:
        """채점 후 봉인. 동시에 다른 요청이 먼저 봉인했으면 None."""
        # 문항 수는 attempt 생성 후 바뀌지 않는다. 점수는 봉인 UPDATE 안에서 센다
        total, _ = self.repo.count_answers(attempt_id)
        score = self.repo.seal(attempt_id, self.repo.server_now(), duration_seconds)
        if score is None:
            return None

        return {
            "attempt_id": attempt_id,
            "score": score,
            "total": total,
            "accuracy_pct": accuracy_pct(score, total),
        }

    def finish(
        self,
        user_id: int,
        attempt_id: int,
        duration_seconds: Optional[int] = None,
    ) -> dict:
        attempt = self.repo.get_exam_attempt(attempt_id, user_id)
        if attempt is None:
            raise NotFound(f"attempt {attempt_id} not found")
        if attempt.is_sealed:
            raise AlreadySubmitted(f"attempt {attempt_id} was already submitted")

        status = expiry_guard.evaluate_attempt(attempt, self.repo.server_now())
        duration = clamp_duration(duration_seconds, status.elapsed_seconds)
        if duration_seconds is not None and duration != duration_seconds:
            logger.info(
                "[EXAM] duration clamped attempt=%s reported=%s elapsed=%s",
                attempt_id, duration_seconds, status.elapsed_seconds,
            )

        result = self.seal_attempt(attempt_id, duration)
        if result is None:
            raise AlreadySubmitted(f"attempt {attempt_id} was already submitted")

        logger.info(
            "[EXAM] finished attempt=%s user=%s score=%d/%d expired=%s",
            attempt_id, user_id, result["score"], result["total"], status.expired,
        )
        return result
