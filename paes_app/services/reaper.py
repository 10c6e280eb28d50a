# paes_app/services/reaper.py
"""
시간이 지났는데 제출되지 않은 모의고사를 일괄 봉인하는 배치 작업.
요청 경로에서는 호출하지 않는다 (paes_app/jobs/reap_expired.py 에서 실행).
여러 번 돌려도 결과는 같다.
"""
import logging

from paes_app.services import expiry_guard
from paes_app.services.attempt_repository import AttemptRepository
from paes_app.services.finisher import Finisher

logger = logging.getLogger(__name__)


class ExpiredAttemptReaper:
    def __init__(self, repo: AttemptRepository):
        self.repo = repo
        self.finisher = Finisher(repo)

    def reap(self) -> list[dict]:
        now = self.repo.server_now()
        expired = [
            (a.id, a.time_limit_seconds)
            for a in self.repo.list_unsealed_timed()
            if expiry_guard.evaluate_attempt(a, now).expired
        ]

        sealed = []
        for attempt_id, limit in expired:
            # 소요 시간은 제한 시간으로 기록
            result = self.finisher.seal_attempt(attempt_id, limit)
            if result is None:
                logger.info("[REAPER] attempt=%s already sealed, skipped", attempt_id)
                continue
            sealed.append(result)

        logger.info("[REAPER] expired=%d sealed=%d", len(expired), len(sealed))
        return sealed
