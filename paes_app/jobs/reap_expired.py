# paes_app/jobs/reap_expired.py
# 시간 초과 후 제출되지 않은 모의고사 일괄 봉인
# python -m paes_app.jobs.reap_expired   (cron 등에서 주기 실행)
import logging

from sqlalchemy.engine import Engine

from paes_app.db.base import make_engine, make_session_factory
from paes_app.services.attempt_repository import AttemptRepository
from paes_app.services.reaper import ExpiredAttemptReaper

logger = logging.getLogger(__name__)


def run(engine: Engine) -> int:
    session_factory = make_session_factory(engine)
    with session_factory() as db:
        sealed = ExpiredAttemptReaper(AttemptRepository(db)).reap()
    for r in sealed:
        logger.info(
            "[REAPER] sealed attempt=%s score=%s/%s",
            r["attempt_id"], r["score"], r["total"],
        )
    return len(sealed)


if __name__ == "__main__":
    from paes_app.config import settings as cfg

    logging.basicConfig(
        level=cfg.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    count = run(make_engine(cfg))
    print(f"sealed {count} expired attempt(s)")
