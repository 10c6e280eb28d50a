# paes_app/services/answer_recorder.py
import logging
from typing import Optional

from paes_app.errors import NotFound, InvalidQuestion, AlreadySubmitted, Expired
from paes_app.models.correctness import Correctness
from paes_app.services import expiry_guard
from paes_app.services.attempt_repository import AttemptRepository

logger = logging.getLogger(__name__)


class AnswerRecorder:
    """
    한 문항 답안 저장 (마지막 요청이 이김).

    검증 순서: 소유 attempt 존재 → 문항 소속 → 미제출 → 시간 내.
    정오 판정은 저장 시점에 보기 테이블 기준으로 계산한다.
    """

    def __init__(self, repo: AttemptRepository):
        self.repo = repo

    def record(
        self,
        user_id: int,
        attempt_id: int,
        question_id: int,
        option_id: Optional[int],
    ) -> dict:
        attempt = self.repo.get_exam_attempt(attempt_id, user_id)
        if attempt is None:
            raise NotFound(f"attempt {attempt_id} not found")

        answer = self.repo.get_answer(attempt_id, question_id)
        if answer is None:
            raise InvalidQuestion(f"question {question_id} does not belong to attempt {attempt_id}")

        if attempt.is_sealed:
            raise AlreadySubmitted(f"attempt {attempt_id} was already submitted")

        status = expiry_guard.evaluate_attempt(attempt, self.repo.server_now())
        if status.expired:
            logger.info(
                "[EXAM] answer rejected (expired) attempt=%s elapsed=%ss limit=%ss",
                attempt_id, status.elapsed_seconds, attempt.time_limit_seconds,
            )
            raise Expired("time limit reached: answers are no longer accepted")

        if option_id is None:
            correctness = Correctness.UNANSWERED
        else:
            correctness = self.repo.option_correctness(option_id, question_id)

        self.repo.set_answer(answer, option_id, correctness)
        logger.debug(
            "[EXAM] answer attempt=%s question=%s option=%s",
            attempt_id, question_id, option_id,
        )
        return {"question_id": question_id, "option_id": option_id}
