# paes_app/services/attempt_repository.py
"""
attempts / attempt_answers 저장소.
- 요청마다 만들어지는 Session 을 주입받는다 (전역 커넥션 풀 직접 참조 없음)
- 여러 행을 쓰는 작업은 하나의 트랜잭션으로 처리하고, 실패하면 전부 롤백한다
- 시간 계산용 현재 시각은 항상 DB 시계에서 읽는다
"""
import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import select, update, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from paes_app.errors import StorageError
from paes_app.models.attempts import Attempt, AttemptAnswer, MODE_EXAM
from paes_app.models.correctness import Correctness
from paes_app.models.questions import Question, Option

logger = logging.getLogger(__name__)


class AttemptRepository:
    def __init__(self, db: Session):
        self.db = db

    # ---------- 시계 ----------
    def server_now(self) -> datetime:
        value = self.db.execute(select(func.now())).scalar_one()
        if isinstance(value, str):
            value = datetime.fromisoformat(value)
        return value

    # ---------- 조회 ----------
    def get_exam_attempt(self, attempt_id: int, user_id: int) -> Optional[Attempt]:
        return self.db.execute(
            select(Attempt).where(
                Attempt.id == attempt_id,
                Attempt.user_id == user_id,
                Attempt.mode == MODE_EXAM,
            )
        ).scalar_one_or_none()

    def get_answer(self, attempt_id: int, question_id: int) -> Optional[AttemptAnswer]:
        return self.db.get(AttemptAnswer, (attempt_id, question_id))

    def list_answers(self, attempt_id: int) -> List[AttemptAnswer]:
        return list(
            self.db.execute(
                select(AttemptAnswer)
                .where(AttemptAnswer.attempt_id == attempt_id)
                .order_by(AttemptAnswer.question_id)
            ).scalars()
        )

    def topic_question_ids(self, topic_id: int) -> List[int]:
        # 정렬해서 돌려줘야 같은 시드에서 같은 표본이 나온다
        return list(
            self.db.execute(
                select(Question.id).where(Question.topic_id == topic_id).order_by(Question.id)
            ).scalars()
        )

    def option_correctness(self, option_id: int, question_id: int) -> Correctness:
        flag = self.db.execute(
            select(Option.is_correct).where(
                Option.id == option_id,
                Option.question_id == question_id,
            )
        ).scalar_one_or_none()
        # 다른 문항의 보기는 오류가 아니라 오답 처리
        return Correctness.CORRECT if flag else Correctness.INCORRECT

    def count_answers(self, attempt_id: int) -> Tuple[int, int]:
        """(total, correct)"""
        total = self.db.execute(
            select(func.count()).select_from(AttemptAnswer).where(AttemptAnswer.attempt_id == attempt_id)
        ).scalar_one()
        correct = self.db.execute(
            select(func.count())
            .select_from(AttemptAnswer)
            .where(
                AttemptAnswer.attempt_id == attempt_id,
                AttemptAnswer.is_correct == Correctness.CORRECT,
            )
        ).scalar_one()
        return int(total or 0), int(correct or 0)

    def topic_composition(self, attempt_id: int) -> List[Tuple[int, int]]:
        rows = self.db.execute(
            select(Question.topic_id, func.count())
            .select_from(AttemptAnswer)
            .join(Question, Question.id == AttemptAnswer.question_id)
            .where(AttemptAnswer.attempt_id == attempt_id)
            .group_by(Question.topic_id)
            .order_by(Question.topic_id)
        ).all()
        return [(int(topic_id), int(cnt)) for topic_id, cnt in rows]

    def questions_by_id(self, question_ids: Iterable[int]) -> Dict[int, Question]:
        ids = list(question_ids)
        if not ids:
            return {}
        rows = self.db.execute(select(Question).where(Question.id.in_(ids))).scalars()
        return {q.id: q for q in rows}

    def options_by_question(self, question_ids: Iterable[int]) -> Dict[int, List[Option]]:
        ids = list(question_ids)
        grouped: Dict[int, List[Option]] = {qid: [] for qid in ids}
        if not ids:
            return grouped
        rows = self.db.execute(
            select(Option)
            .where(Option.question_id.in_(ids))
            .order_by(Option.question_id, Option.label, Option.id)
        ).scalars()
        for o in rows:
            grouped.setdefault(o.question_id, []).append(o)
        return grouped

    def list_active(self, user_id: int) -> List[Attempt]:
        return list(
            self.db.execute(
                select(Attempt)
                .where(
                    Attempt.user_id == user_id,
                    Attempt.mode == MODE_EXAM,
                    Attempt.submitted_at.is_(None),
                )
                .order_by(Attempt.started_at.desc(), Attempt.id.desc())
            ).scalars()
        )

    def count_history(self, user_id: int) -> int:
        return int(
            self.db.execute(
                select(func.count())
                .select_from(Attempt)
                .where(
                    Attempt.user_id == user_id,
                    Attempt.mode == MODE_EXAM,
                    Attempt.submitted_at.is_not(None),
                )
            ).scalar_one()
            or 0
        )

    def list_history(self, user_id: int, limit: int, offset: int) -> List[Tuple[Attempt, int]]:
        """제출된 모의고사 + 문항 수, 최근 제출 순."""
        total_questions = func.count(AttemptAnswer.question_id)
        rows = self.db.execute(
            select(Attempt, total_questions)
            .outerjoin(AttemptAnswer, AttemptAnswer.attempt_id == Attempt.id)
            .where(
                Attempt.user_id == user_id,
                Attempt.mode == MODE_EXAM,
                Attempt.submitted_at.is_not(None),
            )
            .group_by(Attempt.id)
            .order_by(Attempt.submitted_at.desc(), Attempt.id.desc())
            .limit(limit)
            .offset(offset)
        ).all()
        return [(att, int(cnt or 0)) for att, cnt in rows]

    def list_unsealed_timed(self) -> List[Attempt]:
        return list(
            self.db.execute(
                select(Attempt)
                .where(
                    Attempt.mode == MODE_EXAM,
                    Attempt.submitted_at.is_(None),
                    Attempt.time_limit_seconds.is_not(None),
                )
                .order_by(Attempt.id)
            ).scalars()
        )

    # ---------- 쓰기 ----------
    def create_exam_attempt(
        self,
        user_id: int,
        title: Optional[str],
        time_limit_seconds: Optional[int],
        question_ids: List[int],
    ) -> Attempt:
        """attempt 1행 + attempt_answers N행을 한 트랜잭션으로 생성."""
        try:
            attempt = Attempt(
                user_id=user_id,
                topic_id=None,
                mode=MODE_EXAM,
                title=title,
                score=0,
                started_at=self.server_now(),
                time_limit_seconds=time_limit_seconds,
                submitted_at=None,
            )
            self.db.add(attempt)
            self.db.flush()  # attempt.id 생성

            self.db.add_all(
                AttemptAnswer(
                    attempt_id=attempt.id,
                    question_id=qid,
                    option_id=None,
                    is_correct=Correctness.UNANSWERED,
                )
                for qid in question_ids
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("[EXAM] create attempt failed user=%s", user_id)
            raise StorageError("attempt_creation_failed") from e

        self.db.refresh(attempt)
        return attempt

    def set_answer(self, answer: AttemptAnswer, option_id: Optional[int], correctness: Correctness) -> None:
        try:
            self.db.execute(
                update(AttemptAnswer)
                .where(
                    AttemptAnswer.attempt_id == answer.attempt_id,
                    AttemptAnswer.question_id == answer.question_id,
                )
                .values(option_id=option_id, is_correct=correctness)
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception(
                "[EXAM] save answer failed attempt=%s question=%s",
                answer.attempt_id, answer.question_id,
            )
            raise StorageError("answer_save_failed") from e

    def seal(
        self,
        attempt_id: int,
        submitted_at: datetime,
        duration_seconds: Optional[int],
    ) -> Optional[int]:
        """
        submitted_at IS NULL 인 경우에만 봉인한다.
        score 는 같은 UPDATE 안에서 정답 행 수로 계산하고, 저장된 점수를 돌려준다.
        이미 다른 요청이 봉인했으면 None.
        """
        correct_rows = (
            select(func.count())
            .select_from(AttemptAnswer)
            .where(
                AttemptAnswer.attempt_id == attempt_id,
                AttemptAnswer.is_correct == Correctness.CORRECT,
            )
            .scalar_subquery()
        )
        values = {"score": correct_rows, "submitted_at": submitted_at}
        if duration_seconds is not None:
            values["duration_seconds"] = duration_seconds
        try:
            result = self.db.execute(
                update(Attempt)
                .where(Attempt.id == attempt_id, Attempt.submitted_at.is_(None))
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            score = None
            if result.rowcount == 1:
                score = self.db.execute(
                    select(Attempt.score).where(Attempt.id == attempt_id)
                ).scalar_one()
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("[EXAM] seal failed attempt=%s", attempt_id)
            raise StorageError("attempt_finish_failed") from e
        return score
