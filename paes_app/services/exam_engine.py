# paes_app/services/exam_engine.py
"""
모의고사 엔진 조립
- 요청 단위 Session 하나로 저장소/컴포넌트를 만든다
- 난수 생성기는 주입 (테스트에서 시드 고정)
"""
import random
from typing import Optional

from sqlalchemy.orm import Session

from paes_app.config import Settings, settings as default_settings
from paes_app.services.answer_recorder import AnswerRecorder
from paes_app.services.attempt_repository import AttemptRepository
from paes_app.services.finisher import Finisher
from paes_app.services.progress_reporter import ProgressReporter
from paes_app.services.retake_composer import RetakeComposer
from paes_app.services.review_reporter import ReviewReporter
from paes_app.services.session_initializer import SessionInitializer


class ExamEngine:
    def __init__(
        self,
        db: Session,
        rng: Optional[random.Random] = None,
        settings: Optional[Settings] = None,
    ):
        cfg = settings or default_settings
        self.repo = AttemptRepository(db)
        self.initializer = SessionInitializer(
            self.repo,
            rng=rng,
            default_title=cfg.exam_default_title,
            max_per_section=cfg.exam_max_questions_per_section,
        )
        self.recorder = AnswerRecorder(self.repo)
        self.finisher = Finisher(self.repo)
        self.retakes = RetakeComposer(self.repo, self.initializer, suffix=cfg.exam_retake_suffix)
        self.progress_reporter = ProgressReporter(self.repo)
        self.reviews = ReviewReporter(
            self.repo,
            default_limit=cfg.history_default_limit,
            max_limit=cfg.history_max_limit,
        )

    def start(self, user_id, sections, title=None, time_limit_seconds=None):
        return self.initializer.start(user_id, sections, title=title, time_limit_seconds=time_limit_seconds)

    def answer(self, user_id, attempt_id, question_id, option_id):
        return self.recorder.record(user_id, attempt_id, question_id, option_id)

    def finish(self, user_id, attempt_id, duration_seconds=None):
        return self.finisher.finish(user_id, attempt_id, duration_seconds)

    def retake(self, user_id, attempt_id):
        return self.retakes.retake(user_id, attempt_id)

    def progress(self, user_id, attempt_id):
        return self.progress_reporter.progress(user_id, attempt_id)

    def review(self, user_id, attempt_id):
        return self.reviews.review(user_id, attempt_id)

    def active(self, user_id):
        return self.reviews.active(user_id)

    def history(self, user_id, limit=None, offset=None):
        return self.reviews.history(user_id, limit=limit, offset=offset)
