# paes_app/services/retake_composer.py
import logging

from paes_app.errors import NotFound, NoCompositionInferred
from paes_app.services.attempt_repository import AttemptRepository
from paes_app.services.session_initializer import SessionInitializer, Section, StartedExam

logger = logging.getLogger(__name__)


class RetakeComposer:
    """
    이전 모의고사와 같은 구성(주제별 문항 수)으로 새 attempt 생성.
    문항 자체는 새로 뽑는다 (같은 모양, 다른 내용).
    """

    def __init__(self, repo: AttemptRepository, initializer: SessionInitializer, suffix: str = " (reintento)"):
        self.repo = repo
        self.initializer = initializer
        self.suffix = suffix

    def infer_sections(self, attempt_id: int) -> list[Section]:
        return [
            Section(topic_id=topic_id, count=count)
            for topic_id, count in self.repo.topic_composition(attempt_id)
        ]

    def retake(self, user_id: int, attempt_id: int) -> StartedExam:
        source = self.repo.get_exam_attempt(attempt_id, user_id)
        if source is None:
            raise NotFound(f"attempt {attempt_id} not found")

        sections = self.infer_sections(source.id)
        if not sections:
            raise NoCompositionInferred(f"could not infer topic composition of attempt {attempt_id}")

        title = f"{source.title or self.initializer.default_title}{self.suffix}"
        started = self.initializer.create(
            user_id=user_id,
            sections=sections,
            title=title,
            time_limit_seconds=source.time_limit_seconds,
        )
        logger.info(
            "[EXAM] retake source=%s new=%s sections=%s",
            attempt_id, started.attempt_id,
            ",".join(f"{s.topic_id}:{s.count}" for s in sections),
        )
        return started
