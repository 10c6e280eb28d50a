# paes_app/services/session_initializer.py
"""
모의고사 시작
- 섹션(topic_id, count)마다 문항을 비복원 무작위 추출
- 섹션 간 중복 문항은 처음 나온 것만 유지
- attempt + 미응답 placeholder 를 한 트랜잭션으로 생성
"""
import logging
import random
from dataclasses import dataclass, asdict
from typing import Iterable, List, Optional, Sequence

from paes_app.errors import InvalidSections, NoQuestionsAvailable
from paes_app.services.attempt_repository import AttemptRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Section:
    topic_id: int
    count: int


@dataclass(frozen=True)
class StartedExam:
    attempt_id: int
    title: Optional[str]
    time_limit_seconds: Optional[int]
    total_questions: int

    def to_dict(self) -> dict:
        return asdict(self)


def dedupe_preserving_order(question_ids: Iterable[int]) -> List[int]:
    seen = set()
    picked = []
    for qid in question_ids:
        if qid in seen:
            continue
        seen.add(qid)
        picked.append(qid)
    return picked


class SessionInitializer:
    def __init__(
        self,
        repo: AttemptRepository,
        rng: Optional[random.Random] = None,
        default_title: str = "Ensayo",
        max_per_section: int = 200,
    ):
        self.repo = repo
        self.rng = rng or random.Random()
        self.default_title = default_title
        self.max_per_section = max_per_section

    def _validate(self, sections: Sequence[Section]) -> None:
        if not sections:
            raise InvalidSections("sections must contain at least one (topic_id, count)")
        for sec in sections:
            if sec.count < 1 or sec.count > self.max_per_section:
                raise InvalidSections(
                    f"count for topic {sec.topic_id} must be between 1 and {self.max_per_section}"
                )

    def sample_questions(self, sections: Sequence[Section]) -> List[int]:
        """섹션별 표본을 이어붙이고 중복 제거. 풀이 부족하면 있는 만큼만."""
        picked: List[int] = []
        for sec in sections:
            pool = self.repo.topic_question_ids(sec.topic_id)
            take = min(sec.count, len(pool))
            if take < sec.count:
                logger.info(
                    "[EXAM] topic=%s has %d questions, requested %d",
                    sec.topic_id, len(pool), sec.count,
                )
            picked.extend(self.rng.sample(pool, take))
        return dedupe_preserving_order(picked)

    def create(
        self,
        user_id: int,
        sections: Sequence[Section],
        title: Optional[str],
        time_limit_seconds: Optional[int],
    ) -> StartedExam:
        question_ids = self.sample_questions(sections)
        if not question_ids:
            raise NoQuestionsAvailable("no questions found for the requested sections")

        attempt = self.repo.create_exam_attempt(
            user_id=user_id,
            title=title,
            time_limit_seconds=time_limit_seconds,
            question_ids=question_ids,
        )
        logger.info(
            "[EXAM] started attempt=%s user=%s questions=%d limit=%s",
            attempt.id, user_id, len(question_ids), time_limit_seconds,
        )
        return StartedExam(
            attempt_id=attempt.id,
            title=attempt.title,
            time_limit_seconds=attempt.time_limit_seconds,
            total_questions=len(question_ids),
        )

    def start(
        self,
        user_id: int,
        sections: Sequence[Section],
        title: Optional[str] = None,
        time_limit_seconds: Optional[int] = None,
    ) -> StartedExam:
        # 섹션당 상한은 클라이언트 입력에만 적용 (retake 는 create 를 바로 호출)
        self._validate(sections)
        clean_title = (title or "").strip() or self.default_title
        return self.create(user_id, sections, clean_title, time_limit_seconds)
