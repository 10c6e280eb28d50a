# paes_app/models/attempts.py
from sqlalchemy import Column, BigInteger, Integer, String, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship

from paes_app.db.base import Base
from paes_app.db.types import BigIntId
from paes_app.models.correctness import Correctness, CorrectnessType

MODE_PRACTICE = "practice"
MODE_EXAM = "exam"

class Attempt(Base):
    __tablename__ = "attempts"

    id = Column(BigIntId, primary_key=True, index=True)
    user_id = Column(BigInteger, nullable=False, index=True)
    topic_id = Column(BigInteger, ForeignKey("topics.id"), nullable=True)  # exam 모드는 항상 NULL
    mode = Column(String(20), nullable=False, default=MODE_EXAM)  # practice|exam
    title = Column(String(200), nullable=True)

    # started_at / submitted_at 은 항상 DB 시계(now()) 값
    started_at = Column(DateTime(timezone=True), nullable=False)
    time_limit_seconds = Column(Integer, nullable=True)  # NULL = 시간 제한 없음
    submitted_at = Column(DateTime(timezone=True), nullable=True)
    duration_seconds = Column(Integer, nullable=True)
    score = Column(Integer, nullable=False, default=0)

    answers = relationship(
        "AttemptAnswer",
        back_populates="attempt",
        order_by="AttemptAnswer.question_id",
    )

    __table_args__ = (
        Index('ix_attempts_user_id_mode_submitted_at', 'user_id', 'mode', 'submitted_at'),
    )

    @property
    def is_sealed(self) -> bool:
        return self.submitted_at is not None

class AttemptAnswer(Base):
    __tablename__ = "attempt_answers"

    attempt_id = Column(BigInteger, ForeignKey("attempts.id"), primary_key=True)
    question_id = Column(BigInteger, ForeignKey("questions.id"), primary_key=True)
    option_id = Column(BigInteger, ForeignKey("options.id"), nullable=True)  # NULL = 미응답
    is_correct = Column(CorrectnessType(), nullable=True, default=Correctness.UNANSWERED)

    attempt = relationship("Attempt", back_populates="answers")
