# paes_app/models/correctness.py
# attempt_answers.is_correct (NULL/TRUE/FALSE) 를 명시적인 상태값으로 다룬다.
import enum

from sqlalchemy import Boolean
from sqlalchemy.types import TypeDecorator


class Correctness(enum.Enum):
    UNANSWERED = "unanswered"
    CORRECT = "correct"
    INCORRECT = "incorrect"

    @classmethod
    def from_flag(cls, flag: bool | None) -> "Correctness":
        if flag is None:
            return cls.UNANSWERED
        return cls.CORRECT if flag else cls.INCORRECT

    def to_flag(self) -> bool | None:
        if self is Correctness.UNANSWERED:
            return None
        return self is Correctness.CORRECT


class CorrectnessType(TypeDecorator):
    """DB에는 nullable boolean, 파이썬에서는 Correctness."""

    impl = Boolean
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, Correctness):
            return value.to_flag()
        return bool(value)

    def process_result_value(self, value, dialect):
        return Correctness.from_flag(None if value is None else bool(value))
