import pytest

from paes_app.errors import NotFound, AlreadySubmitted
from paes_app.models.attempts import Attempt
from paes_app.services.finisher import accuracy_pct, clamp_duration
from paes_app.services.session_initializer import Section

from conftest import option_id


def _answer_all(exam_engine, db, attempt_id, label):
    for a in exam_engine.repo.list_answers(attempt_id):
        exam_engine.answer(1, attempt_id, a.question_id, option_id(db, a.question_id, label))


def test_accuracy_pct_one_decimal_half_up():
    assert accuracy_pct(3, 3) == 100.0
    assert accuracy_pct(1, 8) == 12.5
    assert accuracy_pct(2, 3) == 66.7
    assert accuracy_pct(1, 3) == 33.3
    assert accuracy_pct(1, 16) == 6.3
    assert accuracy_pct(0, 0) == 0


def test_clamp_duration():
    assert clamp_duration(None, 50) is None
    assert clamp_duration(30, 50) == 30
    assert clamp_duration(500, 50) == 50
    assert clamp_duration(-4, 50) == 0


def test_all_correct_scores_full_marks(exam_engine, db):
    started = exam_engine.start(user_id=1, sections=[Section(topic_id=1, count=3)])
    assert started.total_questions == 3
    _answer_all(exam_engine, db, started.attempt_id, "A")

    result = exam_engine.finish(1, started.attempt_id)
    assert result == {"attempt_id": started.attempt_id, "score": 3, "total": 3, "accuracy_pct": 100.0}


def test_score_counts_only_correct_rows(exam_engine, db):
    started = exam_engine.start(user_id=1, sections=[Section(topic_id=3, count=6)])
    answers = exam_engine.repo.list_answers(started.attempt_id)
    # 2 정답, 2 오답, 2 미응답
    for a, label in zip(answers[:4], ["A", "A", "B", "C"]):
        exam_engine.answer(1, started.attempt_id, a.question_id, option_id(db, a.question_id, label))

    result = exam_engine.finish(1, started.attempt_id)
    assert result["score"] == 2
    assert result["total"] == 6
    assert result["accuracy_pct"] == 33.3


def test_second_finish_fails_and_leaves_state(exam_engine, db):
    started = exam_engine.start(user_id=1, sections=[Section(topic_id=1, count=3)])
    _answer_all(exam_engine, db, started.attempt_id, "A")
    exam_engine.finish(1, started.attempt_id, duration_seconds=0)

    db.expire_all()
    first = db.get(Attempt, started.attempt_id)
    score, submitted_at = first.score, first.submitted_at
    assert submitted_at is not None

    with pytest.raises(AlreadySubmitted):
        exam_engine.finish(1, started.attempt_id, duration_seconds=5)

    db.expire_all()
    again = db.get(Attempt, started.attempt_id)
    assert again.score == score == 3
    assert again.submitted_at == submitted_at
    assert again.duration_seconds == 0


def test_expired_attempt_can_still_be_finished(exam_engine, db, backdate):
    started = exam_engine.start(user_id=1, sections=[Section(topic_id=2, count=1)], time_limit_seconds=60)
    backdate(started.attempt_id, 61)

    result = exam_engine.finish(1, started.attempt_id)
    assert result["score"] == 0
    assert result["total"] == 1

    db.expire_all()
    assert db.get(Attempt, started.attempt_id).submitted_at is not None


def test_reported_duration_is_clamped_to_elapsed(exam_engine, db, backdate):
    started = exam_engine.start(user_id=1, sections=[Section(topic_id=1, count=1)])
    backdate(started.attempt_id, 120)
    exam_engine.finish(1, started.attempt_id, duration_seconds=99_999)

    db.expire_all()
    assert 120 <= db.get(Attempt, started.attempt_id).duration_seconds <= 122


def test_missing_duration_stays_unset(exam_engine, db):
    started = exam_engine.start(user_id=1, sections=[Section(topic_id=1, count=1)])
    exam_engine.finish(1, started.attempt_id)
    db.expire_all()
    assert db.get(Attempt, started.attempt_id).duration_seconds is None


def test_finish_other_users_attempt_is_not_found(exam_engine):
    started = exam_engine.start(user_id=1, sections=[Section(topic_id=1, count=1)])
    with pytest.raises(NotFound):
        exam_engine.finish(2, started.attempt_id)
