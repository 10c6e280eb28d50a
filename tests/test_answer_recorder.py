import pytest

from paes_app.errors import NotFound, InvalidQuestion, AlreadySubmitted, Expired
from paes_app.models.attempts import AttemptAnswer
from paes_app.models.correctness import Correctness
from paes_app.services.session_initializer import Section

from conftest import option_id


@pytest.fixture
def started(exam_engine):
    return exam_engine.start(user_id=1, sections=[Section(topic_id=1, count=3)], time_limit_seconds=60)


def _first_question(exam_engine, attempt_id):
    return exam_engine.repo.list_answers(attempt_id)[0].question_id


def test_correct_and_incorrect_answers(exam_engine, db, started):
    qid = _first_question(exam_engine, started.attempt_id)

    saved = exam_engine.answer(1, started.attempt_id, qid, option_id(db, qid, "A"))
    assert saved == {"question_id": qid, "option_id": option_id(db, qid, "A")}
    assert exam_engine.repo.get_answer(started.attempt_id, qid).is_correct is Correctness.CORRECT

    exam_engine.answer(1, started.attempt_id, qid, option_id(db, qid, "C"))
    assert exam_engine.repo.get_answer(started.attempt_id, qid).is_correct is Correctness.INCORRECT


def test_last_write_wins_single_row(exam_engine, db, started):
    qid = _first_question(exam_engine, started.attempt_id)
    exam_engine.answer(1, started.attempt_id, qid, option_id(db, qid, "B"))
    exam_engine.answer(1, started.attempt_id, qid, option_id(db, qid, "A"))

    rows = db.query(AttemptAnswer).filter_by(attempt_id=started.attempt_id, question_id=qid).all()
    assert len(rows) == 1
    assert rows[0].option_id == option_id(db, qid, "A")
    assert rows[0].is_correct is Correctness.CORRECT


def test_null_option_clears_answer(exam_engine, db, started):
    qid = _first_question(exam_engine, started.attempt_id)
    exam_engine.answer(1, started.attempt_id, qid, option_id(db, qid, "A"))
    saved = exam_engine.answer(1, started.attempt_id, qid, None)

    assert saved["option_id"] is None
    row = exam_engine.repo.get_answer(started.attempt_id, qid)
    assert row.option_id is None
    assert row.is_correct is Correctness.UNANSWERED


def test_option_from_another_question_counts_as_incorrect(exam_engine, db, started):
    qids = [a.question_id for a in exam_engine.repo.list_answers(started.attempt_id)]
    exam_engine.answer(1, started.attempt_id, qids[0], option_id(db, qids[1], "A"))
    assert exam_engine.repo.get_answer(started.attempt_id, qids[0]).is_correct is Correctness.INCORRECT


def test_other_users_attempt_is_not_found(exam_engine, started):
    qid = _first_question(exam_engine, started.attempt_id)
    with pytest.raises(NotFound):
        exam_engine.answer(2, started.attempt_id, qid, None)
    with pytest.raises(NotFound):
        exam_engine.answer(1, 999999, qid, None)


def test_question_outside_attempt_is_rejected(exam_engine, started, question_ids_by_topic):
    foreign = question_ids_by_topic[3][0]
    with pytest.raises(InvalidQuestion):
        exam_engine.answer(1, started.attempt_id, foreign, None)


def test_sealed_attempt_rejects_answers(exam_engine, db, started, question_ids_by_topic):
    qid = _first_question(exam_engine, started.attempt_id)
    exam_engine.finish(1, started.attempt_id)

    with pytest.raises(AlreadySubmitted):
        exam_engine.answer(1, started.attempt_id, qid, option_id(db, qid, "A"))
    # 문항 소속 검사가 먼저
    with pytest.raises(InvalidQuestion):
        exam_engine.answer(1, started.attempt_id, question_ids_by_topic[3][0], None)


def test_expired_attempt_rejects_answers(exam_engine, db, started, backdate):
    qid = _first_question(exam_engine, started.attempt_id)
    backdate(started.attempt_id, 61)

    with pytest.raises(Expired):
        exam_engine.answer(1, started.attempt_id, qid, option_id(db, qid, "A"))
    assert exam_engine.repo.get_answer(started.attempt_id, qid).option_id is None


def test_untimed_attempt_accepts_answers_long_after_start(exam_engine, db, backdate):
    started = exam_engine.start(user_id=1, sections=[Section(topic_id=2, count=1)])
    qid = _first_question(exam_engine, started.attempt_id)
    backdate(started.attempt_id, 10 * 86400)
    exam_engine.answer(1, started.attempt_id, qid, option_id(db, qid, "A"))
    assert exam_engine.repo.get_answer(started.attempt_id, qid).is_correct is Correctness.CORRECT
