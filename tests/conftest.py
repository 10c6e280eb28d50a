"""
Pytest configuration and fixtures for the exam engine tests.
"""
import random
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from paes_app.config import Settings
from paes_app.db.init_db import create_all
from paes_app.main import create_app
from paes_app.models.attempts import Attempt
from paes_app.models.questions import Unit, Topic, Question, Option
from paes_app.services.exam_engine import ExamEngine

JWT_SECRET = "test-secret"

# topic_id -> 문항 수
TOPIC_SIZES = {1: 3, 2: 1, 3: 6, 7: 3, 9: 0}


def _seed_reference(db):
    db.add(Unit(id=1, name="Números", order_idx=1))
    for topic_id, size in TOPIC_SIZES.items():
        db.add(Topic(id=topic_id, unit_id=1, name=f"Tema {topic_id}", order_idx=topic_id))
    db.flush()

    qid = 100
    oid = 1000
    for topic_id, size in TOPIC_SIZES.items():
        for n in range(size):
            qid += 1
            db.add(Question(
                id=qid,
                topic_id=topic_id,
                stem=f"Pregunta {n + 1} del tema {topic_id}",
                difficulty="medium",
                explanation=f"Explicación {qid}",
            ))
            # 보기 A 가 정답
            for label, correct in (("A", True), ("B", False), ("C", False)):
                oid += 1
                db.add(Option(id=oid, question_id=qid, label=label, text=f"{label}-{qid}", is_correct=correct))
    db.commit()


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite://",
        jwt_secret=JWT_SECRET,
        db_create_all=False,
        log_level="DEBUG",
    )


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_all(eng)
    factory = sessionmaker(bind=eng, autoflush=False)
    with factory() as db:
        _seed_reference(db)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def exam_engine(db, settings):
    return ExamEngine(db, rng=random.Random(1234), settings=settings)


@pytest.fixture
def backdate(db):
    """attempt 의 started_at 을 seconds 만큼 과거로 옮긴다 (시간 경과 흉내)."""
    def _backdate(attempt_id, seconds):
        db.expire_all()
        att = db.get(Attempt, attempt_id)
        att.started_at = att.started_at - timedelta(seconds=seconds)
        db.commit()
    return _backdate


def option_id(db, question_id, label):
    return db.execute(
        select(Option.id).where(Option.question_id == question_id, Option.label == label)
    ).scalar_one()


@pytest.fixture
def question_ids_by_topic():
    ids = {}
    qid = 100
    for topic_id, size in TOPIC_SIZES.items():
        ids[topic_id] = list(range(qid + 1, qid + size + 1))
        qid += size
    return ids


def topic_of(question_id, question_ids_by_topic):
    for topic_id, ids in question_ids_by_topic.items():
        if question_id in ids:
            return topic_id
    return None


def make_token(user_id, email="alumno@example.com", secret=JWT_SECRET):
    return jwt.encode({"id": user_id, "email": email}, secret, algorithm="HS256")


def auth_header(user_id):
    return {"Authorization": f"Bearer {make_token(user_id)}"}


@pytest.fixture
def client(engine, settings):
    app = create_app(settings=settings, engine=engine, rng=random.Random(99))
    with TestClient(app) as c:
        yield c
