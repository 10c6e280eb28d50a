# paes_app/models/questions.py
# 문항 참조 저장소(units/topics/questions/options). 관리자 CRUD는 별도 서비스 소관이고
# 엔진은 읽기만 한다.
from sqlalchemy import Column, BigInteger, Integer, String, Text, Boolean, DateTime, ForeignKey, Index, func
from sqlalchemy.orm import relationship

from paes_app.db.base import Base
from paes_app.db.types import BigIntId

class Unit(Base):
    __tablename__ = "units"

    id = Column(BigIntId, primary_key=True, index=True)
    name = Column(String(150), nullable=False)
    order_idx = Column(Integer, nullable=False, default=0)

    topics = relationship("Topic", back_populates="unit")

class Topic(Base):
    __tablename__ = "topics"

    id = Column(BigIntId, primary_key=True, index=True)
    unit_id = Column(BigInteger, ForeignKey("units.id"), nullable=True, index=True)
    name = Column(String(150), nullable=False)
    order_idx = Column(Integer, nullable=False, default=0)

    unit = relationship("Unit", back_populates="topics")

class Question(Base):
    __tablename__ = "questions"

    id = Column(BigIntId, primary_key=True, index=True)
    topic_id = Column(BigInteger, ForeignKey("topics.id"), nullable=False)
    stem = Column(Text, nullable=False)
    difficulty = Column(String(20), nullable=True)  # easy|medium|hard
    explanation = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    options = relationship("Option", back_populates="question", order_by="Option.label")

    __table_args__ = (
        Index('ix_questions_topic_id_id', 'topic_id', 'id'),
    )

class Option(Base):
    __tablename__ = "options"

    id = Column(BigIntId, primary_key=True, index=True)
    question_id = Column(BigInteger, ForeignKey("questions.id"), nullable=False, index=True)
    label = Column(String(5), nullable=False)  # A|B|C|D|E
    text = Column(Text, nullable=False)
    is_correct = Column(Boolean, nullable=False, default=False)

    question = relationship("Question", back_populates="options")
