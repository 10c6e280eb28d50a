"""
공용 DB 베이스.
Base 정의는 paes_app.db.session 한 곳에서 관리하고, 모델 모듈은 여기서 import 한다.
"""
from paes_app.db.session import Base, make_engine, make_session_factory

__all__ = ["Base", "make_engine", "make_session_factory"]
