# paes_app/db/session.py
# SQLAlchemy 기본 세팅. 엔진/세션 팩토리는 create_app()에서 명시적으로 만들어 주입한다.

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base

from paes_app.config import Settings

Base = declarative_base()


def make_engine(settings: Settings) -> Engine:
    url = settings.database_url
    if not url:
        raise RuntimeError("DATABASE_URL 환경변수가 설정되어 있지 않습니다.")

    if url.startswith("sqlite"):
        # 로컬/테스트용. sqlite는 풀 크기 옵션을 받지 않는다.
        return create_engine(
            url,
            echo=settings.db_echo,
            connect_args={"check_same_thread": False},
        )

    return create_engine(
        url,
        echo=settings.db_echo,
        pool_pre_ping=True,                     # 끊어진 커넥션 자동 감지
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,  # 풀 크기 초과 연결 금지
        pool_timeout=settings.db_pool_timeout,  # 풀 고갈 시 대기 시간(초) 후 Timeout
    )


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
