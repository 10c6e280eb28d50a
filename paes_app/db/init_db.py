# paes_app/db/init_db.py
# python -m paes_app.db.init_db

from sqlalchemy.engine import Engine

from paes_app.db.base import Base, make_engine

# 모델 등록 (metadata에 테이블이 잡히도록)
from paes_app.models import questions, attempts  # noqa: F401


def create_all(engine: Engine) -> None:
    Base.metadata.create_all(bind=engine)


if __name__ == "__main__":
    from paes_app.config import settings

    print("Creating tables...")
    create_all(make_engine(settings))
    print("Done")
