# paes_app/deps.py
import logging

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from paes_app.errors import Unauthorized
from paes_app.services.auth import verify_bearer
from paes_app.services.exam_engine import ExamEngine

logger = logging.getLogger(__name__)

# ----------------------------
# DB 세션 (create_app() 에서 만든 세션 팩토리 사용)
# ----------------------------
def get_db(request: Request):
    db = request.app.state.session_factory()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

# ----------------------------
# 현재 사용자 가져오기
# ----------------------------
def get_current_user(
    request: Request,
    authorization: str | None = Header(None),
):
    cfg = request.app.state.settings
    try:
        claims = verify_bearer(authorization, cfg.jwt_secret, cfg.jwt_algorithm)
    except ValueError as e:
        logger.info("verify_bearer failed >>> %r", e)
        raise Unauthorized(str(e))

    return {
        "id": claims["user_id"],
        "email": claims.get("email"),
    }

# ----------------------------
# 모의고사 엔진
# ----------------------------
def get_exam_engine(request: Request, db: Session = Depends(get_db)) -> ExamEngine:
    return ExamEngine(db, rng=request.app.state.rng, settings=request.app.state.settings)
