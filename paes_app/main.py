# paes_app/main.py

# ------------------------
# 환경 변수 로드
# ------------------------
from dotenv import load_dotenv
load_dotenv()

import logging
import random
from typing import Optional

# ------------------------
# FastAPI, CORS 미들웨어 import
# ------------------------
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from paes_app.config import Settings, settings as default_settings
from paes_app.db.base import make_engine, make_session_factory
from paes_app.db.init_db import create_all
from paes_app.errors import ExamError, StorageError
from paes_app.routers import exams as exams_router

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


# ------------------------
# 도메인 예외 → HTTP 응답
# ------------------------
async def exam_error_handler(request: Request, exc: ExamError):
    if exc.status_code >= 500:
        logger.error("[EXAM] %s %s -> %s", request.method, request.url.path, exc.detail)
    else:
        logger.info("[EXAM] %s %s -> %s (%s)", request.method, request.url.path, exc.code, exc.detail)
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.to_payload()},
        headers=headers,
    )


# 저장소 조회 중 DB 오류도 같은 형태(internal_error)로 응답
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("[EXAM] %s %s -> storage failure: %r", request.method, request.url.path, exc)
    return await exam_error_handler(request, StorageError("storage_unavailable"))


def create_app(
    settings: Optional[Settings] = None,
    engine: Optional[Engine] = None,
    rng: Optional[random.Random] = None,
) -> FastAPI:
    cfg = settings or default_settings
    _configure_logging(cfg.log_level)

    # ------------------------
    # 1) DB 엔진/세션 팩토리 (전역 싱글톤 대신 app.state 에 보관)
    # ------------------------
    db_engine = engine or make_engine(cfg)
    if cfg.db_create_all:
        create_all(db_engine)

    # ------------------------
    # 2) FastAPI 앱 생성
    # ------------------------
    app = FastAPI(title="PAES Exam API")
    app.state.settings = cfg
    app.state.engine = db_engine
    app.state.session_factory = make_session_factory(db_engine)
    app.state.rng = rng or random.Random()

    # ------------------------
    # 3) CORS 미들웨어 추가
    #    - 실제 운영 시 도메인 제한 필요
    # ------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ------------------------
    # 4) 예외 핸들러 / 라우터 등록
    # ------------------------
    app.add_exception_handler(ExamError, exam_error_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)
    app.include_router(exams_router.router)

    # ------------------------
    # 5) Root 엔드포인트 (health check)
    # ------------------------
    @app.get("/")
    def root():
        return {"ok": True}

    logger.info("[APP] started env=%s db=%s", cfg.app_env, db_engine.url.render_as_string(hide_password=True))
    return app


app = create_app()
