# paes_app/routers/exams.py
from fastapi import APIRouter, Body, Depends, Query

from paes_app.deps import get_current_user, get_exam_engine
from paes_app.schemas.exams import (
    ExamStartRequest,
    ExamStartResponse,
    ExamAnswerRequest,
    ExamAnswerResponse,
    ExamFinishRequest,
    ExamFinishResponse,
    ExamProgressResponse,
    ExamReviewResponse,
    ActiveExamsResponse,
    ExamHistoryResponse,
)
from paes_app.services.exam_engine import ExamEngine
from paes_app.services.session_initializer import Section

router = APIRouter(prefix="/api/exams", tags=["exams"])


# 진행 중인 모의고사 (submitted_at IS NULL)
@router.get("/active", response_model=ActiveExamsResponse)
def list_active(
    user=Depends(get_current_user),
    engine: ExamEngine = Depends(get_exam_engine),
):
    return {"ok": True, "active": engine.active(user["id"])}


# 제출된 모의고사 이력
# GET /api/exams/history?limit=10&offset=0
@router.get("/history", response_model=ExamHistoryResponse)
def list_history(
    limit: int | None = Query(None, description="페이지 크기 (1~100)"),
    offset: int | None = Query(None, description="시작 위치"),
    user=Depends(get_current_user),
    engine: ExamEngine = Depends(get_exam_engine),
):
    return {"ok": True, **engine.history(user["id"], limit=limit, offset=offset)}


# 모의고사 시작
@router.post("/start", status_code=201, response_model=ExamStartResponse)
def start_exam(
    payload: ExamStartRequest,
    user=Depends(get_current_user),
    engine: ExamEngine = Depends(get_exam_engine),
):
    sections = [Section(topic_id=s.topic_id, count=s.count) for s in payload.sections]
    started = engine.start(
        user["id"],
        sections,
        title=payload.title,
        time_limit_seconds=payload.time_limit_seconds,
    )
    return {"ok": True, **started.to_dict()}


# 같은 구성으로 다시 풀기
@router.post("/{attempt_id}/retake", status_code=201, response_model=ExamStartResponse)
def retake_exam(
    attempt_id: int,
    user=Depends(get_current_user),
    engine: ExamEngine = Depends(get_exam_engine),
):
    started = engine.retake(user["id"], attempt_id)
    return {"ok": True, **started.to_dict()}


# 진행 상황 (타이머/이어풀기용)
@router.get("/{attempt_id}/progress", response_model=ExamProgressResponse)
def get_progress(
    attempt_id: int,
    user=Depends(get_current_user),
    engine: ExamEngine = Depends(get_exam_engine),
):
    return {"ok": True, **engine.progress(user["id"], attempt_id)}


# 답안 저장
@router.post("/{attempt_id}/answer", response_model=ExamAnswerResponse)
def answer_exam(
    attempt_id: int,
    payload: ExamAnswerRequest,
    user=Depends(get_current_user),
    engine: ExamEngine = Depends(get_exam_engine),
):
    saved = engine.answer(user["id"], attempt_id, payload.question_id, payload.option_id)
    return {"ok": True, **saved}


# 제출 (채점 + 봉인)
@router.post("/{attempt_id}/finish", response_model=ExamFinishResponse)
def finish_exam(
    attempt_id: int,
    payload: ExamFinishRequest | None = Body(None),
    user=Depends(get_current_user),
    engine: ExamEngine = Depends(get_exam_engine),
):
    duration = payload.duration_seconds if payload else None
    return {"ok": True, **engine.finish(user["id"], attempt_id, duration)}


# 결과
@router.get("/{attempt_id}/result", response_model=ExamReviewResponse)
def get_result(
    attempt_id: int,
    user=Depends(get_current_user),
    engine: ExamEngine = Depends(get_exam_engine),
):
    return {"ok": True, **engine.review(user["id"], attempt_id)}


# 문항별 리뷰
@router.get("/{attempt_id}/detail", response_model=ExamReviewResponse)
def get_detail(
    attempt_id: int,
    user=Depends(get_current_user),
    engine: ExamEngine = Depends(get_exam_engine),
):
    return {"ok": True, **engine.review(user["id"], attempt_id)}
