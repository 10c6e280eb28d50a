from datetime import datetime
from typing import Optional, List

from pydantic import BaseModel, Field

# -- Request --

# 섹션: 주제별 출제 문항 수
class ExamSectionIn(BaseModel):
    topic_id: int = Field(..., ge=1, description="주제 ID")
    count: int = Field(..., ge=1, description="출제 문항 수")

# 모의고사 시작 - 요청
class ExamStartRequest(BaseModel):
    title: Optional[str] = Field(None, max_length=200, description="표시 이름 (없으면 기본값)")
    time_limit_seconds: Optional[int] = Field(None, ge=1, description="제한 시간(초), 없으면 무제한")
    sections: List[ExamSectionIn] = Field(..., min_length=1, description="섹션 목록")

# 답안 저장 - 요청 (option_id=null 이면 답안 지우기)
class ExamAnswerRequest(BaseModel):
    question_id: int
    option_id: Optional[int] = None

# 제출 - 요청
class ExamFinishRequest(BaseModel):
    duration_seconds: Optional[int] = Field(None, ge=0, description="클라이언트 측정 소요 시간(초)")


# -- Response --

class ExamStartResponse(BaseModel):
    ok: bool = True
    attempt_id: int
    title: Optional[str]
    time_limit_seconds: Optional[int]
    total_questions: int

class ExamAnswerResponse(BaseModel):
    ok: bool = True
    question_id: int
    option_id: Optional[int]

class ExamFinishResponse(BaseModel):
    ok: bool = True
    attempt_id: int
    score: int
    total: int
    accuracy_pct: float

# 진행 상황 (정답 정보 없음)
class ProgressOption(BaseModel):
    id: int
    label: str
    text: str

class ProgressItem(BaseModel):
    question_id: int
    stem: str
    options: List[ProgressOption]
    selected_option_id: Optional[int]

class ProgressAttempt(BaseModel):
    id: int
    title: Optional[str]
    time_limit_seconds: Optional[int]
    started_at: datetime
    submitted_at: Optional[datetime]

class ExamProgressResponse(BaseModel):
    ok: bool = True
    attempt: ProgressAttempt
    items: List[ProgressItem]
    answered: int
    total: int
    server_now: datetime
    elapsed_seconds: int
    expired: bool

# 결과/리뷰
class ReviewOption(BaseModel):
    id: int
    label: str
    text: str
    is_correct: bool
    is_selected: bool

class ReviewItem(BaseModel):
    question_id: int
    stem: str
    explanation: Optional[str]
    selected_option_id: Optional[int]
    is_correct: Optional[bool]
    options: List[ReviewOption]

class ReviewAttempt(BaseModel):
    id: int
    mode: str
    title: Optional[str]
    score: int
    started_at: datetime
    submitted_at: Optional[datetime]
    duration_seconds: Optional[int]
    time_limit_seconds: Optional[int]
    total: int
    accuracy_pct: float

class ExamReviewResponse(BaseModel):
    ok: bool = True
    attempt: ReviewAttempt
    items: List[ReviewItem]

# 진행 중 / 이력
class ActiveExam(BaseModel):
    id: int
    title: Optional[str]
    started_at: datetime
    time_limit_seconds: Optional[int]

class ActiveExamsResponse(BaseModel):
    ok: bool = True
    active: List[ActiveExam]

class HistoryEntry(BaseModel):
    attempt_id: int
    title: Optional[str]
    score: int
    started_at: datetime
    submitted_at: datetime
    duration_seconds: Optional[int]
    time_limit_seconds: Optional[int]
    total_questions: int
    accuracy_pct: float

class ExamHistoryResponse(BaseModel):
    ok: bool = True
    exams: List[HistoryEntry]
    total: int
    page: int
    page_size: int
    has_more: bool
