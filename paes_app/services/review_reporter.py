# paes_app/services/review_reporter.py
"""
결과/리뷰, 진행 중 목록, 이력 조회 (읽기 전용)
"""
from paes_app.errors import NotFound
from paes_app.services.attempt_repository import AttemptRepository
from paes_app.services.finisher import accuracy_pct


class ReviewReporter:
    def __init__(self, repo: AttemptRepository, default_limit: int = 10, max_limit: int = 100):
        self.repo = repo
        self.default_limit = default_limit
        self.max_limit = max_limit

    # 결과 + 문항별 리뷰 (보기별 정답/선택 여부, 해설 포함)
    def review(self, user_id: int, attempt_id: int) -> dict:
        attempt = self.repo.get_exam_attempt(attempt_id, user_id)
        if attempt is None:
            raise NotFound(f"attempt {attempt_id} not found")

        answers = self.repo.list_answers(attempt.id)
        qids = [a.question_id for a in answers]
        questions = self.repo.questions_by_id(qids)
        options = self.repo.options_by_question(qids)

        items = []
        for a in answers:
            q = questions.get(a.question_id)
            if q is None:
                continue
            items.append({
                "question_id": a.question_id,
                "stem": q.stem,
                "explanation": q.explanation,
                "selected_option_id": a.option_id,
                "is_correct": a.is_correct.to_flag(),
                "options": [
                    {
                        "id": o.id,
                        "label": o.label,
                        "text": o.text,
                        "is_correct": bool(o.is_correct),
                        "is_selected": o.id == a.option_id,
                    }
                    for o in options.get(a.question_id, [])
                ],
            })

        total = len(items)
        score = int(attempt.score or 0)
        return {
            "attempt": {
                "id": attempt.id,
                "mode": attempt.mode,
                "title": attempt.title,
                "score": score,
                "started_at": attempt.started_at,
                "submitted_at": attempt.submitted_at,
                "duration_seconds": attempt.duration_seconds,
                "time_limit_seconds": attempt.time_limit_seconds,
                "total": total,
                "accuracy_pct": accuracy_pct(score, total),
            },
            "items": items,
        }

    def active(self, user_id: int) -> list[dict]:
        return [
            {
                "id": a.id,
                "title": a.title,
                "started_at": a.started_at,
                "time_limit_seconds": a.time_limit_seconds,
            }
            for a in self.repo.list_active(user_id)
        ]

    def _page_window(self, limit, offset) -> tuple[int, int]:
        limit = self.default_limit if limit is None else int(limit)
        limit = min(max(limit, 1), self.max_limit)
        offset = max(int(offset or 0), 0)
        return limit, offset

    def history(self, user_id: int, limit: int | None = None, offset: int | None = None) -> dict:
        limit, offset = self._page_window(limit, offset)
        total = self.repo.count_history(user_id)
        rows = self.repo.list_history(user_id, limit, offset)

        exams = []
        for att, total_questions in rows:
            score = int(att.score or 0)
            exams.append({
                "attempt_id": att.id,
                "title": att.title,
                "score": score,
                "started_at": att.started_at,
                "submitted_at": att.submitted_at,
                "duration_seconds": att.duration_seconds,
                "time_limit_seconds": att.time_limit_seconds,
                "total_questions": total_questions,
                "accuracy_pct": accuracy_pct(score, total_questions),
            })

        return {
            "exams": exams,
            "total": total,
            "page": offset // limit + 1,
            "page_size": limit,
            "has_more": offset + limit < total,
        }
