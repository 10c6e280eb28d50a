# paes_app/services/progress_reporter.py
"""
진행 상황 조회 (읽기 전용)
- 정답 정보는 내려주지 않는다
- server_now / elapsed_seconds 는 클라이언트 카운트다운 보정용
- 시간이 지나도 실패하지 않고 expired 로만 알려준다
"""
from paes_app.errors import NotFound
from paes_app.services import expiry_guard
from paes_app.services.attempt_repository import AttemptRepository


class ProgressReporter:
    def __init__(self, repo: AttemptRepository):
        self.repo = repo

    def progress(self, user_id: int, attempt_id: int) -> dict:
        attempt = self.repo.get_exam_attempt(attempt_id, user_id)
        if attempt is None:
            raise NotFound(f"attempt {attempt_id} not found")

        status = expiry_guard.evaluate_attempt(attempt, self.repo.server_now())

        answers = self.repo.list_answers(attempt.id)
        qids = [a.question_id for a in answers]
        questions = self.repo.questions_by_id(qids)
        options = self.repo.options_by_question(qids)

        items = []
        for a in answers:
            q = questions.get(a.question_id)
            if q is None:
                continue  # 참조 저장소에서 지워진 문항
            items.append({
                "question_id": a.question_id,
                "stem": q.stem,
                "options": [
                    {"id": o.id, "label": o.label, "text": o.text}
                    for o in options.get(a.question_id, [])
                ],
                "selected_option_id": a.option_id,
            })

        answered = sum(1 for a in answers if a.option_id is not None)

        return {
            "attempt": {
                "id": attempt.id,
                "title": attempt.title,
                "time_limit_seconds": attempt.time_limit_seconds,
                "started_at": attempt.started_at,
                "submitted_at": attempt.submitted_at,
            },
            "items": items,
            "answered": answered,
            "total": len(items),
            "server_now": status.server_now,
            "elapsed_seconds": status.elapsed_seconds,
            "expired": status.expired,
        }
