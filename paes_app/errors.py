# paes_app/errors.py
# 모의고사 엔진 도메인 예외. 라우터 밖(main.py)의 exception handler가 HTTP 응답으로 바꾼다.


class ExamError(Exception):
    status_code = 500
    code = "internal_error"

    def __init__(self, detail: str | None = None):
        super().__init__(detail or self.code)
        self.detail = detail or self.code

    def to_payload(self) -> dict:
        return {"message": self.code, "detail": self.detail}


class Unauthorized(ExamError):
    status_code = 401
    code = "unauthorized"


class NotFound(ExamError):
    status_code = 404
    code = "attempt_not_found"


class InvalidQuestion(ExamError):
    status_code = 400
    code = "question_not_in_attempt"


class InvalidSections(ExamError):
    status_code = 400
    code = "invalid_sections"


class AlreadySubmitted(ExamError):
    status_code = 409
    code = "attempt_already_submitted"


class Expired(ExamError):
    status_code = 409
    code = "attempt_expired"


class NoQuestionsAvailable(ExamError):
    status_code = 400
    code = "no_questions_available"


class NoCompositionInferred(ExamError):
    status_code = 400
    code = "no_composition_inferred"


class StorageError(ExamError):
    status_code = 500
    code = "internal_error"
