# paes_app/config.py


from dotenv import load_dotenv
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()  # .env 파일 먼저 읽기

BASE_DIR = Path(__file__).resolve().parent.parent

class Settings(BaseSettings):
    # 환경 구분
    app_env: str = "local"
    log_level: str = "INFO"
    cors_origins: list[str] = ["*"]

    # DB (운영: postgresql+psycopg2://..., 로컬: sqlite)
    database_url: str = f"sqlite:///{BASE_DIR / 'paes_app.db'}"  # DATABASE_URL
    db_pool_size: int = 10
    db_max_overflow: int = 0       # 풀 크기 초과 연결 금지
    db_pool_timeout: int = 30      # 풀 고갈 시 대기 시간(초)
    db_echo: bool = False
    db_create_all: bool = False    # 기동 시 테이블 생성 (로컬/테스트용)

    # Auth (토큰 발급은 별도 서비스, 여기서는 검증만)
    jwt_secret: str = ""           # JWT_SECRET
    jwt_algorithm: str = "HS256"

    # 모의고사(ensayo)
    exam_default_title: str = "Ensayo"
    exam_retake_suffix: str = " (reintento)"
    exam_max_questions_per_section: int = 200

    # 이력 페이지네이션
    history_default_limit: int = 10
    history_max_limit: int = 100

    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),  # 루트 .env 절대경로
        env_file_encoding="utf-8",
        extra="ignore",                   # 필요 없는 env 무시
    )

settings = Settings()

if __name__ == "__main__":
    print("BASE_DIR:", BASE_DIR)
    print("APP_ENV:", settings.app_env)
    print("DATABASE_URL:", settings.database_url)
    print("JWT_SECRET set:", bool(settings.jwt_secret))
