from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    PROJECT_NAME: str = "Finance Tracker API"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"

    DATABASE_URL: str = f"sqlite+aiosqlite:///{BASE_DIR}/data/fintrack.db"

    JWT_SECRET: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRES_MINUTES: int = 60

    BACKEND_CORS_ORIGINS: list[str] = ["*"]

    DEFAULT_PAGE_LIMIT: int = 10
    ADMIN_PAGE_LIMIT: int = 50

    LOG_LEVEL: str = "INFO"
    SEED_CSV_PATH: Path = BASE_DIR / "data" / "seed_transactions.csv"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)

settings = Settings()
