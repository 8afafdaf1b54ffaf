from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    FINTRACK_API_URL: str = "http://localhost:8000/api"
    FINTRACK_TOKEN_PATH: Path = Path.home() / ".fintrack" / "token"
    FINTRACK_TIMEOUT: float = 10.0

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

client_settings = ClientSettings()
