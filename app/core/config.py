from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Basketball Monster Alerts API"
    app_env: str = "dev"
    app_version: str = "1.0.0"
    api_v1_prefix: str = ""

    jwt_secret: str = "change_me"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 8 * 60

    database_url: str = "sqlite+pysqlite:///./devices.db"
    auto_create_schema: bool = True

    static_dir: str = "./public"

    expo_push_url: str = "https://exp.host/--/api/v2/push/send"
    expo_access_token: str | None = None
    expo_timeout_seconds: float = 10.0
    push_enabled: bool = True

    user_alerts_limit: int = 50
    history_default_limit: int = 50

    bootstrap_operator_login: str = "admin"
    bootstrap_operator_password: str = "admin123"
    auto_create_operator: bool = True

    @property
    def static_path(self) -> Path:
        return Path(self.static_dir).resolve()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def clear_settings_cache() -> None:
    get_settings.cache_clear()
