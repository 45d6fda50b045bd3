from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "checklist"

    # ---------------------------------------------------------------------
    # API contract / OpenAPI
    # ---------------------------------------------------------------------

    api_version: str = "1.0.0"
    api_description: str = (
        "Equipment inspection checklist API.\n\n"
        "Stored inspections are read-only except for deletion. "
        "New inspections are built through workflow sessions "
        "(initial info -> checklist -> summary -> completed)."
    )

    env: str = "local"
    debug: bool = False

    # sqlite is the embedded default (one device, one user).
    db_driver: Literal["sqlite", "postgresql"] = "sqlite"
    sqlite_path: str = "checklist.db"

    db_host: str = "127.0.0.1"
    db_port: int = 5432
    db_name: str = "checklist"
    db_user: str = "checklist"
    db_password: str = "checklist"

    log_level: str = "INFO"
    log_file: str | None = None
    log_retention_days: int = 7

    default_equipment_type: str = "CAEX_797F"

    # idle workflow sessions are dropped after this many seconds (0 keeps them)
    workflow_session_ttl_seconds: int = 4 * 60 * 60

    @property
    def database_url(self) -> str:
        if self.db_driver == "sqlite":
            return f"sqlite+pysqlite:///{self.sqlite_path}"
        return (
            f"postgresql+psycopg://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )


settings = Settings()
