from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env from the project root so it loads regardless of cwd
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(str(_ENV_FILE), ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str
    create_tables_on_startup: bool = True

    # JWT
    secret_key: str
    algorithm: str = "HS256"
    # Unset means issued tokens carry no exp claim
    access_token_expire_minutes: int | None = None

    # Password hashing
    bcrypt_rounds: int = 10

    # CORS
    cors_origins: str = "*"

    # Firebase (Google sign-in). Path to the service-account JSON file.
    firebase_credentials_path: str = ""
    firebase_project_id: str = ""

    # Env
    env: str = "development"

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def firebase_enabled(self) -> bool:
        return bool(self.firebase_credentials_path or self.firebase_project_id)


settings = Settings()
