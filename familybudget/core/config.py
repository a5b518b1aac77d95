from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path

from sqlalchemy.engine import URL


class Settings(BaseSettings):
    APP_NAME: str = "Family Budget Backend"
    ENV: str = "dev"

    # Default SQLite file next to the package so the CWD does not matter
    _default_db_path = Path(__file__).resolve().parents[2] / "familybudget.sqlite3"
    DATABASE_URL: str = f"sqlite:///{_default_db_path}"

    # Discrete PostgreSQL settings; when DB_HOST is set they win over DATABASE_URL
    DB_HOST: str | None = None
    DB_PORT: int = 5432
    DB_NAME: str = "family_budget"
    DB_USER: str | None = None
    DB_PASSWORD: str | None = None

    JWT_SECRET: str = "change-me-in-production"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRES_MINUTES: int = 60 * 24 * 7
    BCRYPT_ROUNDS: int = 12

    CORS_ORIGINS: list[str] = ["*"]
    TIMEZONE: str = "UTC"
    LOG_LEVEL: str = "INFO"
    AUTO_CREATE_TABLES: bool = True

    model_config = SettingsConfigDict(env_file=(".env",), env_prefix="FB_", case_sensitive=False)

    @property
    def database_url(self) -> str:
        if not self.DB_HOST:
            return self.DATABASE_URL
        url = URL.create(
            "postgresql+psycopg",
            username=self.DB_USER,
            password=self.DB_PASSWORD,
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.DB_NAME,
        )
        return url.render_as_string(hide_password=False)


settings = Settings()
