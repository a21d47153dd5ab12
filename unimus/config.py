from functools import lru_cache

from dotenv import find_dotenv, load_dotenv
from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

# read from .env if it exists (local development only)
_dotenv_path = find_dotenv()
load_dotenv(str(_dotenv_path), override=False)


class Settings(BaseSettings):
    DEBUG: bool = False
    LOGLEVEL: str = "INFO"

    # set by deployment
    UNIMUS_ENV: str = "dev"

    DB_USERNAME: str = "unimus"
    DB_PASSWORD: str = ""
    DB_ENDPOINT: str = "localhost:5432"
    # full url override, e.g. for local sqlite or a managed database
    DATABASE_URL: str | None = None

    CORS_ORIGINS: list[str] = ["*"]

    REPOSITORY_NAME: str = "Unimus Repository"
    UPLOAD_DIR: str = "uploads"
    MAX_FILE_SIZE: int = 100 * 1024 * 1024  # 100 MiB
    PREVIEW_ROW_LIMIT: int = 20
    RECENT_SUBMISSION_DAYS: int = 30
    BCRYPT_ROUNDS: int = 12

    @computed_field
    @property
    def SQLALCHEMY_DATABASE_URL(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"postgresql+asyncpg://{self.DB_USERNAME}:{self.DB_PASSWORD}@{self.DB_ENDPOINT}/unimus_db_{self.UNIMUS_ENV}"

    model_config = SettingsConfigDict(env_file=_dotenv_path, case_sensitive=True)


# for use as dependency with `Depends(get_settings)`
@lru_cache()
def get_settings() -> Settings:
    return Settings()
