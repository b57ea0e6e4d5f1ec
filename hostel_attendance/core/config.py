from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings, read from the environment or a local .env file."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    PROJECT_NAME: str = "Hostel Attendance"
    API_V1_STR: str = "/api/v1"

    DATABASE_URL: str
    SQL_ECHO: bool = False

    # Tokens are issued by the external auth provider and signed with this key
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    LOG_LEVEL: str = "INFO"


settings = Settings()
