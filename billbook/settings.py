from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="BILLBOOK_", extra="ignore")

    db_url: str = "sqlite+aiosqlite:///billbook.db"
    db_echo: bool = False

    log_level: str = "INFO"
    log_json: bool = False


settings = Settings()
