"""Configuration settings for the application."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    app_name: str = "Transactions Service"
    debug: bool = False
    database_url: str = "sqlite:///./bank_app.db"

    # Server
    host: str = "0.0.0.0"
    port: int = 4000
    log_level: str = "INFO"

    # Terminate the process when the initial storage connection fails
    exit_on_connect_failure: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
