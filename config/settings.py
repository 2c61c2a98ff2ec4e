"""Application settings using Pydantic Settings."""

from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database Configuration
    mongodb_url: str = "mongodb://127.0.0.1:27017/workouts"
    mongodb_db_name: str = ""

    # Authentication Configuration
    jwt_secret: str = "change-me-in-production-use-a-long-random-value"
    jwt_algorithm: str = "HS256"
    jwt_expire_days: int = 30
    cookie_expire_days: int = 30
    bcrypt_rounds: int = 10

    # Template user whose workout history is cloned into new accounts
    demo_user_id: str = "demo-user"

    # Application Configuration
    app_name: str = "Fitness Tracker API"
    app_version: str = "1.0.0"
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # Server Configuration
    host: str = "0.0.0.0"
    port: int = 8080

    # CORS Configuration
    cors_origins: List[str] = [
        "http://localhost:3000",
        "http://localhost:3001",
        "http://127.0.0.1:3001",
        "http://localhost:19006",
    ]

    class Config:
        env_file = ".env"
        case_sensitive = False

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


# Global settings instance
settings = Settings()
