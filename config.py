from pydantic_settings import BaseSettings
from functools import lru_cache

class Settings(BaseSettings):
    # MongoDB Configuration
    mongo_url: str = "mongodb://localhost:27017"
    db_name: str = "skyguard"

    # Application Configuration
    frontend_url: str = "http://localhost:3000"
    environment: str = "development"

    # Predictions closer than this are handed to the advisory generator
    advisory_horizon_days: int = 60

    def cors_origins(self) -> list:
        """Allowed CORS origins for the current environment"""
        if self.environment == "production":
            return [self.frontend_url]
        return ["*"]

    class Config:
        env_file = ".env"
        case_sensitive = False

@lru_cache()
def get_settings():
    return Settings()
