from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global configuration for environment variables."""

    APP_NAME: str = "TopizioBot"

    # Server config
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    STATIC_DIR: str = "public"
    CORS_ORIGINS: List[str] = ["*"]

    # MongoDB
    MONGO_URI: str | None = None
    MONGO_DB_NAME: str = "ifcodeLogsDB"
    MONGO_TIMEOUT_MS: int = 5000
    SESSIONS_COLLECTION: str = "sessoesChat"
    ACCESS_LOGS_COLLECTION: str = "accessLogs"

    # Gemini
    GEMINI_API_KEY: str | None = None
    GEMINI_ENDPOINT: str = "https://generativelanguage.googleapis.com"
    GEMINI_MODEL: str = "gemini-1.5-flash"
    ENABLE_TIME_TOOL: bool = True
    BOT_TIMEZONE: str = "America/Sao_Paulo"

    # Geolocation
    GEO_LOOKUP_URL: str = "http://ip-api.com/json"

    REQUEST_TIMEOUT_MS: int = 30000

    # Debug
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="allow")

    def missing_required(self) -> list[str]:
        """Names of required variables that are unset or blank."""
        required = {
            "MONGO_URI": self.MONGO_URI,
            "GEMINI_API_KEY": self.GEMINI_API_KEY,
        }
        return [key for key, value in required.items() if not (value or "").strip()]


settings = Settings()
