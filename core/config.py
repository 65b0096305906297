from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str

    # Redis
    redis_url: str

    # API
    api_port: int = 8000

    # Security
    gateway_secret: str  # HMAC secret shared with the identity gateway

    # Feed / matching
    feed_limit: int = 10
    min_adult_age: int = 18

    # Messaging
    max_message_length: int = 2000

    # Safety
    report_rate_limit_seconds: int = 60

    # AI chat partner (any OpenAI-compatible endpoint)
    ai_enabled: bool = False
    openai_api_key: str = ""
    ai_base_url: str | None = None
    ai_model: str = "gpt-4"
    ai_temperature: float = 0.9
    ai_max_history: int = 40

    # Logging
    log_level: str = "INFO"

    # Environment
    environment: str = "development"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


settings = Settings()
