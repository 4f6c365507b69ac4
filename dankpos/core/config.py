from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List
from pydantic import field_validator


def _parse_bool(v):
    if isinstance(v, str):
        return v.lower().strip('"').strip("'") in ("true", "1", "yes", "on")
    return bool(v)


class Settings(BaseSettings):
    # Host database (shared bootstrap database: users, shops, session logs)
    HOST_ENDPOINT_URL: Optional[str] = None
    HOST_ACCESS_KEY: Optional[str] = None

    # Data client
    DATA_CLIENT_TIMEOUT: float = 10.0

    # Tenant credential markers
    CREDENTIAL_COOKIE_MAX_AGE: int = 60 * 60 * 24  # 24 hours
    STRICT_TENANT_ROUTING: bool = False

    # Redis settings (Celery broker)
    REDIS_HOST: str = 'redis'
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_PASSWORD: Optional[str] = None

    # Email settings (Resend SMTP relay)
    EMAIL_SMTP_SERVER: str = 'smtp.resend.com'
    EMAIL_SMTP_PORT: int = 465
    EMAIL_USE_TLS: bool = False
    EMAIL_USERNAME: str = 'resend'
    EMAIL_PASSWORD: str = ''
    EMAIL_FROM: str = ''
    EMAIL_FROM_NAME: str = 'Dank PoS'

    # CORS
    ALLOWED_ORIGINS: List[str] = ["*"]

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    @property
    def redis_url(self) -> str:
        if self.REDIS_PASSWORD:
            return f"redis://:{self.REDIS_PASSWORD}@{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"

    @property
    def secure_cookies(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def email_configured(self) -> bool:
        return bool(self.EMAIL_PASSWORD and self.EMAIL_FROM)

    model_config = SettingsConfigDict(
        extra="allow",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True
    )

    @field_validator("DEBUG", "STRICT_TENANT_ROUTING", "EMAIL_USE_TLS", mode="before")
    @classmethod
    def parse_flags(cls, v):
        return _parse_bool(v)


settings = Settings()
