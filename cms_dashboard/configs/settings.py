from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    APP_NAME: str = "CMS Dashboard"
    APP_ENV: Literal["dev", "prod"] = "dev"
    APP_DEBUG: bool = False

    model_config = SettingsConfigDict(env_file=".env", env_prefix="APP_")


class CORSSettings(BaseSettings):
    CORS_ORIGINS: list[str] = ["http://localhost:4200", "http://127.0.0.1:4200"]
    CORS_CREDENTIALS: bool = True
    CORS_METHODS: list[str] = ["*"]
    CORS_HEADERS: list[str] = ["*"]
    CORS_EXPOSE_HEADERS: list[str] = ["*"]

    model_config = SettingsConfigDict(env_file=".env", env_prefix="CORS_")


class OrchardSettings(BaseSettings):
    ORCHARD_BASE_URL: str = "http://localhost:8080"
    ORCHARD_CONTENT_URL: str = ""
    ORCHARD_GRAPHQL_URL: str = ""
    ORCHARD_TOKEN_URL: str = ""
    ORCHARD_CLIENT_ID: str = "angular-app"
    ORCHARD_SCOPE: str = "openid profile roles"
    ORCHARD_TIMEOUT: float = 30.0
    ORCHARD_FOLDER_QUERY_LIMIT: int = 100

    model_config = SettingsConfigDict(env_file=".env", env_prefix="ORCHARD_")

    @property
    def content_url(self) -> str:
        return self.ORCHARD_CONTENT_URL or f"{self.ORCHARD_BASE_URL.rstrip('/')}/api/content"

    @property
    def graphql_url(self) -> str:
        return self.ORCHARD_GRAPHQL_URL or f"{self.ORCHARD_BASE_URL.rstrip('/')}/api/graphql"

    @property
    def token_url(self) -> str:
        return self.ORCHARD_TOKEN_URL or f"{self.ORCHARD_BASE_URL.rstrip('/')}/connect/token"


class RedisSettings(BaseSettings):
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_PWD: str = ""
    REDIS_DB: int = 0

    model_config = SettingsConfigDict(env_file=".env", env_prefix="REDIS_")

    @property
    def redis_password(self) -> str:
        return self.REDIS_PWD


class SentrySettings(BaseSettings):
    SENTRY_DSN: str | None = None
    SENTRY_TRACES_SAMPLE_RATE: float = 0.2
    SENTRY_PROFILES_SAMPLE_RATE: float = 0.0
    SENTRY_SEND_DEFAULT_PII: bool = False

    model_config = SettingsConfigDict(env_file=".env", env_prefix="SENTRY_")


class MinioSettings(BaseSettings):
    MINIO_URL: str = "http://localhost:9000"
    MINIO_ACCESS_KEY: str = ""
    MINIO_SECRET_KEY: str = ""
    MINIO_BUCKET: str = "media"

    @property
    def MINIO_SSL(self) -> bool:
        return self.MINIO_URL.startswith("https://")

    model_config = SettingsConfigDict(env_file=".env", env_prefix="MINIO_")


class DashboardSettings(BaseSettings):
    DASHBOARD_MAX_BREADCRUMB_DEPTH: int = 10
    DASHBOARD_SESSION_TTL: int = 60 * 60 * 12
    DASHBOARD_MEDIA_URL_PREFIX: str = "/media"
    # Orchard stores a MediaField as <Part>.<Field>.Paths
    DASHBOARD_MEDIA_PART: str = "Folder"
    DASHBOARD_MEDIA_FIELD: str = "Media"

    model_config = SettingsConfigDict(env_file=".env", env_prefix="DASHBOARD_")


class Settings(AppSettings, CORSSettings, OrchardSettings, RedisSettings, SentrySettings, MinioSettings, DashboardSettings):
    RELEASE: str | None = None
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    model_config = SettingsConfigDict(env_file=".env", env_prefix="")


settings = Settings()
