from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "DevCamper API"
    app_version: str = "0.1.0"
    frontend_url: str = "http://localhost:3000"
    database_url: str = "sqlite:///./local.db"
    redis_url: str = "redis://localhost:6379/0"
    redis_socket_timeout_seconds: float = 2.0
    celery_broker_url: str | None = None
    celery_task_always_eager: bool = False

    log_level: str = "INFO"
    log_json: bool = False

    jwt_secret_key: str = "change-me"
    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = 60 * 24 * 30
    reset_password_expire_minutes: int = 10

    geocoder_url: str = "https://www.mapquestapi.com/geocoding/v1/address"
    geocoder_api_key: str | None = None
    geocoder_timeout_seconds: float = 5.0
    geocode_cache_ttl_seconds: int = 60 * 60 * 24

    file_upload_path: str = "./public/uploads"
    max_file_upload_size: int = 1_000_000

    smtp_host: str = "localhost"
    smtp_port: int = 587
    smtp_username: str | None = None
    smtp_password: str | None = None
    smtp_use_tls: bool = True
    smtp_from_email: str = "noreply@devcamper.io"
    smtp_from_name: str = "DevCamper"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


settings = Settings()
