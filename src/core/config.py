from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    env: str = "development"
    log_level: str = "info"

    stack_api_base_url: str | None = None
    http_timeout_ms: int = 0
    http_pool_max_connections: int = 20
    http_pool_max_keepalive: int = 5

    session_clear_on_delete: bool = False

    console_host: str = "127.0.0.1"
    console_port: int = 8080
    ui_dir: str = "web"

    metrics_enabled: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
