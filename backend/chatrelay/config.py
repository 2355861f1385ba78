"""Application configuration via pydantic-settings.

Reads from environment variables and .env file.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Upstream (any OpenAI-compatible chat completions API)
    openai_api_key: str = ""
    openai_base_url: str = "https://dashscope.aliyuncs.com/compatible-mode/v1"
    openai_model: str = "qwen-plus"
    upstream_timeout_seconds: float = 60.0

    default_system_prompt: str = "You are a professional programming assistant."

    # HTTP
    host: str = "127.0.0.1"
    port: int = 3000
    cors_origins: list[str] = ["*"]
    static_dir: str = "public"
    sse_ping_seconds: int = 15

    log_level: str = "INFO"

    @property
    def upstream_configured(self) -> bool:
        return bool(self.openai_api_key)


settings = Settings()
