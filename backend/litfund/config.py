from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-sonnet-4-5"
    anthropic_api_url: str = "https://api.anthropic.com/v1/messages"
    anthropic_version: str = "2023-06-01"
    anthropic_max_tokens: int = 16000
    anthropic_timeout: float | None = None
    system_prompt_path: str = "system_prompt.txt"
    max_attachment_mb: float = 50
    log_level: str = "INFO"
    cors_origins: str = "*"

    model_config = {"env_file": ".env", "extra": "ignore"}

    @property
    def max_attachment_bytes(self) -> int:
        return int(self.max_attachment_mb * 1024 * 1024)


settings = Settings()
