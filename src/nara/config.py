"""Configuration management for NARA."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Server
    app_name: str = "NARA"
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    log_level: str = "INFO"
    public_base_url: str = "http://localhost:8000"

    # Directories
    upload_dir: Path = Path("./uploads")
    temp_dir: Path = Path("./temp")
    artifacts_dir: Path = Path("./artifacts")
    cache_dir: Path = Path("./cache")

    # Frame extraction defaults
    frame_interval: float = 0.8
    frame_format: str = "jpeg"
    frame_quality: float = 0.8
    ffmpeg_path: str = "ffmpeg"
    ffprobe_path: str = "ffprobe"

    # Completion / transcription providers
    completion_provider: str = "openai"
    openai_api_key: str | None = None
    openai_model: str = "gpt-4o"
    transcription_model: str = "whisper-1"
    anthropic_api_key: str | None = None
    anthropic_model: str = "claude-sonnet-4-20250514"
    completion_max_tokens: int = 4096

    def ensure_directories(self) -> None:
        """Create required directories if they don't exist."""
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        self.temp_dir.mkdir(parents=True, exist_ok=True)
        self.artifacts_dir.mkdir(parents=True, exist_ok=True)
        self.cache_dir.mkdir(parents=True, exist_ok=True)


# Global settings instance
settings = Settings()
