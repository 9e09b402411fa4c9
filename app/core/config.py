"""Application configuration."""
from typing import Dict, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # OpenAI (or any OpenAI-compatible endpoint, e.g. Azure)
    openai_api_key: str = ""
    openai_base_url: Optional[str] = None
    openai_model: str = "gpt-4o-mini"

    # Response augmentation
    use_ai: bool = False
    llm_timeout_seconds: float = 8.0
    llm_max_tokens: int = 150
    llm_temperature: float = 0.7
    min_utterance_length: int = 5

    # Sessions
    session_idle_timeout_seconds: float = 3600.0
    session_sweep_interval_seconds: float = 300.0
    evict_on_completion: bool = False
    repeat_on_silence: bool = False

    # Interview
    stage_prompts: Dict[str, str] = {}  # stage key -> canned prompt override

    # Speech
    max_chunk_length: int = 80
    tts_voice: str = "Polly.Aditi"
    tts_language: str = "hi-IN"
    gather_timeout_seconds: int = 10

    # Database
    database_url: str = "sqlite+aiosqlite:///./interview.db"

    # Server
    base_url: Optional[str] = None
    host: str = "0.0.0.0"
    port: int = 8000

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


settings = Settings()
