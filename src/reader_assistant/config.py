import os
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

class Settings(BaseSettings):
    # Vision provider API Keys (Load keys securely)
    claude_api_key: str | None = os.getenv("CLAUDE_API_KEY")
    openai_api_key: str | None = os.getenv("OPENAI_API_KEY")
    gemini_api_key: str | None = os.getenv("GEMINI_API_KEY")

    # Search API Key (search is skipped entirely when missing)
    brave_search_api_key: str | None = os.getenv("BRAVE_SEARCH_API_KEY")

    # Upstream endpoints
    anthropic_api_url: str = os.getenv("ANTHROPIC_API_URL", "https://api.anthropic.com/v1/messages")
    anthropic_version: str = os.getenv("ANTHROPIC_VERSION", "2023-06-01")
    openai_api_url: str = os.getenv("OPENAI_API_URL", "https://api.openai.com/v1/chat/completions")
    openai_transcription_url: str = os.getenv(
        "OPENAI_TRANSCRIPTION_URL", "https://api.openai.com/v1/audio/transcriptions"
    )
    gemini_api_url: str = os.getenv("GEMINI_API_URL", "https://generativelanguage.googleapis.com/v1beta/models")
    brave_search_url: str = os.getenv("BRAVE_SEARCH_URL", "https://api.search.brave.com/res/v1/web/search")

    # Request shaping
    max_output_tokens: int = int(os.getenv("MAX_OUTPUT_TOKENS", "4096"))
    transcription_model: str = os.getenv("TRANSCRIPTION_MODEL", "whisper-1")

    # Per-call timeouts (seconds)
    search_timeout_seconds: float = float(os.getenv("SEARCH_TIMEOUT_SECONDS", "5.0"))
    vision_timeout_seconds: float = float(os.getenv("VISION_TIMEOUT_SECONDS", "60.0"))
    transcription_timeout_seconds: float = float(os.getenv("TRANSCRIPTION_TIMEOUT_SECONDS", "60.0"))

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "app.log") # Empty string disables file logging


    class Config:
        env_file = '.env'
        env_file_encoding = 'utf-8'
        extra = 'ignore'

# Create a single settings instance for the application
settings = Settings()


def get_settings() -> Settings:
    """FastAPI dependency returning the process-wide settings (overridable in tests)."""
    return settings
