"""
Application configuration via pydantic-settings.

Loads values from .env file with defaults matching a local Handy install.
Use ``get_settings()`` to obtain the cached singleton instance.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Dictation settings loaded from environment / .env file.

    All settings can be overridden via environment variables or a `.env` file.
    Field names map directly to env var names (case-insensitive). Durations
    are in seconds.

    Attributes:
        handy_api_url: Base address of the Handy HTTP API.
        transcribe_timeout: Overall deadline for a new history entry to appear.
        post_process_wait: Extra time granted to post-processing once the raw
            entry is visible. Not deducted from ``transcribe_timeout``.
        host_provider: Which host adapter to use ("opencode" or "console").
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Silently ignore unrecognized env vars
    )

    # --- Handy speech-to-text service ---
    handy_api_url: str = "http://localhost:9876"
    handy_request_timeout: float = 10.0  # Per-request HTTP timeout

    # --- History polling ---
    transcribe_timeout: float = 30.0
    post_process_wait: float = 15.0
    poll_interval: float = 0.3
    # Emit a warning notice when post-processing timed out and raw text was used
    notify_partial_result: bool = True

    # --- Host ---
    host_provider: str = "opencode"
    opencode_api_url: str = "http://localhost:4096"
    notice_title: str = "Dictate"

    # --- Bridge server ---
    app_host: str = "127.0.0.1"
    app_port: int = 9877
    log_level: str = "INFO"  # Python logging level


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings singleton.

    Uses ``functools.lru_cache`` so the .env file is read only once.
    """
    return Settings()
