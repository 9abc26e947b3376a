"""Application settings loaded from environment variables via pydantic-settings.

Values are read from two sources, in priority order:

  1. Environment variables, e.g. ``JINA_API_KEY=jina_abc123``
  2. A ``.env`` file in the working directory (local development)

Field ``jina_api_key`` maps to env var ``JINA_API_KEY`` automatically.
``ollama_url`` is also accepted as ``OLLAMA_URL``.

This is the only place the process environment is consulted.  The backend
factory receives a fully-resolved :class:`Settings` instance and never
touches ``os.environ`` itself.
"""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """lance-context settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # === Embedding backends ===
    # Empty string = "not configured" -> the factory skips the backend and
    # falls through to the next candidate.
    openai_api_key: str = ""
    openai_base_url: str = ""  # Custom base URL for OpenAI-compatible APIs
    openai_embedding_model: str = ""  # Empty = text-embedding-3-small
    jina_api_key: str = ""
    jina_embedding_model: str = ""  # Empty = jina-embeddings-v3
    ollama_url: str = Field(
        default="http://localhost:11434",
        validation_alias=AliasChoices("ollama_url", "ollama_base_url"),
    )
    ollama_embedding_model: str = ""  # Empty = nomic-embed-text
    ollama_batch_size: int = Field(default=50, ge=1)

    # === HTTP ===
    http_timeout: float = Field(default=120.0, gt=0)

    # === App Config ===
    app_env: str = "development"
    log_level: str = "INFO"

    def get_available_embedding_backends(self) -> list[str]:
        """Return backend names in fallback order, skipping those with no key."""
        backends: list[str] = []
        if self.openai_api_key:
            backends.append("openai")
        if self.jina_api_key:
            backends.append("jina")
        if self.ollama_url:
            backends.append("ollama")
        return backends
