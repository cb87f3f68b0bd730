import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from ragstore.config.models import CohereConfig, EmbeddingConfig, HuggingFaceConfig, OpenAIConfig

# This file: src/ragstore/config/settings.py
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent.parent
ENV_PATH = PROJECT_ROOT / ".env"


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    """Pipeline settings.

    Settings are passed explicitly to the objects that need them; there is
    no module-level instance.
    """

    # Environment
    ENV: str = Field(default="development", description="Environment: development, production, testing")
    LOG_LEVEL: str = Field(default="INFO", description="Log level")

    # Vector store
    CHROMA_HOST: Optional[str] = Field(default=None, description="ChromaDB server host (HTTP client)")
    CHROMA_PORT: int = Field(default=8000, description="ChromaDB server port")
    CHROMA_SSL: bool = Field(default=False, description="Use HTTPS for the ChromaDB server")
    CHROMA_DB_PATH: str = Field(default="storage/chroma_db", description="Path to ChromaDB storage")

    # Chunking / batching
    EMBEDDING_CHUNK_SIZE: int = Field(default=1000, gt=0, description="Default chunk size for plain text")
    EMBEDDING_CHUNK_OVERLAP: int = Field(default=200, ge=0, description="Default chunk overlap")
    DEFAULT_BATCH_SIZE: int = Field(default=100, gt=0, description="Documents per store write")
    EMBEDDING_TIMEOUT: float = Field(default=60.0, gt=0, description="HTTP timeout for embedding providers (s)")

    # Model API Keys
    OPENAI_API_KEY: Optional[str] = Field(default=None, description="OpenAI API Key")
    COHERE_API_KEY: Optional[str] = Field(default=None, description="Cohere API Key")
    HUGGINGFACE_API_KEY: Optional[str] = Field(default=None, description="HuggingFace API Key")

    model_config = {
        "frozen": True,
        "arbitrary_types_allowed": True
    }

    def embedding_config(self) -> EmbeddingConfig | None:
        """Build an embedding config from whichever API key is set.

        OpenAI wins over Cohere, which wins over HuggingFace.
        """
        if self.OPENAI_API_KEY:
            return OpenAIConfig(api_key=self.OPENAI_API_KEY, timeout=self.EMBEDDING_TIMEOUT)
        if self.COHERE_API_KEY:
            return CohereConfig(api_key=self.COHERE_API_KEY, timeout=self.EMBEDDING_TIMEOUT)
        if self.HUGGINGFACE_API_KEY:
            return HuggingFaceConfig(api_key=self.HUGGINGFACE_API_KEY, timeout=self.EMBEDDING_TIMEOUT)
        return None


def load_settings(env_file: str | Path | None = None) -> Settings:
    """Load settings from environment variables.

    A ``.env`` file (the given one, the project root one, or one in the cwd)
    is read first without overriding variables already set.
    """
    if env_file is not None:
        load_dotenv(env_file)
    elif ENV_PATH.exists():
        load_dotenv(ENV_PATH)
    else:
        load_dotenv()

    return Settings(
        ENV=os.getenv("ENV", "development"),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
        CHROMA_HOST=os.getenv("CHROMA_HOST") or None,
        CHROMA_PORT=int(os.getenv("CHROMA_PORT", "8000")),
        CHROMA_SSL=_env_bool("CHROMA_SSL"),
        CHROMA_DB_PATH=os.getenv("CHROMA_DB_PATH", str(PROJECT_ROOT / "storage/chroma_db")),
        EMBEDDING_CHUNK_SIZE=int(os.getenv("EMBEDDING_CHUNK_SIZE", "1000")),
        EMBEDDING_CHUNK_OVERLAP=int(os.getenv("EMBEDDING_CHUNK_OVERLAP", "200")),
        DEFAULT_BATCH_SIZE=int(os.getenv("DEFAULT_BATCH_SIZE", "100")),
        EMBEDDING_TIMEOUT=float(os.getenv("EMBEDDING_TIMEOUT", "60")),
        OPENAI_API_KEY=os.getenv("OPENAI_API_KEY"),
        COHERE_API_KEY=os.getenv("COHERE_API_KEY"),
        HUGGINGFACE_API_KEY=os.getenv("HUGGINGFACE_API_KEY"),
    )
