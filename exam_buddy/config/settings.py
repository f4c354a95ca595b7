import os
from typing import List, Optional

from langchain_openai import OpenAIEmbeddings
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    # Server settings
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8000"))
    cors_origins: str = os.getenv("CORS_ORIGINS", "*")

    # OpenAI settings
    openai_api_key: Optional[str] = os.getenv("OPENAI_API_KEY")
    embedding_model: str = os.getenv("EMBEDDING_MODEL", "text-embedding-3-large")
    chat_model: str = os.getenv("CHAT_MODEL", "gpt-4.1")
    chat_temperature: Optional[float] = None
    chat_timeout: float = float(os.getenv("CHAT_TIMEOUT", "60"))

    # Qdrant settings
    qdrant_url: Optional[str] = os.getenv("QDRANT_URL")
    qdrant_host: str = os.getenv("QDRANT_HOST", "localhost")
    qdrant_port: int = int(os.getenv("QDRANT_PORT", "6333"))
    qdrant_api_key: Optional[str] = os.getenv("QDRANT_API_KEY")
    qdrant_collection: str = os.getenv("QDRANT_COLLECTION", "college-syllabus")

    # Redis settings (broker and job records)
    redis_host: str = os.getenv("REDIS_HOST", "localhost")
    redis_port: int = int(os.getenv("REDIS_PORT", "6379"))
    redis_password: Optional[str] = os.getenv("REDIS_PASSWORD")

    # Upload settings
    upload_dir: str = os.getenv("UPLOAD_DIR", "uploads")
    accepted_upload_types: str = os.getenv("ACCEPTED_UPLOAD_TYPES", "application/pdf")

    # Retrieval settings
    retriever_top_k: int = int(os.getenv("RETRIEVER_TOP_K", "3"))

    # Chunking settings
    chunking_enabled: bool = os.getenv("CHUNKING_ENABLED", "true").lower() == "true"
    chunk_size: int = int(os.getenv("CHUNK_SIZE", "1000"))
    chunk_overlap: int = int(os.getenv("CHUNK_OVERLAP", "200"))

    # Worker settings
    worker_concurrency: int = int(os.getenv("WORKER_CONCURRENCY", "100"))
    ingestion_max_retries: int = int(os.getenv("INGESTION_MAX_RETRIES", "3"))
    ingestion_min_backoff_ms: int = int(os.getenv("INGESTION_MIN_BACKOFF_MS", "15000"))
    ingestion_max_backoff_ms: int = int(os.getenv("INGESTION_MAX_BACKOFF_MS", "300000"))
    ingestion_time_limit_ms: int = int(os.getenv("INGESTION_TIME_LIMIT_MS", "600000"))

    # Video transcript settings
    youtube_language: str = os.getenv("YOUTUBE_LANGUAGE", "en")
    youtube_chunk_seconds: int = int(os.getenv("YOUTUBE_CHUNK_SECONDS", "120"))

    # Repository settings
    github_branch: str = os.getenv("GITHUB_BRANCH", "main")
    github_recursive: bool = os.getenv("GITHUB_RECURSIVE", "false").lower() == "true"
    github_access_token: Optional[str] = os.getenv("GITHUB_ACCESS_TOKEN")
    github_api_url: str = os.getenv("GITHUB_API_URL", "https://api.github.com")

    # Job record settings
    job_retention_days: int = int(os.getenv("JOB_RETENTION_DAYS", "7"))

    # Development/Debug
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: Optional[str] = os.getenv("LOG_FILE")
    unit_tests: bool = os.getenv("UNIT_TESTS", "0") == "1"

    @property
    def accepted_upload_type_list(self) -> List[str]:
        return [t.strip() for t in self.accepted_upload_types.split(",") if t.strip()]

    @property
    def cors_origin_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    # Embedding function shared by the API and the workers, so queries and
    # stored vectors always come from the same model.
    @property
    def embedding_function(self) -> OpenAIEmbeddings:
        try:
            return OpenAIEmbeddings(
                model=self.embedding_model,
                api_key=self.openai_api_key,
            )
        except Exception as e:
            raise ValueError(f"Failed to create embedding client for {self.embedding_model}. Error: {str(e)}\n"
                             "Please set OPENAI_API_KEY")

    # Ensure required directories exist
    def initialize_directories(self) -> None:
        os.makedirs(self.upload_dir, exist_ok=True)

    # Model config
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


# Create settings instance
settings = Settings()
settings.initialize_directories()
