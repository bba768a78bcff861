"""Service settings loaded from environment variables."""
import os


class Settings:
    """Application settings loaded from environment variables."""

    # Upload ceiling; anything larger is rejected before it reaches pypdf
    MAX_DOCUMENT_BYTES: int = int(os.getenv("PDF_SPLIT_MAX_BYTES", str(6 * 1024 * 1024)))

    # Split sessions (referenced download mode)
    SESSION_TTL_SECONDS: float = float(os.getenv("PDF_SESSION_TTL_SECONDS", "600"))
    SESSION_SWEEP_INTERVAL_SECONDS: float = float(
        os.getenv("PDF_SESSION_SWEEP_INTERVAL_SECONDS", "60")
    )
    SESSION_STORE: str = os.getenv("SESSION_STORE", "memory").strip().lower()

    # "referenced" returns download links, "inline" embeds base64 pages; clients reading files[].data need inline
    DEFAULT_RESPONSE_MODE: str = os.getenv("PDF_SPLIT_DEFAULT_MODE", "referenced").strip().lower()

    # JSON body field carrying the base64 document
    PAYLOAD_FIELD: str = "pdf"

    # Redis backend
    REDIS_HOST: str = os.getenv("REDIS_HOST", "localhost")
    REDIS_PORT: int = int(os.getenv("REDIS_PORT", "6379"))
    REDIS_DB: int = int(os.getenv("REDIS_DB", "0"))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()
