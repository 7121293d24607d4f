from pydantic_settings import BaseSettings

MiB = 1024 * 1024


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    log_level: str | None = None  # Overrides the level implied by debug, e.g. "WARNING"
    session_secret_key: str
    cors_origins: list[str] = []
    storage_path: str  # Root directory of the blob store (resource files, profile photos)
    max_upload_size: int = 20 * MiB  # Ceiling for resource uploads and screening attachments
    admin_email: str = "admin@champions.local"
    admin_password: str = "changeme"  # Password of the bootstrap admin account, used only when it is first created
    llm_model: str = "gemini/gemini-2.5-flash"
    llm_api_key: str = ""
    llm_temperature: float = 0.2
    # Build metadata injected during Docker build via environment variables
    git_commit_hash: str = "unknown"
    git_commit_date: str = "unknown"
    build_time: str = "unknown"

    model_config = {
        "env_file": [".env"],
        "env_prefix": "CHAMPIONS_",
        "extra": "ignore",
    }
