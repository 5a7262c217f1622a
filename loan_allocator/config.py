"""Configuration management using Pydantic Settings"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Dataset
    dataset_dir: Path = Path("datasets/sample")
    output_dir: Path | None = None  # defaults to dataset_dir
    assignments_filename: str = "assignments.csv"
    yields_filename: str = "yields.csv"
    rejections_filename: str = "rejections.csv"
    write_rejections: bool = False

    # Database (stores runs submitted through the API)
    database_url: str = "sqlite:///./loan_allocator.db"

    # Service
    service_name: str = "loan-allocator"
    log_level: str = "INFO"


settings = Settings()
