"""
Configuration management for Greenlight.

Loads configuration from environment variables and provides
a centralized Config dataclass for all settings.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

ENVIRONMENTS = ("development", "staging", "production")


@dataclass
class Config:
    """Centralized configuration from environment variables."""

    # Database
    db_host: str = "localhost"
    db_port: int = 3306
    db_user: str = ""
    db_password: str = ""
    db_name: str = ""

    # Connection pool
    db_pool_size: int = 25
    db_max_overflow: int = 0
    db_pool_recycle: int = 900  # seconds a connection may live before reuse
    db_query_timeout: int = 3  # seconds, applied to every store call

    # Paths
    project_dir: Path = field(default_factory=Path.cwd)
    log_dir: Path = field(default_factory=lambda: Path.cwd() / "logs")

    # API settings
    env: str = "development"
    max_body_bytes: int = 1_048_576

    @classmethod
    def from_env(cls, env_path: Optional[str] = None) -> "Config":
        """
        Load configuration from environment variables.

        Args:
            env_path: Optional path to .env file. If not provided,
                     looks for .env in the current directory.

        Returns:
            Config instance with loaded values.

        Raises:
            ValueError: If required environment variables are missing
                or invalid.
        """
        if env_path:
            load_dotenv(env_path)
        else:
            load_dotenv()

        # Database config
        db_host = os.getenv("SQL_HOST", "localhost")
        db_port = int(os.getenv("SQL_PORT", "3306"))
        db_user = os.getenv("SQL_USER", "")
        db_password = os.getenv("SQL_PASS", "")
        db_name = os.getenv("SQL_DB", "")

        if not db_user or not db_name:
            raise ValueError("SQL_USER and SQL_DB environment variables are required")

        # Pool settings
        db_pool_size = int(os.getenv("DB_POOL_SIZE", "25"))
        db_max_overflow = int(os.getenv("DB_MAX_OVERFLOW", "0"))
        db_pool_recycle = int(os.getenv("DB_POOL_RECYCLE", "900"))
        db_query_timeout = int(os.getenv("DB_QUERY_TIMEOUT", "3"))

        env = os.getenv("GREENLIGHT_ENV", "development").lower()
        if env not in ENVIRONMENTS:
            raise ValueError(f"GREENLIGHT_ENV must be one of {', '.join(ENVIRONMENTS)}")

        project_dir = Path(os.getenv("PROJECT_DIR", Path.cwd()))

        # API settings
        max_body_bytes = int(os.getenv("MAX_BODY_BYTES", "1048576"))

        return cls(
            db_host=db_host,
            db_port=db_port,
            db_user=db_user,
            db_password=db_password,
            db_name=db_name,
            db_pool_size=db_pool_size,
            db_max_overflow=db_max_overflow,
            db_pool_recycle=db_pool_recycle,
            db_query_timeout=db_query_timeout,
            project_dir=project_dir,
            log_dir=project_dir / "logs",
            env=env,
            max_body_bytes=max_body_bytes,
        )

    def get_db_url(self) -> str:
        """Get SQLAlchemy database URL."""
        return (
            f"mysql+pymysql://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    def get_connect_args(self) -> dict:
        """Driver arguments bounding every store call by db_query_timeout."""
        return {
            "connect_timeout": self.db_query_timeout,
            "read_timeout": self.db_query_timeout,
            "write_timeout": self.db_query_timeout,
            "charset": "utf8mb4",
        }
