"""
Database manager for Greenlight.

Handles:
- Connection pool management with SQLAlchemy
- Schema checks and creation
- Access to the movie repository
"""

from typing import List

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from .config import Config
from .movies import MovieRepository
from .utils import setup_logger


class DatabaseManager:
    """
    Owns the engine and the repositories built on it.

    Responsibilities:
    - Connection pool configuration
    - Table existence checks and creation
    - Exposing MovieRepository as ``movies``
    """

    REQUIRED_TABLES = ["movies"]

    TABLE_DDL = {
        "movies": """
            CREATE TABLE IF NOT EXISTS movies (
                id BIGINT AUTO_INCREMENT PRIMARY KEY,
                created_at TIMESTAMP(0) NOT NULL DEFAULT CURRENT_TIMESTAMP,
                title VARCHAR(500) NOT NULL,
                year INT NOT NULL,
                runtime INT NOT NULL,
                genres JSON NOT NULL,
                version INT NOT NULL DEFAULT 1,
                FULLTEXT INDEX idx_movies_title (title)
            ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_0900_ai_ci
        """,
    }

    def __init__(self, config: Config):
        self.config = config
        self.logger = setup_logger("database", config.log_dir)
        self.engine = self._create_engine()
        self.movies = MovieRepository(self.engine, self.logger)

    def _create_engine(self) -> Engine:
        """Create SQLAlchemy engine with connection pooling."""
        return create_engine(
            self.config.get_db_url(),
            pool_size=self.config.db_pool_size,
            max_overflow=self.config.db_max_overflow,
            pool_pre_ping=True,
            pool_recycle=self.config.db_pool_recycle,
            pool_timeout=self.config.db_query_timeout,
            connect_args=self.config.get_connect_args(),
        )

    def _execute(self, query: str, params: dict = None) -> list:
        """Execute a query and return results."""
        with self.engine.connect() as conn:
            result = conn.execute(text(query), params or {})
            conn.commit()
            return result.fetchall() if result.returns_rows else []

    def ping(self) -> bool:
        """Check that a connection can be established."""
        try:
            self._execute("SELECT 1")
            return True
        except SQLAlchemyError as e:
            self.logger.error(f"Database ping failed: {e}")
            return False

    # ============ SCHEMA ============

    def table_exists(self, table_name: str) -> bool:
        """Check if a specific table exists."""
        result = self._execute(
            """SELECT COUNT(*) FROM information_schema.tables
               WHERE table_schema = :db AND table_name = :table""",
            {"db": self.config.db_name, "table": table_name}
        )
        return result[0][0] > 0

    def get_missing_tables(self) -> List[str]:
        """Get required tables that don't exist."""
        return [t for t in self.REQUIRED_TABLES if not self.table_exists(t)]

    def check_and_create_tables(self) -> dict:
        """
        Check which tables exist and create any that are missing.

        Returns:
            {
                "existing": List[str],
                "created": List[str],
                "all_present": bool
            }
        """
        result = {"existing": [], "created": [], "all_present": False}

        for table in self.REQUIRED_TABLES:
            if self.table_exists(table):
                result["existing"].append(table)
            elif self._create_table(table):
                result["created"].append(table)

        present = len(result["existing"]) + len(result["created"])
        result["all_present"] = present == len(self.REQUIRED_TABLES)
        return result

    def _create_table(self, table: str) -> bool:
        """Create a specific table with its indexes."""
        try:
            with self.engine.connect() as conn:
                # Full-text indexes built in this session keep stopwords searchable
                conn.execute(text("SET SESSION innodb_ft_enable_stopword = OFF"))
                conn.execute(text(self.TABLE_DDL[table]))
                conn.commit()
            self.logger.info(f"Created table {table}")
            return True
        except SQLAlchemyError as e:
            self.logger.error(f"Error creating table {table}: {e}")
            return False

    def get_movie_count(self) -> int:
        """Get count of movies."""
        result = self._execute("SELECT COUNT(*) FROM movies")
        return result[0][0]

    def get_status(self) -> dict:
        """Get current database status."""
        missing = self.get_missing_tables()
        status = {
            "movie_count": 0,
            "missing_tables": missing,
            "all_tables_exist": not missing,
        }
        if "movies" not in missing:
            status["movie_count"] = self.get_movie_count()
        return status
