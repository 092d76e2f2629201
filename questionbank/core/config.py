"""Application configuration."""
import logging
import sys
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./questionbank.db"
    SQL_ECHO: bool = False

    # Environment configuration
    ENVIRONMENT: str = "development"  # "development" or "production"

    # CORS configuration - comma-separated origins
    CORS_ORIGINS: str = "http://localhost:5173,http://localhost:3000"

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

    def get_cors_origins(self) -> list[str]:
        """Parse CORS_ORIGINS into a list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    def validate_production_settings(self) -> None:
        """Validate settings for production environment.

        Raises SystemExit if the database is misconfigured.
        """
        if self.ENVIRONMENT == "production":
            if self.is_sqlite():
                print("FATAL: SQLite is not supported in production!", file=sys.stderr)
                print("Set DATABASE_URL to a PostgreSQL or MySQL database.", file=sys.stderr)
                sys.exit(1)

            if self.SQL_ECHO:
                print("WARNING: SQL_ECHO is enabled in production!", file=sys.stderr)


def configure_logging(level: str | None = None) -> None:
    """Apply LOG_LEVEL to the root logger."""
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


settings = Settings()
# Validate on startup
settings.validate_production_settings()
