"""Client configuration."""
from pydantic_settings import BaseSettings


class ClientSettings(BaseSettings):
    """Where the client finds the question bank API.

    Read from QUESTIONBANK_API_URL / QUESTIONBANK_API_TIMEOUT.
    """
    API_URL: str = "http://localhost:8000"
    API_TIMEOUT: float = 10.0

    class Config:
        env_prefix = "QUESTIONBANK_"
        env_file = ".env"
        extra = "ignore"
