from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    """
    Application settings and configuration management.
    Loads environment variables from .env file.
    """

    # ============ API Configuration ============
    API_TITLE: str = "Interview Queue Server"
    API_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # ============ Server Configuration ============
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    LOG_LEVEL: str = "INFO"
    """Root logging level"""

    # ============ Session Configuration ============
    SESSION_CODE_LENGTH: int = 6
    """Number of characters in a session code"""

    SESSION_CODE_ALPHABET: str = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
    """Code characters - no 0/O or 1/I to keep codes easy to read aloud"""

    SESSION_CODE_MAX_ATTEMPTS: int = 1000
    """Collision retries before giving up on code generation"""

    ENFORCE_HOST_ROLE: bool = True
    """Only the session host may run start_next / end_interview"""

    # ============ Storage Configuration ============
    RECORDINGS_DIR: str = "recordings"
    """Directory where uploaded recordings are written"""

    STATIC_DIR: str = "dist"
    """Built front-end, served at / when the directory exists"""

    # ============ CORS Configuration ============
    ALLOWED_ORIGINS: List[str] = ["*"]
    """Allowed origins for CORS requests"""

    class Config:
        env_file = ".env"
        """Load environment variables from .env file"""

        env_file_encoding = "utf-8"
        case_sensitive = False

# Create global settings instance
settings = Settings()
