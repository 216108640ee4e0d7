"""
Application settings and configuration
"""

import os
from pathlib import Path
from dotenv import load_dotenv
from typing import Optional

from src.config.constants import BATCH_SIZE, BATCH_DELAY, CACHE_DURATION, SHEET_NAME

# Load environment variables from .env file
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


class Settings:
    """Application settings loaded from environment variables"""

    # Google Sheets
    SPREADSHEET_ID: Optional[str] = os.getenv("SPREADSHEET_ID") or None
    GOOGLE_SHEETS_ACCESS_TOKEN: Optional[str] = os.getenv("GOOGLE_SHEETS_ACCESS_TOKEN") or None
    SHEET_NAME: str = os.getenv("SHEET_NAME", SHEET_NAME)

    # Local grid file, used when no spreadsheet is configured
    SHEET_FILE_PATH: str = os.getenv("SHEET_FILE_PATH", "./task_sheet.json")

    # Batching and caching
    BATCH_SIZE: int = int(os.getenv("BATCH_SIZE", str(BATCH_SIZE)))
    BATCH_DELAY: float = float(os.getenv("BATCH_DELAY", str(BATCH_DELAY)))
    CACHE_DURATION: int = int(os.getenv("CACHE_DURATION", str(CACHE_DURATION)))
    CACHE_FILE_PATH: Optional[str] = os.getenv("CACHE_FILE_PATH") or None

    # Application
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE: Optional[str] = os.getenv("LOG_FILE") or None
    WEB_PORT: int = int(os.getenv("WEB_PORT", "8000"))
    USER_TIMEZONE_OFFSET: int = int(os.getenv("USER_TIMEZONE_OFFSET", "0"))

    @property
    def use_google_sheets(self) -> bool:
        """Whether a remote spreadsheet is configured"""
        return bool(self.SPREADSHEET_ID)

    @classmethod
    def validate(cls) -> bool:
        """Validate that all required settings are present"""
        missing = []
        if cls.SPREADSHEET_ID and not cls.GOOGLE_SHEETS_ACCESS_TOKEN:
            missing.append("GOOGLE_SHEETS_ACCESS_TOKEN")

        if missing:
            raise ValueError(
                f"Missing required environment variables: {', '.join(missing)}"
            )

        if cls.BATCH_SIZE <= 0:
            raise ValueError("BATCH_SIZE must be a positive integer")

        return True


# Global settings instance
settings = Settings()
