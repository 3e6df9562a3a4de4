"""
Environment-driven configuration for the importer CLI.
Values come from the process environment, optionally seeded from a .env file.
"""

import os
from dataclasses import dataclass
from typing import Optional
from pathlib import Path
from dotenv import load_dotenv

OUTPUT_FORMATS = ('text', 'json')

def _env_flag(value: Optional[str], default: bool) -> bool:
    if value is None or value == '':
        return default
    return value.strip().lower() in ('1', 'true', 'yes')

@dataclass
class Config:
    """Configuration settings for the importer CLI."""

    database_url: str

    # Enrichment is only active with an API key and OPENAI_ENABLED left on
    openai_api_key: Optional[str] = None
    openai_enabled: bool = True
    openai_model: str = 'gpt-4o-mini'
    enrichment_timeout: float = 20.0
    max_workers: int = 4

    log_level: str = 'INFO'
    output_format: str = 'text'

    @property
    def enrichment_enabled(self) -> bool:
        return bool(self.openai_api_key) and self.openai_enabled

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> 'Config':
        """Build configuration from environment variables.

        Args:
            env_file: .env file to load; defaults to searching from the working directory

        Raises:
            ValueError: If DATABASE_URL is missing or a numeric variable is malformed
        """
        if env_file:
            load_dotenv(env_file)
        else:
            load_dotenv()

        database_url = os.getenv('DATABASE_URL')
        if not database_url:
            raise ValueError("DATABASE_URL environment variable is required")

        return cls(
            database_url=database_url,
            openai_api_key=os.getenv('OPENAI_API_KEY') or None,
            openai_enabled=_env_flag(os.getenv('OPENAI_ENABLED'), True),
            openai_model=os.getenv('OPENAI_MODEL') or cls.openai_model,
            enrichment_timeout=float(os.getenv('ENRICHMENT_TIMEOUT') or cls.enrichment_timeout),
            max_workers=int(os.getenv('MAX_WORKERS') or cls.max_workers),
            log_level=os.getenv('LOG_LEVEL') or cls.log_level,
            output_format=(os.getenv('OUTPUT_FORMAT') or cls.output_format).lower()
        )

    def validate(self) -> bool:
        """Raise ValueError for settings no command can run with."""
        if self.max_workers <= 0:
            raise ValueError("max_workers must be positive")
        if self.enrichment_timeout <= 0:
            raise ValueError("enrichment_timeout must be positive")
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(f"output_format must be one of: {', '.join(OUTPUT_FORMATS)}")
        return True
