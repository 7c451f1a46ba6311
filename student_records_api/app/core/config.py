"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for every field except
the data file paths, which must be supplied either through the
environment or on the command line (see ``run.py``).
"""

import os
import dataclasses
from dataclasses import dataclass
from typing import Optional


def _optional_env(name: str) -> Optional[str]:
    value = os.getenv(name, "").strip()
    return value or None


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Student Records API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: Optional[str] = _optional_env("LOG_FILE")

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8000"))

    # Backing files.  The students file is required; the quiz results and
    # users tables stay memory-only (and empty) when no path is configured.
    students_csv: Optional[str] = _optional_env("STUDENTS_CSV")
    quiz_results_csv: Optional[str] = _optional_env("QUIZ_RESULTS_CSV")
    users_csv: Optional[str] = _optional_env("USERS_CSV")

    # Number of extra attempts made when rewriting a table file fails.
    save_retries: int = int(os.getenv("SAVE_RETRIES", "2"))

    def replace(self, **overrides) -> "Settings":
        """Return a copy with ``overrides`` applied; ``None`` values are ignored."""
        return dataclasses.replace(self, **{k: v for k, v in overrides.items() if v is not None})


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.
settings = Settings()
