"""
Simple configuration management.

The ``Settings`` dataclass reads configuration from environment
variables, after filling in any that are missing from a ``.env`` file.
Defaults are provided for every field so the application starts in a
development environment without any setup; production deployments must at least override ``SESSION_SECRET_KEY``
and supply the Yelp and GitHub credentials.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv


PROJECT_ROOT = Path(__file__).resolve().parents[3]


def load_env_file(path: Optional[Union[str, Path]] = None) -> bool:
    """Load ``KEY=value`` lines from ``path`` (default: ``ENV_FILE`` or
    ``.env`` in the project root) into ``os.environ``.

    Variables already present in the environment win.  Returns ``False``
    when the file is missing or empty.
    """
    if path is None:
        path = os.getenv("ENV_FILE") or PROJECT_ROOT / ".env"
    path = Path(path)
    if not path.is_file():
        return False
    return load_dotenv(path, override=False)


# Field defaults below are read when the class is defined.
load_env_file()


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Nightlife API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Path to the SQLite database file.  Relative paths are resolved
    # against the package root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "nightlife.db")
    # Maximum number of connections open at the same time.
    db_pool_size: int = int(os.getenv("DB_POOL_SIZE", "5"))

    # Signed cookie sessions.  Sessions last 14 days by default.
    session_secret_key: str = os.getenv("SESSION_SECRET_KEY", "change_me")
    session_max_age: int = int(os.getenv("SESSION_MAX_AGE", str(14 * 24 * 60 * 60)))

    # Yelp Fusion API
    yelp_api_key: str = os.getenv("YELP_API_KEY", "")
    yelp_api_base_url: str = os.getenv("YELP_API_BASE_URL", "https://api.yelp.com/v3")
    upstream_timeout: float = float(os.getenv("UPSTREAM_TIMEOUT", "30"))

    # GitHub OAuth application
    github_client_id: str = os.getenv("GITHUB_CLIENT_ID", "")
    github_client_secret: str = os.getenv("GITHUB_CLIENT_SECRET", "")
    github_callback_url: str = os.getenv(
        "GITHUB_CALLBACK_URL",
        "http://localhost:3001/api/login/github/callback",
    )
    login_success_redirect: str = os.getenv("LOGIN_SUCCESS_REDIRECT", "/")
    login_failure_redirect: str = os.getenv("LOGIN_FAILURE_REDIRECT", "/")

    # HTTP server
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3001"))
    keep_alive_timeout: int = int(os.getenv("KEEP_ALIVE_TIMEOUT", "120"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables and
# the .env file must be in place before importing this module.
settings = Settings()
