"""GitHub token providers.

Every provider returns a token string or None; finding nothing is not an
error, the client then runs unauthenticated.
"""

import logging
import os
import subprocess
from pathlib import Path

from dotenv import dotenv_values

logger = logging.getLogger(__name__)

TOKEN_KEY = "GITHUB_TOKEN"
DEFAULT_SETTINGS_FILE = ".env"


def get_token_from_gh_cli() -> str | None:
    """
    Get GitHub token from gh cli.

    Returns:
        Token string or None if gh cli not available/authenticated
    """
    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            timeout=5,
        )
        if result.returncode == 0 and result.stdout.strip():
            logger.info("Using token from gh cli")
            return result.stdout.strip()
    except (subprocess.TimeoutExpired, FileNotFoundError) as e:
        logger.debug("gh cli not available: %s", e)
    return None


def get_token_from_settings_file(
    path: str | os.PathLike = DEFAULT_SETTINGS_FILE, key: str = TOKEN_KEY
) -> str | None:
    """
    Read a token from a key/value settings file.

    Args:
        path: Settings file in dotenv format
        key: Key holding the token

    Returns:
        Token string or None if the file or key is missing
    """
    settings_path = Path(path)
    if not settings_path.is_file():
        logger.debug("Settings file not found: %s", settings_path)
        return None

    value = (dotenv_values(settings_path).get(key) or "").strip()
    if not value:
        logger.debug("No %s in %s", key, settings_path)
        return None

    logger.info("Using token from settings file %s", settings_path)
    return value


def get_token(
    token: str | None = None,
    use_gh_cli: bool = False,
    settings_file: str | os.PathLike | None = DEFAULT_SETTINGS_FILE,
) -> str | None:
    """
    Get GitHub token from various sources.

    Priority:
    1. Explicitly provided token
    2. Environment variable GH_TOKEN / GITHUB_TOKEN
    3. GITHUB_TOKEN in the settings file (skipped when settings_file is None)
    4. gh cli (`gh auth token`) - only if use_gh_cli=True

    Args:
        token: Explicitly provided token
        use_gh_cli: Whether to use gh cli credentials (requires user consent)
        settings_file: dotenv-style file to look in

    Returns:
        GitHub token or None
    """
    if token:
        logger.debug("Using explicitly provided token")
        return token

    env_token = os.environ.get("GH_TOKEN") or os.environ.get("GITHUB_TOKEN")
    if env_token:
        logger.info("Using token from environment variable")
        return env_token

    if settings_file is not None:
        file_token = get_token_from_settings_file(settings_file)
        if file_token:
            return file_token

    # Try gh cli only if explicitly allowed
    if use_gh_cli:
        return get_token_from_gh_cli()

    return None
