"""Configuration constants for awful-search."""

import os
from pathlib import Path

# Forums site root. Search requests go to BASE_URL + SEARCH_PATH.
BASE_URL: str = os.environ.get("AWFUL_SEARCH_BASE_URL", "https://forums.somethingawful.com/")
SEARCH_PATH: str = "query.php"

# Seconds before an HTTP request is abandoned.
REQUEST_TIMEOUT: float = 30.0

# Session cookies ("name=value" per line). First file found is used.
COOKIE_FILES: list[Path] = [
    Path("~/.config/awful-search/cookies.txt").expanduser(),
    Path("~/.config/secret/awful-search-cookies.txt").expanduser(),
]

# Logged-in username, used by the "My username" filter. First file found is used.
IDENTITY_FILES: list[Path] = [
    Path("~/.config/awful-search/username.txt").expanduser(),
    Path("~/.awful-search-username").expanduser(),
]

# Overrides IDENTITY_FILES when set.
USERNAME_ENV_VAR: str = "AWFUL_SEARCH_USERNAME"


def resolve_first_existing(candidates: list[Path]) -> Path | None:
    """Return the first path in candidates that is an existing file."""
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None
