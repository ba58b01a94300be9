"""Identity providers for filters that search on the current user."""

import os
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from awful_search.config import IDENTITY_FILES, USERNAME_ENV_VAR, resolve_first_existing


@dataclass
class StaticIdentity:
    """Identity held in memory; assign to username when the user logs in or out."""

    username: str = ""


class FileIdentity:
    """Identity read from the environment or from the first existing identity file.

    The lookup happens on every access, so a login recorded after a filter
    was created is still picked up when the filter is rendered.
    """

    def __init__(self, candidates: list[Path] | None = None) -> None:
        self.candidates = IDENTITY_FILES if candidates is None else candidates

    @property
    def username(self) -> str:
        from_env = os.environ.get(USERNAME_ENV_VAR)
        if from_env:
            return from_env.strip()

        path = resolve_first_existing(self.candidates)
        if path is None:
            logger.debug("No identity file found, was looking at {!r}", self.candidates)
            return ""
        return path.read_text(encoding="utf-8").strip()
