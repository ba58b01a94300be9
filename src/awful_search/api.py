"""HTTP client for the forums site."""

from pathlib import Path
from typing import Any

import requests
from loguru import logger

from awful_search.config import BASE_URL, COOKIE_FILES, REQUEST_TIMEOUT
from awful_search.errors import TransportError


class ForumsApi:
    """Session-cookie authenticated access to forum pages."""

    def __init__(
        self,
        *,
        base_url: str = BASE_URL,
        timeout: float = REQUEST_TIMEOUT,
        cookie_files: list[Path] | None = None,
    ) -> None:
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.timeout = timeout
        self.sess = requests.Session()

        candidates = COOKIE_FILES if cookie_files is None else cookie_files
        cookie_file_name: str | None = None
        for cookie_path in candidates:
            try:
                cookie_text = cookie_path.read_text(encoding="utf-8")
                cookie_file_name = str(cookie_path)
                break
            except FileNotFoundError:
                pass
        else:
            cookie_text = ""

        for line in cookie_text.splitlines():
            name, sep, value = line.strip().partition("=")
            if sep and name:
                self.sess.cookies.set(name.strip(), value.strip())

        logger.debug(
            "API ready: base_url {!r}, cookies from {!r} ({} cookies)",
            self.base_url,
            cookie_file_name,
            len(self.sess.cookies),
        )

    def call(self, path: str, params: dict[str, Any], *, post: bool = False) -> str:
        """Request a forum page and return its body.

        Raises:
            TransportError: The request could not be made or returned an error status.
        """
        url = self.base_url + path
        method = "POST" if post else "GET"
        logger.debug("Making request: {} {!r} {}", method, path, repr(params)[:64])
        try:
            if post:
                r = self.sess.post(url, data=params, timeout=self.timeout)
            else:
                r = self.sess.get(url, params=params, timeout=self.timeout)
            r.raise_for_status()
        except requests.RequestException as e:
            msg = f"Request failed: ({path!r}, {params!r}) -> {e}"
            raise TransportError(msg) from e
        return r.text
