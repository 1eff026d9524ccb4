"""
HTTP client for fetching remote test transcripts (e.g. a CI build-log.txt).
"""

import logging
from typing import Optional

import requests

from .config import get_http_timeout, get_input_encoding
from .parser import ReadError

logger = logging.getLogger(__name__)

USER_AGENT = "gotest-junit/0.1.0"


class LogClient:
    """Client for downloading test output over HTTP."""

    def __init__(self, timeout: Optional[float] = None, encoding: Optional[str] = None):
        """
        Initialize the client.

        Args:
            timeout: Request timeout in seconds. Defaults to HTTP_TIMEOUT from config
            encoding: Fallback encoding when the server does not declare one
        """
        self.timeout = timeout or get_http_timeout()
        self.encoding = encoding or get_input_encoding()
        self.session = requests.Session()
        self.session.headers.update({
            "User-Agent": USER_AGENT,
            "Accept": "text/plain"
        })

    def fetch_text(self, url: str) -> str:
        """
        Download a transcript.

        Raises:
            ReadError: If the request fails or returns an error status.
        """
        logger.info(f"Downloading {url}")
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Failed to download {url}: {e}")
            raise ReadError(f"Failed to download {url}: {e}") from e

        encoding = self.encoding
        if "charset=" in response.headers.get("Content-Type", ""):
            encoding = response.encoding
        return response.content.decode(encoding, errors="replace")

    def fetch_lines(self, url: str) -> list[str]:
        """Download a transcript and split it into lines on "\\n" only."""
        lines = self.fetch_text(url).split("\n")
        if lines and lines[-1] == "":
            lines.pop()
        return lines
