"""GitHub Gist transport for backup manifests.

Pulls and pushes the backup file to a single file inside a gist using
the GitHub REST API. The transport only moves bytes; parsing and
validation stay in :mod:`crateback.core.manifest`.
"""

import logging
from types import TracebackType
from typing import Any

import httpx

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"


class RemoteError(Exception):
    """Raised when the gist cannot be read or written."""


class GistClient:
    """Minimal client for reading and writing a file in a gist.

    Example:
        >>> with GistClient(token=os.environ["GITHUB_TOKEN"]) as client:
        ...     content = client.pull("aa5a315d61ae9438b18d", "crateback.json")
    """

    def __init__(
        self,
        token: str | None = None,
        base_url: str = GITHUB_API_URL,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            token: GitHub token. Required for push/create and private gists.
            base_url: GitHub API base URL.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (used by tests).
        """
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._has_token = bool(token)
        self._client = httpx.Client(
            base_url=base_url,
            headers=headers,
            timeout=httpx.Timeout(timeout, connect=10.0),
            transport=transport,
        )

    def __enter__(self) -> "GistClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        self._client.close()

    def _request(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        """Send a request and return the decoded JSON body.

        Raises:
            RemoteError: On transport failure, error status or non-JSON body.
        """
        try:
            response = self._client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.debug("Gist API error body: %s", e.response.text[:500])
            if status == 404:
                raise RemoteError(f"Gist not found ({method} {url})") from e
            if status in (401, 403):
                raise RemoteError(f"Gist access denied (HTTP {status}); check your token") from e
            raise RemoteError(f"Gist API returned HTTP {status} for {method} {url}") from e
        except httpx.RequestError as e:
            raise RemoteError(f"Gist request failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise RemoteError(f"Gist API returned invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise RemoteError("Gist API returned an unexpected response")
        return data

    def _require_token(self) -> None:
        if not self._has_token:
            raise RemoteError("A GitHub token is required to write gists")

    def pull(self, gist_id: str, filename: str) -> bytes:
        """Download one file from a gist.

        Large files are truncated in the gist response; their raw URL is
        fetched instead.

        Raises:
            RemoteError: If the gist or file cannot be read.
        """
        data = self._request("GET", f"/gists/{gist_id}")
        files = data.get("files") or {}
        entry = files.get(filename)
        if not isinstance(entry, dict):
            available = ", ".join(sorted(files)) or "none"
            raise RemoteError(f"File {filename!r} not in gist {gist_id} (files: {available})")

        if not entry.get("truncated") and isinstance(entry.get("content"), str):
            return entry["content"].encode("utf-8")

        raw_url = entry.get("raw_url")
        if not raw_url:
            raise RemoteError(f"File {filename!r} in gist {gist_id} has no content")
        try:
            response = self._client.get(raw_url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise RemoteError(f"Failed to download {filename!r}: {e}") from e
        return response.content

    def push(self, gist_id: str, filename: str, content: str) -> None:
        """Replace one file in an existing gist.

        Raises:
            RemoteError: If there is no token or the update fails.
        """
        self._require_token()
        self._request(
            "PATCH", f"/gists/{gist_id}", json={"files": {filename: {"content": content}}}
        )
        logger.info("Pushed %s to gist %s", filename, gist_id)

    def create(
        self,
        filename: str,
        content: str,
        description: str = "crateback backup",
        public: bool = False,
    ) -> str:
        """Create a new gist holding one file.

        Returns:
            ID of the new gist.

        Raises:
            RemoteError: If there is no token or creation fails.
        """
        self._require_token()
        data = self._request(
            "POST",
            "/gists",
            json={
                "description": description,
                "public": public,
                "files": {filename: {"content": content}},
            },
        )
        gist_id = data.get("id")
        if not isinstance(gist_id, str) or not gist_id:
            raise RemoteError("Gist API did not return an ID for the new gist")
        logger.info("Created gist %s", gist_id)
        return gist_id
