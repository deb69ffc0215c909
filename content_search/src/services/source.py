"""Read-only access to markdown content stored in a GitHub repository."""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from .config import AppConfig, get_config
from .errors import NotFound, TransportError

logger = logging.getLogger(__name__)

USER_AGENT = "portfolio-content-search"


@dataclass(frozen=True)
class SourceDocument:
    """Decoded content of one source object at a specific version."""

    path: str
    text: str
    sha: str
    version_ref: str


class GitHubContentSource:
    """
    Enumerate and fetch markdown documents through the GitHub REST API.

    Listing uses the recursive git tree of the configured branch; fetching
    uses the contents API, which returns base64 text plus the blob ``sha``.
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config or get_config()
        self._client = client
        self._owns_client = client is None
        self.repo_url = f"{self.config.github_api_base}/repos/{self.config.github_repo}"

    @property
    def headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": USER_AGENT,
        }
        if self.config.github_token:
            headers["Authorization"] = f"token {self.config.github_token}"
        return headers

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.config.request_timeout_seconds)
        return self._client

    async def aclose(self) -> None:
        """Close the HTTP client if this source created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def is_content_path(self, path: str) -> bool:
        """Return True for markdown files inside the configured allow-list."""
        if not path.endswith(".md"):
            return False
        root = self.config.content_path
        prefix = f"{root}/" if root else ""
        if any(path.startswith(f"{prefix}{directory}/") for directory in self.config.content_directories):
            return True
        return any(path == f"{prefix}{page}" for page in self.config.standalone_pages)

    async def _get(self, url: str, params: Optional[Dict[str, str]] = None) -> httpx.Response:
        try:
            return await self._get_client().get(url, headers=self.headers, params=params)
        except httpx.HTTPError as exc:
            raise TransportError(f"Request to {url} failed: {exc}") from exc

    async def list_content_paths(self) -> List[str]:
        """List indexable markdown paths, in repository tree order."""
        branch = quote(self.config.github_branch, safe="")
        url = f"{self.repo_url}/git/trees/{branch}"
        response = await self._get(url, params={"recursive": "1"})
        if response.status_code != httpx.codes.OK:
            raise TransportError(
                f"GitHub API error: {response.status_code}",
                details={"url": url, "status_code": response.status_code},
            )

        try:
            tree: Dict[str, Any] = response.json()
        except ValueError as exc:
            raise TransportError("GitHub tree response was not JSON") from exc

        if tree.get("truncated"):
            logger.warning("Repository tree listing was truncated", extra={"url": url})

        paths = [
            entry["path"]
            for entry in tree.get("tree", [])
            if entry.get("type") == "blob" and self.is_content_path(entry.get("path", ""))
        ]
        logger.info("Found content files to process", extra={"file_count": len(paths)})
        return paths

    async def fetch_raw(self, path: str) -> SourceDocument:
        """
        Fetch one document and decode it to UTF-8 text.

        Raises NotFound when the object is absent and TransportError when the
        call fails or the payload cannot be decoded.
        """
        url = f"{self.repo_url}/contents/{quote(path)}"
        response = await self._get(url, params={"ref": self.config.github_branch})
        if response.status_code == httpx.codes.NOT_FOUND:
            raise NotFound(f"Content not found: {path}")
        if response.status_code != httpx.codes.OK:
            raise TransportError(
                f"GitHub API error: {response.status_code}",
                details={"path": path, "status_code": response.status_code},
            )

        try:
            payload: Dict[str, Any] = response.json()
        except ValueError as exc:
            raise TransportError(f"Contents response for {path} was not JSON") from exc

        if payload.get("encoding") != "base64":
            raise TransportError(f"Unsupported encoding for {path}: {payload.get('encoding')}")

        try:
            raw_bytes = base64.b64decode(payload.get("content") or "")
        except (binascii.Error, ValueError) as exc:
            raise TransportError(f"Invalid base64 content for {path}") from exc

        return SourceDocument(
            path=path,
            text=raw_bytes.decode("utf-8", errors="replace"),
            sha=str(payload.get("sha") or ""),
            version_ref=str(payload.get("url") or ""),
        )


__all__ = ["GitHubContentSource", "SourceDocument"]
