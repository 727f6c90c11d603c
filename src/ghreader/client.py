"""GitHub contents API client."""

import base64
import binascii
import logging
from typing import Any, Callable
from urllib.parse import quote

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    before_sleep_log,
)

from .auth import get_token
from .errors import (
    ExpectedFileError,
    ExpectedDirectoryError,
    RemoteRequestFailedError,
    UnauthenticatedRateLimitedError,
    UnsupportedEncodingError,
)
from .models import ContentEntry, EntryType, RateLimit, RepoRef
from .traversal import walk_files
from .urls import DEFAULT_REVISION, ensure_directory, parse_url

logger = logging.getLogger(__name__)

# Retry configuration
DEFAULT_MAX_RETRIES = 3
DEFAULT_MIN_WAIT = 1  # seconds
DEFAULT_MAX_WAIT = 10  # seconds

# Transport failures only; HTTP error statuses are never retried
RETRYABLE_EXCEPTIONS = (
    httpx.ConnectError,
    httpx.ConnectTimeout,
    httpx.ReadTimeout,
    httpx.WriteTimeout,
    httpx.PoolTimeout,
    httpx.NetworkError,
)


def create_retry_decorator(max_retries: int = DEFAULT_MAX_RETRIES):
    """Create a retry decorator with specified max retries."""
    return retry(
        retry=retry_if_exception_type(RETRYABLE_EXCEPTIONS),
        stop=stop_after_attempt(max_retries),
        wait=wait_exponential(multiplier=1, min=DEFAULT_MIN_WAIT, max=DEFAULT_MAX_WAIT),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )


def _encode_path(path: str | None) -> str:
    return quote((path or "").strip().strip("/"), safe="/")


class GitHubClient:
    """Read-only GitHub contents API client with retry support."""

    BASE_URL = "https://api.github.com"
    USER_AGENT = "ghreader"

    def __init__(
        self,
        token: str | None = None,
        base_url: str | None = None,
        timeout: float = 30.0,
        max_retries: int = DEFAULT_MAX_RETRIES,
        default_revision: str | None = DEFAULT_REVISION,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize GitHub client.

        Args:
            token: GitHub personal access token (optional)
            base_url: Custom base URL (defaults to GitHub API)
            timeout: Request timeout in seconds
            max_retries: Maximum number of attempts on network errors (default: 3)
            default_revision: Revision used for URLs that name none;
                None lets GitHub use the repository's default branch
            transport: Custom httpx transport
        """
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self.default_revision = default_revision
        self._transport = transport
        self._authenticated = bool(token)
        self.headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": self.USER_AGENT,
        }

        if token:
            self.headers["Authorization"] = f"Bearer {token}"
            logger.debug("GitHub client initialized with token")
        else:
            logger.warning("GitHub client initialized without token (rate limited)")
        logger.info("GitHub client ready, base_url=%s, max_retries=%d", self.base_url, max_retries)

    @classmethod
    def from_settings(
        cls,
        token_provider: Callable[[], str | None] = get_token,
        **kwargs: Any,
    ) -> "GitHubClient":
        """
        Build a client whose token comes from a provider.

        The provider is called once. When it finds nothing the client runs
        unauthenticated.
        """
        return cls(token=token_provider(), **kwargs)

    @property
    def authenticated(self) -> bool:
        return self._authenticated

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(base_url={self.base_url!r}, "
            f"authenticated={self._authenticated})"
        )

    # ── Transport ────────────────────────────────────────────────────────

    def _request(
        self, method: str, endpoint: str, **kwargs: Any
    ) -> httpx.Response:
        """Make HTTP request to GitHub API with retry on network errors."""
        url = f"{self.base_url}{endpoint}"

        @create_retry_decorator(self.max_retries)
        def do_request() -> httpx.Response:
            logger.debug("Request: %s %s", method, url)
            with httpx.Client(
                timeout=self.timeout, headers=self.headers, transport=self._transport
            ) as client:
                response = client.request(method, url, **kwargs)
                logger.debug(
                    "Response: %s %s (status=%d)",
                    method,
                    endpoint,
                    response.status_code,
                )
                return response

        try:
            response = do_request()
        except httpx.HTTPError as e:
            logger.error("Request failed: %s %s: %s", method, url, e)
            raise RemoteRequestFailedError(f"Network error fetching {url}: {e}", url=url) from e

        if response.status_code != 200:
            raise self._failure(response, url)
        return response

    def _failure(self, response: httpx.Response, url: str) -> RemoteRequestFailedError:
        """Translate a non-200 response into an exception."""
        rate_limit = RateLimit.from_headers(response.headers)
        status = response.status_code

        if rate_limit.exhausted and not self._authenticated:
            reset_at = rate_limit.reset_at
            reset_str = reset_at.strftime("%Y-%m-%d %H:%M:%S UTC") if reset_at else "unknown"
            logger.error("Unauthenticated rate limit exhausted (status=%d)", status)
            return UnauthenticatedRateLimitedError(
                f"GitHub API rate limit for unauthenticated requests exceeded "
                f"(HTTP {status}). Resets at {reset_str}. Provide a token, e.g. "
                "via the GITHUB_TOKEN environment variable or settings file.",
                url=url,
                status_code=status,
                rate_limit=rate_limit,
            )

        detail = ""
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("message"):
            detail = f": {body['message']}"

        message = f"GitHub API returned HTTP {status} for {url}{detail}"
        if rate_limit.exhausted:
            message += f" (rate limit exhausted, remaining={rate_limit.remaining})"
        logger.error("Request failed: %s", message)
        return RemoteRequestFailedError(
            message, url=url, status_code=status, rate_limit=rate_limit
        )

    def _fetch_contents(
        self, owner: str, repo: str, path: str | None, ref: str | None
    ) -> Any:
        endpoint = (
            f"/repos/{quote(owner, safe='')}/{quote(repo, safe='')}"
            f"/contents/{_encode_path(path)}"
        )
        revision = (ref or "").strip()
        params = {"ref": revision} if revision else {}
        response = self._request("GET", endpoint, params=params)
        try:
            return response.json()
        except ValueError as e:
            url = str(response.request.url)
            logger.error("Invalid JSON from %s", url)
            raise RemoteRequestFailedError(
                f"Invalid JSON from {url}", url=url, status_code=response.status_code
            ) from e

    # ── URL resolution ───────────────────────────────────────────────────

    def resolve(self, url: str | RepoRef) -> RepoRef:
        """Parse a GitHub URL using this client's default revision."""
        return parse_url(url, default_revision=self.default_revision)

    def resolve_directory(self, url: str | RepoRef) -> RepoRef:
        """Parse a GitHub URL and reject it if it points to a file."""
        return ensure_directory(url, default_revision=self.default_revision)

    # ── Coordinate operations ────────────────────────────────────────────

    def get_contents(
        self, owner: str, repo: str, path: str = "", ref: str | None = None
    ) -> list[ContentEntry]:
        """
        Get the one-level listing of a directory.

        Args:
            owner: Repository owner
            repo: Repository name
            path: Directory path (empty for root)
            ref: Branch/tag/commit (empty for the repository default)

        Returns:
            List of ContentEntry items

        Raises:
            ExpectedDirectoryError: path names a file
        """
        logger.debug("Fetching contents: %s/%s path=%s ref=%s", owner, repo, path, ref)
        data = self._fetch_contents(owner, repo, path, ref)

        if isinstance(data, dict):
            logger.debug("Single item response for %s", path)
            raise ExpectedDirectoryError(f"{owner}/{repo}/{path}")

        logger.debug("Directory listing: %d items", len(data))
        return [ContentEntry.model_validate(item) for item in data]

    def get_file_content(
        self, owner: str, repo: str, path: str, ref: str | None = None
    ) -> str:
        """
        Get the decoded text of one file.

        Args:
            owner: Repository owner
            repo: Repository name
            path: File path in repository
            ref: Branch/tag/commit (empty for the repository default)

        Returns:
            File content as text

        Raises:
            ExpectedFileError: path names a directory
            UnsupportedEncodingError: content is not base64-encoded UTF-8 text
        """
        logger.info("Fetching file content: %s/%s path=%s", owner, repo, path)
        data = self._fetch_contents(owner, repo, path, ref)
        if isinstance(data, list):
            raise ExpectedFileError(path)

        encoding = data.get("encoding")
        if encoding != "base64":
            raise UnsupportedEncodingError(path, encoding)

        encoded = "".join((data.get("content") or "").split())
        try:
            decoded = base64.b64decode(encoded, validate=True).decode("utf-8")
        except binascii.Error as e:
            raise UnsupportedEncodingError(path, encoding) from e
        except UnicodeDecodeError as e:
            raise UnsupportedEncodingError(path, "binary") from e

        logger.debug("File content fetched: %s (%d chars)", path, len(decoded))
        return decoded

    def list_files(
        self, owner: str, repo: str, path: str = "", ref: str | None = None
    ) -> list[str]:
        """List the file paths directly inside a directory."""
        logger.info("Listing files: %s/%s path=%s ref=%s", owner, repo, path, ref)
        return [
            entry.path
            for entry in self.get_contents(owner, repo, path, ref)
            if entry.entry_type is EntryType.FILE
        ]

    def list_directories(
        self, owner: str, repo: str, path: str = "", ref: str | None = None
    ) -> list[str]:
        """List the directory paths directly inside a directory."""
        logger.info("Listing directories: %s/%s path=%s ref=%s", owner, repo, path, ref)
        return [
            entry.path
            for entry in self.get_contents(owner, repo, path, ref)
            if entry.entry_type is EntryType.DIRECTORY
        ]

    def list_files_recursive(
        self, owner: str, repo: str, path: str = "", ref: str | None = None
    ) -> list[str]:
        """
        List every file at or below a directory.

        One listing request is made per directory. The first failing request
        aborts the walk; files found before it are not returned.
        """
        logger.info(
            "Listing files recursively: %s/%s path=%s ref=%s", owner, repo, path, ref
        )
        files = walk_files(
            lambda directory: self.get_contents(owner, repo, directory, ref),
            start=(path or "").strip().strip("/"),
        )
        logger.info("Found %d files under %s/%s/%s", len(files), owner, repo, path)
        return files

    # ── URL operations ───────────────────────────────────────────────────

    def get_file_content_from_url(self, url: str | RepoRef) -> str:
        """Get the text of the file a GitHub URL points to."""
        target = self.resolve(url)
        return self.get_file_content(
            target.owner, target.repository, target.path, target.revision
        )

    def list_files_from_url(self, url: str | RepoRef) -> list[str]:
        """List files directly inside the directory a GitHub URL points to."""
        target = self.resolve_directory(url)
        return self.list_files(
            target.owner, target.repository, target.path, target.revision
        )

    def list_directories_from_url(self, url: str | RepoRef) -> list[str]:
        """List directories directly inside the directory a GitHub URL points to."""
        target = self.resolve_directory(url)
        return self.list_directories(
            target.owner, target.repository, target.path, target.revision
        )

    def list_files_recursive_from_url(self, url: str | RepoRef) -> list[str]:
        """List every file at or below the directory a GitHub URL points to."""
        target = self.resolve_directory(url)
        return self.list_files_recursive(
            target.owner, target.repository, target.path, target.revision
        )
