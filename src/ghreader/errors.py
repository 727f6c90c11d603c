"""Exception hierarchy.

URL problems are raised as soon as a URL is resolved and also subclass
``ValueError``. Remote problems abort the whole operation that hit them;
nothing here is retried.
"""

from .models import RateLimit


class GitHubReaderError(Exception):
    """Base exception for the package."""


# ── URL resolution ──────────────────────────────────────────────────────────


class InvalidURLError(GitHubReaderError, ValueError):
    """A URL could not be resolved into a repository reference."""

    def __init__(self, message: str, url: str):
        super().__init__(f"{message}: {url}")
        self.url = url


class InvalidHostError(InvalidURLError):
    """The URL host is not github.com."""


class MissingRepoCoordinatesError(InvalidURLError):
    """The owner or repository segment is missing or blank."""


class MissingRevisionError(InvalidURLError):
    """A /tree/ or /blob/ marker is not followed by a revision."""


class MissingBlobPathError(InvalidURLError):
    """A /blob/{revision} URL does not name a file."""


# ── Content shape ───────────────────────────────────────────────────────────


class ExpectedDirectoryError(GitHubReaderError, ValueError):
    """A directory operation was given a file."""

    def __init__(self, target: str):
        super().__init__(f"Expected a directory, got a file: {target}")
        self.target = target


class ExpectedFileError(GitHubReaderError, ValueError):
    """A file operation was given a directory."""

    def __init__(self, path: str):
        super().__init__(f"Expected a file, got a directory: {path or '/'}")
        self.path = path


class UnsupportedEncodingError(GitHubReaderError):
    """File content is not base64-encoded text (binary, symlink, too large)."""

    def __init__(self, path: str, encoding: str | None):
        super().__init__(f"Unsupported content encoding {encoding!r} for {path}")
        self.path = path
        self.encoding = encoding


# ── Remote API ──────────────────────────────────────────────────────────────


class RemoteRequestFailedError(GitHubReaderError):
    """The GitHub API answered with a non-200 status or could not be reached."""

    def __init__(
        self,
        message: str,
        url: str,
        status_code: int | None = None,
        rate_limit: RateLimit | None = None,
    ):
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.rate_limit = rate_limit or RateLimit()


class UnauthenticatedRateLimitedError(RemoteRequestFailedError):
    """Anonymous rate limit exhausted; a token would lift it."""
