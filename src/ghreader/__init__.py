"""Read GitHub repository content from web URLs."""

from .auth import get_token, get_token_from_gh_cli, get_token_from_settings_file
from .client import GitHubClient
from .errors import (
    ExpectedDirectoryError,
    ExpectedFileError,
    GitHubReaderError,
    InvalidHostError,
    InvalidURLError,
    MissingBlobPathError,
    MissingRepoCoordinatesError,
    MissingRevisionError,
    RemoteRequestFailedError,
    UnauthenticatedRateLimitedError,
    UnsupportedEncodingError,
)
from .models import ContentEntry, EntryType, RateLimit, RefKind, RepoRef
from .traversal import walk_files
from .urls import DEFAULT_REVISION, ensure_directory, parse_url

__all__ = [
    "GitHubClient",
    "RepoRef",
    "RefKind",
    "ContentEntry",
    "EntryType",
    "RateLimit",
    "parse_url",
    "ensure_directory",
    "walk_files",
    "DEFAULT_REVISION",
    "get_token",
    "get_token_from_gh_cli",
    "get_token_from_settings_file",
    "GitHubReaderError",
    "InvalidURLError",
    "InvalidHostError",
    "MissingRepoCoordinatesError",
    "MissingRevisionError",
    "MissingBlobPathError",
    "ExpectedDirectoryError",
    "ExpectedFileError",
    "UnsupportedEncodingError",
    "RemoteRequestFailedError",
    "UnauthenticatedRateLimitedError",
]
