"""Resolve GitHub web URLs into repository references.

Supported shapes::

    https://github.com/{owner}/{repo}
    https://github.com/{owner}/{repo}/tree/{revision}[/{path...}]
    https://github.com/{owner}/{repo}/blob/{revision}/{path...}
    https://github.com/{owner}/{repo}/{path...}

The last shape has no revision segment, so it is read as a directory under
``default_revision``.
"""

import logging
from urllib.parse import unquote, urlsplit

from .errors import (
    ExpectedDirectoryError,
    InvalidHostError,
    MissingBlobPathError,
    MissingRepoCoordinatesError,
    MissingRevisionError,
)
from .models import RefKind, RepoRef

logger = logging.getLogger(__name__)

GITHUB_HOST = "github.com"

# Used when a URL carries no /tree/{revision} or /blob/{revision} segment.
DEFAULT_REVISION = "main"

_MARKERS = {"tree": RefKind.TREE, "blob": RefKind.BLOB}


def _join_path(segments: list[str]) -> str:
    return "/".join(s for s in segments if s.strip())


def parse_url(
    url: str | RepoRef, default_revision: str | None = DEFAULT_REVISION
) -> RepoRef:
    """
    Parse a GitHub web URL into a RepoRef.

    Args:
        url: GitHub URL (an existing RepoRef is returned as is)
        default_revision: Revision for URLs without an explicit one;
            None leaves it to GitHub's default branch

    Returns:
        Parsed RepoRef

    Raises:
        InvalidHostError: host is not github.com
        MissingRepoCoordinatesError: owner or repository missing
        MissingRevisionError: /tree/ or /blob/ without a revision
        MissingBlobPathError: /blob/{revision} without a file path
    """
    if isinstance(url, RepoRef):
        return url

    text = url.strip()
    if text.endswith("/"):
        text = text[:-1]

    try:
        parts = urlsplit(text)
        host = parts.hostname or ""
    except ValueError as e:
        raise InvalidHostError("Malformed URL", url) from e
    if host.lower() != GITHUB_HOST:
        raise InvalidHostError("Not a github.com URL", url)

    # path starts with "/", so segments[0] == ""; segments are percent-decoded
    segments = [unquote(s) for s in parts.path.split("/")]
    if len(segments) < 3 or not segments[1].strip() or not segments[2].strip():
        raise MissingRepoCoordinatesError("Missing owner/repository in URL", url)
    owner, repository = segments[1], segments[2]

    if len(segments) == 3:
        ref = RepoRef(
            owner=owner,
            repository=repository,
            revision=default_revision,
            kind=RefKind.ROOT,
        )
        logger.debug("Resolved %s -> %s", url, ref)
        return ref

    kind = _MARKERS.get(segments[3])
    if kind is not None:
        if len(segments) < 5 or not segments[4].strip():
            raise MissingRevisionError("Missing {revision} segment", url)
        path = _join_path(segments[5:])
        if kind is RefKind.BLOB and not path:
            raise MissingBlobPathError("Missing file path after /blob/{revision}/", url)
        ref = RepoRef(
            owner=owner,
            repository=repository,
            revision=segments[4],
            path=path,
            kind=kind,
        )
    else:
        path = _join_path(segments[3:])
        ref = RepoRef(
            owner=owner,
            repository=repository,
            revision=default_revision,
            path=path,
            kind=RefKind.TREE if path else RefKind.ROOT,
        )

    logger.debug("Resolved %s -> %s", url, ref)
    return ref


def ensure_directory(
    url: str | RepoRef, default_revision: str | None = DEFAULT_REVISION
) -> RepoRef:
    """Parse a URL and reject it if it points to a file."""
    ref = parse_url(url, default_revision=default_revision)
    if ref.is_file:
        target = url if isinstance(url, str) else ref.html_url
        raise ExpectedDirectoryError(target)
    return ref
