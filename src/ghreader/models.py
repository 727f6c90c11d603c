"""GitHub reference and content models."""

from datetime import datetime, timezone
from enum import Enum

import httpx
from pydantic import BaseModel, ConfigDict, field_validator, model_validator


class RefKind(str, Enum):
    """What a GitHub web URL points at."""

    ROOT = "root"
    TREE = "tree"
    BLOB = "blob"


class RepoRef(BaseModel):
    """Canonical owner/repository/revision/path reference."""

    model_config = ConfigDict(frozen=True)

    owner: str
    repository: str
    revision: str | None = None  # branch, tag or commit; None lets GitHub pick
    path: str = ""  # "" for the repository root
    kind: RefKind = RefKind.ROOT

    @field_validator("owner", "repository")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must not be blank")
        return value

    @field_validator("path", mode="before")
    @classmethod
    def _normalize_path(cls, value: str | None) -> str:
        return value or ""

    @model_validator(mode="after")
    def _check_kind(self) -> "RepoRef":
        if self.kind is RefKind.BLOB and not self.path:
            raise ValueError("a blob reference needs a file path")
        if self.kind is RefKind.ROOT and self.path:
            raise ValueError("a root reference cannot carry a path")
        return self

    @property
    def is_file(self) -> bool:
        return self.kind is RefKind.BLOB

    @property
    def is_directory(self) -> bool:
        return self.kind in (RefKind.ROOT, RefKind.TREE)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repository}"

    @property
    def html_url(self) -> str:
        """Render the reference back to a github.com URL."""
        url = f"https://github.com/{self.full_name}"
        if self.kind is RefKind.ROOT and not self.revision:
            return url
        marker = "blob" if self.is_file else "tree"
        url = f"{url}/{marker}/{self.revision or 'HEAD'}"
        return f"{url}/{self.path}" if self.path else url


class EntryType(str, Enum):
    """Listing entry type; symlinks and submodules collapse to OTHER."""

    FILE = "file"
    DIRECTORY = "dir"
    OTHER = "other"


class ContentEntry(BaseModel):
    """One item of a contents API directory listing."""

    type: str
    path: str
    name: str | None = None
    sha: str | None = None
    size: int | None = None
    html_url: str | None = None
    download_url: str | None = None

    @property
    def entry_type(self) -> EntryType:
        if self.type == "file":
            return EntryType.FILE
        if self.type == "dir":
            return EntryType.DIRECTORY
        return EntryType.OTHER


class RateLimit(BaseModel):
    """Rate limit headers of a GitHub API response."""

    limit: int | None = None
    remaining: int | None = None
    reset: int | None = None  # epoch seconds

    @classmethod
    def from_headers(cls, headers: httpx.Headers) -> "RateLimit":
        def as_int(name: str) -> int | None:
            raw = headers.get(name)
            try:
                return int(raw) if raw is not None else None
            except ValueError:
                return None

        return cls(
            limit=as_int("x-ratelimit-limit"),
            remaining=as_int("x-ratelimit-remaining"),
            reset=as_int("x-ratelimit-reset"),
        )

    @property
    def exhausted(self) -> bool:
        return self.remaining == 0

    @property
    def reset_at(self) -> datetime | None:
        if self.reset is None:
            return None
        return datetime.fromtimestamp(self.reset, tz=timezone.utc)
