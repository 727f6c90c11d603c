"""Pytest fixtures for all test modules."""
import base64

import httpx
import pytest

from ghreader import GitHubClient

OWNER = "octo"
REPO = "demo"


def file_entry(path: str, entry_type: str = "file") -> dict:
    """Build a contents API listing item."""
    return {
        "type": entry_type,
        "path": path,
        "name": path.rsplit("/", 1)[-1],
        "sha": "0" * 40,
        "size": 10,
    }


def dir_entry(path: str) -> dict:
    return file_entry(path, "dir")


def file_body(path: str, text: str) -> dict:
    """Build a contents API single-file object with padded base64 content."""
    return {
        "type": "file",
        "path": path,
        "name": path.rsplit("/", 1)[-1],
        "encoding": "base64",
        "content": base64.encodebytes(text.encode("utf-8")).decode("ascii"),
    }


class FakeGitHub:
    """In-memory contents API served through httpx.MockTransport."""

    def __init__(self):
        self.contents: dict[str, object] = {}
        self.failures: dict[str, httpx.Response] = {}
        self.requests: list[httpx.Request] = []

    def listed_paths(self) -> list[str]:
        return [self.path_of(r) for r in self.requests]

    @staticmethod
    def path_of(request: httpx.Request) -> str:
        return request.url.path.split("/contents", 1)[1].strip("/")

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = self.path_of(request)
        if path in self.failures:
            return self.failures[path]
        if path in self.contents:
            return httpx.Response(200, json=self.contents[path])
        return httpx.Response(404, json={"message": "Not Found"})

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep real tokens and .env files out of the tests."""
    monkeypatch.delenv("GH_TOKEN", raising=False)
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def github():
    """
    Fake repository with the layout::

        pom.xml
        README.md -> symlink
        vendor (submodule)
        src/Main.txt
        src/app/App.txt
        src/app/util/Util.txt
        src/app/util/Helper.txt
        docs/guide.md
    """
    fake = FakeGitHub()
    fake.contents = {
        "": [
            file_entry("pom.xml"),
            file_entry("README.md", "symlink"),
            file_entry("vendor", "submodule"),
            dir_entry("src"),
            dir_entry("docs"),
        ],
        "src": [file_entry("src/Main.txt"), dir_entry("src/app")],
        "src/app": [file_entry("src/app/App.txt"), dir_entry("src/app/util")],
        "src/app/util": [
            file_entry("src/app/util/Util.txt"),
            file_entry("src/app/util/Helper.txt"),
        ],
        "docs": [file_entry("docs/guide.md")],
        "pom.xml": file_body("pom.xml", "<project>\n</project>\n"),
        "docs/guide.md": file_body("docs/guide.md", "# Guide\n"),
    }
    return fake


@pytest.fixture
def client(github):
    """Unauthenticated client backed by the fake repository."""
    return GitHubClient(transport=github.transport(), max_retries=1)
