"""CLI for reading GitHub repositories."""

import json
import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

import click

from .auth import DEFAULT_SETTINGS_FILE, get_token
from .client import DEFAULT_MAX_RETRIES, GitHubClient
from .errors import GitHubReaderError
from .urls import DEFAULT_REVISION

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 8


def setup_logging(verbose: int) -> None:
    """Setup logging."""
    level = logging.DEBUG if verbose >= 2 else logging.INFO if verbose == 1 else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


# ============ CLI Group ============

@click.group()
@click.option("--token", envvar="GITHUB_TOKEN", help="GitHub token")
@click.option(
    "--settings-file",
    default=DEFAULT_SETTINGS_FILE,
    show_default=True,
    help="dotenv file to read GITHUB_TOKEN from",
)
@click.option("--use-gh-cli", is_flag=True, help="Use gh cli credentials")
@click.option("--base-url", help="GitHub API base URL")
@click.option(
    "--default-revision",
    default=DEFAULT_REVISION,
    show_default=True,
    help="Revision for URLs without one (empty: repository default branch)",
)
@click.option("--retries", "-r", type=int, default=DEFAULT_MAX_RETRIES, help="Retry attempts")
@click.option("-v", "--verbose", count=True, help="Verbosity (-v, -vv)")
@click.pass_context
def cli(
    ctx: click.Context,
    token: str | None,
    settings_file: str,
    use_gh_cli: bool,
    base_url: str | None,
    default_revision: str,
    retries: int,
    verbose: int,
) -> None:
    """Read files and listings from GitHub URLs."""
    setup_logging(verbose)
    ctx.ensure_object(dict)
    if "client" not in ctx.obj:
        ctx.obj["client"] = GitHubClient.from_settings(
            lambda: get_token(token, use_gh_cli=use_gh_cli, settings_file=settings_file),
            base_url=base_url,
            max_retries=retries,
            default_revision=default_revision or None,
        )


# ============ Read Commands ============

@cli.command()
@click.argument("url")
@click.pass_context
def resolve(ctx, url):
    """Show how a URL resolves."""
    client: GitHubClient = ctx.obj["client"]
    try:
        ref = client.resolve(url)
    except GitHubReaderError as e:
        raise click.ClickException(str(e)) from e
    click.echo(json.dumps(ref.model_dump(mode="json"), indent=2))


@cli.command()
@click.argument("url")
@click.option("-d", "--dirs", is_flag=True, help="List directories instead of files")
@click.pass_context
def ls(ctx, url, dirs):
    """List one directory level."""
    client: GitHubClient = ctx.obj["client"]
    try:
        paths = client.list_directories_from_url(url) if dirs else client.list_files_from_url(url)
    except GitHubReaderError as e:
        raise click.ClickException(str(e)) from e
    for path in paths:
        click.echo(path)


@cli.command()
@click.argument("url")
@click.pass_context
def cat(ctx, url):
    """Print a file."""
    client: GitHubClient = ctx.obj["client"]
    try:
        text = client.get_file_content_from_url(url)
    except GitHubReaderError as e:
        raise click.ClickException(str(e)) from e
    click.echo(text, nl=not text.endswith("\n"))


@cli.command()
@click.argument("urls", nargs=-1, required=True)
@click.option("-j", "--concurrency", type=int, default=DEFAULT_CONCURRENCY, show_default=True)
@click.pass_context
def tree(ctx, urls, concurrency):
    """List all files under one or more directory URLs."""
    client: GitHubClient = ctx.obj["client"]
    results: dict[str, list[str]] = {}
    failures: dict[str, str] = {}

    with ThreadPoolExecutor(max_workers=max(1, concurrency)) as pool:
        futures = {pool.submit(client.list_files_recursive_from_url, url): url for url in urls}
        for future in as_completed(futures):
            url = futures[future]
            try:
                results[url] = future.result()
            except GitHubReaderError as e:
                logger.error("Failed %s: %s", url, e)
                failures[url] = str(e)

    for url in urls:
        if len(urls) > 1:
            click.echo(f"{url}:")
        if url in failures:
            click.echo(f"Error: {failures[url]}", err=True)
            continue
        for path in results[url]:
            click.echo(path)

    if failures:
        ctx.exit(1)


# ============ Download Command ============

@cli.command()
@click.argument("url")
@click.option("-o", "--output-dir", required=True, help="Directory to write files to")
@click.option("-j", "--concurrency", type=int, default=DEFAULT_CONCURRENCY, show_default=True)
@click.pass_context
def download(ctx, url, output_dir, concurrency):
    """Download every text file under a directory URL."""
    client: GitHubClient = ctx.obj["client"]
    try:
        target = client.resolve_directory(url)
        paths = client.list_files_recursive_from_url(target)
    except GitHubReaderError as e:
        raise click.ClickException(str(e)) from e

    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)
    click.echo(f"Found {len(paths)} files in {target.full_name}/{target.path}")

    saved = 0
    errors = 0
    lock = threading.Lock()

    def fetch_one(path: str):
        nonlocal saved, errors
        try:
            text = client.get_file_content(
                target.owner, target.repository, path, target.revision
            )
            file_path = output_path / path
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_text(text, encoding="utf-8")
            with lock:
                saved += 1
        except (GitHubReaderError, OSError) as e:
            logger.error("Failed %s: %s", path, e)
            with lock:
                errors += 1

    with click.progressbar(length=len(paths), label="Downloading") as bar:
        with ThreadPoolExecutor(max_workers=max(1, concurrency)) as pool:
            futures = [pool.submit(fetch_one, path) for path in paths]
            for _ in as_completed(futures):
                bar.update(1)

    click.echo(f"\nSaved {saved}, errors {errors}")


if __name__ == "__main__":
    cli()
