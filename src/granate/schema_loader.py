import tempfile
from pathlib import Path
from urllib.parse import urlparse

import requests
from ariadne import load_schema_from_path

from granate import log

DEFAULT_MAX_SCHEMA_SIZE_MB = 10


def is_url(value: str) -> bool:
    """Check whether a value is an HTTP(S) URL with a host."""
    parsed = urlparse(value)
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)


def download_schema_to_temp(url: str, timeout: float = 30.0, max_size_mb: int = DEFAULT_MAX_SCHEMA_SIZE_MB) -> Path:
    """Download a GraphQL schema into a temporary ``.graphql`` file.

    Args:
        url: URL of the schema
        timeout: Request timeout in seconds
        max_size_mb: Maximum accepted size of the schema

    Returns:
        Path of the temporary file. The caller is responsible for deleting it.

    Raises:
        RuntimeError: If the download fails or the schema is too large
    """
    log.info(f"Downloading schema from {url}")
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise RuntimeError(f"Failed to download schema from {url}: {e}") from e

    content_length = response.headers.get("content-length")
    if content_length and int(content_length) > max_size_mb * 1024 * 1024:
        raise RuntimeError(f"Schema file too large: {content_length} bytes (limit: {max_size_mb} MB)")

    with tempfile.NamedTemporaryFile(mode="w", suffix=".graphql", delete=False, encoding="utf-8") as temp_file:
        temp_file.write(response.text)

    return Path(temp_file.name)


def resolve_graphql_files(paths: list[Path]) -> list[Path]:
    """Resolve a list of paths (files and directories) into a flat list of unique GraphQL files.

    Args:
        paths: List of file or directory paths

    Returns:
        Flat list of unique GraphQL file paths, sorted
    """
    resolved_files: set[Path] = set()

    for path in paths:
        if path.is_file():
            resolved_files.add(path)
        elif path.is_dir():
            resolved_files.update(path.rglob("*.graphql"))

    return sorted(resolved_files)


def build_schema_str(graphql_schema_paths: list[Path]) -> str:
    """Concatenate the GraphQL files into one schema string.

    Raises:
        ValueError: If no GraphQL file is given
    """
    if not graphql_schema_paths:
        raise ValueError("No GraphQL schema file found")

    schema_str = ""
    for graphql_file in graphql_schema_paths:
        schema_str += load_schema_from_path(graphql_file) + "\n"
        log.debug(f"Loaded schema file {graphql_file}")
    return schema_str


def load_schema_str(sources: list[str]) -> str:
    """Load the schema text of files, directories or URLs.

    URLs are downloaded to temporary files, removed once the schema is loaded.
    """
    paths: list[Path] = []
    downloaded: list[Path] = []
    for source in sources:
        if is_url(source):
            downloaded.append(download_schema_to_temp(source))
            paths.append(downloaded[-1])
        else:
            paths.append(Path(source))

    try:
        return build_schema_str(resolve_graphql_files(paths))
    finally:
        for path in downloaded:
            path.unlink(missing_ok=True)
