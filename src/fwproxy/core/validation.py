"""
Input validation utilities for fwproxy.

Decides whether a client-supplied target URL belongs to the allow-listed
GitHub project, whether it is a release listing that must bypass the cache,
and derives the cache key used to name files on disk.
"""

import hashlib
import re
from urllib.parse import unquote, urlsplit

from fwproxy.core.exceptions import BadRequestError, ForbiddenError

GITHUB_HOST = "github.com"
API_HOST = "api.github.com"
RAW_HOST = "raw.githubusercontent.com"

ALLOWED_HOSTS = frozenset({GITHUB_HOST, API_HOST, RAW_HOST})

# md5 hex digest
_CACHE_KEY_PATTERN = re.compile(r"^[0-9a-f]{32}$")


def require_url(url: str | None) -> str:
    """Return the url parameter or raise if it was not supplied.

    Raises:
        BadRequestError: If the parameter is absent or empty.
    """
    if not url:
        raise BadRequestError("url")
    return url


def _project_segments(host: str, segments: list[str], owner: str, repo: str) -> bool:
    if segments[:2] == [owner, repo]:
        return True
    return host == API_HOST and segments[:3] == ["repos", owner, repo]


def validate_target_url(url: str, owner: str, repo: str) -> str:
    """Validate that url points into the allow-listed project.

    Accepted forms (case-sensitive, prefix match on whole path segments):

        https://github.com/<owner>/<repo>...
        https://api.github.com/<owner>/<repo>...
        https://api.github.com/repos/<owner>/<repo>...
        https://raw.githubusercontent.com/<owner>/<repo>...

    Args:
        url: Target URL exactly as the client sent it.
        owner: Allow-listed repository owner.
        repo: Allow-listed repository name.

    Returns:
        The unchanged url.

    Raises:
        ForbiddenError: If the url is outside the allow-list.
    """
    project = f"{owner}/{repo}"

    # urlsplit lowercases the scheme, so check the raw text
    if not url.startswith("https://"):
        raise ForbiddenError(url, project)

    try:
        url.encode("utf-8")
    except UnicodeEncodeError:
        raise ForbiddenError(url, project)

    try:
        parts = urlsplit(url)
    except ValueError:
        raise ForbiddenError(url, project)

    # Exact host only: no userinfo, no port
    if parts.netloc not in ALLOWED_HOSTS:
        raise ForbiddenError(url, project)

    if "\\" in parts.path:
        raise ForbiddenError(url, project)

    segments = parts.path.split("/")[1:]

    # The HTTP client normalizes dot segments, which would walk out of the project
    if any(unquote(segment) in (".", "..") for segment in segments):
        raise ForbiddenError(url, project)

    if not _project_segments(parts.netloc, segments, owner, repo):
        raise ForbiddenError(url, project)

    return url


def is_api_url(url: str) -> bool:
    """Return True if url targets the GitHub REST API host."""
    try:
        return urlsplit(url).netloc == API_HOST
    except ValueError:
        return False


def is_release_list_query(url: str, owner: str, repo: str) -> bool:
    """Return True if url lists releases of the project.

    Release listings change whenever a new firmware is published, so they
    are never cached.
    """
    return f"{API_HOST}/repos/{owner}/{repo}/releases" in url


def make_cache_key(url: str) -> str:
    """Derive the cache key for url.

    The key is the md5 hex digest of the exact URL text, query string
    included, so it is stable across processes and restarts. Lone surrogates
    are passed through rather than raising.
    """
    return hashlib.md5(url.encode("utf-8", "surrogatepass"), usedforsecurity=False).hexdigest()


def is_valid_cache_key(key: str) -> bool:
    """Return True if key has the shape produced by make_cache_key."""
    return bool(_CACHE_KEY_PATTERN.match(key))
