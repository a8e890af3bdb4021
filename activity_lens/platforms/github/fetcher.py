"""GitHub REST fetchers.

Failures never escape as exceptions: each fetch returns a FetchResult whose
`error` is set when the request failed, so callers can tell an account with
no activity apart from one that could not be loaded.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

import httpx

from activity_lens.config import Settings
from activity_lens.models import ActivityEvent, RepositorySummary
from activity_lens.platforms.github.parser import parse_events, parse_repositories

_log = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    items: list[T] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class AccountData:
    username: str
    events: FetchResult[ActivityEvent]
    repos: FetchResult[RepositorySummary]


def make_client(settings: Settings) -> httpx.AsyncClient:
    headers = {
        "Accept": "application/vnd.github+json",
        "User-Agent": "activity-lens",
    }
    if settings.token:
        headers["Authorization"] = f"Bearer {settings.token}"
    return httpx.AsyncClient(base_url=settings.api_url, headers=headers, timeout=15)


def _describe_failure(username: str, response: httpx.Response) -> str:
    if response.status_code == 404:
        return f"User '{username}' not found"
    if response.status_code in (403, 429):
        return "GitHub API rate limit exceeded; set GITHUB_TOKEN or try again later"
    message = ""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        message = str(body.get("message") or "")
    return f"HTTP {response.status_code}: {message or response.reason_phrase}"


async def _get_list(client: httpx.AsyncClient, username: str, path: str, params: dict[str, Any]) -> tuple[list[dict[str, Any]], str | None]:
    _log.debug("GET %s %s", path, params)
    try:
        response = await client.get(path, params=params)
    except httpx.HTTPError as e:
        _log.warning("request to %s failed: %s", path, e)
        return [], f"Network error: {e}"

    if response.status_code != 200:
        error = _describe_failure(username, response)
        _log.warning("GET %s -> %s", path, error)
        return [], error

    try:
        data = response.json()
    except ValueError:
        data = None
    if not isinstance(data, list):
        return [], "Unexpected response from GitHub"
    return data, None


async def fetch_events(client: httpx.AsyncClient, username: str, limit: int = 30) -> FetchResult[ActivityEvent]:
    """Most recent public events, newest first."""
    raw, error = await _get_list(client, username, f"/users/{username}/events/public", {"per_page": limit})
    if error:
        return FetchResult(error=error)
    try:
        return FetchResult(items=parse_events(raw[:limit]))
    except (KeyError, TypeError, AttributeError, ValueError) as e:
        _log.warning("could not parse events for %s: %s", username, e)
        return FetchResult(error=f"Malformed event data: {e}")


async def fetch_repositories(client: httpx.AsyncClient, username: str, limit: int = 30) -> FetchResult[RepositorySummary]:
    raw, error = await _get_list(
        client, username, f"/users/{username}/repos", {"per_page": limit, "sort": "updated"},
    )
    if error:
        return FetchResult(error=error)
    try:
        return FetchResult(items=parse_repositories(raw[:limit]))
    except (KeyError, TypeError, AttributeError, ValueError) as e:
        _log.warning("could not parse repositories for %s: %s", username, e)
        return FetchResult(error=f"Malformed repository data: {e}")


async def fetch_account(username: str, settings: Settings, client: httpx.AsyncClient | None = None) -> AccountData:
    """Fetch events and repositories for one account concurrently."""
    username = username.lstrip("@")
    if client is None:
        async with make_client(settings) as own_client:
            return await fetch_account(username, settings, own_client)

    events, repos = await asyncio.gather(
        fetch_events(client, username, settings.event_limit),
        fetch_repositories(client, username, settings.repo_limit),
    )
    return AccountData(username=username, events=events, repos=repos)


async def fetch_accounts(usernames: list[str], settings: Settings) -> list[AccountData]:
    """Fetch several accounts in parallel over one shared connection pool."""
    async with make_client(settings) as client:
        return list(await asyncio.gather(*(fetch_account(u, settings, client) for u in usernames)))
