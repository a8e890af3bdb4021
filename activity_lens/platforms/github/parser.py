from datetime import datetime, timezone
from typing import Any

from activity_lens.models import ActivityEvent, EventKind, RepositorySummary

_EVENT_KINDS = {
    "PushEvent": EventKind.PUSH,
    "WatchEvent": EventKind.WATCH,
    "IssuesEvent": EventKind.ISSUES,
    "PullRequestEvent": EventKind.PULL_REQUEST,
    "CreateEvent": EventKind.CREATE,
    "ForkEvent": EventKind.FORK,
}


def _parse_timestamp(raw: str) -> datetime:
    """Parse an RFC 3339 timestamp such as '2023-11-25T20:00:00Z' into aware UTC."""
    dt = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _commit_count(payload: dict[str, Any]) -> int | None:
    size = payload.get("size")
    if isinstance(size, int):
        return size
    commits = payload.get("commits")
    if isinstance(commits, list):
        return len(commits)
    return None


def parse_event(raw: dict[str, Any]) -> ActivityEvent:
    """Convert one GitHub events API record into an ActivityEvent.

    Event types outside the known vocabulary become EventKind.OTHER.
    """
    kind = _EVENT_KINDS.get(raw.get("type", ""), EventKind.OTHER)
    payload = _as_dict(raw.get("payload"))
    return ActivityEvent(
        kind=kind,
        repo=_as_dict(raw.get("repo")).get("name") or "",
        created_at=_parse_timestamp(raw["created_at"]),
        commit_count=_commit_count(payload) if kind is EventKind.PUSH else None,
        action=payload.get("action") if kind in (EventKind.ISSUES, EventKind.PULL_REQUEST) else None,
        ref_type=payload.get("ref_type") if kind is EventKind.CREATE else None,
        ref=payload.get("ref") if kind is EventKind.CREATE else None,
    )


def parse_events(raw_events: list[dict[str, Any]]) -> list[ActivityEvent]:
    """Parse a feed, keeping its newest-first order. Records without a timestamp are dropped."""
    return [parse_event(r) for r in raw_events if r.get("created_at")]


def parse_repository(raw: dict[str, Any]) -> RepositorySummary:
    return RepositorySummary(
        name=raw.get("full_name") or raw.get("name") or "",
        language=raw.get("language") or None,
        size=max(0, int(raw.get("size") or 0)),
    )


def parse_repositories(raw_repos: list[dict[str, Any]]) -> list[RepositorySummary]:
    return [parse_repository(r) for r in raw_repos]


def describe_event(event: ActivityEvent) -> str:
    """One-line human summary of an event, e.g. 'Pushed 3 commits to owner/repo'."""
    repo = event.repo or "<unknown>"
    if event.kind is EventKind.PUSH:
        n = event.commit_count or 0
        return f"Pushed {n} commit{'s' if n != 1 else ''} to {repo}"
    if event.kind is EventKind.WATCH:
        return f"Starred {repo}"
    if event.kind is EventKind.ISSUES:
        action = (event.action or "updated").capitalize()
        return f"{action} an issue in {repo}"
    if event.kind is EventKind.PULL_REQUEST:
        action = (event.action or "updated").capitalize()
        return f"{action} a pull request in {repo}"
    if event.kind is EventKind.CREATE:
        if event.ref_type == "repository" or not event.ref:
            return f"Created {event.ref_type or 'repository'} {repo}"
        return f"Created {event.ref_type} {event.ref} in {repo}"
    if event.kind is EventKind.FORK:
        return f"Forked {repo}"
    return f"Activity in {repo}"
