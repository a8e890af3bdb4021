"""Assemble the full activity profile for one account from already-fetched data."""
from collections.abc import Sequence

from activity_lens.analyzers.languages import aggregate_languages, top_languages
from activity_lens.analyzers.synopsis import compute_synopsis
from activity_lens.analyzers.volume import daily_volume
from activity_lens.models import ActivityEvent, ActivityProfile, RepositorySummary

TOP_LANGUAGES = 5


def build_profile(
    events: Sequence[ActivityEvent],
    repos: Sequence[RepositorySummary],
    offset_hours: int,
) -> ActivityProfile:
    """Pure composition of the analyzers. A failed fetch arrives as an empty sequence."""
    languages = aggregate_languages(repos)
    return ActivityProfile(
        synopsis=compute_synopsis(events, offset_hours),
        languages=languages,
        top_languages=tuple(top_languages(languages, TOP_LANGUAGES)),
        volume=tuple(daily_volume(events)),
    )
