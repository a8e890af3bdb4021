from datetime import date

from activity_lens.models import ActivityEvent, ActivityProfile, DailyVolume
from activity_lens.platforms.github.parser import describe_event

NOT_AVAILABLE = "N/A"
NOT_FOUND = "None found"
BAR_CHAR = "█"
MAX_BAR_WIDTH = 40


def format_volume(volume: tuple[DailyVolume, ...] | list[DailyVolume]) -> list[str]:
    """Render the daily histogram as Markdown lines; nothing at all when empty."""
    if not volume:
        return []
    peak = max(v.count for v in volume)
    scale = min(1.0, MAX_BAR_WIDTH / peak)
    lines = ["## Daily Volume\n", "```"]
    for v in volume:
        bar = BAR_CHAR * max(1, round(v.count * scale))
        lines.append(f"{v.day.isoformat()}  {bar} {v.count}")
    lines.append("```")
    lines.append("")
    return lines


def format_recent_activity(events: list[ActivityEvent], limit: int = 10) -> list[str]:
    if not events:
        return []
    lines = ["## Recent Activity\n"]
    for event in events[:limit]:
        stamp = event.created_at.strftime("%Y-%m-%d %H:%M UTC")
        lines.append(f"- {describe_event(event)} *({stamp})*")
    lines.append("")
    return lines


def format_report(
    username: str,
    profile: ActivityProfile,
    events: list[ActivityEvent] | None = None,
    errors: list[str] | None = None,
) -> str:
    """Format an activity profile into a Markdown report string."""
    synopsis = profile.synopsis
    sections = [f"# @{username} Activity Report\n\n*Generated {date.today()}*\n"]

    for error in errors or []:
        sections.append(f"> **Warning:** {error}\n")

    frequency = f"{synopsis.frequency:.1f} events/week" if synopsis.frequency is not None else NOT_AVAILABLE
    if synopsis.consistency is not None:
        c = synopsis.consistency
        consistency = f"{c.percent}% ({c.active_days}/{c.total_days} days active)"
    else:
        consistency = NOT_AVAILABLE
    peak = synopsis.peak_hour.label if synopsis.peak_hour is not None else NOT_AVAILABLE

    sections.append("## Synopsis\n")
    sections.append(f"- **Primary language**: {profile.languages.primary or NOT_FOUND}")
    sections.append(f"- **Frequency**: {frequency}")
    sections.append(f"- **Consistency**: {consistency}")
    sections.append(f"- **Peak hour**: {peak}")
    sections.append("")

    if profile.top_languages:
        sections.append("## Top Languages\n")
        sections.append("| Language | Share |")
        sections.append("|---|---|")
        for share in profile.top_languages:
            sections.append(f"| {share.language} | {share.percentage:.1f}% |")
        sections.append("")

    sections.extend(format_volume(profile.volume))
    sections.extend(format_recent_activity(events or []))

    return "\n".join(sections)
