from collections.abc import Iterable

from activity_lens.models import LanguageBreakdown, LanguageShare, LanguageWeight, RepositorySummary


def aggregate_languages(repos: Iterable[RepositorySummary]) -> LanguageBreakdown:
    """Sum repository sizes per language.

    Languages keep the order in which they first appear, so an exact size tie
    for the primary language goes to the one seen first.
    """
    sizes: dict[str, int] = {}
    for repo in repos:
        if not repo.language:
            continue
        sizes[repo.language] = sizes.get(repo.language, 0) + repo.size

    weights = tuple(LanguageWeight(language=lang, size=size) for lang, size in sizes.items())
    total = sum(w.size for w in weights)

    primary = None
    if total > 0:
        best = weights[0]
        for weight in weights[1:]:
            if weight.size > best.size:
                best = weight
        primary = best.language

    return LanguageBreakdown(weights=weights, total=total, primary=primary)


def top_languages(breakdown: LanguageBreakdown, n: int = 5) -> list[LanguageShare]:
    """Largest languages by size with their share of the total, in percent."""
    if breakdown.total <= 0:
        return []
    # sorted() is stable: equal sizes stay in first-occurrence order
    ranked = sorted(breakdown.weights, key=lambda w: w.size, reverse=True)[:n]
    return [
        LanguageShare(language=w.language, percentage=round(w.size / breakdown.total * 100, 1))
        for w in ranked
    ]
