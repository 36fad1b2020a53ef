"""Rich renderers for profile sections.

Shared by the profile cards (short form) and the detail screen (full
form). Each renderer takes the record and returns a rich Text.
"""

from __future__ import annotations

from rich.text import Text

from starpulse.models import STAR_RANKS, ProfileRecord, radar_dimensions, rank_title

SECTION_TITLES: dict[str, str] = {
    "rating": "TIER INDEX",
    "stats": "TOTAL STATS",
    "basic": "BIO",
    "related": "RELATED",
    "growth": "ORIGIN",
    "story": "CAREER STORY",
    "media": "PRODUCTION",
    "famous": "HIGHLIGHTS",
    "awards": "AWARDS",
    "works": "WORKS",
    "others": "OTHERS",
    "rank_table": "RANK TABLE",
    "history": "RECENT SEARCHES",
}

_BAR_WIDTH = 20
_SHORT_ITEMS = 3


def _label(text: Text, label: str, value: str | None) -> None:
    if value:
        text.append(f"{label}: ", style="bold orange1")
        text.append(f"{value}\n")


def render_rating(record: ProfileRecord, full: bool = True) -> Text:
    text = Text()
    text.append(f"{record.popularity_rating:.1f}", style="bold orange1")
    text.append(f"  {rank_title(record.popularity_rating)}\n", style="bold")
    if full:
        text.append("\n")
        for axis, weight in radar_dimensions(record.popularity_rating):
            filled = round(weight * _BAR_WIDTH)
            text.append(f"{axis:<22} ")
            text.append("█" * filled, style="orange1")
            text.append("░" * (_BAR_WIDTH - filled) + "\n", style="grey37")
        text.append(f"\n{record.rating_justification}\n", style="italic")
    return text


def render_stats(record: ProfileRecord, full: bool = True) -> Text:
    stats = record.total_stats
    text = Text()
    _label(text, "Views", stats.views)
    _label(text, "Sales", stats.sales)
    _label(text, "Followers", stats.followers)
    _label(text, "Awards", stats.awards)
    return text


def render_basic(record: ProfileRecord, full: bool = True) -> Text:
    info = record.basic_info
    text = Text()
    _label(text, "Original name", record.original_name)
    _label(text, "Stage name", record.stage_name)
    _label(text, "Gender", info.gender)
    _label(text, "Age", info.age)
    _label(text, "Nationality", info.nationality)
    _label(text, "Birthday", info.birth_date)
    _label(text, "Spouse", info.spouse)
    if full:
        _label(text, "Blood type", info.blood_type)
        _label(text, "Height", info.height)
        social = record.social_links
        _label(text, "Facebook", social.facebook)
        _label(text, "Twitter", social.twitter)
        _label(text, "Instagram", social.instagram)
    return text


def render_related(record: ProfileRecord, full: bool = True) -> Text:
    people = record.related_celebrities if full else record.related_celebrities[:_SHORT_ITEMS]
    text = Text()
    for person in people:
        text.append(person.name, style="bold")
        text.append(f"  {person.relationship}\n", style="dim")
    return text


def render_growth(record: ProfileRecord, full: bool = True) -> Text:
    return Text(record.growth_background if full else _clip(record.growth_background))


def render_story(record: ProfileRecord, full: bool = True) -> Text:
    return Text(record.career_story if full else _clip(record.career_story))


def render_media(record: ProfileRecord, full: bool = True) -> Text:
    media = record.featured_media
    text = Text()
    text.append(f"{media.title}", style="bold orange1")
    text.append(f"  [{media.type.upper()}] {media.release_date}\n", style="dim")
    if full:
        text.append(f"\n{media.description}\n")
        if media.related_people:
            text.append("\nWith: ", style="bold")
            text.append(", ".join(media.related_people) + "\n")
    return text


def render_famous(record: ProfileRecord, full: bool = True) -> Text:
    works = record.famous_works if full else record.famous_works[:_SHORT_ITEMS]
    text = Text()
    for work in works:
        text.append(f"▶ {work.title}\n", style="bold")
        if full:
            text.append(f"  {work.youtube_url}\n", style="underline dim")
    return text


def render_awards(record: ProfileRecord, full: bool = True) -> Text:
    awards = record.basic_info.awards if full else record.basic_info.awards[:_SHORT_ITEMS]
    text = Text()
    for award in awards:
        text.append(f"★ {award}\n")
    return text


def render_works(record: ProfileRecord, full: bool = True) -> Text:
    works = record.works if full else record.works[:_SHORT_ITEMS]
    text = Text()
    for work in works:
        text.append(f"{work.year}  ", style="orange1")
        text.append(work.title, style="bold")
        if work.role:
            text.append(f"  ({work.role})", style="dim")
        if full and work.stats:
            text.append(f"  {work.stats}", style="italic")
        text.append("\n")
    return text


def render_others(record: ProfileRecord, full: bool = True) -> Text:
    text = Text(record.others if full else _clip(record.others))
    if full and record.tags:
        text.append("\n\n" + "  ".join(f"#{tag}" for tag in record.tags), style="dim")
    return text


def render_rank_table() -> Text:
    text = Text()
    for low, high, title in reversed(STAR_RANKS):
        upper = min(high, 10.0)
        text.append(f"{low:4.1f} - {upper:4.1f}  ", style="orange1")
        text.append(f"{title}\n")
    return text


def render_history(history: list[ProfileRecord]) -> Text:
    if not history:
        return Text("No searches yet.", style="dim")
    text = Text()
    for i, record in enumerate(history, start=1):
        text.append(f"{i:>2}. {record.name:<28}", style="bold")
        text.append(f"{record.popularity_rating:4.1f}  ", style="orange1")
        text.append(f"{rank_title(record.popularity_rating)}\n", style="dim")
    return text


RECORD_RENDERERS = {
    "rating": render_rating,
    "stats": render_stats,
    "basic": render_basic,
    "related": render_related,
    "growth": render_growth,
    "story": render_story,
    "media": render_media,
    "famous": render_famous,
    "awards": render_awards,
    "works": render_works,
    "others": render_others,
}


def render_section(
    section: str,
    record: ProfileRecord | None,
    history: list[ProfileRecord] | None = None,
    full: bool = True,
) -> Text:
    """Render *section* of *record*, or one of the record-independent views."""
    if section == "rank_table":
        return render_rank_table()
    if section == "history":
        return render_history(history or [])
    if record is None:
        return Text("")
    return RECORD_RENDERERS[section](record, full)


def _clip(value: str, limit: int = 240) -> str:
    return value if len(value) <= limit else value[: limit - 1].rstrip() + "…"
