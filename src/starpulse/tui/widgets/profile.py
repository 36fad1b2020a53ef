"""Profile pane: placeholder with recommendations, or a grid of section cards.

The cards are composed once and refilled on every record so no widget
is mounted or removed while a search is running.
"""

from __future__ import annotations

from rich.text import Text
from textual import events
from textual.app import ComposeResult
from textual.containers import Grid, VerticalScroll
from textual.widgets import OptionList, Static

from starpulse.models import ProfileRecord, rank_title
from starpulse.tui.messages import SectionRequested, SuggestionChosen
from starpulse.tui.widgets.sections import SECTION_TITLES, render_section

CARD_ORDER: tuple[str, ...] = (
    "rating",
    "stats",
    "basic",
    "related",
    "growth",
    "story",
    "media",
    "famous",
    "awards",
    "works",
    "others",
)


class SectionCard(Static):
    """One summarised profile section. Click or Enter opens its detail view."""

    DEFAULT_CSS = """
    SectionCard {
        padding: 1 2;
        background: $surface;
        border: solid $primary-background;
        height: auto;
    }
    SectionCard:hover, SectionCard:focus {
        border: solid $accent;
    }
    """

    can_focus = True

    def __init__(self, section: str) -> None:
        super().__init__("", classes="section-card")
        self.section = section

    def show(self, record: ProfileRecord) -> None:
        text = Text(f"{SECTION_TITLES[self.section]}\n", style="bold orange1")
        text.append_text(render_section(self.section, record, full=False))
        self.update(text)

    def on_click(self, event: events.Click) -> None:
        self.post_message(SectionRequested(self.section))

    def on_key(self, event: events.Key) -> None:
        if event.key == "enter":
            event.stop()
            self.post_message(SectionRequested(self.section))


class RecommendedList(OptionList):
    """Names offered before the first search."""

    DEFAULT_CSS = """
    RecommendedList {
        height: auto;
        max-height: 10;
        border: none;
    }
    """

    def __init__(self) -> None:
        super().__init__(id="recommended")
        self._names: list[str] = []

    def set_names(self, names: list[str]) -> None:
        self._names = list(names)
        self.clear_options()
        self.add_options(self._names)

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        if event.option_list is not self:
            return
        event.stop()
        self.post_message(SuggestionChosen(self._names[event.option_index]))


class ProfileView(VerticalScroll):
    """Displays the current ProfileRecord, or recommendations when there is none."""

    DEFAULT_CSS = """
    ProfileView #profile-cards {
        grid-size: 2;
        grid-gutter: 1;
        height: auto;
    }
    ProfileView #profile-header {
        padding: 1 2;
    }
    """

    def compose(self) -> ComposeResult:
        yield Static(id="profile-placeholder")
        yield RecommendedList()
        yield Static(id="profile-header")
        with Grid(id="profile-cards"):
            for section in CARD_ORDER:
                yield SectionCard(section)

    def show_placeholder(self, recommended: list[str]) -> None:
        self.query_one("#profile-placeholder", Static).update(
            Text("Search a name to get their global fame index.\n\nTry one of these:", style="dim")
        )
        self.query_one(RecommendedList).set_names(recommended)
        self._set_mode(has_record=False)

    def show_record(self, record: ProfileRecord) -> None:
        header = Text(record.name, style="bold orange1")
        if record.stage_name and record.stage_name != record.name:
            header.append(f"  ({record.stage_name})", style="dim")
        header.append(
            f"\n{record.popularity_rating:.1f} · {rank_title(record.popularity_rating)}",
            style="bold",
        )
        if record.tags:
            header.append("\n" + "  ".join(f"#{tag}" for tag in record.tags), style="dim")
        self.query_one("#profile-header", Static).update(header)
        for card in self.query(SectionCard):
            card.show(record)
        self._set_mode(has_record=True)
        self.scroll_home(animate=False)

    def _set_mode(self, has_record: bool) -> None:
        self.query_one("#profile-placeholder").display = not has_record
        self.query_one(RecommendedList).display = not has_record
        self.query_one("#profile-header").display = has_record
        self.query_one("#profile-cards").display = has_record
