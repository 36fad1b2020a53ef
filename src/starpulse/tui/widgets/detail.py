"""Modal detail view for one profile section."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import OptionList, Static

from starpulse.models import ProfileRecord
from starpulse.tui.messages import RelatedChosen
from starpulse.tui.widgets.sections import SECTION_TITLES, render_section


class DetailScreen(ModalScreen[None]):
    """Full rendering of a section. Related people can be searched from here."""

    DEFAULT_CSS = """
    DetailScreen {
        align: center middle;
    }
    DetailScreen #detail-box {
        width: 80%;
        max-width: 100;
        height: 80%;
        border: thick $accent;
        background: $surface;
        padding: 1 2;
    }
    DetailScreen #detail-title {
        text-style: bold;
        color: $accent;
        padding-bottom: 1;
    }
    DetailScreen #related-names {
        height: auto;
        max-height: 10;
    }
    """

    BINDINGS = [("escape", "close", "Close")]

    def __init__(
        self,
        section: str,
        record: ProfileRecord | None,
        history: list[ProfileRecord] | None = None,
    ) -> None:
        super().__init__()
        self.section = section
        self.record = record
        self.history = history or []

    def compose(self) -> ComposeResult:
        with Vertical(id="detail-box"):
            yield Static(SECTION_TITLES[self.section], id="detail-title")
            with VerticalScroll():
                yield Static(
                    render_section(self.section, self.record, self.history),
                    id="detail-body",
                )
            if self.section == "related" and self.record is not None:
                yield OptionList(
                    *(person.name for person in self.record.related_celebrities),
                    id="related-names",
                )

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        event.stop()
        name = self.record.related_celebrities[event.option_index].name
        self.post_message(RelatedChosen(name))

    def action_close(self) -> None:
        self.dismiss(None)
