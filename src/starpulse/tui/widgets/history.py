"""Recent searches side panel."""

from __future__ import annotations

from textual.widgets import OptionList

from starpulse.models import ProfileRecord
from starpulse.tui.messages import HistoryEntryChosen

PANEL_ENTRIES = 6


class HistoryPanel(OptionList):
    """Shows the most recent history entries; picking one re-displays it."""

    DEFAULT_CSS = """
    HistoryPanel {
        width: 32;
        border-left: solid $primary;
    }
    """

    def __init__(self) -> None:
        super().__init__(id="history-panel")
        self.border_title = "Recent"

    def show_history(self, history: list[ProfileRecord]) -> None:
        self.clear_options()
        self.add_options(
            f"{record.name}  {record.popularity_rating:.1f}"
            for record in history[:PANEL_ENTRIES]
        )

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        if event.option_list is not self:
            return
        event.stop()
        self.post_message(HistoryEntryChosen(event.option_index))
