"""Search bar and suggestion dropdown widgets.

The search bar only reports edits and submissions; debouncing lives in
SearchController so the same rules apply whatever drives the input.
"""

from __future__ import annotations

from textual import events
from textual.widgets import Input, OptionList

from starpulse.tui.messages import QueryEdited, SearchSubmitted, SuggestionChosen


class SearchBar(Input):
    """Subject name input.

    Every edit posts QueryEdited; Enter posts SearchSubmitted. Down arrow
    moves focus into the suggestion list when it is showing.
    """

    DEFAULT_CSS = """
    SearchBar {
        dock: top;
        height: 3;
        padding: 0 1;
        border-bottom: solid $primary;
    }
    """

    def __init__(self) -> None:
        super().__init__(
            placeholder="Enter a singer or actor... (Ctrl+F to focus)",
            id="search-bar",
        )

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input is not self:
            return
        event.stop()
        self.post_message(QueryEdited(event.value))

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input is not self:
            return
        event.stop()
        if event.value.strip():
            self.post_message(SearchSubmitted(event.value))

    def on_key(self, event: events.Key) -> None:
        if event.key != "down":
            return
        suggestions = self.app.query_one(SuggestionList)
        if suggestions.display and suggestions.option_count:
            suggestions.focus()
            event.prevent_default()

    def set_query(self, text: str) -> None:
        """Replace the text without reporting it as a user edit."""
        if self.value == text:
            return
        with self.prevent(Input.Changed):
            self.value = text
        self.cursor_position = len(text)


class SuggestionList(OptionList):
    """Dropdown of candidate names under the search bar."""

    DEFAULT_CSS = """
    SuggestionList {
        dock: top;
        height: auto;
        max-height: 8;
        margin: 0 1;
        border: tall $accent;
        display: none;
    }
    """

    def __init__(self) -> None:
        super().__init__(id="suggestions")
        self._names: list[str] = []

    def show_names(self, names: list[str], visible: bool) -> None:
        """Replace the options and toggle visibility."""
        if names != self._names:
            self._names = list(names)
            self.clear_options()
            self.add_options(self._names)
        self.display = visible and bool(self._names)

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        if event.option_list is not self:
            return
        event.stop()
        name = self._names[event.option_index]
        self.post_message(SuggestionChosen(name))
