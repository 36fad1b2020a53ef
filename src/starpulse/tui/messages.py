"""Custom Textual Message types carrying user intents.

Widgets never call the controller. They post these messages, the App
forwards them to SearchController, and the controller's state change
comes back through the App's reactive attributes.
"""

from __future__ import annotations

from textual.message import Message


class QueryEdited(Message):
    """Fired by the search bar on every edit."""

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__()


class SearchSubmitted(Message):
    """Fired when the user presses Enter in the search bar."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__()


class SuggestionChosen(Message):
    """Fired when a suggested or recommended name is picked."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__()


class RelatedChosen(Message):
    """Fired when a related celebrity is picked from the detail view."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__()


class HistoryEntryChosen(Message):
    """Fired from the history panel with the index into the history list."""

    def __init__(self, index: int) -> None:
        self.index = index
        super().__init__()


class SectionRequested(Message):
    """Fired when a profile card is activated to open its detail view."""

    def __init__(self, section: str) -> None:
        self.section = section
        super().__init__()
