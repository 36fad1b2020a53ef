"""StarPulse TUI Application.

Main Textual App subclass. Owns one SearchController, forwards widget
messages to it as intents, and mirrors its state into reactive
attributes whose watchers re-render the widgets.
"""

from __future__ import annotations

import random

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.events import DescendantFocus
from textual.reactive import reactive
from textual.widgets import Footer, Header, Static

from starpulse.config import Settings
from starpulse.services.history import HistoryStore
from starpulse.tui.controller import ProfileSource, SearchController
from starpulse.tui.messages import (
    HistoryEntryChosen,
    QueryEdited,
    RelatedChosen,
    SearchSubmitted,
    SectionRequested,
    SuggestionChosen,
)
from starpulse.tui.providers import StarPulseCommands
from starpulse.tui.telemetry import Telemetry
from starpulse.tui.widgets import (
    DetailScreen,
    ErrorBanner,
    HistoryPanel,
    LoadingPanel,
    ProfileView,
    SearchBar,
    SuggestionList,
)


class StarPulseApp(App):
    """Global fame index lookup.

    Search bar with suggestion dropdown on top, profile cards in the
    centre, recent searches on the right.
    """

    TITLE = "StarPulse"
    SUB_TITLE = "Global Fame Index"
    COMMANDS = App.COMMANDS | {StarPulseCommands}

    CSS = """
    #main {
        layout: horizontal;
        height: 1fr;
    }

    ProfileView {
        width: 1fr;
    }

    #status-bar {
        dock: bottom;
        height: 1;
        background: $primary-background;
        color: $text;
        padding: 0 1;
    }
    """

    # Priority: the search Input binds ctrl+e, ctrl+f and ctrl+h itself.
    BINDINGS = [
        ("ctrl+p", "command_palette", "Commands"),
        Binding("ctrl+f", "focus_search", "Search", priority=True),
        ("escape", "cancel_search", "Cancel"),
        Binding("ctrl+e", "dismiss_error", "Dismiss Error", priority=True),
        Binding("ctrl+r", "show_rank_table", "Ranks", priority=True),
        Binding("ctrl+h", "show_history", "History", priority=True),
    ]

    # Mirrors of SearchController state -- watchers re-render widgets
    query_text: reactive[str] = reactive("", init=False)
    suggestions: reactive[list] = reactive(list, init=False)
    suggestions_visible: reactive[bool] = reactive(False, init=False)
    is_loading: reactive[bool] = reactive(False, init=False)
    progress: reactive[float] = reactive(0.0, init=False)
    error_message: reactive[str | None] = reactive(None, init=False)
    result: reactive[object | None] = reactive(None, init=False)
    history: reactive[list] = reactive(list, init=False)
    detail_section: reactive[str | None] = reactive(None, init=False)

    def __init__(
        self,
        profile_service: ProfileSource,
        history_store: HistoryStore,
        settings: Settings | None = None,
        telemetry: Telemetry | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the app and its controller.

        Args:
            profile_service: Backend for suggestions and profile lookups.
            history_store: Persistence for the recent-results list.
            settings: Timings and limits. Defaults to ``Settings()``.
            telemetry: OTel tracing facade. Defaults to no-op.
            rng: Random source for the recommended names.
        """
        super().__init__()
        self.telemetry = telemetry if telemetry is not None else Telemetry.noop()
        self.controller = SearchController(
            profile_service,
            history_store,
            settings=settings,
            telemetry=self.telemetry,
            on_change=self._sync_state,
            rng=rng,
        )
        self._detail_screen: DetailScreen | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield SearchBar()
        yield SuggestionList()
        yield LoadingPanel()
        yield ErrorBanner()
        with Horizontal(id="main"):
            yield ProfileView()
            yield HistoryPanel()
        yield Static("Ready | Ctrl+P: Commands", id="status-bar")
        yield Footer()

    async def on_mount(self) -> None:
        """Start the controller and render the initial state."""
        with self.telemetry.span("app.mount") as span:
            self.controller.start()
            span.set_attribute("mount.history_size", len(self.controller.history))
            self.query_one(ProfileView).show_placeholder(self.controller.recommended)
            self.history = list(self.controller.history)
            self.query_one(HistoryPanel).show_history(self.history)
            self.query_one(SearchBar).focus()
            self.telemetry.log.info("app mounted")

    def on_unmount(self) -> None:
        """Release controller timers and pending tasks."""
        self.controller.dispose()

    def _sync_state(self) -> None:
        c = self.controller
        self.query_text = c.query
        self.suggestions = list(c.suggestions)
        self.suggestions_visible = c.suggestions_visible
        self.is_loading = c.loading
        self.progress = c.progress
        self.error_message = c.error
        self.result = c.result
        self.history = list(c.history)
        self.detail_section = c.detail_section

    # ------------------------------------------------------------------
    # Watchers
    # ------------------------------------------------------------------

    def watch_suggestions(self, suggestions: list) -> None:
        self._render_suggestions()

    def watch_suggestions_visible(self, visible: bool) -> None:
        self._render_suggestions()

    def _render_suggestions(self) -> None:
        self.query_one(SuggestionList).show_names(self.suggestions, self.suggestions_visible)

    def watch_is_loading(self, loading: bool) -> None:
        self._render_loading()

    def watch_progress(self, progress: float) -> None:
        self._render_loading()

    def _render_loading(self) -> None:
        self.query_one(LoadingPanel).show_progress(
            self.controller.query, self.progress, self.is_loading
        )
        self._update_status()

    def watch_error_message(self, message: str | None) -> None:
        self.query_one(ErrorBanner).show_error(message)
        if message is not None:
            self.notify(message, title="Search failed", severity="error")
        self._update_status()

    def watch_result(self, record) -> None:
        profile = self.query_one(ProfileView)
        if record is None:
            profile.show_placeholder(self.controller.recommended)
        else:
            profile.show_record(record)
        self._update_status()

    def watch_history(self, history: list) -> None:
        self.query_one(HistoryPanel).show_history(history)

    def watch_detail_section(self, section: str | None) -> None:
        if self._detail_screen is not None and self.screen is self._detail_screen:
            self.pop_screen()
        self._detail_screen = None
        if section is None:
            return
        self._detail_screen = DetailScreen(
            section, self.controller.result, self.controller.history
        )
        self.push_screen(self._detail_screen, callback=self._on_detail_dismissed)

    def _on_detail_dismissed(self, _result: None = None) -> None:
        self._detail_screen = None
        self.controller.close_detail()

    def _update_status(self) -> None:
        c = self.controller
        if c.loading:
            text = f"Searching {c.query!r}... {c.progress:.0f}% | Esc: Cancel"
        elif c.error is not None:
            text = "Search failed | Ctrl+E: Dismiss | Ctrl+P: Commands"
        elif c.result is not None:
            text = f"{c.result.name} | {len(c.history)} in history | Ctrl+P: Commands"
        else:
            text = f"Ready | {len(c.history)} in history | Ctrl+P: Commands"
        self.query_one("#status-bar", Static).update(text)

    # ------------------------------------------------------------------
    # Message handlers
    # ------------------------------------------------------------------

    def on_query_edited(self, event: QueryEdited) -> None:
        self.controller.update_query(event.text)

    def _submit(self, name: str) -> None:
        if self.controller.submit_search(name) is not None:
            # Typed text is never echoed back; only a submit rewrites the input.
            self.query_one(SearchBar).set_query(self.controller.query)

    def on_search_submitted(self, event: SearchSubmitted) -> None:
        self._submit(event.name)

    def on_suggestion_chosen(self, event: SuggestionChosen) -> None:
        self.telemetry.log.info(f"suggestion chosen name={event.name!r}")
        self._submit(event.name)
        self.query_one(SearchBar).focus()

    def on_related_chosen(self, event: RelatedChosen) -> None:
        self._submit(event.name)

    def on_history_entry_chosen(self, event: HistoryEntryChosen) -> None:
        history = self.controller.history
        if 0 <= event.index < len(history):
            self.controller.select_history_entry(history[event.index])

    def on_section_requested(self, event: SectionRequested) -> None:
        self.controller.open_detail(event.section)

    def on_descendant_focus(self, event: DescendantFocus) -> None:
        """Hide suggestions once focus leaves the search box and its dropdown.

        Focusing the search box again brings back the kept list.
        """
        if isinstance(event.widget, SearchBar):
            self.controller.reveal_suggestions()
        elif not isinstance(event.widget, SuggestionList) and self.controller.suggestions_visible:
            self.controller.hide_suggestions()

    # ------------------------------------------------------------------
    # Key binding actions
    # ------------------------------------------------------------------

    def action_focus_search(self) -> None:
        self.query_one(SearchBar).focus()

    def action_cancel_search(self) -> None:
        if self.controller.loading:
            self.controller.cancel_search()
        elif self.controller.suggestions_visible:
            self.controller.hide_suggestions()

    def action_dismiss_error(self) -> None:
        self.controller.dismiss_error()

    def action_show_rank_table(self) -> None:
        self.controller.open_detail("rank_table")

    def action_show_history(self) -> None:
        self.controller.open_detail("history")

    def action_show_section(self, section: str) -> None:
        if self.controller.result is None:
            self.notify("Search for someone first", severity="warning")
            return
        self.controller.open_detail(section)

    def action_clear_history(self) -> None:
        self.controller.clear_history()
        self.notify("Search history cleared")
