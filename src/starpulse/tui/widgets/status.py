"""Loading progress panel and error banner."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widgets import Label, ProgressBar, Static


class LoadingPanel(Vertical):
    """Simulated progress bar shown while a profile fetch is running."""

    DEFAULT_CSS = """
    LoadingPanel {
        height: auto;
        padding: 1 2;
        border: round $accent;
        display: none;
    }
    """

    def compose(self) -> ComposeResult:
        yield Label("", id="loading-label")
        yield ProgressBar(total=100, show_eta=False, id="loading-bar")
        yield Label("Esc to cancel", id="loading-hint")

    def show_progress(self, name: str, progress: float, visible: bool) -> None:
        self.display = visible
        if not visible:
            return
        self.query_one("#loading-label", Label).update(f"Analysing {name}...")
        self.query_one(ProgressBar).update(progress=progress)


class ErrorBanner(Static):
    """Last search error. Ctrl+E dismisses it."""

    DEFAULT_CSS = """
    ErrorBanner {
        height: auto;
        padding: 0 2;
        background: $error;
        color: $text;
        display: none;
    }
    """

    def show_error(self, message: str | None) -> None:
        self.display = message is not None
        if message is not None:
            self.update(f"⚠ {message}  (Ctrl+E to dismiss)")
