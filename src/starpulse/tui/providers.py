"""Command palette provider for the StarPulse TUI."""

from __future__ import annotations

from functools import partial

from textual.command import Hit, Hits, Provider


class StarPulseCommands(Provider):
    """Exposes the app's actions as fuzzy-searchable Ctrl+P commands."""

    COMMANDS: dict[str, str] = {
        "Search": "focus_search",
        "Cancel Search": "cancel_search",
        "Dismiss Error": "dismiss_error",
        "Show Rank Table": "show_rank_table",
        "Show Search History": "show_history",
        "Clear Search History": "clear_history",
        "Show Tier Index": "show_section('rating')",
        "Show Career Story": "show_section('story')",
        "Show Works": "show_section('works')",
    }

    async def search(self, query: str) -> Hits:
        matcher = self.matcher(query)
        for name, action in self.COMMANDS.items():
            score = matcher.match(name)
            if score > 0:
                yield Hit(
                    score,
                    matcher.highlight(name),
                    partial(self.app.run_action, action),
                )
