"""TUI widget modules for the StarPulse interactive interface."""

from .detail import DetailScreen
from .history import HistoryPanel
from .profile import ProfileView, RecommendedList, SectionCard
from .search_bar import SearchBar, SuggestionList
from .status import ErrorBanner, LoadingPanel

__all__ = [
    "DetailScreen",
    "ErrorBanner",
    "HistoryPanel",
    "LoadingPanel",
    "ProfileView",
    "RecommendedList",
    "SearchBar",
    "SectionCard",
    "SuggestionList",
]
