"""Search request lifecycle controller.

Owns everything between a keystroke and a rendered profile: the query
text, debounced suggestion lookups, the long-running profile fetch, the
simulated progress value and the recent-results history. It is UI
agnostic; the Textual app mirrors its state through the ``on_change``
callback and forwards user intents to its public methods.

Every profile fetch is tagged with a request token. Only a fetch whose
token is still current when it resolves may touch state, and the
settle-delay publish checks the token a second time. Incrementing the
token is how a search is cancelled; the backend call itself is left to
finish and its result is dropped.

All timers are reactivex disposables held one per kind, so arming a
timer always disposes the previous one of the same kind and
``dispose()`` releases all of them.
"""

from __future__ import annotations

import asyncio
import random
from typing import Callable, Protocol

import reactivex as rx
from reactivex import operators as ops
from reactivex.disposable import Disposable, SerialDisposable
from reactivex.scheduler.eventloop import AsyncIOScheduler
from reactivex.subject import Subject

from starpulse.config import Settings
from starpulse.models import ProfileRecord
from starpulse.services.history import HistoryStore, upsert_history
from starpulse.services.profile import GENERIC_FAILURE
from starpulse.tui.telemetry import Telemetry

RECORD_SECTIONS = frozenset({
    "rating",
    "basic",
    "related",
    "growth",
    "story",
    "media",
    "famous",
    "awards",
    "works",
    "stats",
    "others",
})
VIEW_SECTIONS = frozenset({"rank_table", "history"})

CELEBRITY_POOL: tuple[str, ...] = (
    "Taylor Swift", "Michael Jackson", "周杰倫", "Lady Gaga", "Tom Cruise",
    "Kanye West", "Lisa", "IU", "Brad Pitt", "Beyonce", "Justin Bieber",
    "Emma Watson", "Leonardo DiCaprio", "Rihanna", "Drake", "Ariana Grande",
    "BTS", "Blackpink", "林俊傑", "蔡依林", "Eminem", "Selena Gomez",
    "The Weeknd", "Dua Lipa", "Robert Downey Jr.", "Scarlett Johansson",
    "Zendaya", "Tom Holland", "Billie Eilish", "Adele",
)
RECOMMENDED_COUNT = 8


class ProfileSource(Protocol):
    async def suggest(self, partial: str) -> list[str]: ...

    async def fetch_profile(self, name: str) -> ProfileRecord: ...


class SearchController:
    """Coordinates suggestion lookups and profile fetches for one subject at a time.

    Lifecycle: construct, ``start()`` inside a running event loop, then
    ``dispose()`` on shutdown. The latest submitted search always wins.

    Usage::

        controller = SearchController(service, HistoryStore(store), on_change=render)
        controller.start()
        controller.update_query("tay")
        controller.submit_search("Taylor Swift")
        ...
        controller.dispose()
    """

    def __init__(
        self,
        profile_service: ProfileSource,
        history_store: HistoryStore,
        settings: Settings | None = None,
        telemetry: Telemetry | None = None,
        on_change: Callable[[], None] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._service = profile_service
        self._history_store = history_store
        self.settings = settings if settings is not None else Settings()
        self.telemetry = telemetry if telemetry is not None else Telemetry.noop()
        self.on_change = on_change

        # State read by the presentation layer
        self.query: str = ""
        self.suggestions: list[str] = []
        self.suggestions_visible: bool = False
        self.loading: bool = False
        self.progress: float = 0.0
        self.result: ProfileRecord | None = None
        self.error: str | None = None
        self.detail_section: str | None = None
        self.history: list[ProfileRecord] = history_store.load()
        self.recommended: list[str] = (rng or random.Random()).sample(
            CELEBRITY_POOL, RECOMMENDED_COUNT
        )

        self._token = 0
        self._loop: asyncio.AbstractEventLoop | None = None
        self._scheduler: AsyncIOScheduler | None = None
        self._query_subject: Subject = Subject()
        self._reset_subject: Subject = Subject()
        self._suggest_subscription = None
        self._progress_timer = SerialDisposable()
        self._settle_timer = SerialDisposable()
        self._tasks: set[asyncio.Task] = set()
        self._disposed = False

    @property
    def token(self) -> int:
        """The current request token."""
        return self._token

    @property
    def started(self) -> bool:
        return self._scheduler is not None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Bind to the running event loop and wire the suggestion pipeline.

        Typing is debounced; resets (short query, submitted search) bypass
        the debounce so switch_map drops any lookup still in flight.
        """
        if self._disposed:
            raise RuntimeError("SearchController has been disposed")
        if self._scheduler is not None:
            return
        self._loop = asyncio.get_running_loop()
        self._scheduler = AsyncIOScheduler(self._loop)

        lookups = rx.merge(
            self._query_subject.pipe(
                ops.debounce(self.settings.debounce_seconds, scheduler=self._scheduler),
            ),
            self._reset_subject,
        ).pipe(ops.switch_map(self._suggest_observable))

        self._suggest_subscription = lookups.subscribe(on_next=self._on_suggestions)
        self.telemetry.log.info(f"controller started history_size={len(self.history)}")

    def dispose(self) -> None:
        """Release every timer, subscription and pending task. Idempotent."""
        if self._disposed:
            return
        self._disposed = True
        self._token += 1
        self._progress_timer.dispose()
        self._settle_timer.dispose()
        if self._suggest_subscription is not None:
            self._suggest_subscription.dispose()
            self._suggest_subscription = None
        self._query_subject.on_completed()
        self._reset_subject.on_completed()
        for task in list(self._tasks):
            task.cancel()
        self._tasks.clear()
        self.loading = False
        self.progress = 0.0
        self.telemetry.log.info("controller disposed")

    # ------------------------------------------------------------------
    # User intents
    # ------------------------------------------------------------------

    def submit_search(self, name: str) -> int | None:
        """Start a profile fetch for *name*, superseding any in-flight one.

        Returns the new request token, or None when *name* is blank.
        """
        name = name.strip()
        if not name:
            return None
        if not self.started:
            self.start()

        self._token += 1
        token = self._token
        with self.telemetry.span(
            "controller.submit_search", {"search.name": name, "search.token": token}
        ):
            self.loading = True
            self.progress = 0.0
            self.result = None
            self.error = None
            self.detail_section = None
            self.query = name
            self._reset_suggestions()
            self._settle_timer.disposable = Disposable()
            self._start_progress()
            self._spawn(self._fetch(token, name))

        self.telemetry.log.info(f"search submitted name={name!r} token={token}")
        self._notify()
        return token

    def cancel_search(self) -> None:
        """Abandon the in-flight fetch; its eventual result is dropped."""
        self._token += 1
        self._stop_progress()
        self._settle_timer.disposable = Disposable()
        was_loading = self.loading
        self.loading = False
        self.progress = 0.0
        if was_loading:
            self.telemetry.log.info(f"search cancelled token={self._token}")
        self._notify()

    def update_query(self, text: str) -> None:
        """Record edited query text and (re)arm the suggestion debounce."""
        self.query = text
        if len(text.strip()) < self.settings.suggestion_min_length:
            self._reset_suggestions()
        else:
            self._query_subject.on_next(text)
        self._notify()

    def select_history_entry(self, record: ProfileRecord) -> None:
        """Show a cached record. No network call, token untouched."""
        self.result = record
        self.detail_section = None
        self.telemetry.log.info(f"history entry selected name={record.name!r}")
        self._notify()

    def hide_suggestions(self) -> None:
        self.suggestions_visible = False
        self._notify()

    def reveal_suggestions(self) -> None:
        """Show the kept suggestion list again, e.g. when the search box regains focus."""
        if self.suggestions_visible or not self.suggestions:
            return
        if len(self.query.strip()) < self.settings.suggestion_min_length:
            return
        self.suggestions_visible = True
        self._notify()

    def dismiss_error(self) -> None:
        self.error = None
        self._notify()

    def open_detail(self, section: str) -> None:
        """Open the detail view for a section of the displayed record.

        ``rank_table`` and ``history`` do not need a displayed record.
        """
        if section in RECORD_SECTIONS:
            if self.result is None:
                return
        elif section not in VIEW_SECTIONS:
            raise ValueError(f"Unknown detail section: {section!r}")
        self.detail_section = section
        self._notify()

    def close_detail(self) -> None:
        self.detail_section = None
        self._notify()

    def clear_history(self) -> None:
        self.history = []
        self._history_store.clear()
        self.telemetry.log.info("history cleared")
        self._notify()

    # ------------------------------------------------------------------
    # Profile fetch
    # ------------------------------------------------------------------

    def _spawn(self, coro) -> None:
        task = self._loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _fetch(self, token: int, name: str) -> None:
        try:
            record = await self._service.fetch_profile(name)
        except Exception as exc:
            self._on_fetch_failed(token, name, exc)
        else:
            self._on_fetch_succeeded(token, record)

    def _on_fetch_succeeded(self, token: int, record: ProfileRecord) -> None:
        if token != self._token:
            self.telemetry.log.info(
                f"stale result discarded name={record.name!r} token={token} current={self._token}"
            )
            return

        with self.telemetry.span(
            "controller.fetch_succeeded", {"search.token": token, "profile.name": record.name}
        ) as span:
            self._stop_progress()
            self.progress = 100.0

            self.history = upsert_history(self.history, record, self.settings.history_limit)
            persisted = self._history_store.save(self.history)
            span.set_attribute("history.persisted", persisted)
            span.set_attribute("history.size", len(self.history))

            self._settle_timer.disposable = self._scheduler.schedule_relative(
                self.settings.settle_seconds,
                lambda _scheduler, _state: self._publish(token, record),
            )
        self._notify()

    def _publish(self, token: int, record: ProfileRecord) -> None:
        if token != self._token:
            return
        self.loading = False
        self.progress = 0.0
        self.result = record
        self.telemetry.log.info(f"result published name={record.name!r} token={token}")
        self._notify()

    def _on_fetch_failed(self, token: int, name: str, exc: Exception) -> None:
        if token != self._token:
            self.telemetry.log.info(f"stale error discarded name={name!r} token={token}")
            return
        with self.telemetry.span("controller.fetch_failed", {"search.token": token}) as span:
            span.record_failure(exc)
            self._stop_progress()
            self.loading = False
            self.progress = 0.0
            self.error = str(exc) or GENERIC_FAILURE
            self.telemetry.log.error(f"search failed name={name!r} error={exc!r}")
        self._notify()

    # ------------------------------------------------------------------
    # Progress simulation
    # ------------------------------------------------------------------

    def _start_progress(self) -> None:
        self._progress_timer.disposable = rx.interval(
            self.settings.progress_tick_seconds, scheduler=self._scheduler
        ).subscribe(on_next=lambda _: self._tick())

    def _stop_progress(self) -> None:
        self._progress_timer.disposable = Disposable()

    def _tick(self) -> None:
        ceiling = self.settings.progress_ceiling
        if not self.loading or self.progress >= ceiling:
            return
        self.progress = min(ceiling, self.progress + self.settings.progress_increment)
        self._notify()

    # ------------------------------------------------------------------
    # Suggestions
    # ------------------------------------------------------------------

    def _reset_suggestions(self) -> None:
        self.suggestions = []
        self.suggestions_visible = False
        # A blank value restarts the debounce window and, via the reset
        # stream, switches away from any lookup in flight.
        self._query_subject.on_next("")
        self._reset_subject.on_next("")

    def _suggest_observable(self, query: str):
        if len(query.strip()) < self.settings.suggestion_min_length:
            return rx.empty()
        return self._suggest_lookup(query).pipe(
            ops.catch(lambda err, _source: self._handle_suggest_error(err, query)),
        )

    def _suggest_lookup(self, query: str) -> rx.Observable:
        """One ``suggest(query)`` call as an observable.

        Subscribing starts the call on the controller's loop; disposing the
        subscription (switch_map moving on, or ``dispose()``) cancels it.
        """

        def subscribe(observer, scheduler=None):
            lookup = self._loop.create_task(self._service.suggest(query))

            def deliver(done: asyncio.Task) -> None:
                if done.cancelled():
                    self.telemetry.log.debug(f"suggestion lookup superseded query={query!r}")
                    return
                error = done.exception()
                if error is not None:
                    observer.on_error(error)
                    return
                observer.on_next(done.result())
                observer.on_completed()

            lookup.add_done_callback(deliver)
            return Disposable(lookup.cancel)

        return rx.create(subscribe)

    def _handle_suggest_error(self, error: Exception, query: str):
        self.telemetry.log.warning(f"suggestion lookup failed query={query!r} error={error!r}")
        return rx.empty()

    def _on_suggestions(self, names: list[str]) -> None:
        if len(self.query.strip()) < self.settings.suggestion_min_length:
            return
        self.suggestions = list(names)
        self.suggestions_visible = True
        self._notify()

    def _notify(self) -> None:
        if self.on_change is not None and not self._disposed:
            self.on_change()
