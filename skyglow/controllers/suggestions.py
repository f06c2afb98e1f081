"""City autocomplete: debounced lookups with a reducer-driven state machine.

Phases: IDLE -> DEBOUNCING -> FETCHING -> SHOWING | IDLE. Every fetch gets
a token from a monotonically increasing counter; a completion whose token
is not the latest, or that arrives after the control moved on, is dropped.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Protocol

from skyglow.config.defaults import DEFAULT_DEBOUNCE_MS
from skyglow.models.suggestion import CitySuggestion

logger = logging.getLogger(__name__)

DEFAULT_MIN_QUERY_LENGTH = 3


class Phase(StrEnum):
    IDLE = "idle"
    DEBOUNCING = "debouncing"
    FETCHING = "fetching"
    SHOWING = "showing"


@dataclass(frozen=True)
class SuggestionState:
    phase: Phase = Phase.IDLE
    query: str = ""
    suggestions: tuple[CitySuggestion, ...] = ()
    token: int = 0  # latest issued fetch token

    @property
    def visible(self) -> bool:
        return self.phase is Phase.SHOWING


# --- Events ---

@dataclass(frozen=True)
class QueryChanged:
    query: str


@dataclass(frozen=True)
class DebounceFired:
    pass


@dataclass(frozen=True)
class FetchCompleted:
    token: int
    suggestions: tuple[CitySuggestion, ...]


@dataclass(frozen=True)
class FetchFailed:
    token: int


@dataclass(frozen=True)
class Dismissed:
    """Interaction outside the search input."""


@dataclass(frozen=True)
class Cleared:
    """A suggestion was selected or the search was submitted."""


Event = QueryChanged | DebounceFired | FetchCompleted | FetchFailed | Dismissed | Cleared


def reduce(
    state: SuggestionState,
    event: Event,
    min_query_length: int = DEFAULT_MIN_QUERY_LENGTH,
) -> SuggestionState:
    """Pure transition function for the autocomplete state machine."""
    if isinstance(event, QueryChanged):
        return replace(state, phase=Phase.DEBOUNCING, query=event.query)

    if isinstance(event, DebounceFired):
        if state.phase is not Phase.DEBOUNCING:
            return state
        if len(state.query.strip()) < min_query_length:
            return replace(state, phase=Phase.IDLE, suggestions=())
        return replace(state, phase=Phase.FETCHING, token=state.token + 1)

    if isinstance(event, FetchCompleted):
        if state.phase is not Phase.FETCHING or event.token != state.token:
            return state
        phase = Phase.SHOWING if event.suggestions else Phase.IDLE
        return replace(state, phase=phase, suggestions=event.suggestions)

    if isinstance(event, FetchFailed):
        if state.phase is not Phase.FETCHING or event.token != state.token:
            return state
        return replace(state, phase=Phase.IDLE, suggestions=())

    if isinstance(event, Dismissed):
        return replace(state, phase=Phase.IDLE, suggestions=())

    if isinstance(event, Cleared):
        return replace(state, phase=Phase.IDLE, query="", suggestions=())

    raise TypeError(f"Unknown suggestion event: {event!r}")


class SuggestionSource(Protocol):
    async def fetch_suggestions(self, query: str, limit: int = 5) -> list[CitySuggestion]: ...


class SuggestionController:
    """Drives ``reduce`` from keystrokes, a debounce timer and fetch completions.

    Lookup errors are logged and swallowed.
    """

    def __init__(
        self,
        client: SuggestionSource,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
        min_query_length: int = DEFAULT_MIN_QUERY_LENGTH,
        limit: int = 5,
        on_change: Callable[[SuggestionState], None] | None = None,
    ):
        self.client = client
        self.debounce_ms = debounce_ms
        self.min_query_length = min_query_length
        self.limit = limit
        self.on_change = on_change
        self.state = SuggestionState()
        self._debounce_task: asyncio.Task | None = None
        self._fetch_tasks: set[asyncio.Task] = set()
        self._closed = False

    def dispatch(self, event: Event) -> SuggestionState:
        new_state = reduce(self.state, event, self.min_query_length)
        if new_state != self.state:
            self.state = new_state
            if self.on_change is not None:
                self.on_change(new_state)
        return self.state

    def on_query_changed(self, text: str) -> None:
        """Record a keystroke and (re)start the quiet-period timer."""
        if self._closed:
            raise RuntimeError("SuggestionController is closed")
        self._cancel_debounce()
        self.dispatch(QueryChanged(text))
        self._debounce_task = asyncio.get_running_loop().create_task(self._debounce())

    def dismiss(self) -> None:
        self._cancel_debounce()
        self.dispatch(Dismissed())

    def select(self, suggestion: CitySuggestion) -> CitySuggestion:
        self._cancel_debounce()
        self.dispatch(Cleared())
        return suggestion

    def submit(self) -> None:
        self._cancel_debounce()
        self.dispatch(Cleared())

    async def flush(self) -> None:
        """Wait for the pending debounce and any in-flight lookups."""
        while self._debounce_task is not None or self._fetch_tasks:
            if self._debounce_task is not None:
                try:
                    await self._debounce_task
                except asyncio.CancelledError:
                    pass
                self._debounce_task = None
            if self._fetch_tasks:
                await asyncio.gather(*self._fetch_tasks)

    async def aclose(self) -> None:
        """Release the debounce timer and cancel in-flight lookups."""
        self._closed = True
        self._cancel_debounce()
        for task in self._fetch_tasks:
            task.cancel()
        if self._fetch_tasks:
            await asyncio.gather(*self._fetch_tasks, return_exceptions=True)

    def _cancel_debounce(self) -> None:
        if self._debounce_task is not None and not self._debounce_task.done():
            self._debounce_task.cancel()
        self._debounce_task = None

    async def _debounce(self) -> None:
        await asyncio.sleep(self.debounce_ms / 1000)
        self._debounce_task = None
        state = self.dispatch(DebounceFired())
        if state.phase is Phase.FETCHING:
            task = asyncio.create_task(self._fetch(state.query.strip(), state.token))
            self._fetch_tasks.add(task)
            task.add_done_callback(self._fetch_tasks.discard)

    async def _fetch(self, query: str, token: int) -> None:
        try:
            results = await self.client.fetch_suggestions(query, limit=self.limit)
        except Exception:
            logger.warning("Suggestion lookup failed for %r", query, exc_info=True)
            if not self._closed:
                self.dispatch(FetchFailed(token))
            return

        if self._closed:
            return
        if token != self.state.token:
            logger.debug("Dropping stale suggestions for %r (token %d)", query, token)
        self.dispatch(FetchCompleted(token, tuple(results)))
