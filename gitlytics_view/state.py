"""
Explicit per-view application state.

A view (one browser tab's search/results flow) has at most one query in
flight. Every submission takes a new ticket; a result arriving for an older
ticket has been superseded and is dropped instead of applied.
"""

from __future__ import annotations

import enum
import logging
import threading
from dataclasses import dataclass, replace
from typing import Callable, Optional

from .errors import AnalyticsError
from .identifiers import QueryRef
from .model import ChartModel
from .resolver import SearchMode

logger = logging.getLogger(__name__)


class ViewState(str, enum.Enum):
    LOADING = "loading"
    ERROR = "error"
    EMPTY = "empty"
    RESULTS = "results"


@dataclass(frozen=True)
class AppState:
    mode: SearchMode = SearchMode.ACCOUNT
    view: ViewState = ViewState.EMPTY
    query: Optional[QueryRef] = None
    model: Optional[ChartModel] = None
    error: Optional[AnalyticsError] = None
    ticket: int = 0


class ViewController:
    """
    Owns the AppState of one view and swaps it atomically.

    A newer submission always supersedes an older one; the older fetch is
    left to finish but its outcome is discarded.
    """

    def __init__(self, state: Optional[AppState] = None) -> None:
        self._state = state or AppState()
        self._lock = threading.Lock()

    @property
    def state(self) -> AppState:
        return self._state

    def switch_mode(self, mode: SearchMode) -> AppState:
        with self._lock:
            view = ViewState.EMPTY if self._state.view is ViewState.ERROR else self._state.view
            self._state = replace(self._state, mode=SearchMode.coerce(mode), view=view, error=None)
            return self._state

    def begin(self, mode: SearchMode, query: QueryRef) -> int:
        with self._lock:
            ticket = self._state.ticket + 1
            if self._state.view is ViewState.LOADING:
                logger.info("Query %s supersedes in-flight query %s", ticket, self._state.ticket)
            self._state = replace(
                self._state,
                mode=SearchMode.coerce(mode),
                view=ViewState.LOADING,
                query=query,
                error=None,
                ticket=ticket,
            )
            return ticket

    def is_current(self, ticket: int) -> bool:
        return ticket == self._state.ticket

    def settle(self, ticket: int, apply: Optional[Callable[[], None]] = None) -> bool:
        """
        Run `apply` for a finished fetch if its ticket is still current.

        Returns False (and does nothing) when the ticket was superseded or cancelled.
        """
        with self._lock:
            if ticket != self._state.ticket:
                logger.info("Discarding result of superseded query %s", ticket)
                return False
            if apply is not None:
                apply()
            # fetched but not rendered yet
            self._state = replace(self._state, view=ViewState.EMPTY, model=None)
            return True

    def fail(self, ticket: int, error: AnalyticsError) -> bool:
        with self._lock:
            if ticket != self._state.ticket:
                logger.info("Discarding error of superseded query %s: %s", ticket, error.code)
                return False
            self._state = replace(self._state, view=ViewState.ERROR, error=error)
            return True

    def reject(self, mode: SearchMode, error: AnalyticsError) -> AppState:
        """Local (pre-I/O) failure; also abandons any fetch still in flight."""
        with self._lock:
            self._state = replace(
                self._state,
                mode=SearchMode.coerce(mode),
                view=ViewState.ERROR,
                error=error,
                ticket=self._state.ticket + 1,
            )
            return self._state

    def _may_show(self, ticket: Optional[int]) -> bool:
        if self._state.view is ViewState.LOADING:
            logger.info("Query %s still loading; keeping loading state", self._state.ticket)
            return False
        return ticket is None or ticket == self._state.ticket

    def show_results(self, model: ChartModel, ticket: Optional[int] = None) -> AppState:
        """
        Show a rendered model. No-op while a query is loading or once `ticket` is superseded.
        """
        with self._lock:
            if not self._may_show(ticket):
                return self._state
            self._state = replace(self._state, view=ViewState.RESULTS, model=model, error=None)
            return self._state

    def show_empty(self, error: Optional[AnalyticsError] = None, ticket: Optional[int] = None) -> AppState:
        with self._lock:
            if not self._may_show(ticket):
                return self._state
            self._state = replace(self._state, view=ViewState.EMPTY, model=None, error=error)
            return self._state

    def cancel(self) -> AppState:
        """Navigate away: whatever is in flight will be discarded."""
        with self._lock:
            self._state = replace(
                self._state,
                view=ViewState.EMPTY,
                model=None,
                error=None,
                ticket=self._state.ticket + 1,
            )
            return self._state
