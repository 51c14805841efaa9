"""Listing fetch loaders with monotonic request ids.

Every fetch gets a fresh request id. Loaders only run fetches and queue
results; the owning controller drains them on its own thread and drops any
result whose id is older than the newest request it issued.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from queue import Empty, Queue

from ..transport.errors import STATUS_NETWORK, TransportError
from .types import Entry

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ListingRequest:
    """One folder or search fetch."""

    request_id: int
    path: str
    search_expr: str | None = None
    store: bool = True

    @property
    def is_search(self) -> bool:
        return self.search_expr is not None


@dataclass(frozen=True)
class ListingResult:
    """Completed fetch: entries on success, ``error`` on failure."""

    request: ListingRequest
    entries: tuple[Entry, ...] = ()
    error: TransportError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


ListingFetch = Callable[[ListingRequest], tuple[Entry, ...]]


def _run_fetch(fetch: ListingFetch, request: ListingRequest) -> ListingResult:
    """Run one fetch, capturing transport errors in the result."""
    try:
        entries = fetch(request)
    except TransportError as exc:
        return ListingResult(request=request, error=exc)
    except Exception as exc:
        LOGGER.exception("listing fetch for %s crashed", request.path)
        return ListingResult(request=request, error=TransportError(STATUS_NETWORK, str(exc)))
    return ListingResult(request=request, entries=entries)


class SyncListingLoader:
    """Runs each fetch inline on the calling thread."""

    def __init__(self, fetch: ListingFetch) -> None:
        self._fetch = fetch
        self._next_request_id = 1
        self._results: list[ListingResult] = []

    def submit(self, path: str, search_expr: str | None = None, store: bool = True) -> int:
        """Run one fetch now and queue its result. Returns the request id."""
        request_id = self._next_request_id
        self._next_request_id += 1
        request = ListingRequest(request_id=request_id, path=path, search_expr=search_expr, store=store)
        self._results.append(_run_fetch(self._fetch, request))
        return request_id

    def drain(self) -> list[ListingResult]:
        """Return and forget every completed result."""
        out = self._results
        self._results = []
        return out


class ThreadedListingLoader:
    """Single-worker latest-request-wins loader.

    A request submitted while another is pending replaces it. The request
    already running completes and is delivered; the controller discards it
    as stale when a newer id exists.
    """

    def __init__(self, fetch: ListingFetch) -> None:
        self._fetch = fetch
        self._lock = threading.Lock()
        self._pending: ListingRequest | None = None
        self._running = False
        self._next_request_id = 1
        self._results: Queue[ListingResult] = Queue()

    def _worker(self) -> None:
        """Serve the newest pending request until none is left."""
        while True:
            with self._lock:
                request = self._pending
                self._pending = None
                if request is None:
                    self._running = False
                    return
            self._results.put(_run_fetch(self._fetch, request))

    def submit(self, path: str, search_expr: str | None = None, store: bool = True) -> int:
        """Queue/replace pending fetch work and return its request id."""
        with self._lock:
            request_id = self._next_request_id
            self._next_request_id += 1
            self._pending = ListingRequest(
                request_id=request_id,
                path=path,
                search_expr=search_expr,
                store=store,
            )
            if self._running:
                return request_id
            self._running = True

        worker = threading.Thread(
            target=self._worker,
            name="dirbrowser-listing-fetch",
            daemon=True,
        )
        worker.start()
        return request_id

    def drain(self) -> list[ListingResult]:
        """Drain all completed fetch results."""
        out: list[ListingResult] = []
        while True:
            try:
                out.append(self._results.get_nowait())
            except Empty:
                break
        return out


__all__ = [
    "ListingRequest",
    "ListingResult",
    "ListingFetch",
    "SyncListingLoader",
    "ThreadedListingLoader",
]
