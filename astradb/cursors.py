# Copyright DataStax, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from __future__ import annotations

import copy
import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from types import TracebackType
from typing import Any, Callable, Iterator, Optional, TypeVar

from astradb.exceptions import CursorException, DataAPIWarningDescriptor

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CursorState(Enum):
    """
    This enum expresses the possible states for a `Cursor`.

    Values:
        IDLE: Iteration over results has not started yet.
        ACTIVE: Iteration has started, *can* still yield results.
        EXHAUSTED: No more buffered items and no more pages to fetch.
        CLOSED: Forcibly stopped. Every further operation fails.
    """

    IDLE = "idle"
    ACTIVE = "active"
    EXHAUSTED = "exhausted"
    CLOSED = "closed"


@dataclass
class FindPage:
    """
    A page of results as returned by a page fetcher.

    Attributes:
        results: the items (documents or rows) in the page, in order.
        next_page_state: the token to fetch the next page, or None
            if this is the last page.
        warnings: the warnings returned by the API along with this page.
    """

    results: list[Any]
    next_page_state: str | None
    warnings: list[DataAPIWarningDescriptor] = field(default_factory=list)


PageFetcher = Callable[[Optional[str]], FindPage]


def _is_page_state(page_state: str | None) -> bool:
    return page_state is not None and page_state != ""


class Cursor:
    """
    A forward-only cursor over the results of a find-type operation.

    The cursor holds one page of results at a time: when the local buffer
    is consumed, the next page is requested through the page fetcher,
    until the API returns no further page state. Every method touching the
    cursor internals is guarded by a lock, so that the buffer is never left
    inconsistent by concurrent calls. Concurrent consumption of the same
    cursor is nevertheless not recommended, as the items would be spread
    arbitrarily among the consumers.

    This class is not meant to be directly instantiated by the user: cursors
    are returned by the `find` methods of collections and tables.

    Args:
        fetcher: a callable accepting a page state (or None, for the first page)
            and returning a `FindPage`.

    Example:
        >>> cursor = my_collection.find({"active": True})
        >>> while cursor.next():
        ...     print(cursor.decode())
        ...
        {'_id': 'a', 'active': True}
        {'_id': 'b', 'active': True}
        >>> cursor.err is None
        True
    """

    _state: CursorState
    _fetcher: PageFetcher | None
    _buffer: list[Any]
    _position: int
    _next_page_state: str | None
    _err: Exception | None
    _initialized: bool
    warnings: list[DataAPIWarningDescriptor]

    def __init__(self, fetcher: PageFetcher | None) -> None:
        self._lock = threading.Lock()
        self._fetcher = fetcher
        self._state = CursorState.IDLE
        self._buffer = []
        self._position = -1
        self._next_page_state = None
        self._err = None
        self._initialized = False
        self.warnings = []

    @classmethod
    def from_error(cls, error: Exception) -> Cursor:
        """
        Create a cursor that failed at birth: it yields nothing and
        its `err` is the provided error.
        """

        cursor = cls(fetcher=None)
        cursor._state = CursorState.EXHAUSTED
        cursor._err = error
        return cursor

    @classmethod
    def from_initial_page(
        cls,
        results: list[Any],
        next_page_state: str | None,
        fetcher: PageFetcher | None,
    ) -> Cursor:
        """
        Create a cursor whose first page is already available, so that
        iteration starts without calling the fetcher.

        Args:
            results: the items in the first page.
            next_page_state: the page state for the second page, if any.
            fetcher: the page fetcher for the subsequent pages.
        """

        cursor = cls(fetcher=fetcher)
        cursor._buffer = list(results)
        cursor._next_page_state = next_page_state
        cursor._initialized = True
        if not results and not _is_page_state(next_page_state):
            cursor._state = CursorState.EXHAUSTED
        return cursor

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(state='{self._state.value}', "
            f"buffered_count={len(self._buffer)}, position={self._position})"
        )

    def _fetch_page_locked(self, page_state: str | None) -> None:
        if self._fetcher is None:
            raise CursorException(
                text="cursor has no page fetcher",
                cursor_state=self._state.value,
            )
        logger.info("cursor fetching a page")
        page = self._fetcher(page_state)
        logger.info("cursor finished fetching a page")
        self.warnings.extend(page.warnings)
        self._buffer = list(page.results)
        self._position = -1
        self._next_page_state = page.next_page_state

    def _closed_exception(self) -> CursorException:
        return CursorException(
            text="cursor is closed",
            cursor_state=CursorState.CLOSED.value,
        )

    @property
    def state(self) -> CursorState:
        """The current state of this cursor, a `CursorState` value."""
        with self._lock:
            return self._state

    @property
    def err(self) -> Exception | None:
        """
        The terminal error of the cursor, if any. After `next()` returns False,
        this tells a regular end of results (None) from a failure.
        """

        with self._lock:
            return self._err

    @property
    def id(self) -> int:
        # results are paged with a page state, not a server-side cursor
        return 0

    @property
    def current(self) -> Any:
        """
        The raw item the cursor is positioned on, or None if there is none.
        """

        with self._lock:
            if self._position < 0 or self._position >= len(self._buffer):
                return None
            return self._buffer[self._position]

    @property
    def remaining_batch_length(self) -> int:
        """
        The number of items left in the local buffer after the current one.
        Reading this property never triggers a page fetch.
        """

        with self._lock:
            if self._position < 0:
                return len(self._buffer)
            return max(len(self._buffer) - self._position - 1, 0)

    @property
    def has_next_page(self) -> bool:
        """Whether the API signaled that more pages are available."""
        with self._lock:
            return _is_page_state(self._next_page_state)

    def next(self) -> bool:
        """
        Advance the cursor to the next item, fetching a new page if needed.

        Returns:
            True if the cursor is positioned on a new item, False otherwise.
            In the latter case, `err` is None if the results are over, or
            the exception that prevented advancing.
        """

        with self._lock:
            if self._state == CursorState.CLOSED:
                self._err = self._closed_exception()
                return False
            if self._state == CursorState.EXHAUSTED:
                return False

            if not self._initialized:
                try:
                    self._fetch_page_locked(None)
                except Exception as exc:
                    self._err = exc
                    return False
                self._initialized = True

            self._state = CursorState.ACTIVE

            if self._position + 1 < len(self._buffer):
                self._position += 1
                return True

            if not _is_page_state(self._next_page_state):
                self._state = CursorState.EXHAUSTED
                return False

            try:
                self._fetch_page_locked(self._next_page_state)
            except Exception as exc:
                self._err = exc
                return False

            if not self._buffer:
                self._state = CursorState.EXHAUSTED
                return False

            self._position = 0
            return True

    def decode(self, decoder: Callable[[Any], T] | None = None) -> T | Any:
        """
        Decode the item the cursor is positioned on.

        Args:
            decoder: a callable turning the raw item into the desired object.
                If omitted, a copy of the raw item is returned.

        Raises:
            CursorException: if the cursor is closed, or if it is not positioned
                on an item (for instance, before the first `next()` call).
        """

        with self._lock:
            if self._state == CursorState.CLOSED:
                raise self._closed_exception()
            if self._position < 0 or self._position >= len(self._buffer):
                raise CursorException(
                    text="no current document; call next() first",
                    cursor_state=self._state.value,
                )
            item = self._buffer[self._position]
        if decoder is None:
            return copy.deepcopy(item)
        return decoder(item)

    def all(self, decoder: Callable[[Any], T] | None = None) -> list[T] | list[Any]:
        """
        Drain the cursor, returning all remaining items across all pages.

        The items are taken from the one after the current position onward.
        Afterwards, the cursor is exhausted.

        Args:
            decoder: a callable applied to each raw item. If omitted,
                copies of the raw items are returned.

        Returns:
            a list of items, possibly empty.

        Raises:
            CursorException: if the cursor is closed.
            any exception occurring while fetching pages. The cursor records
                it as its terminal error and keeps the state reached by the
                last successful fetch.
        """

        with self._lock:
            if self._state == CursorState.CLOSED:
                raise self._closed_exception()
            if self._state == CursorState.EXHAUSTED and self._err is not None:
                raise self._err

            all_items: list[Any] = []
            try:
                if not self._initialized:
                    self._fetch_page_locked(None)
                    self._initialized = True

                if self._position < 0:
                    all_items.extend(self._buffer)
                elif self._position + 1 < len(self._buffer):
                    all_items.extend(self._buffer[self._position + 1 :])

                while _is_page_state(self._next_page_state):
                    self._fetch_page_locked(self._next_page_state)
                    all_items.extend(self._buffer)
            except Exception as exc:
                self._err = exc
                raise

            self._state = CursorState.EXHAUSTED
            self._position = len(self._buffer) - 1

        if decoder is None:
            return copy.deepcopy(all_items)
        return [decoder(item) for item in all_items]

    def close(self) -> None:
        """
        Close the cursor, discarding any unread results. Closing a cursor
        that is already closed has no effect.
        """

        with self._lock:
            if self._state == CursorState.CLOSED:
                return
            self._state = CursorState.CLOSED
            self._buffer = []
            self._position = -1
            self._next_page_state = None

    def iterate(self, fn: Callable[[Any], bool | None]) -> None:
        """
        Call a function on each remaining raw item.

        Args:
            fn: a callable receiving each item in turn. If it returns False,
                iteration stops (without errors). If it raises an exception,
                iteration stops and the exception becomes the cursor error.

        Raises:
            the exception raised by `fn`, if any, or the error that stopped
            the cursor (for instance a failure fetching a page).
        """

        while self.next():
            try:
                keep_going = fn(self.current)
            except Exception as exc:
                with self._lock:
                    self._err = exc
                raise
            if keep_going is False:
                return
        error = self.err
        if error is not None:
            raise error

    def __iter__(self) -> Iterator[Any]:
        return self

    def __next__(self) -> Any:
        if self.next():
            return self.current
        error = self.err
        if error is not None:
            raise error
        raise StopIteration

    def __enter__(self) -> Cursor:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None = None,
        exc_value: BaseException | None = None,
        traceback: TracebackType | None = None,
    ) -> None:
        self.close()


def try_decode(cursor: Cursor, decoder: Callable[[Any], T]) -> T:
    """Decode the current item of a cursor with the provided decoder."""
    return cursor.decode(decoder)
