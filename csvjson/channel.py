"""
Bounded handoff channel between the reader and writer threads.

A thin wrapper around ``queue.Queue`` that adds close semantics:

- ``put(record)`` blocks while the queue is full (backpressure).
- ``close(error=None)`` marks end of stream.  Consumers iterating the
  channel stop once every buffered record has been delivered; if an error
  was attached it is raised from the iteration instead.
- A shared abort ``threading.Event`` lets a blocked producer give up when
  the consumer has died, and vice versa.

Usage::

    channel = RecordChannel(maxsize=1, abort=abort)

    # producer thread
    for record in records:
        channel.put(record)
    channel.close()

    # consumer thread
    for record in channel:
        write(record)
"""

from __future__ import annotations

import queue
import threading
from typing import Iterator

from csvjson.configs.exceptions import PipelineAborted

# How often a blocked put/get re-checks the abort event.
POLL_SECONDS: float = 0.1

_END_OF_STREAM = object()


class RecordChannel:
    """
    Single-producer, single-consumer record queue with close-as-signal.

    Args:
        maxsize: Number of records the channel can buffer.  Must be >= 1.
        abort:   Event that, once set, makes blocked ``put`` / iteration
                 raise ``PipelineAborted``.
    """

    def __init__(self, maxsize: int = 1, abort: threading.Event | None = None) -> None:
        if maxsize < 1:
            raise ValueError(f"maxsize must be at least 1, got {maxsize}")
        self._queue: queue.Queue = queue.Queue(maxsize=maxsize)
        self._abort = abort if abort is not None else threading.Event()
        self._closed = False
        self._error: BaseException | None = None

    def put(self, record: dict[str, str]) -> None:
        """
        Hand one record to the consumer, blocking while the channel is full.

        Raises:
            RuntimeError: If the channel is already closed.
            PipelineAborted: If the abort event is set while waiting.
        """
        if self._closed:
            raise RuntimeError("put() on a closed channel")
        self._put(record)

    def close(self, error: BaseException | None = None) -> None:
        """
        Mark end of stream.  Closing twice is a no-op.

        Args:
            error: Optional failure to re-raise on the consumer side once
                   the records buffered before it have been delivered.
        """
        if self._closed:
            return
        self._closed = True
        self._error = error
        try:
            self._put(_END_OF_STREAM)
        except PipelineAborted:
            # Nobody is left to read the marker.
            pass

    def __iter__(self) -> Iterator[dict[str, str]]:
        while True:
            item = self._get()
            if item is _END_OF_STREAM:
                if self._error is not None:
                    raise self._error
                return
            yield item

    # ── internals ────────────────────────────────────────────────────────

    def _put(self, item) -> None:
        while True:
            if self._abort.is_set():
                raise PipelineAborted("Consumer stopped; record not delivered")
            try:
                self._queue.put(item, timeout=POLL_SECONDS)
                return
            except queue.Full:
                continue

    def _get(self):
        while True:
            try:
                return self._queue.get(timeout=POLL_SECONDS)
            except queue.Empty:
                if self._abort.is_set():
                    raise PipelineAborted("Producer stopped before closing the channel")
