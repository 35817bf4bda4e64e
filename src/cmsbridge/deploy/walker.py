"""Concurrent enumeration of build artifacts.

A producer thread walks the build output directory and feeds file paths
through a bounded queue; the caller consumes them as a plain iterator.
Walking and consuming overlap, but only one consumer ever reads.
"""

from __future__ import annotations

import logging
import os
import queue
import threading
from pathlib import Path

from cmsbridge.shared.errors import WalkError

logger = logging.getLogger(__name__)

DEFAULT_MAX_PENDING = 256
_PUT_TIMEOUT = 0.1


class _Done:
    """Marks the end of the walk."""


class _Failed:
    """Carries a traversal error from the producer to the consumer."""

    def __init__(self, exc: BaseException) -> None:
        self.exc = exc


class ArtifactWalker:
    """Lazy, single-use iterator over every regular file under ``root``.

    Directories are traversed but never yielded, and order follows the
    filesystem.  Any traversal error stops the walk and is raised from
    ``__next__`` as WalkError.

    Use as a context manager (or call ``close``) so the producer thread
    stops when the consumer gives up early.
    """

    def __init__(self, root: Path, *, max_pending: int = DEFAULT_MAX_PENDING) -> None:
        self.root = Path(root)
        self._queue: queue.Queue[Path | _Done | _Failed] = queue.Queue(maxsize=max_pending)
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._finished = False

    def __iter__(self) -> ArtifactWalker:
        if self._thread is not None or self._finished:
            raise RuntimeError("ArtifactWalker cannot be iterated more than once")
        self._thread = threading.Thread(
            target=self._produce, name=f"artifact-walker:{self.root}", daemon=True
        )
        self._thread.start()
        return self

    def __next__(self) -> Path:
        if self._finished:
            raise StopIteration
        if self._thread is None:
            raise RuntimeError("call iter() on the walker before next()")

        item = self._queue.get()
        if isinstance(item, _Done):
            self._finished = True
            raise StopIteration
        if isinstance(item, _Failed):
            self._finished = True
            raise WalkError(
                f"walking {self.root} failed: {item.exc}", identifier=str(self.root)
            ) from item.exc
        return item

    def __enter__(self) -> ArtifactWalker:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Stop the producer and release it if it is blocked on a full queue."""
        self._finished = True
        self._stop.set()
        while True:
            try:
                self._queue.get_nowait()
            except queue.Empty:
                break
        if self._thread is not None:
            self._thread.join()

    # ── Producer side ────────────────────────────────────────────

    def _put(self, item: Path | _Done | _Failed) -> bool:
        """Block until ``item`` is queued; False if the walk was stopped."""
        while not self._stop.is_set():
            try:
                self._queue.put(item, timeout=_PUT_TIMEOUT)
                return True
            except queue.Full:
                continue
        return False

    def _produce(self) -> None:
        def _raise(exc: OSError) -> None:
            raise exc

        count = 0
        try:
            for dirpath, _dirnames, filenames in os.walk(self.root, onerror=_raise):
                for name in filenames:
                    path = Path(dirpath) / name
                    if not path.is_file():
                        continue
                    if not self._put(path):
                        return
                    count += 1
        except Exception as exc:  # forwarded to the consumer
            self._put(_Failed(exc))
            return

        logger.debug("Walked %d file(s) under %s", count, self.root)
        self._put(_Done())
