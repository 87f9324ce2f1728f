"""
File watching for regeneration on change.

The watchdog observer thread only queues changed paths; the callback runs on
the thread calling ``run_once``/``run_forever``, so generation stays
single-threaded.
"""

import logging
import queue
import time
from pathlib import Path
from typing import Callable, Dict, Iterable, Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)


class SourceChangeHandler(FileSystemEventHandler):
    """Queues modifications of tracked source files."""

    def __init__(self, paths: Iterable[Path], changes: "queue.Queue[Path]", debounce: float):
        self.paths = {Path(p).resolve() for p in paths}
        self.changes = changes
        self.debounce = debounce
        self._last_change: Dict[Path, float] = {}

    def _track(self, raw_path) -> None:
        if isinstance(raw_path, bytes):
            raw_path = raw_path.decode()
        path = Path(raw_path).resolve()
        if path not in self.paths:
            return

        now = time.monotonic()
        if now - self._last_change.get(path, float("-inf")) < self.debounce:
            return
        self._last_change[path] = now
        self.changes.put(path)

    def on_modified(self, event: FileSystemEvent):
        """Handle file modification events."""
        if not event.is_directory:
            self._track(event.src_path)

    def on_created(self, event: FileSystemEvent):
        """Editors that replace files show up as creations."""
        if not event.is_directory:
            self._track(event.src_path)

    def on_moved(self, event: FileSystemEvent):
        """Editors that save through a rename show up as moves."""
        if not event.is_directory:
            self._track(event.dest_path)


class SourceWatcher:
    """Calls ``on_change`` for every tracked file that changes on disk."""

    def __init__(
        self,
        paths: Iterable[Path],
        on_change: Callable[[Path], None],
        debounce: float = 0.025,
    ):
        self.paths = sorted({Path(p).resolve() for p in paths})
        self.on_change = on_change
        self.debounce = debounce
        self.changes: "queue.Queue[Path]" = queue.Queue()
        self.handler = SourceChangeHandler(self.paths, self.changes, debounce)
        self._observer: Optional[Observer] = None

    def start(self) -> None:
        if self._observer is not None:
            return

        self._observer = Observer()
        for directory in sorted({p.parent for p in self.paths}):
            self._observer.schedule(self.handler, str(directory), recursive=False)
        self._observer.start()
        logger.info(f"Watching {len(self.paths)} files for changes")

    def stop(self) -> None:
        if self._observer is not None:
            self._observer.stop()
            self._observer.join()
            self._observer = None

    def run_once(self, timeout: Optional[float] = None) -> bool:
        """Process one queued change. Returns False if none arrived in time."""
        try:
            path = self.changes.get(timeout=timeout)
        except queue.Empty:
            return False

        # let the writer finish before reading the file back
        time.sleep(self.debounce)
        logger.debug(f"Change detected: {path}")
        self.on_change(path)
        return True

    def run_forever(self) -> None:
        self.start()
        try:
            while True:
                self.run_once(timeout=1.0)
        except KeyboardInterrupt:
            logger.info("Stopping watch")
        finally:
            self.stop()
