"""Inbox directory standing in for the push transport between processes."""

import json
import logging
import os
import threading
import time
import uuid
from pathlib import Path
from threading import Event
from typing import Any, Callable, Dict, Optional, Set

from watchdog.observers import Observer
from watchdog.events import FileSystemEventHandler, FileSystemEvent

logger = logging.getLogger(__name__)

PAYLOAD_SUFFIX = ".json"


def drop_payload(inbox_dir: Path, payload: Dict[str, Any]) -> Path:
    """
    Write a payload into the inbox, where every surface process sees it.

    Returns:
        Path of the payload file.
    """
    inbox_dir = Path(inbox_dir).expanduser()
    inbox_dir.mkdir(parents=True, exist_ok=True)

    name = f"{time.time_ns()}-{uuid.uuid4().hex[:8]}"
    temp_path = inbox_dir / f"{name}.tmp"
    final_path = inbox_dir / f"{name}{PAYLOAD_SUFFIX}"
    temp_path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
    os.replace(temp_path, final_path)
    logger.debug(f"Dropped payload {final_path.name}")
    return final_path


class InboxHandler(FileSystemEventHandler):
    """Handle new payload files in the inbox."""

    def __init__(self, watcher: "InboxWatcher"):
        super().__init__()
        self._watcher = watcher

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._watcher._on_file(Path(event.src_path))

    def on_moved(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._watcher._on_file(Path(event.dest_path))


class InboxWatcher:
    """
    Watches the inbox and passes each new payload to a callback.

    Files are left in place so that every process watching the inbox gets
    its own copy; payloads older than ``retention_seconds`` are pruned.
    """

    def __init__(
        self,
        inbox_dir: Path,
        callback: Callable[[Any], None],
        shutdown_event: Optional[Event] = None,
        retention_seconds: float = 60.0,
    ):
        """
        Initialize the inbox watcher.

        Args:
            inbox_dir: Directory to watch.
            callback: Called with each decoded payload.
            shutdown_event: Event to signal shutdown.
            retention_seconds: Age after which payload files are deleted.
        """
        self.inbox_dir = Path(inbox_dir).expanduser()
        self.callback = callback
        self.shutdown_event = shutdown_event or Event()
        self.retention_seconds = retention_seconds
        self._observer: Optional[Observer] = None
        self._seen: Set[str] = set()
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return "InboxWatcher"

    def _on_file(self, path: Path) -> None:
        if path.suffix != PAYLOAD_SUFFIX:
            return

        with self._lock:
            if path.name in self._seen:
                return
            self._seen.add(path.name)

        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return
        except (OSError, ValueError) as e:
            logger.warning(f"Skipping unreadable payload {path.name}: {e}")
            return

        logger.debug(f"Payload received: {path.name}")
        try:
            self.callback(payload)
        except Exception as e:
            logger.error(f"Error handling payload {path.name}: {e}", exc_info=True)

    def prune(self, now: Optional[float] = None) -> int:
        """Delete payloads older than the retention period; returns how many."""
        cutoff = (time.time() if now is None else now) - self.retention_seconds
        removed = 0
        for path in self.inbox_dir.glob(f"*{PAYLOAD_SUFFIX}"):
            try:
                if path.stat().st_mtime < cutoff:
                    path.unlink()
                    removed += 1
            except FileNotFoundError:
                continue

        existing = {p.name for p in self.inbox_dir.glob(f"*{PAYLOAD_SUFFIX}")}
        with self._lock:
            self._seen &= existing
        return removed

    def start(self) -> None:
        """Start watching the inbox directory."""
        self.inbox_dir.mkdir(parents=True, exist_ok=True)

        # Payloads already there were delivered before this process started.
        with self._lock:
            self._seen.update(p.name for p in self.inbox_dir.glob(f"*{PAYLOAD_SUFFIX}"))

        self._observer = Observer()
        self._observer.schedule(InboxHandler(self), str(self.inbox_dir), recursive=False)
        self._observer.start()
        logger.info(f"Started {self.name} watching: {self.inbox_dir}")

    def run(self) -> None:
        """Watch until shutdown."""
        self.start()
        try:
            while not self.shutdown_event.is_set():
                self.shutdown_event.wait(timeout=1.0)
                self.prune()
        except KeyboardInterrupt:
            logger.info("Keyboard interrupt received")
        self.stop()

    def stop(self) -> None:
        if self._observer:
            self._observer.stop()
            self._observer.join(timeout=2.0)
            self._observer = None
        logger.info(f"Stopped {self.name}")
