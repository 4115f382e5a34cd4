"""Cross-process broadcast channel over a shared spool directory."""

import json
import logging
import os
import threading
import time
import uuid
from pathlib import Path
from typing import Dict, Optional, Set

from watchdog.observers import Observer
from watchdog.events import FileSystemEventHandler, FileSystemEvent

from .base import BroadcastChannel

logger = logging.getLogger(__name__)

MESSAGE_SUFFIX = ".json"
TEMP_SUFFIX = ".tmp"


class SpoolHandler(FileSystemEventHandler):
    """Hand finished message files in the spool directory to the channel."""

    def __init__(self, channel: "FileBroadcastChannel"):
        super().__init__()
        self._channel = channel

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._channel._read_message(Path(event.src_path))

    def on_moved(self, event: FileSystemEvent) -> None:
        # Publishers write a temp file and rename it into place.
        if not event.is_directory:
            self._channel._read_message(Path(event.dest_path))


class FileBroadcastChannel(BroadcastChannel):
    """
    Broadcast channel for surfaces running in separate processes.

    Every publish writes one JSON file into a shared directory; a watchdog
    observer delivers files written by other channels. Old files are
    pruned after ``retention_seconds``.
    """

    def __init__(
        self,
        spool_dir: Path,
        channel_id: Optional[str] = None,
        retention_seconds: float = 10.0,
    ):
        """
        Initialize the channel.

        Args:
            spool_dir: Directory shared by every surface of the device.
            channel_id: Identifier of this endpoint (random if omitted).
            retention_seconds: Age after which message files are deleted.
        """
        super().__init__(channel_id or uuid.uuid4().hex[:12])
        self.spool_dir = Path(spool_dir).expanduser()
        self.retention_seconds = retention_seconds
        self._observer: Optional[Observer] = None
        self._seen: Set[str] = set()
        self._lock = threading.Lock()

    def publish(self, message: Dict) -> None:
        """Write a message file; raises OSError if the spool is unwritable."""
        self.spool_dir.mkdir(parents=True, exist_ok=True)

        name = f"{time.time_ns()}-{self.channel_id}-{uuid.uuid4().hex[:8]}"
        final_path = self.spool_dir / f"{name}{MESSAGE_SUFFIX}"
        temp_path = self.spool_dir / f"{name}{TEMP_SUFFIX}"

        with self._lock:
            self._seen.add(final_path.name)

        temp_path.write_text(
            json.dumps({"sender": self.channel_id, "message": message}),
            encoding="utf-8",
        )
        os.replace(temp_path, final_path)
        logger.debug(f"Published {message.get('type')} to {final_path.name}")

        self.prune()

    def _read_message(self, path: Path) -> None:
        if path.suffix != MESSAGE_SUFFIX:
            return

        with self._lock:
            if path.name in self._seen:
                return
            self._seen.add(path.name)

        try:
            envelope = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            # Pruned by another surface before we got to it.
            return
        except (OSError, ValueError) as e:
            logger.warning(f"Skipping unreadable message {path.name}: {e}")
            return

        if not isinstance(envelope, dict) or not isinstance(envelope.get("message"), dict):
            logger.warning(f"Skipping malformed message {path.name}")
            return

        sender = str(envelope.get("sender", "unknown"))
        if sender == self.channel_id:
            return

        try:
            self._deliver(envelope["message"], sender)
        except Exception as e:
            logger.error(f"Error handling message {path.name}: {e}", exc_info=True)

    def prune(self, now: Optional[float] = None) -> int:
        """
        Delete message files older than the retention period.

        Returns:
            Number of files removed.
        """
        if not self.spool_dir.exists():
            return 0

        cutoff = (time.time() if now is None else now) - self.retention_seconds
        removed = 0
        for path in self.spool_dir.glob(f"*{MESSAGE_SUFFIX}"):
            try:
                if path.stat().st_mtime < cutoff:
                    path.unlink()
                    removed += 1
            except FileNotFoundError:
                continue

        # Other processes prune the same directory, so always resync.
        existing = {p.name for p in self.spool_dir.glob(f"*{MESSAGE_SUFFIX}")}
        with self._lock:
            self._seen &= existing
        return removed

    def start(self) -> None:
        """Start watching the spool directory."""
        if self._observer:
            logger.warning(f"Channel {self.channel_id} already running")
            return

        self.spool_dir.mkdir(parents=True, exist_ok=True)

        # Messages already on disk predate this surface.
        with self._lock:
            self._seen.update(p.name for p in self.spool_dir.glob(f"*{MESSAGE_SUFFIX}"))

        self._observer = Observer()
        self._observer.schedule(SpoolHandler(self), str(self.spool_dir), recursive=False)
        self._observer.start()
        logger.info(f"Channel {self.channel_id} watching: {self.spool_dir}")

    def stop(self) -> None:
        if self._observer:
            self._observer.stop()
            self._observer.join(timeout=2.0)
            self._observer = None
        logger.info(f"Stopped channel {self.channel_id}")
