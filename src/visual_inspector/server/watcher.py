"""Polling file watcher that drives hot reload of inspected documents.

Each watched document also covers every ``*.css`` file beside it. A change
is reported once it has been quiet for the debounce window; the callback
always receives the document's path and current content, whichever file
changed, so views reload the page and its styles together.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from pathlib import Path

from visual_inspector.editor import read_source
from visual_inspector.errors import InspectorError

log = logging.getLogger(__name__)

ChangeCallback = Callable[[str, str], None]


class FileWatcher:
    def __init__(
        self,
        on_change: ChangeCallback,
        *,
        interval: float = 0.25,
        debounce: float = 0.1,
    ) -> None:
        self._on_change = on_change
        self.interval = interval
        self.debounce = debounce
        self._lock = threading.Lock()
        # document path -> {tracked file -> last seen mtime}
        self._snapshots: dict[Path, dict[Path, int]] = {}
        # (document, changed file) -> time the change was last seen
        self._pending: dict[tuple[Path, Path], float] = {}
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    # --- watch list ----------------------------------------------------------

    def watch(self, path: str | Path) -> None:
        """Start watching *path* and the stylesheets in its directory."""
        document = Path(path).resolve()
        with self._lock:
            if document in self._snapshots:
                return
            self._snapshots[document] = _scan(document)
        log.debug("Watching %s", document)

    def unwatch(self, path: str | Path) -> None:
        document = Path(path).resolve()
        with self._lock:
            self._snapshots.pop(document, None)
            for key in [k for k in self._pending if k[0] == document]:
                del self._pending[key]

    def unwatch_all(self) -> None:
        with self._lock:
            self._snapshots.clear()
            self._pending.clear()

    def watched_files(self) -> list[str]:
        with self._lock:
            return [str(p) for p in self._snapshots]

    # --- polling -------------------------------------------------------------

    def poll_once(self, now: float | None = None) -> list[str]:
        """Scan for changes and report settled ones. Returns reported documents."""
        now = time.monotonic() if now is None else now
        due: list[Path] = []
        with self._lock:
            for document, snapshot in self._snapshots.items():
                current = _scan(document)
                for file, mtime in current.items():
                    if snapshot.get(file) != mtime:
                        self._pending[(document, file)] = now
                self._snapshots[document] = current
            for key, seen_at in list(self._pending.items()):
                if now - seen_at >= self.debounce:
                    del self._pending[key]
                    if key[0] not in due:
                        due.append(key[0])

        reported: list[str] = []
        for document in due:
            try:
                content = read_source(document)
            except InspectorError as exc:
                log.error("Error reading %s: %s", document, exc)
                continue
            self._on_change(str(document), content)
            reported.append(str(document))
        return reported

    def start(self) -> None:
        if self._thread is not None:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="file-watcher", daemon=True)
        self._thread.start()

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            self.poll_once()

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=5)
            self._thread = None
        self.unwatch_all()


def _scan(document: Path) -> dict[Path, int]:
    files = [document, *sorted(document.parent.glob("*.css"))]
    mtimes: dict[Path, int] = {}
    for file in files:
        try:
            mtimes[file] = file.stat().st_mtime_ns
        except OSError:
            continue
    return mtimes
