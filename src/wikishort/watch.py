"""Watch mode for wikishort - rewrite links as documents are saved."""

import json
import signal
import sys
import threading
import time
from pathlib import Path
from typing import Any, Callable

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .adapters.fs_store import NOTE_SUFFIX, FsDocumentStore, is_hidden
from .core.model import Document, RewriteResult


class DebounceHandler(FileSystemEventHandler):
    """File system event handler with debouncing."""

    def __init__(
        self,
        store: FsDocumentStore,
        on_batch: Callable[[list[Document]], None] | None,
        debounce_ms: int = 150,
    ):
        super().__init__()
        self.store = store
        self.on_batch = on_batch
        self.debounce_ms = debounce_ms

        # Pending documents by vault-relative path; shared with the observer thread
        self.lock = threading.Lock()
        self.changed: dict[str, Document] = {}
        self.last_event_time = 0.0

    def _relative(self, path: Path) -> Path | None:
        """Vault-relative path of a file worth processing, else None."""
        name = path.name

        # Skip temp/swap files
        if name.endswith("~") or name.endswith(".swp") or name.startswith(".#"):
            return None

        # Only process .md files
        if not name.endswith(NOTE_SUFFIX):
            return None

        root = self.store.root
        if path.is_absolute() and not root.is_absolute():
            root = root.resolve()
        try:
            rel = path.relative_to(root)
        except ValueError:
            return None

        # Skip hidden files and anything under hidden folders
        if is_hidden(rel):
            return None
        return rel

    def _record(self, src_path: Any) -> None:
        rel = self._relative(Path(str(src_path)))
        if rel is None:
            return
        doc = self.store.document_for(rel)
        with self.lock:
            self.changed[doc.path] = doc
            self.last_event_time = time.time()

    def on_created(self, event: FileSystemEvent) -> None:
        """Handle file creation."""
        if event.is_directory:
            return
        self._record(event.src_path)

    def on_modified(self, event: FileSystemEvent) -> None:
        """Handle file modification."""
        if event.is_directory:
            return
        self._record(event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        """Handle rename; atomic saves land here as tmp -> .md moves."""
        if event.is_directory:
            return
        self._record(event.dest_path)

    def on_deleted(self, event: FileSystemEvent) -> None:
        """Drop a pending document that no longer exists."""
        if event.is_directory:
            return
        rel = self._relative(Path(str(event.src_path)))
        if rel is None:
            return
        with self.lock:
            self.changed.pop(rel.as_posix(), None)

    def check_and_flush(self) -> None:
        """Check if debounce period has elapsed and flush if so."""
        if not self.changed:
            return

        elapsed = (time.time() - self.last_event_time) * 1000
        if elapsed >= self.debounce_ms:
            self.flush()

    def flush(self) -> None:
        """Process accumulated events."""
        with self.lock:
            if not self.changed:
                return
            batch = list(self.changed.values())
            self.changed = {}

        if self.on_batch:
            self.on_batch(batch)


def make_batch_handler(
    optimizer: Any,
    quiet: bool = False,
    json_output: bool = False,
) -> Callable[[list[Document]], None]:
    """Build the callback that runs one rewrite pass per changed document."""

    def report(result: RewriteResult, duration_ms: int) -> None:
        if json_output:
            event = {
                "type": "rewrite",
                "path": result.path,
                "links": result.links,
                "rewritten": [new for _old, new in result.rewritten],
                "duration_ms": duration_ms,
            }
            print(json.dumps(event), flush=True)
        elif not quiet and result.changed:
            print(
                f"Rewrote {result.path}: {len(result.rewritten)} link(s) ({duration_ms}ms)",
                flush=True,
            )

    def handle_batch(batch: list[Document]) -> None:
        for doc in batch:
            start_time = time.time()
            try:
                result = optimizer.on_document_changed(doc)
            except (OSError, UnicodeDecodeError) as e:
                # Abort this reaction only; keep watching
                if json_output:
                    error_event = {
                        "type": "error",
                        "path": doc.path,
                        "message": str(e),
                    }
                    print(json.dumps(error_event), flush=True)
                else:
                    print(f"Error: {doc.path}: {e}", file=sys.stderr, flush=True)
                continue
            report(result, int((time.time() - start_time) * 1000))

    return handle_batch


def watch_vault(
    store: FsDocumentStore,
    optimizer: Any,
    debounce_ms: int = 150,
    quiet: bool = False,
    json_output: bool = False,
) -> int:
    """
    Watch vault directory and rewrite links in documents as they change.

    Args:
        store: Filesystem document store for the vault
        optimizer: WikiLinkOptimizer receiving on_document_changed
        debounce_ms: Debounce window in milliseconds
        quiet: Suppress output
        json_output: Output JSON events instead of human-readable

    Returns:
        Exit code
    """
    vault_path = store.root
    if not vault_path.exists():
        print(f"Error: Vault not found: {vault_path}", file=sys.stderr)
        return 1

    running = True

    def signal_handler(signum: int, frame: Any) -> None:
        nonlocal running
        running = False
        if not quiet and not json_output:
            print("\nShutting down...", flush=True)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    handler = DebounceHandler(
        store,
        make_batch_handler(optimizer, quiet=quiet, json_output=json_output),
        debounce_ms,
    )
    observer = Observer()
    observer.schedule(handler, str(vault_path), recursive=True)

    if not quiet and not json_output:
        print(f"Watching {vault_path} (debounce: {debounce_ms}ms)", flush=True)
        print("Press Ctrl+C to stop", flush=True)

    observer.start()

    try:
        while running:
            time.sleep(0.1)
            handler.check_and_flush()
    finally:
        # Flush any pending events before shutdown
        handler.flush()
        observer.stop()
        observer.join()

    if not quiet and not json_output:
        print("Watch stopped", flush=True)

    return 0
