"""Tests for watch mode functionality."""

import json
import tempfile
import threading
from pathlib import Path

import pytest
from watchdog.events import (
    DirModifiedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)

from wikishort.adapters.fs_store import FsDocumentStore
from wikishort.optimizer import WikiLinkOptimizer
from wikishort.settings import Settings
from wikishort.watch import DebounceHandler, make_batch_handler


@pytest.fixture
def temp_vault():
    """Create a temporary vault for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        vault_path = Path(tmpdir) / "vault"
        (vault_path / "Projects").mkdir(parents=True)
        (vault_path / "Projects" / "Plan.md").write_text("# Plan\n")
        (vault_path / "Home.md").write_text("See [[Projects/Plan|Plan]]\n")

        store = FsDocumentStore(vault_path)
        optimizer = WikiLinkOptimizer(store, Settings())

        yield store, optimizer, vault_path


def test_debounce_handler_collects_markdown_changes(temp_vault):
    """Test that only visible Markdown files are queued."""
    store, _optimizer, vault_path = temp_vault
    batches = []
    handler = DebounceHandler(store, batches.append, debounce_ms=0)

    handler.on_modified(FileModifiedEvent(str(vault_path / "Home.md")))
    handler.on_created(FileCreatedEvent(str(vault_path / "Projects" / "Plan.md")))
    handler.on_modified(FileModifiedEvent(str(vault_path / "Home.md")))
    handler.on_modified(FileModifiedEvent(str(vault_path / "image.png")))
    handler.on_modified(FileModifiedEvent(str(vault_path / ".obsidian" / "app.md")))
    handler.on_modified(FileModifiedEvent(str(vault_path / "Home.md.tmp")))
    handler.on_modified(FileModifiedEvent(str(vault_path / ".Home.md.swp")))
    handler.on_modified(DirModifiedEvent(str(vault_path / "Projects")))
    handler.on_deleted(FileDeletedEvent(str(vault_path / "Old.md")))

    handler.flush()

    assert len(batches) == 1
    assert [doc.path for doc in batches[0]] == ["Home.md", "Projects/Plan.md"]
    assert batches[0][0].basename == "Home"


def test_debounce_handler_records_move_destination(temp_vault):
    """Test that atomic saves (tmp renamed over .md) are picked up."""
    store, _optimizer, vault_path = temp_vault
    batches = []
    handler = DebounceHandler(store, batches.append, debounce_ms=0)

    handler.on_moved(
        FileMovedEvent(str(vault_path / "Home.md.tmp"), str(vault_path / "Home.md"))
    )
    handler.check_and_flush()

    assert [doc.path for doc in batches[0]] == ["Home.md"]


def test_debounce_handler_waits_for_window(temp_vault):
    store, _optimizer, vault_path = temp_vault
    batches = []
    handler = DebounceHandler(store, batches.append, debounce_ms=60_000)

    handler.on_modified(FileModifiedEvent(str(vault_path / "Home.md")))
    handler.check_and_flush()

    assert batches == []
    assert "Home.md" in handler.changed


def test_flush_empty_is_noop(temp_vault):
    store, _optimizer, _vault_path = temp_vault
    batches = []
    handler = DebounceHandler(store, batches.append)
    handler.flush()
    assert batches == []


def test_batch_handler_rewrites_documents(temp_vault, capsys):
    store, optimizer, vault_path = temp_vault
    handler = DebounceHandler(
        store, make_batch_handler(optimizer, json_output=True), debounce_ms=0
    )

    handler.on_modified(FileModifiedEvent(str(vault_path / "Home.md")))
    handler.flush()

    assert (vault_path / "Home.md").read_text() == "See [[Plan]]\n"
    event = json.loads(capsys.readouterr().out.strip())
    assert event["type"] == "rewrite"
    assert event["path"] == "Home.md"
    assert event["rewritten"] == ["[[Plan]]"]


def test_batch_handler_reports_errors_and_continues(temp_vault, capsys):
    store, optimizer, vault_path = temp_vault
    (vault_path / "Other.md").write_text("[[Projects/Plan]]\n")
    handler = DebounceHandler(store, make_batch_handler(optimizer), debounce_ms=0)

    # Deleted between the event and the flush
    handler.on_modified(FileModifiedEvent(str(vault_path / "Gone.md")))
    handler.on_modified(FileModifiedEvent(str(vault_path / "Other.md")))
    handler.flush()

    captured = capsys.readouterr()
    assert "Error: Gone.md" in captured.err
    assert "Rewrote Other.md" in captured.out
    assert (vault_path / "Other.md").read_text() == "[[Plan]]\n"


def test_batch_handler_survives_undecodable_document(temp_vault, capsys):
    """Test that a note with invalid UTF-8 aborts only its own rewrite."""
    store, optimizer, vault_path = temp_vault
    (vault_path / "A.md").write_bytes(b"caf\xe9 [[Projects/Plan]]\n")
    (vault_path / "B.md").write_text("[[Projects/Plan]]\n")
    handler = DebounceHandler(store, make_batch_handler(optimizer), debounce_ms=0)

    handler.on_modified(FileModifiedEvent(str(vault_path / "A.md")))
    handler.on_modified(FileModifiedEvent(str(vault_path / "B.md")))
    handler.flush()

    captured = capsys.readouterr()
    assert "Error: A.md" in captured.err
    assert (vault_path / "B.md").read_text() == "[[Plan]]\n"
    assert (vault_path / "A.md").read_bytes() == b"caf\xe9 [[Projects/Plan]]\n"


def test_deleted_document_is_dropped_from_pending(temp_vault):
    """Test that a note created and deleted within the window is not processed."""
    store, optimizer, vault_path = temp_vault
    batches = []
    handler = DebounceHandler(store, batches.append, debounce_ms=0)

    handler.on_created(FileCreatedEvent(str(vault_path / "Scratch.md")))
    handler.on_modified(FileModifiedEvent(str(vault_path / "Home.md")))
    handler.on_deleted(FileDeletedEvent(str(vault_path / "Scratch.md")))
    handler.flush()

    assert [doc.path for doc in batches[0]] == ["Home.md"]


def test_event_during_batch_is_kept_for_next_flush(temp_vault):
    """Test that a change recorded while a batch runs is not cleared."""
    store, _optimizer, vault_path = temp_vault
    batches = []
    handler = DebounceHandler(store, None, debounce_ms=0)

    def on_batch(batch):
        batches.append([doc.path for doc in batch])
        if len(batches) == 1:
            handler.on_modified(FileModifiedEvent(str(vault_path / "Home.md")))

    handler.on_batch = on_batch
    handler.on_modified(FileModifiedEvent(str(vault_path / "Projects" / "Plan.md")))
    handler.flush()
    handler.flush()

    assert batches == [["Projects/Plan.md"], ["Home.md"]]


def test_concurrent_events_are_never_lost(temp_vault):
    """Test recording from an observer-like thread while the main loop flushes."""
    store, _optimizer, vault_path = temp_vault
    seen = set()
    handler = DebounceHandler(
        store, lambda batch: seen.update(doc.path for doc in batch), debounce_ms=0
    )
    names = [f"note{i}.md" for i in range(500)]

    def produce():
        for name in names:
            handler.on_modified(FileModifiedEvent(str(vault_path / name)))

    producer = threading.Thread(target=produce)
    producer.start()
    while producer.is_alive():
        handler.flush()
    producer.join()
    handler.flush()

    assert seen == set(names)
