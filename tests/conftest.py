"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

Tests run from the project root so config/settings/*.yaml and the
.project_root marker are the real ones. Anything that writes to disk
gets a tmp_path instead.
"""

from typing import Any

import pytest

from noteboard.engine.core.config import get_app_config, get_settings
from noteboard.engine.events.bus import ALL_EVENTS, EventBus
from noteboard.engine.events.schemas import BoardEvent
from noteboard.engine.repositories.note import NoteManager


# =============================================================================
# Configuration
# =============================================================================


@pytest.fixture(autouse=True)
def _clear_config_cache():
    """Clear lru_cache between tests so each test gets a fresh load."""
    get_settings.cache_clear()
    get_app_config.cache_clear()
    yield
    get_settings.cache_clear()
    get_app_config.cache_clear()


# =============================================================================
# Board Fixtures
# =============================================================================


@pytest.fixture
def bus() -> EventBus:
    """Fresh event bus."""
    return EventBus()


@pytest.fixture
def manager() -> NoteManager:
    """Empty note registry."""
    return NoteManager()


@pytest.fixture
def events(bus: EventBus) -> list[BoardEvent]:
    """
    Every event published on the bus, in order.

    Usage:
        def test_moves(bus, events):
            note.attach(bus)
            note.update_position(1, 2)
            assert events[-1].event_type == "board.note.moved"
    """
    received: list[BoardEvent] = []
    bus.subscribe(ALL_EVENTS, received.append)
    return received


@pytest.fixture
def sample_snapshots() -> list[dict[str, Any]]:
    """Three persisted notes, stored newest first."""
    return [
        {
            "id": "note_c",
            "content": "third",
            "x": 700.0,
            "y": 300.0,
            "color": "note-pink",
            "timestamp": "2024-05-03T09:00:00.000Z",
            "image": None,
        },
        {
            "id": "note_a",
            "content": "first",
            "x": 15.5,
            "y": 42.0,
            "color": "note-yellow",
            "timestamp": "2024-05-01T09:00:00.000Z",
            "image": None,
        },
        {
            "id": "note_b",
            "content": "second",
            "x": 300.0,
            "y": 120.0,
            "color": "note-blue",
            "timestamp": "2024-05-02T09:00:00.000Z",
            "image": "data:image/png;base64,iVBORw0KGgo=",
        },
    ]
