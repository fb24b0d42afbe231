"""
Unit Tests for the Layout/Sort Engine.

Tests ordering by creation time and the single-row relayout
(x = 20 + i * 220, y = 20 with the shipped board.yaml).
"""

import pytest

from noteboard.engine.core.config_schema import LayoutSchema
from noteboard.engine.models.note import create_note
from noteboard.engine.services.layout import LayoutEngine


@pytest.fixture
def engine(manager, bus):
    return LayoutEngine(manager, bus)


def _add(manager, bus, *timestamps):
    notes = []
    for index, timestamp in enumerate(timestamps):
        note = create_note(id=f"note_{index}", timestamp=timestamp, x=500 + index, y=400)
        manager.add(note)
        note.attach(bus)
        notes.append(note)
    return notes


class TestSlot:
    def test_slots_from_config(self, engine):
        assert [engine.slot(i) for i in range(3)] == [(20, 20), (240, 20), (460, 20)]

    def test_custom_layout(self, manager):
        layout = LayoutSchema(margin_left=10, margin_top=5, note_width=100, gap=0)
        engine = LayoutEngine(manager, layout=layout)
        assert engine.slot(2) == (210, 5)


class TestSortAndRelayout:
    """Tests for sort_and_relayout."""

    def test_ascending_places_oldest_first(self, engine, manager, bus):
        new, old, mid = _add(
            manager, bus,
            "2024-05-03T09:00:00.000Z",
            "2024-05-01T09:00:00.000Z",
            "2024-05-02T09:00:00.000Z",
        )

        ordered = engine.sort_and_relayout(ascending=True)

        assert ordered == [old, mid, new]
        assert [n.position for n in ordered] == [(20, 20), (240, 20), (460, 20)]

    def test_descending_places_newest_first(self, engine, manager, bus):
        new, old, mid = _add(
            manager, bus,
            "2024-05-03T09:00:00.000Z",
            "2024-05-01T09:00:00.000Z",
            "2024-05-02T09:00:00.000Z",
        )

        ordered = engine.sort_and_relayout(ascending=False)

        assert ordered == [new, mid, old]
        assert new.position == (20, 20)
        assert old.position == (460, 20)

    def test_manager_order_follows_sort(self, engine, manager, bus):
        _add(manager, bus, "2024-05-02T00:00:00Z", "2024-05-01T00:00:00Z")

        ordered = engine.sort_and_relayout()

        assert manager.all() == ordered

    def test_unparsable_timestamps_sort_as_epoch(self, engine, manager, bus):
        dated, broken = _add(manager, bus, "2024-05-01T00:00:00Z", "garbage")

        assert engine.sort_and_relayout(ascending=True) == [broken, dated]

    def test_mixed_timestamp_forms(self, engine, manager, bus):
        naive, zulu = _add(manager, bus, "2024-05-01T10:00:00", "2024-05-01T09:00:00.000Z")

        assert engine.sort_and_relayout() == [zulu, naive]

    def test_sort_is_idempotent(self, engine, manager, bus):
        _add(manager, bus, "2024-05-03T00:00:00Z", "2024-05-01T00:00:00Z", "2024-05-02T00:00:00Z")

        first = [(n.id, n.position) for n in engine.sort_and_relayout()]
        second = [(n.id, n.position) for n in engine.sort_and_relayout()]

        assert first == second

    def test_overwrites_dragged_positions(self, engine, manager, bus):
        (note,) = _add(manager, bus, "2024-05-01T00:00:00Z")
        note.update_position(777, 333)

        engine.sort_and_relayout()

        assert note.position == (20, 20)

    def test_publishes_rebuild_with_order(self, engine, manager, bus, events):
        _add(manager, bus, "2024-05-02T00:00:00Z", "2024-05-01T00:00:00Z")

        engine.sort_and_relayout(ascending=True)

        rebuilt = events[-1]
        assert rebuilt.event_type == "board.layout.rebuilt"
        assert rebuilt.payload["reason"] == "sort"
        assert rebuilt.payload["ascending"] is True
        assert [n["id"] for n in rebuilt.payload["notes"]] == ["note_1", "note_0"]

    def test_publishes_moves_for_each_note(self, engine, manager, bus, events):
        _add(manager, bus, "2024-05-02T00:00:00Z", "2024-05-01T00:00:00Z")

        engine.sort_and_relayout()

        moved = [e for e in events if e.event_type == "board.note.moved"]
        assert len(moved) == 2

    def test_empty_board(self, engine, events):
        assert engine.sort_and_relayout() == []
        assert events[-1].payload["notes"] == []
