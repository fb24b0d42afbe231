"""
Unit Tests for the Board Interaction Controller.

The board is measured at (100, 50) with size 1000x800 and notes render
200x150 (see FakeGeometry in unit/conftest.py), so a dragged note can
reach x in [0, 800] and y in [0, 650].
"""

import math

import pytest

from noteboard.engine.models.note import create_note
from noteboard.engine.services.interaction import (
    BoardInteractionController,
    DragState,
    HitRegion,
    Rect,
    clamp,
)


@pytest.fixture
def controller(manager, geometry, bus):
    return BoardInteractionController(manager, geometry, bus)


@pytest.fixture
def note(manager, bus):
    note = create_note(content="drag me", x=0, y=0)
    manager.add(note)
    note.attach(bus)
    return note


class TestClamp:
    def test_within_range(self):
        assert clamp(5, 10) == 5

    def test_below_zero(self):
        assert clamp(-3, 10) == 0

    def test_above_upper(self):
        assert clamp(12, 10) == 10

    def test_negative_upper_pins_to_zero(self):
        assert clamp(5, -50) == 0


class TestPress:
    """Tests for drag start."""

    def test_press_on_body_starts_drag(self, controller, note, events):
        assert controller.press(note.id, HitRegion.BODY, 110, 60) is True

        assert controller.state is DragState.DRAGGING
        assert controller.dragging_note_id == note.id
        assert controller.drag_offset == (10, 10)
        assert events[-1].event_type == "board.note.activated"
        assert events[-1].note_id == note.id

    @pytest.mark.parametrize(
        "region",
        [HitRegion.CONTENT, HitRegion.DELETE_BUTTON, HitRegion.QUOTE_BUTTON, HitRegion.IMAGE_BUTTON],
    )
    def test_press_on_content_or_buttons_is_ignored(self, controller, note, region):
        assert controller.press(note.id, region, 110, 60) is False
        assert controller.state is DragState.IDLE

    def test_press_with_plain_string_region(self, controller, note):
        assert controller.press(note.id, "body", 110, 60) is True
        assert controller.state is DragState.DRAGGING
        assert controller.drag_offset == (10, 10)

    @pytest.mark.parametrize("region", ["content", "delete_button", "title"])
    def test_press_with_other_string_regions_is_ignored(self, controller, note, region):
        assert controller.press(note.id, region, 110, 60) is False
        assert controller.state is DragState.IDLE

    def test_press_on_unknown_note_is_ignored(self, controller):
        assert controller.press("note_missing", HitRegion.BODY, 0, 0) is False
        assert controller.state is DragState.IDLE


class TestMove:
    """Tests for clamped drag moves."""

    def test_move_keeps_pointer_offset(self, controller, note):
        controller.press(note.id, HitRegion.BODY, 110, 60)

        assert controller.move(400, 300) == (290, 240)
        assert note.position == (290, 240)

    def test_move_publishes_position(self, controller, note, events):
        controller.press(note.id, HitRegion.BODY, 110, 60)
        controller.move(400, 300)

        assert events[-1].event_type == "board.note.moved"
        assert events[-1].payload == {"x": 290, "y": 240}

    def test_move_past_top_left_clamps_to_zero(self, controller, note):
        controller.press(note.id, HitRegion.BODY, 110, 60)
        assert controller.move(-500, -500) == (0, 0)

    def test_move_past_bottom_right_clamps_to_board(self, controller, note):
        controller.press(note.id, HitRegion.BODY, 110, 60)
        assert controller.move(5000, 5000) == (800, 650)

    def test_every_move_stays_on_board(self, controller, note):
        controller.press(note.id, HitRegion.BODY, 110, 60)
        for px, py in [(-1e6, 3), (1e6, -1e6), (550, 420), (99, 49), (1200, 900)]:
            x, y = controller.move(px, py)
            assert 0 <= x <= 800
            assert 0 <= y <= 650

    def test_board_smaller_than_note_pins_to_origin(self, manager, bus, make_geometry, note):
        controller = BoardInteractionController(manager, make_geometry(board=Rect(0, 0, 150, 100)), bus)
        controller.press(note.id, HitRegion.BODY, 10, 10)

        assert controller.move(75, 50) == (0, 0)

    def test_unmeasured_note_uses_default_extent(self, manager, bus, make_geometry, note):
        controller = BoardInteractionController(manager, make_geometry(measured=False), bus)
        controller.press(note.id, HitRegion.BODY, 110, 60)

        assert controller.drag_offset == (10, 10)
        # default_note_extent in board.yaml is 200x200
        assert controller.move(5000, 5000) == (800, 600)

    def test_move_without_drag_is_ignored(self, controller, note):
        assert controller.move(400, 300) is None
        assert note.position == (0, 0)

    def test_non_finite_pointer_is_ignored(self, controller, note):
        controller.press(note.id, HitRegion.BODY, 110, 60)

        assert controller.move(math.nan, 300) is None
        assert note.position == (0, 0)
        assert controller.state is DragState.DRAGGING

    def test_note_deleted_mid_drag_ends_drag(self, controller, manager, note):
        controller.press(note.id, HitRegion.BODY, 110, 60)
        manager.remove(note.id)

        assert controller.move(400, 300) is None
        assert controller.state is DragState.IDLE


class TestRelease:
    """Tests for drag end."""

    def test_release_returns_to_idle_and_keeps_position(self, controller, note, events):
        controller.press(note.id, HitRegion.BODY, 110, 60)
        controller.move(400, 300)

        controller.release()

        assert controller.state is DragState.IDLE
        assert controller.dragging_note_id is None
        assert note.position == (290, 240)
        assert events[-1].event_type == "board.note.released"

    def test_moves_after_release_are_ignored(self, controller, note):
        controller.press(note.id, HitRegion.BODY, 110, 60)
        controller.release()

        assert controller.move(700, 700) is None
        assert note.position == (0, 0)

    def test_release_when_idle_publishes_nothing(self, controller, events):
        controller.release()
        assert controller.state is DragState.IDLE
        assert events == []


class TestDoubleActivate:
    """Tests for note creation on double activation."""

    def test_creates_note_at_board_relative_point(self, controller, manager, events):
        note = controller.double_activate(350, 250)

        assert note is not None
        assert note.position == (250, 200)
        assert note.content == ""
        assert manager.get(note.id) is note
        assert note.is_attached

        created = events[-1]
        assert created.event_type == "board.note.created"
        assert created.payload["focus"] is True
        assert created.payload["note"]["id"] == note.id

    def test_activation_on_note_creates_nothing(self, controller, manager, events):
        assert controller.double_activate(350, 250, on_note=True) is None
        assert len(manager) == 0
        assert events == []
