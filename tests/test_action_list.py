"""Tests for timeline CRUD operations."""

import pytest

from action_list import ActionList, default_actions, new_action_id
from models import ActionType, MacroAction, MouseButton


@pytest.fixture
def timeline():
    return ActionList([
        MacroAction(id="a", type=ActionType.CLICK, x=1, y=1),
        MacroAction(id="b", type=ActionType.WAIT, duration=200),
        MacroAction(id="c", type=ActionType.KEYPRESS, key="Enter"),
    ])


def ids(timeline):
    return [a.id for a in timeline]


class TestDefaults:

    def test_default_actions_sample(self):
        actions = default_actions()
        assert [a.type for a in actions] == [ActionType.CLICK, ActionType.WAIT, ActionType.KEYPRESS]
        click = actions[0]
        assert (click.x, click.y, click.button, click.jitter) == (500, 300, MouseButton.LEFT, True)
        assert actions[1].duration == 1500
        assert actions[2].key == "Enter"
        assert len({a.id for a in actions}) == 3

    def test_new_action_id_shape(self):
        action_id = new_action_id()
        assert len(action_id) == 9
        assert action_id.isalnum()


class TestActionList:

    def test_rejects_duplicate_ids(self):
        with pytest.raises(ValueError):
            ActionList([MacroAction(id="a", type=ActionType.WAIT), MacroAction(id="a", type=ActionType.MOVE)])

    def test_add_appends_with_editor_defaults(self, timeline):
        action = timeline.add(ActionType.MOVE)
        assert timeline[-1] is action
        assert (action.x, action.y, action.duration, action.key) == (0, 0, 1000, "Space")
        assert action.button == MouseButton.LEFT
        assert action.jitter is True
        assert action.comment == ""
        assert action.id not in ("a", "b", "c")

    def test_remove_keeps_order(self, timeline):
        removed = timeline.remove("b")
        assert removed.id == "b"
        assert ids(timeline) == ["a", "c"]
        assert timeline.remove("missing") is None

    def test_update_merges_fields(self, timeline):
        updated = timeline.update("a", x=640, y=480, comment="centre")
        assert (updated.x, updated.y, updated.comment) == (640, 480, "centre")
        assert timeline.update("missing", x=1) is None

    def test_update_rejects_unknown_field(self, timeline):
        with pytest.raises(ValueError):
            timeline.update("a", colour="red")
        with pytest.raises(ValueError):
            timeline.update("a", id="zzz")

    def test_duplicate_inserts_after_original(self, timeline):
        clone = timeline.duplicate("a")
        assert ids(timeline)[1] == clone.id
        assert clone.id != "a"
        assert (clone.x, clone.y) == (1, 1)
        clone.x = 99
        assert timeline.get("a").x == 1

    def test_move_swaps_neighbours(self, timeline):
        assert timeline.move("c", -1) is True
        assert ids(timeline) == ["a", "c", "b"]
        assert timeline.move("a", -1) is False
        assert ids(timeline) == ["a", "c", "b"]

    def test_move_to_top_and_bottom(self, timeline):
        timeline.move_to("c", "top")
        assert ids(timeline) == ["c", "a", "b"]
        timeline.move_to("c", "bottom")
        assert ids(timeline) == ["a", "b", "c"]

    def test_listeners_fire_on_mutation(self, timeline):
        calls = []
        timeline.subscribe(lambda: calls.append(len(timeline)))
        timeline.add(ActionType.WAIT)
        timeline.update("a", x=3)
        timeline.remove("b")
        timeline.clear()
        assert calls == [4, 4, 3, 0]

    def test_clear_on_empty_list_is_silent(self):
        timeline = ActionList()
        calls = []
        timeline.subscribe(lambda: calls.append(1))
        timeline.clear()
        assert calls == []

    def test_actions_is_a_snapshot(self, timeline):
        snapshot = timeline.actions
        snapshot.pop()
        assert len(timeline) == 3
