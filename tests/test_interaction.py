import pytest

from app.formation.assignment import AssignmentState
from app.formation.interaction import (
    PointerInteractionController,
    TouchInteractionController,
    build_controller,
    nearest_position,
    probe_touch,
)
from app.formation.layout import Position
from tests.conftest import CAPTAIN_ID, MEMBER_ID, OWNER_ID


def _controller(team_access, notifier, user_id=OWNER_ID, notation="3-3-1", **kwargs):
    state = AssignmentState.from_layout(notation)
    return build_controller(state, lambda: team_access, user_id, notifier, **kwargs)


class TestSelectThenPlace:
    def test_select_then_activate_places_player(self, team_access, notifier, players):
        controller = _controller(team_access, notifier)
        assert controller.select_player(players[0])
        assert controller.activate_position("cm2")
        assert controller.state.player_at("cm2") == players[0]
        assert controller.pending_player is None

    def test_activating_occupied_position_clears_it(self, team_access, notifier, players):
        controller = _controller(team_access, notifier)
        controller.state.place_player(players[0], "st")
        controller.select_player(players[1])
        assert controller.activate_position("st")
        assert controller.state.player_at("st") is None
        # Selection survives the toggle and can be placed next
        assert controller.pending_player == players[1]

    def test_empty_position_without_selection_is_noop(self, team_access, notifier):
        controller = _controller(team_access, notifier)
        assert controller.activate_position("gk") is False
        assert controller.state.occupied() == []
        assert notifier.calls == []

    def test_placing_an_already_placed_player_moves_it(self, team_access, notifier, players):
        controller = _controller(team_access, notifier)
        controller.state.place_player(players[0], "rb")
        controller.select_player(players[0])
        controller.activate_position("lb")
        assert controller.state.position_of(players[0].id) == "lb"
        assert controller.state.player_at("rb") is None


class TestAuthorizationGate:
    def test_member_cannot_select_or_place(self, team_access, notifier, players):
        controller = _controller(team_access, notifier, user_id=MEMBER_ID)
        assert controller.select_player(players[0]) is False
        assert controller.pending_player is None
        assert controller.activate_position("gk") is False
        assert notifier.kinds == ["error", "error"]
        assert controller.state.occupied() == []

    def test_denied_drop_reverts_drag(self, team_access, notifier, players):
        controller = _controller(team_access, notifier, user_id=MEMBER_ID)
        controller.start_drag(players[0])
        assert controller.drop("st") is False
        assert controller.drag is None
        assert controller.state.occupied() == []
        assert notifier.kinds == ["error"]

    def test_denied_swap_and_formation_change(self, team_access, notifier, players):
        controller = _controller(team_access, notifier, user_id=MEMBER_ID)
        controller.state.place_player(players[0], "rb")
        assert controller.swap("rb", "lb") is False
        assert controller.change_formation("2-4-1") == []
        assert controller.state.notation == "3-3-1"
        assert controller.state.player_at("rb") == players[0]

    def test_gate_uses_current_team_snapshot(self, team_access, notifier, players):
        controller = _controller(team_access, notifier, user_id=CAPTAIN_ID)
        assert controller.select_player(players[0])
        team_access.captain_id = MEMBER_ID
        assert controller.activate_position("gk") is False
        assert controller.state.occupied() == []


class TestPointerDrag:
    def test_drag_from_roster(self, team_access, notifier, players):
        controller = _controller(team_access, notifier)
        controller.start_drag(players[0])
        assert controller.drop("cb")
        assert controller.state.player_at("cb") == players[0]
        assert controller.drag is None

    def test_place_then_drag_to_striker(self, team_access, notifier, players):
        controller = _controller(team_access, notifier)
        controller.select_player(players[0])
        controller.activate_position("cm2")
        controller.start_drag(players[0], from_position_id="cm2")
        controller.drop("st")
        assert controller.state.player_at("cm2") is None
        assert controller.state.player_at("st").id == players[0].id

    def test_drop_on_occupied_benches_occupant(self, team_access, notifier, players):
        controller = _controller(team_access, notifier)
        controller.state.place_player(players[0], "rb")
        controller.state.place_player(players[1], "lb")
        controller.start_drag(players[0], from_position_id="rb")
        controller.drop("lb")
        assert controller.state.player_at("lb") == players[0]
        assert controller.state.player_at("rb") is None
        assert controller.state.position_of(players[1].id) is None

    def test_drop_on_occupied_can_swap(self, team_access, notifier, players):
        controller = _controller(team_access, notifier, swap_on_occupied_drop=True)
        controller.state.place_player(players[0], "rb")
        controller.state.place_player(players[1], "lb")
        controller.start_drag(players[0], from_position_id="rb")
        controller.drop("lb")
        assert controller.state.player_at("lb") == players[0]
        assert controller.state.player_at("rb") == players[1]

    def test_stale_drag_source_is_not_swapped(self, team_access, notifier, players):
        controller = _controller(team_access, notifier, swap_on_occupied_drop=True)
        controller.state.place_player(players[0], "rb")
        controller.state.place_player(players[1], "lb")
        controller.start_drag(players[0], from_position_id="rb")
        # rb cambia occupante mentre il drag è in corso
        controller.activate_position("rb")
        controller.state.place_player(players[2], "rb")
        assert controller.drop("lb")
        assert controller.state.player_at("lb") == players[0]
        assert controller.state.player_at("rb") == players[2]
        assert controller.state.position_of(players[1].id) is None

    def test_drop_on_source_is_noop(self, team_access, notifier, players):
        controller = _controller(team_access, notifier)
        controller.state.place_player(players[0], "rb")
        controller.start_drag(players[0], from_position_id="rb")
        assert controller.drop("rb") is False
        assert controller.state.player_at("rb") == players[0]

    def test_drop_without_drag(self, team_access, notifier):
        controller = _controller(team_access, notifier)
        assert controller.drop("rb") is False


class TestTouchDrag:
    def test_release_near_position(self, team_access, notifier, players):
        controller = _controller(team_access, notifier, touch=True)
        controller.start_drag(players[0])
        assert controller.touch_end(48, 27)
        assert controller.state.player_at("st") == players[0]

    def test_release_far_from_every_position_cancels(self, team_access, notifier, players):
        controller = _controller(team_access, notifier, touch=True, drop_threshold=5)
        controller.start_drag(players[0])
        assert controller.touch_end(35, 37) is False
        assert controller.drag is None
        assert controller.state.occupied() == []
        assert notifier.calls == []

    def test_touch_end_without_drag(self, team_access, notifier):
        controller = _controller(team_access, notifier, touch=True)
        assert controller.touch_end(50, 92) is False


class TestNearestPosition:
    def test_minimum_distance_wins(self):
        positions = [Position("a", "A", 10, 10), Position("b", "B", 20, 20), Position("c", "C", 90, 90)]
        assert nearest_position(positions, 18, 19).id == "b"

    def test_ties_resolve_in_generation_order(self):
        positions = [Position("a", "A", 40, 50), Position("b", "B", 60, 50)]
        assert nearest_position(positions, 50, 50).id == "a"

    def test_threshold(self):
        positions = [Position("a", "A", 0, 0)]
        assert nearest_position(positions, 3, 4, max_distance=5).id == "a"
        assert nearest_position(positions, 3, 4, max_distance=4.9) is None
        assert nearest_position([], 0, 0) is None


def test_change_formation_carries_players(team_access, notifier, players):
    controller = _controller(team_access, notifier, notation="2-4-1")
    controller.state.place_player(players[0], "st")
    controller.state.place_player(players[1], "rb")
    benched = controller.change_formation("3-4")
    assert benched == [players[0]]
    assert controller.state.player_at("rb") == players[1]


def test_malformed_formation_falls_back_to_catalog_default(team_access, notifier, players):
    controller = _controller(team_access, notifier)
    controller.state.place_player(players[0], "rb")
    controller.change_formation("9-9-9-9")
    assert controller.state.notation == "3-3-1"
    assert controller.state.player_at("rb") == players[0]
    assert notifier.kinds == ["warning"]


def test_build_controller_picks_variant_once(team_access, notifier):
    assert isinstance(_controller(team_access, notifier), PointerInteractionController)
    touch = _controller(team_access, notifier, touch=probe_touch(max_touch_points=5), drop_threshold=12)
    assert isinstance(touch, TouchInteractionController)
    assert touch.drop_threshold == 12
    assert probe_touch() is False
    assert probe_touch(has_touch_events=True) is True


@pytest.mark.parametrize("touch", [False, True])
def test_controllers_share_select_then_place(team_access, notifier, players, touch):
    controller = _controller(team_access, notifier, touch=touch)
    controller.select_player(players[2])
    controller.activate_position("gk")
    assert controller.state.player_at("gk") == players[2]


def test_oversized_formation_falls_back_to_catalog_default(team_access, notifier, players):
    controller = _controller(team_access, notifier)
    controller.state.place_player(players[0], "rb")
    controller.change_formation("3-7-1")
    assert controller.state.notation == "3-3-1"
    assert len(controller.state.positions) == 8
    assert controller.state.player_at("rb") == players[0]
    assert notifier.kinds == ["warning"]


def test_unicode_digit_formation_falls_back_to_catalog_default(team_access, notifier):
    controller = _controller(team_access, notifier, notation="2-4-1")
    controller.change_formation("3-²-1")
    assert controller.state.notation == "3-3-1"
    assert notifier.kinds == ["warning"]
