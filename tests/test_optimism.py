"""Tests for optimistic_reduction — queue replacement, prefix promotion, speculative fold."""

import copy
import functools
from types import SimpleNamespace

import pytest

from fluxkit import is_optimistic, optimistic_id, optimistic_reduction

ZERO_STATE = {
    "NORMAL_ACTION": 0,
    "OPTIMISTIC_ACTION": 0,
    "REPLACEMENT_NORMAL_ACTION": 0,
    "REPLACEMENT_OPTIMISTIC_ACTION": 0,
}

NORMAL_ACTION = {"type": "NORMAL_ACTION", "payload": True}


def _optimistic(oid):
    return {"type": "OPTIMISTIC_ACTION", "payload": True, "meta": {"optimistic": True, "optimisticId": oid}}


def _replacement_optimistic(oid):
    return {
        "type": "REPLACEMENT_OPTIMISTIC_ACTION",
        "payload": True,
        "meta": {"optimistic": True, "optimisticId": oid},
    }


def _replacement_normal(oid):
    return {
        "type": "REPLACEMENT_NORMAL_ACTION",
        "payload": True,
        "meta": {"optimistic": False, "optimisticId": oid},
    }


def counting_reducer(state, action):
    new_state = dict(state)
    new_state[action["type"]] += 1
    return new_state


def _state(**counts):
    return {**ZERO_STATE, **counts}


def _apply(actions, **kwargs):
    base, queue, optimistic = ZERO_STATE, [], ZERO_STATE
    for action in actions:
        base, queue, optimistic = optimistic_reduction(base, queue, counting_reducer, action, **kwargs)
    return base, queue, optimistic


class TestMetaHelpers:
    def test_dict_actions(self):
        assert is_optimistic(_optimistic(0))
        assert optimistic_id(_optimistic(0)) == 0
        assert not is_optimistic(_replacement_normal(0))

    def test_missing_meta(self):
        assert not is_optimistic(NORMAL_ACTION)
        assert optimistic_id(NORMAL_ACTION) is None
        assert optimistic_id(None) is None
        assert optimistic_id({"meta": None}) is None

    def test_attribute_actions(self):
        action = SimpleNamespace(type="X", meta=SimpleNamespace(optimistic=True, optimisticId="abc"))
        assert is_optimistic(action)
        assert optimistic_id(action) == "abc"


class TestOptimisticReduction:
    def test_normal_action_goes_straight_to_base(self):
        base, queue, optimistic = optimistic_reduction(ZERO_STATE, [], counting_reducer, NORMAL_ACTION)
        assert base == _state(NORMAL_ACTION=1)
        assert queue == []
        assert optimistic == base

    def test_optimistic_action_is_queued(self):
        base, queue, optimistic = _apply([_optimistic(0)])
        assert base == ZERO_STATE
        assert len(queue) == 1
        assert optimistic == _state(OPTIMISTIC_ACTION=1)

    def test_optimistic_replaced_by_optimistic(self):
        base, queue, optimistic = _apply([_optimistic(0), _replacement_optimistic(0)])
        assert base == ZERO_STATE
        assert len(queue) == 1
        assert optimistic == _state(REPLACEMENT_OPTIMISTIC_ACTION=1)

    def test_optimistic_replaced_by_normal_is_promoted(self):
        base, queue, optimistic = _apply([_optimistic(0), _replacement_normal(0)])
        assert base == _state(REPLACEMENT_NORMAL_ACTION=1)
        assert queue == []
        assert optimistic == base

    def test_normal_actions_only_promoted_from_the_front(self):
        base, queue, optimistic = _apply([NORMAL_ACTION, _optimistic(0), NORMAL_ACTION])
        assert base == _state(NORMAL_ACTION=1)
        assert len(queue) == 2
        assert optimistic == _state(NORMAL_ACTION=2, OPTIMISTIC_ACTION=1)

    def test_replacement_behind_optimistic_head_is_not_promoted(self):
        base, queue, optimistic = _apply([_optimistic(0), _optimistic(1), _replacement_normal(1)])
        assert base == ZERO_STATE
        assert len(queue) == 2
        assert optimistic == _state(OPTIMISTIC_ACTION=1, REPLACEMENT_NORMAL_ACTION=1)

    def test_replacement_keeps_queue_position(self):
        _, queue, _ = _apply([_optimistic(0), _optimistic(1), _optimistic(2), _replacement_optimistic(1)])
        assert [a["type"] for a in queue] == [
            "OPTIMISTIC_ACTION",
            "REPLACEMENT_OPTIMISTIC_ACTION",
            "OPTIMISTIC_ACTION",
        ]

    def test_unmatched_id_appends(self):
        base, queue, optimistic = _apply([_optimistic(0), _optimistic(0), _replacement_normal(1)])
        assert base == ZERO_STATE
        assert len(queue) == 2
        assert optimistic == _state(OPTIMISTIC_ACTION=1, REPLACEMENT_NORMAL_ACTION=1)

    def test_confirming_head_promotes_following_normals(self):
        base, queue, optimistic = _apply([_optimistic(0), NORMAL_ACTION, _replacement_normal(0)])
        assert queue == []
        assert base == _state(NORMAL_ACTION=1, REPLACEMENT_NORMAL_ACTION=1)
        assert optimistic == base

    def test_ids_compared_by_value(self):
        base, queue, _ = _apply([_optimistic((1, "a")), _replacement_normal((1, "a"))])
        assert queue == []
        assert base == _state(REPLACEMENT_NORMAL_ACTION=1)

    def test_bool_id_does_not_match_int_id(self):
        _, queue, _ = _apply([_optimistic(1), _replacement_optimistic(True)])
        assert len(queue) == 2
        _, queue, _ = _apply([_optimistic(0), _replacement_optimistic(False)])
        assert len(queue) == 2

    def test_bool_id_matches_bool_id(self):
        base, queue, _ = _apply([_optimistic(True), _replacement_normal(True)])
        assert queue == []
        assert base == _state(REPLACEMENT_NORMAL_ACTION=1)

    def test_ids_are_not_stringified(self):
        _, queue, _ = _apply([_optimistic(1), _replacement_optimistic("1")])
        assert len(queue) == 2

    def test_inputs_not_mutated(self):
        base_in = _state(NORMAL_ACTION=3)
        queue_in = [_optimistic(0), NORMAL_ACTION]
        base_before = copy.deepcopy(base_in)
        queue_before = copy.deepcopy(queue_in)
        optimistic_reduction(base_in, queue_in, counting_reducer, _replacement_normal(0))
        assert base_in == base_before
        assert queue_in == queue_before

    def test_accepts_tuple_queue(self):
        base, queue, _ = optimistic_reduction(ZERO_STATE, (_optimistic(0),), counting_reducer, _optimistic(1))
        assert isinstance(queue, list)
        assert len(queue) == 2
        assert base == ZERO_STATE

    @pytest.mark.parametrize(
        "actions",
        [
            [NORMAL_ACTION],
            [_optimistic(0), _optimistic(1), NORMAL_ACTION],
            [_optimistic(0), NORMAL_ACTION, _replacement_normal(0), _optimistic(3)],
            [_optimistic(0), _replacement_optimistic(0), _optimistic(1), _replacement_normal(1)],
        ],
    )
    def test_optimistic_state_is_fold_of_queue(self, actions):
        base, queue, optimistic = _apply(actions)
        assert optimistic == functools.reduce(counting_reducer, queue, base)

    def test_result_fields_by_name(self):
        result = optimistic_reduction(ZERO_STATE, [], counting_reducer, _optimistic(0))
        assert result.base_state == ZERO_STATE
        assert result.queued_actions == [_optimistic(0)]
        assert result.optimistic_state == _state(OPTIMISTIC_ACTION=1)


class TestPromotionReadings:
    """Promoting a confirmed head folds that head; replay_incoming folds the incoming action."""

    ACTIONS = [_optimistic(0), NORMAL_ACTION, _replacement_normal(0)]

    def test_folds_each_promoted_head(self):
        base, queue, _ = _apply(self.ACTIONS)
        assert queue == []
        assert base == _state(NORMAL_ACTION=1, REPLACEMENT_NORMAL_ACTION=1)

    def test_replay_incoming_folds_incoming_per_promoted_head(self):
        base, queue, _ = _apply(self.ACTIONS, replay_incoming=True)
        assert queue == []
        assert base == _state(REPLACEMENT_NORMAL_ACTION=2)

    def test_readings_agree_for_single_promotion(self):
        actions = [_optimistic(0), _replacement_normal(0)]
        assert _apply(actions) == _apply(actions, replay_incoming=True)
