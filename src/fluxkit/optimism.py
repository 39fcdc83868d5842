"""Optimistic reduction — confirmed state plus a queue of speculative actions.

A store that wants to show the effect of an action before the server (or
whatever the source of truth is) confirms it keeps two things: a confirmed
`base_state` and a queue of actions not yet folded into it. Each incoming
action goes through optimistic_reduction():

- an action carrying ``meta.optimisticId`` replaces the queued action with
  the same id in place, otherwise it is appended;
- leading non-optimistic actions are promoted into the base state;
- the optimistic state is the base state with the rest of the queue folded
  on top.

Usage:
    def counter(state, action):
        return state + action["payload"]

    r = optimistic_reduction(0, [], counter,
                             {"payload": 5, "meta": {"optimistic": True, "optimisticId": 1}})
    # r.base_state == 0, r.optimistic_state == 5

    r = optimistic_reduction(r.base_state, r.queued_actions, counter,
                             {"payload": 5, "meta": {"optimisticId": 1}})
    # confirmed: r.base_state == 5, r.queued_actions == []
"""

from __future__ import annotations

import functools
from collections.abc import Mapping
from typing import Any, Callable, NamedTuple, Sequence, TypeVar

S = TypeVar("S")

Reducer = Callable[[S, Any], S]

META = "meta"
OPTIMISTIC = "optimistic"
OPTIMISTIC_ID = "optimisticId"

_MISSING = object()


class OptimisticResult(NamedTuple):
    base_state: Any
    queued_actions: list
    optimistic_state: Any


def _field(record: Any, key: str) -> Any:
    """Read `key` from a mapping or an attribute-style record."""
    if isinstance(record, Mapping):
        return record.get(key, _MISSING)
    return getattr(record, key, _MISSING)


def _meta(action: Any) -> Any:
    if action is None:
        return _MISSING
    meta = _field(action, META)
    return _MISSING if meta is None else meta


def _same_id(a: Any, b: Any) -> bool:
    # True == 1 in Python; a bool id only matches a bool id.
    if isinstance(a, bool) or isinstance(b, bool):
        return type(a) is type(b) and a == b
    return a == b


def optimistic_id(action: Any) -> Any:
    """Return the action's ``meta.optimisticId``, or None when it has none."""
    meta = _meta(action)
    if meta is _MISSING:
        return None
    oid = _field(meta, OPTIMISTIC_ID)
    return None if oid is _MISSING else oid


def is_optimistic(action: Any) -> bool:
    """True when the action's ``meta.optimistic`` is truthy."""
    meta = _meta(action)
    if meta is _MISSING:
        return False
    flag = _field(meta, OPTIMISTIC)
    return flag is not _MISSING and bool(flag)


def optimistic_reduction(
    base_state: S,
    queued_actions: Sequence,
    reducer: Reducer,
    action: Any,
    *,
    replay_incoming: bool = False,
) -> OptimisticResult:
    """Reduce `action` into a (base_state, queued_actions) pair.

    Pure: neither `base_state` nor `queued_actions` is mutated. The returned
    queue is a new list.

    Each promoted queue head is folded into the base state exactly once.
    With replay_incoming=True the incoming action is folded once per promoted
    head instead, which reproduces the behaviour of earlier releases.
    """
    queue = list(queued_actions)
    base = base_state

    oid = optimistic_id(action)
    if oid is None:
        queue.append(action)
    else:
        for i, queued in enumerate(queue):
            queued_oid = optimistic_id(queued)
            if queued_oid is not None and _same_id(queued_oid, oid):
                queue[i] = action
                break
        else:
            queue.append(action)

    while queue and not is_optimistic(queue[0]):
        head = queue.pop(0)
        base = reducer(base, action if replay_incoming else head)

    optimistic_state = functools.reduce(reducer, queue, base)
    return OptimisticResult(base, queue, optimistic_state)
