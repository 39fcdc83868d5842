"""ReducerStore — a dispatcher store backed by a reducer and an optimistic queue.

The store keeps a confirmed base state plus the queue of actions that have
not been folded into it yet, and runs every action it is notified about
through optimistic_reduction(). Listeners registered with listen() are
called whenever the optimistic state changes.

Usage:
    def todos(state, action):
        if action.get("type") == "ADD":
            return state + (action["text"],)
        return state

    store = ReducerStore("todos", todos, ())
    dispatcher.add_store(store)
    store.listen(lambda: render(store.state))

    dispatcher.dispatch({"type": "ADD", "text": "milk",
                         "meta": {"optimistic": True, "optimisticId": 7}})
    # store.state == ("milk",), store.base_state == ()
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Generic, TypeVar

from fluxkit._validate import check_name
from fluxkit.errors import InvalidArgument
from fluxkit.notifier import Notifier
from fluxkit.optimism import optimistic_reduction

logger = logging.getLogger("fluxkit.store")

S = TypeVar("S")

CHANGE = "change"


class ReducerStore(Generic[S]):
    """Named store holding (base_state, queued_actions) for a reducer."""

    def __init__(
        self,
        name: str,
        reducer: Callable[[S, Any], S],
        initial_state: S,
        *,
        replay_incoming: bool = False,
    ) -> None:
        check_name("reducer_store", name, "store name")
        if not callable(reducer):
            raise InvalidArgument(f"[reducer_store] Expected reducer to be callable, got {reducer!r}.")
        self.name = name
        self._reducer = reducer
        self._replay_incoming = replay_incoming
        self._base_state = initial_state
        self._queued_actions: list = []
        self._state = initial_state
        self._notifier = Notifier()

    def notify(self, action: Any) -> None:
        """Reduce `action` and tell listeners if the optimistic state moved."""
        result = optimistic_reduction(
            self._base_state,
            self._queued_actions,
            self._reducer,
            action,
            replay_incoming=self._replay_incoming,
        )
        old = self._state
        self._base_state, self._queued_actions, self._state = result
        if old is not self._state and old != self._state:
            logger.debug(
                "Store %r changed: %d queued action(s)", self.name, len(self._queued_actions)
            )
            self._notifier.notify(CHANGE)

    handle_action = notify

    @property
    def state(self) -> S:
        """The optimistic state: base state with every queued action applied."""
        return self._state

    @property
    def base_state(self) -> S:
        """The confirmed state, built from promoted actions only."""
        return self._base_state

    @property
    def queued_actions(self) -> tuple:
        return tuple(self._queued_actions)

    def listen(self, listener: Callable[[], None]) -> None:
        self._notifier.listen(CHANGE, listener)

    def unlisten(self, listener: Callable[[], None]) -> None:
        self._notifier.unlisten(CHANGE, listener)

    def __repr__(self) -> str:
        return f"ReducerStore({self.name!r}, queued={len(self._queued_actions)})"
