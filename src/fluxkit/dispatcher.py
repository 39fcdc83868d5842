"""Dispatcher — synchronous action broadcast with wait_for() ordering.

Stores are any objects with a ``name`` (non-empty str) and a one-argument
``notify`` callable (``handle_action`` is accepted when ``notify`` is
missing). dispatch(action) hands the action to every registered store
exactly once, in registration order. While handling an action, a store may
call wait_for(*names) to make sure the named stores have seen the action
first; the dispatcher updates them on the spot and returns once they are
all done.

Usage:
    dispatcher = create_dispatcher()
    seen = []

    class Totals:
        name = "totals"
        def notify(self, action):
            dispatcher.wait_for("items")
            seen.append("totals")

    class Items:
        name = "items"
        def notify(self, action):
            seen.append("items")

    dispatcher.add_store(Totals())
    dispatcher.add_store(Items())
    dispatcher.dispatch({"type": "ADD_ITEM"})
    # seen == ["items", "totals"]

Threading: a Dispatcher belongs to one thread. Nothing here is locked;
callers that share one across threads must serialize dispatch() themselves.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterator

from fluxkit._validate import check_name
from fluxkit.errors import (
    CyclicWait,
    DuplicateStore,
    InvalidArgument,
    ReentrantDispatch,
    UnknownStore,
    WaitForOutsideDispatch,
)

logger = logging.getLogger("fluxkit.dispatcher")


class StoreUpdateStatus:
    """Progress of one store within the current dispatch: idle -> started -> completed."""

    __slots__ = ("started", "completed")

    def __init__(self) -> None:
        self.started = False
        self.completed = False

    def __repr__(self) -> str:
        state = "completed" if self.completed else "started" if self.started else "idle"
        return f"StoreUpdateStatus({state})"


def _store_callback(store: Any) -> Callable[[Any], None] | None:
    """The store's notify, falling back to the older handle_action name."""
    callback = getattr(store, "notify", None)
    if callback is None:
        callback = getattr(store, "handle_action", None)
    return callback if callable(callback) else None


class Dispatcher:
    """Registry of named stores that every dispatched action is delivered to."""

    def __init__(self) -> None:
        # Insertion order is delivery order.
        self._stores: dict[str, Any] = {}

        # Dispatch state, only meaningful while _dispatching is True.
        self._dispatching = False
        self._action: Any = None
        self._statuses: dict[str, StoreUpdateStatus] | None = None

    def add_store(self, store: Any) -> None:
        """Register a store so it is notified about every dispatched action."""
        name = getattr(store, "name", None)
        check_name("dispatcher.add_store", name, 'store "name" property')
        if name in self._stores:
            raise DuplicateStore(
                f'[dispatcher.add_store] The dispatcher has already registered a store named "{name}".'
            )
        callback = _store_callback(store)
        if callback is None:
            raise InvalidArgument(
                '[dispatcher.add_store] Expected store "notify" property to be a method.'
            )
        self._stores[name] = store
        logger.debug("Registered store %r (%d total)", name, len(self._stores))

    def dispatch(self, action: Any = None) -> None:
        """Deliver `action` to every registered store exactly once.

        An exception from a store propagates unchanged; stores not yet
        reached don't see the action, and the dispatcher is left ready for
        the next dispatch.
        """
        if self._dispatching:
            raise ReentrantDispatch(
                "[dispatcher.dispatch] The dispatcher cannot dispatch an action "
                "whilst dispatching another action."
            )
        with self._dispatch_scope(action) as statuses:
            for name, status in statuses.items():
                if not status.completed:
                    self._update_store(name, status)

    def wait_for(self, *names: str) -> None:
        """Update the named stores now, before the calling store continues.

        Only valid while a dispatch is running. Returns once every named
        store has completed its update for the current action.
        """
        if not self._dispatching:
            raise WaitForOutsideDispatch(
                "[dispatcher.wait_for] The dispatcher cannot wait for another store "
                "when it is not dispatching an action."
            )
        statuses = self._statuses
        # All names are checked before any store is updated.
        for name in names:
            if name in statuses:
                continue
            if name in self._stores:
                raise UnknownStore(
                    f'[dispatcher.wait_for] The store "{name}" was registered after this dispatch '
                    "began so it cannot be waited for until the next one."
                )
            raise UnknownStore(
                f'[dispatcher.wait_for] The dispatcher has no registered store named "{name}" '
                "so it cannot wait for it."
            )

        for name in names:
            status = statuses[name]
            if status.completed:
                continue
            if status.started:
                raise CyclicWait(
                    "[dispatcher.wait_for] Cyclic wait on store updates detected; "
                    f'the update for store "{name}" has already begun.'
                )
            self._update_store(name, status)

    @contextmanager
    def _dispatch_scope(self, action: Any) -> Iterator[dict[str, StoreUpdateStatus]]:
        """Set up dispatch state for `action`; tear it down on every exit path."""
        self._dispatching = True
        self._action = action
        # Stores added mid-dispatch get no status and first see the next action.
        self._statuses = {name: StoreUpdateStatus() for name in self._stores}
        logger.debug("Dispatching %r to %d stores", action, len(self._statuses))
        try:
            yield self._statuses
        finally:
            self._dispatching = False
            self._action = None
            self._statuses = None

    def _update_store(self, name: str, status: StoreUpdateStatus) -> None:
        status.started = True
        # Looked up on every update so a store may rebind its callback.
        callback = _store_callback(self._stores[name])
        if callback is None:
            raise InvalidArgument(
                f'[dispatcher.dispatch] Store "{name}" no longer has a callable "notify" property.'
            )
        callback(self._action)
        status.completed = True

    @property
    def dispatching(self) -> bool:
        """True while dispatch() is running."""
        return self._dispatching

    @property
    def action_being_dispatched(self) -> Any:
        return self._action

    @property
    def store_names(self) -> tuple[str, ...]:
        """Registered store names, in delivery order."""
        return tuple(self._stores)

    def __contains__(self, name: object) -> bool:
        return name in self._stores

    def __len__(self) -> int:
        return len(self._stores)

    def __repr__(self) -> str:
        state = "dispatching" if self._dispatching else "idle"
        return f"Dispatcher({list(self._stores)!r}, {state})"


def create_dispatcher() -> Dispatcher:
    """Factory for a fresh, independent Dispatcher."""
    return Dispatcher()


# Process-wide dispatcher for applications that want exactly one.
# Built once, when this module is first imported.
default_dispatcher = create_dispatcher()
