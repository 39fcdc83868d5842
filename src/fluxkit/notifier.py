"""Named-event notifier.

Listeners register against an event name and are called with no arguments
whenever that name is notified. Registration order is call order, and the
same listener may be registered more than once (it is then called once per
registration).
"""

from __future__ import annotations

from typing import Callable

from fluxkit._validate import check_listener, check_name

Listener = Callable[[], None]


class Notifier:
    """Maps event names to ordered lists of listeners."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}

    def listen(self, name: str, listener: Listener) -> None:
        """Register listener as an observer of the event `name`."""
        check_name("notifier.listen", name, "event name")
        check_listener("notifier.listen", listener)
        self._listeners.setdefault(name, []).append(listener)

    def unlisten(self, name: str, listener: Listener) -> None:
        """Remove the first registration of listener for `name`, if any."""
        check_name("notifier.unlisten", name, "event name")
        check_listener("notifier.unlisten", listener)
        listeners = self._listeners.get(name)
        if not listeners:
            return
        try:
            listeners.remove(listener)
        except ValueError:
            pass  # not registered
        if not listeners:
            del self._listeners[name]

    def notify(self, name: str) -> None:
        """Call every listener of `name` in registration order.

        Iterates over a snapshot, so listeners added or removed while
        notifying only see the change on the next notify(). Exceptions
        from a listener propagate and skip the remaining listeners.
        """
        for listener in list(self._listeners.get(name, ())):
            listener()

    def listener_count(self, name: str) -> int:
        return len(self._listeners.get(name, ()))

    def __repr__(self) -> str:
        counts = {name: len(ls) for name, ls in self._listeners.items()}
        return f"Notifier({counts!r})"


def create_notifier() -> Notifier:
    """Factory for a fresh Notifier."""
    return Notifier()
