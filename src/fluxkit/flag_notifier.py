"""Flag notifier — coalesce raised flags, then drain them in one go.

Raising the same flag any number of times between two notify() calls
results in a single call to each of its listeners.
"""

from __future__ import annotations

from typing import Callable

from fluxkit._validate import check_listener, check_name

Listener = Callable[[], None]


class FlagNotifier:
    """Accumulates raised flag names; notify() calls their listeners once each."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}
        # dict as an insertion-ordered set: flags drain in the order first raised
        self._raised: dict[str, None] = {}

    def flag(self, name: str) -> None:
        """Raise the flag `name`. Idempotent until the next notify()."""
        check_name("flag_notifier.flag", name, "flag name")
        self._raised.setdefault(name, None)

    def listen(self, name: str, listener: Listener) -> None:
        """Register listener for `name`. Registering the same listener twice is a no-op."""
        check_name("flag_notifier.listen", name, "flag name")
        check_listener("flag_notifier.listen", listener)
        listeners = self._listeners.setdefault(name, [])
        # Matched by ==, so two bound methods of the same object are one listener.
        if listener not in listeners:
            listeners.append(listener)

    def unlisten(self, name: str, listener: Listener) -> None:
        check_name("flag_notifier.unlisten", name, "flag name")
        check_listener("flag_notifier.unlisten", listener)
        listeners = self._listeners.get(name)
        if not listeners:
            return
        try:
            listeners.remove(listener)
        except ValueError:
            pass  # not registered

    def notify(self) -> None:
        """Call each listener of each raised flag once, then clear the flags.

        The raised set is swapped out before any listener runs. Flags raised
        by listeners during the drain, including their own, wait for the
        next notify(). If a listener raises, the flag it was handling and
        every flag not yet reached stay raised.
        """
        drained, self._raised = self._raised, {}
        names = list(drained)
        for i, name in enumerate(names):
            try:
                for listener in list(self._listeners.get(name, ())):
                    listener()
            except Exception:
                # The failing flag and those after it stay raised.
                restored = dict.fromkeys(names[i:])
                restored.update(self._raised)
                self._raised = restored
                raise

    @property
    def pending_flags(self) -> frozenset[str]:
        """Flags raised since the last notify()."""
        return frozenset(self._raised)

    def __repr__(self) -> str:
        return f"FlagNotifier(pending={list(self._raised)!r})"


def create_flag_notifier() -> FlagNotifier:
    """Factory for a fresh FlagNotifier."""
    return FlagNotifier()
