"""Exception types raised by fluxkit.

Every message starts with a tag naming the operation that failed,
e.g. ``[dispatcher.add_store] ...``.
"""


class FluxError(Exception):
    """Base class for all fluxkit errors."""
    pass


class InvalidArgument(FluxError, ValueError):
    """Raised when a name or callback argument is malformed."""
    pass


class DuplicateStore(InvalidArgument):
    """Raised when a store name is already registered with a dispatcher."""
    pass


class ReentrantDispatch(FluxError, RuntimeError):
    """Raised when dispatch() is called while another dispatch is running."""
    pass


class WaitForOutsideDispatch(FluxError, RuntimeError):
    """Raised when wait_for() is called with no dispatch in progress."""
    pass


class UnknownStore(FluxError, LookupError):
    """Raised when wait_for() names a store the dispatcher doesn't know."""
    pass


class CyclicWait(FluxError, RuntimeError):
    """Raised when wait_for() targets a store whose update is already running."""
    pass
