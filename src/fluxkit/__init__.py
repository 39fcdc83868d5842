"""fluxkit: dispatcher, optimistic reduction and notifiers for unidirectional data flow."""

from importlib.metadata import version as _version

__version__ = _version("fluxkit")

from fluxkit.errors import (
    FluxError,
    InvalidArgument,
    DuplicateStore,
    ReentrantDispatch,
    WaitForOutsideDispatch,
    UnknownStore,
    CyclicWait,
)
from fluxkit.notifier import Notifier, create_notifier
from fluxkit.flag_notifier import FlagNotifier, create_flag_notifier
from fluxkit.optimism import OptimisticResult, optimistic_reduction, is_optimistic, optimistic_id
from fluxkit.dispatcher import Dispatcher, StoreUpdateStatus, create_dispatcher, default_dispatcher
from fluxkit.store import ReducerStore

__all__ = [
    "FluxError",
    "InvalidArgument",
    "DuplicateStore",
    "ReentrantDispatch",
    "WaitForOutsideDispatch",
    "UnknownStore",
    "CyclicWait",
    "Notifier",
    "create_notifier",
    "FlagNotifier",
    "create_flag_notifier",
    "OptimisticResult",
    "optimistic_reduction",
    "is_optimistic",
    "optimistic_id",
    "Dispatcher",
    "StoreUpdateStatus",
    "create_dispatcher",
    "default_dispatcher",
    "ReducerStore",
]
