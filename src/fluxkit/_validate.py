"""Argument checks shared by the notifiers and the dispatcher."""

from __future__ import annotations

from fluxkit.errors import InvalidArgument


def check_name(tag: str, name: object, what: str = "name") -> str:
    if not isinstance(name, str) or not name:
        raise InvalidArgument(f"[{tag}] Expected {what} to be a non-empty string, got {name!r}.")
    return name


def check_listener(tag: str, listener: object) -> None:
    if not callable(listener):
        raise InvalidArgument(f"[{tag}] Expected listener to be callable, got {listener!r}.")
