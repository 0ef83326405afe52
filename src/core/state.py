# src/core/state.py
"""
Immutable screen state and the reducer that moves it between
Idle, Loading, Success and Error.

Every completion event carries the generation of the request that produced
it. A completion whose generation is not the current one belongs to a
superseded request and is dropped, so the newest request always wins.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Union


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Loading:
    pass


@dataclass(frozen=True)
class Success:
    data: Any


@dataclass(frozen=True)
class Error:
    message: str


FetchState = Union[Idle, Loading, Success, Error]


@dataclass(frozen=True)
class LoadRequested:
    pass


@dataclass(frozen=True)
class LoadSucceeded:
    generation: int
    data: Any


@dataclass(frozen=True)
class LoadFailed:
    generation: int
    message: str


@dataclass(frozen=True)
class Reset:
    pass


Event = Union[LoadRequested, LoadSucceeded, LoadFailed, Reset]


@dataclass(frozen=True)
class ScreenState:
    generation: int = 0
    fetch: FetchState = Idle()

    @property
    def is_loading(self) -> bool:
        return isinstance(self.fetch, Loading)


def reduce(state: ScreenState, event: Event) -> ScreenState:
    """Returns the state that follows `state` after `event`."""
    if isinstance(event, LoadRequested):
        return ScreenState(generation=state.generation + 1, fetch=Loading())

    if isinstance(event, Reset):
        return ScreenState(generation=state.generation + 1, fetch=Idle())

    if isinstance(event, (LoadSucceeded, LoadFailed)):
        if event.generation != state.generation or not state.is_loading:
            return state
        if isinstance(event, LoadSucceeded):
            return replace(state, fetch=Success(event.data))
        return replace(state, fetch=Error(event.message))

    raise TypeError(f"Unknown event: {event!r}")


def outcome_event(generation: int, outcome: FetchState) -> Event:
    """Turns the FetchState returned by a loader into a completion event."""
    if isinstance(outcome, Success):
        return LoadSucceeded(generation, outcome.data)
    if isinstance(outcome, Error):
        return LoadFailed(generation, outcome.message)
    raise TypeError(f"A loader must finish with Success or Error, got {outcome!r}")
