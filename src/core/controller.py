# src/core/controller.py

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional

from src.core.errors import describe_failure
from src.core.state import (
    Event,
    FetchState,
    LoadFailed,
    LoadRequested,
    Reset,
    ScreenState,
    outcome_event,
    reduce,
)

logger = logging.getLogger(__name__)

# Shared by every screen; fetches never run on the thread that renders.
_EXECUTOR = ThreadPoolExecutor(max_workers=4, thread_name_prefix="screen-fetch")


class ScreenController:
    """
    Runs a screen's loader off the calling thread and folds the result into
    an immutable ScreenState.

    Args:
        load_fn: Default loader. Returns Success or Error. Exceptions it raises become Error
            with the matching user-facing message.
        name: Used in log lines.
        executor: Defaults to the shared module executor.
    """

    def __init__(self, load_fn: Optional[Callable[[], FetchState]] = None, name: str = "screen",
                 executor: Optional[ThreadPoolExecutor] = None):
        self._load_fn = load_fn
        self._name = name
        self._executor = executor or _EXECUTOR
        self._lock = threading.Lock()
        self._state = ScreenState()
        self._future: Optional[Future] = None

    @property
    def state(self) -> ScreenState:
        return self._state

    def dispatch(self, event: Event) -> ScreenState:
        with self._lock:
            self._state = reduce(self._state, event)
            return self._state

    def reload(self, load_fn: Optional[Callable[[], FetchState]] = None) -> Future:
        """
        Enters Loading and starts a new fetch. Earlier fetches still running are superseded.

        Args:
            load_fn: Loader for this fetch only, for screens driven by user input.
        """
        loader = load_fn or self._load_fn
        if loader is None:
            raise ValueError(f"[{self._name}] no loader to run")
        generation = self.dispatch(LoadRequested()).generation
        logger.info("[%s] load #%d started", self._name, generation)
        future = self._executor.submit(self._run, generation, loader)
        self._future = future
        return future

    def reset(self) -> ScreenState:
        return self.dispatch(Reset())

    def wait(self, timeout: Optional[float] = None) -> ScreenState:
        """Blocks until the latest fetch has finished, then returns the state."""
        future = self._future
        if future is not None:
            future.result(timeout=timeout)
        return self._state

    def _run(self, generation: int, load_fn: Callable[[], FetchState]) -> ScreenState:
        try:
            event = outcome_event(generation, load_fn())
        except Exception as e:
            logger.exception("[%s] load #%d failed", self._name, generation)
            event = LoadFailed(generation, describe_failure(e))

        state = self.dispatch(event)
        if state.generation != generation:
            logger.info("[%s] load #%d superseded by #%d; result dropped",
                        self._name, generation, state.generation)
        else:
            logger.info("[%s] load #%d finished: %s", self._name, generation,
                        type(state.fetch).__name__)
        return state
