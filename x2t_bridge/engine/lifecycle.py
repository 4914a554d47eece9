"""Engine lifecycle with single-flight, time-bounded initialization.

WHY: The conversion engine is one shared native resource. Loading it is
expensive, it becomes usable only after it signals readiness on its own
schedule, and it needs a fixed set of staging directories before the first
conversion. Concurrent callers must never trigger a second load, a hung
engine must not block callers forever, and a failed load must not poison
every later call.

HOW: EngineLifecycle owns the engine handle and an explicit EngineState.
The first caller that finds no usable engine starts one asyncio.Task that
loads the module, waits for the readiness callback (raced against a timer
with asyncio.wait_for), and creates the staging directories. Every other
caller awaits the same task through asyncio.shield, so a caller being
cancelled does not cancel the shared attempt.

RULES:
- READY returns the held handle immediately, with no new load
- LOADING callers attach to the in-flight attempt; one load side effect
- A timeout raises EngineInitTimeoutError and moves the state to FAILED
- Any failure discards the shared attempt; the next call loads afresh
- "Already exists" while creating staging directories is not an error;
  any other directory failure raises StagingIOError and fails the attempt
- reset() drops the handle and cancels a stale in-flight attempt
- An attempt cancelled by anything other than reset() counts as a failure
"""

from __future__ import annotations

import asyncio
import enum
import errno
import logging
import time
from collections.abc import Iterable
from typing import Optional

from x2t_bridge.config import INIT_TIMEOUT_S, WORKING_DIRS
from x2t_bridge.engine.interfaces import EngineLoader, EngineModule
from x2t_bridge.errors import (
    EngineInitTimeoutError,
    EngineLoadError,
    EngineNotReadyError,
    StagingIOError,
    X2TError,
)

logger = logging.getLogger(__name__)


class EngineState(str, enum.Enum):
    """Lifecycle states of the shared engine.

    RULES:
    - uninitialized: nothing loaded yet, or reset() was called
    - loading: one initialization attempt is in flight
    - ready: the handle is usable and staging directories exist
    - failed: the last attempt failed; the next initialize() retries
    """

    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class EngineLifecycle:
    """Owns the engine handle and coordinates its one-time initialization.

    WHY: Callers should depend on an explicitly passed capability rather
    than on a hidden module-level engine instance.

    HOW: Construct one per process (or per test) with a loader; pass it to
    the orchestrator. initialize() is safe to call from any number of
    concurrent coroutines on the same event loop.
    """

    def __init__(
        self,
        loader: EngineLoader,
        *,
        timeout: float = INIT_TIMEOUT_S,
        working_dirs: Iterable[str] = WORKING_DIRS,
    ) -> None:
        self._loader = loader
        self._timeout = timeout
        self._working_dirs = tuple(working_dirs)
        self._state = EngineState.UNINITIALIZED
        self._engine: Optional[EngineModule] = None
        self._failure: Optional[BaseException] = None
        self._attempt: Optional[asyncio.Task] = None
        self.load_attempts = 0

    @classmethod
    def from_config(cls) -> EngineLifecycle:
        """Build a lifecycle for the engine module named in the environment."""
        from x2t_bridge.engine.loader import ImportEngineLoader

        return cls(ImportEngineLoader())

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def failure(self) -> Optional[BaseException]:
        """The error that moved the lifecycle to FAILED, if any."""
        return self._failure

    @property
    def timeout(self) -> float:
        """Seconds one attempt may spend loading and waiting for readiness."""
        return self._timeout

    @property
    def engine(self) -> EngineModule:
        """The ready engine handle.

        Raises EngineNotReadyError unless the state is READY.
        """
        if self._state is not EngineState.READY or self._engine is None:
            raise EngineNotReadyError(
                "Conversion engine is not initialized (state: {})".format(self._state.value)
            )
        return self._engine

    async def initialize(self) -> EngineModule:
        """Return the ready engine, loading it first if necessary."""
        if self._state is EngineState.READY and self._engine is not None:
            return self._engine

        stale = self._attempt
        if stale is not None and stale.cancelled():
            # Cancelled before it ever ran, e.g. by an event loop shutting down
            self._fail(stale, _cancelled_error())

        if self._attempt is None:
            self._state = EngineState.LOADING
            self._failure = None
            self._attempt = asyncio.ensure_future(self._run_attempt())

        attempt = self._attempt
        try:
            return await asyncio.shield(attempt)
        except asyncio.CancelledError:
            if attempt.cancelled():
                raise _cancelled_error() from None
            raise

    def reset(self) -> None:
        """Forget the engine and abandon any in-flight initialization."""
        attempt = self._attempt
        self._attempt = None
        self._engine = None
        self._failure = None
        self._state = EngineState.UNINITIALIZED
        if attempt is not None and not attempt.done():
            attempt.cancel()
        logger.info("Conversion engine lifecycle reset")

    # ------------------------------------------------------------------
    # Attempt
    # ------------------------------------------------------------------

    async def _run_attempt(self) -> EngineModule:
        current = asyncio.current_task()
        started = time.monotonic()
        try:
            engine = await self._acquire()
            self._create_working_dirs(engine)
        except asyncio.CancelledError:
            # A no-op after reset(); any other canceller leaves FAILED behind
            self._fail(current, _cancelled_error())
            raise
        except X2TError as exc:
            self._fail(current, exc)
            raise
        except Exception as exc:
            error = EngineLoadError(exc)
            self._fail(current, error)
            raise error from exc

        if self._attempt is current:
            self._engine = engine
            self._state = EngineState.READY
            self._attempt = None
        logger.info(
            "Conversion engine initialized in %.2fs", time.monotonic() - started
        )
        return engine

    async def _acquire(self) -> EngineModule:
        """Load the module and wait for its readiness signal, within the timeout."""
        loop = asyncio.get_running_loop()
        ready = asyncio.Event()

        def on_runtime_initialized() -> None:
            loop.call_soon_threadsafe(ready.set)

        async def load_and_wait() -> EngineModule:
            self.load_attempts += 1
            engine = await self._loader.load(on_runtime_initialized)
            await ready.wait()
            return engine

        try:
            return await asyncio.wait_for(load_and_wait(), self._timeout)
        except asyncio.TimeoutError:
            raise EngineInitTimeoutError(self._timeout) from None

    def _create_working_dirs(self, engine: EngineModule) -> None:
        for path in self._working_dirs:
            try:
                engine.fs.mkdir(path)
            except FileExistsError:
                logger.debug("Staging directory %s already exists", path)
            except OSError as exc:
                if exc.errno == errno.EEXIST:
                    logger.debug("Staging directory %s already exists", path)
                    continue
                raise StagingIOError(path, exc) from exc
            except Exception as exc:
                raise StagingIOError(path, exc) from exc

    def _fail(self, attempt: Optional[asyncio.Task], error: BaseException) -> None:
        if self._attempt is not attempt:
            return
        self._attempt = None
        self._engine = None
        self._failure = error
        self._state = EngineState.FAILED
        logger.error("Conversion engine initialization failed: %s", error)


def _cancelled_error() -> EngineNotReadyError:
    return EngineNotReadyError("Conversion engine initialization was cancelled")
