"""Shared test fixtures for the x2t_bridge test suite.

WHY: Nearly every test needs an engine, and the real one is a native
component. A scripted fake that honors the same calling convention (read
params.xml, read m_sFileFrom, write m_sFileTo, return a status code) lets
the whole stack run in-process.

HOW: FakeEngine sits on an InMemoryFileSystem and copies the source file
to the destination on each call (so round trips reproduce the input),
optionally dropping media files into the media directory. FakeLoader
hands the engine out, counts load side effects, and controls when (or
whether) readiness is signaled.

RULES:
- Every fixture builds fresh objects; no state is shared between tests
- Lifecycle timeouts in tests are short (0.2s) so timeout tests are fast
- Async code is driven with asyncio.run() inside plain test functions
"""

from __future__ import annotations

import asyncio
import re
from typing import Dict, List, Optional, Tuple

import pytest

from x2t_bridge.blobs import BlobRegistry
from x2t_bridge.config import MEDIA_DIR
from x2t_bridge.engine.lifecycle import EngineLifecycle
from x2t_bridge.engine.memory import InMemoryFileSystem
from x2t_bridge.orchestrator import ConversionOrchestrator

TEST_TIMEOUT_S = 0.2

_FROM = re.compile(r"<m_sFileFrom>(.*?)</m_sFileFrom>")
_TO = re.compile(r"<m_sFileTo>(.*?)</m_sFileTo>")


class FakeEngine:
    """In-process stand-in for the native conversion engine."""

    def __init__(
        self,
        fs: Optional[InMemoryFileSystem] = None,
        status: int = 0,
        media: Optional[Dict[str, bytes]] = None,
    ) -> None:
        self.fs = fs or InMemoryFileSystem()
        self.status = status
        self.media = dict(media or {})
        self.calls: List[Tuple[str, str, str]] = []

    def call(self, entrypoint: str, argument: str) -> int:
        params = self.fs.read_file(argument).decode("utf-8")
        self.calls.append((entrypoint, argument, params))
        if self.status != 0:
            return self.status

        source = _FROM.search(params).group(1)
        destination = _TO.search(params).group(1)
        self.fs.write_file(destination, self.fs.read_file(source))
        for name, data in self.media.items():
            self.fs.write_file("{}/{}".format(MEDIA_DIR, name), data)
        return 0

    @property
    def last_params(self) -> str:
        return self.calls[-1][2]


class FakeLoader:
    """EngineLoader that returns a FakeEngine.

    Args:
        engine: Engine to hand out (a fresh FakeEngine by default).
        unready_attempts: Number of initial loads that never signal
                          readiness (to force timeouts).
        fail_with: Exception raised by every load, if set.
        delay: Seconds to sleep inside load(), to widen race windows.
    """

    def __init__(
        self,
        engine: Optional[FakeEngine] = None,
        *,
        unready_attempts: int = 0,
        fail_with: Optional[BaseException] = None,
        delay: float = 0.0,
    ) -> None:
        self.engine = engine or FakeEngine()
        self.unready_attempts = unready_attempts
        self.fail_with = fail_with
        self.delay = delay
        self.load_count = 0

    async def load(self, on_runtime_initialized):
        self.load_count += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_with is not None:
            raise self.fail_with
        if self.load_count > self.unready_attempts:
            on_runtime_initialized()
        return self.engine


@pytest.fixture
def fake_engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def fake_loader(fake_engine) -> FakeLoader:
    return FakeLoader(fake_engine)


@pytest.fixture
def lifecycle(fake_loader) -> EngineLifecycle:
    return EngineLifecycle(fake_loader, timeout=TEST_TIMEOUT_S)


@pytest.fixture
def blobs() -> BlobRegistry:
    return BlobRegistry()


@pytest.fixture
def orchestrator(lifecycle, blobs) -> ConversionOrchestrator:
    return ConversionOrchestrator(lifecycle, blobs=blobs)
