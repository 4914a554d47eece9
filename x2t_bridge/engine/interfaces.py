"""Protocols for the engine, its virtual filesystem, and its loader.

WHY: The conversion engine is an external native component that exposes
loosely typed primitives. Narrow protocols let the lifecycle and the
orchestrator be written (and tested) against any implementation, including
an in-memory fake, without importing the real engine.

RULES:
- VirtualFileSystem.mkdir raises FileExistsError for an existing directory
- read_file returns bytes; write_file accepts bytes or str and replaces
  any existing content
- readdir may include the "." and ".." pseudo-entries
- unlink removes one file; a directory raises IsADirectoryError
- EngineModule.call returns the entrypoint's integer status code (0 = ok)
- EngineLoader.load must install on_runtime_initialized before the module
  can signal readiness; the callback may fire from any thread
"""

from __future__ import annotations

from collections.abc import Callable
from typing import List, Protocol, Union


class VirtualFileSystem(Protocol):
    def mkdir(self, path: str) -> None:
        ...

    def readdir(self, path: str) -> List[str]:
        ...

    def read_file(self, path: str) -> bytes:
        ...

    def write_file(self, path: str, data: Union[bytes, str]) -> None:
        ...

    def unlink(self, path: str) -> None:
        ...


class EngineModule(Protocol):
    @property
    def fs(self) -> VirtualFileSystem:
        ...

    def call(self, entrypoint: str, argument: str) -> int:
        """Invoke a named entrypoint with one string argument.

        This is a blocking call; it runs to completion once issued.
        """


class EngineLoader(Protocol):
    async def load(self, on_runtime_initialized: Callable[[], None]) -> EngineModule:
        """Acquire the engine module and arrange for the readiness callback."""
