"""Loader for engine binding modules installed as Python packages.

WHY: The engine ships as a prebuilt native component wrapped by a Python
binding. Importing it is slow (it maps and compiles the runtime), so the
import happens lazily, once, in a worker thread instead of at program
start or on the event loop.

HOW: ImportEngineLoader imports the configured module with importlib via
asyncio.to_thread, then calls the module's create_module() factory with the
readiness callback. The factory returns the EngineModule; the runtime
signals readiness later by invoking the callback.

RULES:
- The binding module must expose create_module(on_runtime_initialized)
- A missing module or factory raises EngineLoadError
- Each load() call is one module-load side effect; the lifecycle makes
  sure it happens once per successful initialization
"""

from __future__ import annotations

import asyncio
import importlib
import logging
from collections.abc import Callable
from typing import Optional

from x2t_bridge.config import load_engine_module_name
from x2t_bridge.engine.interfaces import EngineModule
from x2t_bridge.errors import EngineLoadError

logger = logging.getLogger(__name__)

FACTORY_NAME = "create_module"


class ImportEngineLoader:
    """EngineLoader backed by an importable binding module."""

    def __init__(self, module_name: Optional[str] = None) -> None:
        self._module_name = module_name

    @property
    def module_name(self) -> str:
        if self._module_name is None:
            try:
                self._module_name = load_engine_module_name()
            except ValueError as exc:
                raise EngineLoadError(exc) from exc
        return self._module_name

    async def load(self, on_runtime_initialized: Callable[[], None]) -> EngineModule:
        name = self.module_name
        logger.info("Loading conversion engine module %s", name)
        try:
            module = await asyncio.to_thread(importlib.import_module, name)
        except ImportError as exc:
            raise EngineLoadError(exc) from exc

        factory = getattr(module, FACTORY_NAME, None)
        if not callable(factory):
            raise EngineLoadError(
                "module {} does not provide {}()".format(name, FACTORY_NAME)
            )
        return factory(on_runtime_initialized)
