"""Tests for configuration and the importable engine loader.

WHY: In production the engine arrives through a binding module named in
the environment. A missing variable, a typo in the module name or a
binding without the factory must each fail with EngineLoadError instead of
an arbitrary exception from deep inside importlib.

HOW: Fake binding modules are registered in sys.modules with monkeypatch.
The readiness callback is fired from a worker thread to exercise the
thread-safe hand-off into the event loop.
"""

from __future__ import annotations

import asyncio
import sys
import threading
import types

import pytest

from tests.conftest import FakeEngine
from x2t_bridge.config import INIT_TIMEOUT_S, load_engine_module_name
from x2t_bridge.engine.lifecycle import EngineLifecycle, EngineState
from x2t_bridge.engine.loader import ImportEngineLoader
from x2t_bridge.errors import EngineLoadError

BINDING_NAME = "x2t_test_binding"


def _binding(factory=None) -> types.ModuleType:
    module = types.ModuleType(BINDING_NAME)
    if factory is not None:
        module.create_module = factory
    return module


class TestConfig:

    def test_engine_module_name_from_env(self, monkeypatch):
        monkeypatch.setenv("X2T_ENGINE_MODULE", "  some.binding  ")
        assert load_engine_module_name() == "some.binding"

    def test_missing_engine_module_raises(self, monkeypatch):
        monkeypatch.delenv("X2T_ENGINE_MODULE", raising=False)
        with pytest.raises(ValueError, match="X2T_ENGINE_MODULE"):
            load_engine_module_name()


class TestImportEngineLoader:

    def test_loads_module_and_calls_factory(self, monkeypatch):
        engine = FakeEngine()
        received = []

        def create_module(on_runtime_initialized):
            received.append(on_runtime_initialized)
            return engine

        monkeypatch.setitem(sys.modules, BINDING_NAME, _binding(create_module))
        callback = lambda: None

        result = asyncio.run(ImportEngineLoader(BINDING_NAME).load(callback))

        assert result is engine
        assert received == [callback]

    def test_module_name_from_environment(self, monkeypatch):
        monkeypatch.setenv("X2T_ENGINE_MODULE", BINDING_NAME)
        assert ImportEngineLoader().module_name == BINDING_NAME

    def test_lifecycle_from_config_uses_configured_timeout(self):
        lifecycle = EngineLifecycle.from_config()
        assert lifecycle.timeout == INIT_TIMEOUT_S
        assert lifecycle.state is EngineState.UNINITIALIZED

    def test_unconfigured_module_raises(self, monkeypatch):
        monkeypatch.delenv("X2T_ENGINE_MODULE", raising=False)
        with pytest.raises(EngineLoadError):
            asyncio.run(ImportEngineLoader().load(lambda: None))

    def test_missing_module_raises(self):
        with pytest.raises(EngineLoadError) as exc_info:
            asyncio.run(ImportEngineLoader("x2t_no_such_binding").load(lambda: None))
        assert isinstance(exc_info.value.cause, ImportError)

    def test_module_without_factory_raises(self, monkeypatch):
        monkeypatch.setitem(sys.modules, BINDING_NAME, _binding())
        with pytest.raises(EngineLoadError, match="create_module"):
            asyncio.run(ImportEngineLoader(BINDING_NAME).load(lambda: None))

    def test_readiness_from_another_thread(self, monkeypatch):
        engine = FakeEngine()

        def create_module(on_runtime_initialized):
            threading.Timer(0.02, on_runtime_initialized).start()
            return engine

        monkeypatch.setitem(sys.modules, BINDING_NAME, _binding(create_module))
        lifecycle = EngineLifecycle(ImportEngineLoader(BINDING_NAME), timeout=2.0)

        assert asyncio.run(lifecycle.initialize()) is engine
        assert lifecycle.state is EngineState.READY
        assert engine.fs.exists("/working/media")
